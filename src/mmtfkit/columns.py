"""Decoded column set.

This submodule defines the `ColumnSet` model, the read-only set of parallel
columns (one per structural field) that makes up one structure payload. A
column set sits between the binary codec and the structure assembler: it is
produced by decoding a payload mapping and consumed by
`StructureAssembler.replay()`, and it is produced by `StructureEncoder` and
encoded back into a payload mapping.

The outer container around the payload mapping (message-pack framing,
compression, transport) is not handled here.

Exports:
    MMTF_VERSION: Highest supported payload format version.
    ColumnSet: Model representing the decoded columns of one structure.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Annotated, Any, Self

import numpy as np
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

from .assembly import BioAssembly
from .codec import decode_array, encode_array
from .config import DEFAULT_CODECS, CodecConfig
from .entity import Entity
from .errors import CodecError
from .group import GroupType

__all__: list[str] = [
    "MMTF_VERSION",
    "ColumnSet",
]

logger = logging.getLogger(__name__)

MMTF_VERSION: tuple[int, int] = (1, 0)

_DTYPES: Mapping[str, type[np.generic]] = {
    "x_coords": np.float32,
    "y_coords": np.float32,
    "z_coords": np.float32,
    "b_factors": np.float32,
    "occupancies": np.float32,
    "atom_ids": np.int32,
    "group_ids": np.int32,
    "group_type_indices": np.int32,
    "sec_structs": np.int8,
    "sequence_indices": np.int32,
    "groups_per_chain": np.int32,
    "chains_per_model": np.int32,
    "bond_atoms": np.int32,
    "bond_orders": np.int8,
}


def _column(alias: str, description: str) -> Any:
    return Field(
        title=alias,
        description=description,
        validation_alias=alias,
        serialization_alias=alias,
        validate_default=True,
    )


class ColumnSet(BaseModel):
    """Decoded columns of one structure payload.

    Per-atom columns are parallel and indexed by global atom index, per-group
    columns by global group index, and per-chain columns by global chain
    index. Level boundaries are implicit: `chains_per_model`,
    `groups_per_chain`, and the atom count of each group's template split
    the flat columns into models, chains, and groups.

    Optional columns (`b_factors`, `occupancies`, `atom_ids`, `alt_locs`,
    `sec_structs`, `ins_codes`, `sequence_indices`, `chain_names`,
    `bond_atoms`, `bond_orders`) may be empty.

    Numeric columns are stored as read-only `numpy` arrays.

    Examples:
        Decode a payload mapping.
        ```python
        columns = ColumnSet.decode(data)
        columns.atom_count
        ```

    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        arbitrary_types_allowed=True,
        validate_by_name=True,
        validate_by_alias=True,
    )

    mmtf_version: Annotated[
        str | None, _column("mmtfVersion", "Payload format version.")
    ] = None
    mmtf_producer: Annotated[
        str | None, _column("mmtfProducer", "Payload producer.")
    ] = None

    structure_id: Annotated[
        str, _column("structureId", "Structure identifier.")
    ] = ""
    num_bonds: Annotated[int, _column("numBonds", "Declared bonds.")] = 0
    num_atoms: Annotated[int, _column("numAtoms", "Declared atoms.")] = 0
    num_groups: Annotated[int, _column("numGroups", "Declared groups.")] = 0
    num_chains: Annotated[int, _column("numChains", "Declared chains.")] = 0
    num_models: Annotated[int, _column("numModels", "Declared models.")] = 0

    title: Annotated[str | None, _column("title", "Title.")] = None
    deposition_date: Annotated[
        str | None, _column("depositionDate", "Deposition date.")
    ] = None
    release_date: Annotated[
        str | None, _column("releaseDate", "Release date.")
    ] = None
    experimental_methods: Annotated[
        tuple[str, ...],
        _column("experimentalMethods", "Experimental methods."),
    ] = ()
    resolution: Annotated[
        float | None, _column("resolution", "Resolution.")
    ] = None
    r_free: Annotated[float | None, _column("rFree", "R-free.")] = None
    r_work: Annotated[float | None, _column("rWork", "R-work.")] = None

    space_group: Annotated[
        str | None, _column("spaceGroup", "Space group name.")
    ] = None
    unit_cell: Annotated[
        tuple[float, ...] | None, _column("unitCell", "Unit cell.")
    ] = None
    ncs_operators: Annotated[
        tuple[tuple[float, ...], ...],
        _column("ncsOperatorList", "NCS operators."),
    ] = ()

    bio_assemblies: Annotated[
        tuple[BioAssembly, ...],
        _column("bioAssemblyList", "Biological assemblies."),
    ] = ()
    entities: Annotated[
        tuple[Entity, ...], _column("entityList", "Entities.")
    ] = ()
    group_types: Annotated[
        tuple[GroupType, ...], _column("groupList", "Group templates.")
    ] = ()

    x_coords: Annotated[np.ndarray, _column("xCoordList", "x.")] = ()
    y_coords: Annotated[np.ndarray, _column("yCoordList", "y.")] = ()
    z_coords: Annotated[np.ndarray, _column("zCoordList", "z.")] = ()
    b_factors: Annotated[
        np.ndarray, _column("bFactorList", "Temperature factors.")
    ] = ()
    atom_ids: Annotated[
        np.ndarray, _column("atomIdList", "Atom serials.")
    ] = ()
    alt_locs: Annotated[
        tuple[str, ...], _column("altLocList", "Alternate locations.")
    ] = ()
    occupancies: Annotated[
        np.ndarray, _column("occupancyList", "Occupancies.")
    ] = ()

    group_ids: Annotated[
        np.ndarray, _column("groupIdList", "Group numbers.")
    ] = ()
    group_type_indices: Annotated[
        np.ndarray, _column("groupTypeList", "Group template indexes.")
    ] = ()
    sec_structs: Annotated[
        np.ndarray, _column("secStructList", "DSSP codes.")
    ] = ()
    ins_codes: Annotated[
        tuple[str, ...], _column("insCodeList", "Insertion codes.")
    ] = ()
    sequence_indices: Annotated[
        np.ndarray, _column("sequenceIndexList", "Sequence indexes.")
    ] = ()

    chain_ids: Annotated[
        tuple[str, ...], _column("chainIdList", "Chain identifiers.")
    ] = ()
    chain_names: Annotated[
        tuple[str, ...], _column("chainNameList", "Chain names.")
    ] = ()
    groups_per_chain: Annotated[
        np.ndarray, _column("groupsPerChain", "Groups per chain.")
    ] = ()
    chains_per_model: Annotated[
        np.ndarray, _column("chainsPerModel", "Chains per model.")
    ] = ()

    bond_atoms: Annotated[
        np.ndarray, _column("bondAtomList", "Inter-group bond atom pairs.")
    ] = ()
    bond_orders: Annotated[
        np.ndarray, _column("bondOrderList", "Inter-group bond orders.")
    ] = ()

    @field_validator(*_DTYPES, mode="before")
    @classmethod
    def __coerce_array(
        cls: type[Self],
        value: Any,
        info: ValidationInfo,
    ) -> Any:
        """Coerce a numeric column into a read-only array of its dtype."""
        if value is None:
            value = ()
        out: np.ndarray = np.array(value, dtype=_DTYPES[info.field_name])
        out.flags.writeable = False
        return out

    @field_validator(
        "alt_locs",
        "ins_codes",
        "chain_ids",
        "chain_names",
        "experimental_methods",
        mode="before",
    )
    @classmethod
    def __coerce_strings(cls: type[Self], value: Any) -> Any:
        """Accept `None` for an absent string column."""
        return () if value is None else value

    @field_validator("mmtf_version", mode="after")
    @classmethod
    def __check_version(cls: type[Self], value: str | None) -> str | None:
        if value is None:
            return value
        major: str = value.split(".")[0]
        if not major.isdigit() or int(major) > MMTF_VERSION[0]:
            msg: str = (
                f"Invalid payload: unsupported format version (version={value}, "
                f"supported={MMTF_VERSION[0]}.x)."
            )
            raise ValueError(msg)
        return value

    @property
    def atom_count(self: Self) -> int:
        """Number of atoms in the per-atom columns."""
        return len(self.x_coords)

    @property
    def group_count(self: Self) -> int:
        """Number of groups in the per-group columns."""
        return len(self.group_type_indices)

    @property
    def chain_count(self: Self) -> int:
        """Number of chains in the per-chain columns."""
        return len(self.groups_per_chain)

    @property
    def model_count(self: Self) -> int:
        """Number of models."""
        return len(self.chains_per_model)

    def __eq__(self: Self, other: object) -> bool:
        if not isinstance(other, ColumnSet):
            return NotImplemented
        for name in type(self).model_fields:
            mine: Any = getattr(self, name)
            theirs: Any = getattr(other, name)
            if isinstance(mine, np.ndarray):
                if not np.array_equal(mine, theirs):
                    return False
            elif mine != theirs:
                return False
        return True

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def decode(cls: type[Self], data: Mapping[str, Any]) -> Self:
        """Decode a payload mapping into a column set.

        Binary columns (see `DEFAULT_CODECS`) given as bytes are decoded with
        `decode_array()`; already decoded sequences and all other fields are
        taken as they are.

        Args:
            data (Mapping[str, Any]): Payload mapping with camelCase field
                names.

        Returns:
            out (Self): Decoded column set.

        Raises:
            CodecError: If a binary column is malformed, a field is unknown
                or has the wrong shape, or the format version is newer than
                `MMTF_VERSION`.

        """
        fields: dict[str, Any] = {}
        for name, value in data.items():
            if name in DEFAULT_CODECS and isinstance(
                value,
                (bytes, bytearray, memoryview),
            ):
                logger.debug("Decoding column %s.", name)
                fields[name] = decode_array(value)
            else:
                fields[name] = value

        try:
            return cls.model_validate(fields)
        except PydanticValidationError as e:
            first: dict[str, Any] = e.errors()[0]
            location: str = ".".join(str(part) for part in first["loc"])
            msg: str = (
                f"Invalid payload: {e.error_count()} field(s) do not validate "
                f"(first={location}: {first['msg']})."
            )
            raise CodecError(msg) from e

    def encode(
        self: Self,
        config: CodecConfig | None = None,
    ) -> dict[str, Any]:
        """Encode the column set into a payload mapping.

        Args:
            config (CodecConfig | None): Per-column encoding; defaults to
                `DEFAULT_CODECS`.

        Returns:
            out (dict[str, Any]): Payload mapping with camelCase field names;
                binary columns are encoded with `encode_array()` and absent
                optional metadata is omitted.

        Raises:
            CodecError: If a column cannot be encoded with its strategy.

        """
        config = config if config is not None else CodecConfig()
        binary: dict[str, str] = {
            field.serialization_alias: name
            for name, field in type(self).model_fields.items()
            if field.serialization_alias in DEFAULT_CODECS
        }

        out: dict[str, Any] = self.model_dump(
            by_alias=True,
            exclude=set(binary.values()),
            exclude_none=True,
            mode="json",
        )
        for alias, name in binary.items():
            codec = config.codec(alias)
            out[alias] = encode_array(
                getattr(self, name),
                codec.strategy,
                codec.parameter,
            )
        return out
