"""Structure model.

This submodule defines the `Structure` model, the root of the structure
graph. A structure exclusively owns its models, chains, groups, and atoms;
entities and bioassemblies refer to chains by global index only.

Exports:
    Structure: Model representing a complete macromolecular structure.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Self

from pydantic import BaseModel, ConfigDict, Field

from .assembly import BioAssembly
from .bond import InterGroupBond
from .chain import Model
from .crystal import CrystalInfo, Header
from .entity import Entity

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .atom import Atom
    from .chain import Chain
    from .group import Group

__all__: list[str] = [
    "Structure",
]


class Structure(BaseModel):
    """Macromolecular structure.

    Holds an ordered sequence of models together with the cross-cutting
    annotations of the structure: entities, bioassemblies, crystallographic
    information, header metadata, and inter-group bonds.

    Chains are indexed globally in traversal order over all models, and
    atoms are indexed globally in traversal order over all models, chains,
    and groups. Those indexes are the ones used by `Entity`, `Transform`,
    and `InterGroupBond`.

    Attributes:
        structure_id (str): Structure identifier (e.g. PDB id).
        models (tuple[Model, ...]): Models in order.
        entities (tuple[Entity, ...]): Entity annotations.
        bio_assemblies (tuple[BioAssembly, ...]): Biological assemblies.
        crystal (CrystalInfo | None): Crystallographic information.
        header (Header): Header metadata.
        inter_group_bonds (tuple[InterGroupBond, ...]): Bonds between atoms
            addressed by global index.

    Examples:
        Structure assembled from a decoded payload.
        ```python
        structure = assemble(ColumnSet.decode(data))
        structure.num_atoms
        ```

    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        validate_by_name=True,
        validate_by_alias=True,
        use_enum_values=False,
    )

    structure_id: Annotated[
        str,
        Field(
            title="structure_id",
            description="Structure identifier.",
            validation_alias="structureId",
            serialization_alias="structureId",
        ),
    ] = ""

    models: Annotated[
        tuple[Model, ...],
        Field(
            title="models",
            description="Models in order.",
        ),
    ] = ()

    entities: Annotated[
        tuple[Entity, ...],
        Field(
            title="entities",
            description="Entity annotations.",
            validation_alias="entityList",
            serialization_alias="entityList",
        ),
    ] = ()

    bio_assemblies: Annotated[
        tuple[BioAssembly, ...],
        Field(
            title="bio_assemblies",
            description="Biological assemblies.",
            validation_alias="bioAssemblyList",
            serialization_alias="bioAssemblyList",
        ),
    ] = ()

    crystal: Annotated[
        CrystalInfo | None,
        Field(
            title="crystal",
            description="Crystallographic information.",
        ),
    ] = None

    header: Annotated[
        Header,
        Field(
            title="header",
            description="Header metadata.",
        ),
    ] = Field(default_factory=Header)

    inter_group_bonds: Annotated[
        tuple[InterGroupBond, ...],
        Field(
            title="inter_group_bonds",
            description="Bonds between atoms addressed by global index.",
            validation_alias="interGroupBonds",
            serialization_alias="interGroupBonds",
        ),
    ] = ()

    @property
    def num_models(self: Self) -> int:
        """Total number of models."""
        return len(self.models)

    @property
    def num_chains(self: Self) -> int:
        """Total number of chains over all models."""
        return sum(model.chain_count for model in self.models)

    @property
    def num_groups(self: Self) -> int:
        """Total number of groups over all models."""
        return sum(1 for _ in self.groups())

    @property
    def num_atoms(self: Self) -> int:
        """Total number of atoms over all models."""
        return sum(group.atom_count for group in self.groups())

    @property
    def num_bonds(self: Self) -> int:
        """Total number of bonds (intra-group and inter-group)."""
        return len(self.inter_group_bonds) + sum(
            group.bond_count for group in self.groups()
        )

    def chains(self: Self) -> Iterator[Chain]:
        """Iterate over chains in global chain index order."""
        for model in self.models:
            yield from model.chains

    def groups(self: Self) -> Iterator[Group]:
        """Iterate over groups in traversal order."""
        for chain in self.chains():
            yield from chain.groups

    def atoms(self: Self) -> Iterator[Atom]:
        """Iterate over atoms in global atom index order."""
        for group in self.groups():
            yield from group.atoms

    @classmethod
    def load(
        cls: type[Self],
        path: Path,
        *,
        encoding: str = "utf-8",
    ) -> Self:
        """Load a `Structure` from a JSON file.

        Args:
            path (Path): Path to the JSON file.
            encoding (str): Text encoding used to read the file.

        Returns:
            out (Self): Parsed and validated `Structure` instance.

        """
        return cls.model_validate_json(
            Path(path).read_text(encoding=encoding),
        )

    def export(self: Self) -> dict[str, object]:
        """Export the `Structure` to a JSON-compatible mapping.

        Returns:
            out (dict[str, object]): Mapping with camelCase field names.

        """
        return self.model_dump(by_alias=True, mode="json")

    def save(
        self: Self,
        path: Path,
        *,
        indent: int | None = None,
        encoding: str = "utf-8",
    ) -> Path:
        """Save the `Structure` to a JSON file.

        Args:
            path (Path): Destination path for the JSON file.
            indent (int | None): JSON indentation level.
            encoding (str): Text encoding used to write the file.

        Returns:
            out (Path): The path that was written.

        """
        file = Path(path)
        file.write_text(
            self.model_dump_json(by_alias=True, indent=indent),
            encoding=encoding,
        )
        return file
