"""Structure assembler.

This submodule defines the `StructureAssembler`, a state machine that
accepts the ordered calls of the `StructureAdapter` contract (either from a
live call stream or replayed from a `ColumnSet`), enforces the call order,
infers level boundaries from the declared counts, validates every
cross-reference once the stream is complete, and only then forwards the
validated facts to a downstream adapter.

An assembler is a single-writer object: one assembler, one builder, one
thread. Independent structures may be assembled concurrently with separate
assembler instances.

Exports:
    BondPolicy: Enum selecting when bond indexes are validated.
    State: Enum of assembler states.
    StructureAssembler: Validating state machine over the adapter contract.
    assemble: Build a structure from a `ColumnSet`.
    decode_structure: Build a structure from an encoded payload mapping.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Any, NamedTuple, NoReturn, Self

from .adapter import StructureAdapter, StructureBuilder
from .columns import ColumnSet
from .entity import EntityType
from .errors import ProtocolError, ValidationError
from .validator import (
    check_bioassemblies,
    check_columns,
    check_count,
    check_entities,
    check_group_bonds,
    check_inter_group_bonds,
    check_secondary_structure,
    check_totals,
    check_unit_cell,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

__all__: list[str] = [
    "BondPolicy",
    "State",
    "StructureAssembler",
    "assemble",
    "decode_structure",
]

logger = logging.getLogger(__name__)


class State(StrEnum):
    """Assembler state.

    Members:
        UNINITIALIZED: No call received yet (`"uninitialized"`).
        BUILDING: Between `init_structure()` and `finalize_structure()`
            (`"building"`).
        FINALIZED: Validated and forwarded to the builder (`"finalized"`).
        FAILED: Rejected; the partial build was discarded (`"failed"`).

    """

    UNINITIALIZED = "uninitialized"
    BUILDING = "building"
    FINALIZED = "finalized"
    FAILED = "failed"


class BondPolicy(StrEnum):
    """Bond index validation policy.

    Members:
        DEFERRED: Bonds may refer to atoms added later; indexes are checked
            at `finalize_structure()` (`"deferred"`).
        STRICT: Bonds must refer to atoms already added; indexes are checked
            when the bond arrives (`"strict"`).

    """

    DEFERRED = "deferred"
    STRICT = "strict"


class _Model(NamedTuple):
    chain_count: int
    chain_start: int


class _Chain(NamedTuple):
    chain_id: str
    chain_name: str
    group_count: int
    group_start: int


class _Group(NamedTuple):
    group_name: str
    group_number: int
    insertion_code: str
    group_type: str
    atom_count: int
    bond_count: int
    single_letter_code: str
    sequence_index: int
    secondary_structure: int
    atom_start: int
    bond_start: int


class _Atom(NamedTuple):
    atom_name: str
    serial_number: int
    alternative_location_id: str
    x: float
    y: float
    z: float
    occupancy: float
    temperature_factor: float
    element: str
    charge: int


def _spans(starts: Sequence[int], total: int) -> list[int]:
    """Turn the start index of each record into its child count."""
    if not starts:
        return []
    ends: list[int] = [*starts[1:], total]
    return [end - start for start, end in zip(starts, ends, strict=True)]


class StructureAssembler:
    """Validating state machine over the adapter contract.

    The assembler implements every call of `StructureAdapter`. Calls are
    recorded into flat arenas (models, chains, groups, atoms, and bonds),
    where each record stores the index at which its children start, so level
    boundaries are index ranges. A level closes as soon as it received its
    declared number of children; there is no explicit closing call.

    `finalize_structure()` validates the recorded build. When every check
    passes, the facts are replayed in canonical order into `builder` and the
    builder's result is returned. When a check fails, the recorded build is
    discarded, the assembler enters `State.FAILED`, and `ValidationError` is
    raised; the builder receives nothing. A call that breaks the call order
    while building, such as an out-of-order model or a child with no open
    parent, raises `ProtocolError` and discards the build the same way.

    Attributes:
        builder (StructureAdapter): Downstream adapter.
        policy (BondPolicy): Bond index validation policy.

    Examples:
        Live call stream.
        ```python
        assembler = StructureAssembler()
        assembler.init_structure(1, 9, 2, 1, 1, "1ABC")
        assembler.set_model_info(0, 1)
        assembler.set_chain_info("A", "A", 2)
        ...
        structure = assembler.finalize_structure()
        ```

        Replay of decoded columns.
        ```python
        structure = StructureAssembler().replay(ColumnSet.decode(data))
        ```

    """

    def __init__(
        self: Self,
        builder: StructureAdapter | None = None,
        *,
        policy: BondPolicy = BondPolicy.DEFERRED,
    ) -> None:
        self.builder: StructureAdapter = (
            builder if builder is not None else StructureBuilder()
        )
        self.policy: BondPolicy = BondPolicy(policy)
        self._state: State = State.UNINITIALIZED
        self._reset()

    def _reset(self: Self) -> None:
        self._structure_id: str = ""
        self._declared: dict[str, int] = {}
        self._models: list[_Model] = []
        self._chains: list[_Chain] = []
        self._groups: list[_Group] = []
        self._atoms: list[_Atom] = []
        self._group_bonds: list[tuple[int, int, int]] = []
        self._inter_group_bonds: list[tuple[int, int, int]] = []
        self._entities: list[tuple[tuple[int, ...], str, str, str]] = []
        self._transforms: list[
            tuple[int, tuple[int, ...], tuple[float, ...], str]
        ] = []
        self._xtal: (
            tuple[str, tuple[float, ...], tuple[tuple[float, ...], ...]] | None
        ) = None
        self._header: tuple[Any, ...] | None = None

    @property
    def state(self: Self) -> State:
        """Current state."""
        return self._state

    def _require_building(self: Self, call: str) -> None:
        if self._state is State.UNINITIALIZED:
            msg: str = (
                f"Structure not initialized: `{call}()` called before "
                "`init_structure()`."
            )
            raise ProtocolError(msg)
        if self._state is not State.BUILDING:
            msg: str = (
                f"Structure already {self._state}: `{call}()` is no longer "
                "accepted."
            )
            raise ProtocolError(msg)

    def _fail(self: Self) -> None:
        logger.debug("Discarding partial structure %r.", self._structure_id)
        self._reset()
        self._state = State.FAILED

    def _abort(self: Self, msg: str) -> NoReturn:
        """Discard the build in progress and raise `ProtocolError(msg)`."""
        if self._state is State.BUILDING:
            self._fail()
        raise ProtocolError(msg)

    def init_structure(
        self: Self,
        total_num_bonds: int,
        total_num_atoms: int,
        total_num_groups: int,
        total_num_chains: int,
        total_num_models: int,
        structure_id: str,
    ) -> None:
        """Start a structure.

        The totals are capacity hints for the build; model, chain, group,
        and atom totals are checked against the data at finalization.

        Raises:
            ProtocolError: If the assembler was already initialized. A build
                in progress is discarded.

        """
        if self._state is not State.UNINITIALIZED:
            msg: str = (
                "Structure already initialized: `init_structure()` must be "
                f"the first and only initialization call (state={self._state})."
            )
            self._abort(msg)

        self._structure_id = structure_id
        self._declared = {
            "models": total_num_models,
            "chains": total_num_chains,
            "groups": total_num_groups,
            "atoms": total_num_atoms,
            "bonds": total_num_bonds,
        }
        self._state = State.BUILDING
        logger.debug(
            "Initialized structure %r (models=%d, chains=%d, groups=%d, "
            "atoms=%d, bonds=%d).",
            structure_id,
            total_num_models,
            total_num_chains,
            total_num_groups,
            total_num_atoms,
            total_num_bonds,
        )

    def set_model_info(self: Self, model_id: int, chain_count: int) -> None:
        """Start model `model_id` holding `chain_count` chains.

        Raises:
            ProtocolError: If not building, or `model_id` is not the next
                model index; in the latter case the build is discarded.

        """
        self._require_building("set_model_info")
        if model_id != len(self._models):
            msg: str = (
                "Out-of-order model: models must be added in order "
                f"(model_id={model_id}, expected={len(self._models)})."
            )
            self._abort(msg)

        self._models.append(_Model(chain_count, len(self._chains)))
        if chain_count == 0:
            logger.debug("Closed model %d (empty).", model_id)

    def set_chain_info(
        self: Self,
        chain_id: str,
        chain_name: str,
        group_count: int,
    ) -> None:
        """Add a chain to the current model.

        Raises:
            ProtocolError: If not building or no model was started.

        """
        self._require_building("set_chain_info")
        if not self._models:
            msg: str = "Chain without model: call `set_model_info()` first."
            self._abort(msg)

        model: _Model = self._models[-1]
        observed: int = len(self._chains) - model.chain_start
        if observed >= model.chain_count:
            logger.warning(
                "Model %d is complete (%d chains); chain %r exceeds the "
                "declared count.",
                len(self._models) - 1,
                model.chain_count,
                chain_id,
            )

        self._chains.append(
            _Chain(chain_id, chain_name, group_count, len(self._groups)),
        )
        if observed + 1 == model.chain_count:
            logger.debug("Closed model %d.", len(self._models) - 1)

    def set_group_info(
        self: Self,
        group_name: str,
        group_number: int,
        insertion_code: str,
        group_type: str,
        atom_count: int,
        bond_count: int,
        single_letter_code: str,
        sequence_index: int,
        secondary_structure_type: int,
    ) -> None:
        """Add a group to the current chain.

        Raises:
            ProtocolError: If not building or no chain was started.

        """
        self._require_building("set_group_info")
        if not self._chains:
            msg: str = "Group without chain: call `set_chain_info()` first."
            self._abort(msg)

        chain: _Chain = self._chains[-1]
        observed: int = len(self._groups) - chain.group_start
        if observed >= chain.group_count:
            logger.warning(
                "Chain %d is complete (%d groups); group %r exceeds the "
                "declared count.",
                len(self._chains) - 1,
                chain.group_count,
                group_name,
            )

        self._groups.append(
            _Group(
                group_name,
                group_number,
                insertion_code,
                group_type,
                atom_count,
                bond_count,
                single_letter_code,
                sequence_index,
                secondary_structure_type,
                len(self._atoms),
                len(self._group_bonds),
            ),
        )
        if observed + 1 == chain.group_count:
            logger.debug("Closed chain %d.", len(self._chains) - 1)

    def set_atom_info(
        self: Self,
        atom_name: str,
        serial_number: int,
        alternative_location_id: str,
        x: float,
        y: float,
        z: float,
        occupancy: float,
        temperature_factor: float,
        element: str,
        charge: int,
    ) -> None:
        """Add an atom to the current group.

        Raises:
            ProtocolError: If not building or no group was started.

        """
        self._require_building("set_atom_info")
        if not self._groups:
            msg: str = "Atom without group: call `set_group_info()` first."
            self._abort(msg)

        group: _Group = self._groups[-1]
        observed: int = len(self._atoms) - group.atom_start
        if observed >= group.atom_count:
            logger.warning(
                "Group %d is complete (%d atoms); atom %r exceeds the "
                "declared count.",
                len(self._groups) - 1,
                group.atom_count,
                atom_name,
            )

        self._atoms.append(
            _Atom(
                atom_name,
                serial_number,
                alternative_location_id,
                x,
                y,
                z,
                occupancy,
                temperature_factor,
                element,
                charge,
            ),
        )
        if observed + 1 == group.atom_count:
            logger.debug("Closed group %d.", len(self._groups) - 1)

    def set_group_bond(
        self: Self,
        atom_index_one: int,
        atom_index_two: int,
        bond_order: int,
    ) -> None:
        """Add a bond between two atoms of the current group.

        Indexes are local to the group. Under `BondPolicy.STRICT` both atoms
        must already have been added.

        Raises:
            ProtocolError: If not building or no group was started.
            ValidationError: Under `BondPolicy.STRICT`, if an index does not
                refer to an atom already added to the group.

        """
        self._require_building("set_group_bond")
        if not self._groups:
            msg: str = "Bond without group: call `set_group_info()` first."
            self._abort(msg)

        bond: tuple[int, int, int] = (atom_index_one, atom_index_two, bond_order)
        if self.policy is BondPolicy.STRICT:
            group: _Group = self._groups[-1]
            try:
                check_group_bonds(
                    f"group {len(self._groups) - 1} ({group.group_name})",
                    len(self._atoms) - group.atom_start,
                    (bond,),
                )
            except ValidationError:
                self._fail()
                raise

        self._group_bonds.append(bond)

    def set_inter_group_bond(
        self: Self,
        atom_index_one: int,
        atom_index_two: int,
        bond_order: int,
    ) -> None:
        """Add a bond between two atoms addressed by global index.

        Under `BondPolicy.STRICT` both atoms must already have been added.

        Raises:
            ProtocolError: If not building.
            ValidationError: Under `BondPolicy.STRICT`, if an index does not
                refer to an atom already added.

        """
        self._require_building("set_inter_group_bond")

        bond: tuple[int, int, int] = (atom_index_one, atom_index_two, bond_order)
        if self.policy is BondPolicy.STRICT:
            try:
                check_inter_group_bonds((bond,), len(self._atoms))
            except ValidationError:
                self._fail()
                raise

        self._inter_group_bonds.append(bond)

    def set_entity_info(
        self: Self,
        chain_indices: Sequence[int],
        sequence: str,
        description: str,
        type: str,  # noqa: A002
    ) -> None:
        """Annotate chains with an entity; resolved at finalization."""
        self._require_building("set_entity_info")
        self._entities.append(
            (
                tuple(int(index) for index in chain_indices),
                sequence,
                description,
                str(type),
            ),
        )

    def set_bio_assembly_trans(
        self: Self,
        bio_assembly_index: int,
        chain_indices: Sequence[int],
        transform: Sequence[float],
        name: str,
    ) -> None:
        """Add a bioassembly transform; resolved at finalization."""
        self._require_building("set_bio_assembly_trans")
        self._transforms.append(
            (
                bio_assembly_index,
                tuple(int(index) for index in chain_indices),
                tuple(float(value) for value in transform),
                name,
            ),
        )

    def set_xtal_info(
        self: Self,
        space_group: str,
        unit_cell: Sequence[float],
        ncs_operators: Sequence[Sequence[float]],
    ) -> None:
        """Set crystallographic information; resolved at finalization."""
        self._require_building("set_xtal_info")
        self._xtal = (
            space_group,
            tuple(float(value) for value in unit_cell),
            tuple(
                tuple(float(value) for value in operator)
                for operator in ncs_operators
            ),
        )

    def set_header_info(
        self: Self,
        r_free: float | None,
        r_work: float | None,
        resolution: float | None,
        title: str | None,
        deposition_date: str | None,
        release_date: str | None,
        experimental_methods: Sequence[str],
    ) -> None:
        """Set header metadata."""
        self._require_building("set_header_info")
        self._header = (
            r_free,
            r_work,
            resolution,
            title,
            deposition_date,
            release_date,
            tuple(experimental_methods),
        )

    def _validate(self: Self) -> None:
        chain_counts: list[int] = _spans(
            [model.chain_start for model in self._models],
            len(self._chains),
        )
        for n, (model, observed) in enumerate(
            zip(self._models, chain_counts, strict=True),
        ):
            check_count(f"model {n}", "chain-count", model.chain_count, observed)

        group_counts: list[int] = _spans(
            [chain.group_start for chain in self._chains],
            len(self._groups),
        )
        for n, (chain, observed) in enumerate(
            zip(self._chains, group_counts, strict=True),
        ):
            check_count(
                f"chain {n} ({chain.chain_id})",
                "group-count",
                chain.group_count,
                observed,
            )

        atom_counts: list[int] = _spans(
            [group.atom_start for group in self._groups],
            len(self._atoms),
        )
        bond_counts: list[int] = _spans(
            [group.bond_start for group in self._groups],
            len(self._group_bonds),
        )
        for n, group in enumerate(self._groups):
            subject: str = f"group {n} ({group.group_name})"
            check_count(subject, "atom-count", group.atom_count, atom_counts[n])
            check_count(subject, "bond-count", group.bond_count, bond_counts[n])
            check_secondary_structure(subject, group.secondary_structure)
            check_group_bonds(
                subject,
                group.atom_count,
                self._group_bonds[
                    group.bond_start : group.bond_start + group.bond_count
                ],
            )

        declared: dict[str, int] = dict(self._declared)
        total_bonds: int = declared.pop("bonds")
        check_totals(
            declared,
            {
                "models": len(self._models),
                "chains": len(self._chains),
                "groups": len(self._groups),
                "atoms": len(self._atoms),
            },
        )
        observed_bonds: int = len(self._group_bonds) + len(
            self._inter_group_bonds,
        )
        if total_bonds != observed_bonds:
            logger.debug(
                "Declared bond total differs from the data (declared=%d, "
                "observed=%d).",
                total_bonds,
                observed_bonds,
            )

        check_inter_group_bonds(self._inter_group_bonds, len(self._atoms))
        check_entities(
            [entity[0] for entity in self._entities],
            [entity[3] for entity in self._entities],
            len(self._chains),
        )
        check_bioassemblies(
            [
                (index, chain_indices, name)
                for index, chain_indices, _, name in self._transforms
            ],
            len(self._chains),
        )
        if self._xtal is not None:
            check_unit_cell(self._xtal[1])

    def _emit(self: Self) -> Any:
        builder: StructureAdapter = self.builder
        builder.init_structure(
            len(self._group_bonds) + len(self._inter_group_bonds),
            len(self._atoms),
            len(self._groups),
            len(self._chains),
            len(self._models),
            self._structure_id,
        )

        if self._xtal is not None:
            builder.set_xtal_info(*self._xtal)
        if self._header is not None:
            builder.set_header_info(*self._header)
        for index, chain_indices, matrix, name in sorted(
            self._transforms,
            key=lambda transform: transform[0],
        ):
            builder.set_bio_assembly_trans(index, chain_indices, matrix, name)
        for chain_indices, sequence, description, kind in self._entities:
            builder.set_entity_info(
                chain_indices,
                sequence,
                description,
                EntityType(kind).value,
            )

        for n, model in enumerate(self._models):
            builder.set_model_info(n, model.chain_count)
            for chain in self._chains[
                model.chain_start : model.chain_start + model.chain_count
            ]:
                builder.set_chain_info(
                    chain.chain_id,
                    chain.chain_name,
                    chain.group_count,
                )
                for group in self._groups[
                    chain.group_start : chain.group_start + chain.group_count
                ]:
                    builder.set_group_info(*group[:9])
                    for atom in self._atoms[
                        group.atom_start : group.atom_start + group.atom_count
                    ]:
                        builder.set_atom_info(*atom)
                    for bond in self._group_bonds[
                        group.bond_start : group.bond_start + group.bond_count
                    ]:
                        builder.set_group_bond(*bond)

        for bond in self._inter_group_bonds:
            builder.set_inter_group_bond(*bond)

        return builder.finalize_structure()

    def finalize_structure(self: Self) -> Any:
        """Validate the build and forward it to the builder.

        Returns:
            out (Any): The result of the builder's `finalize_structure()`
                (a `Structure` for `StructureBuilder`).

        Raises:
            ProtocolError: If not building.
            ValidationError: If counts or cross-references do not reconcile;
                the partial build is discarded.

        """
        self._require_building("finalize_structure")
        try:
            self._validate()
        except ValidationError as e:
            logger.debug("Structure %r failed validation: %s", self._structure_id, e)
            self._fail()
            raise

        try:
            out: Any = self._emit()
        except Exception:
            self._fail()
            raise

        logger.info(
            "Assembled structure %r (models=%d, chains=%d, groups=%d, "
            "atoms=%d).",
            self._structure_id,
            len(self._models),
            len(self._chains),
            len(self._groups),
            len(self._atoms),
        )
        self._state = State.FINALIZED
        return out

    def replay(self: Self, columns: ColumnSet) -> Any:  # noqa: C901
        """Drive the assembler from decoded columns and finalize.

        Calls are issued in canonical order. Absent optional columns fall
        back to defaults: temperature factor `0.0`, occupancy `1.0`, serial
        numbers counting from 1, blank alternate location and insertion
        codes, sequence index and secondary structure `-1`, bond order `1`,
        and chain names equal to chain identifiers.

        Args:
            columns (ColumnSet): Decoded columns.

        Returns:
            out (Any): The result of the builder's `finalize_structure()`.

        Raises:
            ProtocolError: If the assembler was already used.
            ValidationError: If the columns are inconsistent or the build
                fails validation.

        """
        check_columns(columns)

        atoms: int = columns.atom_count
        groups: int = columns.group_count
        x: list[float] = columns.x_coords.tolist()
        y: list[float] = columns.y_coords.tolist()
        z: list[float] = columns.z_coords.tolist()
        b_factors: list[float] = columns.b_factors.tolist() or [0.0] * atoms
        occupancies: list[float] = (
            columns.occupancies.tolist() or [1.0] * atoms
        )
        atom_ids: list[int] = columns.atom_ids.tolist() or list(
            range(1, atoms + 1),
        )
        alt_locs: Sequence[str] = columns.alt_locs or ("",) * atoms
        group_ids: list[int] = columns.group_ids.tolist()
        group_type_indices: list[int] = columns.group_type_indices.tolist()
        sec_structs: list[int] = columns.sec_structs.tolist() or [-1] * groups
        ins_codes: Sequence[str] = columns.ins_codes or ("",) * groups
        sequence_indices: list[int] = (
            columns.sequence_indices.tolist() or [-1] * groups
        )
        chain_names: Sequence[str] = columns.chain_names or columns.chain_ids
        groups_per_chain: list[int] = columns.groups_per_chain.tolist()
        bond_atoms: list[int] = columns.bond_atoms.tolist()
        bond_orders: list[int] = columns.bond_orders.tolist() or [1] * (
            len(bond_atoms) // 2
        )

        self.init_structure(
            columns.num_bonds,
            columns.num_atoms,
            columns.num_groups,
            columns.num_chains,
            columns.num_models,
            columns.structure_id,
        )

        if columns.unit_cell is not None:
            self.set_xtal_info(
                columns.space_group or "",
                columns.unit_cell,
                columns.ncs_operators,
            )
        self.set_header_info(
            columns.r_free,
            columns.r_work,
            columns.resolution,
            columns.title,
            columns.deposition_date,
            columns.release_date,
            columns.experimental_methods,
        )
        for index, assembly in enumerate(columns.bio_assemblies):
            for transform in assembly.transforms:
                self.set_bio_assembly_trans(
                    index,
                    transform.chain_indices,
                    transform.matrix,
                    assembly.name,
                )
        for entity in columns.entities:
            self.set_entity_info(
                entity.chain_indices,
                entity.sequence,
                entity.description,
                entity.type.value,
            )

        chain: int = 0
        group: int = 0
        atom: int = 0
        for model, chain_count in enumerate(columns.chains_per_model.tolist()):
            self.set_model_info(model, chain_count)
            for _ in range(chain_count):
                self.set_chain_info(
                    columns.chain_ids[chain],
                    chain_names[chain],
                    groups_per_chain[chain],
                )
                for _ in range(groups_per_chain[chain]):
                    template = columns.group_types[group_type_indices[group]]
                    self.set_group_info(
                        template.group_name,
                        group_ids[group],
                        ins_codes[group],
                        template.chem_comp_type,
                        template.atom_count,
                        template.bond_count,
                        template.single_letter_code,
                        sequence_indices[group],
                        sec_structs[group],
                    )
                    for name, element, charge in zip(
                        template.atom_names,
                        template.elements,
                        template.charges,
                        strict=True,
                    ):
                        self.set_atom_info(
                            name,
                            atom_ids[atom],
                            alt_locs[atom],
                            x[atom],
                            y[atom],
                            z[atom],
                            occupancies[atom],
                            b_factors[atom],
                            element,
                            charge,
                        )
                        atom += 1
                    for k, order in enumerate(template.bond_orders):
                        self.set_group_bond(
                            template.bond_atoms[2 * k],
                            template.bond_atoms[2 * k + 1],
                            order,
                        )
                    group += 1
                chain += 1

        for k, order in enumerate(bond_orders):
            self.set_inter_group_bond(
                bond_atoms[2 * k],
                bond_atoms[2 * k + 1],
                order,
            )

        return self.finalize_structure()


def assemble(
    columns: ColumnSet,
    builder: StructureAdapter | None = None,
    *,
    policy: BondPolicy = BondPolicy.DEFERRED,
) -> Any:
    """Build a structure from decoded columns.

    Args:
        columns (ColumnSet): Decoded columns.
        builder (StructureAdapter | None): Downstream adapter; defaults to a
            new `StructureBuilder`.
        policy (BondPolicy): Bond index validation policy.

    Returns:
        out (Any): The result of the builder's `finalize_structure()` (a
            `Structure` for the default builder).

    Raises:
        ValidationError: If the columns fail validation.

    """
    return StructureAssembler(builder, policy=policy).replay(columns)


def decode_structure(
    data: Mapping[str, Any],
    builder: StructureAdapter | None = None,
    *,
    policy: BondPolicy = BondPolicy.DEFERRED,
) -> Any:
    """Build a structure from an encoded payload mapping.

    Args:
        data (Mapping[str, Any]): Payload mapping with camelCase field names
            and binary columns.
        builder (StructureAdapter | None): Downstream adapter; defaults to a
            new `StructureBuilder`.
        policy (BondPolicy): Bond index validation policy.

    Returns:
        out (Any): The result of the builder's `finalize_structure()`.

    Raises:
        CodecError: If a binary column is malformed.
        ValidationError: If the decoded columns fail validation.

    """
    return assemble(ColumnSet.decode(data), builder, policy=policy)
