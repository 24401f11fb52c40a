"""Structure validation checks.

This submodule defines the checks the structure assembler runs before a
build is accepted. Each check is a standalone function over plain values
and raises `ValidationError` naming the offending entity (`subject`) and the
broken invariant (`invariant`).

Exports:
    check_count: Declared vs. observed child count of one level.
    check_totals: Declared vs. observed structure totals.
    check_group_bonds: Intra-group bond indexes within the group.
    check_inter_group_bonds: Inter-group bond indexes within the structure.
    check_entities: Entity chain indexes, exclusivity, and type.
    check_bioassemblies: Bioassembly chain indexes, numbering, and names.
    check_unit_cell: Unit cell parameter count.
    check_secondary_structure: DSSP code of a group.
    check_columns: Internal consistency of a `ColumnSet`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .crystal import UNIT_CELL_LENGTH
from .entity import EntityType
from .errors import ValidationError
from .group import SecondaryStructure

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from .columns import ColumnSet

__all__: list[str] = [
    "check_bioassemblies",
    "check_columns",
    "check_count",
    "check_entities",
    "check_group_bonds",
    "check_inter_group_bonds",
    "check_secondary_structure",
    "check_totals",
    "check_unit_cell",
]

_CHILDREN: Mapping[str, str] = {
    "chain-count": "chain",
    "group-count": "group",
    "atom-count": "atom",
    "bond-count": "bond",
}


def check_count(
    subject: str,
    invariant: str,
    declared: int,
    observed: int,
) -> None:
    """Check that a level received exactly the children it declared.

    Args:
        subject (str): The level, e.g. `"model 0"`.
        invariant (str): Invariant name, e.g. `"chain-count"`.
        declared (int): Declared child count.
        observed (int): Number of children added.

    Raises:
        ValidationError: If `observed` differs from `declared`.

    """
    if declared != observed:
        child: str = _CHILDREN.get(invariant, "child")
        msg: str = (
            f"Invalid structure: {subject} declares {declared} {child}(s) "
            f"but {observed} were added (invariant={invariant})."
        )
        raise ValidationError(msg, subject=subject, invariant=invariant)


def check_totals(
    declared: Mapping[str, int],
    observed: Mapping[str, int],
) -> None:
    """Check the structure totals announced at initialization.

    Args:
        declared (Mapping[str, int]): Declared totals by level name
            (`"models"`, `"chains"`, `"groups"`, `"atoms"`, `"bonds"`).
        observed (Mapping[str, int]): Observed totals by level name.

    Raises:
        ValidationError: If any declared total differs from the observed one.

    """
    for level, expected in declared.items():
        found: int = observed[level]
        if expected != found:
            invariant: str = f"total-{level}"
            msg: str = (
                f"Invalid structure: declared total number of {level} does "
                f"not match the data (declared={expected}, observed={found}, "
                f"invariant={invariant})."
            )
            raise ValidationError(
                msg,
                subject="structure",
                invariant=invariant,
            )


def check_group_bonds(
    subject: str,
    atom_count: int,
    bonds: Iterable[tuple[int, int, int]],
) -> None:
    """Check that intra-group bonds stay within their group.

    Args:
        subject (str): The group, e.g. `"group 4 (ALA)"`.
        atom_count (int): Number of atoms in the group.
        bonds (Iterable[tuple[int, int, int]]): Bonds as
            `(atom_index_one, atom_index_two, bond_order)` with local atom
            indexes.

    Raises:
        ValidationError: If a bond index is negative or not below
            `atom_count`.

    """
    for one, two, _ in bonds:
        if not (0 <= one < atom_count and 0 <= two < atom_count):
            msg: str = (
                f"Invalid structure: {subject} has a bond outside the group "
                f"(atom_indices=({one}, {two}), atom_count={atom_count}, "
                "invariant=group-bond-index)."
            )
            raise ValidationError(
                msg,
                subject=subject,
                invariant="group-bond-index",
            )


def check_inter_group_bonds(
    bonds: Iterable[tuple[int, int, int]],
    num_atoms: int,
) -> None:
    """Check that inter-group bonds refer to existing atoms.

    Args:
        bonds (Iterable[tuple[int, int, int]]): Bonds as
            `(atom_index_one, atom_index_two, bond_order)` with global atom
            indexes.
        num_atoms (int): Total number of atoms.

    Raises:
        ValidationError: If a bond index is negative or not below
            `num_atoms`.

    """
    for n, (one, two, _) in enumerate(bonds):
        if not (0 <= one < num_atoms and 0 <= two < num_atoms):
            subject: str = f"inter-group bond {n}"
            msg: str = (
                f"Invalid structure: {subject} refers to a missing atom "
                f"(atom_indices=({one}, {two}), num_atoms={num_atoms}, "
                "invariant=inter-group-bond-index)."
            )
            raise ValidationError(
                msg,
                subject=subject,
                invariant="inter-group-bond-index",
            )


def _check_chain_indices(
    subject: str,
    invariant: str,
    chain_indices: Iterable[int],
    num_chains: int,
) -> None:
    for index in chain_indices:
        if not 0 <= index < num_chains:
            msg: str = (
                f"Invalid structure: {subject} refers to a missing chain "
                f"(chain_index={index}, num_chains={num_chains}, "
                f"invariant={invariant})."
            )
            raise ValidationError(msg, subject=subject, invariant=invariant)


def check_entities(
    chain_indices: Sequence[Sequence[int]],
    types: Sequence[str],
    num_chains: int,
) -> None:
    """Check entity references.

    Every chain index must refer to an existing chain, and no chain may be
    claimed by more than one entity. Chains without an entity are allowed.

    Args:
        chain_indices (Sequence[Sequence[int]]): Chain indexes of each
            entity.
        types (Sequence[str]): Type of each entity.
        num_chains (int): Total number of chains.

    Raises:
        ValidationError: If an index is out of bounds, a chain belongs to
            two entities, or an entity type is unknown.

    """
    owners: dict[int, int] = {}

    for n, (indices, kind) in enumerate(
        zip(chain_indices, types, strict=True),
    ):
        subject: str = f"entity {n}"
        try:
            EntityType(kind)
        except ValueError as e:
            msg: str = (
                f"Invalid structure: {subject} has an unknown type "
                f"(type={kind!r}, invariant=entity-type)."
            )
            raise ValidationError(
                msg,
                subject=subject,
                invariant="entity-type",
            ) from e

        _check_chain_indices(subject, "entity-chain-index", indices, num_chains)

        for index in indices:
            owner: int = owners.setdefault(index, n)
            if owner != n:
                msg: str = (
                    f"Invalid structure: chain {index} is claimed by entity "
                    f"{owner} and entity {n} (invariant=entity-exclusivity)."
                )
                raise ValidationError(
                    msg,
                    subject=subject,
                    invariant="entity-exclusivity",
                )


def check_bioassemblies(
    transforms: Sequence[tuple[int, Sequence[int], str]],
    num_chains: int,
) -> None:
    """Check bioassembly references.

    Args:
        transforms (Sequence[tuple[int, Sequence[int], str]]): Transform
            operations as `(bio_assembly_index, chain_indices, name)`.
        num_chains (int): Total number of chains.

    Raises:
        ValidationError: If a chain index is out of bounds, assembly indexes
            do not run contiguously from 0, or one assembly is given two
            different names.

    """
    names: dict[int, str] = {}

    for index, chain_indices, name in transforms:
        subject: str = f"bioassembly {index}"
        _check_chain_indices(
            subject,
            "bioassembly-chain-index",
            chain_indices,
            num_chains,
        )

        known: str = names.setdefault(index, name)
        if known != name:
            msg: str = (
                f"Invalid structure: {subject} has conflicting names "
                f"({known!r}, {name!r}, invariant=bioassembly-name)."
            )
            raise ValidationError(
                msg,
                subject=subject,
                invariant="bioassembly-name",
            )

    if sorted(names) != list(range(len(names))):
        msg: str = (
            "Invalid structure: bioassembly indexes must run from 0 without "
            f"gaps (indexes={sorted(names)}, invariant=bioassembly-index)."
        )
        raise ValidationError(
            msg,
            subject="bioassemblies",
            invariant="bioassembly-index",
        )


def check_unit_cell(unit_cell: Sequence[float]) -> None:
    """Check that the unit cell holds `(a, b, c, alpha, beta, gamma)`.

    Raises:
        ValidationError: If `unit_cell` does not hold six parameters.

    """
    if len(unit_cell) != UNIT_CELL_LENGTH:
        msg: str = (
            "Invalid structure: unit cell must hold six parameters "
            f"(len(unit_cell)={len(unit_cell)}, invariant=unit-cell-length)."
        )
        raise ValidationError(
            msg,
            subject="crystal",
            invariant="unit-cell-length",
        )


def check_secondary_structure(subject: str, code: int) -> None:
    """Check that a group carries a known DSSP code.

    Raises:
        ValidationError: If `code` is not a `SecondaryStructure` value.

    """
    try:
        SecondaryStructure(code)
    except ValueError as e:
        msg: str = (
            f"Invalid structure: {subject} has an unknown secondary "
            f"structure code (code={code}, invariant=secondary-structure)."
        )
        raise ValidationError(
            msg,
            subject=subject,
            invariant="secondary-structure",
        ) from e


def _check_length(
    name: str,
    column: Sequence[object],
    expected: int,
    *,
    optional: bool = False,
) -> None:
    if optional and len(column) == 0:
        return
    if len(column) != expected:
        msg: str = (
            f"Invalid column set: `{name}` has the wrong length "
            f"(len={len(column)}, expected={expected}, "
            "invariant=column-length)."
        )
        raise ValidationError(msg, subject=name, invariant="column-length")


def check_columns(columns: ColumnSet) -> None:
    """Check that the columns of a `ColumnSet` line up.

    Verifies that per-level counts are non-negative and add up to the length
    of the columns of the level below, that parallel columns share a length
    (optional columns may be empty), that group template indexes are in
    range, and that inter-group bonds come in pairs.

    Args:
        columns (ColumnSet): Decoded columns.

    Raises:
        ValidationError: If the columns are inconsistent.

    """
    for name, counts in (
        ("chainsPerModel", columns.chains_per_model),
        ("groupsPerChain", columns.groups_per_chain),
    ):
        if counts.size and int(counts.min()) < 0:
            msg: str = (
                f"Invalid column set: `{name}` holds a negative count "
                "(invariant=column-length)."
            )
            raise ValidationError(msg, subject=name, invariant="column-length")

    chains: int = int(columns.chains_per_model.sum())
    _check_length("groupsPerChain", columns.groups_per_chain, chains)
    _check_length("chainIdList", columns.chain_ids, chains)
    _check_length("chainNameList", columns.chain_names, chains, optional=True)

    groups: int = int(columns.groups_per_chain.sum())
    _check_length("groupTypeList", columns.group_type_indices, groups)
    _check_length("groupIdList", columns.group_ids, groups)
    _check_length("secStructList", columns.sec_structs, groups, optional=True)
    _check_length("insCodeList", columns.ins_codes, groups, optional=True)
    _check_length(
        "sequenceIndexList",
        columns.sequence_indices,
        groups,
        optional=True,
    )

    indices: np.ndarray = columns.group_type_indices
    if indices.size and (
        int(indices.min()) < 0 or int(indices.max()) >= len(columns.group_types)
    ):
        msg: str = (
            "Invalid column set: `groupTypeList` refers to a missing group "
            f"template (templates={len(columns.group_types)}, "
            "invariant=group-type-index)."
        )
        raise ValidationError(
            msg,
            subject="groupTypeList",
            invariant="group-type-index",
        )

    sizes: np.ndarray = np.asarray(
        [group_type.atom_count for group_type in columns.group_types],
        dtype=np.int64,
    )
    atoms: int = int(sizes[indices].sum()) if indices.size else 0
    _check_length("xCoordList", columns.x_coords, atoms)
    _check_length("yCoordList", columns.y_coords, atoms)
    _check_length("zCoordList", columns.z_coords, atoms)
    _check_length("bFactorList", columns.b_factors, atoms, optional=True)
    _check_length("atomIdList", columns.atom_ids, atoms, optional=True)
    _check_length("altLocList", columns.alt_locs, atoms, optional=True)
    _check_length("occupancyList", columns.occupancies, atoms, optional=True)

    if columns.bond_atoms.size % 2:
        msg: str = (
            "Invalid column set: `bondAtomList` must hold atom index pairs "
            f"(len={columns.bond_atoms.size}, invariant=column-length)."
        )
        raise ValidationError(
            msg,
            subject="bondAtomList",
            invariant="column-length",
        )
    _check_length(
        "bondOrderList",
        columns.bond_orders,
        columns.bond_atoms.size // 2,
        optional=True,
    )
