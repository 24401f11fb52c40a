"""Structure encoder.

This submodule defines the `StructureEncoder`, the inverse of the structure
assembler: it flattens a `Structure` into a `ColumnSet`, deduplicating group
templates and turning the nested models, chains, groups, and atoms into
parallel columns.

Exports:
    StructureEncoder: Flattens a `Structure` into columns.
    encode_structure: Encode a `Structure` into a payload mapping.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Self

from .columns import MMTF_VERSION, ColumnSet
from .config import CodecConfig

if TYPE_CHECKING:
    from .group import GroupType
    from .structure import Structure

__all__: list[str] = [
    "StructureEncoder",
    "encode_structure",
]

logger = logging.getLogger(__name__)

_PRODUCER: str = "mmtfkit"


class StructureEncoder:
    """Flattens a `Structure` into a `ColumnSet`.

    Group templates are deduplicated by content in first-seen order, so the
    template list and the per-group template indexes are deterministic for a
    given structure. The input structure is never modified.

    Attributes:
        config (CodecConfig): Per-column binary encoding used by
            `encode_payload()`.

    Examples:
        ```python
        columns = StructureEncoder().encode(structure)
        assert assemble(columns) == structure
        ```

    """

    def __init__(self: Self, config: CodecConfig | None = None) -> None:
        self.config: CodecConfig = (
            config if config is not None else CodecConfig()
        )

    def encode(self: Self, structure: Structure) -> ColumnSet:
        """Flatten `structure` into columns.

        Args:
            structure (Structure): Structure to encode.

        Returns:
            out (ColumnSet): Columns describing `structure`.

        """
        templates: dict[GroupType, int] = {}
        atoms: dict[str, list[Any]] = {
            "x_coords": [],
            "y_coords": [],
            "z_coords": [],
            "b_factors": [],
            "occupancies": [],
            "atom_ids": [],
            "alt_locs": [],
        }
        groups: dict[str, list[Any]] = {
            "group_ids": [],
            "group_type_indices": [],
            "sec_structs": [],
            "ins_codes": [],
            "sequence_indices": [],
        }
        chains: dict[str, list[Any]] = {
            "chain_ids": [],
            "chain_names": [],
            "groups_per_chain": [],
        }

        for chain in structure.chains():
            chains["chain_ids"].append(chain.chain_id)
            chains["chain_names"].append(chain.chain_name)
            chains["groups_per_chain"].append(chain.group_count)

            for group in chain.groups:
                template: GroupType = group.template()
                groups["group_type_indices"].append(
                    templates.setdefault(template, len(templates)),
                )
                groups["group_ids"].append(group.group_number)
                groups["sec_structs"].append(int(group.secondary_structure))
                groups["ins_codes"].append(group.insertion_code)
                groups["sequence_indices"].append(group.sequence_index)

                for atom in group.atoms:
                    atoms["x_coords"].append(atom.x)
                    atoms["y_coords"].append(atom.y)
                    atoms["z_coords"].append(atom.z)
                    atoms["b_factors"].append(atom.temperature_factor)
                    atoms["occupancies"].append(atom.occupancy)
                    atoms["atom_ids"].append(atom.serial_number)
                    atoms["alt_locs"].append(atom.alternative_location_id)

        crystal = structure.crystal
        header = structure.header
        out: ColumnSet = ColumnSet(
            mmtf_version=".".join(map(str, MMTF_VERSION)),
            mmtf_producer=_PRODUCER,
            structure_id=structure.structure_id,
            num_bonds=structure.num_bonds,
            num_atoms=len(atoms["x_coords"]),
            num_groups=len(groups["group_ids"]),
            num_chains=len(chains["chain_ids"]),
            num_models=structure.num_models,
            title=header.title,
            deposition_date=header.deposition_date,
            release_date=header.release_date,
            experimental_methods=header.experimental_methods,
            resolution=header.resolution,
            r_free=header.r_free,
            r_work=header.r_work,
            space_group=crystal.space_group if crystal is not None else None,
            unit_cell=crystal.unit_cell if crystal is not None else None,
            ncs_operators=crystal.ncs_operators if crystal is not None else (),
            bio_assemblies=structure.bio_assemblies,
            entities=structure.entities,
            group_types=tuple(templates),
            chains_per_model=[
                model.chain_count for model in structure.models
            ],
            bond_atoms=[
                index
                for bond in structure.inter_group_bonds
                for index in (bond.atom_index_one, bond.atom_index_two)
            ],
            bond_orders=[
                bond.bond_order for bond in structure.inter_group_bonds
            ],
            **atoms,
            **groups,
            **chains,
        )

        logger.info(
            "Encoded structure %r (atoms=%d, groups=%d, templates=%d).",
            structure.structure_id,
            out.atom_count,
            out.group_count,
            len(templates),
        )
        return out

    def encode_payload(self: Self, structure: Structure) -> dict[str, Any]:
        """Flatten `structure` and encode its columns with `config`.

        Args:
            structure (Structure): Structure to encode.

        Returns:
            out (dict[str, Any]): Payload mapping with camelCase field names
                and binary columns.

        Raises:
            CodecError: If a column cannot be encoded with its strategy.

        """
        return self.encode(structure).encode(self.config)


def encode_structure(
    structure: Structure,
    config: CodecConfig | None = None,
) -> dict[str, Any]:
    """Encode a `Structure` into a payload mapping.

    Args:
        structure (Structure): Structure to encode.
        config (CodecConfig | None): Per-column binary encoding; defaults to
            the recommended strategies.

    Returns:
        out (dict[str, Any]): Payload mapping with camelCase field names and
            binary columns.

    Raises:
        CodecError: If a column cannot be encoded with its strategy.

    """
    return StructureEncoder(config).encode_payload(structure)
