"""Structure adapter contract.

This submodule defines the `StructureAdapter` protocol, the ordered set of
calls that streams structural data (models, chains, entities, groups, atoms,
bonds, crystallographic and bioassembly metadata) into an in-memory
representation chosen by the caller, and `StructureBuilder`, the adapter that
builds a `Structure`.

Any object implementing the calls of `StructureAdapter` can be plugged into
`StructureAssembler`; no base class is required.

The calls arrive in this order:

1. `init_structure()`;
2. `set_xtal_info()`, `set_header_info()`, `set_bio_assembly_trans()`, and
   `set_entity_info()`;
3. for every model `set_model_info()`, then for each of its chains
   `set_chain_info()`, then for each of its groups `set_group_info()`
   followed by one `set_atom_info()` per atom and one `set_group_bond()` per
   intra-group bond;
4. `set_inter_group_bond()` for every inter-group bond;
5. `finalize_structure()`.

Exports:
    StructureAdapter: Protocol of the consumer calls.
    StructureBuilder: Adapter building a `Structure`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, Self, runtime_checkable

from .assembly import BioAssembly, Transform
from .atom import Atom
from .bond import GroupBond, InterGroupBond
from .chain import Chain, Model
from .crystal import CrystalInfo, Header
from .entity import Entity
from .errors import ProtocolError
from .group import Group
from .structure import Structure

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__: list[str] = [
    "StructureAdapter",
    "StructureBuilder",
]


@runtime_checkable
class StructureAdapter(Protocol):
    """Consumer of a stream of structural facts."""

    def init_structure(
        self,
        total_num_bonds: int,
        total_num_atoms: int,
        total_num_groups: int,
        total_num_chains: int,
        total_num_models: int,
        structure_id: str,
    ) -> None:
        """Start a structure; totals are capacity hints."""
        ...

    def finalize_structure(self) -> Any:
        """Complete the structure after all data was added."""
        ...

    def set_model_info(self, model_id: int, chain_count: int) -> None:
        """Start model `model_id` holding `chain_count` chains."""
        ...

    def set_chain_info(
        self,
        chain_id: str,
        chain_name: str,
        group_count: int,
    ) -> None:
        """Start a chain of the current model."""
        ...

    def set_entity_info(
        self,
        chain_indices: Sequence[int],
        sequence: str,
        description: str,
        type: str,  # noqa: A002
    ) -> None:
        """Annotate chains (by global index) with an entity."""
        ...

    def set_group_info(
        self,
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
        """Start a group of the current chain."""
        ...

    def set_atom_info(
        self,
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
        """Add an atom to the current group."""
        ...

    def set_bio_assembly_trans(
        self,
        bio_assembly_index: int,
        chain_indices: Sequence[int],
        transform: Sequence[float],
        name: str,
    ) -> None:
        """Add a transform operation to bioassembly `bio_assembly_index`."""
        ...

    def set_xtal_info(
        self,
        space_group: str,
        unit_cell: Sequence[float],
        ncs_operators: Sequence[Sequence[float]],
    ) -> None:
        """Set the space group, unit cell, and NCS operators."""
        ...

    def set_group_bond(
        self,
        atom_index_one: int,
        atom_index_two: int,
        bond_order: int,
    ) -> None:
        """Add a bond between two atoms of the current group."""
        ...

    def set_inter_group_bond(
        self,
        atom_index_one: int,
        atom_index_two: int,
        bond_order: int,
    ) -> None:
        """Add a bond between two atoms addressed by global index."""
        ...

    def set_header_info(
        self,
        r_free: float | None,
        r_work: float | None,
        resolution: float | None,
        title: str | None,
        deposition_date: str | None,
        release_date: str | None,
        experimental_methods: Sequence[str],
    ) -> None:
        """Set the header metadata."""
        ...


class StructureBuilder:
    """Adapter that builds a `Structure`.

    The builder trusts its input: it expects the calls of an already
    validated stream, as replayed by `StructureAssembler`, and nests each
    chain, group, atom, and group bond under the most recently started
    parent. The result is available as `structure` once
    `finalize_structure()` was called.

    Examples:
        ```python
        builder = StructureBuilder()
        StructureAssembler(builder).replay(columns)
        builder.structure
        ```

    """

    def __init__(self: Self) -> None:
        self._structure: Structure | None = None
        self._structure_id: str = ""
        self._models: list[list[dict[str, Any]]] = []
        self._entities: list[Entity] = []
        self._assemblies: dict[int, tuple[str, list[Transform]]] = {}
        self._crystal: CrystalInfo | None = None
        self._header: Header = Header()
        self._bonds: list[InterGroupBond] = []

    @property
    def structure(self: Self) -> Structure:
        """The built structure.

        Raises:
            ProtocolError: If the structure was not finalized yet.

        """
        if self._structure is None:
            msg: str = "Structure is not available before finalization."
            raise ProtocolError(msg)
        return self._structure

    def init_structure(
        self: Self,
        total_num_bonds: int,
        total_num_atoms: int,
        total_num_groups: int,
        total_num_chains: int,
        total_num_models: int,
        structure_id: str,
    ) -> None:
        self._structure_id = structure_id

    def set_xtal_info(
        self: Self,
        space_group: str,
        unit_cell: Sequence[float],
        ncs_operators: Sequence[Sequence[float]],
    ) -> None:
        self._crystal = CrystalInfo(
            space_group=space_group,
            unit_cell=unit_cell,
            ncs_operators=ncs_operators,
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
        self._header = Header(
            r_free=r_free,
            r_work=r_work,
            resolution=resolution,
            title=title,
            deposition_date=deposition_date,
            release_date=release_date,
            experimental_methods=tuple(experimental_methods),
        )

    def set_bio_assembly_trans(
        self: Self,
        bio_assembly_index: int,
        chain_indices: Sequence[int],
        transform: Sequence[float],
        name: str,
    ) -> None:
        _, transforms = self._assemblies.setdefault(
            bio_assembly_index,
            (name, []),
        )
        transforms.append(
            Transform(chain_indices=chain_indices, matrix=transform),
        )

    def set_entity_info(
        self: Self,
        chain_indices: Sequence[int],
        sequence: str,
        description: str,
        type: str,  # noqa: A002
    ) -> None:
        self._entities.append(
            Entity(
                chain_indices=chain_indices,
                sequence=sequence,
                description=description,
                type=type,
            ),
        )

    def set_model_info(self: Self, model_id: int, chain_count: int) -> None:
        self._models.append([])

    def set_chain_info(
        self: Self,
        chain_id: str,
        chain_name: str,
        group_count: int,
    ) -> None:
        self._models[-1].append(
            {"chain_id": chain_id, "chain_name": chain_name, "groups": []},
        )

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
        self._models[-1][-1]["groups"].append(
            {
                "group_name": group_name,
                "group_number": group_number,
                "insertion_code": insertion_code,
                "group_type": group_type,
                "single_letter_code": single_letter_code,
                "sequence_index": sequence_index,
                "secondary_structure": secondary_structure_type,
                "atoms": [],
                "bonds": [],
            },
        )

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
        self._models[-1][-1]["groups"][-1]["atoms"].append(
            Atom(
                atom_name=atom_name,
                serial_number=serial_number,
                alternative_location_id=alternative_location_id,
                x=x,
                y=y,
                z=z,
                occupancy=occupancy,
                temperature_factor=temperature_factor,
                element=element,
                charge=charge,
            ),
        )

    def set_group_bond(
        self: Self,
        atom_index_one: int,
        atom_index_two: int,
        bond_order: int,
    ) -> None:
        self._models[-1][-1]["groups"][-1]["bonds"].append(
            GroupBond(
                atom_index_one=atom_index_one,
                atom_index_two=atom_index_two,
                bond_order=bond_order,
            ),
        )

    def set_inter_group_bond(
        self: Self,
        atom_index_one: int,
        atom_index_two: int,
        bond_order: int,
    ) -> None:
        self._bonds.append(
            InterGroupBond(
                atom_index_one=atom_index_one,
                atom_index_two=atom_index_two,
                bond_order=bond_order,
            ),
        )

    def finalize_structure(self: Self) -> Structure:
        """Build the `Structure` from the collected calls.

        Returns:
            out (Structure): The built structure.

        """
        self._structure = Structure(
            structure_id=self._structure_id,
            models=tuple(
                Model(
                    chains=tuple(
                        Chain(
                            chain_id=chain["chain_id"],
                            chain_name=chain["chain_name"],
                            groups=tuple(
                                Group(**group) for group in chain["groups"]
                            ),
                        )
                        for chain in chains
                    ),
                )
                for chains in self._models
            ),
            entities=tuple(self._entities),
            bio_assemblies=tuple(
                BioAssembly(name=name, transforms=tuple(transforms))
                for _, (name, transforms) in sorted(self._assemblies.items())
            ),
            crystal=self._crystal,
            header=self._header,
            inter_group_bonds=tuple(self._bonds),
        )
        return self._structure
