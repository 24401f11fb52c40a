"""Group (residue) models.

This submodule defines the `Group` model, a residue of a chain holding its
atoms and intra-group bonds, and the `GroupType` model, the deduplicated
template shared by every group with identical chemistry. The module also
provides the `SecondaryStructure` enum of DSSP codes.

Exports:
    SecondaryStructure: Enum of DSSP-derived secondary structure codes.
    Group: Model representing a residue with atomic data.
    GroupType: Model representing a group template.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .atom import Atom
from .bond import GroupBond

__all__: list[str] = [
    "Group",
    "GroupType",
    "SecondaryStructure",
]


class SecondaryStructure(IntEnum):
    """DSSP secondary structure code.

    Members:
        UNDEFINED: No assignment (`-1`).
        PI_HELIX: Pi helix (`0`).
        BEND: Bend (`1`).
        ALPHA_HELIX: Alpha helix (`2`).
        EXTENDED: Extended strand in a sheet (`3`).
        HELIX_3_10: 3-10 helix (`4`).
        BRIDGE: Isolated beta bridge (`5`).
        TURN: Hydrogen-bonded turn (`6`).
        COIL: Coil (`7`).

    """

    UNDEFINED = -1
    PI_HELIX = 0
    BEND = 1
    ALPHA_HELIX = 2
    EXTENDED = 3
    HELIX_3_10 = 4
    BRIDGE = 5
    TURN = 6
    COIL = 7


class Group(BaseModel):
    """Group (residue) record.

    Represents one residue instance of a chain, i.e. an amino acid,
    nucleotide, ligand, or water, with its atoms in order and the bonds
    between them.

    Attributes:
        group_name (str): Three-letter chemical component code.
        group_number (int): Author sequence position; not necessarily
            contiguous.
        insertion_code (str): Insertion code, `""` if none.
        group_type (str): Chemical component type, `""` if unavailable.
        single_letter_code (str): One-letter code of the component.
        sequence_index (int): Index into the entity sequence, `-1` if not
            applicable.
        secondary_structure (SecondaryStructure): DSSP code.
        atoms (tuple[Atom, ...]): Atoms of the group.
        bonds (tuple[GroupBond, ...]): Bonds between atoms of the group.

    Examples:
        Glycine without hydrogens.
        ```python
        Group(
            group_name="GLY",
            group_number=2,
            group_type="L-PEPTIDE LINKING",
            single_letter_code="G",
            sequence_index=1,
            atoms=[...],
            bonds=[[0, 1, 1], [1, 2, 1], [2, 3, 2]],
        )
        ```

    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        validate_by_name=True,
        validate_by_alias=True,
        use_enum_values=False,
    )

    group_name: Annotated[
        str,
        Field(
            title="group_name",
            description="Three-letter chemical component code.",
            validation_alias="groupName",
            serialization_alias="groupName",
        ),
    ]

    group_number: Annotated[
        int,
        Field(
            title="group_number",
            description="Author sequence position.",
            validation_alias="groupNumber",
            serialization_alias="groupNumber",
        ),
    ]

    insertion_code: Annotated[
        str,
        Field(
            title="insertion_code",
            description="Insertion code.",
            validation_alias="insCode",
            serialization_alias="insCode",
        ),
    ] = ""

    group_type: Annotated[
        str,
        Field(
            title="group_type",
            description="Chemical component type.",
            validation_alias="chemCompType",
            serialization_alias="chemCompType",
        ),
    ] = ""

    single_letter_code: Annotated[
        str,
        Field(
            title="single_letter_code",
            description="One-letter code of the component.",
            validation_alias="singleLetterCode",
            serialization_alias="singleLetterCode",
        ),
    ] = "?"

    sequence_index: Annotated[
        int,
        Field(
            title="sequence_index",
            description="Index into the entity sequence.",
            validation_alias="sequenceIndex",
            serialization_alias="sequenceIndex",
        ),
    ] = -1

    secondary_structure: Annotated[
        SecondaryStructure,
        Field(
            title="secondary_structure",
            description="DSSP secondary structure code.",
            validation_alias="secStruct",
            serialization_alias="secStruct",
        ),
    ] = SecondaryStructure.UNDEFINED

    atoms: Annotated[
        tuple[Atom, ...],
        Field(
            title="atoms",
            description="Atoms of the group.",
        ),
    ] = ()

    bonds: Annotated[
        tuple[GroupBond, ...],
        Field(
            title="bonds",
            description="Bonds between atoms of the group.",
        ),
    ] = ()

    @property
    def atom_count(self: Self) -> int:
        """Number of atoms in the group."""
        return len(self.atoms)

    @property
    def bond_count(self: Self) -> int:
        """Number of intra-group bonds."""
        return len(self.bonds)

    def template(self: Self) -> GroupType:
        """Return the chemistry shared by every copy of this group.

        Returns:
            out (GroupType): Template with the per-atom and per-bond data
                that does not vary between instances.

        """
        return GroupType(
            group_name=self.group_name,
            atom_names=tuple(atom.atom_name for atom in self.atoms),
            elements=tuple(atom.element for atom in self.atoms),
            charges=tuple(atom.charge for atom in self.atoms),
            bond_atoms=tuple(
                index
                for bond in self.bonds
                for index in (bond.atom_index_one, bond.atom_index_two)
            ),
            bond_orders=tuple(bond.bond_order for bond in self.bonds),
            single_letter_code=self.single_letter_code,
            chem_comp_type=self.group_type,
        )


class GroupType(BaseModel):
    """Group template.

    Holds the chemistry of a group that is identical between all of its
    instances (atom names, elements, formal charges, and bonds with local
    atom indexes). Groups refer to their template by index into the
    structure-wide template list.

    Attributes:
        group_name (str): Three-letter chemical component code.
        atom_names (tuple[str, ...]): Atom names in order.
        elements (tuple[str, ...]): Element symbols in order.
        charges (tuple[int, ...]): Formal charges in order.
        bond_atoms (tuple[int, ...]): Flattened pairs of local atom indexes.
        bond_orders (tuple[int, ...]): Bond orders, one per pair.
        single_letter_code (str): One-letter code of the component.
        chem_comp_type (str): Chemical component type.

    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        validate_by_name=True,
        validate_by_alias=True,
    )

    group_name: Annotated[
        str,
        Field(
            title="group_name",
            description="Three-letter chemical component code.",
            validation_alias="groupName",
            serialization_alias="groupName",
        ),
    ]

    atom_names: Annotated[
        tuple[str, ...],
        Field(
            title="atom_names",
            description="Atom names in order.",
            validation_alias="atomNameList",
            serialization_alias="atomNameList",
        ),
    ] = ()

    elements: Annotated[
        tuple[str, ...],
        Field(
            title="elements",
            description="Element symbols in order.",
            validation_alias="elementList",
            serialization_alias="elementList",
        ),
    ] = ()

    charges: Annotated[
        tuple[int, ...],
        Field(
            title="charges",
            description="Formal charges in order.",
            validation_alias="formalChargeList",
            serialization_alias="formalChargeList",
        ),
    ] = ()

    bond_atoms: Annotated[
        tuple[int, ...],
        Field(
            title="bond_atoms",
            description="Flattened pairs of local atom indexes.",
            validation_alias="bondAtomList",
            serialization_alias="bondAtomList",
        ),
    ] = ()

    bond_orders: Annotated[
        tuple[int, ...],
        Field(
            title="bond_orders",
            description="Bond orders, one per pair.",
            validation_alias="bondOrderList",
            serialization_alias="bondOrderList",
        ),
    ] = ()

    single_letter_code: Annotated[
        str,
        Field(
            title="single_letter_code",
            description="One-letter code of the component.",
            validation_alias="singleLetterCode",
            serialization_alias="singleLetterCode",
        ),
    ] = "?"

    chem_comp_type: Annotated[
        str,
        Field(
            title="chem_comp_type",
            description="Chemical component type.",
            validation_alias="chemCompType",
            serialization_alias="chemCompType",
        ),
    ] = ""

    @property
    def atom_count(self: Self) -> int:
        """Number of atoms in the template."""
        return len(self.atom_names)

    @property
    def bond_count(self: Self) -> int:
        """Number of bonds in the template."""
        return len(self.bond_orders)

    @model_validator(mode="after")
    def __validate_lengths(self: Self) -> Self:
        """Ensure per-atom and per-bond lists line up.

        Returns:
            out (Self): The validated template.

        Raises:
            ValueError: If `elements` or `charges` differ in length from
                `atom_names`, or `bond_atoms` is not twice as long as
                `bond_orders`.

        """
        n: int = len(self.atom_names)
        if len(self.elements) != n or len(self.charges) != n:
            msg: str = (
                "Invalid group template: per-atom lists differ in length "
                f"(group={self.group_name!r}, atoms={n}, "
                f"elements={len(self.elements)}, charges={len(self.charges)})."
            )
            raise ValueError(msg)

        if len(self.bond_atoms) != 2 * len(self.bond_orders):
            msg: str = (
                "Invalid group template: `bond_atoms` must hold one pair per "
                f"bond order (group={self.group_name!r}, "
                f"bond_atoms={len(self.bond_atoms)}, "
                f"bond_orders={len(self.bond_orders)})."
            )
            raise ValueError(msg)

        return self
