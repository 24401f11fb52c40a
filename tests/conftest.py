"""Shared test fixtures."""

from collections.abc import Callable

import pytest

from mmtfkit import (
    Atom,
    BioAssembly,
    Chain,
    CrystalInfo,
    Entity,
    Group,
    Header,
    InterGroupBond,
    Model,
    Structure,
    StructureAssembler,
    Transform,
)

ALA: list[tuple[str, str]] = [
    ("N", "N"),
    ("CA", "C"),
    ("C", "C"),
    ("O", "O"),
    ("CB", "C"),
]
GLY: list[tuple[str, str]] = [("N", "N"), ("CA", "C"), ("C", "C"), ("O", "O")]

IDENTITY: tuple[float, ...] = (
    1.0, 0.0, 0.0, 0.0,
    0.0, 1.0, 0.0, 0.0,
    0.0, 0.0, 1.0, 0.0,
    0.0, 0.0, 0.0, 1.0,
)  # fmt: skip


def feed_example(
    assembler: StructureAssembler,
    *,
    chain_count: int = 1,
    inter_group_bond: tuple[int, int, int] = (2, 6, 1),
) -> None:
    """Stream a two-residue peptide (ALA 5 atoms, GLY 4 atoms) into `assembler`.

    Stops short of `finalize_structure()`.
    """
    assembler.init_structure(1, 9, 2, 1, 1, "1ABC")
    assembler.set_model_info(0, chain_count)
    assembler.set_chain_info("A", "A", 2)

    serial = 1
    for name, number, atoms in (("ALA", 1, ALA), ("GLY", 2, GLY)):
        assembler.set_group_info(
            name,
            number,
            "",
            "L-PEPTIDE LINKING",
            len(atoms),
            0,
            name[0],
            number - 1,
            -1,
        )
        for k, (atom, element) in enumerate(atoms):
            assembler.set_atom_info(
                atom,
                serial,
                "",
                float(k),
                0.0,
                0.0,
                1.0,
                0.0,
                element,
                0,
            )
            serial += 1

    assembler.set_inter_group_bond(*inter_group_bond)


@pytest.fixture
def feed() -> Callable[..., None]:
    """Return the helper that streams the two-residue example."""
    return feed_example


def _group(
    name: str,
    number: int,
    atoms: list[tuple[str, str]],
    bonds: list[list[int]],
    *,
    serial: int,
    offset: float,
    secondary_structure: int = -1,
) -> Group:
    return Group(
        group_name=name,
        group_number=number,
        group_type="L-PEPTIDE LINKING",
        single_letter_code=name[0],
        sequence_index=number - 1,
        secondary_structure=secondary_structure,
        atoms=[
            Atom(
                atom_name=atom,
                serial_number=serial + k,
                alternative_location_id="A" if atom == "CB" else "",
                x=offset + 1.234 * k,
                y=-0.525 * k,
                z=12.5,
                occupancy=0.5 if atom == "CB" else 1.0,
                temperature_factor=10.25 + k,
                element=element,
            )
            for k, (atom, element) in enumerate(atoms)
        ],
        bonds=bonds,
    )


@pytest.fixture
def structure() -> Structure:
    """Build a small but fully annotated structure.

    Two models of one chain each; every chain holds ALA, GLY, and a second
    ALA, so the ALA template is shared.
    """
    ala_bonds: list[list[int]] = [[0, 1, 1], [1, 2, 1], [2, 3, 2], [1, 4, 1]]
    gly_bonds: list[list[int]] = [[0, 1, 1], [1, 2, 1], [2, 3, 2]]

    models: list[Model] = []
    for model in range(2):
        models.append(
            Model(
                chains=[
                    Chain(
                        chain_id="A",
                        chain_name="A",
                        groups=[
                            _group(
                                "ALA",
                                1,
                                ALA,
                                ala_bonds,
                                serial=1,
                                offset=model,
                                secondary_structure=2,
                            ),
                            _group(
                                "GLY",
                                2,
                                GLY,
                                gly_bonds,
                                serial=6,
                                offset=model + 3.0,
                            ),
                            _group(
                                "ALA",
                                3,
                                ALA,
                                ala_bonds,
                                serial=10,
                                offset=model + 6.0,
                            ),
                        ],
                    ),
                ],
            ),
        )

    return Structure(
        structure_id="1ABC",
        models=models,
        entities=[
            Entity(
                chain_indices=[0, 1],
                sequence="AGA",
                description="Tripeptide",
                type="polymer",
            ),
        ],
        bio_assemblies=[
            BioAssembly(
                name="1",
                transforms=[Transform(chain_indices=[0], matrix=IDENTITY)],
            ),
        ],
        crystal=CrystalInfo(
            space_group="P 1",
            unit_cell=[10.0, 20.0, 30.0, 90.0, 90.0, 90.0],
        ),
        header=Header(
            resolution=1.5,
            r_free=0.25,
            title="Example peptide",
            experimental_methods=["X-RAY DIFFRACTION"],
        ),
        inter_group_bonds=[
            InterGroupBond(atom_index_one=2, atom_index_two=5),
            InterGroupBond(atom_index_one=7, atom_index_two=9),
            InterGroupBond(atom_index_one=16, atom_index_two=19),
            InterGroupBond(atom_index_one=21, atom_index_two=23),
        ],
    )
