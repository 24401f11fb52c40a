"""Tests for the structure assembler state machine."""

from typing import Any

import pytest

from mmtfkit import (
    BondPolicy,
    ProtocolError,
    State,
    Structure,
    StructureAdapter,
    StructureAssembler,
    StructureBuilder,
    ValidationError,
)

IDENTITY = [1.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0, 0, 0, 1]


class Recorder:
    """Adapter recording every call it receives."""

    def __init__(self):
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def __getattr__(self, name: str):
        def record(*args: Any) -> str | None:
            self.calls.append((name, args))
            return "built" if name == "finalize_structure" else None

        return record


def _single_group(
    assembler: StructureAssembler,
    *,
    atom_count: int = 3,
    bond_count: int = 0,
    atoms: int | None = None,
) -> None:
    """Stream one model, one chain, and one group of `atoms` atoms."""
    atoms = atom_count if atoms is None else atoms
    assembler.init_structure(bond_count, atoms, 1, 1, 1, "1XYZ")
    assembler.set_model_info(0, 1)
    assembler.set_chain_info("A", "A", 1)
    assembler.set_group_info(
        "HOH", 1, "", "NON-POLYMER", atom_count, bond_count, "?", -1, -1,
    )
    for k in range(atoms):
        assembler.set_atom_info(f"X{k}", k + 1, "", 0.0, 0.0, float(k), 1.0, 0.0, "O", 0)


def test_example_structure_finalizes(feed):
    """One chain of ALA (5 atoms) and GLY (4 atoms) with a peptide bond."""
    assembler = StructureAssembler()
    feed(assembler)
    structure = assembler.finalize_structure()

    assert isinstance(structure, Structure)
    assert assembler.state is State.FINALIZED
    assert structure.num_atoms == 9
    assert structure.num_groups == 2
    assert structure.num_chains == 1
    assert structure.num_models == 1
    assert [group.atom_count for group in structure.groups()] == [5, 4]
    assert structure.inter_group_bonds[0].atom_index_one == 2
    assert structure.inter_group_bonds[0].atom_index_two == 6
    assert assembler.builder.structure is structure


def test_model_chain_count_mismatch(feed):
    """A model declaring two chains but receiving one fails at finalize."""
    assembler = StructureAssembler()
    feed(assembler, chain_count=2)

    with pytest.raises(ValidationError, match="model 0") as e:
        assembler.finalize_structure()

    assert e.value.invariant == "chain-count"
    assert e.value.subject == "model 0"
    assert assembler.state is State.FAILED


def test_failed_build_is_discarded(feed):
    builder = Recorder()
    assembler = StructureAssembler(builder)
    feed(assembler, chain_count=2)

    with pytest.raises(ValidationError):
        assembler.finalize_structure()

    assert builder.calls == []
    with pytest.raises(ProtocolError, match="failed"):
        assembler.set_model_info(1, 1)


def test_builder_receives_canonical_order():
    builder = Recorder()
    assembler = StructureAssembler(builder)
    assembler.init_structure(0, 1, 1, 1, 1, "1ABC")
    assembler.set_entity_info([0], "AG", "Dipeptide", "polymer")
    assembler.set_model_info(0, 1)
    assembler.set_chain_info("A", "A", 1)
    assembler.set_group_info("GLY", 1, "", "", 1, 0, "G", 0, -1)
    assembler.set_xtal_info("P 1", [1, 1, 1, 90, 90, 90], [])
    assembler.set_atom_info("N", 1, "", 0.0, 0.0, 0.0, 1.0, 0.0, "N", 0)
    assembler.set_bio_assembly_trans(0, [0], IDENTITY, "1")

    assert assembler.finalize_structure() == "built"
    names = [name for name, _ in builder.calls]
    assert names == [
        "init_structure",
        "set_xtal_info",
        "set_bio_assembly_trans",
        "set_entity_info",
        "set_model_info",
        "set_chain_info",
        "set_group_info",
        "set_atom_info",
        "finalize_structure",
    ]


def test_builder_is_an_adapter():
    assert isinstance(StructureBuilder(), StructureAdapter)


def test_call_before_init():
    assembler = StructureAssembler()
    with pytest.raises(ProtocolError, match="not initialized"):
        assembler.set_atom_info("N", 1, "", 0.0, 0.0, 0.0, 1.0, 0.0, "N", 0)
    with pytest.raises(ProtocolError, match="not initialized"):
        assembler.finalize_structure()
    assert assembler.state is State.UNINITIALIZED


def test_init_twice():
    assembler = StructureAssembler()
    assembler.init_structure(0, 0, 0, 0, 0, "")
    with pytest.raises(ProtocolError, match="already initialized"):
        assembler.init_structure(0, 0, 0, 0, 0, "")
    assert assembler.state is State.FAILED


def test_calls_after_finalize(feed):
    assembler = StructureAssembler()
    feed(assembler)
    assembler.finalize_structure()

    with pytest.raises(ProtocolError, match="finalized"):
        assembler.set_inter_group_bond(0, 1, 1)
    with pytest.raises(ProtocolError, match="finalized"):
        assembler.finalize_structure()
    assert assembler.state is State.FINALIZED


def test_empty_structure():
    assembler = StructureAssembler()
    assembler.init_structure(0, 0, 0, 0, 0, "")
    structure = assembler.finalize_structure()
    assert structure.num_models == 0
    assert structure.num_atoms == 0


def test_out_of_order_model():
    assembler = StructureAssembler()
    assembler.init_structure(0, 0, 0, 0, 2, "")
    with pytest.raises(ProtocolError, match="Out-of-order model"):
        assembler.set_model_info(1, 0)

    assert assembler.state is State.FAILED
    with pytest.raises(ProtocolError, match="failed"):
        assembler.set_model_info(0, 0)
    with pytest.raises(ProtocolError, match="failed"):
        assembler.finalize_structure()


@pytest.mark.parametrize(
    ("call", "args"),
    [
        ("set_chain_info", ("A", "A", 0)),
        ("set_group_info", ("ALA", 1, "", "", 0, 0, "A", 0, -1)),
        ("set_atom_info", ("N", 1, "", 0.0, 0.0, 0.0, 1.0, 0.0, "N", 0)),
        ("set_group_bond", (0, 1, 1)),
    ],
)
def test_child_without_parent(call, args):
    assembler = StructureAssembler()
    assembler.init_structure(0, 0, 0, 0, 0, "")
    with pytest.raises(ProtocolError, match="without"):
        getattr(assembler, call)(*args)
    assert assembler.state is State.FAILED
    with pytest.raises(ProtocolError, match="failed"):
        assembler.finalize_structure()


def test_group_atom_count_mismatch():
    assembler = StructureAssembler()
    _single_group(assembler, atom_count=3, atoms=2)
    with pytest.raises(ValidationError) as e:
        assembler.finalize_structure()
    assert e.value.invariant == "atom-count"


def test_group_overflow_is_rejected():
    """An atom beyond the declared count is recorded and rejected later."""
    assembler = StructureAssembler()
    _single_group(assembler, atom_count=3, atoms=4)
    with pytest.raises(ValidationError, match="declares 3 atom") as e:
        assembler.finalize_structure()
    assert e.value.invariant == "atom-count"


def _nested(
    assembler: StructureAssembler,
    *,
    chains: tuple[int, int] = (1, 1),
    groups: tuple[int, int] = (1, 1),
    atoms: tuple[int, int] = (1, 1),
) -> None:
    """Stream one model; each pair is (declared, added) children per parent."""
    num_chains = chains[1]
    num_groups = num_chains * groups[1]
    assembler.init_structure(0, num_groups * atoms[1], num_groups, num_chains, 1, "1XYZ")
    assembler.set_model_info(0, chains[0])
    for c in range(chains[1]):
        chain_id = chr(ord("A") + c)
        assembler.set_chain_info(chain_id, chain_id, groups[0])
        for g in range(groups[1]):
            assembler.set_group_info(
                "HOH", g + 1, "", "NON-POLYMER", atoms[0], 0, "?", -1, -1,
            )
            for k in range(atoms[1]):
                assembler.set_atom_info(
                    f"O{k}", k + 1, "", 0.0, 0.0, float(k), 1.0, 0.0, "O", 0,
                )


@pytest.mark.parametrize("added", [1, 3])
@pytest.mark.parametrize(
    ("level", "subject", "invariant"),
    [
        ("chains", "model 0", "chain-count"),
        ("groups", "chain 0 (A)", "group-count"),
        ("atoms", "group 0 (HOH)", "atom-count"),
    ],
)
def test_child_count_mismatch(level, subject, invariant, added):
    """One fewer or one more child than declared fails at every level."""
    builder = Recorder()
    assembler = StructureAssembler(builder)
    _nested(assembler, **{level: (2, added)})

    with pytest.raises(ValidationError, match=f"declares 2 .* but {added} were") as e:
        assembler.finalize_structure()

    assert e.value.subject == subject
    assert e.value.invariant == invariant
    assert assembler.state is State.FAILED
    assert builder.calls == []


@pytest.mark.parametrize("level", ["chains", "groups", "atoms"])
def test_child_count_match(level):
    assembler = StructureAssembler()
    _nested(assembler, **{level: (2, 2)})
    structure = assembler.finalize_structure()
    assert structure.num_atoms == 2


def test_group_bond_count_mismatch():
    assembler = StructureAssembler()
    _single_group(assembler, bond_count=1)
    with pytest.raises(ValidationError) as e:
        assembler.finalize_structure()
    assert e.value.invariant == "bond-count"


def test_group_bond_out_of_bounds():
    assembler = StructureAssembler()
    _single_group(assembler, atom_count=3, bond_count=1)
    assembler.set_group_bond(0, 3, 1)
    with pytest.raises(ValidationError) as e:
        assembler.finalize_structure()
    assert e.value.invariant == "group-bond-index"


def test_inter_group_bond_out_of_bounds(feed):
    assembler = StructureAssembler()
    feed(assembler, inter_group_bond=(2, 9, 1))
    with pytest.raises(ValidationError) as e:
        assembler.finalize_structure()
    assert e.value.invariant == "inter-group-bond-index"


def test_deferred_bond_forward_reference():
    """Bonds may name atoms added later under the default policy."""
    assembler = StructureAssembler()
    assembler.init_structure(2, 2, 1, 1, 1, "")
    assembler.set_model_info(0, 1)
    assembler.set_chain_info("A", "A", 1)
    assembler.set_group_info("NO", 1, "", "", 2, 1, "?", -1, -1)
    assembler.set_group_bond(0, 1, 2)
    assembler.set_inter_group_bond(0, 1, 1)
    assembler.set_atom_info("N", 1, "", 0.0, 0.0, 0.0, 1.0, 0.0, "N", 0)
    assembler.set_atom_info("O", 2, "", 1.2, 0.0, 0.0, 1.0, 0.0, "O", 0)

    structure = assembler.finalize_structure()
    group = next(structure.groups())
    assert group.bonds[0].bond_order == 2
    assert structure.num_bonds == 2


def test_strict_bond_forward_reference():
    assembler = StructureAssembler(policy=BondPolicy.STRICT)
    assembler.init_structure(1, 2, 1, 1, 1, "")
    assembler.set_model_info(0, 1)
    assembler.set_chain_info("A", "A", 1)
    assembler.set_group_info("NO", 1, "", "", 2, 1, "?", -1, -1)
    assembler.set_atom_info("N", 1, "", 0.0, 0.0, 0.0, 1.0, 0.0, "N", 0)

    with pytest.raises(ValidationError) as e:
        assembler.set_group_bond(0, 1, 2)
    assert e.value.invariant == "group-bond-index"
    assert assembler.state is State.FAILED


def test_strict_inter_group_bond():
    assembler = StructureAssembler(policy="strict")
    assembler.init_structure(1, 0, 0, 0, 0, "")
    with pytest.raises(ValidationError) as e:
        assembler.set_inter_group_bond(0, 1, 1)
    assert e.value.invariant == "inter-group-bond-index"


def test_declared_total_mismatch():
    assembler = StructureAssembler()
    assembler.init_structure(0, 5, 0, 0, 0, "")
    with pytest.raises(ValidationError) as e:
        assembler.finalize_structure()
    assert e.value.invariant == "total-atoms"


def test_declared_bond_total_is_a_hint(feed):
    assembler = StructureAssembler()
    feed(assembler)
    assembler.set_inter_group_bond(3, 4, 1)
    structure = assembler.finalize_structure()
    assert structure.num_bonds == 2


def test_entity_exclusivity(feed):
    assembler = StructureAssembler()
    feed(assembler)
    assembler.set_entity_info([0], "AG", "first", "polymer")
    assembler.set_entity_info([0], "AG", "second", "polymer")
    with pytest.raises(ValidationError) as e:
        assembler.finalize_structure()
    assert e.value.invariant == "entity-exclusivity"


def test_entity_chain_index_out_of_bounds(feed):
    assembler = StructureAssembler()
    feed(assembler)
    assembler.set_entity_info([1], "AG", "", "polymer")
    with pytest.raises(ValidationError) as e:
        assembler.finalize_structure()
    assert e.value.invariant == "entity-chain-index"


def test_entity_unknown_type(feed):
    assembler = StructureAssembler()
    feed(assembler)
    assembler.set_entity_info([0], "AG", "", "macrolide")
    with pytest.raises(ValidationError) as e:
        assembler.finalize_structure()
    assert e.value.invariant == "entity-type"


def test_entity_annotation(feed):
    assembler = StructureAssembler()
    feed(assembler)
    assembler.set_entity_info([0], "AG", "Dipeptide", "polymer")
    structure = assembler.finalize_structure()
    assert structure.entities[0].chain_indices == (0,)
    assert structure.entities[0].type == "polymer"


def test_bioassembly_index_gap(feed):
    assembler = StructureAssembler()
    feed(assembler)
    assembler.set_bio_assembly_trans(1, [0], IDENTITY, "2")
    with pytest.raises(ValidationError) as e:
        assembler.finalize_structure()
    assert e.value.invariant == "bioassembly-index"


def test_bioassembly_transforms_are_grouped(feed):
    assembler = StructureAssembler()
    feed(assembler)
    assembler.set_bio_assembly_trans(1, [0], IDENTITY, "2")
    assembler.set_bio_assembly_trans(0, [0], IDENTITY, "1")
    assembler.set_bio_assembly_trans(0, [0], IDENTITY, "1")
    structure = assembler.finalize_structure()
    assert [assembly.name for assembly in structure.bio_assemblies] == ["1", "2"]
    assert len(structure.bio_assemblies[0].transforms) == 2


def test_unit_cell_length(feed):
    assembler = StructureAssembler()
    feed(assembler)
    assembler.set_xtal_info("P 1", [1.0, 2.0, 3.0], [])
    with pytest.raises(ValidationError) as e:
        assembler.finalize_structure()
    assert e.value.invariant == "unit-cell-length"


def test_unknown_secondary_structure():
    assembler = StructureAssembler()
    assembler.init_structure(0, 0, 1, 1, 1, "")
    assembler.set_model_info(0, 1)
    assembler.set_chain_info("A", "A", 1)
    assembler.set_group_info("ALA", 1, "", "", 0, 0, "A", 0, 9)
    with pytest.raises(ValidationError) as e:
        assembler.finalize_structure()
    assert e.value.invariant == "secondary-structure"


def test_header_and_crystal(feed):
    assembler = StructureAssembler()
    feed(assembler)
    assembler.set_header_info(0.2, 0.18, 1.9, "Peptide", "2020-01-01", None, ["X-RAY DIFFRACTION"])
    assembler.set_xtal_info("P 21 21 21", [10, 20, 30, 90, 90, 90], [IDENTITY])
    structure = assembler.finalize_structure()
    assert structure.header.resolution == 1.9
    assert structure.header.experimental_methods == ("X-RAY DIFFRACTION",)
    assert structure.crystal.space_group == "P 21 21 21"
    assert structure.crystal.unit_cell == (10.0, 20.0, 30.0, 90.0, 90.0, 90.0)
    assert len(structure.crystal.ncs_operators) == 1


def test_builder_structure_before_finalize():
    with pytest.raises(ProtocolError):
        StructureBuilder().structure
