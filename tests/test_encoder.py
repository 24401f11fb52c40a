"""Tests for `StructureEncoder` and the one-call conversions."""

import numpy as np
import pytest

from mmtfkit import (
    CodecConfig,
    CodecError,
    ColumnSet,
    Strategy,
    StructureEncoder,
    ValidationError,
    assemble,
    decode_structure,
    encode_structure,
)


def test_encoder_flattens_columns(structure):
    columns = StructureEncoder().encode(structure)

    assert columns.num_models == 2
    assert columns.num_chains == 2
    assert columns.num_groups == 6
    assert columns.num_atoms == 28
    assert columns.num_bonds == structure.num_bonds == 4 + 2 * (4 + 3 + 4)
    np.testing.assert_array_equal(columns.chains_per_model, [1, 1])
    np.testing.assert_array_equal(columns.groups_per_chain, [3, 3])
    np.testing.assert_array_equal(columns.bond_atoms, [2, 5, 7, 9, 16, 19, 21, 23])
    np.testing.assert_array_equal(columns.sec_structs, [2, -1, -1, 2, -1, -1])
    assert columns.alt_locs[4] == "A"


def test_encoder_deduplicates_templates(structure):
    columns = StructureEncoder().encode(structure)
    assert [template.group_name for template in columns.group_types] == [
        "ALA",
        "GLY",
    ]
    np.testing.assert_array_equal(columns.group_type_indices, [0, 1, 0, 0, 1, 0])
    assert columns.group_types[0].bond_atoms == (0, 1, 1, 2, 2, 3, 1, 4)
    assert columns.group_types[0].bond_orders == (1, 1, 2, 1)


def test_encoder_does_not_modify_input(structure):
    before = structure.export()
    StructureEncoder().encode(structure)
    assert structure.export() == before


def test_assemble_restores_structure(structure):
    assert assemble(StructureEncoder().encode(structure)) == structure


def test_binary_round_trip(structure):
    """Values at the scaled precision survive the binary encoding."""
    assert decode_structure(encode_structure(structure)) == structure


def test_binary_round_trip_with_config(structure):
    config = CodecConfig().with_overrides(
        xCoordList=(Strategy.FLOAT32, 0),
        yCoordList=(Strategy.FLOAT32, 0),
        zCoordList=(Strategy.FLOAT32, 0),
    )
    data = StructureEncoder(config).encode_payload(structure)
    assert decode_structure(data) == structure


def test_replay_fills_optional_columns():
    """Absent optional columns fall back to their defaults."""
    columns = ColumnSet(
        structure_id="1W",
        num_atoms=2,
        num_groups=2,
        num_chains=1,
        num_models=1,
        group_types=[
            {
                "groupName": "HOH",
                "atomNameList": ["O"],
                "elementList": ["O"],
                "formalChargeList": [0],
            },
        ],
        x_coords=[1.0, 2.0],
        y_coords=[0.0, 0.0],
        z_coords=[0.0, 0.0],
        group_ids=[101, 102],
        group_type_indices=[0, 0],
        chain_ids=["W"],
        groups_per_chain=[2],
        chains_per_model=[1],
        bond_atoms=[0, 1],
    )
    structure = assemble(columns)

    atoms = list(structure.atoms())
    assert [atom.serial_number for atom in atoms] == [1, 2]
    assert atoms[0].occupancy == 1.0
    assert atoms[0].temperature_factor == 0.0
    assert atoms[0].alternative_location_id == ""
    group = next(structure.groups())
    assert group.sequence_index == -1
    assert group.secondary_structure == -1
    assert group.insertion_code == ""
    assert structure.models[0].chains[0].chain_name == "W"
    assert structure.inter_group_bonds[0].bond_order == 1
    assert structure.crystal is None


def test_replay_rejects_bad_template_index(structure):
    columns = StructureEncoder().encode(structure)
    broken = columns.model_copy(
        update={"group_type_indices": np.array([0, 1, 0, 0, 1, 2], dtype=np.int32)},
    )
    with pytest.raises(ValidationError) as e:
        assemble(broken)
    assert e.value.invariant == "group-type-index"


def test_replay_rejects_short_coordinates(structure):
    columns = StructureEncoder().encode(structure)
    data = columns.model_dump(by_alias=True)
    data["xCoordList"] = columns.x_coords[:-1]
    with pytest.raises(ValidationError) as e:
        assemble(ColumnSet.model_validate(data))
    assert e.value.subject == "xCoordList"
    assert e.value.invariant == "column-length"


def test_replay_rejects_unpaired_bond_atoms(structure):
    columns = StructureEncoder().encode(structure)
    data = columns.model_dump(by_alias=True)
    data["bondAtomList"] = [2, 5, 7]
    data["bondOrderList"] = []
    with pytest.raises(ValidationError, match="pairs"):
        assemble(ColumnSet.model_validate(data))


def test_payload_carries_version_and_producer(structure):
    data = encode_structure(structure)
    assert data["mmtfVersion"] == "1.0"
    assert data["mmtfProducer"] == "mmtfkit"


def test_decode_structure_accepts_foreign_producer(structure):
    data = encode_structure(structure)
    data.update(mmtfVersion="1.0.0", mmtfProducer="RCSB-PDB Generator")
    assert decode_structure(data) == structure


def test_decode_structure_reports_malformed_payload(structure):
    data = encode_structure(structure)
    data["numAtoms"] = "many"
    with pytest.raises(CodecError, match="Invalid payload"):
        decode_structure(data)
