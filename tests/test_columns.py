"""Tests for `ColumnSet` decoding and encoding."""

import numpy as np
import pydantic
import pytest

from mmtfkit import (
    DEFAULT_CODECS,
    CodecConfig,
    CodecError,
    ColumnSet,
    FieldCodec,
    Strategy,
    StructureEncoder,
)
from mmtfkit.codec import HEADER_SIZE


def test_numeric_columns_are_read_only_arrays():
    columns = ColumnSet(x_coords=[1.0, 2.0], group_ids=[1, 2], bond_orders=[1])
    assert columns.x_coords.dtype == np.float32
    assert columns.group_ids.dtype == np.int32
    assert columns.bond_orders.dtype == np.int8
    with pytest.raises(ValueError):
        columns.x_coords[0] = 5.0


def test_columns_accept_aliases():
    columns = ColumnSet.model_validate(
        {"structureId": "1ABC", "chainIdList": ["A"], "chainsPerModel": [1]},
    )
    assert columns.structure_id == "1ABC"
    assert columns.chain_ids == ("A",)
    assert columns.model_count == 1


def test_columns_forbid_unknown_fields():
    with pytest.raises(pydantic.ValidationError):
        ColumnSet.model_validate({"unknownList": []})


def test_encode_writes_every_binary_column(structure):
    data = StructureEncoder().encode(structure).encode()
    for name, codec in DEFAULT_CODECS.items():
        header = np.frombuffer(data[name][:HEADER_SIZE], dtype=">i4")
        assert int(header[0]) == codec.strategy
        assert int(header[2]) == codec.parameter

    assert data["structureId"] == "1ABC"
    assert data["numAtoms"] == 28
    assert data["numModels"] == 2
    assert "rWork" not in data


def test_decode_restores_encoded_columns(structure):
    columns = StructureEncoder().encode(structure)
    decoded = ColumnSet.decode(columns.encode())
    assert decoded == columns


def test_decode_accepts_plain_sequences():
    columns = ColumnSet.decode({"groupTypeList": [0, 0, 1], "chainIdList": ["A"]})
    np.testing.assert_array_equal(columns.group_type_indices, [0, 0, 1])
    assert columns.group_count == 3


def test_decode_reports_malformed_column():
    with pytest.raises(CodecError):
        ColumnSet.decode({"xCoordList": b"\x00\x00\x00\x0a"})


def test_config_overrides(structure):
    config = CodecConfig().with_overrides(
        xCoordList=(Strategy.FLOAT32, 0),
        bFactorList=FieldCodec(strategy=Strategy.INTEGER_RUN_LENGTH, parameter=10),
    )
    assert config.codec("xCoordList").strategy is Strategy.FLOAT32
    assert config.codec("yCoordList") == DEFAULT_CODECS["yCoordList"]

    columns = StructureEncoder().encode(structure)
    data = columns.encode(config)
    assert data["xCoordList"][:4] == (1).to_bytes(4, "big")
    np.testing.assert_array_equal(
        ColumnSet.decode(data).x_coords,
        columns.x_coords,
    )


def test_config_rejects_unknown_column():
    with pytest.raises(ValueError, match="unknown column"):
        CodecConfig().with_overrides(fooList=(Strategy.INT32, 0))


def test_field_codec_rejects_negative_parameter():
    with pytest.raises(pydantic.ValidationError):
        FieldCodec(strategy=Strategy.STRING, parameter=-1)


def test_decode_records_version_and_producer():
    columns = ColumnSet.decode(
        {"mmtfVersion": "1.0.0", "mmtfProducer": "RCSB-PDB Generator", "chainIdList": ["A"]},
    )
    assert columns.mmtf_version == "1.0.0"
    assert columns.mmtf_producer == "RCSB-PDB Generator"


def test_decode_rejects_newer_version():
    with pytest.raises(CodecError, match="unsupported format version"):
        ColumnSet.decode({"mmtfVersion": "2.0"})


@pytest.mark.parametrize(
    "data",
    [
        {"numAtoms": "many"},
        {"groupList": [{"bad": 1}]},
        {"unknownList": []},
    ],
)
def test_decode_reports_invalid_field(data):
    with pytest.raises(CodecError, match="Invalid payload") as e:
        ColumnSet.decode(data)
    assert isinstance(e.value.__cause__, pydantic.ValidationError)
