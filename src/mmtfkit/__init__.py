"""Compact macromolecular structure models and codec.

This package provides models for macromolecular structures, the binary
column codec used to store them compactly, and the validating assembler and
encoder that convert between decoded columns and structure graphs.

Exports:
    Atom, Group, GroupType, Chain, Model, Structure: Structure graph models.
    Bond, GroupBond, InterGroupBond: Covalent bond models.
    Entity, EntityType: Entity annotation model and its type enum.
    BioAssembly, Transform: Biological assembly models.
    CrystalInfo, Header: Crystallographic and header metadata models.
    SecondaryStructure: DSSP secondary structure enum.
    ColumnSet, MMTF_VERSION: Decoded payload columns and supported version.
    Strategy, decode, encode, decode_array, encode_array: Binary codec.
    FieldCodec, CodecConfig, DEFAULT_CODECS: Column encoding configuration.
    StructureAdapter, StructureBuilder: Adapter contract and default builder.
    StructureAssembler, State, BondPolicy: Validating assembler.
    StructureEncoder: Flattens structures into columns.
    assemble, decode_structure, encode_structure: One-call conversions.
    MMTFError, CodecError, ProtocolError, ValidationError: Errors.
"""

from .adapter import StructureAdapter, StructureBuilder
from .assembler import (
    BondPolicy,
    State,
    StructureAssembler,
    assemble,
    decode_structure,
)
from .assembly import BioAssembly, Transform
from .atom import Atom
from .bond import Bond, GroupBond, InterGroupBond
from .chain import Chain, Model
from .codec import Strategy, decode, decode_array, encode, encode_array
from .columns import MMTF_VERSION, ColumnSet
from .config import DEFAULT_CODECS, CodecConfig, FieldCodec
from .crystal import CrystalInfo, Header
from .encoder import StructureEncoder, encode_structure
from .entity import Entity, EntityType
from .errors import CodecError, MMTFError, ProtocolError, ValidationError
from .group import Group, GroupType, SecondaryStructure
from .structure import Structure

__all__: list[str] = [
    "DEFAULT_CODECS",
    "MMTF_VERSION",
    "Atom",
    "BioAssembly",
    "Bond",
    "BondPolicy",
    "Chain",
    "CodecConfig",
    "CodecError",
    "ColumnSet",
    "CrystalInfo",
    "Entity",
    "EntityType",
    "FieldCodec",
    "Group",
    "GroupBond",
    "GroupType",
    "Header",
    "InterGroupBond",
    "MMTFError",
    "Model",
    "ProtocolError",
    "SecondaryStructure",
    "State",
    "Strategy",
    "Structure",
    "StructureAdapter",
    "StructureAssembler",
    "StructureBuilder",
    "StructureEncoder",
    "Transform",
    "ValidationError",
    "assemble",
    "decode",
    "decode_array",
    "decode_structure",
    "encode",
    "encode_array",
    "encode_structure",
]
