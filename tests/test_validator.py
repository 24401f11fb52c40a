"""Tests for the standalone validation checks."""

import pytest

from mmtfkit import ValidationError
from mmtfkit.validator import (
    check_bioassemblies,
    check_count,
    check_entities,
    check_group_bonds,
    check_inter_group_bonds,
    check_secondary_structure,
    check_totals,
    check_unit_cell,
)


def test_check_count_message():
    with pytest.raises(ValidationError) as e:
        check_count("chain 0 (A)", "group-count", 3, 2)
    assert str(e.value) == (
        "Invalid structure: chain 0 (A) declares 3 group(s) but 2 were added "
        "(invariant=group-count)."
    )
    assert e.value.subject == "chain 0 (A)"
    check_count("chain 0 (A)", "group-count", 2, 2)


def test_check_totals():
    check_totals({"models": 1, "atoms": 9}, {"models": 1, "atoms": 9})
    with pytest.raises(ValidationError) as e:
        check_totals({"models": 1, "chains": 2}, {"models": 1, "chains": 1})
    assert e.value.invariant == "total-chains"


def test_check_group_bonds():
    check_group_bonds("group 0 (ALA)", 5, [(0, 4, 1)])
    with pytest.raises(ValidationError, match="outside the group"):
        check_group_bonds("group 0 (ALA)", 5, [(0, 5, 1)])
    with pytest.raises(ValidationError):
        check_group_bonds("group 0 (ALA)", 5, [(-1, 0, 1)])


def test_check_inter_group_bonds():
    check_inter_group_bonds([(2, 6, 1)], 9)
    with pytest.raises(ValidationError) as e:
        check_inter_group_bonds([(2, 6, 1), (8, 9, 1)], 9)
    assert e.value.subject == "inter-group bond 1"


def test_check_entities_allows_unclaimed_chains():
    check_entities([[0], [2]], ["polymer", "water"], 4)


def test_check_entities_exclusivity():
    with pytest.raises(ValidationError, match="claimed by entity 0 and entity 1"):
        check_entities([[0, 1], [1]], ["polymer", "polymer"], 2)


def test_check_bioassemblies():
    check_bioassemblies([(0, [0], "1"), (1, [0, 1], "2"), (0, [1], "1")], 2)
    with pytest.raises(ValidationError) as e:
        check_bioassemblies([(0, [0], "1"), (0, [1], "other")], 2)
    assert e.value.invariant == "bioassembly-name"
    with pytest.raises(ValidationError) as e:
        check_bioassemblies([(0, [2], "1")], 2)
    assert e.value.invariant == "bioassembly-chain-index"


def test_check_unit_cell():
    check_unit_cell([1.0, 1.0, 1.0, 90.0, 90.0, 90.0])
    with pytest.raises(ValidationError):
        check_unit_cell([])


@pytest.mark.parametrize("code", [-1, 0, 7])
def test_check_secondary_structure_accepts_dssp_codes(code):
    check_secondary_structure("group 0", code)


@pytest.mark.parametrize("code", [-2, 8])
def test_check_secondary_structure_rejects_unknown_codes(code):
    with pytest.raises(ValidationError):
        check_secondary_structure("group 0", code)
