import logging

import pytest

from symplace.parser import (
    HardBlock,
    ParseError,
    format_output,
    parse_input,
    parse_input_file,
    write_output_file,
)
from symplace.symmetry import SymmetryType

SAMPLE = """\
# sample problem
NumHardBlocks 3
HardBlock A 4 2
HardBlock B 4 2

HardBlock C 3 3
// groups follow
NumSymGroups 1
SymGroup SG1 3
SymPair A B
SymSelf C
"""


def test_parse_sample():
    blocks, groups = parse_input(SAMPLE.splitlines())
    assert sorted(blocks) == ["A", "B", "C"]
    assert blocks["A"] == HardBlock("A", 4, 2)
    assert blocks["C"].height == 3
    assert len(groups) == 1
    group = groups[0]
    assert group.name == "SG1"
    assert group.symmetry_type is SymmetryType.VERTICAL
    assert group.symmetry_pairs == (("A", "B"),)
    assert group.is_self_symmetric("C")


def test_parse_file(tmp_path):
    path = tmp_path / "case.txt"
    path.write_text(SAMPLE, encoding="utf-8")
    blocks, groups = parse_input_file(path)
    assert set(blocks) == {"A", "B", "C"}
    assert groups[0].is_symmetry_pair("B", "A")


def test_block_count_mismatch():
    text = "NumHardBlocks 2\nHardBlock A 1 1\nNumSymGroups 0\n"
    with pytest.raises(ParseError, match="hard blocks"):
        parse_input(text.splitlines())


def test_group_count_mismatch():
    text = "NumHardBlocks 1\nHardBlock A 1 1\nNumSymGroups 2\nSymGroup G 1\nSymSelf A\n"
    with pytest.raises(ParseError, match="symmetry groups"):
        parse_input(text.splitlines())


def test_pair_outside_group():
    text = "NumHardBlocks 2\nHardBlock A 1 1\nHardBlock B 1 1\nSymPair A B\n"
    with pytest.raises(ParseError, match="outside of a SymGroup"):
        parse_input(text.splitlines())


def test_self_outside_group():
    with pytest.raises(ParseError, match="SymSelf"):
        parse_input(["NumHardBlocks 1", "HardBlock A 1 1", "SymSelf A"])


def test_unknown_module_in_pair():
    text = "NumHardBlocks 1\nHardBlock A 1 1\nNumSymGroups 1\nSymGroup G 2\nSymPair A Z\n"
    with pytest.raises(ParseError, match="Z"):
        parse_input(text.splitlines())


def test_unknown_self_symmetric_module():
    text = "NumHardBlocks 1\nHardBlock A 1 1\nNumSymGroups 1\nSymGroup G 1\nSymSelf Q\n"
    with pytest.raises(ParseError, match="Q"):
        parse_input(text.splitlines())


def test_bad_integer():
    with pytest.raises(ParseError):
        parse_input(["NumHardBlocks 1", "HardBlock A wide 1"])


def test_unknown_keyword_is_ignored(caplog):
    lines = ["NumHardBlocks 1", "Bogus 1 2", "HardBlock A 1 1", "NumSymGroups 0"]
    with caplog.at_level(logging.WARNING, logger="symplace.parser"):
        blocks, groups = parse_input(lines)
    assert list(blocks) == ["A"]
    assert groups == []
    assert "Unknown keyword Bogus" in caplog.text


def test_format_output_orders_by_name():
    blocks = {
        "B": HardBlock("B", 4, 2, x=5, y=0, rotated=True),
        "A": HardBlock("A", 4, 2),
    }
    assert format_output(blocks, 100) == (
        "Area 100\nNumHardBlocks 2\nA 0 0 0\nB 5 0 1\n"
    )


def test_write_output_file(tmp_path):
    blocks = {"X": HardBlock("X", 2, 3, x=7, y=9)}
    path = tmp_path / "out.out"
    write_output_file(path, blocks, 6)
    assert path.read_text(encoding="utf-8") == format_output(blocks, 6)
    assert path.read_text(encoding="utf-8").splitlines()[0] == "Area 6"