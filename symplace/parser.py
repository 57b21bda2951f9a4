"""Reading placement problems and writing placement results."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from os import PathLike
from typing import Iterable, Mapping, Union

from symplace.symmetry import SymmetryGroup, SymmetryType

logger = logging.getLogger(__name__)

StrPath = Union[str, "PathLike[str]"]


@dataclass
class HardBlock:
    """A rectangular module with its placement."""

    name: str
    width: int
    height: int
    x: int = 0
    y: int = 0
    rotated: bool = False


class ParseError(ValueError):
    """Raised when a problem description is malformed or inconsistent."""


def _field(args: list[str], index: int, keyword: str, line_no: int) -> str:
    if index >= len(args):
        raise ParseError(f"line {line_no}: {keyword} is missing a field")
    return args[index]


def _int_field(args: list[str], index: int, keyword: str, line_no: int) -> int:
    token = _field(args, index, keyword, line_no)
    try:
        return int(token)
    except ValueError:
        raise ParseError(
            f"line {line_no}: {keyword} expects an integer, got {token!r}"
        ) from None


def parse_input(
    lines: Iterable[str],
) -> tuple[dict[str, HardBlock], list[SymmetryGroup]]:
    """Parse a problem description into blocks and symmetry groups.

    Empty lines and lines starting with '/' or '#' are skipped; unknown
    keywords are logged and ignored.
    """
    blocks: dict[str, HardBlock] = {}
    groups: list[SymmetryGroup] = []
    declared_blocks = 0
    declared_groups = 0

    for line_no, raw in enumerate(lines, 1):
        line = raw.rstrip("\r\n")
        if not line or line[0] in "/#":
            continue
        tokens = line.split()
        keyword = tokens[0] if tokens else ""
        args = tokens[1:]

        if keyword == "NumHardBlocks":
            declared_blocks = _int_field(args, 0, keyword, line_no)
            logger.info("Number of hard blocks: %d", declared_blocks)
        elif keyword == "HardBlock":
            name = _field(args, 0, keyword, line_no)
            width = _int_field(args, 1, keyword, line_no)
            height = _int_field(args, 2, keyword, line_no)
            blocks[name] = HardBlock(name, width, height)
            logger.info("Hard block: %s %d %d", name, width, height)
        elif keyword == "NumSymGroups":
            declared_groups = _int_field(args, 0, keyword, line_no)
            logger.info("Number of symmetry groups: %d", declared_groups)
        elif keyword == "SymGroup":
            name = _field(args, 0, keyword, line_no)
            groups.append(SymmetryGroup(name, SymmetryType.VERTICAL))
            logger.info("Symmetry group: %s", name)
        elif keyword == "SymPair":
            first = _field(args, 0, keyword, line_no)
            second = _field(args, 1, keyword, line_no)
            if not groups:
                raise ParseError(f"line {line_no}: SymPair defined outside of a SymGroup")
            groups[-1].add_symmetry_pair(first, second)
            logger.info("Symmetry pair: %s %s", first, second)
        elif keyword == "SymSelf":
            name = _field(args, 0, keyword, line_no)
            if not groups:
                raise ParseError(f"line {line_no}: SymSelf defined outside of a SymGroup")
            groups[-1].add_self_symmetric(name)
            logger.info("Self-symmetric module: %s", name)
        else:
            logger.warning("Unknown keyword %s", keyword)

    if len(blocks) != declared_blocks:
        raise ParseError(
            f"Number of hard blocks does not match: declared {declared_blocks}, "
            f"found {len(blocks)}"
        )
    if len(groups) != declared_groups:
        raise ParseError(
            f"Number of symmetry groups does not match: declared {declared_groups}, "
            f"found {len(groups)}"
        )

    for group in groups:
        for pair in group.symmetry_pairs:
            for name in pair:
                if name not in blocks:
                    raise ParseError(f"Module {name} in symmetry pair does not exist")
        for name in group.self_symmetric:
            if name not in blocks:
                raise ParseError(f"Self-symmetric module {name} does not exist")

    logger.info(
        "Successfully parsed %d modules and %d symmetry groups",
        len(blocks),
        len(groups),
    )
    return blocks, groups


def parse_input_file(
    path: StrPath,
) -> tuple[dict[str, HardBlock], list[SymmetryGroup]]:
    """Parse a problem description file."""
    with open(path, encoding="utf-8") as handle:
        return parse_input(handle)


def format_output(blocks: Mapping[str, HardBlock], total_area: int) -> str:
    """Render a placement result, blocks ordered by name."""
    lines = [f"Area {total_area}", f"NumHardBlocks {len(blocks)}"]
    for key in sorted(blocks):
        block = blocks[key]
        lines.append(
            f"{block.name} {block.x} {block.y} {1 if block.rotated else 0}"
        )
    return "\n".join(lines) + "\n"


def write_output_file(
    path: StrPath, blocks: Mapping[str, HardBlock], total_area: int
) -> None:
    """Write a placement result file."""
    with open(path, "w", encoding="utf-8", newline="\n") as handle:
        handle.write(format_output(blocks, total_area))
    logger.info("Successfully wrote output to %s", path)