"""Puzzle parser: convert one-line puzzle text into clue grids.

The one-line format lists the N*N squares in row-major order, separated by a
configurable delimiter (empty delimiter = one character per square), with a
configurable token for empty squares. Tokens outside the digit alphabet are
kept and later treated as "no clue".
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .model import ClueGrid, Puzzle
from .topology import Topology, build_topology

DEFAULT_DIMENSIONS = "3x3"
DEFAULT_DELIMITER = ""
DEFAULT_EMPTY_VALUE = "."


def parse_dimensions(text: str) -> Tuple[int, int]:
    """Parse block dimensions written as "AxB" (block width x block height)."""
    match = re.fullmatch(r"\s*(\d+)\s*[xX*]\s*(\d+)\s*", str(text))
    if not match:
        raise ValueError(f"Block dimensions must look like 'AxB', got {text!r}")
    bx, by = int(match.group(1)), int(match.group(2))
    if bx < 1 or by < 1:
        raise ValueError(f"Block dimensions must be positive, got {text!r}")
    return bx, by


def split_tokens(text: str, delimiter: str = DEFAULT_DELIMITER) -> List[str]:
    if delimiter == "":
        return list(text)
    return text.split(delimiter)


def parse_line(
    text: str,
    topology: Topology,
    delimiter: str = DEFAULT_DELIMITER,
    empty_value: str = DEFAULT_EMPTY_VALUE,
) -> ClueGrid:
    """Read one puzzle line into square -> token (None for empty squares)."""
    tokens = split_tokens(text.rstrip("\r\n"), delimiter)
    expected = len(topology.squares)
    if len(tokens) < expected:
        raise ValueError(
            f"Puzzle line has {len(tokens)} squares, expected {expected} "
            f"for {topology.bx}x{topology.by} blocks"
        )

    # Trailing tokens beyond N*N are ignored.
    clues: ClueGrid = {}
    for square, token in zip(topology.squares, tokens):
        clues[square] = None if token == empty_value else token
    return clues


def grid_to_line(
    grid: Dict[str, Optional[str]],
    topology: Topology,
    delimiter: str = DEFAULT_DELIMITER,
    empty_value: str = DEFAULT_EMPTY_VALUE,
) -> str:
    """Serialize a clue or solved grid back to the one-line format."""
    tokens = []
    for square in topology.squares:
        token = grid.get(square)
        tokens.append(empty_value if token is None else token)
    return delimiter.join(tokens)


def parse_puzzle(puzzle_json: Dict[str, Any]) -> Puzzle:
    """
    Build a Puzzle from a raw record.
    Recognized keys: puzzle (line text), size ("AxB"), delimiter, empty,
    alphabet (sequence of labels), id.
    """
    text = puzzle_json.get("puzzle")
    if not isinstance(text, str):
        raise ValueError(f"Puzzle record has no puzzle text: {puzzle_json.get('id', 'unknown')}")

    bx, by = parse_dimensions(puzzle_json.get("size") or DEFAULT_DIMENSIONS)
    topology = build_topology(bx, by)

    delimiter = puzzle_json.get("delimiter") or DEFAULT_DELIMITER
    empty_value = puzzle_json.get("empty") or DEFAULT_EMPTY_VALUE
    clues = parse_line(text, topology, delimiter=delimiter, empty_value=empty_value)

    alphabet: Sequence[str] = puzzle_json.get("alphabet") or ()
    return Puzzle(
        topology=topology,
        clues=clues,
        alphabet=tuple(str(a) for a in alphabet),
        puzzle_id=str(puzzle_json.get("id", "unknown")),
    )
