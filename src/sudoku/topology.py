"""Grid topology: squares, units and peers for arbitrary rectangular blocks."""

from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Sequence, Tuple

Square = str
Unit = Tuple[Square, ...]


def number_to_alpha(number: int) -> str:
    """Convert 1 -> A, 26 -> Z, 27 -> AA (bijective base 26)."""
    letters = ""
    while number > 0:
        number, remainder = divmod(number - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def make_digits(size: int) -> Tuple[str, ...]:
    return tuple(str(i + 1) for i in range(size))


def make_rows(size: int) -> Tuple[str, ...]:
    return tuple(number_to_alpha(i + 1) for i in range(size))


def cross(a: Sequence[str], b: Sequence[str]) -> Unit:
    return tuple(x + y for x in a for y in b)


def make_unit_list(rows: Sequence[str], columns: Sequence[str], bx: int, by: int) -> List[Unit]:
    """
    Column units, then row units, then block units.

    A block is `by` rows tall and `bx` columns wide, so there are `bx` bands
    of rows and `by` stacks of columns.
    """
    unit_list: List[Unit] = [cross(rows, (c,)) for c in columns]
    unit_list.extend(cross((r,), columns) for r in rows)
    for band in range(bx):
        sub_rows = rows[band * by:(band + 1) * by]
        for stack in range(by):
            sub_columns = columns[stack * bx:(stack + 1) * bx]
            unit_list.append(cross(sub_rows, sub_columns))
    return unit_list


def make_units(squares: Sequence[Square], unit_list: Sequence[Unit]) -> Dict[Square, Tuple[Unit, ...]]:
    units: Dict[Square, List[Unit]] = {s: [] for s in squares}
    for unit in unit_list:
        for square in unit:
            units[square].append(unit)
    return {s: tuple(u) for s, u in units.items()}


def make_peers(
    squares: Sequence[Square], units: Dict[Square, Tuple[Unit, ...]], index: Dict[Square, int]
) -> Dict[Square, Unit]:
    peers: Dict[Square, Unit] = {}
    for square in squares:
        members = {peer for unit in units[square] for peer in unit if peer != square}
        # Row-major order keeps propagation reproducible.
        peers[square] = tuple(sorted(members, key=index.__getitem__))
    return peers


@dataclass
class Topology:
    """
    Squares, units and peers of an N x N grid made of bx x by blocks.

    bx is the block width and by the block height; N = bx * by. Rows are
    labelled A, B, ..., Z, AA, ... and columns 1..N, so "A1" is the top-left
    square. `squares` is in row-major order and every derived container is
    ordered, so nothing downstream depends on set iteration order.
    """

    bx: int
    by: int

    def __post_init__(self) -> None:
        if self.bx < 1 or self.by < 1:
            raise ValueError(f"Block dimensions must be positive, got {self.bx}x{self.by}")

        self.size: int = self.bx * self.by
        self.rows: Tuple[str, ...] = make_rows(self.size)
        self.columns: Tuple[str, ...] = make_digits(self.size)
        self.squares: Unit = cross(self.rows, self.columns)
        self.index: Dict[Square, int] = {s: i for i, s in enumerate(self.squares)}

        self.unit_list: Tuple[Unit, ...] = tuple(
            make_unit_list(self.rows, self.columns, self.bx, self.by)
        )
        self.units: Dict[Square, Tuple[Unit, ...]] = make_units(self.squares, self.unit_list)
        self.peers: Dict[Square, Unit] = make_peers(self.squares, self.units, self.index)

    @property
    def peer_count(self) -> int:
        """Peers per square; row and column peers inside the block are counted once."""
        return 3 * (self.size - 1) - (self.bx - 1) - (self.by - 1)

    def square_at(self, row: int, column: int) -> Square:
        return self.squares[row * self.size + column]


@lru_cache(maxsize=None)
def build_topology(bx: int, by: int) -> Topology:
    """Build (once per block configuration) the topology for bx x by blocks."""
    return Topology(bx, by)
