"""Puzzle-level data structures shared by the store, solver and adapters."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .topology import Square, Topology, make_digits

ClueGrid = Dict[Square, Optional[str]]
Candidates = Dict[Square, Tuple[str, ...]]
SolvedGrid = Dict[Square, str]


@dataclass
class Puzzle:
    """
    A clue grid together with the topology and digit alphabet it is read against.

    `clues` maps each square to its raw clue token, or None when the square is
    empty. Tokens that are not in the alphabet are kept as-is here and treated
    as "no clue" when the store is initialized.
    """

    topology: Topology
    clues: ClueGrid
    alphabet: Tuple[str, ...] = field(default_factory=tuple)
    puzzle_id: str = "unknown"

    def __post_init__(self) -> None:
        if not self.alphabet:
            self.alphabet = make_digits(self.topology.size)
        self.alphabet = tuple(self.alphabet)
        if len(self.alphabet) != self.topology.size:
            raise ValueError(
                f"Alphabet has {len(self.alphabet)} labels, expected {self.topology.size}"
            )
        if len(set(self.alphabet)) != len(self.alphabet):
            raise ValueError("Alphabet labels must be unique")

        unknown = [s for s in self.clues if s not in self.topology.index]
        if unknown:
            raise ValueError(f"Clue grid has squares outside the topology: {unknown[:5]}")
