"""Library entry point: solve one Sudoku puzzle without going through the CLI.

The same engine backs `run.py`; callers pass either a parsed `Puzzle` or a
record dict (puzzle line, block size "AxB", delimiter, empty token, alphabet).
"""

from typing import Any, Dict

from src.sudoku import solver_core
from src.sudoku.model import Puzzle
from src.sudoku.parser import parse_puzzle


def solve_puzzle(puzzle: Any) -> Dict[str, str]:
    """Return square -> digit for the first solution found, or {} if none exists."""
    if isinstance(puzzle, Puzzle):
        parsed = puzzle
    elif isinstance(puzzle, dict):
        parsed = parse_puzzle(puzzle)
    else:
        raise TypeError("solve_puzzle expects a Puzzle instance or puzzle dictionary")

    return solver_core.solve(parsed)


__all__ = ["solve_puzzle"]
