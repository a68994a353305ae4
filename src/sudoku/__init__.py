"""Topology, candidate store, search and parsing for generalized Sudoku puzzles."""

from .model import Puzzle
from .topology import Topology, build_topology
from .store import assign, eliminate, initialize_store
from .solver_core import search, solve, to_solved_grid
from .parser import parse_puzzle

__all__ = [
    "Puzzle",
    "Topology",
    "build_topology",
    "assign",
    "eliminate",
    "initialize_store",
    "search",
    "solve",
    "to_solved_grid",
    "parse_puzzle",
]
