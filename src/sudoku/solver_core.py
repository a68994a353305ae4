"""Depth-first Sudoku search with MRV branching over candidate-store snapshots."""

from typing import Iterator, List, Optional, Sequence, Tuple

from .model import Candidates, Puzzle, SolvedGrid
from .store import assign, initialize_store, is_solved
from .topology import Square, Topology
from src.utils.trace import Tracer, get_tracer

# (branch square, digits not yet tried, store the branch was taken from)
Frame = Tuple[Square, Iterator[str], Candidates]


def solve(puzzle: Puzzle, tracer: Optional[Tracer] = None) -> SolvedGrid:
    """
    Propagate the clues, then search what propagation leaves open.
    Returns a mapping square -> digit. Empty dict if unsatisfiable.
    """
    tracer = tracer or get_tracer()
    values = initialize_store(puzzle.clues, puzzle.alphabet, puzzle.topology, tracer)
    if values is None:
        return {}

    result = search(values, puzzle.topology, tracer)
    if result is None:
        return {}
    return to_solved_grid(result)


def search(
    store: Optional[Candidates], topology: Topology, tracer: Optional[Tracer] = None
) -> Optional[Candidates]:
    """
    Backtracking search; the first solution in branch order wins.

    Branch frames live on an explicit stack instead of the call stack, so the
    depth (at most one frame per square) is not bounded by the recursion limit.
    Returns a fully solved store, or None when every branch is a contradiction.
    """
    tracer = tracer or get_tracer()
    if store is None:
        return None
    if is_solved(store):
        tracer.log_solution_found(depth=0)
        return store

    square = _select_unfilled_square(store, topology)
    stack: List[Frame] = [(square, iter(store[square]), store)]

    while stack:
        square, digits, parent = stack[-1]
        digit = next(digits, None)
        if digit is None:
            stack.pop()
            tracer.log_backtrack(square)
            continue

        tracer.log_assign(square, digit, candidates=len(parent[square]), depth=len(stack))
        child = assign(parent, square, digit, topology, tracer)
        if child is None:
            continue

        if is_solved(child):
            tracer.log_solution_found(depth=len(stack))
            return child

        next_square = _select_unfilled_square(child, topology)
        stack.append((next_square, iter(child[next_square]), child))

    return None


def _select_unfilled_square(store: Candidates, topology: Topology) -> Square:
    unfilled = [s for s in topology.squares if len(store[s]) > 1]
    # Minimum Remaining Values (MRV) heuristic; ties go to the first square in row-major order.
    return min(unfilled, key=lambda s: (len(store[s]), topology.index[s]))


def to_solved_grid(store: Candidates) -> SolvedGrid:
    """Project a solved store onto square -> digit."""
    unsolved = [s for s, candidates in store.items() if len(candidates) != 1]
    if unsolved:
        raise ValueError(f"Store is not solved; open squares: {unsolved[:5]}")
    return {s: candidates[0] for s, candidates in store.items()}


def is_solution(grid: SolvedGrid, topology: Topology, alphabet: Sequence[str]) -> bool:
    """Check that every row, column and block holds each digit exactly once."""
    expected = sorted(alphabet)
    if any(s not in grid for s in topology.squares):
        return False
    for unit in topology.unit_list:
        if sorted(grid[s] for s in unit) != expected:
            return False
    return True
