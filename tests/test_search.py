"""Unit tests for the backtracking search engine."""

import pytest

from src.sudoku import solver_core
from src.sudoku.model import Puzzle
from src.sudoku.store import assign, initialize_store
from src.sudoku.topology import build_topology, make_digits
from src.utils.trace import get_tracer, reset_tracer


def _pattern_grid(bx, by):
    """A valid solved grid: value = (bx * (r % by) + r // by + c) % N."""
    topology = build_topology(bx, by)
    n = topology.size
    return {
        topology.square_at(r, c): str((bx * (r % by) + r // by + c) % n + 1)
        for r in range(n)
        for c in range(n)
    }


def test_mrv_picks_fewest_candidates_then_row_major():
    topology = build_topology(2, 2)
    store = {s: ("1", "2", "3", "4") for s in topology.squares}
    store["C3"] = ("2", "4")
    store["B4"] = ("1", "3")
    store["A1"] = ("1",)

    assert solver_core._select_unfilled_square(store, topology) == "B4"


def test_mrv_tie_break_uses_row_major_not_lexical_order():
    topology = build_topology(5, 2)  # N = 10, so "A10" sorts before "A2" lexically
    store = {s: tuple(make_digits(10)) for s in topology.squares}
    store["A10"] = ("1", "2")
    store["A2"] = ("3", "4")

    assert solver_core._select_unfilled_square(store, topology) == "A2"


def test_search_on_empty_grid_returns_valid_solution():
    topology = build_topology(2, 2)
    store = initialize_store({}, make_digits(4), topology)

    result = solver_core.search(store, topology)

    assert result is not None
    grid = solver_core.to_solved_grid(result)
    assert solver_core.is_solution(grid, topology, make_digits(4))


def test_search_is_deterministic():
    topology = build_topology(2, 3)
    store = initialize_store({}, make_digits(6), topology)

    first = solver_core.search(store, topology)
    second = solver_core.search(store, topology)

    assert first == second


def test_search_first_branch_follows_alphabet_order():
    topology = build_topology(2, 2)
    store = initialize_store({}, make_digits(4), topology)

    grid = solver_core.to_solved_grid(solver_core.search(store, topology))

    assert [grid[s] for s in ("A1", "A2", "A3", "A4")] == ["1", "2", "3", "4"]


def test_search_on_solved_store_returns_it_unchanged():
    topology = build_topology(2, 3)
    solution = _pattern_grid(2, 3)
    store = initialize_store(solution, make_digits(6), topology)

    assert solver_core.search(store, topology) is store


def test_search_reports_contradiction_when_no_branch_works():
    topology = build_topology(2, 2)
    store = initialize_store({}, make_digits(4), topology)
    # Leave A1 two candidates that both clash with the rest of its row.
    store = dict(store)
    store["A1"] = ("1", "2")
    store["A2"] = ("1", "2")
    store["A3"] = ("1", "2")

    assert solver_core.search(store, topology) is None


def test_search_passes_through_none():
    assert solver_core.search(None, build_topology(2, 2)) is None


def test_search_logs_branches_and_backtracks():
    reset_tracer()
    topology = build_topology(2, 2)
    store = initialize_store({}, make_digits(4), topology)
    store = dict(store)
    store["A1"] = ("1", "2")
    store["A2"] = ("1", "2")
    store["A3"] = ("1", "2")

    solver_core.search(store, topology)

    summary = get_tracer().summary()
    assert summary["num_assignments"] >= 2
    assert summary["num_backtracks"] >= 1
    reset_tracer()


def test_branch_does_not_leak_into_parent_store():
    topology = build_topology(2, 2)
    store = initialize_store({}, make_digits(4), topology)
    before = dict(store)

    solver_core.search(store, topology)

    assert store == before


@pytest.mark.parametrize("bx,by", [(2, 2), (2, 3), (3, 2), (3, 3)])
def test_round_trip_of_solved_grid(bx, by):
    topology = build_topology(bx, by)
    alphabet = make_digits(topology.size)
    solution = _pattern_grid(bx, by)
    assert solver_core.is_solution(solution, topology, alphabet)

    puzzle = Puzzle(topology=topology, clues=solution)
    assert solver_core.solve(puzzle) == solution


def test_to_solved_grid_requires_single_candidates():
    topology = build_topology(2, 2)
    store = initialize_store({}, make_digits(4), topology)
    with pytest.raises(ValueError):
        solver_core.to_solved_grid(store)


def test_is_solution_rejects_block_violation():
    topology = build_topology(2, 2)
    # Rows and columns are Latin but the top-left block repeats digits.
    rows = ["1234", "2341", "3412", "4123"]
    grid = {topology.square_at(r, c): rows[r][c] for r in range(4) for c in range(4)}
    assert not solver_core.is_solution(grid, topology, make_digits(4))


def test_assign_then_search_matches_solve_on_clue():
    topology = build_topology(2, 2)
    store = initialize_store({}, make_digits(4), topology)
    store = assign(store, "D4", "1", topology)

    grid = solver_core.to_solved_grid(solver_core.search(store, topology))

    assert grid["D4"] == "1"
    assert solver_core.is_solution(grid, topology, make_digits(4))
