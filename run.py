"""CLI entrypoint: load a puzzle line, run the solver, and print the grids."""

import argparse
import csv
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from tqdm import tqdm

from solver import solve_puzzle
from src.sudoku.loader import load_puzzles, select_line
from src.sudoku.model import Puzzle
from src.sudoku.parser import grid_to_line, parse_puzzle
from src.sudoku.solver_core import is_solution
from src.sudoku.topology import Topology
from src.utils.trace import get_tracer, reset_tracer

INPUT_MODES = ("one-line",)


def parse_args(argv: Optional[Sequence[str]] = None):
    parser = argparse.ArgumentParser(description="Solve generalized Sudoku puzzles of any block size")
    parser.add_argument("-m", "--mode", default="one-line", help="Input mode used to interpret the input file")
    parser.add_argument(
        "-del",
        "--delimiter",
        dest="delimiter",
        default="",
        help="Delimiter between squares on a puzzle line (empty = one character per square)",
    )
    parser.add_argument("-e", "--empty", default=".", help="Token used for an empty square")
    parser.add_argument(
        "-d",
        "--dim",
        default="3x3",
        help="Dimensions of one block as WIDTHxHEIGHT (standard sudoku is 3x3)",
    )
    parser.add_argument(
        "-f",
        "--file",
        type=Path,
        default=Path(os.environ.get("SUDOKU_PUZZLE_FILE", "puzzles.txt")),
        help="Puzzle file (.txt, .csv, .parquet, .json, .jsonl)",
    )
    parser.add_argument("-l", "--line", type=int, default=1, help="1-based line of the puzzle to solve")
    parser.add_argument("--all", action="store_true", help="Solve every puzzle in the file")
    parser.add_argument("--output", type=Path, default=None, help="Optional CSV path to write solutions")
    parser.add_argument("--trace", type=Path, default=None, help="Optional CSV path to write the solver trace")
    parser.add_argument("--verify", action="store_true", help="Check every solution against all units")
    parser.add_argument("--quiet", action="store_true", help="Do not print grids")
    return parser.parse_args(argv)


def cell_width(grid: Dict[str, Optional[str]], topology: Topology) -> int:
    labels = [len(v) for v in grid.values() if v is not None]
    return max([len(str(topology.size))] + labels)


def format_grid(grid: Dict[str, Optional[str]], topology: Topology) -> str:
    """Draw the grid with a rule every `by` rows and a bar every `bx` columns."""
    width = cell_width(grid, topology)
    # One bar between each of the `by` stacks of columns.
    rule = "-" * ((topology.by - 1) + (width + 2) * topology.size)
    lines: List[str] = []

    for r in range(topology.size):
        if r > 0 and r % topology.by == 0:
            lines.append(rule)
        cells = []
        for c in range(topology.size):
            if c > 0 and c % topology.bx == 0:
                cells.append("|")
            value = grid.get(topology.square_at(r, c))
            cells.append(f"{value or '':>{width + 1}} ")
        lines.append("".join(cells))
    return "\n".join(lines)


def write_results_csv(results: List[Dict[str, Any]], output_path: Path):
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "solution", "steps"])

        for r in results:
            writer.writerow([r["id"], r["solution"], r["steps"]])


def _trace_path(base: Path, puzzle_id: str, batch: bool) -> Path:
    if not batch:
        return base
    return base.with_name(f"{base.stem}_{puzzle_id}{base.suffix}")


def _load(args) -> List[Puzzle]:
    if args.mode not in INPUT_MODES:
        raise ValueError(f"No appropriate input mode for the puzzle was entered: {args.mode!r}")

    records = load_puzzles(str(args.file))
    if args.all:
        selected = [r for r in records if r["puzzle"].strip()]
    else:
        selected = [select_line(records, args.line)]

    defaults = {"size": args.dim, "delimiter": args.delimiter, "empty": args.empty}
    puzzles = []
    for record in selected:
        # Blank cells in tabular files must not override the command-line options.
        given = {k: v for k, v in record.items() if v not in ("", None)}
        puzzles.append(parse_puzzle({**defaults, **given}))
    return puzzles


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    try:
        puzzles = _load(args)
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}")
        return 2

    results = []
    elapsed = 0.0
    unsolved = 0
    iterator = tqdm(puzzles, desc="Solving", unit="puzzle") if args.all else puzzles

    for puzzle in iterator:
        reset_tracer()
        tracer = get_tracer()

        solution = solve_puzzle(puzzle)
        if solution and args.verify and not is_solution(solution, puzzle.topology, puzzle.alphabet):
            print(f"ERROR: Solution for {puzzle.puzzle_id} breaks a unit constraint")
            solution = {}

        summary = tracer.summary()
        elapsed += summary["elapsed_time_seconds"]
        if not solution:
            unsolved += 1

        if not args.quiet and not args.all:
            print()
            print("Original Puzzle:")
            print(format_grid(puzzle.clues, puzzle.topology))
            print()
            if solution:
                print("Solved Puzzle:")
                print(format_grid(solution, puzzle.topology))
            else:
                print("No viable solution to the puzzle was found.")
            print()

        if args.trace:
            tracer.to_csv(_trace_path(args.trace, puzzle.puzzle_id, args.all))

        results.append({
            "id": puzzle.puzzle_id,
            "solution": grid_to_line(solution, puzzle.topology, args.delimiter, args.empty) if solution else "",
            # Branch decisions are the measure of search effort; propagation is not counted.
            "steps": summary["num_assignments"],
        })

    if args.output:
        write_results_csv(results, args.output)
    if args.all:
        print(f"Solved {len(results) - unsolved}/{len(results)} puzzles")

    print(f"Execution completed in {elapsed:.6f}s")
    return 1 if unsolved else 0


if __name__ == "__main__":
    sys.exit(main())
