import json
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from src.sudoku.loader import load_puzzles, select_line


def test_text_file_keeps_line_numbers_across_blank_lines():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "puzzles.txt"
        path.write_text("1" + "." * 15 + "\n\n" + "." * 15 + "4\n")

        puzzles = load_puzzles(str(path))

    assert [p["line"] for p in puzzles] == [1, 2, 3]
    assert puzzles[1]["puzzle"] == ""
    assert select_line(puzzles, 3)["puzzle"] == "." * 15 + "4"
    assert select_line(puzzles, 1)["id"] == "line-1"


def test_select_line_out_of_range():
    with pytest.raises(ValueError, match="holds 1 puzzle"):
        select_line([{"line": 1, "puzzle": "."}], 4)


def test_missing_file_raises():
    with pytest.raises(FileNotFoundError):
        load_puzzles("/nonexistent/puzzles.txt")


def test_csv_file_reads_puzzle_column():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "puzzles.csv"
        pd.DataFrame(
            {"quizzes": ["0" * 81, "1" + "0" * 80], "solutions": ["x" * 81, "y" * 81]}
        ).to_csv(path, index=False)

        puzzles = load_puzzles(str(path))

    assert len(puzzles) == 2
    assert puzzles[1]["puzzle"] == "1" + "0" * 80
    assert puzzles[1]["line"] == 2


def test_csv_file_keeps_size_column():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "puzzles.csv"
        pd.DataFrame({"id": ["six"], "puzzle": ["." * 36], "size": ["2x3"]}).to_csv(path, index=False)

        puzzles = load_puzzles(str(path))

    assert puzzles[0]["id"] == "six"
    assert puzzles[0]["size"] == "2x3"


def test_json_array_and_jsonl():
    with tempfile.TemporaryDirectory() as tmpdir:
        array_path = Path(tmpdir) / "puzzles.json"
        array_path.write_text(json.dumps([{"id": "a", "puzzle": "." * 16}, {"id": "b", "puzzle": "1" * 16}]))
        lines_path = Path(tmpdir) / "puzzles.jsonl"
        lines_path.write_text(json.dumps({"puzzle": "." * 16, "size": "2x2"}) + "\n\n")

        from_array = load_puzzles(str(array_path))
        from_lines = load_puzzles(str(lines_path))

    assert [p["id"] for p in from_array] == ["a", "b"]
    assert from_lines == [{"puzzle": "." * 16, "size": "2x2", "line": 1, "id": "line-1"}]


def test_parquet_file_reads_puzzle_column():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "puzzles.parquet"
        pd.DataFrame({"id": [10, 11], "puzzle": ["." * 16, "1" + "." * 15], "size": ["2x2", None]}).to_parquet(path)

        puzzles = load_puzzles(str(path))

    assert [p["id"] for p in puzzles] == ["10", "11"]
    assert puzzles[1]["puzzle"] == "1" + "." * 15
    assert puzzles[0]["size"] == "2x2"
    assert "size" not in puzzles[1]
    assert [p["line"] for p in puzzles] == [1, 2]
