import json
import os
from typing import Any, Dict, List

import pandas as pd

PUZZLE_TEXT_KEYS = ("puzzle", "quizzes", "grid", "question", "input")


def load_puzzles(file_path: str) -> List[Dict[str, Any]]:
    """
    Reads puzzles from a file. Handles .parquet, .csv, .json, .jsonl and
    plain text (one puzzle per line).
    Returns a list of raw puzzle dictionaries, each with an `id` and a 1-based `line`.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    def _is_nonempty_str(value: Any) -> bool:
        return isinstance(value, str) and value.strip() != ""

    def _extract_puzzle_text(record: Dict[str, Any]) -> str:
        for key in PUZZLE_TEXT_KEYS:
            if _is_nonempty_str(record.get(key)):
                return record[key]

        for value in record.values():
            if _is_nonempty_str(value):
                return value
        return ""

    def _normalize_record(record: Dict[str, Any], line: int) -> Dict[str, Any]:
        # Tabular sources hand back NaN for missing cells.
        record = {k: v for k, v in record.items() if v is not None and not (isinstance(v, float) and pd.isna(v))}
        record["puzzle"] = _extract_puzzle_text(record).rstrip("\r\n")
        record.setdefault("line", line)
        record.setdefault("id", f"line-{line}")
        record["id"] = str(record["id"])
        return record

    # Case 1: Tabular files
    if file_path.endswith(".parquet") or file_path.endswith(".csv"):
        if file_path.endswith(".parquet"):
            df = pd.read_parquet(file_path)
        else:
            df = pd.read_csv(file_path, dtype=str, keep_default_na=False)
        records = df.to_dict(orient="records")
        return [_normalize_record(r, i + 1) for i, r in enumerate(records)]

    # Case 2: JSON File (array or object)
    if file_path.endswith(".json"):
        with open(file_path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        if isinstance(payload, dict):
            payload = [payload]
        if not isinstance(payload, list):
            raise ValueError(f"Unsupported JSON payload in {file_path}")
        return [_normalize_record(p, i + 1) for i, p in enumerate(payload) if isinstance(p, dict)]

    # Case 3: JSONL File
    if file_path.endswith(".jsonl"):
        data = []
        with open(file_path, "r", encoding="utf-8") as f:
            for i, line in enumerate(f):
                if not line.strip():
                    continue
                obj = json.loads(line)
                if isinstance(obj, dict):
                    data.append(_normalize_record(obj, i + 1))
        return data

    # Case 4: one puzzle per line; blank lines are kept so numbering matches the file.
    data = []
    with open(file_path, "r", encoding="utf-8") as f:
        for i, line in enumerate(f):
            data.append(_normalize_record({"puzzle": line}, i + 1))
    return data


def select_line(puzzles: List[Dict[str, Any]], line: int) -> Dict[str, Any]:
    """Pick the puzzle read from the given 1-based line (or record) number."""
    for puzzle in puzzles:
        if puzzle.get("line") == line:
            return puzzle
    raise ValueError(f"Line {line} not found; the file holds {len(puzzles)} puzzle(s)")
