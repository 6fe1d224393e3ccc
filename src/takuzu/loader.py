import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from .errors import TakuzuError
from .parser import parse_grid

PUZZLE_SUFFIXES = (".txt", ".json", ".jsonl", ".parquet")


def load_puzzles(file_path: str) -> List[Dict[str, Any]]:
    """
    Reads puzzles from a file. Handles plain grid text, .json, .jsonl and .parquet.
    Returns a list of {"id": ..., "grid": Grid} records.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    stem = Path(file_path).stem

    def _grid_text(value: Any) -> Optional[str]:
        if isinstance(value, str):
            return value
        # Lists of row strings (numpy arrays from parquet included).
        if hasattr(value, "tolist"):
            value = value.tolist()
        if isinstance(value, (list, tuple)) and all(isinstance(r, str) for r in value):
            return "\n".join(value)
        return None

    def _to_record(raw: Dict[str, Any], index: int) -> Optional[Dict[str, Any]]:
        puzzle_id = str(raw.get("id") or f"{stem}-{index}")
        text = _grid_text(raw.get("grid"))
        if text is None:
            print(f"Skipping puzzle {puzzle_id}: no grid field")
            return None
        try:
            grid = parse_grid(text)
        except TakuzuError as e:
            print(f"Skipping puzzle {puzzle_id}: {e}")
            return None
        return {"id": puzzle_id, "grid": grid}

    def _collect(raws: List[Any]) -> List[Dict[str, Any]]:
        records = []
        for index, raw in enumerate(raws):
            if not isinstance(raw, dict):
                continue
            record = _to_record(raw, index)
            if record is not None:
                records.append(record)
        return records

    def _read_jsonl() -> List[Dict[str, Any]]:
        raws = []
        with open(file_path, "r", encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue
                try:
                    raws.append(json.loads(line))
                except json.JSONDecodeError:
                    continue
        return _collect(raws)

    # Case 1: Parquet File (Binary)
    if file_path.endswith(".parquet"):
        df = pd.read_parquet(file_path)
        return _collect(df.to_dict(orient="records"))

    # Case 2: JSON File (Text; array or object)
    if file_path.endswith(".json"):
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except json.JSONDecodeError:
            # Some sources use ".json" but actually store JSONL; fall back to line-delimited parsing.
            return _read_jsonl()
        if isinstance(payload, list):
            return _collect(payload)
        if isinstance(payload, dict):
            return _collect([payload])
        return []

    # Case 3: JSONL File (Text)
    if file_path.endswith(".jsonl"):
        return _read_jsonl()

    # Case 4: plain grid text; format errors propagate to the caller
    with open(file_path, "r", encoding="utf-8") as f:
        grid = parse_grid(f.read())
    return [{"id": stem, "grid": grid}]


def load_grid_records(paths: List[str]) -> List[Dict[str, Any]]:
    """Load every puzzle from files or directories (directories are scanned one level deep)."""
    puzzles: List[Dict[str, Any]] = []
    for path in paths:
        p = Path(path)
        if p.is_file():
            puzzles.extend(load_puzzles(str(p)))
        elif p.is_dir():
            for file_path in sorted(p.iterdir()):
                if file_path.suffix in PUZZLE_SUFFIXES:
                    puzzles.extend(load_puzzles(str(file_path)))
        else:
            raise FileNotFoundError(f"Input path {path} is neither file nor directory")
    return puzzles

