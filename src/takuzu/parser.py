"""Puzzle text format: parse grid files and render grids back to text.

Format:
- '#' starts a comment running to the end of the line; blank lines are ignored
- each remaining line is one row of '0', '1' or '_' symbols, separated by
  whitespace or written back to back
- the first row fixes the size N, which must be one of SUPPORTED_SIZES, and
  exactly N rows of N symbols must follow
"""

from __future__ import annotations

from typing import List, Tuple

from .errors import GridFormatError, InvalidSymbolError
from .model import Cell, Grid

SUPPORTED_SIZES: Tuple[int, ...] = (4, 8, 16, 32, 64)
COMMENT_CHAR = "#"


def _strip_comment(line: str) -> str:
    return line.split(COMMENT_CHAR, 1)[0]


def _parse_row(text: str, line_number: int) -> List[Cell]:
    cells: List[Cell] = []
    for ch in text:
        if ch.isspace():
            continue
        try:
            cells.append(Cell.from_symbol(ch))
        except InvalidSymbolError as exc:
            raise InvalidSymbolError(f"line {line_number}: {exc}") from exc
    return cells


def parse_grid(text: str) -> Grid:
    rows: List[Tuple[int, List[Cell]]] = []
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        content = _strip_comment(raw_line).strip()
        if not content:
            continue
        rows.append((line_number, _parse_row(content, line_number)))

    if not rows:
        raise GridFormatError("no grid found")

    first_line, first_row = rows[0]
    size = len(first_row)
    if size not in SUPPORTED_SIZES:
        raise GridFormatError(
            f"invalid grid size {size}; expected one of {', '.join(map(str, SUPPORTED_SIZES))}",
            line=first_line,
        )

    for line_number, cells in rows:
        if len(cells) != size:
            raise GridFormatError(f"row has {len(cells)} cells, expected {size}", line=line_number)
    if len(rows) != size:
        last_line = rows[-1][0]
        raise GridFormatError(f"grid has {len(rows)} rows, expected {size}", line=last_line)

    return Grid.from_rows([cells for _, cells in rows])


def format_grid(grid: Grid) -> str:
    """One line per row, symbols space-separated, Empty cells as '_'."""
    return str(grid) + "\n"
