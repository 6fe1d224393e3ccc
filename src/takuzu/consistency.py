"""Consistency predicates over partially filled grids. Nothing here mutates a grid."""

from typing import Iterator, List, Optional, Sequence, Tuple

from .errors import InvalidArgumentError
from .model import Cell, Choice, Grid

Line = Sequence[Cell]


def _require_grid(grid: Optional[Grid]) -> Grid:
    if grid is None or not isinstance(grid, Grid):
        raise InvalidArgumentError("Invalid grid reference: expected a Grid")
    return grid


def has_triple_run(line: Line) -> bool:
    """True when three consecutive assigned cells share a value."""
    run_value = Cell.EMPTY
    run_length = 0
    for cell in line:
        if cell is Cell.EMPTY:
            run_value, run_length = Cell.EMPTY, 0
            continue
        if cell is run_value:
            run_length += 1
        else:
            run_value, run_length = cell, 1
        if run_length > 2:
            return True
    return False


def is_balanced_within_bound(line: Line) -> bool:
    half = len(line) // 2
    zeros = sum(1 for c in line if c is Cell.ZERO)
    ones = sum(1 for c in line if c is Cell.ONE)
    return zeros <= half and ones <= half


def lines_identical(first: Line, second: Line) -> bool:
    """Lines only count as identical when both are fully assigned and equal."""
    for a, b in zip(first, second):
        if a is Cell.EMPTY or a is not b:
            return False
    return len(first) == len(second)


def _duplicate_pairs(lines: List[Tuple[Cell, ...]]) -> List[Tuple[int, int]]:
    pairs = []
    for i in range(len(lines)):
        for j in range(i + 1, len(lines)):
            if lines_identical(lines[i], lines[j]):
                pairs.append((i, j))
    return pairs


def find_duplicate_rows(grid: Grid) -> List[Tuple[int, int]]:
    return _duplicate_pairs(list(_require_grid(grid).rows()))


def find_duplicate_columns(grid: Grid) -> List[Tuple[int, int]]:
    return _duplicate_pairs(list(_require_grid(grid).columns()))


def _has_duplicate_line(lines: List[Tuple[Cell, ...]]) -> bool:
    # Only fully assigned lines can collide.
    full = [line for line in lines if Cell.EMPTY not in line]
    return len(set(full)) != len(full)


def is_consistent(grid: Grid) -> bool:
    """Check the no-triple, no-duplicate, and balance-bound rules on a partial grid."""
    grid = _require_grid(grid)
    rows = list(grid.rows())
    columns = list(grid.columns())

    if _has_duplicate_line(rows) or _has_duplicate_line(columns):
        return False

    for line in rows + columns:
        if not is_balanced_within_bound(line):
            return False
        if has_triple_run(line):
            return False
    return True


def is_valid(grid: Grid) -> bool:
    """A complete grid that also passes every consistency rule."""
    grid = _require_grid(grid)
    return grid.is_full() and is_consistent(grid)


def _line_with(line: Line, index: int, value: Cell) -> Tuple[Cell, ...]:
    updated = list(line)
    updated[index] = value
    return tuple(updated)


def _line_fits(line: Tuple[Cell, ...], index: int, lines: Iterator[Tuple[Cell, ...]]) -> bool:
    if not is_balanced_within_bound(line) or has_triple_run(line):
        return False
    if Cell.EMPTY in line:
        return True
    return all(other != line for i, other in enumerate(lines) if i != index)


def check_consistency_after_placement(grid: Grid, choice: Choice) -> bool:
    """
    Would `choice` keep a consistent grid consistent?

    Only the row and the column through the chosen cell can change, so only
    those two lines are checked against the rules; the rest of the grid is
    assumed consistent already. The given grid is left untouched.
    """
    grid = _require_grid(grid)
    grid.get(choice.row, choice.col)
    row = _line_with(grid.row(choice.row), choice.col, choice.value)
    column = _line_with(grid.column(choice.col), choice.row, choice.value)
    return (
        _line_fits(row, choice.row, grid.rows())
        and _line_fits(column, choice.col, grid.columns())
    )


def violations(grid: Grid) -> List[str]:
    """Human-readable list of every rule the grid currently breaks."""
    grid = _require_grid(grid)
    found: List[str] = []

    for row1, row2 in find_duplicate_rows(grid):
        found.append(f"Identical rows found: {row1} {row2}")
    for col1, col2 in find_duplicate_columns(grid):
        found.append(f"Identical columns found: {col1} {col2}")

    for kind, lines in (("row", list(grid.rows())), ("column", list(grid.columns()))):
        for index, line in enumerate(lines):
            if not is_balanced_within_bound(line):
                found.append(f"Invalid number of zeros or ones in {kind} {index}")
            if has_triple_run(line):
                found.append(f"Invalid consecutive zeros or ones in {kind} {index}")
    return found
