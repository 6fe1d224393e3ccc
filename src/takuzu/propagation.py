"""Rule-based deduction: fill forced cells until the grid stops changing."""

import sys
from typing import Callable, List, Optional, Tuple

from .consistency import is_consistent, violations
from .model import BINARY_VALUES, Cell, Grid, SolverOptions
from src.utils.trace import Tracer

Rule = Callable[[Grid], int]


def _fill(grid: Grid, row: int, col: int, value: Cell) -> int:
    # Rules only ever write into Empty cells.
    if grid.get(row, col) is Cell.EMPTY:
        grid.set(row, col, value)
        return 1
    return 0


def _saturate_line(grid: Grid, coords: List[Tuple[int, int]]) -> int:
    half = grid.size // 2
    line = [grid.get(r, c) for r, c in coords]
    filled = 0
    for value in BINARY_VALUES:
        if line.count(value) == half:
            for r, c in coords:
                filled += _fill(grid, r, c, value.opposite())
            break
    return filled


def apply_saturation_rows(grid: Grid) -> int:
    """A row already holding N/2 of one value gets the other value everywhere else."""
    filled = 0
    for i in range(grid.size):
        filled += _saturate_line(grid, [(i, j) for j in range(grid.size)])
    return filled


def apply_saturation_columns(grid: Grid) -> int:
    filled = 0
    for j in range(grid.size):
        filled += _saturate_line(grid, [(i, j) for i in range(grid.size)])
    return filled


def _complete_runs(grid: Grid, coords: List[Tuple[int, int]]) -> int:
    filled = 0
    n = len(coords)
    for k in range(n - 1):
        first = grid.get(*coords[k])
        if first is Cell.EMPTY or grid.get(*coords[k + 1]) is not first:
            continue
        blocker = first.opposite()
        if k + 2 < n:
            filled += _fill(grid, *coords[k + 2], blocker)
        elif k - 1 >= 0:
            # Pair sits on the board edge: block it from the other side.
            filled += _fill(grid, *coords[k - 1], blocker)
    return filled


def apply_run_completion_rows(grid: Grid) -> int:
    """Two equal neighbours force the opposite value right after them (or before, at the edge)."""
    filled = 0
    for i in range(grid.size):
        filled += _complete_runs(grid, [(i, j) for j in range(grid.size)])
    return filled


def apply_run_completion_columns(grid: Grid) -> int:
    filled = 0
    for j in range(grid.size):
        filled += _complete_runs(grid, [(i, j) for i in range(grid.size)])
    return filled


def apply_sandwich(grid: Grid) -> int:
    """An Empty cell between two equal values takes the opposite value (rows, then columns)."""
    filled = 0
    size = grid.size
    for i in range(size):
        for j in range(size):
            if grid.get(i, j) is not Cell.EMPTY:
                continue
            if 0 < j < size - 1:
                left, right = grid.get(i, j - 1), grid.get(i, j + 1)
                if left is not Cell.EMPTY and left is right:
                    filled += _fill(grid, i, j, left.opposite())
                    continue
            if 0 < i < size - 1:
                up, down = grid.get(i - 1, j), grid.get(i + 1, j)
                if up is not Cell.EMPTY and up is down:
                    filled += _fill(grid, i, j, up.opposite())
    return filled


# Evaluation order is fixed so traces are reproducible.
RULES: Tuple[Tuple[str, Rule], ...] = (
    ("saturation_rows", apply_saturation_rows),
    ("saturation_columns", apply_saturation_columns),
    ("run_completion_rows", apply_run_completion_rows),
    ("run_completion_columns", apply_run_completion_columns),
    ("sandwich", apply_sandwich),
)


def propagate_once(grid: Grid, tracer: Optional[Tracer] = None) -> int:
    """Run every rule a single time, in order. Returns the number of cells filled."""
    tracer = tracer or Tracer(enabled=False)
    total = 0
    for name, rule in RULES:
        filled = rule(grid)
        if filled:
            tracer.log_propagation(rule=name, cells_filled=filled)
            total += filled
    return total


def propagate_to_fixpoint(
    grid: Grid, options: Optional[SolverOptions] = None, tracer: Optional[Tracer] = None
) -> int:
    """
    Apply the rule battery until a full pass changes nothing.
    An inconsistent grid is refused up front and left untouched.
    Returns the total number of cells filled.
    """
    options = options or SolverOptions()
    tracer = tracer or Tracer(enabled=False)

    if not is_consistent(grid):
        tracer.log_consistency_check(is_valid=False, reason="Inconsistent grid; propagation refused")
        if options.verbose:
            print("Warning: Inconsistent grid. No need to try solving it!", file=sys.stderr)
            for problem in violations(grid):
                print(f"  - {problem}", file=sys.stderr)
        return 0

    total = 0
    while True:
        filled = propagate_once(grid, tracer)
        if not filled:
            return total
        total += filled
