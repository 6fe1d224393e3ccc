"""Backtracking Takuzu search with propagation at every node and snapshot-based restore."""

import sys
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from .consistency import check_consistency_after_placement, is_consistent, is_valid, violations
from .errors import InvalidArgumentError
from .model import BINARY_VALUES, Choice, Grid, Mode, SolverOptions
from .propagation import propagate_to_fixpoint
from src.utils.trace import Tracer

# Frames kept free for callers on top of one frame per decision level.
RECURSION_MARGIN = 1000


class SolveStatus(Enum):
    SOLVED = "solved"
    ALREADY_VALID = "already_valid"
    NO_SOLUTION = "no_solution"


@dataclass
class SearchResult:
    status: SolveStatus
    solutions: List[Grid] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return bool(self.solutions)


def solve(
    grid: Grid,
    mode: Optional[Mode] = None,
    options: Optional[SolverOptions] = None,
    tracer: Optional[Tracer] = None,
) -> List[Grid]:
    """
    Solve a grid and return its solutions as independent copies.
    Mode.FIRST yields at most one grid, Mode.ALL yields every solution.
    The given grid is never modified.
    """
    return search(grid, mode=mode, options=options, tracer=tracer).solutions


def search(
    grid: Grid,
    mode: Optional[Mode] = None,
    options: Optional[SolverOptions] = None,
    tracer: Optional[Tracer] = None,
) -> SearchResult:
    """Same as `solve` but also reports whether the grid was solved, already valid, or unsolvable."""
    if grid is None or not isinstance(grid, Grid):
        raise InvalidArgumentError("Invalid grid reference: expected a Grid")
    options = options or SolverOptions()
    if mode is not None:
        options = replace(options, mode=mode)
    tracer = tracer or Tracer(enabled=False)

    if is_valid(grid):
        tracer.log_solution_found(depth=0, grid_state=_grid_state(grid, tracer))
        return SearchResult(status=SolveStatus.ALREADY_VALID, solutions=[grid.copy()])

    working = grid.copy()
    solutions: List[Grid] = []
    with _recursion_headroom(len(working.empty_cells())):
        _backtrack(working, options, solutions, tracer, depth=0)

    if options.verbose:
        print(
            f"Search finished ({options.mode.value}): {len(solutions)} solution(s)",
            file=sys.stderr,
        )
    status = SolveStatus.SOLVED if solutions else SolveStatus.NO_SOLUTION
    return SearchResult(status=status, solutions=solutions)


@contextmanager
def _recursion_headroom(levels: int) -> Iterator[None]:
    previous = sys.getrecursionlimit()
    needed = levels + RECURSION_MARGIN
    if needed > previous:
        sys.setrecursionlimit(needed)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


def _backtrack(
    grid: Grid,
    options: SolverOptions,
    solutions: List[Grid],
    tracer: Tracer,
    depth: int,
) -> bool:
    """
    Explore the subtree rooted at the current grid state.
    Returns True when the whole search must stop (first solution in FIRST mode).
    """
    outcome = _terminal_outcome(grid, options, solutions, tracer, depth)
    if outcome is not None:
        return outcome

    propagate_to_fixpoint(grid, options, tracer)

    outcome = _terminal_outcome(grid, options, solutions, tracer, depth)
    if outcome is not None:
        return outcome

    cell = select_branching_cell(grid)
    if cell is None:
        # Full but invalid after a consistent check means a defect upstream; never a success.
        tracer.log_backtrack(None, None, depth, reason="No empty cell left on an invalid grid")
        return False

    row, col = cell
    snapshot = grid.copy()
    for value in BINARY_VALUES:
        choice = Choice(row, col, value)
        if not check_consistency_after_placement(grid, choice):
            tracer.log_consistency_check(
                is_valid=False, reason=choice.describe(), row=row, col=col
            )
            continue
        choice.apply(grid)
        tracer.log_assign(row, col, value.symbol, depth=depth + 1, grid_state=_grid_state(grid, tracer))
        if _backtrack(grid, options, solutions, tracer, depth + 1):
            return True
        grid.copy_from(snapshot)

    tracer.log_backtrack(row, col, depth)
    return False


def _terminal_outcome(
    grid: Grid,
    options: SolverOptions,
    solutions: List[Grid],
    tracer: Tracer,
    depth: int,
) -> Optional[bool]:
    """
    None: keep exploring this node.
    True: a solution was recorded and the search must stop.
    False: dead end (inconsistent, or a recorded solution in ALL mode).
    """
    if is_valid(grid):
        solutions.append(grid.copy())
        tracer.log_solution_found(depth=depth, grid_state=_grid_state(grid, tracer))
        return options.mode is Mode.FIRST

    if not is_consistent(grid):
        tracer.log_backtrack(None, None, depth, reason="Inconsistent grid")
        if options.verbose:
            print(f"The grid is inconsistent at depth {depth}: {'; '.join(violations(grid))}", file=sys.stderr)
        return False
    return None


def select_branching_cell(grid: Grid) -> Optional[Tuple[int, int]]:
    """First Empty cell in row-major order."""
    return grid.first_empty()


def _grid_state(grid: Grid, tracer: Tracer) -> Optional[str]:
    return str(grid) if tracer.record_grids else None
