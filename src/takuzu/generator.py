"""Random puzzle generation, optionally checked for solvability by the search engine."""

import random
import sys
from typing import List, Optional, Tuple

from .consistency import check_consistency_after_placement
from .errors import InvalidArgumentError, UnsolvableAfterRetriesError
from .model import BINARY_VALUES, Cell, Choice, Grid, Mode, SolverOptions
from .parser import SUPPORTED_SIZES
from .solver_core import solve
from src.utils.trace import Tracer

# Sizes small enough for a solvability probe after every fill.
PROBED_SIZES = (4, 8)
DEFAULT_MAX_ATTEMPTS = 10_000
DEFAULT_FILL_PERCENT = 30


def _validate_percent(fill_percent: int) -> None:
    if isinstance(fill_percent, bool) or not isinstance(fill_percent, int):
        raise InvalidArgumentError(f"Fill percentage must be an integer, got {fill_percent!r}")
    if fill_percent < 0 or fill_percent > 100:
        raise InvalidArgumentError(f"Invalid percentage value {fill_percent}; expected 0-100")


def _validate_attempts(max_attempts: int) -> None:
    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts <= 0:
        raise InvalidArgumentError(f"Attempt budget must be a positive integer, got {max_attempts!r}")


def place_cell_strategically(grid: Grid, row: int, col: int, rng: random.Random) -> Cell:
    """
    Pick a value for an Empty cell that keeps the grid consistent.
    Returns Cell.EMPTY when neither value fits.
    """
    candidates = [
        value for value in BINARY_VALUES
        if check_consistency_after_placement(grid, Choice(row, col, value))
    ]
    if not candidates:
        return Cell.EMPTY
    if len(candidates) == 1:
        return candidates[0]
    return rng.choice(candidates)


def random_fill(
    grid: Grid,
    fill_percent: int,
    rng: Optional[random.Random] = None,
    tracer: Optional[Tracer] = None,
) -> int:
    """
    Fill random Empty cells with consistent values until `fill_percent` of the
    board is assigned or no Empty cell accepts either value.
    Returns the number of cells placed.
    """
    _validate_percent(fill_percent)
    rng = rng or random.Random()
    tracer = tracer or Tracer(enabled=False)

    target = (fill_percent * grid.size * grid.size) // 100
    filled = grid.filled_count()
    placed = 0
    open_cells = grid.empty_cells()
    # Cells that accepted neither value since the last successful placement.
    blocked: List[Tuple[int, int]] = []

    while filled < target and open_cells:
        index = rng.randrange(len(open_cells))
        row, col = open_cells[index]
        open_cells[index] = open_cells[-1]
        open_cells.pop()

        value = place_cell_strategically(grid, row, col, rng)
        if value is Cell.EMPTY:
            blocked.append((row, col))
            continue
        grid.set(row, col, value)
        filled += 1
        placed += 1
        open_cells.extend(blocked)
        blocked.clear()
        tracer.log_fill(row, col, value.symbol, cells_filled=filled)
    return placed


def generate_with_guaranteed_solution(
    grid: Grid,
    fill_percent: int,
    rng: Optional[random.Random] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    options: Optional[SolverOptions] = None,
    tracer: Optional[Tracer] = None,
) -> Grid:
    """
    Refill `grid` until the search finds at least one solution for it.

    Only sizes 4 and 8 are probed. Larger grids are filled once and returned
    without any solvability check. Raises UnsolvableAfterRetriesError when the
    attempt budget runs out.
    """
    _validate_percent(fill_percent)
    _validate_attempts(max_attempts)
    rng = rng or random.Random()
    options = options or SolverOptions()
    tracer = tracer or Tracer(enabled=False)

    if grid.size not in PROBED_SIZES:
        grid.reset()
        random_fill(grid, fill_percent, rng, tracer)
        tracer.log_generation_attempt(1, None, reason="Solvability probe skipped for large grid")
        if options.verbose:
            print(
                f"Warning: no solvability check performed for a {grid.size}x{grid.size} grid",
                file=sys.stderr,
            )
        return grid

    # The probe runs silently on a private copy; its trace would drown the generation steps.
    probe_tracer = Tracer(enabled=False)
    probe_options = SolverOptions(mode=Mode.FIRST, verbose=False)
    for attempt in range(1, max_attempts + 1):
        grid.reset()
        random_fill(grid, fill_percent, rng, tracer)
        solutions = solve(grid.copy(), options=probe_options, tracer=probe_tracer)
        tracer.log_generation_attempt(attempt, bool(solutions))
        if solutions:
            if options.verbose:
                print(f"Generated a solvable grid after {attempt} attempt(s)", file=sys.stderr)
            return grid

    raise UnsolvableAfterRetriesError(grid.size, max_attempts)


def generate(
    size: int,
    fill_percent: int = DEFAULT_FILL_PERCENT,
    require_solvable: bool = False,
    rng: Optional[random.Random] = None,
    options: Optional[SolverOptions] = None,
    tracer: Optional[Tracer] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Grid:
    """Create a new size x size puzzle with roughly `fill_percent` of its cells given."""
    if size not in SUPPORTED_SIZES:
        raise InvalidArgumentError(f"Invalid grid size {size}; expected one of {SUPPORTED_SIZES}")
    _validate_percent(fill_percent)

    grid = Grid(size)
    if require_solvable:
        return generate_with_guaranteed_solution(
            grid, fill_percent, rng=rng, max_attempts=max_attempts, options=options, tracer=tracer
        )
    random_fill(grid, fill_percent, rng, tracer)
    return grid
