"""Top-level Takuzu solve/generate interface.

Expose `solve_puzzle(puzzle)` that accepts either a `Grid`, grid text in the
`src.takuzu.parser` format, or a puzzle record {"id": ..., "grid": ...}, and
`generate_puzzle(size, ...)` for new grids.
"""

import random
from typing import Any, Optional

from src.takuzu import generator, solver_core
from src.takuzu.model import Grid, Mode, SolverOptions
from src.takuzu.parser import parse_grid
from src.takuzu.solver_core import SearchResult
from src.utils.trace import Tracer


def _as_grid(puzzle: Any) -> Grid:
    if isinstance(puzzle, Grid):
        return puzzle
    if isinstance(puzzle, str):
        return parse_grid(puzzle)
    if isinstance(puzzle, dict):
        grid = puzzle.get("grid")
        if isinstance(grid, Grid):
            return grid
        if isinstance(grid, str):
            return parse_grid(grid)
    raise TypeError("solve_puzzle expects a Grid, grid text, or a puzzle record with a 'grid' field")


def solve_puzzle(
    puzzle: Any,
    mode: Mode = Mode.FIRST,
    verbose: bool = False,
    tracer: Optional[Tracer] = None,
) -> SearchResult:
    """
    Solve a puzzle and return the search outcome with its solutions.
    Accepts:
      - Grid instances (never modified)
      - Grid text (parsed via `parse_grid`)
      - Puzzle records as produced by `src.takuzu.loader.load_puzzles`
    """
    grid = _as_grid(puzzle)
    options = SolverOptions(mode=mode, verbose=verbose)
    return solver_core.search(grid, options=options, tracer=tracer)


def generate_puzzle(
    size: int,
    fill_percent: int = generator.DEFAULT_FILL_PERCENT,
    require_solvable: bool = False,
    seed: Optional[int] = None,
    verbose: bool = False,
    tracer: Optional[Tracer] = None,
) -> Grid:
    rng = random.Random(seed)
    options = SolverOptions(mode=Mode.FIRST, verbose=verbose)
    return generator.generate(
        size,
        fill_percent,
        require_solvable,
        rng=rng,
        options=options,
        tracer=tracer,
    )


__all__ = ["solve_puzzle", "generate_puzzle"]
