"""Takuzu grid model, consistency rules, propagation, search, and generation."""

from .model import Cell, Choice, Grid, Mode, SolverOptions
from .errors import (
    GridFormatError,
    InvalidArgumentError,
    InvalidSymbolError,
    OutOfBoundsError,
    TakuzuError,
    UnsolvableAfterRetriesError,
)
from .consistency import is_consistent, is_valid
from .propagation import propagate_to_fixpoint
from .solver_core import SearchResult, SolveStatus, search, solve
from .generator import generate, generate_with_guaranteed_solution, random_fill
from .parser import SUPPORTED_SIZES, format_grid, parse_grid

__all__ = [
    "Cell",
    "Choice",
    "Grid",
    "Mode",
    "SolverOptions",
    "TakuzuError",
    "InvalidArgumentError",
    "OutOfBoundsError",
    "InvalidSymbolError",
    "GridFormatError",
    "UnsolvableAfterRetriesError",
    "is_consistent",
    "is_valid",
    "propagate_to_fixpoint",
    "SearchResult",
    "SolveStatus",
    "search",
    "solve",
    "generate",
    "generate_with_guaranteed_solution",
    "random_fill",
    "SUPPORTED_SIZES",
    "format_grid",
    "parse_grid",
]
