"""I/O helpers for grid files and text output."""

from pathlib import Path
from typing import Union

from src.takuzu.model import Grid
from src.takuzu.parser import format_grid, parse_grid

PathLike = Union[str, Path]


def load_grid(path: PathLike) -> Grid:
    """Read a single grid in the text format."""
    return parse_grid(Path(path).read_text(encoding="utf-8"))


def save_grid(path: PathLike, grid: Grid) -> None:
    write_text(path, format_grid(grid))


def write_text(path: PathLike, content: str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
