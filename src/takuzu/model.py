"""Takuzu core data structures: cells, grids, choices, and solver options."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from .errors import InvalidArgumentError, InvalidSymbolError, OutOfBoundsError

Coordinate = Tuple[int, int]


class Cell(Enum):
    ZERO = "0"
    ONE = "1"
    EMPTY = "_"

    @property
    def symbol(self) -> str:
        return self.value

    def opposite(self) -> "Cell":
        if self is Cell.ZERO:
            return Cell.ONE
        if self is Cell.ONE:
            return Cell.ZERO
        raise InvalidSymbolError("Empty cell has no opposite value")

    @classmethod
    def from_symbol(cls, symbol: str) -> "Cell":
        for cell in cls:
            if cell.value == symbol:
                return cell
        raise InvalidSymbolError(f"Invalid character {symbol!r}; only '0', '1' and '_' are allowed")


# Branching order used by the search.
BINARY_VALUES: Tuple[Cell, Cell] = (Cell.ZERO, Cell.ONE)


class Mode(Enum):
    FIRST = "first"
    ALL = "all"


@dataclass(frozen=True)
class SolverOptions:
    """Explicit configuration handed to every solver/generator call."""

    mode: Mode = Mode.FIRST
    verbose: bool = False


class Grid:
    """
    A square board of N*N tri-state cells stored row-major.
    Every coordinate access is bounds-checked; writes only accept `Cell` members.
    """

    def __init__(self, size: int):
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise InvalidArgumentError(f"Grid size must be a positive integer, got {size!r}")
        self.size = size
        self._cells: List[Cell] = [Cell.EMPTY] * (size * size)

    @classmethod
    def from_rows(cls, rows: Sequence[Union[str, Sequence[Cell]]]) -> "Grid":
        """Build a grid from row strings ("01_1") or lists of cells."""
        size = len(rows)
        grid = cls(size)
        for i, raw in enumerate(rows):
            if isinstance(raw, str):
                cells = [Cell.from_symbol(ch) for ch in raw if not ch.isspace()]
            else:
                cells = list(raw)
            if len(cells) != size:
                raise InvalidArgumentError(f"Row {i} has {len(cells)} cells, expected {size}")
            for j, value in enumerate(cells):
                grid.set(i, j, value)
        return grid

    def _index(self, row: int, col: int) -> int:
        if isinstance(row, bool) or isinstance(col, bool) or not isinstance(row, int) or not isinstance(col, int):
            raise InvalidArgumentError(f"Coordinates must be integers, got ({row!r}, {col!r})")
        if row < 0 or row >= self.size or col < 0 or col >= self.size:
            raise OutOfBoundsError(row, col, self.size)
        return row * self.size + col

    def get(self, row: int, col: int) -> Cell:
        return self._cells[self._index(row, col)]

    def set(self, row: int, col: int, value: Cell) -> None:
        if not isinstance(value, Cell):
            raise InvalidSymbolError(f"Invalid cell value {value!r}")
        self._cells[self._index(row, col)] = value

    def clear(self, row: int, col: int) -> None:
        self.set(row, col, Cell.EMPTY)

    def row(self, index: int) -> Tuple[Cell, ...]:
        start = self._index(index, 0)
        return tuple(self._cells[start:start + self.size])

    def column(self, index: int) -> Tuple[Cell, ...]:
        self._index(0, index)
        return tuple(self._cells[index::self.size])

    def rows(self) -> Iterator[Tuple[Cell, ...]]:
        for i in range(self.size):
            yield self.row(i)

    def columns(self) -> Iterator[Tuple[Cell, ...]]:
        for j in range(self.size):
            yield self.column(j)

    def coordinates(self) -> Iterator[Coordinate]:
        for i in range(self.size):
            for j in range(self.size):
                yield i, j

    def empty_cells(self) -> List[Coordinate]:
        return [(i, j) for i, j in self.coordinates() if self._cells[i * self.size + j] is Cell.EMPTY]

    def first_empty(self) -> Optional[Coordinate]:
        """Lowest row, then lowest column, holding an Empty cell."""
        try:
            index = self._cells.index(Cell.EMPTY)
        except ValueError:
            return None
        return divmod(index, self.size)

    def count(self, value: Cell) -> int:
        return self._cells.count(value)

    def filled_count(self) -> int:
        return len(self._cells) - self._cells.count(Cell.EMPTY)

    def is_full(self) -> bool:
        return Cell.EMPTY not in self._cells

    def copy(self) -> "Grid":
        clone = Grid(self.size)
        clone._cells = list(self._cells)
        return clone

    def copy_from(self, source: Optional["Grid"]) -> None:
        """Overwrite this grid's contents with `source` (same size required)."""
        if source is None or not isinstance(source, Grid):
            raise InvalidArgumentError(f"Invalid grid reference: expected a Grid, got {type(source).__name__}")
        if source.size != self.size:
            raise InvalidArgumentError(f"Grid sizes do not match: {source.size} != {self.size}")
        self._cells[:] = source._cells

    def reset(self) -> None:
        self._cells = [Cell.EMPTY] * (self.size * self.size)

    def key(self) -> Tuple[int, Tuple[Cell, ...]]:
        """Immutable snapshot of the contents, for use in sets and dict keys."""
        return self.size, tuple(self._cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.size == other.size and self._cells == other._cells

    # Mutable, so never hashable; use key() instead.
    __hash__ = None

    def __repr__(self) -> str:
        rows = ["".join(c.symbol for c in r) for r in self.rows()]
        return f"Grid(size={self.size}, rows={rows})"

    def __str__(self) -> str:
        return "\n".join(" ".join(c.symbol for c in r) for r in self.rows())


@dataclass(frozen=True)
class Choice:
    """A tentative assignment of a binary value to one cell."""

    row: int
    col: int
    value: Cell

    def __post_init__(self) -> None:
        if self.value not in BINARY_VALUES:
            raise InvalidSymbolError(f"A choice must place '0' or '1', got {self.value!r}")

    def apply(self, grid: Grid) -> None:
        grid.set(self.row, self.col, self.value)

    def describe(self) -> str:
        return f"Choice Details: Row = {self.row}, Column = {self.col}, Value = '{self.value.symbol}'"
