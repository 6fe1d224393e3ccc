"""Error taxonomy for grid handling, search, and generation."""


class TakuzuError(Exception):
    """Base class for every error raised by the takuzu package."""


class InvalidArgumentError(TakuzuError, ValueError):
    """Absent grid, mismatched sizes, or malformed coordinates/arguments."""


class OutOfBoundsError(TakuzuError, IndexError):
    def __init__(self, row: int, col: int, size: int):
        super().__init__(f"Coordinates ({row}, {col}) are out of bounds for a {size}x{size} grid")
        self.row = row
        self.col = col
        self.size = size


class InvalidSymbolError(TakuzuError, ValueError):
    """A value outside the Zero/One/Empty alphabet (or Zero/One where Empty is not allowed)."""


class GridFormatError(InvalidArgumentError):
    """Puzzle text that cannot be turned into a grid."""

    def __init__(self, message: str, line: int = 0):
        prefix = f"line {line}: " if line else ""
        super().__init__(f"{prefix}{message}")
        self.line = line


class UnsolvableAfterRetriesError(TakuzuError, RuntimeError):
    def __init__(self, size: int, attempts: int):
        super().__init__(
            f"Unable to generate a {size}x{size} grid with at least one solution after {attempts} attempts"
        )
        self.size = size
        self.attempts = attempts
