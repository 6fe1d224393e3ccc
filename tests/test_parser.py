"""Tests for the grid text format."""

import pytest

from src.takuzu.errors import GridFormatError, InvalidSymbolError
from src.takuzu.model import Cell, Grid
from src.takuzu.parser import format_grid, parse_grid


def test_parse_space_separated_grid_with_comments():
    text = """# a 4x4 puzzle
0 1 _ _   # first row

_ _ _ 1
1 _ _ _
_ _ 0 _
"""
    grid = parse_grid(text)
    assert grid.size == 4
    assert grid.get(0, 1) is Cell.ONE
    assert grid.get(1, 3) is Cell.ONE
    assert grid.get(3, 2) is Cell.ZERO
    assert grid.filled_count() == 5


def test_parse_compact_rows():
    grid = parse_grid("0101\n1010\n0110\n1001\n")
    assert grid == Grid.from_rows(["0101", "1010", "0110", "1001"])


def test_parse_rejects_unsupported_size():
    with pytest.raises(GridFormatError) as excinfo:
        parse_grid("0 1 0\n1 0 1\n0 1 0\n")
    assert excinfo.value.line == 1


def test_parse_rejects_ragged_rows():
    with pytest.raises(GridFormatError) as excinfo:
        parse_grid("0 1 _ _\n_ _ _\n_ _ _ _\n_ _ _ _\n")
    assert excinfo.value.line == 2


def test_parse_rejects_wrong_row_count():
    with pytest.raises(GridFormatError):
        parse_grid("0 1 _ _\n_ _ _ _\n_ _ _ _\n")


def test_parse_rejects_unknown_symbols():
    with pytest.raises(InvalidSymbolError) as excinfo:
        parse_grid("0 1 _ _\n_ x _ _\n_ _ _ _\n_ _ _ _\n")
    assert "line 2" in str(excinfo.value)


def test_parse_rejects_empty_input():
    with pytest.raises(GridFormatError):
        parse_grid("# nothing here\n\n")


def test_format_grid_renders_one_line_per_row():
    grid = Grid.from_rows(["01__", "____", "____", "___1"])
    assert format_grid(grid) == "0 1 _ _\n_ _ _ _\n_ _ _ _\n_ _ _ 1\n"
    assert parse_grid(format_grid(grid)) == grid
