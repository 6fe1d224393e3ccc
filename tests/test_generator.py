"""Tests for random filling and solvable-grid generation."""

import random

import pytest

from src.takuzu import generator
from src.takuzu.consistency import check_consistency_after_placement, is_consistent
from src.takuzu.errors import InvalidArgumentError, UnsolvableAfterRetriesError
from src.takuzu.model import BINARY_VALUES, Cell, Choice, Grid, Mode
from src.takuzu.parser import format_grid, parse_grid
from src.takuzu.solver_core import solve
from src.utils.trace import Tracer


def _quiet():
    return Tracer(enabled=False)


def test_place_cell_strategically_picks_only_consistent_value():
    grid = Grid.from_rows(["00__", "____", "____", "____"])
    for seed in range(5):
        assert generator.place_cell_strategically(grid, 0, 2, random.Random(seed)) is Cell.ONE


def test_place_cell_strategically_reports_blocked_cell():
    # Column 0 already holds two zeros, row 0 two ones.
    grid = Grid.from_rows(["_11_", "0___", "0___", "____"])
    assert generator.place_cell_strategically(grid, 0, 0, random.Random(0)) is Cell.EMPTY


def test_random_fill_reaches_target_and_stays_consistent():
    grid = Grid(8)
    placed = generator.random_fill(grid, 25, random.Random(1), tracer=_quiet())
    assert placed == grid.filled_count() == 16
    assert is_consistent(grid)


def test_random_fill_stops_when_nothing_is_placeable():
    grid = Grid(4)
    generator.random_fill(grid, 100, random.Random(3), tracer=_quiet())
    assert is_consistent(grid)
    for row, col in grid.empty_cells():
        for value in BINARY_VALUES:
            assert not check_consistency_after_placement(grid, Choice(row, col, value))


def test_random_fill_traces_each_placement():
    tracer = Tracer()
    grid = Grid(4)
    placed = generator.random_fill(grid, 50, random.Random(2), tracer=tracer)
    fills = [s for s in tracer.steps if s.action_type == "fill"]
    assert 0 < placed <= 8
    assert len(fills) == placed
    assert [s.cells_filled for s in fills] == list(range(1, placed + 1))
    assert all(grid.get(s.row, s.col).symbol == s.value for s in fills)


@pytest.mark.parametrize("percent", [-1, 101, 12.5, True])
def test_random_fill_rejects_bad_percentages(percent):
    with pytest.raises(InvalidArgumentError):
        generator.random_fill(Grid(4), percent, random.Random(0), tracer=_quiet())


def test_guaranteed_solution_small_grid():
    tracer = Tracer()
    grid = generator.generate_with_guaranteed_solution(Grid(4), 50, rng=random.Random(7), tracer=tracer)
    assert solve(grid, Mode.FIRST, tracer=_quiet())
    attempts = [s for s in tracer.steps if s.action_type == "generation_attempt"]
    assert attempts[-1].is_valid is True
    assert all(a.is_valid is False for a in attempts[:-1])


def test_generate_solvable_8x8():
    grid = generator.generate(8, 30, require_solvable=True, rng=random.Random(11), tracer=_quiet())
    assert grid.size == 8
    assert is_consistent(grid)
    assert solve(grid, Mode.FIRST, tracer=_quiet())


def test_attempt_budget_exhaustion_raises(monkeypatch):
    monkeypatch.setattr(generator, "solve", lambda *args, **kwargs: [])
    tracer = Tracer()
    with pytest.raises(UnsolvableAfterRetriesError) as excinfo:
        generator.generate_with_guaranteed_solution(
            Grid(4), 40, rng=random.Random(0), max_attempts=3, tracer=tracer
        )
    assert excinfo.value.attempts == 3
    assert tracer.summary()["action_counts"]["generation_attempt"] == 3


@pytest.mark.parametrize("budget", [0, -1, True, 2.5])
def test_attempt_budget_must_be_positive(monkeypatch, budget):
    def _fail(*args, **kwargs):
        raise AssertionError("no attempt may run with an invalid budget")

    monkeypatch.setattr(generator, "solve", _fail)
    tracer = Tracer()
    with pytest.raises(InvalidArgumentError):
        generator.generate_with_guaranteed_solution(
            Grid(4), 40, rng=random.Random(0), max_attempts=budget, tracer=tracer
        )
    with pytest.raises(InvalidArgumentError):
        generator.generate(8, 30, require_solvable=True, max_attempts=budget, tracer=tracer)
    assert tracer.steps == []


def test_large_grids_skip_the_solvability_check(monkeypatch):
    def _fail(*args, **kwargs):
        raise AssertionError("solver must not run for large grids")

    monkeypatch.setattr(generator, "solve", _fail)
    tracer = Tracer()
    grid = generator.generate_with_guaranteed_solution(Grid(16), 20, rng=random.Random(0), tracer=tracer)
    assert grid.filled_count() <= 51
    assert is_consistent(grid)
    attempt = [s for s in tracer.steps if s.action_type == "generation_attempt"][0]
    assert attempt.is_valid is None


def test_generate_rejects_unsupported_sizes():
    with pytest.raises(InvalidArgumentError):
        generator.generate(6, 30)


def test_generate_is_reproducible_with_seeded_rng():
    first = generator.generate(8, 40, rng=random.Random(9), tracer=_quiet())
    second = generator.generate(8, 40, rng=random.Random(9), tracer=_quiet())
    assert first == second


@pytest.mark.parametrize("size", [4, 8, 16, 32, 64])
def test_generated_grid_survives_text_round_trip(size):
    grid = generator.generate(size, 40, rng=random.Random(size), tracer=_quiet())
    assert parse_grid(format_grid(grid)) == grid
