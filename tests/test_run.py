import json

import pytest

from run import format_result, main, parse_args, write_results_csv
from src.takuzu.model import Grid
from src.takuzu.parser import parse_grid
from src.takuzu.solver_core import SearchResult, SolveStatus

PUZZLE_4 = "0 _ _ _\n_ _ _ _\n_ _ _ _\n_ _ _ 1\n"
SOLVED_4 = "0 1 0 1\n1 0 1 0\n0 1 1 0\n1 0 0 1\n"
DEAD_END_4 = "0 1 0 1\n0 1 0 _\n_ _ _ _\n_ _ _ _\n"


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return path


def test_format_result_variants():
    grid = Grid.from_rows(["0101", "1010", "0110", "1001"])
    solved = format_result("p", grid, SearchResult(SolveStatus.SOLVED, [grid]))
    assert "Number of solutions: 1" in solved
    assert "Solution 1" in solved

    assert "Grid already solved." in format_result("p", grid, SearchResult(SolveStatus.ALREADY_VALID, [grid]))
    assert "No solution found." in format_result("p", grid, SearchResult(SolveStatus.NO_SOLUTION))
    assert format_result("p", grid, SearchResult(SolveStatus.NO_SOLUTION), show_header=True).startswith("Puzzle p")


def test_main_solves_single_file(tmp_path, capsys):
    path = _write(tmp_path, "p.txt", PUZZLE_4)
    assert main([str(path)]) == 0
    out = capsys.readouterr().out
    assert "Number of solutions: 1" in out
    assert "Solution 1" in out


def test_main_all_solutions_to_output_file(tmp_path):
    path = _write(tmp_path, "p.txt", PUZZLE_4)
    output = tmp_path / "out.txt"
    assert main(["-a", str(path), "-o", str(output)]) == 0
    content = output.read_text()
    count = int(content.split("Number of solutions: ")[1].splitlines()[0])
    assert count > 1
    assert f"Solution {count}" in content


def test_main_reports_already_solved_and_unsolvable(tmp_path, capsys):
    _write(tmp_path, "a_solved.txt", SOLVED_4)
    _write(tmp_path, "b_dead.txt", DEAD_END_4)
    assert main([str(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert "Puzzle a_solved" in out
    assert "Grid already solved." in out
    assert "Puzzle b_dead" in out
    assert "No solution found." in out


def test_results_and_trace_csv(tmp_path):
    puzzles = tmp_path / "set.jsonl"
    puzzles.write_text(
        json.dumps({"id": "one", "grid": PUZZLE_4}) + "\n" + json.dumps({"id": "two", "grid": DEAD_END_4}) + "\n"
    )
    results = tmp_path / "results.csv"
    trace = tmp_path / "trace.csv"
    assert main([str(puzzles), "--results", str(results), "--trace", str(trace)]) == 0

    content = results.read_text()
    assert "id,status,solutions,steps" in content
    assert "one,solved,1," in content
    assert "two,no_solution,0," in content
    assert (tmp_path / "trace_one.csv").exists()
    assert (tmp_path / "trace_two.csv").exists()


def test_write_results_csv(tmp_path):
    output = tmp_path / "r.csv"
    write_results_csv([{"id": "x", "status": "solved", "solutions": 2, "steps": 7}], output)
    assert output.read_text().splitlines() == ["id,status,solutions,steps", "x,solved,2,7"]


def test_main_generates_grid(tmp_path):
    output = tmp_path / "gen.txt"
    assert main(["-g", "4", "-N", "50", "--seed", "3", "-u", "-o", str(output)]) == 0
    grid = parse_grid(output.read_text())
    assert grid.size == 4
    assert grid.filled_count() > 0


def test_generate_defaults_to_size_8():
    args = parse_args(["-g"])
    assert args.generate == 8


def test_missing_grid_file_returns_error(tmp_path, capsys):
    assert main([str(tmp_path / "missing.txt")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_malformed_grid_returns_error(tmp_path, capsys):
    path = _write(tmp_path, "bad.txt", "0 1 0\n")
    assert main([str(path)]) == 1
    assert "invalid grid size" in capsys.readouterr().err


@pytest.mark.parametrize(
    "argv",
    [
        ["-u", "grid.txt"],
        ["-a", "-g", "8"],
        ["-g", "6"],
        ["-g", "4", "-N", "150"],
        [],
    ],
)
def test_conflicting_options_exit(argv):
    with pytest.raises(SystemExit) as excinfo:
        parse_args(argv)
    assert excinfo.value.code == 2
