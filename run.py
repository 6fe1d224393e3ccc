"""CLI entrypoint: solve Takuzu grid files or generate new grids."""

import argparse
import csv
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from solver import generate_puzzle, solve_puzzle
from src.takuzu.errors import TakuzuError
from src.takuzu.generator import DEFAULT_FILL_PERCENT
from src.takuzu.loader import load_grid_records
from src.takuzu.model import Grid, Mode
from src.takuzu.parser import SUPPORTED_SIZES, format_grid
from src.takuzu.solver_core import SearchResult, SolveStatus
from src.utils.io import write_text
from src.utils.trace import Tracer, get_tracer, reset_tracer

DEFAULT_GENERATE_SIZE = 8


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="takuzu",
        description="Solve or generate takuzu grids of size: 4, 8, 16, 32, 64",
    )
    parser.add_argument("input", nargs="*", type=Path, help="Grid file(s) or directories of puzzles to solve")
    parser.add_argument("-a", "--all", action="store_true", help="search for all possible solutions")
    parser.add_argument(
        "-g",
        "--generate",
        nargs="?",
        type=int,
        const=DEFAULT_GENERATE_SIZE,
        default=None,
        metavar="N",
        help=f"generate a grid of size NxN (default: {DEFAULT_GENERATE_SIZE})",
    )
    parser.add_argument(
        "-u", "--unique", action="store_true",
        help="when generating, require the grid to have at least one solution",
    )
    parser.add_argument(
        "-N", "--fill", type=int, default=DEFAULT_FILL_PERCENT, metavar="PCT",
        help=f"percentage of cells filled when generating (default: {DEFAULT_FILL_PERCENT})",
    )
    parser.add_argument("-o", "--output", type=Path, default=None, help="write output to FILE")
    parser.add_argument("-v", "--verbose", action="store_true", help="verbose output")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the generator's random choices")
    parser.add_argument("--trace", type=Path, default=None, help="Optional path to write the solver trace CSV")
    parser.add_argument(
        "--results", type=Path, default=None,
        help="Optional CSV summarizing id, status, solution count and steps per puzzle",
    )
    args = parser.parse_args(argv)

    if args.generate is not None:
        if args.all:
            parser.error("option 'all' conflicts with generate mode")
        if args.input:
            parser.error("generate mode does not take input grids")
        if args.generate not in SUPPORTED_SIZES:
            parser.error(f"invalid grid size {args.generate} for generation mode")
        if not 0 <= args.fill <= 100:
            parser.error(f"invalid fill percentage {args.fill}")
    else:
        if args.unique:
            parser.error("option 'unique' conflicts with solver mode")
        if not args.input:
            parser.error("no input grid given")
    return args


def format_result(puzzle_id: str, grid: Grid, result: SearchResult, show_header: bool = False) -> str:
    lines: List[str] = []
    if show_header:
        lines.append(f"Puzzle {puzzle_id}")
    lines.append(format_grid(grid))

    if result.status is SolveStatus.ALREADY_VALID:
        lines.append("Grid already solved.\n")
        return "\n".join(lines)
    if result.status is SolveStatus.NO_SOLUTION:
        lines.append("No solution found.\n")
        return "\n".join(lines)

    lines.append(f"Number of solutions: {len(result.solutions)}")
    for i, solution in enumerate(result.solutions, start=1):
        lines.append(f"Solution {i}")
        lines.append(format_grid(solution))
    return "\n".join(lines)


def write_results_csv(results: List[Dict[str, Any]], output_path: Path) -> None:
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "status", "solutions", "steps"])

        for r in results:
            writer.writerow([r["id"], r["status"], r["solutions"], r["steps"]])


def _trace_path(base: Path, puzzle_id: str, many: bool) -> Path:
    if not many:
        return base
    return base.with_name(f"{base.stem}_{puzzle_id}{base.suffix}")


def _print_summary(label: str, tracer: Tracer) -> None:
    summary = tracer.summary()
    print(
        f"{label}: {summary['num_assignments']} assignments, "
        f"{summary['num_backtracks']} backtracks, "
        f"{summary['cells_propagated']} cells propagated, "
        f"{summary['elapsed_time_seconds']:.3f}s",
        file=sys.stderr,
    )


def run_generate(args: argparse.Namespace) -> str:
    reset_tracer()
    tracer = get_tracer()
    grid = generate_puzzle(
        args.generate,
        fill_percent=args.fill,
        require_solvable=args.unique,
        seed=args.seed,
        verbose=args.verbose,
        tracer=tracer,
    )
    if args.verbose:
        _print_summary("Generation", tracer)
    if args.trace:
        tracer.to_csv(args.trace)
    return format_grid(grid)


def run_solve(args: argparse.Namespace) -> str:
    mode = Mode.ALL if args.all else Mode.FIRST
    puzzles = load_grid_records([str(p) for p in args.input])
    many = len(puzzles) > 1
    outputs: List[str] = []
    results: List[Dict[str, Any]] = []

    for puzzle in puzzles:
        reset_tracer()
        tracer = get_tracer()
        puzzle_id = puzzle["id"]

        result = solve_puzzle(puzzle, mode=mode, verbose=args.verbose, tracer=tracer)
        outputs.append(format_result(puzzle_id, puzzle["grid"], result, show_header=many))

        summary = tracer.summary()
        results.append({
            "id": puzzle_id,
            "status": result.status.value,
            "solutions": len(result.solutions),
            # Branching assignments are the search effort; propagation is bookkeeping.
            "steps": summary["num_assignments"],
        })
        if args.verbose:
            _print_summary(f"Puzzle {puzzle_id}", tracer)
        if args.trace:
            tracer.to_csv(_trace_path(args.trace, puzzle_id, many))

    if args.results:
        write_results_csv(results, args.results)
    return "\n".join(outputs)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        print("Mode verbose output activate.", file=sys.stderr)

    try:
        output = run_generate(args) if args.generate is not None else run_solve(args)
    except (TakuzuError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        write_text(args.output, output)
    else:
        print(output, end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
