"""Tracing module: logs Takuzu solver/generator steps and writes them to CSV."""

import csv
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class TraceStep:
    """A single step in the solving or generation process."""

    timestamp: float
    step_number: int
    action_type: str  # 'assign', 'backtrack', 'propagate', 'consistency_check', 'solution_found', 'fill', ...
    row: Optional[int] = None
    col: Optional[int] = None
    value: Optional[str] = None
    depth: Optional[int] = None  # Decision level in the search
    cells_filled: Optional[int] = None
    rule: Optional[str] = None
    is_valid: Optional[bool] = None
    reason: Optional[str] = None
    grid_state: Optional[str] = None  # Serialized board (optional, can be large)


class Tracer:
    """Records solver steps for logging and analysis."""

    def __init__(self, enabled: bool = True, record_grids: bool = False):
        self.enabled = enabled
        self.record_grids = record_grids
        self.steps: List[TraceStep] = []
        self.start_time = datetime.now().timestamp()
        self.step_counter = 0

    def _get_timestamp(self) -> float:
        """Get elapsed time in seconds since tracer creation."""
        return datetime.now().timestamp() - self.start_time

    def _record(self, action_type: str, **fields: Any) -> None:
        self.step_counter += 1
        self.steps.append(TraceStep(
            timestamp=self._get_timestamp(),
            step_number=self.step_counter,
            action_type=action_type,
            **fields,
        ))

    def log_assign(self, row: int, col: int, value: Any, depth: int, grid_state: Optional[str] = None):
        """Log a tentative assignment on the branching cell."""
        if not self.enabled:
            return
        self._record(
            'assign',
            row=row,
            col=col,
            value=str(value),
            depth=depth,
            grid_state=grid_state if self.record_grids else None,
        )

    def log_backtrack(self, row: Optional[int], col: Optional[int], depth: int, reason: str = "No valid values"):
        """Log a backtrack event."""
        if not self.enabled:
            return
        self._record('backtrack', row=row, col=col, depth=depth, reason=reason)

    def log_propagation(self, rule: str, cells_filled: int):
        """Log one propagation rule that filled at least one cell."""
        if not self.enabled:
            return
        self._record('propagate', rule=rule, cells_filled=cells_filled)

    def log_consistency_check(self, is_valid: bool, reason: Optional[str] = None,
                              row: Optional[int] = None, col: Optional[int] = None):
        """Log a consistency probe."""
        if not self.enabled:
            return
        self._record('consistency_check', is_valid=is_valid, reason=reason, row=row, col=col)

    def log_solution_found(self, depth: int, grid_state: Optional[str] = None):
        """Log when a solution is found."""
        if not self.enabled:
            return
        self._record(
            'solution_found',
            depth=depth,
            grid_state=grid_state if self.record_grids else None,
        )

    def log_fill(self, row: int, col: int, value: Any, cells_filled: int):
        """Log a cell placed by the random generator."""
        if not self.enabled:
            return
        self._record('fill', row=row, col=col, value=str(value), cells_filled=cells_filled)

    def log_generation_attempt(self, attempt: int, solvable: Optional[bool], reason: str = ""):
        """Log one generate-and-probe round."""
        if not self.enabled:
            return
        self._record('generation_attempt', depth=attempt, is_valid=solvable, reason=reason)

    def to_csv(self, filepath: Path, include_large_states: bool = False) -> None:
        """Write trace to CSV file."""
        if not self.steps:
            print("No trace steps to write")
            return

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        # Select fields to write
        fieldnames = [
            'timestamp', 'step_number', 'action_type', 'row', 'col', 'value',
            'depth', 'cells_filled', 'rule', 'is_valid', 'reason'
        ]
        if include_large_states:
            fieldnames.append('grid_state')

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()

            for step in self.steps:
                row = asdict(step)
                if not include_large_states:
                    row.pop('grid_state', None)
                writer.writerow(row)

        print(f"Trace written to {filepath} ({len(self.steps)} steps)")

    def summary(self) -> Dict[str, Any]:
        """Get a summary of the trace."""
        action_counts: Dict[str, int] = {}
        for step in self.steps:
            action_counts[step.action_type] = action_counts.get(step.action_type, 0) + 1

        return {
            'total_steps': len(self.steps),
            'elapsed_time_seconds': self._get_timestamp(),
            'action_counts': action_counts,
            'num_assignments': action_counts.get('assign', 0),
            'num_backtracks': action_counts.get('backtrack', 0),
            'cells_propagated': sum(s.cells_filled or 0 for s in self.steps if s.action_type == 'propagate'),
        }


# Default tracer instance for the command line; library calls never read it
_global_tracer: Optional[Tracer] = None


def get_tracer() -> Tracer:
    """Get or create the default tracer."""
    global _global_tracer
    if _global_tracer is None:
        _global_tracer = Tracer(enabled=True)
    return _global_tracer


def reset_tracer() -> None:
    """Reset the default tracer."""
    global _global_tracer
    _global_tracer = None


def enable_tracing(enabled: bool = True) -> None:
    """Enable or disable tracing."""
    get_tracer().enabled = enabled
