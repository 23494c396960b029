"""
Module: timing

Purpose:
    Timing instrumentation for truth checking. One-off setup work (unit
    generation, falseness table build) is kept apart from the individual
    checks, and each check records its workload (heads, rows or pairs
    examined, verdict) next to its durations so throughput can be read
    off directly.

Key Classes:
    - CheckRecord: Durations and workload of one truth check
    - TimingLog: Setup timings, table size and per-check records

Key Functions:
    - timed_phase: Context manager for timing code blocks

Dependencies:
    - time (std)
    - contextlib (std)
    - threading (std): Checks may be recorded from worker threads

Used By:
    - falseness.detector.FalsenessDetector
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Generator, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass
class CheckRecord:
    """
    Timing and workload of one truth check.

    Attributes:
        durations: phase_name -> duration_seconds
        strategy: "direct" or "relational" (empty until the result is in)
        heads: Number of heads checked
        rows_checked: Rows examined (direct) or head pairs looked up (relational)
        is_true: Verdict, or None while the check is still running
    """
    durations: Dict[str, float] = field(default_factory=dict)
    strategy: str = ""
    heads: int = 0
    rows_checked: int = 0
    is_true: Optional[bool] = None

    @property
    def total(self) -> float:
        return sum(self.durations.values())


@dataclass
class TimingLog:
    """
    Timing metrics for a run of truth checks against one method.

    Setup phases accumulate, so rebuilding a table adds to its total.
    Checks are keyed by a per-check id; recording the same phase twice for
    one id keeps the later duration.

    Attributes:
        setup_timings: phase_name -> total duration_seconds
        checks: check_id -> CheckRecord
        unit_length: Rows in the unit the table was built over
        table_size: False relative heads in the table, once built

    Example:
        >>> log = TimingLog()
        >>> detector = FalsenessDetector(method, config, timing_log=log)
        >>> check_many(detector, candidates)
        >>> print(log.summary())
    """
    setup_timings: Dict[str, float] = field(default_factory=dict)
    checks: Dict[str, CheckRecord] = field(default_factory=dict)
    unit_length: Optional[int] = None
    table_size: Optional[int] = None
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    # ─────────────────────────────────────────────────────────────────────────
    # Recording
    # ─────────────────────────────────────────────────────────────────────────

    def log_setup(self, phase: str, duration: float) -> None:
        """Add to a setup phase total."""
        with self._lock:
            self.setup_timings[phase] = self.setup_timings.get(phase, 0.0) + duration

    def log_check(self, check_id: str, phase: str, duration: float) -> None:
        """Record one phase duration of one check."""
        with self._lock:
            self.checks.setdefault(check_id, CheckRecord()).durations[phase] = duration

    def record_table(self, unit_length: int, table_size: int) -> None:
        with self._lock:
            self.unit_length = unit_length
            self.table_size = table_size

    def record_result(
        self,
        check_id: str,
        *,
        strategy: str,
        heads: int,
        rows_checked: int,
        is_true: bool,
    ) -> None:
        """Attach the workload and verdict of a finished check."""
        with self._lock:
            record = self.checks.setdefault(check_id, CheckRecord())
            record.strategy = strategy
            record.heads = heads
            record.rows_checked = rows_checked
            record.is_true = is_true

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def check_time(self) -> float:
        """Total seconds spent in checks (setup excluded)."""
        return sum(record.total for record in self.checks.values())

    @property
    def rows_checked(self) -> int:
        return sum(record.rows_checked for record in self.checks.values())

    def throughput(self) -> float:
        """Rows (or pairs) examined per second of check time; 0.0 if nothing was timed."""
        elapsed = self.check_time
        return self.rows_checked / elapsed if elapsed > 0 else 0.0

    def false_checks(self) -> List[str]:
        """Ids of checks that found a repeated row, in recording order."""
        return [check_id for check_id, record in self.checks.items() if record.is_true is False]

    def slowest_checks(self, n: int = 3) -> List[Tuple[str, CheckRecord]]:
        ranked = sorted(self.checks.items(), key=lambda item: item[1].total, reverse=True)
        return ranked[:n]

    def summary(self) -> str:
        """Human-readable report of setup cost, check throughput and outliers."""
        lines = ["", "=== Truth Check Timing ==="]

        for phase, duration in sorted(self.setup_timings.items()):
            lines.append(f"  {phase:20s} {duration:.3f}s")
        if self.table_size is not None:
            lines.append(f"  table: {self.table_size} false heads over {self.unit_length} unit rows")

        if self.checks:
            lines.append(
                f"  {len(self.checks)} checks, {len(self.false_checks())} false, "
                f"{self.rows_checked} rows/pairs in {self.check_time:.3f}s "
                f"({self.throughput():.0f}/s)"
            )
            lines.append("Slowest checks:")
            for check_id, record in self.slowest_checks():
                verdict = {True: "true", False: "false"}.get(record.is_true, "unfinished")
                lines.append(
                    f"  {check_id}: {record.total:.4f}s, {record.heads} heads, "
                    f"{record.rows_checked} checked, {verdict}"
                )

        lines.append("")
        return "\n".join(lines)


@contextmanager
def timed_phase(
    log: Optional[TimingLog],
    phase: str,
    check_id: Optional[str] = None,
) -> Generator[None, None, None]:
    """
    Context manager for timing a code phase.

    Args:
        log: TimingLog to record into (None disables timing)
        phase: Name of the phase being timed
        check_id: If provided, records against that check;
                  otherwise records as a setup phase

    Example:
        >>> with timed_phase(log, "table_build"):
        ...     table = FalsenessTable(unit)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        if log is not None:
            elapsed = time.perf_counter() - start
            if check_id:
                log.log_check(check_id, phase, elapsed)
            else:
                log.log_setup(phase, elapsed)
            logger.debug(f"{phase}: {elapsed:.4f}s")
