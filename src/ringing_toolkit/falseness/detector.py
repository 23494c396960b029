"""
Module: falseness.detector

Purpose:
    Single entry point for truth checking of one method. Dispatches to the
    direct or relational strategy according to its FalsenessConfig and
    caches the derived data (the unit block and the falseness table) so
    that many candidate compositions can be checked cheaply.

Key Classes:
    - FalsenessDetector: Strategy dispatch with cached unit and table

Dependencies:
    - logging (std)
    - threading (std): Guards lazy construction of the cached table
    - .direct / .relational: The two strategies
    - timing: Optional phase timing

Used By:
    - falseness.parallel.FalsenessCheckQueue
    - Public API
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import List, Optional, Sequence, Tuple

from ..core.models.block import Block
from ..core.models.method import Method
from ..core.models.row import Row
from ..timing import TimingLog, timed_phase
from .config import FalsenessConfig, Strategy
from .direct import check_heads, find_collisions, unit_block
from .relational import FalsenessTable
from .report import FalsenessReport

logger = logging.getLogger(__name__)


class FalsenessDetector:
    """
    Truth checking for one method.

    The cached unit and table are rebuildable caches over the method; they
    are never a second source of truth. ``rebuild()`` discards them.

    Usage:
        detector = FalsenessDetector(method, FalsenessConfig(strategy=Strategy.RELATIONAL))
        report = detector.check_courses([Row.rounds(stage), other_head])
        if not report.is_true:
            print(report.first_collision)
    """

    def __init__(
        self,
        method: Method,
        config: Optional[FalsenessConfig] = None,
        *,
        timing_log: Optional[TimingLog] = None,
    ):
        self.method = method
        self.config = config or FalsenessConfig()
        self.timing_log = timing_log
        self._unit: Optional[Block] = None
        self._table: Optional[FalsenessTable] = None
        self._lock = threading.Lock()
        self._check_numbers = itertools.count(1)

    # ─────────────────────────────────────────────────────────────────────────
    # Cached Data
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def unit(self) -> Block:
        """
        The block each head starts (plain course or lead).

        Raises:
            DoesNotClose: If the plain course exceeds the safety cap
        """
        with self._lock:
            if self._unit is None:
                with timed_phase(self.timing_log, "unit_generation"):
                    self._unit = unit_block(self.method, self.config.unit, self.config.generation)
            return self._unit

    @property
    def table(self) -> FalsenessTable:
        """The falseness table over ``unit``, built on first use."""
        unit = self.unit
        with self._lock:
            if self._table is None:
                with timed_phase(self.timing_log, "table_build"):
                    self._table = FalsenessTable(unit)
                if self.timing_log is not None:
                    self.timing_log.record_table(self._table.unit_length, len(self._table))
            return self._table

    def prepare(self) -> None:
        """Build whatever the configured strategy will read."""
        if self.config.strategy == Strategy.RELATIONAL:
            _ = self.table
        else:
            _ = self.unit

    def rebuild(self) -> None:
        """Discard cached data; it is rebuilt on next use."""
        with self._lock:
            self._unit = None
            self._table = None

    # ─────────────────────────────────────────────────────────────────────────
    # Checks
    # ─────────────────────────────────────────────────────────────────────────

    def _next_check_id(self) -> str:
        """Unique id for one check: method title plus a running number."""
        with self._lock:
            return f"{self.method.title}#{next(self._check_numbers)}"

    def _record(self, check_id: str, report: FalsenessReport, heads: int) -> None:
        if self.timing_log is not None:
            self.timing_log.record_result(
                check_id,
                strategy=report.strategy,
                heads=heads,
                rows_checked=report.rows_checked,
                is_true=report.is_true,
            )

    def check_block(self, block: Block, check_id: Optional[str] = None) -> FalsenessReport:
        """Direct check of an already generated block."""
        check_id = check_id or self._next_check_id()
        with timed_phase(self.timing_log, "block_check", check_id=check_id):
            report = find_collisions(block, stop_at_first=self.config.stop_at_first)
        self._record(check_id, report, heads=1)
        return report

    def check_plain_course(self) -> FalsenessReport:
        """
        Direct check of the method's plain course.

        Raises:
            DoesNotClose: If the plain course exceeds the safety cap
        """
        course = self.method.plain_course(self.config.generation)
        report = self.check_block(course)
        logger.info(f"{self.method.title}: plain course is {report}")
        return report

    def check_courses(
        self, heads: Sequence[Row], check_id: Optional[str] = None
    ) -> FalsenessReport:
        """
        Check the units started from every head, with the configured strategy.

        Args:
            heads: Row starting each copy of the unit
            check_id: Key for this check in the timing log (default: the
                method title and a running number)

        Raises:
            StageMismatch: If a head is at a different stage
            DoesNotClose: If the plain course exceeds the safety cap
        """
        check_id = check_id or self._next_check_id()
        if self.config.strategy == Strategy.RELATIONAL:
            table = self.table
            with timed_phase(self.timing_log, "relational_check", check_id=check_id):
                report = table.check(heads, stop_at_first=self.config.stop_at_first)
        else:
            unit = self.unit
            with timed_phase(self.timing_log, "direct_check", check_id=check_id):
                report = check_heads(unit, heads, stop_at_first=self.config.stop_at_first)
        self._record(check_id, report, heads=len(heads))

        if report.is_true:
            logger.debug(f"{check_id}: {len(heads)} heads true")
        else:
            logger.warning(f"{check_id}: {len(heads)} heads false, {report.first_collision}")
        return report

    def false_pairs(self, heads: Sequence[Row]) -> List[Tuple[int, int]]:
        """Every mutually false pair of heads, via the falseness table."""
        return self.table.false_pairs(heads, max_workers=self.config.max_workers)
