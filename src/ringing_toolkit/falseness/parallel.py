"""
Module: falseness.parallel

Purpose:
    Thread pool-based queue for checking many candidate compositions
    (sets of course heads) against one detector. Inputs are read-only and
    results are merged by submission order, so no shared mutable state is
    needed between workers.

Key Classes:
    - FalsenessCheckQueue: Submit candidates, collect reports

Key Functions:
    - check_many(detector, candidates, max_workers): One-shot helper

Dependencies:
    - concurrent.futures: Thread pool execution

Used By:
    - Public API
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence

from ..core.models.row import Row
from .detector import FalsenessDetector
from .report import FalsenessReport

logger = logging.getLogger(__name__)


class FalsenessCheckQueue:
    """
    Thread pool-based queue of truth checks.

    Usage:
        with FalsenessCheckQueue(detector, max_workers=4) as queue:
            for heads in candidates:
                queue.submit(heads)
            reports = queue.wait_all()

    Attributes:
        max_workers: Maximum concurrent check threads.
    """

    def __init__(self, detector: FalsenessDetector, max_workers: int = 4):
        """
        Initialize check queue.

        Args:
            detector: Detector shared by every check (read-only use)
            max_workers: Maximum concurrent check threads.
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1: {max_workers}")
        self.detector = detector
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        self._futures: List[Future] = []

    def submit(self, heads: Sequence[Row], check_id: Optional[str] = None) -> Future:
        """
        Queue a check of one candidate set of heads.

        Args:
            heads: Candidate course heads
            check_id: Timing log key (default: assigned by the detector)

        Returns:
            Future resolving to a FalsenessReport
        """
        future = self._executor.submit(self.detector.check_courses, tuple(heads), check_id)
        self._futures.append(future)
        return future

    def wait_all(self, timeout: Optional[float] = None) -> List[FalsenessReport]:
        """
        Wait for all queued checks to complete.

        Args:
            timeout: Max seconds to wait per check (None = indefinite).

        Returns:
            Reports in submission order.

        Raises:
            Whatever the first failing check raised.
        """
        try:
            return [future.result(timeout=timeout) for future in self._futures]
        finally:
            self._futures.clear()

    def shutdown(self) -> None:
        """Shutdown the thread pool, cancelling checks that have not started."""
        self._executor.shutdown(wait=True, cancel_futures=True)
        self._futures.clear()

    def __enter__(self) -> "FalsenessCheckQueue":
        return self

    def __exit__(self, *args) -> None:
        self.shutdown()


def check_many(
    detector: FalsenessDetector,
    candidates: Iterable[Sequence[Row]],
    max_workers: int = 4,
) -> List[FalsenessReport]:
    """
    Check many candidate head sets in parallel.

    Cached data is built before fan-out so workers only read it.

    Returns:
        One report per candidate, in input order
    """
    candidates = list(candidates)
    detector.prepare()

    with FalsenessCheckQueue(detector, max_workers=max_workers) as queue:
        for heads in candidates:
            queue.submit(heads)
        reports = queue.wait_all()

    false_count = sum(1 for r in reports if not r.is_true)
    logger.info(f"Checked {len(reports)} candidates: {false_count} false")
    if detector.timing_log is not None:
        logger.info(detector.timing_log.summary())
    return reports
