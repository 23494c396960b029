"""
Module: falseness.report

Purpose:
    Result types for falseness detection. A report is a pure output: it
    is never mutated after construction and is owned by the caller.

Key Classes:
    - Collision: A repeated row and the two positions it occupies
    - FalsenessReport: Verdict plus the collisions found

Dependencies:
    - dataclasses (std)
    - core.models.block.RowPosition

Used By:
    - falseness.direct
    - falseness.relational
    - falseness.detector
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..core.errors import FalsenessFound
from ..core.models.block import RowPosition
from ..core.models.row import Row


@dataclass(frozen=True, slots=True)
class Collision:
    """
    A row that appears twice.

    Attributes:
        row: The repeated row
        first: Earlier position of the row
        second: Later position of the row
    """

    row: Row
    first: RowPosition
    second: RowPosition

    def __str__(self) -> str:
        return f"{self.row} at ({self.first}) and ({self.second})"


@dataclass(frozen=True)
class FalsenessReport:
    """
    Outcome of a truth check.

    Attributes:
        collisions: Collisions found, in detection order (at most one when
            the check stopped at the first)
        rows_checked: Rows examined (or course-head pairs, for the
            relational strategy)
        strategy: "direct" or "relational"

    Example:
        >>> report = find_collisions(block)
        >>> report.is_true
        True
    """

    collisions: Tuple[Collision, ...]
    rows_checked: int
    strategy: str = "direct"

    @property
    def is_true(self) -> bool:
        return not self.collisions

    @property
    def first_collision(self) -> Optional[Collision]:
        return self.collisions[0] if self.collisions else None

    def raise_if_false(self) -> None:
        """
        Raises:
            FalsenessFound: Carrying the first collision, if there is one
        """
        if self.collisions:
            raise FalsenessFound(self.collisions[0])

    def __str__(self) -> str:
        if self.is_true:
            return f"true ({self.rows_checked} checked, {self.strategy})"
        return f"false: {self.collisions[0]} ({len(self.collisions)} collisions, {self.strategy})"
