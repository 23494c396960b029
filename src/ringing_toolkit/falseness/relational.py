"""
Module: falseness.relational

Purpose:
    Relational falseness detection. Instead of generating every row of a
    composition, precompute which relative course heads make two copies of
    a unit (plain course or lead) share a row, then answer truth queries by
    table lookup on pairs of heads.

    For unit rows ``P_0 .. P_m-1``, the copies started from heads ``h1`` and
    ``h2`` share a row exactly when ``h1 * P_a == h2 * P_b`` for some a, b,
    i.e. when ``h2⁻¹ * h1 == P_b * P_a⁻¹``. The table stores every such
    ``P_b * P_a⁻¹`` keyed by its packed bytes, with one witness ``(a, b)``.

Key Classes:
    - FalsenessTable: Rebuildable index over one unit

Dependencies:
    - logging (std)
    - concurrent.futures (std): Optional fan-out of pair checks
    - .direct.find_collisions (internal falseness of the unit)

Used By:
    - falseness.detector.FalsenessDetector
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from ..core.models.block import Block, RowPosition
from ..core.models.method import Method
from ..core.models.row import Row
from ..generation.config import GenerationConfig
from .config import Unit
from .direct import find_collisions, unit_block
from .report import Collision, FalsenessReport

logger = logging.getLogger(__name__)


class FalsenessTable:
    """
    False relative heads for one repeating unit.

    The table is derived data: it can always be rebuilt from the unit and
    must give the same verdicts as ``direct.check_heads`` on that unit.

    Attributes:
        stage: Stage of the unit
        unit_length: Rows in the unit
        unit_is_true: Whether the unit on its own has no repeated row

    Example:
        >>> table = FalsenessTable.from_method(plain_bob_minor)
        >>> table.check([Row.rounds(MINOR)]).is_true
        True
    """

    def __init__(self, unit: Block):
        self.stage = unit.stage
        self.unit_length = len(unit)
        self._unit_rows: Tuple[Row, ...] = unit.rows

        self._table: Dict[bytes, Tuple[int, int]] = {}
        for a, row_a in enumerate(unit.rows):
            inv_a = row_a.inverse()
            for b, row_b in enumerate(unit.rows):
                self._table.setdefault(row_b.multiply(inv_a).packed, (a, b))

        self._internal: Optional[Collision] = find_collisions(unit).first_collision
        logger.debug(
            f"Built falseness table: {self.unit_length} unit rows, "
            f"{len(self._table)} false relative heads"
        )

    @classmethod
    def from_method(
        cls,
        method: Method,
        unit: Unit = Unit.COURSE,
        generation: Optional[GenerationConfig] = None,
    ) -> FalsenessTable:
        """
        Build the table for a method's plain course (or a single lead).

        Raises:
            DoesNotClose: If the plain course exceeds the safety cap
        """
        return cls(unit_block(method, unit, generation))

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def unit_is_true(self) -> bool:
        return self._internal is None

    def __len__(self) -> int:
        return len(self._table)

    def false_course_heads(self) -> FrozenSet[Row]:
        """
        Heads whose unit shares a row with the unit started from rounds.

        Always contains rounds itself.
        """
        return frozenset(Row(self.stage, key) for key in self._table)

    def _witness(self, h1: Row, h2: Row) -> Optional[Tuple[int, int]]:
        return self._table.get(h2.inverse().multiply(h1).packed)

    def is_false_pair(self, h1: Row, h2: Row) -> bool:
        """
        True if the units started from ``h1`` and ``h2`` share a row.

        Raises:
            StageMismatch: If either head is at a different stage
        """
        self.stage.ensure_matching(h1.stage, "is_false_pair")
        self.stage.ensure_matching(h2.stage, "is_false_pair")
        return self._witness(h1, h2) is not None

    def _false_partners(self, i: int, heads: Sequence[Row]) -> List[int]:
        """Indices j > i whose head is false against head i."""
        return [j for j in range(i + 1, len(heads)) if self._witness(heads[i], heads[j]) is not None]

    def false_pairs(
        self,
        heads: Sequence[Row],
        max_workers: Optional[int] = None,
    ) -> List[Tuple[int, int]]:
        """
        Every pair ``(i, j)``, ``i < j``, of mutually false heads.

        Args:
            heads: Heads to compare
            max_workers: Threads to spread the first index over (None = serial)

        Returns:
            Pairs in ascending order of ``(i, j)``
        """
        for head in heads:
            self.stage.ensure_matching(head.stage, "false_pairs")

        indices = range(len(heads))
        if max_workers is None or max_workers <= 1 or len(heads) < 2:
            partners = [self._false_partners(i, heads) for i in indices]
        else:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                partners = list(executor.map(lambda i: self._false_partners(i, heads), indices))

        return [(i, j) for i, js in zip(indices, partners) for j in js]

    def check(self, heads: Sequence[Row], *, stop_at_first: bool = True) -> FalsenessReport:
        """
        Check a set of heads for truth by table lookup.

        Agrees with ``direct.check_heads(unit, heads)`` on the verdict; the
        collision reported may be a different witness of the same falseness.

        Raises:
            StageMismatch: If a head is at a different stage
        """
        for head in heads:
            self.stage.ensure_matching(head.stage, "check")

        m = self.unit_length
        collisions: List[Collision] = []

        if self._internal is not None and heads:
            first, second = self._internal.first.offset, self._internal.second.offset
            collisions.append(
                Collision(
                    row=heads[0].multiply(self._internal.row),
                    first=RowPosition(lead=0, index=first, offset=first),
                    second=RowPosition(lead=0, index=second, offset=second),
                )
            )
            if stop_at_first:
                return FalsenessReport(tuple(collisions), rows_checked=0, strategy="relational")

        checked = 0
        for i in range(len(heads)):
            for j in range(i + 1, len(heads)):
                checked += 1
                witness = self._witness(heads[i], heads[j])
                if witness is None:
                    continue
                a, b = witness
                collisions.append(
                    Collision(
                        row=heads[i].multiply(self._unit_rows[a]),
                        first=RowPosition(lead=i, index=a, offset=i * m + a),
                        second=RowPosition(lead=j, index=b, offset=j * m + b),
                    )
                )
                if stop_at_first:
                    return FalsenessReport(
                        tuple(collisions), rows_checked=checked, strategy="relational"
                    )

        return FalsenessReport(tuple(collisions), rows_checked=checked, strategy="relational")
