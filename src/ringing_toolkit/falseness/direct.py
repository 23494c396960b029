"""
Module: falseness.direct

Purpose:
    Direct falseness detection: generate every row and look for repeats
    with a dict keyed on each row's packed bytes. Linear in the number of
    rows, and the reference that the relational strategy must agree with.

Key Functions:
    - find_collisions(block): Repeats within a block
    - check_method(method): Repeats within a method's plain course
    - check_heads(unit, heads): Repeats across units started from each head
    - check_courses(method, heads): check_heads over the plain course
    - unit_block(method, unit): The plain course or lead used as a unit

Dependencies:
    - logging (std)
    - numpy: Bulk generation of ``head * row`` for many heads at once
    - core.models (Block, Row, Method)

Used By:
    - falseness.relational (internal falseness of the unit)
    - falseness.detector.FalsenessDetector
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..core.models.block import Block, RowPosition
from ..core.models.method import Method
from ..core.models.row import Row
from ..generation.config import GenerationConfig
from .config import Unit
from .report import Collision, FalsenessReport

logger = logging.getLogger(__name__)


def find_collisions(block: Block, *, stop_at_first: bool = True) -> FalsenessReport:
    """
    Find rows that appear more than once in a block.

    The leftover row is not checked. Each repeat is reported against the
    first occurrence of its row; the scan order is the block order, so the
    result is deterministic.

    Args:
        block: Block to check
        stop_at_first: Stop scanning at the first repeat

    Returns:
        FalsenessReport with lead/index positions for each collision
    """
    seen: Dict[bytes, int] = {}
    collisions: List[Collision] = []
    checked = 0

    for offset, row in enumerate(block.rows):
        checked += 1
        first = seen.get(row.packed)
        if first is None:
            seen[row.packed] = offset
            continue
        collisions.append(
            Collision(row=row, first=block.position_of(first), second=block.position_of(offset))
        )
        if stop_at_first:
            break

    report = FalsenessReport(tuple(collisions), rows_checked=checked, strategy="direct")
    if not report.is_true:
        logger.warning(f"Block is false: {report.first_collision}")
    return report


def unit_block(
    method: Method,
    unit: Unit = Unit.COURSE,
    generation: Optional[GenerationConfig] = None,
) -> Block:
    """
    The block each head starts: one lead, or the plain course.

    Raises:
        DoesNotClose: If the plain course exceeds the safety cap
    """
    if unit == Unit.LEAD:
        return method.lead()
    return method.plain_course(generation)


def check_method(
    method: Method,
    generation: Optional[GenerationConfig] = None,
    *,
    stop_at_first: bool = True,
) -> FalsenessReport:
    """
    Check a method's plain course for repeated rows.

    Raises:
        DoesNotClose: If the plain course exceeds the safety cap
    """
    course = method.plain_course(generation)
    logger.debug(f"Checking plain course of {method.title}: {len(course)} rows")
    return find_collisions(course, stop_at_first=stop_at_first)


def check_heads(
    unit: Block,
    heads: Sequence[Row],
    *,
    stop_at_first: bool = True,
) -> FalsenessReport:
    """
    Check the rows ``head * u`` for every head and every unit row ``u``.

    Positions use the head's index as the ``lead`` and the unit offset as
    the ``index``.

    Args:
        unit: Block of unit rows (usually started from rounds)
        heads: Row starting each copy of the unit
        stop_at_first: Stop scanning at the first repeat

    Raises:
        StageMismatch: If a head is at a different stage from the unit
    """
    for head in heads:
        unit.stage.ensure_matching(head.stage, "check_heads")
    if not heads or not len(unit):
        return FalsenessReport((), rows_checked=0, strategy="direct")

    n = unit.stage.num_bells
    m = len(unit)
    unit_rows = unit.to_array()
    head_rows = np.frombuffer(b"".join(h.packed for h in heads), dtype=np.uint8).reshape(-1, n)
    # (head * u)[i] = head[u[i]] for every head and unit row at once
    generated = head_rows[:, unit_rows].reshape(-1, n)

    seen: Dict[bytes, int] = {}
    collisions: List[Collision] = []
    checked = 0
    for offset in range(generated.shape[0]):
        checked += 1
        packed = generated[offset].tobytes()
        first = seen.get(packed)
        if first is None:
            seen[packed] = offset
            continue
        collisions.append(
            Collision(
                row=Row(unit.stage, packed),
                first=RowPosition(lead=first // m, index=first % m, offset=first),
                second=RowPosition(lead=offset // m, index=offset % m, offset=offset),
            )
        )
        if stop_at_first:
            break

    report = FalsenessReport(tuple(collisions), rows_checked=checked, strategy="direct")
    logger.debug(f"Checked {len(heads)} heads x {m} rows: {report}")
    return report


def check_courses(
    method: Method,
    course_heads: Sequence[Row],
    generation: Optional[GenerationConfig] = None,
    *,
    stop_at_first: bool = True,
) -> FalsenessReport:
    """
    Check the plain courses of ``method`` started from each course head.

    Raises:
        StageMismatch: If a head is at a different stage from the method
        DoesNotClose: If the plain course exceeds the safety cap
    """
    course = method.plain_course(generation)
    return check_heads(course, course_heads, stop_at_first=stop_at_first)
