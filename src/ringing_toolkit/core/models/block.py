"""
Module: block

Purpose:
    Provides the Block dataclass - an immutable, ordered sequence of rows
    at one stage, produced by the generation builder. A block also records
    where each lead ends; the lead partition is metadata over the same rows.

Key Functions:
    - Block.lead(i): Rows of one lead
    - Block.lead_heads: First row of every lead (plus the leftover row)
    - Block.position_of(offset): Map an offset to (lead, index)
    - Block.pre_multiply(row): Same block started from a different head
    - Block.to_array(): numpy matrix for read-only consumers

Dependencies:
    - dataclasses (std)
    - bisect (std)
    - numpy: Bulk export of row data
    - .row.Row
    - .stage.Stage

Used By:
    - generation.builder.BlockBuilder (creates blocks)
    - core.models.method.Method
    - falseness.direct / falseness.relational
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Iterator, Tuple, overload

import numpy as np

from .row import Row
from .stage import Stage


@dataclass(frozen=True, slots=True)
class RowPosition:
    """
    Where a row sits within a block.

    Attributes:
        lead: Zero-based number of the repeating unit (lead, or course
            when checking a set of course heads)
        index: Offset of the row within that unit
        offset: Offset of the row within the whole block
    """

    lead: int
    index: int
    offset: int

    def __str__(self) -> str:
        return f"lead {self.lead}, row {self.index}"


@dataclass(frozen=True)
class Block:
    """
    Immutable sequence of rows plus the row that would follow them.

    The ``leftover_row`` is where the next change would start from. It is
    not part of the block's truth: a single lead of a method that closes
    ends with rounds as its leftover row and is still true.

    Attributes:
        stage: Stage shared by every row
        rows: Rows belonging to the block
        leftover_row: Row after the last row
        lead_ends: Ascending end offsets (exclusive) of each completed lead

    Invariants:
        - every row and the leftover row are at ``stage``
        - 0 < lead_ends[0] < lead_ends[1] < ... <= len(rows)

    Example:
        >>> block = generate_leads(Row.rounds(Stage(5)), [cross, cross], 1)
        >>> [str(r) for r in block]
        ['01234', '10324']
        >>> str(block.leftover_row)
        '01234'
    """

    stage: Stage
    rows: Tuple[Row, ...]
    leftover_row: Row
    lead_ends: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        """Validate stages and the lead partition on construction."""
        for row in self.rows:
            self.stage.ensure_matching(row.stage, "block")
        self.stage.ensure_matching(self.leftover_row.stage, "block")

        last = 0
        for end in self.lead_ends:
            if not last < end <= len(self.rows):
                raise ValueError(
                    f"Lead ends must be strictly increasing within (0, {len(self.rows)}]: "
                    f"{self.lead_ends}"
                )
            last = end

    # ─────────────────────────────────────────────────────────────────────────
    # Sequence Protocol
    # ─────────────────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self.rows)

    @overload
    def __getitem__(self, offset: int) -> Row: ...

    @overload
    def __getitem__(self, offset: slice) -> Tuple[Row, ...]: ...

    def __getitem__(self, offset):
        return self.rows[offset]

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def all_rows(self) -> Iterator[Row]:
        """Every row followed by the leftover row."""
        yield from self.rows
        yield self.leftover_row

    @property
    def first_row(self) -> Row:
        return self.rows[0] if self.rows else self.leftover_row

    # ─────────────────────────────────────────────────────────────────────────
    # Leads
    # ─────────────────────────────────────────────────────────────────────────

    def _boundaries(self) -> Tuple[int, ...]:
        """Start offsets of every lead, including a trailing partial lead."""
        starts = (0,) + self.lead_ends
        if starts[-1] == len(self.rows):
            starts = starts[:-1]
        return starts

    @property
    def num_leads(self) -> int:
        """Number of leads, counting a trailing partial lead."""
        return len(self._boundaries()) if self.rows else 0

    def lead(self, number: int) -> Tuple[Row, ...]:
        """
        Rows of one lead.

        Raises:
            IndexError: If the lead does not exist
        """
        starts = self._boundaries()
        if not self.rows or not 0 <= number < len(starts):
            raise IndexError(f"Block has no lead {number}")
        end = starts[number + 1] if number + 1 < len(starts) else len(self.rows)
        return self.rows[starts[number]:end]

    @property
    def lead_heads(self) -> Tuple[Row, ...]:
        """First row of every lead, followed by the leftover row."""
        heads = tuple(self.rows[start] for start in self._boundaries()) if self.rows else ()
        return heads + (self.leftover_row,)

    def position_of(self, offset: int) -> RowPosition:
        """Map a block offset to its lead and index within that lead."""
        if not 0 <= offset < len(self.rows):
            raise IndexError(f"Offset {offset} outside block of {len(self.rows)} rows")
        lead = bisect.bisect_right(self.lead_ends, offset)
        start = self.lead_ends[lead - 1] if lead else 0
        return RowPosition(lead=lead, index=offset - start, offset=offset)

    # ─────────────────────────────────────────────────────────────────────────
    # Transformations
    # ─────────────────────────────────────────────────────────────────────────

    def pre_multiply(self, head: Row) -> Block:
        """A new block with every row left-multiplied by ``head``."""
        self.stage.ensure_matching(head.stage, "pre_multiply")
        return Block(
            stage=self.stage,
            rows=tuple(head.multiply(r) for r in self.rows),
            leftover_row=head.multiply(self.leftover_row),
            lead_ends=self.lead_ends,
        )

    def to_array(self, include_leftover: bool = False) -> np.ndarray:
        """
        Row data as a ``(rows, stage)`` uint8 matrix.

        Args:
            include_leftover: Append the leftover row as the last line
        """
        rows = self.all_rows() if include_leftover else iter(self.rows)
        data = b"".join(r.packed for r in rows)
        return np.frombuffer(data, dtype=np.uint8).reshape(-1, self.stage.num_bells).copy()

    def __str__(self) -> str:
        return "\n".join(str(r) for r in self.rows)
