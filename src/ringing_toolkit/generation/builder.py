"""
Module: generation.builder

Purpose:
    Builds Blocks by repeatedly applying place notation to the last row.
    The BlockBuilder is the single mutable owner of a block while it is
    being generated; ``finish()`` hands back an immutable Block.

Key Classes:
    - BuilderState: Seed → Extend → Lead boundary → Terminal
    - BlockBuilder: Incremental block construction

Key Functions:
    - generate_block(seed, notations, config): Generate with a stopping rule
    - generate_leads(seed, notations, count): Fixed number of leads
    - generate_until_rounds(seed, notations, config): Until a lead head is rounds

Dependencies:
    - logging (std)
    - core.models (Row, PlaceNotation, Block)
    - .config.GenerationConfig

Used By:
    - core.models.method.Method
    - falseness.direct
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from ..core.errors import DoesNotClose
from ..core.models.block import Block
from ..core.models.place_notation import PlaceNotation
from ..core.models.row import Row
from .config import GenerationConfig, Termination

logger = logging.getLogger(__name__)


class BuilderState(str, Enum):
    """Lifecycle of a BlockBuilder."""
    SEED = "seed"                    # Only the starting row
    EXTEND = "extend"                # Mid-lead
    LEAD_BOUNDARY = "lead_boundary"  # A lead has just been completed
    TERMINAL = "terminal"            # finish() called, no further changes

    def __str__(self) -> str:
        return self.value


class BlockBuilder:
    """
    Incremental, single-owner construction of a Block.

    The most recent row is always the block's leftover row: after ``n``
    changes the finished block holds ``n`` rows plus that leftover row.

    Usage:
        builder = BlockBuilder(Row.rounds(stage))
        builder.extend_all(method.notations)
        builder.mark_lead_end()
        block = builder.finish()
    """

    def __init__(self, seed: Row):
        self._stage = seed.stage
        self._rows: List[Row] = [seed]
        self._lead_ends: List[int] = []
        self._state = BuilderState.SEED

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def state(self) -> BuilderState:
        return self._state

    @property
    def last_row(self) -> Row:
        return self._rows[-1]

    @property
    def row_count(self) -> int:
        """Rows in the block so far, not counting the leftover row."""
        return len(self._rows) - 1

    @property
    def lead_count(self) -> int:
        return len(self._lead_ends)

    # ─────────────────────────────────────────────────────────────────────────
    # Transitions
    # ─────────────────────────────────────────────────────────────────────────

    def _ensure_open(self) -> None:
        if self._state == BuilderState.TERMINAL:
            raise RuntimeError("BlockBuilder has already been finished")

    def extend(self, notation: PlaceNotation) -> Row:
        """
        Append the row produced by one change.

        Raises:
            StageMismatch: If the notation is at a different stage
            RuntimeError: If the builder is finished
        """
        self._ensure_open()
        row = notation.apply(self._rows[-1])
        self._rows.append(row)
        self._state = BuilderState.EXTEND
        return row

    def extend_all(self, notations: Iterable[PlaceNotation]) -> Row:
        """Apply a sequence of changes, returning the new last row."""
        for notation in notations:
            self.extend(notation)
        return self._rows[-1]

    def mark_lead_end(self) -> None:
        """
        Record that a lead finishes at the current row count.

        Raises:
            RuntimeError: If the lead would be empty or the builder is finished
        """
        self._ensure_open()
        last_end = self._lead_ends[-1] if self._lead_ends else 0
        if self.row_count == last_end:
            raise RuntimeError("Cannot mark the end of an empty lead")
        self._lead_ends.append(self.row_count)
        self._state = BuilderState.LEAD_BOUNDARY

    def finish(self) -> Block:
        """Freeze the rows into an immutable Block."""
        self._ensure_open()
        self._state = BuilderState.TERMINAL
        return Block(
            stage=self._stage,
            rows=tuple(self._rows[:-1]),
            leftover_row=self._rows[-1],
            lead_ends=tuple(self._lead_ends),
        )


# ─────────────────────────────────────────────────────────────────────────────
# Generation
# ─────────────────────────────────────────────────────────────────────────────

def generate_block(
    seed: Row,
    notations: Sequence[PlaceNotation],
    config: Optional[GenerationConfig] = None,
) -> Block:
    """
    Generate a block by cycling through ``notations`` from ``seed``.

    A lead boundary is marked every time the notation sequence is exhausted.

    Args:
        seed: First row of the block
        notations: Changes of one lead
        config: Stopping rule and safety caps (default: until rounds)

    Returns:
        Immutable Block

    Raises:
        ValueError: If ``notations`` is empty
        StageMismatch: If any notation is at a different stage from ``seed``
        DoesNotClose: If UNTIL_ROUNDS hits a safety cap
    """
    notations = tuple(notations)
    if not notations:
        raise ValueError("Cannot generate a block from an empty notation sequence")
    for pn in notations:
        seed.stage.ensure_matching(pn.stage, "generate")
    config = config or GenerationConfig()

    builder = BlockBuilder(seed)
    lead_length = len(notations)

    if config.termination == Termination.ROW_COUNT:
        i = 0
        while builder.row_count < config.row_count:
            builder.extend(notations[i])
            i += 1
            if i == lead_length:
                builder.mark_lead_end()
                i = 0

    elif config.termination == Termination.LEAD_COUNT:
        for _ in range(config.lead_count):
            builder.extend_all(notations)
            builder.mark_lead_end()

    else:
        while True:
            if (
                builder.lead_count >= config.max_leads
                or builder.row_count + lead_length > config.max_rows
            ):
                logger.warning(
                    f"Block from {seed} did not close after {builder.lead_count} leads"
                )
                raise DoesNotClose(builder.row_count, builder.lead_count, builder.last_row)
            builder.extend_all(notations)
            builder.mark_lead_end()
            if builder.last_row.is_rounds():
                break

    block = builder.finish()
    logger.debug(
        f"Generated {len(block)} rows in {block.num_leads} leads ({config.termination})"
    )
    return block


def generate_leads(seed: Row, notations: Sequence[PlaceNotation], count: int) -> Block:
    """Generate exactly ``count`` leads."""
    return generate_block(seed, notations, GenerationConfig.leads(count))


def generate_until_rounds(
    seed: Row,
    notations: Sequence[PlaceNotation],
    config: Optional[GenerationConfig] = None,
) -> Block:
    """
    Generate leads until a lead head is rounds.

    Only the safety caps of ``config`` are used; its termination is
    forced to UNTIL_ROUNDS.
    """
    if config is None:
        config = GenerationConfig.until_rounds()
    elif config.termination != Termination.UNTIL_ROUNDS:
        config = GenerationConfig.until_rounds(max_rows=config.max_rows, max_leads=config.max_leads)
    return generate_block(seed, notations, config)
