"""
Module: generation.config

Purpose:
    Configuration dataclasses for block generation. Selects when the
    builder stops and bounds worst-case work with safety caps.

Key Classes:
    - Termination: Which stopping rule to use
    - GenerationConfig: Immutable generation settings

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - generation.builder.generate_block
    - core.models.method.Method.plain_course
    - falseness.direct.check_method
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


DEFAULT_MAX_ROWS = 1_000_000
DEFAULT_MAX_LEADS = 100_000


class Termination(str, Enum):
    """Stopping rule for block generation."""
    ROW_COUNT = "row_count"        # Stop after a fixed number of rows
    LEAD_COUNT = "lead_count"      # Stop after a fixed number of leads
    UNTIL_ROUNDS = "until_rounds"  # Stop when a lead head is rounds

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class GenerationConfig:
    """
    Configuration for block generation (immutable).

    Attributes:
        termination: Stopping rule
        row_count: Rows to generate for ROW_COUNT
        lead_count: Leads to generate for LEAD_COUNT
        max_rows: Safety cap on rows for UNTIL_ROUNDS
        max_leads: Safety cap on leads for UNTIL_ROUNDS

    Invariants:
        - row_count is set (and >= 0) when termination is ROW_COUNT
        - lead_count is set (and >= 0) when termination is LEAD_COUNT
        - max_rows > 0 and max_leads > 0

    Example:
        >>> GenerationConfig.leads(4).lead_count
        4
    """

    termination: Termination = Termination.UNTIL_ROUNDS
    row_count: Optional[int] = None
    lead_count: Optional[int] = None
    max_rows: int = DEFAULT_MAX_ROWS
    max_leads: int = DEFAULT_MAX_LEADS

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.termination == Termination.ROW_COUNT:
            if self.row_count is None or self.row_count < 0:
                raise ValueError(f"row_count must be non-negative for ROW_COUNT: {self.row_count}")
        if self.termination == Termination.LEAD_COUNT:
            if self.lead_count is None or self.lead_count < 0:
                raise ValueError(f"lead_count must be non-negative for LEAD_COUNT: {self.lead_count}")
        if self.max_rows <= 0:
            raise ValueError(f"max_rows must be positive: {self.max_rows}")
        if self.max_leads <= 0:
            raise ValueError(f"max_leads must be positive: {self.max_leads}")

    @classmethod
    def rows(cls, count: int) -> GenerationConfig:
        return cls(termination=Termination.ROW_COUNT, row_count=count)

    @classmethod
    def leads(cls, count: int) -> GenerationConfig:
        return cls(termination=Termination.LEAD_COUNT, lead_count=count)

    @classmethod
    def until_rounds(
        cls,
        max_rows: int = DEFAULT_MAX_ROWS,
        max_leads: int = DEFAULT_MAX_LEADS,
    ) -> GenerationConfig:
        return cls(termination=Termination.UNTIL_ROUNDS, max_rows=max_rows, max_leads=max_leads)
