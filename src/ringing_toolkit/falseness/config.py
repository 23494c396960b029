"""
Module: falseness.config

Purpose:
    Configuration dataclass for falseness detection: which strategy to
    use, what repeating unit the relational table is built over, and how
    much parallelism to allow.

Key Classes:
    - Strategy: Direct generation or relational table lookup
    - Unit: Repeating unit for the relational table
    - FalsenessConfig: Immutable detection settings

Dependencies:
    - dataclasses (std)

Used By:
    - falseness.detector.FalsenessDetector
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..generation.config import GenerationConfig


class Strategy(str, Enum):
    """How truth is established."""
    DIRECT = "direct"          # Generate every row, detect repeats with a set
    RELATIONAL = "relational"  # Look course-head pairs up in a falseness table

    def __str__(self) -> str:
        return self.value


class Unit(str, Enum):
    """Repeating unit started by each head passed to a course check."""
    COURSE = "course"  # Heads start plain courses
    LEAD = "lead"      # Heads start single leads

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FalsenessConfig:
    """
    Configuration for falseness detection (immutable).

    Attributes:
        strategy: DIRECT (default) or RELATIONAL
        unit: What each supplied head starts (COURSE or LEAD)
        stop_at_first: Stop at the first collision instead of collecting all
        max_workers: Worker threads for relational pair checks (None = serial)
        generation: Safety caps used when generating plain courses

    Invariants:
        - max_workers is None or max_workers >= 1
    """

    strategy: Strategy = Strategy.DIRECT
    unit: Unit = Unit.COURSE
    stop_at_first: bool = True
    max_workers: Optional[int] = None
    generation: GenerationConfig = field(default_factory=GenerationConfig.until_rounds)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1: {self.max_workers}")
