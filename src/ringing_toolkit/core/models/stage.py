"""
Module: stage

Purpose:
    Provides the Stage dataclass - the number of bells in use, which fixes
    the size of every permutation domain. Entities are only combinable
    when their stages are equal.

Key Functions:
    - Stage.from_name(name): Look up a stage by its ringing name
    - Stage.ensure_matching(other, operation): Raise StageMismatch on mismatch
    - Stage.extent_length: Number of distinct rows (n!)

Dependencies:
    - dataclasses (std)
    - math (std)
    - .bell.Bell

Used By:
    - core.models.row.Row
    - core.models.place_notation.PlaceNotation
    - core.models.block.Block
    - core.models.method.Method
    - library.method_lib
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Optional

from ..errors import StageMismatch
from .bell import BELL_NAMES, Bell


MAX_STAGE = len(BELL_NAMES)

_STAGE_NAMES = {
    3: "Singles",
    4: "Minimus",
    5: "Doubles",
    6: "Minor",
    7: "Triples",
    8: "Major",
    9: "Caters",
    10: "Royal",
    11: "Cinques",
    12: "Maximus",
    13: "Sextuples",
    14: "Fourteen",
    15: "Septuples",
    16: "Sixteen",
    17: "Octuples",
    18: "Eighteen",
    19: "Nonuples",
    20: "Twenty",
    21: "Decuples",
    22: "Twenty-two",
}

_NAME_TO_STAGE = {name.lower(): n for n, name in _STAGE_NAMES.items()}


@dataclass(frozen=True, slots=True, order=True)
class Stage:
    """
    Number of bells in a composition.

    Attributes:
        num_bells: Size of the permutation domain

    Invariants:
        - 1 <= num_bells <= MAX_STAGE

    Example:
        >>> Stage(6).name
        'Minor'
        >>> Stage.from_name("doubles")
        Stage(5)
    """

    num_bells: int

    def __post_init__(self) -> None:
        """Validate stage on construction."""
        if not 1 <= self.num_bells <= MAX_STAGE:
            raise ValueError(
                f"Stage must have between 1 and {MAX_STAGE} bells: {self.num_bells}"
            )

    @classmethod
    def from_name(cls, name: str) -> Optional[Stage]:
        """
        Look up a stage by name, ignoring case.

        Returns:
            The Stage, or None if the name is not a stage name
        """
        num_bells = _NAME_TO_STAGE.get(name.strip().lower())
        return cls(num_bells) if num_bells is not None else None

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def name(self) -> Optional[str]:
        """Ringing name of this stage, if it has one."""
        return _STAGE_NAMES.get(self.num_bells)

    @property
    def is_odd(self) -> bool:
        return self.num_bells % 2 == 1

    @property
    def tenor(self) -> Bell:
        return Bell(self.num_bells - 1)

    @property
    def extent_length(self) -> int:
        """Number of distinct rows at this stage."""
        return math.factorial(self.num_bells)

    def bells(self) -> Iterator[Bell]:
        """Iterate over every bell at this stage in ascending order."""
        for i in range(self.num_bells):
            yield Bell(i)

    def ensure_matching(self, other: Stage, operation: str = "") -> None:
        """
        Check that another stage equals this one.

        Raises:
            StageMismatch: If the stages differ
        """
        if self.num_bells != other.num_bells:
            raise StageMismatch(self, other, operation)

    def __int__(self) -> int:
        return self.num_bells

    def __str__(self) -> str:
        return self.name or f"{self.num_bells} bells"

    def __repr__(self) -> str:
        return f"Stage({self.num_bells})"


SINGLES = Stage(3)
MINIMUS = Stage(4)
DOUBLES = Stage(5)
MINOR = Stage(6)
TRIPLES = Stage(7)
MAJOR = Stage(8)
CATERS = Stage(9)
ROYAL = Stage(10)
CINQUES = Stage(11)
MAXIMUS = Stage(12)
