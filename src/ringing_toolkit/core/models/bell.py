"""
Module: bell

Purpose:
    Provides the Bell dataclass - the zero-based identity of one bell.
    Display symbols are only used at the formatting boundary; all
    comparisons use the numeric index.

Key Functions:
    - Bell.from_symbol(ch): Parse a display symbol (case-insensitive)
    - Bell.symbol: Canonical upper-case display symbol
    - Bell.treble() / Bell.tenor(stage): Named bells

Dependencies:
    - dataclasses (std)

Used By:
    - core.models.stage.Stage
    - core.models.row.Row
    - core.models.place_notation
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .stage import Stage


# Digits first, then letters. The alphabet bounds the largest usable stage.
BELL_NAMES = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

_SYMBOL_TO_INDEX = {ch: i for i, ch in enumerate(BELL_NAMES)}
_SYMBOL_TO_INDEX.update({ch.lower(): i for i, ch in enumerate(BELL_NAMES) if ch.isalpha()})


def symbol_index(symbol: str) -> int | None:
    """Return the bell index for a display symbol, or None if unknown."""
    return _SYMBOL_TO_INDEX.get(symbol)


@dataclass(frozen=True, slots=True, order=True)
class Bell:
    """
    A single bell, identified by its zero-based index.

    Attributes:
        index: Zero-based bell number (0 is the treble)

    Invariants:
        - 0 <= index < len(BELL_NAMES)

    Example:
        >>> Bell.from_symbol("a")
        Bell(10)
        >>> str(Bell(3))
        '3'
    """

    index: int

    def __post_init__(self) -> None:
        """Validate bell index on construction."""
        if not 0 <= self.index < len(BELL_NAMES):
            raise ValueError(
                f"Bell index must be in [0, {len(BELL_NAMES)}): {self.index}"
            )

    @classmethod
    def from_symbol(cls, symbol: str) -> Bell:
        """
        Parse a bell from its display symbol.

        Args:
            symbol: A single character from BELL_NAMES, either case

        Returns:
            The matching Bell

        Raises:
            ValueError: If the symbol is not a bell name
        """
        index = symbol_index(symbol)
        if index is None:
            raise ValueError(f"Unknown bell symbol: {symbol!r}")
        return cls(index)

    @classmethod
    def treble(cls) -> Bell:
        """The lightest bell."""
        return cls(0)

    @classmethod
    def tenor(cls, stage: Stage) -> Bell:
        """The heaviest bell at a given stage."""
        return cls(stage.num_bells - 1)

    @property
    def symbol(self) -> str:
        """Canonical display symbol."""
        return BELL_NAMES[self.index]

    def __str__(self) -> str:
        return self.symbol

    def __repr__(self) -> str:
        return f"Bell({self.index})"
