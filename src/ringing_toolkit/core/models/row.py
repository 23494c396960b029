"""
Module: row

Purpose:
    Provides the Row dataclass - an immutable permutation of the bells of
    a stage, and the fundamental algebraic unit of the toolkit. Rows are
    stored packed as bytes (one byte per position), which is also the
    canonical key used for duplicate detection.

Key Functions:
    - Row.parse(text, stage): Parse a display string like "01234"
    - Row.from_bells(bells, stage): Build from Bells or ints
    - Row.rounds(stage): The identity row
    - Row.multiply(other) / row * other: Composition (other applied first)
    - Row.inverse(): The unique inverse row
    - Row.parity: Sign of the permutation
    - Row.order(): Smallest power giving rounds

Dependencies:
    - dataclasses (std)
    - math (std)
    - .stage.Stage
    - .bell.Bell

Used By:
    - core.models.place_notation.PlaceNotation
    - core.models.block.Block
    - generation.builder
    - falseness (direct and relational strategies)

Design Notes:
    Multiplication and inversion of valid rows always produce valid rows,
    so their results are built through ``Row._unchecked`` and skip the
    bijection check in ``__post_init__``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional, Sequence, Union, overload

from ..errors import InvalidPermutation
from .bell import BELL_NAMES, Bell, symbol_index
from .stage import Stage


class Parity(str, Enum):
    """Sign of a permutation."""
    EVEN = "even"
    ODD = "odd"

    def __str__(self) -> str:
        return self.value


def _check_bijection(values: Sequence[int], stage: Stage) -> None:
    """Raise InvalidPermutation unless ``values`` is a permutation of [0, stage)."""
    n = stage.num_bells
    if len(values) != n:
        raise InvalidPermutation(
            f"Row has {len(values)} bells but stage has {n}",
            kind="length",
        )

    seen: dict[int, int] = {}
    for position, value in enumerate(values):
        if not 0 <= value < n:
            raise InvalidPermutation(
                f"Bell {value} at position {position} is out of range for {n} bells",
                kind="out_of_range",
                position=position,
            )
        if value in seen:
            present = set(values)
            missing = tuple(b for b in range(n) if b not in present)
            missing_text = ", ".join(repr(BELL_NAMES[b]) for b in missing)
            raise InvalidPermutation(
                f"Bell {BELL_NAMES[value]!r} appears at positions {seen[value]} and "
                f"{position}; missing bells: {missing_text}",
                kind="duplicate",
                position=position,
                missing=missing,
            )
        seen[value] = position


@dataclass(frozen=True, slots=True)
class Row:
    """
    Immutable permutation of the bells of a stage.

    Attributes:
        stage: Stage this row belongs to
        packed: Bell index at each position, one byte per position

    Invariants:
        - len(packed) == stage.num_bells
        - packed contains every value in [0, stage) exactly once

    Example:
        >>> row = Row.parse("10324")
        >>> row.inverse() * row == Row.rounds(row.stage)
        True
        >>> Row.parse("01334")  # raises InvalidPermutation (3 twice, 2 missing)
    """

    stage: Stage
    packed: bytes

    def __post_init__(self) -> None:
        """Validate the bijection on construction."""
        _check_bijection(self.packed, self.stage)

    @classmethod
    def _unchecked(cls, stage: Stage, packed: bytes) -> Row:
        """Build a row known to be valid without re-running the bijection check."""
        row = object.__new__(cls)
        object.__setattr__(row, "stage", stage)
        object.__setattr__(row, "packed", packed)
        return row

    # ─────────────────────────────────────────────────────────────────────────
    # Factory Methods
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def rounds(cls, stage: Stage) -> Row:
        """The identity row ``0, 1, ..., stage-1``."""
        return cls._unchecked(stage, bytes(range(stage.num_bells)))

    @classmethod
    def backrounds(cls, stage: Stage) -> Row:
        """Rounds reversed, with the tenor leading."""
        return cls._unchecked(stage, bytes(reversed(range(stage.num_bells))))

    @classmethod
    def from_bells(
        cls,
        bells: Iterable[Union[Bell, int]],
        stage: Optional[Stage] = None,
    ) -> Row:
        """
        Build a row from a sequence of Bells (or bell indices).

        Args:
            bells: Bell at each position
            stage: Expected stage; inferred from the length if omitted

        Returns:
            Validated Row

        Raises:
            InvalidPermutation: If the bells do not form a permutation
        """
        values = [b.index if isinstance(b, Bell) else int(b) for b in bells]
        if stage is None:
            if not values:
                raise InvalidPermutation("Row cannot be empty", kind="length")
            if len(values) > len(BELL_NAMES):
                raise InvalidPermutation(
                    f"Row has {len(values)} bells; at most {len(BELL_NAMES)} are supported",
                    kind="length",
                )
            stage = Stage(len(values))
        _check_bijection(values, stage)
        return cls._unchecked(stage, bytes(values))

    @classmethod
    def parse(cls, text: str, stage: Optional[Stage] = None) -> Row:
        """
        Parse a row from its display string.

        Args:
            text: One bell symbol per position, e.g. "01234"
            stage: Expected stage; inferred from the length if omitted

        Returns:
            Validated Row

        Raises:
            InvalidPermutation: On wrong length, unknown symbol,
                out-of-range bell, or duplicate bell
        """
        if stage is None:
            if not text:
                raise InvalidPermutation("Row cannot be empty", kind="length")
            if len(text) > len(BELL_NAMES):
                raise InvalidPermutation(
                    f"Row has {len(text)} bells; at most {len(BELL_NAMES)} are supported",
                    kind="length",
                )
            stage = Stage(len(text))
        elif len(text) != stage.num_bells:
            raise InvalidPermutation(
                f"Row {text!r} has {len(text)} bells but stage has {stage.num_bells}",
                kind="length",
            )

        values = []
        for position, symbol in enumerate(text):
            index = symbol_index(symbol)
            if index is None:
                raise InvalidPermutation(
                    f"Unknown bell symbol {symbol!r} at position {position}",
                    kind="unknown_symbol",
                    position=position,
                )
            values.append(index)
        _check_bijection(values, stage)
        return cls._unchecked(stage, bytes(values))

    # ─────────────────────────────────────────────────────────────────────────
    # Algebra
    # ─────────────────────────────────────────────────────────────────────────

    def multiply(self, other: Row) -> Row:
        """
        Compose two rows: ``result[i] = self[other[i]]``.

        Raises:
            StageMismatch: If the stages differ
        """
        self.stage.ensure_matching(other.stage, "multiply")
        # bytes.translate maps each byte of `other` through `self` as a lookup table
        table = self.packed.ljust(256, b"\x00")
        return Row._unchecked(self.stage, other.packed.translate(table))

    def inverse(self) -> Row:
        """The unique row ``r`` with ``self * r == rounds``."""
        inv = bytearray(len(self.packed))
        for position, bell in enumerate(self.packed):
            inv[bell] = position
        return Row._unchecked(self.stage, bytes(inv))

    def transposition_to(self, other: Row) -> Row:
        """The row ``x`` such that ``self * x == other``."""
        return self.inverse().multiply(other)

    def pow(self, exponent: int) -> Row:
        """Raise this row to an integer power (negative powers use the inverse)."""
        if exponent < 0:
            return self.inverse().pow(-exponent)
        result = Row.rounds(self.stage)
        base = self
        while exponent:
            if exponent & 1:
                result = result.multiply(base)
            base = base.multiply(base)
            exponent >>= 1
        return result

    def is_rounds(self) -> bool:
        return all(bell == position for position, bell in enumerate(self.packed))

    def cycle_lengths(self) -> list[int]:
        """Lengths of the disjoint cycles of this permutation."""
        lengths = []
        visited = [False] * len(self.packed)
        for start in range(len(self.packed)):
            if visited[start]:
                continue
            length = 0
            pos = start
            while not visited[pos]:
                visited[pos] = True
                pos = self.packed[pos]
                length += 1
            lengths.append(length)
        return lengths

    @property
    def parity(self) -> Parity:
        """
        Sign of the permutation.

        A cycle of length k needs k-1 swaps, so the swap count is
        ``n - number_of_cycles``.
        """
        swaps = len(self.packed) - len(self.cycle_lengths())
        return Parity.EVEN if swaps % 2 == 0 else Parity.ODD

    def order(self) -> int:
        """Smallest k > 0 with ``self.pow(k)`` equal to rounds."""
        return math.lcm(*self.cycle_lengths())

    def place_of(self, bell: Union[Bell, int]) -> int:
        """Position at which a bell is rung in this row."""
        index = bell.index if isinstance(bell, Bell) else bell
        return self.packed.index(index)

    def __mul__(self, other: object) -> Row:
        if not isinstance(other, Row):
            return NotImplemented
        return self.multiply(other)

    # ─────────────────────────────────────────────────────────────────────────
    # Sequence Protocol
    # ─────────────────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self.packed)

    @overload
    def __getitem__(self, position: int) -> Bell: ...

    @overload
    def __getitem__(self, position: slice) -> tuple[Bell, ...]: ...

    def __getitem__(self, position):
        if isinstance(position, slice):
            return tuple(Bell(b) for b in self.packed[position])
        return Bell(self.packed[position])

    def __iter__(self) -> Iterator[Bell]:
        for bell in self.packed:
            yield Bell(bell)

    def indices(self) -> tuple[int, ...]:
        """Bell index at each position."""
        return tuple(self.packed)

    def __str__(self) -> str:
        return "".join(BELL_NAMES[b] for b in self.packed)

    def __repr__(self) -> str:
        return f"Row({str(self)!r})"
