"""
Module: place_notation

Purpose:
    Provides the PlaceNotation dataclass - one change, described by the
    positions that stay fixed - and the parsers for single changes and for
    whole leads written in block notation.

Key Functions:
    - parse_notation(text, stage): Parse a single change ("-", "05", ...)
    - parse_notation_sequence(text, stage): Parse a lead ("&-05-05-05,01")
    - format_notation_sequence(notations): Canonical text for a lead
    - PlaceNotation.apply(row): Derive the next row

Dependencies:
    - dataclasses (std)
    - .bell (symbol table)
    - .row.Row
    - .stage.Stage

Used By:
    - core.models.method.Method
    - generation.builder
    - library.method_lib.CompactMethod

Notation Rules:
    Fixed positions are skipped; every other position, taken in ascending
    order, must pair with the next position up. On an odd stage the single
    top position may be left unpaired, in which case it is treated as an
    implicit place. Any other unpaired position is a syntax error.

    "-" is always a cross. "x"/"X" is also a cross unless the stage is big
    enough to have a bell named "X", in which case it is that place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from ..errors import InvalidNotationSyntax
from .bell import BELL_NAMES, symbol_index
from .row import Row
from .stage import Stage


CROSS = "-"
_X_PLACE = BELL_NAMES.index("X")
_SEPARATORS = frozenset(". \t\r\n")


def _is_cross_symbol(symbol: str, stage: Stage) -> bool:
    if symbol == CROSS:
        return True
    return symbol in ("x", "X") and stage.num_bells <= _X_PLACE


def _pair_positions(
    places: Iterable[int], stage: Stage
) -> Tuple[Optional[Tuple[int, ...]], bytes, int]:
    """
    Pair up the unfixed positions of a change.

    Returns:
        (fixed places including any implicit one, transposition, -1) on
        success, or (None, b"", position) for the first unpairable position
    """
    n = stage.num_bells
    fixed = set(places)
    perm = list(range(n))
    p = 0
    while p < n:
        if p in fixed:
            p += 1
        elif p + 1 < n and p + 1 not in fixed:
            perm[p], perm[p + 1] = p + 1, p
            p += 2
        elif p == n - 1 and stage.is_odd:
            fixed.add(p)
            p += 1
        else:
            return None, b"", p
    return tuple(sorted(fixed)), bytes(perm), -1


@dataclass(frozen=True, slots=True)
class PlaceNotation:
    """
    A single change at a fixed stage.

    Attributes:
        stage: Stage this change applies to
        places: Every fixed position, sorted, including the implicit top
            place on odd stages
        transposition: The change realised as a row of positions
            (derived, not compared)

    Invariants:
        - every place < stage
        - the unfixed positions pair up into adjacent swaps

    Example:
        >>> pn = parse_notation("-", Stage(5))
        >>> str(pn.apply(Row.rounds(Stage(5))))
        '10324'
        >>> str(parse_notation("10", Stage(5)))
        '014'
    """

    stage: Stage
    places: Tuple[int, ...]
    transposition: Row = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate places and derive the transposition."""
        label = "".join(BELL_NAMES[p] if 0 <= p < len(BELL_NAMES) else "?" for p in self.places)
        for place in self.places:
            if not 0 <= place < self.stage.num_bells:
                raise InvalidNotationSyntax(
                    f"Place {place} is out of range for {self.stage.num_bells} bells",
                    text=label,
                    token=label,
                )
        fixed, perm, bad = _pair_positions(self.places, self.stage)
        if fixed is None:
            raise InvalidNotationSyntax(
                f"Position {bad} cannot be paired with a neighbour",
                text=label,
                token=label,
            )
        object.__setattr__(self, "places", fixed)
        object.__setattr__(self, "transposition", Row._unchecked(self.stage, perm))

    @classmethod
    def cross(cls, stage: Stage) -> PlaceNotation:
        """The change in which every adjacent pair swaps."""
        return cls(stage, ())

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_cross(self) -> bool:
        """True if no place is made (apart from an odd stage's implicit top place)."""
        if self.stage.is_odd:
            return self.places == (self.stage.num_bells - 1,)
        return not self.places

    def has_place(self, position: int) -> bool:
        return position in self.places

    # ─────────────────────────────────────────────────────────────────────────
    # Application
    # ─────────────────────────────────────────────────────────────────────────

    def apply(self, row: Row) -> Row:
        """
        Derive the row that follows ``row`` under this change.

        Raises:
            StageMismatch: If the row is at a different stage
        """
        self.stage.ensure_matching(row.stage, "apply")
        return row.multiply(self.transposition)

    def __str__(self) -> str:
        if self.is_cross:
            return CROSS
        return "".join(BELL_NAMES[p] for p in self.places)


# ─────────────────────────────────────────────────────────────────────────────
# Parsing
# ─────────────────────────────────────────────────────────────────────────────

def _parse_token(token: str, stage: Stage, text: str, offset: int) -> PlaceNotation:
    """Parse one change, reporting errors against the enclosing ``text``."""
    if not token:
        raise InvalidNotationSyntax("Empty place notation", text=text, token=token, index=offset)

    if len(token) == 1 and _is_cross_symbol(token, stage):
        return PlaceNotation.cross(stage)

    places: List[int] = []
    for i, symbol in enumerate(token):
        if _is_cross_symbol(symbol, stage):
            raise InvalidNotationSyntax(
                "Cross symbol cannot be combined with places",
                text=text, token=token, index=offset + i,
            )
        place = symbol_index(symbol)
        if place is None:
            raise InvalidNotationSyntax(
                f"Unknown place symbol {symbol!r}",
                text=text, token=token, index=offset + i,
            )
        if place >= stage.num_bells:
            raise InvalidNotationSyntax(
                f"Place {symbol!r} is out of range [0, {stage.num_bells})",
                text=text, token=token, index=offset + i,
            )
        places.append(place)

    fixed, _, bad = _pair_positions(places, stage)
    if fixed is None:
        raise InvalidNotationSyntax(
            f"Position {bad} cannot be paired with a neighbour",
            text=text, token=token, index=offset,
        )
    return PlaceNotation(stage, fixed)


def parse_notation(text: str, stage: Stage) -> PlaceNotation:
    """
    Parse a single change.

    Args:
        text: A cross symbol, or a run of place symbols (case-insensitive,
            any order)
        stage: Stage the change applies to

    Returns:
        PlaceNotation bound to ``stage``

    Raises:
        InvalidNotationSyntax: On empty text, unknown or out-of-range
            symbols, a cross mixed with places, or unpairable positions
    """
    return _parse_token(text, stage, text, 0)


def _parse_segment(segment: str, stage: Stage, text: str, offset: int) -> List[PlaceNotation]:
    """Split a segment of block notation into changes."""
    changes: List[PlaceNotation] = []
    start: Optional[int] = None

    def flush(end: int) -> None:
        nonlocal start
        if start is not None:
            changes.append(_parse_token(segment[start:end], stage, text, offset + start))
            start = None

    for i, symbol in enumerate(segment):
        if symbol in _SEPARATORS:
            flush(i)
        elif _is_cross_symbol(symbol, stage):
            flush(i)
            changes.append(PlaceNotation.cross(stage))
        elif start is None:
            start = i
    flush(len(segment))

    if not changes:
        raise InvalidNotationSyntax("Empty notation block", text=text, token=segment, index=offset)
    return changes


def _reflect(changes: List[PlaceNotation]) -> List[PlaceNotation]:
    """Extend a half-lead into a palindrome around its last change."""
    return changes + changes[-2::-1]


def parse_notation_sequence(text: str, stage: Stage) -> Tuple[PlaceNotation, ...]:
    """
    Parse a lead written in block notation.

    Syntax:
        - changes are separated by "." or whitespace; a cross stands alone
          and also separates its neighbours ("-05-05" is four changes)
        - "&" prefix: the block is a palindrome
        - "+" prefix: the block is taken as written (the default)
        - "a,b": each comma-separated segment is a palindrome, unless it
          starts with "+"; segments are concatenated

    Example:
        >>> lead = parse_notation_sequence("-05-05-05,01", Stage(6))
        >>> len(lead)
        12

    Raises:
        InvalidNotationSyntax: Reporting the offending token and its index
    """
    if not text.strip():
        raise InvalidNotationSyntax("Empty notation block", text=text, token=text, index=0)

    segments: List[Tuple[str, int]] = []
    offset = 0
    for part in text.split(","):
        segments.append((part, offset))
        offset += len(part) + 1

    has_comma = len(segments) > 1
    changes: List[PlaceNotation] = []
    for segment, seg_offset in segments:
        stripped = segment.lstrip()
        lead_ws = len(segment) - len(stripped)
        symmetric = has_comma
        if stripped.startswith("&"):
            symmetric = True
            stripped = stripped[1:]
            lead_ws += 1
        elif stripped.startswith("+"):
            symmetric = False
            stripped = stripped[1:]
            lead_ws += 1

        block = _parse_segment(stripped, stage, text, seg_offset + lead_ws)
        changes.extend(_reflect(block) if symmetric else block)

    return tuple(changes)


def format_notation_sequence(notations: Sequence[PlaceNotation]) -> str:
    """
    Canonical text for a sequence of changes.

    Places are separated by "." only where two place changes meet; crosses
    need no separator.
    """
    parts: List[str] = []
    prev_was_places = False
    for pn in notations:
        if pn.is_cross:
            parts.append(CROSS)
            prev_was_places = False
        else:
            if prev_was_places:
                parts.append(".")
            parts.append(str(pn))
            prev_was_places = True
    return "".join(parts)
