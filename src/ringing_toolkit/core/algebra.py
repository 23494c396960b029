"""
Module: core.algebra

Purpose:
    Free-function forms of the row algebra, for callers that prefer
    ``multiply(a, b)`` to ``a * b``. Each function delegates to the
    corresponding method on Row or PlaceNotation.

Key Functions:
    - multiply(a, b): ``r[i] = a[b[i]]``
    - inverse(a): Unique inverse row
    - is_rounds(a): Identity test
    - parity(a): Sign of the permutation
    - apply(row, notation): Next row under a change

Dependencies:
    - .models.row.Row
    - .models.place_notation.PlaceNotation

Used By:
    - Public API (re-exported from ringing_toolkit.core)
"""

from __future__ import annotations

from .models.place_notation import PlaceNotation
from .models.row import Parity, Row


def multiply(a: Row, b: Row) -> Row:
    """Compose two rows (``b`` applied first). Raises StageMismatch."""
    return a.multiply(b)


def inverse(a: Row) -> Row:
    return a.inverse()


def is_rounds(a: Row) -> bool:
    return a.is_rounds()


def parity(a: Row) -> Parity:
    return a.parity


def apply(row: Row, notation: PlaceNotation) -> Row:
    """Row following ``row`` under ``notation``. Raises StageMismatch."""
    return notation.apply(row)
