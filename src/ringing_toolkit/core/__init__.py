"""
Ringing Toolkit Core Package

The permutation algebra shared by every other subpackage: bells, stages,
rows, place notation, blocks and methods, plus the error taxonomy.

Once a Row, PlaceNotation or Block exists it is valid; everything
downstream relies on that and never re-checks.
"""

from .errors import (
    DoesNotClose,
    FalsenessFound,
    InvalidNotationSyntax,
    InvalidPermutation,
    MethodNotFound,
    RingingError,
    StageMismatch,
)
from .models import (
    Bell,
    Block,
    FullClass,
    Method,
    MethodClass,
    Parity,
    PlaceNotation,
    Row,
    RowPosition,
    Stage,
    format_notation_sequence,
    parse_notation,
    parse_notation_sequence,
)
from .algebra import apply, inverse, is_rounds, multiply, parity

__all__ = [
    "RingingError",
    "StageMismatch",
    "InvalidPermutation",
    "InvalidNotationSyntax",
    "DoesNotClose",
    "FalsenessFound",
    "MethodNotFound",
    "Bell",
    "Stage",
    "Row",
    "Parity",
    "PlaceNotation",
    "Block",
    "RowPosition",
    "Method",
    "MethodClass",
    "FullClass",
    "parse_notation",
    "parse_notation_sequence",
    "format_notation_sequence",
    "multiply",
    "inverse",
    "is_rounds",
    "parity",
    "apply",
]
