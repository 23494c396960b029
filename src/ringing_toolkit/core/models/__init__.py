"""
Core Models Package

Immutable, validated value types for change ringing.

**DESIGN RATIONALE:**

All models in this package are frozen dataclasses. This ensures:
1. No accidental mutation of a row once it has been handed out
2. Safe to share between threads without locking
3. Can be used as dict keys or in sets
4. Validation happens once, at construction

| Type | Role |
|------|------|
| `Bell` | One bell, zero-based |
| `Stage` | Number of bells; fixes the permutation domain |
| `Row` | Permutation of the bells, packed as bytes |
| `PlaceNotation` | One change, by its fixed places |
| `Block` | Generated rows plus lead boundaries |
| `Method` | One lead of notation with a name and class |
"""

from .bell import BELL_NAMES, Bell
from .stage import MAX_STAGE, Stage
from .row import Parity, Row
from .place_notation import (
    PlaceNotation,
    format_notation_sequence,
    parse_notation,
    parse_notation_sequence,
)
from .block import Block, RowPosition
from .method import FullClass, Method, MethodClass

__all__ = [
    "BELL_NAMES",
    "MAX_STAGE",
    "Bell",
    "Stage",
    "Parity",
    "Row",
    "PlaceNotation",
    "parse_notation",
    "parse_notation_sequence",
    "format_notation_sequence",
    "Block",
    "RowPosition",
    "FullClass",
    "Method",
    "MethodClass",
]
