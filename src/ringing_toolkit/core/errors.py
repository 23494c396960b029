"""
Module: core.errors

Purpose:
    The error taxonomy shared by every part of the toolkit. All
    construction-time invariant violations are raised here, at the
    boundary, so that the algebra downstream never re-checks its inputs.

Key Classes:
    - RingingError: Base class for everything raised by the toolkit
    - StageMismatch: Operands of an operation have different stages
    - InvalidPermutation: Proposed row content is not a bijection
    - InvalidNotationSyntax: Place notation text could not be parsed
    - DoesNotClose: Until-rounds generation hit its safety cap
    - FalsenessFound: Raised on request when a report contains collisions
    - MethodNotFound: A method library lookup found no such title

Dependencies:
    - typing (std)

Used By:
    - core.models (all constructors)
    - generation.builder
    - falseness.report
    - library.method_lib
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from .models.row import Row
    from .models.stage import Stage
    from ..falseness.report import Collision


class RingingError(Exception):
    """Base class for all toolkit errors."""


class StageMismatch(RingingError, ValueError):
    """Raised when two operands of an operation have different stages."""

    def __init__(self, left: Stage, right: Stage, operation: str = ""):
        where = f" in {operation}" if operation else ""
        super().__init__(
            f"Stage mismatch{where}: {left.num_bells} bells vs {right.num_bells} bells"
        )
        self.left = left
        self.right = right
        self.operation = operation


class InvalidPermutation(RingingError, ValueError):
    """
    Raised when a proposed row is not a bijection over its stage.

    Attributes:
        kind: One of "length", "unknown_symbol", "out_of_range", "duplicate"
        position: Position of the first offending entry (None for "length")
        missing: Bells absent from the row, when known
    """

    def __init__(
        self,
        message: str,
        *,
        kind: str,
        position: Optional[int] = None,
        missing: Tuple[int, ...] = (),
    ):
        super().__init__(message)
        self.kind = kind
        self.position = position
        self.missing = missing


class InvalidNotationSyntax(RingingError, ValueError):
    """
    Raised when place notation text cannot be parsed at a stage.

    Attributes:
        text: The full text being parsed
        token: The offending token (may be empty for an empty input)
        index: Character index of the token within ``text``
    """

    def __init__(self, message: str, *, text: str, token: str = "", index: int = 0):
        super().__init__(f"{message} (token {token!r} at index {index} in {text!r})")
        self.reason = message
        self.text = text
        self.token = token
        self.index = index


class DoesNotClose(RingingError):
    """Raised when 'generate until rounds' exceeds its safety cap."""

    def __init__(self, rows_generated: int, leads_generated: int, last_row: Row):
        super().__init__(
            f"Block did not return to rounds within the safety cap "
            f"({rows_generated} rows, {leads_generated} leads, last row {last_row})"
        )
        self.rows_generated = rows_generated
        self.leads_generated = leads_generated
        self.last_row = last_row


class FalsenessFound(RingingError):
    """Raised by ``FalsenessReport.raise_if_false`` when a row repeats."""

    def __init__(self, collision: Collision):
        super().__init__(
            f"Row {collision.row} appears at {collision.first} and {collision.second}"
        )
        self.collision = collision


class MethodNotFound(RingingError, LookupError):
    """
    Raised when a method library has no method with a given title.

    Attributes:
        title: The title looked up
        suggestions: Closest stored titles with edit distances, when requested
    """

    def __init__(self, title: str, suggestions: Tuple[Tuple[str, int], ...] = ()):
        hint = ""
        if suggestions:
            hint = "; did you mean " + ", ".join(repr(s) for s, _ in suggestions) + "?"
        super().__init__(f"No method titled {title!r}{hint}")
        self.title = title
        self.suggestions = suggestions
