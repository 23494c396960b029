"""
Module: method

Purpose:
    Provides the Method dataclass - a named template of one lead of place
    notation at a fixed stage - and its classification (FullClass). A
    Method owns no generated rows; blocks are built from it on demand.

Key Functions:
    - Method.from_notation(name, text, stage): Parse block notation
    - Method.title: Full title, e.g. "Cambridge Surprise Minor"
    - Method.lead_head: Row reached after one lead from rounds
    - Method.lead() / Method.plain_course(): Generate blocks
    - Method.course_from(course_head): Plain course from another head

Dependencies:
    - dataclasses (std)
    - .place_notation (parsing)
    - generation.builder (imported lazily to avoid a cycle)

Used By:
    - falseness.detector.FalsenessDetector
    - falseness.direct / falseness.relational
    - library.method_lib
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import reduce
from typing import TYPE_CHECKING, Optional, Tuple

from .block import Block
from .place_notation import PlaceNotation, format_notation_sequence, parse_notation_sequence
from .row import Row
from .stage import Stage

if TYPE_CHECKING:
    from ...generation.config import GenerationConfig


class MethodClass(str, Enum):
    """Central Council method class."""
    PRINCIPLE = "Principle"
    BOB = "Bob"
    PLACE = "Place"
    TREBLE_BOB = "Treble Bob"
    SURPRISE = "Surprise"
    DELIGHT = "Delight"
    TREBLE_PLACE = "Treble Place"
    ALLIANCE = "Alliance"
    HYBRID = "Hybrid"
    SLOW_COURSE = "Slow Course"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class FullClass:
    """
    Method class plus the flags that qualify it in a title.

    Example:
        >>> str(FullClass(MethodClass.SURPRISE, is_little=True))
        'Little Surprise'
    """

    method_class: MethodClass = MethodClass.PRINCIPLE
    is_little: bool = False
    is_differential: bool = False
    is_jump: bool = False

    def __str__(self) -> str:
        words = []
        if self.is_jump:
            words.append("Jump")
        if self.is_differential:
            words.append("Differential")
        if self.is_little:
            words.append("Little")
        # Principles carry no class name in their titles
        if self.method_class != MethodClass.PRINCIPLE:
            words.append(self.method_class.value)
        return " ".join(words)


@dataclass(frozen=True)
class Method:
    """
    One lead of place notation with a name and stage.

    Attributes:
        name: Method name without class or stage ("Cambridge")
        stage: Stage of every change in the lead
        notations: Changes making up one lead
        full_class: Classification used to build the title
        explicit_title: Title to use instead of the generated one

    Invariants:
        - notations is non-empty
        - every notation is at ``stage``

    Example:
        >>> pb = Method.from_notation("Plain", "-0-0-,01", Stage(5),
        ...                           full_class=FullClass(MethodClass.BOB))
        >>> pb.title
        'Plain Bob Doubles'
        >>> str(pb.lead_head)
        '02413'
    """

    name: str
    stage: Stage
    notations: Tuple[PlaceNotation, ...]
    full_class: FullClass = field(default_factory=FullClass)
    explicit_title: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate notation stages on construction."""
        if not self.notations:
            raise ValueError(f"Method {self.name!r} has no place notation")
        for pn in self.notations:
            self.stage.ensure_matching(pn.stage, f"method {self.name!r}")

    @classmethod
    def from_notation(
        cls,
        name: str,
        text: str,
        stage: Stage,
        *,
        full_class: Optional[FullClass] = None,
        title: Optional[str] = None,
    ) -> Method:
        """
        Build a method from block notation text.

        Raises:
            InvalidNotationSyntax: If the notation does not parse at ``stage``
        """
        return cls(
            name=name,
            stage=stage,
            notations=parse_notation_sequence(text, stage),
            full_class=full_class or FullClass(),
            explicit_title=title,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def title(self) -> str:
        """Full title: name, class and stage name."""
        if self.explicit_title is not None:
            return self.explicit_title
        words = [self.name, str(self.full_class), self.stage.name or str(self.stage)]
        return " ".join(w for w in words if w)

    @property
    def notation_text(self) -> str:
        return format_notation_sequence(self.notations)

    @property
    def lead_length(self) -> int:
        return len(self.notations)

    @property
    def lead_head(self) -> Row:
        """Row reached by ringing one lead from rounds."""
        return reduce(lambda row, pn: pn.apply(row), self.notations, Row.rounds(self.stage))

    @property
    def leads_per_course(self) -> int:
        """Leads needed for the plain course to return to rounds."""
        return self.lead_head.order()

    @property
    def course_length(self) -> int:
        return self.lead_length * self.leads_per_course

    # ─────────────────────────────────────────────────────────────────────────
    # Block Generation
    # ─────────────────────────────────────────────────────────────────────────

    def lead(self, seed: Optional[Row] = None) -> Block:
        """One lead starting from ``seed`` (rounds by default)."""
        from ...generation.builder import generate_leads

        return generate_leads(seed or Row.rounds(self.stage), self.notations, 1)

    def plain_course(self, config: Optional[GenerationConfig] = None) -> Block:
        """
        Leads from rounds until the lead head returns to rounds.

        Raises:
            DoesNotClose: If the course exceeds the configured safety cap
        """
        from ...generation.builder import generate_until_rounds

        return generate_until_rounds(Row.rounds(self.stage), self.notations, config)

    def course_from(self, course_head: Row) -> Block:
        """The plain course with every row left-multiplied by ``course_head``."""
        return self.plain_course().pre_multiply(course_head)

    def __str__(self) -> str:
        return self.title
