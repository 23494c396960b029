"""
Module: library.method_lib

Purpose:
    In-memory method catalog: look methods up by full title and suggest
    near misses. Loading the catalog (XML/JSON ingestion, downloads,
    caching) is the caller's job; entries arrive here already split into
    title, stage and compact method.

Key Classes:
    - CompactMethod: Name, class and unparsed notation of a stored method
    - MethodLib: Stage -> title -> CompactMethod index
    - QueryResult: Success, notation parse failure, or not found

Dependencies:
    - rapidfuzz: Levenshtein distance ranking for suggestions
    - core.models (Method, Stage, parse_notation_sequence)

Used By:
    - Public API (catalog collaborators build a MethodLib and query it)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, Iterable, Iterator, Mapping, Optional, Sequence, Tuple, Union

from rapidfuzz import process
from rapidfuzz.distance import Levenshtein

from ..core.errors import InvalidNotationSyntax, MethodNotFound
from ..core.models.method import FullClass, Method
from ..core.models.place_notation import parse_notation_sequence
from ..core.models.stage import Stage

logger = logging.getLogger(__name__)

Suggestion = Tuple[str, int]


@dataclass(frozen=True, slots=True)
class CompactMethod:
    """
    A stored method whose notation has not been parsed yet.

    Attributes:
        name: Method name without class or stage
        full_class: Classification
        place_notation: Block notation text
    """

    name: str
    full_class: FullClass
    place_notation: str

    def to_method(self, stage: Stage, title: str) -> Method:
        """
        Parse into a full Method.

        Raises:
            InvalidNotationSyntax: If the stored notation is malformed
        """
        return Method(
            name=self.name,
            stage=stage,
            notations=parse_notation_sequence(self.place_notation, stage),
            full_class=self.full_class,
            explicit_title=title,
        )


class QueryStatus(str, Enum):
    """Outcome of a title lookup."""
    SUCCESS = "success"
    PN_PARSE_ERROR = "pn_parse_error"
    NOT_FOUND = "not_found"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class QueryResult:
    """
    Result of looking a title up in a MethodLib.

    Attributes:
        status: Which of the three outcomes this is
        method: The method (SUCCESS only)
        place_notation: The stored notation that failed (PN_PARSE_ERROR only)
        error: The parse error (PN_PARSE_ERROR only)
        suggestions: Closest titles with edit distances (NOT_FOUND only,
            when suggestions were requested)
        title: The title that was looked up
    """

    status: QueryStatus
    method: Optional[Method] = None
    place_notation: Optional[str] = None
    error: Optional[InvalidNotationSyntax] = None
    suggestions: Tuple[Suggestion, ...] = ()
    title: str = ""

    @property
    def is_success(self) -> bool:
        return self.status == QueryStatus.SUCCESS

    def unwrap(self) -> Method:
        """
        The method, or an exception describing why there is none.

        Raises:
            InvalidNotationSyntax: If the stored notation failed to parse
            MethodNotFound: If the title was not found; carries the suggestions
        """
        if self.status == QueryStatus.SUCCESS:
            return self.method
        if self.status == QueryStatus.PN_PARSE_ERROR:
            raise self.error
        raise MethodNotFound(self.title, self.suggestions)

    def unwrap_parse_err(self) -> Union[Method, Tuple[Suggestion, ...]]:
        """
        The method, or the suggestions if the title was not found.

        The suggestions are empty unless they were requested, so callers
        tell the two apart with ``isinstance(value, Method)``.

        Raises:
            InvalidNotationSyntax: If the stored notation failed to parse
        """
        if self.status == QueryStatus.PN_PARSE_ERROR:
            raise self.error
        if self.status == QueryStatus.NOT_FOUND:
            return self.suggestions
        return self.method

    def map_not_found(
        self, fn: Callable[[Tuple[Suggestion, ...]], Sequence[Suggestion]]
    ) -> QueryResult:
        """Replace the suggestions of a NOT_FOUND result; other results pass through."""
        if self.status != QueryStatus.NOT_FOUND:
            return self
        return replace(self, suggestions=tuple(fn(self.suggestions)))


class MethodLib:
    """
    Catalog of methods, indexed by stage then full title.

    Example:
        >>> lib = MethodLib.from_entries([
        ...     ("Plain Bob Minor", Stage(6),
        ...      CompactMethod("Plain", FullClass(MethodClass.BOB), "-05-05-05,01")),
        ... ])
        >>> lib.get_by_title("Plain Bob Minor").unwrap().lead_length
        12
    """

    def __init__(self, method_map: Mapping[Stage, Mapping[str, CompactMethod]]):
        self._method_map: Dict[Stage, Dict[str, CompactMethod]] = {
            stage: dict(methods) for stage, methods in method_map.items()
        }

    @classmethod
    def from_entries(cls, entries: Iterable[Tuple[str, Stage, CompactMethod]]) -> MethodLib:
        """
        Build a library from ``(title, stage, compact_method)`` entries.

        Raises:
            ValueError: If a title appears twice at the same stage
        """
        method_map: Dict[Stage, Dict[str, CompactMethod]] = {}
        for title, stage, compact in entries:
            methods = method_map.setdefault(stage, {})
            if title in methods:
                raise ValueError(f"Duplicate method title at {stage}: {title!r}")
            methods[title] = compact
        return cls(method_map)

    def __len__(self) -> int:
        return sum(len(methods) for methods in self._method_map.values())

    def titles(self) -> Iterator[str]:
        for methods in self._method_map.values():
            yield from methods

    def __contains__(self, title: object) -> bool:
        return any(title in methods for methods in self._method_map.values())

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    def get_by_title(self, title: str) -> QueryResult:
        """
        Look a method up by its full title.

        The stage is read from the last word of the title, so
        "Cambridge Surprise Minor" is only searched for among Minor methods.
        """
        stage = Stage.from_name(title.rsplit(" ", 1)[-1])
        if stage is None:
            return QueryResult(QueryStatus.NOT_FOUND, title=title)

        compact = self._method_map.get(stage, {}).get(title)
        if compact is None:
            return QueryResult(QueryStatus.NOT_FOUND, title=title)

        try:
            method = compact.to_method(stage, title)
        except InvalidNotationSyntax as e:
            logger.warning(f"Stored notation for {title!r} does not parse: {e}")
            return QueryResult(
                QueryStatus.PN_PARSE_ERROR,
                place_notation=compact.place_notation,
                error=e,
                title=title,
            )
        return QueryResult(QueryStatus.SUCCESS, method=method, title=title)

    def get_by_title_with_suggestions(self, title: str, num_suggestions: int) -> QueryResult:
        """
        Look a method up, suggesting similar titles if it is not found.

        Suggestions are ranked by Levenshtein distance, closest first.
        """
        result = self.get_by_title(title).map_not_found(
            lambda _: self._generate_suggestions(title, num_suggestions)
        )
        if result.status == QueryStatus.NOT_FOUND:
            logger.info(f"No method titled {title!r}; suggesting {result.suggestions}")
        return result

    def _generate_suggestions(self, title: str, num_suggestions: int) -> Tuple[Suggestion, ...]:
        if num_suggestions <= 0:
            return ()
        matches = process.extract(
            title,
            list(self.titles()),
            scorer=Levenshtein.distance,
            limit=num_suggestions,
        )
        return tuple((choice, int(distance)) for choice, distance, _ in matches)
