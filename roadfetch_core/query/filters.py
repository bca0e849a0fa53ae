"""RoadFetch Filters - Non-Scoring Query Restrictions.

Filters restrict matches without contributing to the score. They are
excluded from highlighting unless a field asks for filter clauses to
be highlighted.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional

from roadfetch_core.query.nodes import QueryNode

if TYPE_CHECKING:
    from roadfetch_core.query.visitor import FilterVisitor


class Filter(ABC):
    """Abstract base class for filters."""

    def accept(self, visitor: "FilterVisitor", context: Any) -> Any:
        """Dispatch to the visitor.

        Filters defined outside this module land in visit_unknown_filter.
        """
        return visitor.visit_unknown_filter(self, context)

    @abstractmethod
    def to_string(self) -> str:
        pass

    def __str__(self) -> str:
        return self.to_string()


@dataclass
class TermFilter(Filter):
    """Accepts documents containing a term."""

    field: str
    term: str

    def accept(self, visitor: "FilterVisitor", context: Any) -> Any:
        return visitor.visit_term_filter(self, context)

    def to_string(self) -> str:
        return f"{self.field}:{self.term}"


@dataclass
class TermsFilter(Filter):
    """Accepts documents containing any of several terms."""

    field: str
    terms: List[str] = dataclasses.field(default_factory=list)

    def accept(self, visitor: "FilterVisitor", context: Any) -> Any:
        return visitor.visit_terms_filter(self, context)

    def to_string(self) -> str:
        return f"{self.field}:[{', '.join(self.terms)}]"


@dataclass
class RangeFilter(Filter):
    """Accepts documents with a field value inside a range."""

    field: str
    gte: Optional[Any] = None
    lte: Optional[Any] = None

    def accept(self, visitor: "FilterVisitor", context: Any) -> Any:
        return visitor.visit_range_filter(self, context)

    def to_string(self) -> str:
        low = "*" if self.gte is None else self.gte
        high = "*" if self.lte is None else self.lte
        return f"{self.field}:[{low} TO {high}]"


@dataclass
class BooleanFilter(Filter):
    """All must filters accept and no must_not filter accepts."""

    must: List[Filter] = dataclasses.field(default_factory=list)
    must_not: List[Filter] = dataclasses.field(default_factory=list)

    def accept(self, visitor: "FilterVisitor", context: Any) -> Any:
        return visitor.visit_boolean_filter(self, context)

    def to_string(self) -> str:
        parts = [f"+{f.to_string()}" for f in self.must]
        parts.extend(f"-{f.to_string()}" for f in self.must_not)
        return f"BooleanFilter({' '.join(parts)})"


class QueryWrapperFilter(Filter):
    """Uses the matches of a query, typically a multi-term query, as a filter."""

    def __init__(self, query: QueryNode):
        self._query = query

    def wrapped_query(self) -> QueryNode:
        """The query this filter wraps."""
        return self._query

    def accept(self, visitor: "FilterVisitor", context: Any) -> Any:
        return visitor.visit_query_wrapper_filter(self, context)

    def to_string(self) -> str:
        return f"QueryWrapperFilter({self._query.to_string()})"

    def __repr__(self) -> str:
        return f"QueryWrapperFilter({self._query!r})"


__all__ = [
    "Filter",
    "TermFilter",
    "TermsFilter",
    "RangeFilter",
    "BooleanFilter",
    "QueryWrapperFilter",
]
