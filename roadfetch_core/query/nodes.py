"""RoadFetch Query Nodes - The Parsed Query Tree.

The query parser builds these nodes once per request. The fetch phase
only walks them: every node dispatches to a QueryVisitor through
accept(), so each walker handles every node kind explicitly.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import dataclasses
import fnmatch
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from roadfetch_core.exceptions import TooManyClausesError
from roadfetch_core.index.segment import SegmentReader, Uid
from roadfetch_core.query.child_hits import ChildHit, ChildHitIndex

if TYPE_CHECKING:
    from roadfetch_core.query.filters import Filter
    from roadfetch_core.query.visitor import QueryVisitor

logger = logging.getLogger(__name__)


class Occur(Enum):
    """How a boolean clause participates in matching."""

    MUST = "+"
    SHOULD = ""
    MUST_NOT = "-"


@dataclass
class QueryNode(ABC):
    """Abstract base class for query nodes."""

    def accept(self, visitor: "QueryVisitor", context: Any) -> Any:
        """Dispatch to the visitor.

        Nodes defined outside this module land in visit_unknown.
        """
        return visitor.visit_unknown(self, context)

    @abstractmethod
    def to_string(self) -> str:
        """Convert to query string representation."""
        pass

    def __str__(self) -> str:
        return self.to_string()


def _boosted(text: str, boost: float) -> str:
    return text if boost == 1.0 else f"{text}^{boost}"


@dataclass
class TermQuery(QueryNode):
    """Matches documents containing an exact term."""

    field: str = ""
    term: str = ""
    boost: float = 1.0

    def accept(self, visitor: "QueryVisitor", context: Any) -> Any:
        return visitor.visit_term(self, context)

    def to_string(self) -> str:
        return _boosted(f"{self.field}:{self.term}", self.boost)


@dataclass
class PhraseQuery(QueryNode):
    """Matches terms in order, at most slop positions apart."""

    field: str = ""
    terms: List[str] = dataclasses.field(default_factory=list)
    slop: int = 0
    boost: float = 1.0

    def accept(self, visitor: "QueryVisitor", context: Any) -> Any:
        return visitor.visit_phrase(self, context)

    def to_string(self) -> str:
        result = f'{self.field}:"{" ".join(self.terms)}"'
        if self.slop > 0:
            result = f"{result}~{self.slop}"
        return _boosted(result, self.boost)


@dataclass
class BooleanClause:
    """A sub query and how it occurs."""

    query: QueryNode
    occur: Occur = Occur.SHOULD

    @property
    def is_prohibited(self) -> bool:
        return self.occur == Occur.MUST_NOT


@dataclass
class BooleanQuery(QueryNode):
    """Combines clauses with MUST, SHOULD, and MUST_NOT."""

    clauses: List[BooleanClause] = dataclasses.field(default_factory=list)
    boost: float = 1.0

    def add(self, query: QueryNode, occur: Occur = Occur.SHOULD) -> "BooleanQuery":
        """Add a clause."""
        self.clauses.append(BooleanClause(query, occur))
        return self

    def add_must(self, query: QueryNode) -> "BooleanQuery":
        """Add a MUST clause."""
        return self.add(query, Occur.MUST)

    def add_should(self, query: QueryNode) -> "BooleanQuery":
        """Add a SHOULD clause."""
        return self.add(query, Occur.SHOULD)

    def add_must_not(self, query: QueryNode) -> "BooleanQuery":
        """Add a MUST_NOT clause."""
        return self.add(query, Occur.MUST_NOT)

    def accept(self, visitor: "QueryVisitor", context: Any) -> Any:
        return visitor.visit_boolean(self, context)

    def to_string(self) -> str:
        parts = [f"{c.occur.value}{c.query.to_string()}" for c in self.clauses]
        return _boosted(f"({' '.join(parts)})", self.boost)


@dataclass
class ConstantScoreQuery(QueryNode):
    """Wraps a query or a filter and gives every match the same score."""

    query: Optional[QueryNode] = None
    filter: Optional["Filter"] = None
    boost: float = 1.0

    def __post_init__(self):
        if self.query is None and self.filter is None:
            raise ValueError("ConstantScoreQuery needs a query or a filter")

    def accept(self, visitor: "QueryVisitor", context: Any) -> Any:
        return visitor.visit_constant_score(self, context)

    def to_string(self) -> str:
        inner = self.query.to_string() if self.query is not None else self.filter.to_string()
        return _boosted(f"ConstantScore({inner})", self.boost)


@dataclass
class FilteredQuery(QueryNode):
    """A query restricted to documents accepted by a filter."""

    query: Optional[QueryNode] = None
    filter: Optional["Filter"] = None
    boost: float = 1.0

    def __post_init__(self):
        if self.query is None:
            self.query = MatchAllQuery()

    def accept(self, visitor: "QueryVisitor", context: Any) -> Any:
        return visitor.visit_filtered(self, context)

    def to_string(self) -> str:
        filter_text = self.filter.to_string() if self.filter is not None else "*"
        return _boosted(f"filtered({self.query.to_string()})->{filter_text}", self.boost)


@dataclass
class DisjunctionMaxQuery(QueryNode):
    """Scores by the best matching option."""

    options: List[QueryNode] = dataclasses.field(default_factory=list)
    tie_breaker: float = 0.0
    boost: float = 1.0

    def accept(self, visitor: "QueryVisitor", context: Any) -> Any:
        return visitor.visit_dis_max(self, context)

    def to_string(self) -> str:
        inner = " | ".join(o.to_string() for o in self.options)
        return _boosted(f"({inner})~{self.tie_breaker}", self.boost)


@dataclass
class FunctionScoreQuery(QueryNode):
    """Re-scores a sub query with a score function."""

    query: Optional[QueryNode] = None
    function: str = "identity"
    boost: float = 1.0

    def __post_init__(self):
        if self.query is None:
            raise ValueError("FunctionScoreQuery needs a sub query")

    def accept(self, visitor: "QueryVisitor", context: Any) -> Any:
        return visitor.visit_function_score(self, context)

    def to_string(self) -> str:
        return _boosted(f"function score ({self.query.to_string()}, function: {self.function})", self.boost)


@dataclass
class MatchAllQuery(QueryNode):
    """Matches every document."""

    boost: float = 1.0

    def accept(self, visitor: "QueryVisitor", context: Any) -> Any:
        return visitor.visit_match_all(self, context)

    def to_string(self) -> str:
        return _boosted("*:*", self.boost)


class MultiTermQuery(QueryNode):
    """A query matching every term of a field accepted by a predicate.

    Subclasses provide field, boost, matches() and optionally
    common_prefix(). rewrite() expands the query against one segment.
    """

    field: str
    boost: float

    def accept(self, visitor: "QueryVisitor", context: Any) -> Any:
        return visitor.visit_multi_term(self, context)

    @abstractmethod
    def matches(self, term: str) -> bool:
        """Whether an indexed term is accepted."""
        pass

    def common_prefix(self) -> str:
        """Prefix every accepted term shares, used to narrow the term scan."""
        return ""

    def rewrite(self, reader: SegmentReader, max_clause_count: int) -> BooleanQuery:
        """Expand into a disjunction of exact terms present in the segment.

        Raises:
            TooManyClausesError: If more than max_clause_count terms match
        """
        rewritten = BooleanQuery(boost=self.boost)
        for term in reader.terms(self.field, prefix=self.common_prefix()):
            if not self.matches(term):
                continue
            if len(rewritten.clauses) >= max_clause_count:
                raise TooManyClausesError(max_clause_count)
            rewritten.add_should(TermQuery(self.field, term, boost=self.boost))
        return rewritten


@dataclass
class WildcardQuery(MultiTermQuery):
    """Matches terms against a * / ? pattern."""

    field: str = ""
    pattern: str = ""
    boost: float = 1.0

    def matches(self, term: str) -> bool:
        return fnmatch.fnmatchcase(term, self.pattern)

    def common_prefix(self) -> str:
        match = re.match(r"[^*?\[]*", self.pattern)
        return match.group() if match else ""

    def to_string(self) -> str:
        return _boosted(f"{self.field}:{self.pattern}", self.boost)


@dataclass
class PrefixQuery(MultiTermQuery):
    """Matches terms starting with a prefix."""

    field: str = ""
    prefix: str = ""
    boost: float = 1.0

    def matches(self, term: str) -> bool:
        return term.startswith(self.prefix)

    def common_prefix(self) -> str:
        return self.prefix

    def to_string(self) -> str:
        return _boosted(f"{self.field}:{self.prefix}*", self.boost)


@dataclass
class FuzzyQuery(MultiTermQuery):
    """Matches terms within an edit distance."""

    field: str = ""
    term: str = ""
    max_edits: int = 2
    prefix_length: int = 0
    boost: float = 1.0

    def matches(self, term: str) -> bool:
        if abs(len(term) - len(self.term)) > self.max_edits:
            return False
        return _edit_distance(term, self.term) <= self.max_edits

    def common_prefix(self) -> str:
        return self.term[:self.prefix_length]

    def to_string(self) -> str:
        return _boosted(f"{self.field}:{self.term}~{self.max_edits}", self.boost)


@dataclass
class RegexQuery(MultiTermQuery):
    """Matches terms fully matching a regular expression."""

    field: str = ""
    pattern: str = ""
    boost: float = 1.0
    _compiled: Optional["re.Pattern[str]"] = dataclasses.field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        self._compiled = re.compile(self.pattern)

    def matches(self, term: str) -> bool:
        return self._compiled.fullmatch(term) is not None

    def to_string(self) -> str:
        return _boosted(f"{self.field}:/{self.pattern}/", self.boost)


def _edit_distance(s1: str, s2: str) -> int:
    """Levenshtein distance."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1
    previous = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current = [i + 1]
        for j, c2 in enumerate(s2):
            current.append(min(
                previous[j + 1] + 1,
                current[j] + 1,
                previous[j] + (c1 != c2),
            ))
        previous = current
    return previous[-1]


@dataclass
class RelationalQuery(QueryNode):
    """Selects parents whose children of child_type match child_query.

    While scoring, the executor reports every matching child through
    collect_child(). Children are only kept once gather_children() has
    been called, which the fetch phase does before scoring when the
    request asks for children.
    """

    child_type: str = ""
    child_query: Optional[QueryNode] = None
    boost: float = 1.0
    child_hits: Optional[ChildHitIndex] = dataclasses.field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.child_query is None:
            raise ValueError("RelationalQuery needs a child query")

    def accept(self, visitor: "QueryVisitor", context: Any) -> Any:
        return visitor.visit_relational(self, context)

    def gather_children(self, max_children: int) -> None:
        """Start retaining up to max_children child hits per parent."""
        self.child_hits = ChildHitIndex(max_per_parent=max_children)
        logger.debug(f"Gathering up to {max_children} [{self.child_type}] children per parent")

    @property
    def is_gathering(self) -> bool:
        return self.child_hits is not None

    def collect_child(self, parent: Uid, hit: ChildHit) -> bool:
        """Record a matching child for a parent.

        Returns:
            True if the hit was retained
        """
        if self.child_hits is None:
            return False
        return self.child_hits.add(parent, hit)

    def children_of(self, parent: Uid) -> Tuple[ChildHit, ...]:
        """Children gathered for a parent, empty when none."""
        if self.child_hits is None:
            return ()
        return self.child_hits.get(parent)

    def to_string(self) -> str:
        return _boosted(f"child[{self.child_type}]({self.child_query.to_string()})", self.boost)


__all__ = [
    "Occur",
    "QueryNode",
    "TermQuery",
    "PhraseQuery",
    "BooleanClause",
    "BooleanQuery",
    "ConstantScoreQuery",
    "FilteredQuery",
    "DisjunctionMaxQuery",
    "FunctionScoreQuery",
    "MatchAllQuery",
    "MultiTermQuery",
    "WildcardQuery",
    "PrefixQuery",
    "FuzzyQuery",
    "RegexQuery",
    "RelationalQuery",
]
