"""RoadFetch Query Visitors - Exhaustive Tree Walking.

Every walker over the query tree subclasses QueryVisitor (and
FilterVisitor when it cares about filters). All visit methods are
abstract, so a walker that forgets a node kind cannot be instantiated.

Per-call state travels in the context argument of accept(), never in
the visitor or in thread-local storage, so one visitor instance can be
shared by all fetch workers of a request.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from roadfetch_core.config import DEFAULT_CONFIG

if TYPE_CHECKING:
    from roadfetch_core.index.segment import SegmentReader
    from roadfetch_core.query import filters as f
    from roadfetch_core.query import nodes as n


@dataclass(frozen=True)
class FlattenContext:
    """Per-call state for flattening a query tree.

    Attributes:
        reader: Segment that multi-term queries are rewritten against
        include_filters: Whether filter clauses contribute terms
        max_clause_count: Ceiling for multi-term rewrites
    """

    reader: Optional["SegmentReader"] = None
    include_filters: bool = False
    max_clause_count: int = DEFAULT_CONFIG.max_clause_count


class QueryVisitor(ABC):
    """Visits every query node kind."""

    @abstractmethod
    def visit_term(self, node: "n.TermQuery", context: Any) -> Any:
        pass

    @abstractmethod
    def visit_phrase(self, node: "n.PhraseQuery", context: Any) -> Any:
        pass

    @abstractmethod
    def visit_boolean(self, node: "n.BooleanQuery", context: Any) -> Any:
        pass

    @abstractmethod
    def visit_constant_score(self, node: "n.ConstantScoreQuery", context: Any) -> Any:
        pass

    @abstractmethod
    def visit_filtered(self, node: "n.FilteredQuery", context: Any) -> Any:
        pass

    @abstractmethod
    def visit_dis_max(self, node: "n.DisjunctionMaxQuery", context: Any) -> Any:
        pass

    @abstractmethod
    def visit_function_score(self, node: "n.FunctionScoreQuery", context: Any) -> Any:
        pass

    @abstractmethod
    def visit_multi_term(self, node: "n.MultiTermQuery", context: Any) -> Any:
        pass

    @abstractmethod
    def visit_relational(self, node: "n.RelationalQuery", context: Any) -> Any:
        pass

    @abstractmethod
    def visit_match_all(self, node: "n.MatchAllQuery", context: Any) -> Any:
        pass

    @abstractmethod
    def visit_unknown(self, node: "n.QueryNode", context: Any) -> Any:
        """Node kinds defined outside the built-in family."""
        pass


class FilterVisitor(ABC):
    """Visits every filter kind."""

    @abstractmethod
    def visit_term_filter(self, node: "f.TermFilter", context: Any) -> Any:
        pass

    @abstractmethod
    def visit_terms_filter(self, node: "f.TermsFilter", context: Any) -> Any:
        pass

    @abstractmethod
    def visit_range_filter(self, node: "f.RangeFilter", context: Any) -> Any:
        pass

    @abstractmethod
    def visit_boolean_filter(self, node: "f.BooleanFilter", context: Any) -> Any:
        pass

    @abstractmethod
    def visit_query_wrapper_filter(self, node: "f.QueryWrapperFilter", context: Any) -> Any:
        pass

    @abstractmethod
    def visit_unknown_filter(self, node: "f.Filter", context: Any) -> Any:
        pass


__all__ = [
    "FlattenContext",
    "QueryVisitor",
    "FilterVisitor",
]
