"""RoadFetch Query Term Extractor - Flattening Queries for Highlighting.

Walks a query tree and collects the leaf terms and phrases that
highlight candidates are scored against. Prohibited clauses never
contribute; filters contribute only when the context asks for them;
multi-term queries are rewritten against the current segment; and the
child side of a relational query is left to the children pass.

Extraction never raises. Anything it cannot handle contributes nothing.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Set, Tuple, Type, Union

from roadfetch_core.exceptions import TooManyClausesError
from roadfetch_core.query.filters import (
    BooleanFilter,
    Filter,
    QueryWrapperFilter,
    RangeFilter,
    TermFilter,
    TermsFilter,
)
from roadfetch_core.query.nodes import (
    BooleanQuery,
    ConstantScoreQuery,
    DisjunctionMaxQuery,
    FilteredQuery,
    FunctionScoreQuery,
    MatchAllQuery,
    MultiTermQuery,
    PhraseQuery,
    QueryNode,
    RelationalQuery,
    TermQuery,
)
from roadfetch_core.query.visitor import FilterVisitor, FlattenContext, QueryVisitor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlatTerm:
    """A single term to highlight. Boost is not part of its identity."""

    field: str
    text: str
    boost: float = dataclasses.field(default=1.0, compare=False)

    def matches_field(self, field_name: str) -> bool:
        return self.field == field_name


@dataclass(frozen=True)
class FlatPhrase:
    """A phrase to highlight. Boost is not part of its identity."""

    field: str
    terms: Tuple[str, ...]
    slop: int = 0
    boost: float = dataclasses.field(default=1.0, compare=False)

    def matches_field(self, field_name: str) -> bool:
        return self.field == field_name


FlatQuery = Union[FlatTerm, FlatPhrase]
FallbackExtractor = Callable[[QueryNode, FlattenContext], Iterable[FlatQuery]]

_fallback_extractors: Dict[Type[QueryNode], FallbackExtractor] = {}


def register_extractor(node_class: Type[QueryNode]) -> Callable[[FallbackExtractor], FallbackExtractor]:
    """Decorator registering a single-level extractor for a custom node class.

    The extractor receives the node and the flatten context and returns
    the terms and phrases the node contributes.
    """
    def decorator(func: FallbackExtractor) -> FallbackExtractor:
        _fallback_extractors[node_class] = func
        return func
    return decorator


def _find_fallback(node: QueryNode) -> Optional[FallbackExtractor]:
    for cls in type(node).__mro__:
        if cls in _fallback_extractors:
            return _fallback_extractors[cls]
    return None


class QueryTermExtractor(QueryVisitor, FilterVisitor):
    """Flattens a query tree into FlatTerm and FlatPhrase entries."""

    def extract(
        self,
        query: QueryNode,
        context: Optional[FlattenContext] = None,
    ) -> Set[FlatQuery]:
        """Extract the highlightable terms of a query.

        Args:
            query: Root of the query tree
            context: Reader, filter flag, and clause ceiling

        Returns:
            Set of terms and phrases
        """
        context = context or FlattenContext()
        return query.accept(self, context)

    def _all(self, queries: Iterable[QueryNode], context: FlattenContext) -> Set[FlatQuery]:
        result: Set[FlatQuery] = set()
        for query in queries:
            result |= query.accept(self, context)
        return result

    def _filter(self, filter_: Optional[Filter], context: FlattenContext) -> Set[FlatQuery]:
        if filter_ is None or not context.include_filters:
            return set()
        return filter_.accept(self, context)

    # Queries

    def visit_term(self, node: TermQuery, context: FlattenContext) -> Set[FlatQuery]:
        return {FlatTerm(node.field, node.term, node.boost)}

    def visit_phrase(self, node: PhraseQuery, context: FlattenContext) -> Set[FlatQuery]:
        if not node.terms:
            return set()
        if len(node.terms) == 1:
            return {FlatTerm(node.field, node.terms[0], node.boost)}
        return {FlatPhrase(node.field, tuple(node.terms), node.slop, node.boost)}

    def visit_boolean(self, node: BooleanQuery, context: FlattenContext) -> Set[FlatQuery]:
        return self._all((c.query for c in node.clauses if not c.is_prohibited), context)

    def visit_constant_score(self, node: ConstantScoreQuery, context: FlattenContext) -> Set[FlatQuery]:
        result = node.query.accept(self, context) if node.query is not None else set()
        return result | self._filter(node.filter, context)

    def visit_filtered(self, node: FilteredQuery, context: FlattenContext) -> Set[FlatQuery]:
        return node.query.accept(self, context) | self._filter(node.filter, context)

    def visit_dis_max(self, node: DisjunctionMaxQuery, context: FlattenContext) -> Set[FlatQuery]:
        return self._all(node.options, context)

    def visit_function_score(self, node: FunctionScoreQuery, context: FlattenContext) -> Set[FlatQuery]:
        return node.query.accept(self, context)

    def visit_multi_term(self, node: MultiTermQuery, context: FlattenContext) -> Set[FlatQuery]:
        if context.reader is None:
            logger.debug(f"No reader to rewrite {node.to_string()}, skipping")
            return set()
        try:
            rewritten = node.rewrite(context.reader, context.max_clause_count)
        except TooManyClausesError as e:
            logger.debug(f"Rewrite of {node.to_string()} skipped for highlighting: {e}")
            return set()
        except Exception as e:
            logger.debug(f"Failed to rewrite {node.to_string()}: {e}")
            return set()
        return rewritten.accept(self, context)

    def visit_relational(self, node: RelationalQuery, context: FlattenContext) -> Set[FlatQuery]:
        return set()

    def visit_match_all(self, node: MatchAllQuery, context: FlattenContext) -> Set[FlatQuery]:
        return set()

    def visit_unknown(self, node: QueryNode, context: FlattenContext) -> Set[FlatQuery]:
        fallback = _find_fallback(node)
        if fallback is None:
            logger.debug(f"No term extraction for {type(node).__name__}, skipping")
            return set()
        try:
            return set(fallback(node, context))
        except Exception as e:
            logger.warning(f"Term extraction for {type(node).__name__} failed: {e}")
            return set()

    # Filters

    def visit_term_filter(self, node: TermFilter, context: FlattenContext) -> Set[FlatQuery]:
        return {FlatTerm(node.field, node.term)}

    def visit_terms_filter(self, node: TermsFilter, context: FlattenContext) -> Set[FlatQuery]:
        return {FlatTerm(node.field, term) for term in node.terms}

    def visit_range_filter(self, node: RangeFilter, context: FlattenContext) -> Set[FlatQuery]:
        return set()

    def visit_boolean_filter(self, node: BooleanFilter, context: FlattenContext) -> Set[FlatQuery]:
        result: Set[FlatQuery] = set()
        for filter_ in node.must:
            result |= filter_.accept(self, context)
        return result

    def visit_query_wrapper_filter(self, node: QueryWrapperFilter, context: FlattenContext) -> Set[FlatQuery]:
        return node.wrapped_query().accept(self, context)

    def visit_unknown_filter(self, node: Filter, context: FlattenContext) -> Set[FlatQuery]:
        logger.debug(f"No term extraction for filter {type(node).__name__}, skipping")
        return set()


__all__ = [
    "FlatTerm",
    "FlatPhrase",
    "FlatQuery",
    "QueryTermExtractor",
    "register_extractor",
]
