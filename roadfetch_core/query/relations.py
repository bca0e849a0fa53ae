"""RoadFetch Relation Resolver - Locating Join Clauses.

Finds the relational (parent/child join) clauses of a query tree and
uses them three ways: to switch on child gathering before scoring, to
read back the children gathered for a parent at fetch time, and to
build the query that highlights those children.

Only the outer join level is handled. A relational clause inside
another one's child query is never reached.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Any, List

from roadfetch_core.index.segment import Uid
from roadfetch_core.query.child_hits import ChildHit
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
from roadfetch_core.query.visitor import QueryVisitor

logger = logging.getLogger(__name__)


class _RelationalClauses(QueryVisitor):
    """Collects reachable relational nodes in tree order."""

    def _all(self, queries, context: Any) -> List[RelationalQuery]:
        found: List[RelationalQuery] = []
        for query in queries:
            found.extend(query.accept(self, context))
        return found

    def visit_term(self, node: TermQuery, context: Any) -> List[RelationalQuery]:
        return []

    def visit_phrase(self, node: PhraseQuery, context: Any) -> List[RelationalQuery]:
        return []

    def visit_boolean(self, node: BooleanQuery, context: Any) -> List[RelationalQuery]:
        return self._all((c.query for c in node.clauses if not c.is_prohibited), context)

    def visit_constant_score(self, node: ConstantScoreQuery, context: Any) -> List[RelationalQuery]:
        return node.query.accept(self, context) if node.query is not None else []

    def visit_filtered(self, node: FilteredQuery, context: Any) -> List[RelationalQuery]:
        return node.query.accept(self, context)

    def visit_dis_max(self, node: DisjunctionMaxQuery, context: Any) -> List[RelationalQuery]:
        return self._all(node.options, context)

    def visit_function_score(self, node: FunctionScoreQuery, context: Any) -> List[RelationalQuery]:
        return node.query.accept(self, context)

    def visit_multi_term(self, node: MultiTermQuery, context: Any) -> List[RelationalQuery]:
        return []

    def visit_relational(self, node: RelationalQuery, context: Any) -> List[RelationalQuery]:
        return [node]

    def visit_match_all(self, node: MatchAllQuery, context: Any) -> List[RelationalQuery]:
        return []

    def visit_unknown(self, node: QueryNode, context: Any) -> List[RelationalQuery]:
        logger.debug(f"Not looking for relational clauses under {type(node).__name__}")
        return []


_clauses = _RelationalClauses()


class RelationResolver:
    """Resolves the children a relational query gathered for a parent."""

    def relational_clauses(self, query: QueryNode) -> List[RelationalQuery]:
        """Relational clauses reachable through non-prohibited clauses, in tree order."""
        return query.accept(_clauses, None)

    def enable_child_gathering(self, query: QueryNode, max_children: int) -> int:
        """Make every reachable relational clause retain children while scoring.

        Must run before the query is executed.

        Args:
            query: Root of the query tree
            max_children: Children retained per parent and clause

        Returns:
            Number of relational clauses found
        """
        clauses = self.relational_clauses(query)
        for clause in clauses:
            clause.gather_children(max_children)
        return len(clauses)

    def find_child_hits(self, query: QueryNode, parent: Uid) -> List[ChildHit]:
        """Children gathered for a parent across every relational clause.

        Clauses are visited in tree order and each clause's hits keep the
        order they were gathered in. A parent no clause knows about has
        no children.
        """
        hits: List[ChildHit] = []
        for clause in self.relational_clauses(query):
            if not clause.is_gathering:
                logger.debug(f"Children of [{clause.child_type}] were not gathered")
            hits.extend(clause.children_of(parent))
        return hits

    def extract_child_query(self, query: QueryNode) -> BooleanQuery:
        """Query requiring every relational clause's child query, used to highlight children."""
        child_query = BooleanQuery()
        for clause in self.relational_clauses(query):
            child_query.add_must(clause.child_query)
        return child_query


__all__ = [
    "RelationResolver",
]
