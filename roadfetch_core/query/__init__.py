"""RoadFetch Query - Query Tree, Term Extraction, and Join Resolution.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roadfetch_core.query.nodes import (
    Occur,
    QueryNode,
    TermQuery,
    PhraseQuery,
    BooleanClause,
    BooleanQuery,
    ConstantScoreQuery,
    FilteredQuery,
    DisjunctionMaxQuery,
    FunctionScoreQuery,
    MatchAllQuery,
    MultiTermQuery,
    WildcardQuery,
    PrefixQuery,
    FuzzyQuery,
    RegexQuery,
    RelationalQuery,
)
from roadfetch_core.query.child_hits import (
    ChildHit,
    ChildHitIndex,
)
from roadfetch_core.query.filters import (
    Filter,
    TermFilter,
    TermsFilter,
    RangeFilter,
    BooleanFilter,
    QueryWrapperFilter,
)
from roadfetch_core.query.visitor import (
    FlattenContext,
    QueryVisitor,
    FilterVisitor,
)
from roadfetch_core.query.extractor import (
    FlatTerm,
    FlatPhrase,
    QueryTermExtractor,
    register_extractor,
)
from roadfetch_core.query.relations import RelationResolver

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
    "ChildHit",
    "ChildHitIndex",
    "Filter",
    "TermFilter",
    "TermsFilter",
    "RangeFilter",
    "BooleanFilter",
    "QueryWrapperFilter",
    "FlattenContext",
    "QueryVisitor",
    "FilterVisitor",
    "FlatTerm",
    "FlatPhrase",
    "QueryTermExtractor",
    "register_extractor",
    "RelationResolver",
]
