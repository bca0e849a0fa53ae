"""RoadFetch - Fetch Phase Highlighting and Children for BlackRoad OS.

Runs after a search has scored its hits. For every hit of a page it
highlights the requested fields against the query, and for queries that
join parents to children it surfaces and highlights the child documents
that made the parent match.

Architecture:
┌─────────────────────────────────────────────────────────────────────────────┐
│                            RoadFetch Phase                                  │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                             │
│   ┌─────────────────────────────────────────────────────────────────────┐   │
│   │                        Query Decomposition                          │   │
│   │  ┌────────────┐  ┌────────────┐  ┌────────────┐  ┌────────────┐    │   │
│   │  │   Query    │→ │  Visitor   │→ │    Term    │  │  Relation  │    │   │
│   │  │   Nodes    │  │            │  │ Extractor  │  │  Resolver  │    │   │
│   │  └────────────┘  └────────────┘  └────────────┘  └────────────┘    │   │
│   └─────────────────────────────────────────────────────────────────────┘   │
│                                                                             │
│   ┌─────────────────────────────────────────────────────────────────────┐   │
│   │                         Highlighting                                │   │
│   │  ┌────────────┐  ┌────────────┐  ┌────────────┐  ┌────────────┐    │   │
│   │  │ Term Vector│  │  Analyzer  │→ │   Offset   │→ │  Fragment  │    │   │
│   │  │  Selector  │  │  Selector  │  │ Aggregator │  │ Formatter  │    │   │
│   │  └────────────┘  └────────────┘  └────────────┘  └────────────┘    │   │
│   └─────────────────────────────────────────────────────────────────────┘   │
│                                                                             │
│   ┌─────────────────────────────────────────────────────────────────────┐   │
│   │                          Fetch Layer                                │   │
│   │  ┌────────────┐  ┌────────────┐  ┌────────────┐  ┌────────────┐    │   │
│   │  │    Hit     │→ │   Result   │→ │  Children  │  │   Fetch    │    │   │
│   │  │  Context   │  │ Aggregator │  │  Results   │  │   Phase    │    │   │
│   │  └────────────┘  └────────────┘  └────────────┘  └────────────┘    │   │
│   └─────────────────────────────────────────────────────────────────────┘   │
│                                                                             │
│   ┌─────────────────────────────────────────────────────────────────────┐   │
│   │                          Index Layer                                │   │
│   │  ┌────────────┐  ┌────────────┐  ┌────────────┐  ┌────────────┐    │   │
│   │  │ Analyzers  │  │  Mappings  │  │  Segments  │  │    Wire    │    │   │
│   │  │            │  │            │  │            │  │  Streams   │    │   │
│   │  └────────────┘  └────────────┘  └────────────┘  └────────────┘    │   │
│   └─────────────────────────────────────────────────────────────────────┘   │
│                                                                             │
└─────────────────────────────────────────────────────────────────────────────┘

Key Features:
- Highlighting from term vectors or by re-analyzing field text
- Multi-valued fields with offsets across all values
- Document or score ordered fragments, or raw offsets only
- Styled tag schemas and HTML encoding
- Children of parent/child join queries, highlighted with the child query
- Parallel fetch with per-hit failure isolation
- Compact wire encoding of fetched hits

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

__version__ = "1.0.0"
__author__ = "BlackRoad OS"
__license__ = "Proprietary"

# Configuration and errors
from roadfetch_core.config import FetchConfig, DEFAULT_CONFIG
from roadfetch_core.exceptions import (
    RoadFetchError,
    RetrievalError,
    FetchPhaseExecutionError,
    TooManyClausesError,
    HighlightConfigError,
    StreamCorruptedError,
)

# Analyzers
from roadfetch_core.analyzers import (
    Analyzer,
    Token,
    TokenStream,
    get_analyzer,
    register_analyzer,
)

# Index components
from roadfetch_core.index import (
    TermVectorOption,
    FieldMapping,
    DocumentMapping,
    MappingRegistry,
    Uid,
    Segment,
    SegmentReader,
)

# Query tree
from roadfetch_core.query import (
    QueryNode,
    TermQuery,
    PhraseQuery,
    BooleanQuery,
    ConstantScoreQuery,
    FilteredQuery,
    DisjunctionMaxQuery,
    FunctionScoreQuery,
    MatchAllQuery,
    WildcardQuery,
    PrefixQuery,
    FuzzyQuery,
    RegexQuery,
    RelationalQuery,
    ChildHit,
    ChildHitIndex,
    FlattenContext,
    QueryVisitor,
    FilterVisitor,
    QueryTermExtractor,
    RelationResolver,
)

# Highlighting
from roadfetch_core.highlight import (
    HighlightOrder,
    FieldHighlightConfig,
    HighlightConfig,
    HighlightOffsets,
    HighlightField,
    OffsetAggregator,
    FieldHighlighter,
)

# Children
from roadfetch_core.children import (
    ChildrenResult,
    ChildrenConfig,
    ChildrenBuilder,
)

# Fetch
from roadfetch_core.fetch import (
    HitContext,
    FetchRequest,
    HitHighlightResult,
    ResultAggregator,
    FetchedHit,
    read_fetched_hit,
    HitFailure,
    FetchPhase,
)

# Wire
from roadfetch_core.common import StreamInput, StreamOutput

__all__ = [
    # Version
    "__version__",
    # Config
    "FetchConfig",
    "DEFAULT_CONFIG",
    # Errors
    "RoadFetchError",
    "RetrievalError",
    "FetchPhaseExecutionError",
    "TooManyClausesError",
    "HighlightConfigError",
    "StreamCorruptedError",
    # Analyzers
    "Analyzer",
    "Token",
    "TokenStream",
    "get_analyzer",
    "register_analyzer",
    # Index
    "TermVectorOption",
    "FieldMapping",
    "DocumentMapping",
    "MappingRegistry",
    "Uid",
    "Segment",
    "SegmentReader",
    # Query
    "QueryNode",
    "TermQuery",
    "PhraseQuery",
    "BooleanQuery",
    "ConstantScoreQuery",
    "FilteredQuery",
    "DisjunctionMaxQuery",
    "FunctionScoreQuery",
    "MatchAllQuery",
    "WildcardQuery",
    "PrefixQuery",
    "FuzzyQuery",
    "RegexQuery",
    "RelationalQuery",
    "ChildHit",
    "ChildHitIndex",
    "FlattenContext",
    "QueryVisitor",
    "FilterVisitor",
    "QueryTermExtractor",
    "RelationResolver",
    # Highlight
    "HighlightOrder",
    "FieldHighlightConfig",
    "HighlightConfig",
    "HighlightOffsets",
    "HighlightField",
    "OffsetAggregator",
    "FieldHighlighter",
    # Children
    "ChildrenResult",
    "ChildrenConfig",
    "ChildrenBuilder",
    # Fetch
    "HitContext",
    "FetchRequest",
    "HitHighlightResult",
    "ResultAggregator",
    "FetchedHit",
    "read_fetched_hit",
    "HitFailure",
    "FetchPhase",
    # Wire
    "StreamInput",
    "StreamOutput",
]
