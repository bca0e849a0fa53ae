"""RoadFetch Fetch - Per-Hit Aggregation and the Parallel Fetch Phase.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roadfetch_core.fetch.context import (
    HitContext,
    FetchRequest,
)
from roadfetch_core.fetch.aggregator import (
    HitHighlightResult,
    ResultAggregator,
)
from roadfetch_core.fetch.phase import (
    FetchedHit,
    read_fetched_hit,
    HitFailure,
    FetchResult,
    FetchPhase,
)

__all__ = [
    "HitContext",
    "FetchRequest",
    "HitHighlightResult",
    "ResultAggregator",
    "FetchedHit",
    "read_fetched_hit",
    "HitFailure",
    "FetchResult",
    "FetchPhase",
]
