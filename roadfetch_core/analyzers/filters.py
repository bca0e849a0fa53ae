"""RoadFetch Token Filters.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Optional, Set

from roadfetch_core.analyzers.base import TokenFilter, TokenStream


class LowercaseFilter(TokenFilter):
    """Converts tokens to lowercase."""

    def filter(self, stream: TokenStream) -> TokenStream:
        return stream.map(lambda t: t.with_text(t.text.lower()))


class StopwordFilter(TokenFilter):
    """Removes stopwords.

    Removed tokens leave a gap in positions, so phrase slop still
    counts them.
    """

    DEFAULT_STOPWORDS = frozenset([
        "a", "an", "and", "are", "as", "at", "be", "but", "by",
        "for", "if", "in", "into", "is", "it", "no", "not", "of",
        "on", "or", "such", "that", "the", "their", "then", "there",
        "these", "they", "this", "to", "was", "will", "with",
    ])

    def __init__(self, stopwords: Optional[Set[str]] = None):
        self.stopwords = frozenset(stopwords) if stopwords is not None else self.DEFAULT_STOPWORDS

    def filter(self, stream: TokenStream) -> TokenStream:
        return stream.filter(lambda t: t.text.lower() not in self.stopwords)


__all__ = [
    "LowercaseFilter",
    "StopwordFilter",
]
