"""RoadFetch Standard Analyzers - Pre-configured Analyzers.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Optional, Set

from roadfetch_core.analyzers.base import Analyzer, Token, TokenStream, register_analyzer
from roadfetch_core.analyzers.filters import LowercaseFilter, StopwordFilter
from roadfetch_core.analyzers.tokenizers import (
    LetterTokenizer,
    StandardTokenizer,
    WhitespaceTokenizer,
)


@register_analyzer("standard")
class StandardAnalyzer(Analyzer):
    """Standard analyzer for general text.

    Word tokenization with lowercasing. Stopwords are only removed
    when a stopword set is passed in.
    """

    def __init__(
        self,
        stopwords: Optional[Set[str]] = None,
        max_token_length: int = 255,
    ):
        filters = [LowercaseFilter()]
        if stopwords:
            filters.append(StopwordFilter(stopwords=stopwords))
        super().__init__(
            tokenizer=StandardTokenizer(max_token_length=max_token_length),
            token_filters=filters,
        )


@register_analyzer("simple")
class SimpleAnalyzer(Analyzer):
    """Breaks on non-letters and lowercases."""

    def __init__(self):
        super().__init__(
            tokenizer=LetterTokenizer(),
            token_filters=[LowercaseFilter()],
        )


@register_analyzer("whitespace")
class WhitespaceAnalyzer(Analyzer):
    """Splits only on whitespace, preserves case and punctuation."""

    def __init__(self):
        super().__init__(tokenizer=WhitespaceTokenizer())


@register_analyzer("stop")
class StopAnalyzer(Analyzer):
    """Letter tokenization, lowercasing, and English stopword removal."""

    def __init__(self, stopwords: Optional[Set[str]] = None):
        super().__init__(
            tokenizer=LetterTokenizer(),
            token_filters=[LowercaseFilter(), StopwordFilter(stopwords=stopwords)],
        )


@register_analyzer("keyword")
class KeywordAnalyzer(Analyzer):
    """Treats the entire input as a single token."""

    def analyze(self, text: str) -> TokenStream:
        if not text:
            return TokenStream()
        return TokenStream([Token(text=text, position=0, start_offset=0, end_offset=len(text))])


__all__ = [
    "StandardAnalyzer",
    "SimpleAnalyzer",
    "WhitespaceAnalyzer",
    "StopAnalyzer",
    "KeywordAnalyzer",
]
