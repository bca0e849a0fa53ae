"""RoadFetch Analyzers - Text Analysis for Highlighting.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roadfetch_core.analyzers.base import (
    Analyzer,
    Token,
    TokenStream,
    Tokenizer,
    TokenFilter,
    register_analyzer,
    get_analyzer,
)
from roadfetch_core.analyzers.standard import (
    StandardAnalyzer,
    SimpleAnalyzer,
    WhitespaceAnalyzer,
    StopAnalyzer,
    KeywordAnalyzer,
)
from roadfetch_core.analyzers.filters import (
    LowercaseFilter,
    StopwordFilter,
)
from roadfetch_core.analyzers.tokenizers import (
    PatternTokenizer,
    StandardTokenizer,
    WhitespaceTokenizer,
    LetterTokenizer,
)

__all__ = [
    "Analyzer",
    "Token",
    "TokenStream",
    "Tokenizer",
    "TokenFilter",
    "register_analyzer",
    "get_analyzer",
    "StandardAnalyzer",
    "SimpleAnalyzer",
    "WhitespaceAnalyzer",
    "StopAnalyzer",
    "KeywordAnalyzer",
    "LowercaseFilter",
    "StopwordFilter",
    "PatternTokenizer",
    "StandardTokenizer",
    "WhitespaceTokenizer",
    "LetterTokenizer",
]
