"""RoadFetch Tokenizers - Offset-Preserving Tokenization.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import re
from typing import Pattern

from roadfetch_core.analyzers.base import Token, Tokenizer, TokenStream


class PatternTokenizer(Tokenizer):
    """Emits one token per regex match."""

    def __init__(self, pattern: Pattern[str]):
        self.pattern = pattern

    def tokenize(self, text: str) -> TokenStream:
        """Tokenize text into regex matches."""
        stream = TokenStream()
        for position, match in enumerate(self.pattern.finditer(text)):
            stream.add(Token(
                text=match.group(),
                position=position,
                start_offset=match.start(),
                end_offset=match.end(),
            ))
        return stream


class StandardTokenizer(PatternTokenizer):
    """Word tokenizer keeping contractions and decimal numbers whole."""

    WORD_PATTERN = re.compile(r"\d+(?:\.\d+)+|\w+(?:'\w+)?", re.UNICODE)

    def __init__(self, max_token_length: int = 255):
        super().__init__(self.WORD_PATTERN)
        self.max_token_length = max_token_length

    def tokenize(self, text: str) -> TokenStream:
        """Tokenize text, dropping over-long tokens but keeping their position."""
        return super().tokenize(text).filter(
            lambda t: len(t.text) <= self.max_token_length
        )


class WhitespaceTokenizer(PatternTokenizer):
    """Splits on whitespace only, preserving punctuation."""

    def __init__(self):
        super().__init__(re.compile(r"\S+"))


class LetterTokenizer(PatternTokenizer):
    """Splits on anything that is not a letter."""

    def __init__(self):
        super().__init__(re.compile(r"[^\W\d_]+", re.UNICODE))


__all__ = [
    "PatternTokenizer",
    "StandardTokenizer",
    "WhitespaceTokenizer",
    "LetterTokenizer",
]
