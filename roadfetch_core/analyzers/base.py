"""RoadFetch Analyzer Base - Token Stream Interfaces.

The fetch phase re-analyzes stored text when a field has no term
vectors, so it needs the same token positions and character offsets
the indexer produced. This module defines the pipeline pieces and the
analyzer registry used to look analyzers up by mapping name.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Callable, Iterator, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class Token:
    """A token in the analysis stream.

    Attributes:
        text: Token text after filtering
        position: Position in the token sequence
        start_offset: Start character offset into the analyzed text
        end_offset: End character offset into the analyzed text
    """

    text: str
    position: int = 0
    start_offset: int = 0
    end_offset: int = 0

    def __repr__(self) -> str:
        return f"Token({self.text!r}, pos={self.position}, [{self.start_offset}:{self.end_offset}])"

    def with_text(self, text: str) -> "Token":
        """Copy of this token carrying different text."""
        return replace(self, text=text)


class TokenStream:
    """An ordered, re-iterable sequence of tokens."""

    def __init__(self, tokens: Optional[List[Token]] = None):
        self._tokens: List[Token] = tokens or []

    def add(self, token: Token) -> None:
        """Append a token."""
        self._tokens.append(token)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __getitem__(self, index: int) -> Token:
        return self._tokens[index]

    def get_texts(self) -> List[str]:
        """Get list of token texts."""
        return [t.text for t in self._tokens]

    def filter(self, predicate: Callable[[Token], bool]) -> "TokenStream":
        """New stream holding the tokens the predicate keeps."""
        return TokenStream([t for t in self._tokens if predicate(t)])

    def map(self, func: Callable[[Token], Token]) -> "TokenStream":
        """New stream with func applied to every token."""
        return TokenStream([func(t) for t in self._tokens])


class Tokenizer(ABC):
    """Breaks text into positioned tokens."""

    @abstractmethod
    def tokenize(self, text: str) -> TokenStream:
        """Tokenize text.

        Args:
            text: Input text

        Returns:
            Token stream with offsets into text
        """
        pass


class TokenFilter(ABC):
    """Transforms or removes tokens.

    Filters must keep the original offsets and positions so that
    highlighting can map terms back onto the source text.
    """

    @abstractmethod
    def filter(self, stream: TokenStream) -> TokenStream:
        """Filter a token stream."""
        pass


class Analyzer:
    """A tokenizer followed by a chain of token filters."""

    def __init__(
        self,
        tokenizer: Optional[Tokenizer] = None,
        token_filters: Optional[List[TokenFilter]] = None,
    ):
        """Initialize analyzer.

        Args:
            tokenizer: Tokenizer to use (whitespace split when omitted)
            token_filters: Token filters to apply, in order
        """
        self._tokenizer = tokenizer
        self._token_filters = token_filters or []

    def analyze(self, text: str) -> TokenStream:
        """Analyze text into tokens.

        Args:
            text: Input text

        Returns:
            Token stream
        """
        if self._tokenizer:
            stream = self._tokenizer.tokenize(text)
        else:
            stream = self._split_whitespace(text)

        for token_filter in self._token_filters:
            stream = token_filter.filter(stream)

        return stream

    def _split_whitespace(self, text: str) -> TokenStream:
        tokens = []
        start = None
        for i, char in enumerate(text):
            if char.isspace():
                if start is not None:
                    tokens.append(Token(text[start:i], len(tokens), start, i))
                    start = None
            elif start is None:
                start = i
        if start is not None:
            tokens.append(Token(text[start:], len(tokens), start, len(text)))
        return TokenStream(tokens)


class AnalyzerRegistry:
    """Registry for analyzer instances.

    Provides lookup of analyzers by the names used in field mappings.
    """

    _instance: Optional["AnalyzerRegistry"] = None

    def __new__(cls) -> "AnalyzerRegistry":
        """Singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._analyzers = {}
        return cls._instance

    def register(self, name: str, analyzer: Analyzer) -> None:
        """Register an analyzer under a name."""
        self._analyzers[name] = analyzer

    def get(self, name: str) -> Optional[Analyzer]:
        """Get analyzer by name, or None."""
        return self._analyzers.get(name)


_registry = AnalyzerRegistry()


def register_analyzer(name: str) -> Callable[[type], type]:
    """Class decorator registering a default instance under name."""
    def decorator(cls: type) -> type:
        _registry.register(name, cls())
        return cls
    return decorator


def get_analyzer(name: str) -> Optional[Analyzer]:
    """Get analyzer by name.

    Args:
        name: Analyzer name

    Returns:
        Analyzer or None
    """
    analyzer = _registry.get(name)
    if analyzer is None:
        logger.debug(f"Unknown analyzer: {name}")
    return analyzer


__all__ = [
    "Analyzer",
    "Token",
    "TokenStream",
    "Tokenizer",
    "TokenFilter",
    "AnalyzerRegistry",
    "register_analyzer",
    "get_analyzer",
]
