"""RoadFetch Exceptions - Fetch Phase Error Types.

Errors raised while loading, highlighting, and serializing hits.
Failures are scoped to a single hit wherever possible so that one
broken document never takes down a whole result page.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Optional


class RoadFetchError(Exception):
    """Base class for all fetch phase errors."""


class RetrievalError(RoadFetchError):
    """A stored field, source, or term vector could not be read."""

    def __init__(self, message: str, doc_id: Optional[int] = None):
        super().__init__(message)
        self.doc_id = doc_id


class FetchPhaseExecutionError(RoadFetchError):
    """A single hit failed during the fetch phase.

    Attributes:
        uid: String form of the hit's uid (type#id), if known
        cause: Underlying exception
    """

    def __init__(
        self,
        message: str,
        uid: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.uid = uid
        self.cause = cause

    def __str__(self) -> str:
        text = super().__str__()
        if self.uid:
            text = f"[{self.uid}] {text}"
        if self.cause is not None:
            text = f"{text}: {self.cause}"
        return text


class TooManyClausesError(RoadFetchError):
    """A multi-term rewrite expanded past the clause ceiling."""

    def __init__(self, max_clause_count: int):
        super().__init__(f"maxClauseCount is set to {max_clause_count}")
        self.max_clause_count = max_clause_count


class HighlightConfigError(RoadFetchError, ValueError):
    """Invalid highlight or children request configuration."""


class StreamCorruptedError(RoadFetchError):
    """Wire input was truncated or malformed."""


__all__ = [
    "RoadFetchError",
    "RetrievalError",
    "FetchPhaseExecutionError",
    "TooManyClausesError",
    "HighlightConfigError",
    "StreamCorruptedError",
]
