"""RoadFetch Hit Context - One Hit and the Request That Fetches It.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from roadfetch_core.children.config import ChildrenConfig
from roadfetch_core.config import DEFAULT_CONFIG, FetchConfig
from roadfetch_core.highlight.config import HighlightConfig
from roadfetch_core.index.segment import SegmentReader, Uid
from roadfetch_core.query.nodes import QueryNode

logger = logging.getLogger(__name__)


@dataclass
class HitContext:
    """A scored hit waiting to be fetched.

    Attributes:
        reader: Segment holding the hit
        doc_id: Segment-local doc id
        score: Score assigned while searching
    """

    reader: SegmentReader
    doc_id: int
    score: float = 0.0

    @property
    def uid(self) -> Uid:
        """Type and id of the hit, read from the segment."""
        return self.reader.uid(self.doc_id)

    def __repr__(self) -> str:
        return f"HitContext(doc_id={self.doc_id}, reader={self.reader!r})"


@dataclass
class FetchRequest:
    """What the fetch phase produces for every hit of a page.

    Attributes:
        query: Query the page was scored with
        highlight: Top-level highlighting, None to skip it
        children: Children surfacing, None to skip it
    """

    query: QueryNode
    highlight: Optional[HighlightConfig] = None
    children: Optional[ChildrenConfig] = None

    @classmethod
    def from_dict(
        cls,
        query: QueryNode,
        body: Dict[str, Any],
        defaults: FetchConfig = DEFAULT_CONFIG,
    ) -> "FetchRequest":
        """Build a request from the "highlight" and "children" sections of a search body."""
        highlight = None
        if body.get("highlight") is not None:
            highlight = HighlightConfig.from_dict(body["highlight"], defaults)
        children = None
        if body.get("children") is not None:
            children = ChildrenConfig.from_dict(body["children"], defaults)
        ignored = set(body) - {"highlight", "children"}
        if ignored:
            logger.debug(f"Fetch request ignores sections: {sorted(ignored)}")
        return cls(query=query, highlight=highlight, children=children)


__all__ = [
    "HitContext",
    "FetchRequest",
]
