"""RoadFetch Child Hits - Per-Parent Child Collection.

The query executor fills a ChildHitIndex while scoring a relational
query. Each entry records a child document that satisfied the child
predicate, keyed by the uid of the parent it selected. After scoring
the index is only read.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from roadfetch_core.index.segment import SegmentReader, Uid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChildHit:
    """A child document and the segment it lives in.

    Attributes:
        doc_id: Segment-local doc id of the child
        reader: Reader of the child's segment
    """

    doc_id: int
    reader: SegmentReader

    def load_uid(self) -> Uid:
        """Uid of the child document."""
        return self.reader.uid(self.doc_id)


class ChildHitIndex:
    """Parent uid to the ordered child hits that selected it.

    Args:
        max_per_parent: Children retained per parent, None for unbounded
    """

    def __init__(self, max_per_parent: Optional[int] = None):
        self.max_per_parent = max_per_parent
        self._hits: Dict[Uid, List[ChildHit]] = {}
        self._lock = threading.Lock()

    def add(self, parent: Uid, hit: ChildHit) -> bool:
        """Record a child hit for a parent.

        Returns:
            False when the parent already holds max_per_parent children
        """
        with self._lock:
            hits = self._hits.setdefault(parent, [])
            if self.max_per_parent is not None and len(hits) >= self.max_per_parent:
                return False
            hits.append(hit)
            return True

    def get(self, parent: Uid) -> Tuple[ChildHit, ...]:
        """Child hits of a parent in gather order, empty when the parent is absent."""
        return tuple(self._hits.get(parent, ()))

    def __contains__(self, parent: Uid) -> bool:
        return parent in self._hits

    def __iter__(self) -> Iterator[Uid]:
        return iter(self._hits)

    def __len__(self) -> int:
        return len(self._hits)


__all__ = [
    "ChildHit",
    "ChildHitIndex",
]
