"""RoadFetch Fetch Phase - Highlighting a Page of Hits.

Takes the hits a search scored and turns each one into a FetchedHit:
highlighted fields, optional highlight spans, and optional children.
Hits are processed in parallel, one worker per hit, and come back in
the order they went in. A hit that fails is reported as a HitFailure
in its slot; the rest of the page is unaffected.

Typical use:

    phase = FetchPhase(config)
    phase.pre_process(request)       # before the query is scored
    ...score the query, collect HitContexts...
    results = phase.execute(hits, request)

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from roadfetch_core.children.result import ChildrenResult
from roadfetch_core.common.stream import StreamInput, StreamOutput
from roadfetch_core.config import DEFAULT_CONFIG, FetchConfig
from roadfetch_core.exceptions import FetchPhaseExecutionError, RoadFetchError
from roadfetch_core.fetch.aggregator import ResultAggregator
from roadfetch_core.fetch.context import FetchRequest, HitContext
from roadfetch_core.highlight.highlighter import HighlightField
from roadfetch_core.highlight.offsets import HighlightOffsets
from roadfetch_core.index.segment import Uid

logger = logging.getLogger(__name__)


@dataclass
class FetchedHit:
    """A fully fetched hit.

    Attributes:
        uid: Type and id of the hit
        score: Score assigned while searching
        highlight_fields: Highlighted fragments by field name
        highlight_offsets: Highlight spans by field name, None unless requested
        children: Surfaced children, None unless requested
    """

    uid: Uid
    score: float = 0.0
    highlight_fields: Dict[str, HighlightField] = field(default_factory=dict)
    highlight_offsets: Optional[Dict[str, List[HighlightOffsets]]] = None
    children: Optional[List[ChildrenResult]] = None

    def write_to(self, out: StreamOutput) -> None:
        out.write_string(self.uid.type)
        out.write_string(self.uid.id)
        out.write_float(self.score)

        out.write_vint(len(self.highlight_fields))
        for highlight_field in self.highlight_fields.values():
            highlight_field.write_to(out)

        if self.highlight_offsets is None:
            out.write_boolean(False)
        else:
            out.write_boolean(True)
            out.write_vint(len(self.highlight_offsets))
            for name, spans in self.highlight_offsets.items():
                out.write_string(name)
                out.write_vint(len(spans))
                for span in spans:
                    span.write_to(out)

        if self.children is None:
            out.write_boolean(False)
        else:
            out.write_boolean(True)
            out.write_vint(len(self.children))
            for child in self.children:
                child.write_to(out)

    @classmethod
    def read_from(cls, inp: StreamInput) -> "FetchedHit":
        uid = Uid(type=inp.read_string(), id=inp.read_string())
        score = inp.read_float()

        fields: Dict[str, HighlightField] = {}
        for _ in range(inp.read_vint()):
            highlight_field = HighlightField.read_from(inp)
            fields[highlight_field.name] = highlight_field

        offsets = None
        if inp.read_boolean():
            offsets = {}
            for _ in range(inp.read_vint()):
                name = inp.read_string()
                offsets[name] = [HighlightOffsets.read_from(inp) for _ in range(inp.read_vint())]

        children = None
        if inp.read_boolean():
            children = [ChildrenResult.read_from(inp) for _ in range(inp.read_vint())]

        return cls(
            uid=uid,
            score=score,
            highlight_fields=fields,
            highlight_offsets=offsets,
            children=children,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the response form."""
        data: Dict[str, Any] = {
            "_type": self.uid.type,
            "_id": self.uid.id,
            "_score": self.score,
        }
        if self.highlight_fields:
            data["highlight"] = {name: list(f.fragments) for name, f in self.highlight_fields.items()}
        if self.highlight_offsets is not None:
            data["highlight_offsets"] = {
                name: [span.to_dict() for span in spans]
                for name, spans in self.highlight_offsets.items()
            }
        if self.children is not None:
            data["children"] = [child.to_dict() for child in self.children]
        return data


def read_fetched_hit(inp: StreamInput) -> FetchedHit:
    """Read a FetchedHit written by FetchedHit.write_to."""
    return FetchedHit.read_from(inp)


@dataclass
class HitFailure:
    """A hit the fetch phase could not produce.

    Attributes:
        doc_id: Segment-local doc id of the hit
        error: Why the hit failed
    """

    doc_id: int
    error: FetchPhaseExecutionError

    @property
    def uid(self) -> Optional[str]:
        return self.error.uid

    @property
    def reason(self) -> str:
        return str(self.error)

    def to_dict(self) -> Dict[str, Any]:
        return {"doc_id": self.doc_id, "uid": self.uid, "reason": self.reason}


FetchResult = Union[FetchedHit, HitFailure]


class FetchPhase:
    """Fetches a page of hits in parallel.

    Args:
        config: Fetch configuration, fetch_workers bounds the thread pool
        aggregator: Builds each hit's highlights and children
    """

    def __init__(
        self,
        config: FetchConfig = DEFAULT_CONFIG,
        aggregator: Optional[ResultAggregator] = None,
    ):
        self.config = config
        self.aggregator = aggregator or ResultAggregator(config)

    def pre_process(self, request: FetchRequest) -> int:
        """Prepare the query for this request. Must run before scoring.

        Switches on child gathering in every relational clause when the
        request surfaces children.

        Returns:
            Number of relational clauses that will gather children
        """
        if request.children is None:
            return 0
        count = self.aggregator.resolver.enable_child_gathering(request.query, request.children.size)
        if count == 0:
            logger.debug("Children requested but the query has no relational clause")
        return count

    def execute(self, hits: Sequence[HitContext], request: FetchRequest) -> List[FetchResult]:
        """Fetch every hit of a page.

        Args:
            hits: Scored hits, in page order
            request: Highlight and children sections to produce

        Returns:
            One FetchedHit or HitFailure per hit, in the order of hits
        """
        if not hits:
            return []

        start_time = time.time()
        workers = max(1, min(self.config.fetch_workers, len(hits)))
        logger.info(f"Fetching {len(hits)} hits with {workers} workers")

        if workers == 1:
            results = [self._fetch_one(hit, request) for hit in hits]
        else:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="roadfetch") as pool:
                results = list(pool.map(lambda hit: self._fetch_one(hit, request), hits))

        failed = sum(1 for r in results if isinstance(r, HitFailure))
        took_ms = (time.time() - start_time) * 1000
        logger.info(f"Fetched {len(results) - failed} hits, {failed} failed, in {took_ms:.2f}ms")
        return results

    def _fetch_one(self, hit: HitContext, request: FetchRequest) -> FetchResult:
        start_time = time.time()
        try:
            aggregated = self.aggregator.aggregate(hit, request)
            uid = hit.uid
        except FetchPhaseExecutionError as e:
            logger.warning(f"Fetch failed for doc [{hit.doc_id}]: {e}")
            return HitFailure(doc_id=hit.doc_id, error=e)
        except Exception as e:
            error = FetchPhaseExecutionError(
                f"Failed to fetch doc id [{hit.doc_id}]", uid=self._uid_or_none(hit), cause=e
            )
            logger.warning(f"Fetch failed for doc [{hit.doc_id}]: {error}")
            return HitFailure(doc_id=hit.doc_id, error=error)

        logger.debug(f"Fetched {uid} in {(time.time() - start_time) * 1000:.2f}ms")
        return FetchedHit(
            uid=uid,
            score=hit.score,
            highlight_fields=aggregated.highlight_fields,
            highlight_offsets=aggregated.highlight_offsets,
            children=aggregated.children,
        )

    @staticmethod
    def _uid_or_none(hit: HitContext) -> Optional[str]:
        try:
            return str(hit.uid)
        except RoadFetchError:
            return None


__all__ = [
    "FetchedHit",
    "read_fetched_hit",
    "HitFailure",
    "FetchResult",
    "FetchPhase",
]
