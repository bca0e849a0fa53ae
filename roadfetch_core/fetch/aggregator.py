"""RoadFetch Result Aggregator - Highlights and Children of One Hit.

Runs the field highlighter over every configured field of a hit, then,
when the request asks for children, surfaces the child documents the
relational clauses gathered for the hit and highlights them with the
child half of the query.

    hit ──▶ highlight fields ──▶ HitHighlightResult
     │                               ▲
     └──▶ child hits ──▶ highlight ──┘
                         child fields

Children are never expanded further: a child's own children are not
looked up.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from roadfetch_core.children.config import ChildrenConfig
from roadfetch_core.children.result import ChildrenResult
from roadfetch_core.config import DEFAULT_CONFIG, FetchConfig
from roadfetch_core.exceptions import FetchPhaseExecutionError, RetrievalError
from roadfetch_core.fetch.context import FetchRequest, HitContext
from roadfetch_core.highlight.config import HighlightConfig
from roadfetch_core.highlight.highlighter import FieldHighlighter, HighlightField
from roadfetch_core.highlight.offsets import HighlightOffsets
from roadfetch_core.index.segment import SegmentReader, Uid
from roadfetch_core.query.extractor import FlatQuery
from roadfetch_core.query.nodes import QueryNode
from roadfetch_core.query.relations import RelationResolver

logger = logging.getLogger(__name__)


@dataclass
class HitHighlightResult:
    """Everything the fetch phase adds to one hit.

    Attributes:
        highlight_fields: Highlighted fragments by field name
        highlight_offsets: Highlight spans by field name, offsets-only requests only
        children: Surfaced children, None when the request has no children section
    """

    highlight_fields: Dict[str, HighlightField] = field(default_factory=dict)
    highlight_offsets: Optional[Dict[str, List[HighlightOffsets]]] = None
    children: Optional[List[ChildrenResult]] = None


class ResultAggregator:
    """Builds the highlight and children sections of hits."""

    def __init__(
        self,
        config: FetchConfig = DEFAULT_CONFIG,
        highlighter: Optional[FieldHighlighter] = None,
        resolver: Optional[RelationResolver] = None,
    ):
        self.config = config
        self.highlighter = highlighter or FieldHighlighter(config)
        self.resolver = resolver or RelationResolver()

    def aggregate(self, hit: HitContext, request: FetchRequest) -> HitHighlightResult:
        """Highlight a hit and collect its children.

        Raises:
            FetchPhaseExecutionError: If the hit, a field, or a child could not be read
        """
        try:
            uid = hit.uid
        except RetrievalError as e:
            raise FetchPhaseExecutionError(
                f"Failed to load doc id [{hit.doc_id}]", cause=e
            ) from e

        result = HitHighlightResult()
        if request.highlight is not None:
            fields, offsets = self.highlight_document(
                request.query, hit.reader, hit.doc_id, uid.type, request.highlight
            )
            result.highlight_fields = fields
            if request.highlight.offsets_only:
                result.highlight_offsets = offsets

        if request.children is not None:
            result.children = self.collect_children(request.query, uid, request.children)

        return result

    def highlight_document(
        self,
        query: QueryNode,
        reader: SegmentReader,
        doc_id: int,
        doc_type: str,
        highlight: HighlightConfig,
    ) -> Tuple[Dict[str, HighlightField], Dict[str, List[HighlightOffsets]]]:
        """Highlight the configured fields of one document.

        Fields the document's type does not map are skipped. Terms are
        extracted once per filter setting and shared across fields.

        Returns:
            Tuple of (fragments by field, spans by field); only the half
            matching highlight.offsets_only is filled.
        """
        mappings = reader.mappings
        terms_by_filter: Dict[bool, Set[FlatQuery]] = {}
        fields: Dict[str, HighlightField] = {}
        offsets: Dict[str, List[HighlightOffsets]] = {}

        for field_config in highlight.fields:
            mapping = mappings.field_for_hit(doc_type, field_config.field)
            if mapping is None:
                continue

            flag = field_config.highlight_filter
            if flag not in terms_by_filter:
                terms_by_filter[flag] = self.highlighter.extract_terms(query, reader, flag)

            highlighted = self.highlighter.highlight(
                query,
                reader,
                doc_id,
                field_config,
                mapping,
                offsets_only=highlight.offsets_only,
                terms=terms_by_filter[flag],
            )
            if not highlighted:
                continue
            if highlight.offsets_only:
                offsets[field_config.field] = highlighted
            else:
                fields[field_config.field] = highlighted

        return fields, offsets

    def collect_children(
        self,
        query: QueryNode,
        parent: Uid,
        children: ChildrenConfig,
    ) -> List[ChildrenResult]:
        """Children gathered for parent, highlighted with the child query.

        Raises:
            FetchPhaseExecutionError: If a child document could not be loaded
        """
        child_hits = self.resolver.find_child_hits(query, parent)[: children.size]
        if not child_hits:
            return []

        child_query = self.resolver.extract_child_query(query)
        results: List[ChildrenResult] = []
        for child_hit in child_hits:
            try:
                child_uid = child_hit.load_uid()
            except RetrievalError as e:
                raise FetchPhaseExecutionError(
                    f"Failed to fetch children doc id [{child_hit.doc_id}]",
                    uid=str(parent),
                    cause=e,
                ) from e

            fields: Dict[str, HighlightField] = {}
            if children.highlight is not None:
                fields, _ = self.highlight_document(
                    child_query,
                    child_hit.reader,
                    child_hit.doc_id,
                    child_uid.type,
                    _fragments_only(children.highlight),
                )
            results.append(ChildrenResult(type=child_uid.type, id=child_uid.id, highlight_fields=fields))

        logger.debug(f"Surfaced {len(results)} children for [{parent}]")
        return results


def _fragments_only(highlight: HighlightConfig) -> HighlightConfig:
    # Child results carry fragments only
    if not highlight.offsets_only:
        return highlight
    return HighlightConfig(fields=highlight.fields, offsets_only=False)


__all__ = [
    "HitHighlightResult",
    "ResultAggregator",
]
