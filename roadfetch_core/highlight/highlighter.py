"""RoadFetch Field Highlighter - Highlighting One Field of One Hit.

Picks position-based selection when the field was indexed with term
vectors carrying positions and offsets, and re-analysis otherwise.
Text comes from stored values when the field is stored and from the
source document when it is not.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from roadfetch_core.common.stream import StreamInput, StreamOutput
from roadfetch_core.config import DEFAULT_CONFIG, FetchConfig
from roadfetch_core.exceptions import FetchPhaseExecutionError, RetrievalError
from roadfetch_core.highlight.config import FieldHighlightConfig
from roadfetch_core.highlight.encoding import FragmentFormatter, get_encoder
from roadfetch_core.highlight.fragments import (
    AnalyzerFragmentSelector,
    FieldQueryTerms,
    FragmentSelector,
    TermVectorFragmentSelector,
)
from roadfetch_core.highlight.offsets import OffsetAggregator, ValueFragments
from roadfetch_core.index.mapping import FieldMapping
from roadfetch_core.index.segment import SegmentReader
from roadfetch_core.query.extractor import FlatQuery, QueryTermExtractor
from roadfetch_core.query.nodes import QueryNode
from roadfetch_core.query.visitor import FlattenContext

logger = logging.getLogger(__name__)


@dataclass
class HighlightField:
    """Highlighted fragments of one field."""

    name: str
    fragments: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"[{self.name}], fragments[{', '.join(self.fragments)}]"

    def write_to(self, out: StreamOutput) -> None:
        out.write_string(self.name)
        out.write_vint(len(self.fragments))
        for fragment in self.fragments:
            out.write_string(fragment)

    @classmethod
    def read_from(cls, inp: StreamInput) -> "HighlightField":
        name = inp.read_string()
        return cls(name, [inp.read_string() for _ in range(inp.read_vint())])

    def to_dict(self) -> Dict[str, Any]:
        return {self.name: list(self.fragments)}


class FieldHighlighter:
    """Highlights configured fields of a document."""

    def __init__(
        self,
        config: FetchConfig = DEFAULT_CONFIG,
        extractor: Optional[QueryTermExtractor] = None,
        aggregator: Optional[OffsetAggregator] = None,
    ):
        self.config = config
        self.extractor = extractor or QueryTermExtractor()
        self.aggregator = aggregator or OffsetAggregator()

    def extract_terms(
        self,
        query: QueryNode,
        reader: SegmentReader,
        highlight_filter: bool,
    ) -> Set[FlatQuery]:
        """Terms of query relevant to a document of reader."""
        context = FlattenContext(
            reader=reader,
            include_filters=highlight_filter,
            max_clause_count=self.config.max_clause_count,
        )
        return self.extractor.extract(query, context)

    def highlight(
        self,
        query: QueryNode,
        reader: SegmentReader,
        doc_id: int,
        field_config: FieldHighlightConfig,
        mapping: FieldMapping,
        offsets_only: bool = False,
        terms: Optional[Set[FlatQuery]] = None,
    ) -> Optional[Any]:
        """Highlight one field.

        Args:
            query: Query whose terms are highlighted
            reader: Segment holding the document
            doc_id: Segment-local doc id
            field_config: Highlight options for the field
            mapping: Mapping of the field
            offsets_only: Return spans instead of a HighlightField
            terms: Already extracted terms, extracted from query when None

        Returns:
            HighlightField, or a list of HighlightOffsets when offsets_only.
            None (or an empty list) when nothing matched.

        Raises:
            FetchPhaseExecutionError: If the field could not be read or highlighted
        """
        name = field_config.field
        try:
            if terms is None:
                terms = self.extract_terms(query, reader, field_config.highlight_filter)
            field_terms = FieldQueryTerms(terms, name, field_config.require_field_match)
            if not field_terms:
                return [] if offsets_only else None

            texts = self._texts(reader, doc_id, mapping)
            if not texts:
                return [] if offsets_only else None

            selector = self._selector(reader, doc_id, field_config, mapping)
            fragment_size = field_config.fragment_size
            if offsets_only and isinstance(selector, AnalyzerFragmentSelector):
                fragment_size = 0

            values: List[ValueFragments] = [
                (text, selector.select(i, text, field_terms, field_config.number_of_fragments, fragment_size))
                for i, text in enumerate(texts)
            ]

            formatter = None
            if not offsets_only:
                formatter = FragmentFormatter(
                    field_config.pre_tags,
                    field_config.post_tags,
                    get_encoder(field_config.encoder),
                )
            result = self.aggregator.aggregate(
                values,
                field_config.number_of_fragments,
                order=field_config.order,
                offsets_only=offsets_only,
                formatter=formatter,
            )
        except FetchPhaseExecutionError:
            raise
        except Exception as e:
            raise FetchPhaseExecutionError(
                f"Failed to highlight field [{name}]",
                uid=self._uid(reader, doc_id),
                cause=e,
            ) from e

        if offsets_only:
            return result
        if not result:
            return None
        return HighlightField(name, result)

    def _texts(self, reader: SegmentReader, doc_id: int, mapping: FieldMapping) -> List[str]:
        if mapping.store:
            return reader.stored_values(doc_id, mapping.name)
        return reader.source_values(doc_id, mapping.name)

    def _selector(
        self,
        reader: SegmentReader,
        doc_id: int,
        field_config: FieldHighlightConfig,
        mapping: FieldMapping,
    ) -> FragmentSelector:
        if mapping.has_positions_and_offsets:
            vector = reader.term_vector(doc_id, mapping.name)
            if vector is not None:
                margin = field_config.fragment_offset
                if margin == -1:
                    margin = self.config.default_fragment_margin
                return TermVectorFragmentSelector(vector, margin=margin)
            logger.debug(f"No term vector for field [{mapping.name}] of doc {doc_id}, re-analyzing")
        return AnalyzerFragmentSelector(mapping.get_analyzer())

    def _uid(self, reader: SegmentReader, doc_id: int) -> Optional[str]:
        try:
            return str(reader.uid(doc_id))
        except RetrievalError:
            return None


__all__ = [
    "HighlightField",
    "FieldHighlighter",
]
