"""RoadFetch Segments - Stored Fields and Term Vectors.

A segment holds a batch of documents addressed by segment-local doc
ids. For the fetch phase it serves three things per document: stored
field values, the original source, and per-field term vectors. It also
keeps a per-field term dictionary so multi-term queries can be
rewritten against the segment.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import bisect
import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from roadfetch_core.exceptions import RetrievalError
from roadfetch_core.index.mapping import (
    FieldMapping,
    MappingRegistry,
    TermVectorOption,
    extract_raw_values,
)

logger = logging.getLogger(__name__)

# Position gap between consecutive values of a multi-valued field
POSITION_INCREMENT_GAP = 100


@dataclass(frozen=True)
class Uid:
    """Type and id of a document."""

    type: str
    id: str

    def __str__(self) -> str:
        return f"{self.type}#{self.id}"

    @classmethod
    def parse(cls, text: str) -> "Uid":
        """Parse the type#id form."""
        doc_type, sep, doc_id = text.partition("#")
        if not sep:
            raise ValueError(f"Invalid uid: {text}")
        return cls(doc_type, doc_id)


@dataclass(frozen=True)
class TermOccurrence:
    """One occurrence of a term inside a field.

    Offsets are relative to the value the term occurs in.
    """

    value_index: int
    position: int
    start_offset: int
    end_offset: int


@dataclass
class TermVector:
    """Terms of one field of one document with positions and offsets.

    Attributes:
        field: Field name
        value_lengths: Character length of each stored value
        terms: Term text to occurrences in position order
    """

    field: str
    value_lengths: List[int] = field(default_factory=list)
    terms: Dict[str, List[TermOccurrence]] = field(default_factory=dict)

    def occurrences(self, term: str) -> List[TermOccurrence]:
        """Occurrences of a term, empty when absent."""
        return self.terms.get(term, [])

    def for_value(self, value_index: int) -> Dict[str, List[TermOccurrence]]:
        """Occurrences restricted to one value."""
        result: Dict[str, List[TermOccurrence]] = {}
        for term, occurrences in self.terms.items():
            matching = [o for o in occurrences if o.value_index == value_index]
            if matching:
                result[term] = matching
        return result


@dataclass
class StoredDocument:
    """A document as the fetch phase sees it.

    Attributes:
        doc_id: Segment-local document id
        uid: Type and id
        stored: Stored field values, always lists
        source: Original source document
        term_vectors: Term vectors by field name
    """

    doc_id: int
    uid: Uid
    stored: Dict[str, List[str]] = field(default_factory=dict)
    source: Dict[str, Any] = field(default_factory=dict)
    term_vectors: Dict[str, TermVector] = field(default_factory=dict)


class Segment:
    """An in-memory index segment."""

    def __init__(
        self,
        mappings: MappingRegistry,
        segment_id: Optional[str] = None,
    ):
        """Initialize segment.

        Args:
            mappings: Mappings used to index documents
            segment_id: Unique segment ID
        """
        self.segment_id = segment_id or str(uuid.uuid4())
        self.mappings = mappings
        self._documents: List[StoredDocument] = []
        self._term_dictionary: Dict[str, Set[str]] = {}
        self._lock = threading.RLock()

    def add_document(self, doc_type: str, doc_id: str, source: Dict[str, Any]) -> int:
        """Index a document.

        Args:
            doc_type: Document type, must have a mapping
            doc_id: Document id
            source: Source document

        Returns:
            Segment-local doc id
        """
        mapping = self.mappings.document_mapping(doc_type)
        if mapping is None:
            raise ValueError(f"No mapping for type [{doc_type}]")

        with self._lock:
            local_id = len(self._documents)
            document = StoredDocument(doc_id=local_id, uid=Uid(doc_type, doc_id), source=source)

            for field_mapping in mapping.fields.values():
                values = [str(v) for v in extract_raw_values(source, field_mapping.name)]
                if not values:
                    continue
                if field_mapping.store:
                    document.stored[field_mapping.name] = values
                vector = self._index_field(field_mapping, values)
                if field_mapping.term_vector != TermVectorOption.NO:
                    document.term_vectors[field_mapping.name] = vector

            self._documents.append(document)
            logger.debug(f"Indexed {document.uid} as doc {local_id} in segment {self.segment_id[:8]}")
            return local_id

    def _index_field(self, mapping: FieldMapping, values: List[str]) -> TermVector:
        analyzer = mapping.get_analyzer()
        vector = TermVector(field=mapping.name)
        dictionary = self._term_dictionary.setdefault(mapping.name, set())
        base_position = 0

        for value_index, value in enumerate(values):
            vector.value_lengths.append(len(value))
            last_position = -1
            for token in analyzer.analyze(value):
                position = base_position + token.position
                vector.terms.setdefault(token.text, []).append(TermOccurrence(
                    value_index=value_index,
                    position=position,
                    start_offset=token.start_offset,
                    end_offset=token.end_offset,
                ))
                dictionary.add(token.text)
                last_position = position
            base_position = max(base_position, last_position + 1) + POSITION_INCREMENT_GAP

        return vector

    def reader(self) -> "SegmentReader":
        """Get a reader over the segment's current documents."""
        with self._lock:
            return SegmentReader(self, list(self._documents))

    def __len__(self) -> int:
        return len(self._documents)


class SegmentReader:
    """Point-in-time, read-only view of a segment.

    Safe to share across fetch workers.
    """

    def __init__(self, segment: Segment, documents: List[StoredDocument]):
        self.segment = segment
        self._documents = documents
        self._terms = {
            name: sorted(terms) for name, terms in segment._term_dictionary.items()
        }

    @property
    def max_doc(self) -> int:
        """Number of documents visible to this reader."""
        return len(self._documents)

    @property
    def mappings(self) -> MappingRegistry:
        return self.segment.mappings

    def document(self, doc_id: int) -> StoredDocument:
        """Load a document.

        Raises:
            RetrievalError: If doc_id is not in this reader
        """
        if not 0 <= doc_id < len(self._documents):
            raise RetrievalError(
                f"Failed to load doc [{doc_id}] from segment [{self.segment.segment_id}]",
                doc_id=doc_id,
            )
        return self._documents[doc_id]

    def uid(self, doc_id: int) -> Uid:
        """Uid of a document."""
        return self.document(doc_id).uid

    def stored_values(self, doc_id: int, field_name: str) -> List[str]:
        """Stored values of a field, empty when not stored."""
        return list(self.document(doc_id).stored.get(field_name, []))

    def source_values(self, doc_id: int, field_name: str) -> List[str]:
        """Values of a field extracted from the source document."""
        return [str(v) for v in extract_raw_values(self.document(doc_id).source, field_name)]

    def term_vector(self, doc_id: int, field_name: str) -> Optional[TermVector]:
        """Term vector of a field, or None when none was indexed."""
        return self.document(doc_id).term_vectors.get(field_name)

    def terms(self, field_name: str, prefix: str = "") -> List[str]:
        """Sorted terms of a field, optionally limited to a prefix."""
        terms = self._terms.get(field_name, [])
        if not prefix:
            return list(terms)
        start = bisect.bisect_left(terms, prefix)
        result = []
        for term in terms[start:]:
            if not term.startswith(prefix):
                break
            result.append(term)
        return result

    def fields(self) -> List[str]:
        """Fields with at least one indexed term."""
        return sorted(self._terms)

    def __repr__(self) -> str:
        return f"SegmentReader({self.segment.segment_id[:8]}, max_doc={self.max_doc})"


__all__ = [
    "POSITION_INCREMENT_GAP",
    "Uid",
    "TermOccurrence",
    "TermVector",
    "StoredDocument",
    "Segment",
    "SegmentReader",
]
