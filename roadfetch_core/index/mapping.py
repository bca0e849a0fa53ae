"""RoadFetch Field Mappings - Per-Type Field Metadata.

Mappings tell the fetch phase, per document type, which fields exist,
how they were analyzed, whether their values are stored, and whether
term vectors with positions and offsets are available for them.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterator, List, Optional, Tuple

from roadfetch_core.analyzers import Analyzer, KeywordAnalyzer, get_analyzer

logger = logging.getLogger(__name__)


class TermVectorOption(Enum):
    """What the index keeps per field and document."""

    NO = auto()
    YES = auto()
    WITH_POSITIONS = auto()
    WITH_OFFSETS = auto()
    WITH_POSITIONS_OFFSETS = auto()


@dataclass
class FieldMapping:
    """Field mapping definition.

    Attributes:
        name: Field name, dotted for object fields
        type: Field type (text or keyword)
        analyzer: Analyzer name for text fields
        store: Whether the original value is stored separately from source
        term_vector: Term vector option
    """

    name: str
    type: str = "text"
    analyzer: str = "standard"
    store: bool = False
    term_vector: TermVectorOption = TermVectorOption.NO

    @property
    def has_positions_and_offsets(self) -> bool:
        """True when term vectors can drive position-based highlighting."""
        return self.term_vector == TermVectorOption.WITH_POSITIONS_OFFSETS

    def get_analyzer(self) -> Analyzer:
        """Analyzer used for this field, standard when unknown."""
        if self.type == "keyword":
            return KeywordAnalyzer()
        return get_analyzer(self.analyzer) or get_analyzer("standard")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": self.type,
            "analyzer": self.analyzer,
            "store": self.store,
            "term_vector": self.term_vector.name.lower(),
        }

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "FieldMapping":
        """Create from dictionary."""
        return cls(
            name=name,
            type=data.get("type", "text"),
            analyzer=data.get("analyzer", "standard"),
            store=data.get("store", False),
            term_vector=TermVectorOption[data.get("term_vector", "no").upper()],
        )


@dataclass
class DocumentMapping:
    """Field mappings for one document type.

    Attributes:
        type: Document type name
        fields: Field mappings by name
        parent_type: Parent type for child documents
    """

    type: str
    fields: Dict[str, FieldMapping] = field(default_factory=dict)
    parent_type: Optional[str] = None

    def add_field(self, mapping: FieldMapping) -> "DocumentMapping":
        """Add a field mapping."""
        self.fields[mapping.name] = mapping
        return self

    def get_field(self, name: str) -> Optional[FieldMapping]:
        """Get a field mapping by name."""
        return self.fields.get(name)

    @classmethod
    def from_dict(cls, doc_type: str, data: Dict[str, Any]) -> "DocumentMapping":
        """Create from a mapping body such as {"_parent": {"type": ...}, "properties": {...}}."""
        mapping = cls(type=doc_type, parent_type=data.get("_parent", {}).get("type"))
        for name, props in data.get("properties", {}).items():
            mapping.add_field(FieldMapping.from_dict(name, props))
        return mapping


class MappingRegistry:
    """All document mappings of an index."""

    def __init__(self, mappings: Optional[List[DocumentMapping]] = None):
        self._mappings: Dict[str, DocumentMapping] = {}
        for mapping in mappings or []:
            self.put_mapping(mapping)

    def put_mapping(self, mapping: DocumentMapping) -> None:
        """Add or replace the mapping of a type."""
        self._mappings[mapping.type] = mapping

    def document_mapping(self, doc_type: str) -> Optional[DocumentMapping]:
        """Get a type's mapping, or None."""
        return self._mappings.get(doc_type)

    def __iter__(self) -> Iterator[DocumentMapping]:
        return iter(self._mappings.values())

    def smart_field(
        self,
        doc_type: str,
        field_name: str,
    ) -> Optional[Tuple[str, FieldMapping]]:
        """Resolve a field for a hit of doc_type.

        The hit's own type is searched first, then every other type in
        registration order.

        Args:
            doc_type: Type of the hit being fetched
            field_name: Field name from the request

        Returns:
            (owning type, field mapping), or None when no type declares the field
        """
        own = self._mappings.get(doc_type)
        if own is not None and field_name in own.fields:
            return doc_type, own.fields[field_name]

        for mapping in self._mappings.values():
            if field_name in mapping.fields:
                return mapping.type, mapping.fields[field_name]
        return None

    def field_for_hit(self, doc_type: str, field_name: str) -> Optional[FieldMapping]:
        """Field mapping usable for a hit of doc_type, or None.

        Fields only declared by a different type are not usable.
        """
        found = self.smart_field(doc_type, field_name)
        if found is None:
            logger.debug(f"No mapping for field [{field_name}], skipping")
            return None
        owner, mapping = found
        if owner != doc_type:
            logger.debug(f"Field [{field_name}] belongs to type [{owner}], not [{doc_type}], skipping")
            return None
        return mapping


def extract_raw_values(source: Optional[Dict[str, Any]], path: str) -> List[Any]:
    """Collect every value at a dotted path in a source document.

    Lists at any level are flattened and None values are dropped.
    """
    if not source:
        return []

    current: List[Any] = [source]
    for part in path.split("."):
        next_level: List[Any] = []
        for node in current:
            if isinstance(node, dict) and part in node:
                next_level.append(node[part])
        current = _flatten(next_level)
    return [v for v in current if v is not None]


def _flatten(values: List[Any]) -> List[Any]:
    flat: List[Any] = []
    for value in values:
        if isinstance(value, (list, tuple)):
            flat.extend(_flatten(list(value)))
        else:
            flat.append(value)
    return flat


__all__ = [
    "TermVectorOption",
    "FieldMapping",
    "DocumentMapping",
    "MappingRegistry",
    "extract_raw_values",
]
