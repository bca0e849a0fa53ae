"""RoadFetch Index - Mappings and Segment Readers.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roadfetch_core.index.mapping import (
    TermVectorOption,
    FieldMapping,
    DocumentMapping,
    MappingRegistry,
    extract_raw_values,
)
from roadfetch_core.index.segment import (
    Uid,
    TermOccurrence,
    TermVector,
    StoredDocument,
    Segment,
    SegmentReader,
)

__all__ = [
    "TermVectorOption",
    "FieldMapping",
    "DocumentMapping",
    "MappingRegistry",
    "extract_raw_values",
    "Uid",
    "TermOccurrence",
    "TermVector",
    "StoredDocument",
    "Segment",
    "SegmentReader",
]
