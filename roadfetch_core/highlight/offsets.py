"""RoadFetch Offset Aggregation - Merging Fragments of a Multi-Valued Field.

A field with several values is treated as the concatenation of its
values in order. Fragments of value i are shifted by the total length
of values 0..i-1, then ordered, capped, and emitted either as
formatted text or as raw character spans.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

from roadfetch_core.common.stream import StreamInput, StreamOutput
from roadfetch_core.highlight.config import HighlightOrder
from roadfetch_core.highlight.encoding import FragmentFormatter
from roadfetch_core.highlight.fragments import FragmentCandidate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HighlightOffsets:
    """A highlighted span of a field's concatenated values."""

    start: int
    end: int

    def __post_init__(self):
        if not 0 <= self.start <= self.end:
            raise ValueError(f"Invalid highlight offsets [{self.start}->{self.end}]")

    def __str__(self) -> str:
        return f"[{self.start}->{self.end}]"

    def to_dict(self) -> Dict[str, int]:
        return {"start": self.start, "end": self.end}

    def write_to(self, out: StreamOutput) -> None:
        out.write_vint(self.start)
        out.write_vint(self.end)

    @classmethod
    def read_from(cls, inp: StreamInput) -> "HighlightOffsets":
        return cls(inp.read_vint(), inp.read_vint())


ValueFragments = Tuple[str, List[FragmentCandidate]]


class OffsetAggregator:
    """Turns per-value fragments into the fragments of a whole field."""

    def aggregate(
        self,
        values: Sequence[ValueFragments],
        number_of_fragments: int,
        order: HighlightOrder = HighlightOrder.DOCUMENT,
        offsets_only: bool = False,
        formatter: Optional[FragmentFormatter] = None,
    ) -> Union[List[HighlightOffsets], List[str]]:
        """Merge fragments of every value of a field.

        Args:
            values: (value text, fragments with value offsets), in value order
            number_of_fragments: Requested fragments, 0 for whole values
            order: Document or score order
            offsets_only: Emit HighlightOffsets instead of text
            formatter: Formats text fragments, required unless offsets_only

        Returns:
            At most max(1, number_of_fragments) entries, empty when nothing matched
        """
        if not offsets_only and formatter is None:
            raise ValueError("A formatter is required for text fragments")

        fragments = self.shift_to_global(values)
        if order == HighlightOrder.SCORE:
            # stable, so equal scores keep document order
            fragments.sort(key=lambda c: -c.score)
        if not fragments:
            return []

        if number_of_fragments == 0 and len(values) > 1:
            if offsets_only:
                return [HighlightOffsets(
                    min(c.start_offset for c in fragments),
                    max(c.end_offset for c in fragments),
                )]
            return [" ".join(formatter.format(c.text, c.highlights) for c in fragments)]

        selected = fragments[:max(1, number_of_fragments)]
        if offsets_only:
            return [HighlightOffsets(c.start_offset, c.end_offset) for c in selected]
        return [formatter.format(c.text, c.highlights) for c in selected]

    def shift_to_global(self, values: Sequence[ValueFragments]) -> List[FragmentCandidate]:
        """Scoring fragments of all values with offsets into the concatenation."""
        global_offset = 0
        shifted: List[FragmentCandidate] = []
        for text, candidates in values:
            for candidate in candidates:
                if candidate.score > 0:
                    shifted.append(candidate.shifted(global_offset))
            global_offset += len(text)
        return shifted


__all__ = [
    "HighlightOffsets",
    "OffsetAggregator",
]
