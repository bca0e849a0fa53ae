"""RoadFetch Highlight Encoding - Tag Wrapping and Escaping.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import html
from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

from roadfetch_core.exceptions import HighlightConfigError

# (start, end, tag index) relative to the text being formatted
Highlight = Tuple[int, int, int]


class Encoder(ABC):
    """Encodes fragment text. Tags are never encoded."""

    @abstractmethod
    def encode(self, text: str) -> str:
        pass


class DefaultEncoder(Encoder):
    """Leaves text untouched."""

    def encode(self, text: str) -> str:
        return text


class HtmlEncoder(Encoder):
    """Escapes &, <, >, and quotes."""

    def encode(self, text: str) -> str:
        return html.escape(text, quote=True)


_ENCODERS = {
    "default": DefaultEncoder(),
    "html": HtmlEncoder(),
}


def get_encoder(name: str) -> Encoder:
    """Get an encoder by name.

    Raises:
        HighlightConfigError: If the name is unknown
    """
    try:
        return _ENCODERS[name]
    except KeyError:
        raise HighlightConfigError(f"Unknown encoder [{name}]") from None


class FragmentFormatter:
    """Wraps highlighted spans of a fragment in tags.

    With several pre/post tags, the tag index of a span picks the tag
    pair, wrapping around.
    """

    def __init__(
        self,
        pre_tags: Sequence[str],
        post_tags: Sequence[str],
        encoder: Encoder,
    ):
        self.pre_tags = list(pre_tags)
        self.post_tags = list(post_tags)
        self.encoder = encoder

    def pre_tag(self, index: int) -> str:
        return self.pre_tags[index % len(self.pre_tags)]

    def post_tag(self, index: int) -> str:
        return self.post_tags[index % len(self.post_tags)]

    def format(self, text: str, highlights: Sequence[Highlight]) -> str:
        """Encode text and wrap each highlight.

        Args:
            text: Fragment text
            highlights: Spans relative to text; overlapping spans are merged

        Returns:
            Formatted fragment
        """
        parts: List[str] = []
        last = 0
        for start, end, tag_index in _merge(highlights):
            start = max(start, last)
            if start >= end:
                continue
            parts.append(self.encoder.encode(text[last:start]))
            parts.append(self.pre_tag(tag_index))
            parts.append(self.encoder.encode(text[start:end]))
            parts.append(self.post_tag(tag_index))
            last = end
        parts.append(self.encoder.encode(text[last:]))
        return "".join(parts)


def _merge(highlights: Sequence[Highlight]) -> List[Highlight]:
    merged: List[Highlight] = []
    for start, end, tag_index in sorted(highlights):
        if merged and start < merged[-1][1]:
            prev_start, prev_end, prev_index = merged[-1]
            merged[-1] = (prev_start, max(prev_end, end), prev_index)
        else:
            merged.append((start, end, tag_index))
    return merged


__all__ = [
    "Highlight",
    "Encoder",
    "DefaultEncoder",
    "HtmlEncoder",
    "get_encoder",
    "FragmentFormatter",
]
