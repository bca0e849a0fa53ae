"""RoadFetch Children Configuration - The "children" Request Section.

    "children": {
        "size": 2,
        "highlight": {
            // same as the top level highlight section
        }
    }

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from roadfetch_core.config import DEFAULT_CONFIG, FetchConfig
from roadfetch_core.exceptions import HighlightConfigError
from roadfetch_core.highlight.config import HighlightConfig

logger = logging.getLogger(__name__)


@dataclass
class ChildrenConfig:
    """Which children to surface per parent and how to highlight them.

    Attributes:
        size: Maximum children per parent hit
        highlight: Child field highlighting, None for no highlighting
    """

    size: int = DEFAULT_CONFIG.default_children_size
    highlight: Optional[HighlightConfig] = None

    def __post_init__(self):
        if self.size < 0:
            raise HighlightConfigError(f"children size must be >= 0, got {self.size}")

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        defaults: FetchConfig = DEFAULT_CONFIG,
    ) -> "ChildrenConfig":
        """Parse the body of a "children" section."""
        highlight = None
        if data.get("highlight") is not None:
            highlight = HighlightConfig.from_dict(data["highlight"], defaults)
        return cls(size=int(data.get("size", defaults.default_children_size)), highlight=highlight)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"size": self.size}
        if self.highlight is not None:
            data["highlight"] = self.highlight.to_dict()
        return data


class ChildrenBuilder:
    """Fluent builder for the "children" request section.

    Example:
        >>> ChildrenBuilder().size(3).add_highlighted_field("body", 50, 1).to_dict()
        {'children': {'size': 3, 'highlight': {'fields': {'body': {'fragment_size': 50, 'number_of_fragments': 1}}}}}
    """

    def __init__(self):
        self._size: Optional[int] = None
        self._highlight: Optional[Dict[str, Any]] = None

    def _highlight_section(self) -> Dict[str, Any]:
        if self._highlight is None:
            self._highlight = {}
        return self._highlight

    def size(self, size: int) -> "ChildrenBuilder":
        self._size = size
        return self

    def add_highlighted_field(
        self,
        name: str,
        fragment_size: int = -1,
        number_of_fragments: int = -1,
        fragment_offset: int = -1,
    ) -> "ChildrenBuilder":
        """Highlight a child field; -1 leaves an option at its default."""
        options: Dict[str, Any] = {}
        if fragment_size != -1:
            options["fragment_size"] = fragment_size
        if number_of_fragments != -1:
            options["number_of_fragments"] = number_of_fragments
        if fragment_offset != -1:
            options["fragment_offset"] = fragment_offset
        self._highlight_section().setdefault("fields", {})[name] = options
        return self

    def tags_schema(self, schema_name: str) -> "ChildrenBuilder":
        self._highlight_section()["tags_schema"] = schema_name
        return self

    def pre_tags(self, *tags: str) -> "ChildrenBuilder":
        self._highlight_section()["pre_tags"] = list(tags)
        return self

    def post_tags(self, *tags: str) -> "ChildrenBuilder":
        self._highlight_section()["post_tags"] = list(tags)
        return self

    def order(self, order: str) -> "ChildrenBuilder":
        self._highlight_section()["order"] = order
        return self

    def encoder(self, encoder: str) -> "ChildrenBuilder":
        self._highlight_section()["encoder"] = encoder
        return self

    def highlighted_fields(self) -> List[str]:
        if self._highlight is None:
            return []
        return list(self._highlight.get("fields", {}))

    def to_dict(self) -> Dict[str, Any]:
        """Request form, wrapped in a "children" key."""
        body: Dict[str, Any] = {}
        if self._size is not None:
            body["size"] = self._size
        if self._highlight is not None:
            body["highlight"] = dict(self._highlight)
        return {"children": body}

    def build(self, defaults: FetchConfig = DEFAULT_CONFIG) -> ChildrenConfig:
        """Parsed configuration for this builder."""
        return ChildrenConfig.from_dict(self.to_dict()["children"], defaults)


__all__ = [
    "ChildrenConfig",
    "ChildrenBuilder",
]
