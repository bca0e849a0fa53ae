"""RoadFetch Configuration - Fetch Phase Defaults.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


@dataclass
class FetchConfig:
    """Fetch phase configuration.

    Attributes:
        max_clause_count: Ceiling for multi-term query rewrites
        fetch_workers: Worker threads used to fetch a page of hits
        default_fragment_size: Fragment size in characters when a field omits it
        default_number_of_fragments: Fragment count when a field omits it
        default_children_size: Children returned per parent when size is omitted
        default_pre_tags: Tags inserted before each highlighted term
        default_post_tags: Tags inserted after each highlighted term
        default_fragment_margin: Characters kept before the first match in
            position-based fragments
    """

    max_clause_count: int = 1024
    fetch_workers: int = 4
    default_fragment_size: int = 100
    default_number_of_fragments: int = 5
    default_children_size: int = 10
    default_pre_tags: List[str] = field(default_factory=lambda: ["<em>"])
    default_post_tags: List[str] = field(default_factory=lambda: ["</em>"])
    default_fragment_margin: int = 6

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FetchConfig":
        """Create from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.debug(f"Ignoring unknown fetch settings: {sorted(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})


DEFAULT_CONFIG = FetchConfig()


__all__ = [
    "FetchConfig",
    "DEFAULT_CONFIG",
]
