"""RoadFetch Children - Child Documents of Relational Query Hits.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roadfetch_core.children.result import ChildrenResult
from roadfetch_core.children.config import (
    ChildrenConfig,
    ChildrenBuilder,
)

__all__ = [
    "ChildrenResult",
    "ChildrenConfig",
    "ChildrenBuilder",
]
