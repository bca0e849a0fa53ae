"""RoadFetch Common - Shared Utilities.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roadfetch_core.common.stream import StreamInput, StreamOutput

__all__ = [
    "StreamInput",
    "StreamOutput",
]
