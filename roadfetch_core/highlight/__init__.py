"""RoadFetch Highlight - Fragment Selection and Formatting.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roadfetch_core.highlight.config import (
    STYLED_PRE_TAGS,
    STYLED_POST_TAGS,
    HighlightOrder,
    FieldHighlightConfig,
    HighlightConfig,
)
from roadfetch_core.highlight.encoding import (
    Encoder,
    DefaultEncoder,
    HtmlEncoder,
    get_encoder,
    FragmentFormatter,
)
from roadfetch_core.highlight.fragments import (
    FragmentCandidate,
    FieldQueryTerms,
    FragmentSelector,
    AnalyzerFragmentSelector,
    TermVectorFragmentSelector,
)
from roadfetch_core.highlight.offsets import (
    HighlightOffsets,
    OffsetAggregator,
)
from roadfetch_core.highlight.highlighter import (
    HighlightField,
    FieldHighlighter,
)

__all__ = [
    "STYLED_PRE_TAGS",
    "STYLED_POST_TAGS",
    "HighlightOrder",
    "FieldHighlightConfig",
    "HighlightConfig",
    "Encoder",
    "DefaultEncoder",
    "HtmlEncoder",
    "get_encoder",
    "FragmentFormatter",
    "FragmentCandidate",
    "FieldQueryTerms",
    "FragmentSelector",
    "AnalyzerFragmentSelector",
    "TermVectorFragmentSelector",
    "HighlightOffsets",
    "OffsetAggregator",
    "HighlightField",
    "FieldHighlighter",
]
