"""RoadFetch Highlight Configuration - Per-Field Highlight Options.

Parses the highlight section of a search request:

    "highlight": {
        "pre_tags": ["<b>"], "post_tags": ["</b>"],
        "order": "score", "encoder": "html",
        "fields": {
            "body": {"fragment_size": 150, "number_of_fragments": 3}
        }
    }

Top-level options are defaults for every field. The same schema is
nested under "children" for child highlighting.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from roadfetch_core.config import DEFAULT_CONFIG, FetchConfig
from roadfetch_core.exceptions import HighlightConfigError

logger = logging.getLogger(__name__)

STYLED_PRE_TAGS = [f'<em class="hlt{i}">' for i in range(1, 11)]
STYLED_POST_TAGS = ["</em>"]

ENCODERS = ("default", "html")


class HighlightOrder(Enum):
    """Order of the fragments of one field."""

    DOCUMENT = "none"
    SCORE = "score"

    @classmethod
    def parse(cls, value: Optional[str]) -> "HighlightOrder":
        if value is None or value in ("none", "document"):
            return cls.DOCUMENT
        if value == "score":
            return cls.SCORE
        raise HighlightConfigError(f"Unknown highlight order [{value}]")


@dataclass
class FieldHighlightConfig:
    """How one field is highlighted.

    Attributes:
        field: Field name
        pre_tags: Tags before each match, cycled by query term when several
        post_tags: Tags after each match
        encoder: "default" leaves text as is, "html" escapes it
        fragment_size: Fragment size in characters
        number_of_fragments: Maximum fragments, 0 for the whole value
        order: Fragment order
        fragment_offset: Characters kept before the first match in
            position-based fragments, -1 for the default margin
        highlight_filter: Whether filter clauses contribute terms
        require_field_match: Only highlight terms queried on this field
    """

    field: str
    pre_tags: List[str] = field(default_factory=lambda: list(DEFAULT_CONFIG.default_pre_tags))
    post_tags: List[str] = field(default_factory=lambda: list(DEFAULT_CONFIG.default_post_tags))
    encoder: str = "default"
    fragment_size: int = DEFAULT_CONFIG.default_fragment_size
    number_of_fragments: int = DEFAULT_CONFIG.default_number_of_fragments
    order: HighlightOrder = HighlightOrder.DOCUMENT
    fragment_offset: int = -1
    highlight_filter: bool = False
    require_field_match: bool = False

    def __post_init__(self):
        if self.encoder not in ENCODERS:
            raise HighlightConfigError(f"Unknown encoder [{self.encoder}]")
        if not self.pre_tags or not self.post_tags:
            raise HighlightConfigError(f"Field [{self.field}] needs pre and post tags")
        if self.number_of_fragments < 0:
            raise HighlightConfigError(f"number_of_fragments must be >= 0 for field [{self.field}]")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "pre_tags": list(self.pre_tags),
            "post_tags": list(self.post_tags),
            "encoder": self.encoder,
            "fragment_size": self.fragment_size,
            "number_of_fragments": self.number_of_fragments,
            "order": self.order.value,
            "fragment_offset": self.fragment_offset,
            "highlight_filter": self.highlight_filter,
            "require_field_match": self.require_field_match,
        }


@dataclass
class HighlightConfig:
    """Highlighting for a set of fields.

    Attributes:
        fields: Field configs in request order
        offsets_only: Emit character spans instead of fragments
    """

    fields: List[FieldHighlightConfig] = field(default_factory=list)
    offsets_only: bool = False

    def field_names(self) -> List[str]:
        return [f.field for f in self.fields]

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        defaults: FetchConfig = DEFAULT_CONFIG,
    ) -> "HighlightConfig":
        """Parse a highlight request section.

        Raises:
            HighlightConfigError: On unknown order, encoder, or tags schema
        """
        template = FieldHighlightConfig(
            field="",
            pre_tags=list(defaults.default_pre_tags),
            post_tags=list(defaults.default_post_tags),
            fragment_size=defaults.default_fragment_size,
            number_of_fragments=defaults.default_number_of_fragments,
        )
        template = _apply_options(template, data, top_level=True)

        fields = [
            _apply_options(replace(template, field=name), options or {}, top_level=False)
            for name, options in _field_entries(data.get("fields", {}))
        ]
        return cls(fields=fields, offsets_only=bool(data.get("offsets_only", False)))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, one full option set per field."""
        return {
            "offsets_only": self.offsets_only,
            "fields": {f.field: f.to_dict() for f in self.fields},
        }


def _field_entries(fields: Any) -> Iterable[Tuple[str, Dict[str, Any]]]:
    # Fields come as an object, or as a list of single-key objects to fix the order
    if isinstance(fields, dict):
        return list(fields.items())
    if isinstance(fields, list):
        entries = []
        for entry in fields:
            if not isinstance(entry, dict) or len(entry) != 1:
                raise HighlightConfigError(f"Invalid highlight field entry: {entry!r}")
            entries.extend(entry.items())
        return entries
    raise HighlightConfigError(f"Invalid highlight fields: {fields!r}")


def _apply_options(
    config: FieldHighlightConfig,
    options: Dict[str, Any],
    top_level: bool,
) -> FieldHighlightConfig:
    changes: Dict[str, Any] = {}

    schema = options.get("tags_schema")
    if schema is not None:
        if schema == "styled":
            changes["pre_tags"] = list(STYLED_PRE_TAGS)
            changes["post_tags"] = list(STYLED_POST_TAGS)
        elif schema == "default":
            changes["pre_tags"] = list(DEFAULT_CONFIG.default_pre_tags)
            changes["post_tags"] = list(DEFAULT_CONFIG.default_post_tags)
        else:
            raise HighlightConfigError(f"Unknown tag schema [{schema}]")

    for key in ("pre_tags", "post_tags"):
        if key in options:
            value = options[key]
            changes[key] = [value] if isinstance(value, str) else list(value)

    for key in ("encoder", "highlight_filter", "require_field_match", "fragment_offset"):
        if key in options:
            changes[key] = options[key]

    # fragment_size and number_of_fragments of -1 mean "not set" in builders
    for key in ("fragment_size", "number_of_fragments"):
        if options.get(key, -1) != -1:
            changes[key] = int(options[key])

    if "order" in options:
        changes["order"] = HighlightOrder.parse(options["order"])

    if not top_level:
        unknown = set(options) - _FIELD_OPTIONS
        if unknown:
            logger.debug(f"Ignoring unknown options for field [{config.field}]: {sorted(unknown)}")

    return replace(config, **changes) if changes else config


_FIELD_OPTIONS = {
    "tags_schema", "pre_tags", "post_tags", "encoder", "highlight_filter",
    "require_field_match", "fragment_offset", "fragment_size",
    "number_of_fragments", "order",
}


__all__ = [
    "STYLED_PRE_TAGS",
    "STYLED_POST_TAGS",
    "HighlightOrder",
    "FieldHighlightConfig",
    "HighlightConfig",
]
