"""RoadFetch Children Results - Surfaced Child Documents.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from roadfetch_core.common.stream import StreamInput, StreamOutput
from roadfetch_core.highlight.highlighter import HighlightField


@dataclass
class ChildrenResult:
    """A child document surfaced under its parent hit.

    Attributes:
        type: Child document type
        id: Child document id
        highlight_fields: Highlighted child fields by name
    """

    type: str
    id: str
    highlight_fields: Dict[str, HighlightField] = field(default_factory=dict)

    def write_to(self, out: StreamOutput) -> None:
        out.write_string(self.id)
        out.write_string(self.type)
        out.write_vint(len(self.highlight_fields))
        for highlight_field in self.highlight_fields.values():
            highlight_field.write_to(out)

    @classmethod
    def read_from(cls, inp: StreamInput) -> "ChildrenResult":
        doc_id = inp.read_string()
        doc_type = inp.read_string()
        fields = {}
        for _ in range(inp.read_vint()):
            highlight_field = HighlightField.read_from(inp)
            fields[highlight_field.name] = highlight_field
        return cls(type=doc_type, id=doc_id, highlight_fields=fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the response form."""
        data: Dict[str, Any] = {"_type": self.type, "_id": self.id}
        if self.highlight_fields:
            data["highlight"] = {name: list(f.fragments) for name, f in self.highlight_fields.items()}
        return data


__all__ = [
    "ChildrenResult",
]
