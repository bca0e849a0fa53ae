"""Tests for the binary encoding of fetch results."""

import pytest

from roadfetch_core.children.result import ChildrenResult
from roadfetch_core.common.stream import StreamInput, StreamOutput
from roadfetch_core.exceptions import StreamCorruptedError
from roadfetch_core.fetch.phase import FetchedHit, read_fetched_hit
from roadfetch_core.highlight.highlighter import HighlightField
from roadfetch_core.highlight.offsets import HighlightOffsets
from roadfetch_core.index.segment import Uid


def written(write):
    out = StreamOutput()
    write(out)
    return out.getvalue()


class TestPrimitives:
    """Tests for vints and strings."""

    @pytest.mark.parametrize("value,encoded", [
        (0, b"\x00"),
        (127, b"\x7f"),
        (128, b"\x80\x01"),
        (300, b"\xac\x02"),
        (16384, b"\x80\x80\x01"),
    ])
    def test_vint_bytes(self, value, encoded):
        assert written(lambda out: out.write_vint(value)) == encoded
        assert StreamInput(encoded).read_vint() == value

    def test_negative_vint(self):
        with pytest.raises(ValueError):
            StreamOutput().write_vint(-1)

    def test_string_is_length_prefixed_utf8(self):
        data = written(lambda out: out.write_string("héllo"))

        assert data == b"\x06" + "héllo".encode("utf-8")
        assert StreamInput(data).read_string() == "héllo"


class TestCorruption:
    """Tests for malformed input."""

    def test_truncated_string(self):
        with pytest.raises(StreamCorruptedError):
            StreamInput(b"\x05ab").read_string()

    def test_truncated_vint(self):
        with pytest.raises(StreamCorruptedError):
            StreamInput(b"\x80").read_vint()

    def test_overlong_vint(self):
        with pytest.raises(StreamCorruptedError):
            StreamInput(b"\xff" * 12).read_vint()

    def test_invalid_boolean(self):
        with pytest.raises(StreamCorruptedError):
            StreamInput(b"\x02").read_boolean()

    def test_invalid_utf8(self):
        with pytest.raises(StreamCorruptedError):
            StreamInput(b"\x01\xff").read_string()


class TestResultEncoding:
    """Tests for highlight and children encoding."""

    def test_highlight_field_layout(self):
        data = written(HighlightField("body", ["a", "bc"]).write_to)

        assert data == b"\x04body\x02\x01a\x02bc"
        assert HighlightField.read_from(StreamInput(data)) == HighlightField("body", ["a", "bc"])

    def test_highlight_offsets_layout(self):
        data = written(HighlightOffsets(12, 300).write_to)

        assert data == b"\x0c\xac\x02"
        assert HighlightOffsets.read_from(StreamInput(data)) == HighlightOffsets(12, 300)

    def test_children_result_layout(self):
        """Test id is written before type."""
        child = ChildrenResult("blog_tag", "t1", {"tag": HighlightField("tag", ["<em>fox</em>"])})

        data = written(child.write_to)

        assert data.startswith(b"\x02t1\x08blog_tag\x01")
        assert ChildrenResult.read_from(StreamInput(data)) == child

    def test_fetched_hit_round_trip(self):
        hit = FetchedHit(
            uid=Uid("blog", "1"),
            score=1.5,
            highlight_fields={"title": HighlightField("title", ["Quick brown <em>fox</em>"])},
            highlight_offsets={"body": [HighlightOffsets(16, 19), HighlightOffsets(40, 43)]},
            children=[
                ChildrenResult("blog_tag", "t1", {"tag": HighlightField("tag", ["red <em>fox</em>"])}),
                ChildrenResult("blog_tag", "t2"),
            ],
        )

        inp = StreamInput(written(hit.write_to))

        assert read_fetched_hit(inp) == hit
        assert inp.remaining() == 0

    def test_fetched_hit_without_optional_sections(self):
        hit = FetchedHit(uid=Uid("blog", "2"))

        assert read_fetched_hit(StreamInput(written(hit.write_to))) == hit

    def test_fetched_hit_to_dict(self):
        hit = FetchedHit(
            uid=Uid("blog", "1"),
            score=2.0,
            highlight_offsets={"body": [HighlightOffsets(16, 19)]},
            children=[ChildrenResult("blog_tag", "t1")],
        )

        assert hit.to_dict() == {
            "_type": "blog",
            "_id": "1",
            "_score": 2.0,
            "highlight_offsets": {"body": [{"start": 16, "end": 19}]},
            "children": [{"_type": "blog_tag", "_id": "t1"}],
        }
