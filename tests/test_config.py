"""Tests for fetch, highlight, and children configuration."""

import pytest

from roadfetch_core.children.config import ChildrenBuilder, ChildrenConfig
from roadfetch_core.config import DEFAULT_CONFIG, FetchConfig
from roadfetch_core.exceptions import HighlightConfigError
from roadfetch_core.fetch.context import FetchRequest
from roadfetch_core.highlight.config import (
    STYLED_POST_TAGS,
    STYLED_PRE_TAGS,
    FieldHighlightConfig,
    HighlightConfig,
    HighlightOrder,
)
from roadfetch_core.query.nodes import TermQuery


class TestFetchConfig:
    """Tests for fetch defaults."""

    def test_defaults(self):
        assert DEFAULT_CONFIG.max_clause_count == 1024
        assert DEFAULT_CONFIG.default_fragment_size == 100
        assert DEFAULT_CONFIG.default_number_of_fragments == 5
        assert DEFAULT_CONFIG.default_children_size == 10

    def test_round_trip_ignores_unknown_keys(self):
        data = FetchConfig(fetch_workers=8).to_dict()
        data["color"] = "blue"

        config = FetchConfig.from_dict(data)

        assert config == FetchConfig(fetch_workers=8)


class TestHighlightConfig:
    """Tests for parsing the highlight section."""

    def test_field_defaults(self):
        config = HighlightConfig.from_dict({"fields": {"body": {}}})
        (body,) = config.fields

        assert body.field == "body"
        assert body.fragment_size == 100
        assert body.number_of_fragments == 5
        assert body.pre_tags == ["<em>"]
        assert body.post_tags == ["</em>"]
        assert body.order == HighlightOrder.DOCUMENT
        assert config.offsets_only is False

    def test_top_level_options_apply_to_fields(self):
        config = HighlightConfig.from_dict({
            "pre_tags": ["<b>"],
            "post_tags": ["</b>"],
            "order": "score",
            "fragment_size": 80,
            "fields": {"title": {}, "body": {"fragment_size": 150, "pre_tags": "<i>"}},
        })
        title, body = config.fields

        assert title.pre_tags == ["<b>"] and title.fragment_size == 80
        assert body.pre_tags == ["<i>"] and body.post_tags == ["</b>"]
        assert body.fragment_size == 150
        assert body.order == HighlightOrder.SCORE

    def test_field_list_keeps_order(self):
        config = HighlightConfig.from_dict({"fields": [{"b": {}}, {"a": {}}, {"c": None}]})

        assert config.field_names() == ["b", "a", "c"]

    def test_styled_schema(self):
        config = HighlightConfig.from_dict({"tags_schema": "styled", "fields": {"body": {}}})

        assert config.fields[0].pre_tags == STYLED_PRE_TAGS
        assert config.fields[0].post_tags == STYLED_POST_TAGS
        assert STYLED_PRE_TAGS[0] == '<em class="hlt1">'
        assert STYLED_PRE_TAGS[-1] == '<em class="hlt10">'

    def test_unset_sizes(self):
        """Test -1 leaves fragment options at their defaults."""
        config = HighlightConfig.from_dict({"fields": {"body": {"fragment_size": -1, "number_of_fragments": -1}}})

        assert config.fields[0].fragment_size == 100
        assert config.fields[0].number_of_fragments == 5

    def test_offsets_only(self):
        assert HighlightConfig.from_dict({"offsets_only": True, "fields": {}}).offsets_only is True

    @pytest.mark.parametrize("body", [
        {"tags_schema": "neon", "fields": {"body": {}}},
        {"order": "random", "fields": {"body": {}}},
        {"fields": {"body": {"encoder": "base64"}}},
        {"fields": {"body": {"number_of_fragments": -3}}},
        {"fields": {"body": {"pre_tags": []}}},
        {"fields": [{"a": {}, "b": {}}]},
        {"fields": "body"},
    ])
    def test_invalid(self, body):
        with pytest.raises(HighlightConfigError):
            HighlightConfig.from_dict(body)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            FieldHighlightConfig(field="body", encoder="rot13")

    def test_to_dict(self):
        config = HighlightConfig.from_dict({"order": "score", "fields": {"body": {"fragment_offset": 3}}})

        data = config.to_dict()

        assert data["fields"]["body"]["order"] == "score"
        assert data["fields"]["body"]["fragment_offset"] == 3
        assert HighlightConfig.from_dict(data) == config


class TestChildrenConfig:
    """Tests for the children section."""

    def test_defaults(self):
        config = ChildrenConfig.from_dict({})

        assert config.size == 10
        assert config.highlight is None

    def test_highlight_defaults(self):
        config = ChildrenConfig.from_dict({"size": 2, "highlight": {"fields": {"tag": {}}}})

        assert config.size == 2
        assert config.highlight.fields[0].fragment_size == 100
        assert config.highlight.fields[0].number_of_fragments == 5

    def test_negative_size(self):
        with pytest.raises(HighlightConfigError):
            ChildrenConfig(size=-1)

    def test_to_dict_round_trip(self):
        config = ChildrenConfig.from_dict({"size": 4, "highlight": {"fields": {"tag": {}}}})

        assert ChildrenConfig.from_dict(config.to_dict()) == config


class TestChildrenBuilder:
    """Tests for the fluent children builder."""

    def test_to_dict(self):
        builder = ChildrenBuilder().size(3).add_highlighted_field("body", 50, 1)

        assert builder.to_dict() == {
            "children": {
                "size": 3,
                "highlight": {"fields": {"body": {"fragment_size": 50, "number_of_fragments": 1}}},
            }
        }

    def test_empty(self):
        assert ChildrenBuilder().to_dict() == {"children": {}}
        assert ChildrenBuilder().highlighted_fields() == []

    def test_round_trip(self):
        """Test the builder's request form parses to the same config as build()."""
        builder = (
            ChildrenBuilder()
            .size(3)
            .add_highlighted_field("tag")
            .add_highlighted_field("note", fragment_size=30, fragment_offset=2)
            .tags_schema("styled")
            .order("score")
            .encoder("html")
        )

        config = ChildrenConfig.from_dict(builder.to_dict()["children"])

        assert config == builder.build()
        assert builder.highlighted_fields() == ["tag", "note"]
        tag, note = config.highlight.fields
        assert tag.fragment_size == 100
        assert note.fragment_size == 30 and note.fragment_offset == 2
        assert note.pre_tags == STYLED_PRE_TAGS
        assert note.encoder == "html"
        assert note.order == HighlightOrder.SCORE

    def test_explicit_tags(self):
        config = ChildrenBuilder().pre_tags("<b>", "<i>").post_tags("</b>", "</i>").add_highlighted_field("tag").build()

        assert config.highlight.fields[0].pre_tags == ["<b>", "<i>"]
        assert config.size == 10


class TestFetchRequest:
    """Tests for building fetch requests."""

    def test_from_dict(self):
        request = FetchRequest.from_dict(TermQuery("title", "fox"), {
            "highlight": {"fields": {"title": {}}},
            "children": {"size": 3},
            "query": {"ignored": True},
        })

        assert request.highlight.field_names() == ["title"]
        assert request.children.size == 3

    def test_empty_body(self):
        request = FetchRequest.from_dict(TermQuery("title", "fox"), {})

        assert request.highlight is None
        assert request.children is None
