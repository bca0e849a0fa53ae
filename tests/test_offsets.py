"""Tests for merging fragments of multi-valued fields."""

import pytest

from roadfetch_core.highlight.config import HighlightOrder
from roadfetch_core.highlight.encoding import DefaultEncoder, FragmentFormatter
from roadfetch_core.highlight.fragments import FragmentCandidate
from roadfetch_core.highlight.offsets import HighlightOffsets, OffsetAggregator


def candidate(start, end, score=1.0, text=None, highlights=()):
    return FragmentCandidate(
        text=text if text is not None else "x" * (end - start),
        score=score,
        start_offset=start,
        end_offset=end,
        highlights=tuple(highlights),
    )


@pytest.fixture
def aggregator():
    return OffsetAggregator()


@pytest.fixture
def formatter():
    return FragmentFormatter(["<em>"], ["</em>"], DefaultEncoder())


class TestHighlightOffsets:
    """Tests for highlight spans."""

    def test_string_form(self):
        assert str(HighlightOffsets(12, 15)) == "[12->15]"

    def test_dict_form(self):
        assert HighlightOffsets(12, 15).to_dict() == {"start": 12, "end": 15}

    def test_invalid_spans(self):
        with pytest.raises(ValueError):
            HighlightOffsets(5, 3)
        with pytest.raises(ValueError):
            HighlightOffsets(-1, 3)


class TestGlobalOffsets:
    """Tests for shifting value offsets into the whole field."""

    def test_second_value_is_shifted(self, aggregator):
        """Test a span at [2, 5] of a second value follows a first value of length 10."""
        values = [("a" * 10, []), ("b" * 20, [candidate(2, 5)])]

        result = aggregator.aggregate(values, 5, offsets_only=True)

        assert result == [HighlightOffsets(12, 15)]

    def test_offsets_stay_inside_field(self, aggregator):
        values = [
            ("a" * 10, [candidate(0, 10)]),
            ("b" * 20, [candidate(0, 4), candidate(15, 20)]),
        ]

        result = aggregator.aggregate(values, 5, offsets_only=True)

        assert all(0 <= o.start <= o.end <= 30 for o in result)
        assert [(o.start, o.end) for o in result] == [(0, 10), (10, 14), (25, 30)]

    def test_zero_score_fragments_dropped(self, aggregator):
        values = [("a" * 10, [candidate(0, 3, score=0.0), candidate(4, 6)])]

        assert aggregator.aggregate(values, 5, offsets_only=True) == [HighlightOffsets(4, 6)]

    def test_no_fragments(self, aggregator, formatter):
        assert aggregator.aggregate([("a" * 10, [])], 5, formatter=formatter) == []


class TestOrderingAndCap:
    """Tests for fragment order and the fragment cap."""

    def test_score_order_is_stable(self, aggregator):
        """Test equal scores keep document order after sorting by score."""
        values = [(
            "x" * 40,
            [candidate(0, 5, 1.0), candidate(10, 15, 2.0), candidate(20, 25, 1.0)],
        )]

        result = aggregator.aggregate(values, 5, order=HighlightOrder.SCORE, offsets_only=True)

        assert [o.start for o in result] == [10, 0, 20]

    def test_document_order(self, aggregator):
        values = [("x" * 40, [candidate(0, 5, 1.0), candidate(10, 15, 2.0)])]

        result = aggregator.aggregate(values, 5, order=HighlightOrder.DOCUMENT, offsets_only=True)

        assert [o.start for o in result] == [0, 10]

    @pytest.mark.parametrize("number_of_fragments,expected", [(1, 1), (2, 2), (10, 4)])
    def test_fragment_cap(self, aggregator, formatter, number_of_fragments, expected):
        values = [("x" * 40, [candidate(i * 10, i * 10 + 5) for i in range(4)])]

        result = aggregator.aggregate(values, number_of_fragments, formatter=formatter)

        assert len(result) == expected

    def test_cap_keeps_best_in_score_order(self, aggregator):
        values = [("x" * 40, [candidate(0, 5, 1.0), candidate(10, 15, 3.0), candidate(20, 25, 2.0)])]

        result = aggregator.aggregate(values, 2, order=HighlightOrder.SCORE, offsets_only=True)

        assert [o.start for o in result] == [10, 20]


class TestWholeValues:
    """Tests for number_of_fragments of zero."""

    def test_values_joined_with_a_space(self, aggregator, formatter):
        values = [
            ("alpha tag1", [candidate(0, 10, text="alpha tag1", highlights=[(6, 10, 0)])]),
            ("beta tag1", [candidate(0, 9, text="beta tag1", highlights=[(5, 9, 0)])]),
        ]

        result = aggregator.aggregate(values, 0, formatter=formatter)

        assert result == ["alpha <em>tag1</em> beta <em>tag1</em>"]

    def test_offsets_merge_into_one_span(self, aggregator):
        values = [
            ("alpha tag1", [candidate(0, 10)]),
            ("beta tag1", [candidate(0, 9)]),
        ]

        assert aggregator.aggregate(values, 0, offsets_only=True) == [HighlightOffsets(0, 19)]

    def test_single_value_not_joined(self, aggregator, formatter):
        values = [("alpha tag1", [candidate(0, 10, text="alpha tag1", highlights=[(6, 10, 0)])])]

        assert aggregator.aggregate(values, 0, formatter=formatter) == ["alpha <em>tag1</em>"]

    def test_formatter_required_for_text(self, aggregator):
        with pytest.raises(ValueError):
            aggregator.aggregate([("a", [candidate(0, 1)])], 1)
