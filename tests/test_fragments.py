"""Tests for fragment selection from re-analysis and from term vectors."""

import pytest

from roadfetch_core.analyzers import StandardAnalyzer
from roadfetch_core.highlight.encoding import DefaultEncoder, FragmentFormatter
from roadfetch_core.highlight.fragments import (
    AnalyzerFragmentSelector,
    FieldQueryTerms,
    TermVectorFragmentSelector,
)
from roadfetch_core.index.mapping import (
    DocumentMapping,
    FieldMapping,
    MappingRegistry,
    TermVectorOption,
)
from roadfetch_core.index.segment import Segment
from roadfetch_core.query.extractor import FlatPhrase, FlatTerm

TEXT = "The quick brown fox jumps over the lazy dog"


def field_terms(*queries, require_field_match=False):
    return FieldQueryTerms(queries, "body", require_field_match)


def spans(candidates):
    return [(c.start_offset, c.end_offset) for c in candidates]


@pytest.fixture
def analyzer_selector():
    return AnalyzerFragmentSelector(StandardAnalyzer())


@pytest.fixture
def body_vector():
    """Term vector of TEXT indexed with positions and offsets."""
    mapping = DocumentMapping(type="doc").add_field(
        FieldMapping("body", term_vector=TermVectorOption.WITH_POSITIONS_OFFSETS)
    )
    segment = Segment(MappingRegistry([mapping]))
    doc_id = segment.add_document("doc", "1", {"body": TEXT})
    return segment.reader().term_vector(doc_id, "body")


class TestFieldQueryTerms:
    """Tests for terms applying to one field."""

    def test_require_field_match(self):
        queries = [FlatTerm("body", "fox"), FlatTerm("title", "dog")]

        assert set(field_terms(*queries).terms) == {"fox", "dog"}
        assert set(field_terms(*queries, require_field_match=True).terms) == {"fox"}

    def test_highest_boost_wins(self):
        terms = FieldQueryTerms([FlatTerm("body", "fox", 1.0), FlatTerm("title", "fox", 3.0)], "body")

        assert terms.terms["fox"][0] == 3.0

    def test_empty(self):
        assert not field_terms()


class TestAnalyzerFragmentSelector:
    """Tests for fragments cut from re-analyzed text."""

    def test_single_window_for_short_text(self, analyzer_selector):
        """Test a value shorter than the fragment size is one fragment."""
        text = "foo bar tag1 stuff and other things"
        terms = FieldQueryTerms([FlatTerm("body", "tag1")], "body")

        (fragment,) = analyzer_selector.select(0, text, terms, 1, 100)

        assert fragment.text == text
        assert fragment.highlights == ((8, 12, 0),)

    def test_windows_on_token_boundaries(self, analyzer_selector):
        """Test windows start at tokens and drop trailing whitespace."""
        terms = field_terms(FlatTerm("body", "fox"), FlatTerm("body", "dog"))

        fragments = analyzer_selector.select(0, TEXT, terms, 5, 20)

        assert spans(fragments) == [(0, 19), (40, 43)]
        assert fragments[0].text == "The quick brown fox"
        assert fragments[1].text == "dog"

    def test_best_fragment_by_score(self, analyzer_selector):
        terms = field_terms(FlatTerm("body", "fox"), FlatTerm("body", "dog", boost=2.0))

        (fragment,) = analyzer_selector.select(0, TEXT, terms, 1, 20)

        assert fragment.text == "dog"
        assert fragment.score == 2.0

    def test_phrase_across_window_edge_stays_whole(self, analyzer_selector):
        """Test a window grows to cover a phrase that starts inside it."""
        terms = field_terms(FlatPhrase("body", ("fox", "jumps")))

        (fragment,) = analyzer_selector.select(0, TEXT, terms, 5, 20)

        assert fragment.text == "The quick brown fox jumps"
        assert fragment.highlights == ((16, 19, 0), (20, 25, 0))
        assert fragment.score == 1.0

    def test_equal_scores_prefer_earlier_fragment(self, analyzer_selector):
        terms = field_terms(FlatTerm("body", "fox"), FlatTerm("body", "dog"))

        (fragment,) = analyzer_selector.select(0, TEXT, terms, 1, 20)

        assert fragment.start_offset == 0

    def test_zero_fragments_is_whole_value(self, analyzer_selector):
        terms = field_terms(FlatTerm("body", "fox"), FlatTerm("body", "dog"))

        (fragment,) = analyzer_selector.select(0, TEXT, terms, 0, 20)

        assert (fragment.start_offset, fragment.end_offset) == (0, len(TEXT))
        assert len(fragment.highlights) == 2

    def test_zero_size_is_one_fragment_per_match(self, analyzer_selector):
        terms = field_terms(FlatTerm("body", "fox"), FlatTerm("body", "dog"))

        assert spans(analyzer_selector.select(0, TEXT, terms, 5, 0)) == [(16, 19), (40, 43)]

    def test_no_match(self, analyzer_selector):
        assert analyzer_selector.select(0, TEXT, field_terms(FlatTerm("body", "cat")), 5, 20) == []

    def test_phrase_match(self, analyzer_selector):
        terms = field_terms(FlatPhrase("body", ("quick", "brown")))

        (fragment,) = analyzer_selector.select(0, TEXT, terms, 5, 0)

        assert (fragment.start_offset, fragment.end_offset) == (4, 15)
        assert fragment.highlights == ((0, 5, 0), (6, 11, 0))

    def test_phrase_slop(self, analyzer_selector):
        """Test a phrase matches only within its slop."""
        exact = field_terms(FlatPhrase("body", ("quick", "fox")))
        sloppy = field_terms(FlatPhrase("body", ("quick", "fox"), slop=1))

        assert analyzer_selector.select(0, TEXT, exact, 5, 0) == []
        assert spans(analyzer_selector.select(0, TEXT, sloppy, 5, 0)) == [(4, 19)]

    def test_value_index_is_recorded(self, analyzer_selector):
        (fragment,) = analyzer_selector.select(3, TEXT, field_terms(FlatTerm("body", "fox")), 1, 100)

        assert fragment.value_index == 3


class TestTermVectorFragmentSelector:
    """Tests for fragments built from stored term positions."""

    def test_margin_before_first_match(self, body_vector):
        """Test fragments open a margin before the match and snap to words."""
        selector = TermVectorFragmentSelector(body_vector, margin=6)
        terms = field_terms(FlatTerm("body", "fox"), FlatTerm("body", "dog"))

        fragments = selector.select(0, TEXT, terms, 5, 20)

        assert [f.text for f in fragments] == ["brown fox jumps over", "lazy dog"]

    def test_start_snaps_forward_out_of_a_word(self, body_vector):
        selector = TermVectorFragmentSelector(body_vector, margin=4)

        (fragment,) = selector.select(0, TEXT, field_terms(FlatTerm("body", "fox")), 5, 20)

        assert fragment.text == "fox jumps over"

    def test_small_fragment_size_is_raised(self, body_vector):
        """Test fragment_size below three margins is raised to three margins."""
        selector = TermVectorFragmentSelector(body_vector, margin=6)

        (fragment,) = selector.select(0, TEXT, field_terms(FlatTerm("body", "fox")), 5, 5)

        assert fragment.text == "brown fox jumps"

    def test_tags_follow_query_terms(self, body_vector):
        """Test each query term keeps its own tag index."""
        selector = TermVectorFragmentSelector(body_vector)
        terms = field_terms(FlatTerm("body", "fox"), FlatTerm("body", "dog"))
        formatter = FragmentFormatter(["<a>", "<b>"], ["</a>", "</b>"], DefaultEncoder())

        (fragment,) = selector.select(0, TEXT, terms, 0, 20)

        assert formatter.format(fragment.text, fragment.highlights) == (
            "The quick brown <b>fox</b> jumps over the lazy <a>dog</a>"
        )

    def test_other_value_has_no_matches(self, body_vector):
        selector = TermVectorFragmentSelector(body_vector)

        assert selector.select(1, "fox", field_terms(FlatTerm("body", "fox")), 5, 20) == []
