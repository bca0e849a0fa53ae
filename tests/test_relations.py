"""Tests for locating relational clauses and their gathered children."""

import pytest

from roadfetch_core.index.segment import Uid
from roadfetch_core.query.child_hits import ChildHit, ChildHitIndex
from roadfetch_core.query.nodes import (
    BooleanQuery,
    ConstantScoreQuery,
    FilteredQuery,
    Occur,
    RelationalQuery,
    TermQuery,
)
from roadfetch_core.query.relations import RelationResolver

PARENT = Uid("blog", "1")


def relational(term="fox"):
    return RelationalQuery(child_type="blog_tag", child_query=TermQuery("tag", term))


class TestChildHitIndex:
    """Tests for per-parent child collection."""

    def test_cap_per_parent(self, tag_reader):
        index = ChildHitIndex(max_per_parent=2)

        accepted = [index.add(PARENT, ChildHit(i, tag_reader)) for i in range(3)]

        assert accepted == [True, True, False]
        assert [h.doc_id for h in index.get(PARENT)] == [0, 1]

    def test_absent_parent(self):
        index = ChildHitIndex()

        assert index.get(Uid("blog", "404")) == ()
        assert Uid("blog", "404") not in index
        assert len(index) == 0

    def test_child_uid(self, tag_reader):
        assert ChildHit(2, tag_reader).load_uid() == Uid("blog_tag", "t3")


class TestRelationalClauses:
    """Tests for finding relational clauses in a query tree."""

    def test_found_through_wrappers(self):
        first = relational("red")
        second = relational("grey")
        query = (
            BooleanQuery()
            .add_must(FilteredQuery(query=first))
            .add_should(ConstantScoreQuery(query=second))
            .add_should(TermQuery("title", "fox"))
        )

        assert RelationResolver().relational_clauses(query) == [first, second]

    def test_prohibited_clauses_are_skipped(self):
        query = BooleanQuery().add(relational(), Occur.MUST_NOT)

        assert RelationResolver().relational_clauses(query) == []

    def test_nested_joins_are_not_descended(self):
        """Test only the outer join level is found."""
        inner = relational("red")
        outer = RelationalQuery(child_type="blog_tag", child_query=BooleanQuery().add_must(inner))

        assert RelationResolver().relational_clauses(outer) == [outer]


class TestChildGathering:
    """Tests for gathering and finding children."""

    def test_enable_child_gathering(self):
        first, second = relational("red"), relational("grey")
        query = BooleanQuery().add_should(first).add_should(second)

        assert RelationResolver().enable_child_gathering(query, 3) == 2
        assert first.is_gathering and second.is_gathering

    def test_children_not_retained_before_enabling(self, tag_reader):
        query = relational()

        assert query.collect_child(PARENT, ChildHit(0, tag_reader)) is False
        assert RelationResolver().find_child_hits(query, PARENT) == []

    def test_find_child_hits_capped_in_order(self, tag_reader):
        """Test five matching children with size 3 yield the first three."""
        query = BooleanQuery().add_must(relational())
        resolver = RelationResolver()
        resolver.enable_child_gathering(query, 3)
        clause = resolver.relational_clauses(query)[0]

        for doc_id in range(5):
            clause.collect_child(PARENT, ChildHit(doc_id, tag_reader))

        hits = resolver.find_child_hits(query, PARENT)
        assert [h.load_uid().id for h in hits] == ["t1", "t2", "t3"]

    def test_absent_parent_has_no_children(self, tag_reader):
        query = relational()
        RelationResolver().enable_child_gathering(query, 3)
        query.collect_child(PARENT, ChildHit(0, tag_reader))

        assert RelationResolver().find_child_hits(query, Uid("blog", "2")) == []

    def test_hits_concatenate_in_tree_order(self, tag_reader):
        """Test children of several clauses are concatenated clause by clause."""
        first, second = relational("red"), relational("grey")
        query = BooleanQuery().add_should(first).add_should(second)
        resolver = RelationResolver()
        resolver.enable_child_gathering(query, 10)

        second.collect_child(PARENT, ChildHit(4, tag_reader))
        first.collect_child(PARENT, ChildHit(0, tag_reader))
        first.collect_child(PARENT, ChildHit(1, tag_reader))

        hits = resolver.find_child_hits(query, PARENT)
        assert [h.doc_id for h in hits] == [0, 1, 4]


class TestExtractChildQuery:
    """Tests for building the child highlight query."""

    def test_child_queries_are_required(self):
        query = BooleanQuery().add_must(TermQuery("title", "fox")).add_should(relational("red"))

        child_query = RelationResolver().extract_child_query(query)

        assert [c.occur for c in child_query.clauses] == [Occur.MUST]
        assert child_query.clauses[0].query == TermQuery("tag", "red")

    def test_no_relational_clause(self):
        assert RelationResolver().extract_child_query(TermQuery("title", "fox")).clauses == []

    def test_relational_query_needs_child_query(self):
        with pytest.raises(ValueError):
            RelationalQuery(child_type="blog_tag")
