"""Shared fixtures: a blog/blog_tag parent-child index in two segments."""

import pytest

from roadfetch_core.index.mapping import (
    DocumentMapping,
    FieldMapping,
    MappingRegistry,
    TermVectorOption,
)
from roadfetch_core.index.segment import Segment

BLOG_BODY = "The quick brown fox jumps over the lazy dog"

TAGS = [
    ("t1", "red fox"),
    ("t2", "arctic fox"),
    ("t3", "fox den"),
    ("t4", "fennec fox"),
    ("t5", "grey fox"),
]


@pytest.fixture
def mappings():
    """Mappings for blog posts and their tags."""
    blog = DocumentMapping(type="blog")
    blog.add_field(FieldMapping("title", store=True))
    blog.add_field(FieldMapping("body"))
    blog.add_field(FieldMapping("summary", term_vector=TermVectorOption.WITH_POSITIONS_OFFSETS))
    blog.add_field(FieldMapping("author.name"))
    blog.add_field(FieldMapping("category", type="keyword"))

    tag = DocumentMapping(type="blog_tag", parent_type="blog")
    tag.add_field(FieldMapping("tag", store=True))

    return MappingRegistry([blog, tag])


@pytest.fixture
def blog_segment(mappings):
    """Segment holding two blog posts."""
    segment = Segment(mappings, segment_id="blog-segment")
    segment.add_document("blog", "1", {
        "title": "Quick brown fox",
        "body": BLOG_BODY,
        "summary": ["A fox story", "The fox sleeps"],
        "author": {"name": "Fox Mulder"},
        "category": "Animals",
    })
    segment.add_document("blog", "2", {
        "title": "Lazy afternoon",
        "body": "Nothing to see here",
    })
    return segment


@pytest.fixture
def blog_reader(blog_segment):
    return blog_segment.reader()


@pytest.fixture
def tag_segment(mappings):
    """Segment holding five tags of blog post 1."""
    segment = Segment(mappings, segment_id="tag-segment")
    for tag_id, text in TAGS:
        segment.add_document("blog_tag", tag_id, {"tag": text, "_parent": "1"})
    return segment


@pytest.fixture
def tag_reader(tag_segment):
    return tag_segment.reader()
