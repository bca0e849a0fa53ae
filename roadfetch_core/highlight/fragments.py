"""RoadFetch Fragment Selection - Scoring Excerpts of One Field Value.

Two selectors turn a stored value and the extracted query terms into
scored fragments:

- TermVectorFragmentSelector reads term positions and offsets stored at
  index time. Fragments open a small margin before a match and extend
  fragment_size characters from there.
- AnalyzerFragmentSelector re-analyzes the value with the field's
  analyzer and cuts it into consecutive windows of about fragment_size
  characters on token boundaries.

Both score a fragment as the summed weight of the matches inside it,
drop fragments that score nothing, keep the best max_fragments, and
return them in document order. Offsets are relative to the value.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, NamedTuple, Sequence, Tuple

from roadfetch_core.analyzers import Analyzer
from roadfetch_core.highlight.encoding import Highlight
from roadfetch_core.index.segment import TermVector
from roadfetch_core.query.extractor import FlatPhrase, FlatQuery, FlatTerm

logger = logging.getLogger(__name__)

DEFAULT_MARGIN = 6


@dataclass(frozen=True)
class FragmentCandidate:
    """A scored excerpt.

    Attributes:
        text: Excerpt text
        score: Summed weight of the matches inside
        start_offset: Start offset of text
        end_offset: End offset of text
        highlights: Matched spans relative to start_offset, with tag index
        value_index: Which value of the field the excerpt came from
    """

    text: str
    score: float
    start_offset: int
    end_offset: int
    highlights: Tuple[Highlight, ...] = ()
    value_index: int = 0

    def shifted(self, delta: int) -> "FragmentCandidate":
        """Same fragment with offsets moved by delta."""
        return replace(self, start_offset=self.start_offset + delta, end_offset=self.end_offset + delta)


class TermPosition(NamedTuple):
    text: str
    position: int
    start_offset: int
    end_offset: int


class Match(NamedTuple):
    """A term or whole phrase occurrence; spans are value offsets."""

    spans: Tuple[Highlight, ...]
    weight: float

    @property
    def start(self) -> int:
        return self.spans[0][0]

    @property
    def end(self) -> int:
        return max(s[1] for s in self.spans)


class FieldQueryTerms:
    """Extracted terms that apply to one field.

    Every query gets a stable tag index, its rank in (field, text) order,
    so that multi-tag schemas color a term the same way in every fragment.

    Args:
        queries: Flattened query terms and phrases
        field_name: Field being highlighted
        require_field_match: Only keep queries on field_name
    """

    def __init__(
        self,
        queries: Iterable[FlatQuery],
        field_name: str,
        require_field_match: bool = False,
    ):
        self.field_name = field_name
        self.terms: Dict[str, Tuple[float, int]] = {}
        self.phrases: List[Tuple[FlatPhrase, int]] = []

        for tag_index, query in enumerate(sorted(queries, key=_query_sort_key)):
            if require_field_match and not query.matches_field(field_name):
                continue
            if isinstance(query, FlatTerm):
                boost, _ = self.terms.get(query.text, (float("-inf"), 0))
                if query.boost > boost:
                    self.terms[query.text] = (query.boost, tag_index)
            else:
                self.phrases.append((query, tag_index))

    def __bool__(self) -> bool:
        return bool(self.terms or self.phrases)

    def find_matches(self, positions: Sequence[TermPosition], tag_terms: bool = True) -> List[Match]:
        """Term and phrase occurrences among positions, ordered by start offset.

        Args:
            positions: Tokens of one value
            tag_terms: Give each query its own tag index, else always tag 0
        """
        matches: List[Match] = []
        for token in positions:
            found = self.terms.get(token.text)
            if found is not None:
                boost, tag = found
                matches.append(Match(((token.start_offset, token.end_offset, tag if tag_terms else 0),), boost))

        if self.phrases:
            by_text: Dict[str, List[TermPosition]] = {}
            for token in sorted(positions, key=lambda t: t.position):
                by_text.setdefault(token.text, []).append(token)
            for phrase, tag in self.phrases:
                for tokens in _phrase_occurrences(phrase, by_text):
                    spans = tuple((t.start_offset, t.end_offset, tag if tag_terms else 0) for t in tokens)
                    matches.append(Match(spans, phrase.boost))

        matches.sort(key=lambda m: (m.start, m.end))
        return matches


def _query_sort_key(query: FlatQuery) -> Tuple[str, str, int]:
    if isinstance(query, FlatTerm):
        return query.field, query.text, 0
    return query.field, " ".join(query.terms), query.slop


def _phrase_occurrences(
    phrase: FlatPhrase,
    by_text: Dict[str, List[TermPosition]],
) -> List[List[TermPosition]]:
    """In-order phrase matches, with at most slop positions skipped in total."""
    occurrences = []
    for first in by_text.get(phrase.terms[0], []):
        tokens = [first]
        budget = phrase.slop
        for term in phrase.terms[1:]:
            following = [t for t in by_text.get(term, []) if t.position > tokens[-1].position]
            if not following:
                break
            gap = following[0].position - tokens[-1].position - 1
            if gap > budget:
                break
            budget -= gap
            tokens.append(following[0])
        else:
            occurrences.append(tokens)
    return occurrences


def _candidate(
    text: str,
    start: int,
    end: int,
    matches: Sequence[Match],
    value_index: int,
) -> FragmentCandidate:
    highlights = []
    for match in matches:
        for span_start, span_end, tag in match.spans:
            span_start, span_end = max(span_start, start), min(span_end, end)
            if span_start < span_end:
                highlights.append((span_start - start, span_end - start, tag))
    return FragmentCandidate(
        text=text[start:end],
        score=sum(m.weight for m in matches),
        start_offset=start,
        end_offset=end,
        highlights=tuple(highlights),
        value_index=value_index,
    )


def _best(candidates: List[FragmentCandidate], max_fragments: int) -> List[FragmentCandidate]:
    scored = [c for c in candidates if c.score > 0]
    best = sorted(scored, key=lambda c: (-c.score, c.start_offset))[:max(1, max_fragments)]
    return sorted(best, key=lambda c: c.start_offset)


class FragmentSelector(ABC):
    """Selects the best fragments of one value of a field."""

    @abstractmethod
    def select(
        self,
        value_index: int,
        text: str,
        terms: FieldQueryTerms,
        max_fragments: int,
        fragment_size: int,
    ) -> List[FragmentCandidate]:
        """Select fragments.

        Args:
            value_index: Index of the value among the field's values
            text: The value
            terms: Query terms applying to the field
            max_fragments: Fragments to keep, 0 for the whole value
            fragment_size: Approximate fragment size, <= 0 for one
                fragment per match

        Returns:
            Fragments in document order, none scoring zero or less
        """
        pass


class AnalyzerFragmentSelector(FragmentSelector):
    """Re-analyzes the value to find matches."""

    def __init__(self, analyzer: Analyzer):
        self.analyzer = analyzer

    def select(
        self,
        value_index: int,
        text: str,
        terms: FieldQueryTerms,
        max_fragments: int,
        fragment_size: int,
    ) -> List[FragmentCandidate]:
        tokens = [
            TermPosition(t.text, t.position, t.start_offset, t.end_offset)
            for t in self.analyzer.analyze(text)
        ]
        matches = terms.find_matches(tokens, tag_terms=False)
        if not matches:
            return []

        if max_fragments == 0:
            groups = [(0, len(text), matches)]
        elif fragment_size <= 0:
            groups = [(m.start, m.end, [m]) for m in matches]
        else:
            groups = []
            for start, end in _token_windows(text, tokens, fragment_size):
                inside = [m for m in matches if start <= m.start < end]
                if inside:
                    groups.append((start, max(end, max(m.end for m in inside)), inside))

        candidates = [_candidate(text, start, end, group, value_index) for start, end, group in groups]
        return _best(candidates, max_fragments)


def _token_windows(text: str, tokens: Sequence[TermPosition], fragment_size: int) -> List[Tuple[int, int]]:
    """Consecutive windows covering text, each starting at a token."""
    windows = []
    window_start = 0
    for token in tokens:
        if token.end_offset - window_start > fragment_size and token.start_offset > window_start:
            end = token.start_offset
            while end > window_start and text[end - 1].isspace():
                end -= 1
            windows.append((window_start, end))
            window_start = token.start_offset
    windows.append((window_start, len(text)))
    return windows


class TermVectorFragmentSelector(FragmentSelector):
    """Builds fragments from term positions stored at index time.

    Args:
        term_vector: Term vector of the field for the hit
        margin: Characters kept before a fragment's first match
    """

    def __init__(self, term_vector: TermVector, margin: int = DEFAULT_MARGIN):
        self.term_vector = term_vector
        self.margin = max(0, margin)

    def select(
        self,
        value_index: int,
        text: str,
        terms: FieldQueryTerms,
        max_fragments: int,
        fragment_size: int,
    ) -> List[FragmentCandidate]:
        positions = [
            TermPosition(term, o.position, o.start_offset, o.end_offset)
            for term, occurrences in self.term_vector.for_value(value_index).items()
            for o in occurrences
        ]
        matches = terms.find_matches(positions, tag_terms=True)
        if not matches:
            return []

        if max_fragments == 0:
            groups = [(0, len(text), matches)]
        elif fragment_size <= 0:
            groups = [(m.start, m.end, [m]) for m in matches]
        else:
            groups = self._frag_list(text, matches, fragment_size)

        candidates = [_candidate(text, start, end, group, value_index) for start, end, group in groups]
        return _best(candidates, max_fragments)

    def _frag_list(
        self,
        text: str,
        matches: List[Match],
        fragment_size: int,
    ) -> List[Tuple[int, int, List[Match]]]:
        if fragment_size < self.margin * 3:
            logger.debug(f"fragment_size {fragment_size} below {self.margin * 3}, raising it")
            fragment_size = self.margin * 3

        groups = []
        previous_end = 0
        pending = list(matches)
        while pending:
            first = pending[0]
            start = max(first.start - self.margin, previous_end, 0)
            end = max(start + fragment_size, first.end)
            group = [m for m in pending if m.end <= end]
            pending = [m for m in pending if m.end > end]
            end = min(end, len(text))
            start, end = _snap(text, start, end, group[0].start, max(m.end for m in group))
            groups.append((start, end, group))
            previous_end = end
        return groups


def _is_boundary(text: str, i: int) -> bool:
    if i <= 0 or i >= len(text):
        return True
    return not (text[i - 1].isalnum() and text[i].isalnum())


def _snap(text: str, start: int, end: int, first_match: int, last_match: int) -> Tuple[int, int]:
    """Shrink [start, end) to word boundaries without cutting into matches."""
    while start < first_match and not _is_boundary(text, start):
        start += 1
    while start < first_match and text[start].isspace():
        start += 1
    while end > last_match and not _is_boundary(text, end):
        end -= 1
    while end > last_match and text[end - 1].isspace():
        end -= 1
    return start, end


__all__ = [
    "DEFAULT_MARGIN",
    "FragmentCandidate",
    "TermPosition",
    "Match",
    "FieldQueryTerms",
    "FragmentSelector",
    "AnalyzerFragmentSelector",
    "TermVectorFragmentSelector",
]
