"""
Span Matcher Tests
===================

Tests for key-term extraction, numeric-literal extraction, the
chunk-level overlap / number filter, sentence localization, and span
ordering.

Span integrity invariant:
    chunk.content[span.start_offset:span.end_offset] == span.text
"""

from __future__ import annotations

import pytest

from groundgate.config import GroundGateConfig, MatchingConfig
from groundgate.retrieve.span_matcher import (
    SpanMatcher,
    extract_numbers,
    jaccard,
    sentence_bounds,
)
from tests.conftest import make_chunk


@pytest.fixture
def matcher():
    return SpanMatcher()


class TestKeyTerms:

    def test_meaningful_terms(self, matcher):
        terms = matcher.extract_key_terms("The annual fee is $395 for the Venture X card")
        assert {"annual", "fee", "venture", "card"} <= set(terms)
        for dropped in ("the", "is", "for", "395", "x"):
            assert dropped not in terms

    def test_empty(self, matcher):
        assert matcher.extract_key_terms("") == []

    def test_short_words_filtered(self, matcher):
        assert matcher.extract_key_terms("I am a VX cardholder") == ["cardholder"]

    def test_extra_stop_words_from_config(self):
        config = GroundGateConfig(matching=MatchingConfig(extra_stop_words=["annual"]))
        matcher = SpanMatcher.from_config(config)
        assert "annual" not in matcher.extract_key_terms("The annual fee")
        assert "fee" in matcher.extract_key_terms("The annual fee")


class TestNumbers:

    def test_dollars_and_percentages(self):
        assert extract_numbers("The fee is $395, or 2.5% per year") == ["$395,", "395", "2.5%"]

    def test_thousands_separator(self):
        assert extract_numbers("Get 10,000 miles") == ["10,000"]

    def test_deduplicated(self):
        assert extract_numbers("$300 credit, then another $300") == ["$300", "300"]

    def test_no_numbers(self):
        assert extract_numbers("no numbers here") == []


class TestSimilarityHelpers:

    def test_jaccard(self):
        assert jaccard({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)

    def test_jaccard_empty(self):
        assert jaccard(set(), {"a"}) == 0.0

    def test_sentence_bounds(self):
        text = "First one. Second one!  Third"
        bounds = sentence_bounds(text)
        assert bounds == [(0, 10), (11, 22), (24, 29)]
        assert [text[s:e] for s, e in bounds] == ["First one.", "Second one!", "Third"]

    def test_sentence_bounds_keep_decimals(self):
        assert len(sentence_bounds("Fee is $395.00 yearly. Done.")) == 2


class TestChunkFilter:
    """Chunk acceptance: overlap ratio boundary and literal number gating."""

    CLAIM_TERMS = {"annual", "fee", "lounge", "credit"}

    def test_overlap_exactly_at_threshold_accepted(self, matcher):
        chunk = make_chunk("The annual membership renews.")
        assert matcher.overlap_ratio(self.CLAIM_TERMS, {"annual", "membership", "renews"}) == 0.25
        assert matcher.accepts_chunk(self.CLAIM_TERMS, [], chunk)

    def test_overlap_just_below_threshold_rejected(self):
        strict = SpanMatcher(min_overlap_ratio=0.2500001)
        chunk = make_chunk("The annual membership renews.")
        assert not strict.accepts_chunk(self.CLAIM_TERMS, [], chunk)

    def test_claim_without_terms_has_zero_overlap(self, matcher):
        assert matcher.overlap_ratio(set(), {"annual"}) == 0.0

    def test_number_mismatch_rejected(self, matcher):
        """A $500 claim never matches a chunk without '500', whatever the overlap."""
        claim = "The annual fee is $500 for the Venture X card."
        chunk = make_chunk("The annual fee for the Venture X card is $395.")
        assert matcher.find_supporting_spans(claim, [chunk]) == []

    def test_number_literal_match_accepted(self, matcher):
        claim = "The annual fee is $500 for the Venture X card."
        chunk = make_chunk("The annual fee for the Venture X card is 500 dollars.")
        spans = matcher.find_supporting_spans(claim, [chunk])
        assert len(spans) == 1

    def test_invalid_threshold(self):
        with pytest.raises(ValueError):
            SpanMatcher(min_overlap_ratio=1.5)


class TestLocalization:
    """The best chunk sentence becomes the span."""

    def test_best_sentence_selected(self, matcher):
        chunk = make_chunk(
            "Welcome to the card page. The annual fee is $395 per year.",
            chunk_id="page",
        )
        spans = matcher.find_supporting_spans("The annual fee is $395.", [chunk])
        assert len(spans) == 1
        span = spans[0]
        assert span.text == "The annual fee is $395 per year."
        assert span.start_offset == 26
        assert span.id == "page_span_26"
        assert chunk.content[span.start_offset:span.end_offset] == span.text

    def test_provenance_copied(self, matcher):
        chunk = make_chunk("The annual fee is $395.", doc_id="vx", source="tpg", trust_tier=2)
        span = matcher.find_supporting_spans("The annual fee is $395.", [chunk])[0]
        assert span.chunk_id == chunk.id
        assert span.doc_id == "vx"
        assert span.source == "tpg"
        assert span.trust_tier == 2
        assert span.url == chunk.metadata.url

    def test_chunk_passes_but_no_sentence_qualifies(self, matcher):
        claim = "Annual fee waived for military members."
        chunk = make_chunk(
            "Annual bonus applies. Fee details vary by account and region significantly."
        )
        assert matcher.find_supporting_spans(claim, [chunk]) == []

    def test_no_chunks(self, matcher):
        assert matcher.find_supporting_spans("The annual fee is $395.", []) == []


class TestOrdering:

    def test_trust_tier_first(self, matcher):
        chunks = [
            make_chunk("Annual fee: $395 per year for the card.", chunk_id="blog", trust_tier=2),
            make_chunk("Official: the annual fee is $395.", chunk_id="official", trust_tier=0),
        ]
        spans = matcher.find_supporting_spans("The annual fee is $395.", chunks)
        assert [s.chunk_id for s in spans] == ["official", "blog"]

    def test_similarity_breaks_ties(self, matcher):
        chunks = [
            make_chunk(
                "The annual fee is $395 for cardholders with extra lounge perks.",
                chunk_id="long", trust_tier=1,
            ),
            make_chunk("Annual fee: $395.", chunk_id="short", trust_tier=1),
        ]
        scored = matcher.match("The annual fee is $395.", chunks)
        assert [s.chunk_id for s, _ in scored] == ["short", "long"]
        assert scored[0][1] == pytest.approx(1.0)
        assert scored[1][1] == pytest.approx(1 / 3)
