"""
Span Matcher
=============

Finds the source sentences that support a claim.

Matching is purely lexical so every decision can be audited:

    1. Key terms: lower-case, split on non-word chars, drop short tokens,
       stop words and purely numeric tokens. Used for claims AND chunks.
    2. Numeric literals: dollar amounts, percentages and bare numbers
       pulled from the claim.
    3. Chunk filter: accept a chunk iff
           |claim_terms ∩ chunk_terms| / |claim_terms| >= min_overlap_ratio
       AND (the claim has no numbers OR one of them appears verbatim).
    4. Localization: within an accepted chunk keep the single sentence
       with the best Jaccard similarity, if >= min_span_similarity.
    5. Ordering: trust tier ascending, then similarity descending.

Requiring literal number agreement prevents an on-topic passage from
grounding a specific monetary claim it does not state.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from groundgate.config import GroundGateConfig
from groundgate.schemas.evidence import CitedSpan, ProvenanceChunk

logger = logging.getLogger("groundgate.retrieve.span_matcher")


STOP_WORDS: frozenset[str] = frozenset({
    "the", "a", "an", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "shall", "can", "to", "of", "and",
    "or", "in", "on", "at", "for", "with", "about", "against", "between",
    "into", "through", "during", "before", "after", "above", "below",
    "from", "up", "down", "out", "off", "over", "under", "again", "further",
    "then", "once", "here", "there", "when", "where", "why", "how", "all",
    "each", "few", "more", "most", "other", "some", "such", "no", "nor",
    "not", "only", "own", "same", "so", "than", "too", "very", "just",
    "but", "if", "this", "that", "these", "those", "it", "its", "your",
    "you", "we", "they", "he", "she", "what", "which", "who", "whom",
})

NUMBER_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\$[\d,]+(?:\.\d{2})?"),       # dollar amounts
    re.compile(r"\d+(?:,\d{3})*(?:\.\d+)?%?"),  # bare numbers and percentages
)

_NON_WORD = re.compile(r"\W+")
_NUMERIC = re.compile(r"^\d+$")
_SENTENCE_GAP = re.compile(r"(?<=[.!?])\s+")


def extract_numbers(text: str) -> list[str]:
    """
    Extract numeric literals from text, deduplicated in first-seen order.

    Example:
        extract_numbers("The fee is $395, or 2.5% per year")
        # ["$395,", "395", "2.5%"]
    """
    seen: dict[str, None] = {}
    for pattern in NUMBER_PATTERNS:
        for match in pattern.findall(text):
            seen.setdefault(match, None)
    return list(seen)


def jaccard(terms_a: set[str], terms_b: set[str]) -> float:
    """|A ∩ B| / |A ∪ B|; 0.0 if either side is empty."""
    if not terms_a or not terms_b:
        return 0.0
    return len(terms_a & terms_b) / len(terms_a | terms_b)


def sentence_bounds(text: str) -> list[tuple[int, int]]:
    """
    Character (start, end) bounds of each sentence in ``text``.

    Bounds are trimmed of surrounding whitespace, so
    ``text[start:end]`` is the exact sentence with no padding.
    """
    bounds: list[tuple[int, int]] = []
    cursor = 0
    for gap in [*_SENTENCE_GAP.finditer(text), None]:
        seg_end = gap.start() if gap else len(text)
        raw = text[cursor:seg_end]
        if raw.strip():
            start = cursor + (len(raw) - len(raw.lstrip()))
            end = seg_end - (len(raw) - len(raw.rstrip()))
            bounds.append((start, end))
        if gap:
            cursor = gap.end()
    return bounds


class SpanMatcher:
    """
    Locates supporting spans for claims inside provenance chunks.

    Usage:
        matcher = SpanMatcher(min_overlap_ratio=0.25)
        spans = matcher.find_supporting_spans(claim, chunks)

    Args:
        min_overlap_ratio: Chunk-level term overlap threshold (inclusive).
        min_span_similarity: Sentence-level Jaccard threshold (inclusive).
        min_term_length: Shortest key term kept.
        stop_words: Words never counted as key terms.
    """

    def __init__(
        self,
        min_overlap_ratio: float = 0.25,
        min_span_similarity: float = 0.25,
        min_term_length: int = 3,
        stop_words: Iterable[str] = STOP_WORDS,
    ):
        if not 0.0 <= min_overlap_ratio <= 1.0:
            raise ValueError(f"min_overlap_ratio must be in [0,1], got {min_overlap_ratio}")
        if not 0.0 <= min_span_similarity <= 1.0:
            raise ValueError(f"min_span_similarity must be in [0,1], got {min_span_similarity}")
        self.min_overlap_ratio = min_overlap_ratio
        self.min_span_similarity = min_span_similarity
        self.min_term_length = min_term_length
        self.stop_words = frozenset(w.lower() for w in stop_words)

    @classmethod
    def from_config(cls, config: GroundGateConfig) -> "SpanMatcher":
        m = config.matching
        return cls(
            min_overlap_ratio=m.min_overlap_ratio,
            min_span_similarity=m.min_span_similarity,
            min_term_length=m.min_term_length,
            stop_words=STOP_WORDS | set(m.extra_stop_words),
        )

    # ── Term helpers ───────────────────────────────────────────────

    def extract_key_terms(self, text: str) -> list[str]:
        """Key terms of ``text`` in order of appearance (duplicates kept)."""
        return [
            word for word in _NON_WORD.split(text.lower())
            if len(word) >= self.min_term_length
            and word not in self.stop_words
            and not _NUMERIC.match(word)
        ]

    def similarity(self, text_a: str, text_b: str) -> float:
        """Jaccard similarity over key-term sets."""
        return jaccard(set(self.extract_key_terms(text_a)), set(self.extract_key_terms(text_b)))

    def overlap_ratio(self, claim_terms: set[str], chunk_terms: set[str]) -> float:
        """Share of the claim's key terms that also occur in the chunk."""
        if not claim_terms:
            return 0.0
        return len(claim_terms & chunk_terms) / len(claim_terms)

    # ── Matching ───────────────────────────────────────────────────

    def find_supporting_spans(
        self, claim: str, chunks: list[ProvenanceChunk]
    ) -> list[CitedSpan]:
        """Supporting spans for ``claim``, most authoritative first."""
        return [span for span, _ in self.match(claim, chunks)]

    def match(
        self, claim: str, chunks: list[ProvenanceChunk]
    ) -> list[tuple[CitedSpan, float]]:
        """
        Supporting spans paired with their similarity to the claim.

        Returns:
            (span, similarity) pairs sorted by trust tier ascending,
            then similarity descending. Empty if nothing qualifies.
        """
        claim_terms = set(self.extract_key_terms(claim))
        claim_numbers = extract_numbers(claim)

        scored: list[tuple[CitedSpan, float]] = []
        for chunk in chunks:
            if not self.accepts_chunk(claim_terms, claim_numbers, chunk):
                continue
            located = self.best_span_in_chunk(claim_terms, chunk)
            if located is not None:
                scored.append(located)

        scored.sort(key=lambda pair: (pair[0].trust_tier, -pair[1]))
        logger.debug(
            f"Claim '{claim[:50]}': {len(scored)}/{len(chunks)} chunks "
            f"yielded spans (numbers={claim_numbers})"
        )
        return scored

    def accepts_chunk(
        self,
        claim_terms: set[str],
        claim_numbers: list[str],
        chunk: ProvenanceChunk,
    ) -> bool:
        """Chunk-level filter: term overlap AND literal number agreement."""
        chunk_terms = set(self.extract_key_terms(chunk.content))
        if self.overlap_ratio(claim_terms, chunk_terms) < self.min_overlap_ratio:
            return False
        if not claim_numbers:
            return True
        return any(num in chunk.content for num in claim_numbers)

    def best_span_in_chunk(
        self, claim_terms: set[str], chunk: ProvenanceChunk
    ) -> Optional[tuple[CitedSpan, float]]:
        """The best-matching sentence in ``chunk``, or None below threshold."""
        best_score = 0.0
        best_bounds: Optional[tuple[int, int]] = None

        for start, end in sentence_bounds(chunk.content):
            sentence_terms = set(self.extract_key_terms(chunk.content[start:end]))
            score = jaccard(claim_terms, sentence_terms)
            if score > best_score:
                best_score = score
                best_bounds = (start, end)

        if best_bounds is None or best_score < self.min_span_similarity:
            return None

        return CitedSpan.from_chunk(chunk, *best_bounds), best_score
