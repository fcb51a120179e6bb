"""
Claim Extractor
================

Splits a draft answer into sentence units and keeps the ones worth
checking against sources.

A sentence is kept iff it matches at least one of three pattern
families (factual, procedural, temporal). Opinion-only and purely
narrative sentences are dropped. This is a deterministic, rule-based
step: no LLM calls.

Data Flow:
    Draft answer → ClaimExtractor → list[str] → Classifier / SpanMatcher
"""

from __future__ import annotations

import logging
import re

from groundgate.claims.patterns import CITATION_MARKER, ELIGIBILITY_FAMILIES, matches_any
from groundgate.config import GroundGateConfig
from groundgate.utils import normalize_whitespace, truncate

logger = logging.getLogger("groundgate.claims.extractor")

SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: str) -> list[str]:
    """Split on terminal punctuation followed by whitespace; drop empties."""
    return [s.strip() for s in SENTENCE_BOUNDARY.split(text) if s.strip()]


class ClaimExtractor:
    """
    Extracts checkable claims from a draft answer.

    Usage:
        extractor = ClaimExtractor(min_claim_length=15)
        claims = extractor.extract("The annual fee is $395. Enjoy!")
        # ["The annual fee is $395."]

    Args:
        min_claim_length: Minimum claim length in characters.
    """

    def __init__(self, min_claim_length: int = 15):
        if min_claim_length < 1:
            raise ValueError(f"min_claim_length must be >= 1, got {min_claim_length}")
        self.min_claim_length = min_claim_length

    @classmethod
    def from_config(cls, config: GroundGateConfig) -> "ClaimExtractor":
        return cls(min_claim_length=config.extraction.min_claim_length)

    def extract(self, response: str) -> list[str]:
        """
        Extract claims in original order. Duplicates are not merged.

        Args:
            response: Raw draft-answer text (may be empty).

        Returns:
            Claim strings with citation markers removed.
        """
        if not response or not response.strip():
            return []

        flattened = re.sub(r"[\r\n]+", " ", response)
        claims: list[str] = []

        for sentence in split_sentences(flattened):
            if len(sentence) < self.min_claim_length:
                continue
            if not self.is_checkable(sentence):
                logger.debug(f"Skipping non-checkable sentence: '{truncate(sentence, 50)}'")
                continue

            cleaned = normalize_whitespace(CITATION_MARKER.sub("", sentence))
            if len(cleaned) >= self.min_claim_length:
                logger.debug(f"Claim {self.matched_families(cleaned)}: '{truncate(cleaned, 50)}'")
                claims.append(cleaned)

        logger.debug(f"Extracted {len(claims)} claims from {len(response)} chars")
        return claims

    def is_checkable(self, sentence: str) -> bool:
        """True if the sentence matches any eligibility family."""
        return any(
            matches_any(patterns, sentence)
            for patterns in ELIGIBILITY_FAMILIES.values()
        )

    def matched_families(self, sentence: str) -> list[str]:
        """Names of the eligibility families a sentence matches (for debugging)."""
        return [
            name for name, patterns in ELIGIBILITY_FAMILIES.items()
            if matches_any(patterns, sentence)
        ]
