"""
Span-Level Grounder
====================

Composes the grounding pipeline for one draft answer:

    ClaimExtractor → ClaimClassifier + SpanMatcher → ConfidenceAssessor
        → GroundingAggregator

The grounder is a stateless service value: it holds only immutable
configuration, so one instance can be shared across threads and
concurrent calls never interact.

Usage:
    grounder = SpanLevelGrounder.from_config(get_config())
    result = grounder.verify_grounding(answer, chunks)
    result.overall_grounded, result.stats.average_confidence
"""

from __future__ import annotations

import logging
from typing import Optional

from groundgate.claims.classifier import ClaimClassifier
from groundgate.claims.extractor import ClaimExtractor
from groundgate.config import GroundGateConfig
from groundgate.retrieve.span_matcher import SpanMatcher
from groundgate.schemas.evidence import CitedSpan, ProvenanceChunk
from groundgate.schemas.grounding import ClaimGrounding, GroundingVerificationResult
from groundgate.verify.aggregator import GroundingAggregator
from groundgate.utils import truncate
from groundgate.verify.confidence import ConfidenceAssessor

logger = logging.getLogger("groundgate.verify.grounder")


class SpanLevelGrounder:
    """
    Verifies every checkable claim of an answer against retrieved chunks.

    Components are injected so tests can override any threshold; defaults
    use the built-in thresholds.
    """

    def __init__(
        self,
        extractor: Optional[ClaimExtractor] = None,
        classifier: Optional[ClaimClassifier] = None,
        matcher: Optional[SpanMatcher] = None,
        assessor: Optional[ConfidenceAssessor] = None,
        aggregator: Optional[GroundingAggregator] = None,
    ):
        self.extractor = extractor or ClaimExtractor()
        self.classifier = classifier or ClaimClassifier()
        self.matcher = matcher or SpanMatcher()
        self.assessor = assessor or ConfidenceAssessor()
        self.aggregator = aggregator or GroundingAggregator(
            high_trust_tier=self.assessor.high_trust_tier,
        )

    @classmethod
    def from_config(cls, config: GroundGateConfig) -> "SpanLevelGrounder":
        return cls(
            extractor=ClaimExtractor.from_config(config),
            classifier=ClaimClassifier(),
            matcher=SpanMatcher.from_config(config),
            assessor=ConfidenceAssessor.from_config(config),
            aggregator=GroundingAggregator.from_config(config),
        )

    def ground_claim(self, claim: str, chunks: list[ProvenanceChunk]) -> ClaimGrounding:
        """Ground a single (already extracted) claim."""
        claim_type = self.classifier.classify(claim)
        scored = self.matcher.match(claim, chunks)
        spans = [span for span, _ in scored]

        return ClaimGrounding(
            claim=claim,
            supporting_spans=spans,
            is_grounded=bool(spans),
            confidence=self.assessor.assess(spans, claim_type),
            similarity_score=max((score for _, score in scored), default=0.0),
            claim_type=claim_type,
        )

    def verify_grounding(
        self, response: str, chunks: list[ProvenanceChunk]
    ) -> GroundingVerificationResult:
        """
        Ground every claim extracted from ``response``.

        An empty response yields an empty, vacuously grounded result;
        see ``GroundingVerificationResult.has_claims``.
        """
        claims = self.extractor.extract(response)
        groundings = [self.ground_claim(claim, chunks) for claim in claims]

        for g in groundings:
            logger.debug(
                f"[{g.claim_type.value}/{g.confidence.value}] "
                f"{len(g.supporting_spans)} spans: '{truncate(g.claim)}'"
            )

        return self.aggregator.aggregate(groundings)

    def find_best_supporting_span(
        self, claim: str, chunks: list[ProvenanceChunk]
    ) -> Optional[CitedSpan]:
        """
        The single best span for ``claim``, weighing similarity by trust.

        score = similarity × trust_factor, trust_factor = 1.0 − 0.1 × tier
        (floored at 0.1). Ties keep the earlier (more authoritative) span.
        """
        best: Optional[CitedSpan] = None
        best_score = -1.0
        for span, similarity in self.matcher.match(claim, chunks):
            score = similarity * trust_factor(span.trust_tier)
            if score > best_score:
                best, best_score = span, score
        return best


def trust_factor(trust_tier: int) -> float:
    """Down-weight for less authoritative sources: tier 0 → 1.0, tier 3 → 0.7."""
    return max(0.1, 1.0 - 0.1 * trust_tier)
