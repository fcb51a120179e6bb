"""
Grounding Aggregator
=====================

Pure reduction over per-claim results into a GroundingVerificationResult.

    overall_grounded   = no ungrounded claims (vacuously True for zero claims)
    average_confidence = mean(weight[confidence]), rounded half-up to 2 decimals
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from groundgate.config import GroundGateConfig
from groundgate.schemas.gate import GroundingResult
from groundgate.schemas.grounding import (
    ClaimGrounding,
    GroundingConfidence,
    GroundingStats,
    GroundingVerificationResult,
)

logger = logging.getLogger("groundgate.verify.aggregator")

DEFAULT_CONFIDENCE_WEIGHTS: dict[str, float] = {
    "high": 1.0,
    "medium": 0.66,
    "low": 0.33,
    "none": 0.0,
}


class GroundingAggregator:
    """
    Args:
        high_trust_tier: Best spans above this tier count as low-trust sources.
        weights: Numeric weight per confidence level, each in [0, 1].
    """

    def __init__(
        self,
        high_trust_tier: int = 1,
        weights: Optional[dict[str, float]] = None,
    ):
        self.high_trust_tier = high_trust_tier
        self.weights = dict(weights or DEFAULT_CONFIDENCE_WEIGHTS)

        missing = {c.value for c in GroundingConfidence} - set(self.weights)
        if missing:
            raise ValueError(f"Missing confidence weights for: {sorted(missing)}")
        if any(not 0.0 <= w <= 1.0 for w in self.weights.values()):
            raise ValueError(f"Confidence weights must be in [0,1], got {self.weights}")

    @classmethod
    def from_config(cls, config: GroundGateConfig) -> "GroundingAggregator":
        return cls(
            high_trust_tier=config.confidence.high_trust_tier,
            weights=config.confidence.weights,
        )

    def compute_stats(self, claims: list[ClaimGrounding]) -> GroundingStats:
        total = len(claims)
        grounded = sum(1 for c in claims if c.is_grounded)
        high = sum(1 for c in claims if c.confidence == GroundingConfidence.HIGH)
        low_trust = sum(
            1 for c in claims
            if c.supporting_spans and c.supporting_spans[0].trust_tier > self.high_trust_tier
        )
        average = (
            sum(self.weights[c.confidence.value] for c in claims) / total
            if total else 0.0
        )

        return GroundingStats(
            total_claims=total,
            grounded_claims=grounded,
            ungrounded_claims=total - grounded,
            high_confidence_claims=high,
            low_trust_source_claims=low_trust,
            average_confidence=round_half_up(average),
        )

    def aggregate(self, claims: list[ClaimGrounding]) -> GroundingVerificationResult:
        ungrounded = [c.claim for c in claims if not c.is_grounded]
        stats = self.compute_stats(claims)

        logger.info(
            f"Grounding: {stats.grounded_claims}/{stats.total_claims} grounded, "
            f"{stats.high_confidence_claims} high-confidence, "
            f"avg confidence {stats.average_confidence:.2f}"
        )

        return GroundingVerificationResult(
            claims=claims,
            overall_grounded=not ungrounded,
            ungrounded_claims=ungrounded,
            stats=stats,
        )


def round_half_up(value: float, digits: int = 2) -> float:
    """Round with exact halves going up (0.495 -> 0.5), unlike built-in round."""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def to_grounding_result(verification: GroundingVerificationResult) -> GroundingResult:
    """
    Reduce a full grounding pass to the coarse summary the gate consumes.

    An answer with no claims yields grounded_percentage 1.0.
    """
    return GroundingResult(
        is_grounded=verification.overall_grounded,
        grounded_percentage=verification.stats.grounded_percentage,
        ungrounded_claims=list(verification.ungrounded_claims),
    )
