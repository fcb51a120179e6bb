"""
Confidence Assessor
====================

Deterministic rule table mapping (claim type, supporting spans) to a
GroundingConfidence. Rules are evaluated in order:

    1. No supporting spans                       → NONE
    2. OPINION or TEMPORAL claim                 → MEDIUM if any high-trust span, else LOW
    3. Any other claim type:
         any high-trust span                     → HIGH
         two or more spans (all lower trust)     → MEDIUM
         otherwise                               → LOW

Subjective and time-sensitive claims never reach HIGH: authority alone
is not enough for them. For ordinary facts, quantity of low-trust
corroboration is a weaker substitute for a single authoritative source.
"""

from __future__ import annotations

from groundgate.config import GroundGateConfig
from groundgate.schemas.evidence import CitedSpan
from groundgate.schemas.grounding import ClaimType, GroundingConfidence

CAPPED_CLAIM_TYPES = frozenset({ClaimType.OPINION, ClaimType.TEMPORAL})


class ConfidenceAssessor:
    """
    Args:
        high_trust_tier: Spans with trust_tier <= this are high-trust.
    """

    def __init__(self, high_trust_tier: int = 1):
        if high_trust_tier < 0:
            raise ValueError(f"high_trust_tier must be >= 0, got {high_trust_tier}")
        self.high_trust_tier = high_trust_tier

    @classmethod
    def from_config(cls, config: GroundGateConfig) -> "ConfidenceAssessor":
        return cls(high_trust_tier=config.confidence.high_trust_tier)

    def is_high_trust(self, span: CitedSpan) -> bool:
        return span.trust_tier <= self.high_trust_tier

    def assess(self, spans: list[CitedSpan], claim_type: ClaimType) -> GroundingConfidence:
        if not spans:
            return GroundingConfidence.NONE

        has_high_trust = any(self.is_high_trust(s) for s in spans)

        if claim_type in CAPPED_CLAIM_TYPES:
            return GroundingConfidence.MEDIUM if has_high_trust else GroundingConfidence.LOW

        if has_high_trust:
            return GroundingConfidence.HIGH
        if len(spans) >= 2:
            return GroundingConfidence.MEDIUM
        return GroundingConfidence.LOW
