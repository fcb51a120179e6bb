"""
Grounding Result Schema
========================

Defines the per-claim and whole-response output of a grounding pass.

A claim is *grounded* when at least one supporting span was found for
it. Confidence then grades how much that grounding should be trusted,
based on the claim type and the trust tiers of its spans.

Data Flow:
    Claims + CitedSpans → ClaimGrounding → GroundingVerificationResult
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from groundgate.schemas.evidence import CitedSpan


class ClaimType(str, Enum):
    """
    Claim taxonomy used by the confidence rules.

    Temporal and opinion claims are capped at MEDIUM confidence
    regardless of source quality.
    """
    TEMPORAL = "temporal"        # Time-sensitive information
    PROCEDURAL = "procedural"    # How-to instructions
    OPINION = "opinion"          # Subjective statements
    COMPARATIVE = "comparative"  # Comparisons between options
    FACTUAL = "factual"          # Verifiable facts (numbers, policies)
    UNKNOWN = "unknown"


class GroundingConfidence(str, Enum):
    """Confidence level of a claim's grounding."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


class ClaimGrounding(BaseModel):
    """
    Verification outcome for a single claim.

    Invariants (enforced by model_validator):
        is_grounded == (len(supporting_spans) > 0)
        confidence == NONE  iff  not is_grounded
    """
    claim: str = Field(description="The claim text")
    supporting_spans: list[CitedSpan] = Field(
        default_factory=list,
        description="Supporting spans, best match first",
    )
    is_grounded: bool = Field(description="True iff at least one supporting span exists")
    confidence: GroundingConfidence = Field(description="Confidence of the grounding")
    similarity_score: float = Field(
        default=0.0, ge=0.0, le=1.0,
        description="Best Jaccard similarity between the claim and a supporting span",
    )
    claim_type: ClaimType = Field(default=ClaimType.UNKNOWN)

    @model_validator(mode="after")
    def validate_grounding_invariants(self) -> "ClaimGrounding":
        if self.is_grounded != bool(self.supporting_spans):
            raise ValueError(
                f"is_grounded={self.is_grounded} disagrees with "
                f"{len(self.supporting_spans)} supporting spans"
            )
        if (self.confidence == GroundingConfidence.NONE) == self.is_grounded:
            raise ValueError(
                f"confidence={self.confidence.value} is inconsistent with "
                f"is_grounded={self.is_grounded}"
            )
        return self

    @property
    def best_span(self) -> CitedSpan | None:
        """The top-ranked supporting span, if any."""
        return self.supporting_spans[0] if self.supporting_spans else None


class GroundingStats(BaseModel):
    """Whole-response grounding statistics."""
    total_claims: int = Field(default=0, ge=0)
    grounded_claims: int = Field(default=0, ge=0)
    ungrounded_claims: int = Field(default=0, ge=0)
    high_confidence_claims: int = Field(default=0, ge=0)
    low_trust_source_claims: int = Field(
        default=0, ge=0,
        description="Grounded claims whose best span is above the high-trust tier",
    )
    average_confidence: float = Field(
        default=0.0, ge=0.0, le=1.0,
        description="Weighted mean confidence, rounded to 2 decimals",
    )

    @property
    def grounded_percentage(self) -> float:
        """Fraction of claims that are grounded (1.0 when there are no claims)."""
        if self.total_claims == 0:
            return 1.0
        return self.grounded_claims / self.total_claims


class GroundingVerificationResult(BaseModel):
    """
    Grounding outcome for an entire draft answer.

    Note that an answer with zero extracted claims is vacuously
    ``overall_grounded``. Callers that must distinguish "nothing to
    ground" from "fully grounded" should check ``has_claims``.
    """
    claims: list[ClaimGrounding] = Field(default_factory=list)
    overall_grounded: bool = Field(description="True iff every claim is grounded")
    ungrounded_claims: list[str] = Field(default_factory=list)
    stats: GroundingStats = Field(default_factory=GroundingStats)

    @property
    def has_claims(self) -> bool:
        """Whether the answer contained any checkable claim."""
        return len(self.claims) > 0

    @property
    def grounded(self) -> list[ClaimGrounding]:
        return [c for c in self.claims if c.is_grounded]
