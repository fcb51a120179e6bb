"""
Confidence & Aggregation Tests
================================

Tests the confidence rule table and the whole-response reduction.

Key properties:
    - confidence == NONE iff there are no supporting spans
    - OPINION / TEMPORAL claims never reach HIGH
    - grounded + ungrounded == total; average_confidence in [0, 1]
"""

from __future__ import annotations

import pytest

from groundgate.schemas.grounding import ClaimType, GroundingConfidence
from groundgate.verify.aggregator import GroundingAggregator, round_half_up, to_grounding_result
from groundgate.verify.confidence import ConfidenceAssessor
from tests.conftest import make_grounding, make_span

HIGH = GroundingConfidence.HIGH
MEDIUM = GroundingConfidence.MEDIUM
LOW = GroundingConfidence.LOW
NONE = GroundingConfidence.NONE


@pytest.fixture
def assessor():
    return ConfidenceAssessor(high_trust_tier=1)


@pytest.fixture
def aggregator():
    return GroundingAggregator(high_trust_tier=1)


class TestConfidenceRules:

    @pytest.mark.parametrize("claim_type", list(ClaimType))
    def test_no_spans_is_none(self, assessor, claim_type):
        assert assessor.assess([], claim_type) == NONE

    @pytest.mark.parametrize("claim_type,tiers,expected", [
        # Capped types: never HIGH
        (ClaimType.OPINION, (0,), MEDIUM),
        (ClaimType.OPINION, (0, 0, 0), MEDIUM),
        (ClaimType.OPINION, (2,), LOW),
        (ClaimType.TEMPORAL, (1,), MEDIUM),
        (ClaimType.TEMPORAL, (3, 3), LOW),
        # Ordinary claims
        (ClaimType.FACTUAL, (0,), HIGH),
        (ClaimType.FACTUAL, (1,), HIGH),
        (ClaimType.FACTUAL, (2,), LOW),
        (ClaimType.FACTUAL, (2, 3), MEDIUM),
        (ClaimType.PROCEDURAL, (0,), HIGH),
        (ClaimType.COMPARATIVE, (2, 2), MEDIUM),
        (ClaimType.UNKNOWN, (3,), LOW),
    ])
    def test_rule_table(self, assessor, claim_type, tiers, expected):
        spans = [make_span(trust_tier=t) for t in tiers]
        assert assessor.assess(spans, claim_type) == expected

    def test_custom_high_trust_tier(self):
        assessor = ConfidenceAssessor(high_trust_tier=2)
        assert assessor.assess([make_span(trust_tier=2)], ClaimType.FACTUAL) == HIGH

    def test_negative_tier_rejected(self):
        with pytest.raises(ValueError):
            ConfidenceAssessor(high_trust_tier=-1)


class TestAggregator:

    def test_mixed_stats(self, aggregator):
        claims = [
            make_grounding("Claim one is grounded.", HIGH, (0,)),
            make_grounding("Claim two is grounded.", MEDIUM, (2, 2)),
            make_grounding("Claim three is not.", NONE, ()),
        ]
        result = aggregator.aggregate(claims)
        stats = result.stats

        assert stats.total_claims == 3
        assert stats.grounded_claims == 2
        assert stats.ungrounded_claims == 1
        assert stats.high_confidence_claims == 1
        assert stats.low_trust_source_claims == 1
        assert stats.average_confidence == 0.55
        assert result.overall_grounded is False
        assert result.ungrounded_claims == ["Claim three is not."]

    def test_empty_is_vacuously_grounded(self, aggregator):
        result = aggregator.aggregate([])
        assert result.overall_grounded is True
        assert result.has_claims is False
        assert result.stats.total_claims == 0
        assert result.stats.average_confidence == 0.0

    def test_all_grounded(self, aggregator):
        result = aggregator.aggregate([make_grounding(), make_grounding()])
        assert result.overall_grounded is True
        assert result.ungrounded_claims == []
        assert result.stats.average_confidence == 1.0

    @pytest.mark.parametrize("confidences", [
        [NONE],
        [LOW, NONE],
        [HIGH, MEDIUM, LOW, NONE],
        [MEDIUM, MEDIUM, MEDIUM],
    ])
    def test_count_and_range_invariants(self, aggregator, confidences):
        claims = [
            make_grounding(f"Claim {i} is here.", c, () if c == NONE else (2,))
            for i, c in enumerate(confidences)
        ]
        stats = aggregator.aggregate(claims).stats
        assert stats.grounded_claims + stats.ungrounded_claims == stats.total_claims
        assert 0.0 <= stats.average_confidence <= 1.0

    @pytest.mark.parametrize("confidences", [
        [MEDIUM, LOW],
        [MEDIUM, MEDIUM, MEDIUM, NONE],
    ])
    def test_average_rounds_halves_up(self, aggregator, confidences):
        """A mean of 0.495 reports 0.5, not the banker's-rounded 0.49."""
        claims = [
            make_grounding(f"Claim {i} is here.", c, () if c == NONE else (2, 2))
            for i, c in enumerate(confidences)
        ]
        assert aggregator.compute_stats(claims).average_confidence == 0.5

    @pytest.mark.parametrize("value,expected", [
        (0.125, 0.13),
        (0.5533, 0.55),
        (0.0, 0.0),
        (1.0, 1.0),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_missing_weight_rejected(self):
        with pytest.raises(ValueError):
            GroundingAggregator(weights={"high": 1.0, "medium": 0.5, "low": 0.2})


class TestGroundingResultReduction:

    def test_partial(self, aggregator):
        result = aggregator.aggregate([
            make_grounding("Grounded claim is here.", HIGH, (0,)),
            make_grounding("Another grounded claim.", HIGH, (0,)),
            make_grounding("Ungrounded claim is here.", NONE, ()),
        ])
        summary = to_grounding_result(result)
        assert summary.is_grounded is False
        assert summary.grounded_percentage == pytest.approx(2 / 3)
        assert summary.ungrounded_claims == ["Ungrounded claim is here."]

    def test_no_claims(self, aggregator):
        summary = to_grounding_result(aggregator.aggregate([]))
        assert summary.is_grounded is True
        assert summary.grounded_percentage == 1.0
