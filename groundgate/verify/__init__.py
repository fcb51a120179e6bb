"""
GroundGate Verification Module
===============================

Confidence assessment, aggregation, and the span-level grounder that
composes the whole grounding pass.
"""

from groundgate.verify.aggregator import GroundingAggregator, to_grounding_result
from groundgate.verify.confidence import ConfidenceAssessor
from groundgate.verify.grounder import SpanLevelGrounder, trust_factor

__all__ = [
    "ConfidenceAssessor",
    "GroundingAggregator",
    "SpanLevelGrounder",
    "to_grounding_result",
    "trust_factor",
]
