"""
GroundGate Test Configuration
==============================

Shared fixtures, factories, and helpers for the entire test suite.
"""

from __future__ import annotations

import uuid
from typing import Any, Optional

import pytest

from groundgate.config import GroundGateConfig
from groundgate.render.gate import AnswerabilityGate
from groundgate.schemas.evidence import ChunkMetadata, CitedSpan, ProvenanceChunk
from groundgate.schemas.gate import ComputeIntent, ComputeRequest
from groundgate.schemas.grounding import ClaimGrounding, ClaimType, GroundingConfidence
from groundgate.verify.grounder import SpanLevelGrounder


# ── Markers ─────────────────────────────────────────────────────

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: fast unit tests")
    config.addinivalue_line("markers", "integration: multi-component tests")


# ── Fixtures ────────────────────────────────────────────────────

@pytest.fixture
def config() -> GroundGateConfig:
    """Default config (no env / YAML overrides)."""
    return GroundGateConfig()


@pytest.fixture
def grounder() -> SpanLevelGrounder:
    return SpanLevelGrounder()


@pytest.fixture
def gate() -> AnswerabilityGate:
    return AnswerabilityGate()


@pytest.fixture
def fee_chunk() -> ProvenanceChunk:
    """Official (tier 0) chunk stating the annual fee."""
    return make_chunk(
        "The Capital One Venture X card has an annual fee of $395. "
        "It includes lounge access.",
        chunk_id="vx-fees#c0",
        doc_id="vx-fees",
    )


@pytest.fixture
def earn_chunk() -> ProvenanceChunk:
    """Official (tier 0) chunk stating the portal earning rate."""
    return make_chunk(
        "Earn 5x miles on hotels and rental cars booked through the travel portal.",
        chunk_id="vx-earn#c0",
        doc_id="vx-earn",
    )


# ── Factories ───────────────────────────────────────────────────

def make_chunk(
    content: str = "Default chunk text.",
    chunk_id: Optional[str] = None,
    doc_id: str = "doc_0",
    source: str = "capitalone",
    trust_tier: int = 0,
    retrieved_at: str = "2026-09-01T00:00:00Z",
) -> ProvenanceChunk:
    """Factory for creating provenance chunks."""
    if chunk_id is None:
        chunk_id = f"chunk_{uuid.uuid4().hex[:8]}"
    return ProvenanceChunk(
        id=chunk_id,
        content=content,
        metadata=ChunkMetadata(
            id=doc_id,
            source=source,
            trust_tier=trust_tier,
            retrieved_at=retrieved_at,
            url=f"https://example.com/{doc_id}",
            title=f"Test Document {doc_id}",
        ),
    )


def make_span(
    text: str = "The annual fee is $395.",
    trust_tier: int = 0,
    span_id: Optional[str] = None,
    source: str = "capitalone",
) -> CitedSpan:
    """Factory for creating cited spans covering a whole chunk."""
    span_id = span_id or f"span_{uuid.uuid4().hex[:8]}"
    return CitedSpan(
        id=span_id,
        chunk_id=f"chunk_{span_id}",
        doc_id=f"doc_{span_id}",
        start_offset=0,
        end_offset=len(text),
        text=text,
        source=source,
        trust_tier=trust_tier,
        retrieved_at="2026-09-01T00:00:00Z",
    )


def make_grounding(
    claim: str = "The annual fee is $395.",
    confidence: GroundingConfidence = GroundingConfidence.HIGH,
    tiers: tuple[int, ...] = (0,),
    claim_type: ClaimType = ClaimType.FACTUAL,
) -> ClaimGrounding:
    """Factory for a ClaimGrounding with one span per trust tier given."""
    spans = [make_span(trust_tier=t) for t in tiers]
    return ClaimGrounding(
        claim=claim,
        supporting_spans=spans,
        is_grounded=bool(spans),
        confidence=confidence,
        similarity_score=0.5 if spans else 0.0,
        claim_type=claim_type,
    )


def make_request(intent: ComputeIntent, **params: Any) -> ComputeRequest:
    """Factory for compute requests."""
    return ComputeRequest(intent=intent, params=params)
