"""
GroundGate End-to-End Pipeline
===============================

Orchestrates one answer-delivery decision:

    Request (+ retrieval quality) → early Gate
        → Ground answer against chunks → Gate (with grounding summary)
        → answer text or refusal text

The early gate pass rejects requests that can never be answered
(missing parameters, weak retrieval, stale sources) without spending
a grounding pass on them.

Usage:
    from groundgate.pipeline import GroundingPipeline

    pipeline = GroundingPipeline.from_config(config)
    result = pipeline.run(answer, chunks, request, retrieval_quality)
    print(result.display_text)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from groundgate.config import GroundGateConfig, get_config
from groundgate.render.gate import AnswerabilityGate
from groundgate.schemas.evidence import ProvenanceChunk
from groundgate.schemas.gate import ComputeRequest, GateResult, RetrievalQuality
from groundgate.schemas.grounding import GroundingVerificationResult
from groundgate.utils import compute_hash
from groundgate.verify.aggregator import to_grounding_result
from groundgate.verify.grounder import SpanLevelGrounder

logger = logging.getLogger("groundgate.pipeline")


@dataclass
class PipelineResult:
    """
    Complete output of a pipeline run.

    ``grounding`` is None when the early gate refused before grounding.
    """
    answer: str
    gate: GateResult
    grounding: Optional[GroundingVerificationResult] = None
    config_hash: str = ""
    timings: dict[str, float] = field(default_factory=dict)

    @property
    def refused(self) -> bool:
        return self.gate.refuse

    @property
    def display_text(self) -> str:
        """What the delivery layer should show: the answer or the refusal."""
        if self.gate.refuse:
            return self.gate.response or ""
        return self.answer

    def to_dict(self) -> dict:
        return {
            "refused": self.refused,
            "display_text": self.display_text,
            "gate": self.gate.model_dump(mode="json"),
            "grounding": self.grounding.model_dump(mode="json") if self.grounding else None,
            "config_hash": self.config_hash,
            "timings": self.timings,
        }


class GroundingPipeline:
    """
    Stateless orchestrator over a grounder and a gate.

    Args:
        grounder: Span-level grounder.
        gate: Answerability gate.
        refuse_without_claims: Refuse answers with no checkable claims
            instead of treating them as vacuously grounded.
        config_hash: Stamped on every result for reproducibility.
    """

    def __init__(
        self,
        grounder: Optional[SpanLevelGrounder] = None,
        gate: Optional[AnswerabilityGate] = None,
        refuse_without_claims: bool = False,
        config_hash: str = "",
    ):
        self.grounder = grounder or SpanLevelGrounder()
        self.gate = gate or AnswerabilityGate()
        self.refuse_without_claims = refuse_without_claims
        self.config_hash = config_hash

    @classmethod
    def from_config(cls, config: Optional[GroundGateConfig] = None) -> "GroundingPipeline":
        config = config or get_config()
        return cls(
            grounder=SpanLevelGrounder.from_config(config),
            gate=AnswerabilityGate.from_config(config),
            refuse_without_claims=config.gate.refuse_without_claims,
            config_hash=config.config_hash(),
        )

    def run(
        self,
        answer: str,
        chunks: list[ProvenanceChunk],
        request: ComputeRequest,
        retrieval_quality: Optional[RetrievalQuality] = None,
    ) -> PipelineResult:
        timings: dict[str, float] = {}
        t_start = time.time()
        logger.info(
            f"Pipeline run: intent={request.intent.value}, "
            f"answer={compute_hash(answer, 8)}, chunks={len(chunks)}"
        )

        # ── Early gate: request + retrieval quality only ───────────
        early = self.gate.should_refuse(request, retrieval_quality)
        timings["early_gate_ms"] = (time.time() - t_start) * 1000
        if early.refuse:
            timings["total_ms"] = timings["early_gate_ms"]
            return PipelineResult(
                answer=answer, gate=early,
                config_hash=self.config_hash, timings=timings,
            )

        # ── Grounding pass ─────────────────────────────────────────
        t0 = time.time()
        grounding = self.grounder.verify_grounding(answer, chunks)
        timings["grounding_ms"] = (time.time() - t0) * 1000

        # ── Final gate ─────────────────────────────────────────────
        t0 = time.time()
        if not grounding.has_claims and self.refuse_without_claims:
            decision = self.gate.refuse_for_no_claims()
        else:
            decision = self.gate.should_refuse(
                request, retrieval_quality, to_grounding_result(grounding)
            )
        timings["gate_ms"] = (time.time() - t0) * 1000
        timings["total_ms"] = (time.time() - t_start) * 1000

        logger.info(
            f"Pipeline complete: refused={decision.refuse}, "
            f"claims={grounding.stats.total_claims}, "
            f"total={timings['total_ms']:.1f}ms"
        )

        return PipelineResult(
            answer=answer,
            gate=decision,
            grounding=grounding,
            config_hash=self.config_hash,
            timings=timings,
        )
