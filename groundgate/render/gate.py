"""
Answerability Gate
===================

The single authoritative refuse / proceed decision made before an
answer is shown. It is a pure function of its inputs and can run before
(or independently of) a full grounding pass, so requests that are
missing required parameters are rejected early.

Decision Logic (first matching case wins):
    1. Intent is NEED_MORE_INFO                      → refuse (declared missing params)
    2. Computation intent with a required param
       absent or empty                               → refuse (missing params)
    3. EXPLAIN_ONLY with retrieval quality and
         top_score < min_retrieval_score             → refuse (low confidence)
         num_results < min_results                   → refuse (insufficient sources)
    4. Grounding result with
         grounded_percentage < min_grounded_pct      → refuse (first N ungrounded claims)
    5. Stale sources for a time-sensitive request    → refuse (staleness)
    6. Otherwise                                     → proceed

Every refusal carries a reason, canned next actions and a rendered
response string. Refusing is a normal outcome, never an exception.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from groundgate.config import GroundGateConfig
from groundgate.render.refusal import (
    format_missing_data_item,
    render_refusal,
    suggestions_for_missing_data,
)
from groundgate.schemas.gate import (
    ComputeIntent,
    ComputeRequest,
    Freshness,
    GateResult,
    GroundingResult,
    RetrievalQuality,
)

logger = logging.getLogger("groundgate.render.gate")


REQUIRED_PARAMS: dict[ComputeIntent, tuple[str, ...]] = {
    ComputeIntent.PORTAL_VS_DIRECT: ("portalPrice", "directPrice"),
    ComputeIntent.TRAVEL_ERASER: ("purchaseAmount",),
    ComputeIntent.TRANSFER_CPP: ("cashFare", "milesRequired"),
    ComputeIntent.MILES_EARNED: ("amount",),
    ComputeIntent.BREAK_EVEN: ("directPrice",),
}

COMPUTATION_INTENTS = frozenset(REQUIRED_PARAMS)

TIME_SENSITIVE_INTENTS = frozenset({ComputeIntent.TRANSFER_CPP})
TIME_SENSITIVE_TERMS = re.compile(r"promo|deal|limited|expir|today|current", re.IGNORECASE)

# ── Canned refusals ────────────────────────────────────────────────
REASON_MISSING_DATA = "I need some specific information to calculate this."
REASON_LOW_CONFIDENCE = "I couldn't find reliable information about this in my knowledge base."
REASON_INSUFFICIENT_SOURCES = "I don't have enough sources to give a confident answer."
REASON_UNGROUNDED = "I can't verify the information needed to answer this question accurately."
REASON_STALE = (
    "My information on this topic may be outdated. For current rates or "
    "promotions, please check the official source."
)
REASON_NO_CLAIMS = "I couldn't find anything in this answer that I can check against my sources."

ACTIONS_LOW_CONFIDENCE = [
    "Try rephrasing your question",
    "Check the Capital One website directly",
    "Ask about a specific Venture X feature",
]
ACTIONS_INSUFFICIENT_SOURCES = [
    "Try a more specific question",
    "Check official Capital One documentation",
]
ACTIONS_UNGROUNDED = [
    "Ask about verified Venture X card features",
    "Check official sources for the latest information",
]
ACTIONS_STALE = [
    "Visit capitalone.com for current information",
    "Check the transfer partner website directly",
]
ACTIONS_NO_CLAIMS = [
    "Ask a more specific question about fees, earning rates or redemptions",
]


def is_missing(value: Any) -> bool:
    """A parameter is missing if absent, None, or an empty/blank string."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


class AnswerabilityGate:
    """
    Deterministic refuse / proceed gate.

    Usage:
        gate = AnswerabilityGate()
        result = gate.should_refuse(request, retrieval_quality, grounding_result)
        if result.refuse:
            deliver(result.response)

    Args:
        min_retrieval_score: EXPLAIN_ONLY refuses if top_score is below this.
        min_results: EXPLAIN_ONLY refuses if fewer results than this.
        min_grounded_percentage: Refuse if less of the answer is grounded.
        max_ungrounded_shown: How many ungrounded claims a refusal lists.
    """

    def __init__(
        self,
        min_retrieval_score: float = 0.5,
        min_results: int = 2,
        min_grounded_percentage: float = 0.6,
        max_ungrounded_shown: int = 3,
    ):
        if min_retrieval_score < 0.0:
            raise ValueError(f"min_retrieval_score must be >= 0, got {min_retrieval_score}")
        if not 0.0 <= min_grounded_percentage <= 1.0:
            raise ValueError(
                f"min_grounded_percentage must be in [0,1], got {min_grounded_percentage}"
            )
        self.min_retrieval_score = min_retrieval_score
        self.min_results = min_results
        self.min_grounded_percentage = min_grounded_percentage
        self.max_ungrounded_shown = max_ungrounded_shown

    @classmethod
    def from_config(cls, config: GroundGateConfig) -> "AnswerabilityGate":
        g = config.gate
        return cls(
            min_retrieval_score=g.min_retrieval_score,
            min_results=g.min_results,
            min_grounded_percentage=g.min_grounded_percentage,
            max_ungrounded_shown=g.max_ungrounded_shown,
        )

    # ── Decision ───────────────────────────────────────────────────

    def should_refuse(
        self,
        request: ComputeRequest,
        retrieval_quality: Optional[RetrievalQuality] = None,
        grounding_result: Optional[GroundingResult] = None,
    ) -> GateResult:
        result = self._decide(request, retrieval_quality, grounding_result)
        if result.refuse:
            logger.info(f"Gate refused ({request.intent.value}): {result.reason}")
        else:
            logger.debug(f"Gate passed ({request.intent.value})")
        return result

    def _decide(
        self,
        request: ComputeRequest,
        quality: Optional[RetrievalQuality],
        grounding: Optional[GroundingResult],
    ) -> GateResult:
        # Case 1: parser already knows information is missing
        if request.intent == ComputeIntent.NEED_MORE_INFO:
            return self.refuse_for_missing_data(request.missing_params or [])

        # Case 2: computation intent with incomplete parameters
        if request.intent in COMPUTATION_INTENTS:
            missing = self.missing_params(request)
            if missing:
                return self.refuse_for_missing_data(missing)

        # Case 3: knowledge question with weak retrieval
        if request.intent == ComputeIntent.EXPLAIN_ONLY and quality is not None:
            if quality.top_score < self.min_retrieval_score:
                return self.refuse(REASON_LOW_CONFIDENCE, actions=ACTIONS_LOW_CONFIDENCE)
            if quality.num_results < self.min_results:
                return self.refuse(
                    REASON_INSUFFICIENT_SOURCES, actions=ACTIONS_INSUFFICIENT_SOURCES
                )

        # Case 4: answer not sufficiently grounded
        if grounding is not None and grounding.grounded_percentage < self.min_grounded_percentage:
            return self.refuse(
                REASON_UNGROUNDED,
                missing=grounding.ungrounded_claims[: self.max_ungrounded_shown],
                actions=ACTIONS_UNGROUNDED,
            )

        # Case 5: stale sources for a time-sensitive question
        if (
            quality is not None
            and quality.freshness == Freshness.STALE
            and self.is_time_sensitive(request)
        ):
            return self.refuse(REASON_STALE, actions=ACTIONS_STALE)

        return GateResult.proceed()

    # ── Helpers ────────────────────────────────────────────────────

    def missing_params(self, request: ComputeRequest) -> list[str]:
        """Required parameters of the request's intent that are absent or empty."""
        return [
            name for name in REQUIRED_PARAMS.get(request.intent, ())
            if is_missing(request.params.get(name))
        ]

    def is_time_sensitive(self, request: ComputeRequest) -> bool:
        if request.intent in TIME_SENSITIVE_INTENTS:
            return True
        serialized = json.dumps(request.params, default=str, sort_keys=True)
        return bool(TIME_SENSITIVE_TERMS.search(serialized))

    def refuse(
        self,
        reason: str,
        missing: Optional[list[str]] = None,
        actions: Optional[list[str]] = None,
    ) -> GateResult:
        """Build a refusing GateResult with its rendered response."""
        missing = list(missing or [])
        actions = list(actions or [])
        return GateResult(
            refuse=True,
            reason=reason,
            missing_data=missing,
            suggested_actions=actions,
            response=render_refusal(reason, missing, actions),
        )

    def refuse_for_missing_data(self, missing_params: list[str]) -> GateResult:
        return self.refuse(
            REASON_MISSING_DATA,
            missing=missing_params,
            actions=suggestions_for_missing_data(missing_params),
        )

    def refuse_for_no_claims(self) -> GateResult:
        """Refusal for answers in which nothing checkable was found."""
        return self.refuse(REASON_NO_CLAIMS, actions=ACTIONS_NO_CLAIMS)

    # ── Rendering ──────────────────────────────────────────────────

    def generate_refusal_response(self, gate_result: GateResult) -> str:
        """Render a GateResult as user-facing text ('' when not refusing)."""
        if not gate_result.refuse:
            return ""
        return render_refusal(
            gate_result.reason,
            gate_result.missing_data,
            gate_result.suggested_actions,
        )

    format_missing_data_item = staticmethod(format_missing_data_item)
