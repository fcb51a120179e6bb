"""
Answerability Gate Schema
==========================

Inputs and output of the answerability gate:

1. ComputeRequest   — structured intent + parameters from the intent parser
2. RetrievalQuality — summary of how good the retrieved passages are
3. GroundingResult  — coarse grounding summary (percentage + ungrounded claims)
4. GateResult       — the refuse / proceed decision

Refusal is a normal business outcome, not an error: ``GateResult.refuse``
is the only "failure" signal this layer produces.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# Upstream collaborators send camelCase keys; snake_case names work too.
WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ComputeIntent(str, Enum):
    """What numeric computation the user is asking for."""
    PORTAL_VS_DIRECT = "portal_vs_direct"
    TRAVEL_ERASER = "travel_eraser"
    TRANSFER_CPP = "transfer_cpp"
    MILES_EARNED = "miles_earned"
    BREAK_EVEN = "break_even"
    EXPLAIN_ONLY = "explain_only"
    NEED_MORE_INFO = "need_more_info"


class ComputeRequest(BaseModel):
    """
    Tagged request produced by the intent parser.

    Schema:
        {"intent": "portal_vs_direct",
         "params": {"portalPrice": 500},
         "missingParams": null}
    """
    model_config = WIRE_CONFIG

    intent: ComputeIntent
    params: dict[str, Any] = Field(default_factory=dict)
    missing_params: Optional[list[str]] = Field(
        default=None,
        description="Parameters the parser knows are missing (NEED_MORE_INFO only)",
    )


class Freshness(str, Enum):
    FRESH = "fresh"
    STALE = "stale"
    UNKNOWN = "unknown"


class RetrievalQuality(BaseModel):
    """Quality summary of a retrieval result set, independent of any claim."""
    model_config = WIRE_CONFIG

    top_score: float = Field(
        ge=0.0,
        description="Best retrieval score, on the same scale as the gate's min_retrieval_score",
    )
    average_score: float = Field(default=0.0, ge=0.0)
    num_results: int = Field(ge=0)
    has_official_source: bool = Field(default=False, description="Tier-0/1 source present")
    freshness: Freshness = Field(default=Freshness.UNKNOWN)


class GroundingResult(BaseModel):
    """Coarse grounding summary consumed by the gate."""
    model_config = WIRE_CONFIG

    is_grounded: bool
    grounded_percentage: float = Field(ge=0.0, le=1.0)
    ungrounded_claims: list[str] = Field(default_factory=list)


class GateResult(BaseModel):
    """
    The gate's decision.

    When ``refuse`` is False every other field is empty; when it is True
    ``reason`` and ``response`` are always populated.
    """
    refuse: bool
    reason: Optional[str] = None
    response: Optional[str] = None
    missing_data: Optional[list[str]] = None
    suggested_actions: Optional[list[str]] = None

    @model_validator(mode="after")
    def validate_proceed_is_bare(self) -> "GateResult":
        if not self.refuse and (self.reason or self.response or self.missing_data):
            raise ValueError("A proceed decision cannot carry a refusal reason or data")
        return self

    @classmethod
    def proceed(cls) -> "GateResult":
        return cls(refuse=False)
