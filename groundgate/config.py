"""
GroundGate Configuration System
================================

Central configuration using Pydantic Settings. Supports:
- Environment variables (GROUNDGATE_ prefix, ``__`` for nested fields)
- .env file loading
- YAML config file overrides

All thresholds that drive the grounding and gate decisions live here,
so tests can override them (e.g. to probe the exact overlap boundary)
and every decision can be traced back to a config hash.

Usage:
    from groundgate.config import get_config
    cfg = get_config()                        # loads from env / .env
    cfg = get_config("configs/strict.yaml")   # loads with YAML overrides
"""

from __future__ import annotations

import hashlib
import json
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ── Sub-configs ────────────────────────────────────────────────────
class ExtractionConfig(BaseModel):
    """Configuration for claim extraction."""
    min_claim_length: int = Field(
        default=15, ge=1,
        description="Sentences shorter than this (in characters) are never claims",
    )


class MatchingConfig(BaseModel):
    """Configuration for the span matcher."""
    min_overlap_ratio: float = Field(
        default=0.25, ge=0.0, le=1.0,
        description="Chunk accepted iff |claim ∩ chunk terms| / |claim terms| >= this",
    )
    min_span_similarity: float = Field(
        default=0.25, ge=0.0, le=1.0,
        description="Best chunk sentence kept iff its Jaccard similarity >= this",
    )
    min_term_length: int = Field(
        default=3, ge=1,
        description="Key terms shorter than this are dropped",
    )
    extra_stop_words: list[str] = Field(
        default_factory=list,
        description="Additional stop words appended to the built-in list",
    )


class ConfidenceConfig(BaseModel):
    """Configuration for the confidence assessor and aggregator."""
    high_trust_tier: int = Field(
        default=1, ge=0,
        description="Spans with trust_tier <= this count as high-trust",
    )
    weights: dict[str, float] = Field(
        default_factory=lambda: {"high": 1.0, "medium": 0.66, "low": 0.33, "none": 0.0},
        description="Numeric weight per confidence level for average_confidence",
    )


class GateConfig(BaseModel):
    """Configuration for the answerability gate."""
    min_retrieval_score: float = Field(
        default=0.5, ge=0.0,
        description="Same scale as RetrievalQuality.top_score (not bounded above)",
    )
    min_results: int = Field(default=2, ge=0)
    min_grounded_percentage: float = Field(default=0.6, ge=0.0, le=1.0)
    max_ungrounded_shown: int = Field(
        default=3, ge=0,
        description="How many ungrounded claims a refusal lists",
    )
    refuse_without_claims: bool = Field(
        default=False,
        description="Refuse answers in which no checkable claim was found",
    )


# ── Main Config ────────────────────────────────────────────────────
class GroundGateConfig(BaseSettings):
    """
    Root configuration for GroundGate.

    Example:
        export GROUNDGATE_LOG_LEVEL=DEBUG
        export GROUNDGATE_MATCHING__MIN_OVERLAP_RATIO=0.3
    """
    model_config = SettingsConfigDict(
        env_prefix="GROUNDGATE_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log format: 'json' or 'text'")

    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    confidence: ConfidenceConfig = Field(default_factory=ConfidenceConfig)
    gate: GateConfig = Field(default_factory=GateConfig)

    def config_hash(self) -> str:
        """
        Produce a deterministic SHA-256 hash of the configuration.

        Two runs with the same hash and the same inputs produce
        identical grounding results and gate decisions.
        """
        config_dict = self.model_dump(mode="json", exclude={"log_level", "log_format"})
        canonical = json.dumps(config_dict, sort_keys=True, default=str)
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


# ── Config Loading ─────────────────────────────────────────────────
def get_config(yaml_path: Optional[str] = None) -> GroundGateConfig:
    """
    Load GroundGate configuration.

    Priority (highest to lowest):
        1. YAML config file (if provided)
        2. Environment variables (GROUNDGATE_ prefix)
        3. .env file
        4. Default values

    Args:
        yaml_path: Optional path to a YAML config file for overrides.

    Returns:
        Fully resolved GroundGateConfig instance.
    """
    if yaml_path:
        import yaml
        with open(yaml_path) as f:
            overrides = yaml.safe_load(f) or {}
        return GroundGateConfig(**overrides)
    return GroundGateConfig()
