"""
GroundGate Data Schemas
========================

Pydantic v2 models implementing the data contracts of the grounding
pipeline:

1. ProvenanceChunk / CitedSpan    — retrieved evidence + located spans
2. ClaimGrounding / *Result       — per-claim and per-answer grounding
3. ComputeRequest / GateResult    — answerability gate inputs and decision

All schemas support runtime validation and JSON Schema export.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from groundgate.schemas.evidence import (
    ChunkMetadata,
    CitedSpan,
    ProvenanceChunk,
)
from groundgate.schemas.grounding import (
    ClaimGrounding,
    ClaimType,
    GroundingConfidence,
    GroundingStats,
    GroundingVerificationResult,
)
from groundgate.schemas.gate import (
    ComputeIntent,
    ComputeRequest,
    Freshness,
    GateResult,
    GroundingResult,
    RetrievalQuality,
)

SCHEMA_MODELS = {
    "chunk": ProvenanceChunk,
    "cited_span": CitedSpan,
    "grounding": GroundingVerificationResult,
    "compute_request": ComputeRequest,
    "retrieval_quality": RetrievalQuality,
    "grounding_result": GroundingResult,
    "gate_result": GateResult,
}


def get_json_schema(schema_name: str) -> dict[str, Any]:
    """
    Export the JSON Schema for a GroundGate data contract.

    Raises:
        ValueError: if ``schema_name`` is not a known contract.
    """
    if schema_name not in SCHEMA_MODELS:
        raise ValueError(
            f"Unknown schema: {schema_name}. Use: {list(SCHEMA_MODELS.keys())}"
        )
    return SCHEMA_MODELS[schema_name].model_json_schema()


def export_all_schemas(output_dir: str | Path) -> list[Path]:
    """Write one ``{name}.json`` file per contract; return the written paths."""
    from groundgate.utils import save_json

    output_dir = Path(output_dir)
    return [
        save_json(get_json_schema(name), output_dir / f"{name}.json")
        for name in SCHEMA_MODELS
    ]


__all__ = [
    # Evidence
    "ChunkMetadata",
    "CitedSpan",
    "ProvenanceChunk",
    # Grounding
    "ClaimGrounding",
    "ClaimType",
    "GroundingConfidence",
    "GroundingStats",
    "GroundingVerificationResult",
    # Gate
    "ComputeIntent",
    "ComputeRequest",
    "Freshness",
    "GateResult",
    "GroundingResult",
    "RetrievalQuality",
    # Export
    "SCHEMA_MODELS",
    "get_json_schema",
    "export_all_schemas",
]
