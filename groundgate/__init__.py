"""
GroundGate — Claim Grounding & Answerability Gate
===================================================

GroundGate decides whether a generated answer may be shown to a user,
and if shown, which sentences are backed by retrieved source material.
Matching is lexical (key-term overlap + literal number agreement) so
every decision is deterministic and auditable.

Architecture Overview:
    Answer + Chunks → Extract Claims → Classify / Match Spans
        → Assess Confidence → Aggregate → Gate (refuse / proceed)

Modules:
    - claims:    Claim extraction and claim-type classification
    - retrieve:  Span matching against provenance chunks
    - verify:    Confidence assessment, aggregation, grounder orchestrator
    - render:    Answerability gate + refusal message synthesis
    - pipeline:  End-to-end orchestrator
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
