"""
GroundGate CLI
===============

Command-line interface for grounding answers and evaluating the gate
on JSON inputs.

Usage:
    python -m groundgate.cli ground --answer "The annual fee is $395." --chunks chunks.json
    python -m groundgate.cli gate --request request.json --quality quality.json
    python -m groundgate.cli run --input bundle.json
    python -m groundgate.cli export-schemas --output-dir schemas
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from groundgate.config import get_config
from groundgate.utils import load_json, save_json, setup_logging

CONFIDENCE_ICONS = {"high": "✅", "medium": "🟡", "low": "⚠️", "none": "❌"}


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        prog="groundgate",
        description="GroundGate: claim grounding and answerability gate",
    )
    parser.add_argument("--config", type=str, default=None, help="Path to config YAML")
    parser.add_argument("--verbose", "-v", action="store_true")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # ── ground ──────────────────────────────────────────────────
    ground_parser = subparsers.add_parser("ground", help="Ground an answer against chunks")
    answer_src = ground_parser.add_mutually_exclusive_group(required=True)
    answer_src.add_argument("--answer", type=str, help="Draft answer text")
    answer_src.add_argument("--answer-file", type=str, help="File containing the draft answer")
    ground_parser.add_argument("--chunks", required=True, help="JSON list of provenance chunks")
    ground_parser.add_argument("--output", type=str, default=None, help="Output JSON path")

    # ── gate ────────────────────────────────────────────────────
    gate_parser = subparsers.add_parser("gate", help="Evaluate the answerability gate")
    gate_parser.add_argument("--request", required=True, help="ComputeRequest JSON")
    gate_parser.add_argument("--quality", default=None, help="RetrievalQuality JSON")
    gate_parser.add_argument("--grounding", default=None, help="GroundingResult JSON")
    gate_parser.add_argument("--output", type=str, default=None, help="Output JSON path")

    # ── run ─────────────────────────────────────────────────────
    run_parser = subparsers.add_parser("run", help="Run the full pipeline on a bundle")
    run_parser.add_argument(
        "--input", required=True,
        help="JSON with 'answer', 'chunks', 'request' and optional 'retrieval_quality' (or 'retrievalQuality')",
    )
    run_parser.add_argument("--output", type=str, default=None, help="Output JSON path")

    # ── export-schemas ──────────────────────────────────────────
    schema_parser = subparsers.add_parser("export-schemas", help="Export JSON schemas")
    schema_parser.add_argument("--output-dir", default="schemas")

    args = parser.parse_args(argv)

    config = get_config(args.config)
    setup_logging(
        level="DEBUG" if args.verbose else config.log_level,
        format_style=config.log_format,
    )

    commands = {
        "ground": cmd_ground,
        "gate": cmd_gate,
        "run": cmd_run,
        "export-schemas": cmd_export_schemas,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        sys.exit(1)

    try:
        command(args, config)
    except ValidationError as e:
        print(f"Invalid input: {e}")
        sys.exit(1)
    except (OSError, KeyError, json.JSONDecodeError) as e:
        print(f"Error: {e}")
        sys.exit(1)


def cmd_ground(args, config):
    """Ground a draft answer and print per-claim verdicts."""
    from groundgate.schemas.evidence import ProvenanceChunk
    from groundgate.verify.grounder import SpanLevelGrounder

    answer = args.answer if args.answer is not None else Path(args.answer_file).read_text()
    chunks = [ProvenanceChunk.model_validate(c) for c in load_json(args.chunks)]

    grounder = SpanLevelGrounder.from_config(config)
    result = grounder.verify_grounding(answer, chunks)

    for claim in result.claims:
        icon = CONFIDENCE_ICONS.get(claim.confidence.value, "?")
        print(f"  {icon} [{claim.claim_type.value}] {claim.claim}")
        if claim.best_span:
            span = claim.best_span
            print(f"      ↳ {span.source} (tier {span.trust_tier}): \"{span.text}\"")

    if not result.has_claims:
        print("  (no checkable claims found)")
    else:
        print(f"\n  Grounded: {len(result.grounded)}/{len(result.claims)} claims")

    print(f"\n  Stats: {result.stats.model_dump()}")

    if args.output:
        save_json(result.model_dump(mode="json"), args.output)
        print(f"\n  Results saved to {args.output}")


def cmd_gate(args, config):
    """Evaluate the gate on a request and optional quality/grounding summaries."""
    from groundgate.render.gate import AnswerabilityGate
    from groundgate.schemas.gate import ComputeRequest, GroundingResult, RetrievalQuality

    request = ComputeRequest.model_validate(load_json(args.request))
    quality = RetrievalQuality.model_validate(load_json(args.quality)) if args.quality else None
    grounding = (
        GroundingResult.model_validate(load_json(args.grounding)) if args.grounding else None
    )

    gate = AnswerabilityGate.from_config(config)
    result = gate.should_refuse(request, quality, grounding)

    if result.refuse:
        print("REFUSE\n")
        print(result.response)
    else:
        print("PROCEED")

    if args.output:
        save_json(result.model_dump(mode="json"), args.output)


def cmd_run(args, config):
    """Run the full pipeline on a JSON bundle."""
    from groundgate.pipeline import GroundingPipeline
    from groundgate.schemas.evidence import ProvenanceChunk
    from groundgate.schemas.gate import ComputeRequest, RetrievalQuality

    bundle = load_json(args.input)
    chunks = [ProvenanceChunk.model_validate(c) for c in bundle.get("chunks", [])]
    request = ComputeRequest.model_validate(bundle["request"])
    quality = bundle.get("retrieval_quality", bundle.get("retrievalQuality"))
    quality = RetrievalQuality.model_validate(quality) if quality else None

    pipeline = GroundingPipeline.from_config(config)
    result = pipeline.run(bundle.get("answer", ""), chunks, request, quality)

    print(f"\nDecision: {'REFUSE' if result.refused else 'PROCEED'}")
    print(f"Latency: {result.timings.get('total_ms', 0):.1f}ms")
    if result.grounding:
        print(f"Stats: {result.grounding.stats.model_dump()}")
    print(f"\n{result.display_text}")

    if args.output:
        save_json(result.to_dict(), args.output)
        print(f"\n  Results saved to {args.output}")


def cmd_export_schemas(args, config):
    """Export JSON schemas for all data contracts."""
    from groundgate.schemas import export_all_schemas

    paths = export_all_schemas(args.output_dir)
    for path in paths:
        print(f"Exported: {path}")
    print(f"\n{len(paths)} schemas exported to {args.output_dir}/")


if __name__ == "__main__":
    main()
