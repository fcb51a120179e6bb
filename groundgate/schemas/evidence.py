"""
Evidence Schema
================

Defines the provenance chunks handed in by the retrieval layer and
the sentence-level spans located inside them.

Design Decisions:
    - Spans use character offsets into the chunk content so a span
      can always be re-located: chunk.content[start:end] == span.text
    - Spans are frozen once produced; the grounder never mutates them
    - Trust tier is ordinal: lower = more authoritative (0 = official)
    - Inputs accept the retrieval layer's camelCase keys (trustTier,
      retrievedAt) as well as the snake_case field names

Data Flow:
    Retrieval → ProvenanceChunk → SpanMatcher → CitedSpan → ClaimGrounding
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ChunkMetadata(BaseModel):
    """
    Provenance metadata for the document a chunk was cut from.

    Only the fields needed to build a CitedSpan are modelled here;
    anything else the retrieval layer attaches is ignored.
    """
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="Source document ID")
    source: str = Field(description="Source identifier (e.g. 'capitalone', 'reddit')")
    trust_tier: int = Field(ge=0, description="Authority rank (lower = more authoritative)")
    retrieved_at: str = Field(default="", description="When the content was retrieved (ISO-8601)")
    url: Optional[str] = Field(default=None, description="URL of the source document")
    title: Optional[str] = Field(default=None, description="Title of the source document")


class ProvenanceChunk(BaseModel):
    """
    A retrieved chunk of source text with its provenance.

    Schema:
        {
          "id": "vx-fees#c3",
          "content": "The Venture X card has an annual fee of $395. ...",
          "metadata": {"id": "vx-fees", "source": "capitalone",
                       "trust_tier": 0, "retrieved_at": "2026-09-01T00:00:00Z"}
        }
    """
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="Unique chunk ID")
    content: str = Field(description="Full chunk text")
    metadata: ChunkMetadata = Field(description="Document provenance")


class CitedSpan(BaseModel):
    """
    A single supporting sentence located inside a provenance chunk.

    Invariant:
        start_offset < end_offset
        end_offset - start_offset == len(text)
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Stable span ID (format: '{chunk_id}_span_{start}')")
    chunk_id: str = Field(description="Owning chunk ID")
    doc_id: str = Field(description="Owning document ID")
    start_offset: int = Field(ge=0, description="Start character offset within chunk content")
    end_offset: int = Field(gt=0, description="End character offset (exclusive)")
    text: str = Field(description="The verbatim sentence text")
    source: str = Field(description="Source identifier")
    trust_tier: int = Field(ge=0, description="Authority rank (lower = more authoritative)")
    retrieved_at: str = Field(default="", description="Retrieval timestamp of the owning chunk")
    url: Optional[str] = Field(default=None)
    title: Optional[str] = Field(default=None)

    @model_validator(mode="after")
    def validate_offsets(self) -> "CitedSpan":
        """Ensure offsets are ordered and agree with the span text."""
        if self.start_offset >= self.end_offset:
            raise ValueError(
                f"Span start ({self.start_offset}) must be < end ({self.end_offset})"
            )
        if self.end_offset - self.start_offset != len(self.text):
            raise ValueError(
                f"Span length mismatch: offsets suggest "
                f"{self.end_offset - self.start_offset} chars, "
                f"but text has {len(self.text)} chars"
            )
        return self

    @classmethod
    def from_chunk(cls, chunk: ProvenanceChunk, start: int, end: int) -> "CitedSpan":
        """Build a span over chunk.content[start:end], copying chunk provenance."""
        meta = chunk.metadata
        return cls(
            id=f"{chunk.id}_span_{start}",
            chunk_id=chunk.id,
            doc_id=meta.id,
            start_offset=start,
            end_offset=end,
            text=chunk.content[start:end],
            source=meta.source,
            trust_tier=meta.trust_tier,
            retrieved_at=meta.retrieved_at,
            url=meta.url,
            title=meta.title,
        )
