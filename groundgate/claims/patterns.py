"""
Claim Pattern Families
=======================

Regex pattern families used to decide whether a sentence is worth
checking and which claim type it is. Each family is a tuple of
compiled patterns; a sentence matches a family if any pattern hits.

The classifier's precedence is expressed as data (CLASSIFICATION_RULES)
so each rule can be tested in isolation and the order cannot drift.
"""

from __future__ import annotations

import re
from typing import Callable, NamedTuple

from groundgate.schemas.grounding import ClaimType

_I = re.IGNORECASE

FACTUAL_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\b(is|are|was|were|costs?|earns?|gives?|provides?|includes?|offers?)\b", _I),
    re.compile(r"\b\d+(\.\d+)?"),
    re.compile(r"\$\d+"),
    re.compile(r"\b\d+%"),
    re.compile(r"\bper\s+(mile|point|dollar|year|month|night|stay|booking)\b", _I),
)

PROCEDURAL_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\b(to do this|you can|you need to|steps?:|first|then|next|finally)\b", _I),
    re.compile(r"\b(how to|guide|instructions?|process)\b", _I),
)

TEMPORAL_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\b(currently|now|as of|since|until|starting|ending)\b", _I),
    re.compile(
        r"\b(20[2-3]\d|january|february|march|april|may|june|july|august"
        r"|september|october|november|december)\b",
        _I,
    ),
)

OPINION_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\b(best|worst|better|worse|great|terrible|excellent|poor)\b", _I),
    re.compile(r"\b(i think|i believe|in my opinion|personally)\b", _I),
    re.compile(r"\b(recommend|suggest|should|consider)\b", _I),
)

COMPARATIVE_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\b(vs|versus|compared|better|worse|than)\b", _I),
)

CITATION_MARKER = re.compile(r"\[\s*\d[\d,\s]*\]")


def matches_any(patterns: tuple[re.Pattern, ...], text: str) -> bool:
    """True if any pattern in the family matches the text."""
    return any(p.search(text) for p in patterns)


class ClassificationRule(NamedTuple):
    tag: ClaimType
    matcher: Callable[[str], bool]


def _family(patterns: tuple[re.Pattern, ...]) -> Callable[[str], bool]:
    return lambda text: matches_any(patterns, text)


# First match wins. Temporal outranks factual because time-sensitive
# claims need stricter, fresher evidence.
CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(ClaimType.TEMPORAL, _family(TEMPORAL_PATTERNS)),
    ClassificationRule(ClaimType.PROCEDURAL, _family(PROCEDURAL_PATTERNS)),
    ClassificationRule(ClaimType.OPINION, _family(OPINION_PATTERNS)),
    ClassificationRule(ClaimType.COMPARATIVE, _family(COMPARATIVE_PATTERNS)),
    ClassificationRule(ClaimType.FACTUAL, _family(FACTUAL_PATTERNS)),
)

# Families that make a sentence eligible as a claim.
ELIGIBILITY_FAMILIES: dict[str, tuple[re.Pattern, ...]] = {
    "factual": FACTUAL_PATTERNS,
    "procedural": PROCEDURAL_PATTERNS,
    "temporal": TEMPORAL_PATTERNS,
}
