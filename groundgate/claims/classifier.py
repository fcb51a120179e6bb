"""
Claim Classifier
=================

Assigns exactly one ClaimType to a claim by walking the ordered rule
table in ``groundgate.claims.patterns``. First match wins:

    temporal → procedural → opinion → comparative → factual → unknown
"""

from __future__ import annotations

import logging

from groundgate.claims.patterns import CLASSIFICATION_RULES, ClassificationRule
from groundgate.schemas.grounding import ClaimType

logger = logging.getLogger("groundgate.claims.classifier")


class ClaimClassifier:
    """
    Rule-table claim classifier.

    Args:
        rules: Ordered (tag, matcher) rules. Defaults to CLASSIFICATION_RULES.
    """

    def __init__(self, rules: tuple[ClassificationRule, ...] = CLASSIFICATION_RULES):
        self.rules = rules

    def classify(self, claim: str) -> ClaimType:
        for rule in self.rules:
            if rule.matcher(claim):
                return rule.tag
        logger.debug(f"No rule matched, classifying as unknown: '{claim[:50]}'")
        return ClaimType.UNKNOWN
