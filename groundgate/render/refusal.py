"""
Refusal Message Synthesis
==========================

Static label and suggestion tables plus the renderer that turns a
refusing GateResult into user-facing text:

    🤔 <reason>

    To help you, I'd need:
    • <label for each missing item>

    💡 You could:
    • <suggested action>

Blocks with nothing to list are omitted; rendering never raises.
"""

from __future__ import annotations

from typing import Optional

DEFAULT_REASON = "I don't have enough information to help with this."

MISSING_DATA_LABELS: dict[str, str] = {
    "portalPrice": "The price on the Capital One Travel portal",
    "directPrice": "The price booking directly with the airline/hotel",
    "purchaseAmount": "The purchase amount you want to erase",
    "cashFare": "The cash price for the same flight/room",
    "milesRequired": "The number of miles required for the award booking",
    "taxesFees": "The taxes and fees on the award ticket",
    "amount": "The booking amount",
    "milesBalance": "Your current miles balance",
}

# (trigger params, suggestions): a group applies if any trigger is missing.
MISSING_DATA_SUGGESTIONS: tuple[tuple[frozenset[str], tuple[str, ...]], ...] = (
    (
        frozenset({"portalPrice", "directPrice"}),
        (
            "Look up both prices first, then ask me to compare",
            "Tell me the portal and direct prices for your booking",
        ),
    ),
    (
        frozenset({"purchaseAmount"}),
        ("Tell me the purchase amount you want to erase",),
    ),
    (
        frozenset({"cashFare", "milesRequired"}),
        (
            "Find the cash fare and miles required for the award booking",
            "Check the transfer partner website for award pricing",
        ),
    ),
    (
        frozenset({"amount"}),
        ("Tell me how much you plan to spend",),
    ),
)

FALLBACK_SUGGESTION = "Provide the missing details and ask again"


def format_missing_data_item(param: str) -> str:
    """Human label for a missing parameter; unknown names pass through."""
    return MISSING_DATA_LABELS.get(param, param)


def suggestions_for_missing_data(missing_params: list[str]) -> list[str]:
    missing = set(missing_params)
    suggestions = [
        action
        for triggers, actions in MISSING_DATA_SUGGESTIONS
        if triggers & missing
        for action in actions
    ]
    return suggestions or [FALLBACK_SUGGESTION]


def render_refusal(
    reason: Optional[str],
    missing_data: Optional[list[str]] = None,
    suggested_actions: Optional[list[str]] = None,
) -> str:
    parts = [f"🤔 {reason or DEFAULT_REASON}"]

    if missing_data:
        parts.append("\nTo help you, I'd need:")
        parts.extend(f"• {format_missing_data_item(item)}" for item in missing_data)

    if suggested_actions:
        parts.append("\n💡 You could:")
        parts.extend(f"• {action}" for action in suggested_actions)

    return "\n".join(parts)
