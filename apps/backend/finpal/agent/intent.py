"""Keyword intent detection for chat messages."""

from __future__ import annotations

from enum import Enum
from typing import Tuple


class Intent(str, Enum):
    SPENDING_QUERY = "spending_query"
    GOAL_QUERY = "goal_query"
    BUDGET_QUERY = "budget_query"
    INVESTMENT_QUERY = "investment_query"
    ADVICE_REQUEST = "advice_request"
    GENERAL = "general"


# Checked top to bottom; the first list with a substring hit wins.
INTENT_KEYWORDS: Tuple[Tuple[Intent, Tuple[str, ...]], ...] = (
    (Intent.SPENDING_QUERY, ("spend", "expense", "spent", "cost")),
    (Intent.GOAL_QUERY, ("goal", "save for", "target", "saving")),
    (Intent.BUDGET_QUERY, ("budget", "limit")),
    (
        Intent.INVESTMENT_QUERY,
        ("invest", "stock", "mutual fund", "fd", "sip", "portfolio"),
    ),
    (
        Intent.ADVICE_REQUEST,
        ("advice", "suggest", "recommend", "should i", "how can", "tips"),
    ),
)


def classify_intent(message: str) -> Intent:
    """
    Map a free-text message to exactly one intent.

    Not a scored classifier: "budget for my investment goal" is a goal query
    because goal keywords are checked before budget and investment ones.
    """
    text = (message or "").lower()
    for intent, keywords in INTENT_KEYWORDS:
        if any(k in text for k in keywords):
            return intent
    return Intent.GENERAL
