"""Answer normalization shared by the analyzer and the matcher.

Questionnaire answers arrive as loosely formatted strings ("Under 5k",
"1-3 Months", ["Increase revenue", ""]). These helpers reduce them to
lookup keys and expose the ordinal tiers used for cross-field checks.
"""

import re
from typing import Any, Optional

# Ordinal tiers (0 = smallest). Budget, revenue and company size share the
# same 0-4 scale so tier distances are comparable.
BUDGET_TIERS = {
    "bootstrap": 0,
    "minimal": 0,
    "under-5k": 0,
    "5k-15k": 1,
    "15k-50k": 2,
    "50k-100k": 3,
    "100k+": 4,
    "100k-plus": 4,
}

REVENUE_TIERS = {
    "pre-revenue": 0,
    "under-100k": 0,
    "100k-500k": 1,
    "500k-1m": 2,
    "1m-5m": 3,
    "5m-10m": 3,
    "1m-10m": 3,
    "10m+": 4,
    "10m-plus": 4,
}

COMPANY_SIZE_TIERS = {
    "solo": 0,
    "startup": 1,
    "small": 1,
    "medium": 2,
    "large": 3,
    "enterprise": 4,
}

IMMEDIATE_TIMELINES = {"immediate", "immediately", "urgent", "asap"}
LOW_URGENCY_TIMELINES = {"flexible", "exploring", "no-rush", "6-months+", "6-months-plus", "just-researching"}


def is_answered(value: Any) -> bool:
    """An answer counts unless it is None, a blank string, or a list with no answered items."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (list, tuple)):
        return any(is_answered(item) for item in value)
    return True


def normalize_key(value: str) -> str:
    """Reduce a free-form choice to a lookup key: 'Under 5K' -> 'under-5k'."""
    key = value.strip().lower().replace("$", "")
    key = re.sub(r"[\s_]+", "-", key)
    key = re.sub(r"-{2,}", "-", key)
    return key.strip("-")


def answer_text(value: Any) -> Optional[str]:
    """Text of a single-choice answer; lists yield their first non-empty item."""
    if isinstance(value, str):
        return value if value.strip() else None
    if isinstance(value, (list, tuple)):
        for item in value:
            if isinstance(item, str) and item.strip():
                return item
    return None


def answer_list(value: Any) -> list[str]:
    """Items of a multi-choice answer; a plain string is one item."""
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, str) and item.strip()]
    return []


def answer_key(value: Any) -> Optional[str]:
    """Normalized lookup key for a single-choice answer."""
    text = answer_text(value)
    return normalize_key(text) if text else None


def lookup_tier(value: Any, table: dict[str, int]) -> Optional[int]:
    """Ordinal tier for an answer, or None if absent or unrecognized."""
    key = answer_key(value)
    if key is None:
        return None
    return table.get(key)
