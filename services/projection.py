"""
Investment tiers, durations and the projected-return calculation shown to applicants.
"""
from __future__ import annotations

import math
import re
from typing import Optional

INVESTMENT_TIERS: list[dict] = [
    {"label": "₦25,000", "value": 25_000},
    {"label": "₦50,000", "value": 50_000},
    {"label": "₦100,000", "value": 100_000},
    {"label": "₦250,000", "value": 250_000},
    {"label": "₦500,000", "value": 500_000},
]

DURATIONS: list[dict] = [
    {"label": "3 months", "value": 3},
    {"label": "6 months", "value": 6},
    {"label": "12 months", "value": 12},
]

ALLOWED_DURATIONS = frozenset(d["value"] for d in DURATIONS)
DEFAULT_MONTHLY_RATE = 0.05

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_custom_amount(raw: Optional[str]) -> Optional[int]:
    """Integer prefix of a free-typed amount ("1500abc" -> 1500); None when there is no leading number."""
    if not raw:
        return None
    match = _LEADING_INT.match(raw)
    if not match:
        return None
    return int(match.group(1))


def resolve_amount(tier_amount: int, custom_amount: Optional[str]) -> int:
    """A selected tier wins over the custom entry; 0 when neither yields a number."""
    if tier_amount:
        return tier_amount
    return parse_custom_amount(custom_amount) or 0


def projected_return(amount: int, duration: int, monthly_rate: float = DEFAULT_MONTHLY_RATE) -> int:
    """
    Amount paid back at term end: amount * (1 + monthly_rate * duration),
    rounded half-up to a whole currency unit.
    """
    return int(math.floor(amount * (1 + monthly_rate * duration) + 0.5))
