"""
Membership tiers and other display-only values derived from a customer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any


@dataclass(frozen=True)
class TierInfo:
    level: int | None
    label: str
    description: str
    badge: str


MEMBER_TIERS: dict[int, TierInfo] = {
    1: TierInfo(1, "Bronze", "Basic membership with standard benefits", "tier-bronze"),
    2: TierInfo(2, "Silver", "Standard membership with enhanced benefits", "tier-silver"),
    3: TierInfo(3, "Gold", "Premium membership with exclusive benefits", "tier-gold"),
    4: TierInfo(4, "Platinum", "Elite membership with all premium benefits", "tier-platinum"),
}

UNKNOWN_TIER = TierInfo(None, "Unknown", "Membership tier not recognized", "tier-unknown")


def parse_tier(value: Any) -> int | None:
    """Tier level from an int or a numeric string; None if it is not a known tier."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        level = value
    elif isinstance(value, str) and value.strip().isdigit():
        level = int(value.strip())
    else:
        return None
    return level if level in MEMBER_TIERS else None


def tier_info(value: Any) -> TierInfo:
    level = parse_tier(value)
    if level is None:
        return UNKNOWN_TIER
    return MEMBER_TIERS[level]


def calculate_age(date_of_birth: date, today: date | None = None) -> int:
    today = today or date.today()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age
