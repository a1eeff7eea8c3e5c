"""Streak Engine - Pure functions for qualifying-day streaks and bonuses.

All functions are pure: same input always produces same output, no side effects.
"""

from collections.abc import Iterable, Mapping
from datetime import date, timedelta
from typing import Optional

from .days import classify_day, group_by_day, is_qualifying_status, local_today
from .energy import to_finite
from .models import CheckEntry, LogEntry, Profile


# (minimum streak, multiplier), highest tier first
STREAK_MULTIPLIER_TIERS: tuple[tuple[int, float], ...] = (
    (14, 1.5),
    (7, 1.2),
)


def get_current_streak(
    logs: Iterable[LogEntry],
    checks: Iterable[CheckEntry],
    profile: Profile | Mapping | None = None,
    today: Optional[date] = None,
) -> int:
    """Count consecutive qualifying days ending today.

    Walks backward from today and stops at the first non-qualifying day or
    once it passes the earliest recorded day. A day with no records does not
    qualify, so gaps break the streak.

    Args:
        logs: Normalized log entries
        checks: Check-ins in stored order
        profile: User profile (for the time zone)
        today: Day to count back from (defaults to today in the profile's zone)

    Returns:
        Streak length in days (0 if today does not qualify)
    """
    days = group_by_day(logs, checks, profile)
    if not days:
        return 0

    earliest = min(days)
    day = today if today is not None else local_today(profile)
    streak = 0
    while day >= earliest and is_qualifying_status(classify_day(days.get(day))):
        streak += 1
        day -= timedelta(days=1)
    return streak


def get_streak_multiplier(streak: int) -> float:
    """Bonus multiplier unlocked by a streak.

    Args:
        streak: Current streak length in days

    Returns:
        Multiplier of the highest tier reached, 1.0 below every tier
    """
    length = to_finite(streak) or 0
    for threshold, multiplier in STREAK_MULTIPLIER_TIERS:
        if length >= threshold:
            return multiplier
    return 1.0
