"""Check-in Messages - Pure functions for the daily condition card.

All functions are pure: same input always produces same output, no side effects.
"""

from collections.abc import Iterable, Mapping, Sequence
from datetime import date, timedelta
from typing import Optional

from .days import has_alcohol_log, local_date, local_today
from .models import CheckEntry, CheckMessage, LogEntry, Profile, RecentCheck


def select_recent_check(
    checks: Sequence[CheckEntry],
    profile: Profile | Mapping | None = None,
    today: Optional[date] = None,
) -> Optional[RecentCheck]:
    """Pick the check-in to show: today's if any, else yesterday's.

    Scans from the latest stored check backward and returns the first one
    dated today or yesterday.

    Args:
        checks: Check-ins in stored order
        profile: User profile (for the time zone)
        today: Reference day (defaults to today in the profile's zone)

    Returns:
        RecentCheck, or None if neither day has a check-in
    """
    current = today if today is not None else local_today(profile)
    yesterday = current - timedelta(days=1)

    for check in reversed(checks):
        day = local_date(check.timestamp_ms, profile)
        if day == current:
            return RecentCheck(check=check, kind="today")
        if day == yesterday:
            return RecentCheck(check=check, kind="yesterday")
    return None


def condition_score(check: CheckEntry) -> int:
    """Number of the four body-condition flags that are set."""
    return sum((check.waist_ease, check.foot_lightness, check.fiber_ok, check.water_ok))


def get_check_message(
    check: CheckEntry,
    logs: Iterable[LogEntry],
    profile: Profile | Mapping | None = None,
) -> CheckMessage:
    """Summarize a check-in for the condition card.

    A drinking day (logged, or not marked dry) is scored on the four
    condition flags. A dry day is judged on waist and feet only.

    Args:
        check: The check-in to summarize
        logs: Normalized log entries
        profile: User profile (for the time zone)

    Returns:
        CheckMessage with kind, score and text
    """
    score = condition_score(check)
    drank = has_alcohol_log(logs, check.timestamp_ms, profile)

    if drank or not check.is_dry_day:
        if score == 4:
            return CheckMessage(kind="great", score=score, text="Metabolism in top shape!")
        if score >= 1:
            return CheckMessage(kind="partial", score=score, text=f"{score}/4 clear")
        return CheckMessage(kind="poor", score=score, text="Feeling a bit off...")

    if check.waist_ease and check.foot_lightness:
        return CheckMessage(kind="dry_great", score=score, text="Dry day and feeling great!")
    return CheckMessage(kind="dry_tired", score=score, text="Dry day (not at your best)")
