"""Grading Engine - Pure functions for the liver rank.

The rank is a step function over qualifying days in a trailing window,
evaluated top-down over GRADE_TIERS. Users with too little history are
graded as Rookies on their overall qualifying rate instead.

All functions are pure: same input always produces same output, no side effects.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from .days import classify_day, group_by_day, is_qualifying_status, local_today
from .models import CheckEntry, Grade, LogEntry, Profile


GRADE_WINDOW_DAYS = 30
ROOKIE_MIN_DAYS = 7
ROOKIE_TARGET_RATE = 0.7


@dataclass(frozen=True)
class GradeTier:
    """A row of the rank table."""

    threshold: int
    rank: str
    label: str
    color: str
    bg: str


# Highest tier first; each threshold is an inclusive lower bound
GRADE_TIERS: tuple[GradeTier, ...] = (
    GradeTier(20, "S", "Iron Liver", "text-purple-600", "bg-purple-100"),
    GradeTier(12, "A", "Healthy Liver", "text-indigo-600", "bg-indigo-100"),
    GradeTier(8, "B", "Steady Liver", "text-green-600", "bg-green-100"),
    GradeTier(0, "C", "Tired Liver", "text-red-500", "bg-red-50"),
)

ROOKIE_TIER = GradeTier(0, "Rookie", "Rookie Liver", "text-orange-500", "bg-orange-100")


def _tier_for(current: int) -> tuple[GradeTier, Optional[int]]:
    """Find the tier for a qualifying-day count and the next tier's threshold."""
    next_threshold: Optional[int] = None
    for tier in GRADE_TIERS:
        if current >= tier.threshold:
            return tier, next_threshold
        next_threshold = tier.threshold
    return GRADE_TIERS[-1], next_threshold


def get_recent_grade(
    checks: Iterable[CheckEntry],
    logs: Iterable[LogEntry],
    profile: Profile | Mapping | None = None,
    today: Optional[date] = None,
) -> Grade:
    """Compute the liver rank from recent qualifying days.

    Args:
        checks: Check-ins in stored order
        logs: Normalized log entries
        profile: User profile (for the time zone)
        today: Last day of the grading window (defaults to today)

    Returns:
        Grade with rank, presentation hints and progress counts
    """
    days = group_by_day(logs, checks, profile)
    end = today if today is not None else local_today(profile)
    start = end - timedelta(days=GRADE_WINDOW_DAYS - 1)

    qualifying = {day for day, record in days.items() if is_qualifying_status(classify_day(record))}
    current = sum(1 for day in qualifying if start <= day <= end)

    if len(days) < ROOKIE_MIN_DAYS:
        raw_rate = len(qualifying) / len(days) if days else 0.0
        return Grade(
            rank=ROOKIE_TIER.rank,
            label=ROOKIE_TIER.label,
            color=ROOKIE_TIER.color,
            bg=ROOKIE_TIER.bg,
            current=current,
            next=ROOKIE_MIN_DAYS,
            raw_rate=raw_rate,
            target_rate=ROOKIE_TARGET_RATE,
            is_rookie=True,
        )

    tier, next_threshold = _tier_for(current)
    return Grade(
        rank=tier.rank,
        label=tier.label,
        color=tier.color,
        bg=tier.bg,
        current=current,
        next=next_threshold,
    )


def grade_progress(grade: Grade) -> float:
    """Progress toward the next rank as a fraction in [0, 1].

    Rookies progress on their qualifying rate; ranked users on qualifying
    days between their tier's threshold and the next one.
    """
    if grade.is_rookie:
        if not grade.target_rate:
            return 0.0
        ratio = (grade.raw_rate or 0.0) / grade.target_rate
    elif grade.next is None:
        return 1.0
    else:
        floor = next((t.threshold for t in GRADE_TIERS if t.rank == grade.rank), 0)
        span = grade.next - floor
        ratio = (grade.current - floor) / span if span > 0 else 1.0
    return max(0.0, min(1.0, ratio))
