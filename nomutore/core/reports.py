"""Report Generation - Pure functions for calendar, chart and list views.

Turns normalized records into the plain data the presentation layer draws:
weekly stamps, the monthly heatmap, the balance history chart, log rows
and input shortcuts. Minutes are rounded here and nowhere earlier.

All functions are pure: same input always produces same output, no side effects.
"""

import calendar
import math
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, timedelta
from typing import Optional

from .catalog import DRINK_STYLES, EXERCISES, SIZES, find_exercise_by_label
from .days import classify_day, group_by_day, local_date, local_today
from .energy import convert_kcal_to_minutes
from .models import (
    ChartPoint,
    ChartRange,
    CheckEntry,
    DayStamp,
    DayStatus,
    HeatmapMonth,
    InputSuggestions,
    LogEntry,
    LogRow,
    Profile,
    Shortcut,
    WeeklyStamps,
)
from .streak import get_current_streak, get_streak_multiplier


CHART_RANGE_DAYS: dict[str, Optional[int]] = {"1w": 7, "1m": 30, "all": None}
DEFAULT_WEIGHT_AXIS = (40, 90)

DRINK_ICON = "🍺"
EXERCISE_ICON = "🏃‍♀️"


def build_weekly_stamps(
    logs: Iterable[LogEntry],
    checks: Iterable[CheckEntry],
    profile: Profile | Mapping | None = None,
    today: Optional[date] = None,
) -> WeeklyStamps:
    """Build the seven-day stamp row ending today.

    Args:
        logs: Normalized log entries
        checks: Check-ins in stored order
        profile: User profile
        today: Last day of the row (defaults to today in the profile's zone)

    Returns:
        WeeklyStamps, oldest day first
    """
    logs = list(logs)
    checks = list(checks)
    current = today if today is not None else local_today(profile)
    days = group_by_day(logs, checks, profile)

    stamps: list[DayStamp] = []
    dry_count = 0
    for offset in range(6, -1, -1):
        day = current - timedelta(days=offset)
        status = classify_day(days.get(day))
        is_today = offset == 0
        # Today is still in progress and is not counted
        if not is_today and status in (DayStatus.REST, DayStatus.REST_EXERCISE):
            dry_count += 1
        stamps.append(DayStamp(day=day, status=status, is_today=is_today))

    if dry_count >= 4:
        message = "excellent"
    elif dry_count >= 2:
        message = "good"
    else:
        message = "rest"

    streak = get_current_streak(logs, checks, profile, current)
    return WeeklyStamps(
        days=stamps,
        dry_count=dry_count,
        message=message,
        streak=streak,
        multiplier=get_streak_multiplier(streak),
    )


def build_heatmap_month(
    logs: Iterable[LogEntry],
    checks: Iterable[CheckEntry],
    profile: Profile | Mapping | None = None,
    today: Optional[date] = None,
    offset_months: int = 0,
) -> HeatmapMonth:
    """Build a month of day statuses for the heatmap.

    Args:
        logs: Normalized log entries
        checks: Check-ins in stored order
        profile: User profile
        today: Reference day (defaults to today in the profile's zone)
        offset_months: How many months back from today's month (negative = 0)

    Returns:
        HeatmapMonth with one cell per day of the month
    """
    current = today if today is not None else local_today(profile)
    month_index = current.year * 12 + current.month - 1 - max(0, offset_months)
    year, month = divmod(month_index, 12)
    month += 1

    days = group_by_day(logs, checks, profile)
    _, days_in_month = calendar.monthrange(year, month)
    cells = []
    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        cells.append(DayStamp(day=day, status=classify_day(days.get(day)), is_today=day == current))

    first = date(year, month, 1)
    return HeatmapMonth(
        year=year,
        month=month,
        leading_blanks=(first.weekday() + 1) % 7,
        cells=cells,
    )


def build_balance_history(
    logs: Iterable[LogEntry],
    checks: Iterable[CheckEntry],
    profile: Profile | Mapping | None,
    base_exercise: Optional[str],
    chart_range: ChartRange = "1w",
    today: Optional[date] = None,
) -> list[ChartPoint]:
    """Build the daily balance chart series in base-exercise minutes.

    The running balance is accumulated over the full history and only then
    cut to the requested range, so the first visible point carries the
    balance brought forward.

    Args:
        logs: Normalized log entries
        checks: Check-ins (their weights are plotted)
        profile: User profile
        base_exercise: Exercise key used for the minute conversion
        chart_range: "1w", "1m" or "all"
        today: Reference day for the range cut-off

    Returns:
        Chart points in ascending day order (one zero point if empty)
    """
    checks = list(checks)
    current = today if today is not None else local_today(profile)
    days = group_by_day(logs, checks, profile)

    weights: dict[date, float] = {}
    for check in sorted(checks, key=lambda c: c.timestamp_ms):
        if check.weight:
            weights[local_date(check.timestamp_ms, profile)] = check.weight

    points: list[ChartPoint] = []
    running = 0.0
    for day in sorted(days):
        day_kcal = [log.kcal for log in days[day].logs]
        plus = sum(k for k in day_kcal if k >= 0)
        minus = sum(k for k in day_kcal if k < 0)
        running += plus + minus
        points.append(
            ChartPoint(
                day=day,
                label=f"{day.month}/{day.day}",
                plus_minutes=convert_kcal_to_minutes(plus, base_exercise, profile),
                minus_minutes=convert_kcal_to_minutes(minus, base_exercise, profile),
                balance_minutes=convert_kcal_to_minutes(running, base_exercise, profile),
                weight=weights.get(day),
            )
        )

    span = CHART_RANGE_DAYS.get(chart_range, CHART_RANGE_DAYS["1w"])
    if span is not None:
        cutoff = current - timedelta(days=span)
        points = [p for p in points if p.day >= cutoff]

    if not points:
        points = [ChartPoint(day=current, label=f"{current.month}/{current.day}")]
    return points


def weight_axis_bounds(points: Sequence[ChartPoint]) -> tuple[int, int]:
    """Weight axis range with 2 kg of padding around the plotted weights."""
    weights = [p.weight for p in points if p.weight is not None]
    if not weights:
        return DEFAULT_WEIGHT_AXIS
    return math.floor(min(weights) - 2), math.ceil(max(weights) + 2)


def describe_log(
    log: LogEntry,
    base_exercise: Optional[str],
    profile: Profile | Mapping | None,
) -> LogRow:
    """Build a display row for the log history list.

    Args:
        log: Normalized log entry
        base_exercise: Exercise key used for the minute conversion
        profile: User profile

    Returns:
        LogRow with icon and rounded base-exercise minutes
    """
    is_debt = log.kcal < 0

    if is_debt:
        style = DRINK_STYLES.get(log.style) if log.style else None
        icon = style.icon if style else DRINK_ICON
    elif log.exercise_key and log.exercise_key in EXERCISES:
        icon = EXERCISES[log.exercise_key].icon
    else:
        match = find_exercise_by_label(log.name)
        icon = match.icon if match else EXERCISE_ICON

    minutes = convert_kcal_to_minutes(abs(log.kcal), base_exercise, profile)
    return LogRow(
        id=log.id,
        timestamp_ms=log.timestamp_ms,
        name=log.name,
        icon=icon,
        is_debt=is_debt,
        kind="debt" if is_debt else "repay",
        sign="-" if is_debt else "+",
        display_minutes=round(minutes),
    )


def _short_size_label(size: str) -> str:
    serving = SIZES.get(size)
    if serving is None:
        return size
    return serving.label.split(" (")[0]


def quick_shortcuts(logs: Iterable[LogEntry], limit: int = 2) -> list[Shortcut]:
    """Most frequently logged (style, size) drink pairs.

    Args:
        logs: Normalized log entries
        limit: Maximum number of shortcuts

    Returns:
        Shortcuts ordered by use count (ties keep first-seen order)
    """
    counts = Counter(
        (log.style, log.size)
        for log in logs
        if log.kcal < 0 and log.style and log.size
    )
    return [
        Shortcut(style=style, size=size, size_label=_short_size_label(size), uses=uses)
        for (style, size), uses in counts.most_common(max(0, limit))
    ]


def input_suggestions(logs: Iterable[LogEntry]) -> InputSuggestions:
    """Unique breweries and brands from past logs, in first-seen order."""
    breweries: dict[str, None] = {}
    brands: dict[str, None] = {}
    for log in logs:
        if log.brewery and log.brewery.strip():
            breweries.setdefault(log.brewery.strip(), None)
        if log.brand and log.brand.strip():
            brands.setdefault(log.brand.strip(), None)
    return InputSuggestions(breweries=list(breweries), brands=list(brands))
