"""Day Classification - Pure functions for per-day calendar status.

Groups logs and check-ins by local calendar day and classifies each day
into a DayStatus. Weekly stamps, the heatmap, the streak and the grade
all build on the same classification.

All functions are pure: same input always produces same output, no side effects.
"""

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .energy import resolve_profile
from .models import CheckEntry, DayRecord, DayStatus, LogEntry, Profile


QUALIFYING_STATUSES = frozenset(
    {DayStatus.REST, DayStatus.REST_EXERCISE, DayStatus.DRINK_EXERCISE_SUCCESS}
)


def profile_zone(profile: Profile | Mapping | None) -> Optional[ZoneInfo]:
    """Return the profile's time zone, or None for process local time."""
    name = resolve_profile(profile).timezone
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def local_date(timestamp_ms: int, profile: Profile | Mapping | None = None) -> date:
    """Calendar day of an epoch-millisecond timestamp in the profile's zone."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=profile_zone(profile)).date()


def local_today(profile: Profile | Mapping | None = None) -> date:
    """Current calendar day in the profile's zone."""
    return datetime.now(tz=profile_zone(profile)).date()


def _as_day(day: date, profile: Profile | Mapping | None) -> date:
    if isinstance(day, datetime):
        if day.tzinfo is not None:
            return day.astimezone(profile_zone(profile)).date()
        return day.date()
    return day


def is_qualifying_status(status: DayStatus) -> bool:
    """Whether a day counts toward the streak and the grade.

    A day qualifies when it leaves no net debt behind: a dry day (with or
    without exercise) or a drinking day fully paid back the same day.
    """
    return status in QUALIFYING_STATUSES


def has_alcohol_log(
    logs: Iterable[LogEntry], timestamp_ms: int, profile: Profile | Mapping | None = None
) -> bool:
    """Check whether any drink was logged on the calendar day of a timestamp.

    Args:
        logs: Normalized log entries
        timestamp_ms: Any moment of the day to check
        profile: User profile (for the time zone)

    Returns:
        True if a log with negative kcal falls on that day
    """
    day = local_date(timestamp_ms, profile)
    return any(log.kcal < 0 and local_date(log.timestamp_ms, profile) == day for log in logs)


def group_by_day(
    logs: Iterable[LogEntry],
    checks: Iterable[CheckEntry],
    profile: Profile | Mapping | None = None,
) -> dict[date, DayRecord]:
    """Group logs and check-ins by local calendar day.

    When several check-ins share a day, the latest one in input order wins.

    Args:
        logs: Normalized log entries (any order)
        checks: Check-ins in stored order
        profile: User profile (for the time zone)

    Returns:
        Mapping of day to everything recorded on that day
    """
    tz = profile_zone(profile)
    days: dict[date, DayRecord] = {}

    def record_for(timestamp_ms: int) -> DayRecord:
        day = datetime.fromtimestamp(timestamp_ms / 1000, tz=tz).date()
        if day not in days:
            days[day] = DayRecord(day=day)
        return days[day]

    for log in logs:
        record_for(log.timestamp_ms).logs.append(log)
    for check in checks:
        record_for(check.timestamp_ms).check = check

    return days


def classify_day(record: Optional[DayRecord]) -> DayStatus:
    """Classify one day's records into a DayStatus.

    Args:
        record: The day's logs and check-in, or None if nothing was recorded

    Returns:
        The day's status
    """
    if record is None or (not record.logs and record.check is None):
        return DayStatus.NONE

    check = record.check
    has_drink = any(log.kcal < 0 for log in record.logs)
    has_exercise = any(log.kcal > 0 for log in record.logs) or (
        check is not None and check.is_dry_day and check.exercised
    )
    is_dry = check is not None and check.is_dry_day and not has_drink

    if is_dry:
        return DayStatus.REST_EXERCISE if has_exercise else DayStatus.REST

    if has_drink and has_exercise:
        net = sum(log.kcal for log in record.logs)
        return DayStatus.DRINK_EXERCISE_SUCCESS if net >= 0 else DayStatus.DRINK_EXERCISE

    if has_drink:
        return DayStatus.DRINK

    if has_exercise:
        return DayStatus.EXERCISE

    # A check-in that is not a dry day, with nothing logged
    return DayStatus.NONE


def get_day_status(
    day: date,
    logs: Iterable[LogEntry],
    checks: Iterable[CheckEntry],
    profile: Profile | Mapping | None = None,
) -> DayStatus:
    """Get the calendar status of a single day.

    Args:
        day: The calendar day (an aware datetime is converted to the profile's zone)
        logs: Normalized log entries
        checks: Check-ins in stored order
        profile: User profile

    Returns:
        The day's DayStatus
    """
    target = _as_day(day, profile)
    day_logs = [log for log in logs if local_date(log.timestamp_ms, profile) == target]
    day_checks = [check for check in checks if local_date(check.timestamp_ms, profile) == target]
    return classify_day(group_by_day(day_logs, day_checks, profile).get(target))
