"""Unit tests for day classification - pure functions, no mocks needed."""

from datetime import date, datetime, timezone

from nomutore.core.days import (
    classify_day,
    get_day_status,
    group_by_day,
    has_alcohol_log,
    is_qualifying_status,
    local_date,
)
from nomutore.core.models import CheckEntry, DayRecord, DayStatus, LogEntry, Profile


PROFILE = Profile(timezone="UTC")
DAY = date(2025, 3, 10)


def ts(day: date, hour: int = 12) -> int:
    return int(datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc).timestamp() * 1000)


def log(kcal: float, day: date = DAY, hour: int = 12) -> LogEntry:
    return LogEntry(timestamp_ms=ts(day, hour), kcal=kcal)


def check(day: date = DAY, hour: int = 21, **flags) -> CheckEntry:
    return CheckEntry(timestamp_ms=ts(day, hour), **flags)


class TestClassifyDay:
    """Tests for classify_day."""

    def test_nothing_recorded(self):
        """No record is NONE."""
        assert classify_day(None) == DayStatus.NONE
        assert classify_day(DayRecord(day=DAY)) == DayStatus.NONE

    def test_drink_paid_back(self):
        """Drink and exercise netting to zero or above is a success."""
        record = DayRecord(day=DAY, logs=[log(-300), log(300)])
        assert classify_day(record) == DayStatus.DRINK_EXERCISE_SUCCESS

    def test_drink_partially_paid_back(self):
        """Drink and exercise with net debt."""
        record = DayRecord(day=DAY, logs=[log(-500), log(200)])
        assert classify_day(record) == DayStatus.DRINK_EXERCISE

    def test_drink_only(self):
        """A single drink is DRINK."""
        assert classify_day(DayRecord(day=DAY, logs=[log(-250)])) == DayStatus.DRINK

    def test_exercise_only(self):
        """Exercise without a dry check-in is EXERCISE."""
        assert classify_day(DayRecord(day=DAY, logs=[log(150)])) == DayStatus.EXERCISE

    def test_dry_check(self):
        """Dry check-in with nothing logged is REST."""
        record = DayRecord(day=DAY, check=check(is_dry_day=True))
        assert classify_day(record) == DayStatus.REST

    def test_dry_check_with_exercise(self):
        """Dry check-in plus exercise is REST_EXERCISE."""
        record = DayRecord(day=DAY, logs=[log(100)], check=check(is_dry_day=True))
        assert classify_day(record) == DayStatus.REST_EXERCISE

    def test_dry_check_with_exercised_flag(self):
        """The check-in's own exercise flag counts on a dry day."""
        record = DayRecord(day=DAY, check=check(is_dry_day=True, exercised=True))
        assert classify_day(record) == DayStatus.REST_EXERCISE

    def test_drink_overrides_dry_check(self):
        """A logged drink wins over a dry check-in."""
        record = DayRecord(day=DAY, logs=[log(-98)], check=check(is_dry_day=True))
        assert classify_day(record) == DayStatus.DRINK

    def test_non_dry_check_only(self):
        """A drinking-day check-in with nothing logged is NONE."""
        record = DayRecord(day=DAY, check=check(is_dry_day=False))
        assert classify_day(record) == DayStatus.NONE


class TestQualifying:
    """Tests for is_qualifying_status."""

    def test_qualifying_set(self):
        """Only debt-free days qualify."""
        qualifying = {s for s in DayStatus if is_qualifying_status(s)}
        assert qualifying == {
            DayStatus.REST,
            DayStatus.REST_EXERCISE,
            DayStatus.DRINK_EXERCISE_SUCCESS,
        }


class TestGrouping:
    """Tests for local_date, group_by_day and has_alcohol_log."""

    def test_local_date_uses_profile_zone(self):
        """23:30 UTC is already the next day in Tokyo."""
        stamp = ts(date(2024, 12, 28), hour=23)
        assert local_date(stamp, PROFILE) == date(2024, 12, 28)
        assert local_date(stamp, Profile(timezone="Asia/Tokyo")) == date(2024, 12, 29)

    def test_group_by_day(self):
        """Records land on their own day; the later check-in wins."""
        other = date(2025, 3, 11)
        first = check(is_dry_day=False, hour=8)
        second = check(is_dry_day=True, hour=20)
        days = group_by_day([log(-98), log(50, other)], [first, second], PROFILE)
        assert set(days) == {DAY, other}
        assert len(days[DAY].logs) == 1
        assert days[DAY].check is second
        assert days[other].check is None

    def test_has_alcohol_log(self):
        """Only drinks on the same day count."""
        logs = [log(-98, date(2025, 3, 9)), log(120)]
        assert has_alcohol_log(logs, ts(DAY), PROFILE) is False
        assert has_alcohol_log(logs, ts(date(2025, 3, 9), 3), PROFILE) is True


class TestGetDayStatus:
    """Tests for get_day_status."""

    def test_filters_to_the_day(self):
        """Records on other days are ignored."""
        logs = [log(-98, date(2025, 3, 9)), log(80)]
        checks = [check(is_dry_day=True)]
        assert get_day_status(DAY, logs, checks, PROFILE) == DayStatus.REST_EXERCISE
        assert get_day_status(date(2025, 3, 9), logs, checks, PROFILE) == DayStatus.DRINK
        assert get_day_status(date(2025, 3, 8), logs, checks, PROFILE) == DayStatus.NONE

    def test_idempotent(self):
        """Same input, same answer."""
        logs = [log(-300), log(300)]
        first = get_day_status(DAY, logs, [], PROFILE)
        assert get_day_status(DAY, logs, [], PROFILE) == first
