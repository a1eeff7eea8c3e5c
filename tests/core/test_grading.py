"""Unit tests for the grading engine - pure functions, no mocks needed."""

from datetime import date, datetime, timedelta, timezone

import pytest

from nomutore.core.grading import get_recent_grade, grade_progress
from nomutore.core.models import CheckEntry, Grade, LogEntry, Profile


PROFILE = Profile(timezone="UTC")
TODAY = date(2025, 3, 10)


def ts(day: date, hour: int = 12) -> int:
    return int(datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc).timestamp() * 1000)


def rest_days(count: int, end: date = TODAY) -> list[CheckEntry]:
    return [
        CheckEntry(timestamp_ms=ts(end - timedelta(days=i)), is_dry_day=True)
        for i in range(count)
    ]


def drink_days(count: int, end: date) -> list[LogEntry]:
    return [LogEntry(timestamp_ms=ts(end - timedelta(days=i)), kcal=-98) for i in range(count)]


class TestRookie:
    """Tests for the rookie grade."""

    def test_no_history(self):
        """Nothing recorded is a rookie with zero rate."""
        grade = get_recent_grade([], [], PROFILE, TODAY)
        assert grade.rank == "Rookie"
        assert grade.is_rookie is True
        assert grade.current == 0
        assert grade.next == 7
        assert grade.raw_rate == 0
        assert grade.target_rate == 0.7

    def test_short_history_rate(self):
        """Rookie rate is qualifying over recorded days."""
        logs = drink_days(1, end=TODAY - timedelta(days=3))
        grade = get_recent_grade(rest_days(3), logs, PROFILE, TODAY)
        assert grade.is_rookie is True
        assert grade.current == 3
        assert grade.raw_rate == pytest.approx(0.75)


class TestRankedGrade:
    """Tests for ranked grades."""

    def test_top_rank(self):
        """25 qualifying days in the window is S with no next tier."""
        grade = get_recent_grade(rest_days(25), [], PROFILE, TODAY)
        assert grade.rank == "S"
        assert grade.label == "Iron Liver"
        assert grade.current == 25
        assert grade.next is None
        assert grade.is_rookie is False

    def test_threshold_is_inclusive(self):
        """Exactly 20 days reaches S."""
        assert get_recent_grade(rest_days(20), [], PROFILE, TODAY).rank == "S"

    @pytest.mark.parametrize("days,rank,next_threshold", [(12, "A", 20), (8, "B", 12), (19, "A", 20)])
    def test_middle_ranks(self, days, rank, next_threshold):
        """Each count maps to its tier and the next threshold."""
        grade = get_recent_grade(rest_days(days), [], PROFILE, TODAY)
        assert grade.rank == rank
        assert grade.next == next_threshold

    def test_bottom_rank(self):
        """7 of 10 recorded days is still C."""
        logs = drink_days(3, end=TODAY - timedelta(days=7))
        grade = get_recent_grade(rest_days(7), logs, PROFILE, TODAY)
        assert grade.rank == "C"
        assert grade.current == 7
        assert grade.next == 8

    def test_window_excludes_old_days(self):
        """Only the last 30 days count toward the rank."""
        old = rest_days(10, end=TODAY - timedelta(days=36))
        grade = get_recent_grade(old + rest_days(5), [], PROFILE, TODAY)
        assert grade.is_rookie is False
        assert grade.current == 5
        assert grade.rank == "C"


class TestGradeProgress:
    """Tests for grade_progress."""

    def test_top_rank_is_full(self):
        """No next tier means full progress."""
        grade = Grade(rank="S", label="", color="", bg="", current=22, next=None)
        assert grade_progress(grade) == 1.0

    def test_between_thresholds(self):
        """Progress is measured from the current tier's threshold."""
        grade = Grade(rank="A", label="", color="", bg="", current=16, next=20)
        assert grade_progress(grade) == pytest.approx(0.5)

    def test_rookie_rate(self):
        """Rookies progress on their rate against the target."""
        grade = Grade(
            rank="Rookie", label="", color="", bg="", current=2, next=7,
            raw_rate=0.35, target_rate=0.7, is_rookie=True,
        )
        assert grade_progress(grade) == pytest.approx(0.5)
