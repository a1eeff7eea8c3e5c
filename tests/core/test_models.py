"""Unit tests for data models - validation and defaults."""

import pytest
from pydantic import ValidationError

from nomutore.core.models import (
    AppSettings,
    CheckEntry,
    DayStatus,
    Gender,
    LogEntry,
    Profile,
)


class TestProfile:
    """Tests for Profile model."""

    def test_defaults(self):
        """Default profile is usable without any input."""
        profile = Profile()
        assert profile.weight_kg == 65.0
        assert profile.gender == Gender.OTHER
        assert profile.timezone is None

    def test_non_positive_weight_rejected(self):
        """Zero or negative weight is rejected."""
        with pytest.raises(ValidationError):
            Profile(weight_kg=0)
        with pytest.raises(ValidationError):
            Profile(weight_kg=-60)

    def test_unknown_gender_rejected(self):
        """Gender must be one of the enum values."""
        with pytest.raises(ValidationError):
            Profile(gender="robot")


class TestAppSettings:
    """Tests for AppSettings model."""

    def test_defaults(self):
        """Defaults pick the two default styles and the stepper."""
        settings = AppSettings()
        assert settings.modes.mode1 == "Pilsner"
        assert settings.modes.mode2 == "Hazy IPA"
        assert settings.base_exercise == "stepper"


class TestLogEntry:
    """Tests for LogEntry model."""

    def test_valid_entry(self):
        """Valid entry is created with defaults."""
        entry = LogEntry(timestamp_ms=1_700_000_000_000, kcal=-98.0, style="Pilsner")
        assert entry.id is not None  # Auto-generated UUID
        assert entry.rating == 0
        assert entry.memo is None

    def test_rating_out_of_range_rejected(self):
        """Rating must be within 0-5."""
        with pytest.raises(ValidationError):
            LogEntry(timestamp_ms=0, kcal=-98.0, rating=6)

    def test_negative_amount_rejected(self):
        """Custom amount cannot be negative."""
        with pytest.raises(ValidationError):
            LogEntry(timestamp_ms=0, kcal=-98.0, raw_amount=-1)


class TestCheckEntry:
    """Tests for CheckEntry model."""

    def test_defaults(self):
        """All flags default to False."""
        check = CheckEntry(timestamp_ms=0)
        assert check.is_dry_day is False
        assert check.exercised is False
        assert check.weight is None


class TestDayStatus:
    """Tests for DayStatus enum."""

    def test_values(self):
        """Status values match the calendar legend keys."""
        assert {s.value for s in DayStatus} == {
            "none",
            "rest",
            "rest_exercise",
            "drink",
            "drink_exercise",
            "drink_exercise_success",
            "exercise",
        }
