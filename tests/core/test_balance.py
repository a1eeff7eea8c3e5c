"""Unit tests for the balance ledger and the tank - pure functions, no mocks needed."""

import pytest

from nomutore.core.balance import (
    calculate_balance,
    get_tank_display_data,
    get_tank_message,
    tank_fill_percent,
)
from nomutore.core import catalog
from nomutore.core.catalog import MIN_UNIT_KCAL, can_kcal
from nomutore.core.models import AppSettings, DrinkModes, DrinkStyle, LogEntry, Profile


PROFILE = Profile(weight_kg=65)
SETTINGS = AppSettings()


def view(cans: float):
    return get_tank_display_data(cans * 98.0, "mode1", SETTINGS, PROFILE)


class TestCalculateBalance:
    """Tests for calculate_balance."""

    def test_empty(self):
        """No logs is a zero balance."""
        assert calculate_balance([]) == 0

    def test_sum(self):
        """Balance is the sum of signed kcal."""
        logs = [
            LogEntry(timestamp_ms=3, kcal=-98),
            LogEntry(timestamp_ms=1, kcal=204.75),
            LogEntry(timestamp_ms=2, kcal=-50),
        ]
        assert calculate_balance(logs) == pytest.approx(56.75)


class TestTankDisplay:
    """Tests for get_tank_display_data."""

    def test_mode1_pilsner(self):
        """Two Pilsner cans of credit."""
        tank = get_tank_display_data(196.0, "mode1", SETTINGS, PROFILE)
        assert tank.can_count == pytest.approx(2.0)
        assert tank.unit_kcal == pytest.approx(98.0)
        assert tank.target_style == "Pilsner"
        assert tank.is_hazy is False
        assert tank.display_minutes == pytest.approx(196.0 / 6.825)
        assert tank.base_ex_data.key == "stepper"

    def test_mode2_hazy(self):
        """The second mode uses its own style."""
        tank = get_tank_display_data(137.2, "mode2", SETTINGS, PROFILE)
        assert tank.target_style == "Hazy IPA"
        assert tank.is_hazy is True
        assert tank.unit_kcal == pytest.approx(137.2)
        assert tank.can_count == pytest.approx(1.0)

    def test_sign_matches_balance(self):
        """can_count and display_minutes share the balance's sign."""
        for balance in (-500.0, -0.1, 0.0, 0.1, 750.0):
            tank = get_tank_display_data(balance, "mode1", SETTINGS, PROFILE)
            for value in (tank.can_count, tank.display_minutes):
                if balance > 0:
                    assert value > 0
                elif balance < 0:
                    assert value < 0
                else:
                    assert value == 0

    def test_unknown_style_and_exercise_fall_back(self):
        """Unknown keys use the default style and exercise."""
        settings = AppSettings(modes=DrinkModes(mode1="Mead"), base_exercise="pogo")
        tank = get_tank_display_data(98.0, "mode1", settings, PROFILE)
        assert tank.target_style == "Pilsner"
        assert tank.base_ex_data.key == "stepper"

    def test_unknown_mode_uses_mode1(self):
        """Anything but mode2 shows the first style."""
        tank = get_tank_display_data(98.0, "mode3", SETTINGS, PROFILE)
        assert tank.target_style == "Pilsner"

    def test_alcohol_free_style_uses_minimum_unit(self, monkeypatch):
        """A style with no alcohol still divides by a positive can size."""
        style = DrinkStyle(key="X", icon="", abv=0, liquid_color="")
        assert can_kcal(style) == MIN_UNIT_KCAL

        monkeypatch.setitem(catalog.DRINK_STYLES, "X", style)
        settings = AppSettings(modes=DrinkModes(mode1="X"))
        for balance in (-50.0, 0.0, 50.0):
            tank = get_tank_display_data(balance, "mode1", settings, PROFILE)
            assert tank.target_style == "X"
            assert tank.unit_kcal == MIN_UNIT_KCAL
            assert tank.can_count == balance


class TestTankMessage:
    """Tests for get_tank_message."""

    @pytest.mark.parametrize(
        "cans,tier",
        [
            (0.3, "starting"),
            (0.7, "almost"),
            (1.5, "one_can"),
            (2.5, "plenty"),
            (-1.0, "debt"),
            (-2.0, "deep_debt"),
            (0.0, "debt"),
        ],
    )
    def test_tiers(self, cans, tier):
        """Each can range maps to its tier."""
        assert get_tank_message(view(cans), PROFILE).tier == tier

    def test_one_can_minutes(self):
        """Minutes to burn one can are rounded."""
        message = get_tank_message(view(-2.0), PROFILE)
        assert message.one_can_minutes == 14
        assert "14 min" in message.text


class TestTankFillPercent:
    """Tests for tank_fill_percent."""

    def test_empty_or_debt(self):
        """Zero or debt shows an empty tank."""
        assert tank_fill_percent(0) == 0
        assert tank_fill_percent(-1) == 0

    def test_minimum_and_maximum(self):
        """Small credit is visible; large credit is capped."""
        assert tank_fill_percent(0.01) == 5.0
        assert tank_fill_percent(1.5) == pytest.approx(50.0)
        assert tank_fill_percent(4) == 100.0
