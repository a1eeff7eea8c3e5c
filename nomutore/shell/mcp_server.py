"""MCP Server - Tool definitions for assistant integration.

Defines the MCP tools a local assistant can invoke to record drinks,
exercise and check-ins, and to read the balance, rank and calendar views.
"""

import logging
from datetime import date, datetime, time

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from ..core.balance import (
    calculate_balance,
    get_tank_display_data,
    get_tank_message,
    tank_fill_percent,
)
from ..core.catalog import (
    DRINK_STYLES,
    EXERCISES,
    SIZES,
    is_known_exercise,
    is_known_style,
    resolve_exercise,
    resolve_style,
)
from ..core.checks import get_check_message, select_recent_check
from ..core.days import classify_day, group_by_day, local_date, profile_zone
from ..core.energy import calculate_drink_kcal, calculate_exercise_kcal, resolve_size_ml
from ..core.grading import get_recent_grade, grade_progress
from ..core.models import AppSettings, CheckEntry, DrinkModes, Gender, LogEntry, Profile
from ..core.reports import (
    CHART_RANGE_DAYS,
    build_balance_history,
    build_heatmap_month,
    build_weekly_stamps,
    describe_log,
    input_suggestions,
    quick_shortcuts,
    weight_axis_bounds,
)
from ..core.streak import get_current_streak, get_streak_multiplier
from .snapshot import SnapshotStore


logger = logging.getLogger(__name__)

mcp = FastMCP(
    "nomutore",
    instructions="""NomuTore - Drink now, work it off later.

Every drink logged creates a kcal "debt"; every exercise session pays it back.
Use these tools to log drinks, exercise and daily check-ins, and to show the
user their tank (cans they can afford), liver rank, streak and calendar.

On first use, call setup_profile so burn rates match the user's weight.
After logging, show the updated dashboard.""",
)

# Lazy-initialized store
_store: SnapshotStore | None = None


def get_store() -> SnapshotStore:
    """Get or create the snapshot store."""
    global _store
    if _store is None:
        _store = SnapshotStore()
    return _store


def _parse_day(date_str: str | None) -> date | None:
    """Parse YYYY-MM-DD, raising ValueError on bad input."""
    if date_str is None:
        return None
    return date.fromisoformat(date_str)


def _timestamp_for(day: date | None, profile: Profile) -> int:
    """Epoch ms for a record: now for today, local noon for an explicit day."""
    zone = profile_zone(profile)
    if day is None:
        moment = datetime.now(tz=zone)
    else:
        moment = datetime.combine(day, time(12, 0), tzinfo=zone)
    return int(moment.timestamp() * 1000)


# ==================== Settings Tools ====================


@mcp.tool()
def setup_profile(
    weight_kg: float,
    height_cm: float,
    age_years: int,
    gender: str = "other",
    timezone: str | None = None,
) -> dict:
    """Configure the user's body profile.

    Burn rates scale with body weight, so call this on first use.

    Args:
        weight_kg: Body weight in kg (e.g., 65)
        height_cm: Height in cm (e.g., 170)
        age_years: Age in years
        gender: "male", "female" or "other"
        timezone: IANA time zone used for calendar days (e.g., "Asia/Tokyo")

    Returns:
        The stored profile
    """
    try:
        profile = Profile(
            weight_kg=weight_kg,
            height_cm=height_cm,
            age_years=age_years,
            gender=Gender(gender),
            timezone=timezone,
        )
    except (ValidationError, ValueError) as e:
        logger.warning("Rejected profile: %s", str(e))
        return {"error": "Invalid profile. Weight, height and age must be positive."}

    if profile_zone(profile) is None and timezone:
        logger.warning("Unknown time zone %s, using local time", timezone)
        profile = profile.model_copy(update={"timezone": None})

    if not get_store().save_profile(profile):
        return {"error": "Failed to save profile. Please try again."}
    return {"profile": profile.model_dump(mode="json")}


@mcp.tool()
def set_preferences(
    mode1: str | None = None,
    mode2: str | None = None,
    base_exercise: str | None = None,
    default_record_exercise: str | None = None,
) -> dict:
    """Update drink modes and exercise preferences. Only provided fields change.

    Args:
        mode1: Drink style for the first tank mode (e.g., "Pilsner")
        mode2: Drink style for the second tank mode (e.g., "Hazy IPA")
        base_exercise: Exercise used to express balances in minutes
        default_record_exercise: Exercise preselected when logging

    Returns:
        The stored settings
    """
    store = get_store()
    settings = store.load().settings

    for style in (mode1, mode2):
        if style is not None and not is_known_style(style):
            logger.warning("Unknown drink style %s, falling back to %s", style, resolve_style(style).key)
    for key in (base_exercise, default_record_exercise):
        if key is not None and not is_known_exercise(key):
            logger.warning("Unknown exercise %s, falling back to %s", key, resolve_exercise(key).key)

    updated = AppSettings(
        modes=DrinkModes(
            mode1=resolve_style(mode1).key if mode1 is not None else settings.modes.mode1,
            mode2=resolve_style(mode2).key if mode2 is not None else settings.modes.mode2,
        ),
        base_exercise=(
            resolve_exercise(base_exercise).key if base_exercise is not None else settings.base_exercise
        ),
        default_record_exercise=(
            resolve_exercise(default_record_exercise).key
            if default_record_exercise is not None
            else settings.default_record_exercise
        ),
    )

    if not store.save_settings(updated):
        return {"error": "Failed to save settings. Please try again."}
    return {"settings": updated.model_dump(mode="json")}


@mcp.tool()
def get_settings() -> dict:
    """Retrieve the profile, preferences and the available catalog keys.

    Returns:
        Dictionary with profile, settings, exercises, styles and sizes
    """
    snapshot = get_store().load()
    return {
        "profile": snapshot.profile.model_dump(mode="json"),
        "settings": snapshot.settings.model_dump(mode="json"),
        "exercises": {k: {"label": e.label, "met": e.met_value} for k, e in EXERCISES.items()},
        "styles": {k: {"abv": s.abv} for k, s in DRINK_STYLES.items()},
        "sizes": {k: s.label for k, s in SIZES.items()},
    }


# ==================== Logging Tools ====================


@mcp.tool()
def log_drink(
    style: str | None = None,
    size: str = "350",
    count: int = 1,
    abv: float | None = None,
    amount_ml: float | None = None,
    brewery: str | None = None,
    brand: str | None = None,
    rating: int = 0,
    memo: str | None = None,
    date_str: str | None = None,
) -> dict:
    """Log a drink. This adds kcal debt to the balance.

    Args:
        style: Drink style (defaults to the first tank mode's style)
        size: Serving size key (e.g., "350", "500")
        count: Number of servings
        abv: Alcohol by volume in percent (defaults to the style's typical ABV)
        amount_ml: Custom amount in ml, overrides size
        brewery: Optional brewery name
        brand: Optional beer name
        rating: 0-5 stars
        memo: Optional note
        date_str: Day of the drink in YYYY-MM-DD (defaults to now)

    Returns:
        The created entry and the updated balance
    """
    try:
        day = _parse_day(date_str)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}
    if count < 1:
        return {"error": "Count must be at least 1."}
    if not 0 <= rating <= 5:
        return {"error": "Rating must be between 0 and 5."}
    if (abv is not None and abv < 0) or (amount_ml is not None and not amount_ml > 0):
        return {"error": "ABV and amount must be positive."}

    store = get_store()
    snapshot = store.load()

    style = style or snapshot.settings.modes.mode1
    if abv is None:
        if not is_known_style(style):
            logger.warning("Unknown drink style %s, using ABV of %s", style, resolve_style(style).key)
        abv = resolve_style(style).abv

    if amount_ml is not None:
        size_ml = amount_ml
        size_key = None
    else:
        if size not in SIZES:
            logger.warning("Unknown serving size %s, treating it as ml", size)
        size_ml = resolve_size_ml(size)
        size_key = size

    kcal = calculate_drink_kcal(size_ml, abv, count)
    if kcal == 0:
        return {"error": "Drink has no alcohol to log. Check size and ABV."}

    entry = LogEntry(
        timestamp_ms=_timestamp_for(day, snapshot.profile),
        kcal=kcal,
        name=f"{style} x{count}",
        style=style,
        size=size_key,
        raw_amount=amount_ml,
        abv=abv,
        count=count,
        brewery=brewery,
        brand=brand,
        rating=rating,
        memo=memo,
    )
    if store.add_log(entry) is None:
        return {"error": "Failed to log drink. Please try again."}

    balance = calculate_balance(snapshot.logs + [entry])
    return {
        "entry": entry.model_dump(mode="json"),
        "balance_kcal": round(balance, 1),
        "debt_minutes": describe_log(entry, snapshot.settings.base_exercise, snapshot.profile).display_minutes,
    }


@mcp.tool()
def log_exercise(
    minutes: float,
    exercise_key: str | None = None,
    apply_bonus: bool = True,
    memo: str | None = None,
    date_str: str | None = None,
) -> dict:
    """Log an exercise session. This pays back kcal debt.

    Args:
        minutes: Duration in minutes
        exercise_key: Exercise (defaults to the preferred record exercise)
        apply_bonus: Multiply the credit by the current streak bonus
        memo: Optional note
        date_str: Day of the session in YYYY-MM-DD (defaults to now)

    Returns:
        The created entry, the applied multiplier and the updated balance
    """
    try:
        day = _parse_day(date_str)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}
    if not minutes > 0:
        return {"error": "Minutes must be positive."}

    store = get_store()
    snapshot = store.load()

    key = exercise_key or snapshot.settings.default_record_exercise
    if not is_known_exercise(key):
        logger.warning("Unknown exercise %s, falling back to %s", key, resolve_exercise(key).key)
    exercise = resolve_exercise(key)

    multiplier = 1.0
    if apply_bonus:
        streak = get_current_streak(snapshot.logs, snapshot.checks, snapshot.profile)
        multiplier = get_streak_multiplier(streak)

    notes = [memo] if memo else []
    if multiplier > 1.0:
        notes.append(f"Bonus x{multiplier:.1f}")

    entry = LogEntry(
        timestamp_ms=_timestamp_for(day, snapshot.profile),
        kcal=calculate_exercise_kcal(minutes, exercise.key, snapshot.profile, multiplier),
        name=f"{exercise.label} {round(minutes)} min",
        exercise_key=exercise.key,
        raw_minutes=minutes,
        memo=" ".join(notes) or None,
    )
    if store.add_log(entry) is None:
        return {"error": "Failed to log exercise. Please try again."}

    balance = calculate_balance(snapshot.logs + [entry])
    return {
        "entry": entry.model_dump(mode="json"),
        "multiplier": multiplier,
        "balance_kcal": round(balance, 1),
    }


@mcp.tool()
def delete_log(log_id: str) -> dict:
    """Delete a drink or exercise entry.

    Args:
        log_id: The ID of the entry to delete

    Returns:
        Confirmation and the updated balance
    """
    store = get_store()
    if not store.delete_log(log_id):
        return {"error": "Entry not found or delete failed."}

    snapshot = store.load()
    return {"success": True, "balance_kcal": round(calculate_balance(snapshot.logs), 1)}


@mcp.tool()
def edit_log(
    log_id: str,
    memo: str | None = None,
    rating: int | None = None,
    brewery: str | None = None,
    brand: str | None = None,
    date_str: str | None = None,
) -> dict:
    """Edit the details of a logged entry. Only provided fields change.

    The kcal of an entry is fixed; delete and re-log to change the amount.

    Args:
        log_id: The ID of the entry to edit
        memo: New note
        rating: New 0-5 star rating
        brewery: New brewery name
        brand: New beer name
        date_str: Move the entry to this day (YYYY-MM-DD)

    Returns:
        The updated entry
    """
    try:
        day = _parse_day(date_str)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}
    if rating is not None and not 0 <= rating <= 5:
        return {"error": "Rating must be between 0 and 5."}

    updates = {
        k: v
        for k, v in {"memo": memo, "rating": rating, "brewery": brewery, "brand": brand}.items()
        if v is not None
    }
    store = get_store()
    if day is not None:
        updates["timestamp_ms"] = _timestamp_for(day, store.load().profile)
    if not updates:
        return {"error": "Nothing to update."}

    entry = store.update_log(log_id, updates)
    if entry is None:
        return {"error": "Entry not found or update failed."}
    return {"entry": entry.model_dump(mode="json")}


@mcp.tool()
def record_check(
    is_dry_day: bool,
    waist_ease: bool = False,
    foot_lightness: bool = False,
    water_ok: bool = False,
    fiber_ok: bool = False,
    weight: float | None = None,
    exercised: bool = False,
    date_str: str | None = None,
) -> dict:
    """Record the daily condition check-in. Replaces that day's earlier check-in.

    Args:
        is_dry_day: No alcohol that day
        waist_ease: Waist feels comfortable
        foot_lightness: Legs feel light
        water_ok: Drank enough water
        fiber_ok: Ate enough fiber
        weight: Optional body weight in kg
        exercised: Exercised without logging a session
        date_str: Day of the check-in in YYYY-MM-DD (defaults to today)

    Returns:
        The stored check-in and its condition message
    """
    try:
        day = _parse_day(date_str)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}
    if weight is not None and not weight > 0:
        return {"error": "Weight must be positive."}

    store = get_store()
    snapshot = store.load()

    check = CheckEntry(
        timestamp_ms=_timestamp_for(day, snapshot.profile),
        is_dry_day=is_dry_day,
        waist_ease=waist_ease,
        foot_lightness=foot_lightness,
        water_ok=water_ok,
        fiber_ok=fiber_ok,
        weight=weight,
        exercised=exercised,
    )
    if store.save_check(check) is None:
        return {"error": "Failed to save check-in. Please try again."}

    message = get_check_message(check, snapshot.logs, snapshot.profile)
    return {"check": check.model_dump(mode="json"), "message": message.model_dump()}


# ==================== Query Tools ====================


@mcp.tool()
def get_dashboard(mode: str = "mode1") -> dict:
    """Get the home screen: tank, liver rank, streak, check-in and weekly stamps.

    Args:
        mode: "mode1" or "mode2" - which drink style the tank counts in

    Returns:
        Dictionary with balance, tank, rank, check-in card and weekly stamps
    """
    if mode not in ("mode1", "mode2"):
        return {"error": "Mode must be 'mode1' or 'mode2'."}

    snapshot = get_store().load()
    profile = snapshot.profile

    balance = calculate_balance(snapshot.logs)
    tank = get_tank_display_data(balance, mode, snapshot.settings, profile)
    grade = get_recent_grade(snapshot.checks, snapshot.logs, profile)
    weekly = build_weekly_stamps(snapshot.logs, snapshot.checks, profile)

    recent = select_recent_check(snapshot.checks, profile)
    check_card = None
    if recent is not None:
        check_card = {
            "kind": recent.kind,
            "message": get_check_message(recent.check, snapshot.logs, profile).model_dump(),
            "weight": recent.check.weight,
        }

    return {
        "balance_kcal": round(balance, 1),
        "tank": {
            **tank.model_dump(mode="json"),
            "message": get_tank_message(tank, profile).model_dump(),
            "fill_percent": tank_fill_percent(tank.can_count),
        },
        "rank": {**grade.model_dump(), "progress": grade_progress(grade)},
        "streak": weekly.streak,
        "multiplier": weekly.multiplier,
        "check_in": check_card,
        "weekly": weekly.model_dump(mode="json"),
    }


@mcp.tool()
def get_day(date_str: str) -> dict:
    """Get a specific day's status, entries and check-in.

    Args:
        date_str: Date in YYYY-MM-DD format

    Returns:
        Dictionary with status, entries and check-in
    """
    try:
        day = date.fromisoformat(date_str)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    snapshot = get_store().load()
    record = group_by_day(snapshot.logs, snapshot.checks, snapshot.profile).get(day)
    base = snapshot.settings.base_exercise

    return {
        "date": date_str,
        "status": classify_day(record).value,
        "entries": [
            describe_log(log, base, snapshot.profile).model_dump()
            for log in (record.logs if record else [])
        ],
        "check": record.check.model_dump(mode="json") if record and record.check else None,
        "net_kcal": round(sum(log.kcal for log in record.logs), 1) if record else 0,
    }


@mcp.tool()
def get_heatmap(offset_months: int = 0) -> dict:
    """Get a month of day statuses for the calendar heatmap.

    Args:
        offset_months: 0 for this month, 1 for last month, and so on

    Returns:
        Dictionary with year, month, leading blanks and one cell per day
    """
    snapshot = get_store().load()
    month = build_heatmap_month(
        snapshot.logs, snapshot.checks, snapshot.profile, offset_months=max(0, offset_months)
    )
    return month.model_dump(mode="json")


@mcp.tool()
def get_balance_chart(chart_range: str = "1w") -> dict:
    """Get the balance history in minutes of the base exercise.

    Args:
        chart_range: "1w", "1m" or "all"

    Returns:
        Dictionary with chart points and the weight axis range
    """
    if chart_range not in CHART_RANGE_DAYS:
        return {"error": "Range must be '1w', '1m' or 'all'."}

    snapshot = get_store().load()
    points = build_balance_history(
        snapshot.logs,
        snapshot.checks,
        snapshot.profile,
        snapshot.settings.base_exercise,
        chart_range,
    )
    weight_min, weight_max = weight_axis_bounds(points)
    return {
        "base_exercise": snapshot.settings.base_exercise,
        "points": [
            {
                **p.model_dump(mode="json"),
                "plus_minutes": round(p.plus_minutes, 1),
                "minus_minutes": round(p.minus_minutes, 1),
                "balance_minutes": round(p.balance_minutes, 1),
            }
            for p in points
        ],
        "weight_axis": {"min": weight_min, "max": weight_max},
    }


@mcp.tool()
def get_history(limit: int = 50, offset: int = 0) -> dict:
    """Get logged entries, newest first.

    Args:
        limit: Maximum number of entries to return
        offset: Number of newest entries to skip

    Returns:
        Dictionary with entry rows and the total count
    """
    snapshot = get_store().load()
    ordered = sorted(snapshot.logs, key=lambda log: log.timestamp_ms, reverse=True)
    page = ordered[max(0, offset): max(0, offset) + max(0, limit)]
    base = snapshot.settings.base_exercise

    return {
        "entries": [
            {
                **describe_log(log, base, snapshot.profile).model_dump(),
                "date": local_date(log.timestamp_ms, snapshot.profile).isoformat(),
                "memo": log.memo,
            }
            for log in page
        ],
        "total_count": len(ordered),
    }


@mcp.tool()
def get_shortcuts(limit: int = 2) -> dict:
    """Get the user's usual drinks and previously entered breweries and brands.

    Args:
        limit: Maximum number of usual drinks

    Returns:
        Dictionary with shortcuts and input suggestions
    """
    snapshot = get_store().load()
    return {
        "shortcuts": [s.model_dump() for s in quick_shortcuts(snapshot.logs, limit)],
        "suggestions": input_suggestions(snapshot.logs).model_dump(),
    }

