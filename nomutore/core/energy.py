"""Energy Calculations - Pure functions for burn rates and unit conversion.

Converts between kcal and minutes of exercise using a profile-adjusted MET
model, and normalizes raw stored records into canonical kcal-based entries.

All functions are pure: same input always produces same output, no side effects.
"""

import math
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .catalog import (
    ALCOHOL_DENSITY,
    KCAL_PER_GRAM_ALCOHOL,
    SIZES,
    resolve_exercise,
)
from .models import (
    DEFAULT_AGE_YEARS,
    DEFAULT_EXERCISE,
    DEFAULT_HEIGHT_CM,
    DEFAULT_WEIGHT_KG,
    CheckEntry,
    Gender,
    LogEntry,
    Profile,
)


# Records written before kcal was stored carry stepper minutes instead
LEGACY_MET = 6.0

DEFAULT_PROFILE = Profile()


def to_finite(value: Any) -> Optional[float]:
    """Coerce a raw field to a finite float, or None if it is not one."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _positive(value: Any) -> Optional[float]:
    number = to_finite(value)
    if number is None or number <= 0:
        return None
    return number


def _non_negative(value: Any) -> Optional[float]:
    number = to_finite(value)
    if number is None or number < 0:
        return None
    return number


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
        if not math.isfinite(number):
            return None
        return str(int(number)) if number.is_integer() else str(number)
    return None


def _pick(raw: Mapping, *keys: str) -> Any:
    """Return the first non-None value among snake_case/camelCase aliases."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _valid_timezone(name: Any) -> Optional[str]:
    if not isinstance(name, str) or not name:
        return None
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return None
    return name


def resolve_profile(raw: Profile | Mapping | None) -> Profile:
    """Build a usable profile, replacing each invalid field with its default.

    Accepts a Profile, a mapping with snake_case or legacy keys
    (weight/height/age, weightKg/heightCm/ageYears), or None.

    Args:
        raw: Profile-like input from the storage collaborator

    Returns:
        A Profile whose numeric fields are all finite and positive
    """
    if raw is None:
        return DEFAULT_PROFILE
    if isinstance(raw, Profile):
        return raw
    if not isinstance(raw, Mapping):
        return DEFAULT_PROFILE

    weight = _positive(_pick(raw, "weight_kg", "weightKg", "weight"))
    height = _positive(_pick(raw, "height_cm", "heightCm", "height"))
    age = _positive(_pick(raw, "age_years", "ageYears", "age"))

    gender_raw = _pick(raw, "gender")
    try:
        gender = Gender(gender_raw)
    except ValueError:
        gender = Gender.OTHER

    return Profile(
        weight_kg=weight if weight is not None else DEFAULT_WEIGHT_KG,
        height_cm=height if height is not None else DEFAULT_HEIGHT_CM,
        age_years=max(1, round(age)) if age is not None else DEFAULT_AGE_YEARS,
        gender=gender,
        timezone=_valid_timezone(_pick(raw, "timezone", "tz")),
    )


def burn_rate(met: float, profile: Profile | Mapping | None) -> float:
    """Calculate kcal burned per minute for an activity.

    Uses the ACSM approximation: kcal/min = MET * weight_kg * 3.5 / 200.

    Args:
        met: Metabolic equivalent of the activity
        profile: User profile (invalid or missing fields use defaults)

    Returns:
        kcal per minute, always > 0
    """
    weight = resolve_profile(profile).weight_kg
    met_value = _positive(met)
    if met_value is None:
        met_value = resolve_exercise(DEFAULT_EXERCISE).met_value
    return met_value * weight * 3.5 / 200


def convert_kcal_to_minutes(kcal: float, exercise_key: Optional[str], profile: Profile | Mapping | None) -> float:
    """Convert kcal into minutes of the given exercise.

    The sign of kcal is preserved and the result is not rounded, so repeated
    conversions do not accumulate error. Callers round for display.

    Args:
        kcal: Energy amount (usually absolute, signed sums are allowed)
        exercise_key: Catalog key; unknown keys use the default exercise
        profile: User profile

    Returns:
        Minutes of exercise (0 for 0 or non-finite input)
    """
    amount = to_finite(kcal)
    if not amount:
        return 0.0
    met = resolve_exercise(exercise_key).met_value
    return amount / burn_rate(met, profile)


def convert_minutes_to_kcal(minutes: float, exercise_key: Optional[str], profile: Profile | Mapping | None) -> float:
    """Convert minutes of the given exercise into kcal."""
    amount = to_finite(minutes)
    if not amount:
        return 0.0
    met = resolve_exercise(exercise_key).met_value
    return amount * burn_rate(met, profile)


def calculate_exercise_kcal(
    minutes: float,
    exercise_key: Optional[str],
    profile: Profile | Mapping | None,
    multiplier: float = 1.0,
) -> float:
    """Calculate the kcal credit earned by an exercise session.

    Args:
        minutes: Duration of the session
        exercise_key: Catalog key of the exercise
        profile: User profile
        multiplier: Streak bonus multiplier (values below 1.0 are ignored)

    Returns:
        Positive kcal credit, 0 for malformed or negative minutes
    """
    duration = _non_negative(minutes)
    if duration is None:
        return 0.0
    bonus = to_finite(multiplier)
    if bonus is None or bonus < 1.0:
        bonus = 1.0
    return convert_minutes_to_kcal(duration, exercise_key, profile) * bonus


def resolve_size_ml(size: Any) -> float:
    """Resolve a serving-size key ("350") or a raw ml amount to ml."""
    key = _as_text(size)
    if key is not None and key in SIZES:
        return SIZES[key].ml
    amount = _non_negative(size)
    return amount if amount is not None else 0.0


def calculate_drink_kcal(size_ml: float, abv: float, count: float = 1) -> float:
    """Calculate the kcal debt of a drink.

    kcal = ml * abv/100 * 0.8 (g/ml ethanol) * 7 (kcal/g) * count

    Args:
        size_ml: Serving size in ml
        abv: Alcohol by volume in percent
        count: Number of servings

    Returns:
        Non-positive kcal (debt); malformed fields count as zero
    """
    ml = _non_negative(size_ml) or 0.0
    strength = _non_negative(abv) or 0.0
    servings = _non_negative(count) or 0.0
    kcal = ml * strength / 100 * ALCOHOL_DENSITY * KCAL_PER_GRAM_ALCOHOL * servings
    return -kcal if kcal else 0.0


def _timestamp(raw: Mapping) -> int:
    value = to_finite(_pick(raw, "timestamp_ms", "timestampMs", "timestamp"))
    if value is None:
        raise ValueError("Record has no usable timestamp")
    try:
        datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise ValueError(f"Timestamp out of range: {value}") from e
    return int(value)


def _flag(value: Any) -> bool:
    """Strict boolean: only True or the number 1 count as set."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return False


def normalize_log(raw: LogEntry | Mapping, profile: Profile | Mapping | None) -> LogEntry:
    """Normalize a stored log record into a canonical LogEntry.

    Records carrying kcal keep it; legacy records carrying only minutes
    are converted with the stepper MET. Malformed optional fields are
    dropped and a malformed amount counts as zero.

    Args:
        raw: Stored record (snake_case or camelCase keys)
        profile: User profile for the legacy minutes conversion

    Returns:
        LogEntry with a signed kcal value

    Raises:
        ValueError: If the record has no usable timestamp
    """
    if isinstance(raw, LogEntry):
        return raw

    kcal = to_finite(raw.get("kcal"))
    if kcal is None:
        minutes = to_finite(raw.get("minutes"))
        kcal = minutes * burn_rate(LEGACY_MET, profile) if minutes is not None else 0.0

    rating = to_finite(raw.get("rating"))
    count = _non_negative(raw.get("count"))

    data: dict[str, Any] = {
        "timestamp_ms": _timestamp(raw),
        "kcal": kcal,
        "name": _as_text(raw.get("name")),
        "exercise_key": _as_text(_pick(raw, "exercise_key", "exerciseKey")),
        "style": _as_text(raw.get("style")),
        "size": _as_text(raw.get("size")),
        "raw_amount": _non_negative(_pick(raw, "raw_amount", "rawAmount")),
        "raw_minutes": _non_negative(_pick(raw, "raw_minutes", "rawMinutes")),
        "abv": _non_negative(raw.get("abv")),
        "count": int(count) if count is not None else None,
        "brewery": _as_text(raw.get("brewery")),
        "brand": _as_text(raw.get("brand")),
        "rating": int(rating) if rating is not None and 0 <= rating <= 5 else 0,
        "memo": _as_text(raw.get("memo")),
    }
    record_id = _as_text(raw.get("id"))
    if record_id:
        data["id"] = record_id
    return LogEntry(**data)


def normalize_check(raw: CheckEntry | Mapping) -> CheckEntry:
    """Normalize a stored check-in record into a CheckEntry.

    Raises:
        ValueError: If the record has no usable timestamp
    """
    if isinstance(raw, CheckEntry):
        return raw

    data: dict[str, Any] = {
        "timestamp_ms": _timestamp(raw),
        "is_dry_day": _flag(_pick(raw, "is_dry_day", "isDryDay")),
        "waist_ease": _flag(_pick(raw, "waist_ease", "waistEase")),
        "foot_lightness": _flag(_pick(raw, "foot_lightness", "footLightness")),
        "water_ok": _flag(_pick(raw, "water_ok", "waterOk")),
        "fiber_ok": _flag(_pick(raw, "fiber_ok", "fiberOk")),
        "exercised": _flag(raw.get("exercised")),
        "weight": _positive(raw.get("weight")),
    }
    record_id = _as_text(raw.get("id"))
    if record_id:
        data["id"] = record_id
    return CheckEntry(**data)
