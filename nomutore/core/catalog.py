"""Static Catalogs - Exercise, drink-style and serving-size tables.

Read-only tables keyed by identifier. Lookups never fail: an unknown key
resolves to the documented default entry.
"""

from typing import Optional

from .models import (
    DEFAULT_EXERCISE,
    DEFAULT_STYLE,
    DrinkStyle,
    ExerciseDefinition,
    ServingSize,
)


# Pure alcohol per can: CAN_ML * abv/100 * ALCOHOL_DENSITY grams, 7 kcal/g
CAN_ML = 350.0
ALCOHOL_DENSITY = 0.8
KCAL_PER_GRAM_ALCOHOL = 7.0

# Used when a malformed catalog entry would yield a non-positive can size
MIN_UNIT_KCAL = 1.0


EXERCISES: dict[str, ExerciseDefinition] = {
    e.key: e
    for e in (
        ExerciseDefinition(key="stepper", label="Stepper", icon="🏃‍♀️", met_value=6.0),
        ExerciseDefinition(key="walking", label="Walking", icon="🚶", met_value=3.5),
        ExerciseDefinition(key="brisk_walking", label="Brisk walking", icon="🚶‍♀️", met_value=4.3),
        ExerciseDefinition(key="running", label="Running", icon="🏃", met_value=7.0),
        ExerciseDefinition(key="cycling", label="Cycling", icon="🚴", met_value=7.5),
        ExerciseDefinition(key="swimming", label="Swimming", icon="🏊", met_value=8.0),
        ExerciseDefinition(key="hiit", label="HIIT", icon="🔥", met_value=8.0),
        ExerciseDefinition(key="strength", label="Strength training", icon="🏋️", met_value=5.0),
        ExerciseDefinition(key="yoga", label="Yoga", icon="🧘", met_value=2.5),
        ExerciseDefinition(key="cleaning", label="Housework", icon="🧹", met_value=3.3),
    )
}

DRINK_STYLES: dict[str, DrinkStyle] = {
    s.key: s
    for s in (
        DrinkStyle(key="Pilsner", icon="🍺", abv=5.0, liquid_color="linear-gradient(to top, #f59e0b, #fcd34d)"),
        DrinkStyle(key="Lager", icon="🍺", abv=5.0, liquid_color="linear-gradient(to top, #d97706, #fbbf24)"),
        DrinkStyle(key="Low-Malt", icon="🥫", abv=5.5, liquid_color="linear-gradient(to top, #fbbf24, #fef08a)"),
        DrinkStyle(key="Pale Ale", icon="🍻", abv=5.5, liquid_color="linear-gradient(to top, #ea580c, #fdba74)"),
        DrinkStyle(key="IPA", icon="🍻", abv=6.5, liquid_color="linear-gradient(to top, #c2410c, #fb923c)"),
        DrinkStyle(
            key="Hazy IPA", icon="🍹", abv=7.0, is_hazy=True,
            liquid_color="linear-gradient(to top, #f59e0b, #fde68a)",
        ),
        DrinkStyle(
            key="Weizen", icon="🌾", abv=5.5, is_hazy=True,
            liquid_color="linear-gradient(to top, #fbbf24, #fef3c7)",
        ),
        DrinkStyle(
            key="Belgian White", icon="🍊", abv=5.0, is_hazy=True,
            liquid_color="linear-gradient(to top, #fde68a, #fffbeb)",
        ),
        DrinkStyle(key="Stout", icon="☕", abv=6.0, liquid_color="linear-gradient(to top, #1c1917, #57534e)"),
        DrinkStyle(key="Sour", icon="🍋", abv=4.5, liquid_color="linear-gradient(to top, #e11d48, #fda4af)"),
        DrinkStyle(key="Double IPA", icon="💣", abv=8.5, liquid_color="linear-gradient(to top, #9a3412, #f97316)"),
    )
}

SIZES: dict[str, ServingSize] = {
    s.key: s
    for s in (
        ServingSize(key="135", label="135ml (Small glass)", ml=135),
        ServingSize(key="250", label="250ml (Mini can)", ml=250),
        ServingSize(key="330", label="330ml (Bottle)", ml=330),
        ServingSize(key="350", label="350ml (Can)", ml=350),
        ServingSize(key="473", label="473ml (US pint)", ml=473),
        ServingSize(key="500", label="500ml (Tall can)", ml=500),
        ServingSize(key="568", label="568ml (UK pint)", ml=568),
        ServingSize(key="633", label="633ml (Large bottle)", ml=633),
    )
}


def is_known_exercise(key: Optional[str]) -> bool:
    return key is not None and key in EXERCISES


def is_known_style(key: Optional[str]) -> bool:
    return key is not None and key in DRINK_STYLES


def resolve_exercise(key: Optional[str]) -> ExerciseDefinition:
    """Look up an exercise, falling back to the default exercise."""
    if key is not None and key in EXERCISES:
        return EXERCISES[key]
    return EXERCISES[DEFAULT_EXERCISE]


def resolve_style(key: Optional[str]) -> DrinkStyle:
    """Look up a drink style, falling back to the default style."""
    if key is not None and key in DRINK_STYLES:
        return DRINK_STYLES[key]
    return DRINK_STYLES[DEFAULT_STYLE]


def find_exercise_by_label(text: Optional[str]) -> Optional[ExerciseDefinition]:
    """Find the first exercise whose label appears in free text.

    Old records only stored a display name like "Stepper 30 min".
    """
    if not text:
        return None
    return next((e for e in EXERCISES.values() if e.label in text), None)


def can_kcal(style: DrinkStyle) -> float:
    """kcal of the pure alcohol in one can of the style.

    Args:
        style: Drink style definition

    Returns:
        kcal per can, never below MIN_UNIT_KCAL
    """
    kcal = CAN_ML * style.abv / 100 * ALCOHOL_DENSITY * KCAL_PER_GRAM_ALCOHOL
    if not kcal > 0:
        return MIN_UNIT_KCAL
    return kcal
