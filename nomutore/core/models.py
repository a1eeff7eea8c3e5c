"""Core Data Models - Pydantic models for type safety.

All models are plain value objects with no behavior beyond validation.
Records (LogEntry, CheckEntry) come from the storage collaborator; views
(TankView, Grade, ...) are produced by the engine for presentation.
"""

from datetime import date as DateType
from enum import Enum
from typing import Literal, Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_WEIGHT_KG = 65.0
DEFAULT_HEIGHT_CM = 165.0
DEFAULT_AGE_YEARS = 30

DEFAULT_EXERCISE = "stepper"
DEFAULT_STYLE = "Pilsner"
DEFAULT_MODE2_STYLE = "Hazy IPA"

Mode = Literal["mode1", "mode2"]
ChartRange = Literal["1w", "1m", "all"]


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class DayStatus(str, Enum):
    """Calendar status of a single day."""

    NONE = "none"
    REST = "rest"
    REST_EXERCISE = "rest_exercise"
    DRINK = "drink"
    DRINK_EXERCISE = "drink_exercise"
    DRINK_EXERCISE_SUCCESS = "drink_exercise_success"
    EXERCISE = "exercise"


class Profile(BaseModel):
    """User body profile used to scale energy expenditure."""

    weight_kg: float = Field(default=DEFAULT_WEIGHT_KG, gt=0, description="Body weight in kg")
    height_cm: float = Field(default=DEFAULT_HEIGHT_CM, gt=0, description="Height in cm")
    age_years: int = Field(default=DEFAULT_AGE_YEARS, gt=0, description="Age in years")
    gender: Gender = Field(default=Gender.OTHER)
    timezone: Optional[str] = Field(
        default=None, description="IANA zone for day matching; None = process local time"
    )


class DrinkModes(BaseModel):
    """The two drink styles the tank can be shown in."""

    mode1: str = DEFAULT_STYLE
    mode2: str = DEFAULT_MODE2_STYLE


class AppSettings(BaseModel):
    """Display preferences supplied by the storage collaborator."""

    modes: DrinkModes = Field(default_factory=DrinkModes)
    base_exercise: str = Field(default=DEFAULT_EXERCISE, description="Exercise used for minute conversions")
    default_record_exercise: str = Field(default=DEFAULT_EXERCISE)


class ExerciseDefinition(BaseModel):
    """An entry of the fixed exercise catalog."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    icon: str
    met_value: float = Field(gt=0, description="Metabolic equivalent of the activity")


class DrinkStyle(BaseModel):
    """An entry of the fixed drink-style catalog."""

    model_config = ConfigDict(frozen=True)

    key: str
    icon: str
    abv: float = Field(ge=0, description="Typical alcohol by volume in percent")
    liquid_color: str = Field(description="CSS background for the tank liquid")
    is_hazy: bool = False


class ServingSize(BaseModel):
    """A preset serving size for drink logs."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    ml: float = Field(gt=0)


class LogEntry(BaseModel):
    """A drink (negative kcal) or exercise (positive kcal) record."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp_ms: int = Field(description="Unix epoch milliseconds")
    kcal: float = Field(description="Negative = alcohol debt, positive = exercise credit")
    name: Optional[str] = None
    exercise_key: Optional[str] = None
    style: Optional[str] = None
    size: Optional[str] = Field(default=None, description="Serving size key, e.g. '350'")
    raw_amount: Optional[float] = Field(default=None, ge=0, description="Custom amount in ml")
    raw_minutes: Optional[float] = Field(default=None, ge=0, description="Minutes as entered")
    abv: Optional[float] = Field(default=None, ge=0)
    count: Optional[int] = Field(default=None, ge=0)
    brewery: Optional[str] = None
    brand: Optional[str] = None
    rating: int = Field(default=0, ge=0, le=5)
    memo: Optional[str] = None


class CheckEntry(BaseModel):
    """A daily condition check-in."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp_ms: int = Field(description="Unix epoch milliseconds")
    is_dry_day: bool = False
    waist_ease: bool = False
    foot_lightness: bool = False
    water_ok: bool = False
    fiber_ok: bool = False
    exercised: bool = Field(default=False, description="Exercised on a dry day without logging it")
    weight: Optional[float] = Field(default=None, gt=0)


class DayRecord(BaseModel):
    """Everything recorded on one calendar day."""

    day: DateType
    logs: list[LogEntry] = Field(default_factory=list)
    check: Optional[CheckEntry] = None


class TankView(BaseModel):
    """Current balance expressed as cans of the active drink style."""

    can_count: float = Field(description="Signed; negative = cans owed")
    display_minutes: float = Field(description="Balance in minutes of the base exercise")
    base_ex_data: ExerciseDefinition
    unit_kcal: float = Field(gt=0, description="kcal of one can of the target style")
    target_style: str
    liquid_color: str
    is_hazy: bool


class TankMessage(BaseModel):
    """Motivational message tier for the tank."""

    tier: Literal["starting", "almost", "one_can", "plenty", "debt", "deep_debt"]
    text: str
    one_can_minutes: int = Field(ge=0, description="Base-exercise minutes to burn one can")


class Grade(BaseModel):
    """Liver rank derived from recent qualifying days."""

    rank: Literal["S", "A", "B", "C", "Rookie"]
    label: str
    color: str
    bg: str
    current: int = Field(ge=0, description="Qualifying days in the grading window")
    next: Optional[int] = Field(default=None, description="Threshold of the next rank; None at the top")
    raw_rate: Optional[float] = None
    target_rate: Optional[float] = None
    is_rookie: bool = False


class RecentCheck(BaseModel):
    """The check-in shown on the condition card."""

    check: CheckEntry
    kind: Literal["today", "yesterday"]


class CheckMessage(BaseModel):
    """Condition summary for a check-in."""

    kind: Literal["great", "partial", "poor", "dry_great", "dry_tired"]
    score: int = Field(ge=0, le=4)
    text: str


class DayStamp(BaseModel):
    """One cell of the weekly stamp row."""

    day: DateType
    status: DayStatus
    is_today: bool = False


class WeeklyStamps(BaseModel):
    """The last seven days with streak information."""

    days: list[DayStamp]
    dry_count: int = Field(ge=0, description="Dry days in the week, today excluded")
    message: Literal["excellent", "good", "rest"]
    streak: int = Field(ge=0)
    multiplier: float = Field(ge=1.0)


class HeatmapMonth(BaseModel):
    """A calendar month of day statuses."""

    year: int
    month: int = Field(ge=1, le=12)
    leading_blanks: int = Field(ge=0, le=6, description="Weekday of the 1st, Sunday = 0")
    cells: list[DayStamp]


class ChartPoint(BaseModel):
    """One day of the balance history chart, in base-exercise minutes."""

    day: DateType
    label: str
    plus_minutes: float = 0
    minus_minutes: float = 0
    balance_minutes: float = 0
    weight: Optional[float] = None


class LogRow(BaseModel):
    """Display row for the log history list."""

    id: str
    timestamp_ms: int
    name: Optional[str] = None
    icon: str
    is_debt: bool
    kind: Literal["debt", "repay"]
    sign: Literal["-", "+"]
    display_minutes: int = Field(ge=0)


class Shortcut(BaseModel):
    """A frequently logged (style, size) pair."""

    style: str
    size: str
    size_label: str
    uses: int = Field(ge=1)


class InputSuggestions(BaseModel):
    """Previously entered breweries and brands."""

    breweries: list[str] = Field(default_factory=list)
    brands: list[str] = Field(default_factory=list)
