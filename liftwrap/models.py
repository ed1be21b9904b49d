"""Pydantic models for LiftWrap: parsed rows, sessions, year summary and tool inputs/outputs."""

from __future__ import annotations

from datetime import date, datetime
from types import MappingProxyType
from typing import Annotated, Literal, Mapping, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer, computed_field

BodyPart = Literal["Legs", "Chest", "Back", "Shoulders", "Arms", "Core", "Cardio", "Other"]
BODY_PARTS: tuple[BodyPart, ...] = ("Legs", "Chest", "Back", "Shoulders", "Arms", "Core", "Cardio", "Other")

Units = Literal["kg", "lbs"]


# --- Ingest: one CSV record ---

class RawRow(BaseModel):
    """One export row after lenient coercion; text fields are kept verbatim."""
    date: str
    workout_name: str
    duration: str = ""
    duration_minutes: int = 0
    exercise_name: str = ""
    set_order: int = 0  # "W", "D", "F" and other markers -> 0
    weight: float = 0.0
    reps: int = 0
    distance: float = 0.0
    seconds: float = 0.0
    notes: str = ""
    workout_notes: str = ""
    rpe: float = 0.0


# --- Sessions ---

class WorkoutSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    exercise_name: str
    order: int = 0
    weight: float = 0.0
    reps: int = 0
    distance: float = 0.0
    seconds: float = 0.0
    notes: str = ""
    rpe: float = 0.0
    body_part: BodyPart = "Other"


class WorkoutSession(BaseModel):
    id: str  # "<raw date>-<workout name>"; grouping uses the (date, name) pair
    date: Optional[datetime]  # None when the export date matches no known format
    name: str
    duration_minutes: int = 0
    notes: str = ""
    sets: list[WorkoutSet] = Field(default_factory=list)


# --- Year summary ---


def _freeze(value: Mapping) -> Mapping:
    return MappingProxyType(dict(value))


def _thaw(value: Mapping) -> dict:
    return dict(value)


# Read-only after validation; dumps as a plain dict.
FrozenCounts = Annotated[Mapping[str, int], AfterValidator(_freeze), PlainSerializer(_thaw)]
FrozenBodyPartCounts = Annotated[Mapping[BodyPart, int], AfterValidator(_freeze), PlainSerializer(_thaw)]

class ExerciseCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    count: int


class HeaviestLift(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""  # empty name means no weighted set that year
    weight: float = 0.0
    date: Optional[datetime] = None


class LongestWorkout(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    duration_minutes: int = 0
    date: Optional[datetime] = None


class MostRepsSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    exercise_name: str = ""
    weight: float = 0.0
    reps: int = 0
    date: Optional[datetime] = None


class WeekStreak(BaseModel):
    model_config = ConfigDict(frozen=True)

    weeks: int = 0
    start: date
    end: date  # start + weeks * 7 days, approximate


class YearStats(BaseModel):
    """Immutable snapshot for one (sessions, year, units) query."""
    model_config = ConfigDict(frozen=True)

    year: int
    units: Units
    total_workouts: int = 0
    total_duration_minutes: int = 0
    total_volume: float = 0.0
    top_exercises: tuple[ExerciseCount, ...] = ()
    body_part_split: FrozenBodyPartCounts = Field(
        default_factory=lambda: MappingProxyType({p: 0 for p in BODY_PARTS})
    )
    active_months: FrozenCounts = Field(default_factory=lambda: MappingProxyType({}))  # "March": 12, first-seen order
    most_active_month: str = ""
    heaviest_lift: HeaviestLift = Field(default_factory=HeaviestLift)
    longest_workout: LongestWorkout = Field(default_factory=LongestWorkout)
    most_reps_set: MostRepsSet = Field(default_factory=MostRepsSet)
    longest_week_streak: WeekStreak
    workouts_by_date: FrozenCounts = Field(default_factory=lambda: MappingProxyType({}))  # "2025-01-06": 1, sparse

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_hours(self) -> int:
        return round(self.total_duration_minutes / 60)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_lift_data(self) -> bool:
        return bool(self.heaviest_lift.name)


# --- Heatmap ---

class HeatmapDay(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: date
    count: int = 0
    level: Literal[0, 1, 2, 3] = 0


# --- Tool inputs/outputs ---

class YearInReviewInput(BaseModel):
    content: str
    year: Optional[int] = None  # latest year in the data when omitted
    units: Optional[Units] = None  # LIFTWRAP_DEFAULT_UNITS when omitted
    include_heatmap: bool = False


class YearInReviewOutput(BaseModel):
    status: Literal["ok", "error"]
    error: Optional[str] = None
    sessions_detected: int = 0
    stats: Optional[YearStats] = None
    heatmap: Optional[list[HeatmapDay]] = None  # only when include_heatmap


class ListYearsInput(BaseModel):
    content: str


class ListYearsOutput(BaseModel):
    status: Literal["ok", "error"]
    error: Optional[str] = None
    years: list[int] = Field(default_factory=list)  # newest first
    default_year: Optional[int] = None


class ClassifyExerciseInput(BaseModel):
    name: str


class ClassifyExerciseOutput(BaseModel):
    name: str
    body_part: BodyPart
