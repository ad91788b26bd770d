"""Persisted profile data.

``ProfileData`` is the whole domain state of one profile. It is loaded once
per session, mutated by the core engines and saved back wholesale; its JSON
dump is what the profile store keeps.
"""
from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from fittrack.core.reference import ExerciseType, Macros

REST_MIN_SEC = 30
REST_MAX_SEC = 600

SCHEMA_VERSION = 1


def clamp(value, lo, hi):
    return max(lo, min(hi, value))


class RestMode(str, Enum):
    auto = "auto"
    custom = "custom"


class TimerState(str, Enum):
    idle = "idle"
    running = "running"
    paused = "paused"


# --- templates ---

class ExerciseDraftItem(BaseModel):
    exercise_id: str
    name: str
    muscle_group: str
    sets: int = 3
    type: ExerciseType
    rest_mode: RestMode = RestMode.auto
    rest_sec: Optional[int] = None

    @model_validator(mode="after")
    def custom_rest_has_seconds(self):
        if self.rest_mode is RestMode.custom:
            if self.rest_sec is None or not REST_MIN_SEC <= self.rest_sec <= REST_MAX_SEC:
                raise ValueError("custom rest needs rest_sec within [30, 600]")
        elif self.rest_sec is not None:
            raise ValueError("rest_sec is only allowed with custom rest")
        return self


class Template(BaseModel):
    id: str
    name: str
    notes: str = ""
    items: list[ExerciseDraftItem] = Field(default_factory=list)


class TemplateDraft(BaseModel):
    # None until saved for the first time
    id: Optional[str] = None
    name: str = ""
    notes: str = ""
    items: list[ExerciseDraftItem] = Field(default_factory=list)


# --- active workout ---

class CompletedSet(BaseModel):
    weight: float
    reps: int
    rir: Optional[int] = None
    timestamp: int  # epoch ms


class RestState(BaseModel):
    state: TimerState = TimerState.idle
    duration_sec: int = 90
    # Authoritative while idle/paused; derived from end_at while running
    remaining_ms: Optional[int] = None
    end_at: Optional[int] = None  # epoch ms, set only while running

    @model_validator(mode="after")
    def end_at_only_while_running(self):
        if (self.end_at is not None) != (self.state is TimerState.running):
            raise ValueError("end_at must be set exactly when the timer is running")
        return self


class ActiveWorkoutItem(BaseModel):
    exercise_id: str
    name: str
    muscle_group: str
    target_sets: int
    type: ExerciseType
    rest_mode: RestMode = RestMode.auto
    custom_rest_sec: Optional[int] = None
    sets_completed: list[CompletedSet] = Field(default_factory=list)


class ActiveWorkout(BaseModel):
    id: str
    name: str
    template_id: Optional[str] = None
    started_at: int
    ended_at: Optional[int] = None
    current_exercise_index: int = 0
    rest: RestState = Field(default_factory=RestState)
    items: list[ActiveWorkoutItem]

    @property
    def current_item(self) -> ActiveWorkoutItem:
        return self.items[self.current_exercise_index]


# --- diet ---

class MacroTotals(BaseModel):
    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fat: int = 0

    def plus(self, other: "MacroTotals") -> "MacroTotals":
        return MacroTotals(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
        )

    def minus(self, other: "MacroTotals") -> "MacroTotals":
        return MacroTotals(
            calories=self.calories - other.calories,
            protein=self.protein - other.protein,
            carbs=self.carbs - other.carbs,
            fat=self.fat - other.fat,
        )


class FoodEntry(BaseModel):
    kind: Literal["food"] = "food"
    id: str
    food_id: str
    name: str
    qty: float
    unit: str
    grams: float
    macros: MacroTotals


class MealComponent(BaseModel):
    food_id: str
    name: str
    qty: float
    unit_key: str
    grams: float
    macros: MacroTotals


class MealEntry(BaseModel):
    kind: Literal["meal"] = "meal"
    id: str
    meal_id: str
    name: str
    servings: float
    macros: MacroTotals
    components: list[MealComponent]


class QuickEntry(BaseModel):
    kind: Literal["quick"] = "quick"
    id: str
    label: str
    macros: MacroTotals


Entry = Annotated[Union[FoodEntry, MealEntry, QuickEntry], Field(discriminator="kind")]


class DietDay(BaseModel):
    entries: list[Entry] = Field(default_factory=list)
    # Running sum of entries[].macros, maintained on insert and remove
    totals: MacroTotals = Field(default_factory=MacroTotals)


class PerReferenceSnapshot(BaseModel):
    reference_grams: float
    per_reference: Macros


class MealItem(BaseModel):
    food_id: str
    name: str
    qty: float
    unit_key: str
    grams: float
    per_ref_snapshot: PerReferenceSnapshot


class Meal(BaseModel):
    id: str
    name: str
    items: list[MealItem]
    per_serving_totals: MacroTotals


# --- history & settings ---

class SetLogRow(BaseModel):
    date: dt.date
    exercise_id: str
    exercise_name: str
    muscle_group: str
    weight: float
    reps: int
    rir: Optional[int] = None


class WeightEntry(BaseModel):
    date: dt.date
    weight: float


class ProfileSettings(BaseModel):
    name: str = ""
    calorie_goal: int = 2000
    water_goal: int = 8
    protein_goal: int = 150
    carbs_goal: int = 250
    fat_goal: int = 70


class RestDefaults(BaseModel):
    compound_sec: int = 150
    accessory_sec: int = 90
    auto_adjust: bool = True


class ProfileData(BaseModel):
    schema_version: int = SCHEMA_VERSION
    settings: ProfileSettings = Field(default_factory=ProfileSettings)
    rest_defaults: RestDefaults = Field(default_factory=RestDefaults)
    weight_history: list[WeightEntry] = Field(default_factory=list)
    diet_log: dict[str, DietDay] = Field(default_factory=dict)
    water_log: dict[str, int] = Field(default_factory=dict)
    sets_log: list[SetLogRow] = Field(default_factory=list)
    templates: list[Template] = Field(default_factory=list)
    template_draft: Optional[TemplateDraft] = None
    meals: list[Meal] = Field(default_factory=list)
    favorites: list[str] = Field(default_factory=list)
    active_workout: Optional[ActiveWorkout] = None

    def dump(self) -> dict:
        return self.model_dump(mode="json")

    @classmethod
    def load(cls, raw: Optional[dict]) -> "ProfileData":
        return cls.model_validate(raw or {})
