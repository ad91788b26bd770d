"""Static reference data: the exercise library and the food database.

The diet ledger and the template engine only read from these tables. Foods
carry their macros per ``reference_grams`` so any logged quantity can be
scaled from them.
"""
from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, Field


class ExerciseType(str, Enum):
    compound = "compound"
    accessory = "accessory"


class Exercise(BaseModel):
    id: str
    name: str
    muscle_group: str
    type: ExerciseType

    model_config = {"frozen": True}


class Macros(BaseModel):
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0


class FoodUnit(BaseModel):
    key: str
    label: str
    grams_per_unit: float = Field(gt=0)

    model_config = {"frozen": True}


class Food(BaseModel):
    id: str
    name: str
    reference_grams: float = Field(gt=0)
    per_reference: Macros
    units: tuple[FoodUnit, ...]

    model_config = {"frozen": True}

    def unit(self, key: str) -> Optional[FoodUnit]:
        for u in self.units:
            if u.key == key:
                return u
        return None


GRAM = FoodUnit(key="g", label="grams", grams_per_unit=1)


def _food(id, name, calories, protein, carbs, fat, *units, reference_grams=100):
    return Food(
        id=id,
        name=name,
        reference_grams=reference_grams,
        per_reference=Macros(calories=calories, protein=protein, carbs=carbs, fat=fat),
        units=(GRAM, *units),
    )


DEFAULT_EXERCISES: tuple[Exercise, ...] = (
    Exercise(id="bench_press", name="Bench Press", muscle_group="chest", type=ExerciseType.compound),
    Exercise(id="incline_db_press", name="Incline Dumbbell Press", muscle_group="chest", type=ExerciseType.compound),
    Exercise(id="cable_fly", name="Cable Fly", muscle_group="chest", type=ExerciseType.accessory),
    Exercise(id="back_squat", name="Back Squat", muscle_group="legs", type=ExerciseType.compound),
    Exercise(id="romanian_deadlift", name="Romanian Deadlift", muscle_group="legs", type=ExerciseType.compound),
    Exercise(id="leg_extension", name="Leg Extension", muscle_group="legs", type=ExerciseType.accessory),
    Exercise(id="leg_curl", name="Leg Curl", muscle_group="legs", type=ExerciseType.accessory),
    Exercise(id="deadlift", name="Deadlift", muscle_group="back", type=ExerciseType.compound),
    Exercise(id="barbell_row", name="Barbell Row", muscle_group="back", type=ExerciseType.compound),
    Exercise(id="pull_up", name="Pull-Up", muscle_group="back", type=ExerciseType.compound),
    Exercise(id="lat_pulldown", name="Lat Pulldown", muscle_group="back", type=ExerciseType.accessory),
    Exercise(id="overhead_press", name="Overhead Press", muscle_group="shoulders", type=ExerciseType.compound),
    Exercise(id="lateral_raise", name="Lateral Raise", muscle_group="shoulders", type=ExerciseType.accessory),
    Exercise(id="barbell_curl", name="Barbell Curl", muscle_group="arms", type=ExerciseType.accessory),
    Exercise(id="triceps_pushdown", name="Triceps Pushdown", muscle_group="arms", type=ExerciseType.accessory),
    Exercise(id="calf_raise", name="Calf Raise", muscle_group="legs", type=ExerciseType.accessory),
    Exercise(id="plank", name="Plank", muscle_group="core", type=ExerciseType.accessory),
)

DEFAULT_FOODS: tuple[Food, ...] = (
    _food("chicken_breast", "Chicken Breast (cooked)", 165, 31, 0, 3.6,
          FoodUnit(key="oz", label="ounce", grams_per_unit=28.35)),
    _food("white_rice", "White Rice (cooked)", 130, 2.7, 28, 0.3,
          FoodUnit(key="cup", label="cup", grams_per_unit=158)),
    _food("oats", "Rolled Oats", 389, 16.9, 66.3, 6.9,
          FoodUnit(key="cup", label="cup", grams_per_unit=81)),
    _food("egg", "Whole Egg", 143, 12.6, 0.7, 9.5,
          FoodUnit(key="large", label="large egg", grams_per_unit=50)),
    _food("banana", "Banana", 89, 1.1, 22.8, 0.3,
          FoodUnit(key="medium", label="medium banana", grams_per_unit=118)),
    _food("whole_milk", "Whole Milk", 61, 3.2, 4.8, 3.3,
          FoodUnit(key="cup", label="cup", grams_per_unit=244)),
    _food("greek_yogurt", "Greek Yogurt (plain, nonfat)", 59, 10.3, 3.6, 0.4,
          FoodUnit(key="cup", label="cup", grams_per_unit=245)),
    _food("olive_oil", "Olive Oil", 884, 0, 0, 100,
          FoodUnit(key="tbsp", label="tablespoon", grams_per_unit=13.5)),
    _food("peanut_butter", "Peanut Butter", 588, 25, 20, 50,
          FoodUnit(key="tbsp", label="tablespoon", grams_per_unit=16)),
    _food("broccoli", "Broccoli", 34, 2.8, 6.6, 0.4,
          FoodUnit(key="cup", label="cup chopped", grams_per_unit=91)),
    _food("salmon", "Salmon (cooked)", 206, 22, 0, 12,
          FoodUnit(key="oz", label="ounce", grams_per_unit=28.35)),
    _food("whey_protein", "Whey Protein", 120, 24, 3, 1.5,
          FoodUnit(key="scoop", label="scoop", grams_per_unit=30), reference_grams=30),
)


class ExerciseLibrary:
    def __init__(self, exercises: Iterable[Exercise] = DEFAULT_EXERCISES):
        self._by_id = {e.id: e for e in exercises}

    def get(self, exercise_id: str) -> Optional[Exercise]:
        return self._by_id.get(exercise_id)

    def all(self) -> list[Exercise]:
        return list(self._by_id.values())


class FoodCatalog:
    def __init__(self, foods: Iterable[Food] = DEFAULT_FOODS):
        self._by_id = {f.id: f for f in foods}

    def get(self, food_id: str) -> Optional[Food]:
        return self._by_id.get(food_id)

    def all(self) -> list[Food]:
        return list(self._by_id.values())

    def replace(self, food: Food) -> None:
        """Swap in an edited food. Saved meals keep their own snapshots."""
        self._by_id[food.id] = food
