from typing import Annotated
import datetime as dt
from pydantic import BaseModel, Field

Macro = Annotated[int, Field(ge=0)]

class FoodEntryCreate(BaseModel):
    food_id: str
    qty: float
    unit: str = "g"

class MealEntryCreate(BaseModel):
    meal_id: str
    servings: float = 1

class QuickEntryCreate(BaseModel):
    label: Annotated[str, Field(max_length=120)]
    calories: Macro
    protein: Macro = 0
    carbs: Macro = 0
    fat: Macro = 0

class MealItemIn(BaseModel):
    food_id: str
    qty: float
    unit_key: str = "g"

class MealCreate(BaseModel):
    name: Annotated[str, Field(max_length=120)]
    items: list[MealItemIn]

class WaterCreate(BaseModel):
    cups: Annotated[int, Field(ge=1, le=20)] = 1

class WeightCreate(BaseModel):
    weight: float
    date: dt.date | None = None
