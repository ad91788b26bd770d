from typing import Annotated, Literal
import datetime as dt
from pydantic import BaseModel, Field

# Ranges are checked by the workout engine so the rejection reaches the notifier
class SetCreate(BaseModel):
    weight: float
    reps: int
    rir: int | None = None

class ManualSetCreate(SetCreate):
    exercise_id: Annotated[str, Field(min_length=1, max_length=64)]
    date: dt.date | None = None

class WorkoutStart(BaseModel):
    template_id: str
    confirm_replace: bool = False

class Confirm(BaseModel):
    confirm: bool = False

class RestAdjust(BaseModel):
    delta_sec: Annotated[int, Field(ge=-600, le=600)] = 15

class Move(BaseModel):
    direction: Literal[-1, 1]
