from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field, StringConstraints

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]
PosInt = Annotated[int, Field(ge=1)]

class ProfileCreate(BaseModel):
    name: NameStr

class ProfileRead(BaseModel):
    id: str
    name: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}

class SettingsUpdate(BaseModel):
    # Only the fields sent are changed
    name: str | None = None
    calorie_goal: PosInt | None = None
    water_goal: PosInt | None = None
    protein_goal: PosInt | None = None
    carbs_goal: PosInt | None = None
    fat_goal: PosInt | None = None

class RestDefaultsUpdate(BaseModel):
    compound_sec: int | None = None
    accessory_sec: int | None = None
    auto_adjust: bool | None = None
