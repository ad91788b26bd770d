from typing import Annotated
from pydantic import BaseModel, Field
from fittrack.core.reference import ExerciseType
from fittrack.core.state import RestMode

NotesStr = Annotated[str, Field(max_length=500)]

class DraftBegin(BaseModel):
    # Omit to start a blank template
    template_id: str | None = None

class DraftRename(BaseModel):
    name: Annotated[str, Field(max_length=120)] | None = None
    notes: NotesStr | None = None

class DraftAdd(BaseModel):
    exercise_id: str

class DraftItemEdit(BaseModel):
    # Out-of-range sets/rest are clamped, not rejected
    sets: int | None = None
    type: ExerciseType | None = None
    rest_mode: RestMode | None = None
    rest_sec: int | None = None
