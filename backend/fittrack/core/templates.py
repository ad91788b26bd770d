"""Template builder: edits a draft, then saves it as a named template."""
from __future__ import annotations

import logging
import uuid
from typing import Optional

from fittrack.core.errors import PreconditionError, ValidationError
from fittrack.core.reference import ExerciseLibrary, ExerciseType
from fittrack.core.state import (
    REST_MAX_SEC,
    REST_MIN_SEC,
    ExerciseDraftItem,
    ProfileData,
    RestMode,
    Template,
    TemplateDraft,
    clamp,
)

log = logging.getLogger(__name__)

MIN_SETS = 1
MAX_SETS = 10
DEFAULT_CUSTOM_REST_SEC = 120


def find_template(data: ProfileData, template_id: str) -> Optional[Template]:
    return next((t for t in data.templates if t.id == template_id), None)


def begin_draft(data: ProfileData, template_id: Optional[str] = None) -> TemplateDraft:
    """Open a blank draft, or a copy of an existing template for editing."""
    if template_id is None:
        draft = TemplateDraft()
    else:
        template = find_template(data, template_id)
        if template is None:
            raise PreconditionError("Template not found")
        draft = TemplateDraft.model_validate(template.model_dump())
    data.template_draft = draft
    return draft


def _draft(data: ProfileData) -> TemplateDraft:
    if data.template_draft is None:
        raise PreconditionError("No template being edited")
    return data.template_draft


def _item(draft: TemplateDraft, index: int) -> ExerciseDraftItem:
    if not 0 <= index < len(draft.items):
        raise PreconditionError("No such exercise in the draft")
    return draft.items[index]


def rename_draft(data: ProfileData, *, name: Optional[str] = None, notes: Optional[str] = None) -> None:
    draft = _draft(data)
    if name is not None:
        draft.name = name
    if notes is not None:
        draft.notes = notes


def add_exercise(data: ProfileData, library: ExerciseLibrary, exercise_id: str) -> bool:
    """Append an exercise. Already present exercises are left alone."""
    draft = _draft(data)
    exercise = library.get(exercise_id)
    if exercise is None:
        raise ValidationError("Unknown exercise")
    if any(i.exercise_id == exercise_id for i in draft.items):
        return False
    draft.items.append(ExerciseDraftItem(
        exercise_id=exercise.id,
        name=exercise.name,
        muscle_group=exercise.muscle_group,
        type=exercise.type,
    ))
    return True


def move_item(data: ProfileData, index: int, step: int) -> bool:
    """Swap with the neighbour ``step`` (-1 or +1) away. No-op at the ends."""
    draft = _draft(data)
    _item(draft, index)
    target = index + step
    if step not in (-1, 1) or not 0 <= target < len(draft.items):
        return False
    draft.items[index], draft.items[target] = draft.items[target], draft.items[index]
    return True


def remove_item(data: ProfileData, index: int) -> None:
    draft = _draft(data)
    _item(draft, index)
    del draft.items[index]


def set_sets(data: ProfileData, index: int, sets: int) -> int:
    item = _item(_draft(data), index)
    item.sets = clamp(int(sets), MIN_SETS, MAX_SETS)
    return item.sets


def set_type(data: ProfileData, index: int, type_: ExerciseType) -> None:
    _item(_draft(data), index).type = ExerciseType(type_)


def set_rest(data: ProfileData, index: int, mode: RestMode, seconds: Optional[int] = None) -> None:
    item = _item(_draft(data), index)
    mode = RestMode(mode)
    if mode is RestMode.auto:
        item.rest_mode, item.rest_sec = mode, None
        return
    if seconds is None:
        seconds = item.rest_sec or DEFAULT_CUSTOM_REST_SEC
    item.rest_mode, item.rest_sec = mode, clamp(int(seconds), REST_MIN_SEC, REST_MAX_SEC)


def save_draft(data: ProfileData) -> Template:
    """Persist the draft. Overwrites in place when it already has an id."""
    draft = _draft(data)
    name = draft.name.strip()
    if not name:
        raise ValidationError("Template needs a name")
    if not draft.items:
        raise ValidationError("Add at least one exercise")

    template = Template(
        id=draft.id or uuid.uuid4().hex,
        name=name,
        notes=draft.notes,
        items=[i.model_copy(deep=True) for i in draft.items],
    )
    for idx, existing in enumerate(data.templates):
        if existing.id == template.id:
            data.templates[idx] = template
            break
    else:
        data.templates.append(template)
    data.template_draft = None
    log.info("template %s saved with %d exercises", template.id, len(template.items))
    return template


def discard_draft(data: ProfileData) -> None:
    data.template_draft = None


def duplicate(data: ProfileData, template_id: str) -> Template:
    template = find_template(data, template_id)
    if template is None:
        raise PreconditionError("Template not found")
    copy = template.model_copy(deep=True, update={"id": uuid.uuid4().hex, "name": f"{template.name} (Copy)"})
    data.templates.append(copy)
    return copy


def delete(data: ProfileData, template_id: str, *, confirm: bool = False) -> None:
    """Workouts already started from the template keep running."""
    if find_template(data, template_id) is None:
        raise PreconditionError("Template not found")
    if not confirm:
        raise PreconditionError("Confirm to delete the template")
    data.templates = [t for t in data.templates if t.id != template_id]
