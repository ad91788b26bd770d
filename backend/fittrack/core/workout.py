"""Active workout engine: the single live training session of a profile."""
from __future__ import annotations

import logging
import math
import uuid
from datetime import date, datetime
from typing import Optional

from fittrack.core.errors import PreconditionError, ValidationError
from fittrack.core.reference import ExerciseLibrary
from fittrack.core.rest_timer import RestTimer, compute_recommended_rest_sec
from fittrack.core.state import (
    ActiveWorkout,
    ActiveWorkoutItem,
    CompletedSet,
    ProfileData,
    SetLogRow,
)

log = logging.getLogger(__name__)


def validate_set(weight, reps, rir) -> tuple[float, int, Optional[int]]:
    """Check already-parsed set values. Raises ValidationError on bad input."""
    if isinstance(weight, bool) or not isinstance(weight, (int, float)) or not math.isfinite(weight) or weight < 0:
        raise ValidationError("Weight must be a number of at least 0")
    if isinstance(reps, float) and reps.is_integer():
        reps = int(reps)
    if isinstance(reps, bool) or not isinstance(reps, int) or reps <= 0:
        raise ValidationError("Reps must be a whole number greater than 0")
    if rir is not None:
        if isinstance(rir, float) and rir.is_integer():
            rir = int(rir)
        if isinstance(rir, bool) or not isinstance(rir, int) or rir < 0:
            raise ValidationError("RIR must be a whole number of at least 0")
    return float(weight), reps, rir


def local_date(ts_ms: int) -> date:
    return datetime.fromtimestamp(ts_ms / 1000).date()


def _require_active(data: ProfileData) -> ActiveWorkout:
    if data.active_workout is None:
        raise PreconditionError("No active workout")
    return data.active_workout


def start_from_template(
    data: ProfileData,
    template_id: str,
    now: int,
    *,
    confirm_replace: bool = False,
) -> ActiveWorkout:
    template = next((t for t in data.templates if t.id == template_id), None)
    if template is None:
        raise PreconditionError("Template not found")
    if not template.items:
        raise PreconditionError("Template has no exercises")
    if data.active_workout is not None and not confirm_replace:
        raise PreconditionError("An unfinished workout exists; confirm to discard it")

    items = [
        ActiveWorkoutItem(
            exercise_id=d.exercise_id,
            name=d.name,
            muscle_group=d.muscle_group,
            target_sets=d.sets,
            type=d.type,
            rest_mode=d.rest_mode,
            custom_rest_sec=d.rest_sec,
        )
        for d in template.items
    ]
    workout = ActiveWorkout(
        id=uuid.uuid4().hex,
        name=template.name,
        template_id=template.id,
        started_at=now,
        items=items,
    )
    RestTimer(workout.rest).prime(compute_recommended_rest_sec(items[0], data.rest_defaults))
    data.active_workout = workout
    log.info("workout %s started from template %s", workout.id, template.id)
    return workout


def log_set(data: ProfileData, weight, reps, rir, now: int) -> CompletedSet:
    """Append a set to the current exercise and start the recommended rest.

    Sets past ``target_sets`` are accepted.
    """
    workout = _require_active(data)
    weight, reps, rir = validate_set(weight, reps, rir)

    item = workout.current_item
    done = CompletedSet(weight=weight, reps=reps, rir=rir, timestamp=now)
    item.sets_completed.append(done)

    rest_sec = compute_recommended_rest_sec(item, data.rest_defaults, done)
    RestTimer(workout.rest).begin(rest_sec, now)
    log.info("set logged on %s: %sx%s rir=%s, rest %ss", item.exercise_id, weight, reps, rir, rest_sec)
    return done


def navigate(data: ProfileData, step: int) -> bool:
    """Move to the next (+1) or previous (-1) exercise. No-op at the ends."""
    workout = _require_active(data)
    target = workout.current_exercise_index + step
    if target < 0 or target >= len(workout.items):
        return False
    workout.current_exercise_index = target
    # A fresh exercise starts from its base rest, without the last set's bias
    RestTimer(workout.rest).prime(compute_recommended_rest_sec(workout.current_item, data.rest_defaults))
    return True


def finish(data: ProfileData, now: int) -> list[SetLogRow]:
    """Flush every completed set into the sets log and clear the workout."""
    workout = _require_active(data)
    workout.ended_at = now
    rows = [
        SetLogRow(
            date=local_date(s.timestamp),
            exercise_id=item.exercise_id,
            exercise_name=item.name,
            muscle_group=item.muscle_group,
            weight=s.weight,
            reps=s.reps,
            rir=s.rir,
        )
        for item in workout.items
        for s in item.sets_completed
    ]
    data.sets_log.extend(rows)
    data.active_workout = None
    log.info("workout %s finished with %d sets", workout.id, len(rows))
    return rows


def discard(data: ProfileData, *, confirm: bool = False) -> None:
    workout = _require_active(data)
    if not confirm:
        raise PreconditionError("Confirm to discard the workout")
    data.active_workout = None
    log.info("workout %s discarded", workout.id)


def log_manual_set(
    data: ProfileData,
    library: ExerciseLibrary,
    *,
    exercise_id: str,
    on: date,
    weight,
    reps,
    rir=None,
) -> SetLogRow:
    """Record a set straight into the sets log, outside any live workout."""
    exercise = library.get(exercise_id)
    if exercise is None:
        raise ValidationError("Unknown exercise")
    weight, reps, rir = validate_set(weight, reps, rir)
    row = SetLogRow(
        date=on,
        exercise_id=exercise.id,
        exercise_name=exercise.name,
        muscle_group=exercise.muscle_group,
        weight=weight,
        reps=reps,
        rir=rir,
    )
    data.sets_log.append(row)
    return row
