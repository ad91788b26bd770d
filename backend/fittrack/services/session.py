"""FitnessSession: the one owner of a profile's in-memory state.

Every mutating operation runs against a deep copy of the profile data. The
copy is saved wholesale and only then adopted, so a failed validation or a
failed save leaves both the store and the session untouched.
"""
from __future__ import annotations

import logging
import time
from datetime import date
from typing import Callable, Optional

from fittrack.core import diet, progress, templates, workout
from fittrack.core.errors import FitnessError, PreconditionError, ValidationError
from fittrack.core.notify import DOUBLE_PULSE, SHORT_PULSE, Notifier
from fittrack.core.reference import ExerciseLibrary, ExerciseType, FoodCatalog
from fittrack.core.rest_timer import RestTimer
from fittrack.core.state import (
    REST_MAX_SEC,
    REST_MIN_SEC,
    MacroTotals,
    ProfileData,
    RestDefaults,
    RestMode,
    RestState,
    TimerState,
    clamp,
)
from fittrack.models import Profile
from fittrack.services.locks import ProfileLocks

log = logging.getLogger(__name__)

DEFAULT_EXERCISES = ExerciseLibrary()
DEFAULT_FOODS = FoodCatalog()
PROFILE_LOCKS = ProfileLocks()


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


def new_profile_data(name: str, rest_defaults: Optional[RestDefaults] = None) -> ProfileData:
    data = ProfileData(rest_defaults=rest_defaults or RestDefaults())
    data.settings.name = name
    return data


class FitnessSession:
    def __init__(
        self,
        repo,
        profile: Profile,
        *,
        notifier: Optional[Notifier] = None,
        clock: Callable[[], int] = wall_clock_ms,
        exercises: ExerciseLibrary = DEFAULT_EXERCISES,
        foods: FoodCatalog = DEFAULT_FOODS,
        locks: ProfileLocks = PROFILE_LOCKS,
    ):
        self.repo = repo
        self.profile_id = profile.id
        self.profile_name = profile.name
        self.notifier = notifier or Notifier()
        self.clock = clock
        self.exercises = exercises
        self.foods = foods
        self.locks = locks
        self.lock = locks.for_profile(profile.id)
        self.data = ProfileData.load(profile.data)
        self._resume_rest()

    # --- plumbing ---

    def now(self) -> int:
        return self.clock()

    def today(self) -> date:
        return workout.local_date(self.now())

    def _apply(self, fn, *, ok=None, pulse=None):
        with self.lock:
            # Another session may have saved since this one loaded
            self._reload()
            draft = self.data.model_copy(deep=True)
            try:
                result = fn(draft)
            except FitnessError as e:
                log.info("profile %s: rejected: %s", self.profile_id, e.message)
                self.notifier.toast(e.message)
                raise
            self._persist(draft)
        if ok:
            self.notifier.toast(ok(result) if callable(ok) else ok)
        if pulse:
            self.notifier.haptic(pulse)
        return result

    def _reload(self) -> None:
        profile = self.repo.get(self.profile_id)
        if profile is None:
            raise LookupError(f"profile {self.profile_id} not found")
        self.data = ProfileData.load(profile.data)

    def _persist(self, data: ProfileData) -> None:
        try:
            self.repo.save(self.profile_id, data.dump())
        except Exception:
            self.notifier.toast("Could not save changes")
            raise
        self.data = data
        log.debug("profile %s saved", self.profile_id)

    def _resume_rest(self) -> None:
        """Catch a persisted running rest up with the wall clock."""
        active = self.data.active_workout
        if active is None or active.rest.state is not TimerState.running:
            return
        now = self.now()
        if RestTimer(active.rest.model_copy()).tick(now):
            self._expire_rest(now)
        else:
            RestTimer(active.rest).tick(now)

    def _expire_rest(self, now: int) -> None:
        def expire(d):
            # A concurrent session may already have expired or ended it
            return d.active_workout is not None and RestTimer(d.active_workout.rest).tick(now)
        if self._apply(expire):
            self.notifier.toast("Rest complete")
            self.notifier.haptic(DOUBLE_PULSE)

    @staticmethod
    def _rest(data: ProfileData) -> RestState:
        if data.active_workout is None:
            raise PreconditionError("No active workout")
        return data.active_workout.rest

    # --- reads ---

    @property
    def rest_running(self) -> bool:
        active = self.data.active_workout
        return active is not None and active.rest.state is TimerState.running

    def tick(self) -> bool:
        """Resync the rest timer. Returns True while it is still running."""
        active = self.data.active_workout
        if active is None or active.rest.state is not TimerState.running:
            return False
        now = self.now()
        if RestTimer(active.rest.model_copy()).tick(now):
            self._expire_rest(now)
            return self.rest_running
        RestTimer(active.rest).tick(now)
        return True

    def progress(self) -> dict:
        return progress.summary(self.data, self.today())

    # --- active workout ---

    def start_workout(self, template_id: str, *, confirm_replace: bool = False):
        return self._apply(
            lambda d: workout.start_from_template(d, template_id, self.now(), confirm_replace=confirm_replace),
            ok=lambda w: f"Started {w.name}",
        )

    def log_set(self, weight, reps, rir=None):
        return self._apply(
            lambda d: workout.log_set(d, weight, reps, rir, self.now()),
            ok=lambda s: f"Set logged: {s.weight:g} x {s.reps}",
            pulse=SHORT_PULSE,
        )

    def next_exercise(self) -> bool:
        return self._apply(lambda d: workout.navigate(d, 1))

    def prev_exercise(self) -> bool:
        return self._apply(lambda d: workout.navigate(d, -1))

    def finish_workout(self):
        return self._apply(
            lambda d: workout.finish(d, self.now()),
            ok=lambda rows: f"Workout saved: {len(rows)} sets",
        )

    def discard_workout(self, *, confirm: bool = False) -> None:
        self._apply(lambda d: workout.discard(d, confirm=confirm), ok="Workout discarded")

    def log_manual_set(self, *, exercise_id: str, on: date, weight, reps, rir=None):
        return self._apply(
            lambda d: workout.log_manual_set(
                d, self.exercises, exercise_id=exercise_id, on=on, weight=weight, reps=reps, rir=rir
            ),
            ok="Set logged",
        )

    # --- rest timer ---

    def rest_start(self) -> bool:
        return self._apply(lambda d: RestTimer(self._rest(d)).start(self.now()))

    def rest_pause(self) -> bool:
        return self._apply(lambda d: RestTimer(self._rest(d)).pause(self.now()))

    def rest_reset(self) -> None:
        self._apply(lambda d: RestTimer(self._rest(d)).reset())

    def rest_skip(self) -> bool:
        return self._apply(lambda d: RestTimer(self._rest(d)).skip(), ok="Rest skipped")

    def rest_adjust(self, delta_sec: int) -> None:
        self._apply(lambda d: RestTimer(self._rest(d)).adjust(delta_sec, self.now()))

    # --- templates ---

    def begin_draft(self, template_id: Optional[str] = None):
        return self._apply(lambda d: templates.begin_draft(d, template_id))

    def rename_draft(self, *, name: Optional[str] = None, notes: Optional[str] = None) -> None:
        self._apply(lambda d: templates.rename_draft(d, name=name, notes=notes))

    def draft_add(self, exercise_id: str) -> bool:
        return self._apply(lambda d: templates.add_exercise(d, self.exercises, exercise_id))

    def draft_move(self, index: int, step: int) -> bool:
        return self._apply(lambda d: templates.move_item(d, index, step))

    def draft_remove(self, index: int) -> None:
        self._apply(lambda d: templates.remove_item(d, index))

    def draft_edit(
        self,
        index: int,
        *,
        sets: Optional[int] = None,
        type_: Optional[ExerciseType] = None,
        rest_mode: Optional[RestMode] = None,
        rest_sec: Optional[int] = None,
    ) -> None:
        def edit(d):
            if sets is not None:
                templates.set_sets(d, index, sets)
            if type_ is not None:
                templates.set_type(d, index, type_)
            if rest_mode is not None or rest_sec is not None:
                templates.set_rest(d, index, rest_mode or RestMode.custom, rest_sec)
        self._apply(edit)

    def save_draft(self):
        return self._apply(templates.save_draft, ok=lambda t: f"Saved {t.name}")

    def discard_draft(self) -> None:
        self._apply(templates.discard_draft)

    def duplicate_template(self, template_id: str):
        return self._apply(lambda d: templates.duplicate(d, template_id), ok=lambda t: f"Created {t.name}")

    def delete_template(self, template_id: str, *, confirm: bool = False) -> None:
        self._apply(lambda d: templates.delete(d, template_id, confirm=confirm), ok="Template deleted")

    # --- diet ---

    def add_food(self, on: date, *, food_id: str, qty, unit: str):
        return self._apply(
            lambda d: diet.add_food_entry(d, self.foods, on, food_id=food_id, qty=qty, unit=unit),
            ok=lambda e: f"Added {e.name}: {e.macros.calories} kcal",
        )

    def add_meal(self, on: date, *, meal_id: str, servings=1):
        return self._apply(
            lambda d: diet.add_meal_entry(d, on, meal_id=meal_id, servings=servings),
            ok=lambda e: f"Added {e.name}: {e.macros.calories} kcal",
        )

    def add_quick(self, on: date, *, label: str, macros: MacroTotals):
        return self._apply(
            lambda d: diet.add_quick_entry(d, on, label=label, macros=macros),
            ok=lambda e: f"Added {e.label}: {e.macros.calories} kcal",
        )

    def remove_entry(self, on: date, entry_id: str) -> None:
        self._apply(lambda d: diet.remove_entry(d, on, entry_id), ok="Entry removed")

    def save_meal(self, *, name: str, items: list[tuple[str, float, str]], meal_id: Optional[str] = None):
        return self._apply(
            lambda d: diet.save_meal(d, self.foods, name=name, items=items, meal_id=meal_id),
            ok=lambda m: f"Saved meal {m.name}",
        )

    def delete_meal(self, meal_id: str) -> None:
        self._apply(lambda d: diet.delete_meal(d, meal_id), ok="Meal deleted")

    def toggle_favorite(self, food_id: str) -> bool:
        return self._apply(lambda d: diet.toggle_favorite(d, self.foods, food_id))

    def log_water(self, on: date, cups: int = 1) -> int:
        return self._apply(
            lambda d: progress.log_water(d, on, cups),
            ok=lambda total: f"Water logged: {total}/{self.data.settings.water_goal} cups",
            pulse=DOUBLE_PULSE,
        )

    def log_weight(self, on: date, weight):
        return self._apply(lambda d: progress.log_weight(d, on, weight), ok="Weight logged")

    # --- settings ---

    def update_settings(self, **changes) -> None:
        """Change only the given fields. ``None`` leaves a field as it is."""
        changes = {k: v for k, v in changes.items() if v is not None}

        def update(d):
            if "name" in changes:
                name = (changes["name"] or "").strip()
                if not name:
                    raise ValidationError("Name cannot be empty")
                changes["name"] = name
            for key, value in changes.items():
                if key != "name" and value <= 0:
                    raise ValidationError(f"{key.replace('_', ' ').capitalize()} must be greater than 0")
            d.settings = d.settings.model_copy(update=changes)
        self._apply(update, ok="Settings saved")

    def update_rest_defaults(
        self,
        *,
        compound_sec: Optional[int] = None,
        accessory_sec: Optional[int] = None,
        auto_adjust: Optional[bool] = None,
    ) -> None:
        def update(d):
            r = d.rest_defaults
            if compound_sec is not None:
                r.compound_sec = clamp(compound_sec, REST_MIN_SEC, REST_MAX_SEC)
            if accessory_sec is not None:
                r.accessory_sec = clamp(accessory_sec, REST_MIN_SEC, REST_MAX_SEC)
            if auto_adjust is not None:
                r.auto_adjust = auto_adjust
        self._apply(update, ok="Settings saved")
