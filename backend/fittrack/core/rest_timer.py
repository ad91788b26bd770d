"""Rest timer state machine.

The timer never counts down by itself. While running it only stores an
absolute deadline (``end_at``, epoch ms) and every read or tick recomputes
the remaining time against the wall clock, so a countdown survives the
process being suspended or restarted.

    idle/paused --start--> running --pause--> paused
    any --reset/skip--> idle
    running --tick, deadline passed--> idle
"""
from __future__ import annotations

import logging
from typing import Optional

from fittrack.core.reference import ExerciseType
from fittrack.core.state import (
    REST_MAX_SEC,
    REST_MIN_SEC,
    ActiveWorkoutItem,
    CompletedSet,
    RestDefaults,
    RestMode,
    RestState,
    TimerState,
    clamp,
)

log = logging.getLogger(__name__)

HEAVY_BONUS_SEC = 60
LIGHT_PENALTY_SEC = 30
ADJUST_STEP_SEC = 15


def is_heavy(prior: CompletedSet) -> bool:
    return prior.reps <= 5 or (prior.rir is not None and prior.rir <= 1)


def is_light(prior: CompletedSet) -> bool:
    return prior.reps >= 13 or (prior.rir is not None and prior.rir >= 4)


def compute_recommended_rest_sec(
    item: ActiveWorkoutItem,
    defaults: RestDefaults,
    prior: Optional[CompletedSet] = None,
) -> int:
    """Rest to take after ``prior`` for this exercise.

    A custom override wins over the type default. The heavy/light bias only
    applies with auto adjustment on and a known prior set; heavy is checked
    first.
    """
    if item.rest_mode is RestMode.custom and item.custom_rest_sec is not None:
        base = item.custom_rest_sec
    elif item.type is ExerciseType.compound:
        base = defaults.compound_sec
    else:
        base = defaults.accessory_sec

    if defaults.auto_adjust and prior is not None:
        if is_heavy(prior):
            base += HEAVY_BONUS_SEC
        elif is_light(prior):
            base -= LIGHT_PENALTY_SEC
    return clamp(base, REST_MIN_SEC, REST_MAX_SEC)


class RestTimer:
    """Transitions over a ``RestState``, mutated in place.

    All methods take ``now`` in epoch milliseconds.
    """

    def __init__(self, state: RestState):
        self.state = state

    @property
    def running(self) -> bool:
        return self.state.state is TimerState.running

    def remaining_ms(self, now: int) -> int:
        s = self.state
        if s.state is TimerState.running:
            return max(0, s.end_at - now)
        if s.remaining_ms is None:
            return s.duration_sec * 1000
        return s.remaining_ms

    def prime(self, duration_sec: int) -> None:
        """Idle at a fresh duration, without starting."""
        s = self.state
        s.state = TimerState.idle
        s.duration_sec = clamp(duration_sec, REST_MIN_SEC, REST_MAX_SEC)
        s.remaining_ms = s.duration_sec * 1000
        s.end_at = None

    def begin(self, duration_sec: int, now: int) -> None:
        """Enter rest at a fresh duration and start counting."""
        self.prime(duration_sec)
        self.start(now)

    def start(self, now: int) -> bool:
        s = self.state
        if s.state is TimerState.running:
            return False
        # An idle timer at 0 has expired and restarts in full; a paused one resumes as is
        expired = s.state is TimerState.idle and s.remaining_ms == 0
        if s.remaining_ms is None or expired:
            remaining = s.duration_sec * 1000
        else:
            remaining = s.remaining_ms
        s.state = TimerState.running
        s.end_at = now + remaining
        s.remaining_ms = remaining
        log.debug("rest started: %sms remaining", remaining)
        return True

    def pause(self, now: int) -> bool:
        s = self.state
        if s.state is not TimerState.running:
            return False
        s.remaining_ms = max(0, s.end_at - now)
        s.end_at = None
        s.state = TimerState.paused
        return True

    def reset(self) -> None:
        s = self.state
        s.state = TimerState.idle
        s.remaining_ms = s.duration_sec * 1000
        s.end_at = None

    def skip(self) -> bool:
        """Reset, reporting whether a rest was actually cut short."""
        was_resting = self.state.state is not TimerState.idle
        self.reset()
        return was_resting

    def adjust(self, delta_sec: int, now: int) -> None:
        s = self.state
        if s.state is TimerState.running:
            # May push end_at into the past; the next tick clamps and expires
            s.end_at += delta_sec * 1000
            s.remaining_ms = max(0, s.end_at - now)
            return
        s.duration_sec = clamp(s.duration_sec + delta_sec, REST_MIN_SEC, REST_MAX_SEC)
        s.remaining_ms = s.duration_sec * 1000

    def tick(self, now: int) -> bool:
        """Resync from the deadline. Returns True when the rest just expired."""
        s = self.state
        if s.state is not TimerState.running:
            return False
        remaining = s.end_at - now
        if remaining > 0:
            s.remaining_ms = remaining
            return False
        s.state = TimerState.idle
        s.remaining_ms = 0
        s.end_at = None
        log.debug("rest expired")
        return True
