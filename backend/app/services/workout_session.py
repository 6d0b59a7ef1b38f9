"""
Workout Session
===============
State machine that plays one workout, exercise by exercise.

    not_started --select--> running | gated
    running --advance/elapsed--> running (next exercise) | gated | completed
    gated --reenter--> running | gated
    running | gated --abandon--> abandoned

Rules:
  - Gating is evaluated every time an exercise is entered, using the
    entitlement snapshot taken at selection (or at re-entry).
  - While gated no timer runs. Re-entry restarts the gated exercise
    from its full duration; no partial countdown is kept.
  - ``completed`` fires the on_complete callback exactly once.
  - ``abandoned`` cancels the timer and fires nothing.
  - Operating on a finished session raises InvalidSessionOperation.
    A timer callback that lands after the session left ``running`` is
    ignored.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Literal, Optional

from app.models.workout import Exercise, Workout
from app.services.premium import is_accessible, is_exercise_accessible
from app.services.timer import Scheduler, SessionTimer

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    not_started = "not_started"
    running = "running"
    gated = "gated"
    completed = "completed"
    abandoned = "abandoned"


class InvalidSessionOperation(RuntimeError):
    """An operation was attempted in a state that does not allow it."""


class WorkoutSession:
    """Ephemeral playback state for one run through a workout. Never persisted."""

    def __init__(
        self,
        workout: Workout,
        entitlement: bool,
        on_complete: Optional[Callable[["WorkoutSession"], None]] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.workout = workout
        self.entitlement = entitlement
        self.current_index = 0
        self.remaining_seconds = 0
        self.state = SessionState.not_started
        self.gated_scope: Optional[Literal["workout", "exercise"]] = None
        self._on_complete = on_complete
        self._completion_fired = False
        self._timer = SessionTimer(self._on_tick, self._on_elapsed, scheduler)

    # ---- Views -------------------------------------------------------------

    @property
    def current_exercise(self) -> Exercise:
        return self.workout.exercises[self.current_index]

    @property
    def is_last_exercise(self) -> bool:
        return self.current_index == len(self.workout.exercises) - 1

    @property
    def progress_pct(self) -> float:
        if self.state is SessionState.completed:
            return 100.0
        return (self.current_index + 1) / len(self.workout.exercises) * 100

    @property
    def finished(self) -> bool:
        return self.state in (SessionState.completed, SessionState.abandoned)

    # ---- Transitions -------------------------------------------------------

    def begin(self) -> None:
        if self.state is not SessionState.not_started:
            raise InvalidSessionOperation(f"Session already started (state={self.state.value})")
        self._enter(0)

    def advance(self) -> None:
        """Move past the current exercise (manual skip or timer elapse)."""
        if self.state is not SessionState.running:
            raise InvalidSessionOperation(
                f"Cannot advance a session in state '{self.state.value}'"
            )
        self._timer.cancel()
        if self.current_index + 1 < len(self.workout.exercises):
            self._enter(self.current_index + 1)
        else:
            self._complete()

    def reenter(self, entitlement: bool) -> None:
        """Re-evaluate a gated session with a fresh entitlement snapshot."""
        if self.state is not SessionState.gated:
            raise InvalidSessionOperation(
                f"Only a gated session can be re-entered (state={self.state.value})"
            )
        self.entitlement = entitlement
        self._enter(self.current_index)

    def abandon(self) -> None:
        if self.state is SessionState.abandoned:
            return
        if self.state is SessionState.completed:
            raise InvalidSessionOperation("Cannot abandon a completed session")
        self._timer.cancel()
        self.state = SessionState.abandoned
        logger.info(
            "Session for workout %d abandoned at exercise %d",
            self.workout.id, self.current_index,
        )

    # ---- Internals ---------------------------------------------------------

    def _enter(self, index: int) -> None:
        self.current_index = index
        exercise = self.current_exercise

        if not is_accessible(self.workout, self.entitlement):
            self._gate("workout")
            return
        if not is_exercise_accessible(self.workout, exercise, self.entitlement):
            self._gate("exercise")
            return

        self.state = SessionState.running
        self.gated_scope = None
        self.remaining_seconds = exercise.duration_seconds
        self._timer.start(exercise.duration_seconds)
        logger.debug(
            "Workout %d: exercise %d (%s) running for %ds",
            self.workout.id, index, exercise.name, exercise.duration_seconds,
        )

    def _gate(self, scope: Literal["workout", "exercise"]) -> None:
        self._timer.cancel()
        self.state = SessionState.gated
        self.gated_scope = scope
        self.remaining_seconds = 0
        logger.info(
            "Workout %d gated at %s level (exercise %d)",
            self.workout.id, scope, self.current_index,
        )

    def _complete(self) -> None:
        self.state = SessionState.completed
        self.gated_scope = None
        self.remaining_seconds = 0
        if self._completion_fired:
            return
        self._completion_fired = True
        logger.info("Workout %d completed", self.workout.id)
        if self._on_complete is not None:
            self._on_complete(self)

    def _on_tick(self, remaining: int) -> None:
        if self.state is not SessionState.running:
            return
        self.remaining_seconds = remaining

    def _on_elapsed(self) -> None:
        if self.state is not SessionState.running:
            return
        self.advance()


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def select_workout(
    workout: Workout,
    entitlement: bool,
    on_complete: Optional[Callable[[WorkoutSession], None]] = None,
    scheduler: Optional[Scheduler] = None,
) -> WorkoutSession:
    """Create a session and evaluate the workout gate and exercise 0."""
    session = WorkoutSession(workout, entitlement, on_complete=on_complete, scheduler=scheduler)
    session.begin()
    return session


def advance(session: WorkoutSession) -> WorkoutSession:
    session.advance()
    return session


def reenter(session: WorkoutSession, entitlement: bool) -> WorkoutSession:
    session.reenter(entitlement)
    return session


def abandon(session: WorkoutSession) -> None:
    session.abandon()
