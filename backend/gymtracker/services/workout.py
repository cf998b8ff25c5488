from __future__ import annotations

from enum import Enum

from gymtracker.errors import InvalidTransition
from gymtracker.schemas.routine import Exercise, Routine
from gymtracker.schemas.session import SessionLog, SetLog


class WorkoutState(str, Enum):
    idle = "idle"
    active = "active"
    resting = "resting"
    finished = "finished"


class WorkoutSession:
    """Execution of one routine, set by set.

    ``active`` waits for a set to be logged, ``resting`` waits for the rest
    timer, ``finished`` is reached when :meth:`advance` runs past the last set
    of the last exercise. The exercise list is copied at start, so editing or
    deleting the routine meanwhile does not affect the session.
    """

    def __init__(self, routine: Routine, *, started_at: str):
        if not routine.exercises:
            raise InvalidTransition("routine_needs_exercise")
        self.exercises: tuple[Exercise, ...] = tuple(routine.exercises)
        self.log = SessionLog(
            routine_id=routine.id,
            routine_name=routine.name,
            current_exercise_index=0,
            current_set=1,
            start_time=started_at,
            logs=[],
        )
        self.state = WorkoutState.active

    @property
    def exercise_index(self) -> int:
        return self.log.current_exercise_index

    @property
    def set_number(self) -> int:
        return self.log.current_set

    @property
    def current_exercise(self) -> Exercise:
        return self.exercises[self.exercise_index]

    @property
    def total_sets(self) -> int:
        return sum(ex.sets for ex in self.exercises)

    @property
    def progress_pct(self) -> float:
        if self.state is WorkoutState.finished:
            return 100.0
        return self.exercise_index / len(self.exercises) * 100

    def _expect(self, state: WorkoutState) -> None:
        if self.state is not state:
            raise InvalidTransition()

    def log_set(self, weight: str, reps: str, *, timestamp: str) -> SetLog:
        """Record the current set and start resting."""
        self._expect(WorkoutState.active)
        entry = SetLog(
            exercise=self.current_exercise.name,
            set=self.set_number,
            weight=weight,
            reps=reps,
            timestamp=timestamp,
        )
        self.log.logs.append(entry)
        self.state = WorkoutState.resting
        return entry

    def advance(self) -> WorkoutState:
        """Leave the rest: next set, next exercise, or finished."""
        self._expect(WorkoutState.resting)
        if self.set_number < self.current_exercise.sets:
            self.log.current_set += 1
            self.state = WorkoutState.active
        elif self.exercise_index < len(self.exercises) - 1:
            self.log.current_exercise_index += 1
            self.log.current_set = 1
            self.state = WorkoutState.active
        else:
            self.state = WorkoutState.finished
        return self.state

    def finish(self, *, ended_at: str) -> SessionLog:
        """Stamp the end time and hand back the completed log."""
        self._expect(WorkoutState.finished)
        self.log.end_time = ended_at
        return self.log.model_copy(deep=True)
