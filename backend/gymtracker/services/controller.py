"""Per-owner application state and the registry that hands it out."""
from __future__ import annotations

import logging
import threading
from datetime import datetime, tzinfo
from typing import Callable

from gymtracker.errors import ConfirmationRequired, InvalidTransition, NotFound
from gymtracker.repositories.base import StoreBackend
from gymtracker.schemas.routine import Routine
from gymtracker.schemas.session import SessionLog
from gymtracker.services.editor import RoutineEditor
from gymtracker.services.history import (
    BestSet,
    HistoryBrowser,
    HistoryView,
    best_set,
    new_sessions,
    parse_import,
)
from gymtracker.services.store import Store
from gymtracker.services.timer import RestTimer, Scheduler, TickHandle
from gymtracker.services.workout import WorkoutSession, WorkoutState
from gymtracker.timeutil import epoch_millis, to_iso, utcnow

log = logging.getLogger(__name__)

REST = "rest"
ELAPSED = "elapsed"


class WorkoutController:
    """Owns one user's store, editor, running workout and timers.

    All state changes happen through these methods; each one that touches
    routines or history persists the store before returning. Callers hold
    ``lock`` around a request; tick callbacks take it themselves.
    """

    def __init__(
        self,
        store: Store,
        scheduler: Scheduler,
        *,
        tz: tzinfo,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.scheduler = scheduler
        self.tz = tz
        self.clock = clock
        self.editor = RoutineEditor()
        self.workout: WorkoutSession | None = None
        self.timer = RestTimer(self._rest_over)
        self.elapsed = 0
        self.last_cue_at: str | None = None
        self.last_finished: SessionLog | None = None
        today = clock().astimezone(tz)
        self.history_browser = HistoryBrowser(year=today.year, month=today.month)
        self._tickers: dict[str, TickHandle] = {}
        self.lock = threading.RLock()

    def load(self) -> None:
        self.store.load()

    def close(self) -> None:
        for role in list(self._tickers):
            self._stop_ticker(role)
        self.timer.stop()
        self.workout = None

    # tickers: at most one live handle per role

    def _start_ticker(self, role: str, callback: Callable[[], None]) -> None:
        self._stop_ticker(role)
        handle: TickHandle | None = None

        def tick() -> None:
            with self.lock:
                # a tick already in flight when its ticker was replaced is dropped
                if self._tickers.get(role) is handle:
                    callback()

        handle = self.scheduler.call_every(1, tick)
        self._tickers[role] = handle

    def _stop_ticker(self, role: str) -> None:
        handle = self._tickers.pop(role, None)
        if handle is not None:
            handle.cancel()

    def _now_iso(self) -> str:
        return to_iso(self.clock())

    # routines and editor

    def routine(self, routine_id: str) -> Routine:
        routine = self.store.get_routine(routine_id)
        if routine is None:
            raise NotFound("routine_not_found")
        return routine

    def new_routine(self) -> None:
        self.editor.open_new()

    def edit_routine(self, routine_id: str) -> None:
        self.editor.open_existing(self.routine(routine_id))

    def save_routine(self) -> Routine:
        name, exercises = self.editor.collect()
        editing_id = self.editor.editing_id
        if editing_id is not None and self.store.get_routine(editing_id) is not None:
            routine = Routine(id=editing_id, name=name, exercises=exercises)
            self.store.replace_routine(routine)
        else:
            routine = Routine(id=self._new_routine_id(), name=name, exercises=exercises)
            self.store.add_routine(routine)
        self.editor.close()
        return routine

    def _new_routine_id(self) -> str:
        stamp = epoch_millis(self.clock())
        taken = {r.id for r in self.store.routines}
        while str(stamp) in taken:
            stamp += 1
        return str(stamp)

    def delete_routine(self, routine_id: str, *, confirm: bool) -> None:
        if not confirm:
            raise ConfirmationRequired("confirm_delete_routine")
        if not self.store.delete_routine(routine_id):
            raise NotFound("routine_not_found")
        if self.editor.editing_id == routine_id:
            self.editor.close()

    # workout

    @property
    def state(self) -> WorkoutState:
        return self.workout.state if self.workout else WorkoutState.idle

    def _active_workout(self) -> WorkoutSession:
        if self.workout is None:
            raise InvalidTransition("no_active_workout")
        return self.workout

    def start_workout(self, routine_id: str) -> WorkoutSession:
        if self.workout is not None:
            raise InvalidTransition("workout_in_progress")
        routine = self.routine(routine_id)
        self.workout = WorkoutSession(routine, started_at=self._now_iso())
        self.elapsed = 0
        self.last_finished = None
        self._start_ticker(ELAPSED, self._tick_elapsed)
        log.info("workout started routine=%s", routine.id)
        return self.workout

    def _tick_elapsed(self) -> None:
        self.elapsed += 1

    def log_set(self, weight: str, reps: str) -> None:
        workout = self._active_workout()
        workout.log_set(weight, reps, timestamp=self._now_iso())
        self.timer.start(workout.current_exercise.rest)
        self._start_ticker(REST, self.timer.tick)

    def adjust_rest(self, delta: int) -> None:
        if self.state is not WorkoutState.resting:
            raise InvalidTransition()
        self.timer.adjust(delta)

    def skip_rest(self) -> None:
        if self.state is not WorkoutState.resting:
            raise InvalidTransition()
        self.timer.skip()

    def _rest_over(self, natural: bool) -> None:
        self._stop_ticker(REST)
        if natural:
            self.last_cue_at = self._now_iso()
        if self.workout is None:
            return
        if self.workout.advance() is WorkoutState.finished:
            self._finish_workout()

    def _finish_workout(self) -> None:
        workout = self._active_workout()
        completed = workout.finish(ended_at=self._now_iso())
        self._stop_ticker(ELAPSED)
        self.workout = None
        self.last_finished = completed
        self.history_browser.show_list()
        self.store.prepend_session(completed)
        log.info("workout finished routine=%s sets=%d", completed.routine_id, len(completed.logs))

    def abort_workout(self, *, confirm: bool) -> None:
        self._active_workout()
        if not confirm:
            raise ConfirmationRequired("confirm_abort")
        self._stop_ticker(REST)
        self._stop_ticker(ELAPSED)
        self.timer.stop()
        self.workout = None
        log.info("workout aborted")

    def previous_best(self) -> BestSet | None:
        if self.workout is None:
            return None
        return best_set(
            self.store.history,
            self.workout.log.routine_id,
            self.workout.current_exercise.name,
        )

    # history

    def session(self, start_time: str) -> SessionLog:
        session = self.store.find_session(start_time)
        if session is None:
            raise NotFound("session_not_found")
        return session

    def delete_session(self, start_time: str) -> None:
        if not self.store.delete_session(start_time):
            raise NotFound("session_not_found")
        if self.history_browser.selected == start_time:
            self.history_browser.show_list()

    def click_day(self, day: int) -> HistoryView | None:
        return self.history_browser.click_day(self.store.history, day, self.tz)

    def import_history(self, content: str | bytes) -> int:
        fresh = new_sessions(self.store.history, parse_import(content))
        if fresh:
            self.store.prepend_sessions(fresh)
        return len(fresh)

    def export_history(self) -> str:
        return self.store.export_history()


class AppRegistry:
    """Hands out one loaded controller per owner key.

    ``requires_auth`` is set for document-per-user storage; local storage
    has a single implicit owner.
    """

    def __init__(
        self,
        backend_factory: Callable[[str], StoreBackend],
        scheduler: Scheduler,
        *,
        requires_auth: bool,
        tz: tzinfo,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.backend_factory = backend_factory
        self.scheduler = scheduler
        self.requires_auth = requires_auth
        self.tz = tz
        self.clock = clock
        self._controllers: dict[str, WorkoutController] = {}
        self._lock = threading.Lock()

    def get(self, owner: str) -> WorkoutController:
        with self._lock:
            controller = self._controllers.get(owner)
        if controller is not None:
            return controller
        controller = WorkoutController(
            Store(self.backend_factory(owner)), self.scheduler, tz=self.tz, clock=self.clock
        )
        # loaded outside the registry lock; concurrent first loads keep the earliest finisher
        controller.load()
        with self._lock:
            return self._controllers.setdefault(owner, controller)

    def drop(self, owner: str) -> None:
        with self._lock:
            controller = self._controllers.pop(owner, None)
        if controller is not None:
            with controller.lock:
                controller.close()

    def drop_all(self) -> None:
        with self._lock:
            owners = list(self._controllers)
        for owner in owners:
            self.drop(owner)
        log.info("unloaded %d owner(s)", len(owners))
