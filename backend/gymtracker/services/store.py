from __future__ import annotations

import logging

from pydantic import ValidationError

from gymtracker.errors import PersistenceError
from gymtracker.repositories.base import StoreBackend
from gymtracker.repositories.local_repo import dumps
from gymtracker.schemas.routine import Routine
from gymtracker.schemas.session import SessionLog
from gymtracker.services.editor import ExerciseRow

log = logging.getLogger(__name__)


class Store:
    """In-memory ``routines`` and ``history`` (newest first) for one owner.

    Every mutation goes through :meth:`save`, which writes both collections
    wholesale. A failed save keeps the in-memory state and marks the store
    ``unsaved``; the next save writes everything again.
    """

    def __init__(self, backend: StoreBackend):
        self.backend = backend
        self.routines: list[Routine] = []
        self.history: list[SessionLog] = []
        self.unsaved = False

    def load(self) -> None:
        try:
            routines, history = self.backend.load()
            if not isinstance(routines, list) or not isinstance(history, list):
                raise TypeError("stored collections must be JSON arrays")
            self.routines = [r for r in map(_load_routine, routines) if r is not None]
            self.history = [s for s in map(_load_session, history) if s is not None]
        except Exception as e:
            # malformed JSON, non-list collections or the backend driver's own errors
            log.exception("could not load stored data")
            raise PersistenceError() from e
        self.unsaved = False

    def save(self) -> bool:
        try:
            self.backend.save(
                [r.model_dump() for r in self.routines],
                self.history_dump(),
            )
        except Exception:
            log.exception("could not persist store; keeping in-memory state")
            self.unsaved = True
            return False
        self.unsaved = False
        return True

    # routines

    def get_routine(self, routine_id: str) -> Routine | None:
        return next((r for r in self.routines if r.id == routine_id), None)

    def add_routine(self, routine: Routine) -> None:
        self.routines.append(routine)
        self.save()

    def replace_routine(self, routine: Routine) -> bool:
        for i, existing in enumerate(self.routines):
            if existing.id == routine.id:
                self.routines[i] = routine
                self.save()
                return True
        return False

    def delete_routine(self, routine_id: str) -> bool:
        kept = [r for r in self.routines if r.id != routine_id]
        if len(kept) == len(self.routines):
            return False
        self.routines = kept
        self.save()
        return True

    # history

    def find_session(self, start_time: str) -> SessionLog | None:
        return next((s for s in self.history if s.start_time == start_time), None)

    def prepend_session(self, session: SessionLog) -> None:
        self.history.insert(0, session)
        self.save()

    def prepend_sessions(self, sessions: list[SessionLog]) -> None:
        self.history[:0] = sessions
        self.save()

    def delete_session(self, start_time: str) -> bool:
        kept = [s for s in self.history if s.start_time != start_time]
        if len(kept) == len(self.history):
            return False
        self.history = kept
        self.save()
        return True

    def history_dump(self) -> list[dict]:
        return [s.dump() for s in self.history]

    def export_history(self) -> str:
        """The stored text of ``history``, as written under the history key."""
        return dumps(self.history_dump())


def _load_routine(raw) -> Routine | None:
    """Stored routine, with out-of-range sets/rest coerced the way the editor
    does it. Rows that cannot be repaired are dropped."""
    try:
        return Routine.model_validate(raw)
    except ValidationError:
        pass
    try:
        exercises = [
            ExerciseRow(name=str(ex.get("name") or ""), sets=ex.get("sets"), rest=ex.get("rest"))
            .to_exercise()
            .model_dump()
            for ex in raw.get("exercises") or []
        ]
        repaired = Routine.model_validate({**raw, "exercises": exercises})
    except (ValidationError, AttributeError, TypeError):
        log.warning("dropping unreadable stored routine: %r", raw)
        return None
    log.warning("coerced stored routine id=%s", repaired.id)
    return repaired


def _load_session(raw) -> SessionLog | None:
    try:
        return SessionLog.model_validate(raw)
    except ValidationError:
        log.warning("dropping unreadable stored session: %r", raw)
        return None
