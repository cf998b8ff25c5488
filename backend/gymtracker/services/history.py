from __future__ import annotations

import calendar
import json
from dataclasses import dataclass
from datetime import date, tzinfo
from enum import Enum

from pydantic import ValidationError

from gymtracker.errors import FormatError
from gymtracker.schemas.session import SessionLog
from gymtracker.services.numbers import parse_number
from gymtracker.timeutil import parse_iso


@dataclass(frozen=True, slots=True)
class BestSet:
    weight: str
    reps: str


def best_set(history: list[SessionLog], routine_id: str, exercise_name: str) -> BestSet | None:
    """Heaviest set (ties: most reps) of ``exercise_name`` in the most recent
    session of ``routine_id``. Older sessions are not consulted."""
    last = next((s for s in history if s.routine_id == routine_id), None)
    if last is None:
        return None
    candidates = [
        entry for entry in last.logs
        if entry.exercise == exercise_name and entry.weight.strip()
    ]
    if not candidates:
        return None
    top = max(
        candidates,
        key=lambda e: (parse_number(e.weight) or 0.0, parse_number(e.reps) or 0.0),
    )
    return BestSet(weight=top.weight, reps=top.reps)


def group_by_exercise(session: SessionLog) -> list[tuple[str, list]]:
    """Logged sets grouped by exercise name, first-seen order, sets as logged."""
    groups: dict[str, list] = {}
    for entry in session.logs:
        groups.setdefault(entry.exercise, []).append(entry)
    return list(groups.items())


def local_day(session: SessionLog, tz: tzinfo) -> date:
    return parse_iso(session.start_time).astimezone(tz).date()


def sessions_by_day(history: list[SessionLog], year: int, month: int, tz: tzinfo) -> dict[int, list[SessionLog]]:
    """Day of month -> sessions started that day, for the viewed month."""
    days: dict[int, list[SessionLog]] = {}
    for session in history:
        day = local_day(session, tz)
        if day.year == year and day.month == month:
            days.setdefault(day.day, []).append(session)
    return days


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


class HistoryView(str, Enum):
    list = "list"
    calendar = "calendar"
    detail = "detail"


@dataclass
class HistoryBrowser:
    """Which history panel is showing and which month the calendar is on."""
    year: int
    month: int
    view: HistoryView = HistoryView.list
    selected: str | None = None

    def show_list(self) -> None:
        self.view = HistoryView.list
        self.selected = None

    def show_calendar(self) -> None:
        self.view = HistoryView.calendar
        self.selected = None

    def open_detail(self, start_time: str) -> None:
        self.view = HistoryView.detail
        self.selected = start_time

    def shift(self, delta: int) -> None:
        self.year, self.month = shift_month(self.year, self.month, delta)

    def click_day(self, history: list[SessionLog], day: int, tz: tzinfo) -> HistoryView | None:
        """One session opens its detail, several fall back to the list,
        an empty day does nothing."""
        if not 1 <= day <= calendar.monthrange(self.year, self.month)[1]:
            return None
        sessions = sessions_by_day(history, self.year, self.month, tz).get(day, [])
        if len(sessions) == 1:
            self.open_detail(sessions[0].start_time)
        elif sessions:
            self.show_list()
        else:
            return None
        return self.view


def parse_import(content: str | bytes) -> list[SessionLog]:
    """Parse an exported history file. Anything that does not look like one
    is rejected whole."""
    try:
        data = json.loads(content)
    except (ValueError, UnicodeDecodeError) as e:
        raise FormatError() from e
    if not isinstance(data, list):
        raise FormatError()
    if data:
        first = data[0]
        if not isinstance(first, dict) or "routineName" not in first or "logs" not in first:
            raise FormatError()
    try:
        return [SessionLog.model_validate(item) for item in data]
    except ValidationError as e:
        raise FormatError() from e


def new_sessions(history: list[SessionLog], candidates: list[SessionLog]) -> list[SessionLog]:
    """Candidates whose ``startTime`` is not in history yet, in the given order."""
    seen = {s.start_time for s in history}
    fresh = []
    for candidate in candidates:
        if candidate.start_time in seen:
            continue
        seen.add(candidate.start_time)
        fresh.append(candidate)
    return fresh
