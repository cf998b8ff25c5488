"""Pure projections from application state to JSON-ready view descriptions."""
from __future__ import annotations

import calendar
from datetime import tzinfo

from gymtracker.messages import message
from gymtracker.schemas.routine import Routine
from gymtracker.schemas.session import SessionLog
from gymtracker.services.controller import WorkoutController
from gymtracker.services.editor import RoutineEditor
from gymtracker.services.history import (
    HistoryBrowser,
    HistoryView,
    group_by_exercise,
    local_day,
    sessions_by_day,
)
from gymtracker.services.timer import format_clock
from gymtracker.services.workout import WorkoutState

SUMMARY_NAMES = 3


def routine_summary(routine: Routine) -> str:
    names = [ex.name for ex in routine.exercises]
    summary = ", ".join(names[:SUMMARY_NAMES])
    return summary + ("..." if len(names) > SUMMARY_NAMES else "")


def routine_list_view(routines: list[Routine], locale: str = "en") -> dict:
    return {
        "routines": [
            {
                "id": r.id,
                "name": r.name,
                "exercise_count": len(r.exercises),
                "summary": routine_summary(r),
            }
            for r in routines
        ],
        "empty_message": None if routines else message("no_routines", locale),
    }


def editor_view(editor: RoutineEditor) -> dict:
    return {
        "open": editor.is_open,
        "editing_id": editor.editing_id,
        "name": editor.name,
        "exercises": [
            {"name": row.name, "sets": row.sets, "rest": row.rest, "deletable": row.deletable}
            for row in editor.rows
        ],
    }


def workout_view(controller: WorkoutController, locale: str = "en") -> dict:
    workout = controller.workout
    view = {
        "state": controller.state.value,
        "unsaved": controller.store.unsaved,
        "last_cue_at": controller.last_cue_at,
    }
    if workout is None:
        finished = controller.last_finished
        view["finished"] = None if finished is None else {
            "start_time": finished.start_time,
            "routine_name": finished.routine_name,
            "set_count": len(finished.logs),
            "message": message("workout_finished", locale),
        }
        return view

    exercise = workout.current_exercise
    best = controller.previous_best()
    view.update({
        "routine_id": workout.log.routine_id,
        "routine_name": workout.log.routine_name,
        "exercise_position": f"{workout.exercise_index + 1}/{len(workout.exercises)}",
        "progress_pct": round(workout.progress_pct, 1),
        "exercise": {"name": exercise.name, "sets": exercise.sets, "rest": exercise.rest},
        "current_set": workout.set_number,
        "sets_logged": len(workout.log.logs),
        "total_sets": workout.total_sets,
        "previous_best": None if best is None else {"weight": best.weight, "reps": best.reps},
        "elapsed": format_clock(controller.elapsed),
        "rest": None,
    })
    if workout.state is WorkoutState.resting:
        view["rest"] = {"remaining": controller.timer.remaining, "display": controller.timer.display}
    return view


def history_list_view(history: list[SessionLog], tz: tzinfo, locale: str = "en") -> dict:
    return {
        "sessions": [
            {
                "start_time": s.start_time,
                "routine_name": s.routine_name,
                "date": local_day(s, tz).isoformat(),
                "set_count": len(s.logs),
            }
            for s in history
        ],
        "empty_message": None if history else message("no_history", locale),
    }


def session_detail_view(session: SessionLog) -> dict:
    return {
        "start_time": session.start_time,
        "end_time": session.end_time,
        "routine_id": session.routine_id,
        "routine_name": session.routine_name,
        "exercises": [
            {
                "name": name,
                "sets": [{"set": e.set, "weight": e.weight, "reps": e.reps} for e in entries],
            }
            for name, entries in group_by_exercise(session)
        ],
    }


def calendar_view(history: list[SessionLog], browser: HistoryBrowser, tz: tzinfo) -> dict:
    by_day = sessions_by_day(history, browser.year, browser.month, tz)
    weeks = calendar.Calendar(firstweekday=0).monthdayscalendar(browser.year, browser.month)
    return {
        "year": browser.year,
        "month": browser.month,
        "weeks": [
            [
                None if day == 0 else {"day": day, "sessions": len(by_day.get(day, []))}
                for day in week
            ]
            for week in weeks
        ],
        "active_days": sorted(by_day),
    }


def history_browser_view(controller: WorkoutController, locale: str = "en") -> dict:
    browser = controller.history_browser
    history = controller.store.history
    view = {"view": browser.view.value, "selected": browser.selected}
    if browser.view is HistoryView.detail and browser.selected:
        session = controller.store.find_session(browser.selected)
        view["detail"] = session_detail_view(session) if session else None
    elif browser.view is HistoryView.calendar:
        view["calendar"] = calendar_view(history, browser, controller.tz)
    else:
        view["list"] = history_list_view(history, controller.tz, locale)
    return view
