import pytest

from gymtracker.errors import InvalidTransition
from gymtracker.schemas.routine import Exercise, Routine
from gymtracker.services.workout import WorkoutSession, WorkoutState

TS = "2025-03-10T09:00:00.000Z"

def make_routine(*sets, rest=30):
    return Routine(
        id="r1",
        name="Legs",
        exercises=[Exercise(name=f"E{i + 1}", sets=n, rest=rest) for i, n in enumerate(sets)],
    )

def run_to_end(session):
    while session.state is not WorkoutState.finished:
        session.log_set("20", "10", timestamp=TS)
        session.advance()

def test_start_enters_first_set():
    s = WorkoutSession(make_routine(2, 1), started_at=TS)
    assert s.state is WorkoutState.active
    assert (s.exercise_index, s.set_number) == (0, 1)
    assert s.log.routine_name == "Legs"
    assert s.log.logs == []

@pytest.mark.parametrize("sets", [(1,), (3,), (2, 1, 4), (1, 1, 1, 1)])
def test_completed_workout_logs_every_set_in_order(sets):
    s = WorkoutSession(make_routine(*sets), started_at=TS)
    run_to_end(s)
    expected = [(f"E{i + 1}", n) for i, total in enumerate(sets) for n in range(1, total + 1)]
    assert [(e.exercise, e.set) for e in s.log.logs] == expected
    assert len(s.log.logs) == sum(sets) == s.total_sets

def test_log_set_moves_to_resting_and_keeps_raw_text():
    s = WorkoutSession(make_routine(2), started_at=TS)
    entry = s.log_set("", "8 ", timestamp=TS)
    assert s.state is WorkoutState.resting
    assert (entry.weight, entry.reps) == ("", "8 ")

def test_advance_goes_set_then_exercise_then_finished():
    s = WorkoutSession(make_routine(2, 1), started_at=TS)
    s.log_set("1", "1", timestamp=TS)
    assert s.advance() is WorkoutState.active and s.set_number == 2
    s.log_set("1", "1", timestamp=TS)
    assert s.advance() is WorkoutState.active
    assert (s.exercise_index, s.set_number) == (1, 1)
    s.log_set("1", "1", timestamp=TS)
    assert s.advance() is WorkoutState.finished

def test_transitions_out_of_order_are_rejected():
    s = WorkoutSession(make_routine(1), started_at=TS)
    with pytest.raises(InvalidTransition):
        s.advance()
    s.log_set("1", "1", timestamp=TS)
    with pytest.raises(InvalidTransition):
        s.log_set("1", "1", timestamp=TS)
    with pytest.raises(InvalidTransition):
        s.finish(ended_at=TS)

def test_finish_stamps_end_time():
    s = WorkoutSession(make_routine(1), started_at=TS)
    run_to_end(s)
    done = s.finish(ended_at="2025-03-10T09:30:00.000Z")
    assert done.end_time == "2025-03-10T09:30:00.000Z"
    assert done.dump()["endTime"] == "2025-03-10T09:30:00.000Z"

def test_routine_edits_do_not_leak_into_running_session():
    routine = make_routine(1, 1)
    s = WorkoutSession(routine, started_at=TS)
    routine.name = "Renamed"
    routine.exercises = [Exercise(name="Other", sets=5, rest=0)]
    s.log_set("1", "1", timestamp=TS)
    assert s.log.routine_name == "Legs"
    assert s.log.logs[0].exercise == "E1"
    s.advance()
    assert s.current_exercise.name == "E2"

def test_progress_pct():
    s = WorkoutSession(make_routine(1, 1, 1, 1), started_at=TS)
    assert s.progress_pct == 0
    s.log_set("1", "1", timestamp=TS)
    s.advance()
    assert s.progress_pct == 25
