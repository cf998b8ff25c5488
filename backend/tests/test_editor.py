import pytest

from gymtracker.errors import InvalidTransition, NotFound, RoutineValidationError
from gymtracker.schemas.routine import Exercise, Routine
from gymtracker.services.editor import RoutineEditor

def test_new_routine_starts_with_one_undeletable_default_row():
    ed = RoutineEditor()
    ed.open_new()
    assert len(ed.rows) == 1
    row = ed.rows[0]
    assert (row.name, row.sets, row.rest, row.deletable) == ("", "3", "60", False)
    ed.add_exercise()
    assert ed.rows[1].deletable
    with pytest.raises(InvalidTransition):
        ed.remove_exercise(0)
    ed.remove_exercise(1)
    assert len(ed.rows) == 1

def test_add_exercise_with_prefill():
    ed = RoutineEditor()
    ed.open_new()
    row = ed.add_exercise({"name": "Row", "sets": "4", "rest": None})
    assert (row.name, row.sets, row.rest) == ("Row", "4", "60")

def test_editing_existing_routine_rows_are_all_deletable():
    ed = RoutineEditor()
    ed.open_existing(Routine(id="7", name="Push", exercises=[Exercise(name="Bench", sets=5, rest=90)]))
    assert ed.editing_id == "7"
    assert ed.rows[0].name == "Bench" and ed.rows[0].deletable

def test_collect_requires_name_and_an_exercise():
    ed = RoutineEditor()
    ed.open_new()
    with pytest.raises(RoutineValidationError) as exc:
        ed.collect()
    assert exc.value.key == "routine_name_required"
    ed.set_name("  Legs ")
    with pytest.raises(RoutineValidationError) as exc:
        ed.collect()
    assert exc.value.key == "routine_needs_exercise"

def test_collect_coerces_numbers_with_fallbacks():
    ed = RoutineEditor()
    ed.open_new()
    ed.set_name("Legs")
    ed.update_exercise(0, name="Squat", sets="5x", rest="abc")
    ed.add_exercise({"name": "Lunge", "sets": "0", "rest": "0"})
    ed.add_exercise({"name": "Calf", "sets": 4, "rest": "-10"})
    ed.add_exercise()  # blank name, skipped
    name, exercises = ed.collect()
    assert name == "Legs"
    assert exercises == [
        Exercise(name="Squat", sets=5, rest=60),
        Exercise(name="Lunge", sets=3, rest=0),
        Exercise(name="Calf", sets=4, rest=60),
    ]

def test_closed_editor_rejects_edits():
    ed = RoutineEditor()
    with pytest.raises(InvalidTransition):
        ed.add_exercise()
    ed.open_new()
    with pytest.raises(NotFound):
        ed.update_exercise(5, name="x")
