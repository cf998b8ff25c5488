from __future__ import annotations

from dataclasses import dataclass, field

from gymtracker.errors import InvalidTransition, NotFound, RoutineValidationError
from gymtracker.schemas.routine import Exercise, FormValue, Routine
from gymtracker.services.numbers import parse_int

DEFAULT_SETS = 3
DEFAULT_REST = 60


@dataclass
class ExerciseRow:
    """One exercise input group of the editor, holding raw form values."""
    name: str = ""
    sets: FormValue = str(DEFAULT_SETS)
    rest: FormValue = str(DEFAULT_REST)
    deletable: bool = True

    def to_exercise(self) -> Exercise:
        sets = parse_int(self.sets, DEFAULT_SETS)
        rest = parse_int(self.rest, DEFAULT_REST)
        return Exercise(
            name=self.name.strip(),
            sets=sets if sets >= 1 else DEFAULT_SETS,
            rest=rest if rest >= 0 else DEFAULT_REST,
        )


@dataclass
class RoutineEditor:
    """Draft of the routine being created or edited. Only one draft at a time."""
    is_open: bool = False
    editing_id: str | None = None
    name: str = ""
    rows: list[ExerciseRow] = field(default_factory=list)

    def open_new(self) -> None:
        self.is_open = True
        self.editing_id = None
        self.name = ""
        self.rows = []
        self.add_exercise()

    def open_existing(self, routine: Routine) -> None:
        self.is_open = True
        self.editing_id = routine.id
        self.name = routine.name
        self.rows = []
        for ex in routine.exercises:
            self.add_exercise({"name": ex.name, "sets": str(ex.sets), "rest": str(ex.rest)})

    def close(self) -> None:
        self.is_open = False
        self.editing_id = None
        self.name = ""
        self.rows = []

    def _require_open(self) -> None:
        if not self.is_open:
            raise InvalidTransition("editor_closed")

    def set_name(self, name: str) -> None:
        self._require_open()
        self.name = name

    def add_exercise(self, prefill: dict | None = None) -> ExerciseRow:
        self._require_open()
        # the very first row of a brand-new routine cannot be removed
        row = ExerciseRow(deletable=bool(self.rows) or self.editing_id is not None)
        for key, value in (prefill or {}).items():
            if value is not None and key in ("name", "sets", "rest"):
                setattr(row, key, value)
        self.rows.append(row)
        return row

    def _row(self, index: int) -> ExerciseRow:
        if not 0 <= index < len(self.rows):
            raise NotFound("row_out_of_range")
        return self.rows[index]

    def update_exercise(self, index: int, **values) -> ExerciseRow:
        self._require_open()
        row = self._row(index)
        for key in ("name", "sets", "rest"):
            if values.get(key) is not None:
                setattr(row, key, values[key])
        return row

    def remove_exercise(self, index: int) -> None:
        self._require_open()
        if not self._row(index).deletable:
            raise InvalidTransition("row_not_deletable")
        del self.rows[index]

    def collect(self) -> tuple[str, list[Exercise]]:
        """Validated name and exercises; rows without a name are skipped."""
        self._require_open()
        name = self.name.strip()
        if not name:
            raise RoutineValidationError("routine_name_required")
        exercises = [row.to_exercise() for row in self.rows if row.name.strip()]
        if not exercises:
            raise RoutineValidationError("routine_needs_exercise")
        return name, exercises
