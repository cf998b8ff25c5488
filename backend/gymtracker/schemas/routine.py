from typing import Annotated
from pydantic import BaseModel, Field

SetCount = Annotated[int, Field(ge=1)]
RestSeconds = Annotated[int, Field(ge=0)]
# Raw form input: whatever the user typed, coerced on save
FormValue = str | int | None

class Exercise(BaseModel):
    name: str
    sets: SetCount = 3
    rest: RestSeconds = 60

    model_config = {"frozen": True}

class Routine(BaseModel):
    id: str
    name: str
    exercises: list[Exercise]

class ExerciseRowIn(BaseModel):
    name: str = ""
    sets: FormValue = "3"
    rest: FormValue = "60"

class ExerciseRowPatch(BaseModel):
    name: str | None = None
    sets: FormValue = None
    rest: FormValue = None

class RoutineNameIn(BaseModel):
    name: str
