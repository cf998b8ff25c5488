from pydantic import BaseModel

from gymtracker.schemas.session import FreeText

class StartWorkout(BaseModel):
    routine_id: str

class LogSetIn(BaseModel):
    weight: FreeText = ""
    reps: FreeText = ""

class AdjustRest(BaseModel):
    delta: int

class Confirm(BaseModel):
    confirm: bool = False

class ShiftMonth(BaseModel):
    delta: int = 1

class ImportResult(BaseModel):
    merged: int
    message: str
