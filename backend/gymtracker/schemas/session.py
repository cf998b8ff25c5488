from typing import Annotated, Any
from pydantic import BaseModel, BeforeValidator, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from gymtracker.timeutil import parse_iso


def _as_text(v: Any) -> Any:
    """Numbers in hand-edited or older exports become their text form."""
    if v is None:
        return ""
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v

# weight/reps are kept exactly as typed, possibly empty
FreeText = Annotated[str, BeforeValidator(_as_text)]

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class SetLog(CamelModel):
    exercise: str
    set: int
    weight: FreeText = ""
    reps: FreeText = ""
    timestamp: str

class SessionLog(CamelModel):
    # unknown keys survive an import/export round trip
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    routine_id: FreeText
    routine_name: str
    current_exercise_index: int = 0
    current_set: int = 1
    start_time: str
    end_time: str | None = None
    logs: list[SetLog] = []

    @field_validator("start_time")
    @classmethod
    def start_time_is_iso(cls, v: str) -> str:
        parse_iso(v)  # raises ValueError on garbage
        return v

    def dump(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
