# gymtracker/repositories/base.py
from __future__ import annotations
from typing import Any, Generic, Protocol, TypeVar

from sqlalchemy.orm import Session

T = TypeVar("T")  # SQLAlchemy model type

class BaseRepository(Generic[T]):
    """Lightweight base for repositories using SQLAlchemy 2.0 style."""
    def __init__(self, db: Session):
        self.db = db

    def add_and_refresh(self, entity: T) -> T:
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity


class KeyValueBackend(Protocol):
    """localStorage-shaped storage: string values under string keys."""
    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class DocumentBackend(Protocol):
    """One JSON document per user id."""
    def get_document(self, user_id: str) -> dict[str, Any] | None: ...
    def set_document(self, user_id: str, document: dict[str, Any]) -> None: ...


class StoreBackend(Protocol):
    """What the Store needs: read and write both collections wholesale."""
    def load(self) -> tuple[list[dict], list[dict]]: ...
    def save(self, routines: list[dict], history: list[dict]) -> None: ...
