# gymtracker/repositories/document_repo.py
from __future__ import annotations
from typing import Any, Callable

from sqlalchemy.orm import Session

from gymtracker.models import UserDocument


class DocumentRepository:
    """Per-user JSON documents. Opens a short-lived session per call so it can
    be used from timer callbacks as well as request handlers."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_document(self, user_id: str) -> dict[str, Any] | None:
        with self.session_factory() as db:
            doc = db.get(UserDocument, int(user_id))
            return dict(doc.data) if doc else None

    def set_document(self, user_id: str, document: dict[str, Any]) -> None:
        with self.session_factory() as db:
            doc = db.get(UserDocument, int(user_id))
            if doc is None:
                db.add(UserDocument(user_id=int(user_id), data=document))
            else:
                doc.data = document
            db.commit()


class DocumentStoreBackend:
    def __init__(self, documents: DocumentRepository, user_id: str):
        self.documents = documents
        self.user_id = user_id

    def load(self) -> tuple[list[dict], list[dict]]:
        doc = self.documents.get_document(self.user_id) or {}
        return list(doc.get("routines", [])), list(doc.get("history", []))

    def save(self, routines: list[dict], history: list[dict]) -> None:
        self.documents.set_document(self.user_id, {"routines": routines, "history": history})
