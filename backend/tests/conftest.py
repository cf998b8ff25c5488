"""
Point the app at throwaway storage before anything imports it, create the
schema, and give every test a fresh registry driven by a manual clock.
"""
import os
import tempfile

_TMP = tempfile.mkdtemp(prefix="gymtracker-tests-")
os.environ.setdefault("DB_URL", f"sqlite:///{_TMP}/test.db")
os.environ.setdefault("LOCAL_STORE_PATH", f"{_TMP}/local_store.json")

from datetime import datetime, timedelta, timezone

import pytest

from gymtracker import models  # noqa: F401
from gymtracker.db import Base, SessionLocal, engine
from gymtracker.main import app
from gymtracker.repositories.document_repo import DocumentRepository, DocumentStoreBackend
from gymtracker.repositories.local_repo import JsonFileKeyValue, KeyValueStoreBackend
from gymtracker.services.controller import AppRegistry
from gymtracker.services.timer import ManualScheduler

Base.metadata.create_all(engine)


class FakeClock:
    """Wall clock that only moves when told to."""
    def __init__(self, start=datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds=1):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def local_registry(tmp_path, scheduler, clock, monkeypatch):
    kv = JsonFileKeyValue(tmp_path / "store.json")
    registry = AppRegistry(
        lambda owner: KeyValueStoreBackend(kv),
        scheduler,
        requires_auth=False,
        tz=timezone.utc,
        clock=clock,
    )
    monkeypatch.setattr(app.state, "registry", registry)
    return registry


@pytest.fixture
def remote_registry(scheduler, clock, monkeypatch):
    documents = DocumentRepository(SessionLocal)
    registry = AppRegistry(
        lambda owner: DocumentStoreBackend(documents, owner),
        scheduler,
        requires_auth=True,
        tz=timezone.utc,
        clock=clock,
    )
    monkeypatch.setattr(app.state, "registry", registry)
    return registry
