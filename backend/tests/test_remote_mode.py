from fastapi.testclient import TestClient
from gymtracker.main import app
from gymtracker.db import SessionLocal
from gymtracker.repositories.document_repo import DocumentRepository
import pytest
import uuid

client = TestClient(app)
PWD = "secret12"

@pytest.fixture(autouse=True)
def _remote(remote_registry):
    return remote_registry

def sign_up_and_in():
    email = f"{uuid.uuid4().hex[:10]}@example.com"
    assert client.post("/auth/register", json={"email": email, "password": PWD}).status_code == 201
    token = client.post("/auth/login", json={"email": email, "password": PWD}).json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}
    user_id = client.get("/auth/me", headers=headers).json()["id"]
    return headers, user_id

def save_routine(headers, name):
    client.post("/editor", headers=headers)
    client.put("/editor/name", headers=headers, json={"name": name})
    client.patch("/editor/exercises/0", headers=headers, json={"name": "Squat", "sets": "1", "rest": "0"})
    r = client.post("/editor/save", headers=headers)
    assert r.status_code == 200, r.text
    return r.json()

def test_requires_auth():
    assert client.get("/routines").status_code == 401
    assert client.post("/workout/start", json={"routine_id": "1"}).status_code == 401

def test_each_user_gets_their_own_document():
    alice, alice_id = sign_up_and_in()
    bob, _ = sign_up_and_in()
    save_routine(alice, "Alice legs")
    assert [r["name"] for r in client.get("/routines", headers=alice).json()["routines"]] == ["Alice legs"]
    assert client.get("/routines", headers=bob).json()["routines"] == []

    doc = DocumentRepository(SessionLocal).get_document(str(alice_id))
    assert doc["routines"][0]["name"] == "Alice legs"
    assert doc["history"] == []

def test_finished_workout_is_written_to_the_document(scheduler):
    headers, user_id = sign_up_and_in()
    r = save_routine(headers, "Quick")
    client.post("/workout/start", headers=headers, json={"routine_id": r["id"]})
    client.post("/workout/sets", headers=headers, json={"weight": "40", "reps": "8"})
    scheduler.advance(1)
    doc = DocumentRepository(SessionLocal).get_document(str(user_id))
    assert doc["history"][0]["logs"][0]["weight"] == "40"

def test_logout_unloads_state_and_reload_reads_document(remote_registry):
    headers, _ = sign_up_and_in()
    r = save_routine(headers, "Keep me")
    client.post("/workout/start", headers=headers, json={"routine_id": r["id"]})
    assert client.post("/auth/logout", headers=headers).status_code == 204
    # in-flight workout is gone, saved routines come back from the document
    assert client.get("/workout", headers=headers).json()["state"] == "idle"
    assert client.get("/routines", headers=headers).json()["routines"][0]["name"] == "Keep me"

def test_save_failure_is_flagged_and_retried(remote_registry, monkeypatch):
    headers, user_id = sign_up_and_in()
    save_routine(headers, "First")
    controller = remote_registry.get(str(user_id))
    documents = controller.store.backend.documents
    original = documents.set_document

    def down(*a, **kw):
        raise ConnectionError("db unreachable")
    monkeypatch.setattr(documents, "set_document", down)
    r = save_routine(headers, "Second")
    assert r["name"] == "Second"
    assert client.get("/store/status", headers=headers).json()["unsaved"] is True
    assert client.get("/workout", headers=headers).json()["unsaved"] is True

    monkeypatch.setattr(documents, "set_document", original)
    assert client.post("/store/sync", headers=headers).json() == {"saved": True, "unsaved": False}
    names = [r["name"] for r in DocumentRepository(SessionLocal).get_document(str(user_id))["routines"]]
    assert names == ["First", "Second"]
