from fastapi.testclient import TestClient
from gymtracker.main import app
from gymtracker import main as app_main

client = TestClient(app)

class Boom:
    def __enter__(self): raise RuntimeError("db down")
    def __exit__(self, *a): return False

def test_healthz_local_checks_the_store_file_not_the_db(monkeypatch):
    monkeypatch.setattr(app_main, "SessionLocal", lambda: Boom())
    r = client.get("/healthz")
    assert r.json() == {"status": "ok", "storage": "local"}

def test_healthz_local_degraded_on_unreadable_store(tmp_path, monkeypatch):
    broken = tmp_path / "store.json"
    broken.write_text("{broken", encoding="utf-8")
    monkeypatch.setattr(app_main.settings, "LOCAL_STORE_PATH", str(broken))
    body = client.get("/healthz").json()
    assert body["status"] == "degraded"
    assert body["storage"] == "local"

def test_healthz_remote_ok_against_test_db(monkeypatch):
    monkeypatch.setattr(app_main.settings, "STORAGE_BACKEND", "remote")
    assert client.get("/healthz").json() == {"status": "ok", "storage": "remote"}

def test_healthz_remote_degraded(monkeypatch):
    monkeypatch.setattr(app_main.settings, "STORAGE_BACKEND", "remote")
    monkeypatch.setattr(app_main, "SessionLocal", lambda: Boom())
    r = client.get("/healthz")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "degraded"
    assert "db down" in body["error"]
