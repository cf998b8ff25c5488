from fastapi.testclient import TestClient
from gymtracker.main import app
from gymtracker import main as app_main

client = TestClient(app)

def test_ping():
    r = client.get("/ping")
    assert r.status_code == 200
    assert r.json() == {"pong": True}

def test_healthz():
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] in {"ok", "degraded"}

def test_version():
    r = client.get("/version")
    assert r.status_code == 200
    assert "version" in r.json()

def test_request_id_echoed_or_generated():
    r = client.get("/ping", headers={"X-Request-ID": "abc-123"})
    assert r.headers["X-Request-ID"] == "abc-123"
    assert client.get("/ping").headers["X-Request-ID"]

def test_version_comes_from_settings(monkeypatch):
    monkeypatch.setattr(app_main.settings, "API_VERSION", "1.4.0")
    assert client.get("/version").json() == {"version": "1.4.0"}
