from fastapi.testclient import TestClient
from gymtracker.main import app
from gymtracker.security import create_access_token
import uuid

client = TestClient(app)
PWD = "secret12"
def uniq_email(): return f"{uuid.uuid4().hex[:10]}@example.com"

def register(email, pwd=PWD):
    return client.post("/auth/register", json={"email": email, "password": pwd})

def login(email, pwd=PWD):
    return client.post("/auth/login", json={"email": email, "password": pwd})

def test_register_login_and_me():
    email = uniq_email()
    r = register(email)
    assert r.status_code == 201
    tok = login(email).json()["access_token"]
    me = client.get("/auth/me", headers={"Authorization": f"Bearer {tok}"})
    assert me.status_code == 200
    assert me.json()["email"] == email
    assert "password_hash" not in me.json()

def test_register_duplicate_email_maps_code():
    e = uniq_email()
    assert register(e).status_code == 201
    r = register(e)
    assert r.status_code == 400
    assert r.json()["detail"]["code"] == "auth/email-already-in-use"
    assert "already registered" in r.json()["detail"]["message"]

def test_register_weak_password():
    r = register(uniq_email(), "short")
    assert r.status_code == 400
    assert r.json()["detail"]["code"] == "auth/weak-password"

def test_register_invalid_email():
    r = register("not-an-email")
    assert r.status_code == 400
    assert r.json()["detail"]["code"] == "auth/invalid-email"

def test_login_unknown_email_and_wrong_password_look_the_same():
    e = uniq_email()
    register(e)
    r1 = login(uniq_email())
    r2 = login(e, "WrongPass123!")
    assert r1.status_code == r2.status_code == 401
    assert r1.json()["detail"]["code"] == r2.json()["detail"]["code"] == "auth/invalid-credential"

def test_token_expired():
    e = uniq_email()
    register(e)
    tok = login(e).json()["access_token"]
    user_id = client.get("/auth/me", headers={"Authorization": f"Bearer {tok}"}).json()["id"]

    expired = create_access_token(str(user_id), expires_minutes=-1)
    r = client.get("/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Token expired"

def test_garbage_token_rejected():
    r = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
