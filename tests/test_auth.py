"""
Tests for the login check and password helpers.

Run with: pytest tests/ -v
"""
from __future__ import annotations

from userdir.auth.core import hash_password, username_key, verify_password


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _register(client, username: str = "alice", password: str = "secret123") -> None:
    resp = client.post("/users", json={"username": username, "password": password})
    assert resp.status_code == 201


# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def test_hash_is_salted():
    a = hash_password("secret123", rounds=4)
    b = hash_password("secret123", rounds=4)
    assert a != b
    assert verify_password("secret123", a)
    assert verify_password("secret123", b)


def test_verify_rejects_wrong_password():
    assert not verify_password("nope", hash_password("secret123", rounds=4))


def test_verify_rejects_non_bcrypt_value():
    assert not verify_password("secret123", "secret123")


def test_long_passwords_hash():
    long_pw = "x" * 100
    assert verify_password(long_pw, hash_password(long_pw, rounds=4))


# ---------------------------------------------------------------------------
# Username comparison key
# ---------------------------------------------------------------------------

def test_username_key_ignores_case():
    assert username_key("Alice") == username_key("aLICE") == "alice"


def test_username_key_folds_unicode_case():
    assert username_key("STRASSE") == username_key("straße")


# ---------------------------------------------------------------------------
# POST /auth
# ---------------------------------------------------------------------------

def test_login_success(client):
    _register(client)
    resp = client.post("/auth", json={"username": "ALICE", "password": "secret123"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Login successful!"
    assert body["user"]["username"] == "alice"
    assert "password" not in body["user"]


def test_login_bad_password(client):
    _register(client)
    resp = client.post("/auth", json={"username": "alice", "password": "wrong"})
    assert resp.status_code == 401
    assert resp.json() == {"message": "Unauthorized"}


def test_login_unknown_user(client):
    resp = client.post("/auth", json={"username": "ghost", "password": "secret123"})
    assert resp.status_code == 401


def test_login_inactive_user(client):
    _register(client)
    user_id = client.get("/users").json()[0]["id"]
    client.patch("/users", json={"id": user_id, "username": "alice", "roles": ["Employee"], "active": False})
    resp = client.post("/auth", json={"username": "alice", "password": "secret123"})
    assert resp.status_code == 401


def test_login_missing_fields(client):
    resp = client.post("/auth", json={"username": "alice"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "All fields are required!"}


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").json()["service"] == "userdir"
