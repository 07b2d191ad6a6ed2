"""Tests for auth endpoints and the token service."""

import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import jwt
import pytest

from src.auth.jwt import ACCESS, REFRESH, InvalidTokenError, create_access_token, create_refresh_token, verify_token
from src.config.settings import get_settings


def _user(role="student"):
    return SimpleNamespace(id=str(uuid.uuid4()), email="someone@example.com", role=role)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert "X-Request-ID" in resp.headers
    assert resp.headers["X-Content-Type-Options"] == "nosniff"


@pytest.mark.parametrize("role", ["student", "mentor"])
def test_register_token_carries_role(client, register, role):
    data = register(role)
    assert data["user"]["role"] == role
    assert data["tokenType"] == "bearer"
    assert "password" not in data["user"] and "passwordHash" not in data["user"]

    payload = verify_token(data["accessToken"], ACCESS)
    assert payload["role"] == role
    assert payload["sub"] == data["user"]["id"]


def test_register_invalid_role(client):
    suffix = uuid.uuid4().hex[:8]
    resp = client.post(
        "/auth/register",
        json={"username": f"u_{suffix}", "email": f"{suffix}@example.com", "password": "TestPass123", "role": "admin"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["type"] == "validation_error"


def test_register_short_password(client):
    suffix = uuid.uuid4().hex[:8]
    resp = client.post(
        "/auth/register",
        json={"username": f"u_{suffix}", "email": f"{suffix}@example.com", "password": "short", "role": "student"},
    )
    assert resp.status_code == 400


def test_register_duplicate_email(client, student):
    resp = client.post(
        "/auth/register",
        json={"username": f"other_{uuid.uuid4().hex[:8]}", "email": student["user"]["email"], "password": "TestPass123", "role": "student"},
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["type"] == "conflict"


def test_register_duplicate_username(client, student):
    resp = client.post(
        "/auth/register",
        json={"username": student["user"]["username"], "email": f"{uuid.uuid4().hex[:8]}@example.com", "password": "TestPass123", "role": "mentor"},
    )
    assert resp.status_code == 409


def test_email_is_case_insensitive(client):
    suffix = uuid.uuid4().hex[:8]
    resp = client.post(
        "/auth/register",
        json={"username": f"case_{suffix}", "email": f"Mixed.{suffix}@Example.com", "password": "TestPass123", "role": "student"},
    )
    assert resp.status_code == 201
    assert resp.json()["data"]["user"]["email"] == f"mixed.{suffix}@example.com"

    resp = client.post(
        "/auth/register",
        json={"username": f"case2_{suffix}", "email": f"mixed.{suffix}@example.com", "password": "TestPass123", "role": "mentor"},
    )
    assert resp.status_code == 409

    resp = client.post("/auth/login", json={"email": f"MIXED.{suffix.upper()}@EXAMPLE.COM", "password": "TestPass123"})
    assert resp.status_code == 200


def test_login_success(client, register):
    data = register("mentor", password="MentorPass123")
    resp = client.post("/auth/login", json={"email": data["user"]["email"], "password": "MentorPass123"})
    assert resp.status_code == 200
    body = resp.json()["data"]
    assert body["user"]["id"] == data["user"]["id"]
    assert verify_token(body["accessToken"], ACCESS)["role"] == "mentor"


def test_login_wrong_password(client, student):
    resp = client.post("/auth/login", json={"email": student["user"]["email"], "password": "WrongPass"})
    assert resp.status_code == 401


def test_login_nonexistent_user(client):
    resp = client.post("/auth/login", json={"email": "nobody@example.com", "password": "x"})
    assert resp.status_code == 401


def test_refresh_token(client, student):
    resp = client.post("/auth/refresh", json={"refreshToken": student["refreshToken"]})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert verify_token(data["accessToken"], ACCESS)["sub"] == student["user"]["id"]
    assert data["refreshToken"] != student["refreshToken"]


def test_refresh_revoked_token(client, student):
    client.post("/auth/refresh", json={"refreshToken": student["refreshToken"]})

    # Rotation revoked the first token
    resp = client.post("/auth/refresh", json={"refreshToken": student["refreshToken"]})
    assert resp.status_code == 401


def test_refresh_rejects_access_token(client, student):
    resp = client.post("/auth/refresh", json={"refreshToken": student["accessToken"]})
    assert resp.status_code == 401
    assert resp.json()["error"]["type"] == "authentication_error"


def test_logout(client, student, bearer):
    resp = client.post("/auth/logout", json={"refreshToken": student["refreshToken"]}, headers=bearer(student))
    assert resp.status_code == 200

    resp = client.post("/auth/refresh", json={"refreshToken": student["refreshToken"]})
    assert resp.status_code == 401


def test_me(client, mentor, bearer):
    resp = client.get("/auth/me", headers=bearer(mentor))
    assert resp.status_code == 200
    assert resp.json()["data"] == {"id": mentor["user"]["id"], "email": mentor["user"]["email"], "role": "mentor"}


def test_missing_auth(client):
    resp = client.post("/auth/logout", json={"refreshToken": "x"})
    assert resp.status_code == 401
    assert resp.json()["error"]["type"] == "authentication_error"


def test_refresh_token_used_as_bearer(client, student):
    resp = client.get("/auth/me", headers={"Authorization": f"Bearer {student['refreshToken']}"})
    assert resp.status_code == 401


# --- Token service ---

def test_verify_rejects_wrong_kind():
    user = _user()
    with pytest.raises(InvalidTokenError):
        verify_token(create_refresh_token(user), ACCESS)
    with pytest.raises(InvalidTokenError):
        verify_token(create_access_token(user), REFRESH)


def test_verify_rejects_expired_and_tampered():
    settings = get_settings()
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    expired = jwt.encode(
        {"sub": "u1", "role": "student", "type": ACCESS, "iat": past - timedelta(minutes=15), "exp": past},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(InvalidTokenError):
        verify_token(expired, ACCESS)

    forged = jwt.encode(
        {"sub": "u1", "role": "mentor", "type": ACCESS, "iat": datetime.now(timezone.utc), "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        "some-other-secret-that-is-long-enough",
        algorithm="HS256",
    )
    with pytest.raises(InvalidTokenError):
        verify_token(forged, ACCESS)

    with pytest.raises(InvalidTokenError):
        verify_token("not-a-jwt", ACCESS)


def test_verify_rejects_missing_role():
    settings = get_settings()
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "u1", "type": ACCESS, "iat": now, "exp": now + timedelta(minutes=5)},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(InvalidTokenError):
        verify_token(token, ACCESS)


def test_token_lifetimes():
    settings = get_settings()
    user = _user("mentor")
    access = verify_token(create_access_token(user), ACCESS)
    refresh = verify_token(create_refresh_token(user), REFRESH)
    assert access["exp"] - access["iat"] == settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60
    assert refresh["exp"] - refresh["iat"] == settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS * 86400
