"""JWT token creation and verification."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from src.config.settings import get_settings

ACCESS = "access"
REFRESH = "refresh"

_REQUIRED_CLAIMS = ("sub", "role", "type", "exp", "iat")


class InvalidTokenError(Exception):
    """Raised for any unusable token: bad signature, malformed, wrong type or expired."""


def _encode(user: Any, token_type: str, lifetime: timedelta) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user.id,
        "email": user.email,
        "role": user.role,
        "type": token_type,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_access_token(user: Any) -> str:
    settings = get_settings()
    return _encode(user, ACCESS, timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES))


def create_refresh_token(user: Any) -> str:
    settings = get_settings()
    return _encode(user, REFRESH, timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS))


def verify_token(token: str, expected_type: str) -> dict:
    """Decode and validate a JWT of the given type.

    Expiry, signature and shape problems all surface as InvalidTokenError.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": list(_REQUIRED_CLAIMS)},
        )
    except jwt.PyJWTError as exc:
        raise InvalidTokenError("Invalid or expired token") from exc

    if payload.get("type") != expected_type:
        raise InvalidTokenError("Invalid token type")
    if not isinstance(payload.get("sub"), str) or not payload["sub"]:
        raise InvalidTokenError("Invalid token subject")
    return payload
