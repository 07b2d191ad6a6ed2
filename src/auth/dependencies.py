"""Auth dependencies for FastAPI route injection."""

from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, Request

from src.auth.jwt import ACCESS, InvalidTokenError, verify_token
from src.utils.errors import AuthenticationError, AuthorizationError


@dataclass
class CurrentUser:
    id: str
    email: str
    role: str


def _extract_bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        return auth[7:]
    return None


def current_user_from_token(token: str) -> CurrentUser:
    try:
        payload = verify_token(token, ACCESS)
    except InvalidTokenError as exc:
        raise AuthenticationError("Invalid or expired token") from exc
    return CurrentUser(id=payload["sub"], email=payload.get("email", ""), role=payload["role"])


async def get_current_user(request: Request) -> CurrentUser:
    """FastAPI dependency: authenticate via Bearer access token."""
    token = _extract_bearer_token(request)
    if not token:
        raise AuthenticationError("Missing authentication credentials")
    return current_user_from_token(token)


def require_role(role: str) -> Callable:
    """Dependency factory restricting a route to one role."""

    async def _dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role != role:
            raise AuthorizationError(f"Only {role}s can perform this action")
        return user

    return _dependency
