"""Auth endpoints: register, login, refresh, logout, me."""

import logging
from datetime import datetime, timezone
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlalchemy.exc import IntegrityError

from src.auth import repository as token_repository
from src.auth.dependencies import CurrentUser, get_current_user
from src.auth.jwt import REFRESH, InvalidTokenError, create_access_token, create_refresh_token, verify_token
from src.auth.passwords import hash_password, verify_password
from src.users import repository as user_repository
from src.users.schemas import UserResponse
from src.utils.errors import AuthenticationError, ConflictError
from src.utils.validators import CamelModel, NormalizedEmail, success

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


# --- Request / Response schemas ---

class RegisterRequest(CamelModel):
    username: str = Field(min_length=3, max_length=50)
    email: NormalizedEmail
    password: str = Field(min_length=8, max_length=100)
    role: Literal["student", "mentor"]

class LoginRequest(CamelModel):
    email: NormalizedEmail
    password: str = Field(min_length=1)

class RefreshRequest(CamelModel):
    refresh_token: str = Field(min_length=1)

class TokenPair(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"

class AuthResponse(TokenPair):
    user: UserResponse


# --- Helpers ---

def _issue_tokens(user) -> TokenPair:
    pair = TokenPair(
        access_token=create_access_token(user),
        refresh_token=create_refresh_token(user),
    )
    exp = verify_token(pair.refresh_token, REFRESH)["exp"]
    expires_at = datetime.fromtimestamp(exp, tz=timezone.utc).replace(tzinfo=None)
    token_repository.store(user.id, pair.refresh_token, expires_at)
    return pair


def _auth_response(user) -> AuthResponse:
    pair = _issue_tokens(user)
    return AuthResponse(user=UserResponse.model_validate(user), **pair.model_dump())


# --- Endpoints ---

@router.post("/register", status_code=201, summary="Register a new user", description="Create a student or mentor account and return JWT tokens.")
def register(body: RegisterRequest):
    if user_repository.get_by_email(body.email):
        raise ConflictError("Email already registered")
    if user_repository.get_by_username(body.username):
        raise ConflictError("Username already taken")

    try:
        user = user_repository.create(body.username, body.email, hash_password(body.password), body.role)
    except IntegrityError as exc:
        raise ConflictError("Email or username already registered") from exc

    logger.info("Registered %s %s", user.role, user.id)
    return success(_auth_response(user))


@router.post("/login", summary="Login", description="Authenticate with email and password, returns JWT access and refresh tokens.")
def login(body: LoginRequest):
    user = user_repository.get_by_email(body.email)
    if user is None or not verify_password(body.password, user.password_hash):
        raise AuthenticationError("Invalid email or password")
    return success(_auth_response(user))


@router.post("/refresh", summary="Refresh access token", description="Exchange a valid refresh token for a new token pair. Old refresh token is revoked.")
def refresh(body: RefreshRequest):
    try:
        payload = verify_token(body.refresh_token, REFRESH)
    except InvalidTokenError as exc:
        raise AuthenticationError("Invalid or expired refresh token") from exc

    if not token_repository.revoke_if_active(body.refresh_token):
        raise AuthenticationError("Refresh token revoked or not found")

    user = user_repository.get_by_id(payload["sub"])
    if user is None:
        raise AuthenticationError("Invalid or expired refresh token")

    return success(_issue_tokens(user))


@router.post("/logout", summary="Logout", description="Revoke the refresh token. Requires a valid access token.")
def logout(body: RefreshRequest, user: CurrentUser = Depends(get_current_user)):
    token_repository.revoke_for_user(body.refresh_token, user.id)
    return success({"message": "Logged out successfully"})


@router.get("/me", summary="Current identity", description="Identity carried by the access token.")
async def me(user: CurrentUser = Depends(get_current_user)):
    return success({"id": user.id, "email": user.email, "role": user.role})
