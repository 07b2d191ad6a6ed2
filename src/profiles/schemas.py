"""Pydantic schemas for profile and mentor listing."""

from pydantic import Field

from src.users.schemas import UserResponse
from src.utils.validators import CamelModel


# --- Requests ---

class SaveProfileRequest(CamelModel):
    bio: str | None = Field(default=None, max_length=500)
    subjects: list[str] | None = None
    availability: str | None = Field(default=None, max_length=200)


# --- Responses ---

class ProfileResponse(CamelModel):
    id: str
    user_id: str
    bio: str | None = None
    subjects: list[str] | None = None
    availability: str | None = None


class MentorResponse(UserResponse):
    profile: ProfileResponse | None = None
