"""Pydantic schemas for booking requests and responses."""

from typing import Annotated

from pydantic import Field, StringConstraints

from src.users.schemas import UserResponse
from src.utils.validators import CamelModel, UTCDateTime


# --- Requests ---

class BookSessionRequest(CamelModel):
    mentor_id: str = Field(min_length=1)
    subject: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
    scheduled_time: UTCDateTime


# --- Responses ---

class SessionResponse(CamelModel):
    id: str
    student_id: str
    mentor_id: str
    subject: str
    scheduled_time: UTCDateTime
    status: str
    created_at: UTCDateTime | None = None


class SessionWithUsersResponse(SessionResponse):
    student: UserResponse | None = None
    mentor: UserResponse | None = None