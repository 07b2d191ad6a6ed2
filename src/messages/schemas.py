"""Pydantic schemas for chat messages."""

from src.utils.validators import CamelModel, UTCDateTime

MAX_CONTENT_LENGTH = 5000


class MessageResponse(CamelModel):
    id: str
    sender_id: str
    receiver_id: str
    content: str
    created_at: UTCDateTime
