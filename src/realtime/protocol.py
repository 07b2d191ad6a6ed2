"""WebSocket message protocol.

Client → server frames are a tagged union on ``type``:

    {"type": "authenticate", "token": "<access token>"}
    {"type": "sendMessage", "senderId": "...", "receiverId": "...", "content": "..."}

Server → client frames are ``{"type": "messageReceived" | "messageSent", "message": {...}}``.
Anything else is rejected.
"""

from typing import Annotated, Literal, Union

from pydantic import Field, TypeAdapter, ValidationError

from src.messages.schemas import MAX_CONTENT_LENGTH, MessageResponse
from src.utils.errors import InvalidRequestError
from src.utils.validators import CamelModel

# Close codes
WS_CLOSE_AUTH_TIMEOUT = 4408
WS_CLOSE_UNAUTHORIZED = 4401
WS_CLOSE_PROTOCOL_VIOLATION = 1008
WS_CLOSE_INVALID_MESSAGE = 1003
WS_CLOSE_INTERNAL_ERROR = 1011
WS_CLOSE_SLOW_CONSUMER = 1013

MESSAGE_RECEIVED = "messageReceived"
MESSAGE_SENT = "messageSent"


class AuthenticateEvent(CamelModel):
    type: Literal["authenticate"]
    token: str = Field(min_length=1)


class SendMessageEvent(CamelModel):
    type: Literal["sendMessage"]
    sender_id: str = Field(min_length=1)
    receiver_id: str = Field(min_length=1)
    content: str = Field(min_length=1, max_length=MAX_CONTENT_LENGTH)


ClientEvent = Annotated[Union[AuthenticateEvent, SendMessageEvent], Field(discriminator="type")]

_client_event = TypeAdapter(ClientEvent)


class InvalidFrameError(InvalidRequestError):
    default_message = "Invalid message"


def parse_client_event(raw: str) -> AuthenticateEvent | SendMessageEvent:
    try:
        return _client_event.validate_json(raw)
    except ValidationError as exc:
        raise InvalidFrameError(f"Invalid message: {exc.error_count()} error(s)") from exc


def message_event(event_type: str, message: MessageResponse) -> dict:
    return {"type": event_type, "message": message.model_dump(mode="json", by_alias=True)}
