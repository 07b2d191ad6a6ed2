"""Message business logic: persistence, history pagination, conversation partners."""

from datetime import datetime

from src.messages import repository
from src.messages.schemas import MAX_CONTENT_LENGTH, MessageResponse
from src.users import repository as user_repository
from src.users.schemas import UserResponse
from src.utils.errors import InvalidRequestError, NotFoundError
from src.utils.validators import to_naive_utc

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


def save_message(sender_id: str, receiver_id: str, content: str) -> MessageResponse:
    """Persist a chat message. Raises before writing anything if the input is unusable."""
    if not content or len(content) > MAX_CONTENT_LENGTH:
        raise InvalidRequestError(f"Message content must be 1-{MAX_CONTENT_LENGTH} characters")
    if user_repository.get_by_id(receiver_id) is None:
        raise NotFoundError("Receiver not found")
    return MessageResponse.model_validate(repository.create(sender_id, receiver_id, content))


def get_history(
    user_id: str,
    other_user_id: str,
    limit: int = DEFAULT_PAGE_SIZE,
    before: datetime | None = None,
) -> list[MessageResponse]:
    """Newest-first page; pass the oldest returned createdAt as the next ``before``."""
    cursor = to_naive_utc(before) if before is not None else None
    messages = repository.list_between(user_id, other_user_id, min(limit, MAX_PAGE_SIZE), cursor)
    return [MessageResponse.model_validate(m) for m in messages]


def list_partners(user_id: str) -> list[UserResponse]:
    ids = repository.partner_ids(user_id)
    users = user_repository.get_many(set(ids))
    return [UserResponse.model_validate(users[i]) for i in ids if i in users]
