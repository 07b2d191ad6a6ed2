"""Data access layer for chat messages."""

import threading
from datetime import datetime, timedelta

from sqlalchemy import and_, or_

from src.db.client import get_session
from src.db.models import Message
from src.utils.validators import utc_now

# Timestamps are strictly increasing per insert so that a "before" cursor
# never falls between two messages sharing the same instant. The guarantee is
# per process: run the API as a single worker (the realtime registry is
# process-local as well). Equal timestamps still order by id.
_clock_lock = threading.Lock()
_last_timestamp: datetime | None = None


def _next_timestamp() -> datetime:
    global _last_timestamp
    now = utc_now()
    if _last_timestamp is not None and now <= _last_timestamp:
        now = _last_timestamp + timedelta(microseconds=1)
    _last_timestamp = now
    return now


def _between(user_a: str, user_b: str):
    return or_(
        and_(Message.sender_id == user_a, Message.receiver_id == user_b),
        and_(Message.sender_id == user_b, Message.receiver_id == user_a),
    )


def create(sender_id: str, receiver_id: str, content: str) -> Message:
    with _clock_lock, get_session() as db:
        message = Message(
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            created_at=_next_timestamp(),
        )
        db.add(message)
        db.flush()
        return message


def list_between(user_a: str, user_b: str, limit: int, before: datetime | None = None) -> list[Message]:
    """Newest-first page of the pair's messages older than ``before``."""
    with get_session() as db:
        query = db.query(Message).filter(_between(user_a, user_b))
        if before is not None:
            query = query.filter(Message.created_at < before)
        return query.order_by(Message.created_at.desc(), Message.id.desc()).limit(limit).all()


def partner_ids(user_id: str) -> list[str]:
    """Ids of everyone the user has exchanged messages with, most recent first."""
    with get_session() as db:
        rows = (
            db.query(Message.sender_id, Message.receiver_id)
            .filter(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
            .order_by(Message.created_at.desc())
            .all()
        )
    seen: list[str] = []
    for sender_id, receiver_id in rows:
        other = receiver_id if sender_id == user_id else sender_id
        if other not in seen:
            seen.append(other)
    return seen
