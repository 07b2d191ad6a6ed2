"""ORM models and the constants shared across features."""

import uuid

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, String, Text

from src.db.client import Base
from src.utils.validators import utc_now

# User roles
ROLE_STUDENT = "student"
ROLE_MENTOR = "mentor"

# Booking statuses
STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"
ACTIVE_STATUSES = {STATUS_PENDING, STATUS_CONFIRMED}


def _uuid() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(320), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String(16), nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    bio = Column(Text, nullable=True)
    subjects = Column(JSON, nullable=True)
    availability = Column(String(200), nullable=True)


class Booking(Base):
    """A mentoring session booked by a student."""

    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True, default=_uuid)
    student_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    mentor_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    subject = Column(String(100), nullable=False)
    scheduled_time = Column(DateTime, nullable=False)
    status = Column(String(16), nullable=False, default=STATUS_PENDING)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_sessions_mentor_status", "mentor_id", "status"),
    )


class Message(Base):
    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=_uuid)
    sender_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    receiver_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("ix_messages_pair_created_at", "sender_id", "receiver_id", "created_at"),
    )


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = Column(String(64), unique=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    is_revoked = Column(Boolean, default=False, nullable=False)
