"""Data access layer for bookings."""

from datetime import datetime

from sqlalchemy import or_

from src.db.client import get_session
from src.db.models import ACTIVE_STATUSES, STATUS_PENDING, Booking


def create(student_id: str, mentor_id: str, subject: str, scheduled_time: datetime) -> Booking:
    with get_session() as db:
        booking = Booking(
            student_id=student_id,
            mentor_id=mentor_id,
            subject=subject,
            scheduled_time=scheduled_time,
            status=STATUS_PENDING,
        )
        db.add(booking)
        db.flush()
        return booking


def get_by_id(booking_id: str) -> Booking | None:
    with get_session() as db:
        return db.get(Booking, booking_id)


def list_active_for_mentor(mentor_id: str) -> list[Booking]:
    with get_session() as db:
        return (
            db.query(Booking)
            .filter(Booking.mentor_id == mentor_id, Booking.status.in_(ACTIVE_STATUSES))
            .all()
        )


def list_for_user(user_id: str) -> list[Booking]:
    with get_session() as db:
        return (
            db.query(Booking)
            .filter(or_(Booking.student_id == user_id, Booking.mentor_id == user_id))
            .order_by(Booking.scheduled_time)
            .all()
        )


def update_status(booking_id: str, expected: str, status: str) -> Booking | None:
    """Compare-and-set the status. Returns None if the booking moved on meanwhile."""
    with get_session() as db:
        updated = (
            db.query(Booking)
            .filter(Booking.id == booking_id, Booking.status == expected)
            .update({"status": status}, synchronize_session=False)
        )
        if updated != 1:
            return None
        return db.get(Booking, booking_id)
