"""Unit tests for booking conflict detection."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from src.sessions.conflicts import find_conflict

BASE = datetime(2025, 12, 20, 10, 0)


def _booking(minutes: int):
    return SimpleNamespace(id=f"b{minutes}", scheduled_time=BASE + timedelta(minutes=minutes))


def test_no_bookings():
    assert find_conflict([], BASE, 30) is None


def test_open_window():
    bookings = [_booking(0)]
    assert find_conflict(bookings, BASE + timedelta(minutes=30), 30) is None
    assert find_conflict(bookings, BASE - timedelta(minutes=30), 30) is None
    assert find_conflict(bookings, BASE + timedelta(minutes=29), 30) is bookings[0]
    assert find_conflict(bookings, BASE - timedelta(minutes=29, seconds=59), 30) is bookings[0]


def test_same_instant_conflicts():
    bookings = [_booking(0)]
    assert find_conflict(bookings, BASE, 30) is bookings[0]


def test_reports_the_clashing_booking():
    bookings = [_booking(-120), _booking(0), _booking(120)]
    assert find_conflict(bookings, BASE + timedelta(minutes=100), 30).id == "b120"
    assert find_conflict(bookings, BASE + timedelta(minutes=60), 30) is None


def test_aware_and_naive_times_compare_in_utc():
    bookings = [_booking(0)]
    proposed = datetime(2025, 12, 20, 12, 10, tzinfo=timezone(timedelta(hours=2)))
    assert find_conflict(bookings, proposed, 30) is bookings[0]


def test_window_size_is_respected():
    bookings = [_booking(0)]
    proposed = BASE + timedelta(minutes=45)
    assert find_conflict(bookings, proposed, 30) is None
    assert find_conflict(bookings, proposed, 60) is bookings[0]
