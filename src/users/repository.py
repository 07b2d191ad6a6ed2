"""Data access layer for users."""

from src.db.client import get_session
from src.db.models import ROLE_MENTOR, User


def create(username: str, email: str, password_hash: str, role: str) -> User:
    with get_session() as db:
        user = User(username=username, email=email, password_hash=password_hash, role=role)
        db.add(user)
        db.flush()
        return user


def get_by_id(user_id: str) -> User | None:
    with get_session() as db:
        return db.get(User, user_id)


def get_by_email(email: str) -> User | None:
    with get_session() as db:
        return db.query(User).filter(User.email == email).first()


def get_by_username(username: str) -> User | None:
    with get_session() as db:
        return db.query(User).filter(User.username == username).first()


def get_many(user_ids: set[str]) -> dict[str, User]:
    if not user_ids:
        return {}
    with get_session() as db:
        users = db.query(User).filter(User.id.in_(user_ids)).all()
        return {user.id: user for user in users}


def list_mentors() -> list[User]:
    with get_session() as db:
        return db.query(User).filter(User.role == ROLE_MENTOR).order_by(User.username).all()
