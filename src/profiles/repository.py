"""Data access layer for profiles."""

from src.db.client import get_session
from src.db.models import Profile


def get_by_user(user_id: str) -> Profile | None:
    with get_session() as db:
        return db.query(Profile).filter(Profile.user_id == user_id).first()


def get_for_users(user_ids: list[str]) -> dict[str, Profile]:
    if not user_ids:
        return {}
    with get_session() as db:
        profiles = db.query(Profile).filter(Profile.user_id.in_(user_ids)).all()
        return {profile.user_id: profile for profile in profiles}


def upsert(user_id: str, bio: str | None, subjects: list[str] | None, availability: str | None) -> Profile:
    with get_session() as db:
        profile = db.query(Profile).filter(Profile.user_id == user_id).first()
        if profile is None:
            profile = Profile(user_id=user_id)
            db.add(profile)
        profile.bio = bio
        profile.subjects = subjects
        profile.availability = availability
        db.flush()
        return profile
