"""Profile upsert and mentor discovery."""

from src.db.models import ROLE_MENTOR
from src.profiles import repository
from src.profiles.schemas import MentorResponse, ProfileResponse
from src.users import repository as user_repository
from src.utils.errors import NotFoundError


def _clean_subjects(subjects: list[str] | None) -> list[str] | None:
    if subjects is None:
        return None
    cleaned: list[str] = []
    for subject in subjects:
        subject = subject.strip()
        if subject and subject not in cleaned:
            cleaned.append(subject)
    return cleaned


def get_profile(user_id: str) -> ProfileResponse:
    profile = repository.get_by_user(user_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    return ProfileResponse.model_validate(profile)


def save_profile(user_id: str, bio: str | None, subjects: list[str] | None, availability: str | None) -> ProfileResponse:
    profile = repository.upsert(user_id, bio, _clean_subjects(subjects), availability)
    return ProfileResponse.model_validate(profile)


def _matches(profile, subject: str) -> bool:
    if profile is None or not profile.subjects:
        return False
    needle = subject.lower()
    return any(needle in s.lower() for s in profile.subjects)


def _mentor_view(mentor, profile) -> MentorResponse:
    view = MentorResponse.model_validate(mentor)
    view.profile = ProfileResponse.model_validate(profile) if profile else None
    return view


def list_mentors(subject: str | None = None) -> list[MentorResponse]:
    mentors = user_repository.list_mentors()
    profiles = repository.get_for_users([m.id for m in mentors])

    results = []
    for mentor in mentors:
        profile = profiles.get(mentor.id)
        if subject and not _matches(profile, subject):
            continue
        results.append(_mentor_view(mentor, profile))
    return results


def get_mentor(mentor_id: str) -> MentorResponse:
    mentor = user_repository.get_by_id(mentor_id)
    if mentor is None or mentor.role != ROLE_MENTOR:
        raise NotFoundError("Mentor not found")
    return _mentor_view(mentor, repository.get_by_user(mentor_id))
