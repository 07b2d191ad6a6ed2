"""Refresh token persistence (rotation and revocation)."""

import hashlib
from datetime import datetime

from src.db.client import get_session
from src.db.models import RefreshToken


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def store(user_id: str, token: str, expires_at: datetime) -> None:
    with get_session() as db:
        db.add(RefreshToken(user_id=user_id, token_hash=hash_token(token), expires_at=expires_at))


def revoke_if_active(token: str) -> bool:
    """Revoke a stored refresh token. Returns False if unknown or already revoked."""
    with get_session() as db:
        updated = (
            db.query(RefreshToken)
            .filter(RefreshToken.token_hash == hash_token(token), RefreshToken.is_revoked.is_(False))
            .update({"is_revoked": True}, synchronize_session=False)
        )
        return updated == 1


def revoke_for_user(token: str, user_id: str) -> None:
    with get_session() as db:
        (
            db.query(RefreshToken)
            .filter(RefreshToken.token_hash == hash_token(token), RefreshToken.user_id == user_id)
            .update({"is_revoked": True}, synchronize_session=False)
        )
