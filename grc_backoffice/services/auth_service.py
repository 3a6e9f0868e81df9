"""
Login and JWT handling.

Tokens are HS256-signed with JWT_SECRET and carry user_id, email
and role. They expire after JWT_EXPIRY_DAYS (7 by default).

There is no password storage. A known user logs in with any of
the three seed passwords.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

import jwt
from sqlalchemy import select
from sqlalchemy.orm import Session

from grc_backoffice.config import Settings
from grc_backoffice.errors import UnauthorizedError
from grc_backoffice.models.user import User

logger = logging.getLogger(__name__)

SEED_PASSWORDS = frozenset({"admin123", "user123", "john123"})


def sign_jwt(user: User, settings: Settings, now: datetime | None = None) -> str:
    """Sign a token for the given user."""
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "user_id": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.JWT_EXPIRY_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_jwt(token: str, settings: Settings) -> dict:
    """
    Decode and verify a token.

    Raises UnauthorizedError for an expired, tampered or
    otherwise unreadable token.
    """
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM]
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.info("Rejected JWT: %s", e)
        raise UnauthorizedError("Invalid token")

    if "user_id" not in payload:
        raise UnauthorizedError("Invalid token")
    return payload


class AuthService:

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def authenticate(self, email: str, password: str) -> User:
        """Return the user for valid credentials, else raise UnauthorizedError."""
        user = self.db.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()

        if not user or password not in SEED_PASSWORDS:
            raise UnauthorizedError("Invalid credentials")
        return user

    def issue_token(self, user: User) -> str:
        return sign_jwt(user, self.settings)

    def user_from_token(self, token: str) -> User:
        """Resolve a bearer token to a current user row."""
        payload = decode_jwt(token, self.settings)
        try:
            user_id = uuid.UUID(payload["user_id"])
        except (TypeError, ValueError):
            raise UnauthorizedError("Invalid token")

        user = self.db.get(User, user_id)
        if not user:
            raise UnauthorizedError("User no longer exists")
        return user
