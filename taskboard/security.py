"""Security utilities for JWT and password hashing."""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import bcrypt
import jwt

from taskboard.config import Settings
from taskboard.logger import get_logger

logger = get_logger(__name__)

# bcrypt refuses longer secrets
BCRYPT_MAX_BYTES = 72


def create_access_token(
    data: dict[str, Any],
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a new JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)
    return encoded_jwt


def issue_token(user_id: UUID, settings: Settings, expires_delta: timedelta | None = None) -> str:
    """Issue a bearer token asserting the given user identity."""
    return create_access_token({"user": {"id": str(user_id)}}, settings, expires_delta)


def decode_access_token(token: str, settings: Settings) -> dict[str, Any] | None:
    """Decode and validate a JWT access token."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
        return payload
    except jwt.ExpiredSignatureError:
        logger.debug("JWT token expired")
        return None
    except jwt.PyJWTError as exc:
        logger.warning(
            "JWT decode failed",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return None


def resolve_user_id(payload: dict[str, Any]) -> UUID | None:
    """Extract the user id claim, or None when it is absent or malformed."""
    user_claim = payload.get("user")
    if not isinstance(user_claim, dict):
        return None
    raw_id = user_claim.get("id")
    if not isinstance(raw_id, str):
        return None
    try:
        return UUID(raw_id)
    except ValueError:
        return None


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise ValueError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(encoded, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    A password bcrypt could never have hashed simply does not match.
    """
    encoded = plain_password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(encoded, hashed_password.encode("utf-8"))
