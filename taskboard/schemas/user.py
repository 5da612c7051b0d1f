"""Pydantic schemas for users."""

from datetime import UTC, datetime
from uuid import UUID

from pydantic import EmailStr, field_validator

from taskboard.schemas.base import CamelModel


class UserResponse(CamelModel):
    """Schema for user response; the password hash is never part of it."""

    id: UUID
    email: EmailStr
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def ensure_timezone_aware(cls, v: datetime) -> datetime:
        """Ensure datetime fields are timezone-aware."""
        if isinstance(v, datetime) and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v
