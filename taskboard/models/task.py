"""Task model."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.database import Base
from taskboard.models.base import TimestampMixin, UserOwnedMixin, UUIDMixin


class Task(UUIDMixin, UserOwnedMixin, TimestampMixin, Base):
    """A unit of work owned by exactly one user.

    Every read and write is scoped by user_id; the owner is taken from the
    authenticated identity, never from the request body.
    """

    __tablename__ = "tasks"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Task {self.name} ({self.status})>"
