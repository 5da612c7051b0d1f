"""User model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.database import Base
from taskboard.models.base import TimestampMixin, UUIDMixin


class User(UUIDMixin, TimestampMixin, Base):
    """Registered account; the email is the login key."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User {self.email}>"
