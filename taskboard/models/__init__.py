"""SQLAlchemy models package."""

from taskboard.models.task import Task
from taskboard.models.user import User

__all__ = [
    "Task",
    "User",
]
