"""API routers package."""

from taskboard.routers import auth, tasks

__all__ = [
    "auth",
    "tasks",
]
