"""Common FastAPI dependencies for consistent type annotations.

This module provides type aliases for frequently used FastAPI dependencies,
reducing boilerplate and ensuring consistency across routers.

Usage:
    from taskboard.deps import CurrentUserId, DbSession

    async def my_endpoint(db: DbSession, user_id: CurrentUserId):
        # db is AsyncSession with get_db dependency injected
        # user_id is UUID with get_current_user_id dependency injected
        ...
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.auth import get_app_settings, get_current_user_id
from taskboard.config import Settings
from taskboard.database import get_db

AppSettings = Annotated[Settings, Depends(get_app_settings)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]

__all__ = ["AppSettings", "CurrentUserId", "DbSession"]
