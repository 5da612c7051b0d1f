"""Test data factories using factory_boy.

Usage:
    # Build without persisting
    task = TaskFactory.build(user_id=user.id)

    # Create and commit through a session
    async with session_maker() as session:
        task = await TaskFactory.create_async(session, user_id=user.id, name="Write report")
"""

from datetime import UTC, datetime
from uuid import uuid4

import factory
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models import Task, User
from taskboard.security import hash_password

DEFAULT_PASSWORD = "password123"
# Hash once; bcrypt is deliberately slow
DEFAULT_PASSWORD_HASH = hash_password(DEFAULT_PASSWORD)


class AsyncFactoryMixin:
    """Mixin providing async database persistence for factories."""

    @classmethod
    async def create_async(cls, db: AsyncSession, **kwargs):
        """Build, commit and refresh an instance."""
        instance = cls.build(**kwargs)
        db.add(instance)
        await db.commit()
        await db.refresh(instance)
        return instance

    @classmethod
    async def create_batch_async(cls, db: AsyncSession, size: int, **kwargs) -> list:
        instances = cls.build_batch(size, **kwargs)
        db.add_all(instances)
        await db.commit()
        return instances


class UserFactory(AsyncFactoryMixin, factory.Factory):
    class Meta:
        model = User

    id = factory.LazyFunction(uuid4)
    email = factory.Sequence(lambda n: f"user{n}-{uuid4().hex[:8]}@example.com")
    hashed_password = DEFAULT_PASSWORD_HASH


class TaskFactory(AsyncFactoryMixin, factory.Factory):
    """Requires user_id."""

    class Meta:
        model = Task

    id = factory.LazyFunction(uuid4)
    name = factory.Sequence(lambda n: f"Task {n}")
    description = None
    status = "pending"
    due_date = None
    created_at = factory.LazyFunction(lambda: datetime.now(UTC))
    updated_at = factory.SelfAttribute("created_at")
