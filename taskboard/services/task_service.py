"""Task persistence, always scoped to the owning user."""

import math
from dataclasses import dataclass
from typing import Any, NoReturn
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models import Task
from taskboard.schemas.task import SortOrder, TaskCreate, TaskSortField

SORT_COLUMNS = {
    TaskSortField.CREATED_AT: Task.created_at,
    TaskSortField.UPDATED_AT: Task.updated_at,
    TaskSortField.NAME: Task.name,
    TaskSortField.STATUS: Task.status,
    TaskSortField.DUE_DATE: Task.due_date,
}


class TaskServiceError(Exception):
    """Base exception for task service errors."""


class TaskNotFoundError(TaskServiceError):
    """Task does not exist."""


class TaskOwnershipError(TaskServiceError):
    """Task exists but belongs to another user."""


@dataclass
class TaskPage:
    tasks: list[Task]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)


async def list_tasks(
    db: AsyncSession,
    user_id: UUID,
    *,
    page: int = 1,
    limit: int = 10,
    search: str | None = None,
    status: str | None = None,
    sort_by: TaskSortField = TaskSortField.CREATED_AT,
    sort_order: SortOrder = SortOrder.DESC,
) -> TaskPage:
    base_query = select(Task).where(Task.user_id == user_id)

    if search:
        base_query = base_query.where(Task.name.icontains(search, autoescape=True))
    if status:
        base_query = base_query.where(Task.status == status)

    count_query = select(func.count()).select_from(base_query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    column = SORT_COLUMNS[sort_by]
    ordering = column.asc() if sort_order == SortOrder.ASC else column.desc()
    # id breaks ties so consecutive pages never overlap
    tiebreak = Task.id.asc() if sort_order == SortOrder.ASC else Task.id.desc()

    query = base_query.order_by(ordering, tiebreak).limit(limit).offset((page - 1) * limit)
    result = await db.execute(query)
    tasks = list(result.scalars().all())

    return TaskPage(tasks=tasks, total=total, page=page, limit=limit)


async def create_task(db: AsyncSession, user_id: UUID, task_data: TaskCreate) -> Task:
    task = Task(
        user_id=user_id,
        name=task_data.name,
        description=task_data.description,
        status=task_data.status,
        due_date=task_data.due_date,
    )
    db.add(task)
    await db.commit()
    await db.refresh(task)
    return task


async def get_task(db: AsyncSession, user_id: UUID, task_id: UUID) -> Task:
    result = await db.execute(select(Task).where(Task.id == task_id).where(Task.user_id == user_id))
    task = result.scalar_one_or_none()

    if not task:
        await _raise_missing_or_foreign(db, task_id)

    return task


async def update_task(db: AsyncSession, user_id: UUID, task_id: UUID, fields: dict[str, Any]) -> Task:
    """Overwrite the given fields, only if the task belongs to user_id.

    The owner check is part of the UPDATE's WHERE clause, so there is no gap
    between checking ownership and writing.
    """
    if not fields:
        return await get_task(db, user_id, task_id)

    result = await db.execute(
        update(Task)
        .where(Task.id == task_id)
        .where(Task.user_id == user_id)
        .values(**fields)
        .returning(Task)
    )
    task = result.scalar_one_or_none()

    if not task:
        await db.rollback()
        await _raise_missing_or_foreign(db, task_id)

    await db.commit()
    return task


async def delete_task(db: AsyncSession, user_id: UUID, task_id: UUID) -> None:
    result = await db.execute(delete(Task).where(Task.id == task_id).where(Task.user_id == user_id))

    if result.rowcount == 0:
        await db.rollback()
        await _raise_missing_or_foreign(db, task_id)

    await db.commit()


async def _raise_missing_or_foreign(db: AsyncSession, task_id: UUID) -> NoReturn:
    """Explain why a scoped lookup matched nothing."""
    result = await db.execute(select(Task.id).where(Task.id == task_id))
    if result.scalar_one_or_none() is None:
        raise TaskNotFoundError(f"Task {task_id} not found")
    raise TaskOwnershipError(f"Task {task_id} belongs to another user")
