"""Task management API router.

Every endpoint requires a bearer token and only ever sees the caller's tasks.
"""

from uuid import UUID

from fastapi import APIRouter, Query
from sqlalchemy.exc import SQLAlchemyError

from taskboard.deps import CurrentUserId, DbSession
from taskboard.logger import get_logger, log_exception
from taskboard.schemas import (
    SortOrder,
    TaskCreate,
    TaskCreatedResponse,
    TaskDeletedResponse,
    TaskListResponse,
    TaskResponse,
    TaskSortField,
    TaskUpdate,
)
from taskboard.services import (
    TaskNotFoundError,
    TaskOwnershipError,
    task_service,
)
from taskboard.utils import raise_internal_error, raise_not_found, raise_unauthorized

router = APIRouter(prefix="/tasks", tags=["tasks"])
logger = get_logger(__name__)


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    user_id: CurrentUserId,
    db: DbSession,
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(10, ge=1, le=100, description="Tasks per page"),
    search: str | None = Query(None, max_length=255, description="Case-insensitive substring of the name"),
    status: str | None = Query(None, max_length=50, description="Exact status match"),
    sort_by: TaskSortField = Query(TaskSortField.CREATED_AT, alias="sortBy"),
    sort_order: SortOrder = Query(SortOrder.DESC, alias="sortOrder"),
) -> TaskListResponse:
    """List the caller's tasks with pagination, search, filters and sorting."""
    try:
        result = await task_service.list_tasks(
            db,
            user_id,
            page=page,
            limit=limit,
            search=search,
            status=status,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Failed to list tasks", user_id=str(user_id))
        raise_internal_error(cause=exc)

    return TaskListResponse(
        tasks=[TaskResponse.model_validate(task) for task in result.tasks],
        total_pages=result.total_pages,
        current_page=result.page,
    )


@router.post("", response_model=TaskCreatedResponse)
async def create_task(
    task_data: TaskCreate,
    user_id: CurrentUserId,
    db: DbSession,
) -> TaskCreatedResponse:
    """Create a task owned by the caller."""
    try:
        task = await task_service.create_task(db, user_id, task_data)
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Failed to create task", user_id=str(user_id))
        raise_internal_error(cause=exc)

    logger.info("Task created", task_id=str(task.id), user_id=str(user_id))
    return TaskCreatedResponse(task=TaskResponse.model_validate(task))


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID,
    task_data: TaskUpdate,
    user_id: CurrentUserId,
    db: DbSession,
) -> TaskResponse:
    """Apply a partial update; omitted or null fields keep their value."""
    try:
        task = await task_service.update_task(db, user_id, task_id, task_data.changed_fields())
    except TaskNotFoundError as exc:
        logger.debug("Task not found for update", task_id=str(task_id))
        raise_not_found("Task", cause=exc)
    except TaskOwnershipError as exc:
        logger.warning("Task update by non-owner", task_id=str(task_id), user_id=str(user_id))
        raise_unauthorized("Not authorized", cause=exc)
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Failed to update task", task_id=str(task_id))
        raise_internal_error(cause=exc)

    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", response_model=TaskDeletedResponse)
async def delete_task(
    task_id: UUID,
    user_id: CurrentUserId,
    db: DbSession,
) -> TaskDeletedResponse:
    """Delete one of the caller's tasks."""
    try:
        await task_service.delete_task(db, user_id, task_id)
    except TaskNotFoundError as exc:
        logger.debug("Task not found for deletion", task_id=str(task_id))
        raise_not_found("Task", cause=exc)
    except TaskOwnershipError as exc:
        logger.warning("Task deletion by non-owner", task_id=str(task_id), user_id=str(user_id))
        raise_unauthorized("Not authorized", cause=exc)
    except SQLAlchemyError as exc:
        log_exception(logger, exc, "Failed to delete task", task_id=str(task_id))
        raise_internal_error(cause=exc)

    logger.info("Task deleted", task_id=str(task_id), user_id=str(user_id))
    return TaskDeletedResponse()
