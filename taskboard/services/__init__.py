"""Services package."""

from taskboard.services.task_service import (
    TaskNotFoundError,
    TaskOwnershipError,
    TaskPage,
    TaskServiceError,
    create_task,
    delete_task,
    get_task,
    list_tasks,
    update_task,
)

__all__ = [
    "TaskNotFoundError",
    "TaskOwnershipError",
    "TaskPage",
    "TaskServiceError",
    "create_task",
    "delete_task",
    "get_task",
    "list_tasks",
    "update_task",
]
