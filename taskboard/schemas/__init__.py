from taskboard.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from taskboard.schemas.task import (
    SortOrder,
    TaskCreate,
    TaskCreatedResponse,
    TaskDeletedResponse,
    TaskListResponse,
    TaskResponse,
    TaskSortField,
    TaskUpdate,
)
from taskboard.schemas.user import UserResponse

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RegisterResponse",
    "SortOrder",
    "TaskCreate",
    "TaskCreatedResponse",
    "TaskDeletedResponse",
    "TaskListResponse",
    "TaskResponse",
    "TaskSortField",
    "TaskUpdate",
    "UserResponse",
]
