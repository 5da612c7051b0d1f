"""Pydantic schemas for tasks."""

import enum
from datetime import UTC, datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import AliasChoices, Field, StringConstraints, field_validator

from taskboard.schemas.base import CamelModel

TaskName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
TaskDescription = Annotated[str, Field(max_length=2000)]
TaskStatus = Annotated[str, Field(max_length=50)]


class TaskSortField(str, enum.Enum):
    """Columns a task listing can be ordered by."""

    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    NAME = "name"
    STATUS = "status"
    DUE_DATE = "dueDate"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


class _DueDateMixin(CamelModel):
    @field_validator("due_date", mode="after", check_fields=False)
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        """Naive due dates are taken to be UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v


class TaskCreate(_DueDateMixin):
    """Schema for creating a task. The owner always comes from the token."""

    name: TaskName
    description: TaskDescription | None = None
    status: TaskStatus | None = None
    due_date: datetime | None = None


class TaskUpdate(_DueDateMixin):
    """Schema for a partial task update."""

    name: TaskName | None = None
    description: TaskDescription | None = None
    status: TaskStatus | None = None
    due_date: datetime | None = None

    def changed_fields(self) -> dict[str, Any]:
        """Fields the client sent with a non-null value.

        Omitted and null fields leave the stored value untouched; an empty
        string is a real value and clears description or status.
        """
        return {key: value for key, value in self.model_dump(exclude_unset=True).items() if value is not None}


class TaskResponse(CamelModel):
    """Schema for task response."""

    id: UUID
    name: str
    description: str | None = None
    status: str | None = None
    due_date: datetime | None = None
    owner: UUID = Field(validation_alias=AliasChoices("owner", "user_id"))
    created_at: datetime
    updated_at: datetime


class TaskCreatedResponse(CamelModel):
    message: str = "task added successfully"
    task: TaskResponse


class TaskListResponse(CamelModel):
    """One page of the requester's tasks."""

    tasks: list[TaskResponse]
    total_pages: int
    current_page: int


class TaskDeletedResponse(CamelModel):
    msg: str = "Task removed"
