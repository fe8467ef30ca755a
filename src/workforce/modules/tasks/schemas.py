"""Pydantic schemas for task operations."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from workforce.core.constants import MAX_NAME_LENGTH
from workforce.core.utils.validation import reject_null
from workforce.modules.tasks.models import TaskStatus


class TaskCreate(BaseModel):
    """A task to log. ``user_id`` defaults to the caller."""

    user_id: int | None = None
    date: dt.date
    title: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    description: str = ""
    duration: float = Field(0, ge=0)
    status: TaskStatus = TaskStatus.PENDING


class TaskUpdate(BaseModel):
    date: dt.date | None = None
    title: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    description: str | None = None
    duration: float | None = Field(None, ge=0)

    @field_validator("date", "title", "description", "duration", mode="before")
    @classmethod
    def not_null(cls, v: object, info: ValidationInfo) -> object:
        return reject_null(v, info)


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class TaskResponse(BaseModel):
    id: int
    user_id: int
    attendance_record_id: int | None
    date: dt.date
    title: str
    description: str
    duration: float
    status: TaskStatus
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class TaskStats(BaseModel):
    """Counts of the caller's tasks by status, with total logged hours."""

    total: int
    pending: int
    in_progress: int
    completed: int
    total_duration: float
