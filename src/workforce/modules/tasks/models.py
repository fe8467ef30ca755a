"""Task database models."""

import datetime as dt
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import Date, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce.core.constants import MAX_NAME_LENGTH, MAX_TASK_STATUS_LENGTH
from workforce.core.database.base import Base, IntIDMixin, OwnedByUserMixin, TimestampMixin


if TYPE_CHECKING:
    from workforce.modules.users.models import User


class TaskStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Task(Base, IntIDMixin, TimestampMixin, OwnedByUserMixin):
    """A unit of work an employee logged for a day.

    Attributes:
        attendance_record_id: Attendance record of the same user and day
        date: Day the work was done
        title: Short title
        description: Free-text description
        duration: Hours spent
        status: ``TaskStatus`` value
    """

    __tablename__ = "tasks"

    attendance_record_id: Mapped[int | None] = mapped_column(
        ForeignKey("attendance_records.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    date: Mapped[dt.date] = mapped_column(
        Date,
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )
    duration: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=0,
    )
    status: Mapped[str] = mapped_column(
        String(MAX_TASK_STATUS_LENGTH),
        nullable=False,
        default=TaskStatus.PENDING,
    )

    user: Mapped["User"] = relationship(
        "User",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, user_id={self.user_id}, status={self.status})>"
