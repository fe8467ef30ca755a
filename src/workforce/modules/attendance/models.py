"""Attendance database models."""

import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce.core.constants import MAX_DESCRIPTION_LENGTH, SECONDS_PER_HOUR
from workforce.core.database.base import Base, IntIDMixin, OwnedByUserMixin, TimestampMixin
from workforce.core.utils.dates import as_utc


if TYPE_CHECKING:
    from workforce.modules.users.models import User


class AttendanceRecord(Base, IntIDMixin, TimestampMixin, OwnedByUserMixin):
    """One user's attendance for one calendar day.

    At most one record exists per (user, date).
    """

    __tablename__ = "attendance_records"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_attendance_user_date"),
    )

    date: Mapped[dt.date] = mapped_column(
        Date,
        nullable=False,
        index=True,
    )
    clock_in_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    clock_out_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    note: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )

    user: Mapped["User"] = relationship(
        "User",
        lazy="selectin",
    )

    @property
    def hours_worked(self) -> float | None:
        """Hours between clock-in and clock-out, rounded to two places."""
        if self.clock_in_at is None or self.clock_out_at is None:
            return None
        seconds = (as_utc(self.clock_out_at) - as_utc(self.clock_in_at)).total_seconds()
        return round(max(seconds, 0) / SECONDS_PER_HOUR, 2)

    def __repr__(self) -> str:
        return f"<AttendanceRecord(id={self.id}, user_id={self.user_id}, date={self.date})>"
