"""Pydantic schemas for attendance operations."""

import datetime as dt
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from workforce.core.constants import MAX_DESCRIPTION_LENGTH
from workforce.core.utils.dates import as_utc


class ClockRequest(BaseModel):
    """Body of clock-in and clock-out."""

    note: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)


def _check_order(
    clock_in_at: dt.datetime | None, clock_out_at: dt.datetime | None
) -> None:
    if clock_out_at is not None and clock_in_at is None:
        raise ValueError("clock_out_at requires clock_in_at")
    if clock_in_at and clock_out_at and as_utc(clock_out_at) < as_utc(clock_in_at):
        raise ValueError("clock_out_at must not be before clock_in_at")


class AttendanceCreate(BaseModel):
    """An attendance record entered by an administrator."""

    user_id: int
    date: dt.date
    clock_in_at: dt.datetime | None = None
    clock_out_at: dt.datetime | None = None
    note: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)

    @model_validator(mode="after")
    def clock_order(self) -> Self:
        _check_order(self.clock_in_at, self.clock_out_at)
        return self


class AttendanceUpdate(BaseModel):
    clock_in_at: dt.datetime | None = None
    clock_out_at: dt.datetime | None = None
    note: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)


class AttendanceResponse(BaseModel):
    id: int
    user_id: int
    date: dt.date
    clock_in_at: dt.datetime | None
    clock_out_at: dt.datetime | None
    note: str | None
    hours_worked: float | None

    model_config = ConfigDict(from_attributes=True)


class AttendanceStats(BaseModel):
    """A user's attendance since January 1st of the current year.

    Attributes:
        total_days: Records on file
        present_days: Records with a clock-in
        complete_days: Records with both clock-in and clock-out
        working_days: Working days elapsed this year, today included
        absence_days: Working days without a clock-in, never negative
        total_hours: Hours of complete days
        average_hours: ``total_hours`` per complete day
        attendance_rate: Present days as a percentage of working days
        absence_rate: Absence days as a percentage of working days
    """

    user_id: int
    year: int
    total_days: int
    present_days: int
    complete_days: int
    working_days: int
    absence_days: int
    total_hours: float
    average_hours: float
    attendance_rate: int
    absence_rate: int


class DailyHours(BaseModel):
    date: dt.date
    hours_worked: float
    clock_in_at: dt.datetime | None = None
    clock_out_at: dt.datetime | None = None
    note: str | None = None


class EmployeeHours(BaseModel):
    """One employee's hours over a date range, day by day."""

    user_id: int
    full_name: str
    email: str
    role: str
    total_hours: float
    present_days: int
    work_days: int
    attendance_rate: float
    daily: list[DailyHours]
