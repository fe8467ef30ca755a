"""Pydantic schemas for company operations."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from workforce.core.constants import MAX_NAME_LENGTH, MAX_URL_LENGTH
from workforce.core.utils.validation import reject_null


class CompanyBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    industry: str | None = Field(None, max_length=MAX_NAME_LENGTH)
    logo_url: str | None = Field(None, max_length=MAX_URL_LENGTH)


class CompanyCreate(CompanyBase):
    parent_company_id: int | None = None


class CompanyUpdate(BaseModel):
    """Partial update. ``parent_company_id`` is reserved to super admins."""

    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    industry: str | None = Field(None, max_length=MAX_NAME_LENGTH)
    logo_url: str | None = Field(None, max_length=MAX_URL_LENGTH)
    parent_company_id: int | None = None

    @field_validator("name", mode="before")
    @classmethod
    def name_not_null(cls, v: object, info: ValidationInfo) -> object:
        return reject_null(v, info)


class CompanyResponse(CompanyBase):
    id: int
    parent_company_id: int | None
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class DailyAttendanceEntry(BaseModel):
    """One employee's day in a daily report."""

    user_id: int
    employee_name: str
    clock_in_at: dt.datetime | None
    clock_out_at: dt.datetime | None
    hours_worked: float | None
    note: str | None


class DailyReport(BaseModel):
    """Attendance and task totals of one company for one day.

    Attributes:
        total_employees: Employees with an attendance record that day
        total_hours_worked: Sum of clocked hours
        total_tasks: Tasks logged that day
        total_task_hours: Sum of task durations
    """

    company_id: int
    date: dt.date
    total_employees: int
    total_hours_worked: float
    total_tasks: int
    total_task_hours: float
    attendance: list[DailyAttendanceEntry]
