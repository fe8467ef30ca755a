"""Pydantic schemas for dashboard payloads.

Percent changes compare a period with the one before it: rounded to two
places, 100 when the previous period was empty and the current one was not,
0 when both were empty.
"""

import datetime as dt
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class TodayStatus(StrEnum):
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    COMPLETED = "completed"


class EmployeeRef(BaseModel):
    id: int
    full_name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class CompanyRef(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class TaskItem(BaseModel):
    id: int
    title: str
    description: str
    duration: float
    date: dt.date
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


# ============================================================
# Employee Dashboards
# ============================================================


class TodayAttendance(BaseModel):
    date: dt.date
    clock_in_at: dt.datetime | None
    clock_out_at: dt.datetime | None
    status: TodayStatus


class WeeklyStats(BaseModel):
    """The current Sunday to Thursday week against the previous one.

    Attributes:
        absence_days: Working days of the week without a clock-in
        present_days_change_percentage: Present days against last week
    """

    week_start: dt.date
    week_end: dt.date
    hours: float
    hours_change_percentage: float
    tasks: int
    tasks_change_percentage: float
    present_days: int
    previous_week_present_days: int
    present_days_change_percentage: float
    absence_days: int
    working_days: int


class EmployeeDashboard(BaseModel):
    today: TodayAttendance
    week: WeeklyStats
    recent_tasks: list[TaskItem]


class QuickStats(BaseModel):
    """``monthly_attendance`` counts this month's days with a clock-in."""

    is_clocked_in: bool
    today_status: TodayStatus
    total_tasks: int
    monthly_attendance: int


class Productivity(BaseModel):
    this_month: float
    last_month: float
    change_percentage: float


class MonthlyAttendance(BaseModel):
    """``percentage`` is present days over the days of the month so far."""

    present_days: int
    percentage: int


class Goals(BaseModel):
    monthly_task_hours: int
    attendance_target: int
    productivity_target: int


class PerformanceAnalytics(BaseModel):
    """Task hours and attendance of this calendar month against the last."""

    productivity: Productivity
    tasks_this_month: int
    average_task_hours: float
    attendance: MonthlyAttendance
    goals: Goals


# ============================================================
# Company Admin Dashboards
# ============================================================


class TodayPresence(BaseModel):
    present: int
    total: int
    rate: int


class CompanyWeek(BaseModel):
    week_start: dt.date
    week_end: dt.date
    tasks: int
    total_hours: float
    average_hours_per_employee: float


class CompanyDashboard(BaseModel):
    """Headcount, today's presence and this week's totals of one company.

    Only users with the ``EMPLOYEE`` role are counted.
    """

    company_id: int
    total_employees: int
    today: TodayPresence
    week: CompanyWeek


class PerformerEntry(BaseModel):
    employee: EmployeeRef
    clock_in_at: dt.datetime
    clock_out_at: dt.datetime
    hours_worked: float


class TopPerformers(BaseModel):
    """Employees who completed today's attendance, most hours first."""

    date: dt.date
    total_employees_worked: int
    performers: list[PerformerEntry]
    highest_hours: float
    average_hours: float


class CompanyTaskItem(TaskItem):
    employee: EmployeeRef


class RecentTasks(BaseModel):
    tasks: list[CompanyTaskItem]
    total_duration: float
    average_duration: float
    latest_task_at: dt.datetime | None


# ============================================================
# Super Admin Dashboard
# ============================================================


class PlatformTaskItem(CompanyTaskItem):
    company: CompanyRef | None


class CompanyHours(BaseModel):
    id: int
    name: str
    total_employees: int
    total_work_hours: float


class PlatformStatistics(BaseModel):
    """Platform totals; "today" is each user's own local day."""

    total_companies: int
    total_users: int
    today_total_work_hours: float
    today_total_tasks: int


class PlatformDashboard(BaseModel):
    last_tasks: list[PlatformTaskItem]
    top_companies_by_work_hours: list[CompanyHours]
    statistics: PlatformStatistics
