"""Dashboard service: per-role summaries built from attendance and tasks."""

import datetime as dt
from typing import Annotated

from fastapi import Depends

from workforce.api.dependencies import DBSession
from workforce.core.auth.principal import Principal
from workforce.core.constants import (
    COMPANY_FEED_LIMIT,
    MONTHLY_ATTENDANCE_GOAL,
    MONTHLY_TASK_HOURS_GOAL,
    PRODUCTIVITY_GOAL,
    RECENT_TASKS_LIMIT,
    WORKWEEK_LENGTH,
)
from workforce.core.errors import BadRequestError, NotFoundError
from workforce.core.policies import AttendancePolicy, CompanyPolicy
from workforce.core.utils.dates import local_today, week_start
from workforce.modules.attendance.models import AttendanceRecord
from workforce.modules.attendance.repos import AttendanceRepository
from workforce.modules.companies.models import Company
from workforce.modules.dashboard.repos import DashboardRepository
from workforce.modules.dashboard.schemas import (
    CompanyDashboard,
    CompanyHours,
    CompanyRef,
    CompanyTaskItem,
    CompanyWeek,
    EmployeeDashboard,
    EmployeeRef,
    Goals,
    MonthlyAttendance,
    PerformanceAnalytics,
    PerformerEntry,
    PlatformDashboard,
    PlatformStatistics,
    PlatformTaskItem,
    Productivity,
    QuickStats,
    RecentTasks,
    TaskItem,
    TodayAttendance,
    TodayPresence,
    TodayStatus,
    TopPerformers,
    WeeklyStats,
)
from workforce.modules.tasks.models import Task
from workforce.modules.users.models import User


def percent_change(current: float, previous: float) -> float:
    """Change from ``previous`` to ``current`` in percent.

    Examples:
        >>> percent_change(30, 20)
        50.0
        >>> percent_change(3, 0)
        100.0
    """
    if previous > 0:
        return round((current - previous) / previous * 100, 2)
    return 100.0 if current > 0 else 0.0


def today_status(record: AttendanceRecord | None) -> TodayStatus:
    if record is None or record.clock_in_at is None:
        return TodayStatus.NOT_STARTED
    if record.clock_out_at is None:
        return TodayStatus.ACTIVE
    return TodayStatus.COMPLETED


def total_hours(records: list[AttendanceRecord]) -> float:
    return round(sum(r.hours_worked or 0.0 for r in records), 2)


def company_task_item(task: Task) -> CompanyTaskItem:
    return CompanyTaskItem(
        **TaskItem.model_validate(task).model_dump(),
        employee=EmployeeRef.model_validate(task.user),
    )


class DashboardService:
    """Builds the dashboards of each role.

    Employees see their own figures, company admins their company's and
    super admins the whole platform. Weeks run Sunday to Thursday and
    "today" is the local day of whoever the figure is about.
    """

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.repo = DashboardRepository(db)
        self.attendance = AttendanceRepository(db)
        self.attendance_policy = AttendancePolicy(db)
        self.company_policy = CompanyPolicy(db)

    async def _self(self, principal: Principal) -> User:
        """The principal's own user, once allowed to read its attendance."""
        await self.attendance_policy.can_read(principal, principal.self_id)
        user = await self.db.get(User, principal.self_id)
        if user is None:
            raise NotFoundError(resource="user")
        return user

    async def _company(self, principal: Principal, company_id: int | None) -> int:
        """Resolve and authorize the company a report is about.

        Raises:
            BadRequestError: If a super admin names no company
            NotFoundError: If the company does not exist
        """
        company_id = company_id if company_id is not None else principal.tenant_id
        if company_id is None:
            raise BadRequestError("company_id is required", error_code="company_required")
        self.company_policy.can_generate_report(principal, company_id)
        if await self.db.get(Company, company_id) is None:
            raise NotFoundError(resource="company")
        return company_id

    async def _principal_today(self, principal: Principal) -> dt.date:
        user = await self.db.get(User, principal.self_id)
        return local_today(user.timezone if user else None)

    async def _local_days(self, company_ids: list[int] | None) -> dict[str, dt.date]:
        now = dt.datetime.now(dt.UTC)
        return {
            timezone: local_today(timezone, now)
            for timezone in await self.attendance.user_timezones(company_ids)
        }

    # ---- employee ----

    async def employee_dashboard(self, principal: Principal) -> EmployeeDashboard:
        user = await self._self(principal)
        today = local_today(user.timezone)
        start = week_start(today)
        end = start + dt.timedelta(days=WORKWEEK_LENGTH - 1)
        previous_start = start - dt.timedelta(days=7)
        previous_end = end - dt.timedelta(days=7)

        record = await self.attendance.get_for_day(user.id, today)
        this_week = await self.attendance.list_between([user.id], start, end)
        last_week = await self.attendance.list_between(
            [user.id], previous_start, previous_end
        )
        tasks = await self.repo.user_tasks_between(user.id, start, end)
        previous_tasks = await self.repo.user_tasks_between(
            user.id, previous_start, previous_end
        )
        recent = await self.repo.recent_user_tasks(user.id, RECENT_TASKS_LIMIT)

        present = sum(1 for r in this_week if r.clock_in_at is not None)
        previous_present = sum(1 for r in last_week if r.clock_in_at is not None)
        hours = total_hours(this_week)

        return EmployeeDashboard(
            today=TodayAttendance(
                date=today,
                clock_in_at=record.clock_in_at if record else None,
                clock_out_at=record.clock_out_at if record else None,
                status=today_status(record),
            ),
            week=WeeklyStats(
                week_start=start,
                week_end=end,
                hours=hours,
                hours_change_percentage=percent_change(hours, total_hours(last_week)),
                tasks=len(tasks),
                tasks_change_percentage=percent_change(len(tasks), len(previous_tasks)),
                present_days=present,
                previous_week_present_days=previous_present,
                present_days_change_percentage=percent_change(present, previous_present),
                absence_days=max(0, WORKWEEK_LENGTH - present),
                working_days=WORKWEEK_LENGTH,
            ),
            recent_tasks=[TaskItem.model_validate(t) for t in recent],
        )

    async def quick_stats(self, principal: Principal) -> QuickStats:
        user = await self._self(principal)
        today = local_today(user.timezone)
        record = await self.attendance.get_for_day(user.id, today)
        status = today_status(record)

        return QuickStats(
            is_clocked_in=status == TodayStatus.ACTIVE,
            today_status=status,
            total_tasks=await self.repo.count_user_tasks(user.id),
            monthly_attendance=await self.repo.count_present_days(
                user.id, today.replace(day=1), today
            ),
        )

    async def performance(self, principal: Principal) -> PerformanceAnalytics:
        user = await self._self(principal)
        today = local_today(user.timezone)
        month_start = today.replace(day=1)
        last_month_end = month_start - dt.timedelta(days=1)
        last_month_start = last_month_end.replace(day=1)

        tasks = await self.repo.user_tasks_between(user.id, month_start, today)
        last_tasks = await self.repo.user_tasks_between(
            user.id, last_month_start, last_month_end
        )
        present = await self.repo.count_present_days(user.id, month_start, today)

        task_hours = round(sum(t.duration for t in tasks), 2)
        last_task_hours = round(sum(t.duration for t in last_tasks), 2)
        return PerformanceAnalytics(
            productivity=Productivity(
                this_month=task_hours,
                last_month=last_task_hours,
                change_percentage=percent_change(task_hours, last_task_hours),
            ),
            tasks_this_month=len(tasks),
            average_task_hours=round(task_hours / max(len(tasks), 1), 2),
            attendance=MonthlyAttendance(
                present_days=present,
                percentage=round(present / today.day * 100),
            ),
            goals=Goals(
                monthly_task_hours=MONTHLY_TASK_HOURS_GOAL,
                attendance_target=MONTHLY_ATTENDANCE_GOAL,
                productivity_target=PRODUCTIVITY_GOAL,
            ),
        )

    # ---- company admin ----

    async def company_dashboard(
        self, principal: Principal, company_id: int | None = None
    ) -> CompanyDashboard:
        """Company headcount, today's presence and this week's work.

        The week is taken in the requesting admin's timezone.
        """
        company_id = await self._company(principal, company_id)
        start = week_start(await self._principal_today(principal))
        end = start + dt.timedelta(days=WORKWEEK_LENGTH - 1)

        employees = await self.repo.count_employees(company_id)
        today_records = await self.repo.company_records_on_local_days(
            company_id, await self._local_days([company_id])
        )
        present = sum(1 for r in today_records if r.clock_in_at is not None)
        week_records = await self.repo.company_records_between(company_id, start, end)
        hours = total_hours(week_records)

        return CompanyDashboard(
            company_id=company_id,
            total_employees=employees,
            today=TodayPresence(
                present=present,
                total=employees,
                rate=round(present / employees * 100) if employees else 0,
            ),
            week=CompanyWeek(
                week_start=start,
                week_end=end,
                tasks=await self.repo.count_company_tasks(company_id, start, end),
                total_hours=hours,
                average_hours_per_employee=round(hours / employees, 2) if employees else 0.0,
            ),
        )

    async def top_performers(
        self, principal: Principal, company_id: int | None = None
    ) -> TopPerformers:
        company_id = await self._company(principal, company_id)
        records = await self.repo.company_records_on_local_days(
            company_id, await self._local_days([company_id])
        )
        complete = sorted(
            (r for r in records if r.hours_worked is not None),
            key=lambda r: r.hours_worked,
            reverse=True,
        )
        performers = [
            PerformerEntry(
                employee=EmployeeRef.model_validate(r.user),
                clock_in_at=r.clock_in_at,
                clock_out_at=r.clock_out_at,
                hours_worked=r.hours_worked,
            )
            for r in complete[:COMPANY_FEED_LIMIT]
        ]
        hours = [p.hours_worked for p in performers]

        return TopPerformers(
            date=await self._principal_today(principal),
            total_employees_worked=len(complete),
            performers=performers,
            highest_hours=hours[0] if hours else 0.0,
            average_hours=round(sum(hours) / len(hours), 2) if hours else 0.0,
        )

    async def recent_tasks(
        self, principal: Principal, company_id: int | None = None
    ) -> RecentTasks:
        company_id = await self._company(principal, company_id)
        tasks = await self.repo.recent_tasks(company_id, COMPANY_FEED_LIMIT)
        duration = round(sum(t.duration for t in tasks), 2)

        return RecentTasks(
            tasks=[company_task_item(t) for t in tasks],
            total_duration=duration,
            average_duration=round(duration / len(tasks), 2) if tasks else 0.0,
            latest_task_at=tasks[0].created_at if tasks else None,
        )

    # ---- super admin ----

    async def platform_dashboard(self, principal: Principal) -> PlatformDashboard:
        self.company_policy.can_report_platform(principal)

        tasks = await self.repo.recent_tasks(None, COMPANY_FEED_LIMIT)
        hours_by_company = await self.repo.completed_hours_by_company()
        companies = sorted(
            (
                CompanyHours(
                    id=company_id,
                    name=name,
                    total_employees=headcount,
                    total_work_hours=round(hours_by_company.get(company_id, 0.0), 2),
                )
                for company_id, name, headcount in await self.repo.company_headcounts()
            ),
            key=lambda c: (-c.total_work_hours, c.id),
        )

        days = await self._local_days(None)
        today_records = await self.repo.records_on_local_days(days)

        return PlatformDashboard(
            last_tasks=[
                PlatformTaskItem(
                    **company_task_item(t).model_dump(),
                    company=CompanyRef.model_validate(t.user.company)
                    if t.user.company
                    else None,
                )
                for t in tasks
            ],
            top_companies_by_work_hours=companies[:COMPANY_FEED_LIMIT],
            statistics=PlatformStatistics(
                total_companies=await self.repo.count_companies(),
                total_users=await self.repo.count_users(),
                today_total_work_hours=total_hours(today_records),
                today_total_tasks=await self.repo.count_tasks_on_local_days(days),
            ),
        )


# Type alias for dependency injection
DashboardSvc = Annotated[DashboardService, Depends(DashboardService)]
