"""Read-only queries behind the dashboards."""

import datetime as dt
from collections import defaultdict

from sqlalchemy import func, select

from workforce.api.dependencies import DBSession
from workforce.core.auth.principal import Role
from workforce.modules.attendance.models import AttendanceRecord
from workforce.modules.attendance.repos import local_day_clause
from workforce.modules.companies.models import Company
from workforce.modules.tasks.models import Task
from workforce.modules.users.models import User


class DashboardRepository:
    """Aggregate queries over attendance, tasks and headcount.

    Company-scoped queries only look at users with the ``EMPLOYEE`` role.
    Hours are summed in Python from ``AttendanceRecord.hours_worked`` so
    the same rounding applies everywhere.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def _scalar(self, stmt) -> int:
        return (await self.session.execute(stmt)).scalar_one()

    async def _records(self, stmt) -> list[AttendanceRecord]:
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # ---- one user ----

    async def user_tasks_between(
        self, user_id: int, start_date: dt.date, end_date: dt.date
    ) -> list[Task]:
        stmt = select(Task).where(
            Task.user_id == user_id,
            Task.date >= start_date,
            Task.date <= end_date,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def recent_user_tasks(self, user_id: int, limit: int) -> list[Task]:
        stmt = (
            select(Task)
            .where(Task.user_id == user_id)
            .order_by(Task.created_at.desc(), Task.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_user_tasks(self, user_id: int) -> int:
        return await self._scalar(
            select(func.count()).select_from(Task).where(Task.user_id == user_id)
        )

    async def count_present_days(
        self, user_id: int, start_date: dt.date, end_date: dt.date
    ) -> int:
        return await self._scalar(
            select(func.count())
            .select_from(AttendanceRecord)
            .where(
                AttendanceRecord.user_id == user_id,
                AttendanceRecord.date >= start_date,
                AttendanceRecord.date <= end_date,
                AttendanceRecord.clock_in_at.is_not(None),
            )
        )

    # ---- one company ----

    async def count_employees(self, company_id: int) -> int:
        return await self._scalar(
            select(func.count())
            .select_from(User)
            .where(User.company_id == company_id, User.role == Role.EMPLOYEE)
        )

    def _company_records(self, company_id: int):
        return (
            select(AttendanceRecord)
            .join(User, AttendanceRecord.user_id == User.id)
            .where(User.company_id == company_id, User.role == Role.EMPLOYEE)
        )

    async def company_records_on_local_days(
        self, company_id: int, days: dict[str, dt.date]
    ) -> list[AttendanceRecord]:
        """Each employee's record for their own current day."""
        if not days:
            return []
        stmt = self._company_records(company_id).where(
            local_day_clause(days, AttendanceRecord.date)
        )
        return await self._records(stmt)

    async def company_records_between(
        self, company_id: int, start_date: dt.date, end_date: dt.date
    ) -> list[AttendanceRecord]:
        stmt = self._company_records(company_id).where(
            AttendanceRecord.date >= start_date,
            AttendanceRecord.date <= end_date,
        )
        return await self._records(stmt)

    async def count_company_tasks(
        self, company_id: int, start_date: dt.date, end_date: dt.date
    ) -> int:
        return await self._scalar(
            select(func.count())
            .select_from(Task)
            .join(User, Task.user_id == User.id)
            .where(
                User.company_id == company_id,
                User.role == Role.EMPLOYEE,
                Task.date >= start_date,
                Task.date <= end_date,
            )
        )

    async def recent_tasks(self, company_id: int | None, limit: int) -> list[Task]:
        """Newest tasks of a company's employees, or of everyone with None."""
        stmt = select(Task).join(User, Task.user_id == User.id)
        if company_id is not None:
            stmt = stmt.where(User.company_id == company_id, User.role == Role.EMPLOYEE)
        stmt = stmt.order_by(Task.created_at.desc(), Task.id.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # ---- platform ----

    async def count_companies(self) -> int:
        return await self._scalar(select(func.count()).select_from(Company))

    async def count_users(self) -> int:
        return await self._scalar(select(func.count()).select_from(User))

    async def company_headcounts(self) -> list[tuple[int, str, int]]:
        """``(id, name, users)`` for every company."""
        stmt = (
            select(Company.id, Company.name, func.count(User.id))
            .outerjoin(User, User.company_id == Company.id)
            .group_by(Company.id, Company.name)
        )
        result = await self.session.execute(stmt)
        return [(id_, name, count) for id_, name, count in result.all()]

    async def completed_hours_by_company(self) -> dict[int, float]:
        """Hours of every complete attendance record, summed per company."""
        stmt = (
            select(AttendanceRecord, User.company_id)
            .join(User, AttendanceRecord.user_id == User.id)
            .where(
                User.company_id.is_not(None),
                AttendanceRecord.clock_in_at.is_not(None),
                AttendanceRecord.clock_out_at.is_not(None),
            )
        )
        result = await self.session.execute(stmt)
        totals: dict[int, float] = defaultdict(float)
        for record, company_id in result.all():
            totals[company_id] += record.hours_worked or 0.0
        return totals

    async def records_on_local_days(
        self, days: dict[str, dt.date]
    ) -> list[AttendanceRecord]:
        if not days:
            return []
        stmt = (
            select(AttendanceRecord)
            .join(User, AttendanceRecord.user_id == User.id)
            .where(local_day_clause(days, AttendanceRecord.date))
        )
        return await self._records(stmt)

    async def count_tasks_on_local_days(self, days: dict[str, dt.date]) -> int:
        if not days:
            return 0
        return await self._scalar(
            select(func.count())
            .select_from(Task)
            .join(User, Task.user_id == User.id)
            .where(local_day_clause(days, Task.date))
        )

