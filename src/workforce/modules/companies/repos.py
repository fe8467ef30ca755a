"""Company repository for database operations."""

import datetime as dt

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from workforce.api.dependencies import DBSession
from workforce.modules.attendance.models import AttendanceRecord
from workforce.modules.companies.models import Company
from workforce.modules.tasks.models import Task
from workforce.modules.users.models import User


class CompanyRepository:
    """Repository for Company database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, company: Company) -> Company:
        self.session.add(company)
        await self.session.flush()
        await self.session.refresh(company)
        return company

    async def get_by_id(self, company_id: int) -> Company | None:
        return await self.session.get(Company, company_id)

    async def list_companies(
        self,
        company_ids: list[int] | None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Company], int]:
        """List companies with pagination; ``company_ids=None`` means all.

        Returns:
            Tuple of (companies list, total count)
        """
        filters = []
        if company_ids is not None:
            filters.append(Company.id.in_(company_ids))

        count_stmt = select(func.count()).select_from(Company).where(*filters)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(Company)
            .where(*filters)
            .order_by(Company.name)
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def update(self, company: Company) -> Company:
        await self.session.flush()
        await self.session.refresh(company)
        return company

    async def delete(self, company: Company) -> None:
        await self.session.delete(company)
        await self.session.flush()

    async def attendance_for_day(
        self, company_id: int, day: dt.date
    ) -> list[AttendanceRecord]:
        """Attendance records of a company's users for one day."""
        stmt = (
            select(AttendanceRecord)
            .join(User, AttendanceRecord.user_id == User.id)
            .where(User.company_id == company_id, AttendanceRecord.date == day)
            .options(selectinload(AttendanceRecord.user))
            .order_by(User.full_name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def tasks_for_day(self, company_id: int, day: dt.date) -> list[Task]:
        stmt = (
            select(Task)
            .join(User, Task.user_id == User.id)
            .where(User.company_id == company_id, Task.date == day)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

