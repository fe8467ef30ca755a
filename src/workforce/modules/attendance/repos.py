"""Attendance repository for database operations."""

import datetime as dt

from sqlalchemy import ColumnElement, and_, func, or_, select

from workforce.api.dependencies import DBSession
from workforce.modules.attendance.models import AttendanceRecord
from workforce.modules.users.models import User


def local_day_clause(days: dict[str, dt.date], column: ColumnElement) -> ColumnElement[bool]:
    """Match ``column`` against the current day of the owning user's timezone.

    ``days`` maps each timezone to its local date; the statement must join
    ``User``.
    """
    return or_(
        *(and_(User.timezone == timezone, column == day) for timezone, day in days.items())
    )


class AttendanceRepository:
    """Repository for AttendanceRecord database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, record: AttendanceRecord) -> AttendanceRecord:
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def get_for_day(self, user_id: int, day: dt.date) -> AttendanceRecord | None:
        """The record of a user for one day, if any."""
        stmt = select(AttendanceRecord).where(
            AttendanceRecord.user_id == user_id,
            AttendanceRecord.date == day,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def user_timezones(self, company_ids: list[int] | None) -> list[str]:
        """Distinct timezones of the users in the given companies."""
        stmt = select(User.timezone).distinct()
        if company_ids is not None:
            stmt = stmt.where(User.company_id.in_(company_ids))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_local_days(
        self,
        days: dict[str, dt.date],
        company_ids: list[int] | None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[AttendanceRecord], int]:
        """Records dated on each user's own day, keyed by the user's timezone.

        ``company_ids=None`` means all companies.

        Returns:
            Tuple of (records list, total count)
        """
        if not days:
            return [], 0

        filters = [local_day_clause(days, AttendanceRecord.date)]
        if company_ids is not None:
            filters.append(User.company_id.in_(company_ids))

        base = select(AttendanceRecord).join(User, AttendanceRecord.user_id == User.id)
        count_stmt = select(func.count()).select_from(base.where(*filters).subquery())
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            base.where(*filters)
            .order_by(AttendanceRecord.id)
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def list_for_user(
        self,
        user_id: int,
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[AttendanceRecord], int]:
        """A user's records, newest first, optionally within a date range."""
        filters = [AttendanceRecord.user_id == user_id]
        if start_date is not None:
            filters.append(AttendanceRecord.date >= start_date)
        if end_date is not None:
            filters.append(AttendanceRecord.date <= end_date)

        count_stmt = select(func.count()).select_from(AttendanceRecord).where(*filters)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(AttendanceRecord)
            .where(*filters)
            .order_by(AttendanceRecord.date.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def list_between(
        self, user_ids: list[int], start_date: dt.date, end_date: dt.date
    ) -> list[AttendanceRecord]:
        """Every record of the given users inside an inclusive date range."""
        if not user_ids:
            return []
        stmt = (
            select(AttendanceRecord)
            .where(
                AttendanceRecord.user_id.in_(user_ids),
                AttendanceRecord.date >= start_date,
                AttendanceRecord.date <= end_date,
            )
            .order_by(AttendanceRecord.user_id, AttendanceRecord.date)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, record: AttendanceRecord) -> AttendanceRecord:
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def delete(self, record: AttendanceRecord) -> None:
        await self.session.delete(record)
        await self.session.flush()

