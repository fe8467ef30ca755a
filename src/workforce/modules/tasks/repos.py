"""Task repository for database operations."""

import datetime as dt

from sqlalchemy import func, select

from workforce.api.dependencies import DBSession
from workforce.modules.tasks.models import Task
from workforce.modules.users.models import User


class TaskRepository:
    """Repository for Task database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, task: Task) -> Task:
        self.session.add(task)
        await self.session.flush()
        await self.session.refresh(task)
        return task

    async def _page(self, filters: list, skip: int, limit: int) -> tuple[list[Task], int]:
        base = select(Task).join(User, Task.user_id == User.id).where(*filters)
        count_stmt = select(func.count()).select_from(base.subquery())
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = base.order_by(Task.date.desc(), Task.id.desc()).offset(skip).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def list_for_user(
        self,
        user_id: int,
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Task], int]:
        """A user's tasks, newest first, optionally within a date range."""
        filters = [Task.user_id == user_id]
        if start_date is not None:
            filters.append(Task.date >= start_date)
        if end_date is not None:
            filters.append(Task.date <= end_date)
        return await self._page(filters, skip, limit)

    async def list_for_company(
        self, company_id: int, skip: int = 0, limit: int = 20
    ) -> tuple[list[Task], int]:
        return await self._page([User.company_id == company_id], skip, limit)

    async def stats_for_user(self, user_id: int) -> dict[str, tuple[int, float]]:
        """``status -> (count, total duration)`` for a user's tasks."""
        stmt = (
            select(Task.status, func.count(), func.coalesce(func.sum(Task.duration), 0))
            .where(Task.user_id == user_id)
            .group_by(Task.status)
        )
        result = await self.session.execute(stmt)
        return {status: (count, float(hours)) for status, count, hours in result.all()}

    async def update(self, task: Task) -> Task:
        await self.session.flush()
        await self.session.refresh(task)
        return task

    async def delete(self, task: Task) -> None:
        await self.session.delete(task)
        await self.session.flush()

