"""Task service for business logic."""

import datetime as dt
from typing import Annotated

from fastapi import Depends

from workforce.api.dependencies import DBSession
from workforce.core.auth.principal import Principal
from workforce.core.errors import BadRequestError, NotFoundError
from workforce.core.policies import Operation, TaskPolicy
from workforce.core.responses import PageParams
from workforce.modules.attendance.repos import AttendanceRepository
from workforce.modules.companies.models import Company
from workforce.modules.tasks.models import Task, TaskStatus
from workforce.modules.tasks.repos import TaskRepository
from workforce.modules.tasks.schemas import TaskCreate, TaskStats, TaskUpdate
from workforce.modules.users.models import User


class TaskService:
    """Service for task operations, authorized through ``TaskPolicy``."""

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.repo = TaskRepository(db)
        self.attendance = AttendanceRepository(db)
        self.policy = TaskPolicy(db)

    async def create_task(self, principal: Principal, data: TaskCreate) -> Task:
        """Log a task for a user, linking it to that day's attendance record.

        Raises:
            NotFoundError: If the user does not exist
        """
        user_id = data.user_id if data.user_id is not None else principal.self_id
        await self.policy.can_create(principal, user_id)
        if await self.db.get(User, user_id) is None:
            raise NotFoundError(resource="user")

        record = await self.attendance.get_for_day(user_id, data.date)
        task = Task(
            **data.model_dump(exclude={"user_id"}),
            user_id=user_id,
            attendance_record_id=record.id if record else None,
        )
        return await self.repo.create(task)

    async def my_tasks(
        self,
        principal: Principal,
        params: PageParams,
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
    ) -> tuple[list[Task], int]:
        if start_date and end_date and start_date > end_date:
            raise BadRequestError(
                "Start date must be before end date", error_code="invalid_date_range"
            )
        return await self.repo.list_for_user(
            principal.self_id, start_date, end_date, params.skip, params.limit
        )

    async def my_stats(self, principal: Principal) -> TaskStats:
        rows = await self.repo.stats_for_user(principal.self_id)

        def count(status: TaskStatus) -> int:
            return rows.get(status, (0, 0.0))[0]

        return TaskStats(
            total=sum(c for c, _ in rows.values()),
            pending=count(TaskStatus.PENDING),
            in_progress=count(TaskStatus.IN_PROGRESS),
            completed=count(TaskStatus.COMPLETED),
            total_duration=round(sum(h for _, h in rows.values()), 2),
        )

    async def company_tasks(
        self, principal: Principal, company_id: int, params: PageParams
    ) -> tuple[list[Task], int]:
        """Tasks of every user of a company.

        The company is authorized as an explicit target before it is looked up.
        """
        self.policy.can_read_company_tasks(principal, company_id)
        if await self.db.get(Company, company_id) is None:
            raise NotFoundError(resource="company")
        return await self.repo.list_for_company(company_id, params.skip, params.limit)

    async def get_task(self, principal: Principal, task_id: int) -> Task:
        return await self.policy.can_read(principal, task_id)

    async def update_task(
        self, principal: Principal, task_id: int, data: TaskUpdate
    ) -> Task:
        task = await self.policy.ensure_access(principal, task_id, Operation.UPDATE)
        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(task, field, value)

        if "date" in changes:
            record = await self.attendance.get_for_day(task.user_id, task.date)
            task.attendance_record_id = record.id if record else None
        return await self.repo.update(task)

    async def set_status(
        self, principal: Principal, task_id: int, status: TaskStatus
    ) -> Task:
        task = await self.policy.ensure_access(principal, task_id, Operation.UPDATE)
        task.status = status
        return await self.repo.update(task)

    async def delete_task(self, principal: Principal, task_id: int) -> None:
        task = await self.policy.ensure_access(principal, task_id, Operation.DELETE)
        await self.repo.delete(task)


# Type alias for dependency injection
TaskSvc = Annotated[TaskService, Depends(TaskService)]
