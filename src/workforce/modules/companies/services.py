"""Company service for business logic."""

import datetime as dt
from typing import Annotated

from fastapi import Depends

from workforce.api.dependencies import DBSession
from workforce.core.auth.principal import Principal
from workforce.core.errors import BadRequestError, ForbiddenError, NotFoundError
from workforce.core.policies import CompanyPolicy, Operation
from workforce.core.responses import PageParams
from workforce.modules.companies.models import Company
from workforce.modules.companies.repos import CompanyRepository
from workforce.modules.companies.schemas import (
    CompanyCreate,
    CompanyUpdate,
    DailyAttendanceEntry,
    DailyReport,
)


class CompanyService:
    """Service for company management and reporting."""

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.repo = CompanyRepository(db)
        self.policy = CompanyPolicy(db)

    async def _ensure_parent_exists(self, parent_company_id: int | None) -> None:
        if parent_company_id is not None:
            if await self.repo.get_by_id(parent_company_id) is None:
                raise NotFoundError(resource="company")

    async def create_company(self, principal: Principal, data: CompanyCreate) -> Company:
        self.policy.can_create(principal)
        await self._ensure_parent_exists(data.parent_company_id)
        return await self.repo.create(Company(**data.model_dump()))

    async def list_companies(
        self, principal: Principal, params: PageParams
    ) -> tuple[list[Company], int]:
        company_ids = CompanyPolicy.accessible_company_ids(principal)
        return await self.repo.list_companies(company_ids, params.skip, params.limit)

    async def get_company(self, principal: Principal, company_id: int) -> Company:
        return await self.policy.ensure_access(principal, company_id)

    async def update_company(
        self, principal: Principal, company_id: int, data: CompanyUpdate
    ) -> Company:
        """Update a company.

        Raises:
            ForbiddenError: If a company admin tries to re-parent the company
            BadRequestError: If the company would become its own parent
        """
        company = await self.policy.ensure_access(principal, company_id, Operation.UPDATE)
        changes = data.model_dump(exclude_unset=True)

        if "parent_company_id" in changes:
            if not principal.is_global_admin:
                raise ForbiddenError(reason="only super admins re-parent companies")
            if changes["parent_company_id"] == company.id:
                raise BadRequestError(
                    "A company cannot be its own parent",
                    error_code="invalid_parent",
                )
            await self._ensure_parent_exists(changes["parent_company_id"])

        for field, value in changes.items():
            setattr(company, field, value)
        return await self.repo.update(company)

    async def delete_company(self, principal: Principal, company_id: int) -> None:
        self.policy.can_delete(principal)
        company = await self.repo.get_by_id(company_id)
        if company is None:
            raise NotFoundError(resource="company")
        await self.repo.delete(company)

    async def daily_report(
        self, principal: Principal, company_id: int, day: dt.date
    ) -> DailyReport:
        """Build the attendance and task summary of a company for one day.

        The company is authorized as an explicit target before it is looked
        up, so a foreign id is refused the same way whether it exists or not.
        """
        self.policy.can_generate_report(principal, company_id)
        if await self.repo.get_by_id(company_id) is None:
            raise NotFoundError(resource="company")

        records = await self.repo.attendance_for_day(company_id, day)
        tasks = await self.repo.tasks_for_day(company_id, day)

        entries = [
            DailyAttendanceEntry(
                user_id=record.user_id,
                employee_name=record.user.full_name,
                clock_in_at=record.clock_in_at,
                clock_out_at=record.clock_out_at,
                hours_worked=record.hours_worked,
                note=record.note,
            )
            for record in records
        ]

        return DailyReport(
            company_id=company_id,
            date=day,
            total_employees=len(entries),
            total_hours_worked=round(sum(e.hours_worked or 0 for e in entries), 2),
            total_tasks=len(tasks),
            total_task_hours=round(sum(t.duration for t in tasks), 2),
            attendance=entries,
        )


# Type alias for dependency injection
CompanySvc = Annotated[CompanyService, Depends(CompanyService)]
