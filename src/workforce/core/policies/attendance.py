"""Access policy for attendance records."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from workforce.core.auth.principal import Principal
from workforce.core.errors import NotFoundError
from workforce.core.policies.base import (
    GLOBAL_ADMIN,
    SELF,
    TENANT_ADMIN,
    AccessDecision,
    AccessTarget,
    Operation,
    ResourcePolicy,
)
from workforce.core.policies.targets import owner_target, record_target
from workforce.modules.attendance.models import AttendanceRecord


OWN_RECORD_RULES = (GLOBAL_ADMIN, SELF, TENANT_ADMIN)


class AttendancePolicy(ResourcePolicy):
    """Who may touch which attendance records.

    Employees reach only their own records, company admins every record of
    their company, super admins everything.
    """

    resource = "attendance"
    rules = {
        Operation.CREATE: OWN_RECORD_RULES,
        Operation.READ: OWN_RECORD_RULES,
        Operation.UPDATE: OWN_RECORD_RULES,
        Operation.DELETE: OWN_RECORD_RULES,
        Operation.REPORT: (GLOBAL_ADMIN, TENANT_ADMIN),
    }

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _for_owner(
        self, principal: Principal, operation: Operation, user_id: int
    ) -> AccessDecision:
        target = await owner_target(self.session, user_id)
        return self.authorize(principal, operation, target)

    async def can_create(self, principal: Principal, user_id: int) -> AccessDecision:
        return await self._for_owner(principal, Operation.CREATE, user_id)

    async def can_read(self, principal: Principal, user_id: int) -> AccessDecision:
        return await self._for_owner(principal, Operation.READ, user_id)

    async def can_update(self, principal: Principal, user_id: int) -> AccessDecision:
        return await self._for_owner(principal, Operation.UPDATE, user_id)

    async def can_delete(self, principal: Principal, user_id: int) -> AccessDecision:
        return await self._for_owner(principal, Operation.DELETE, user_id)

    async def ensure_access(
        self,
        principal: Principal,
        attendance_id: int,
        operation: Operation = Operation.READ,
    ) -> AttendanceRecord:
        """Look up a record, then authorize ``operation`` on it.

        Raises:
            NotFoundError: If the record does not exist
            ResourceForbiddenError: If it exists but is out of reach
        """
        stmt = (
            select(AttendanceRecord)
            .where(AttendanceRecord.id == attendance_id)
            .options(selectinload(AttendanceRecord.user))
        )
        result = await self.session.execute(stmt)
        record = result.scalar_one_or_none()
        if record is None:
            raise NotFoundError(resource=self.resource)

        self.authorize(principal, operation, record_target(record.user, attendance_id))
        return record

    def can_access_company_data(
        self, principal: Principal, company_id: int
    ) -> AccessDecision:
        """Company-wide attendance views (today's board, daily reports)."""
        return self.authorize(
            principal, Operation.REPORT, AccessTarget(company_id=company_id)
        )
