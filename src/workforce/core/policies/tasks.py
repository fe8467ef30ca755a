"""Access policy for tasks."""

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
from workforce.modules.tasks.models import Task


OWN_RECORD_RULES = (GLOBAL_ADMIN, SELF, TENANT_ADMIN)


class TaskPolicy(ResourcePolicy):
    """Who may touch which tasks. Same shape as attendance."""

    resource = "task"
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

    async def can_update(self, principal: Principal, user_id: int) -> AccessDecision:
        return await self._for_owner(principal, Operation.UPDATE, user_id)

    async def can_delete(self, principal: Principal, user_id: int) -> AccessDecision:
        return await self._for_owner(principal, Operation.DELETE, user_id)

    async def ensure_access(
        self,
        principal: Principal,
        task_id: int,
        operation: Operation = Operation.READ,
    ) -> Task:
        """Look up a task, then authorize ``operation`` on it.

        Raises:
            NotFoundError: If the task does not exist
            ResourceForbiddenError: If it exists but is out of reach
        """
        stmt = select(Task).where(Task.id == task_id).options(selectinload(Task.user))
        result = await self.session.execute(stmt)
        task = result.scalar_one_or_none()
        if task is None:
            raise NotFoundError(resource=self.resource)

        self.authorize(principal, operation, record_target(task.user, task_id))
        return task

    async def can_read(self, principal: Principal, task_id: int) -> Task:
        return await self.ensure_access(principal, task_id, Operation.READ)

    def can_read_company_tasks(
        self, principal: Principal, company_id: int
    ) -> AccessDecision:
        return self.authorize(
            principal, Operation.REPORT, AccessTarget(company_id=company_id)
        )
