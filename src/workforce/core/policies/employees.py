"""Access policy for users acting as employees of a company."""

from sqlalchemy.ext.asyncio import AsyncSession

from workforce.core.auth.principal import Principal
from workforce.core.errors import NotFoundError
from workforce.core.policies.base import (
    GLOBAL_ADMIN,
    OWNER,
    SELF,
    TENANT_ADMIN,
    AccessDecision,
    AccessTarget,
    Operation,
    ResourcePolicy,
)
from workforce.core.policies.targets import record_target
from workforce.modules.users.models import User


TENANT_RULES = (GLOBAL_ADMIN, TENANT_ADMIN)


class EmployeePolicy(ResourcePolicy):
    """Employees may read their own profile; only admins manage users.

    Every user, whatever the role, edits their own profile and no one
    else's through ``PROFILE``.
    """

    resource = "user"
    rules = {
        Operation.CREATE: TENANT_RULES,
        Operation.READ: (GLOBAL_ADMIN, SELF, TENANT_ADMIN),
        Operation.UPDATE: TENANT_RULES,
        Operation.DELETE: TENANT_RULES,
        Operation.PROFILE: (OWNER,),
    }

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def ensure_access(
        self,
        principal: Principal,
        employee_id: int,
        operation: Operation = Operation.READ,
    ) -> User:
        """Look up a user, then authorize ``operation`` on it.

        Raises:
            NotFoundError: If the user does not exist
            ResourceForbiddenError: If it exists but is out of reach
        """
        user = await self.session.get(User, employee_id)
        if user is None:
            raise NotFoundError(resource=self.resource)

        self.authorize(principal, operation, record_target(user, employee_id))
        return user

    def can_create(self, principal: Principal, company_id: int | None) -> AccessDecision:
        """Creating a user inside ``company_id`` (None for a super admin)."""
        return self.authorize(
            principal, Operation.CREATE, AccessTarget(company_id=company_id)
        )

    async def can_update(self, principal: Principal, employee_id: int) -> User:
        return await self.ensure_access(principal, employee_id, Operation.UPDATE)

    async def can_delete(self, principal: Principal, employee_id: int) -> User:
        return await self.ensure_access(principal, employee_id, Operation.DELETE)

    async def can_edit_profile(self, principal: Principal) -> User:
        return await self.ensure_access(principal, principal.self_id, Operation.PROFILE)
