"""Access policy for sub-roles.

Company-scoped sub-roles are managed by their company's admins; global
sub-roles (no company) only by super admins.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from workforce.core.auth.principal import Principal
from workforce.core.errors import NotFoundError
from workforce.core.permissions.models import SubRole
from workforce.core.policies.base import (
    GLOBAL_ADMIN,
    TENANT_ADMIN,
    AccessDecision,
    AccessTarget,
    Operation,
    ResourcePolicy,
)


class SubRolePolicy(ResourcePolicy):
    resource = "sub_role"
    rules = {
        Operation.CREATE: (GLOBAL_ADMIN, TENANT_ADMIN),
        Operation.UPDATE: (GLOBAL_ADMIN, TENANT_ADMIN),
        Operation.DELETE: (GLOBAL_ADMIN, TENANT_ADMIN),
    }

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def can_create(self, principal: Principal, company_id: int | None) -> AccessDecision:
        return self.authorize(
            principal, Operation.CREATE, AccessTarget(company_id=company_id)
        )

    async def ensure_access(
        self,
        principal: Principal,
        sub_role_id: int,
        operation: Operation = Operation.UPDATE,
    ) -> SubRole:
        """Look up a sub-role, then authorize ``operation`` on it.

        Raises:
            NotFoundError: If the sub-role does not exist
            ResourceForbiddenError: If it exists but is out of reach
        """
        sub_role = await self.session.get(SubRole, sub_role_id)
        if sub_role is None:
            raise NotFoundError(resource=self.resource)

        self.authorize(
            principal,
            operation,
            AccessTarget(
                company_id=sub_role.company_id,
                resource_id=sub_role_id,
                by_reference=True,
            ),
        )
        return sub_role
