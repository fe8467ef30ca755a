"""Access policy for companies.

There is no self rule here: employees never act on company resources.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from workforce.core.auth.principal import Principal
from workforce.core.errors import NotFoundError
from workforce.core.policies.base import (
    GLOBAL_ADMIN,
    TENANT_ADMIN,
    AccessDecision,
    AccessTarget,
    Operation,
    ResourcePolicy,
)
from workforce.modules.companies.models import Company


TENANT_RULES = (GLOBAL_ADMIN, TENANT_ADMIN)


class CompanyPolicy(ResourcePolicy):
    resource = "company"
    rules = {
        Operation.CREATE: (GLOBAL_ADMIN,),
        Operation.DELETE: (GLOBAL_ADMIN,),
        Operation.READ: TENANT_RULES,
        Operation.UPDATE: TENANT_RULES,
        Operation.REPORT: TENANT_RULES,
    }

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def can_create(self, principal: Principal) -> AccessDecision:
        return self.authorize(principal, Operation.CREATE, AccessTarget())

    def can_delete(self, principal: Principal) -> AccessDecision:
        return self.authorize(principal, Operation.DELETE, AccessTarget())

    def can_read(self, principal: Principal, company_id: int) -> AccessDecision:
        return self.authorize(principal, Operation.READ, AccessTarget(company_id=company_id))

    def can_update(self, principal: Principal, company_id: int) -> AccessDecision:
        return self.authorize(
            principal, Operation.UPDATE, AccessTarget(company_id=company_id)
        )

    def can_generate_report(
        self, principal: Principal, company_id: int
    ) -> AccessDecision:
        return self.authorize(
            principal, Operation.REPORT, AccessTarget(company_id=company_id)
        )

    def can_report_platform(self, principal: Principal) -> AccessDecision:
        """Reports spanning every company; no tenant rule can match."""
        return self.authorize(principal, Operation.REPORT, AccessTarget())

    async def ensure_access(
        self,
        principal: Principal,
        company_id: int,
        operation: Operation = Operation.READ,
    ) -> Company:
        """Look up a company, then authorize ``operation`` on it.

        Raises:
            NotFoundError: If the company does not exist
            ResourceForbiddenError: If it exists but is out of reach
        """
        company = await self.session.get(Company, company_id)
        if company is None:
            raise NotFoundError(resource=self.resource)

        self.authorize(
            principal,
            operation,
            AccessTarget(company_id=company.id, resource_id=company_id, by_reference=True),
        )
        return company

    @staticmethod
    def accessible_company_ids(principal: Principal) -> list[int] | None:
        """Companies whose data the principal may list; None means all."""
        if principal.is_global_admin:
            return None
        return [principal.tenant_id] if principal.tenant_id is not None else []
