"""Services for the permission catalogue and sub-role grants."""

from typing import Annotated

import structlog
from fastapi import Depends

from workforce.api.dependencies import DBSession
from workforce.core.auth.principal import Principal
from workforce.core.errors import ConflictError, NotFoundError
from workforce.core.permissions import (
    PERMISSION_DEFINITIONS,
    EffectivePermissions,
    Permission,
    PermissionChecker,
    SubRole,
)
from workforce.core.policies import CompanyPolicy, SubRolePolicy
from workforce.core.responses import PageParams
from workforce.modules.companies.models import Company
from workforce.modules.sub_roles.repos import PermissionRepository, SubRoleRepository
from workforce.modules.sub_roles.schemas import GrantItem, SubRoleCreate


logger = structlog.get_logger()


class PermissionService:
    """Catalogue maintenance and effective-permission lookups."""

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.repo = PermissionRepository(db)
        self.checker = PermissionChecker(db)

    async def initialize_permissions(self) -> tuple[int, int]:
        """Insert every catalogue entry that is missing.

        Running it again creates nothing.

        Returns:
            Tuple of (created count, catalogue size)
        """
        existing = await self.repo.existing_names()
        missing = [
            Permission(
                name=definition.name,
                module=definition.module,
                action=definition.action,
                description=definition.description,
            )
            for definition in PERMISSION_DEFINITIONS
            if definition.name not in existing
        ]
        if missing:
            await self.repo.add_all(missing)

        logger.info(
            "permissions_initialized",
            created=len(missing),
            total=len(PERMISSION_DEFINITIONS),
        )
        return len(missing), len(PERMISSION_DEFINITIONS)

    async def list_permissions(self, params: PageParams) -> tuple[list[Permission], int]:
        return await self.repo.list_permissions(params.skip, params.limit)

    async def effective_permissions(self, principal: Principal) -> EffectivePermissions:
        return await self.checker.get_effective_permissions(principal)


class SubRoleService:
    """Sub-role creation and grant management."""

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.repo = SubRoleRepository(db)
        self.permissions = PermissionRepository(db)
        self.policy = SubRolePolicy(db)

    async def _resolve_grants(self, items: list[GrantItem]) -> dict[int, bool]:
        """Map ``module.action`` keys to permission ids; later items win.

        Raises:
            NotFoundError: If a permission is missing from the catalogue
        """
        wanted = {item.permission: item.granted for item in items}
        found = await self.permissions.get_by_names(list(wanted))
        missing = sorted(set(wanted) - set(found))
        if missing:
            raise NotFoundError(
                "Permission not initialized",
                resource="permission",
                resource_id=", ".join(missing),
            )
        return {found[name].id: granted for name, granted in wanted.items()}

    async def list_sub_roles(
        self, principal: Principal, params: PageParams
    ) -> tuple[list[SubRole], int]:
        company_ids = CompanyPolicy.accessible_company_ids(principal)
        return await self.repo.list_visible(company_ids, params.skip, params.limit)

    async def create_sub_role(self, principal: Principal, data: SubRoleCreate) -> SubRole:
        """Create a sub-role with its initial grants.

        Raises:
            ForbiddenError: If the principal cannot manage the target company
            NotFoundError: If the company does not exist
            ConflictError: If the name is taken in that company
        """
        company_id = data.company_id
        if company_id is None and not principal.is_global_admin:
            company_id = principal.tenant_id

        self.policy.can_create(principal, company_id)
        if company_id is not None and await self.db.get(Company, company_id) is None:
            raise NotFoundError(resource="company")

        if await self.repo.get_by_name(data.name, company_id):
            raise ConflictError(
                "Sub-role name already in use",
                error_code="sub_role_exists",
                details={"name": data.name},
            )

        grants = await self._resolve_grants(data.grants) if data.grants else {}
        sub_role = await self.repo.create(
            SubRole(name=data.name, description=data.description, company_id=company_id)
        )
        if grants:
            sub_role = await self.repo.upsert_grants(sub_role, grants)
        return sub_role

    async def set_grants(
        self, principal: Principal, sub_role_id: int, items: list[GrantItem]
    ) -> SubRole:
        """Upsert grant rows of a sub-role; effective on the next request."""
        sub_role = await self.policy.ensure_access(principal, sub_role_id)
        grants = await self._resolve_grants(items)
        sub_role = await self.repo.upsert_grants(sub_role, grants)

        logger.info(
            "sub_role_grants_updated",
            sub_role_id=sub_role.id,
            principal_id=principal.id,
            grants={item.permission: item.granted for item in items},
        )
        return sub_role


# Type aliases for dependency injection
PermissionSvc = Annotated[PermissionService, Depends(PermissionService)]
SubRoleSvc = Annotated[SubRoleService, Depends(SubRoleService)]
