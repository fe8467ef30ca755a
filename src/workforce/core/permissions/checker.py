"""Permission checking logic.

This module resolves a principal's effective permission set from the
grant rows of its assigned sub-role. Nothing is cached: grants are read
fresh for every check so a revocation takes effect on the next request.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from workforce.core.auth.principal import Principal
from workforce.core.permissions.definitions import (
    PermissionAction,
    PermissionModule,
    PermissionRequirement,
    permission_name,
)
from workforce.core.permissions.models import SubRolePermission


@dataclass(frozen=True)
class EffectivePermissions:
    """Resolved permissions of a principal.

    Attributes:
        granted: ``module.action`` keys with a ``granted=True`` row
        revoked: ``module.action`` keys with an explicit ``granted=False`` row
    """

    granted: frozenset[str] = field(default_factory=frozenset)
    revoked: frozenset[str] = field(default_factory=frozenset)

    def allows(
        self, module: PermissionModule | str, action: PermissionAction | str
    ) -> bool:
        """Check a single ``(module, action)`` requirement.

        An explicit revocation of ``module.action`` wins over a ``module.manage``
        grant; ``manage`` covers every other action of the module.
        """
        name = permission_name(module, action)
        if name in self.revoked:
            return False
        if name in self.granted:
            return True
        return permission_name(module, PermissionAction.MANAGE) in self.granted

    def allows_all(self, requirements: Iterable[PermissionRequirement]) -> bool:
        return all(self.allows(r.module, r.action) for r in requirements)

    def missing(
        self, requirements: Iterable[PermissionRequirement]
    ) -> list[PermissionRequirement]:
        """Return the requirements that are not satisfied."""
        return [r for r in requirements if not self.allows(r.module, r.action)]

    def names(self) -> set[str]:
        """The effective ``module.action`` keys held."""
        return set(self.granted - self.revoked)


EMPTY_PERMISSIONS = EffectivePermissions()


def compute_effective_permissions(
    grants: Iterable[tuple[str, bool]],
) -> EffectivePermissions:
    """Fold ``(permission name, granted)`` rows into an effective set.

    A revocation removes the key regardless of row order, so computing the
    set twice from the same rows always gives the same result.
    """
    granted: set[str] = set()
    revoked: set[str] = set()

    for name, is_granted in grants:
        if is_granted:
            granted.add(name)
        else:
            revoked.add(name)

    return EffectivePermissions(
        granted=frozenset(granted - revoked),
        revoked=frozenset(revoked),
    )


class PermissionChecker:
    """Service for checking principal permissions.

    Evaluates whether a principal holds specific permissions based on the
    grants of its assigned sub-role. Principals without a sub-role hold
    nothing.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_grants(self, sub_role_id: int) -> list[SubRolePermission]:
        """Get all grant rows of a sub-role, with their permissions loaded."""
        stmt = (
            select(SubRolePermission)
            .where(SubRolePermission.sub_role_id == sub_role_id)
            .options(selectinload(SubRolePermission.permission))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_effective_permissions(
        self, principal: Principal
    ) -> EffectivePermissions:
        """Resolve the effective permission set of a principal."""
        if principal.sub_role_id is None:
            return EMPTY_PERMISSIONS

        grants = await self.get_grants(principal.sub_role_id)
        return compute_effective_permissions(
            (grant.permission.name, grant.granted) for grant in grants
        )

    async def has_permission(
        self,
        principal: Principal,
        module: PermissionModule | str,
        action: PermissionAction | str,
    ) -> bool:
        """Check if a principal holds ``module.action`` (or ``module.manage``)."""
        permissions = await self.get_effective_permissions(principal)
        return permissions.allows(module, action)

    async def has_all_permissions(
        self,
        principal: Principal,
        requirements: Iterable[PermissionRequirement],
    ) -> bool:
        """Check if a principal satisfies every requirement."""
        permissions = await self.get_effective_permissions(principal)
        return permissions.allows_all(requirements)
