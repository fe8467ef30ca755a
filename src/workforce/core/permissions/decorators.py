"""Declarative access gates for route handlers.

Routes declare the coarse roles they admit and the ``(module, action)``
permissions they need:

    @router.delete("/users/{user_id}")
    @requires(
        roles=[Role.SUPER_ADMIN, Role.COMPANY_ADMIN],
        permissions=[(PermissionModule.USERS, PermissionAction.DELETE)],
    )
    async def delete_user(user_id: int, principal: CurrentPrincipal, db: DBSession):
        ...

Stacked declarations are merged into one gate, so the role gate always runs
before the permission gate whatever the decorator order. Malformed
declarations raise ``InvalidConfigurationError`` when the module is imported.
"""

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from functools import wraps
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar, cast

import structlog

from workforce.core.auth.principal import Principal, Role
from workforce.core.auth.roles import check_roles, parse_roles
from workforce.core.errors import ForbiddenError, InvalidConfigurationError
from workforce.core.permissions.checker import PermissionChecker
from workforce.core.permissions.definitions import (
    PermissionAction,
    PermissionModule,
    PermissionRequirement,
)


if TYPE_CHECKING:
    from fastapi import Request
    from sqlalchemy.ext.asyncio import AsyncSession


logger = structlog.get_logger()

P = ParamSpec("P")
R = TypeVar("R")

RequirementSpec = PermissionRequirement | tuple[Any, Any] | str

ACCESS_REQUIREMENTS_ATTR = "__access_requirements__"
ENDPOINT_ATTR = "__access_endpoint__"


@dataclass(frozen=True)
class AccessRequirements:
    """Everything an operation declares about who may call it."""

    roles: frozenset[Role] | None = None
    permissions: tuple[PermissionRequirement, ...] = ()

    @classmethod
    def build(
        cls,
        roles: Iterable[Role | str] = (),
        permissions: Iterable[RequirementSpec] = (),
    ) -> "AccessRequirements":
        parsed = parse_roles(roles)
        return cls(
            roles=parsed or None,
            permissions=tuple(PermissionRequirement.parse(p) for p in permissions),
        )

    def merge(self, other: "AccessRequirements") -> "AccessRequirements":
        """Combine two declarations.

        Role sets narrow to the intersection when both declare roles;
        permission requirements accumulate.

        Raises:
            InvalidConfigurationError: If the role sets do not overlap
        """
        roles: frozenset[Role] | None
        if self.roles is not None and other.roles is not None:
            roles = self.roles & other.roles
            if not roles:
                raise InvalidConfigurationError(
                    "Stacked role declarations admit no role: "
                    f"{sorted(self.roles)} and {sorted(other.roles)}"
                )
        else:
            roles = self.roles if self.roles is not None else other.roles

        permissions = self.permissions + tuple(
            p for p in other.permissions if p not in self.permissions
        )
        return AccessRequirements(roles=roles, permissions=permissions)


def _get_principal_and_db(
    kwargs: dict[str, Any],
) -> tuple[Principal | None, "AsyncSession | None", "Request | None"]:
    """Extract principal, db session, and request from handler kwargs."""
    principal = cast("Principal | None", kwargs.get("principal"))
    db = cast("AsyncSession | None", kwargs.get("db"))
    request = cast("Request | None", kwargs.get("request"))
    return principal, db, request


async def check_permissions(
    principal: Principal,
    db: "AsyncSession",
    requirements: tuple[PermissionRequirement, ...],
    request: "Request | None" = None,
) -> None:
    """Permission gate: every declared requirement must be satisfied.

    Raises:
        ForbiddenError: If any requirement is missing
    """
    if not requirements:
        return

    checker = PermissionChecker(db)
    permissions = await checker.get_effective_permissions(principal)
    missing = permissions.missing(requirements)

    if missing:
        missing_names = [r.name for r in missing]
        logger.warning(
            "permission_denied",
            principal_id=principal.id,
            sub_role_id=principal.sub_role_id,
            missing_permissions=missing_names,
            endpoint=request.url.path if request else "unknown",
        )
        raise ForbiddenError(
            reason=f"Insufficient permissions: {', '.join(missing_names)}",
        )


async def enforce(
    requirements: AccessRequirements,
    principal: Principal | None,
    db: "AsyncSession | None",
    request: "Request | None" = None,
) -> None:
    """Run the role gate, then the permission gate."""
    check_roles(principal, requirements.roles)
    principal = cast(Principal, principal)

    if requirements.permissions:
        if db is None:
            raise ForbiddenError(reason="Permission check failed: no database session")
        await check_permissions(principal, db, requirements.permissions, request)


def requires(
    roles: Iterable[Role | str] = (),
    permissions: Iterable[RequirementSpec] = (),
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator declaring the roles and permissions a route needs.

    The decorated handler must accept ``principal`` and, when permissions are
    declared, ``db`` as keyword arguments (FastAPI dependencies).

    Args:
        roles: Coarse roles admitted; empty means any authenticated principal
        permissions: ``(module, action)`` pairs that must all be held

    Raises:
        InvalidConfigurationError: If a role, module or action is unknown
    """
    declared = AccessRequirements.build(roles, permissions)

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        endpoint = getattr(func, ENDPOINT_ATTR, func)
        existing: AccessRequirements = getattr(
            func, ACCESS_REQUIREMENTS_ATTR, AccessRequirements()
        )
        merged = existing.merge(declared)

        @wraps(endpoint)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            principal, db, request = _get_principal_and_db(kwargs)
            await enforce(merged, principal, db, request)
            return await endpoint(*args, **kwargs)

        setattr(wrapper, ACCESS_REQUIREMENTS_ATTR, merged)
        setattr(wrapper, ENDPOINT_ATTR, endpoint)
        return wrapper

    return decorator


def require_roles(
    *roles: Role | str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator admitting only the given coarse roles.

    Usage:
        @router.post("/companies")
        @require_roles(Role.SUPER_ADMIN)
        async def create_company(principal: CurrentPrincipal, ...):
            ...
    """
    return requires(roles=roles)


def require_permissions(
    *permissions: RequirementSpec,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator requiring every listed ``(module, action)`` permission.

    Usage:
        @router.get("/permissions")
        @require_permissions((PermissionModule.PERMISSIONS, PermissionAction.READ))
        async def list_permissions(principal: CurrentPrincipal, db: DBSession):
            ...
    """
    return requires(permissions=permissions)


def require_permission(
    module: PermissionModule | str, action: PermissionAction | str
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator requiring a single permission."""
    return require_permissions((module, action))


def get_access_requirements(func: Callable[..., Any]) -> AccessRequirements:
    """Return what a handler declares, or an empty declaration."""
    return getattr(func, ACCESS_REQUIREMENTS_ATTR, AccessRequirements())


# Convenience decorators for common permission patterns
def require_user_read() -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    return require_permission(PermissionModule.USERS, PermissionAction.READ)


def require_user_create() -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    return require_permission(PermissionModule.USERS, PermissionAction.CREATE)


def require_user_update() -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    return require_permission(PermissionModule.USERS, PermissionAction.UPDATE)


def require_user_delete() -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    return require_permission(PermissionModule.USERS, PermissionAction.DELETE)


def require_system_management() -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    return require_permission(PermissionModule.SYSTEM, PermissionAction.MANAGE)
