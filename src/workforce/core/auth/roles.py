"""Static role gate.

Checks a principal's coarse role against the roles an operation declares.
No I/O happens here; the check always runs before the permission gate.
"""

from collections.abc import Iterable

import structlog

from workforce.core.auth.principal import Principal, Role
from workforce.core.errors import (
    ForbiddenError,
    InvalidConfigurationError,
    UnauthorizedError,
)


logger = structlog.get_logger()


def parse_roles(roles: Iterable[Role | str]) -> frozenset[Role]:
    """Validate declared roles.

    Raises:
        InvalidConfigurationError: If a declared role is unknown
    """
    parsed: set[Role] = set()
    for role in roles:
        try:
            parsed.add(Role(role))
        except ValueError as e:
            raise InvalidConfigurationError(f"Unknown role {role!r}") from e
    return frozenset(parsed)


def check_roles(principal: Principal | None, allowed: frozenset[Role] | None) -> None:
    """Allow iff the principal's role is declared, or no roles are declared.

    Raises:
        UnauthorizedError: If no principal was resolved
        ForbiddenError: If the principal's role is not allowed
    """
    if principal is None:
        raise UnauthorizedError(
            "Authentication required",
            error_code="auth_required",
        )

    if allowed and principal.role not in allowed:
        logger.warning(
            "role_denied",
            principal_id=principal.id,
            role=str(principal.role),
            allowed_roles=sorted(str(r) for r in allowed),
        )
        raise ForbiddenError(
            reason=f"role {principal.role} not in {sorted(str(r) for r in allowed)}"
        )
