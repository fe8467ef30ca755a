"""Fine-grained permission system (module x action grants per sub-role)."""

from workforce.core.permissions.checker import (
    EffectivePermissions,
    PermissionChecker,
    compute_effective_permissions,
)
from workforce.core.permissions.decorators import (
    AccessRequirements,
    get_access_requirements,
    require_permission,
    require_permissions,
    require_roles,
    requires,
)
from workforce.core.permissions.definitions import (
    DEFAULT_ROLE_PERMISSIONS,
    PERMISSION_DEFINITIONS,
    PermissionAction,
    PermissionDefinition,
    PermissionModule,
    PermissionRequirement,
)
from workforce.core.permissions.models import Permission, SubRole, SubRolePermission


__all__ = [
    # Catalogue
    "DEFAULT_ROLE_PERMISSIONS",
    "PERMISSION_DEFINITIONS",
    # Decorators
    "AccessRequirements",
    # Checker
    "EffectivePermissions",
    # Models
    "Permission",
    "PermissionAction",
    "PermissionChecker",
    "PermissionDefinition",
    "PermissionModule",
    "PermissionRequirement",
    "SubRole",
    "SubRolePermission",
    "compute_effective_permissions",
    "get_access_requirements",
    "require_permission",
    "require_permissions",
    "require_roles",
    "requires",
]
