"""Permission catalogue.

A permission is identified by ``module.action``. ``MANAGE`` on a module
implies every other action of that module unless the action is explicitly
revoked (see ``checker.EffectivePermissions``).
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from workforce.core.errors import InvalidConfigurationError


class PermissionAction(StrEnum):
    """Actions that can be granted on a module."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"  # Full control over a module


class PermissionModule(StrEnum):
    """Functional areas permissions are granted on."""

    USERS = "users"
    COMPANIES = "companies"
    ATTENDANCE = "attendance"
    REPORTS = "reports"
    TASKS = "tasks"
    EMPLOYEE_ROLES = "employee_roles"
    PERMISSIONS = "permissions"
    SYSTEM = "system"


def permission_name(module: PermissionModule | str, action: PermissionAction | str) -> str:
    """Return the canonical ``module.action`` key."""
    return f"{module}.{action}"


@dataclass(frozen=True)
class PermissionRequirement:
    """A ``(module, action)`` pair an operation declares it needs."""

    module: PermissionModule
    action: PermissionAction

    @property
    def name(self) -> str:
        return permission_name(self.module, self.action)

    @classmethod
    def parse(cls, value: Any) -> "PermissionRequirement":
        """Build a requirement from a tuple, a ``module.action`` string or itself.

        Raises:
            InvalidConfigurationError: If the module or action is unknown
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            module, sep, action = value.partition(".")
            if not sep:
                raise InvalidConfigurationError(
                    f"Permission must be written as 'module.action', got {value!r}"
                )
        elif isinstance(value, tuple) and len(value) == 2:
            module, action = value
        else:
            raise InvalidConfigurationError(
                f"Cannot interpret {value!r} as a (module, action) requirement"
            )

        try:
            requirement = cls(PermissionModule(module), PermissionAction(action))
        except ValueError as e:
            raise InvalidConfigurationError(
                f"Unknown permission {module}.{action}"
            ) from e

        # A requirement outside the catalogue could never be granted
        if requirement.name not in PERMISSION_NAMES:
            raise InvalidConfigurationError(
                f"Permission {requirement.name} is not in the catalogue"
            )
        return requirement


@dataclass(frozen=True)
class PermissionDefinition:
    """A catalogue entry persisted in the ``permissions`` table."""

    module: PermissionModule
    action: PermissionAction
    description: str

    @property
    def name(self) -> str:
        return permission_name(self.module, self.action)


def _define(
    module: PermissionModule, descriptions: dict[PermissionAction, str]
) -> list[PermissionDefinition]:
    return [
        PermissionDefinition(module=module, action=action, description=description)
        for action, description in descriptions.items()
    ]


A = PermissionAction
M = PermissionModule

PERMISSION_DEFINITIONS: list[PermissionDefinition] = [
    *_define(
        M.USERS,
        {
            A.CREATE: "Create new users",
            A.READ: "View users and user details",
            A.UPDATE: "Update user information",
            A.DELETE: "Delete users",
            A.MANAGE: "Full control over user management",
        },
    ),
    *_define(
        M.COMPANIES,
        {
            A.CREATE: "Create new companies",
            A.READ: "View companies and company details",
            A.UPDATE: "Update company information",
            A.DELETE: "Delete companies",
            A.MANAGE: "Full control over company management",
        },
    ),
    *_define(
        M.ATTENDANCE,
        {
            A.CREATE: "Create attendance records",
            A.READ: "View attendance records",
            A.UPDATE: "Update attendance records",
            A.DELETE: "Delete attendance records",
            A.MANAGE: "Full control over attendance management",
        },
    ),
    *_define(
        M.REPORTS,
        {
            A.CREATE: "Generate reports",
            A.READ: "View reports",
            A.UPDATE: "Update report settings",
            A.DELETE: "Delete reports",
            A.MANAGE: "Full control over reports",
        },
    ),
    *_define(
        M.TASKS,
        {
            A.CREATE: "Create tasks",
            A.READ: "View tasks",
            A.UPDATE: "Update tasks",
            A.DELETE: "Delete tasks",
            A.MANAGE: "Full control over task management",
        },
    ),
    *_define(
        M.EMPLOYEE_ROLES,
        {
            A.CREATE: "Create employee roles",
            A.READ: "View employee roles",
            A.UPDATE: "Update employee roles",
            A.DELETE: "Delete employee roles",
            A.MANAGE: "Full control over employee roles",
        },
    ),
    *_define(
        M.PERMISSIONS,
        {
            A.CREATE: "Create permissions",
            A.READ: "View permissions",
            A.UPDATE: "Update permissions",
            A.DELETE: "Delete permissions",
            A.MANAGE: "Full control over permission system",
        },
    ),
    *_define(M.SYSTEM, {A.MANAGE: "Full system administration access"}),
]

PERMISSION_NAMES: frozenset[str] = frozenset(d.name for d in PERMISSION_DEFINITIONS)

# Suggested grants per coarse role, used to seed starter sub-roles only.
DEFAULT_ROLE_PERMISSIONS: dict[str, list[str]] = {
    "SUPER_ADMIN": [
        "system.manage",
        "users.manage",
        "companies.manage",
        "attendance.manage",
        "reports.create",
        "reports.read",
        "reports.update",
        "reports.delete",
        "tasks.create",
        "tasks.read",
        "tasks.update",
        "tasks.delete",
        "employee_roles.create",
        "employee_roles.read",
        "employee_roles.update",
        "employee_roles.delete",
        "permissions.manage",
    ],
    "COMPANY_ADMIN": [
        "users.create",
        "users.read",
        "users.update",
        "users.delete",
        "companies.read",
        "companies.update",
        "attendance.create",
        "attendance.read",
        "attendance.update",
        "attendance.delete",
        "reports.create",
        "reports.read",
        "tasks.create",
        "tasks.read",
        "tasks.update",
        "tasks.delete",
        "employee_roles.read",
    ],
    "EMPLOYEE": [
        "attendance.create",
        "attendance.read",
        "attendance.update",
        "tasks.create",
        "tasks.read",
        "tasks.update",
        "reports.read",
    ],
}
