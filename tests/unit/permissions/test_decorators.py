"""Unit tests for the declarative access gates."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from workforce.core.auth import Principal, Role
from workforce.core.errors import (
    ForbiddenError,
    InvalidConfigurationError,
    UnauthorizedError,
)
from workforce.core.permissions import (
    AccessRequirements,
    PermissionAction,
    PermissionModule,
    PermissionRequirement,
    get_access_requirements,
    require_permission,
    require_roles,
    requires,
)


pytestmark = pytest.mark.unit


EMPLOYEE = Principal(id=3, role=Role.EMPLOYEE, company_id=1)
ADMIN = Principal(id=1, role=Role.SUPER_ADMIN)


class TestDeclarations:
    """Malformed declarations fail when the route is declared."""

    def test_unknown_role(self):
        with pytest.raises(InvalidConfigurationError):
            requires(roles=["OWNER"])

    def test_unknown_module(self):
        with pytest.raises(InvalidConfigurationError):
            requires(permissions=[("payroll", "read")])

    def test_unknown_action(self):
        with pytest.raises(InvalidConfigurationError):
            require_permission("users", "approve")

    def test_requirement_outside_catalogue(self):
        with pytest.raises(InvalidConfigurationError):
            require_permission("system", "read")

    @pytest.mark.parametrize("module", list(PermissionModule))
    def test_manage_declarable_on_every_module(self, module):
        assert PermissionRequirement.parse((module, "manage")).name == f"{module}.manage"

    def test_unparsable_requirement(self):
        with pytest.raises(InvalidConfigurationError):
            PermissionRequirement.parse("users")

    def test_stacked_roles_with_empty_intersection(self):
        with pytest.raises(InvalidConfigurationError):

            @require_roles(Role.SUPER_ADMIN)
            @require_roles(Role.EMPLOYEE)
            async def handler(principal=None):
                return None

    def test_stacked_declarations_merge(self):
        @require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)
        @require_permission(PermissionModule.USERS, PermissionAction.READ)
        @require_roles(Role.COMPANY_ADMIN)
        async def handler(principal=None, db=None):
            return None

        declared = get_access_requirements(handler)

        assert declared.roles == {Role.COMPANY_ADMIN}
        assert [p.name for p in declared.permissions] == ["users.read"]

    def test_undecorated_handler_declares_nothing(self):
        async def handler():
            return None

        assert get_access_requirements(handler) == AccessRequirements()


class TestEnforcement:
    """The wrapped handler only runs once both gates pass."""

    async def test_role_gate_denies_before_handler(self):
        endpoint = AsyncMock(return_value="ok")
        handler = require_roles(Role.SUPER_ADMIN)(endpoint)

        with pytest.raises(ForbiddenError):
            await handler(principal=EMPLOYEE)

        endpoint.assert_not_awaited()

    async def test_missing_principal_is_unauthorized(self):
        handler = requires()(AsyncMock(return_value="ok"))

        with pytest.raises(UnauthorizedError):
            await handler(principal=None)

    async def test_role_gate_runs_before_permission_gate(self):
        db = MagicMock()
        handler = requires(
            roles=[Role.SUPER_ADMIN], permissions=[("users", "read")]
        )(AsyncMock(return_value="ok"))

        with pytest.raises(ForbiddenError) as exc_info:
            await handler(principal=EMPLOYEE, db=db)

        assert exc_info.value.reason.startswith("role")
        db.execute.assert_not_called()

    async def test_no_sub_role_fails_permission_gate(self):
        handler = require_permission("system", "manage")(AsyncMock(return_value="ok"))

        with pytest.raises(ForbiddenError) as exc_info:
            await handler(principal=ADMIN, db=MagicMock())

        assert "system.manage" in exc_info.value.reason

    async def test_permission_gate_without_session_denies(self):
        handler = require_permission("users", "read")(AsyncMock(return_value="ok"))

        with pytest.raises(ForbiddenError):
            await handler(principal=ADMIN)

    async def test_granted_permission_runs_handler(self, db, acme, make_sub_role):
        sub_role = await make_sub_role({"users.manage": True}, company=acme)
        principal = Principal(
            id=2, role=Role.COMPANY_ADMIN, company_id=acme.id, sub_role_id=sub_role.id
        )
        endpoint = AsyncMock(return_value="ok")
        handler = requires(
            roles=[Role.COMPANY_ADMIN],
            permissions=[("users", "read"), "users.update"],
        )(endpoint)

        assert await handler(principal=principal, db=db) == "ok"
        endpoint.assert_awaited_once_with(principal=principal, db=db)

    async def test_revoked_permission_denies(self, db, acme, make_sub_role):
        sub_role = await make_sub_role(
            {"users.manage": True, "users.delete": False}, company=acme
        )
        principal = Principal(
            id=2, role=Role.COMPANY_ADMIN, company_id=acme.id, sub_role_id=sub_role.id
        )
        handler = require_permission("users", "delete")(AsyncMock(return_value="ok"))

        with pytest.raises(ForbiddenError):
            await handler(principal=principal, db=db)
