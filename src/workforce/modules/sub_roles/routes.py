"""Permission catalogue and sub-role API routes."""

from fastapi import APIRouter, status

from workforce.api.dependencies import DBSession, Pagination
from workforce.core.auth.dependencies import CurrentPrincipal
from workforce.core.auth.principal import Role
from workforce.core.permissions import (
    PermissionAction,
    PermissionModule,
    SubRole,
    require_permission,
    require_roles,
    requires,
)
from workforce.core.permissions.decorators import require_system_management
from workforce.core.responses import (
    PaginatedResponse,
    SuccessResponse,
    paginated_response,
    success_response,
)
from workforce.modules.sub_roles.schemas import (
    GrantResponse,
    GrantsUpdate,
    InitializeResult,
    MyPermissionsResponse,
    PermissionResponse,
    SubRoleCreate,
    SubRoleResponse,
)
from workforce.modules.sub_roles.services import PermissionSvc, SubRoleSvc


router = APIRouter(tags=["permissions"])


def _sub_role_response(sub_role: SubRole) -> SubRoleResponse:
    return SubRoleResponse(
        id=sub_role.id,
        name=sub_role.name,
        description=sub_role.description,
        company_id=sub_role.company_id,
        grants=[
            GrantResponse(permission=row.permission.name, granted=row.granted)
            for row in sorted(sub_role.grants, key=lambda r: r.permission.name)
        ],
    )


@router.get(
    "/permissions",
    response_model=PaginatedResponse[PermissionResponse],
    summary="List permissions",
)
@require_permission(PermissionModule.PERMISSIONS, PermissionAction.READ)
async def list_permissions(
    principal: CurrentPrincipal,
    db: DBSession,
    service: PermissionSvc,
    params: Pagination,
) -> PaginatedResponse[PermissionResponse]:
    permissions, total = await service.list_permissions(params)
    return paginated_response(
        [PermissionResponse.model_validate(p) for p in permissions],
        total,
        params,
        message="Permissions retrieved successfully",
    )


@router.post(
    "/permissions/initialize",
    response_model=SuccessResponse[InitializeResult],
    summary="Initialize permission catalogue",
)
@require_roles(Role.SUPER_ADMIN)
@require_system_management()
async def initialize_permissions(
    principal: CurrentPrincipal,
    db: DBSession,
    service: PermissionSvc,
) -> SuccessResponse[InitializeResult]:
    created, total = await service.initialize_permissions()
    return success_response(
        InitializeResult(created=created, total=total),
        message="Permissions initialized successfully",
    )


@router.get(
    "/permissions/me",
    response_model=SuccessResponse[MyPermissionsResponse],
    summary="My effective permissions",
)
@requires()
async def my_permissions(
    principal: CurrentPrincipal,
    service: PermissionSvc,
) -> SuccessResponse[MyPermissionsResponse]:
    permissions = await service.effective_permissions(principal)
    return success_response(
        MyPermissionsResponse(
            role=principal.role,
            sub_role_id=principal.sub_role_id,
            permissions=sorted(permissions.names()),
        )
    )


@router.get(
    "/sub-roles",
    response_model=PaginatedResponse[SubRoleResponse],
    summary="List sub-roles",
)
@require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)
async def list_sub_roles(
    principal: CurrentPrincipal,
    service: SubRoleSvc,
    params: Pagination,
) -> PaginatedResponse[SubRoleResponse]:
    sub_roles, total = await service.list_sub_roles(principal, params)
    return paginated_response(
        [_sub_role_response(s) for s in sub_roles],
        total,
        params,
        message="Sub-roles retrieved successfully",
    )


@router.post(
    "/sub-roles",
    response_model=SuccessResponse[SubRoleResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create sub-role",
)
@require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)
async def create_sub_role(
    data: SubRoleCreate,
    principal: CurrentPrincipal,
    service: SubRoleSvc,
) -> SuccessResponse[SubRoleResponse]:
    sub_role = await service.create_sub_role(principal, data)
    return success_response(
        _sub_role_response(sub_role),
        message="Sub-role created successfully",
        status=status.HTTP_201_CREATED,
    )


@router.put(
    "/sub-roles/{sub_role_id}/grants",
    response_model=SuccessResponse[SubRoleResponse],
    summary="Set sub-role grants",
)
@requires(
    roles=[Role.SUPER_ADMIN, Role.COMPANY_ADMIN],
    permissions=[(PermissionModule.PERMISSIONS, PermissionAction.UPDATE)],
)
async def set_grants(
    sub_role_id: int,
    data: GrantsUpdate,
    principal: CurrentPrincipal,
    db: DBSession,
    service: SubRoleSvc,
) -> SuccessResponse[SubRoleResponse]:
    sub_role = await service.set_grants(principal, sub_role_id, data.grants)
    return success_response(
        _sub_role_response(sub_role), message="Sub-role grants updated successfully"
    )
