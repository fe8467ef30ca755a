"""User management API routes."""

from fastapi import APIRouter, status

from workforce.api.dependencies import DBSession, Pagination
from workforce.core.auth.dependencies import CurrentPrincipal
from workforce.core.auth.principal import Role
from workforce.core.permissions import (
    PermissionAction,
    PermissionModule,
    requires,
)
from workforce.core.permissions.decorators import (
    require_user_create,
    require_user_delete,
    require_user_read,
    require_user_update,
)
from workforce.core.responses import (
    PaginatedResponse,
    SuccessResponse,
    paginated_response,
    success_response,
)
from workforce.modules.users.schemas import (
    ProfileResponse,
    ProfileUpdate,
    SubRoleAssignment,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from workforce.modules.users.services import UserSvc


ADMINS = [Role.SUPER_ADMIN, Role.COMPANY_ADMIN]

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=SuccessResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
)
@requires(roles=ADMINS)
@require_user_create()
async def create_user(
    data: UserCreate,
    principal: CurrentPrincipal,
    db: DBSession,
    service: UserSvc,
) -> SuccessResponse[UserResponse]:
    user = await service.create_user(principal, data)
    return success_response(
        UserResponse.model_validate(user),
        message="User created successfully",
        status=status.HTTP_201_CREATED,
    )


@router.get(
    "",
    response_model=PaginatedResponse[UserResponse],
    summary="List users",
    description="Super admins see every user; company admins see their company.",
)
@requires(roles=ADMINS)
@require_user_read()
async def list_users(
    principal: CurrentPrincipal,
    db: DBSession,
    service: UserSvc,
    params: Pagination,
) -> PaginatedResponse[UserResponse]:
    users, total = await service.list_users(principal, params)
    return paginated_response(
        [UserResponse.model_validate(u) for u in users],
        total,
        params,
        message="Users retrieved successfully",
    )


@router.get(
    "/profile",
    response_model=SuccessResponse[ProfileResponse],
    summary="Get my profile",
)
@requires()
async def get_profile(
    principal: CurrentPrincipal,
    service: UserSvc,
) -> SuccessResponse[ProfileResponse]:
    user = await service.get_profile(principal)
    return success_response(
        ProfileResponse.model_validate(user), message="Profile retrieved successfully"
    )


@router.patch(
    "/profile",
    response_model=SuccessResponse[ProfileResponse],
    summary="Update my profile",
)
@requires()
async def update_profile(
    data: ProfileUpdate,
    principal: CurrentPrincipal,
    service: UserSvc,
) -> SuccessResponse[ProfileResponse]:
    user = await service.update_profile(principal, data)
    return success_response(
        ProfileResponse.model_validate(user), message="Profile updated successfully"
    )


@router.get(
    "/{user_id}",
    response_model=SuccessResponse[UserResponse],
    summary="Get user",
)
@requires()
async def get_user(
    user_id: int,
    principal: CurrentPrincipal,
    service: UserSvc,
) -> SuccessResponse[UserResponse]:
    user = await service.get_user(principal, user_id)
    return success_response(UserResponse.model_validate(user))


@router.patch(
    "/{user_id}",
    response_model=SuccessResponse[UserResponse],
    summary="Update user",
)
@requires(roles=ADMINS)
@require_user_update()
async def update_user(
    user_id: int,
    data: UserUpdate,
    principal: CurrentPrincipal,
    db: DBSession,
    service: UserSvc,
) -> SuccessResponse[UserResponse]:
    user = await service.update_user(principal, user_id, data)
    return success_response(
        UserResponse.model_validate(user), message="User updated successfully"
    )


@router.delete(
    "/{user_id}",
    response_model=SuccessResponse[None],
    summary="Delete user",
)
@requires(roles=ADMINS)
@require_user_delete()
async def delete_user(
    user_id: int,
    principal: CurrentPrincipal,
    db: DBSession,
    service: UserSvc,
) -> SuccessResponse[None]:
    await service.delete_user(principal, user_id)
    return success_response(None, message="User deleted successfully")


@router.put(
    "/{user_id}/sub-role",
    response_model=SuccessResponse[UserResponse],
    summary="Assign sub-role",
)
@requires(
    roles=ADMINS,
    permissions=[(PermissionModule.PERMISSIONS, PermissionAction.UPDATE)],
)
async def assign_sub_role(
    user_id: int,
    data: SubRoleAssignment,
    principal: CurrentPrincipal,
    db: DBSession,
    service: UserSvc,
) -> SuccessResponse[UserResponse]:
    user = await service.assign_sub_role(principal, user_id, data.sub_role_id)
    return success_response(
        UserResponse.model_validate(user), message="Sub-role assigned successfully"
    )
