"""Authentication API routes.

Provides endpoints for:
- Login (token in the body and as an HTTP-only cookie)
- Logout (clears the cookie)
- The current principal and its effective permissions
"""

from fastapi import APIRouter, Response

from workforce.api.dependencies import DBSession
from workforce.config import settings
from workforce.core.auth.dependencies import CurrentPrincipal, CurrentUser
from workforce.core.auth.schemas import LoginRequest, PrincipalResponse, TokenResponse
from workforce.core.auth.service import AuthSvc
from workforce.core.permissions import PermissionChecker
from workforce.core.responses import SuccessResponse, success_response


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=SuccessResponse[TokenResponse],
    summary="Login with email and password",
)
async def login(
    data: LoginRequest,
    service: AuthSvc,
    response: Response,
) -> SuccessResponse[TokenResponse]:
    tokens = await service.login(data.email, data.password)
    response.set_cookie(
        key=settings.access_token_cookie_name,
        value=tokens.access_token,
        max_age=tokens.expires_in,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return success_response(tokens, message="Login successful")


@router.post(
    "/logout",
    response_model=SuccessResponse[None],
    summary="Logout",
)
async def logout(response: Response) -> SuccessResponse[None]:
    response.delete_cookie(settings.access_token_cookie_name)
    return success_response(None, message="Logout successful")


@router.get(
    "/me",
    response_model=SuccessResponse[PrincipalResponse],
    summary="Get current principal",
)
async def get_me(
    principal: CurrentPrincipal,
    current_user: CurrentUser,
    db: DBSession,
) -> SuccessResponse[PrincipalResponse]:
    permissions = await PermissionChecker(db).get_effective_permissions(principal)
    return success_response(
        PrincipalResponse(
            id=principal.id,
            email=current_user.email,
            full_name=current_user.full_name,
            role=principal.role,
            company_id=principal.company_id,
            sub_role_id=principal.sub_role_id,
            permissions=sorted(permissions.names()),
        )
    )
