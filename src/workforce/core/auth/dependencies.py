"""FastAPI dependencies for authentication.

This module provides FastAPI dependency injection functions for:
- Extracting and validating the JWT (bearer header or cookie)
- Loading the current user fresh from the store
- Building the immutable ``Principal`` the gates and policies consume
"""

from typing import Annotated, Any

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from workforce.api.dependencies import DBSession
from workforce.config import settings
from workforce.core.auth.backend import decode_token
from workforce.core.auth.principal import Principal
from workforce.core.auth.schemas import TokenData
from workforce.core.errors import UnauthorizedError


bearer_scheme = HTTPBearer(auto_error=False)


def _extract_token(
    request: Request, credentials: HTTPAuthorizationCredentials | None
) -> str | None:
    if credentials:
        return credentials.credentials
    return request.cookies.get(settings.access_token_cookie_name)


async def get_token_data(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> TokenData:
    """Extract and validate token data from the Authorization header or cookie.

    Raises:
        UnauthorizedError: If the token is missing, invalid or not an access token
    """
    token = _extract_token(request, credentials)
    if not token:
        raise UnauthorizedError(
            "Missing authentication token",
            error_code="missing_token",
        )

    token_data = decode_token(token)
    if not token_data:
        raise UnauthorizedError(
            "Invalid or expired token",
            error_code="invalid_token",
        )

    if token_data.type != "access":
        raise UnauthorizedError(
            "Invalid token type",
            error_code="invalid_token_type",
        )

    return token_data


async def get_current_user(
    token_data: Annotated[TokenData, Depends(get_token_data)],
    db: DBSession,
) -> Any:  # Returns User, but use Any to avoid circular import
    """Load the authenticated user.

    Raises:
        UnauthorizedError: If the user no longer exists or is inactive
    """
    from workforce.modules.users.repos import UserRepository  # noqa: PLC0415

    repo = UserRepository(db)
    user = await repo.get_by_id(token_data.user_id)

    if not user:
        raise UnauthorizedError(
            "User not found",
            error_code="user_not_found",
        )

    if not user.is_active:
        raise UnauthorizedError(
            "User account is deactivated",
            error_code="user_inactive",
        )

    return user


async def get_principal(
    request: Request,
    user: Annotated[Any, Depends(get_current_user)],
) -> Principal:
    """Build the request's principal and bind it to the log context."""
    principal = Principal.from_user(user)

    request.state.principal_id = principal.id
    request.state.company_id = principal.company_id
    structlog.contextvars.bind_contextvars(
        principal_id=principal.id,
        company_id=principal.company_id,
    )
    return principal


# Type aliases for cleaner dependency injection
CurrentUser = Annotated[Any, Depends(get_current_user)]
CurrentPrincipal = Annotated[Principal, Depends(get_principal)]
