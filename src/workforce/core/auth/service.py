"""Authentication service for login."""

from typing import Annotated

import structlog
from fastapi import Depends

from workforce.api.dependencies import DBSession
from workforce.config import settings
from workforce.core.auth.backend import create_access_token, verify_password
from workforce.core.auth.schemas import TokenResponse
from workforce.core.errors import UnauthorizedError


logger = structlog.get_logger()


class AuthService:
    """Service for credential checks and token issuance."""

    def __init__(self, db: DBSession) -> None:
        self.db = db

    async def login(self, email: str, password: str) -> TokenResponse:
        """Authenticate a user with email and password.

        Raises:
            UnauthorizedError: If credentials are invalid or the account is inactive
        """
        from workforce.modules.users.repos import UserRepository  # noqa: PLC0415

        user = await UserRepository(self.db).get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.info("login_failed", email=email)
            raise UnauthorizedError(
                "Invalid email or password",
                error_code="invalid_credentials",
            )

        if not user.is_active:
            raise UnauthorizedError(
                "Account is deactivated",
                error_code="account_inactive",
            )

        token = create_access_token(user.id, user.role, user.company_id)
        logger.info("login_succeeded", user_id=user.id)
        return TokenResponse(
            access_token=token,
            expires_in=settings.access_token_expire_minutes * 60,
        )


# Type alias for dependency injection
AuthSvc = Annotated[AuthService, Depends(AuthService)]
