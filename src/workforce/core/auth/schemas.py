"""Authentication schemas for token handling."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from workforce.core.constants import MAX_PASSWORD_LENGTH


class TokenData(BaseModel):
    """Data extracted from a JWT token.

    Role and company claims are informational only; the principal is always
    rebuilt from the stored user.

    Attributes:
        user_id: The user's id
        role: Role claimed at issue time
        company_id: Company claimed at issue time
        exp: Token expiration time
        type: Token type
        jti: Unique token id
    """

    user_id: int
    role: str | None = None
    company_id: int | None = None
    exp: datetime
    type: str = "access"
    jti: str | None = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=MAX_PASSWORD_LENGTH)


class TokenResponse(BaseModel):
    """Access token returned by login.

    Attributes:
        access_token: JWT for API access
        token_type: Always "bearer"
        expires_in: Access token lifetime in seconds
    """

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class PrincipalResponse(BaseModel):
    """The resolved principal and the permissions it currently holds."""

    id: int
    email: EmailStr
    full_name: str
    role: str
    company_id: int | None
    sub_role_id: int | None
    permissions: list[str]
