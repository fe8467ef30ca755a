"""Pydantic schemas for user operations."""

import re
from datetime import datetime
from typing import Self

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

from workforce.core.auth.principal import Role
from workforce.core.constants import (
    DEFAULT_TIMEZONE,
    MAX_NAME_LENGTH,
    MAX_PASSWORD_LENGTH,
    MAX_TIMEZONE_LENGTH,
    MIN_PASSWORD_LENGTH,
)
from workforce.core.utils.dates import validate_timezone
from workforce.core.utils.validation import reject_null


# ============================================================
# Password Validation
# ============================================================

# Password complexity rules: (regex pattern, human-readable name)
PASSWORD_COMPLEXITY_RULES: list[tuple[str, str]] = [
    (r"[A-Z]", "uppercase letter"),
    (r"[a-z]", "lowercase letter"),
    (r"\d", "digit"),
    (r"[!@#$%^&*(),.?\":{}|<>\[\]\\;'`~_+\-=/]", "special character"),
]


def validate_password_complexity(password: str) -> str:
    """Validate password meets complexity requirements.

    Raises:
        ValueError: If password doesn't meet requirements
    """
    missing = [
        name
        for pattern, name in PASSWORD_COMPLEXITY_RULES
        if not re.search(pattern, password)
    ]

    if missing:
        if len(missing) == 1:
            raise ValueError(f"Password must contain at least one {missing[0]}")
        raise ValueError(f"Password must contain at least one: {', '.join(missing)}")

    return password


# ============================================================
# User Schemas
# ============================================================


class UserBase(BaseModel):
    """Base schema for user data."""

    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)


class UserCreate(UserBase):
    """Schema for creating a user.

    ``company_id`` may be omitted by a company admin, who always creates
    users inside their own company.
    """

    password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )
    role: Role = Role.EMPLOYEE
    company_id: int | None = None
    sub_role_id: int | None = None
    timezone: str = Field(DEFAULT_TIMEZONE, max_length=MAX_TIMEZONE_LENGTH)

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Validate password complexity."""
        return validate_password_complexity(v)

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, v: str) -> str:
        return validate_timezone(v)

    @model_validator(mode="after")
    def super_admin_has_no_company(self) -> Self:
        if self.role == Role.SUPER_ADMIN and self.company_id is not None:
            raise ValueError("SUPER_ADMIN users cannot belong to a company")
        return self


class UserUpdate(BaseModel):
    """Schema for updating user data.

    ``role`` and ``company_id`` may only be changed by a super admin.
    """

    email: EmailStr | None = None
    full_name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    timezone: str | None = Field(None, max_length=MAX_TIMEZONE_LENGTH)
    is_active: bool | None = None
    role: Role | None = None
    company_id: int | None = None

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, v: str | None) -> str | None:
        return validate_timezone(v) if v is not None else v

    @field_validator(
        "email", "full_name", "timezone", "is_active", "role", mode="before"
    )
    @classmethod
    def not_null(cls, v: object, info: ValidationInfo) -> object:
        return reject_null(v, info)


class SubRoleAssignment(BaseModel):
    """Assign (or clear, with null) a user's sub-role."""

    sub_role_id: int | None


class UserResponse(UserBase):
    """Schema for user response data."""

    id: int
    role: Role
    company_id: int | None
    sub_role_id: int | None
    timezone: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============================================================
# Profile Schemas
# ============================================================


class ProfileUpdate(BaseModel):
    """Fields any user may change on their own account.

    Changing the password requires the current one.
    """

    email: EmailStr | None = None
    full_name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    timezone: str | None = Field(None, max_length=MAX_TIMEZONE_LENGTH)
    current_password: str | None = Field(None, max_length=MAX_PASSWORD_LENGTH)
    new_password: str | None = Field(
        None, min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, v: str | None) -> str | None:
        return validate_timezone(v) if v is not None else v

    @field_validator("new_password")
    @classmethod
    def password_complexity(cls, v: str | None) -> str | None:
        return validate_password_complexity(v) if v is not None else v

    @field_validator("email", "full_name", "timezone", mode="before")
    @classmethod
    def not_null(cls, v: object, info: ValidationInfo) -> object:
        return reject_null(v, info)

    @model_validator(mode="after")
    def current_password_given(self) -> Self:
        if self.new_password is not None and not self.current_password:
            raise ValueError("current_password is required to change the password")
        return self


class CompanySummary(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class SubRoleSummary(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class ProfileResponse(UserResponse):
    """The caller's own account with its company and sub-role."""

    company: CompanySummary | None
    sub_role: SubRoleSummary | None
