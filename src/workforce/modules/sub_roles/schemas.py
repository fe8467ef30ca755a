"""Pydantic schemas for permissions and sub-roles."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from workforce.core.constants import MAX_DESCRIPTION_LENGTH, MAX_NAME_LENGTH
from workforce.core.permissions.definitions import PERMISSION_NAMES


class PermissionResponse(BaseModel):
    id: int
    name: str
    module: str
    action: str
    description: str | None

    model_config = ConfigDict(from_attributes=True)


class InitializeResult(BaseModel):
    created: int
    total: int


class MyPermissionsResponse(BaseModel):
    """The caller's role and effective ``module.action`` set."""

    role: str
    sub_role_id: int | None
    permissions: list[str]


class GrantItem(BaseModel):
    permission: str = Field(..., description="Permission key, e.g. tasks.read")
    granted: bool = True

    @field_validator("permission")
    @classmethod
    def known_permission(cls, v: str) -> str:
        if v not in PERMISSION_NAMES:
            raise ValueError(f"Unknown permission {v!r}")
        return v


class GrantsUpdate(BaseModel):
    """Grant rows to upsert; unlisted rows are left untouched."""

    grants: list[GrantItem] = Field(..., min_length=1)


class GrantResponse(BaseModel):
    permission: str
    granted: bool


class SubRoleCreate(BaseModel):
    """A new sub-role. ``company_id=None`` means global for super admins and
    the caller's own company for company admins.
    """

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    company_id: int | None = None
    grants: list[GrantItem] = []


class SubRoleResponse(BaseModel):
    id: int
    name: str
    description: str | None
    company_id: int | None
    grants: list[GrantResponse]
