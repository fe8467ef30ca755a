"""The acting principal of a request.

Policies and gates never look at the raw role tag; they ask the
``Principal`` for the facts they need (``is_global_admin``,
``administers_tenant``, ``acts_as_self``, ``tenant_id``, ``self_id``).
"""

from enum import StrEnum
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, model_validator


class Role(StrEnum):
    """Coarse roles every user has exactly one of."""

    SUPER_ADMIN = "SUPER_ADMIN"
    COMPANY_ADMIN = "COMPANY_ADMIN"
    EMPLOYEE = "EMPLOYEE"


class Principal(BaseModel):
    """Immutable view of the authenticated user.

    Attributes:
        id: The user's id
        role: The user's coarse role
        company_id: The user's company; always set for company admins and
            employees, always empty for super admins
        sub_role_id: The assigned sub-role carrying permission grants, if any
    """

    model_config = ConfigDict(frozen=True)

    id: int
    role: Role
    company_id: int | None = None
    sub_role_id: int | None = None

    @model_validator(mode="after")
    def check_company_affiliation(self) -> Self:
        """Enforce the role/company invariant."""
        if self.role == Role.SUPER_ADMIN and self.company_id is not None:
            raise ValueError("SUPER_ADMIN principals cannot belong to a company")
        if self.role != Role.SUPER_ADMIN and self.company_id is None:
            raise ValueError(f"{self.role} principals must belong to a company")
        return self

    @classmethod
    def from_user(cls, user: Any) -> "Principal":
        """Build a principal from a persisted ``User``."""
        return cls(
            id=user.id,
            role=Role(user.role),
            company_id=user.company_id,
            sub_role_id=user.sub_role_id,
        )

    @property
    def is_global_admin(self) -> bool:
        """Whether the principal may act on every tenant."""
        return self.role == Role.SUPER_ADMIN

    @property
    def administers_tenant(self) -> bool:
        """Whether the principal may act on everything in its own tenant."""
        return self.role == Role.COMPANY_ADMIN

    @property
    def acts_as_self(self) -> bool:
        """Whether the principal is limited to records it owns."""
        return self.role == Role.EMPLOYEE

    @property
    def tenant_id(self) -> int | None:
        return self.company_id

    @property
    def self_id(self) -> int:
        return self.id
