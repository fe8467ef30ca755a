"""Permission system database models.

This module defines the fine-grained permission models:
- Permission: An action that can be performed on a module
- SubRole: A named set of permission grants a user can be assigned
- SubRolePermission: One grant or revocation row of a sub-role
"""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce.core.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PERMISSION_ACTION_LENGTH,
    MAX_PERMISSION_MODULE_LENGTH,
    MAX_PERMISSION_NAME_LENGTH,
)
from workforce.core.database.base import Base, IntIDMixin, TimestampMixin


if TYPE_CHECKING:
    from workforce.modules.users.models import User


class Permission(Base, IntIDMixin, TimestampMixin):
    """Permission model representing an action on a module.

    Permissions are global (not company-scoped) and are seeded from
    ``PERMISSION_DEFINITIONS``.

    Attributes:
        name: Canonical ``module.action`` key
        module: The functional area (e.g., "users", "tasks")
        action: The action (create, read, update, delete, manage)
        description: Human-readable description of the permission
    """

    __tablename__ = "permissions"

    name: Mapped[str] = mapped_column(
        String(MAX_PERMISSION_NAME_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    module: Mapped[str] = mapped_column(
        String(MAX_PERMISSION_MODULE_LENGTH),
        nullable=False,
        index=True,
    )
    action: Mapped[str] = mapped_column(
        String(MAX_PERMISSION_ACTION_LENGTH),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Permission({self.name})>"


class SubRole(Base, IntIDMixin, TimestampMixin):
    """A finer-grained role carrying explicit permission grants.

    A sub-role with no company is global and can be assigned in any
    company; otherwise it belongs to one company.
    """

    __tablename__ = "sub_roles"
    __table_args__ = (
        UniqueConstraint("company_id", "name", name="uq_sub_role_company_name"),
    )

    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )
    company_id: Mapped[int | None] = mapped_column(
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    grants: Mapped[list["SubRolePermission"]] = relationship(
        "SubRolePermission",
        back_populates="sub_role",
        passive_deletes=True,
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    users: Mapped[list["User"]] = relationship(
        "User",
        back_populates="sub_role",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<SubRole(id={self.id}, name={self.name}, company_id={self.company_id})>"


class SubRolePermission(Base, IntIDMixin, TimestampMixin):
    """One grant row of a sub-role.

    ``granted=False`` is an explicit revocation. At most one row exists per
    (sub-role, permission) pair.
    """

    __tablename__ = "sub_role_permissions"
    __table_args__ = (
        UniqueConstraint(
            "sub_role_id", "permission_id", name="uq_sub_role_permission"
        ),
    )

    sub_role_id: Mapped[int] = mapped_column(
        ForeignKey("sub_roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    permission_id: Mapped[int] = mapped_column(
        ForeignKey("permissions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    granted: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    sub_role: Mapped["SubRole"] = relationship(
        "SubRole",
        back_populates="grants",
    )
    permission: Mapped["Permission"] = relationship(
        "Permission",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return (
            f"<SubRolePermission(sub_role_id={self.sub_role_id}, "
            f"permission_id={self.permission_id}, granted={self.granted})>"
        )
