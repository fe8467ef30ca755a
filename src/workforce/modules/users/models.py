"""User database models."""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce.core.auth.principal import Role
from workforce.core.constants import (
    DEFAULT_TIMEZONE,
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_ROLE_LENGTH,
    MAX_TIMEZONE_LENGTH,
)
from workforce.core.database.base import Base, IntIDMixin, TimestampMixin


if TYPE_CHECKING:
    from workforce.core.permissions.models import SubRole
    from workforce.modules.companies.models import Company


class User(Base, IntIDMixin, TimestampMixin):
    """User model representing an authenticated user.

    Company admins and employees belong to exactly one company; super
    admins belong to none.

    Attributes:
        email: Unique email address
        password_hash: Bcrypt-hashed password
        full_name: User's full name
        role: Coarse role (``Role``)
        company_id: The user's tenant
        sub_role_id: Sub-role carrying fine-grained permission grants
        timezone: IANA timezone used for attendance days
        is_active: Whether the user can log in
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    full_name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    role: Mapped[str] = mapped_column(
        String(MAX_ROLE_LENGTH),
        default=Role.EMPLOYEE,
        nullable=False,
    )
    company_id: Mapped[int | None] = mapped_column(
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    sub_role_id: Mapped[int | None] = mapped_column(
        ForeignKey("sub_roles.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    timezone: Mapped[str] = mapped_column(
        String(MAX_TIMEZONE_LENGTH),
        default=DEFAULT_TIMEZONE,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    # Relationships
    company: Mapped["Company | None"] = relationship(
        "Company",
        back_populates="users",
        lazy="selectin",
    )
    sub_role: Mapped["SubRole | None"] = relationship(
        "SubRole",
        back_populates="users",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, company_id={self.company_id})>"
