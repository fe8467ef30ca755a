"""Company database models."""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce.core.constants import MAX_NAME_LENGTH, MAX_URL_LENGTH
from workforce.core.database.base import Base, IntIDMixin, TimestampMixin


if TYPE_CHECKING:
    from workforce.modules.users.models import User


class Company(Base, IntIDMixin, TimestampMixin):
    """A tenant: the unit of data isolation.

    Attributes:
        name: Display name
        industry: Free-text industry label
        logo_url: Public URL of the company logo
        parent_company_id: Owning company when this is a subcompany
    """

    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    industry: Mapped[str | None] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=True,
    )
    logo_url: Mapped[str | None] = mapped_column(
        String(MAX_URL_LENGTH),
        nullable=True,
    )
    parent_company_id: Mapped[int | None] = mapped_column(
        ForeignKey("companies.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    users: Mapped[list["User"]] = relationship(
        "User",
        back_populates="company",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, name={self.name})>"
