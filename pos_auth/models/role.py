"""
Role model.
"""

from sqlalchemy import String, Boolean, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, StandardMixin, TenantMixin


class Role(Base, StandardMixin, TenantMixin):
    """
    Named set of module permissions within a business.

    ``permissions`` holds module IDs as strings, in the order they were
    given. System roles can never be deleted.
    """

    __tablename__ = "roles"
    __table_args__ = (
        UniqueConstraint("business_id", "name", name="uq_roles_business_name"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    permissions: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_system: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<Role {self.name} business={self.business_id}>"
