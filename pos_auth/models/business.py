"""
Business (tenant) models.
"""

from enum import Enum
from uuid import UUID
from sqlalchemy import String, ForeignKey, Enum as SQLEnum, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, StandardMixin


class IdentificationType(str, Enum):
    """Administrator identification document types."""
    CC = "CC"  # Cédula de ciudadanía
    CE = "CE"  # Cédula de extranjería
    PA = "PA"  # Pasaporte
    TE = "TE"  # Tarjeta de extranjería


class Administrator(Base, StandardMixin):
    """The single full-access user of a business."""

    __tablename__ = "administrators"

    identification_number: Mapped[str] = mapped_column(String(50), nullable=False)
    identification_type: Mapped[IdentificationType] = mapped_column(
        SQLEnum(IdentificationType),
        nullable=False,
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    phone_number: Mapped[str] = mapped_column(String(50), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    business: Mapped["Business"] = relationship(
        "Business",
        back_populates="administrator",
        uselist=False,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Administrator {self.email}>"


class Location(Base, StandardMixin):
    """Business address."""

    __tablename__ = "locations"

    state: Mapped[str] = mapped_column(String(100), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    postal_code: Mapped[str] = mapped_column(String(20), nullable=False)
    address: Mapped[str] = mapped_column(String(255), nullable=False)


class Business(Base, StandardMixin):
    """Tenant root: owns one administrator, one location, roles and employees."""

    __tablename__ = "businesses"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(50), nullable=False)

    administrator_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("administrators.id", ondelete="RESTRICT"),
        unique=True,
        nullable=False,
    )
    location_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("locations.id", ondelete="RESTRICT"),
        unique=True,
        nullable=False,
    )

    # Relationships
    administrator: Mapped["Administrator"] = relationship(
        "Administrator",
        back_populates="business",
        lazy="selectin",
    )
    location: Mapped["Location"] = relationship(
        "Location",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Business {self.name}>"
