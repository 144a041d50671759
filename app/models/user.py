"""
User model with authentication and role management.
Handles accounts for tenants, landlords and administrators.
"""

from sqlalchemy import String, Boolean, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
import enum
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.listing import Listing


class UserRole(str, enum.Enum):
    """User role enumeration for role-based access control."""
    TENANT = "tenant"
    LANDLORD = "landlord"
    ADMIN = "admin"


class User(Base):
    """
    User model for authentication and authorization.
    The role is fixed at registration; admins are provisioned out of band.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Display name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - unique, stored lower-cased"
    )

    phone: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="10 digit mobile number"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserRole.TENANT,
        index=True,
        comment="User role for access control"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        comment="Whether the user account is active"
    )

    listings: Mapped[List["Listing"]] = relationship(
        "Listing",
        back_populates="landlord",
        lazy="noload"
    )

    def __repr__(self) -> str:
        """String representation of the user."""
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

