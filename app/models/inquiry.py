"""
Inquiry model for contact messages sent about a listing.
Senders may be anonymous; the landlord tracks each inquiry through a status.
"""

from sqlalchemy import String, Text, Integer, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from app.database import Base
import enum
from typing import Optional


class InquiryStatus(str, enum.Enum):
    """Landlord-side handling state of an inquiry."""
    PENDING = "pending"
    RESPONDED = "responded"
    CLOSED = "closed"


class Inquiry(Base):
    """Contact request from a prospective tenant to the owner of a listing."""

    __tablename__ = "inquiries"

    listing_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("listings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Listing the inquiry is about"
    )

    user_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Sender account, null for anonymous senders"
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False)

    phone: Mapped[str] = mapped_column(String(20), nullable=False)

    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[InquiryStatus] = mapped_column(
        SQLEnum(InquiryStatus, name="inquiry_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=InquiryStatus.PENDING,
        index=True
    )

    def __repr__(self) -> str:
        return f"<Inquiry(id={self.id}, listing_id={self.listing_id}, status={self.status})>"
