"""
Pydantic schemas for inquiries.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from app.models.inquiry import InquiryStatus


class InquiryCreate(BaseModel):
    """Validated inquiry submission."""

    listing_id: int = Field(..., gt=0)
    user_id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=255)
    phone: str = Field(..., max_length=20)
    message: Optional[str] = None


class ReceivedInquiry(BaseModel):
    """Inquiry as seen by the landlord who received it."""

    id: int
    name: str
    email: str
    phone: str
    message: Optional[str] = None
    status: InquiryStatus
    created_at: datetime
    listing_id: int
    listing_title: str


class SentInquiry(BaseModel):
    """Inquiry as seen by the tenant who sent it."""

    id: int
    message: Optional[str] = None
    status: InquiryStatus
    created_at: datetime
    listing_id: int
    listing_title: str
    rent: float
    city: str
    landlord_name: Optional[str] = None
    landlord_email: Optional[str] = None
    landlord_phone: Optional[str] = None
    thumbnail: Optional[str] = None
