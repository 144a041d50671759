"""
Pydantic schemas for authentication responses.
"""

from pydantic import BaseModel, Field
from app.models.user import UserRole


class AuthResult(BaseModel):
    """Returned by register and login."""

    user_id: int = Field(..., description="New or authenticated user id", examples=[1])
    name: str = Field(..., examples=["Asha Rao"])
    email: str = Field(..., examples=["asha@example.com"])
    role: UserRole = Field(..., examples=["tenant"])
    access_token: str = Field(
        ...,
        description="JWT access token to send as 'Authorization: Bearer <token>'",
        examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."]
    )
    token_type: str = Field(default="bearer", examples=["bearer"])
    expires_in: int = Field(..., description="Access token lifetime in seconds", examples=[86400])


class SessionInfo(BaseModel):
    """Identity echoed back by the check action."""

    user_id: int
    name: str
    email: str
    role: UserRole
