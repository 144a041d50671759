"""
Response envelope shared by every endpoint.
Each body is {success, message, data?}; data is omitted when there is nothing to return.
"""

from pydantic import BaseModel, Field
from fastapi.encoders import jsonable_encoder
from typing import Any, Dict, Optional


class FieldError(BaseModel):
    """Schema for an individual validation failure."""

    field: Optional[str] = Field(None, description="Parameter that caused the error", examples=["email"])
    message: str = Field(..., description="Human-readable error message", examples=["Invalid email format"])
    type: Optional[str] = Field(None, description="Error type identifier", examples=["value_error"])


class Envelope(BaseModel):
    """Schema for the uniform response body, used for OpenAPI documentation."""

    success: bool = Field(..., description="Whether the action succeeded")
    message: str = Field(..., description="Human-readable outcome", examples=["Listings retrieved"])
    data: Optional[Any] = Field(None, description="Action payload, omitted when empty")


def envelope(success: bool, message: str, data: Any = None) -> Dict[str, Any]:
    """
    Build a JSON-ready envelope.

    Args:
        success: Outcome flag
        message: Human-readable message
        data: Optional payload; pydantic models, dates and decimals are encoded

    Returns:
        Envelope dictionary without a data key when data is None
    """
    body: Dict[str, Any] = {"success": success, "message": message}
    if data is not None:
        body["data"] = jsonable_encoder(data)
    return body


def success_response(message: str, data: Any = None) -> Dict[str, Any]:
    return envelope(True, message, data)


def error_response(message: str, data: Any = None) -> Dict[str, Any]:
    return envelope(False, message, data)
