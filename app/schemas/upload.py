"""
Pydantic schemas for image upload results.
"""

from pydantic import BaseModel, Field
from typing import List


class UploadedFile(BaseModel):
    """One stored image."""

    original_name: str = Field(..., description="Client-side file name", examples=["kitchen.jpg"])
    filename: str = Field(..., description="Generated unique file name", examples=["9f1c2a4b5d6e_1700000000.jpg"])
    path: str = Field(..., description="Relative path to reference from a listing", examples=["uploads/9f1c2a4b5d6e_1700000000.jpg"])
    url: str = Field(..., description="Public URL of the stored file")


class UploadResult(BaseModel):
    """Stored files plus one message per rejected file."""

    files: List[UploadedFile] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
