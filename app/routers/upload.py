"""
Image upload endpoint.
Accepts multipart ``images`` (or ``images[]``) parts and returns the stored paths to attach to a listing.
"""

from typing import List
from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile
from app.services.upload import UploadService
from app.schemas.envelope import Envelope, success_response
from app.utils.dependencies import Identity, get_identity

router = APIRouter(prefix="/upload", tags=["Uploads"])

FILE_FIELDS = ("images", "images[]")


async def collect_uploads(request: Request) -> List[UploadFile]:
    """File parts of a multipart body under the image field names."""
    if not request.headers.get("content-type", "").startswith("multipart/form-data"):
        return []
    form = await request.form()
    return [
        value
        for field in FILE_FIELDS
        for value in form.getlist(field)
        if isinstance(value, UploadFile)
    ]


@router.post(
    "",
    responses={200: {"model": Envelope}},
    summary="Upload listing images",
    description="Store up to five JPG, PNG or WebP images of at most 5MB each"
)
async def upload_images(
    files: List[UploadFile] = Depends(collect_uploads),
    identity: Identity = Depends(get_identity)
) -> dict:
    """
    Validate and store uploaded images.

    Returns:
        Envelope with the stored files and any per-file errors
    """
    result = await UploadService().save_images(identity, files)
    return success_response("Files uploaded successfully", result)
