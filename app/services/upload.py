"""
Upload service for listing images.
Validates size, extension and decoded image format, then stores files under the upload directory.
"""

import io
import time
import uuid
from pathlib import Path
from typing import List, Optional, Sequence
from PIL import Image
import aiofiles
from fastapi import UploadFile

from app.config import settings
from app.schemas.upload import UploadedFile, UploadResult
from app.utils.dependencies import Identity, require_auth
from app.utils.exceptions import BadRequestError
import logging

logger = logging.getLogger(__name__)

# Pillow format names accepted as listing images
ALLOWED_IMAGE_FORMATS = {"JPEG", "PNG", "WEBP"}


def file_extension(filename: str) -> str:
    return Path(filename).suffix.lower().lstrip(".")


def generate_unique_filename(original_name: str) -> str:
    """Random hex prefix plus the unix timestamp, keeping the lower-cased extension."""
    return f"{uuid.uuid4().hex[:13]}_{int(time.time())}.{file_extension(original_name)}"


def detect_image_format(content: bytes) -> Optional[str]:
    """
    Decode the header of an image with Pillow.

    Returns:
        Pillow format name such as "JPEG", or None if the bytes are not an image
    """
    try:
        with Image.open(io.BytesIO(content)) as img:
            img.verify()
            return img.format
    except (OSError, SyntaxError, ValueError):
        return None


class UploadService:
    """Service for storing uploaded listing images on local disk."""

    def __init__(self, upload_dir: Optional[str] = None):
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.max_file_size = settings.max_file_size
        self.allowed_extensions = {ext.lower() for ext in settings.allowed_extensions}

    def validate_image(self, filename: str, content: bytes) -> List[str]:
        """
        Check one file against the upload rules.

        Returns:
            Error messages for the file, empty when it is acceptable
        """
        errors = []
        if len(content) > self.max_file_size:
            errors.append(f"File size exceeds {self.max_file_size // (1024 * 1024)}MB limit")

        if detect_image_format(content) not in ALLOWED_IMAGE_FORMATS:
            errors.append("Invalid file type. Only JPG, PNG, and WebP allowed")

        if file_extension(filename) not in self.allowed_extensions:
            errors.append("Invalid file extension")

        return errors

    async def save_images(self, identity: Identity, files: Sequence[UploadFile]) -> UploadResult:
        """
        Validate and store a batch of images.

        Rejected files are reported in ``errors`` while the rest are stored.

        Args:
            identity: Caller, must be authenticated
            files: Uploaded files from the ``images`` form field

        Returns:
            UploadResult listing stored files and per-file errors

        Raises:
            BadRequestError: If nothing was sent, too many files were sent,
                or no file could be stored
        """
        require_auth(identity)

        files = [upload for upload in files if upload.filename]
        if not files:
            raise BadRequestError("No files uploaded")

        if len(files) > settings.max_images_per_listing:
            raise BadRequestError(f"Maximum {settings.max_images_per_listing} images allowed")

        self.upload_dir.mkdir(parents=True, exist_ok=True)

        result = UploadResult()
        for upload in files:
            content = await upload.read()

            validation_errors = self.validate_image(upload.filename, content)
            if validation_errors:
                result.errors.append(f"{upload.filename}: {', '.join(validation_errors)}")
                continue

            filename = generate_unique_filename(upload.filename)
            destination = self.upload_dir / filename
            try:
                async with aiofiles.open(destination, "wb") as out:
                    await out.write(content)
            except OSError as e:
                logger.error(f"Failed to save upload {upload.filename} to {destination}: {e}")
                result.errors.append(f"Failed to save {upload.filename}")
                continue

            result.files.append(UploadedFile(
                original_name=upload.filename,
                filename=filename,
                path=f"{settings.upload_url_prefix}/{filename}",
                url=f"/{settings.upload_url_prefix}/{filename}",
            ))

        if not result.files:
            raise BadRequestError("No files uploaded successfully", data={"errors": result.errors})

        logger.info(f"User {identity.user_id} uploaded {len(result.files)} image(s), {len(result.errors)} rejected")
        return result
