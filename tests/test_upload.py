"""
Tests for image upload validation and storage.
"""

import io
import pytest
from PIL import Image
from httpx import AsyncClient

from app.config import settings
from app.services.upload import (
    UploadService,
    detect_image_format,
    file_extension,
    generate_unique_filename
)
from tests.conftest import auth_headers

UPLOAD_URL = "/api/upload"


def image_bytes(fmt: str = "PNG", size=(8, 8)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 120, 40)).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """Point uploads at a per-test directory."""
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path))
    return tmp_path


class TestUploadHelpers:

    def test_file_extension(self):
        assert file_extension("Photo.JPG") == "jpg"
        assert file_extension("archive.tar.gz") == "gz"
        assert file_extension("noext") == ""

    def test_generate_unique_filename(self):
        first = generate_unique_filename("kitchen.PNG")
        second = generate_unique_filename("kitchen.PNG")

        assert first.endswith(".png")
        assert first != second
        prefix, timestamp = first[:-4].split("_")
        assert len(prefix) == 13
        assert timestamp.isdigit()

    def test_detect_image_format(self):
        assert detect_image_format(image_bytes("PNG")) == "PNG"
        assert detect_image_format(image_bytes("JPEG")) == "JPEG"
        assert detect_image_format(b"definitely not an image") is None


class TestValidateImage:

    def test_valid_image(self, tmp_path):
        assert UploadService(str(tmp_path)).validate_image("room.png", image_bytes()) == []

    def test_wrong_extension(self, tmp_path):
        errors = UploadService(str(tmp_path)).validate_image("room.gif", image_bytes())

        assert errors == ["Invalid file extension"]

    def test_renamed_text_file(self, tmp_path):
        errors = UploadService(str(tmp_path)).validate_image("room.jpg", b"hello")

        assert errors == ["Invalid file type. Only JPG, PNG, and WebP allowed"]

    def test_unsupported_format(self, tmp_path):
        errors = UploadService(str(tmp_path)).validate_image("room.png", image_bytes("GIF"))

        assert errors == ["Invalid file type. Only JPG, PNG, and WebP allowed"]

    def test_oversized(self, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "max_file_size", 5 * 1024 * 1024)
        content = image_bytes() + b"\0" * (5 * 1024 * 1024)

        errors = UploadService(str(tmp_path)).validate_image("room.png", content)

        assert "File size exceeds 5MB limit" in errors


class TestUploadEndpoint:

    async def test_upload_stores_files(self, async_client: AsyncClient, landlord, upload_dir):
        files = [
            ("images[]", ("front.png", image_bytes("PNG"), "image/png")),
            ("images[]", ("hall.jpg", image_bytes("JPEG"), "image/jpeg")),
        ]

        response = await async_client.post(UPLOAD_URL, files=files, headers=auth_headers(landlord))

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Files uploaded successfully"
        stored = body["data"]["files"]
        assert [item["original_name"] for item in stored] == ["front.png", "hall.jpg"]
        assert body["data"]["errors"] == []
        for item in stored:
            assert item["path"] == f"uploads/{item['filename']}"
            assert item["url"] == f"/uploads/{item['filename']}"
            assert (upload_dir / item["filename"]).exists()

    async def test_partial_success(self, async_client: AsyncClient, tenant, upload_dir):
        files = [
            ("images", ("ok.webp", image_bytes("WEBP"), "image/webp")),
            ("images", ("notes.txt", b"plain text", "text/plain")),
        ]

        response = await async_client.post(UPLOAD_URL, files=files, headers=auth_headers(tenant))

        data = response.json()["data"]
        assert len(data["files"]) == 1
        assert data["errors"] == [
            "notes.txt: Invalid file type. Only JPG, PNG, and WebP allowed, Invalid file extension"
        ]

    async def test_all_rejected(self, async_client: AsyncClient, tenant, upload_dir):
        files = [("images", ("bad.jpg", b"nope", "image/jpeg"))]

        response = await async_client.post(UPLOAD_URL, files=files, headers=auth_headers(tenant))

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "No files uploaded successfully",
            "data": {"errors": ["bad.jpg: Invalid file type. Only JPG, PNG, and WebP allowed"]},
        }
        assert list(upload_dir.iterdir()) == []

    async def test_too_many_files(self, async_client: AsyncClient, tenant, upload_dir):
        files = [("images", (f"p{i}.png", image_bytes(), "image/png")) for i in range(6)]

        response = await async_client.post(UPLOAD_URL, files=files, headers=auth_headers(tenant))

        assert response.status_code == 400
        assert response.json()["message"] == "Maximum 5 images allowed"

    async def test_no_files(self, async_client: AsyncClient, tenant, upload_dir):
        response = await async_client.post(UPLOAD_URL, data={"note": "empty"}, headers=auth_headers(tenant))

        assert response.status_code == 400
        assert response.json()["message"] == "No files uploaded"

    async def test_requires_login(self, async_client: AsyncClient, upload_dir):
        files = [("images", ("front.png", image_bytes(), "image/png"))]

        response = await async_client.post(UPLOAD_URL, files=files)

        assert response.status_code == 401
