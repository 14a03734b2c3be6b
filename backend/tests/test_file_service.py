"""
Spacetime Backend: File Service Unit Tests
===========================================

What:  Upload validation (content type, size) and storage naming.
How:   Real writes into a per-test temporary directory.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from app.services.file_service import FileService
from app.exceptions import FileStorageError, ValidationError


class TestContentTypeValidation:
    """Only image/* and video/* are accepted."""

    def setup_method(self):
        self.service = FileService()

    @pytest.mark.parametrize(
        "content_type",
        ["image/png", "image/jpeg", "image/webp", "video/mp4", "video/quicktime", "IMAGE/PNG"],
    )
    def test_accepts_images_and_videos(self, content_type):
        assert self.service.validate_content_type(content_type) == content_type.lower()

    def test_strips_parameters(self):
        assert self.service.validate_content_type("image/svg+xml; charset=utf-8") == "image/svg+xml"

    @pytest.mark.parametrize(
        "content_type",
        ["application/pdf", "text/plain", "audio/mpeg", "image", "", None],
    )
    def test_rejects_other_types(self, content_type):
        with pytest.raises(ValidationError, match="image and video"):
            self.service.validate_content_type(content_type)


class TestSizeValidation:

    def setup_method(self):
        self.service = FileService(max_size=1024)

    def test_within_limit(self):
        self.service.validate_size(None, 1000)

    def test_exactly_at_limit(self):
        self.service.validate_size(1024, 1024)

    def test_over_limit(self):
        with pytest.raises(ValidationError, match="exceeds maximum"):
            self.service.validate_size(None, 1025)

    def test_reported_length_over_limit(self):
        with pytest.raises(ValidationError, match="exceeds maximum"):
            self.service.validate_size(5000, 10)

    def test_empty_file(self):
        with pytest.raises(ValidationError, match="empty"):
            self.service.validate_size(0, 0)


class TestStorage:

    @pytest.mark.asyncio
    async def test_validate_and_store_writes_uuid_named_file(self, temp_storage, sample_image_bytes):
        service = FileService(upload_dir=temp_storage)

        abs_path, name = await service.validate_and_store(
            filename="../../Holiday Photo.JPG",
            content_type="image/jpeg",
            content=sample_image_bytes,
            content_length=len(sample_image_bytes),
        )

        assert name.endswith(".jpg")
        assert "/" not in name
        assert Path(abs_path).parent == Path(temp_storage).resolve()
        assert Path(abs_path).read_bytes() == sample_image_bytes

    @pytest.mark.asyncio
    async def test_unsafe_extension_dropped(self, temp_storage):
        service = FileService(upload_dir=temp_storage)
        _, name = await service.store_file(b"data", "clip.mp4;rm -rf")
        assert "." not in name

    @pytest.mark.asyncio
    async def test_invalid_upload_writes_nothing(self, temp_storage):
        service = FileService(upload_dir=temp_storage)
        with pytest.raises(ValidationError):
            await service.validate_and_store("doc.pdf", "application/pdf", b"%PDF")
        assert list(Path(temp_storage).iterdir()) == []

    @pytest.mark.asyncio
    async def test_write_failure_raises_storage_error(self, temp_storage):
        service = FileService(upload_dir=temp_storage)
        with patch("app.services.file_service.aiofiles.open", side_effect=OSError("disk full")):
            with pytest.raises(FileStorageError):
                await service.store_file(b"data", "a.png")

    @pytest.mark.asyncio
    async def test_cleanup_file_removes_file(self, tmp_path):
        test_file = tmp_path / "test.jpg"
        test_file.write_bytes(b"test content")

        await FileService(upload_dir=str(tmp_path)).cleanup_file(str(test_file))
        assert not test_file.exists()

    @pytest.mark.asyncio
    async def test_cleanup_file_nonexistent(self, tmp_path):
        await FileService(upload_dir=str(tmp_path)).cleanup_file(str(tmp_path / "nonexistent.jpg"))
