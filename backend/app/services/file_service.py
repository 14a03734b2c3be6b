"""
Spacetime Backend: Upload Storage Service
==========================================

What:  Validates and stores files uploaded through POST /upload.
How:   Checks the declared content type and size, writes the bytes under
       UPLOAD_DIR with a random UUID filename, and returns the stored name.
Who:   Called by the upload route; files are then served by the /uploads
       static mount and referenced from Memory.cover_url.

Checks (cheapest first):
    1. Content type:  must match image/* or video/*
    2. Size:          non-empty and at most settings.max_upload_size
    3. Filename:      UUID + original extension; no user input in the path
"""

import logging
import os
import re
import uuid
from pathlib import Path
from typing import Optional, Tuple

import aiofiles

from app.config import settings
from app.exceptions import ValidationError, FileStorageError

logger = logging.getLogger(__name__)

# Cover media: any image or video subtype, e.g. image/png, video/mp4
ALLOWED_CONTENT_TYPE = re.compile(r"^(image|video)/[a-zA-Z0-9.+-]+$")

# Extensions are kept only when they look like a plain suffix
_SAFE_EXTENSION = re.compile(r"^\.[a-zA-Z0-9]{1,10}$")


class FileService:
    """
    Manages upload validation and storage.

    Directory Structure:
        uploads/
        ├── 3f0c1a52-....png
        └── 9b7e44d1-....mp4

    Files are flat under the upload root so that a stored name maps directly
    onto /uploads/<name>.
    """

    def __init__(self, upload_dir: Optional[str] = None, max_size: Optional[int] = None):
        """
        Args:
            upload_dir: Override the storage directory (used in tests).
            max_size:   Override the size limit in bytes (used in tests).
        """
        self.upload_dir = Path(upload_dir or settings.upload_dir).resolve()
        self.max_size = max_size or settings.max_upload_size
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def validate_content_type(self, content_type: Optional[str]) -> str:
        """
        Accept only image and video uploads.

        Returns: The normalized (lowercase, parameters stripped) content type.
        Raises:  ValidationError for anything else, including a missing type.
        """
        normalized = (content_type or "").split(";")[0].strip().lower()
        if not ALLOWED_CONTENT_TYPE.match(normalized):
            raise ValidationError(
                message="Only image and video uploads are accepted",
                field="file",
                context={"content_type": normalized or None},
            )
        return normalized

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Reject empty files and files above the configured maximum.

        Args:
            content_length: Size reported by the multipart part (may be None)
            actual_size: Byte count actually received
        """
        max_mb = self.max_size / (1024 * 1024)

        if actual_size == 0:
            raise ValidationError(message="Uploaded file is empty", field="file")

        reported = content_length or 0
        if max(reported, actual_size) > self.max_size:
            raise ValidationError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB",
                field="file",
                context={"max_size": self.max_size, "actual_size": max(reported, actual_size)},
            )

    def _generate_name(self, filename: Optional[str]) -> Tuple[Path, str]:
        """Return (absolute_path, stored_name) for a new upload."""
        extension = Path(filename or "").suffix
        if not _SAFE_EXTENSION.match(extension):
            extension = ""
        stored_name = f"{uuid.uuid4()}{extension.lower()}"
        return self.upload_dir / stored_name, stored_name

    async def store_file(self, content: bytes, filename: Optional[str]) -> Tuple[str, str]:
        """
        Write file content to disk.

        Returns: Tuple of (absolute_path, stored_name).
        Raises:  FileStorageError if the write fails.
        """
        absolute_path, stored_name = self._generate_name(filename)

        try:
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store upload at %s: %s", absolute_path, str(e))
            await self.cleanup_file(str(absolute_path))
            raise FileStorageError(
                message="Failed to save the uploaded file. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", stored_name, len(content))
        return str(absolute_path), stored_name

    async def cleanup_file(self, file_path: str) -> None:
        """
        Remove a partially written file. Missing files are ignored; other
        failures are logged and not raised.
        """
        try:
            path = Path(file_path)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", file_path, str(e))

    async def validate_and_store(
        self,
        filename: Optional[str],
        content_type: Optional[str],
        content: bytes,
        content_length: Optional[int] = None,
    ) -> Tuple[str, str]:
        """
        Complete validation and storage pipeline for one upload.

        Returns: Tuple of (absolute_path, stored_name).
        """
        self.validate_content_type(content_type)
        self.validate_size(content_length, len(content))
        return await self.store_file(content, filename)


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
