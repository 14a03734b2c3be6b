"""
Spacetime Backend: Upload Route Handler
========================================

What:  POST /upload stores a cover image or video and returns its public URL.
How:   Reads the multipart `file` part, hands it to FileService, and builds
       the URL from the request's base URL plus the /uploads static mount.

Request Flow:
    1. Client sends multipart/form-data with a 'file' field
    2. FileService checks content type (image/* or video/*) and size
    3. File is written as <uuid><ext> under UPLOAD_DIR
    4. Response: {"fileUrl": "http://host/uploads/<uuid><ext>"}
"""

import logging

from fastapi import APIRouter, File, Request, UploadFile

from app.schemas.auth import UploadResponse
from app.schemas.common import ErrorResponse
from app.services.file_service import file_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Upload"])

# Path the upload directory is mounted on in main.create_app()
UPLOADS_MOUNT = "/uploads"


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        400: {"description": "Not an image/video, empty, or too large", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="Upload a cover image or video",
)
async def upload_file(
    request: Request,
    file: UploadFile = File(..., description="Image or video file (max 5MB by default)"),
) -> UploadResponse:
    try:
        content = await file.read()
        logger.info(
            "Received upload: filename=%s, content_type=%s, size=%d bytes",
            file.filename or "unknown",
            file.content_type,
            len(content),
        )
        _, stored_name = await file_service.validate_and_store(
            filename=file.filename,
            content_type=file.content_type,
            content=content,
            content_length=file.size,
        )
    finally:
        await file.close()

    base_url = str(request.base_url).rstrip("/")
    return UploadResponse(file_url=f"{base_url}{UPLOADS_MOUNT}/{stored_name}")
