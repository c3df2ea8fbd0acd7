"""Multipart upload handling shared by the routes that accept files."""

from typing import Optional

from fastapi import UploadFile

from pipecraft.config import Settings
from pipecraft.errors import ValidationError
from pipecraft.storage.lifecycle import UploadedFile


async def read_upload(
    file: Optional[UploadFile], settings: Settings
) -> Optional[UploadedFile]:
    """Read an optional upload into memory, enforcing the size limit."""
    if file is None or not file.filename:
        return None
    content = await file.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise ValidationError(
            f"File too large (limit {settings.max_upload_bytes} bytes)",
            errors=[{"field": file.filename, "message": "file too large"}],
        )
    return UploadedFile(
        filename=file.filename,
        content=content,
        content_type=file.content_type or "application/octet-stream",
    )
