"""Conversion of FastAPI uploads into domain upload objects."""

from fastapi import UploadFile

from domain.entities.upload import UploadedFile


async def read_upload(file: UploadFile) -> UploadedFile:
    """Read an UploadFile fully into memory."""
    data = await file.read()
    await file.close()
    return UploadedFile(
        filename=file.filename or "",
        content_type=file.content_type or "application/octet-stream",
        data=data,
    )
