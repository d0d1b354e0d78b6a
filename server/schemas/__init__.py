"""Pydantic schemas for API requests and responses."""

from server.schemas.files import (
    FileRecord,
    ListFilesResponse,
    UploadedFile,
    UploadFilesResponse,
    RenameFileResponse
)
from server.schemas.common import ErrorResponse, MessageResponse

__all__ = [
    "FileRecord",
    "ListFilesResponse",
    "UploadedFile",
    "UploadFilesResponse",
    "RenameFileResponse",
    "ErrorResponse",
    "MessageResponse"
]
