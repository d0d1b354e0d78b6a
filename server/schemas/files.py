"""Pydantic schemas for file operation endpoints.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from server.domain import StoredFile


class FileRecord(BaseModel):
    """A file in the store, as returned by the list endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    size: int = Field(ge=0)
    creation_date: datetime = Field(alias="creationDate")
    last_modified_date: datetime = Field(alias="lastModifiedDate")

    @classmethod
    def from_stored(cls, stored: StoredFile) -> "FileRecord":
        return cls(
            name=stored.name,
            size=stored.size,
            creation_date=stored.created_at,
            last_modified_date=stored.modified_at,
        )


class ListFilesResponse(BaseModel):
    """Response model for file listing."""
    files: List[FileRecord]


class UploadedFile(BaseModel):
    """A file created by an upload."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    size: int = Field(ge=0)
    last_modified_date: datetime = Field(alias="lastModifiedDate")
    path: str

    @classmethod
    def from_stored(cls, stored: StoredFile, path: str) -> "UploadedFile":
        return cls(
            name=stored.name,
            size=stored.size,
            last_modified_date=stored.modified_at,
            path=path,
        )


class UploadFilesResponse(BaseModel):
    """Response model for file upload; `file` is the first stored part."""
    message: str
    file: UploadedFile
    files: List[UploadedFile]


class RenameFileResponse(BaseModel):
    """Response model for file rename."""
    model_config = ConfigDict(populate_by_name=True)

    message: str
    new_name: str = Field(alias="newName")
