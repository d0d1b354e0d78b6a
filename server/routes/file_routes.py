"""File operation API routes."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from server.exceptions import InvalidRequestError, MissingFileError
from server.schemas.common import ErrorResponse, MessageResponse
from server.schemas.files import (
    FileRecord,
    ListFilesResponse,
    RenameFileResponse,
    UploadedFile,
    UploadFilesResponse,
)
from server.services.file_service import FileService
from server.utils import content_disposition

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/files",
    tags=["Files"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)

MAX_UPLOAD_PARTS = 1000


@router.get("/list", response_model=ListFilesResponse)
async def list_files():
    """
    List every file in the store directory.

    Returns:
        - files: name, size, creationDate and lastModifiedDate of each file,
                 in directory enumeration order

    Raises:
        - 500: Store directory could not be read
    """
    file_service = FileService()

    files = await run_in_threadpool(file_service.list_files)

    return ListFilesResponse(files=[FileRecord.from_stored(f) for f in files])


@router.post("", response_model=UploadFilesResponse)
async def upload_files(request: Request):
    """
    Upload one or more files.

    Parameters:
        - file: File part(s) to upload (multipart/form-data, repeatable)

    Returns:
        - message: Confirmation message
        - file: Stored name, size, lastModifiedDate and path of the first part
        - files: The same for every stored part

    Raises:
        - 400: No file part, or a part without a name
        - 413: Request body too large
        - 500: File could not be written
    """
    file_service = FileService()

    form = await request.form(max_files=MAX_UPLOAD_PARTS)
    try:
        parts = form.getlist("file")
        if not parts or not all(isinstance(part, UploadFile) for part in parts):
            raise MissingFileError("No file provided")

        stored = []
        for part in parts:
            stored_file = await run_in_threadpool(file_service.save_upload, part.filename, part.file)
            stored.append(
                UploadedFile.from_stored(stored_file, str(file_service.store_dir / stored_file.name))
            )
    finally:
        await form.close()

    logger.info(f"Upload request stored {len(stored)} file(s)")
    message = "File saved successfully!" if len(stored) == 1 else f"{len(stored)} files saved successfully!"
    return UploadFilesResponse(message=message, file=stored[0], files=stored)


@router.get("/{name}/download")
async def download_file(name: str):
    """
    Download a file by name.

    Parameters:
        - name: Filename (single path component)

    Returns:
        - StreamingResponse with the file content as an attachment

    Raises:
        - 400: Name is not a single path component
        - 404: File not found
        - 500: File could not be read
    """
    file_service = FileService()

    stored, stream_generator = await run_in_threadpool(file_service.open_download, name)

    return StreamingResponse(
        stream_generator,
        media_type="application/octet-stream",
        headers={
            "Content-Disposition": content_disposition(stored.name),
            "Content-Length": str(stored.size),
        }
    )


@router.delete("/{name}/delete", response_model=MessageResponse)
async def delete_file(name: str):
    """
    Delete a file by name.

    Raises:
        - 400: Name is not a single path component
        - 404: File not found
        - 500: File could not be removed
    """
    file_service = FileService()

    await run_in_threadpool(file_service.delete_file, name)

    return MessageResponse(message="File deleted successfully!")


@router.put("/{name}/rename", response_model=RenameFileResponse)
async def rename_file(name: str, request: Request):
    """
    Rename a file, keeping its extension.

    Parameters:
        - name: Current filename
        - body: New base name as raw text (not JSON)

    Returns:
        - message: Confirmation message
        - newName: New base name plus the original extension

    Raises:
        - 400: Missing or invalid name
        - 404: File not found
        - 409: Another file already has the new name
        - 500: File could not be renamed
    """
    file_service = FileService()

    body = await request.body()
    try:
        new_base = body.decode("utf-8").strip()
    except UnicodeDecodeError:
        raise InvalidRequestError("Invalid new name")

    new_name = await run_in_threadpool(file_service.rename_file, name, new_base)

    return RenameFileResponse(message="File renamed successfully!", new_name=new_name)
