"""Read-only public passthrough of the store directory under /files."""

import logging
import mimetypes

from fastapi import APIRouter
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool

from server import config
from server.exceptions import StoredFileNotFoundError
from server.schemas.common import ErrorResponse
from server.services.file_service import FileService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/files",
    tags=["Public"],
    responses={404: {"model": ErrorResponse}},
)


@router.get("/{name}")
async def serve_public_file(name: str):
    """
    Serve a stored file inline, with a content type guessed from its name.

    Parameters:
        - name: Filename (single path component)

    Raises:
        - 400: Name is not a single path component
        - 404: File not found, or public serving is disabled
        - 500: File could not be read
    """
    if not config.PUBLIC_FILES:
        logger.debug(f"Public file request for {name!r} while public serving is disabled")
        raise StoredFileNotFoundError("File not found")

    file_service = FileService()

    stored, stream_generator = await run_in_threadpool(file_service.open_download, name)
    media_type, _ = mimetypes.guess_type(stored.name)

    return StreamingResponse(
        stream_generator,
        media_type=media_type or "application/octet-stream",
        headers={"Content-Length": str(stored.size)}
    )
