"""Entry point for the file store server."""

import time
import uuid
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from common.logging_config import setup_logging
from server import config
from server.exceptions import (
    FileHostError,
    InvalidRequestError,
    MissingFileError,
    InvalidNameError,
    StoredFileNotFoundError,
    FileConflictError,
    PayloadTooLargeError,
    StoreWriteFailedError,
    StoreReadFailedError
)
from server.middleware import BodySizeLimitMiddleware
from server.routes import file_router, public_router
from server.services.file_service import FileService
from server.storage import ensure_store_directory

logger = setup_logging('server')

app = FastAPI(
    title="Filehost",
    description="Single-directory file hosting API",
    version="1.0.0"
)

app.add_middleware(BodySizeLimitMiddleware)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
    )

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


@app.on_event("startup")
async def startup_event():
    """
    Create the store directory on application startup.
    """
    logger.info("File store server starting up...")

    ensure_store_directory(Path(config.STORE_DIR))
    logger.info(f"Store directory ready: {Path(config.STORE_DIR).resolve()}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("File store server shutting down...")


def _error_response(request: Request, status_code: int, exc: Exception, code: str) -> JSONResponse:
    request_id = getattr(request.state, 'request_id', 'unknown')
    if status_code >= 500:
        logger.error(
            f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=exc
        )
    else:
        logger.warning(
            f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}"
        )
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "code": code}
    )


@app.exception_handler(MissingFileError)
async def missing_file_handler(request: Request, exc: MissingFileError):
    return _error_response(request, status.HTTP_400_BAD_REQUEST, exc, "MISSING_FILE")


@app.exception_handler(InvalidNameError)
async def invalid_name_handler(request: Request, exc: InvalidNameError):
    return _error_response(request, status.HTTP_400_BAD_REQUEST, exc, "INVALID_NAME")


@app.exception_handler(InvalidRequestError)
async def invalid_request_handler(request: Request, exc: InvalidRequestError):
    return _error_response(request, status.HTTP_400_BAD_REQUEST, exc, "INVALID_REQUEST")


@app.exception_handler(StoredFileNotFoundError)
async def file_not_found_handler(request: Request, exc: StoredFileNotFoundError):
    return _error_response(request, status.HTTP_404_NOT_FOUND, exc, "NOT_FOUND")


@app.exception_handler(FileConflictError)
async def file_conflict_handler(request: Request, exc: FileConflictError):
    return _error_response(request, status.HTTP_409_CONFLICT, exc, "CONFLICT")


@app.exception_handler(PayloadTooLargeError)
async def payload_too_large_handler(request: Request, exc: PayloadTooLargeError):
    return _error_response(request, 413, exc, "PAYLOAD_TOO_LARGE")


@app.exception_handler(StoreWriteFailedError)
async def store_write_failed_handler(request: Request, exc: StoreWriteFailedError):
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, exc, "STORE_WRITE_FAILED")


@app.exception_handler(StoreReadFailedError)
async def store_read_failed_handler(request: Request, exc: StoreReadFailedError):
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, exc, "STORE_READ_FAILED")


@app.exception_handler(FileHostError)
async def filehost_exception_handler(request: Request, exc: FileHostError):
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, exc, "INTERNAL_ERROR")


app.include_router(file_router)
app.include_router(public_router)


@app.get("/health")
async def health_check():
    """
    Health check endpoint for Docker healthcheck.
    Returns 200 if service is alive.
    """
    return {"status": "healthy", "service": "filehost"}


@app.get("/ready")
async def ready_check():
    """
    Readiness check endpoint.
    Verifies the store directory exists and is writable.
    """
    ready = FileService().check_ready()
    status_code = status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code=status_code,
        content={
            "ready": ready,
            "store": "ok" if ready else "unavailable"
        }
    )


if config.UI_DIR and Path(config.UI_DIR).is_dir():
    app.mount("/", StaticFiles(directory=config.UI_DIR, html=True), name="ui")
else:
    @app.get("/")
    async def root():
        """
        Root endpoint for health check.
        """
        return {"message": "Filehost API", "status": "running"}


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "server.main:app",
        host=config.SERVER_HOST,
        port=config.SERVER_PORT
    )


if __name__ == "__main__":
    main()
