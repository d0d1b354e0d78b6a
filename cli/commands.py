"""Command handler functions for CLI operations."""

from typing import Optional

from common.logging_config import get_logger
from cli.models import (
    DeleteCommand,
    DownloadCommand,
    ListCommand,
    RenameCommand,
    UploadCommand,
)
from cli.config import Config
from cli.store_client import FileStoreClient

logger = get_logger(__name__)


_client: Optional[FileStoreClient] = None


def get_client() -> FileStoreClient:
    """
    Get or create global FileStoreClient instance.

    Returns:
        FileStoreClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new FileStoreClient instance")
        _client = FileStoreClient(Config())
    return _client


def use_client(client: FileStoreClient) -> None:
    """Make every handler talk through the given client."""
    global _client
    _client = client


def handle_upload(cmd: UploadCommand, client: Optional[FileStoreClient] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with file_list
        client: Optional FileStoreClient for dependency injection (testing)

    Returns:
        Success or error message with upload results
    """
    logger.info(f"Executing upload command: {len(cmd.file_list)} files")
    if client is None:
        client = get_client()
    result = client.upload_files(list(cmd.file_list))
    logger.debug("Upload command completed")
    return result


def handle_list(cmd: ListCommand, client: Optional[FileStoreClient] = None) -> str:
    """
    Handle 'list' command.

    Args:
        cmd: ListCommand
        client: Optional FileStoreClient for dependency injection (testing)

    Returns:
        Formatted list of files
    """
    if client is None:
        client = get_client()
    return client.list_files()


def handle_download(cmd: DownloadCommand, client: Optional[FileStoreClient] = None) -> str:
    """
    Handle 'download' command.

    Args:
        cmd: DownloadCommand with filename and optional output_path
        client: Optional FileStoreClient for dependency injection (testing)

    Returns:
        Success or error message with download results
    """
    logger.info(f"Executing download command: filename={cmd.filename} output_path={cmd.output_path}")
    if client is None:
        client = get_client()
    result = client.download(cmd.filename, cmd.output_path)
    logger.debug("Download command completed")
    return result


def handle_delete(cmd: DeleteCommand, client: Optional[FileStoreClient] = None) -> str:
    """
    Handle 'delete' command.

    Args:
        cmd: DeleteCommand with filename
        client: Optional FileStoreClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    if client is None:
        client = get_client()
    return client.delete_file(cmd.filename)


def handle_rename(cmd: RenameCommand, client: Optional[FileStoreClient] = None) -> str:
    """
    Handle 'rename' command.

    Args:
        cmd: RenameCommand with filename and new_name
        client: Optional FileStoreClient for dependency injection (testing)

    Returns:
        Success message with the final name, or error message
    """
    if client is None:
        client = get_client()
    return client.rename_file(cmd.filename, cmd.new_name)
