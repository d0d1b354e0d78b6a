"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class UploadCommand:
    """Upload local files."""

    file_list: tuple[str, ...]
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class ListCommand:
    """List files on the server."""

    command: Literal["list"] = "list"


@dataclass(frozen=True)
class DownloadCommand:
    """Download file by filename."""

    filename: str
    output_path: str | None = None
    command: Literal["download"] = "download"


@dataclass(frozen=True)
class DeleteCommand:
    """Delete file by filename."""

    filename: str
    command: Literal["delete"] = "delete"


@dataclass(frozen=True)
class RenameCommand:
    """Rename file, keeping its extension."""

    filename: str
    new_name: str
    command: Literal["rename"] = "rename"


CommandRequest = (
    UploadCommand
    | ListCommand
    | DownloadCommand
    | DeleteCommand
    | RenameCommand
)
