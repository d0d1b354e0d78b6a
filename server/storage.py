"""Manages files on disk inside the store directory: stat, write, read, remove."""

import os
import shutil
from pathlib import Path
from typing import BinaryIO, Iterator, List

from common.constants import STREAM_PIECE_SIZE
from server.domain import StoredFile
from server.utils import is_single_component, timestamp_from_stat


def ensure_store_directory(store_dir: Path) -> None:
    """Ensure store directory exists."""
    store_dir.mkdir(parents=True, exist_ok=True)


def get_file_path(store_dir: Path, name: str) -> Path:
    """
    Get the path of a file inside the store directory.

    Args:
        store_dir: Store directory
        name: Filename, must be a single path component

    Returns:
        Path object for the file (the link itself if the entry is a symlink)

    Raises:
        ValueError: If name is not a single component or resolves outside
            the store directory
    """
    if not is_single_component(name):
        raise ValueError(f"Not a single path component: {name!r}")

    root = store_dir.resolve()
    path = root / name
    if path.resolve().parent != root:
        raise ValueError(f"Path escapes store directory: {name!r}")
    return path


def stat_file(path: Path) -> StoredFile:
    """
    Build a StoredFile from filesystem metadata.

    Raises:
        FileNotFoundError: If the file does not exist
        OSError: If stat fails
    """
    st = path.stat()
    created = getattr(st, "st_birthtime", None)
    if created is None:
        created = st.st_ctime
    return StoredFile(
        name=path.name,
        size=st.st_size,
        created_at=timestamp_from_stat(created),
        modified_at=timestamp_from_stat(st.st_mtime),
        path=path,
    )


def list_files(store_dir: Path) -> List[StoredFile]:
    """
    List regular files in the store directory, in enumeration order.

    Returns:
        List of StoredFile, empty if the directory does not exist

    Raises:
        OSError: If the directory cannot be read
    """
    if not store_dir.exists():
        return []

    files = []
    with os.scandir(store_dir) as entries:
        for entry in entries:
            try:
                if not entry.is_file(follow_symlinks=False):
                    continue
                files.append(stat_file(Path(entry.path)))
            except FileNotFoundError:
                # removed between scandir and stat
                continue
    return files


def write_new_file(path: Path, stream: BinaryIO) -> int:
    """
    Create a file that must not exist yet and copy a stream into it.

    Args:
        path: Target path
        stream: Binary stream positioned at the start of the content

    Returns:
        Number of bytes written

    Raises:
        FileExistsError: If the path already exists
        OSError: If the write fails; the partial file is removed
    """
    with open(path, 'xb') as f:
        try:
            shutil.copyfileobj(stream, f, STREAM_PIECE_SIZE)
        except Exception:
            f.close()
            path.unlink(missing_ok=True)
            raise
        return f.tell()


def open_for_reading(path: Path) -> BinaryIO:
    """
    Open a regular file for streaming.

    Raises:
        FileNotFoundError: If the path does not exist or is not a regular file
        OSError: If the open fails
    """
    if not path.is_file():
        raise FileNotFoundError(str(path))
    return open(path, 'rb')


def read_streaming(handle: BinaryIO, piece_size: int = STREAM_PIECE_SIZE) -> Iterator[bytes]:
    """
    Stream an open file in pieces, closing it when exhausted.

    Args:
        handle: File opened in binary mode
        piece_size: Size of each piece in bytes (default 64KB)

    Yields:
        File data pieces
    """
    try:
        while True:
            piece = handle.read(piece_size)
            if not piece:
                break
            yield piece
    finally:
        handle.close()


def delete_file(path: Path) -> None:
    """
    Delete a regular file.

    Raises:
        FileNotFoundError: If the file does not exist or is not a regular file
        OSError: If removal fails
    """
    if not path.is_file():
        raise FileNotFoundError(str(path))
    path.unlink()


def rename_file(source: Path, target: Path) -> None:
    """
    Rename a file inside the store directory.

    Raises:
        FileNotFoundError: If source does not exist or is not a regular file
        FileExistsError: If target is already taken
        OSError: If the rename fails
    """
    if not source.is_file():
        raise FileNotFoundError(str(source))
    if target.exists() or target.is_symlink():
        raise FileExistsError(str(target))
    source.rename(target)
