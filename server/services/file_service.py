"""File service for business logic."""

import logging
import os
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, Tuple

from server import config, storage
from server.domain import StoredFile
from server.exceptions import (
    FileConflictError,
    InvalidNameError,
    InvalidRequestError,
    StoredFileNotFoundError,
    StoreReadFailedError,
    StoreWriteFailedError,
)
from server.utils import candidate_names, client_filename, is_single_component, rename_target

logger = logging.getLogger(__name__)


class FileService:
    """Operations on the flat store directory. Holds no state besides its path."""

    def __init__(self, store_dir: Optional[Path] = None):
        self.store_dir = Path(store_dir if store_dir is not None else config.STORE_DIR)

    def _resolve(self, name: str) -> Path:
        """
        Map a path parameter to a file path inside the store.

        Raises:
            InvalidRequestError: If name is not a single path component
            StoredFileNotFoundError: If name resolves outside the store
        """
        if not is_single_component(name):
            raise InvalidRequestError("Invalid file name")
        try:
            return storage.get_file_path(self.store_dir, name)
        except ValueError:
            logger.warning(f"Rejected path outside store directory: {name!r}")
            raise StoredFileNotFoundError("File not found")

    def list_files(self) -> List[StoredFile]:
        try:
            files = storage.list_files(self.store_dir)
        except OSError as e:
            logger.error(f"Failed to list store directory {self.store_dir}: {e}")
            raise StoreReadFailedError("Could not read the file store")
        logger.debug(f"Listed {len(files)} files from {self.store_dir}")
        return files

    def save_upload(self, raw_name: Optional[str], stream: BinaryIO) -> StoredFile:
        """
        Store an uploaded stream under a free name derived from raw_name.

        An existing file is never overwritten: a taken name moves on to
        base(1).ext, base(2).ext, ... until a name is free.

        Args:
            raw_name: Filename as sent by the client
            stream: Binary stream with the file content

        Returns:
            StoredFile for the newly created file

        Raises:
            InvalidNameError: If the part carries no usable name
            StoreWriteFailedError: If the file cannot be written
        """
        name = client_filename(raw_name)
        if not name:
            raise InvalidNameError("File must have a name")

        try:
            storage.ensure_store_directory(self.store_dir)
            for candidate in candidate_names(name):
                # any entry holds the name, including links leaving the store
                if os.path.lexists(self.store_dir / candidate):
                    continue
                path = storage.get_file_path(self.store_dir, candidate)
                try:
                    written = storage.write_new_file(path, stream)
                except FileExistsError:
                    # lost a race for this name, try the next suffix
                    logger.info(f"Name {candidate} taken during upload, trying next")
                    continue
                logger.info(f"Stored upload {raw_name!r} as {candidate} ({written} bytes)")
                return storage.stat_file(path)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to store upload {raw_name!r}: {e}")
            raise StoreWriteFailedError("Error saving file")

    def open_download(self, name: str) -> Tuple[StoredFile, Iterator[bytes]]:
        """
        Open a stored file for download.

        Returns:
            Tuple of (StoredFile, iterator over the file content)

        Raises:
            InvalidRequestError: If name is not a single path component
            StoredFileNotFoundError: If the file does not exist
            StoreReadFailedError: If the file cannot be opened
        """
        path = self._resolve(name)
        try:
            handle = storage.open_for_reading(path)
        except FileNotFoundError:
            raise StoredFileNotFoundError("File not found")
        except OSError as e:
            logger.error(f"Failed to open {name!r} for download: {e}")
            raise StoreReadFailedError("Could not read file")

        try:
            stored = storage.stat_file(path)
        except OSError as e:
            handle.close()
            logger.error(f"Failed to stat {name!r} for download: {e}")
            raise StoreReadFailedError("Could not read file")

        logger.info(f"Starting download of {name} ({stored.size} bytes)")
        return stored, storage.read_streaming(handle)

    def delete_file(self, name: str) -> None:
        path = self._resolve(name)
        try:
            storage.delete_file(path)
        except FileNotFoundError:
            raise StoredFileNotFoundError("File not found")
        except OSError as e:
            logger.error(f"Failed to delete {name!r}: {e}")
            raise StoreWriteFailedError("Error deleting file")
        logger.info(f"Deleted {name}")

    def rename_file(self, name: str, new_base: Optional[str]) -> str:
        """
        Rename a stored file, keeping its extension.

        Args:
            name: Current filename
            new_base: New base name; its own extension, if any, is replaced

        Returns:
            The final new filename

        Raises:
            InvalidRequestError: If either name is missing or not a single
                path component
            StoredFileNotFoundError: If the file does not exist
            FileConflictError: If another file already has the new name
            StoreWriteFailedError: If the rename fails
        """
        source = self._resolve(name)

        if not new_base:
            raise InvalidRequestError("No new name provided")
        if not is_single_component(new_base):
            raise InvalidRequestError("Invalid new name")

        new_name = rename_target(name, new_base)
        if not is_single_component(new_name):
            raise InvalidRequestError("Invalid new name")

        if new_name == name:
            if not source.is_file():
                raise StoredFileNotFoundError("File not found")
            return new_name

        try:
            target = storage.get_file_path(self.store_dir, new_name)
        except ValueError:
            raise InvalidRequestError("Invalid new name")

        try:
            storage.rename_file(source, target)
        except FileNotFoundError:
            raise StoredFileNotFoundError("File not found")
        except FileExistsError:
            raise FileConflictError(f"A file named {new_name} already exists")
        except OSError as e:
            logger.error(f"Failed to rename {name!r} to {new_name!r}: {e}")
            raise StoreWriteFailedError("Error renaming file")

        logger.info(f"Renamed {name} to {new_name}")
        return new_name

    def check_ready(self) -> bool:
        """Return True if the store directory exists and is writable."""
        try:
            storage.ensure_store_directory(self.store_dir)
        except OSError as e:
            logger.warning(f"Store directory {self.store_dir} unavailable: {e}")
            return False
        return os.access(self.store_dir, os.W_OK | os.X_OK)
