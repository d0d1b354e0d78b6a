"""HTTP client for communicating with the file store server."""

import os
import time
import uuid
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import httpx

from common.logging_config import get_logger
from cli.config import Config
from cli.constants import DOWNLOAD_PIECE_SIZE
from cli.utils import ProgressReader, TransferProgress, format_file_size

logger = get_logger(__name__)


def file_url(filename: str, action: str) -> str:
    """
    Build the endpoint path for a per-file action.

    The filename is percent-encoded as a single path segment, so a slash in
    it can never address another route.
    """
    return f"/api/files/{quote(filename, safe='')}/{action}"


class FileStoreClient:
    """HTTP client for the file store API with connection retries and error mapping."""

    def __init__(self, config: Config):
        """
        Initialize file store client.

        Args:
            config: Configuration instance
        """
        self.config = config
        self.session = httpx.Client(
            base_url=config.get_base_url(),
            timeout=config.get_timeout()
        )
        self.request_id = None
        logger.info(f"Initialized FileStoreClient [base_url={config.get_base_url()}]")

    def _calculate_upload_timeout(self, file_size: int) -> float:
        """
        Calculate timeout for upload based on file size.

        Args:
            file_size: File size in bytes

        Returns:
            Timeout in seconds (30s base + 0.1s per MB)
        """
        base_timeout = 30.0
        size_mb = file_size / (1024 * 1024)
        size_factor = size_mb * 0.1
        return base_timeout + size_factor

    def _resolve_download_path(self, output_path: Optional[str], filename: str) -> tuple[Path, str | None]:
        """
        Work out where a download is written.

        Args:
            output_path: Optional target file or existing directory
            filename: Name of the file on the server, used as default name

        Returns:
            Tuple of (output_file, error_message)
            error_message is None if the target can be written
        """
        if output_path:
            output_file = Path(output_path).expanduser()
            if output_file.is_dir():
                output_file = output_file / filename
        else:
            output_file = Path.cwd() / filename

        if output_file.exists():
            return output_file, f"Refusing to overwrite existing file: {output_file}"

        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return output_file, f"Cannot create directory {output_file.parent}: {e}"

        return output_file, None

    def _request_with_retry(
        self,
        method: str,
        endpoint: str,
        max_retries: Optional[int] = None,
        **kwargs
    ) -> httpx.Response:
        """
        Make HTTP request, retrying only when the server could not be reached.

        Error responses are returned as they are: uploads and renames are not
        idempotent, so a request that reached the server is never repeated.

        Args:
            method: HTTP method (GET, POST, DELETE, PUT)
            endpoint: API endpoint path
            max_retries: Max retry attempts (uses config default if None)
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            HTTP response object

        Raises:
            ConnectionError: If max retries exceeded or the request timed out
        """
        retry_config = self.config.get_retry_config()
        max_retries = max_retries if max_retries is not None else retry_config['max_retries']
        backoff = retry_config['retry_backoff_multiplier']

        self.request_id = str(uuid.uuid4())
        if 'headers' not in kwargs:
            kwargs['headers'] = {}
        kwargs['headers']['X-Request-ID'] = self.request_id

        logger.debug(
            f"Making request: {method} {endpoint} [request_id={self.request_id}]"
        )

        for attempt in range(max_retries + 1):
            try:
                response = self.session.request(method, endpoint, **kwargs)
            except httpx.ConnectError as e:
                if attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Connection failed (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint}, retrying in {delay}s [request_id={self.request_id}]"
                    )
                    time.sleep(delay)
                    continue
                logger.error(
                    f"Connection failed (max retries exceeded): {method} {endpoint} error={e} [request_id={self.request_id}]"
                )
                raise ConnectionError("Cannot connect to file server. Is it running?")
            except httpx.TimeoutException:
                logger.error(f"Request timed out: {method} {endpoint} [request_id={self.request_id}]")
                raise ConnectionError("Request timed out. Server may be overloaded.")

            logger.debug(
                f"Response received: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
            )
            if response.status_code >= 400:
                logger.warning(
                    f"Request failed: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
                )
            return response

        raise ConnectionError("Max retries exceeded")

    def _format_error(self, response: httpx.Response) -> str:
        """
        Map HTTP errors to user-friendly messages.

        Args:
            response: HTTP response object

        Returns:
            User-friendly error message
        """
        try:
            error_data = response.json()
            detail = error_data.get('detail', 'Unknown error')
            code = error_data.get('code', 'UNKNOWN')
        except ValueError:
            detail = response.text if response.text else 'Unknown error'
            code = 'UNKNOWN'

        error_messages = {
            'MISSING_FILE': 'No file was sent to the server.',
            'INVALID_NAME': 'The file has no usable name.',
            'NOT_FOUND': 'File not found on server.',
            'PAYLOAD_TOO_LARGE': 'File is too large for the server.',
            'STORE_WRITE_FAILED': 'The server could not write the file.',
            'STORE_READ_FAILED': 'The server could not read its files.',
        }

        if code in error_messages:
            return error_messages[code]

        if code in ('INVALID_REQUEST', 'CONFLICT'):
            return str(detail)

        status_messages = {
            400: 'Bad request',
            404: 'Not found',
            409: 'Conflict',
            413: 'File too large',
            500: 'Server error',
            503: 'Service unavailable',
        }

        message = status_messages.get(response.status_code, detail)
        return f"{message} (Code: {code})" if code != 'UNKNOWN' else message

    def upload_files(self, file_paths: list[str]) -> str:
        """
        Upload local files.

        Args:
            file_paths: List of local file paths

        Returns:
            Formatted result message with upload status for each file
        """
        results = []

        for file_path in file_paths:
            local_path = Path(file_path).expanduser()

            if not local_path.exists():
                results.append(f"Error: File not found: {file_path}")
                continue

            if not local_path.is_file():
                results.append(f"Error: Not a file: {file_path}")
                continue

            file_size = os.path.getsize(local_path)
            filename = local_path.name
            upload_timeout = self._calculate_upload_timeout(file_size)

            try:
                with open(local_path, 'rb') as handle, TransferProgress('Uploading', filename, file_size) as progress:
                    response = self.session.post(
                        '/api/files',
                        files={'file': (filename, ProgressReader(handle, progress), 'application/octet-stream')},
                        timeout=upload_timeout,
                    )

                if response.status_code == 200:
                    stored = response.json()['file']
                    if stored['name'] != filename:
                        results.append(
                            f"Uploaded: {filename} as {stored['name']} (Size: {format_file_size(stored['size'])})"
                        )
                    else:
                        results.append(f"Uploaded: {stored['name']} (Size: {format_file_size(stored['size'])})")
                    logger.info(f"Uploaded {local_path} as {stored['name']}")
                else:
                    results.append(f"Error uploading {file_path}: {self._format_error(response)}")

            except httpx.ConnectError:
                results.append(f"Error uploading {file_path}: Cannot connect to file server")
            except httpx.TimeoutException:
                results.append(
                    f"Error uploading {file_path}: Upload timed out "
                    f"(file size: {format_file_size(file_size)}, timeout: {upload_timeout:.1f}s)"
                )
            except OSError as e:
                results.append(f"Error reading {file_path}: {e}")

        return '\n'.join(results) if results else "No files uploaded."

    def list_files(self) -> str:
        """
        List files on the server.

        Returns:
            Formatted list of files
        """
        try:
            response = self._request_with_retry('GET', '/api/files/list')

            if response.status_code == 200:
                files = response.json()['files']

                if not files:
                    return "No files stored on the server."

                output = [f"Found {len(files)} file(s):\n"]
                for file_meta in files:
                    output.append(
                        f"  - {file_meta['name']}\n"
                        f"    Size: {format_file_size(file_meta['size'])}\n"
                        f"    Created: {file_meta['creationDate']}\n"
                        f"    Modified: {file_meta['lastModifiedDate']}"
                    )

                return '\n'.join(output)
            else:
                return f"Error: {self._format_error(response)}"

        except ConnectionError as e:
            return f"Error: {e}"

    def delete_file(self, filename: str) -> str:
        """
        Delete a file on the server.

        Args:
            filename: Name of the file to delete

        Returns:
            Result message
        """
        try:
            response = self._request_with_retry('DELETE', file_url(filename, 'delete'))

            if response.status_code == 200:
                logger.info(f"Deleted {filename}")
                return f"Deleted: {filename}"
            else:
                return f"Error: {self._format_error(response)}"

        except ConnectionError as e:
            return f"Error: {e}"

    def rename_file(self, filename: str, new_name: str) -> str:
        """
        Rename a file on the server. The server keeps the original extension.

        Args:
            filename: Current name of the file
            new_name: New base name

        Returns:
            Result message with the final name
        """
        try:
            response = self._request_with_retry(
                'PUT',
                file_url(filename, 'rename'),
                content=new_name.encode('utf-8'),
                headers={'Content-Type': 'text/plain; charset=utf-8'}
            )

            if response.status_code == 200:
                final_name = response.json()['newName']
                logger.info(f"Renamed {filename} to {final_name}")
                return f"Renamed: {filename} -> {final_name}"
            else:
                return f"Error: {self._format_error(response)}"

        except ConnectionError as e:
            return f"Error: {e}"

    def download(self, filename: str, output_path: str | None = None) -> str:
        """
        Download a file by filename with progress feedback.

        Args:
            filename: Name of file to download
            output_path: Optional output file or directory (defaults to ./<filename>)

        Returns:
            Success message with download details
        """
        output_file = None
        try:
            with self.session.stream('GET', file_url(filename, 'download')) as response:
                if response.status_code != 200:
                    response.read()
                    return f"Error: {self._format_error(response)}"

                target, error = self._resolve_download_path(output_path, filename)
                if error:
                    return f"Error: {error}"

                total_size = int(response.headers.get('Content-Length', 0))

                with open(target, 'xb') as f:
                    output_file = target
                    with TransferProgress('Downloading', filename, total_size) as progress:
                        for chunk in response.iter_bytes(chunk_size=DOWNLOAD_PIECE_SIZE):
                            f.write(chunk)
                            progress.advance(len(chunk))

                downloaded = progress.done
                logger.info(f"Downloaded {filename} to {output_file} ({downloaded} bytes)")
                return f"Downloaded: {filename} ({format_file_size(downloaded)})\nSaved to: {output_file.absolute()}"

        except httpx.ConnectError:
            return "Error: Cannot connect to file server. Is it running?"
        except httpx.TimeoutException:
            self._discard_partial(output_file)
            return "Error: Request timed out. Server may be overloaded."
        except httpx.HTTPError as e:
            self._discard_partial(output_file)
            return f"Error: Download interrupted: {e}"
        except OSError as e:
            self._discard_partial(output_file)
            return f"Error writing file: {e}"

    def _discard_partial(self, output_file: Optional[Path]) -> None:
        """Remove a partially written download."""
        if output_file is not None and output_file.exists():
            output_file.unlink()
            logger.info(f"Removed partial download {output_file}")

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
