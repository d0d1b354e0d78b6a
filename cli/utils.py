"""Transfer progress display and size formatting for the CLI."""

import sys
from typing import BinaryIO, Optional, TextIO

from cli.constants import GREEN, RESET

SIZE_UNITS = ('B', 'KiB', 'MiB', 'GiB', 'TiB', 'PiB')

UPLOAD_READ_SIZE = 8192


class TransferProgress:
    """
    One-line progress display for a single upload or download.

    Used as a context manager: a clean exit ends the line, an exception
    blanks it so the error message starts on a clear line.
    """

    def __init__(self, verb: str, filename: str, total: Optional[int], stream: Optional[TextIO] = None):
        self.verb = verb
        self.filename = filename
        self.total = total
        self.done = 0
        self.stream = stream if stream is not None else sys.stdout
        self._line_open = False

    def advance(self, count: int) -> None:
        self.done += count
        self.stream.write('\r' + self.render())
        self.stream.flush()
        self._line_open = True

    def render(self) -> str:
        """E.g. 'Uploading a.txt: 1.00 KiB / 2.00 KiB (50.0%)', or bytes only when the total is unknown."""
        if not self.total:
            return f"{self.verb} {self.filename}: {format_file_size(self.done)}"
        percent = min(self.done / self.total * 100, 100.0)
        return (
            f"{self.verb} {self.filename}: {format_file_size(self.done)} / {format_file_size(self.total)} "
            f"({GREEN}{percent:.1f}%{RESET})"
        )

    def finish(self) -> None:
        if self._line_open:
            self.stream.write('\n')
            self.stream.flush()
            self._line_open = False

    def abort(self) -> None:
        if self._line_open:
            self.stream.write('\r' + ' ' * 100 + '\r')
            self.stream.flush()
            self._line_open = False

    def __enter__(self) -> 'TransferProgress':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is None:
            self.finish()
        else:
            self.abort()


class ProgressReader:
    """Binary reader that reports every chunk it hands out to a TransferProgress."""

    def __init__(self, handle: BinaryIO, progress: TransferProgress):
        self._handle = handle
        self._progress = progress

    def read(self, size: int = -1) -> bytes:
        chunk = self._handle.read(size if size > 0 else UPLOAD_READ_SIZE)
        if chunk:
            self._progress.advance(len(chunk))
        return chunk


def format_file_size(size_bytes: int) -> str:
    """
    Format a byte count with binary units, e.g. "512 B" or "1.50 MiB".

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    size = float(size_bytes)
    for unit in SIZE_UNITS[1:]:
        size /= 1024.0
        if size < 1024.0 or unit == SIZE_UNITS[-1]:
            return f"{size:.2f} {unit}"
