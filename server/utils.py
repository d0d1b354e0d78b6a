"""Filename helpers: collision suffixes, path-component checks, headers."""

import os
from datetime import datetime, timezone
from typing import Iterator, Optional, Tuple
from urllib.parse import quote


FORBIDDEN_COMPONENTS = ("", ".", "..")


def split_name(name: str) -> Tuple[str, str]:
    """
    Split a filename into base name and extension.

    The extension starts at the last dot; a leading dot alone does not
    make one (".env" has no extension).

    Args:
        name: Filename without directory part

    Returns:
        Tuple of (base, extension), extension including its dot or empty
    """
    return os.path.splitext(name)


def candidate_names(name: str) -> Iterator[str]:
    """
    Yield storage names for an upload, first the name itself, then
    base(1).ext, base(2).ext, ... without end.
    """
    base, ext = split_name(name)
    yield name
    index = 1
    while True:
        yield f"{base}({index}){ext}"
        index += 1


def is_single_component(name: Optional[str]) -> bool:
    """
    Check that a name can be joined to the store directory as one component.

    Rejects empty names, "." and "..", NUL bytes, and any forward or
    backward slash.
    """
    if name is None or name in FORBIDDEN_COMPONENTS:
        return False
    if "\x00" in name:
        return False
    return "/" not in name and "\\" not in name


def client_filename(raw_name: Optional[str]) -> str:
    """
    Reduce a client-supplied upload name to its final path component.

    Browsers and scripted clients sometimes send "C:\\dir\\a.txt" or
    "dir/a.txt"; only "a.txt" is kept. An empty string means no usable name.
    """
    if not raw_name:
        return ""
    last = raw_name.replace("\\", "/").rsplit("/", 1)[-1]
    if not is_single_component(last):
        return ""
    return last


def rename_target(original_name: str, new_base: str) -> str:
    """
    Build the final name for a rename.

    The original extension always wins: any extension on new_base is
    replaced by it.

    Args:
        original_name: Current filename, e.g. "report.pdf"
        new_base: Name supplied by the caller, e.g. "final" or "final.txt"

    Returns:
        Final filename, e.g. "final.pdf"
    """
    _, original_ext = split_name(original_name)
    base, _ = split_name(new_base)
    return f"{base}{original_ext}"


def content_disposition(filename: str) -> str:
    """
    Build an attachment Content-Disposition header value for a filename.

    The plain filename parameter keeps printable ASCII only, minus quotes and
    backslashes. When that drops anything, the exact name is added as an
    RFC 5987 filename* parameter.
    """
    fallback = "".join(
        ch for ch in filename
        if ch.isascii() and ch.isprintable() and ch not in '"\\'
    )
    value = f'attachment; filename="{fallback or "download"}"'
    if fallback != filename:
        value += f"; filename*=UTF-8''{quote(filename, safe='')}"
    return value


def timestamp_from_stat(seconds: float) -> datetime:
    """Convert a stat timestamp to an aware UTC datetime."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)
