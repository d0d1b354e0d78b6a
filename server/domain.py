"""Domain objects shared by the storage and service layers."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True)
class StoredFile:
    """A file in the store directory, as seen by a single stat call."""

    name: str
    size: int
    created_at: datetime
    modified_at: datetime
    path: Path
