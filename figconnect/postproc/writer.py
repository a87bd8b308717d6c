"""Writing generated files through the storage abstraction."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..storage import Storage


class WriteStatus(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class WriteResult:
    file_path: str
    status: WriteStatus


def write_file(storage: Storage, file_path: str, content: str, *, dry_run: bool = False) -> WriteResult:
    """Write ``content`` unless it already matches; dry runs only report."""
    if not storage.exists(file_path):
        if not dry_run:
            storage.write_text(file_path, content)
        return WriteResult(file_path, WriteStatus.CREATED)

    if storage.read_text(file_path) == content:
        return WriteResult(file_path, WriteStatus.UNCHANGED)

    if not dry_run:
        storage.write_text(file_path, content)
    return WriteResult(file_path, WriteStatus.UPDATED)


__all__ = ["WriteResult", "WriteStatus", "write_file"]
