"""Tests for storage backends and the file writer."""

from __future__ import annotations

from pathlib import Path

import pytest

from figconnect.postproc.writer import WriteStatus, write_file
from figconnect.storage import FileStorage, MemoryStorage


def test_memory_storage_tracks_directories() -> None:
    storage = MemoryStorage({"/lib/button/button.component.ts": "x", "/lib/readme.md": "y"})

    assert storage.is_dir("/lib")
    assert storage.is_dir("/lib/button")
    assert not storage.is_dir("/lib/readme.md")
    assert storage.list_dir("/lib") == ["button", "readme.md"]
    assert storage.exists("/lib/button/button.component.ts")
    assert not storage.exists("/lib/missing")
    with pytest.raises(FileNotFoundError):
        storage.read_text("/lib/missing.ts")
    with pytest.raises(FileNotFoundError):
        storage.list_dir("/elsewhere")


def test_file_storage_preserves_crlf(tmp_path: Path) -> None:
    storage = FileStorage()
    target = tmp_path / "nested" / "out.ts"

    storage.write_text(str(target), "a\r\nb\r\n")

    assert storage.read_text(str(target)) == "a\r\nb\r\n"
    assert storage.list_dir(str(tmp_path)) == ["nested"]


def test_write_file_statuses() -> None:
    storage = MemoryStorage()

    assert write_file(storage, "/out/a.ts", "one").status is WriteStatus.CREATED
    assert write_file(storage, "/out/a.ts", "one").status is WriteStatus.UNCHANGED
    assert write_file(storage, "/out/a.ts", "two").status is WriteStatus.UPDATED
    assert storage.read_text("/out/a.ts") == "two"


def test_write_file_dry_run_does_not_touch_storage() -> None:
    storage = MemoryStorage({"/out/a.ts": "one"})

    assert write_file(storage, "/out/b.ts", "new", dry_run=True).status is WriteStatus.CREATED
    assert write_file(storage, "/out/a.ts", "changed", dry_run=True).status is WriteStatus.UPDATED
    assert storage.files() == {"/out/a.ts": "one"}
