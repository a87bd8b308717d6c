"""Storage backends used for reading sources and writing generated files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Mapping, Protocol


class Storage(Protocol):
    """Synchronous file access used by the scanner, source tree and writer."""

    def exists(self, path: str) -> bool: ...

    def is_dir(self, path: str) -> bool: ...

    def is_file(self, path: str) -> bool: ...

    def list_dir(self, path: str) -> List[str]: ...

    def read_text(self, path: str) -> str: ...

    def write_text(self, path: str, content: str) -> None: ...


class FileStorage:
    """Storage backed by the local filesystem."""

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def is_dir(self, path: str) -> bool:
        return Path(path).is_dir()

    def is_file(self, path: str) -> bool:
        return Path(path).is_file()

    def list_dir(self, path: str) -> List[str]:
        return sorted(entry.name for entry in Path(path).iterdir())

    def read_text(self, path: str) -> str:
        # newline="" keeps CRLF line endings intact for the section patcher.
        with open(path, "r", encoding="utf-8", newline="") as handle:
            return handle.read()

    def write_text(self, path: str, content: str) -> None:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)


class MemoryStorage:
    """Dictionary-backed storage for tests and dry experiments."""

    def __init__(self, files: Mapping[str, str] | None = None) -> None:
        self._files: Dict[str, str] = {}
        for path, content in (files or {}).items():
            self.write_text(path, content)

    @staticmethod
    def _key(path: str) -> str:
        return os.path.abspath(str(path))

    def exists(self, path: str) -> bool:
        return self.is_file(path) or self.is_dir(path)

    def is_file(self, path: str) -> bool:
        return self._key(path) in self._files

    def is_dir(self, path: str) -> bool:
        prefix = self._key(path).rstrip(os.sep) + os.sep
        return any(key.startswith(prefix) for key in self._files)

    def list_dir(self, path: str) -> List[str]:
        prefix = self._key(path).rstrip(os.sep) + os.sep
        if not self.is_dir(path):
            raise FileNotFoundError(path)
        names = {key[len(prefix):].split(os.sep, 1)[0] for key in self._files if key.startswith(prefix)}
        return sorted(names)

    def read_text(self, path: str) -> str:
        try:
            return self._files[self._key(path)]
        except KeyError:
            raise FileNotFoundError(path) from None

    def write_text(self, path: str, content: str) -> None:
        self._files[self._key(path)] = content

    def files(self) -> Dict[str, str]:
        """Return a snapshot of every stored file."""
        return dict(self._files)


__all__ = ["FileStorage", "MemoryStorage", "Storage"]
