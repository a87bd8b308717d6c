"""Component file discovery."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .logging import get_logger
from .storage import FileStorage, Storage

COMPONENT_SUFFIX = ".component.ts"
DEFAULT_EXCLUDE_DIRS = ("node_modules", "dist")


@dataclass(frozen=True)
class DiscoveredFile:
    """Metadata for a discovered component source file."""

    file_path: str
    relative_path: str
    file_name: str
    component_name: str
    dir_path: str


class ComponentScanner:
    """Locates component source files under a file or directory path."""

    def __init__(
        self,
        storage: Optional[Storage] = None,
        *,
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
        suffix: str = COMPONENT_SUFFIX,
    ) -> None:
        self.storage = storage or FileStorage()
        self.exclude_dirs = {name.lower() for name in exclude_dirs}
        self.suffix = suffix.lower()
        self.logger = get_logger("scanner")

    def is_component_file(self, path: str) -> bool:
        return path.lower().endswith(self.suffix)

    def discover(self, path: str, *, recursive: bool = False) -> List[DiscoveredFile]:
        """Return discovered files sorted by absolute path.

        A missing path yields an empty list; the caller decides whether that
        deserves a warning.
        """
        if not path:
            return []
        resolved = os.path.abspath(path)
        if not self.storage.exists(resolved):
            return []

        is_dir = self.storage.is_dir(resolved)
        root_dir = resolved if is_dir else os.path.dirname(resolved)
        results: List[DiscoveredFile] = []

        if is_dir:
            for file_path in self._iter_files(resolved, recursive):
                self._add(file_path, root_dir, results)
        else:
            self._add(resolved, root_dir, results)

        results.sort(key=lambda item: item.file_path)
        self.logger.debug("Discovered %d component file(s) under %s", len(results), resolved)
        return results

    def _iter_files(self, dir_path: str, recursive: bool) -> Iterable[str]:
        for name in self.storage.list_dir(dir_path):
            entry = os.path.join(dir_path, name)
            if self.storage.is_dir(entry):
                if name.lower() in self.exclude_dirs or not recursive:
                    continue
                yield from self._iter_files(entry, recursive)
            elif self.storage.is_file(entry):
                yield entry

    def _add(self, file_path: str, root_dir: str, results: List[DiscoveredFile]) -> None:
        if not self.is_component_file(file_path):
            return
        file_name = os.path.basename(file_path)
        results.append(
            DiscoveredFile(
                file_path=file_path,
                relative_path=os.path.relpath(file_path, root_dir).replace(os.sep, "/"),
                file_name=file_name,
                component_name=file_name[: -len(self.suffix)],
                dir_path=os.path.dirname(file_path),
            )
        )


__all__ = ["COMPONENT_SUFFIX", "ComponentScanner", "DEFAULT_EXCLUDE_DIRS", "DiscoveredFile"]
