"""String, path and merge helpers shared across figconnect modules."""

from __future__ import annotations

import os
import re
from pathlib import PurePosixPath
from typing import Callable, Dict, Hashable, Iterable, Optional, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def to_kebab_case(value: str) -> str:
    """Convert camelCase, PascalCase, snake_case or spaced text to kebab-case."""
    result = _CAMEL_BOUNDARY.sub(r"\1-\2", value or "")
    result = re.sub(r"[_\s]+", "-", result)
    result = re.sub(r"-+", "-", result)
    return result.strip("-").lower()


def to_pascal_case(value: str) -> str:
    """Convert kebab-case, snake_case or spaced text to PascalCase."""
    spaced = _CAMEL_BOUNDARY.sub(r"\1 \2", value or "")
    spaced = re.sub(r"[^a-zA-Z0-9]+", " ", spaced)
    return "".join(token[:1].upper() + token[1:] for token in spaced.split())


def to_title_case(value: str) -> str:
    """Convert identifiers such as ``headerText`` or ``dark-mode`` into ``Header Text``."""
    spaced = re.sub(r"[_-]+", " ", value or "")
    spaced = _CAMEL_BOUNDARY.sub(r"\1 \2", spaced)
    return " ".join(token[:1].upper() + token[1:].lower() for token in spaced.split())


def is_identifier(value: str) -> bool:
    return bool(_IDENTIFIER.match(value))


def merge_by_key(
    items: Iterable[T],
    key: Callable[[T], K],
    merge: Optional[Callable[[T, T], T]] = None,
) -> Dict[K, T]:
    """Merge items into an insertion-ordered mapping, later items winning by default.

    A key keeps the position of its first occurrence; its value is replaced
    by the merge of the existing and incoming item.
    """
    merged: Dict[K, T] = {}
    for item in items:
        item_key = key(item)
        if item_key in merged and merge is not None:
            merged[item_key] = merge(merged[item_key], item)
        else:
            merged[item_key] = item
    return merged


def normalize_path(value: str) -> str:
    """Return an absolute path using forward slashes."""
    if not value:
        return ""
    return os.path.abspath(value).replace("\\", "/")


def posix_basename(value: str) -> str:
    return PurePosixPath(normalize_path(value)).name


__all__ = [
    "is_identifier",
    "merge_by_key",
    "normalize_path",
    "posix_basename",
    "to_kebab_case",
    "to_pascal_case",
    "to_title_case",
]
