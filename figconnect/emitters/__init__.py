"""Code Connect emitters and their registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Tuple

from ..registry import Registry, load_entry_points
from .base import DEFAULT_IMPORT_BASE, EmitOptions, Emitter
from .react import ReactEmitter, resolve_react_import_path
from .webcomponent import WebComponentEmitter

_ENTRY_POINT_GROUP = "figconnect.emitters"


@dataclass(frozen=True)
class EmitterMetadata:
    display_name: str
    description: str
    file_extension: str


_BUILTIN_FACTORIES = {
    WebComponentEmitter.target: (
        WebComponentEmitter,
        EmitterMetadata(
            display_name="Web Component",
            description="Figma Code Connect for custom elements using lit-html examples",
            file_extension=WebComponentEmitter.file_suffix,
        ),
    ),
    ReactEmitter.target: (
        ReactEmitter,
        EmitterMetadata(
            display_name="React",
            description="Figma Code Connect for the React wrappers of each component",
            file_extension=ReactEmitter.file_suffix,
        ),
    ),
}


def create_emitter_registry(*, include_plugins: bool = True) -> Registry[Emitter, EmitterMetadata]:
    """Return a registry holding the built-in emitters plus installed plugins."""
    registry: Registry[Emitter, EmitterMetadata] = Registry("Emitter")
    for target, (factory, meta) in _BUILTIN_FACTORIES.items():
        registry.register(target, factory, meta)
    if include_plugins:
        load_entry_points(registry, _ENTRY_POINT_GROUP, _coerce_emitter)
    return registry


def _coerce_emitter(name: str, obj: object) -> Tuple[Callable[[], Emitter], EmitterMetadata]:
    if not callable(obj):
        raise TypeError(f"Emitter entry point '{name}' must be an emitter class or factory")
    meta = getattr(obj, "metadata", None)
    if not isinstance(meta, EmitterMetadata):
        meta = EmitterMetadata(
            display_name=name,
            description=(getattr(obj, "__doc__", None) or "").strip(),
            file_extension=getattr(obj, "file_suffix", ""),
        )
    return obj, meta  # type: ignore[return-value]


__all__ = [
    "DEFAULT_IMPORT_BASE",
    "EmitOptions",
    "Emitter",
    "EmitterMetadata",
    "ReactEmitter",
    "WebComponentEmitter",
    "create_emitter_registry",
    "resolve_react_import_path",
]
