"""Code Connect emitter for the generated React wrappers."""

from __future__ import annotations

import posixpath
from typing import Optional

from ..models import ComponentModel, EmitResult
from ..utils import normalize_path
from .base import CODE_CONNECT_DIR, EmitOptions, Emitter
from .mapper import build_react_example

_SRC_MARKER = "/src/"


def resolve_react_import_path(component_dir: str, base_import_path: Optional[str] = None) -> str:
    """Return where the React wrapper of a component is imported from.

    With a base import path this is ``<base>/dist/react``. Otherwise the
    package root is taken to be the directory above the last ``/src/``
    segment and the path is made relative to the ``code-connect`` folder.
    """
    if base_import_path:
        return f"{base_import_path}/dist/react"

    directory = normalize_path(component_dir)
    marker = directory.rfind(_SRC_MARKER)
    root = directory[:marker] if marker >= 0 else posixpath.dirname(directory)
    dist_react = posixpath.join(root or "/", "dist", "react")
    relative = posixpath.relpath(dist_react, posixpath.join(directory, CODE_CONNECT_DIR))
    if not relative.startswith("."):
        relative = f"./{relative}"
    return relative


class ReactEmitter(Emitter):
    """Produces ``<name>.react.figma.tsx`` next to the component."""

    target = "react"
    template_name = "react.figma.tsx.j2"
    file_suffix = ".react.figma.tsx"

    def emit(self, model: ComponentModel, options: EmitOptions) -> EmitResult:
        return self.build(
            model,
            options,
            build_react_example(model.class_name),
            import_path=resolve_react_import_path(model.component_dir, options.base_import_path),
        )


__all__ = ["ReactEmitter", "resolve_react_import_path"]
