"""Normalization of extracted members into a :class:`ComponentModel`."""

from __future__ import annotations

import posixpath
from typing import List, Optional, Sequence

from .models import BindingDescriptor, ComponentModel, EventDescriptor, FieldDescriptor
from .utils import merge_by_key, normalize_path

UNKNOWN_COMPONENT = "UnknownComponent"
_SRC_MARKER = "/src/"


def field_to_binding(descriptor: FieldDescriptor) -> Optional[BindingDescriptor]:
    if not descriptor.binding_name:
        return None
    return BindingDescriptor(
        binding_name=descriptor.binding_name,
        source_field_name=descriptor.name,
        value_kind=descriptor.value_kind,
        reflects=descriptor.reflects,
        default_value=descriptor.default_value,
        doc=descriptor.doc,
    )


def map_bindings(fields: Sequence[FieldDescriptor]) -> List[BindingDescriptor]:
    """Derive bindings from fields, last binding name wins."""
    bindings = [binding for binding in map(field_to_binding, fields) if binding is not None]
    merged = merge_by_key(bindings, lambda binding: binding.binding_name, lambda _old, new: new)
    return list(merged.values())


def derive_import_path(component_dir: str) -> str:
    """Return the path after the last ``/src/`` segment, else the directory name."""
    normalized = normalize_path(component_dir)
    index = normalized.rfind(_SRC_MARKER)
    if index >= 0:
        relative = normalized[index + len(_SRC_MARKER):].strip("/")
        if relative:
            return relative
    return posixpath.basename(normalized.rstrip("/"))


def map_component_model(
    *,
    class_name: Optional[str],
    tag_name: str,
    file_path: str,
    component_dir: str,
    fields: Sequence[FieldDescriptor] = (),
    events: Sequence[EventDescriptor] = (),
) -> ComponentModel:
    name = (class_name or "").strip() or UNKNOWN_COMPONENT
    field_map = merge_by_key(fields, lambda descriptor: descriptor.name, lambda _old, new: new)
    event_map = merge_by_key(events, lambda event: event.name, lambda _old, new: new)
    unique_fields = list(field_map.values())
    return ComponentModel(
        class_name=name,
        tag_name=tag_name,
        file_path=file_path,
        component_dir=component_dir,
        import_path=derive_import_path(component_dir),
        fields=tuple(unique_fields),
        bindings=tuple(map_bindings(unique_fields)),
        events=tuple(event_map.values()),
    )


__all__ = [
    "UNKNOWN_COMPONENT",
    "derive_import_path",
    "field_to_binding",
    "map_bindings",
    "map_component_model",
]
