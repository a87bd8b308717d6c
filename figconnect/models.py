"""Core data models shared across figconnect components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

DefaultValue = Union[str, int, float, bool, None]


class ValueKind(str, Enum):
    """Value kinds understood by the Code Connect mapping."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"
    UNKNOWN = "unknown"


class Visibility(str, Enum):
    """Visibility of an extracted field."""

    PUBLIC = "public"
    PROTECTED = "protected"


class SectionName(str, Enum):
    """Names of the generated sections every emitter produces."""

    PROPS = "props"
    EXAMPLE = "example"


@dataclass(frozen=True)
class FieldDescriptor:
    """A decorated field resolved from a class in the inheritance chain."""

    name: str
    binding_name: Optional[str]
    value_kind: ValueKind
    ts_type: str = "unknown"
    reflects: bool = False
    default_value: DefaultValue = None
    doc: Optional[str] = None
    visibility: Visibility = Visibility.PUBLIC
    enum_values: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class BindingDescriptor:
    """String-keyed attribute binding derived from a field."""

    binding_name: str
    source_field_name: str
    value_kind: ValueKind
    reflects: bool = False
    default_value: DefaultValue = None
    doc: Optional[str] = None


@dataclass(frozen=True)
class EventDescriptor:
    """An event a component dispatches or documents."""

    name: str
    handler_name: str
    detail_type: Optional[str] = None


@dataclass(frozen=True)
class ComponentModel:
    """Canonical description of a component handed to emitters."""

    class_name: str
    tag_name: str
    file_path: str
    component_dir: str
    import_path: str
    fields: Tuple[FieldDescriptor, ...] = ()
    bindings: Tuple[BindingDescriptor, ...] = ()
    events: Tuple[EventDescriptor, ...] = ()


@dataclass(frozen=True)
class SectionMarkers:
    """Start/end marker lines delimiting a generated section."""

    start: str
    end: str


@dataclass(frozen=True)
class GeneratedSection:
    """Payload for one generated section of an output file."""

    content: str
    name: Optional[SectionName] = None
    markers: Optional[SectionMarkers] = None


@dataclass
class EmitResult:
    """Output of an emitter for a single component."""

    file_path: str
    content: str
    sections: List[GeneratedSection] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


__all__ = [
    "BindingDescriptor",
    "ComponentModel",
    "DefaultValue",
    "EmitResult",
    "EventDescriptor",
    "FieldDescriptor",
    "GeneratedSection",
    "SectionMarkers",
    "SectionName",
    "ValueKind",
    "Visibility",
]
