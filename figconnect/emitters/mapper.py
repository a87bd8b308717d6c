"""Mapping helpers shared by the Code Connect emitters."""

from __future__ import annotations

import json
import re
from typing import List, Optional, Sequence, Tuple, TypeVar

from ..models import BindingDescriptor, ComponentModel, FieldDescriptor, ValueKind
from ..utils import is_identifier, posix_basename, to_title_case

T = TypeVar("T")

_COMPONENT_FILE = re.compile(r"^(.*)\.component\.[tj]sx?$", re.IGNORECASE)

_SIMPLE_EXPRESSIONS = {
    ValueKind.STRING: "figma.string",
    ValueKind.NUMBER: "figma.string",
    ValueKind.BOOLEAN: "figma.boolean",
}


def indent(depth: int) -> str:
    return "  " * depth


def quote(value: str) -> str:
    """Render ``value`` as a single-quoted TypeScript string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


def format_prop_key(name: str) -> str:
    return name if is_identifier(name) else quote(name)


def format_prop_accessor(name: str) -> str:
    return f"props.{name}" if is_identifier(name) else f"props[{quote(name)}]"


def _name_key(value: str) -> Tuple[str, str]:
    return value.lower(), value


def sort_by_name(items: Sequence[T], attr: str = "name") -> List[T]:
    return sorted(items, key=lambda item: _name_key(getattr(item, attr)))


def component_base_name(model: ComponentModel) -> str:
    """``button`` for ``button.component.ts``; the directory name otherwise."""
    match = _COMPONENT_FILE.match(posix_basename(model.file_path))
    if match and match.group(1):
        return match.group(1)
    return posix_basename(model.component_dir)


def figma_url(base_name: str) -> str:
    return f"<FIGMA_{base_name.upper()}_URL>"


def map_prop(field: FieldDescriptor) -> Tuple[List[str], Optional[str]]:
    """Return the Figma expression lines for a field plus an optional warning."""
    label = to_title_case(field.name)
    if field.value_kind is ValueKind.ENUM and field.enum_values:
        lines = [f"figma.enum({quote(label)}, {{"]
        for value in sorted(field.enum_values, key=_name_key):
            lines.append(f"{quote(to_title_case(value))}: {json.dumps(value)},")
        lines.append("})")
        return lines, None

    expression = _SIMPLE_EXPRESSIONS.get(field.value_kind)
    if expression is not None:
        return [f"{expression}({quote(label)})"], None

    warning = (
        f"Property '{field.name}' has unknown type '{field.value_kind.value}'. "
        "Emitting as figma.string()."
    )
    return [f"figma.string({quote(label)})"], warning


def build_props_section(fields: Sequence[FieldDescriptor], depth: int = 0) -> Tuple[List[str], List[str]]:
    """Render the ``props: {...},`` block, sorted by field name."""
    if not fields:
        return [f"{indent(depth)}props: {{}},"], []

    lines = [f"{indent(depth)}props: {{"]
    warnings: List[str] = []
    for field in sort_by_name(fields):
        expression, warning = map_prop(field)
        if warning:
            warnings.append(warning)
        key = format_prop_key(field.name)
        if len(expression) == 1:
            lines.append(f"{indent(depth + 1)}{key}: {expression[0]},")
            continue
        lines.append(f"{indent(depth + 1)}{key}: {expression[0]}")
        lines.extend(f"{indent(depth + 2)}{inner}" for inner in expression[1:-1])
        lines.append(f"{indent(depth + 1)}{expression[-1]},")
    lines.append(f"{indent(depth)}}},")
    return lines, warnings


def build_html_example(tag_name: str, bindings: Sequence[BindingDescriptor]) -> str:
    """Render the lit-html example arrow function for a custom element."""
    if not bindings:
        return f"() => html`<{tag_name}></{tag_name}>`"

    lines = [f"props => html`<{tag_name}"]
    for binding in sort_by_name(bindings, "binding_name"):
        accessor = format_prop_accessor(binding.source_field_name)
        if binding.value_kind is ValueKind.BOOLEAN:
            lines.append(f"{indent(1)}?{binding.binding_name}=${{{accessor}}}")
        else:
            lines.append(f'{indent(1)}{binding.binding_name}="${{{accessor}}}"')
    lines.append(f"></{tag_name}>`")
    return "\n".join(lines)


def build_react_example(class_name: str) -> str:
    return "\n".join(
        [
            "example: props => {",
            f"{indent(1)}return <{class_name} {{...props}} />;",
            "},",
        ]
    )


__all__ = [
    "build_html_example",
    "build_props_section",
    "build_react_example",
    "component_base_name",
    "figma_url",
    "format_prop_accessor",
    "format_prop_key",
    "indent",
    "map_prop",
    "quote",
    "sort_by_name",
]
