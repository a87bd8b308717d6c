"""Tests for the shared Figma prop mapping helpers."""

from __future__ import annotations

from figconnect.emitters.mapper import (
    build_html_example,
    build_props_section,
    component_base_name,
    format_prop_accessor,
    format_prop_key,
    map_prop,
    quote,
)
from figconnect.models import BindingDescriptor, ComponentModel, FieldDescriptor, ValueKind


def _field(name: str, kind: ValueKind, enum_values=None) -> FieldDescriptor:
    return FieldDescriptor(name=name, binding_name=name, value_kind=kind, enum_values=enum_values)


def test_map_prop_simple_kinds() -> None:
    assert map_prop(_field("headerText", ValueKind.STRING)) == (["figma.string('Header Text')"], None)
    assert map_prop(_field("count", ValueKind.NUMBER)) == (["figma.string('Count')"], None)
    assert map_prop(_field("disabled", ValueKind.BOOLEAN)) == (["figma.boolean('Disabled')"], None)


def test_map_prop_enum_sorts_and_quotes_values() -> None:
    lines, warning = map_prop(_field("variant", ValueKind.ENUM, ("secondary", "primary", "dark-mode")))
    assert warning is None
    assert lines == [
        "figma.enum('Variant', {",
        "'Dark Mode': \"dark-mode\",",
        "'Primary': \"primary\",",
        "'Secondary': \"secondary\",",
        "})",
    ]


def test_map_prop_unknown_kind_warns_once() -> None:
    lines, warning = map_prop(_field("items", ValueKind.UNKNOWN))
    assert lines == ["figma.string('Items')"]
    assert warning == "Property 'items' has unknown type 'unknown'. Emitting as figma.string()."


def test_props_section_is_sorted_with_quoted_keys() -> None:
    lines, warnings = build_props_section(
        [
            _field("variant", ValueKind.ENUM, ("b", "a")),
            _field("data-value", ValueKind.STRING),
            _field("ariaLabel", ValueKind.STRING),
            _field("items", ValueKind.UNKNOWN),
        ]
    )
    assert lines == [
        "props: {",
        "  ariaLabel: figma.string('Aria Label'),",
        "  'data-value': figma.string('Data Value'),",
        "  items: figma.string('Items'),",
        "  variant: figma.enum('Variant', {",
        "    'A': \"a\",",
        "    'B': \"b\",",
        "  }),",
        "},",
    ]
    assert len(warnings) == 1


def test_empty_props_section() -> None:
    assert build_props_section([]) == (["props: {},"], [])


def test_key_and_accessor_formatting() -> None:
    assert format_prop_key("label") == "label"
    assert format_prop_key("data-id") == "'data-id'"
    assert format_prop_accessor("label") == "props.label"
    assert format_prop_accessor("data-id") == "props['data-id']"


def test_map_prop_escapes_quotes_in_labels_and_keys() -> None:
    lines, _ = map_prop(_field("variant", ValueKind.ENUM, ("it's", "c:\\temp")))
    assert lines == [
        "figma.enum('Variant', {",
        "'C:\\\\temp': \"c:\\\\temp\",",
        "'It\\'s': \"it's\",",
        "})",
    ]
    assert quote("say 'hi'\n") == "'say \\'hi\\'\\n'"
    assert format_prop_key("it's") == "'it\\'s'"
    assert format_prop_accessor("it's") == "props['it\\'s']"


def test_html_example_bindings() -> None:
    bindings = [
        BindingDescriptor("open", "open", ValueKind.BOOLEAN),
        BindingDescriptor("aria-label", "ariaLabel", ValueKind.STRING),
    ]
    assert build_html_example("mdc-button", bindings) == (
        "props => html`<mdc-button\n"
        '  aria-label="${props.ariaLabel}"\n'
        "  ?open=${props.open}\n"
        "></mdc-button>`"
    )
    assert build_html_example("mdc-divider", []) == "() => html`<mdc-divider></mdc-divider>`"


def test_component_base_name_prefers_file_name() -> None:
    model = ComponentModel(
        class_name="Button",
        tag_name="mdc-button",
        file_path="/lib/src/components/button/Button.Component.tsx",
        component_dir="/lib/src/components/button",
        import_path="components/button",
    )
    assert component_base_name(model) == "Button"

    fallback = ComponentModel(
        class_name="Button",
        tag_name="mdc-button",
        file_path="/lib/src/components/button/index.ts",
        component_dir="/lib/src/components/button",
        import_path="components/button",
    )
    assert component_base_name(fallback) == "button"
