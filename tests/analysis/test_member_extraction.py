"""Tests for decorated field extraction."""

from __future__ import annotations

from figconnect.analysis.discovery import discover_component_class
from figconnect.analysis.inheritance import InheritanceResolver
from figconnect.analysis.members import MemberExtractor, resolve_value_kind
from figconnect.models import ValueKind, Visibility
from tests._fixtures.component_builder import load_module


def _fields(source: str, *, extra=None, annotations=("property",)):
    files = {"button/button.component.ts": source, **(extra or {})}
    tree, module = load_module(files, "button/button.component.ts")
    discovered = discover_component_class(module)
    assert discovered is not None
    chain = InheritanceResolver(tree).resolve(discovered.klass).chain
    result = MemberExtractor(tree, annotations).extract(chain)
    return {descriptor.name: descriptor for descriptor in result.value}, result.warnings


def test_decorator_options_drive_binding_and_kind() -> None:
    fields, warnings = _fields(
        """
        export default class Button {
          /** Accessible label announced by screen readers. */
          @property({ type: String, attribute: 'aria-label', reflect: true })
          ariaLabel?: string;

          @property({ type: Boolean })
          expanded = false;

          @property({ type: Number, attribute: false })
          tabIndexValue = 0;

          @property()
          headerText = 'Title';
        }
        """
    )
    assert warnings == []
    label = fields["ariaLabel"]
    assert label.binding_name == "aria-label"
    assert label.value_kind is ValueKind.STRING
    assert label.reflects is True
    assert label.doc == "Accessible label announced by screen readers."

    assert fields["expanded"].binding_name == "expanded"
    assert fields["expanded"].value_kind is ValueKind.BOOLEAN
    assert fields["expanded"].default_value is False

    assert fields["tabIndexValue"].binding_name is None
    assert fields["tabIndexValue"].value_kind is ValueKind.NUMBER

    header = fields["headerText"]
    assert header.binding_name == "header-text"
    assert header.value_kind is ValueKind.STRING
    assert header.ts_type == "string"
    assert header.default_value == "Title"


def test_string_literal_unions_become_enums() -> None:
    fields, _ = _fields(
        """
        type ButtonSize = 'sm' | 'md' | 'lg';

        export default class Button {
          @property({ type: String })
          variant: 'primary' | 'secondary' = 'primary';

          @property({ type: String })
          size: ButtonSize = 'md';

          @property({ type: String })
          iconTagName: 'mdc-icon' | 'mdc-avatar' = 'mdc-icon';
        }
        """
    )
    assert fields["variant"].value_kind is ValueKind.ENUM
    assert fields["variant"].enum_values == ("primary", "secondary")
    assert fields["size"].value_kind is ValueKind.ENUM
    assert fields["size"].enum_values == ("sm", "md", "lg")
    assert fields["iconTagName"].value_kind is ValueKind.STRING
    assert fields["iconTagName"].enum_values is None


def test_private_and_undecorated_members_are_ignored() -> None:
    fields, _ = _fields(
        """
        export default class Button {
          @property({ type: String })
          private secret = 'x';

          @property({ type: String })
          #hidden = 'y';

          plain = 'z';

          @state()
          internal = true;

          @property({ type: String })
          protected tone = 'neutral';
        }
        """
    )
    assert set(fields) == {"tone"}
    assert fields["tone"].visibility is Visibility.PROTECTED


def test_getter_fields_use_return_type() -> None:
    fields, _ = _fields(
        """
        export default class Button {
          @property({ type: Boolean })
          get active(): boolean {
            return true;
          }
        }
        """
    )
    assert fields["active"].value_kind is ValueKind.BOOLEAN
    assert fields["active"].ts_type == "boolean"


def test_descendant_overrides_ancestor_but_keeps_position() -> None:
    fields, _ = _fields(
        """
        import { Base } from '../base/base';

        export default class Button extends Base {
          @property({ type: String, attribute: 'data-size' })
          size = 'md';
        }
        """,
        extra={
            "base/base.ts": """
                export class Base {
                  @property({ type: Number })
                  size = 1;

                  @property({ type: Boolean })
                  disabled = false;
                }
            """,
        },
    )
    assert list(fields) == ["size", "disabled"]
    assert fields["size"].value_kind is ValueKind.STRING
    assert fields["size"].binding_name == "data-size"


def test_custom_annotation_names() -> None:
    fields, _ = _fields(
        """
        export default class Button {
          @attr({ type: String })
          label = '';

          @property({ type: String })
          ignored = '';
        }
        """,
        annotations=("attr",),
    )
    assert set(fields) == {"label"}


def test_unknown_types_fall_back_to_unknown_kind() -> None:
    fields, _ = _fields(
        """
        export default class Button {
          @property()
          items: string[] = [];
        }
        """
    )
    assert fields["items"].value_kind is ValueKind.UNKNOWN


def test_resolve_value_kind_precedence() -> None:
    assert resolve_value_kind("Boolean", [], "string", "open") is ValueKind.BOOLEAN
    assert resolve_value_kind(None, ["a", "b"], "unknown", "variant") is ValueKind.ENUM
    assert resolve_value_kind(None, ["a"], "unknown", "buttonTagName") is ValueKind.STRING
    assert resolve_value_kind(None, [], "Number", "count") is ValueKind.NUMBER
    assert resolve_value_kind("Object", [], "unknown", "data") is ValueKind.UNKNOWN
