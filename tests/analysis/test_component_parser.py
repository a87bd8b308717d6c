"""Tests for the web component parser and parser registry."""

from __future__ import annotations

import os

import pytest

from figconnect.analysis import ComponentParser, ParseContext, ParserMetadata, create_parser_registry
from figconnect.analysis.parser import NO_CLASS_ERROR
from figconnect.models import ValueKind
from figconnect.registry import RegistrationError
from tests._fixtures.component_builder import MEMORY_ROOT, load_module

ENTRY = "src/components/button/button.component.ts"
COMPONENT_DIR = os.path.join(MEMORY_ROOT, "src", "components", "button")


def _parse(files, *, strict=True):
    tree, module = load_module(files, ENTRY)
    context = ParseContext(
        tree=tree,
        module=module,
        file_path=module.path,
        component_dir=COMPONENT_DIR,
        strict=strict,
    )
    return ComponentParser().parse(context)


def test_parses_component_model() -> None:
    result = _parse(
        {
            ENTRY: """
                /**
                 * @tagname mdc-button
                 * @event click
                 */
                export default class Button {
                  @property({ type: String, attribute: 'aria-label' })
                  ariaLabel?: string;

                  @property({ type: Boolean })
                  disabled = false;
                }
            """,
        }
    )
    assert result.ok
    model = result.value
    assert model is not None
    assert model.class_name == "Button"
    assert model.tag_name == "mdc-button"
    assert model.import_path == "components/button"
    assert [field.name for field in model.fields] == ["ariaLabel", "disabled"]
    assert {binding.binding_name: binding.value_kind for binding in model.bindings} == {
        "aria-label": ValueKind.STRING,
        "disabled": ValueKind.BOOLEAN,
    }
    assert [event.name for event in model.events] == ["click"]


def test_missing_class_is_an_error() -> None:
    result = _parse({ENTRY: "export const nothing = true;\n"})
    assert result.value is None
    assert result.errors == [NO_CLASS_ERROR]


def test_anonymous_default_export_becomes_unknown_component() -> None:
    result = _parse(
        {
            ENTRY: """
                /** @tagname my-anon */
                export default class extends HTMLElement {
                  @property({ type: String })
                  label = 'Hi';
                }
            """,
        }
    )
    assert result.ok
    model = result.value
    assert model is not None
    assert model.class_name == "UnknownComponent"
    assert model.tag_name == "my-anon"
    assert [field.name for field in model.fields] == ["label"]


def test_strict_mode_turns_unresolved_bases_into_one_error() -> None:
    files = {
        ENTRY: """
            import { Gone } from './gone';
            import { Lost } from './lost';

            export default class Button extends Mixed(Gone, Lost) {}
        """,
    }
    strict = _parse(files, strict=True)
    assert strict.value is not None
    assert len(strict.errors) == 1
    assert strict.errors[0].startswith("Unable to resolve base classes for: Gone, Lost")
    assert not any(warning.startswith("Unable to resolve base class for expression") for warning in strict.warnings)

    lenient = _parse(files, strict=False)
    assert lenient.errors == []
    assert "Unable to resolve base class for expression: Gone" in lenient.warnings
    assert "Unable to resolve base class for expression: Lost" in lenient.warnings


def test_parser_registry_defaults_and_duplicates() -> None:
    registry = create_parser_registry(include_plugins=False)
    assert registry.targets() == ["webcomponent"]
    assert registry.default_target() == "webcomponent"
    assert isinstance(registry.metadata("webcomponent"), ParserMetadata)
    assert isinstance(registry.create("webcomponent"), ComponentParser)

    with pytest.raises(RegistrationError):
        registry.register("webcomponent", ComponentParser, registry.metadata("webcomponent"))


def test_parser_registry_passes_annotations() -> None:
    registry = create_parser_registry(["attr"], include_plugins=False)
    parser = registry.create("webcomponent")
    assert parser.annotations == ("attr",)
