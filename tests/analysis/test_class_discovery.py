"""Tests for selecting the component class of a source file."""

from __future__ import annotations

import pytest

from figconnect.analysis.classlike import ClassKind
from figconnect.analysis.discovery import DiscoveryMethod, discover_component_class
from tests._fixtures.component_builder import load_module


def _discover(source: str):
    _, module = load_module({"button/button.component.ts": source}, "button/button.component.ts")
    return discover_component_class(module)


@pytest.mark.parametrize(
    ("source", "expected_name", "expected_method"),
    [
        (
            """
            class Helper {}
            export default class Button {}
            """,
            "Button",
            DiscoveryMethod.DEFAULT_EXPORT,
        ),
        (
            """
            class Helper {}
            class Button {}
            export default Button;
            """,
            "Button",
            DiscoveryMethod.DEFAULT_EXPORT,
        ),
        (
            """
            class Helper {}
            @customElement('mdc-button')
            export class Button {}
            """,
            "Button",
            DiscoveryMethod.CUSTOM_ELEMENT,
        ),
        (
            """
            class Helper {}
            /** @tagname mdc-button */
            class Button {}
            """,
            "Button",
            DiscoveryMethod.TAGNAME_JSDOC,
        ),
        (
            """
            class First {}
            class Second {}
            """,
            "First",
            DiscoveryMethod.FIRST_CLASS,
        ),
    ],
)
def test_discovery_precedence(source: str, expected_name: str, expected_method: DiscoveryMethod) -> None:
    discovered = _discover(source)
    assert discovered is not None
    assert discovered.klass.name == expected_name
    assert discovered.method is expected_method


def test_no_class_returns_none() -> None:
    assert _discover("export const value = 1;\n") is None


def test_anonymous_default_export_is_discovered() -> None:
    discovered = _discover(
        """
        class Helper {}
        export default class extends HTMLElement {}
        """
    )
    assert discovered is not None
    assert discovered.method is DiscoveryMethod.DEFAULT_EXPORT
    assert discovered.klass.kind is ClassKind.EXPRESSION
    assert discovered.klass.name is None
