"""Tests for the web component and React emitters."""

from __future__ import annotations

from pathlib import Path

import pytest

from figconnect.emitters import (
    EmitOptions,
    EmitterMetadata,
    ReactEmitter,
    WebComponentEmitter,
    create_emitter_registry,
    resolve_react_import_path,
)
from figconnect.models import BindingDescriptor, ComponentModel, FieldDescriptor, SectionName, ValueKind
from figconnect.registry import RegistrationError

COMPONENT_DIR = "/lib/src/components/button"


@pytest.fixture
def model() -> ComponentModel:
    return ComponentModel(
        class_name="Button",
        tag_name="mdc-button",
        file_path=f"{COMPONENT_DIR}/button.component.ts",
        component_dir=COMPONENT_DIR,
        import_path="components/button",
        fields=(
            FieldDescriptor("headerText", "header-text", ValueKind.STRING),
            FieldDescriptor("expanded", "expanded", ValueKind.BOOLEAN),
        ),
        bindings=(
            BindingDescriptor("header-text", "headerText", ValueKind.STRING),
            BindingDescriptor("expanded", "expanded", ValueKind.BOOLEAN),
        ),
    )


def test_webcomponent_file_layout(model: ComponentModel) -> None:
    result = WebComponentEmitter().emit(model, EmitOptions())
    assert result.file_path == f"{COMPONENT_DIR}/code-connect/button.webcomponent.figma.ts"
    assert result.content == (
        "// @ts-ignore\n"
        "import figma, { html } from '@figma/code-connect/html';\n"
        "\n"
        "figma.connect('<FIGMA_BUTTON_URL>', {\n"
        "  // BEGIN GENERATED: props\n"
        "  props: {\n"
        "    expanded: figma.boolean('Expanded'),\n"
        "    headerText: figma.string('Header Text'),\n"
        "  },\n"
        "  // END GENERATED: props\n"
        "  // BEGIN GENERATED: example\n"
        "  example: props => html`<mdc-button\n"
        "    ?expanded=${props.expanded}\n"
        '    header-text="${props.headerText}"\n'
        "  ></mdc-button>`,\n"
        "  // END GENERATED: example\n"
        "  imports: [\"import '@momentum-design/components/components/button';\"],\n"
        "});\n"
    )
    assert [section.name for section in result.sections] == [SectionName.PROPS, SectionName.EXAMPLE]
    assert result.warnings == []


def test_webcomponent_uses_base_import_path(model: ComponentModel) -> None:
    result = WebComponentEmitter().emit(model, EmitOptions(base_import_path="@acme/ui"))
    assert "imports: [\"import '@acme/ui/components/button';\"]," in result.content


def test_react_file_layout(model: ComponentModel) -> None:
    result = ReactEmitter().emit(model, EmitOptions(base_import_path="@acme/ui"))
    assert result.file_path == f"{COMPONENT_DIR}/code-connect/button.react.figma.tsx"
    assert result.content == (
        "import { Button } from '@acme/ui/dist/react';\n"
        "import figma from '@figma/code-connect';\n"
        "\n"
        "figma.connect('<FIGMA_BUTTON_URL>', {\n"
        "  // BEGIN GENERATED: props\n"
        "  props: {\n"
        "    expanded: figma.boolean('Expanded'),\n"
        "    headerText: figma.string('Header Text'),\n"
        "  },\n"
        "  // END GENERATED: props\n"
        "  // BEGIN GENERATED: example\n"
        "  example: props => {\n"
        "    return <Button {...props} />;\n"
        "  },\n"
        "  // END GENERATED: example\n"
        "});\n"
    )


def test_react_import_path_without_base() -> None:
    assert resolve_react_import_path(COMPONENT_DIR) == "../../../../dist/react"
    assert resolve_react_import_path("/lib/button") == "../../dist/react"
    assert resolve_react_import_path(COMPONENT_DIR, "@acme/ui") == "@acme/ui/dist/react"


def test_unknown_kinds_produce_one_warning_per_field(model: ComponentModel) -> None:
    unknown = ComponentModel(
        class_name=model.class_name,
        tag_name=model.tag_name,
        file_path=model.file_path,
        component_dir=model.component_dir,
        import_path=model.import_path,
        fields=(FieldDescriptor("items", "items", ValueKind.UNKNOWN),),
    )
    result = ReactEmitter().emit(unknown, EmitOptions())
    assert result.warnings == ["Property 'items' has unknown type 'unknown'. Emitting as figma.string()."]


def test_custom_templates_directory_overrides_bundled(model: ComponentModel, tmp_path: Path) -> None:
    (tmp_path / "react.figma.tsx.j2").write_text(
        "// custom\nfigma.connect('{{ figma_url }}', {\n{{ sections }}\n});\n",
        encoding="utf-8",
    )
    result = ReactEmitter().emit(model, EmitOptions(templates_dir=str(tmp_path)))
    assert result.content.startswith("// custom\nfigma.connect('<FIGMA_BUTTON_URL>', {\n  // BEGIN GENERATED: props\n")

    bundled = WebComponentEmitter().emit(model, EmitOptions(templates_dir=str(tmp_path)))
    assert bundled.content.startswith("// @ts-ignore\n")


def test_emitter_registry() -> None:
    registry = create_emitter_registry(include_plugins=False)
    assert registry.targets() == ["webcomponent", "react"]
    assert isinstance(registry.create("react"), ReactEmitter)
    meta = registry.metadata("webcomponent")
    assert isinstance(meta, EmitterMetadata)
    assert meta.file_extension == ".webcomponent.figma.ts"
    with pytest.raises(RegistrationError, match="already registered for target: react"):
        registry.register("react", ReactEmitter, meta)
