"""Emitter base class and file template rendering."""

from __future__ import annotations

import posixpath
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from ..models import ComponentModel, EmitResult, GeneratedSection, SectionName
from ..postproc.markers import build_section_block, default_markers
from .mapper import build_props_section, component_base_name, figma_url, indent

DEFAULT_IMPORT_BASE = "@momentum-design/components"
CODE_CONNECT_DIR = "code-connect"


@dataclass(frozen=True)
class EmitOptions:
    base_import_path: Optional[str] = None
    dry_run: bool = False
    templates_dir: Optional[str] = None


def template_environment(templates_dir: Optional[str] = None) -> Environment:
    """Build a Jinja environment; a custom directory shadows the bundled templates."""
    directories: List[str] = []
    if templates_dir:
        directories.append(str(templates_dir))
    directories.append(str(Path(__file__).with_name("templates")))
    loader = FileSystemLoader(directories)
    return Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


class Emitter(ABC):
    """Turns a component model into one Code Connect file."""

    target: str = ""
    template_name: str = ""
    file_suffix: str = ""

    def __init__(self) -> None:
        self._environments: Dict[Optional[str], Environment] = {}

    @abstractmethod
    def emit(self, model: ComponentModel, options: EmitOptions) -> EmitResult:
        """Return the full file content and its generated sections."""

    def output_path(self, model: ComponentModel) -> str:
        file_name = f"{component_base_name(model)}{self.file_suffix}"
        return posixpath.join(model.component_dir, CODE_CONNECT_DIR, file_name)

    def render(self, options: EmitOptions, **context: object) -> str:
        env = self._environments.get(options.templates_dir)
        if env is None:
            env = template_environment(options.templates_dir)
            self._environments[options.templates_dir] = env
        return env.get_template(self.template_name).render(**context)

    def build(
        self,
        model: ComponentModel,
        options: EmitOptions,
        example: str,
        **context: object,
    ) -> EmitResult:
        """Assemble the props and example sections and render the file skeleton."""
        props_lines, warnings = build_props_section(model.fields, 0)
        sections = [
            GeneratedSection(
                content="\n".join(props_lines),
                name=SectionName.PROPS,
                markers=default_markers(SectionName.PROPS),
            ),
            GeneratedSection(
                content=example,
                name=SectionName.EXAMPLE,
                markers=default_markers(SectionName.EXAMPLE),
            ),
        ]
        content = self.render(
            options,
            figma_url=figma_url(component_base_name(model)),
            sections=wrap_sections(sections, depth=1),
            model=model,
            **context,
        )
        return EmitResult(
            file_path=self.output_path(model),
            content=content,
            sections=sections,
            warnings=warnings,
        )


def wrap_sections(sections: Sequence[GeneratedSection], depth: int = 1) -> str:
    """Render sections with their markers for a freshly created file."""
    blocks = [
        build_section_block(section.content, section.markers or default_markers(section.name), indent(depth))
        for section in sections
    ]
    return "".join(blocks).rstrip("\n")


__all__ = [
    "CODE_CONNECT_DIR",
    "DEFAULT_IMPORT_BASE",
    "EmitOptions",
    "Emitter",
    "template_environment",
    "wrap_sections",
]
