"""Code Connect emitter for custom elements via ``@figma/code-connect/html``."""

from __future__ import annotations

from ..models import ComponentModel, EmitResult
from .base import DEFAULT_IMPORT_BASE, EmitOptions, Emitter
from .mapper import build_html_example


class WebComponentEmitter(Emitter):
    """Produces ``<name>.webcomponent.figma.ts`` next to the component."""

    target = "webcomponent"
    template_name = "webcomponent.figma.ts.j2"
    file_suffix = ".webcomponent.figma.ts"

    def emit(self, model: ComponentModel, options: EmitOptions) -> EmitResult:
        example = f"example: {build_html_example(model.tag_name, model.bindings)},"
        base = options.base_import_path or DEFAULT_IMPORT_BASE
        return self.build(
            model,
            options,
            example,
            imports_line=f"imports: [\"import '{base}/{model.import_path}';\"],",
        )


__all__ = ["WebComponentEmitter"]
