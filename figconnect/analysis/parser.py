"""Web component parser: one source module in, one component model out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..logging import get_logger
from ..mapping import map_component_model
from ..models import ComponentModel
from ..result import Result
from .discovery import discover_component_class
from .events import extract_events
from .inheritance import InheritanceResolver
from .members import DEFAULT_ANNOTATIONS, MemberExtractor
from .program import SourceModule, SourceTree
from .tagname import TagNameResolver

NO_CLASS_ERROR = "No class declaration found in component source file."


@dataclass(frozen=True)
class ParseContext:
    tree: SourceTree
    module: SourceModule
    file_path: str
    component_dir: str
    strict: bool = True


class ComponentParser:
    """Parses Lit-style web components declared with ``@property`` fields."""

    target = "webcomponent"

    def __init__(self, annotations: Iterable[str] = DEFAULT_ANNOTATIONS) -> None:
        self.annotations = tuple(annotations)
        self.logger = get_logger("analysis.parser")

    def parse(self, context: ParseContext) -> Result[Optional[ComponentModel]]:
        discovered = discover_component_class(context.module)
        if discovered is None:
            return Result(None, errors=[NO_CLASS_ERROR])

        klass = discovered.klass
        tree = context.tree
        tag = TagNameResolver(tree).resolve(klass, context.file_path, context.component_dir)
        resolution = InheritanceResolver(tree).resolve(klass)
        fields = MemberExtractor(tree, self.annotations).extract(resolution.chain)
        events = extract_events(resolution.chain)
        self.logger.debug(
            "Parsed %s (%s, tag %s from %s): %d field(s), %d event(s)",
            klass.name,
            discovered.method.value,
            tag.tag_name,
            tag.source.value,
            len(fields.value),
            len(events.value),
        )

        model = map_component_model(
            class_name=klass.name,
            tag_name=tag.tag_name,
            file_path=context.file_path,
            component_dir=context.component_dir,
            fields=fields.value,
            events=events.value,
        )

        result: Result[Optional[ComponentModel]] = Result(model, list(tag.warnings))
        if context.strict and resolution.unresolved:
            result = result.with_errors(
                [f"Unable to resolve base classes for: {', '.join(resolution.unresolved)}"]
            )
        else:
            result = result.with_warnings(resolution.warnings)
        return result.merge(fields, events)


__all__ = ["ComponentParser", "NO_CLASS_ERROR", "ParseContext"]
