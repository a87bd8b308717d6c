"""Source analysis: declaration resolution, inheritance chains and member extraction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Protocol, Tuple

from ..models import ComponentModel
from ..registry import Registry, load_entry_points
from ..result import Result
from .members import DEFAULT_ANNOTATIONS
from .parser import ComponentParser, ParseContext
from .program import SourceTree

_ENTRY_POINT_GROUP = "figconnect.parsers"


class Parser(Protocol):
    def parse(self, context: ParseContext) -> Result[Optional[ComponentModel]]: ...


@dataclass(frozen=True)
class ParserMetadata:
    display_name: str
    description: str
    file_patterns: Tuple[str, ...] = ()


def create_parser_registry(
    annotations: Iterable[str] = DEFAULT_ANNOTATIONS,
    *,
    include_plugins: bool = True,
) -> Registry[Parser, ParserMetadata]:
    """Return a registry holding the built-in parser plus installed plugins."""
    names = tuple(annotations)
    registry: Registry[Parser, ParserMetadata] = Registry("Parser")
    registry.register(
        "webcomponent",
        lambda: ComponentParser(names),
        ParserMetadata(
            display_name="Web Component",
            description="Parses Lit-style web components with @property decorators",
            file_patterns=("*.component.ts",),
        ),
    )
    if include_plugins:
        load_entry_points(registry, _ENTRY_POINT_GROUP, _coerce_parser)
    return registry


def _coerce_parser(name: str, obj: object) -> Tuple[Callable[[], Parser], ParserMetadata]:
    if not callable(obj):
        raise TypeError(f"Parser entry point '{name}' must be a parser class or factory")
    meta = getattr(obj, "metadata", None)
    if not isinstance(meta, ParserMetadata):
        meta = ParserMetadata(display_name=name, description=(getattr(obj, "__doc__", None) or "").strip())
    return obj, meta  # type: ignore[return-value]


__all__ = [
    "ComponentParser",
    "ParseContext",
    "Parser",
    "ParserMetadata",
    "SourceTree",
    "create_parser_registry",
]
