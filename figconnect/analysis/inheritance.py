"""Inheritance chain resolution across declarations, re-exports and mixins."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Set

from tree_sitter import Node

from ..logging import get_logger
from .classlike import (
    ClassLike,
    class_from_declaration,
    class_from_producer,
    class_like,
    declarator_value,
    producer_from_declaration,
)
from .program import Declaration, SourceModule
from .syntax import call_arguments, node_text, unwrap_expression

_REFERENCE_TYPES = {"identifier", "member_expression"}


class DeclarationResolver(Protocol):
    """The static resolution capability the chain resolver depends on."""

    def resolve_declaration(self, node: Optional[Node], module: SourceModule) -> Optional[Declaration]: ...

    def is_external(self, declaration: Declaration) -> bool: ...

    def is_parameter(self, declaration: Declaration) -> bool: ...


@dataclass
class InheritanceResolution:
    """Class-likes ordered ancestor first, plus what could not be resolved."""

    chain: List[ClassLike] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)


class InheritanceResolver:
    """Walks ``extends`` clauses, recursing through bases and mixin producers."""

    def __init__(self, resolver: DeclarationResolver) -> None:
        self.resolver = resolver
        self.logger = get_logger("analysis.inheritance")

    def resolve(self, root: ClassLike) -> InheritanceResolution:
        resolution = _ChainWalk(self.resolver).run(root)
        self.logger.debug(
            "Resolved %d class(es) for %s (%d unresolved)",
            len(resolution.chain),
            root.name or root.key,
            len(resolution.unresolved),
        )
        return resolution


class _ChainWalk:
    def __init__(self, resolver: DeclarationResolver) -> None:
        self.resolver = resolver
        self.result = InheritanceResolution()
        self.seen: Set[str] = set()
        self.followed: Set[str] = set()

    def run(self, root: ClassLike) -> InheritanceResolution:
        self.collect_class(root)
        return self.result

    def collect_class(self, klass: ClassLike) -> None:
        if klass.key in self.seen:
            return
        self.seen.add(klass.key)
        for expression in klass.heritage():
            self.collect_expression(expression, klass.module)
        self.result.chain.append(klass)

    def collect_expression(self, expression: Node, module: SourceModule) -> None:
        expression = unwrap_expression(expression)
        if expression is None:
            return

        inline = class_like(expression, module)
        if inline is not None:
            self.collect_class(inline)
            return

        if expression.type == "call_expression":
            for argument in call_arguments(expression):
                self.collect_expression(argument, module)
            mixin = self._mixin_class(expression, module)
            if mixin is not None:
                self.collect_class(mixin)
            else:
                self._unresolved(expression)
            return

        if expression.type in _REFERENCE_TYPES:
            declaration = self.resolver.resolve_declaration(expression, module)
            if declaration is not None:
                if self.resolver.is_external(declaration) or self.resolver.is_parameter(declaration):
                    return
                resolved = class_from_declaration(declaration)
                if resolved is not None:
                    self.collect_class(resolved)
                    return
                if self._follow_alias(declaration):
                    return

        self._unresolved(expression)

    def _follow_alias(self, declaration: Declaration) -> bool:
        # const Base = Mixin(LitElement) or const Base = OtherBase
        value = declarator_value(declaration)
        if value is None or declaration.module is None or declaration.node is None:
            return False
        if value.type not in _REFERENCE_TYPES and value.type != "call_expression":
            return False
        marker = f"{declaration.module.path}:{declaration.node.start_byte}"
        if marker in self.followed:
            return True
        self.followed.add(marker)
        self.collect_expression(value, declaration.module)
        return True

    def _mixin_class(self, call: Node, module: SourceModule) -> Optional[ClassLike]:
        declaration = self.resolver.resolve_declaration(call.child_by_field_name("function"), module)
        if declaration is None or declaration.module is None:
            return None
        producer = producer_from_declaration(declaration)
        if producer is None:
            return None
        return class_from_producer(producer, declaration.module)

    def _unresolved(self, expression: Node) -> None:
        text = node_text(expression)
        self.result.unresolved.append(text)
        self.result.warnings.append(f"Unable to resolve base class for expression: {text}")


__all__ = ["DeclarationResolver", "InheritanceResolution", "InheritanceResolver"]
