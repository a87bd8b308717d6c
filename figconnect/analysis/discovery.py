"""Choosing the component class inside a source file."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from tree_sitter import Node

from .classlike import ClassKind, ClassLike
from .program import SourceModule, declared_name
from .syntax import callee_name, doc_for, named_children, node_text, unwrap_expression, walk

_DECLARATION_TYPES = {"class_declaration", "abstract_class_declaration"}


class DiscoveryMethod(str, Enum):
    DEFAULT_EXPORT = "default-export"
    CUSTOM_ELEMENT = "custom-element"
    TAGNAME_JSDOC = "tagname-jsdoc"
    FIRST_CLASS = "first-class"


@dataclass(frozen=True)
class DiscoveredClass:
    klass: ClassLike
    method: DiscoveryMethod


def class_declarations(module: SourceModule) -> List[Node]:
    """Class declarations plus anonymous classes given to ``export default``."""
    return [
        node
        for node in walk(module.root)
        if node.type in _DECLARATION_TYPES or _is_default_class_expression(node)
    ]


def discover_component_class(module: SourceModule) -> Optional[DiscoveredClass]:
    """Pick the component class of ``module``.

    Preference order: ``export default class``, the class named by
    ``export default Name``, a ``@customElement`` decorated class, a class
    carrying a ``@tagname`` JSDoc tag, then the first class in the file.
    """
    classes = class_declarations(module)
    if not classes:
        return None

    def found(node: Node, method: DiscoveryMethod) -> DiscoveredClass:
        kind = ClassKind.EXPRESSION if node.type == "class" else ClassKind.DECLARATION
        return DiscoveredClass(ClassLike(kind, node, module), method)

    for node in classes:
        if _is_default_exported(node):
            return found(node, DiscoveryMethod.DEFAULT_EXPORT)

    default_name = _default_export_name(module)
    if default_name:
        for node in classes:
            if declared_name(node) == default_name:
                return found(node, DiscoveryMethod.DEFAULT_EXPORT)

    for node in classes:
        if any(callee_name(call) == "customElement" for call in _class_decorator_calls(node)):
            return found(node, DiscoveryMethod.CUSTOM_ELEMENT)

    for node in classes:
        if doc_for(node).tag_values("tagname"):
            return found(node, DiscoveryMethod.TAGNAME_JSDOC)

    return found(classes[0], DiscoveryMethod.FIRST_CLASS)


def _is_default_exported(node: Node) -> bool:
    if node.type == "class":
        return _is_default_class_expression(node)
    return _is_default_exported_parent(node.parent)


def _is_default_exported_parent(parent: Optional[Node]) -> bool:
    if parent is None or parent.type != "export_statement":
        return False
    return any(not child.is_named and child.type == "default" for child in parent.children)


def _is_default_class_expression(node: Node) -> bool:
    if node.type != "class":
        return False
    parent = node.parent
    while parent is not None and parent.type in {"parenthesized_expression", "as_expression"}:
        parent = parent.parent
    return _is_default_exported_parent(parent)


def _default_export_name(module: SourceModule) -> Optional[str]:
    for statement in module.root.named_children:
        if statement.type != "export_statement":
            continue
        value = unwrap_expression(statement.child_by_field_name("value"))
        if value is not None and value.type == "identifier":
            return node_text(value)
    return None


def _class_decorator_calls(node: Node) -> List[Node]:
    decorators = [child for child in node.named_children if child.type == "decorator"]
    parent = node.parent
    if parent is not None and parent.type == "export_statement":
        decorators.extend(child for child in parent.named_children if child.type == "decorator")
    calls: List[Node] = []
    for decorator in decorators:
        expression = unwrap_expression(next(iter(named_children(decorator)), None))
        if expression is not None and expression.type == "call_expression":
            calls.append(expression)
    return calls


__all__ = ["DiscoveredClass", "DiscoveryMethod", "class_declarations", "discover_component_class"]
