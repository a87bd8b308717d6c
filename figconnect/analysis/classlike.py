"""Class-like node variant and shape matchers for class producers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from tree_sitter import Node

from .program import (
    CLASS_NODE_TYPES,
    FUNCTION_NODE_TYPES,
    Declaration,
    DeclarationKind,
    SourceModule,
    declared_name,
)
from .syntax import first_named, named_children, node_text, unwrap_expression


class ClassKind(str, Enum):
    DECLARATION = "declaration"
    EXPRESSION = "expression"


@dataclass(frozen=True, eq=False)
class ClassLike:
    """A class declaration or class expression inside a parsed module.

    Two class-likes are the same class when their :attr:`key` matches;
    names are unreliable because mixin bodies reuse them freely.
    """

    kind: ClassKind
    node: Node
    module: SourceModule

    @property
    def key(self) -> str:
        return f"{self.module.path}:{self.node.start_byte}"

    @property
    def name(self) -> Optional[str]:
        name = declared_name(self.node)
        if name:
            return name
        parent = self.node.parent
        while parent is not None and parent.type in {"parenthesized_expression", "as_expression"}:
            parent = parent.parent
        if parent is not None and parent.type == "variable_declarator":
            return node_text(parent.child_by_field_name("name")) or None
        return None

    @property
    def body(self) -> Optional[Node]:
        return self.node.child_by_field_name("body")

    def heritage(self) -> List[Node]:
        """Return the ``extends`` expressions; ``implements`` is ignored."""
        heritage = next((child for child in self.node.named_children if child.type == "class_heritage"), None)
        if heritage is None:
            return []
        clause = next((child for child in heritage.named_children if child.type == "extends_clause"), None)
        if clause is None:
            return []
        values = clause.children_by_field_name("value")
        if values:
            return list(values)
        return [child for child in named_children(clause) if child.type != "type_arguments"]

    def members(self) -> List[Node]:
        body = self.body
        return list(body.named_children) if body is not None else []

    def text(self) -> str:
        return node_text(self.node)


def class_like(node: Optional[Node], module: SourceModule) -> Optional[ClassLike]:
    node = unwrap_expression(node)
    if node is None or node.type not in CLASS_NODE_TYPES:
        return None
    kind = ClassKind.EXPRESSION if node.type == "class" else ClassKind.DECLARATION
    return ClassLike(kind, node, module)


def declarator_value(declaration: Declaration) -> Optional[Node]:
    if declaration.kind is not DeclarationKind.VARIABLE or declaration.node is None:
        return None
    return unwrap_expression(declaration.node.child_by_field_name("value"))


def class_from_declaration(declaration: Declaration) -> Optional[ClassLike]:
    """Match class declarations and variables initialised with a class expression."""
    if declaration.module is None or declaration.node is None:
        return None
    if declaration.kind is DeclarationKind.CLASS:
        return class_like(declaration.node, declaration.module)
    value = declarator_value(declaration)
    if value is not None and value.type == "class":
        return class_like(value, declaration.module)
    return None


def producer_from_declaration(declaration: Declaration) -> Optional[Node]:
    """Match function declarations, function expressions and arrow functions."""
    if declaration.node is None:
        return None
    if declaration.kind is DeclarationKind.FUNCTION and declaration.node.type in FUNCTION_NODE_TYPES:
        return declaration.node
    value = declarator_value(declaration)
    if value is not None and value.type in FUNCTION_NODE_TYPES:
        return value
    return None


def return_expression(producer: Node) -> Optional[Node]:
    body = producer.child_by_field_name("body")
    if body is None:
        return None
    if body.type != "statement_block":
        return body
    for statement in body.named_children:
        if statement.type == "return_statement":
            return first_named(statement)
    return None


def class_from_producer(producer: Node, module: SourceModule) -> Optional[ClassLike]:
    """Find the class a mixin-style producer function hands back.

    Tries the returned class expression, then a returned identifier naming a
    class declared or assigned inside the body, then falls back to the first
    class declaration in the body. The fallback is a heuristic and may pick
    the wrong class when a body declares several unrelated ones.
    """
    body = producer.child_by_field_name("body")
    block = body if body is not None and body.type == "statement_block" else None
    returned = unwrap_expression(return_expression(producer))

    if returned is not None:
        if returned.type == "class":
            return class_like(returned, module)
        if returned.type == "identifier" and block is not None:
            match = _class_named_in_block(node_text(returned), block, module)
            if match is not None:
                return match

    if block is not None:
        for statement in block.named_children:
            if statement.type in {"class_declaration", "abstract_class_declaration"}:
                return class_like(statement, module)
    return None


def _class_named_in_block(name: str, block: Node, module: SourceModule) -> Optional[ClassLike]:
    for statement in block.named_children:
        if statement.type in {"class_declaration", "abstract_class_declaration"}:
            if declared_name(statement) == name:
                return class_like(statement, module)
    for statement in block.named_children:
        if statement.type not in {"lexical_declaration", "variable_declaration"}:
            continue
        for declarator in statement.named_children:
            if declarator.type != "variable_declarator":
                continue
            if node_text(declarator.child_by_field_name("name")) != name:
                continue
            value = unwrap_expression(declarator.child_by_field_name("value"))
            if value is not None and value.type == "class":
                return class_like(value, module)
    return None


__all__ = [
    "ClassKind",
    "ClassLike",
    "class_from_declaration",
    "class_from_producer",
    "class_like",
    "declarator_value",
    "producer_from_declaration",
    "return_expression",
]
