"""Decorated field extraction across a resolved inheritance chain."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar

from tree_sitter import Node

from ..models import DefaultValue, FieldDescriptor, ValueKind, Visibility
from ..result import Result
from ..utils import merge_by_key, to_kebab_case
from .classlike import ClassLike
from .program import DeclarationKind, SourceTree
from .syntax import (
    call_arguments,
    callee_name,
    doc_for,
    literal_value,
    named_children,
    node_text,
    string_value,
    unwrap_expression,
)

T = TypeVar("T")

DEFAULT_ANNOTATIONS = ("property",)
_DECORATOR_TYPES = {"String": ValueKind.STRING, "Number": ValueKind.NUMBER, "Boolean": ValueKind.BOOLEAN}
_PRIMITIVE_TYPES = {"string": ValueKind.STRING, "number": ValueKind.NUMBER, "boolean": ValueKind.BOOLEAN}


def extract_from_chain(
    chain: Sequence[ClassLike],
    extract: Callable[[ClassLike], Tuple[List[T], List[str]]],
    key: Callable[[T], str],
    merge: Optional[Callable[[T, T], T]] = None,
) -> Result[List[T]]:
    """Run ``extract`` over the chain and merge items by key, descendant winning."""
    collected: List[T] = []
    warnings: List[str] = []
    for klass in chain:
        items, item_warnings = extract(klass)
        collected.extend(items)
        warnings.extend(item_warnings)
    merged = merge_by_key(collected, key, merge or (lambda _existing, incoming: incoming))
    return Result(list(merged.values()), warnings)


@dataclass
class _DecoratorOptions:
    type_name: Optional[str] = None
    attribute_set: bool = False
    attribute: Optional[str] = None
    reflect: Optional[bool] = None


class MemberExtractor:
    """Pulls annotated fields out of each class in an inheritance chain."""

    def __init__(self, tree: SourceTree, annotations: Iterable[str] = DEFAULT_ANNOTATIONS) -> None:
        self.tree = tree
        self.annotations = set(annotations)

    def extract(self, chain: Sequence[ClassLike]) -> Result[List[FieldDescriptor]]:
        return extract_from_chain(chain, self.extract_class, key=lambda descriptor: descriptor.name)

    def extract_class(self, klass: ClassLike) -> Tuple[List[FieldDescriptor], List[str]]:
        descriptors: List[FieldDescriptor] = []
        warnings: List[str] = []
        for member in klass.members():
            if member.type == "public_field_definition":
                getter = False
            elif member.type == "method_definition" and _is_getter(member):
                getter = True
            else:
                continue

            name_node = member.child_by_field_name("name")
            if name_node is not None and name_node.type == "private_property_identifier":
                continue
            accessibility = _accessibility(member)
            if accessibility == "private":
                continue

            decorator = self._find_annotation(_decorators_of(member))
            if decorator is None:
                continue

            name = _member_name(name_node)
            if not name:
                warnings.append(f"Unable to resolve property name for member: {node_text(member)}")
                continue

            descriptors.append(self._describe(klass, member, decorator, name, accessibility, getter))
        return descriptors, warnings

    def _find_annotation(self, decorators: Iterable[Node]) -> Optional[Node]:
        for decorator in decorators:
            call = unwrap_expression(next(iter(named_children(decorator)), None))
            if call is not None and call.type == "call_expression" and callee_name(call) in self.annotations:
                return call
        return None

    def _describe(
        self,
        klass: ClassLike,
        member: Node,
        decorator: Node,
        name: str,
        accessibility: Optional[str],
        getter: bool,
    ) -> FieldDescriptor:
        options = _decorator_options(decorator)
        type_field = "return_type" if getter else "type"
        type_node = _annotation_type(member.child_by_field_name(type_field))
        value_node = None if getter else member.child_by_field_name("value")

        enum_values = self._enum_values(type_node, klass)
        ts_type = self._ts_type(type_node, value_node, klass)
        kind = resolve_value_kind(options.type_name, enum_values, ts_type, name)

        if options.attribute_set:
            binding_name = options.attribute
        else:
            binding_name = to_kebab_case(name)

        return FieldDescriptor(
            name=name,
            binding_name=binding_name,
            value_kind=kind,
            ts_type=ts_type,
            reflects=bool(options.reflect),
            default_value=_default_value(value_node),
            doc=doc_for(member).summary,
            visibility=Visibility.PROTECTED if accessibility == "protected" else Visibility.PUBLIC,
            enum_values=tuple(enum_values) if kind is ValueKind.ENUM and enum_values else None,
        )

    def _enum_values(self, type_node: Optional[Node], klass: ClassLike) -> List[str]:
        if type_node is None:
            return []
        alias = self._alias_value(type_node, klass)
        return _string_literal_members(alias if alias is not None else type_node)

    def _ts_type(self, type_node: Optional[Node], value_node: Optional[Node], klass: ClassLike) -> str:
        if type_node is not None:
            alias = self._alias_value(type_node, klass)
            if alias is not None and alias.type == "predefined_type":
                return node_text(alias)
            return node_text(type_node)
        literal = literal_value(value_node)
        if isinstance(literal, bool):
            return "boolean"
        if isinstance(literal, (int, float)):
            return "number"
        if isinstance(literal, str):
            return "string"
        return "unknown"

    def _alias_value(self, type_node: Node, klass: ClassLike) -> Optional[Node]:
        if type_node.type != "type_identifier":
            return None
        declaration = self.tree.find_type_alias(node_text(type_node), type_node, klass.module)
        if declaration is None or declaration.node is None or declaration.kind is not DeclarationKind.TYPE_ALIAS:
            return None
        return declaration.node.child_by_field_name("value")


def resolve_value_kind(
    type_name: Optional[str],
    enum_values: Sequence[str],
    ts_type: str,
    field_name: str,
) -> ValueKind:
    # Tag-name fields hold element names, not design variants.
    if enum_values and field_name.lower().endswith("tagname"):
        return ValueKind.STRING
    if enum_values:
        return ValueKind.ENUM
    if type_name in _DECORATOR_TYPES:
        return _DECORATOR_TYPES[type_name]
    return _PRIMITIVE_TYPES.get(ts_type.lower(), ValueKind.UNKNOWN)


def _is_getter(member: Node) -> bool:
    return any(not child.is_named and child.type == "get" for child in member.children)


def _accessibility(member: Node) -> Optional[str]:
    for child in member.named_children:
        if child.type == "accessibility_modifier":
            return node_text(child)
    return None


def _decorators_of(member: Node) -> List[Node]:
    decorators = [child for child in member.named_children if child.type == "decorator"]
    sibling = member.prev_named_sibling
    while sibling is not None and sibling.type == "decorator":
        decorators.append(sibling)
        sibling = sibling.prev_named_sibling
    return decorators


def _member_name(name_node: Optional[Node]) -> Optional[str]:
    if name_node is None:
        return None
    if name_node.type == "property_identifier":
        return node_text(name_node)
    if name_node.type == "string":
        return string_value(name_node)
    if name_node.type == "computed_property_name":
        literal = literal_value(next(iter(named_children(name_node)), None))
        return literal if isinstance(literal, str) else None
    return None


def _decorator_options(call: Node) -> _DecoratorOptions:
    options = _DecoratorOptions()
    arguments = call_arguments(call)
    if not arguments or arguments[0].type != "object":
        return options
    for pair in named_children(arguments[0]):
        if pair.type != "pair":
            continue
        key = pair.child_by_field_name("key")
        value = unwrap_expression(pair.child_by_field_name("value"))
        if key is None or value is None:
            continue
        key_name = string_value(key) if key.type == "string" else node_text(key)
        if key_name == "type":
            if value.type == "identifier":
                options.type_name = node_text(value)
            elif value.type == "member_expression":
                options.type_name = node_text(value.child_by_field_name("property"))
        elif key_name == "attribute":
            literal = literal_value(value)
            options.attribute_set = literal is not True
            if literal is False:
                options.attribute = None
            elif literal is not None and literal is not True:
                options.attribute = str(literal)
            elif literal is None:
                options.attribute = node_text(value)
        elif key_name == "reflect":
            literal = literal_value(value)
            if isinstance(literal, bool):
                options.reflect = literal
    return options


def _annotation_type(annotation: Optional[Node]) -> Optional[Node]:
    if annotation is None:
        return None
    if annotation.type == "type_annotation":
        return next(iter(named_children(annotation)), None)
    return annotation


def _string_literal_members(type_node: Node) -> List[str]:
    values: List[str] = []

    def visit(node: Node) -> None:
        if node.type in {"union_type", "parenthesized_type"}:
            for child in named_children(node):
                visit(child)
        elif node.type == "literal_type":
            literal = next(iter(named_children(node)), None)
            if literal is not None and literal.type == "string":
                text = string_value(literal)
                if text:
                    values.append(text)

    if type_node.type in {"union_type", "parenthesized_type"}:
        visit(type_node)
    return values


def _default_value(value_node: Optional[Node]) -> DefaultValue:
    if value_node is None:
        return None
    literal = literal_value(value_node)
    if literal is not None:
        return literal
    return node_text(value_node)


__all__ = ["DEFAULT_ANNOTATIONS", "MemberExtractor", "extract_from_chain", "resolve_value_kind"]
