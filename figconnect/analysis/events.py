"""Event extraction from JSDoc ``@event`` tags and ``dispatchEvent`` calls."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from tree_sitter import Node

from ..models import EventDescriptor
from ..result import Result
from ..utils import to_pascal_case
from .classlike import ClassLike
from .members import extract_from_chain
from .program import CLASS_NODE_TYPES
from .syntax import call_arguments, callee_name, doc_for, literal_value, node_text, unwrap_expression, walk

_EVENT_NAME = re.compile(r"^([A-Za-z0-9\-:_]+)")
_HANDLER_OVERRIDE = re.compile(r"React:\s*([A-Za-z0-9_]+)", re.IGNORECASE)


def handler_name(event_name: str, tag_text: Optional[str] = None) -> str:
    if tag_text:
        match = _HANDLER_OVERRIDE.search(tag_text)
        if match:
            return match.group(1)
    return f"on{to_pascal_case(event_name)}"


def extract_events(chain: Sequence[ClassLike]) -> Result[List[EventDescriptor]]:
    return extract_from_chain(chain, events_for_class, key=lambda event: event.name)


def events_for_class(klass: ClassLike) -> Tuple[List[EventDescriptor], List[str]]:
    events = _jsdoc_events(klass) + _dispatched_events(klass)
    return events, []


def _jsdoc_events(klass: ClassLike) -> List[EventDescriptor]:
    events: List[EventDescriptor] = []
    for text in doc_for(klass.node).tag_values("event"):
        match = _EVENT_NAME.match(text)
        if not match:
            continue
        name = match.group(1)
        events.append(EventDescriptor(name=name, handler_name=handler_name(name, text)))
    return events


def _dispatched_events(klass: ClassLike) -> List[EventDescriptor]:
    body = klass.body
    if body is None:
        return []
    events: List[EventDescriptor] = []
    for node in walk(body):
        if node.type != "call_expression" or callee_name(node) != "dispatchEvent":
            continue
        callee = node.child_by_field_name("function")
        if callee is None or callee.type != "member_expression":
            continue
        # Nested classes report their own events.
        if _enclosing_class(node) != klass.node:
            continue
        event = _custom_event(call_arguments(node))
        if event is not None:
            events.append(event)
    return events


def _enclosing_class(node: Node) -> Optional[Node]:
    current = node.parent
    while current is not None:
        if current.type in CLASS_NODE_TYPES:
            return current
        current = current.parent
    return None


def _custom_event(arguments: List[Node]) -> Optional[EventDescriptor]:
    if not arguments:
        return None
    created = unwrap_expression(arguments[0])
    if created is None or created.type != "new_expression":
        return None
    constructor = created.child_by_field_name("constructor")
    if constructor is None or node_text(constructor) != "CustomEvent":
        return None
    args = call_arguments(created)
    name = literal_value(args[0]) if args else None
    if not isinstance(name, str) or not name:
        return None
    detail_type = None
    type_arguments = created.child_by_field_name("type_arguments")
    if type_arguments is not None:
        detail_type = node_text(type_arguments)[1:-1].strip() or None
    return EventDescriptor(name=name, handler_name=handler_name(name), detail_type=detail_type)


__all__ = ["events_for_class", "extract_events", "handler_name"]
