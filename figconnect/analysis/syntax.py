"""Tree-sitter parsing and node helpers for TypeScript component sources."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

TYPESCRIPT = Language(tree_sitter_typescript.language_typescript())
TSX = Language(tree_sitter_typescript.language_tsx())

LiteralValue = Union[str, int, float, bool]

_WRAPPER_TYPES = {
    "parenthesized_expression",
    "as_expression",
    "satisfies_expression",
    "non_null_expression",
}
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0"}
_TAG_LINE = re.compile(r"^@([A-Za-z][\w-]*)\s*(.*)$")

_parsers: Dict[str, Parser] = {}


def _get_parser(language_key: str) -> Parser:
    parser = _parsers.get(language_key)
    if parser is None:
        parser = Parser(TSX if language_key == "tsx" else TYPESCRIPT)
        _parsers[language_key] = parser
    return parser


def language_for_path(path: str) -> str:
    lower = path.lower()
    if lower.endswith(".tsx") or lower.endswith(".jsx"):
        return "tsx"
    return "typescript"


def parse_source(source: str, path: str = "") -> Tree:
    """Parse TypeScript (or TSX, chosen by file suffix) source text."""
    return _get_parser(language_for_path(path)).parse(source.encode("utf-8"))


def node_text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="ignore")


def named_children(node: Node) -> List[Node]:
    """Named children without comments."""
    return [child for child in node.named_children if child.type != "comment"]


def first_named(node: Node) -> Optional[Node]:
    children = named_children(node)
    return children[0] if children else None


def unwrap_expression(node: Optional[Node]) -> Optional[Node]:
    """Strip parentheses, ``as``/``satisfies`` casts and non-null assertions."""
    current = node
    while current is not None and current.type in _WRAPPER_TYPES:
        current = first_named(current)
    return current


def string_value(node: Node) -> Optional[str]:
    """Return the value of a string or substitution-free template literal."""
    if node.type == "string":
        parts: List[str] = []
        for child in node.named_children:
            text = node_text(child)
            if child.type == "escape_sequence":
                parts.append(_SIMPLE_ESCAPES.get(text[1:], text[1:]))
            else:
                parts.append(text)
        return "".join(parts)
    if node.type == "template_string":
        if any(child.type == "template_substitution" for child in node.named_children):
            return None
        return node_text(node)[1:-1]
    return None


def literal_value(node: Optional[Node]) -> Optional[LiteralValue]:
    """Return a Python value for string, number and boolean literals."""
    node = unwrap_expression(node)
    if node is None:
        return None
    if node.type in {"string", "template_string"}:
        return string_value(node)
    if node.type == "true":
        return True
    if node.type == "false":
        return False
    if node.type == "number":
        raw = node_text(node).replace("_", "")
        try:
            return int(raw, 0)
        except ValueError:
            try:
                return float(raw)
            except ValueError:
                return None
    return None


def leading_comment(node: Node) -> Optional[str]:
    """Return the JSDoc block directly preceding a declaration, if any."""
    target: Optional[Node] = node
    while target is not None:
        sibling = target.prev_sibling
        while sibling is not None and sibling.type == "decorator":
            sibling = sibling.prev_sibling
        if sibling is not None and sibling.type == "comment":
            text = node_text(sibling)
            return text if text.startswith("/**") else None
        parent = target.parent
        target = parent if parent is not None and parent.type == "export_statement" else None
    return None


@dataclass
class DocComment:
    """Parsed JSDoc summary and block tags."""

    summary: Optional[str] = None
    tags: List[Tuple[str, str]] = field(default_factory=list)

    def tag_values(self, name: str) -> List[str]:
        return [text for tag, text in self.tags if tag == name]


def parse_doc_comment(text: Optional[str]) -> DocComment:
    if not text:
        return DocComment()
    body = text.strip()
    if body.startswith("/**"):
        body = body[3:]
    if body.endswith("*/"):
        body = body[:-2]

    summary_lines: List[str] = []
    tags: List[List[str]] = []
    for raw in body.splitlines():
        line = raw.strip()
        if line.startswith("*"):
            line = line[1:].strip()
        match = _TAG_LINE.match(line)
        if match:
            tags.append([match.group(1), match.group(2).strip()])
        elif tags:
            if line:
                tags[-1][1] = f"{tags[-1][1]} {line}".strip()
        else:
            summary_lines.append(line)

    summary = "\n".join(summary_lines).strip() or None
    return DocComment(summary=summary, tags=[(name, value) for name, value in tags])


def doc_for(node: Node) -> DocComment:
    return parse_doc_comment(leading_comment(node))


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal over every descendant of ``node``."""
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def callee_name(call: Node) -> str:
    """Return the trailing name of a call's callee (``a.b.c()`` → ``c``)."""
    callee = unwrap_expression(call.child_by_field_name("function"))
    if callee is None:
        return ""
    if callee.type == "identifier":
        return node_text(callee)
    if callee.type == "member_expression":
        return node_text(callee.child_by_field_name("property"))
    return ""


def call_arguments(call: Node) -> List[Node]:
    arguments = call.child_by_field_name("arguments")
    return named_children(arguments) if arguments is not None else []


__all__ = [
    "DocComment",
    "LiteralValue",
    "TSX",
    "TYPESCRIPT",
    "call_arguments",
    "callee_name",
    "doc_for",
    "first_named",
    "language_for_path",
    "leading_comment",
    "literal_value",
    "named_children",
    "node_text",
    "parse_doc_comment",
    "parse_source",
    "string_value",
    "unwrap_expression",
    "walk",
]
