"""Custom element tag name resolution."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set, Tuple

from tree_sitter import Node

from ..utils import to_kebab_case
from .classlike import ClassLike, declarator_value
from .program import DeclarationKind, SourceModule, SourceTree
from .syntax import call_arguments, callee_name, doc_for, literal_value, node_text, unwrap_expression, walk

_PREFIX = re.compile(r"PREFIX:\s*['\"]([^'\"]+)['\"]")
_SEPARATOR = re.compile(r"SEPARATOR:\s*['\"]([^'\"]+)['\"]")
_COMPONENT_SUFFIX = re.compile(r"\.component\.(t|j)sx?$")
_SOURCE_SUFFIX = re.compile(r"\.(t|j)sx?$")


class TagNameSource(str, Enum):
    JSDOC = "jsdoc"
    INDEX = "index"
    FILENAME = "filename"


@dataclass
class TagNameResolution:
    tag_name: str
    source: TagNameSource
    warnings: List[str] = field(default_factory=list)


class TagNameResolver:
    """Resolves a component's tag name from JSDoc, ``index.ts`` or its file name."""

    def __init__(self, tree: SourceTree) -> None:
        self.tree = tree

    def resolve(self, klass: Optional[ClassLike], file_path: str, component_dir: str) -> TagNameResolution:
        if klass is not None:
            values = doc_for(klass.node).tag_values("tagname")
            if values and values[0]:
                return TagNameResolution(values[0].split()[0], TagNameSource.JSDOC)

        class_name = klass.name if klass is not None else None
        tag_name, warnings = self._from_index(component_dir, class_name)
        if tag_name:
            return TagNameResolution(tag_name, TagNameSource.INDEX, warnings)

        return TagNameResolution(self._from_filename(file_path, component_dir), TagNameSource.FILENAME, warnings)

    def namespace(self, component_dir: str) -> Optional[Tuple[str, str]]:
        """Read ``PREFIX``/``SEPARATOR`` from the shared tag-name constants."""
        constants = os.path.normpath(os.path.join(component_dir, "..", "..", "utils", "tag-name", "constants.ts"))
        module = self.tree.load(constants)
        if module is None:
            return None
        contents = module.source
        prefix = _PREFIX.search(contents)
        separator = _SEPARATOR.search(contents)
        if not prefix or not separator:
            return None
        return prefix.group(1), separator.group(1)

    def apply_namespace(self, component_dir: str, value: str) -> str:
        normalized = to_kebab_case(value)
        namespace = self.namespace(component_dir)
        if namespace is None:
            return normalized
        prefix, separator = namespace
        return f"{prefix}{separator}{normalized}"

    def _from_filename(self, file_path: str, component_dir: str) -> str:
        base = os.path.basename(file_path)
        base = _SOURCE_SUFFIX.sub("", _COMPONENT_SUFFIX.sub("", base))
        return self.apply_namespace(component_dir, base)

    def _from_index(self, component_dir: str, class_name: Optional[str]) -> Tuple[Optional[str], List[str]]:
        module = self.tree.load(os.path.join(component_dir, "index.ts"))
        if module is None:
            return None, []

        candidates: List[Tuple[Optional[str], Optional[Node]]] = []
        for node in walk(module.root):
            if node.type != "call_expression" or callee_name(node) != "register":
                continue
            callee = node.child_by_field_name("function")
            if callee is None or callee.type != "member_expression":
                continue
            receiver = callee.child_by_field_name("object")
            receiver_name = node_text(receiver) if receiver is not None and receiver.type == "identifier" else None
            arguments = call_arguments(node)
            candidates.append((receiver_name, arguments[0] if arguments else None))

        if not candidates:
            return None, []
        primary = next((item for item in candidates if class_name and item[0] == class_name), candidates[0])

        argument = unwrap_expression(primary[1])
        if argument is None:
            return None, ["register() call did not include a tag name argument."]
        literal = literal_value(argument)
        if isinstance(literal, str):
            return literal, []
        if argument.type == "identifier":
            resolved = self._resolve_constant(node_text(argument), module, component_dir, set())
            if resolved:
                return resolved, []
            return None, [f"Unable to resolve tag name identifier: {node_text(argument)}"]
        return None, [f"Unsupported register() tag expression: {node_text(argument)}"]

    def _resolve_constant(
        self, name: str, module: SourceModule, component_dir: str, visited: Set[str]
    ) -> Optional[str]:
        declaration = self.tree.resolve_module_binding(name, module)
        if declaration is None or declaration.kind is not DeclarationKind.VARIABLE:
            return None
        marker = f"{declaration.module.path}:{name}" if declaration.module else name
        if marker in visited:
            return None
        visited.add(marker)
        value = declarator_value(declaration)
        if value is None:
            return None
        if value.type == "identifier" and declaration.module is not None:
            return self._resolve_constant(node_text(value), declaration.module, component_dir, visited)
        return self._initializer_value(value, component_dir)

    def _initializer_value(self, value: Node, component_dir: str) -> Optional[str]:
        literal = literal_value(value)
        if isinstance(literal, str):
            return literal
        if value.type == "call_expression" and callee_name(value) == "constructTagName":
            arguments = call_arguments(value)
            argument = literal_value(arguments[0]) if arguments else None
            if isinstance(argument, str):
                return self.apply_namespace(component_dir, argument)
        return None


__all__ = ["TagNameResolution", "TagNameResolver", "TagNameSource"]
