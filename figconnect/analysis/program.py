"""Source tree loading and static declaration resolution.

A :class:`SourceTree` parses component sources once per batch and follows
relative imports lazily through the storage abstraction. Identifiers and
property accesses resolve to the :class:`Declaration` that introduces them,
which is all the inheritance resolver and member extractor need from a
type checker.
"""

from __future__ import annotations

import os
import posixpath
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set, Tuple

from tree_sitter import Node, Tree

from ..logging import get_logger
from ..storage import Storage
from .syntax import named_children, node_text, parse_source, string_value, unwrap_expression

CLASS_NODE_TYPES = {"class_declaration", "abstract_class_declaration", "class"}
FUNCTION_NODE_TYPES = {
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
    "method_definition",
}
_VARIABLE_STATEMENTS = {"lexical_declaration", "variable_declaration"}

_MODULE_SUFFIXES = (".ts", ".tsx", ".d.ts", ".js", ".jsx")
_INDEX_FILES = tuple(f"index{suffix}" for suffix in _MODULE_SUFFIXES)

DEFAULT_PLATFORM_GLOBALS = frozenset(
    {
        "Array",
        "CustomEvent",
        "Element",
        "Error",
        "Event",
        "EventTarget",
        "HTMLElement",
        "Map",
        "Node",
        "Object",
        "Promise",
        "Set",
        "ShadowRoot",
    }
)
_PLATFORM_PATTERN = re.compile(r"^(HTML|SVG|MathML)\w*Element$")


class DeclarationKind(str, Enum):
    CLASS = "class"
    FUNCTION = "function"
    VARIABLE = "variable"
    TYPE_ALIAS = "type_alias"
    PARAMETER = "parameter"
    NAMESPACE = "namespace"
    EXTERNAL = "external"


@dataclass(frozen=True)
class Declaration:
    """Node that introduces a name, together with the module owning it."""

    kind: DeclarationKind
    name: str
    module: Optional["SourceModule"] = None
    node: Optional[Node] = None
    target: Optional["SourceModule"] = None


@dataclass(frozen=True)
class _ImportBinding:
    specifier: str
    imported: str  # "default", "*" or an exported name


@dataclass(frozen=True)
class _ExportEntry:
    local: Optional[str] = None
    node: Optional[Node] = None
    kind: Optional[DeclarationKind] = None
    reexport: Optional[_ImportBinding] = None


@dataclass
class SourceModule:
    """A parsed source file with its top-level bindings indexed."""

    path: str
    source: str
    tree: Tree
    locals: Dict[str, Tuple[DeclarationKind, Node]] = field(default_factory=dict)
    imports: Dict[str, _ImportBinding] = field(default_factory=dict)
    exports: Dict[str, _ExportEntry] = field(default_factory=dict)
    star_exports: List[str] = field(default_factory=list)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def is_declaration_file(self) -> bool:
        return self.path.endswith(".d.ts")

    @property
    def directory(self) -> str:
        return posixpath.dirname(self.path)


def declared_name(node: Node) -> Optional[str]:
    name = node.child_by_field_name("name")
    if name is None or name.type not in {"identifier", "type_identifier"}:
        return None
    return node_text(name)


def _declarations_in(statement: Node) -> Iterable[Tuple[str, DeclarationKind, Node]]:
    kind_by_type = {
        "class_declaration": DeclarationKind.CLASS,
        "abstract_class_declaration": DeclarationKind.CLASS,
        "function_declaration": DeclarationKind.FUNCTION,
        "generator_function_declaration": DeclarationKind.FUNCTION,
        "type_alias_declaration": DeclarationKind.TYPE_ALIAS,
    }
    if statement.type == "export_statement":
        inner = statement.child_by_field_name("declaration")
        if inner is not None:
            yield from _declarations_in(inner)
        return
    if statement.type in kind_by_type:
        name = declared_name(statement)
        if name:
            yield name, kind_by_type[statement.type], statement
        return
    if statement.type in _VARIABLE_STATEMENTS:
        for declarator in statement.named_children:
            if declarator.type != "variable_declarator":
                continue
            name_node = declarator.child_by_field_name("name")
            if name_node is not None and name_node.type == "identifier":
                yield node_text(name_node), DeclarationKind.VARIABLE, declarator


def _has_keyword(node: Node, keyword: str) -> bool:
    return any(not child.is_named and child.type == keyword for child in node.children)


def _index_module(module: SourceModule) -> None:
    for statement in module.root.named_children:
        for name, kind, node in _declarations_in(statement):
            module.locals[name] = (kind, node)
        if statement.type == "import_statement":
            _index_import(module, statement)
        elif statement.type == "export_statement":
            _index_export(module, statement)


def _index_import(module: SourceModule, statement: Node) -> None:
    source = statement.child_by_field_name("source")
    specifier = string_value(source) if source is not None else None
    if not specifier:
        return
    clause = next((child for child in statement.named_children if child.type == "import_clause"), None)
    if clause is None:
        return
    for child in clause.named_children:
        if child.type == "identifier":
            module.imports[node_text(child)] = _ImportBinding(specifier, "default")
        elif child.type == "namespace_import":
            alias = next((item for item in child.named_children if item.type == "identifier"), None)
            if alias is not None:
                module.imports[node_text(alias)] = _ImportBinding(specifier, "*")
        elif child.type == "named_imports":
            for spec in child.named_children:
                if spec.type != "import_specifier":
                    continue
                name = spec.child_by_field_name("name")
                alias = spec.child_by_field_name("alias") or name
                imported = _export_name(name)
                module.imports[node_text(alias)] = _ImportBinding(specifier, imported)


def _export_name(node: Optional[Node]) -> str:
    if node is None:
        return ""
    if node.type == "string":
        return string_value(node) or ""
    return node_text(node)


def _index_export(module: SourceModule, statement: Node) -> None:
    source = statement.child_by_field_name("source")
    specifier = string_value(source) if source is not None else None
    declaration = statement.child_by_field_name("declaration")
    value = statement.child_by_field_name("value")
    is_default = _has_keyword(statement, "default")

    if declaration is not None:
        names = [name for name, _, _ in _declarations_in(declaration)]
        for name in names:
            module.exports[name] = _ExportEntry(local=name)
        if is_default:
            if names:
                module.exports["default"] = _ExportEntry(local=names[0])
            elif declaration.type in CLASS_NODE_TYPES:
                module.exports["default"] = _ExportEntry(node=declaration, kind=DeclarationKind.CLASS)
        return

    if value is not None:
        target = unwrap_expression(value)
        if target is not None and target.type == "identifier":
            module.exports["default"] = _ExportEntry(local=node_text(target))
        elif target is not None and target.type in CLASS_NODE_TYPES:
            module.exports["default"] = _ExportEntry(node=target, kind=DeclarationKind.CLASS)
        elif target is not None and target.type in FUNCTION_NODE_TYPES:
            module.exports["default"] = _ExportEntry(node=target, kind=DeclarationKind.FUNCTION)
        return

    clause = next((child for child in statement.named_children if child.type == "export_clause"), None)
    if clause is not None:
        for spec in clause.named_children:
            if spec.type != "export_specifier":
                continue
            name = _export_name(spec.child_by_field_name("name"))
            alias = _export_name(spec.child_by_field_name("alias")) or name
            if specifier:
                module.exports[alias] = _ExportEntry(reexport=_ImportBinding(specifier, name))
            else:
                module.exports[alias] = _ExportEntry(local=name)
        return

    namespace = next((child for child in statement.named_children if child.type == "namespace_export"), None)
    if namespace is not None and specifier:
        alias = next((item for item in namespace.named_children), None)
        if alias is not None:
            module.exports[_export_name(alias)] = _ExportEntry(reexport=_ImportBinding(specifier, "*"))
        return

    if specifier and _has_keyword(statement, "*"):
        module.star_exports.append(specifier)


def is_relative_specifier(specifier: str) -> bool:
    return specifier.startswith("./") or specifier.startswith("../") or specifier.startswith("/")


class SourceTree:
    """Parsed modules for one batch, loaded lazily and cached by path."""

    def __init__(self, storage: Storage, *, platform_globals: Iterable[str] = ()) -> None:
        self.storage = storage
        self.platform_globals = DEFAULT_PLATFORM_GLOBALS | frozenset(platform_globals)
        self._modules: Dict[str, Optional[SourceModule]] = {}
        self._load_errors: Dict[str, str] = {}
        self.logger = get_logger("analysis.program")

    # ------------------------------------------------------------------
    # Module loading
    # ------------------------------------------------------------------
    def load(self, path: str) -> Optional[SourceModule]:
        """Return the parsed module for ``path`` or ``None`` when it is missing.

        Unreadable or undecodable files also yield ``None``; the reason is
        kept for :meth:`load_error`.
        """
        key = _module_key(path)
        if key in self._modules:
            return self._modules[key]
        module: Optional[SourceModule] = None
        if self.storage.is_file(key):
            try:
                source = self.storage.read_text(key)
            except (OSError, UnicodeDecodeError) as exc:
                self.logger.warning("Unable to read %s: %s", key, exc)
                self._load_errors[key] = str(exc)
                self._modules[key] = None
                return None
            module = SourceModule(path=key, source=source, tree=parse_source(source, key))
            _index_module(module)
            self.logger.debug("Parsed %s", key)
        self._modules[key] = module
        return module

    def load_error(self, path: str) -> Optional[str]:
        """Return why ``path`` could not be read, if loading it failed."""
        return self._load_errors.get(_module_key(path))

    def preload(self, paths: Iterable[str]) -> None:
        for path in paths:
            self.load(path)

    def resolve_module(self, specifier: str, importer: SourceModule) -> Optional[SourceModule]:
        """Resolve a relative module specifier against the importing module."""
        base = posixpath.normpath(posixpath.join(importer.directory, specifier))
        candidates = [base]
        stem, ext = posixpath.splitext(base)
        if ext in {".js", ".jsx"}:
            candidates.extend([f"{stem}.ts", f"{stem}.tsx"])
        candidates.extend(f"{base}{suffix}" for suffix in _MODULE_SUFFIXES)
        candidates.extend(posixpath.join(base, index) for index in _INDEX_FILES)
        for candidate in candidates:
            if self.storage.is_file(candidate):
                return self.load(candidate)
        return None

    # ------------------------------------------------------------------
    # Declaration resolution
    # ------------------------------------------------------------------
    def resolve_declaration(self, node: Optional[Node], module: SourceModule) -> Optional[Declaration]:
        """Resolve an identifier or property access expression to its declaration."""
        node = unwrap_expression(node)
        if node is None:
            return None
        if node.type in {"identifier", "type_identifier"}:
            return self.resolve_name(node_text(node), node, module)
        if node.type in {"member_expression", "nested_type_identifier"}:
            obj = node.child_by_field_name("object") or node.child_by_field_name("module")
            prop = node.child_by_field_name("property") or node.child_by_field_name("name")
            owner = self.resolve_declaration(obj, module)
            if owner is None or prop is None:
                return None
            if owner.kind is DeclarationKind.EXTERNAL:
                return Declaration(DeclarationKind.EXTERNAL, node_text(node))
            if owner.kind is DeclarationKind.NAMESPACE and owner.target is not None:
                return self.find_export(owner.target, node_text(prop))
        return None

    def resolve_name(self, name: str, at: Node, module: SourceModule) -> Optional[Declaration]:
        scoped = self._resolve_in_scopes(name, at, module)
        if scoped is not None:
            return scoped
        return self.resolve_module_binding(name, module) or self._global(name)

    def resolve_module_binding(
        self, name: str, module: SourceModule, seen: Optional[Set[Tuple[str, str]]] = None
    ) -> Optional[Declaration]:
        local = module.locals.get(name)
        if local is not None:
            kind, node = local
            return Declaration(kind, name, module, node)
        binding = module.imports.get(name)
        if binding is not None:
            return self._follow_import(binding, module, name, seen)
        return None

    def find_export(
        self, module: SourceModule, name: str, seen: Optional[Set[Tuple[str, str]]] = None
    ) -> Optional[Declaration]:
        """Resolve an exported name, following re-exports and ``export *``."""
        seen = set() if seen is None else seen
        marker = (module.path, name)
        if marker in seen:
            return None
        seen.add(marker)

        entry = module.exports.get(name)
        if entry is not None:
            if entry.node is not None and entry.kind is not None:
                return Declaration(entry.kind, name, module, entry.node)
            if entry.local is not None:
                return self.resolve_module_binding(entry.local, module, seen)
            if entry.reexport is not None:
                return self._follow_import(entry.reexport, module, name, seen)
        if name == "default":
            return None
        for specifier in module.star_exports:
            found = self._follow_import(_ImportBinding(specifier, name), module, name, seen)
            if found is not None:
                return found
        return None

    def find_type_alias(self, name: str, at: Node, module: SourceModule) -> Optional[Declaration]:
        declaration = self.resolve_name(name, at, module)
        if declaration is not None and declaration.kind is DeclarationKind.TYPE_ALIAS:
            return declaration
        return None

    def is_external(self, declaration: Declaration) -> bool:
        if declaration.kind is DeclarationKind.EXTERNAL:
            return True
        return declaration.module is not None and declaration.module.is_declaration_file

    def is_parameter(self, declaration: Declaration) -> bool:
        return declaration.kind is DeclarationKind.PARAMETER

    def _follow_import(
        self,
        binding: _ImportBinding,
        module: SourceModule,
        name: str,
        seen: Optional[Set[Tuple[str, str]]],
    ) -> Optional[Declaration]:
        if not is_relative_specifier(binding.specifier):
            return Declaration(DeclarationKind.EXTERNAL, name)
        target = self.resolve_module(binding.specifier, module)
        if target is None:
            self.logger.debug("Unable to locate module %s imported by %s", binding.specifier, module.path)
            return None
        if target.is_declaration_file:
            return Declaration(DeclarationKind.EXTERNAL, name, target)
        if binding.imported == "*":
            return Declaration(DeclarationKind.NAMESPACE, name, module, target=target)
        return self.find_export(target, binding.imported, seen)

    def _global(self, name: str) -> Optional[Declaration]:
        if name in self.platform_globals or _PLATFORM_PATTERN.match(name):
            return Declaration(DeclarationKind.EXTERNAL, name)
        return None

    def _resolve_in_scopes(self, name: str, at: Node, module: SourceModule) -> Optional[Declaration]:
        current = at.parent
        while current is not None and current.type != "program":
            if current.type in FUNCTION_NODE_TYPES and _declares_parameter(current, name):
                return Declaration(DeclarationKind.PARAMETER, name, module, current)
            if current.type == "statement_block":
                for statement in current.named_children:
                    for candidate, kind, node in _declarations_in(statement):
                        if candidate == name:
                            return Declaration(kind, name, module, node)
            current = current.parent
        return None


def _module_key(path: str) -> str:
    return os.path.abspath(path).replace("\\", "/")


def _declares_parameter(function: Node, name: str) -> bool:
    single = function.child_by_field_name("parameter")
    if single is not None:
        return node_text(single) == name
    for field_name in ("parameters", "type_parameters"):
        params = function.child_by_field_name(field_name)
        if params is None:
            continue
        for param in named_children(params):
            target = param.child_by_field_name("pattern") or param.child_by_field_name("name")
            if target is not None and node_text(target) == name:
                return True
    return False


__all__ = [
    "CLASS_NODE_TYPES",
    "DEFAULT_PLATFORM_GLOBALS",
    "Declaration",
    "DeclarationKind",
    "FUNCTION_NODE_TYPES",
    "SourceModule",
    "SourceTree",
    "declared_name",
    "is_relative_specifier",
]
