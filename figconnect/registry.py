"""Constructor-injected target registries for emitters and parsers."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import metadata
from typing import (
    Callable,
    Dict,
    Generic,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
)

TInstance = TypeVar("TInstance")
TMeta = TypeVar("TMeta")


class RegistrationError(ValueError):
    """Raised when a target is registered twice."""


class UnknownTargetError(LookupError):
    """Raised when a target has no registered factory."""


@dataclass(frozen=True)
class RegistryEntry(Generic[TInstance, TMeta]):
    factory: Callable[[], TInstance]
    metadata: TMeta


class Registry(Generic[TInstance, TMeta]):
    """Maps target identifiers to factories plus descriptive metadata.

    Registries are plain objects handed to whoever needs them; there is no
    process-wide instance.
    """

    def __init__(
        self,
        kind: str,
        entries: Optional[Iterable[Tuple[str, RegistryEntry[TInstance, TMeta]]]] = None,
    ) -> None:
        self.kind = kind
        self._entries: Dict[str, RegistryEntry[TInstance, TMeta]] = {}
        for target, entry in entries or ():
            self.register(target, entry.factory, entry.metadata)

    def register(self, target: str, factory: Callable[[], TInstance], meta: TMeta) -> None:
        if target in self._entries:
            raise RegistrationError(f"{self.kind} plugin already registered for target: {target}")
        self._entries[target] = RegistryEntry(factory=factory, metadata=meta)

    def has(self, target: str) -> bool:
        return target in self._entries

    def targets(self) -> List[str]:
        return list(self._entries)

    def metadata(self, target: str) -> TMeta:
        return self._entry(target).metadata

    def all_metadata(self) -> Mapping[str, TMeta]:
        return {target: entry.metadata for target, entry in self._entries.items()}

    def create(self, target: str) -> TInstance:
        return self._entry(target).factory()

    def default_target(self) -> str:
        if not self._entries:
            raise UnknownTargetError(f"No {self.kind.lower()} targets registered.")
        return next(iter(self._entries))

    def _entry(self, target: str) -> RegistryEntry[TInstance, TMeta]:
        try:
            return self._entries[target]
        except KeyError:
            raise UnknownTargetError(
                f"No {self.kind.lower()} registered for target: {target}"
            ) from None


def iter_entry_points(group: str) -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=group)


def load_entry_points(
    registry: Registry[TInstance, TMeta],
    group: str,
    coerce: Callable[[str, object], Tuple[Callable[[], TInstance], TMeta]],
) -> None:
    """Register third-party plugins advertised under an entry point group."""
    for entry in iter_entry_points(group):
        try:
            loaded = entry.load()
        except Exception as exc:
            raise RuntimeError(f"Failed to load {registry.kind.lower()} entry point '{entry.name}': {exc}") from exc
        factory, meta = coerce(entry.name, loaded)
        registry.register(entry.name, factory, meta)


def format_target_options(targets: Sequence[str]) -> str:
    return ", ".join([*targets, "all"])


def parse_emit_targets(raw: str, allowed: Sequence[str]) -> List[str]:
    """Parse a comma separated emit target list.

    ``all`` selects every allowed target; duplicates collapse while keeping
    first-seen order.
    """
    if not raw or not raw.strip():
        raise ValueError("Emit targets cannot be empty.")
    normalized = list(dict.fromkeys(allowed))
    if not normalized:
        raise ValueError("No emit targets registered.")

    tokens = [token.strip().lower() for token in raw.split(",") if token.strip()]
    if "all" in tokens:
        return normalized

    invalid = [token for token in tokens if token not in normalized]
    if invalid:
        raise ValueError(
            f"Invalid emit targets: {', '.join(invalid)}. "
            f"Valid targets are: {format_target_options(normalized)}."
        )
    unique = list(dict.fromkeys(tokens))
    if not unique:
        raise ValueError("No valid emit targets found.")
    return unique


__all__ = [
    "RegistrationError",
    "Registry",
    "RegistryEntry",
    "UnknownTargetError",
    "format_target_options",
    "load_entry_points",
    "parse_emit_targets",
]
