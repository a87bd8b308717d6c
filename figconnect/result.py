"""Value-plus-diagnostics results passed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, List, Protocol, Sequence, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class Diagnostics(Protocol):
    """Anything carrying warning and error messages."""

    warnings: Sequence[str]
    errors: Sequence[str]


@dataclass
class Result(Generic[T]):
    """A stage output together with the warnings and errors it produced."""

    value: T
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def merge(self, *diagnostics: Diagnostics) -> "Result[T]":
        """Return a copy with diagnostics from other results appended."""
        warnings = list(self.warnings)
        errors = list(self.errors)
        for item in diagnostics:
            warnings.extend(item.warnings)
            errors.extend(item.errors)
        return Result(self.value, warnings, errors)

    def with_warnings(self, warnings: Sequence[str]) -> "Result[T]":
        if not warnings:
            return self
        return Result(self.value, [*self.warnings, *warnings], list(self.errors))

    def with_errors(self, errors: Sequence[str]) -> "Result[T]":
        if not errors:
            return self
        return Result(self.value, list(self.warnings), [*self.errors, *errors])

    def map(self, mapper: Callable[[T], U]) -> "Result[U]":
        return Result(mapper(self.value), list(self.warnings), list(self.errors))


__all__ = ["Diagnostics", "Result"]
