"""Explicit result type for catalog lookups.

Every resolution step reports *why* it produced nothing instead of
returning a bare empty list, so callers (and tests) can tell a genuine miss
from an upstream failure or a step that was never attempted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class LookupOutcome(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    UPSTREAM_ERROR = "upstream_error"
    NOT_ATTEMPTED = "not_attempted"


@dataclass(frozen=True)
class Lookup(Generic[T]):
    """Outcome plus items. Only ``FOUND`` carries items."""

    outcome: LookupOutcome
    items: tuple[T, ...] = ()

    @classmethod
    def found(cls, items: list[T] | tuple[T, ...]) -> Lookup[T]:
        """Build a result from *items*; an empty sequence becomes NOT_FOUND."""
        if not items:
            return cls(LookupOutcome.NOT_FOUND)
        return cls(LookupOutcome.FOUND, tuple(items))

    @classmethod
    def not_found(cls) -> Lookup[T]:
        return cls(LookupOutcome.NOT_FOUND)

    @classmethod
    def failed(cls) -> Lookup[T]:
        return cls(LookupOutcome.UPSTREAM_ERROR)

    @classmethod
    def skipped(cls) -> Lookup[T]:
        return cls(LookupOutcome.NOT_ATTEMPTED)

    @property
    def ok(self) -> bool:
        return self.outcome is LookupOutcome.FOUND

    @property
    def first(self) -> T | None:
        """Canonical item: the first one in upstream order."""
        return self.items[0] if self.items else None
