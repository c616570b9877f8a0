"""Domain Types — identifiers, status tags and the outcome carrier for document access.

Invariants:
    - DocumentId wraps int: server-assigned from 0 upward, immutable once stored
    - DocumentStatus has exactly four members; every access operation yields one
    - Outcome.value is set only when status is OK

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - Outcome is a frozen dataclass, not an exception: callers switch on status
      so no unhandled state reaches the HTTP boundary
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, NewType, TypeVar


# ─── Identity Types ──────────────────────────────────────────────

DocumentId = NewType("DocumentId", int)


# ─── Enums ───────────────────────────────────────────────────────

class DocumentStatus(str, Enum):
    """Outcome tag of every Document Access operation."""
    OK = "ok"
    NOT_FOUND = "not_found"
    COULD_NOT_PROCEED = "could_not_proceed"        # external store failure
    IMPLEMENTATION_ERROR = "implementation_error"  # server-side invariant broken


# ─── Outcome ─────────────────────────────────────────────────────

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Status tag plus the value produced on success."""
    status: DocumentStatus
    value: T | None = None

    @classmethod
    def ok(cls, value: T) -> "Outcome[T]":
        return cls(DocumentStatus.OK, value)

    @classmethod
    def fail(cls, status: DocumentStatus) -> "Outcome[T]":
        if status is DocumentStatus.OK:
            raise ValueError("fail() requires a non-OK status")
        return cls(status)

    @property
    def is_ok(self) -> bool:
        return self.status is DocumentStatus.OK
