"""Classification enums for thread pools, slots, selection, and messages."""

from __future__ import annotations

from enum import StrEnum


class ThreadPoolVariant(StrEnum):
    """The two sibling thread-pool collections under one work manager.

    At most one pool of each variant may exist per work manager. The
    server does not reject a duplicate, so the check happens client side.
    """

    LONG_RUNNING = "long-running"
    SHORT_RUNNING = "short-running"

    @property
    def child_type(self) -> str:
        """Child type name of this variant's collection under a work manager."""
        return f"{self.value}-thread-pool"

    @property
    def label(self) -> str:
        return self.value.replace("-", " ").title()

    @property
    def other(self) -> ThreadPoolVariant:
        if self is ThreadPoolVariant.LONG_RUNNING:
            return ThreadPoolVariant.SHORT_RUNNING
        return ThreadPoolVariant.LONG_RUNNING

    @classmethod
    def from_child_type(cls, child_type: str) -> ThreadPoolVariant:
        for variant in cls:
            if variant.child_type == child_type:
                return variant
        msg = f"Not a thread pool child type: {child_type!r}"
        raise ValueError(msg)


class SlotState(StrEnum):
    """How many variants of a parent's thread pools are already taken."""

    OPEN = "open"
    PARTIALLY_FILLED = "partially-filled"
    CLOSED = "closed"


class SelectionMode(StrEnum):
    """Direction of a bulk assignment dialog."""

    ASSIGN = "assign"
    UNASSIGN = "unassign"


class MessageLevel(StrEnum):
    """Severity of a user-facing notification."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
