"""SelectionWorkflow — multi-select dialog state for bulk assign / unassign.

The workflow holds the state of one dialog session: the rows on offer,
the current selection, the "nothing selected" indicator and the enable
toggle. Confirming hands the selected keys, in table order, to the
callback exactly once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, Literal

from pydantic import BaseModel

from mgmtctl.domain import messages
from mgmtctl.domain.content import Content
from mgmtctl.domain.types import SelectionMode
from mgmtctl.services.contracts import AssignmentData, dump_validated
from mgmtctl.services.result import EMPTY_SELECTION, VALIDATION_FAILED, ServiceResult

logger = logging.getLogger(__name__)

Collation = Literal["codepoint", "casefold"]
AssignCallback = Callable[[Content, list[str], bool], Any]
UnassignCallback = Callable[[Content, list[str]], Any]


class SelectableRow(BaseModel):
    """One row of the selection table."""

    model_config = {"frozen": True}

    key: str


def sort_keys(keys: Iterable[str], collation: Collation = "codepoint") -> list[str]:
    """Lexicographic order of *keys*; ``casefold`` ignores case differences."""
    if collation == "casefold":
        return sorted(keys, key=lambda k: (k.casefold(), k))
    return sorted(keys)


class SelectionWorkflow:
    """State of an assign or unassign dialog over a set of keys.

    Build instances with :meth:`for_assign` or :meth:`for_unassign`.
    """

    def __init__(
        self,
        content: Content,
        keys: Iterable[str],
        mode: SelectionMode,
        callback: AssignCallback | UnassignCallback,
        *,
        collation: Collation = "codepoint",
    ) -> None:
        self.content = content
        self.mode = mode
        self.collation = collation
        self._keys = frozenset(keys)
        self._callback = callback
        self._rows: list[SelectableRow] = []
        self._selected: set[str] = set()
        self._enable = False
        self.is_open = False
        self.indicator_visible = False

    @classmethod
    def for_assign(
        cls,
        content: Content,
        unassigned: Iterable[str],
        callback: AssignCallback,
        *,
        collation: Collation = "codepoint",
    ) -> SelectionWorkflow:
        return cls(content, unassigned, SelectionMode.ASSIGN, callback, collation=collation)

    @classmethod
    def for_unassign(
        cls,
        content: Content,
        assigned: Iterable[str],
        callback: UnassignCallback,
        *,
        collation: Collation = "codepoint",
    ) -> SelectionWorkflow:
        return cls(content, assigned, SelectionMode.UNASSIGN, callback, collation=collation)

    # ── Presentation ─────────────────────────────────────────────────

    @property
    def title(self) -> str:
        if self.mode is SelectionMode.ASSIGN:
            return messages.ASSIGN_CONTENT
        return messages.UNASSIGN_CONTENT

    @property
    def description(self) -> str:
        if self.mode is SelectionMode.ASSIGN:
            return messages.assign_content_description(self.content.name)
        return messages.unassign_content_description(self.content.name)

    @property
    def primary_label(self) -> str:
        return messages.ASSIGN if self.mode is SelectionMode.ASSIGN else messages.UNASSIGN

    @property
    def enable_visible(self) -> bool:
        return self.mode is SelectionMode.ASSIGN

    @property
    def enable(self) -> bool:
        return self._enable

    @property
    def rows(self) -> list[SelectableRow]:
        return list(self._rows)

    @property
    def selected(self) -> list[str]:
        """Selected keys in table order."""
        return [row.key for row in self._rows if row.key in self._selected]

    # ── Lifecycle ────────────────────────────────────────────────────

    def show(self) -> None:
        """Open the dialog with all keys sorted and nothing selected."""
        self._rows = [SelectableRow(key=key) for key in sort_keys(self._keys, self.collation)]
        self._selected.clear()
        self._enable = False
        self.indicator_visible = False
        self.is_open = True

    def cancel(self) -> None:
        self.is_open = False

    def confirm(self) -> ServiceResult:
        """Hand the selection to the callback and close the dialog.

        With nothing selected the indicator becomes visible, the dialog
        stays open and no callback runs.
        """
        op = str(self.mode)
        if not self.is_open:
            return ServiceResult.failure(op, VALIDATION_FAILED, "Selection dialog is not open")

        keys = self.selected
        self.indicator_visible = not keys
        if not keys:
            return ServiceResult.failure(op, EMPTY_SELECTION, messages.no_server_group_selected())

        logger.debug("%s %s: %s", op, self.content.name, ", ".join(keys))
        if self.mode is SelectionMode.ASSIGN:
            self._callback(self.content, keys, self._enable)
            enabled: bool | None = self._enable
        else:
            self._callback(self.content, keys)
            enabled = None
        self.is_open = False
        data = dump_validated(
            AssignmentData,
            {"content": self.content.name, "server_groups": keys, "enabled": enabled},
        )
        return ServiceResult(ok=True, op=op, data=data)

    # ── Selection ────────────────────────────────────────────────────

    def select(self, *keys: str) -> None:
        for key in keys:
            self._selected.add(self._row_key(key))

    def deselect(self, *keys: str) -> None:
        for key in keys:
            self._selected.discard(self._row_key(key))

    def toggle(self, key: str) -> None:
        key = self._row_key(key)
        if key in self._selected:
            self._selected.remove(key)
        else:
            self._selected.add(key)

    def clear_selection(self) -> None:
        self._selected.clear()

    def set_enable(self, value: bool) -> None:
        self._enable = value

    def _row_key(self, key: str) -> str:
        if not any(row.key == key for row in self._rows):
            msg = f"No row {key!r} in selection table"
            raise KeyError(msg)
        return key
