"""Synchronous event dispatch via pluggy with a bounded in-memory journal.

Every dispatched event is recorded in the journal with its final status
(``completed`` or ``failed``) so an embedding application can show what
happened during a session. Nothing is persisted: all authoritative state
lives on the managed server.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import itertools
import logging
from collections import deque
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mgmtctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class EventBus:
    """Synchronous hook dispatch with a bounded journal.

    Parameters:
        plugin_manager: Loaded PluginManager for hook dispatch.
        journal_size: Number of most recent events kept in the journal.
    """

    def __init__(self, plugin_manager: PluginManager, *, journal_size: int = 100) -> None:
        self._pm = plugin_manager
        self._journal: deque[dict[str, Any]] = deque(maxlen=journal_size)
        self._ids = itertools.count(1)

    @property
    def plugin_manager(self) -> PluginManager:
        return self._pm

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> int:
        """Call every implementation of *hook_name* with *payload*.

        Returns the journal id of the event. A failing plugin marks the
        event ``failed``; the exception never reaches the caller.
        """
        event_id = next(self._ids)
        entry: dict[str, Any] = {
            "id": event_id,
            "hook_name": hook_name,
            "payload": payload,
            "status": "pending",
            "error": None,
        }
        self._journal.append(entry)

        hook_fn = getattr(self._pm.hook, hook_name, None)
        if hook_fn is None:
            entry["status"] = "completed"
            return event_id

        try:
            hook_fn(**payload)
        except Exception as exc:
            logger.debug("Hook %s failed: %s", hook_name, exc, exc_info=True)
            entry["status"] = "failed"
            entry["error"] = str(exc)
        else:
            entry["status"] = "completed"
        return event_id

    def journal(self, *, status: str | None = None) -> list[dict[str, Any]]:
        """Snapshot of journaled events, oldest first, optionally filtered by status."""
        entries = [dict(e) for e in self._journal]
        if status is None:
            return entries
        return [e for e in entries if e["status"] == status]

    def clear(self) -> None:
        self._journal.clear()
