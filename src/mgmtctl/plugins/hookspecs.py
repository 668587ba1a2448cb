"""Pluggy hook specifications for mgmtctl notifications and lifecycle events.

``on_message`` carries every user-facing notification (success toasts,
constraint violations, remote failures). The ``post_*`` hooks fire after a
remote mutation succeeded, before the dependent view is refreshed.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("mgmtctl")
hookimpl = pluggy.HookimplMarker("mgmtctl")


class MgmtctlHookSpec:
    """Hook specifications for the mgmtctl plugin system."""

    @hookspec
    def on_message(self, level: str, text: str) -> None:
        """Called for every user-facing notification."""

    @hookspec
    def post_add(self, resource_type: str, name: str | None, address: str) -> None:
        """Called after a resource was added."""

    @hookspec
    def post_save(
        self,
        resource_type: str,
        name: str | None,
        address: str,
        fields_changed: list[str],
    ) -> None:
        """Called after attributes of a resource were written."""

    @hookspec
    def post_reset(
        self,
        resource_type: str,
        name: str | None,
        address: str,
        fields_reset: list[str],
    ) -> None:
        """Called after attributes of a resource were reset to their defaults."""

    @hookspec
    def post_remove(self, resource_type: str, name: str | None, address: str) -> None:
        """Called after a resource was removed."""

    @hookspec
    def post_assign(self, content: str, server_groups: list[str], enabled: bool) -> None:
        """Called after content was assigned to server groups."""

    @hookspec
    def post_unassign(self, content: str, server_groups: list[str]) -> None:
        """Called after content was unassigned from server groups."""
