"""Deployment content and its server-group assignments."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel


class Content(BaseModel):
    """A deployment in the content repository and the server groups it is assigned to."""

    model_config = {"frozen": True}

    name: str
    runtime_name: str | None = None
    server_groups: tuple[str, ...] = ()

    @property
    def effective_runtime_name(self) -> str:
        return self.runtime_name or self.name

    def unassigned(self, all_server_groups: Iterable[str]) -> set[str]:
        """Server groups from *all_server_groups* this content is not assigned to."""
        return set(all_server_groups) - set(self.server_groups)
