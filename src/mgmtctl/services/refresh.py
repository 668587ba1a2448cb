"""View refresh — re-read authoritative state and push it to the view.

Refreshes are full-state replace: the view receives the complete payload
and re-renders unconditionally. No diffing is involved.
"""

from __future__ import annotations

from concurrent.futures import Future
from typing import TYPE_CHECKING, Any, Protocol

from mgmtctl.domain.operations import CompositeResult, Property, read_resource
from mgmtctl.domain.types import ThreadPoolVariant
from mgmtctl.services.base import BaseService, Target
from mgmtctl.services.composite import thread_pools_query
from mgmtctl.services.contracts import ThreadPoolsData, dump_validated

if TYPE_CHECKING:
    from mgmtctl.domain.address import AddressTemplate
    from mgmtctl.infrastructure.context import ManagementContext
    from mgmtctl.services.result import ServiceResult


class ConfigurationView(Protocol):
    """Presentation side of a configuration page."""

    def update(self, payload: dict[str, Any]) -> None:
        """Replace the whole resource payload shown by the view."""

    def update_thread_pools(
        self,
        parent_template: AddressTemplate,
        parent_name: str,
        long_running: list[Property],
        short_running: list[Property],
    ) -> None:
        """Replace both thread-pool lists of one work manager."""


class ViewRefresher(BaseService):
    """Issues the defining read of a resource and pushes the result to a view."""

    def __init__(self, ctx: ManagementContext, view: ConfigurationView) -> None:
        super().__init__(ctx)
        self._view = view

    @property
    def view(self) -> ConfigurationView:
        return self._view

    def reload(self, target: Target, *, depth: int | None = None) -> Future[ServiceResult]:
        """Read *target* (``read-resource`` to *depth*) and push it via ``update``."""
        if depth is None:
            depth = self._ctx.settings.jca.reload_depth
        address = self._resolve(target)

        def push(payload: Any) -> dict[str, Any]:
            self._view.update(dict(payload or {}))
            return {"address": str(address)}

        return self._read("reload", read_resource(address, depth=depth), push)

    def load_thread_pools(
        self, parent_template: AddressTemplate, parent_name: str
    ) -> Future[ServiceResult]:
        """Read both thread-pool collections and push them via ``update_thread_pools``."""
        parent = self._resolve(parent_template, parent_name)
        query = thread_pools_query(parent)

        def push(result: CompositeResult) -> dict[str, Any]:
            pools = query.interpret_keyed(result)
            lrt = pools[ThreadPoolVariant.LONG_RUNNING]
            srt = pools[ThreadPoolVariant.SHORT_RUNNING]
            self._view.update_thread_pools(parent_template, parent_name, lrt, srt)
            return dump_validated(
                ThreadPoolsData,
                {
                    "parent": str(parent),
                    "long_running": [p.name for p in lrt],
                    "short_running": [p.name for p in srt],
                },
            )

        return self._read("load_thread_pools", query.composite, push)
