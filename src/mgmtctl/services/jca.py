"""JcaConsole — configuration of the JCA subsystem.

Wires the CRUD coordinator, the thread-pool cardinality guard and the view
refresher together. Changes to the subsystem's singletons and collections
reload the whole subsystem; thread-pool changes reload only the thread-pool
lists of the affected work manager.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from concurrent.futures import Future
from typing import TYPE_CHECKING, Any

from mgmtctl.domain.forms import label_for
from mgmtctl.domain.messages import THREAD_POOL
from mgmtctl.domain.templates import (
    JCA_TEMPLATE,
    TRACER_TEMPLATE,
    thread_pool_address,
    thread_pool_metadata_template,
)
from mgmtctl.services.base import BaseService
from mgmtctl.services.cardinality import CardinalityGuard, DialogPresenter
from mgmtctl.services.crud import CrudCoordinator
from mgmtctl.services.refresh import ConfigurationView, ViewRefresher

if TYPE_CHECKING:
    from mgmtctl.domain.address import AddressTemplate, ResourceAddress
    from mgmtctl.domain.metadata import Metadata
    from mgmtctl.domain.thread_pool import ThreadPool
    from mgmtctl.infrastructure.context import ManagementContext
    from mgmtctl.services.result import ServiceResult


class JcaConsole(BaseService):
    """Operations offered by the JCA configuration page."""

    def __init__(
        self,
        ctx: ManagementContext,
        view: ConfigurationView,
        dialogs: DialogPresenter,
    ) -> None:
        super().__init__(ctx)
        self.refresher = ViewRefresher(ctx, view)
        self.crud = CrudCoordinator(ctx)
        self.guard = CardinalityGuard(ctx, dialogs, self.refresher)

    def reload(self) -> Future[ServiceResult]:
        return self.refresher.reload(JCA_TEMPLATE)

    def _reload(self) -> None:
        self.reload()

    # ------------------------------------------------------------------
    # Generic CRUD
    # ------------------------------------------------------------------

    def add(
        self,
        type_: str,
        name: str,
        template: AddressTemplate,
        payload: Mapping[str, Any] | None,
    ) -> Future[ServiceResult]:
        return self.crud.add(type_, name, template, payload, self._reload)

    def save_resource(
        self,
        template: AddressTemplate,
        name: str,
        changed: Mapping[str, Any],
        success_message: str | None = None,
    ) -> Future[ServiceResult]:
        return self.crud.save(
            _type_of(template),
            name,
            template,
            changed,
            self._reload,
            success_message=success_message,
        )

    def save_singleton(
        self,
        template: AddressTemplate,
        changed: Mapping[str, Any],
        success_message: str | None = None,
    ) -> Future[ServiceResult]:
        return self.crud.save_singleton(
            _type_of(template),
            template,
            changed,
            self._reload,
            success_message=success_message,
        )

    def reset_resource(
        self,
        template: AddressTemplate,
        type_: str,
        name: str,
        attributes: Iterable[str],
        metadata: Metadata,
    ) -> Future[ServiceResult]:
        return self.crud.reset(type_, name, template, attributes, metadata, self._reload)

    def reset_singleton(
        self,
        type_: str,
        template: AddressTemplate,
        attributes: Iterable[str],
        metadata: Metadata,
    ) -> Future[ServiceResult]:
        return self.crud.reset_singleton(type_, template, attributes, metadata, self._reload)

    def remove_singleton(self, type_: str, template: AddressTemplate) -> Future[ServiceResult]:
        return self.crud.remove_singleton(type_, template, self._reload)

    # ------------------------------------------------------------------
    # Tracer
    # ------------------------------------------------------------------

    def add_tracer(self) -> Future[ServiceResult]:
        return self.crud.add_singleton(
            _type_of(TRACER_TEMPLATE), TRACER_TEMPLATE, None, self._reload
        )

    # ------------------------------------------------------------------
    # Thread pools of normal and distributed work managers
    # ------------------------------------------------------------------

    def launch_add_thread_pool(
        self, workmanager_template: AddressTemplate, workmanager: str
    ) -> Future[ServiceResult]:
        """Offer an add dialog for the thread-pool variant(s) still missing."""
        return self.guard.launch_add(workmanager_template, workmanager)

    def load_thread_pools(
        self, workmanager_template: AddressTemplate, workmanager: str
    ) -> Future[ServiceResult]:
        return self.refresher.load_thread_pools(workmanager_template, workmanager)

    def save_thread_pool(
        self,
        workmanager_template: AddressTemplate,
        workmanager: str,
        thread_pool: ThreadPool,
        changed: Mapping[str, Any],
    ) -> Future[ServiceResult]:
        metadata = self._ctx.metadata.lookup(thread_pool_metadata_template(thread_pool.variant))
        return self.crud.save(
            THREAD_POOL,
            thread_pool.name,
            self._thread_pool_address(workmanager_template, workmanager, thread_pool),
            changed,
            lambda: self.refresher.load_thread_pools(workmanager_template, workmanager),
            metadata=metadata,
        )

    def reset_thread_pool(
        self,
        workmanager_template: AddressTemplate,
        workmanager: str,
        thread_pool: ThreadPool,
        attributes: Iterable[str],
    ) -> Future[ServiceResult]:
        metadata = self._ctx.metadata.lookup(thread_pool_metadata_template(thread_pool.variant))
        return self.crud.reset(
            THREAD_POOL,
            thread_pool.name,
            self._thread_pool_address(workmanager_template, workmanager, thread_pool),
            attributes,
            metadata,
            lambda: self.refresher.load_thread_pools(workmanager_template, workmanager),
        )

    def remove_thread_pool(
        self,
        workmanager_template: AddressTemplate,
        workmanager: str,
        thread_pool: ThreadPool,
    ) -> Future[ServiceResult]:
        return self.crud.remove(
            THREAD_POOL,
            thread_pool.name,
            self._thread_pool_address(workmanager_template, workmanager, thread_pool),
            lambda: self.refresher.load_thread_pools(workmanager_template, workmanager),
        )

    def _thread_pool_address(
        self,
        workmanager_template: AddressTemplate,
        workmanager: str,
        thread_pool: ThreadPool,
    ) -> ResourceAddress:
        parent = self._resolve(workmanager_template, workmanager)
        return thread_pool_address(parent, thread_pool.variant, thread_pool.name)


def _type_of(template: AddressTemplate) -> str:
    """Human readable resource type, e.g. ``Archive Validation``."""
    return label_for(template.last_name or "")
