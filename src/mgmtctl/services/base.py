"""BaseService — abstract foundation for all mgmtctl services.

Every service receives a :class:`ManagementContext` at construction time.
The context provides the dispatcher, the statement context, the metadata
registry, and the event bus. Services keep no state of their own: the
managed server is authoritative.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future
from typing import TYPE_CHECKING, Any

from mgmtctl.domain.address import AddressTemplate, ResourceAddress
from mgmtctl.domain.types import MessageLevel
from mgmtctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from mgmtctl.infrastructure.context import ManagementContext
    from mgmtctl.infrastructure.dispatcher import Request

logger = logging.getLogger(__name__)

Continuation = Callable[[], None]
Target = AddressTemplate | ResourceAddress


def completed(result: ServiceResult) -> Future[ServiceResult]:
    """A Future that is already resolved with *result*."""
    future: Future[ServiceResult] = Future()
    future.set_result(result)
    return future


class BaseService:
    """Abstract base for all service-layer classes.

    Subclasses submit requests through :meth:`_mutate` and :meth:`_read`,
    which implement the "mutate, then refresh" contract: the continuation
    runs only after the remote call succeeded, and a failure is surfaced
    as an error message without running it.

    Usage::

        class CrudCoordinator(BaseService):
            def remove(self, ...) -> Future[ServiceResult]:
                return self._mutate("remove", operations.remove(address), ...)
    """

    def __init__(self, ctx: ManagementContext) -> None:
        self._ctx = ctx

    # ------------------------------------------------------------------
    # Address helpers
    # ------------------------------------------------------------------

    def _resolve(self, target: Target, *wildcards: str) -> ResourceAddress:
        if isinstance(target, ResourceAddress):
            return target
        return target.resolve(self._ctx.statement_context, *wildcards)

    # ------------------------------------------------------------------
    # Notifications and lifecycle events
    # ------------------------------------------------------------------

    def _notify(self, level: MessageLevel, text: str) -> None:
        self._ctx.notify(level, text)

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Dispatch a lifecycle event. No-op if event bus not initialized.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        bus = self._ctx.event_bus
        if bus is None:
            return
        try:
            bus.dispatch(hook_name, payload)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")

    # ------------------------------------------------------------------
    # Request submission
    # ------------------------------------------------------------------

    def _mutate(
        self,
        op: str,
        request: Request,
        *,
        on_success: Continuation | None,
        success_message: str | None = None,
        event: tuple[str, dict[str, Any]] | None = None,
        data: dict[str, Any] | None = None,
        warnings: list[str] | None = None,
    ) -> Future[ServiceResult]:
        """Submit a mutation; on success notify, fire *event*, then continue.

        The returned Future resolves after the continuation ran, or with the
        remote error if the server rejected the request.
        """
        future: Future[ServiceResult] = Future()
        collected = list(warnings or [])

        def succeeded(_result: Any) -> None:
            if success_message:
                self._notify(MessageLevel.SUCCESS, success_message)
            if event is not None:
                self._dispatch_event(event[0], event[1], collected)
            if on_success is not None:
                on_success()
            future.set_result(
                ServiceResult(ok=True, op=op, data=data or {}, warnings=collected)
            )

        def failed(error: ServiceError) -> None:
            logger.info("%s failed: %s", op, error.message)
            self._notify(MessageLevel.ERROR, error.message)
            future.set_result(ServiceResult(ok=False, op=op, error=error, data=data or {}))

        logger.debug("%s: submitting %s", op, request.describe())
        self._ctx.dispatcher.execute(request, succeeded, failed)
        return future

    def _read(
        self,
        op: str,
        request: Request,
        on_result: Callable[[Any], dict[str, Any] | ServiceResult | None],
    ) -> Future[ServiceResult]:
        """Submit a read and hand its result to *on_result*.

        Whatever *on_result* returns becomes the ServiceResult data, unless
        it returns a complete ServiceResult of its own. An exception raised
        by *on_result* (e.g. a malformed composite result) is set on the
        returned Future.
        """
        future: Future[ServiceResult] = Future()

        def succeeded(result: Any) -> None:
            try:
                outcome = on_result(result)
            except Exception as exc:
                logger.error("%s: cannot interpret result: %s", op, exc)
                future.set_exception(exc)
                return
            if isinstance(outcome, ServiceResult):
                future.set_result(outcome)
                return
            future.set_result(ServiceResult(ok=True, op=op, data=outcome or {}))

        def failed(error: ServiceError) -> None:
            logger.info("%s failed: %s", op, error.message)
            self._notify(MessageLevel.ERROR, error.message)
            future.set_result(ServiceResult(ok=False, op=op, error=error))

        self._ctx.dispatcher.execute(request, succeeded, failed)
        return future
