"""Dispatcher — executes operations and composites, one callback per request.

The :class:`Dispatcher` protocol is what the service layer consumes.
:class:`LocalDispatcher` executes against an in-process
:class:`~mgmtctl.infrastructure.model_tree.ManagementModel`.

Callbacks are one-shot. ``on_success`` receives the operation's ``result``
for a single operation and a :class:`CompositeResult` for a composite.
Without an ``on_failure`` callback, failures go to the dispatcher's own
error channel.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from mgmtctl.domain.operations import (
    FAILED,
    FAILURE_DESCRIPTION,
    OUTCOME,
    RESULT,
    Composite,
    CompositeResult,
    Operation,
)
from mgmtctl.infrastructure.model_tree import ManagementModel
from mgmtctl.services.result import REMOTE_FAILURE, ServiceError

logger = logging.getLogger(__name__)

Request = Operation | Composite
OnSuccess = Callable[[Any], None]
OnFailure = Callable[[ServiceError], None]


class Dispatcher(Protocol):
    """Executes one operation or composite and reports through callbacks."""

    def execute(
        self,
        request: Request,
        on_success: OnSuccess,
        on_failure: OnFailure | None = None,
    ) -> None: ...


@dataclass
class _PendingRequest:
    request: Request
    on_success: OnSuccess
    on_failure: OnFailure | None


class LocalDispatcher:
    """Dispatcher backed by an in-process management model.

    Parameters:
        model: The resource tree that answers requests.
        error_channel: Receives failures of requests that carry no
            ``on_failure`` callback.
        deferred: Hold requests until :meth:`flush` / :meth:`complete`
            instead of answering immediately. A held request is applied to
            the model only when it completes, like a server answering late.
    """

    def __init__(
        self,
        model: ManagementModel | None = None,
        *,
        error_channel: OnFailure | None = None,
        deferred: bool = False,
    ) -> None:
        self.model = model if model is not None else ManagementModel()
        self._error_channel = error_channel
        self._deferred = deferred
        self._pending: list[_PendingRequest] = []
        self.executed: list[Request] = []

    # ------------------------------------------------------------------
    # Dispatcher protocol
    # ------------------------------------------------------------------

    def execute(
        self,
        request: Request,
        on_success: OnSuccess,
        on_failure: OnFailure | None = None,
    ) -> None:
        self.executed.append(request)
        pending = _PendingRequest(request, on_success, on_failure)
        if self._deferred:
            self._pending.append(pending)
            return
        self._complete(pending)

    # ------------------------------------------------------------------
    # Deferred mode
    # ------------------------------------------------------------------

    @property
    def pending(self) -> int:
        return len(self._pending)

    def complete(self, index: int = 0) -> None:
        """Answer the held request at *index* (0 is the oldest)."""
        self._complete(self._pending.pop(index))

    def flush(self, *, reverse: bool = False) -> int:
        """Answer every held request, oldest first unless *reverse*.

        Requests submitted by callbacks while flushing are answered too.
        Returns the number of requests answered.
        """
        count = 0
        while self._pending:
            self.complete(-1 if reverse else 0)
            count += 1
        return count

    def set_error_channel(self, channel: OnFailure | None) -> None:
        self._error_channel = channel

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _complete(self, pending: _PendingRequest) -> None:
        request = pending.request
        logger.debug("Executing %s", request.describe())

        if isinstance(request, Composite):
            response = self.model.execute_composite(request)
        else:
            response = self.model.execute(request)

        if response[OUTCOME] == FAILED:
            error = ServiceError(
                code=REMOTE_FAILURE,
                message=str(response[FAILURE_DESCRIPTION]),
                detail={"request": request.describe()},
            )
            if pending.on_failure is not None:
                pending.on_failure(error)
            elif self._error_channel is not None:
                self._error_channel(error)
            else:
                logger.warning("Request %s failed: %s", request.describe(), error.message)
            return

        if isinstance(request, Composite):
            steps = response.get(RESULT) or {}
            pending.on_success(CompositeResult(steps=tuple(steps.values())))
        else:
            pending.on_success(response.get(RESULT))
