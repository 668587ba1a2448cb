"""CrudCoordinator — add, save, reset, and remove against the resource tree.

Every operation follows one contract: mutate remote state, then run the
``on_success`` continuation (typically a view refresh). On failure the
server's message is surfaced and the continuation does not run. Each call
submits exactly one operation or one composite, so no partial mutation is
possible.

The coordinator keeps no state between calls. Concurrent calls against the
same address are not coalesced; whichever response arrives last triggers
the final refresh, which always re-reads full state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import Future
from typing import Any

from mgmtctl.domain import messages, operations
from mgmtctl.domain.address import ResourceAddress
from mgmtctl.domain.metadata import Metadata
from mgmtctl.domain.operations import Composite, Operation, PendingMutation
from mgmtctl.domain.types import MessageLevel
from mgmtctl.infrastructure.dispatcher import Request
from mgmtctl.services.base import BaseService, Continuation, Target, completed
from mgmtctl.services.result import ServiceResult

logger = logging.getLogger(__name__)


def is_undefined(value: Any) -> bool:
    """Values that clear an attribute instead of writing it."""
    if value is None:
        return True
    return isinstance(value, (str, list, tuple, dict)) and not value


def as_request(ops: list[Operation]) -> Request:
    """A single operation stays single; several become one composite."""
    if len(ops) == 1:
        return ops[0]
    return Composite.of(*ops)


def change_operations(address: ResourceAddress, changed: Mapping[str, Any]) -> list[Operation]:
    """``write-attribute`` per changed value, ``undefine-attribute`` for cleared ones."""
    ops: list[Operation] = []
    for name, value in changed.items():
        if is_undefined(value):
            ops.append(operations.undefine_attribute(address, name))
        else:
            ops.append(operations.write_attribute(address, name, value))
    return ops


def reset_operations(
    address: ResourceAddress, attributes: Iterable[str], metadata: Metadata
) -> tuple[list[Operation], list[str], list[str]]:
    """Operations that return *attributes* to their defined defaults.

    An attribute with a default is written back to it; a nillable attribute
    without default is undefined; anything else cannot be reset.

    Returns ``(operations, reset_names, skipped_names)``.
    """
    ops: list[Operation] = []
    reset: list[str] = []
    skipped: list[str] = []
    for name in dict.fromkeys(attributes):
        description = metadata.get(name)
        if description is None or not description.resettable:
            skipped.append(name)
            continue
        if description.has_default:
            ops.append(operations.write_attribute(address, name, description.default))
        else:
            ops.append(operations.undefine_attribute(address, name))
        reset.append(name)
    return ops, reset, skipped


class CrudCoordinator(BaseService):
    """Generic add/save/reset/remove orchestration.

    *target* arguments accept an :class:`AddressTemplate`, resolved with the
    resource name for collection resources, or a resolved
    :class:`ResourceAddress`.
    """

    # ------------------------------------------------------------------
    # Add
    # ------------------------------------------------------------------

    def add(
        self,
        type_: str,
        name: str,
        template: Target,
        payload: Mapping[str, Any] | None,
        on_success: Continuation | None = None,
    ) -> Future[ServiceResult]:
        """Create *name* at *template* resolved with *name*."""
        address = self._resolve(template, name)
        return self._add(type_, name, address, payload, on_success)

    def add_singleton(
        self,
        type_: str,
        template: Target,
        payload: Mapping[str, Any] | None = None,
        on_success: Continuation | None = None,
    ) -> Future[ServiceResult]:
        """Create the single instance at *template*."""
        return self._add(type_, None, self._resolve(template), payload, on_success)

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save(
        self,
        type_: str,
        name: str,
        target: Target,
        changed: Mapping[str, Any],
        on_success: Continuation | None = None,
        *,
        success_message: str | None = None,
        metadata: Metadata | None = None,
    ) -> Future[ServiceResult]:
        """Write only *changed* attributes of *name*.

        An empty change set is a valid no-op: nothing is written and the
        continuation still runs exactly once.
        """
        address = self._resolve(target, name)
        return self._save(type_, name, address, changed, on_success, success_message, metadata)

    def save_singleton(
        self,
        type_: str,
        template: Target,
        changed: Mapping[str, Any],
        on_success: Continuation | None = None,
        *,
        success_message: str | None = None,
        metadata: Metadata | None = None,
    ) -> Future[ServiceResult]:
        address = self._resolve(template)
        return self._save(type_, None, address, changed, on_success, success_message, metadata)

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset(
        self,
        type_: str,
        name: str,
        target: Target,
        attributes: Iterable[str],
        metadata: Metadata,
        on_success: Continuation | None = None,
    ) -> Future[ServiceResult]:
        """Return the form's *attributes* of *name* to their metadata defaults."""
        address = self._resolve(target, name)
        return self._reset(type_, name, address, attributes, metadata, on_success)

    def reset_singleton(
        self,
        type_: str,
        template: Target,
        attributes: Iterable[str],
        metadata: Metadata,
        on_success: Continuation | None = None,
    ) -> Future[ServiceResult]:
        address = self._resolve(template)
        return self._reset(type_, None, address, attributes, metadata, on_success)

    # ------------------------------------------------------------------
    # Remove
    # ------------------------------------------------------------------

    def remove(
        self,
        type_: str,
        name: str,
        target: Target,
        on_success: Continuation | None = None,
    ) -> Future[ServiceResult]:
        return self._remove(type_, name, self._resolve(target, name), on_success)

    def remove_singleton(
        self,
        type_: str,
        template: Target,
        on_success: Continuation | None = None,
    ) -> Future[ServiceResult]:
        """Remove a singleton; its template carries no name segment to fill."""
        return self._remove(type_, None, self._resolve(template), on_success)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def read(
        self,
        target: Target,
        on_success: Callable[[dict[str, Any]], None] | None = None,
        *,
        depth: int = 1,
    ) -> Future[ServiceResult]:
        """``read-resource`` of *target* with ``recursive-depth`` *depth*."""
        address = self._resolve(target)

        def deliver(payload: Any) -> dict[str, Any]:
            resource = dict(payload or {})
            if on_success is not None:
                on_success(resource)
            return {"address": str(address), "resource": resource}

        return self._read("read", operations.read_resource(address, depth=depth), deliver)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _add(
        self,
        type_: str,
        name: str | None,
        address: ResourceAddress,
        payload: Mapping[str, Any] | None,
        on_success: Continuation | None,
    ) -> Future[ServiceResult]:
        mutation = PendingMutation(
            type=type_, name=name, address=address, changed=dict(payload or {})
        )
        logger.debug("add: %s", mutation.describe())
        return self._mutate(
            "add",
            operations.add(address, mutation.changed),
            on_success=on_success,
            success_message=messages.add_resource_success(type_, name),
            event=("post_add", {"resource_type": type_, "name": name, "address": str(address)}),
            data={"address": str(address), "name": name},
        )

    def _save(
        self,
        type_: str,
        name: str | None,
        address: ResourceAddress,
        changed: Mapping[str, Any],
        on_success: Continuation | None,
        success_message: str | None,
        metadata: Metadata | None,
    ) -> Future[ServiceResult]:
        warnings: list[str] = []
        values = dict(changed)
        if metadata is not None:
            writable = set(metadata.writable)
            for attribute in list(values):
                if attribute not in writable:
                    warnings.append(f"Skipped attribute not writable: {attribute}")
                    del values[attribute]

        if not values:
            self._notify(MessageLevel.INFO, messages.no_changes(type_, name))
            if on_success is not None:
                on_success()
            return completed(
                ServiceResult(
                    ok=True,
                    op="save",
                    data={"address": str(address), "fields_changed": []},
                    warnings=[*warnings, "No changes"],
                )
            )

        mutation = PendingMutation(type=type_, name=name, address=address, changed=values)
        logger.debug("save: %s (%s)", mutation.describe(), ", ".join(values))
        fields = list(values)
        return self._mutate(
            "save",
            as_request(change_operations(address, values)),
            on_success=on_success,
            success_message=success_message or messages.modify_resource_success(type_, name),
            event=(
                "post_save",
                {
                    "resource_type": type_,
                    "name": name,
                    "address": str(address),
                    "fields_changed": fields,
                },
            ),
            data={"address": str(address), "fields_changed": fields},
            warnings=warnings,
        )

    def _reset(
        self,
        type_: str,
        name: str | None,
        address: ResourceAddress,
        attributes: Iterable[str],
        metadata: Metadata,
        on_success: Continuation | None,
    ) -> Future[ServiceResult]:
        ops, reset, skipped = reset_operations(address, attributes, metadata)
        warnings = [f"Attribute cannot be reset: {attribute}" for attribute in skipped]

        if not ops:
            self._notify(MessageLevel.INFO, messages.no_reset(type_, name))
            if on_success is not None:
                on_success()
            return completed(
                ServiceResult(
                    ok=True,
                    op="reset",
                    data={"address": str(address), "fields_reset": []},
                    warnings=warnings,
                )
            )

        logger.debug("reset: %s at %s (%s)", type_, address, ", ".join(reset))
        return self._mutate(
            "reset",
            as_request(ops),
            on_success=on_success,
            success_message=messages.reset_resource_success(type_, name),
            event=(
                "post_reset",
                {
                    "resource_type": type_,
                    "name": name,
                    "address": str(address),
                    "fields_reset": reset,
                },
            ),
            data={"address": str(address), "fields_reset": reset},
            warnings=warnings,
        )

    def _remove(
        self,
        type_: str,
        name: str | None,
        address: ResourceAddress,
        on_success: Continuation | None,
    ) -> Future[ServiceResult]:
        logger.debug("remove: %s at %s", type_, address)
        return self._mutate(
            "remove",
            operations.remove(address),
            on_success=on_success,
            success_message=messages.remove_resource_success(type_, name),
            event=("post_remove", {"resource_type": type_, "name": name, "address": str(address)}),
            data={"address": str(address), "name": name},
        )

