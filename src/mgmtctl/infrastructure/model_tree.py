"""In-process management model — a resource tree answering management operations.

Stands in for a remote server when the console core runs embedded or under
test. Responses follow the management protocol's response shape::

    {"outcome": "success", "result": ...}
    {"outcome": "failed", "failure-description": "..."}

Composites are all-or-nothing: if any step fails, every change made by the
earlier steps is rolled back.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping
from typing import Any

from mgmtctl.domain.address import WILDCARD, ResourceAddress
from mgmtctl.domain.operations import (
    ADD,
    CHILD_TYPE,
    FAILED,
    FAILURE_DESCRIPTION,
    NAME,
    OUTCOME,
    READ_ATTRIBUTE,
    READ_CHILDREN_NAMES,
    READ_CHILDREN_RESOURCES,
    READ_RESOURCE,
    RECURSIVE,
    RECURSIVE_DEPTH,
    REMOVE,
    RESULT,
    SUCCESS,
    UNDEFINE_ATTRIBUTE,
    VALUE,
    WRITE_ATTRIBUTE,
    Composite,
    Operation,
)

logger = logging.getLogger(__name__)

_UNLIMITED_DEPTH = 1_000


class OperationFailedError(Exception):
    """A single operation was rejected; the message is the failure description."""


class ManagementModel:
    """Resource tree keyed by address; children keep insertion order."""

    def __init__(self) -> None:
        self._nodes: dict[ResourceAddress, dict[str, Any]] = {ResourceAddress.root(): {}}

    @classmethod
    def from_resources(cls, resources: Mapping[str, Mapping[str, Any] | None]) -> ManagementModel:
        """Build a model from ``{"/type=name/...": attributes}``.

        Missing ancestors are created with no attributes.
        """
        model = cls()
        for raw_address, attributes in resources.items():
            address = ResourceAddress.parse(raw_address)
            for depth in range(1, address.depth):
                ancestor = ResourceAddress(segments=address.segments[:depth])
                model._nodes.setdefault(ancestor, {})
            model._nodes[address] = dict(attributes or {})
        return model

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def exists(self, address: ResourceAddress) -> bool:
        return address in self._nodes

    def attributes(self, address: ResourceAddress) -> dict[str, Any]:
        self._require(address)
        return dict(self._nodes[address])

    def children(self, address: ResourceAddress, child_type: str) -> list[ResourceAddress]:
        return [
            a for a in self._nodes if a.is_child_of(address) and a.last_type == child_type
        ]

    def child_types(self, address: ResourceAddress) -> list[str]:
        types: list[str] = []
        for a in self._nodes:
            if a.is_child_of(address) and a.last_type not in types:
                types.append(a.last_type)  # type: ignore[arg-type]
        return types

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self, operation: Operation) -> dict[str, Any]:
        """Execute one operation and return its response."""
        try:
            result = self._apply(operation)
        except OperationFailedError as exc:
            logger.debug("Operation %s failed: %s", operation.describe(), exc)
            return {OUTCOME: FAILED, FAILURE_DESCRIPTION: str(exc)}
        return {OUTCOME: SUCCESS, RESULT: result}

    def execute_composite(self, composite: Composite) -> dict[str, Any]:
        """Execute all steps or none. Step results are keyed ``step-1`` .. ``step-N``."""
        snapshot = copy.deepcopy(self._nodes)
        steps: dict[str, Any] = {}
        failures: list[str] = []
        for index, operation in enumerate(composite.steps, start=1):
            response = self.execute(operation)
            steps[f"step-{index}"] = response
            if response[OUTCOME] == FAILED:
                failures.append(f"step-{index}: {response[FAILURE_DESCRIPTION]}")
                break

        if failures:
            self._nodes = snapshot
            description = (
                "Composite operation failed and was rolled back. Steps that failed: "
                + "; ".join(failures)
            )
            return {OUTCOME: FAILED, FAILURE_DESCRIPTION: description, RESULT: steps}
        return {OUTCOME: SUCCESS, RESULT: steps}

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _apply(self, operation: Operation) -> Any:
        address = operation.address
        if any(name == WILDCARD for _, name in address.segments):
            msg = f"Wildcard address {address} is not supported by {operation.name}"
            raise OperationFailedError(msg)

        handler = _HANDLERS.get(operation.name)
        if handler is None:
            msg = f"Operation '{operation.name}' is not supported at {address}"
            raise OperationFailedError(msg)
        return handler(self, operation)

    def _op_add(self, operation: Operation) -> None:
        self._add(operation.address, operation.payload)

    def _op_remove(self, operation: Operation) -> None:
        self._remove(operation.address)

    def _op_read_resource(self, operation: Operation) -> dict[str, Any]:
        self._require(operation.address)
        return self._read(operation.address, _depth(operation.params))

    def _op_read_children_resources(self, operation: Operation) -> dict[str, Any]:
        self._require(operation.address)
        child_type = _param(operation.params, CHILD_TYPE)
        depth = _depth(operation.params)
        return {
            child.last_name: self._read(child, depth)
            for child in self.children(operation.address, child_type)
        }

    def _op_read_children_names(self, operation: Operation) -> list[str | None]:
        self._require(operation.address)
        child_type = _param(operation.params, CHILD_TYPE)
        return [child.last_name for child in self.children(operation.address, child_type)]

    def _op_read_attribute(self, operation: Operation) -> Any:
        self._require(operation.address)
        return self._nodes[operation.address].get(_param(operation.params, NAME))

    def _op_write_attribute(self, operation: Operation) -> None:
        self._require(operation.address)
        name = _param(operation.params, NAME)
        self._nodes[operation.address][name] = operation.params.get(VALUE)

    def _op_undefine_attribute(self, operation: Operation) -> None:
        self._require(operation.address)
        self._nodes[operation.address].pop(_param(operation.params, NAME), None)

    def _add(self, address: ResourceAddress, payload: Mapping[str, Any]) -> None:
        if address.is_root:
            msg = "Cannot add the root resource"
            raise OperationFailedError(msg)
        if address in self._nodes:
            msg = f"Duplicate resource {address}"
            raise OperationFailedError(msg)
        self._require(address.parent)
        self._nodes[address] = dict(payload)

    def _remove(self, address: ResourceAddress) -> None:
        if address.is_root:
            msg = "Cannot remove the root resource"
            raise OperationFailedError(msg)
        self._require(address)
        for existing in [a for a in self._nodes if a.is_under(address)]:
            del self._nodes[existing]

    def _read(self, address: ResourceAddress, depth: int) -> dict[str, Any]:
        node: dict[str, Any] = copy.deepcopy(self._nodes[address])
        for child_type in self.child_types(address):
            children = self.children(address, child_type)
            if depth > 0:
                node[child_type] = {c.last_name: self._read(c, depth - 1) for c in children}
            else:
                node[child_type] = {c.last_name: None for c in children}
        return node

    def _require(self, address: ResourceAddress) -> None:
        if address not in self._nodes:
            msg = f"Management resource '{address}' not found"
            raise OperationFailedError(msg)


_HANDLERS: dict[str, Callable[[ManagementModel, Operation], Any]] = {
    ADD: ManagementModel._op_add,
    REMOVE: ManagementModel._op_remove,
    READ_RESOURCE: ManagementModel._op_read_resource,
    READ_CHILDREN_RESOURCES: ManagementModel._op_read_children_resources,
    READ_CHILDREN_NAMES: ManagementModel._op_read_children_names,
    READ_ATTRIBUTE: ManagementModel._op_read_attribute,
    WRITE_ATTRIBUTE: ManagementModel._op_write_attribute,
    UNDEFINE_ATTRIBUTE: ManagementModel._op_undefine_attribute,
}


def _param(params: Mapping[str, Any], key: str) -> Any:
    if key not in params:
        msg = f"Missing required parameter '{key}'"
        raise OperationFailedError(msg)
    return params[key]


def _depth(params: Mapping[str, Any]) -> int:
    if RECURSIVE_DEPTH in params:
        return int(params[RECURSIVE_DEPTH])
    if params.get(RECURSIVE):
        return _UNLIMITED_DEPTH
    return 0
