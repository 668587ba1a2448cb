"""Management operations, composites, and their results.

An :class:`Operation` targets one :class:`ResourceAddress`; a
:class:`Composite` batches several operations into one request that the
server executes all-or-nothing. Results of a composite come back as a
:class:`CompositeResult` whose steps are index-aligned with the request.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from mgmtctl.domain.address import ResourceAddress

# --- Operation names ---

ADD = "add"
REMOVE = "remove"
READ_RESOURCE = "read-resource"
READ_CHILDREN_RESOURCES = "read-children-resources"
READ_CHILDREN_NAMES = "read-children-names"
READ_ATTRIBUTE = "read-attribute"
WRITE_ATTRIBUTE = "write-attribute"
UNDEFINE_ATTRIBUTE = "undefine-attribute"
COMPOSITE = "composite"

READ_OPERATIONS = frozenset(
    {READ_RESOURCE, READ_CHILDREN_RESOURCES, READ_CHILDREN_NAMES, READ_ATTRIBUTE}
)

# --- Parameter and response keys ---

CHILD_TYPE = "child-type"
NAME = "name"
VALUE = "value"
RECURSIVE = "recursive"
RECURSIVE_DEPTH = "recursive-depth"
OUTCOME = "outcome"
RESULT = "result"
FAILURE_DESCRIPTION = "failure-description"
SUCCESS = "success"
FAILED = "failed"


class Operation(BaseModel):
    """One management operation against a single address."""

    model_config = {"frozen": True}

    name: str
    address: ResourceAddress
    params: dict[str, Any] = Field(default_factory=dict)
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_read(self) -> bool:
        return self.name in READ_OPERATIONS

    def describe(self) -> str:
        return f"{self.address}:{self.name}"


def add(address: ResourceAddress, payload: Mapping[str, Any] | None = None) -> Operation:
    return Operation(name=ADD, address=address, payload=dict(payload or {}))


def remove(address: ResourceAddress) -> Operation:
    return Operation(name=REMOVE, address=address)


def read_resource(address: ResourceAddress, *, depth: int = 0) -> Operation:
    params: dict[str, Any] = {}
    if depth > 0:
        params[RECURSIVE_DEPTH] = depth
    return Operation(name=READ_RESOURCE, address=address, params=params)


def read_children_resources(
    address: ResourceAddress, child_type: str, *, depth: int = 0
) -> Operation:
    params: dict[str, Any] = {CHILD_TYPE: child_type}
    if depth > 0:
        params[RECURSIVE_DEPTH] = depth
    return Operation(name=READ_CHILDREN_RESOURCES, address=address, params=params)


def write_attribute(address: ResourceAddress, name: str, value: Any) -> Operation:
    return Operation(name=WRITE_ATTRIBUTE, address=address, params={NAME: name, VALUE: value})


def undefine_attribute(address: ResourceAddress, name: str) -> Operation:
    return Operation(name=UNDEFINE_ATTRIBUTE, address=address, params={NAME: name})


class Composite(BaseModel):
    """Ordered batch of operations sent as a single request."""

    model_config = {"frozen": True}

    steps: tuple[Operation, ...] = ()

    @classmethod
    def of(cls, *operations: Operation) -> Composite:
        return cls(steps=tuple(operations))

    @property
    def size(self) -> int:
        return len(self.steps)

    @property
    def is_empty(self) -> bool:
        return not self.steps

    def describe(self) -> str:
        return f"{COMPOSITE}[{', '.join(step.describe() for step in self.steps)}]"


class Property(BaseModel):
    """A named child resource: key is the child name, value its attributes."""

    model_config = {"frozen": True}

    name: str
    value: dict[str, Any] = Field(default_factory=dict)


def as_property_list(node: Any) -> list[Property]:
    """Convert a ``{name: attributes}`` mapping into an ordered property list."""
    if not node:
        return []
    if not isinstance(node, Mapping):
        msg = f"Expected a mapping of child resources, got {type(node).__name__}"
        raise TypeError(msg)
    return [Property(name=str(key), value=dict(value or {})) for key, value in node.items()]


class CompositeResult(BaseModel):
    """Per-step results of a composite, index-aligned with its steps.

    Index positions carry no meaning beyond their correspondence to the
    submitted steps.
    """

    model_config = {"frozen": True}

    steps: tuple[dict[str, Any], ...] = ()

    @property
    def size(self) -> int:
        return len(self.steps)

    def step(self, index: int) -> dict[str, Any]:
        return self.steps[index]


class PendingMutation(BaseModel):
    """The one mutation a CRUD call submits; exists for the duration of that call."""

    model_config = {"frozen": True}

    type: str
    name: str | None
    address: ResourceAddress
    changed: dict[str, Any] = Field(default_factory=dict)

    def describe(self) -> str:
        label = f"{self.type} {self.name}" if self.name else self.type
        return f"{label} at {self.address}"
