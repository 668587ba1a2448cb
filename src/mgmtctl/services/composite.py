"""CompositeQuery — parallel reads of sibling collections under one parent.

A query issues one ``read-children-resources`` step per child type against
the same parent address, in input order, and keeps a typed mapping from
key to step index alongside the request. Consumers look collections up by
key and never by literal step position.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from mgmtctl.domain.address import ResourceAddress
from mgmtctl.domain.operations import (
    Composite,
    CompositeResult,
    Property,
    as_property_list,
    read_children_resources,
)
from mgmtctl.domain.types import ThreadPoolVariant
from mgmtctl.services.contracts import ChildrenStep


class InvalidResultShapeError(ValueError):
    """A composite result's step count differs from the request's."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Composite result has {actual} step(s), expected {expected}")


class CompositeQuery[K]:
    """A fixed-shape batch of ``read-children-resources`` steps.

    Pure: building and interpreting have no side effects.
    """

    def __init__(
        self,
        parent: ResourceAddress,
        child_types: Sequence[str],
        keys: Sequence[K],
    ) -> None:
        if len(keys) != len(child_types):
            msg = "keys and child_types must have the same length"
            raise ValueError(msg)
        self.parent = parent
        self.child_types: tuple[str, ...] = tuple(child_types)
        self._index: dict[K, int] = {}
        for index, key in enumerate(keys):
            self._index.setdefault(key, index)
        self.composite = Composite.of(
            *(read_children_resources(parent, child_type) for child_type in self.child_types)
        )

    @classmethod
    def build_parallel_read_children(
        cls, parent: ResourceAddress, child_types: Sequence[str]
    ) -> CompositeQuery[str]:
        """One step per child type, keyed by the child type itself."""
        return CompositeQuery(parent, child_types, list(child_types))

    @classmethod
    def keyed(cls, parent: ResourceAddress, child_types: Mapping[K, str]) -> CompositeQuery[K]:
        """One step per mapping entry, keyed by the mapping's keys."""
        return cls(parent, list(child_types.values()), list(child_types.keys()))

    @property
    def size(self) -> int:
        return len(self.child_types)

    def step_index(self, key: K) -> int:
        return self._index[key]

    def interpret(self, result: CompositeResult) -> list[list[Property]]:
        """Return one child collection per step, aligned with ``child_types``.

        Raises:
            InvalidResultShapeError: If *result* does not have exactly one
                step per child type.
        """
        if result.size != self.size:
            raise InvalidResultShapeError(self.size, result.size)
        collections: list[list[Property]] = []
        for index, raw in enumerate(result.steps):
            step = ChildrenStep.model_validate(raw)
            if step.outcome != "success":
                child_type = self.child_types[index]
                msg = f"Step {index + 1} ({child_type}) failed: {step.failure_description}"
                raise ValueError(msg)
            collections.append(as_property_list(step.result))
        return collections

    def interpret_keyed(self, result: CompositeResult) -> dict[K, list[Property]]:
        collections = self.interpret(result)
        return {key: collections[index] for key, index in self._index.items()}


def thread_pools_query(parent: ResourceAddress) -> CompositeQuery[ThreadPoolVariant]:
    """Read both thread-pool collections of a (distributed) work manager."""
    return CompositeQuery.keyed(
        parent, {variant: variant.child_type for variant in ThreadPoolVariant}
    )
