"""Tests for CompositeQuery — parallel child reads and result interpretation."""

from __future__ import annotations

import pytest

from mgmtctl.domain.address import ResourceAddress
from mgmtctl.domain.operations import (
    CHILD_TYPE,
    READ_CHILDREN_RESOURCES,
    CompositeResult,
)
from mgmtctl.domain.types import ThreadPoolVariant
from mgmtctl.infrastructure.dispatcher import LocalDispatcher
from mgmtctl.infrastructure.model_tree import ManagementModel
from mgmtctl.services.composite import (
    CompositeQuery,
    InvalidResultShapeError,
    thread_pools_query,
)

WM1 = ResourceAddress.parse("/subsystem=jca/workmanager=wm1")


def _run(model: ManagementModel, query: CompositeQuery) -> CompositeResult:
    results: list[CompositeResult] = []
    LocalDispatcher(model).execute(query.composite, results.append)
    assert len(results) == 1
    return results[0]


class TestBuild:
    def test_one_step_per_child_type_in_order(self) -> None:
        query = CompositeQuery.build_parallel_read_children(WM1, ["a", "b", "c"])
        assert query.size == 3
        assert query.composite.size == 3
        assert [s.params[CHILD_TYPE] for s in query.composite.steps] == ["a", "b", "c"]
        assert all(s.name == READ_CHILDREN_RESOURCES for s in query.composite.steps)
        assert all(s.address == WM1 for s in query.composite.steps)

    def test_keyed_step_index(self) -> None:
        query = CompositeQuery.keyed(WM1, {"second": "y", "first": "x"})
        assert query.step_index("second") == 0
        assert query.step_index("first") == 1

    def test_thread_pools_query_keyed_by_variant(self) -> None:
        query = thread_pools_query(WM1)
        assert query.step_index(ThreadPoolVariant.LONG_RUNNING) == 0
        assert query.step_index(ThreadPoolVariant.SHORT_RUNNING) == 1
        assert query.child_types == (
            "long-running-thread-pool",
            "short-running-thread-pool",
        )

    def test_keys_and_types_must_align(self) -> None:
        with pytest.raises(ValueError, match="same length"):
            CompositeQuery(WM1, ["a", "b"], ["only-one"])


class TestInterpret:
    def test_against_model(self, model: ManagementModel) -> None:
        query = thread_pools_query(WM1)
        pools = query.interpret_keyed(_run(model, query))
        assert [p.name for p in pools[ThreadPoolVariant.LONG_RUNNING]] == ["lrt-a"]
        assert pools[ThreadPoolVariant.LONG_RUNNING][0].value["max-threads"] == 10
        assert pools[ThreadPoolVariant.SHORT_RUNNING] == []

    def test_positional_alignment(self, model: ManagementModel) -> None:
        wm3 = ResourceAddress.parse("/subsystem=jca/workmanager=wm3")
        query = CompositeQuery.build_parallel_read_children(
            wm3, ["short-running-thread-pool", "long-running-thread-pool"]
        )
        srt, lrt = query.interpret(_run(model, query))
        assert [p.name for p in srt] == ["srt-c"]
        assert [p.name for p in lrt] == ["lrt-c"]

    @pytest.mark.parametrize("size", [1, 2, 3])
    @pytest.mark.parametrize("delta", [-1, 1], ids=["shorter", "longer"])
    def test_step_count_mismatch_raises(self, size: int, delta: int) -> None:
        child_types = [f"type-{i}" for i in range(size)]
        query = CompositeQuery.build_parallel_read_children(WM1, child_types)
        steps = tuple({"outcome": "success", "result": {}} for _ in range(size + delta))
        with pytest.raises(InvalidResultShapeError) as exc_info:
            query.interpret(CompositeResult(steps=steps))
        assert exc_info.value.expected == size
        assert exc_info.value.actual == size + delta

    def test_shape_error_is_value_error(self) -> None:
        assert issubclass(InvalidResultShapeError, ValueError)

    def test_failed_step_raises(self) -> None:
        query = thread_pools_query(WM1)
        result = CompositeResult(
            steps=(
                {"outcome": "success", "result": {}},
                {"outcome": "failed", "failure-description": "boom"},
            )
        )
        with pytest.raises(ValueError, match="boom"):
            query.interpret(result)

    def test_missing_result_is_empty_collection(self) -> None:
        query = thread_pools_query(WM1)
        result = CompositeResult(steps=({"outcome": "success"}, {"outcome": "success"}))
        assert query.interpret(result) == [[], []]
