"""Tests for SelectionWorkflow — assign/unassign dialog state."""

from __future__ import annotations

from typing import Any

import pytest

from mgmtctl.domain import messages
from mgmtctl.domain.content import Content
from mgmtctl.domain.types import SelectionMode
from mgmtctl.services.result import EMPTY_SELECTION, VALIDATION_FAILED
from mgmtctl.services.selection import SelectionWorkflow, sort_keys

APP = Content(name="app.war")


class _Calls:
    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def __call__(self, *args: Any) -> None:
        self.calls.append(args)


class TestSortKeys:
    def test_codepoint_puts_uppercase_first(self) -> None:
        assert sort_keys(["b", "A", "a", "B"]) == ["A", "B", "a", "b"]

    def test_casefold_ignores_case(self) -> None:
        assert sort_keys(["b", "A", "a", "B"], "casefold") == ["A", "a", "B", "b"]


class TestAssignDialog:
    def test_empty_confirm_shows_indicator_and_keeps_dialog_open(self) -> None:
        callback = _Calls()
        workflow = SelectionWorkflow.for_assign(APP, {"g3", "g1", "g2"}, callback)
        workflow.show()

        result = workflow.confirm()

        assert not result.ok
        assert result.error is not None
        assert result.error.code == EMPTY_SELECTION
        assert result.error.message == messages.no_server_group_selected()
        assert workflow.indicator_visible is True
        assert workflow.is_open is True
        assert callback.calls == []

    def test_confirm_after_selecting_invokes_callback_once(self) -> None:
        callback = _Calls()
        workflow = SelectionWorkflow.for_assign(APP, {"g3", "g1", "g2"}, callback)
        workflow.show()
        workflow.confirm()

        workflow.select("g2")
        result = workflow.confirm()

        assert result.ok
        assert result.op == "assign"
        assert result.data == {"content": "app.war", "server_groups": ["g2"], "enabled": False}
        assert callback.calls == [(APP, ["g2"], False)]
        assert workflow.is_open is False
        assert workflow.indicator_visible is False

    def test_rows_sorted_and_selection_in_table_order(self) -> None:
        callback = _Calls()
        workflow = SelectionWorkflow.for_assign(APP, ["g3", "g1", "g2"], callback)
        workflow.show()

        workflow.select("g3", "g1")

        assert [row.key for row in workflow.rows] == ["g1", "g2", "g3"]
        assert workflow.selected == ["g1", "g3"]

    def test_enable_toggle_is_passed_through(self) -> None:
        callback = _Calls()
        workflow = SelectionWorkflow.for_assign(APP, ["g1"], callback)
        workflow.show()
        workflow.select("g1")
        workflow.set_enable(True)

        workflow.confirm()

        assert callback.calls == [(APP, ["g1"], True)]

    def test_show_resets_previous_state(self) -> None:
        workflow = SelectionWorkflow.for_assign(APP, ["g1", "g2"], _Calls())
        workflow.show()
        workflow.select("g1")
        workflow.set_enable(True)
        workflow.confirm()

        workflow.show()

        assert workflow.selected == []
        assert workflow.enable is False
        assert workflow.indicator_visible is False
        assert workflow.is_open is True

    def test_presentation(self) -> None:
        workflow = SelectionWorkflow.for_assign(APP, ["g1"], _Calls())
        assert workflow.mode is SelectionMode.ASSIGN
        assert workflow.title == "Assign Content"
        assert workflow.primary_label == "Assign"
        assert workflow.enable_visible is True
        assert "app.war" in workflow.description

    def test_casefold_collation(self) -> None:
        workflow = SelectionWorkflow.for_assign(
            APP, ["beta", "Alpha", "alpha"], _Calls(), collation="casefold"
        )
        workflow.show()
        assert [row.key for row in workflow.rows] == ["Alpha", "alpha", "beta"]


class TestUnassignDialog:
    def test_confirm_passes_content_and_keys(self) -> None:
        callback = _Calls()
        workflow = SelectionWorkflow.for_unassign(APP, ["g2", "g1"], callback)
        workflow.show()
        workflow.select("g1", "g2")

        result = workflow.confirm()

        assert result.ok
        assert result.op == "unassign"
        assert result.data["enabled"] is None
        assert callback.calls == [(APP, ["g1", "g2"])]

    def test_presentation(self) -> None:
        workflow = SelectionWorkflow.for_unassign(APP, ["g1"], _Calls())
        assert workflow.title == "Unassign Content"
        assert workflow.primary_label == "Unassign"
        assert workflow.enable_visible is False


class TestSelectionEdits:
    def test_toggle_and_deselect(self) -> None:
        workflow = SelectionWorkflow.for_assign(APP, ["g1", "g2"], _Calls())
        workflow.show()

        workflow.toggle("g1")
        workflow.toggle("g2")
        workflow.toggle("g1")
        assert workflow.selected == ["g2"]

        workflow.deselect("g2")
        assert workflow.selected == []

    def test_clear_selection(self) -> None:
        workflow = SelectionWorkflow.for_assign(APP, ["g1", "g2"], _Calls())
        workflow.show()
        workflow.select("g1", "g2")
        workflow.clear_selection()
        assert workflow.selected == []

    def test_unknown_key_raises(self) -> None:
        workflow = SelectionWorkflow.for_assign(APP, ["g1"], _Calls())
        workflow.show()
        with pytest.raises(KeyError):
            workflow.select("nope")

    def test_cancel_closes_without_callback(self) -> None:
        callback = _Calls()
        workflow = SelectionWorkflow.for_assign(APP, ["g1"], callback)
        workflow.show()
        workflow.select("g1")

        workflow.cancel()

        assert workflow.is_open is False
        assert callback.calls == []

    def test_confirm_when_closed_is_rejected(self) -> None:
        callback = _Calls()
        workflow = SelectionWorkflow.for_assign(APP, ["g1"], callback)
        workflow.show()
        workflow.select("g1")
        workflow.confirm()

        result = workflow.confirm()

        assert result.error is not None
        assert result.error.code == VALIDATION_FAILED
        assert len(callback.calls) == 1
