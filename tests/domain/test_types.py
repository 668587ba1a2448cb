"""Tests for domain type enums — parametrized."""

import pytest

from mgmtctl.domain.types import MessageLevel, SelectionMode, SlotState, ThreadPoolVariant

ENUM_CASES = [
    (
        ThreadPoolVariant,
        {"long-running", "short-running"},
    ),
    (
        SlotState,
        {"open", "partially-filled", "closed"},
    ),
    (
        SelectionMode,
        {"assign", "unassign"},
    ),
    (
        MessageLevel,
        {"success", "info", "warning", "error"},
    ),
]


@pytest.mark.parametrize(
    "enum_cls,expected_values",
    ENUM_CASES,
    ids=[cls.__name__ for cls, _ in ENUM_CASES],
)
def test_enum_members_and_values(enum_cls: type, expected_values: set[str]) -> None:
    """Each StrEnum has the expected members with matching string values."""
    actual_values = {e.value for e in enum_cls}
    assert actual_values == expected_values
    # StrEnum members compare equal to their string value
    for member in enum_cls:
        assert member == member.value
        assert isinstance(member, str)


class TestThreadPoolVariant:
    def test_child_types(self) -> None:
        assert ThreadPoolVariant.LONG_RUNNING.child_type == "long-running-thread-pool"
        assert ThreadPoolVariant.SHORT_RUNNING.child_type == "short-running-thread-pool"

    def test_other(self) -> None:
        assert ThreadPoolVariant.LONG_RUNNING.other is ThreadPoolVariant.SHORT_RUNNING
        assert ThreadPoolVariant.SHORT_RUNNING.other is ThreadPoolVariant.LONG_RUNNING

    def test_label(self) -> None:
        assert ThreadPoolVariant.SHORT_RUNNING.label == "Short Running"

    def test_from_child_type(self) -> None:
        variant = ThreadPoolVariant.from_child_type("short-running-thread-pool")
        assert variant is ThreadPoolVariant.SHORT_RUNNING

    def test_from_unknown_child_type(self) -> None:
        with pytest.raises(ValueError, match="Not a thread pool child type"):
            ThreadPoolVariant.from_child_type("workmanager")
