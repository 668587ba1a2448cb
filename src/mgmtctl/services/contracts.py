"""Typed payload contracts for dispatcher and service boundaries.

These models validate step and result payload shapes so that a malformed
response or a renamed key fails fast in tests and during development.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


def dump_validated[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


class ChildrenStep(BaseModel):
    """One ``read-children-resources`` step of a composite response."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    outcome: Literal["success", "failed"]
    result: dict[str, dict[str, Any] | None] | None = None
    failure_description: str | None = Field(default=None, alias="failure-description")


class SlotDecisionData(BaseModel):
    """Payload contract for ``CardinalityGuard.launch_add``."""

    state: Literal["open", "partially-filled", "closed"]
    parent: str
    existing: list[str]
    offered: list[str]
    locked: bool


class ThreadPoolsData(BaseModel):
    """Payload contract for ``ViewRefresher.load_thread_pools``."""

    parent: str
    long_running: list[str]
    short_running: list[str]


class AssignmentData(BaseModel):
    """Payload contract for content assign / unassign."""

    content: str
    server_groups: list[str]
    enabled: bool | None = None
