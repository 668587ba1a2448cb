"""Thread pool presentation model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from mgmtctl.domain.operations import Property
from mgmtctl.domain.types import ThreadPoolVariant


class ThreadPool(BaseModel):
    """A long or short running thread pool of a work manager."""

    model_config = {"frozen": True}

    name: str
    variant: ThreadPoolVariant
    attributes: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_long_running(self) -> bool:
        return self.variant is ThreadPoolVariant.LONG_RUNNING

    @classmethod
    def from_property(cls, prop: Property, variant: ThreadPoolVariant) -> ThreadPool:
        return cls(name=prop.name, variant=variant, attributes=dict(prop.value))
