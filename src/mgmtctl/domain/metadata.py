"""Attribute metadata describing a resource type.

Metadata drives two things: which attributes an add form offers, and what
value each attribute returns to when a form is reset.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, Field


class AttributeDescription(BaseModel):
    """Description of a single attribute of a resource type."""

    model_config = {"frozen": True}

    name: str
    type: str = "STRING"
    description: str = ""
    default: Any = None
    nillable: bool = True
    read_only: bool = False

    @property
    def required(self) -> bool:
        return not self.nillable and self.default is None

    @property
    def has_default(self) -> bool:
        return self.default is not None

    @property
    def resettable(self) -> bool:
        """Whether a reset can bring this attribute back to its defined state."""
        return not self.read_only and (self.has_default or self.nillable)


class Metadata(BaseModel):
    """Attribute descriptions of one resource type, keyed by attribute name."""

    model_config = {"frozen": True}

    attributes: dict[str, AttributeDescription] = Field(default_factory=dict)

    @classmethod
    def empty(cls) -> Metadata:
        return cls()

    @classmethod
    def from_description(cls, description: Mapping[str, Any]) -> Metadata:
        """Build metadata from a resource description.

        Accepts the ``{"attributes": {name: {...}}}`` shape returned by a
        ``read-resource-description`` call, with hyphenated keys such as
        ``access-type``.
        """
        attributes: dict[str, AttributeDescription] = {}
        for name, raw in (description.get("attributes") or {}).items():
            raw = raw or {}
            attributes[name] = AttributeDescription(
                name=name,
                type=str(raw.get("type", "STRING")),
                description=str(raw.get("description", "")),
                default=raw.get("default"),
                nillable=bool(raw.get("nillable", True)),
                read_only=raw.get("access-type", "read-write") != "read-write",
            )
        return cls(attributes=attributes)

    def get(self, name: str) -> AttributeDescription | None:
        return self.attributes.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.attributes

    def select(self, names: Iterable[str]) -> list[AttributeDescription]:
        """Descriptions for *names* in the given order, skipping unknown names."""
        return [self.attributes[n] for n in names if n in self.attributes]

    @property
    def writable(self) -> list[str]:
        return [a.name for a in self.attributes.values() if not a.read_only]
