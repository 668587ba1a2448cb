"""Unbound form descriptions handed to the dialog layer.

The core decides *what* a form offers (items, choices, locked values);
rendering and input handling belong to the presentation layer.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from mgmtctl.domain.metadata import AttributeDescription

TYPE_ITEM = "type"
NAME_ITEM = "name"


class FormItem(BaseModel):
    """One input of a form."""

    model_config = {"frozen": True}

    name: str
    label: str
    value: Any = None
    choices: tuple[str, ...] = ()
    required: bool = False
    enabled: bool = True
    description: str = ""

    @property
    def is_select(self) -> bool:
        return bool(self.choices)

    @classmethod
    def from_attribute(cls, attribute: AttributeDescription) -> FormItem:
        return cls(
            name=attribute.name,
            label=label_for(attribute.name),
            value=attribute.default,
            required=attribute.required,
            enabled=not attribute.read_only,
            description=attribute.description,
        )


class AddResourceForm(BaseModel):
    """Form shown by an add-resource dialog, items in display order."""

    model_config = {"frozen": True}

    id: str
    items: tuple[FormItem, ...] = Field(default_factory=tuple)

    def item(self, name: str) -> FormItem | None:
        for form_item in self.items:
            if form_item.name == name:
                return form_item
        return None

    @property
    def item_names(self) -> list[str]:
        return [form_item.name for form_item in self.items]


def label_for(attribute_name: str) -> str:
    """``max-threads`` -> ``Max Threads``."""
    return " ".join(part.capitalize() for part in attribute_name.split("-"))
