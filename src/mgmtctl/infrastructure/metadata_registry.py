"""Metadata registry — attribute descriptions looked up by address template.

Lookups ignore ``{placeholder}`` segments, so the same metadata serves a
standalone server and every profile of a domain.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from mgmtctl.domain.address import AddressTemplate
from mgmtctl.domain.metadata import Metadata

logger = logging.getLogger(__name__)


class MissingMetadataError(KeyError):
    """No metadata was registered for a template."""


def _key(template: AddressTemplate | str) -> str:
    raw = template.template if isinstance(template, AddressTemplate) else template
    parts = [p for p in raw.split("/") if p and not p.startswith("{")]
    return "/" + "/".join(parts)


class MetadataRegistry:
    """Holds :class:`Metadata` per resource type."""

    def __init__(self, entries: Mapping[AddressTemplate | str, Metadata] | None = None) -> None:
        self._entries: dict[str, Metadata] = {}
        for template, metadata in (entries or {}).items():
            self.register(template, metadata)

    def register(self, template: AddressTemplate | str, metadata: Metadata) -> None:
        self._entries[_key(template)] = metadata
        logger.debug("Registered metadata for %s", _key(template))

    def register_description(
        self, template: AddressTemplate | str, description: Mapping[str, Any]
    ) -> Metadata:
        """Register metadata parsed from a resource description dict."""
        metadata = Metadata.from_description(description)
        self.register(template, metadata)
        return metadata

    def lookup(self, template: AddressTemplate | str) -> Metadata:
        try:
            return self._entries[_key(template)]
        except KeyError:
            msg = f"No metadata registered for {_key(template)}"
            raise MissingMetadataError(msg) from None

    def __contains__(self, template: object) -> bool:
        if not isinstance(template, (AddressTemplate, str)):
            return False
        return _key(template) in self._entries
