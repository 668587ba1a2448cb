"""Resource addresses, address templates, and the statement context.

A :class:`ResourceAddress` names one node of the remote resource tree as an
ordered sequence of ``(type, name)`` segments. An :class:`AddressTemplate`
is the symbolic form of an address: segments may be ``{placeholders}``
filled from a :class:`StatementContext`, and segment values may be ``*``
wildcards filled positionally at resolve time.

Examples:
    >>> t = AddressTemplate.of("{selected.profile}/subsystem=jca/workmanager=*")
    >>> str(t.resolve(StatementContext(), "wm1"))
    '/subsystem=jca/workmanager=wm1'
    >>> ctx = StatementContext({"selected.profile": ("profile", "full")})
    >>> str(t.resolve(ctx, "wm1"))
    '/profile=full/subsystem=jca/workmanager=wm1'
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, Field

WILDCARD = "*"

Segment = tuple[str, str]


class ResourceAddress(BaseModel):
    """Immutable, hashable address of a node in the resource tree."""

    model_config = {"frozen": True}

    segments: tuple[Segment, ...] = ()

    @classmethod
    def root(cls) -> ResourceAddress:
        return cls()

    @classmethod
    def parse(cls, value: str) -> ResourceAddress:
        """Parse ``/type=name/type=name`` (leading slash optional)."""
        segments: list[Segment] = []
        for part in value.strip().split("/"):
            if not part:
                continue
            key, sep, name = part.partition("=")
            if not sep or not key or not name:
                msg = f"Malformed address segment {part!r} in {value!r}"
                raise ValueError(msg)
            segments.append((key, name))
        return cls(segments=tuple(segments))

    def append(self, type_: str, name: str) -> ResourceAddress:
        return ResourceAddress(segments=(*self.segments, (type_, name)))

    @property
    def parent(self) -> ResourceAddress:
        return ResourceAddress(segments=self.segments[:-1])

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def last_type(self) -> str | None:
        return self.segments[-1][0] if self.segments else None

    @property
    def last_name(self) -> str | None:
        return self.segments[-1][1] if self.segments else None

    def is_child_of(self, other: ResourceAddress) -> bool:
        """True if this address is a direct child of *other*."""
        return (
            len(self.segments) == len(other.segments) + 1
            and self.segments[: len(other.segments)] == other.segments
        )

    def is_under(self, other: ResourceAddress) -> bool:
        """True if this address equals *other* or lies in its subtree."""
        return self.segments[: len(other.segments)] == other.segments

    @property
    def depth(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        if not self.segments:
            return "/"
        return "".join(f"/{key}={name}" for key, name in self.segments)


class StatementContext(BaseModel):
    """Resolves ``{placeholder}`` template segments to concrete segments.

    A placeholder without a value resolves to nothing and its segment is
    dropped, which is how a standalone server ignores ``{selected.profile}``.
    """

    model_config = {"frozen": True}

    values: dict[str, Segment] = Field(default_factory=dict)

    def __init__(self, values: Mapping[str, Segment] | None = None, **data: object) -> None:
        super().__init__(values=dict(values or {}), **data)

    def resolve(self, placeholder: str) -> Segment | None:
        return self.values.get(placeholder)

    def with_value(self, placeholder: str, segment: Segment) -> StatementContext:
        return StatementContext({**self.values, placeholder: segment})


class AddressTemplate(BaseModel):
    """Symbolic address such as ``{selected.profile}/subsystem=jca/workmanager=*``.

    Templates own no runtime state and are resolved lazily per operation.
    """

    model_config = {"frozen": True}

    template: str = ""

    @classmethod
    def of(cls, template: str) -> AddressTemplate:
        return cls(template=template.strip().rstrip("/"))

    @property
    def _parts(self) -> list[str]:
        return [p for p in self.template.split("/") if p]

    def append(self, segment: str) -> AddressTemplate:
        """Return a new template with *segment* (``type=value``) appended."""
        segment = segment.strip().strip("/")
        if not self.template:
            return AddressTemplate.of(segment)
        return AddressTemplate.of(f"{self.template}/{segment}")

    @property
    def last_name(self) -> str | None:
        """Type of the last segment, e.g. ``workmanager``."""
        parts = self._parts
        if not parts:
            return None
        return parts[-1].partition("=")[0]

    @property
    def last_value(self) -> str | None:
        """Value of the last segment, e.g. ``*`` or ``jca``."""
        parts = self._parts
        if not parts:
            return None
        return parts[-1].partition("=")[2] or None

    def resolve(self, context: StatementContext, *wildcards: str) -> ResourceAddress:
        """Resolve placeholders via *context* and ``*`` values via *wildcards*.

        Wildcards are consumed left to right. A ``*`` with no wildcard left
        stays ``*`` (a wildcard address, valid for reads only).
        """
        remaining = list(wildcards)
        segments: list[Segment] = []
        for part in self._parts:
            if part.startswith("{") and part.endswith("}"):
                resolved = context.resolve(part[1:-1])
                if resolved is not None:
                    segments.append(resolved)
                continue
            key, sep, value = part.partition("=")
            if not sep:
                msg = f"Malformed template segment {part!r} in {self.template!r}"
                raise ValueError(msg)
            if value == WILDCARD and remaining:
                value = remaining.pop(0)
            segments.append((key, value))
        return ResourceAddress(segments=tuple(segments))

    def __str__(self) -> str:
        return self.template or "/"
