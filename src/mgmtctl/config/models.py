"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, mgmtctl.toml only contains
overrides. A standalone server needs no config file at all.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    """[server] section — which server the console is attached to."""

    model_config = {"frozen": True}

    mode: Literal["standalone", "domain"] = "standalone"
    profile: str = "full"
    server_group: str | None = None
    host: str | None = None
    server: str | None = None


class JcaConfig(BaseModel):
    """[jca] section."""

    model_config = {"frozen": True}

    thread_pool_attributes: list[str] = Field(
        default_factory=lambda: ["max-threads", "queue-length", "thread-factory"]
    )
    reload_depth: int = 1


class SelectionConfig(BaseModel):
    """[selection] section."""

    model_config = {"frozen": True}

    collation: Literal["codepoint", "casefold"] = "codepoint"


class EventsConfig(BaseModel):
    """[events] section."""

    model_config = {"frozen": True}

    journal_size: int = 100


class MgmtConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    server: ServerConfig = Field(default_factory=ServerConfig)
    jca: JcaConfig = Field(default_factory=JcaConfig)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)
    events: EventsConfig = Field(default_factory=EventsConfig)
