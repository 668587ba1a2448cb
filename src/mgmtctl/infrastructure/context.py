"""ManagementContext — the dependency hub handed to every service.

Bundles the collaborators a console session needs: settings, the statement
context for address resolution, the dispatcher, the metadata registry, and
the event bus. Services receive it at construction time; there are no
ambient singletons.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from mgmtctl.domain.address import StatementContext
from mgmtctl.domain.types import MessageLevel
from mgmtctl.infrastructure.dispatcher import Dispatcher, LocalDispatcher
from mgmtctl.infrastructure.metadata_registry import MetadataRegistry
from mgmtctl.infrastructure.model_tree import ManagementModel

if TYPE_CHECKING:
    from mgmtctl.config.models import ServerConfig
    from mgmtctl.config.settings import MgmtSettings
    from mgmtctl.plugins.event_bus import EventBus
    from mgmtctl.services.result import ServiceError

logger = logging.getLogger(__name__)


def statement_context_for(server: ServerConfig) -> StatementContext:
    """Derive placeholder values from the ``[server]`` section.

    A standalone server has no profile, server group, host, or server, so
    every placeholder segment is dropped on resolution.
    """
    if server.mode != "domain":
        return StatementContext()
    values: dict[str, tuple[str, str]] = {"selected.profile": ("profile", server.profile)}
    if server.server_group:
        values["selected.server-group"] = ("server-group", server.server_group)
    if server.host:
        values["selected.host"] = ("host", server.host)
    if server.server:
        values["selected.server"] = ("server", server.server)
    return StatementContext(values)


class ManagementContext:
    """Collaborators shared by the services of one console session.

    Parameters:
        settings: Resolved settings.
        dispatcher: Dispatcher to the managed server. Defaults to a
            :class:`LocalDispatcher` over *model*.
        metadata: Metadata registry. Defaults to an empty registry.
        model: In-process model used by the default dispatcher.
    """

    def __init__(
        self,
        settings: MgmtSettings,
        *,
        dispatcher: Dispatcher | None = None,
        metadata: MetadataRegistry | None = None,
        model: ManagementModel | None = None,
    ) -> None:
        self.settings = settings
        self.statement_context = statement_context_for(settings.server)
        if dispatcher is None:
            dispatcher = LocalDispatcher(model, error_channel=self.report_failure)
        self.dispatcher = dispatcher
        self.metadata = metadata if metadata is not None else MetadataRegistry()
        self._event_bus: EventBus | None = None

    @property
    def event_bus(self) -> EventBus | None:
        """The event bus, or None until :meth:`init_event_bus` is called."""
        return self._event_bus

    def init_event_bus(self, *plugins: object, discover: bool = True) -> EventBus:
        """Create the plugin manager and event bus, registering *plugins*.

        Entry-point plugins are loaded unless *discover* is False.
        """
        from mgmtctl.plugins.event_bus import EventBus
        from mgmtctl.plugins.manager import PluginManager

        pm = PluginManager()
        if discover:
            pm.discover_and_load()
        for plugin in plugins:
            pm.register_plugin(plugin)
        self._event_bus = EventBus(pm, journal_size=self.settings.events.journal_size)
        return self._event_bus

    def notify(self, level: MessageLevel, text: str) -> None:
        """Publish a user-facing message. No-op if the event bus is not initialized."""
        logger.debug("message.%s: %s", level, text)
        if self._event_bus is None:
            return
        self._event_bus.dispatch("on_message", {"level": str(level), "text": text})

    def report_failure(self, error: ServiceError) -> None:
        """Error channel for requests submitted without a failure callback."""
        logger.warning("Remote operation failed: %s", error.message)
        self.notify(MessageLevel.ERROR, error.message)

    def close(self) -> None:
        """Drop the event bus; the managed server holds all other state."""
        self._event_bus = None


def open_context(
    *,
    config_path: str | Path | None = None,
    start: Path | None = None,
    plugins: tuple[object, ...] = (),
    discover: bool = True,
    dispatcher: Dispatcher | None = None,
    metadata: MetadataRegistry | None = None,
    model: ManagementModel | None = None,
    **overrides: Any,
) -> ManagementContext:
    """Load settings, configure logging, and return a ready context."""
    from mgmtctl.config.logging import configure_logging, session_fields
    from mgmtctl.config.settings import MgmtSettings

    settings = MgmtSettings.load(config_path=config_path, start=start, **overrides)
    configure_logging(
        verbose=settings.verbose,
        log_json=settings.log_json,
        session=session_fields(settings.server),
    )
    ctx = ManagementContext(settings, dispatcher=dispatcher, metadata=metadata, model=model)
    ctx.init_event_bus(*plugins, discover=discover)
    return ctx
