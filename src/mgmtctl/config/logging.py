"""structlog configuration for mgmtctl.

Two output modes:
- Human (default): colored console output to stderr
- JSON (log_json): Structured JSON lines to stderr, tracebacks as dicts

Every event carries the session it belongs to (``server_mode`` and, in
domain mode, the selected profile, server group, host and server), so log
lines from several consoles can be told apart.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from mgmtctl.config.models import ServerConfig


def session_fields(server: ServerConfig) -> dict[str, str]:
    """Log fields identifying the server a session is attached to."""
    fields = {"server_mode": server.mode}
    if server.mode != "domain":
        return fields
    fields["profile"] = server.profile
    for key in ("server_group", "host", "server"):
        value = getattr(server, key)
        if value:
            fields[key] = value
    return fields


def _bind_session(session: Mapping[str, str]) -> structlog.types.Processor:
    """Processor adding *session* fields; keys set on the event itself win."""

    def bind(_logger: Any, _method: str, event_dict: Any) -> Any:
        for key, value in session.items():
            event_dict.setdefault(key, value)
        return event_dict

    return bind


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    session: Mapping[str, str] | None = None,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        verbose: Enable DEBUG-level output for ``mgmtctl``. When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
        session: Fields bound into every event, see :func:`session_fields`.
    """
    mgmt_level = logging.DEBUG if verbose else logging.WARNING

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if session:
        shared_processors.append(_bind_session(dict(session)))

    output_processors: list[structlog.types.Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if log_json:
        output_processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        output_processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=output_processors,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("mgmtctl").setLevel(mgmt_level)
    # Hook calls are logged by mgmtctl.plugins.event_bus.
    logging.getLogger("pluggy").setLevel(logging.WARNING)
