"""Shared pytest fixtures and test helpers for mgmtctl tests."""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future
from typing import Any

import pytest

from mgmtctl.config.settings import MgmtSettings
from mgmtctl.domain.forms import AddResourceForm
from mgmtctl.domain.operations import Property
from mgmtctl.domain.templates import (
    ARCHIVE_VALIDATION_TEMPLATE,
    WORKMANAGER_LRT_TEMPLATE,
    WORKMANAGER_SRT_TEMPLATE,
)
from mgmtctl.infrastructure.context import ManagementContext
from mgmtctl.infrastructure.dispatcher import LocalDispatcher
from mgmtctl.infrastructure.metadata_registry import MetadataRegistry
from mgmtctl.infrastructure.model_tree import ManagementModel
from mgmtctl.plugins.hookspecs import hookimpl
from mgmtctl.services.result import ServiceResult

# ---------------------------------------------------------------------------
# Resource tree and metadata
# ---------------------------------------------------------------------------

JCA = "/subsystem=jca"

RESOURCES: dict[str, dict[str, Any]] = {
    JCA: {},
    f"{JCA}/archive-validation=archive-validation": {
        "enabled": True,
        "fail-on-error": True,
        "fail-on-warn": True,
    },
    f"{JCA}/bean-validation=bean-validation": {"enabled": True},
    f"{JCA}/workmanager=wm1": {"name": "wm1"},
    f"{JCA}/workmanager=wm1/long-running-thread-pool=lrt-a": {
        "max-threads": 10,
        "queue-length": 10,
    },
    f"{JCA}/workmanager=wm2": {"name": "wm2"},
    f"{JCA}/workmanager=wm3": {"name": "wm3"},
    f"{JCA}/workmanager=wm3/long-running-thread-pool=lrt-c": {"max-threads": 4, "queue-length": 8},
    f"{JCA}/workmanager=wm3/short-running-thread-pool=srt-c": {"max-threads": 2, "queue-length": 2},
    f"{JCA}/distributed-workmanager=dwm1": {"name": "dwm1"},
    "/deployment=app.war": {"runtime-name": "app.war"},
    "/deployment=lib.jar": {"runtime-name": "library.jar"},
    "/server-group=g1": {"profile": "full"},
    "/server-group=g2": {"profile": "full"},
    "/server-group=g3": {"profile": "ha"},
    "/server-group=g3/deployment=lib.jar": {"runtime-name": "library.jar", "enabled": True},
}

THREAD_POOL_DESCRIPTION: dict[str, Any] = {
    "attributes": {
        "name": {"type": "STRING", "access-type": "read-only"},
        "max-threads": {"type": "INT", "nillable": False, "description": "Maximum threads"},
        "queue-length": {"type": "INT", "nillable": False},
        "thread-factory": {"type": "STRING", "nillable": True},
        "allow-core-timeout": {"type": "BOOLEAN", "default": False},
        "keepalive-time": {"type": "OBJECT", "nillable": True},
    }
}

ARCHIVE_VALIDATION_DESCRIPTION: dict[str, Any] = {
    "attributes": {
        "enabled": {"type": "BOOLEAN", "default": True},
        "fail-on-error": {"type": "BOOLEAN", "default": True},
        "fail-on-warn": {"type": "BOOLEAN", "default": False},
    }
}


# ---------------------------------------------------------------------------
# Recording collaborators
# ---------------------------------------------------------------------------


class RecordingPlugin:
    """Plugin that records all hook calls."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def named(self, hook_name: str) -> list[dict[str, Any]]:
        return [payload for name, payload in self.calls if name == hook_name]

    def messages(self, level: str | None = None) -> list[str]:
        return [
            payload["text"]
            for payload in self.named("on_message")
            if level is None or payload["level"] == level
        ]

    @hookimpl
    def on_message(self, level: str, text: str) -> None:
        self.calls.append(("on_message", {"level": level, "text": text}))

    @hookimpl
    def post_add(self, resource_type: str, name: str | None, address: str) -> None:
        self.calls.append(
            ("post_add", {"resource_type": resource_type, "name": name, "address": address})
        )

    @hookimpl
    def post_save(
        self,
        resource_type: str,
        name: str | None,
        address: str,
        fields_changed: list[str],
    ) -> None:
        self.calls.append(
            (
                "post_save",
                {
                    "resource_type": resource_type,
                    "name": name,
                    "address": address,
                    "fields_changed": fields_changed,
                },
            )
        )

    @hookimpl
    def post_reset(
        self,
        resource_type: str,
        name: str | None,
        address: str,
        fields_reset: list[str],
    ) -> None:
        self.calls.append(
            (
                "post_reset",
                {
                    "resource_type": resource_type,
                    "name": name,
                    "address": address,
                    "fields_reset": fields_reset,
                },
            )
        )

    @hookimpl
    def post_remove(self, resource_type: str, name: str | None, address: str) -> None:
        self.calls.append(
            ("post_remove", {"resource_type": resource_type, "name": name, "address": address})
        )

    @hookimpl
    def post_assign(self, content: str, server_groups: list[str], enabled: bool) -> None:
        self.calls.append(
            (
                "post_assign",
                {"content": content, "server_groups": server_groups, "enabled": enabled},
            )
        )

    @hookimpl
    def post_unassign(self, content: str, server_groups: list[str]) -> None:
        self.calls.append(
            ("post_unassign", {"content": content, "server_groups": server_groups})
        )


class RecordingView:
    """ConfigurationView that keeps every pushed state."""

    def __init__(self) -> None:
        self.updates: list[dict[str, Any]] = []
        self.thread_pool_updates: list[tuple[str, list[str], list[str]]] = []

    def update(self, payload: dict[str, Any]) -> None:
        self.updates.append(payload)

    def update_thread_pools(
        self,
        parent_template: Any,
        parent_name: str,
        long_running: list[Property],
        short_running: list[Property],
    ) -> None:
        self.thread_pool_updates.append(
            (parent_name, [p.name for p in long_running], [p.name for p in short_running])
        )

    @property
    def refreshes(self) -> int:
        return len(self.updates) + len(self.thread_pool_updates)


class RecordingDialogs:
    """DialogPresenter that keeps the last shown form and its submit handler."""

    def __init__(self) -> None:
        self.shown: list[tuple[str, AddResourceForm]] = []
        self._on_submit: Callable[[dict[str, Any]], Future[ServiceResult]] | None = None

    @property
    def form(self) -> AddResourceForm:
        return self.shown[-1][1]

    def add_resource(
        self,
        title: str,
        form: AddResourceForm,
        on_submit: Callable[[dict[str, Any]], Future[ServiceResult]],
    ) -> None:
        self.shown.append((title, form))
        self._on_submit = on_submit

    def submit(self, values: dict[str, Any]) -> Future[ServiceResult]:
        assert self._on_submit is not None, "no dialog shown"
        return self._on_submit(values)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep MGMTCTL_* variables of the developer's shell out of the tests."""
    for var in (
        "MGMTCTL_CONFIG",
        "MGMTCTL_VERBOSE",
        "MGMTCTL_LOG_JSON",
        "MGMTCTL_SERVER__MODE",
        "MGMTCTL_SELECTION__COLLATION",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def settings() -> MgmtSettings:
    return MgmtSettings()


@pytest.fixture
def model() -> ManagementModel:
    return ManagementModel.from_resources(RESOURCES)


@pytest.fixture
def metadata() -> MetadataRegistry:
    registry = MetadataRegistry()
    registry.register_description(WORKMANAGER_LRT_TEMPLATE, THREAD_POOL_DESCRIPTION)
    registry.register_description(WORKMANAGER_SRT_TEMPLATE, THREAD_POOL_DESCRIPTION)
    registry.register_description(ARCHIVE_VALIDATION_TEMPLATE, ARCHIVE_VALIDATION_DESCRIPTION)
    return registry


@pytest.fixture
def recorder() -> RecordingPlugin:
    return RecordingPlugin()


@pytest.fixture
def ctx(
    settings: MgmtSettings,
    model: ManagementModel,
    metadata: MetadataRegistry,
    recorder: RecordingPlugin,
) -> ManagementContext:
    """Context over the sample tree answering requests immediately."""
    context = ManagementContext(settings, model=model, metadata=metadata)
    context.init_event_bus(recorder, discover=False)
    try:
        yield context
    finally:
        context.close()


@pytest.fixture
def deferred_ctx(
    settings: MgmtSettings,
    model: ManagementModel,
    metadata: MetadataRegistry,
    recorder: RecordingPlugin,
) -> ManagementContext:
    """Context whose dispatcher holds requests until flushed."""
    context = ManagementContext(settings, metadata=metadata)
    context.dispatcher = LocalDispatcher(
        model, error_channel=context.report_failure, deferred=True
    )
    context.init_event_bus(recorder, discover=False)
    return context


@pytest.fixture
def view() -> RecordingView:
    return RecordingView()


@pytest.fixture
def dialogs() -> RecordingDialogs:
    return RecordingDialogs()
