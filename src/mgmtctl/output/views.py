"""Console implementations of the presentation collaborators.

``ConsoleView`` renders refreshed state, ``ConsoleDialogs`` holds an add
dialog until its values are submitted, and ``ConsoleMessages`` prints
message events. All of them write to a StringIO-backed Rich console.
"""

from __future__ import annotations

from concurrent.futures import Future
from typing import TYPE_CHECKING, Any

from rich.text import Text

from mgmtctl.output.console import create_console, get_output, style_for_level
from mgmtctl.output.renderers import render_resource, render_thread_pools
from mgmtctl.plugins.hookspecs import hookimpl

if TYPE_CHECKING:
    from rich.console import Console

    from mgmtctl.domain.address import AddressTemplate
    from mgmtctl.domain.forms import AddResourceForm
    from mgmtctl.domain.operations import Property
    from mgmtctl.services.cardinality import SubmitHandler
    from mgmtctl.services.result import ServiceResult


class ConsoleView:
    """Configuration view that re-renders the full state on every update.

    The last pushed state is kept on the instance for inspection. Thread
    pools are keyed by ``(parent template, parent name)``.
    """

    def __init__(self, console: Console | None = None, *, title: str = "") -> None:
        self.console = console or create_console()
        self.title = title
        self.payload: dict[str, Any] = {}
        self.thread_pools: dict[tuple[str, str], tuple[list[Property], list[Property]]] = {}
        self.updates = 0

    def update(self, payload: dict[str, Any]) -> None:
        self.payload = payload
        self.updates += 1
        render_resource(payload, title=self.title, console=self.console)

    def update_thread_pools(
        self,
        parent_template: AddressTemplate,
        parent_name: str,
        long_running: list[Property],
        short_running: list[Property],
    ) -> None:
        key = (str(parent_template), parent_name)
        self.thread_pools[key] = (list(long_running), list(short_running))
        self.updates += 1
        render_thread_pools(parent_name, long_running, short_running, console=self.console)

    @property
    def output(self) -> str:
        return get_output(self.console)


class ConsoleDialogs:
    """Add-resource dialogs shown on the console, submitted programmatically."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or create_console()
        self.title: str | None = None
        self.form: AddResourceForm | None = None
        self._on_submit: SubmitHandler | None = None

    @property
    def is_open(self) -> bool:
        return self.form is not None

    def add_resource(self, title: str, form: AddResourceForm, on_submit: SubmitHandler) -> None:
        self.title = title
        self.form = form
        self._on_submit = on_submit
        self.console.print(Text(title, style="mgmt.title"))
        for item in form.items:
            state = "" if item.enabled else " (locked)"
            choices = f" [{' | '.join(item.choices)}]" if item.choices else ""
            value = f" = {item.value}" if item.value is not None else ""
            marker = "*" if item.required else " "
            self.console.print(Text(f" {marker} {item.label}{choices}{value}{state}"))

    def submit(self, values: dict[str, Any]) -> Future[ServiceResult]:
        """Confirm the open dialog with *values* and close it."""
        if self._on_submit is None:
            msg = "No add dialog is open"
            raise RuntimeError(msg)
        on_submit = self._on_submit
        self.form = None
        self._on_submit = None
        return on_submit(values)

    def cancel(self) -> None:
        self.form = None
        self._on_submit = None


class ConsoleMessages:
    """Plugin printing every ``on_message`` notification."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or create_console()
        self.messages: list[tuple[str, str]] = []

    @hookimpl
    def on_message(self, level: str, text: str) -> None:
        self.messages.append((level, text))
        self.console.print(Text(f"[{level}] {text}", style=style_for_level(level)))

    @property
    def output(self) -> str:
        return get_output(self.console)
