"""Operation-specific Rich renderers for ServiceResult and view payloads.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Result renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from mgmtctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from mgmtctl.domain.operations import Property
    from mgmtctl.services.result import ServiceResult
    from mgmtctl.services.selection import SelectionWorkflow


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_resource(
    payload: dict[str, Any], *, title: str = "", console: Console | None = None
) -> str:
    """Render a ``read-resource`` payload: attributes first, then child collections."""
    console = console or create_console()
    attributes = Table.grid(padding=(0, 2))
    attributes.add_column(style="mgmt.key")
    attributes.add_column()
    children: list[tuple[str, dict[str, Any]]] = []
    for key, value in payload.items():
        if isinstance(value, dict) and value and all(_is_node(v) for v in value.values()):
            children.append((key, value))
        else:
            attributes.add_row(key, _value_text(value))

    console.print(Panel(attributes, title=Text(title, style="mgmt.title") if title else None))
    for child_type, nodes in children:
        console.print(Text.assemble((f"  {child_type}: ", "mgmt.key"), ", ".join(nodes)))
    return get_output(console)


def render_thread_pools(
    parent_name: str,
    long_running: Sequence[Property],
    short_running: Sequence[Property],
    *,
    console: Console | None = None,
) -> str:
    """Render both thread-pool lists of one work manager as a single table."""
    console = console or create_console()
    table = Table(title=f"Thread pools of {parent_name}", show_header=True, pad_edge=False)
    table.add_column("Type", style="mgmt.op", no_wrap=True)
    table.add_column("Name", style="mgmt.title")
    table.add_column("Max Threads", justify="right")
    table.add_column("Queue Length", justify="right")
    for label, pools in (("long-running", long_running), ("short-running", short_running)):
        for pool in pools:
            table.add_row(
                label,
                pool.name,
                str(pool.value.get("max-threads", "")),
                str(pool.value.get("queue-length", "")),
            )
    console.print(table)
    return get_output(console)


def render_selection(workflow: SelectionWorkflow, *, console: Console | None = None) -> str:
    """Render the current state of an assign/unassign dialog."""
    console = console or create_console()
    console.print(Text(workflow.title, style="mgmt.title"))
    console.print(workflow.description)
    if workflow.indicator_visible:
        console.print(Text("! nothing selected", style="mgmt.error"))
    selected = set(workflow.selected)
    for row in workflow.rows:
        marker = "[x]" if row.key in selected else "[ ]"
        style = "mgmt.selected" if row.key in selected else ""
        console.print(Text(f"  {marker} {row.key}", style=style))
    if workflow.enable_visible:
        console.print(f"  enable: {'on' if workflow.enable else 'off'}")
    console.print(Text(f"  <{workflow.primary_label}>  <Cancel>", style="mgmt.op"))
    return get_output(console)


# ── Helpers ───────────────────────────────────────────────────────────


def _is_node(value: Any) -> bool:
    return value is None or isinstance(value, dict)


def _value_text(value: Any) -> Text:
    if value is None:
        return Text("undefined", style="mgmt.undefined")
    if isinstance(value, (dict, list)):
        return Text(_json.dumps(value, separators=(",", ":")))
    return Text(str(value))


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="mgmt.ok")
    op = Text(f"  {result.op}", style="mgmt.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="mgmt.key")
    if key in ("address", "parent"):
        v = Text(str(value), style="mgmt.address")
    elif isinstance(value, list):
        v = Text(", ".join(str(item) for item in value))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_warnings(console: Console, result: ServiceResult) -> None:
    for warning in result.warnings:
        console.print(Text(f"  warning: {warning}", style="mgmt.warning"))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="mgmt.error")
    op = Text(f"  {result.op}", style="mgmt.op")
    console.print(label, op, Text(": "), msg)

    if verbose and err:
        console.print(Text(f"  code: {err.code}", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Result renderers ──────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render add/save/reset/remove and (un)assign results."""
    _status_line(console, result)
    keys = (
        "address",
        "name",
        "variant",
        "content",
        "server_groups",
        "enabled",
        "fields_changed",
        "fields_reset",
    )
    for key in keys:
        if key in result.data and result.data[key] is not None:
            _field(console, key, result.data[key])
    _render_warnings(console, result)


def _render_slot_decision(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    for key in ("parent", "state", "offered"):
        _field(console, key, result.data.get(key, ""))
    if verbose:
        _field(console, "existing", result.data.get("existing", []))
        _field(console, "locked", result.data.get("locked", False))


def _render_thread_pool_names(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    _field(console, "parent", result.data.get("parent", ""))
    _field(console, "long_running", result.data.get("long_running", []))
    _field(console, "short_running", result.data.get("short_running", []))


def _render_read(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "address", result.data.get("address", ""))
    if "resource" in result.data:
        render_resource(result.data["resource"], console=console)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, dict):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    _render_warnings(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Mutations
    "add": _render_mutation,
    "save": _render_mutation,
    "reset": _render_mutation,
    "remove": _render_mutation,
    "create_thread_pool": _render_mutation,
    "assign": _render_mutation,
    "unassign": _render_mutation,
    # Reads
    "read": _render_read,
    "launch_add": _render_slot_decision,
    "load_thread_pools": _render_thread_pool_names,
    "load_content": _render_generic,
}
