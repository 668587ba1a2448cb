"""User-facing message texts for notifications and dialogs."""

from __future__ import annotations

from collections.abc import Sequence

THREAD_POOL = "Thread Pool"

ASSIGN_CONTENT = "Assign Content"
UNASSIGN_CONTENT = "Unassign Content"
ASSIGN = "Assign"
UNASSIGN = "Unassign"


def add_resource_title(type_: str) -> str:
    return f"Add {type_}"


def add_resource_success(type_: str, name: str | None) -> str:
    return f"{_subject(type_, name)} successfully added."


def modify_resource_success(type_: str, name: str | None) -> str:
    return f"{_subject(type_, name)} successfully modified."


def reset_resource_success(type_: str, name: str | None) -> str:
    return f"{_subject(type_, name)} successfully reset."


def remove_resource_success(type_: str, name: str | None) -> str:
    return f"{_subject(type_, name)} successfully removed."


def no_changes(type_: str, name: str | None) -> str:
    return f"No changes made to {_subject(type_, name)}."


def no_reset(type_: str, name: str | None) -> str:
    return f"No attributes of {_subject(type_, name)} could be reset."


def all_thread_pools_exist() -> str:
    return "Only one long running and one short running thread pool are allowed per work manager."


def no_server_group_selected() -> str:
    return "Please select at least one server group."


def assign_content_description(content: str) -> str:
    return f"Choose the server groups to assign {content} to."


def unassign_content_description(content: str) -> str:
    return f"Choose the server groups to unassign {content} from."


def content_assigned(content: str, server_groups: Sequence[str]) -> str:
    return f"Content {content} successfully assigned to {', '.join(server_groups)}."


def content_unassigned(content: str, server_groups: Sequence[str]) -> str:
    return f"Content {content} successfully unassigned from {', '.join(server_groups)}."


def _subject(type_: str, name: str | None) -> str:
    return f"{type_} {name}" if name else type_
