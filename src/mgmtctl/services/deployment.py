"""ContentAssignmentService — assign deployment content to server groups."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import Future
from typing import Any

from mgmtctl.domain import messages, operations
from mgmtctl.domain.address import ResourceAddress
from mgmtctl.domain.content import Content
from mgmtctl.domain.operations import Composite, CompositeResult
from mgmtctl.domain.templates import DEPLOYMENT_TEMPLATE, SERVER_GROUP_DEPLOYMENT_TEMPLATE
from mgmtctl.services.base import BaseService, Continuation, completed
from mgmtctl.services.composite import InvalidResultShapeError
from mgmtctl.services.contracts import AssignmentData, dump_validated
from mgmtctl.services.result import VALIDATION_FAILED, ServiceResult
from mgmtctl.services.selection import SelectionWorkflow

logger = logging.getLogger(__name__)

SERVER_GROUP = "server-group"
DEPLOYMENT = "deployment"
RUNTIME_NAME = "runtime-name"
ENABLED = "enabled"

CONTENT_STEP = "content"
SERVER_GROUPS_STEP = "server-groups"


class ContentAssignmentService(BaseService):
    """Bulk (un)assignment of one content item across server groups.

    Each call submits a single composite, so either every server group is
    updated or none is.
    """

    def assign(
        self,
        content: Content,
        server_groups: Sequence[str],
        enable: bool,
        on_success: Continuation | None = None,
    ) -> Future[ServiceResult]:
        groups = list(server_groups)
        if not groups:
            return self._no_groups("assign")
        payload = {RUNTIME_NAME: content.effective_runtime_name, ENABLED: enable}
        request = Composite.of(
            *(operations.add(self._deployment_address(g, content), payload) for g in groups)
        )
        event_payload = {"content": content.name, "server_groups": groups, "enabled": enable}
        return self._mutate(
            "assign",
            request,
            on_success=on_success,
            success_message=messages.content_assigned(content.name, groups),
            event=("post_assign", event_payload),
            data=dump_validated(AssignmentData, event_payload),
        )

    def unassign(
        self,
        content: Content,
        server_groups: Sequence[str],
        on_success: Continuation | None = None,
    ) -> Future[ServiceResult]:
        groups = list(server_groups)
        if not groups:
            return self._no_groups("unassign")
        request = Composite.of(
            *(operations.remove(self._deployment_address(g, content)) for g in groups)
        )
        event_payload = {"content": content.name, "server_groups": groups}
        return self._mutate(
            "unassign",
            request,
            on_success=on_success,
            success_message=messages.content_unassigned(content.name, groups),
            event=("post_unassign", event_payload),
            data=dump_validated(AssignmentData, event_payload),
        )

    # ── Dialogs ──────────────────────────────────────────────────────

    def assign_dialog(
        self,
        content: Content,
        all_server_groups: Iterable[str],
        on_success: Continuation | None = None,
    ) -> SelectionWorkflow:
        """Open a selection over the server groups *content* is not assigned to."""

        def assign(selected: Content, groups: list[str], enable: bool) -> None:
            self.assign(selected, groups, enable, on_success)

        workflow = SelectionWorkflow.for_assign(
            content,
            content.unassigned(all_server_groups),
            assign,
            collation=self._ctx.settings.selection.collation,
        )
        workflow.show()
        return workflow

    def unassign_dialog(
        self, content: Content, on_success: Continuation | None = None
    ) -> SelectionWorkflow:
        """Open a selection over the server groups *content* is assigned to."""

        def unassign(selected: Content, groups: list[str]) -> None:
            self.unassign(selected, groups, on_success)

        workflow = SelectionWorkflow.for_unassign(
            content,
            content.server_groups,
            unassign,
            collation=self._ctx.settings.selection.collation,
        )
        workflow.show()
        return workflow

    # ── Reads ────────────────────────────────────────────────────────

    def load_content(
        self, name: str, on_loaded: Callable[[Content], None] | None = None
    ) -> Future[ServiceResult]:
        """Read a content item and the server groups that reference it.

        The composite result must have one step per read; a result of any
        other shape fails the returned Future with
        :class:`InvalidResultShapeError`.
        """
        reads = {
            CONTENT_STEP: operations.read_resource(self._resolve(DEPLOYMENT_TEMPLATE, name)),
            SERVER_GROUPS_STEP: operations.read_children_resources(
                ResourceAddress.root(), SERVER_GROUP, depth=1
            ),
        }
        step_index = {key: index for index, key in enumerate(reads)}
        request = Composite.of(*reads.values())

        def collect(result: CompositeResult) -> dict[str, Any]:
            if result.size != len(step_index):
                raise InvalidResultShapeError(len(step_index), result.size)
            deployment = result.step(step_index[CONTENT_STEP])
            groups = result.step(step_index[SERVER_GROUPS_STEP])
            attributes = deployment.get(operations.RESULT) or {}
            assigned = [
                group
                for group, node in (groups.get(operations.RESULT) or {}).items()
                if name in ((node or {}).get(DEPLOYMENT) or {})
            ]
            content = Content(
                name=name,
                runtime_name=attributes.get(RUNTIME_NAME),
                server_groups=tuple(sorted(assigned)),
            )
            if on_loaded is not None:
                on_loaded(content)
            return content.model_dump(mode="python")

        return self._read("load_content", request, collect)

    # ------------------------------------------------------------------

    def _deployment_address(self, server_group: str, content: Content) -> ResourceAddress:
        return self._resolve(SERVER_GROUP_DEPLOYMENT_TEMPLATE, server_group, content.name)

    def _no_groups(self, op: str) -> Future[ServiceResult]:
        logger.debug("%s: no server groups given", op)
        return completed(
            ServiceResult.failure(op, VALIDATION_FAILED, messages.no_server_group_selected())
        )
