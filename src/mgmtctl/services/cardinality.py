"""CardinalityGuard — at most one thread pool of each variant per work manager.

The server accepts a second long running (or short running) thread pool
below the same work manager, so the rule is enforced here: before an add
form is offered, both sibling collections are read in one composite and
the form only offers the variants that are still free.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from concurrent.futures import Future
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import BaseModel

from mgmtctl.domain import messages
from mgmtctl.domain.forms import NAME_ITEM, TYPE_ITEM, AddResourceForm, FormItem
from mgmtctl.domain.operations import CompositeResult, Property, add
from mgmtctl.domain.templates import thread_pool_address, thread_pool_metadata_template
from mgmtctl.domain.types import MessageLevel, SlotState, ThreadPoolVariant
from mgmtctl.services.base import BaseService, Continuation, completed
from mgmtctl.services.composite import thread_pools_query
from mgmtctl.services.contracts import SlotDecisionData, dump_validated
from mgmtctl.services.crud import is_undefined
from mgmtctl.services.result import CONSTRAINT_VIOLATION, VALIDATION_FAILED, ServiceResult

if TYPE_CHECKING:
    from mgmtctl.domain.address import AddressTemplate
    from mgmtctl.infrastructure.context import ManagementContext
    from mgmtctl.services.refresh import ViewRefresher

logger = logging.getLogger(__name__)

FORM_ID = "thread-pool-add"

SubmitHandler = Callable[[dict[str, Any]], Future[ServiceResult]]


class DialogPresenter(Protocol):
    """Shows add-resource dialogs and reports the submitted values."""

    def add_resource(self, title: str, form: AddResourceForm, on_submit: SubmitHandler) -> None:
        """Show *form*; call *on_submit* with the entered values on confirmation."""


class SlotDecision(BaseModel):
    """Which thread-pool variants an add form may offer."""

    model_config = {"frozen": True}

    state: SlotState
    existing: tuple[ThreadPoolVariant, ...] = ()
    offered: tuple[ThreadPoolVariant, ...] = ()
    locked: bool = False

    @property
    def preset(self) -> ThreadPoolVariant | None:
        """The variant fixed by a locked selector, if any."""
        return self.offered[0] if self.locked else None


class CardinalityGuard(BaseService):
    """Offers only the thread-pool variants that do not exist yet."""

    def __init__(
        self,
        ctx: ManagementContext,
        dialogs: DialogPresenter,
        refresher: ViewRefresher,
    ) -> None:
        super().__init__(ctx)
        self._dialogs = dialogs
        self._refresher = refresher

    # ------------------------------------------------------------------
    # Decision
    # ------------------------------------------------------------------

    @staticmethod
    def evaluate(collections: Mapping[ThreadPoolVariant, list[Property]]) -> SlotDecision:
        """Classify the existing collections of one work manager."""
        existing = tuple(v for v in ThreadPoolVariant if collections.get(v))
        if not existing:
            return SlotDecision(state=SlotState.OPEN, offered=tuple(ThreadPoolVariant))
        if len(existing) == 1:
            return SlotDecision(
                state=SlotState.PARTIALLY_FILLED,
                existing=existing,
                offered=(existing[0].other,),
                locked=True,
            )
        return SlotDecision(state=SlotState.CLOSED, existing=existing)

    def build_form(self, decision: SlotDecision) -> AddResourceForm:
        """Type item, name item, then the configured metadata attributes."""
        if decision.locked:
            type_item = FormItem(
                name=TYPE_ITEM,
                label="Type",
                value=str(decision.preset),
                choices=(str(decision.preset),),
                required=True,
                enabled=False,
            )
        else:
            type_item = FormItem(
                name=TYPE_ITEM,
                label="Type",
                choices=tuple(str(v) for v in decision.offered),
                required=True,
            )
        items = [type_item, FormItem(name=NAME_ITEM, label="Name", required=True)]

        metadata = self._ctx.metadata.lookup(thread_pool_metadata_template(decision.offered[0]))
        include = self._ctx.settings.jca.thread_pool_attributes
        items.extend(FormItem.from_attribute(a) for a in metadata.select(include))
        return AddResourceForm(id=FORM_ID, items=tuple(items))

    # ------------------------------------------------------------------
    # Add flow
    # ------------------------------------------------------------------

    def launch_add(
        self,
        parent_template: AddressTemplate,
        parent_name: str,
        on_added: Continuation | None = None,
    ) -> Future[ServiceResult]:
        """Read both collections, then show the add dialog or refuse.

        The returned Future resolves once the dialog was shown, or with a
        ``CONSTRAINT_VIOLATION`` when both variants already exist.
        """
        parent = self._resolve(parent_template, parent_name)
        query = thread_pools_query(parent)

        def decide(result: CompositeResult) -> ServiceResult:
            decision = self.evaluate(query.interpret_keyed(result))
            data = dump_validated(
                SlotDecisionData,
                {
                    "state": str(decision.state),
                    "parent": str(parent),
                    "existing": [str(v) for v in decision.existing],
                    "offered": [str(v) for v in decision.offered],
                    "locked": decision.locked,
                },
            )
            if decision.state is SlotState.CLOSED:
                text = messages.all_thread_pools_exist()
                logger.info("Refusing thread pool add below %s: both variants exist", parent)
                self._notify(MessageLevel.ERROR, text)
                return ServiceResult.failure("launch_add", CONSTRAINT_VIOLATION, text, data=data)

            def submit(values: dict[str, Any]) -> Future[ServiceResult]:
                name = values.get(NAME_ITEM) or ""
                return self.create(parent_template, parent_name, decision, name, values, on_added)

            self._dialogs.add_resource(
                messages.add_resource_title(messages.THREAD_POOL),
                self.build_form(decision),
                submit,
            )
            return ServiceResult(ok=True, op="launch_add", data=data)

        return self._read("launch_add", query.composite, decide)

    def create(
        self,
        parent_template: AddressTemplate,
        parent_name: str,
        decision: SlotDecision,
        name: str,
        values: Mapping[str, Any],
        on_added: Continuation | None = None,
    ) -> Future[ServiceResult]:
        """Add the thread pool the dialog submitted.

        Without *on_added* the thread-pool lists are reloaded after a
        successful add.
        """
        variant = self._submitted_variant(decision, values)
        if variant is None:
            offered = ", ".join(str(v) for v in decision.offered) or "none"
            text = f"Invalid thread pool type {values.get(TYPE_ITEM)!r}; offered: {offered}"
            self._notify(MessageLevel.ERROR, text)
            return completed(ServiceResult.failure("create_thread_pool", VALIDATION_FAILED, text))
        if not name:
            text = "A thread pool name is required"
            self._notify(MessageLevel.ERROR, text)
            return completed(ServiceResult.failure("create_thread_pool", VALIDATION_FAILED, text))

        address = thread_pool_address(self._resolve(parent_template, parent_name), variant, name)
        payload = {
            key: value
            for key, value in values.items()
            if key not in (TYPE_ITEM, NAME_ITEM) and not is_undefined(value)
        }

        def reload() -> None:
            self._refresher.load_thread_pools(parent_template, parent_name)

        return self._mutate(
            "create_thread_pool",
            add(address, payload),
            on_success=on_added or reload,
            success_message=messages.add_resource_success(messages.THREAD_POOL, name),
            event=(
                "post_add",
                {"resource_type": variant.child_type, "name": name, "address": str(address)},
            ),
            data={"address": str(address), "name": name, "variant": str(variant)},
        )

    @staticmethod
    def _submitted_variant(
        decision: SlotDecision, values: Mapping[str, Any]
    ) -> ThreadPoolVariant | None:
        if decision.preset is not None:
            return decision.preset
        raw = values.get(TYPE_ITEM)
        for variant in decision.offered:
            if raw in (variant.value, variant.child_type, variant.label):
                return variant
        return None
