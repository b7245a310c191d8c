"""State machine that moves a commerce order into "ready for pickup".

"Ready for pickup" is not a single remote primitive. It is reachable only from
specific fulfillment-order states, so every fulfillment order is classified on
its own and exactly one action is chosen for it:

=============================================  ======================  =========
fulfillment order state                        action                  result
=============================================  ======================  =========
none exist, unfulfilled line items             create pickup           re-plan
                                               fulfillment, reload
OPEN/SCHEDULED, pickup, remaining > 0          prepare for pickup      applied
OPEN/SCHEDULED, pickup, nothing remaining      none                    no-op
IN_PROGRESS, pickup                            none (already ready)    no-op
CLOSED/CANCELLED                               none (terminal)         no-op
ON_HOLD/INCOMPLETE, pickup                     none                    failed
delivery method other than pickup              none                    skipped
=============================================  ======================  =========

Creating a fulfillment addresses items by fulfillment-order line item. For an
order whose view shows no fulfillment orders, the gateway reads the order
again and matches the unfulfilled line items to the fulfillment orders Shopify
has assigned since. If none are assigned yet the creation fails, the order
is not written back, and a later tick tries again.

The plan is always derived from a freshly loaded view, and mutations are only
chosen for states that still need them, so replaying a tick whose response was
lost does not issue the same mutation twice.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from pickupsync.domain.errors import ReconciliationError
from pickupsync.domain.model import FulfillmentOrderStatus

from .contracts import (
    FulfillmentOrderAction,
    PlannedAction,
    StepStatus,
    TransitionPlan,
    TransitionResult,
    TransitionStatus,
    TransitionStep,
)

if TYPE_CHECKING:
    from pickupsync.domain.model import FulfillmentOrder, TargetOrderView
    from pickupsync.domain.ports.target import TargetOrderGateway

log = getLogger(__name__)


def classify(fulfillment_order: FulfillmentOrder) -> PlannedAction:
    """Pick the single action appropriate for ``fulfillment_order``."""

    status = fulfillment_order.status
    if status.is_terminal:
        return PlannedAction(
            FulfillmentOrderAction.ALREADY_TERMINAL, fulfillment_order, detail=status.value
        )
    if not fulfillment_order.is_pickup:
        return PlannedAction(
            FulfillmentOrderAction.NOT_PICKUP,
            fulfillment_order,
            detail=fulfillment_order.delivery_method.value,
        )
    if status.is_unsubmitted:
        remaining = fulfillment_order.remaining_line_items
        if not remaining:
            return PlannedAction(FulfillmentOrderAction.NOTHING_REMAINING, fulfillment_order)
        return PlannedAction(
            FulfillmentOrderAction.PREPARE_FOR_PICKUP,
            fulfillment_order,
            detail=f"{len(remaining)} line item(s)",
        )
    if status is FulfillmentOrderStatus.IN_PROGRESS:
        return PlannedAction(FulfillmentOrderAction.ALREADY_READY, fulfillment_order)
    return PlannedAction(
        FulfillmentOrderAction.UNSUPPORTED_STATE, fulfillment_order, detail=status.value
    )


def plan_transition(view: TargetOrderView) -> TransitionPlan:
    if view.fulfillment_orders:
        return TransitionPlan(
            view=view,
            actions=tuple(classify(fo) for fo in view.fulfillment_orders),
        )

    unfulfilled = [item for item in view.unfulfilled_line_items if item.unfulfilled_quantity > 0]
    if unfulfilled:
        action = PlannedAction(
            FulfillmentOrderAction.CREATE_FULFILLMENT,
            detail=f"{len(unfulfilled)} unfulfilled line item(s)",
        )
    else:
        action = PlannedAction(
            FulfillmentOrderAction.UNSUPPORTED_STATE,
            detail="no fulfillment orders and no unfulfilled line items",
        )
    return TransitionPlan(view=view, actions=(action,))


def summarize_steps(steps: tuple[TransitionStep, ...]) -> TransitionResult:
    """Aggregate per-fulfillment-order steps into one order-level result.

    Success needs at least one applied or no-op step and no failures. A mix
    of applied and failed steps is a partial failure and counts as failed.
    """

    failed = [step for step in steps if step.status is StepStatus.FAILED]
    settled = [step for step in steps if step.status in {StepStatus.APPLIED, StepStatus.NOOP}]

    if failed:
        details = "; ".join(
            f"{step.fulfillment_order_id or 'order'}: {step.detail or step.action.value}"
            for step in failed
        )
        prefix = (
            f"partial failure ({len(settled)} settled, {len(failed)} failed)"
            if settled
            else f"{len(failed)} failed"
        )
        return TransitionResult(TransitionStatus.FAILED, steps, reason=f"{prefix}: {details}")
    if any(step.status is StepStatus.APPLIED for step in steps):
        return TransitionResult(TransitionStatus.SUCCEEDED, steps)
    if settled:
        return TransitionResult(TransitionStatus.NO_ACTION_NEEDED, steps)
    if steps and all(step.action is FulfillmentOrderAction.NOT_PICKUP for step in steps):
        return TransitionResult(
            TransitionStatus.EXCLUDED, steps, reason="no fulfillment order uses local pickup"
        )
    return TransitionResult(TransitionStatus.FAILED, steps, reason="nothing to act on")


@dataclass(slots=True)
class ReadinessTransitioner:
    gateway: TargetOrderGateway

    def plan(self, view: TargetOrderView) -> TransitionPlan:
        return plan_transition(view)

    async def transition(self, view: TargetOrderView) -> TransitionResult:
        plan = self.plan(view)
        if plan.excluded:
            steps = tuple(
                TransitionStep(
                    planned.action, StepStatus.SKIPPED, planned.fulfillment_order_id, planned.detail
                )
                for planned in plan.actions
            )
            return TransitionResult(
                TransitionStatus.EXCLUDED, steps, reason="no fulfillment order uses local pickup"
            )

        if plan.actions[0].action is FulfillmentOrderAction.CREATE_FULFILLMENT:
            return await self._create_then_prepare(view)

        return summarize_steps(await self._apply(plan))

    async def _create_then_prepare(self, view: TargetOrderView) -> TransitionResult:
        unfulfilled = [
            item for item in view.unfulfilled_line_items if item.unfulfilled_quantity > 0
        ]
        log.info(
            "%s: no fulfillment orders, creating local pickup fulfillment for %d line item(s)",
            view.name,
            len(unfulfilled),
        )
        try:
            fulfillment_id = await self.gateway.create_pickup_fulfillment(view, unfulfilled)
        except ReconciliationError as exc:
            step = TransitionStep(
                FulfillmentOrderAction.CREATE_FULFILLMENT, StepStatus.FAILED, detail=str(exc)
            )
            return TransitionResult(TransitionStatus.FAILED, (step,), reason=str(exc))

        created = TransitionStep(
            FulfillmentOrderAction.CREATE_FULFILLMENT, StepStatus.APPLIED, detail=fulfillment_id
        )

        try:
            reloaded = await self.gateway.load(view.reference)
        except ReconciliationError as exc:
            reason = f"fulfillment created but reload failed: {exc}"
            return TransitionResult(TransitionStatus.FAILED, (created,), reason=reason)

        if reloaded is None or not reloaded.fulfillment_orders:
            reason = "still no fulfillment orders after creating a fulfillment"
            return TransitionResult(TransitionStatus.FAILED, (created,), reason=reason)

        replanned = self.plan(reloaded)
        if replanned.excluded:
            reason = "created fulfillment did not produce a pickup fulfillment order"
            return TransitionResult(TransitionStatus.FAILED, (created,), reason=reason)

        steps = (created, *await self._apply(replanned))
        return summarize_steps(steps)

    async def _apply(self, plan: TransitionPlan) -> tuple[TransitionStep, ...]:
        steps: list[TransitionStep] = []
        for planned in plan.actions:
            steps.append(await self._apply_one(plan.view, planned))
        return tuple(steps)

    async def _apply_one(self, view: TargetOrderView, planned: PlannedAction) -> TransitionStep:
        action = planned.action
        fo_id = planned.fulfillment_order_id

        if action.is_noop:
            log.debug("%s: %s %s, nothing to do", view.name, fo_id, action.value)
            return TransitionStep(action, StepStatus.NOOP, fo_id, planned.detail)
        if action is FulfillmentOrderAction.NOT_PICKUP:
            return TransitionStep(action, StepStatus.SKIPPED, fo_id, planned.detail)
        fulfillment_order = planned.fulfillment_order
        if action is not FulfillmentOrderAction.PREPARE_FOR_PICKUP or fulfillment_order is None:
            detail = f"cannot make ready from state {planned.detail or 'unknown'}"
            log.warning("%s: %s %s", view.name, fo_id or "order", detail)
            return TransitionStep(action, StepStatus.FAILED, fo_id, detail)

        try:
            await self.gateway.prepare_for_pickup(
                fulfillment_order, fulfillment_order.remaining_line_items
            )
        except ReconciliationError as exc:
            log.warning("%s: preparing %s for pickup failed: %s", view.name, fo_id, exc)
            return TransitionStep(action, StepStatus.FAILED, fo_id, str(exc))

        log.info("%s: %s prepared for pickup (%s)", view.name, fo_id, planned.detail)
        return TransitionStep(action, StepStatus.APPLIED, fo_id, planned.detail)
