"""Result types produced by the reconciliation stages.

This module intentionally holds only:
- the per-fulfillment-order plan and step records of the transitioner
- the per-order outcome union returned by the loop
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from pickupsync.domain.model import FulfillmentOrder, TargetOrderReference, TargetOrderView


class FulfillmentOrderAction(StrEnum):
    """What the state machine decided for one fulfillment order."""

    CREATE_FULFILLMENT = "create-fulfillment"
    PREPARE_FOR_PICKUP = "prepare-for-pickup"
    ALREADY_READY = "already-ready"
    ALREADY_TERMINAL = "already-terminal"
    NOTHING_REMAINING = "nothing-remaining"
    NOT_PICKUP = "not-pickup"
    UNSUPPORTED_STATE = "unsupported-state"

    @property
    def mutates(self) -> bool:
        return self in {
            FulfillmentOrderAction.CREATE_FULFILLMENT,
            FulfillmentOrderAction.PREPARE_FOR_PICKUP,
        }

    @property
    def is_noop(self) -> bool:
        return self in {
            FulfillmentOrderAction.ALREADY_READY,
            FulfillmentOrderAction.ALREADY_TERMINAL,
            FulfillmentOrderAction.NOTHING_REMAINING,
        }


@dataclass(frozen=True, slots=True)
class PlannedAction:
    action: FulfillmentOrderAction
    fulfillment_order: FulfillmentOrder | None = None
    detail: str | None = None

    @property
    def fulfillment_order_id(self) -> str | None:
        return self.fulfillment_order.id if self.fulfillment_order else None


@dataclass(frozen=True, slots=True)
class TransitionPlan:
    """Actions chosen for every fulfillment order of one view."""

    view: TargetOrderView
    actions: tuple[PlannedAction, ...]

    @property
    def excluded(self) -> bool:
        """Whether the order has nothing for local pickup to act on."""

        relevant = [
            planned
            for planned in self.actions
            if planned.action is not FulfillmentOrderAction.ALREADY_TERMINAL
        ]
        if not relevant:
            return False
        return all(planned.action is FulfillmentOrderAction.NOT_PICKUP for planned in relevant)

    @property
    def mutating(self) -> tuple[PlannedAction, ...]:
        return tuple(planned for planned in self.actions if planned.action.mutates)


class StepStatus(StrEnum):
    APPLIED = "applied"
    NOOP = "noop"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class TransitionStep:
    action: FulfillmentOrderAction
    status: StepStatus
    fulfillment_order_id: str | None = None
    detail: str | None = None


class TransitionStatus(StrEnum):
    SUCCEEDED = "succeeded"
    NO_ACTION_NEEDED = "no-action-needed"
    FAILED = "failed"
    EXCLUDED = "excluded"

    @property
    def settled(self) -> bool:
        """Whether the commerce side is fully in the ready state."""

        return self in {TransitionStatus.SUCCEEDED, TransitionStatus.NO_ACTION_NEEDED}


@dataclass(frozen=True, slots=True)
class TransitionResult:
    status: TransitionStatus
    steps: tuple[TransitionStep, ...] = ()
    reason: str | None = None

    @property
    def partial(self) -> bool:
        if self.status is not TransitionStatus.FAILED:
            return False
        return any(step.status in {StepStatus.APPLIED, StepStatus.NOOP} for step in self.steps)


class SkipReason(StrEnum):
    NO_CROSS_REFERENCE = "no-cross-reference"
    NOT_FOUND = "not-found"
    NOT_PICKUP = "not-pickup"


class OutcomeKind(StrEnum):
    SKIPPED = "skipped"
    TARGET_TRANSITION_FAILED = "target-transition-failed"
    SOURCE_WRITEBACK_FAILED = "source-writeback-failed"
    SUCCEEDED = "succeeded"


@dataclass(frozen=True, slots=True, kw_only=True)
class Skipped:
    source_order_id: int
    reason: SkipReason
    reference: TargetOrderReference | None = None
    kind: Literal[OutcomeKind.SKIPPED] = OutcomeKind.SKIPPED


@dataclass(frozen=True, slots=True, kw_only=True)
class TargetTransitionFailed:
    source_order_id: int
    reason: str
    reference: TargetOrderReference | None = None
    transition: TransitionResult | None = None
    kind: Literal[OutcomeKind.TARGET_TRANSITION_FAILED] = OutcomeKind.TARGET_TRANSITION_FAILED


@dataclass(frozen=True, slots=True, kw_only=True)
class SourceWritebackFailed:
    """Commerce side is ready but the backend still shows the old status."""

    source_order_id: int
    reference: TargetOrderReference
    reason: str
    transition: TransitionResult | None = None
    kind: Literal[OutcomeKind.SOURCE_WRITEBACK_FAILED] = OutcomeKind.SOURCE_WRITEBACK_FAILED


@dataclass(frozen=True, slots=True, kw_only=True)
class Succeeded:
    source_order_id: int
    reference: TargetOrderReference
    transition: TransitionResult | None = None
    already_marked: bool = False
    kind: Literal[OutcomeKind.SUCCEEDED] = OutcomeKind.SUCCEEDED


type ReconciliationOutcome = Skipped | TargetTransitionFailed | SourceWritebackFailed | Succeeded


@dataclass(slots=True)
class TickSummary:
    """Counts of one ``run_once`` call, for the closing log line."""

    outcomes: list[ReconciliationOutcome] = field(default_factory=list["ReconciliationOutcome"])

    def counts(self) -> Counter[OutcomeKind]:
        return Counter(outcome.kind for outcome in self.outcomes)

    def describe(self) -> str:
        counts = self.counts()
        parts = [f"{kind.value}={counts.get(kind, 0)}" for kind in OutcomeKind]
        return f"orders={len(self.outcomes)} " + " ".join(parts)
