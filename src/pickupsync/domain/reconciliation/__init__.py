"""Reconciliation of pickup readiness between the backend and the commerce platform."""

from __future__ import annotations

from .contracts import (
    FulfillmentOrderAction,
    OutcomeKind,
    PlannedAction,
    ReconciliationOutcome,
    SkipReason,
    Skipped,
    SourceWritebackFailed,
    StepStatus,
    Succeeded,
    TargetTransitionFailed,
    TickSummary,
    TransitionPlan,
    TransitionResult,
    TransitionStatus,
    TransitionStep,
)
from .engine import OrderInspection, ReconciliationLoop
from .resolve import IdentifierResolver
from .transition import ReadinessTransitioner, classify, plan_transition

__all__ = [
    "FulfillmentOrderAction",
    "IdentifierResolver",
    "OrderInspection",
    "OutcomeKind",
    "PlannedAction",
    "ReadinessTransitioner",
    "ReconciliationLoop",
    "ReconciliationOutcome",
    "SkipReason",
    "Skipped",
    "SourceWritebackFailed",
    "StepStatus",
    "Succeeded",
    "TargetTransitionFailed",
    "TickSummary",
    "TransitionPlan",
    "TransitionResult",
    "TransitionStatus",
    "TransitionStep",
    "classify",
    "plan_transition",
]
