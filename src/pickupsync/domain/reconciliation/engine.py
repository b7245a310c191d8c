"""Reconciliation loop: one tick over every order awaiting pickup.

The loop composes ports but does not prescribe concrete adapters. Orders are
processed one at a time; a failure for one order is turned into an outcome and
never aborts the rest of the tick. Idempotent effect is achieved by reading a
fresh view every time, by the marker tag placed on the commerce order once it
is settled, and by only writing back after the commerce side is settled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pickupsync.domain.errors import CredentialMissingError, ReconciliationError

from .contracts import (
    OutcomeKind,
    ReconciliationOutcome,
    SkipReason,
    Skipped,
    SourceWritebackFailed,
    Succeeded,
    TargetTransitionFailed,
    TickSummary,
    TransitionPlan,
    TransitionResult,
    TransitionStatus,
)
from .resolve import IdentifierResolver
from .transition import ReadinessTransitioner

if TYPE_CHECKING:
    from pickupsync.domain.model import SourceOrder, TargetOrderReference, TargetOrderView, Token
    from pickupsync.domain.ports.credentials import CredentialProvider
    from pickupsync.domain.ports.source import SourceOrderFetcher, SourceStatusWriter
    from pickupsync.domain.ports.target import TargetOrderGateway

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OrderInspection:
    """Read-only diagnosis of one backend order."""

    source_order_id: int
    source_order: SourceOrder | None = None
    reference: TargetOrderReference | None = None
    view: TargetOrderView | None = None
    plan: TransitionPlan | None = None
    marked: bool = False
    error: str | None = None


@dataclass(slots=True)
class ReconciliationLoop:
    credentials: CredentialProvider
    fetcher: SourceOrderFetcher
    target: TargetOrderGateway
    writer: SourceStatusWriter
    awaiting_status_id: int
    handled_status_id: int
    store_id: int | None = None
    marker_tag: str = "retirada-local-pronto"
    resolver: IdentifierResolver = field(default_factory=IdentifierResolver)
    _running: bool = field(default=False, init=False)

    @property
    def running(self) -> bool:
        return self._running

    @property
    def transitioner(self) -> ReadinessTransitioner:
        return ReadinessTransitioner(self.target)

    async def run_once(self) -> list[ReconciliationOutcome]:
        """Reconcile every candidate order once.

        Returns an empty list when a previous tick is still in progress or no
        credential is available.
        """

        if self._running:
            log.warning("Previous reconciliation tick still running; skipping this tick")
            return []

        self._running = True
        try:
            return await self._tick()
        finally:
            self._running = False

    async def _tick(self) -> list[ReconciliationOutcome]:
        try:
            token = self._require_token()
        except CredentialMissingError as exc:
            log.error("Reconciliation tick aborted: %s", exc)
            return []

        log.info("Reconciliation tick: fetching orders with status %s", self.awaiting_status_id)
        fetched = await self.fetcher.fetch(token, self.awaiting_status_id, store_id=self.store_id)
        if not fetched.ok:
            log.error("Could not fetch candidate orders: %s", fetched.error)
        if not fetched.orders:
            log.info("No orders awaiting pickup")
            return []

        log.info("Found %d order(s) awaiting pickup", len(fetched.orders))
        summary = TickSummary()
        for source_order in fetched.orders:
            outcome = await self.reconcile_order(token, source_order)
            _log_outcome(outcome)
            summary.outcomes.append(outcome)

        log.info("Reconciliation tick finished: %s", summary.describe())
        return summary.outcomes

    def _require_token(self) -> Token:
        token = self.credentials.get_token()
        if token is None:
            raise CredentialMissingError(
                "no backend token available; authorize the application first"
            )
        return token

    async def reconcile_order(
        self,
        token: Token,
        source_order: SourceOrder,
    ) -> ReconciliationOutcome:
        """Run the per-order pipeline, converting every failure into an outcome."""

        reference: TargetOrderReference | None = None
        try:
            reference = self.resolver.resolve(source_order)
            if reference is None:
                return Skipped(
                    source_order_id=source_order.id, reason=SkipReason.NO_CROSS_REFERENCE
                )
            return await self._reconcile_resolved(token, source_order, reference)
        except ReconciliationError as exc:
            return TargetTransitionFailed(
                source_order_id=source_order.id, reference=reference, reason=str(exc)
            )
        except Exception as exc:  # noqa: BLE001
            log.exception("Unexpected error reconciling order %s", source_order.id)
            return TargetTransitionFailed(
                source_order_id=source_order.id,
                reference=reference,
                reason=f"unexpected {type(exc).__name__}: {exc}",
            )

    async def _reconcile_resolved(
        self,
        token: Token,
        source_order: SourceOrder,
        reference: TargetOrderReference,
    ) -> ReconciliationOutcome:
        view = await self.target.load(reference)
        if view is None:
            return Skipped(
                source_order_id=source_order.id, reference=reference, reason=SkipReason.NOT_FOUND
            )

        if view.has_tag(self.marker_tag):
            log.debug("%s already carries %r; retrying write-back only", view.name, self.marker_tag)
            return await self._write_back(token, source_order, reference, None, already_marked=True)

        result = await self.transitioner.transition(view)
        if result.status is TransitionStatus.EXCLUDED:
            return Skipped(
                source_order_id=source_order.id, reference=reference, reason=SkipReason.NOT_PICKUP
            )
        if not result.status.settled:
            return TargetTransitionFailed(
                source_order_id=source_order.id,
                reference=reference,
                reason=result.reason or "transition failed",
                transition=result,
            )

        await self._mark(view)
        return await self._write_back(token, source_order, reference, result, already_marked=False)

    async def _mark(self, view: TargetOrderView) -> None:
        # The next tick re-reads settled fulfillment orders, so a missing marker
        # only costs a no-op transition.
        try:
            await self.target.add_tags(view.reference, [self.marker_tag])
        except ReconciliationError as exc:
            log.warning("%s: could not add marker tag %r: %s", view.name, self.marker_tag, exc)

    async def _write_back(
        self,
        token: Token,
        source_order: SourceOrder,
        reference: TargetOrderReference,
        transition: TransitionResult | None,
        *,
        already_marked: bool,
    ) -> ReconciliationOutcome:
        written = await self.writer.write_status(token, source_order.id, self.handled_status_id)
        if not written.ok:
            return SourceWritebackFailed(
                source_order_id=source_order.id,
                reference=reference,
                reason=written.error or "status write failed",
                transition=transition,
            )
        return Succeeded(
            source_order_id=source_order.id,
            reference=reference,
            transition=transition,
            already_marked=already_marked,
        )

    async def inspect(self, source_order_id: int) -> OrderInspection:
        """Resolve, load and plan one order without mutating anything."""

        try:
            token = self._require_token()
            source_order = await self.fetcher.get_order(token, source_order_id)
            if source_order is None:
                return OrderInspection(source_order_id, error="order not found in backend")
            reference = self.resolver.resolve(source_order)
            if reference is None:
                return OrderInspection(
                    source_order_id, source_order, error=SkipReason.NO_CROSS_REFERENCE.value
                )
            view = await self.target.load(reference)
            if view is None:
                return OrderInspection(
                    source_order_id, source_order, reference, error=SkipReason.NOT_FOUND.value
                )
        except ReconciliationError as exc:
            return OrderInspection(source_order_id, error=str(exc))

        return OrderInspection(
            source_order_id,
            source_order,
            reference,
            view,
            plan=self.transitioner.plan(view),
            marked=view.has_tag(self.marker_tag),
        )


def _log_outcome(outcome: ReconciliationOutcome) -> None:
    order = outcome.source_order_id
    reference = outcome.reference or "-"
    match outcome.kind:
        case OutcomeKind.SUCCEEDED:
            transition = outcome.transition
            detail = transition.status.value if transition else "marker present"
            log.info("Order %s -> %s: succeeded (%s)", order, reference, detail)
        case OutcomeKind.SKIPPED:
            log.warning("Order %s -> %s: skipped (%s)", order, reference, outcome.reason.value)
        case OutcomeKind.TARGET_TRANSITION_FAILED:
            log.error(
                "Order %s -> %s: commerce transition failed: %s", order, reference, outcome.reason
            )
        case OutcomeKind.SOURCE_WRITEBACK_FAILED:
            log.error(
                "Order %s -> %s: commerce order is ready but backend write-back failed, "
                "reconcile manually: %s",
                order,
                reference,
                outcome.reason,
            )
