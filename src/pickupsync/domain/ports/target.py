"""Ports for the commerce platform.

Every mutation raises ``TransportError`` for transport-level failures and
``BusinessRuleError`` when the platform answers with ``userErrors``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pickupsync.domain.model import (
        FulfillmentOrder,
        FulfillmentOrderLineItem,
        TargetOrderReference,
        TargetOrderView,
        UnfulfilledLineItem,
    )


@runtime_checkable
class TargetOrderLoader(Protocol):
    async def load(self, reference: TargetOrderReference) -> TargetOrderView | None:
        """Return a fresh view, or ``None`` when the order does not exist."""
        ...


@runtime_checkable
class TargetOrderGateway(TargetOrderLoader, Protocol):
    async def create_pickup_fulfillment(
        self,
        view: TargetOrderView,
        line_items: Sequence[UnfulfilledLineItem],
    ) -> str:
        """Create a local-pickup fulfillment and return its id."""
        ...

    async def prepare_for_pickup(
        self,
        fulfillment_order: FulfillmentOrder,
        line_items: Sequence[FulfillmentOrderLineItem],
    ) -> None:
        ...

    async def add_tags(self, reference: TargetOrderReference, tags: Sequence[str]) -> None:
        ...


__all__ = ["TargetOrderGateway", "TargetOrderLoader"]
