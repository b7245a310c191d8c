"""Domain types shared by the reconciliation core and its adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Final

TARGET_ORDER_GID_PREFIX: Final[str] = "gid://shopify/Order/"


@dataclass(frozen=True, slots=True)
class Token:
    """Bearer credential for the order-management backend."""

    access_token: str
    token_type: str = "Bearer"
    refresh_token: str | None = None
    expires_at: datetime | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        current = now or datetime.now(UTC)
        return current >= self.expires_at

    @property
    def authorization_header(self) -> str:
        return f"{self.token_type} {self.access_token}"


@dataclass(frozen=True, slots=True)
class SourceOrder:
    """Order as read from the order-management backend.

    ``cross_reference_id`` is the raw value pointing at the commerce platform's
    order; it may be ``None`` when the backend never received it.
    """

    id: int
    status_id: int
    number: str | None = None
    store_id: int | None = None
    cross_reference_id: str | None = None


@dataclass(frozen=True, slots=True)
class TargetOrderReference:
    """Opaque global id of an order on the commerce platform."""

    global_id: str

    @classmethod
    def from_order_id(cls, order_id: str) -> TargetOrderReference:
        value = order_id.strip()
        if value.startswith("gid://"):
            return cls(global_id=value)
        return cls(global_id=f"{TARGET_ORDER_GID_PREFIX}{value}")

    @property
    def legacy_id(self) -> str:
        return self.global_id.rsplit("/", 1)[-1]

    def __str__(self) -> str:
        return self.global_id


class FulfillmentOrderStatus(StrEnum):
    OPEN = "OPEN"
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    INCOMPLETE = "INCOMPLETE"
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in {FulfillmentOrderStatus.CLOSED, FulfillmentOrderStatus.CANCELLED}

    @property
    def is_unsubmitted(self) -> bool:
        return self in {FulfillmentOrderStatus.OPEN, FulfillmentOrderStatus.SCHEDULED}


class DeliveryMethod(StrEnum):
    PICKUP = "PICK_UP"
    SHIPPING = "SHIPPING"
    LOCAL = "LOCAL"
    NONE = "NONE"
    RETAIL = "RETAIL"
    PICKUP_POINT = "PICKUP_POINT"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True, slots=True)
class FulfillmentOrderLineItem:
    id: str
    remaining_quantity: int
    total_quantity: int
    line_item_id: str | None = None


@dataclass(frozen=True, slots=True)
class FulfillmentOrder:
    id: str
    status: FulfillmentOrderStatus
    delivery_method: DeliveryMethod
    line_items: tuple[FulfillmentOrderLineItem, ...] = ()

    @property
    def is_pickup(self) -> bool:
        return self.delivery_method is DeliveryMethod.PICKUP

    @property
    def remaining_line_items(self) -> tuple[FulfillmentOrderLineItem, ...]:
        return tuple(item for item in self.line_items if item.remaining_quantity > 0)


@dataclass(frozen=True, slots=True)
class UnfulfilledLineItem:
    """Order-level line item that has not been assigned to any fulfillment."""

    id: str
    unfulfilled_quantity: int
    title: str | None = None


@dataclass(frozen=True, slots=True)
class TargetOrderView:
    """Fresh fulfillment snapshot of one commerce-platform order."""

    reference: TargetOrderReference
    name: str
    tags: frozenset[str] = field(default_factory=frozenset[str])
    fulfillment_orders: tuple[FulfillmentOrder, ...] = ()
    unfulfilled_line_items: tuple[UnfulfilledLineItem, ...] = ()

    def has_tag(self, tag: str) -> bool:
        wanted = tag.strip().casefold()
        return any(existing.strip().casefold() == wanted for existing in self.tags)
