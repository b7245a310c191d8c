"""Builders and in-memory fakes for the reconciliation ports."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from pickupsync.domain.errors import BusinessRuleError, TransportError, UserError
from pickupsync.domain.model import (
    DeliveryMethod,
    FulfillmentOrder,
    FulfillmentOrderLineItem,
    FulfillmentOrderStatus,
    SourceOrder,
    TargetOrderReference,
    TargetOrderView,
    Token,
    UnfulfilledLineItem,
)
from pickupsync.domain.ports.source import SourceOrderFetchResult, WriteStatusResult

if TYPE_CHECKING:
    from collections.abc import Sequence

AWAITING = 214875
HANDLED = 9
MARKER = "retirada-local-pronto"


def make_token(value: str = "access-token") -> Token:
    return Token(access_token=value)


def make_source_order(
    order_id: int = 1,
    *,
    cross_reference: str | None = "5804091048247",
    status_id: int = AWAITING,
    store_id: int | None = None,
) -> SourceOrder:
    return SourceOrder(
        id=order_id,
        status_id=status_id,
        number=str(order_id),
        store_id=store_id,
        cross_reference_id=cross_reference,
    )


def make_fulfillment_order(
    fo_id: str = "gid://shopify/FulfillmentOrder/1",
    *,
    status: FulfillmentOrderStatus = FulfillmentOrderStatus.OPEN,
    method: DeliveryMethod = DeliveryMethod.PICKUP,
    remaining: Sequence[int] = (1,),
) -> FulfillmentOrder:
    return FulfillmentOrder(
        id=fo_id,
        status=status,
        delivery_method=method,
        line_items=tuple(
            FulfillmentOrderLineItem(
                id=f"{fo_id}/item-{index}",
                remaining_quantity=quantity,
                total_quantity=max(quantity, 1),
            )
            for index, quantity in enumerate(remaining)
        ),
    )


def make_view(
    order_id: str = "5804091048247",
    *,
    name: str = "#1001",
    fulfillment_orders: Sequence[FulfillmentOrder] = (),
    unfulfilled: Sequence[int] = (),
    tags: Sequence[str] = (),
) -> TargetOrderView:
    return TargetOrderView(
        reference=TargetOrderReference.from_order_id(order_id),
        name=name,
        tags=frozenset(tags),
        fulfillment_orders=tuple(fulfillment_orders),
        unfulfilled_line_items=tuple(
            UnfulfilledLineItem(id=f"gid://shopify/LineItem/{index}", unfulfilled_quantity=qty)
            for index, qty in enumerate(unfulfilled, start=1)
        ),
    )


@dataclass(slots=True)
class FakeCredentials:
    token: Token | None = field(default_factory=make_token)

    def get_token(self) -> Token | None:
        return self.token


@dataclass(slots=True)
class FakeBackend:
    """Order-management backend holding orders and their status."""

    orders: list[SourceOrder] = field(default_factory=list[SourceOrder])
    fetch_error: str | None = None
    failing_writes: set[int] = field(default_factory=set[int])
    writes: list[tuple[int, int]] = field(default_factory=list[tuple[int, int]])
    fetch_calls: int = 0

    async def fetch(
        self,
        token: Token,
        status_id: int,
        *,
        store_id: int | None = None,
    ) -> SourceOrderFetchResult:
        self.fetch_calls += 1
        if self.fetch_error is not None:
            return SourceOrderFetchResult(orders=[], error=self.fetch_error)
        return SourceOrderFetchResult(
            orders=[
                order
                for order in self.orders
                if order.status_id == status_id and (store_id is None or order.store_id == store_id)
            ]
        )

    async def get_order(self, token: Token, order_id: int) -> SourceOrder | None:
        return next((order for order in self.orders if order.id == order_id), None)

    async def write_status(
        self,
        token: Token,
        source_order_id: int,
        status_id: int,
    ) -> WriteStatusResult:
        self.writes.append((source_order_id, status_id))
        if source_order_id in self.failing_writes:
            return WriteStatusResult(ok=False, error="bling: HTTP 503")
        self.orders = [
            replace(order, status_id=status_id) if order.id == source_order_id else order
            for order in self.orders
        ]
        return WriteStatusResult(ok=True)

    def status_of(self, order_id: int) -> int:
        return next(order.status_id for order in self.orders if order.id == order_id)


@dataclass(slots=True)
class FakeCommerce:
    """Commerce platform that applies mutations to stored views."""

    views: dict[str, TargetOrderView] = field(default_factory=dict[str, TargetOrderView])
    rejected_fulfillment_orders: set[str] = field(default_factory=set[str])
    failing_loads: set[str] = field(default_factory=set[str])
    fail_create: bool = False
    fail_tags: bool = False
    create_without_fulfillment_orders: bool = False
    mutations: list[tuple[str, str]] = field(default_factory=list[tuple[str, str]])
    loads: list[str] = field(default_factory=list[str])

    def add(self, view: TargetOrderView) -> TargetOrderView:
        self.views[view.reference.global_id] = view
        return view

    def view(self, order_id: str) -> TargetOrderView:
        return self.views[TargetOrderReference.from_order_id(order_id).global_id]

    def mutation_names(self) -> list[str]:
        return [name for name, _ in self.mutations]

    async def load(self, reference: TargetOrderReference) -> TargetOrderView | None:
        self.loads.append(reference.global_id)
        if reference.global_id in self.failing_loads:
            raise TransportError("shopify", "GraphQL request failed: ReadTimeout()")
        return self.views.get(reference.global_id)

    async def create_pickup_fulfillment(
        self,
        view: TargetOrderView,
        line_items: Sequence[UnfulfilledLineItem],
    ) -> str:
        self.mutations.append(("fulfillmentCreate", view.reference.global_id))
        if self.fail_create:
            raise BusinessRuleError("fulfillmentCreate", (UserError("Invalid line items"),))
        fulfillment_id = f"gid://shopify/Fulfillment/{len(self.mutations)}"
        created: tuple[FulfillmentOrder, ...] = ()
        if not self.create_without_fulfillment_orders:
            created = (
                make_fulfillment_order(
                    f"gid://shopify/FulfillmentOrder/{view.reference.legacy_id}",
                    remaining=[item.unfulfilled_quantity for item in line_items],
                ),
            )
        self.views[view.reference.global_id] = replace(
            view, fulfillment_orders=created, unfulfilled_line_items=()
        )
        return fulfillment_id

    async def prepare_for_pickup(
        self,
        fulfillment_order: FulfillmentOrder,
        line_items: Sequence[FulfillmentOrderLineItem],
    ) -> None:
        self.mutations.append(("preparedForPickup", fulfillment_order.id))
        if fulfillment_order.id in self.rejected_fulfillment_orders:
            raise BusinessRuleError(
                "fulfillmentOrderLineItemsPreparedForPickup",
                (UserError("Fulfillment order is not in a valid state", ("id",)),),
            )
        for key, view in self.views.items():
            updated = tuple(
                replace(fo, status=FulfillmentOrderStatus.IN_PROGRESS)
                if fo.id == fulfillment_order.id
                else fo
                for fo in view.fulfillment_orders
            )
            self.views[key] = replace(view, fulfillment_orders=updated)

    async def add_tags(self, reference: TargetOrderReference, tags: Sequence[str]) -> None:
        self.mutations.append(("tagsAdd", reference.global_id))
        if self.fail_tags:
            raise TransportError("shopify", "tagsAdd", status_code=502)
        view = self.views[reference.global_id]
        self.views[reference.global_id] = replace(view, tags=view.tags | frozenset(tags))
