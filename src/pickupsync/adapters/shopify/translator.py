"""Translate Shopify GraphQL payloads into domain objects."""

from __future__ import annotations

from collections.abc import Mapping

from pickupsync.domain.errors import UserError
from pickupsync.domain.model import (
    DeliveryMethod,
    FulfillmentOrder,
    FulfillmentOrderLineItem,
    TargetOrderReference,
    TargetOrderView,
    UnfulfilledLineItem,
)

from .schema import FulfillmentOrderPayload, OrderNode, UserErrorPayload

OrderNodeInput = OrderNode | Mapping[str, object]


def parse_fulfillment_order(payload: FulfillmentOrderPayload) -> FulfillmentOrder:
    method = (
        payload.delivery_method.method_type if payload.delivery_method else DeliveryMethod.UNKNOWN
    )
    return FulfillmentOrder(
        id=payload.id,
        status=payload.status,
        delivery_method=method,
        line_items=tuple(
            FulfillmentOrderLineItem(
                id=item.id,
                remaining_quantity=item.remaining_quantity,
                total_quantity=item.total_quantity,
                line_item_id=item.line_item.id if item.line_item else None,
            )
            for item in payload.line_items.nodes
        ),
    )


def parse_order_view(payload: OrderNodeInput) -> TargetOrderView:
    node = payload if isinstance(payload, OrderNode) else OrderNode.model_validate(payload)
    return TargetOrderView(
        reference=TargetOrderReference(global_id=node.id),
        name=node.name,
        tags=frozenset(tag.strip() for tag in node.tags if tag.strip()),
        fulfillment_orders=tuple(
            parse_fulfillment_order(fo) for fo in node.fulfillment_orders.nodes
        ),
        unfulfilled_line_items=tuple(
            UnfulfilledLineItem(
                id=item.id,
                unfulfilled_quantity=item.unfulfilled_quantity,
                title=item.title,
            )
            for item in node.line_items.nodes
            if item.unfulfilled_quantity > 0
        ),
    )


def parse_user_errors(payloads: list[UserErrorPayload]) -> tuple[UserError, ...]:
    return tuple(
        UserError(message=payload.message, field=tuple(payload.field or ())) for payload in payloads
    )
