"""GraphQL client for the Shopify Admin API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from pickupsync.adapters.http_resilience import ResilientClient
from pickupsync.domain.errors import BusinessRuleError, TransportError

from .queries import FULFILLMENT_CREATE, ORDER_FULFILLMENT_VIEW, PREPARED_FOR_PICKUP, TAGS_ADD
from .schema import FulfillmentCreatePayload, GraphQLResponse, MutationPayload, OrderNode
from .translator import parse_order_view, parse_user_errors

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from types import TracebackType

    from pickupsync.adapters.http_resilience import ClientFactory
    from pickupsync.config.shopify import ShopifyConfig
    from pickupsync.domain.model import (
        FulfillmentOrder,
        FulfillmentOrderLineItem,
        TargetOrderReference,
        TargetOrderView,
        UnfulfilledLineItem,
    )

log = getLogger(__name__)

SYSTEM = "shopify"
PICKUP_TRACKING_COMPANY = "Retirada Local"


class ShopifyClient:
    """Loads fulfillment views and issues the pickup mutations.

    A response can carry top-level ``errors`` (query or throttling failures,
    raised as ``TransportError``) or per-mutation ``userErrors`` (business
    rule rejections, raised as ``BusinessRuleError``), both on HTTP 200.
    """

    def __init__(
        self,
        *,
        config: ShopifyConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> ShopifyClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _http(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self._config.resilience)
        return self._client

    async def load(self, reference: TargetOrderReference) -> TargetOrderView | None:
        data = await self._execute(ORDER_FULFILLMENT_VIEW, {"id": reference.global_id})
        node = data.get("node")
        if not node:
            log.debug("Shopify order %s not found", reference)
            return None
        try:
            order = OrderNode.model_validate(node)
        except ValidationError as exc:
            raise TransportError(SYSTEM, f"unexpected order payload: {exc}") from exc
        return parse_order_view(order)

    async def create_pickup_fulfillment(
        self,
        view: TargetOrderView,
        line_items: Sequence[UnfulfilledLineItem],
    ) -> str:
        """Fulfill ``line_items`` as a silent local-pickup fulfillment.

        The Admin API addresses items by fulfillment-order line item, so the
        order is read again and each unfulfilled line item is matched to the
        open fulfillment-order line item that carries it. Shopify assigns
        fulfillment orders asynchronously; until it has, there is nothing to
        address and a ``TransportError`` leaves the order for a later tick.
        """

        by_fulfillment_order = await self._assigned_line_items(view.reference, line_items)
        if not by_fulfillment_order:
            raise TransportError(
                SYSTEM, f"{view.name}: no fulfillment order assigned to the unfulfilled items yet"
            )
        variables = {
            "fulfillment": {
                "lineItemsByFulfillmentOrder": by_fulfillment_order,
                "notifyCustomer": False,
                "trackingInfo": {
                    "company": PICKUP_TRACKING_COMPANY,
                    "number": f"PICKUP-{view.name}",
                },
            }
        }
        data = await self._execute(FULFILLMENT_CREATE, variables)
        payload = _mutation_payload(FulfillmentCreatePayload, data, "fulfillmentCreate")
        if payload.fulfillment is None:
            raise TransportError(SYSTEM, "fulfillmentCreate returned no fulfillment")
        log.info("%s: created pickup fulfillment %s", view.name, payload.fulfillment.id)
        return payload.fulfillment.id

    async def _assigned_line_items(
        self,
        reference: TargetOrderReference,
        line_items: Sequence[UnfulfilledLineItem],
    ) -> list[dict[str, object]]:
        wanted = {item.id: item.unfulfilled_quantity for item in line_items}
        fresh = await self.load(reference)
        if fresh is None:
            return []

        grouped: list[dict[str, object]] = []
        for fulfillment_order in fresh.fulfillment_orders:
            if fulfillment_order.status.is_terminal:
                continue
            entries = [
                {"id": item.id, "quantity": min(item.remaining_quantity, wanted[item.line_item_id])}
                for item in fulfillment_order.remaining_line_items
                if item.line_item_id in wanted
            ]
            if entries:
                grouped.append(
                    {
                        "fulfillmentOrderId": fulfillment_order.id,
                        "fulfillmentOrderLineItems": entries,
                    }
                )
        return grouped

    async def prepare_for_pickup(
        self,
        fulfillment_order: FulfillmentOrder,
        line_items: Sequence[FulfillmentOrderLineItem],
    ) -> None:
        # The mutation always prepares every remaining line item of the
        # fulfillment order; ``line_items`` only documents what is affected.
        variables = {
            "input": {
                "lineItemsByFulfillmentOrder": [{"fulfillmentOrderId": fulfillment_order.id}],
            }
        }
        data = await self._execute(PREPARED_FOR_PICKUP, variables)
        _mutation_payload(MutationPayload, data, "fulfillmentOrderLineItemsPreparedForPickup")
        log.debug(
            "%s: %d line item(s) prepared for pickup", fulfillment_order.id, len(line_items)
        )

    async def add_tags(self, reference: TargetOrderReference, tags: Sequence[str]) -> None:
        data = await self._execute(TAGS_ADD, {"id": reference.global_id, "tags": list(tags)})
        _mutation_payload(MutationPayload, data, "tagsAdd")

    async def _execute(self, query: str, variables: Mapping[str, object]) -> dict[str, object]:
        try:
            response = await self._http().post(
                self._config.graphql_path,
                json={"query": query, "variables": variables},
            )
        except httpx.HTTPError as exc:
            raise TransportError(SYSTEM, f"GraphQL request failed: {exc!r}") from exc

        if not response.is_success:
            raise TransportError(
                SYSTEM, response.reason_phrase or "request failed", status_code=response.status_code
            )

        try:
            payload = GraphQLResponse.model_validate(response.json())
        except ValueError as exc:
            raise TransportError(SYSTEM, f"unexpected GraphQL payload: {exc}") from exc

        if payload.errors:
            messages = "; ".join(
                f"{error.message} [{error.code}]" if error.code else error.message
                for error in payload.errors
            )
            log.error("Shopify GraphQL errors: %s", messages)
            raise TransportError(SYSTEM, f"GraphQL errors: {messages}")
        if payload.data is None:
            raise TransportError(SYSTEM, "GraphQL response without data")
        return payload.data


def _mutation_payload[T: MutationPayload](
    model: type[T],
    data: Mapping[str, object],
    operation: str,
) -> T:
    raw = data.get(operation)
    if raw is None:
        raise TransportError(SYSTEM, f"{operation} returned no payload")
    try:
        payload = model.model_validate(raw)
    except ValidationError as exc:
        raise TransportError(SYSTEM, f"unexpected {operation} payload: {exc}") from exc
    if payload.user_errors:
        errors = parse_user_errors(payload.user_errors)
        log.warning("Shopify %s userErrors: %s", operation, "; ".join(map(str, errors)))
        raise BusinessRuleError(operation, errors)
    return payload
