"""Pydantic models describing the Shopify Admin GraphQL payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pickupsync.domain.model import DeliveryMethod, FulfillmentOrderStatus


class ShopifyBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GraphQLError(ShopifyBaseModel):
    message: str
    extensions: dict[str, object] | None = None

    @property
    def code(self) -> str | None:
        if self.extensions is None:
            return None
        code = self.extensions.get("code")
        return str(code) if code is not None else None


class GraphQLResponse(ShopifyBaseModel):
    data: dict[str, object] | None = None
    errors: list[GraphQLError] = Field(default_factory=list[GraphQLError])


class UserErrorPayload(ShopifyBaseModel):
    message: str
    field: list[str] | None = None


class MutationPayload(ShopifyBaseModel):
    user_errors: list[UserErrorPayload] = Field(
        default_factory=list[UserErrorPayload], alias="userErrors"
    )


class FulfillmentPayload(ShopifyBaseModel):
    id: str
    status: str | None = None


class FulfillmentCreatePayload(MutationPayload):
    fulfillment: FulfillmentPayload | None = None


class LineItemRef(ShopifyBaseModel):
    id: str


class OrderLineItemPayload(ShopifyBaseModel):
    id: str
    title: str | None = None
    unfulfilled_quantity: int = Field(default=0, alias="unfulfilledQuantity")


class FulfillmentOrderLineItemPayload(ShopifyBaseModel):
    id: str
    remaining_quantity: int = Field(alias="remainingQuantity")
    total_quantity: int = Field(alias="totalQuantity")
    line_item: LineItemRef | None = Field(default=None, alias="lineItem")


class FulfillmentOrderLineItemConnection(ShopifyBaseModel):
    nodes: list[FulfillmentOrderLineItemPayload] = Field(
        default_factory=list[FulfillmentOrderLineItemPayload]
    )


class DeliveryMethodPayload(ShopifyBaseModel):
    method_type: DeliveryMethod = Field(default=DeliveryMethod.UNKNOWN, alias="methodType")

    @field_validator("method_type", mode="before")
    @classmethod
    def _unknown_method(cls, value: object) -> object:
        if value in {member.value for member in DeliveryMethod}:
            return value
        return DeliveryMethod.UNKNOWN


class FulfillmentOrderPayload(ShopifyBaseModel):
    id: str
    status: FulfillmentOrderStatus
    delivery_method: DeliveryMethodPayload | None = Field(default=None, alias="deliveryMethod")
    line_items: FulfillmentOrderLineItemConnection = Field(
        default_factory=FulfillmentOrderLineItemConnection, alias="lineItems"
    )


class FulfillmentOrderConnection(ShopifyBaseModel):
    nodes: list[FulfillmentOrderPayload] = Field(default_factory=list[FulfillmentOrderPayload])


class OrderLineItemConnection(ShopifyBaseModel):
    nodes: list[OrderLineItemPayload] = Field(default_factory=list[OrderLineItemPayload])


class OrderNode(ShopifyBaseModel):
    id: str
    name: str
    tags: list[str] = Field(default_factory=list[str])
    line_items: OrderLineItemConnection = Field(
        default_factory=OrderLineItemConnection, alias="lineItems"
    )
    fulfillment_orders: FulfillmentOrderConnection = Field(
        default_factory=FulfillmentOrderConnection, alias="fulfillmentOrders"
    )
