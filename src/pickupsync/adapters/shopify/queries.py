"""GraphQL documents sent to the Shopify Admin API."""

from __future__ import annotations

from typing import Final

ORDER_FULFILLMENT_VIEW: Final[str] = """
query OrderFulfillmentView($id: ID!) {
  node(id: $id) {
    ... on Order {
      id
      name
      tags
      lineItems(first: 50) {
        nodes {
          id
          title
          unfulfilledQuantity
        }
      }
      fulfillmentOrders(first: 50) {
        nodes {
          id
          status
          deliveryMethod {
            methodType
          }
          lineItems(first: 50) {
            nodes {
              id
              remainingQuantity
              totalQuantity
              lineItem {
                id
              }
            }
          }
        }
      }
    }
  }
}
"""

FULFILLMENT_CREATE: Final[str] = """
mutation CreatePickupFulfillment($fulfillment: FulfillmentInput!) {
  fulfillmentCreate(fulfillment: $fulfillment) {
    fulfillment {
      id
      status
    }
    userErrors {
      field
      message
    }
  }
}
"""

PREPARED_FOR_PICKUP: Final[str] = """
mutation PrepareForPickup($input: FulfillmentOrderLineItemsPreparedForPickupInput!) {
  fulfillmentOrderLineItemsPreparedForPickup(input: $input) {
    userErrors {
      field
      message
    }
  }
}
"""

TAGS_ADD: Final[str] = """
mutation AddOrderTags($id: ID!, $tags: [String!]!) {
  tagsAdd(id: $id, tags: $tags) {
    node {
      id
    }
    userErrors {
      field
      message
    }
  }
}
"""
