"""Shopify Admin GraphQL configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_SHOPIFY_API_VERSION = "2024-10"
SHOPIFY_TIMEOUT_SECONDS = 20.0


@dataclass(frozen=True, slots=True)
class ShopifyConfig:
    """Holds the GraphQL endpoint and admin token for one store."""

    shop_domain: str
    access_token: str
    resilience: ResilienceConfig
    api_version: str = DEFAULT_SHOPIFY_API_VERSION

    @property
    def graphql_path(self) -> str:
        return f"/admin/api/{self.api_version}/graphql.json"


def shopify_retry_policy() -> RetryPolicy:
    # Mutations go through POST, so a timeout after sending could mean the
    # fulfillment was already created.
    return RetryPolicy.unsent_only(frozenset({"POST"}))


def default_shopify_resilience(shop_domain: str, access_token: str) -> ResilienceConfig:
    return ResilienceConfig(
        name="shopify",
        base_url=f"https://{shop_domain}",
        timeout_seconds=SHOPIFY_TIMEOUT_SECONDS,
        retry=shopify_retry_policy(),
        ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
        default_headers={
            "X-Shopify-Access-Token": access_token,
            "Content-Type": "application/json",
        },
    )


def get_shopify_config(*, resilience: ResilienceConfig | None = None) -> ShopifyConfig:
    values = require_env_vars(("SHOPIFY_SHOP_DOMAIN", "SHOPIFY_ACCESS_TOKEN"))
    shop_domain = values["SHOPIFY_SHOP_DOMAIN"].removeprefix("https://").rstrip("/")
    access_token = values["SHOPIFY_ACCESS_TOKEN"]
    return ShopifyConfig(
        shop_domain=shop_domain,
        access_token=access_token,
        api_version=optional_env_var("SHOPIFY_API_VERSION") or DEFAULT_SHOPIFY_API_VERSION,
        resilience=resilience or default_shopify_resilience(shop_domain, access_token),
    )
