from __future__ import annotations

import asyncio

import httpx

from pickupsync.adapters.http_resilience import (
    ResilienceConfig,
    ResilientClient,
    RetryPolicy,
    build_retry,
)
from pickupsync.config.bling import default_bling_resilience
from pickupsync.config.shopify import default_shopify_resilience


def test_bling_policy_retries_idempotent_writes() -> None:
    policy = default_bling_resilience().retry

    assert "PATCH" in policy.allowed_methods
    assert "POST" not in policy.allowed_methods
    assert 503 in policy.status_forcelist


def test_shopify_policy_only_retries_unsent_requests() -> None:
    policy = default_shopify_resilience("demo.myshopify.com", "token").retry

    assert policy.allowed_methods == frozenset({"POST"})
    assert policy.status_forcelist == frozenset({429})
    assert policy.retry_on_exceptions == (httpx.ConnectError, httpx.ConnectTimeout)
    assert policy.describe() == "up to 3 retries for POST on 429"


def test_never_policy_builds_zero_retry() -> None:
    policy = RetryPolicy.never()

    retry = build_retry(policy)

    assert policy.describe() == "no retries"
    assert retry.total == 0


def test_resilient_client_applies_base_url_and_headers() -> None:
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    config = ResilienceConfig(
        name="test",
        base_url="https://api.example.test/v1",
        default_headers={"Accept": "application/json"},
    )

    async def run() -> httpx.Response:
        async with ResilientClient(config) as client:
            client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
                base_url=config.base_url or "",
                headers=dict(config.default_headers or {}),
                transport=httpx.MockTransport(handler),
            )
            return await client.post("things", json={"a": 1})

    response = asyncio.run(run())

    assert response.json() == {"ok": True}
    assert str(seen[0].url) == "https://api.example.test/v1/things"
    assert seen[0].headers["Accept"] == "application/json"
