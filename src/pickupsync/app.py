"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from pickupsync.adapters.bling import BlingAuthorizer, BlingClient
from pickupsync.adapters.credentials import FileCredentialProvider
from pickupsync.adapters.shopify import ShopifyClient
from pickupsync.config import (
    get_bling_config,
    get_bling_oauth_config,
    get_overrides_config,
    get_reconciliation_config,
    get_shopify_config,
    get_storage_config,
)
from pickupsync.domain.reconciliation import IdentifierResolver, ReconciliationLoop
from pickupsync.scheduling import serve_forever

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from pickupsync.adapters.http_resilience import ClientFactory
    from pickupsync.config import (
        BlingConfig,
        BlingOAuthConfig,
        OverridesConfig,
        ReconciliationConfig,
        ShopifyConfig,
    )
    from pickupsync.domain.model import Token
    from pickupsync.domain.ports.credentials import CredentialProvider
    from pickupsync.domain.reconciliation import OrderInspection, ReconciliationOutcome


log = getLogger(__name__)


def default_credentials() -> FileCredentialProvider:
    return FileCredentialProvider(path=get_storage_config().token_path())


@asynccontextmanager
async def open_reconciliation_loop(
    *,
    credentials: CredentialProvider | None = None,
    bling_config: BlingConfig | None = None,
    shopify_config: ShopifyConfig | None = None,
    reconciliation_config: ReconciliationConfig | None = None,
    overrides_config: OverridesConfig | None = None,
    client_factory: ClientFactory | None = None,
) -> AsyncIterator[ReconciliationLoop]:
    """Build the loop from configuration and close its HTTP clients on exit."""

    settings = reconciliation_config or get_reconciliation_config()
    overrides = overrides_config or get_overrides_config()
    log.info(
        "Using %d identifier override(s) from %s (version %s)",
        len(overrides.entries),
        overrides.source,
        overrides.version,
    )

    bling_client = BlingClient(
        config=bling_config or get_bling_config(), client_factory=client_factory
    )
    shopify_client = ShopifyClient(
        config=shopify_config or get_shopify_config(), client_factory=client_factory
    )
    async with bling_client as bling, shopify_client as shopify:
        yield ReconciliationLoop(
            credentials=credentials or default_credentials(),
            fetcher=bling,
            target=shopify,
            writer=bling,
            awaiting_status_id=settings.awaiting_status_id,
            handled_status_id=settings.handled_status_id,
            store_id=settings.store_id,
            marker_tag=settings.marker_tag,
            resolver=IdentifierResolver(overrides.entries, overrides.version),
        )


def run_once(*, credentials: CredentialProvider | None = None) -> list[ReconciliationOutcome]:
    """Run a single reconciliation tick and return its outcomes."""

    async def _run() -> list[ReconciliationOutcome]:
        async with open_reconciliation_loop(credentials=credentials) as loop:
            return await loop.run_once()

    return asyncio.run(_run())


def inspect_order(
    order_id: int,
    *,
    credentials: CredentialProvider | None = None,
) -> OrderInspection:
    """Resolve and plan one Bling order without changing either system."""

    async def _inspect() -> OrderInspection:
        async with open_reconciliation_loop(credentials=credentials) as loop:
            return await loop.inspect(order_id)

    return asyncio.run(_inspect())


def authorize(
    code: str,
    *,
    oauth_config: BlingOAuthConfig | None = None,
    store: FileCredentialProvider | None = None,
) -> Token:
    """Exchange a Bling authorization code and persist the resulting token."""

    authorizer = BlingAuthorizer(config=oauth_config or get_bling_oauth_config())
    token = asyncio.run(authorizer.exchange_code(code))
    (store or default_credentials()).save(token)
    return token


def serve(*, credentials: CredentialProvider | None = None) -> None:
    """Reconcile on a fixed interval until interrupted."""

    settings = get_reconciliation_config()

    async def _serve() -> None:
        async with open_reconciliation_loop(
            credentials=credentials, reconciliation_config=settings
        ) as loop:
            await serve_forever(loop, interval_seconds=settings.interval_seconds)

    log.info(
        "Starting pickup sync: status %s -> %s every %ss",
        settings.awaiting_status_id,
        settings.handled_status_id,
        settings.interval_seconds,
    )
    asyncio.run(_serve())
