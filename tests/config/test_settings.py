from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from pickupsync.config import (
    ConfigurationError,
    MissingConfigurationError,
    ReconciliationConfig,
    get_bling_config,
    get_bling_oauth_config,
    get_reconciliation_config,
    get_shopify_config,
    get_storage_config,
)
from pickupsync.config.bling import DEFAULT_BLING_API_URL, DEFAULT_BLING_TOKEN_URL


def test_reconciliation_config_defaults() -> None:
    config = get_reconciliation_config()

    assert config.awaiting_status_id == 214875
    assert config.handled_status_id == 9
    assert config.store_id is None
    assert config.marker_tag == "retirada-local-pronto"
    assert config.interval_seconds == 30.0


def test_reconciliation_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PICKUPSYNC_AWAITING_STATUS_ID", "100")
    monkeypatch.setenv("PICKUPSYNC_HANDLED_STATUS_ID", "200")
    monkeypatch.setenv("PICKUPSYNC_STORE_ID", "204562")
    monkeypatch.setenv("PICKUPSYNC_MARKER_TAG", "ready")
    monkeypatch.setenv("PICKUPSYNC_INTERVAL_SECONDS", "12.5")

    config = get_reconciliation_config()

    assert config == ReconciliationConfig(
        awaiting_status_id=100,
        handled_status_id=200,
        store_id=204562,
        marker_tag="ready",
        interval_seconds=12.5,
    )


def test_reconciliation_config_rejects_equal_status_ids(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PICKUPSYNC_AWAITING_STATUS_ID", "9")

    with pytest.raises(ConfigurationError, match="differ"):
        get_reconciliation_config()


def test_reconciliation_config_rejects_non_numeric_store(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PICKUPSYNC_STORE_ID", "shopify")

    with pytest.raises(ConfigurationError, match="PICKUPSYNC_STORE_ID"):
        get_reconciliation_config()


def test_reconciliation_config_rejects_blank_marker() -> None:
    with pytest.raises(ConfigurationError):
        ReconciliationConfig(marker_tag="  ")


def test_bling_config_defaults_to_public_api() -> None:
    config = get_bling_config()

    assert config.resilience.base_url == DEFAULT_BLING_API_URL
    assert config.resilience.ratelimit is not None
    assert "PATCH" in config.resilience.retry.allowed_methods


def test_bling_oauth_config_requires_client_credentials() -> None:
    with pytest.raises(MissingConfigurationError) as exc:
        get_bling_oauth_config()

    message = str(exc.value)
    assert "BLING_CLIENT_ID" in message
    assert "BLING_CLIENT_SECRET" in message
    assert "BLING_REDIRECT_URI" in message


def test_bling_oauth_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BLING_CLIENT_ID", "client")
    monkeypatch.setenv("BLING_CLIENT_SECRET", "secret")
    monkeypatch.setenv("BLING_REDIRECT_URI", "https://example.test/callback")

    config = get_bling_oauth_config()

    assert config.client_id == "client"
    assert config.client_secret == "secret"
    assert config.token_url == DEFAULT_BLING_TOKEN_URL


def test_shopify_config_requires_domain_and_token() -> None:
    with pytest.raises(MissingConfigurationError):
        get_shopify_config()


def test_shopify_config_never_retries_on_server_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHOPIFY_SHOP_DOMAIN", "https://demo.myshopify.com/")
    monkeypatch.setenv("SHOPIFY_ACCESS_TOKEN", "shpat_123")
    monkeypatch.setenv("SHOPIFY_API_VERSION", "2025-01")

    config = get_shopify_config()

    assert config.shop_domain == "demo.myshopify.com"
    assert config.graphql_path == "/admin/api/2025-01/graphql.json"
    assert config.resilience.base_url == "https://demo.myshopify.com"
    assert config.resilience.default_headers is not None
    assert config.resilience.default_headers["X-Shopify-Access-Token"] == "shpat_123"
    assert config.resilience.retry.status_forcelist == frozenset({429})


def test_storage_config_prefers_explicit_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PICKUPSYNC_DATA_DIR", str(tmp_path / "data"))

    token_path = get_storage_config().token_path()

    assert token_path == (tmp_path / "data" / "bling_token.json").resolve()
    assert token_path.parent.exists()
