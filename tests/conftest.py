from __future__ import annotations

import pytest

_ENV_VARS = (
    "BLING_API_URL",
    "BLING_TOKEN_URL",
    "BLING_CLIENT_ID",
    "BLING_CLIENT_SECRET",
    "BLING_REDIRECT_URI",
    "SHOPIFY_SHOP_DOMAIN",
    "SHOPIFY_ACCESS_TOKEN",
    "SHOPIFY_API_VERSION",
    "PICKUPSYNC_AWAITING_STATUS_ID",
    "PICKUPSYNC_HANDLED_STATUS_ID",
    "PICKUPSYNC_STORE_ID",
    "PICKUPSYNC_MARKER_TAG",
    "PICKUPSYNC_INTERVAL_SECONDS",
    "PICKUPSYNC_OVERRIDES_FILE",
    "PICKUPSYNC_DATA_DIR",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
