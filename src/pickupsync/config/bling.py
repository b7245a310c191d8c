"""Bling (order-management backend) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_BLING_API_URL = "https://api.bling.com.br/Api/v3"
DEFAULT_BLING_TOKEN_URL = "https://api.bling.com.br/Api/v3/oauth/token"
BLING_TIMEOUT_SECONDS = 15.0
DEFAULT_PAGE_SIZE = 100
DEFAULT_MAX_PAGES = 5


@dataclass(frozen=True, slots=True)
class BlingConfig:
    """Holds the Bling API endpoint and paging settings."""

    resilience: ResilienceConfig
    page_size: int = DEFAULT_PAGE_SIZE
    max_pages: int = DEFAULT_MAX_PAGES


@dataclass(frozen=True, slots=True)
class BlingOAuthConfig:
    """Client credentials used for the authorization-code exchange."""

    client_id: str
    client_secret: str
    redirect_uri: str
    token_url: str = DEFAULT_BLING_TOKEN_URL
    timeout_seconds: float = BLING_TIMEOUT_SECONDS


def default_bling_resilience(base_url: str = DEFAULT_BLING_API_URL) -> ResilienceConfig:
    # The status write sets an absolute value, so PATCH is safe to resend.
    return ResilienceConfig(
        name="bling",
        base_url=base_url,
        timeout_seconds=BLING_TIMEOUT_SECONDS,
        retry=RetryPolicy.idempotent(),
        ratelimit=RateLimit(max_calls=3, per_seconds=1.0),
        default_headers={"Accept": "application/json"},
    )


def get_bling_config(*, resilience: ResilienceConfig | None = None) -> BlingConfig:
    base_url = optional_env_var("BLING_API_URL") or DEFAULT_BLING_API_URL
    return BlingConfig(resilience=resilience or default_bling_resilience(base_url))


def get_bling_oauth_config() -> BlingOAuthConfig:
    values = require_env_vars(("BLING_CLIENT_ID", "BLING_CLIENT_SECRET", "BLING_REDIRECT_URI"))
    return BlingOAuthConfig(
        client_id=values["BLING_CLIENT_ID"],
        client_secret=values["BLING_CLIENT_SECRET"],
        redirect_uri=values["BLING_REDIRECT_URI"],
        token_url=optional_env_var("BLING_TOKEN_URL") or DEFAULT_BLING_TOKEN_URL,
    )
