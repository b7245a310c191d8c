"""Application configuration helpers."""

from __future__ import annotations

from .bling import BlingConfig, BlingOAuthConfig, get_bling_config, get_bling_oauth_config
from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .overrides import OverridesConfig, get_overrides_config, load_overrides_file
from .reconciliation import ReconciliationConfig, get_reconciliation_config
from .shopify import ShopifyConfig, get_shopify_config
from .storage import StorageConfig, get_storage_config

__all__ = [
    "BlingConfig",
    "BlingOAuthConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "OverridesConfig",
    "RateLimit",
    "ReconciliationConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "ShopifyConfig",
    "StorageConfig",
    "configure_logging",
    "get_bling_config",
    "get_bling_oauth_config",
    "get_overrides_config",
    "get_reconciliation_config",
    "get_shopify_config",
    "get_storage_config",
    "load_overrides_file",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
