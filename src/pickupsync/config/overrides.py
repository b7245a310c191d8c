"""Versioned override table for known-bad Bling to Shopify identifier mappings.

File format (TOML)::

    version = 2

    [overrides]
    "2143" = "5804091048247"

Keys are raw cross-reference values as read from Bling; values are the
Shopify order ids (numeric or ``gid://`` form) that should be used instead.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Final

from .env import optional_env_var
from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

BUILTIN_OVERRIDES_VERSION: Final[int] = 1
BUILTIN_OVERRIDES: Final[dict[str, str]] = {
    "2143": "5804091048247",
}


@dataclass(frozen=True, slots=True)
class OverridesConfig:
    version: int = BUILTIN_OVERRIDES_VERSION
    entries: Mapping[str, str] = field(default_factory=lambda: dict(BUILTIN_OVERRIDES))
    source: str = "builtin"


def load_overrides_file(path: Path) -> OverridesConfig:
    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Override table not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Override table {path} is not valid TOML: {exc}") from exc

    version = document.get("version")
    if not isinstance(version, int) or isinstance(version, bool) or version < 1:
        raise ConfigurationError(f"Override table {path} needs a positive integer 'version'")

    raw_entries = document.get("overrides", {})
    if not isinstance(raw_entries, dict):
        raise ConfigurationError(f"Override table {path}: 'overrides' must be a table")

    entries: dict[str, str] = {}
    for key, value in raw_entries.items():
        target = str(value).strip() if isinstance(value, (str, int)) else ""
        if not target or isinstance(value, bool):
            raise ConfigurationError(
                f"Override table {path}: entry {key!r} must map to a non-empty order id"
            )
        entries[str(key).strip()] = target

    return OverridesConfig(version=version, entries=entries, source=str(path))


def get_overrides_config() -> OverridesConfig:
    path = optional_env_var("PICKUPSYNC_OVERRIDES_FILE")
    if path is None:
        return OverridesConfig()
    return load_overrides_file(Path(path).expanduser())
