"""Where the service keeps local state.

The only local state is the Bling token written by ``pickupsync authorize``;
everything else is read from the remote systems on every tick.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "pickupsync"
TOKEN_FILENAME: Final[str] = "bling_token.json"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    token_filename: str = TOKEN_FILENAME

    def token_path(self, *, ensure: bool = True) -> Path:
        """Path of the token file; ``ensure`` creates a private data directory."""

        data_dir = self.data_dir.expanduser().resolve()
        if ensure:
            data_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
        return data_dir / self.token_filename


def _default_data_dir() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local or Path.home() / "AppData" / "Local") / APP_DIR_NAME
    xdg_state = os.getenv("XDG_STATE_HOME")
    return Path(xdg_state or Path.home() / ".local" / "state") / APP_DIR_NAME


def get_storage_config() -> StorageConfig:
    configured = optional_env_var("PICKUPSYNC_DATA_DIR")
    return StorageConfig(data_dir=Path(configured) if configured else _default_data_dir())
