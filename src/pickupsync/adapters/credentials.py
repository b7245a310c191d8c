"""Credential providers for the Bling bearer token.

The token is process-wide state that is only replaced out of band (by the
``authorize`` command or by a test) and read once per tick.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from pickupsync.domain.model import Token

if TYPE_CHECKING:
    from pathlib import Path

    from pickupsync.domain.ports.credentials import CredentialProvider

log = getLogger(__name__)


@dataclass(slots=True)
class InMemoryCredentialProvider:
    token: Token | None = None

    def set_token(self, token: Token) -> None:
        self.token = token
        log.info("Bling token stored in memory")

    def clear(self) -> None:
        self.token = None

    def get_token(self) -> Token | None:
        if self.token is None:
            log.warning("No Bling token in memory; authorize the application first")
            return None
        if self.token.is_expired():
            log.warning("Bling token expired at %s; authorize again", self.token.expires_at)
            return None
        return self.token


@dataclass(slots=True)
class FileCredentialProvider:
    """Reads the token written by ``authorize`` on every call."""

    path: Path

    def save(self, token: Token) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        document = {
            "access_token": token.access_token,
            "token_type": token.token_type,
            "refresh_token": token.refresh_token,
            "expires_at": token.expires_at.isoformat() if token.expires_at else None,
        }
        tmp_path = self.path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(document, indent=2))
        tmp_path.chmod(0o600)
        tmp_path.replace(self.path)
        log.info("Bling token saved to %s", self.path)

    def get_token(self, *, now: datetime | None = None) -> Token | None:
        try:
            token = _load_token(self.path)
        except FileNotFoundError:
            log.warning("No Bling token at %s; run 'pickupsync authorize' first", self.path)
            return None
        except (OSError, ValueError) as exc:
            log.error("Could not read Bling token from %s: %s", self.path, exc)
            return None

        if token.is_expired(now):
            log.warning(
                "Bling token in %s expired at %s; authorize again", self.path, token.expires_at
            )
            return None
        return token


def _load_token(path: Path) -> Token:
    document = json.loads(path.read_text())
    if not isinstance(document, dict):
        raise ValueError("token file is not a JSON object")

    access_token = document.get("access_token")
    if not isinstance(access_token, str) or not access_token:
        raise ValueError("token file has no access_token")

    expires_raw = document.get("expires_at")
    expires_at = datetime.fromisoformat(expires_raw) if isinstance(expires_raw, str) else None
    if expires_at is not None and expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)

    refresh_token = document.get("refresh_token")
    return Token(
        access_token=access_token,
        token_type=str(document.get("token_type") or "Bearer"),
        refresh_token=refresh_token if isinstance(refresh_token, str) else None,
        expires_at=expires_at,
    )


if TYPE_CHECKING:
    _memory_check: CredentialProvider = InMemoryCredentialProvider()
    _file_check: CredentialProvider = FileCredentialProvider(Path("token.json"))
