"""Authorization-code exchange for the Bling OAuth application."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from pickupsync.adapters.http_resilience import ResilienceConfig, ResilientClient, RetryPolicy
from pickupsync.domain.errors import TransportError
from pickupsync.domain.model import Token

from .client import SYSTEM
from .schema import ErrorResponse, TokenResponse

if TYPE_CHECKING:
    from pickupsync.adapters.http_resilience import ClientFactory
    from pickupsync.config.bling import BlingOAuthConfig

log = getLogger(__name__)


class BlingAuthorizer:
    """Trades an authorization code for an access token."""

    def __init__(
        self,
        *,
        config: BlingOAuthConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient
        # Codes are single-use, so the exchange is never retried.
        self._resilience = ResilienceConfig(
            name="bling-oauth",
            timeout_seconds=config.timeout_seconds,
            retry=RetryPolicy.never(),
        )

    async def exchange_code(self, code: str, *, now: datetime | None = None) -> Token:
        if not code.strip():
            raise ValueError("Authorization code must not be blank")

        data = {
            "grant_type": "authorization_code",
            "code": code.strip(),
            "redirect_uri": self._config.redirect_uri,
        }
        async with self._client_factory(self._resilience) as client:
            try:
                response = await client.post(
                    self._config.token_url,
                    data=data,
                    auth=httpx.BasicAuth(self._config.client_id, self._config.client_secret),
                    headers={"Accept": "application/json"},
                )
            except httpx.HTTPError as exc:
                raise TransportError(SYSTEM, f"token exchange failed: {exc!r}") from exc

        if not response.is_success:
            try:
                message = ErrorResponse.model_validate(response.json()).describe()
            except ValueError:
                message = response.text or "token exchange rejected"
            log.error("Bling token exchange rejected: %s", message)
            raise TransportError(SYSTEM, message, status_code=response.status_code)

        try:
            payload = TokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise TransportError(SYSTEM, f"unexpected token payload: {exc}") from exc

        issued_at = now or datetime.now(UTC)
        expires_at = (
            issued_at + timedelta(seconds=payload.expires_in)
            if payload.expires_in is not None
            else None
        )
        log.info("Obtained Bling access token (expires at %s)", expires_at or "unknown")
        return Token(
            access_token=payload.access_token,
            token_type=payload.token_type.capitalize(),
            refresh_token=payload.refresh_token,
            expires_at=expires_at,
        )
