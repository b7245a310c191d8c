"""Configuration types for the rate-limited, retrying HTTP clients.

Which failures may be retried depends on whether resending the request could
apply a side effect twice, so each remote system picks one of the named
policies below instead of tuning individual fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PATCH", "PUT"})
TRANSIENT_STATUSES = frozenset({429, 500, 502, 503, 504})


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    total: int = 3
    backoff_factor: float = 0.5
    max_backoff_wait: float = 30.0
    respect_retry_after_header: bool = True
    allowed_methods: frozenset[str] = IDEMPOTENT_METHODS
    status_forcelist: frozenset[int] = TRANSIENT_STATUSES
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )
    backoff_jitter: float = 1.0

    @classmethod
    def idempotent(cls, total: int = 3) -> RetryPolicy:
        """Retry reads and absolute writes on any transient failure."""

        return cls(total=total)

    @classmethod
    def unsent_only(cls, methods: frozenset[str], total: int = 3) -> RetryPolicy:
        """Retry only failures where the server cannot have applied the request.

        That is a throttled answer (429) or a connection that never opened.
        Timeouts after sending are left to the next tick.
        """

        return cls(
            total=total,
            allowed_methods=methods,
            status_forcelist=frozenset({429}),
            retry_on_exceptions=(httpx.ConnectError, httpx.ConnectTimeout),
        )

    @classmethod
    def never(cls) -> RetryPolicy:
        return cls(total=0, allowed_methods=frozenset(), status_forcelist=frozenset())

    def describe(self) -> str:
        if self.total == 0:
            return "no retries"
        methods = ",".join(sorted(self.allowed_methods))
        statuses = ",".join(str(code) for code in sorted(self.status_forcelist))
        return f"up to {self.total} retries for {methods} on {statuses}"


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float = 1.0


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy.idempotent)
    ratelimit: RateLimit | None = None
    default_headers: Mapping[str, str] | None = None
