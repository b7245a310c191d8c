"""Ports for reading and updating orders in the order-management backend."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pickupsync.domain.model import SourceOrder, Token


@dataclass(slots=True)
class SourceOrderFetchResult:
    """Candidate orders for one tick.

    A failed fetch yields no orders and an ``error`` description instead of
    raising, so an unreachable backend degrades to an idle tick.
    """

    orders: list[SourceOrder] = field(default_factory=list["SourceOrder"])
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class WriteStatusResult:
    ok: bool
    error: str | None = None


@runtime_checkable
class SourceOrderFetcher(Protocol):
    async def fetch(
        self,
        token: Token,
        status_id: int,
        *,
        store_id: int | None = None,
    ) -> SourceOrderFetchResult:
        ...

    async def get_order(self, token: Token, order_id: int) -> SourceOrder | None:
        ...


@runtime_checkable
class SourceStatusWriter(Protocol):
    async def write_status(
        self,
        token: Token,
        source_order_id: int,
        status_id: int,
    ) -> WriteStatusResult:
        ...


__all__ = [
    "SourceOrderFetchResult",
    "SourceOrderFetcher",
    "SourceStatusWriter",
    "WriteStatusResult",
]
