"""Port for obtaining the order-management backend credential."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pickupsync.domain.model import Token


@runtime_checkable
class CredentialProvider(Protocol):
    """Supplies the current bearer token, or ``None`` when not authorized yet."""

    def get_token(self) -> Token | None:
        ...


__all__ = ["CredentialProvider"]
