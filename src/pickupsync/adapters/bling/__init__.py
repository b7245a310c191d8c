"""Public interface for the Bling adapter."""

from __future__ import annotations

from .client import BlingClient, filter_candidates
from .oauth import BlingAuthorizer
from .schema import PedidoListResponse, PedidoPayload, TokenResponse
from .translator import CROSS_REFERENCE_FIELD, PedidoPayloadInput, parse_source_order

__all__ = [
    "CROSS_REFERENCE_FIELD",
    "BlingAuthorizer",
    "BlingClient",
    "PedidoListResponse",
    "PedidoPayload",
    "PedidoPayloadInput",
    "TokenResponse",
    "filter_candidates",
    "parse_source_order",
]
