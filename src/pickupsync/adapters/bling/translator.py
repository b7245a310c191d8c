"""Translate Bling order payloads into domain ``SourceOrder`` objects.

Cross-reference mapping
-----------------------
The Shopify order id is read from exactly one field, ``CROSS_REFERENCE_FIELD``
(``numeroLoja``, the order number as assigned by the sales channel). Earlier
integrations looked at ``loja.idLojaProduto`` and at the Bling ``numero``;
neither is consulted here. An order whose ``numeroLoja`` is blank yields a
``SourceOrder`` without a cross reference and is skipped by the reconciler
rather than guessed. Corrections for known-bad values belong in the override
table, not in additional fallbacks.
"""

from __future__ import annotations

from collections.abc import Mapping

from pickupsync.domain.model import SourceOrder

from .schema import CROSS_REFERENCE_FIELD, PedidoPayload

__all__ = ["CROSS_REFERENCE_FIELD", "PedidoPayloadInput", "parse_source_order"]

PedidoPayloadInput = PedidoPayload | Mapping[str, object]


def parse_source_order(payload: PedidoPayloadInput) -> SourceOrder:
    pedido = (
        payload if isinstance(payload, PedidoPayload) else PedidoPayload.model_validate(payload)
    )
    return SourceOrder(
        id=pedido.id,
        status_id=pedido.situacao.id,
        number=pedido.numero,
        store_id=pedido.loja.id if pedido.loja else None,
        cross_reference_id=pedido.numero_loja,
    )
