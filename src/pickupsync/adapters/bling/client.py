"""HTTP client for the Bling v3 sales-order API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Unpack

import httpx
from pydantic import ValidationError

from pickupsync.adapters.http_resilience import ResilientClient
from pickupsync.domain.errors import TransportError
from pickupsync.domain.ports.source import SourceOrderFetchResult, WriteStatusResult

from .schema import (
    BlingBaseModel,
    ErrorResponse,
    PedidoDetailResponse,
    PedidoListResponse,
    PedidoPayload,
)
from .translator import parse_source_order

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import TracebackType

    from pickupsync.adapters.http_resilience import ClientFactory, RequestOptions
    from pickupsync.config.bling import BlingConfig
    from pickupsync.domain.model import SourceOrder, Token

log = getLogger(__name__)

SYSTEM = "bling"
ORDERS_PATH = "pedidos/vendas"


class BlingClient:
    """Reads candidate orders from Bling and writes their status back.

    The list endpoint is queried with one stable filter form
    (``idsSituacoes[]``) and the result is filtered again locally, because the
    server-side filter has not always been honoured. Local filtering means
    every tick pages through all matching orders, which is only acceptable
    while the number of orders awaiting pickup stays small.
    """

    def __init__(
        self,
        *,
        config: BlingConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> BlingClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _http(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self._config.resilience)
        return self._client

    async def fetch(
        self,
        token: Token,
        status_id: int,
        *,
        store_id: int | None = None,
    ) -> SourceOrderFetchResult:
        try:
            orders = await self._fetch_all_pages(token, status_id)
        except TransportError as exc:
            log.error("Fetching Bling orders with status %s failed: %s", status_id, exc)
            return SourceOrderFetchResult(orders=[], error=str(exc))

        candidates = filter_candidates(orders, status_id=status_id, store_id=store_id)
        if len(candidates) != len(orders):
            log.debug(
                "Dropped %d Bling order(s) not matching status %s / store %s",
                len(orders) - len(candidates),
                status_id,
                store_id,
            )
        return SourceOrderFetchResult(orders=candidates)

    async def _fetch_all_pages(self, token: Token, status_id: int) -> list[SourceOrder]:
        page_size = self._config.page_size
        orders: list[SourceOrder] = []
        seen: set[int] = set()
        for page in range(1, self._config.max_pages + 1):
            params = [
                ("idsSituacoes[]", str(status_id)),
                ("pagina", str(page)),
                ("limite", str(page_size)),
            ]
            response = await self._request("GET", ORDERS_PATH, token, params=params)
            listing = _validate(PedidoListResponse, response)
            for item in listing.data:
                try:
                    pedido = PedidoPayload.model_validate(item)
                except ValidationError as exc:
                    log.warning(
                        "Skipping malformed Bling order %s: %s",
                        item.get("id", "<no id>"),
                        exc.errors(include_url=False),
                    )
                    continue
                if pedido.id in seen:
                    continue
                seen.add(pedido.id)
                orders.append(parse_source_order(pedido))
            if len(listing.data) < page_size:
                return orders

        log.warning(
            "Stopped paging Bling orders after %d page(s); remaining orders wait for a later tick",
            self._config.max_pages,
        )
        return orders

    async def get_order(self, token: Token, order_id: int) -> SourceOrder | None:
        response = await self._request("GET", f"{ORDERS_PATH}/{order_id}", token)
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        detail = _validate(PedidoDetailResponse, response)
        return parse_source_order(detail.data)

    async def write_status(
        self,
        token: Token,
        source_order_id: int,
        status_id: int,
    ) -> WriteStatusResult:
        try:
            response = await self._request(
                "PATCH", f"{ORDERS_PATH}/{source_order_id}/situacoes/{status_id}", token
            )
            if response.status_code in {httpx.codes.NOT_FOUND, httpx.codes.METHOD_NOT_ALLOWED}:
                log.info(
                    "Situation endpoint unavailable for Bling order %s (HTTP %s), "
                    "falling back to order PATCH",
                    source_order_id,
                    response.status_code,
                )
                response = await self._request(
                    "PATCH",
                    f"{ORDERS_PATH}/{source_order_id}",
                    token,
                    json={"situacao": {"id": status_id}},
                )
            _raise_for_error(response)
        except TransportError as exc:
            return WriteStatusResult(ok=False, error=str(exc))

        log.debug("Bling order %s moved to status %s", source_order_id, status_id)
        return WriteStatusResult(ok=True)

    async def _request(
        self,
        method: str,
        path: str,
        token: Token,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        headers = {"Authorization": token.authorization_header}
        try:
            return await self._http().request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            raise TransportError(SYSTEM, f"{method} {path}: {exc!r}") from exc


def filter_candidates(
    orders: Iterable[SourceOrder],
    *,
    status_id: int,
    store_id: int | None,
) -> list[SourceOrder]:
    return [
        order
        for order in orders
        if order.status_id == status_id and (store_id is None or order.store_id == store_id)
    ]


def _raise_for_error(response: httpx.Response) -> None:
    if response.is_success:
        return
    raise TransportError(SYSTEM, _error_message(response), status_code=response.status_code)


def _error_message(response: httpx.Response) -> str:
    try:
        return ErrorResponse.model_validate(response.json()).describe()
    except ValueError:
        return response.reason_phrase or "request failed"


def _validate[T: BlingBaseModel](
    model: type[T],
    response: httpx.Response,
) -> T:
    _raise_for_error(response)
    try:
        return model.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        raise TransportError(SYSTEM, f"unexpected payload: {exc}") from exc

