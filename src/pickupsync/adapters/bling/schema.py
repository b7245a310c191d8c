"""Pydantic models describing the Bling v3 API payloads."""

from __future__ import annotations

from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Bling field carrying the sales channel's order number, read as the Shopify id.
CROSS_REFERENCE_FIELD: Final[str] = "numeroLoja"


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class BlingBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SituacaoPayload(BlingBaseModel):
    id: int
    valor: int | None = None


class LojaPayload(BlingBaseModel):
    id: int | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _zero_is_unset(cls, value: object) -> object:
        # Bling reports orders without a channel as ``loja.id == 0``.
        if value in (0, "0", "", None):
            return None
        return value


class PedidoPayload(BlingBaseModel):
    id: int
    numero: str | None = None
    numero_loja: str | None = Field(default=None, alias=CROSS_REFERENCE_FIELD)
    data: str | None = None
    situacao: SituacaoPayload
    loja: LojaPayload | None = None

    @field_validator("numero", "numero_loja", mode="before")
    @classmethod
    def _stringify(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return _blank_to_none(value)


class PedidoListResponse(BlingBaseModel):
    # Items are validated one by one so a malformed order cannot hide the rest.
    data: list[dict[str, object]] = Field(default_factory=list[dict[str, object]])


class PedidoDetailResponse(BlingBaseModel):
    data: PedidoPayload


class ErrorDetail(BlingBaseModel):
    type: str | None = None
    message: str | None = None
    description: str | None = None


class ErrorResponse(BlingBaseModel):
    error: ErrorDetail

    def describe(self) -> str:
        parts = [self.error.type, self.error.message, self.error.description]
        return " - ".join(part for part in parts if part) or "unknown Bling error"


class TokenResponse(BlingBaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int | None = None
    refresh_token: str | None = None
    scope: str | None = None
