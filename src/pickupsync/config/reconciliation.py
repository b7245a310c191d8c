"""Reconciliation loop settings."""

from __future__ import annotations

from dataclasses import dataclass

from .env import float_env_var, int_env_var, optional_env_var
from .errors import ConfigurationError

# Bling "situação" ids: the custom "Aguardando Retirada" state and the stock
# "Atendido" state.
DEFAULT_AWAITING_PICKUP_STATUS_ID = 214875
DEFAULT_HANDLED_STATUS_ID = 9
DEFAULT_MARKER_TAG = "retirada-local-pronto"
DEFAULT_INTERVAL_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    awaiting_status_id: int = DEFAULT_AWAITING_PICKUP_STATUS_ID
    handled_status_id: int = DEFAULT_HANDLED_STATUS_ID
    store_id: int | None = None
    marker_tag: str = DEFAULT_MARKER_TAG
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS

    def __post_init__(self) -> None:
        if self.awaiting_status_id == self.handled_status_id:
            raise ConfigurationError("Awaiting and handled status ids must differ")
        if not self.marker_tag.strip():
            raise ConfigurationError("Marker tag must not be blank")


def get_reconciliation_config() -> ReconciliationConfig:
    store = optional_env_var("PICKUPSYNC_STORE_ID")
    store_id: int | None = None
    if store is not None:
        try:
            store_id = int(store)
        except ValueError as exc:
            raise ConfigurationError(
                f"PICKUPSYNC_STORE_ID must be an integer, got {store!r}"
            ) from exc
    return ReconciliationConfig(
        awaiting_status_id=int_env_var(
            "PICKUPSYNC_AWAITING_STATUS_ID", DEFAULT_AWAITING_PICKUP_STATUS_ID
        ),
        handled_status_id=int_env_var("PICKUPSYNC_HANDLED_STATUS_ID", DEFAULT_HANDLED_STATUS_ID),
        store_id=store_id,
        marker_tag=optional_env_var("PICKUPSYNC_MARKER_TAG") or DEFAULT_MARKER_TAG,
        interval_seconds=float_env_var("PICKUPSYNC_INTERVAL_SECONDS", DEFAULT_INTERVAL_SECONDS),
    )
