"""Map a backend order onto its commerce-platform order reference.

The reference is a pure function of ``SourceOrder.cross_reference_id`` and the
override table: an exact hit in the table wins, anything else is used
verbatim. Which backend field fills ``cross_reference_id`` is decided once, in
the backend translator, never here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pickupsync.domain.model import TargetOrderReference

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pickupsync.domain.model import SourceOrder

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IdentifierResolver:
    overrides: Mapping[str, str] = field(default_factory=dict[str, str])
    overrides_version: int = 0

    def __call__(self, source_order: SourceOrder) -> TargetOrderReference | None:
        return self.resolve(source_order)

    def resolve(self, source_order: SourceOrder) -> TargetOrderReference | None:
        raw = (source_order.cross_reference_id or "").strip()
        if not raw:
            return None

        override = self.overrides.get(raw)
        if override is not None:
            log.debug(
                "Order %s: cross reference %s overridden to %s (table v%s)",
                source_order.id,
                raw,
                override,
                self.overrides_version,
            )
            return TargetOrderReference.from_order_id(override)
        return TargetOrderReference.from_order_id(raw)
