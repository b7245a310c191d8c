"""Failure taxonomy for one reconciliation pass.

Adapters raise these; the reconciliation loop converts them into per-order
outcomes so that no single order can abort a tick. A missing Target order is
not an error and is reported as ``None`` by the view loader.
"""

from __future__ import annotations

from dataclasses import dataclass


class ReconciliationError(RuntimeError):
    """Base class for expected, recoverable reconciliation failures."""


class CredentialMissingError(ReconciliationError):
    """No usable credential for the order-management backend."""


class TransportError(ReconciliationError):
    """Network, HTTP or payload failure talking to either remote system."""

    def __init__(self, system: str, message: str, *, status_code: int | None = None) -> None:
        detail = f"{system}: {message}"
        if status_code is not None:
            detail = f"{detail} (HTTP {status_code})"
        super().__init__(detail)
        self.system = system
        self.status_code = status_code


@dataclass(frozen=True, slots=True)
class UserError:
    message: str
    field: tuple[str, ...] = ()

    def __str__(self) -> str:
        if self.field:
            return f"{'.'.join(self.field)}: {self.message}"
        return self.message


class BusinessRuleError(ReconciliationError):
    """The commerce platform rejected a mutation with ``userErrors``."""

    def __init__(self, operation: str, user_errors: tuple[UserError, ...]) -> None:
        details = "; ".join(str(error) for error in user_errors) or "unknown user error"
        super().__init__(f"{operation} rejected: {details}")
        self.operation = operation
        self.user_errors = user_errors
