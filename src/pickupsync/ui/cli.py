# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from pickupsync.app import authorize, inspect_order, run_once, serve
from pickupsync.config import ConfigurationError, configure_logging
from pickupsync.domain.errors import ReconciliationError
from pickupsync.domain.reconciliation import OutcomeKind

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from pickupsync.domain.reconciliation import OrderInspection, ReconciliationOutcome


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Mark Bling orders awaiting pickup as ready for pickup on Shopify"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("serve", help="Reconcile on a fixed interval until interrupted")
    subparsers.add_parser("run-once", help="Run a single reconciliation tick and exit")

    inspect = subparsers.add_parser(
        "inspect", help="Show how one Bling order would be reconciled, without changing anything"
    )
    inspect.add_argument("order_id", type=int, help="Bling sales order id")

    auth = subparsers.add_parser(
        "authorize", help="Exchange a Bling authorization code and store the token"
    )
    auth.add_argument("code", type=str, help="Code received on the OAuth redirect URI")

    return parser.parse_args(list(argv))


def _describe_outcome(outcome: ReconciliationOutcome) -> str:
    reference = outcome.reference or "-"
    match outcome.kind:
        case OutcomeKind.SKIPPED:
            detail = outcome.reason.value
        case OutcomeKind.SUCCEEDED:
            detail = outcome.transition.status.value if outcome.transition else "marker present"
        case _:
            detail = outcome.reason
    return f"{outcome.source_order_id}\t{reference}\t{outcome.kind.value}\t{detail}"


def _describe_inspection(inspection: OrderInspection) -> list[str]:
    lines = [f"Bling order:   {inspection.source_order_id}"]
    if inspection.source_order is not None:
        order = inspection.source_order
        lines.append(f"  status:      {order.status_id}")
        lines.append(f"  store:       {order.store_id or '-'}")
        lines.append(f"  cross ref:   {order.cross_reference_id or '-'}")
    if inspection.reference is not None:
        lines.append(f"Shopify order: {inspection.reference}")
    if inspection.view is not None:
        lines.append(f"  name:        {inspection.view.name}")
        lines.append(f"  tags:        {', '.join(sorted(inspection.view.tags)) or '-'}")
        lines.append(f"  marked:      {'yes' if inspection.marked else 'no'}")
    if inspection.plan is not None:
        lines.append("Plan:")
        for planned in inspection.plan.actions:
            target = planned.fulfillment_order_id or "order"
            detail = f" ({planned.detail})" if planned.detail else ""
            lines.append(f"  {target}: {planned.action.value}{detail}")
        if inspection.plan.excluded:
            lines.append("  -> excluded: no fulfillment order uses local pickup")
    if inspection.error:
        lines.append(f"Error: {inspection.error}")
    return lines


def _run_once() -> int:
    outcomes = run_once()
    for outcome in outcomes:
        print(_describe_outcome(outcome))
    failed = {OutcomeKind.TARGET_TRANSITION_FAILED, OutcomeKind.SOURCE_WRITEBACK_FAILED}
    return 1 if any(outcome.kind in failed for outcome in outcomes) else 0


def _inspect(order_id: int) -> int:
    inspection = inspect_order(order_id)
    for line in _describe_inspection(inspection):
        print(line)
    return 1 if inspection.error else 0


def _authorize(code: str) -> int:
    token = authorize(code)
    expires = token.expires_at.isoformat() if token.expires_at else "unknown"
    print(f"Bling authorization stored (expires {expires})")
    return 0


def _serve() -> int:
    serve()
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Command line entry point."""

    load_dotenv()
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    commands: dict[str, Callable[[], int]] = {
        "serve": _serve,
        "run-once": _run_once,
        "inspect": lambda: _inspect(args.order_id),
        "authorize": lambda: _authorize(args.code),
    }

    try:
        exit_code = commands[args.command]()
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(2)
    except (ReconciliationError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nClosed by user (Ctrl+C)")
        sys.exit(0)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
