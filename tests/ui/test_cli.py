from __future__ import annotations

from datetime import UTC, datetime

import pytest

from pickupsync.config import MissingConfigurationError
from pickupsync.domain.model import TargetOrderReference, Token
from pickupsync.domain.reconciliation import (
    OrderInspection,
    SkipReason,
    Skipped,
    SourceWritebackFailed,
    Succeeded,
    plan_transition,
)
from pickupsync.ui import cli
from tests.support.orders import make_fulfillment_order, make_source_order, make_view

REFERENCE = TargetOrderReference.from_order_id("1001")


def _exit_code(argv: list[str]) -> int | str | None:
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    return exc.value.code


def test_run_once_prints_outcomes(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(
        cli,
        "run_once",
        lambda: [
            Succeeded(source_order_id=1, reference=REFERENCE),
            Skipped(source_order_id=2, reason=SkipReason.NO_CROSS_REFERENCE),
        ],
    )

    assert _exit_code(["run-once"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "1\tgid://shopify/Order/1001\tsucceeded\tmarker present",
        "2\t-\tskipped\tno-cross-reference",
    ]


def test_run_once_fails_when_any_order_failed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        cli,
        "run_once",
        lambda: [SourceWritebackFailed(source_order_id=1, reference=REFERENCE, reason="HTTP 503")],
    )

    assert _exit_code(["run-once"]) == 1


def test_inspect_passes_numeric_order_id(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, int] = {}
    view = make_view("1001", name="#1001", fulfillment_orders=[make_fulfillment_order("fo-1")])

    def fake_inspect(order_id: int) -> OrderInspection:
        captured["order_id"] = order_id
        return OrderInspection(
            order_id,
            make_source_order(order_id, cross_reference="1001"),
            view.reference,
            view,
            plan=plan_transition(view),
        )

    monkeypatch.setattr(cli, "inspect_order", fake_inspect)

    assert _exit_code(["inspect", "42"]) == 0

    assert captured["order_id"] == 42
    out = capsys.readouterr().out
    assert "Shopify order: gid://shopify/Order/1001" in out
    assert "fo-1: prepare-for-pickup (1 line item(s))" in out


def test_inspect_reports_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        cli, "inspect_order", lambda order_id: OrderInspection(order_id, error="not-found")
    )

    assert _exit_code(["inspect", "42"]) == 1


def test_authorize_stores_token(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    expires = datetime(2024, 5, 1, 18, tzinfo=UTC)
    monkeypatch.setattr(
        cli, "authorize", lambda code: Token(access_token=code.upper(), expires_at=expires)
    )

    assert _exit_code(["authorize", "abc"]) == 0

    assert "expires 2024-05-01T18:00:00+00:00" in capsys.readouterr().out


def test_configuration_error_exits_with_two(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def fail() -> None:
        raise MissingConfigurationError(["SHOPIFY_ACCESS_TOKEN"])

    monkeypatch.setattr(cli, "serve", fail)

    assert _exit_code(["serve"]) == 2

    assert "SHOPIFY_ACCESS_TOKEN" in capsys.readouterr().err


def test_subcommand_is_required() -> None:
    assert _exit_code([]) == 2
