"""Recurring timer driving the reconciliation loop."""

from __future__ import annotations

import asyncio
import signal
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from apscheduler.schedulers.asyncio import AsyncIOScheduler

if TYPE_CHECKING:
    from pickupsync.domain.reconciliation import ReconciliationLoop

log = getLogger(__name__)

JOB_ID = "reconcile-pickup-orders"


def build_scheduler(loop: ReconciliationLoop, *, interval_seconds: float) -> AsyncIOScheduler:
    """Schedule ``loop.run_once`` every ``interval_seconds``, first run immediately.

    ``max_instances=1`` drops a timer tick that fires while the previous one is
    still running; ``coalesce`` folds missed ticks into one.
    """

    scheduler = AsyncIOScheduler(timezone=UTC)
    scheduler.add_job(
        loop.run_once,
        "interval",
        seconds=interval_seconds,
        id=JOB_ID,
        next_run_time=datetime.now(UTC),
        max_instances=1,
        coalesce=True,
    )
    return scheduler


async def serve_forever(
    loop: ReconciliationLoop,
    *,
    interval_seconds: float,
    stop: asyncio.Event | None = None,
) -> None:
    stop_event = stop or asyncio.Event()
    event_loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            event_loop.add_signal_handler(signum, stop_event.set)
        except (NotImplementedError, RuntimeError):
            log.debug("Signal handler for %s not supported on this platform", signum)

    scheduler = build_scheduler(loop, interval_seconds=interval_seconds)
    scheduler.start()
    log.info("Reconciliation scheduled every %ss", interval_seconds)
    try:
        await stop_event.wait()
    finally:
        log.info("Stopping reconciliation scheduler")
        scheduler.shutdown(wait=False)
        # A tick always runs to completion before the clients are closed.
        while loop.running:
            await asyncio.sleep(0.1)
