from __future__ import annotations

import asyncio
from datetime import timedelta

from pickupsync.scheduling import JOB_ID, build_scheduler, serve_forever


class _CountingLoop:
    def __init__(self, stop: asyncio.Event | None = None) -> None:
        self.stop = stop
        self.calls = 0
        self.running = False

    async def run_once(self) -> list[object]:
        self.calls += 1
        if self.stop is not None:
            self.stop.set()
        return []


def test_build_scheduler_runs_immediately_without_overlap() -> None:
    scheduler = build_scheduler(_CountingLoop(), interval_seconds=30)  # type: ignore[arg-type]

    job = scheduler.get_job(JOB_ID)

    assert job is not None
    assert job.trigger.interval == timedelta(seconds=30)
    assert job.max_instances == 1
    assert job.coalesce
    assert job.next_run_time is not None


def test_serve_forever_ticks_until_stopped() -> None:
    async def scenario() -> int:
        stop = asyncio.Event()
        loop = _CountingLoop(stop)
        await asyncio.wait_for(
            serve_forever(loop, interval_seconds=60, stop=stop),  # type: ignore[arg-type]
            timeout=5,
        )
        return loop.calls

    assert asyncio.run(scenario()) == 1
