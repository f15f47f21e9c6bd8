"""PingScheduler ticks and lifecycle."""

import asyncio
import time

from config.constants import Defaults
from exceptions import StoreUnavailableError
from monitoring.scheduler import PingScheduler


A = "https://a.example.com/"
B = "https://b.example.com/"


async def test_tick_pings_only_active_targets(registry, scheduler, responses):
    responses[A] = 200
    responses[B] = 200
    await registry.start(A)
    await registry.add(B)

    report = await scheduler.run_tick()

    assert [r.url for r in report.results] == [A]
    assert scheduler.last_report is report
    assert (await registry.get(B)).total_requests == 0


async def test_counters_hold_invariant_over_ticks(registry, scheduler, responses):
    responses[A] = 200
    await registry.start(A)

    for _ in range(3):
        await scheduler.run_tick()
    responses[A] = 503
    await scheduler.run_tick()

    target = await registry.get(A)
    assert target.total_requests == 4
    assert target.request_count == 3
    assert target.request_count <= target.total_requests


async def test_snapshot_failure_skips_tick(registry, scheduler, monkeypatch):
    async def broken():
        raise StoreUnavailableError("store down")

    monkeypatch.setattr(registry, "list_active", broken)

    assert await scheduler.run_tick() is None
    assert scheduler.skipped_ticks == 1
    assert scheduler.last_report is None


async def test_keepalive_job_waits_one_interval(scheduler, settings):
    job = scheduler.job

    assert job.name == Defaults.KEEPALIVE_JOB_NAME
    assert job.interval_seconds == settings.monitoring.tick_interval_seconds
    assert job.enabled is True
    assert job.runs == 0
    assert job.is_due(time.time()) is False
    assert job.is_due(job.due_at) is True


async def test_run_on_start_ticks_immediately(registry, executor, settings, responses):
    responses[A] = 200
    await registry.start(A)
    settings.monitoring.run_on_start = True
    scheduler = PingScheduler(registry, executor, settings)

    await scheduler.start()
    try:
        for _ in range(50):
            if scheduler.last_report is not None:
                break
            await asyncio.sleep(0.05)
    finally:
        await scheduler.stop()

    assert scheduler.last_report is not None
    assert scheduler.last_report.succeeded == 1
    assert scheduler.is_running is False


async def test_failing_tick_is_counted(scheduler):
    async def boom():
        raise RuntimeError("executor exploded")

    scheduler.job.action = boom
    await scheduler._run_job(scheduler.job)

    assert scheduler.job.failures == 1
    assert scheduler.job.running is False


async def test_get_stats(scheduler):
    stats = scheduler.get_stats()

    assert stats["is_running"] is False
    assert stats["skipped_ticks"] == 0
    assert stats["last_tick"] is None
    assert stats["job"]["name"] == Defaults.KEEPALIVE_JOB_NAME


async def test_pause_and_resume(scheduler):
    scheduler.pause()
    assert scheduler.job.is_due(scheduler.job.due_at) is False

    scheduler.resume()
    assert scheduler.job.is_due(scheduler.job.due_at) is True
