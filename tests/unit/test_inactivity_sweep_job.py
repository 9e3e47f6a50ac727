from unittest.mock import AsyncMock

import pytest

from app.features.vendor_trust.jobs import inactivity_sweep_job


@pytest.mark.asyncio
async def test_run_inactivity_sweep_returns_count():
    service = AsyncMock()
    service.sweep_inactive.return_value = 3

    assert await inactivity_sweep_job.run_inactivity_sweep(service) == 3


@pytest.mark.asyncio
async def test_scheduler_sleeps_between_cycles(monkeypatch):
    service = AsyncMock()
    service.sweep_inactive.return_value = 0
    sleep_mock = AsyncMock()
    monkeypatch.setattr(inactivity_sweep_job.asyncio, "sleep", sleep_mock)
    monkeypatch.setattr(inactivity_sweep_job.settings, "ACTIVITY_SWEEP_INTERVAL_MINUTES", 5)

    await inactivity_sweep_job.start_inactivity_sweep_scheduler(service, max_cycles=3)

    assert service.sweep_inactive.await_count == 3
    assert sleep_mock.await_count == 2
    sleep_mock.assert_awaited_with(300)


@pytest.mark.asyncio
async def test_scheduler_survives_failed_cycle(monkeypatch):
    service = AsyncMock()
    service.sweep_inactive.side_effect = [RuntimeError("db down"), 2]
    sleep_mock = AsyncMock()
    monkeypatch.setattr(inactivity_sweep_job.asyncio, "sleep", sleep_mock)
    monkeypatch.setattr(inactivity_sweep_job.settings, "ACTIVITY_SWEEP_INTERVAL_MINUTES", 0)

    await inactivity_sweep_job.start_inactivity_sweep_scheduler(service, max_cycles=2)

    assert service.sweep_inactive.await_count == 2
    sleep_mock.assert_awaited_once_with(inactivity_sweep_job.ERROR_BACKOFF_SECONDS)


@pytest.mark.asyncio
async def test_worker_entrypoint_owns_pool(monkeypatch):
    calls = []

    async def fake_initialize():
        calls.append("init")

    async def fake_close():
        calls.append("close")

    async def fake_scheduler():
        calls.append("run")

    monkeypatch.setattr(inactivity_sweep_job.db_pool, "initialize", fake_initialize)
    monkeypatch.setattr(inactivity_sweep_job.db_pool, "close", fake_close)
    monkeypatch.setattr(
        inactivity_sweep_job, "start_inactivity_sweep_scheduler", fake_scheduler
    )

    await inactivity_sweep_job.run_inactivity_sweep_worker()

    assert calls == ["init", "run", "close"]
