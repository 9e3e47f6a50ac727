from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from app.db.helpers import DatabaseError
from app.features.vendor_trust.domain import NotFoundError, ValidationError


@pytest.mark.asyncio
async def test_record_activity_marks_vendor_online(store, activity_svc, now):
    store.add_vendor("v1", last_active=now - timedelta(days=2), is_active_now=False)

    recorded_at = await activity_svc.record_activity("v1")

    assert recorded_at == now
    assert store.vendors["v1"].last_active == now
    assert store.vendors["v1"].is_active_now is True
    assert await activity_svc.get_last_active("v1") == now


@pytest.mark.asyncio
async def test_record_activity_unknown_vendor(activity_svc):
    with pytest.raises(NotFoundError):
        await activity_svc.record_activity("ghost")


@pytest.mark.asyncio
async def test_record_activity_blank_vendor(activity_svc):
    with pytest.raises(ValidationError):
        await activity_svc.record_activity("")


@pytest.mark.asyncio
async def test_get_last_active_unknown_vendor(activity_svc):
    with pytest.raises(NotFoundError):
        await activity_svc.get_last_active("ghost")


@pytest.mark.asyncio
async def test_sweep_flips_only_idle_vendors(store, activity_svc, now):
    store.add_vendor("idle", last_active=now - timedelta(minutes=20), is_active_now=True)
    store.add_vendor("fresh", last_active=now - timedelta(minutes=5), is_active_now=True)
    store.add_vendor("never", last_active=None, is_active_now=True)
    store.add_vendor("offline", last_active=now - timedelta(days=9), is_active_now=False)

    updated = await activity_svc.sweep_inactive(15)

    assert updated == 2
    assert store.vendors["idle"].is_active_now is False
    assert store.vendors["never"].is_active_now is False
    assert store.vendors["fresh"].is_active_now is True
    assert store.vendors["offline"].is_active_now is False


@pytest.mark.asyncio
async def test_second_sweep_changes_nothing(store, activity_svc, now):
    store.add_vendor("idle", last_active=now - timedelta(hours=1), is_active_now=True)

    assert await activity_svc.sweep_inactive(15) == 1
    assert await activity_svc.sweep_inactive(15) == 0


@pytest.mark.asyncio
async def test_sweep_uses_configured_threshold(store, activity_svc, now):
    store.add_vendor(
        "idle",
        last_active=now - timedelta(minutes=activity_svc.config.INACTIVITY_THRESHOLD_MINUTES + 1),
        is_active_now=True,
    )

    assert await activity_svc.sweep_inactive() == 1


@pytest.mark.asyncio
async def test_sweep_continues_after_vendor_failure(store, vendor_repo, activity_svc, now):
    store.add_vendor("broken", last_active=now - timedelta(hours=1), is_active_now=True)
    store.add_vendor("idle", last_active=now - timedelta(hours=1), is_active_now=True)

    real_mark_inactive = vendor_repo.mark_inactive

    async def flaky_mark_inactive(vendor_id, cutoff):
        if vendor_id == "broken":
            raise DatabaseError("lock timeout", operation="execute_query")
        return await real_mark_inactive(vendor_id, cutoff)

    vendor_repo.mark_inactive = AsyncMock(side_effect=flaky_mark_inactive)

    updated = await activity_svc.sweep_inactive(15)

    assert updated == 1
    assert store.vendors["broken"].is_active_now is True
    assert store.vendors["idle"].is_active_now is False
    assert vendor_repo.mark_inactive.await_count == 2


@pytest.mark.asyncio
async def test_sweep_rejects_negative_threshold(activity_svc):
    with pytest.raises(ValidationError):
        await activity_svc.sweep_inactive(-1)
