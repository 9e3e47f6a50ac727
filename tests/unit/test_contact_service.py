from datetime import timedelta

import pytest

from app.features.vendor_trust.domain import (
    ContactMethod,
    Feedback,
    ResponseTimeBucket,
    ValidationError,
)


@pytest.mark.asyncio
async def test_log_contact_defaults_to_whatsapp(store, contact_svc, now):
    contact_id = await contact_svc.log_contact("v1", "student-9", product_id="p-1")

    contact = store.contacts[contact_id]
    assert contact.contact_method == ContactMethod.WHATSAPP
    assert contact.contacted_at == now
    assert contact.product_id == "p-1"
    assert contact.feedback_submitted is False


@pytest.mark.asyncio
async def test_log_contact_accepts_method_string(store, contact_svc):
    contact_id = await contact_svc.log_contact("v1", "student-9", method="call")

    assert store.contacts[contact_id].contact_method == ContactMethod.CALL


@pytest.mark.asyncio
@pytest.mark.parametrize(("vendor_id", "student_id"), [("", "s"), ("v", "  "), (None, "s")])
async def test_log_contact_rejects_blank_ids(store, contact_svc, vendor_id, student_id):
    with pytest.raises(ValidationError):
        await contact_svc.log_contact(vendor_id, student_id)

    assert store.contacts == {}


@pytest.mark.asyncio
async def test_log_contact_rejects_unknown_method(contact_svc):
    with pytest.raises(ValidationError) as exc_info:
        await contact_svc.log_contact("v1", "s1", method="carrier-pigeon")

    assert exc_info.value.field == "method"


@pytest.mark.asyncio
async def test_pending_feedback_waits_for_dwell_time(store, contact_svc, now):
    store.add_vendor("v1", business_name="Dorm Snacks")
    fresh = store.add_contact("v1", contacted_at=now - timedelta(minutes=5))
    old = store.add_contact("v1", contacted_at=now - timedelta(hours=2))
    older = store.add_contact("v1", contacted_at=now - timedelta(days=3))

    pending = await contact_svc.get_pending_feedback_for("student-1")

    ids = {item.contact_id for item in pending}
    assert fresh.id not in ids
    assert ids == {old.id, older.id}
    assert all(item.vendor_name == "Dorm Snacks" for item in pending)


@pytest.mark.asyncio
async def test_pending_feedback_skips_submitted_and_other_students(store, contact_svc, now):
    store.add_vendor("v1", business_name="Dorm Snacks")
    store.add_contact(
        "v1",
        contacted_at=now - timedelta(days=1),
        feedback=Feedback(response_time=ResponseTimeBucket.UNDER_30MIN),
    )
    store.add_contact("v1", contacted_at=now - timedelta(days=1), student_id="student-2")

    assert await contact_svc.get_pending_feedback_for("student-1") == []


@pytest.mark.asyncio
async def test_pending_feedback_names_unknown_vendor(store, contact_svc, now):
    store.add_contact("deleted-vendor", contacted_at=now - timedelta(hours=3))

    pending = await contact_svc.get_pending_feedback_for("student-1")

    assert len(pending) == 1
    assert pending[0].vendor_name == "Unknown Vendor"


@pytest.mark.asyncio
async def test_pending_feedback_ignores_contacts_without_timestamp(store, contact_svc):
    store.add_contact("v1", contacted_at=None)

    assert await contact_svc.get_pending_feedback_for("student-1") == []


@pytest.mark.asyncio
async def test_contact_stats(store, contact_svc):
    store.add_contact("v1", feedback=Feedback(was_helpful=True))
    store.add_contact("v1")
    store.add_contact("v1")
    store.add_contact("v2")

    stats = await contact_svc.get_contact_stats("v1")

    assert stats.total_contacts == 3
    assert stats.feedback_count == 1
    assert stats.feedback_rate == pytest.approx(33.333, rel=1e-3)


@pytest.mark.asyncio
async def test_contact_stats_for_vendor_without_contacts(contact_svc):
    stats = await contact_svc.get_contact_stats("nobody")

    assert stats.total_contacts == 0
    assert stats.feedback_rate == 0.0


@pytest.mark.asyncio
async def test_recent_feedback_newest_first(store, contact_svc, now):
    first = store.add_contact("v1", feedback=Feedback(note="ok", feedback_at=now - timedelta(days=2)))
    second = store.add_contact("v2", feedback=Feedback(note="great", feedback_at=now))
    store.add_contact("v1")

    notes = await contact_svc.get_recent_feedback_notes(limit=5)

    assert [c.id for c in notes] == [second.id, first.id]
    assert (await contact_svc.get_recent_feedback_notes(limit=1))[0].id == second.id


@pytest.mark.asyncio
async def test_recent_feedback_rejects_non_positive_limit(contact_svc):
    with pytest.raises(ValidationError):
        await contact_svc.get_recent_feedback_notes(limit=0)
