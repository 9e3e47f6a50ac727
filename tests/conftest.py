from datetime import UTC, datetime

import pytest

from app.config import settings
from app.features.vendor_trust.domain import (
    Contact,
    ContactStats,
    Feedback,
    VendorProfile,
)
from app.features.vendor_trust.pipeline.scoring import MetricsCalculator
from app.features.vendor_trust.services import ActivityService, ContactService, FeedbackService

FIXED_NOW = datetime(2026, 3, 2, 12, 0, tzinfo=UTC)


class FakeStore:
    def __init__(self):
        self.contacts: dict[str, Contact] = {}
        self.vendors: dict[str, VendorProfile] = {}
        self.metrics: dict = {}
        self.saved: list[tuple] = []

    def add_vendor(self, vendor_id: str, **fields) -> VendorProfile:
        vendor = VendorProfile(id=vendor_id, **fields)
        self.vendors[vendor_id] = vendor
        return vendor

    def add_contact(
        self,
        vendor_id: str,
        contacted_at: datetime | None = FIXED_NOW,
        student_id: str = "student-1",
        feedback: Feedback | None = None,
        **fields,
    ) -> Contact:
        contact = Contact(
            id=f"contact-{len(self.contacts) + 1}",
            vendor_id=vendor_id,
            student_id=student_id,
            contacted_at=contacted_at,
            feedback_submitted=feedback is not None,
            feedback=feedback,
            **fields,
        )
        self.contacts[contact.id] = contact
        return contact


class FakeContactRepository:
    def __init__(self, store: FakeStore):
        self.store = store

    async def insert_contact(self, vendor_id, student_id, contact_method, product_id, contacted_at):
        contact = self.store.add_contact(
            vendor_id,
            contacted_at=contacted_at,
            student_id=student_id,
            contact_method=contact_method,
            product_id=product_id,
        )
        return contact.id

    async def attach_feedback(self, contact_id, submission, feedback_at):
        contact = self.store.contacts.get(contact_id)
        if contact is None:
            return None
        contact.feedback_submitted = True
        contact.feedback = Feedback(
            response_time=submission.response_time,
            was_helpful=submission.was_helpful,
            purchase_made=submission.purchase_made,
            note=submission.note or None,
            feedback_at=feedback_at,
        )
        return contact.vendor_id

    async def list_for_vendor(self, vendor_id):
        return [c for c in self.store.contacts.values() if c.vendor_id == vendor_id]

    async def list_unsubmitted_for_student(self, student_id):
        rows = []
        for contact in self.store.contacts.values():
            if contact.student_id != student_id or contact.feedback_submitted:
                continue
            vendor = self.store.vendors.get(contact.vendor_id)
            rows.append(
                {
                    "id": contact.id,
                    "vendor_id": contact.vendor_id,
                    "student_id": contact.student_id,
                    "contacted_at": contact.contacted_at,
                    "contact_method": contact.contact_method.value,
                    "product_id": contact.product_id,
                    "business_name": vendor.business_name if vendor else None,
                }
            )
        return rows

    async def count_for_vendor(self, vendor_id):
        contacts = await self.list_for_vendor(vendor_id)
        total = len(contacts)
        feedback = sum(1 for c in contacts if c.feedback_submitted)
        return ContactStats(
            total_contacts=total,
            feedback_count=feedback,
            feedback_rate=(feedback / total * 100) if total > 0 else 0.0,
        )

    async def list_recent_feedback(self, limit):
        submitted = [c for c in self.store.contacts.values() if c.feedback_submitted]
        submitted.sort(
            key=lambda c: c.feedback.feedback_at or datetime.min.replace(tzinfo=UTC),
            reverse=True,
        )
        return submitted[:limit]


class FakeVendorRepository:
    def __init__(self, store: FakeStore):
        self.store = store

    async def load_vendor(self, vendor_id):
        return self.store.vendors.get(vendor_id)

    async def touch_activity(self, vendor_id, active_at):
        vendor = self.store.vendors.get(vendor_id)
        if vendor is None:
            return False
        vendor.last_active = active_at
        vendor.is_active_now = True
        return True

    async def list_active_vendors(self):
        return [v.model_copy() for v in self.store.vendors.values() if v.is_active_now]

    async def mark_inactive(self, vendor_id, cutoff):
        vendor = self.store.vendors.get(vendor_id)
        if vendor is None or not vendor.is_active_now:
            return False
        if vendor.last_active is not None and vendor.last_active >= cutoff:
            return False
        vendor.is_active_now = False
        return True


class FakeMetricsRepository:
    def __init__(self, store: FakeStore):
        self.store = store

    async def load_metrics(self, vendor_id):
        return self.store.metrics.get(vendor_id)

    async def save_metrics(self, metrics, summary, verification_level):
        self.store.metrics[metrics.vendor_id] = metrics
        self.store.saved.append((metrics, summary, verification_level))
        vendor = self.store.vendors.get(metrics.vendor_id)
        if vendor is not None:
            vendor.verification_level = verification_level


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def clock(now):
    return lambda: now


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def contact_repo(store):
    return FakeContactRepository(store)


@pytest.fixture
def vendor_repo(store):
    return FakeVendorRepository(store)


@pytest.fixture
def metrics_repo(store):
    return FakeMetricsRepository(store)


@pytest.fixture
def calculator(contact_repo, vendor_repo, metrics_repo, clock):
    return MetricsCalculator(
        contact_repository=contact_repo,
        vendor_repository=vendor_repo,
        metrics_repository=metrics_repo,
        clock=clock,
    )


@pytest.fixture
def contact_svc(contact_repo, clock):
    return ContactService(repository=contact_repo, config=settings, clock=clock)


@pytest.fixture
def feedback_svc(contact_repo, calculator, clock):
    return FeedbackService(repository=contact_repo, calculator=calculator, clock=clock)


@pytest.fixture
def activity_svc(vendor_repo, clock):
    return ActivityService(repository=vendor_repo, config=settings, clock=clock)
