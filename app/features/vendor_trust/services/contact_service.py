"""
Contact ledger service.

Records outbound student-to-vendor contacts and answers the read-side
questions built on them: a vendor's contacts, a student's pending feedback
prompts, and contact statistics for dashboards.
"""

from datetime import timedelta

from app.config import Settings, settings as default_settings
from app.features.vendor_trust.domain import (
    Contact,
    ContactMethod,
    ContactStats,
    PendingFeedback,
    ValidationError,
)
from app.features.vendor_trust.repository import ContactRepository
from app.infrastructure.observability.logging import get_logger
from app.utils.clock import Clock, utc_now

logger = get_logger(__name__)

UNKNOWN_VENDOR_NAME = "Unknown Vendor"


def _require(value: str | None, field: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field} is required", field=field)
    return cleaned


class ContactService:
    """Append-only ledger of student contacts."""

    def __init__(
        self,
        repository=ContactRepository,
        config: Settings = default_settings,
        clock: Clock = utc_now,
    ):
        self.repository = repository
        self.config = config
        self.clock = clock

    async def log_contact(
        self,
        vendor_id: str,
        student_id: str,
        method: ContactMethod | str = ContactMethod.WHATSAPP,
        product_id: str | None = None,
    ) -> str:
        """
        Record that a student reached out to a vendor.

        Args:
            vendor_id: Vendor being contacted
            student_id: Authenticated user id or anonymous fingerprint
            method: Contact channel, defaults to WhatsApp
            product_id: Product the contact started from, if any

        Returns:
            The new contact id

        Raises:
            ValidationError: blank ids or an unknown contact method
        """
        vendor_id = _require(vendor_id, "vendor_id")
        student_id = _require(student_id, "student_id")
        try:
            contact_method = ContactMethod(method)
        except ValueError as e:
            raise ValidationError(f"Unsupported contact method: {method}", field="method") from e

        contact_id = await self.repository.insert_contact(
            vendor_id=vendor_id,
            student_id=student_id,
            contact_method=contact_method,
            product_id=product_id or None,
            contacted_at=self.clock(),
        )

        logger.info(
            "Vendor contact logged",
            contact_id=contact_id,
            vendor_id=vendor_id,
            contact_method=contact_method.value,
            has_product=product_id is not None,
        )
        return contact_id

    async def list_contacts_for_vendor(self, vendor_id: str) -> list[Contact]:
        return await self.repository.list_for_vendor(_require(vendor_id, "vendor_id"))

    async def get_pending_feedback_for(self, student_id: str) -> list[PendingFeedback]:
        """
        Contacts by this student that still lack feedback and are old enough
        for a real conversation to have happened.
        """
        student_id = _require(student_id, "student_id")
        rows = await self.repository.list_unsubmitted_for_student(student_id)

        cutoff = self.clock() - timedelta(minutes=self.config.FEEDBACK_MIN_DWELL_MINUTES)
        pending = []
        for row in rows:
            contacted_at = row.get("contacted_at")
            if contacted_at is None or contacted_at > cutoff:
                continue
            pending.append(
                PendingFeedback(
                    contact_id=str(row["id"]),
                    vendor_id=str(row["vendor_id"]),
                    vendor_name=row.get("business_name") or UNKNOWN_VENDOR_NAME,
                    student_id=str(row["student_id"]),
                    contacted_at=contacted_at,
                    contact_method=ContactMethod.coerce(row.get("contact_method")),
                    product_id=row.get("product_id"),
                )
            )

        logger.debug(
            "Pending feedback resolved",
            student_id=student_id,
            candidates=len(rows),
            pending=len(pending),
        )
        return pending

    async def get_contact_stats(self, vendor_id: str) -> ContactStats:
        return await self.repository.count_for_vendor(_require(vendor_id, "vendor_id"))

    async def get_recent_feedback_notes(self, limit: int | None = None) -> list[Contact]:
        """Latest feedback across all vendors, newest first."""
        if limit is None:
            limit = self.config.RECENT_FEEDBACK_LIMIT
        if limit < 1:
            raise ValidationError("limit must be positive", field="limit")
        return await self.repository.list_recent_feedback(limit)


contact_service = ContactService()
