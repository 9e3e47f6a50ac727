"""
Persistence layer for the contact ledger.

Table: vendor_contacts
    id TEXT PRIMARY KEY, vendor_id TEXT, student_id TEXT,
    contacted_at TIMESTAMPTZ, contact_method TEXT, product_id TEXT NULL,
    feedback_submitted BOOLEAN DEFAULT FALSE,
    response_time TEXT NULL, was_helpful BOOLEAN NULL,
    purchase_made BOOLEAN NULL, feedback_note TEXT NULL,
    feedback_at TIMESTAMPTZ NULL

Rows are append-only apart from the feedback columns, which are written by
attach_feedback.
"""

import uuid
from datetime import datetime

from app.db.helpers import DatabaseError, execute_query, fetch_all, fetch_one
from app.features.vendor_trust.domain import (
    Contact,
    ContactMethod,
    ContactStats,
    Feedback,
    FeedbackSubmission,
    ResponseTimeBucket,
)
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class ContactRepositoryError(DatabaseError):
    """More specific exception for contact ledger failures."""


class ContactRepository:
    """Persistence helpers backing the contact ledger and feedback attachment."""

    CONTACT_SELECT_COLUMNS = """
        id, vendor_id, student_id, contacted_at, contact_method, product_id,
        feedback_submitted, response_time, was_helpful, purchase_made,
        feedback_note, feedback_at
    """

    @staticmethod
    def _parse_bucket(value: str | None) -> ResponseTimeBucket | None:
        if value is None:
            return None
        try:
            return ResponseTimeBucket(value)
        except ValueError:
            logger.warning("Unknown response time bucket in stored feedback", value=value)
            return None

    @classmethod
    def _row_to_contact(cls, row: dict | None) -> Contact | None:
        if not row:
            return None

        feedback_submitted = bool(row.get("feedback_submitted"))
        feedback = None
        if feedback_submitted:
            feedback = Feedback(
                response_time=cls._parse_bucket(row.get("response_time")),
                was_helpful=row.get("was_helpful"),
                purchase_made=row.get("purchase_made"),
                note=row.get("feedback_note") or None,
                feedback_at=row.get("feedback_at"),
            )

        return Contact(
            id=str(row["id"]),
            vendor_id=str(row["vendor_id"]),
            student_id=str(row["student_id"]),
            contacted_at=row.get("contacted_at"),
            contact_method=ContactMethod.coerce(row.get("contact_method")),
            product_id=row.get("product_id"),
            feedback_submitted=feedback_submitted,
            feedback=feedback,
        )

    @classmethod
    async def insert_contact(
        cls,
        vendor_id: str,
        student_id: str,
        contact_method: ContactMethod,
        product_id: str | None,
        contacted_at: datetime,
    ) -> str:
        """Append a new contact row and return its id."""

        contact_id = str(uuid.uuid4())
        query = """
            INSERT INTO vendor_contacts (
                id, vendor_id, student_id, contacted_at, contact_method,
                product_id, feedback_submitted
            )
            VALUES (%s, %s, %s, %s, %s, %s, FALSE)
        """

        affected = await execute_query(
            query,
            (contact_id, vendor_id, student_id, contacted_at, contact_method.value, product_id),
        )
        if affected != 1:
            raise ContactRepositoryError("Failed to insert contact", operation="insert_contact")

        return contact_id

    @classmethod
    async def attach_feedback(
        cls, contact_id: str, submission: FeedbackSubmission, feedback_at: datetime
    ) -> str | None:
        """
        Write feedback columns onto a contact.

        Returns the owning vendor id, or None when the contact does not exist.
        A repeated submission overwrites the previous answers.
        """

        query = """
            UPDATE vendor_contacts
            SET feedback_submitted = TRUE,
                response_time = %s,
                was_helpful = %s,
                purchase_made = %s,
                feedback_note = %s,
                feedback_at = %s
            WHERE id = %s
            RETURNING vendor_id
        """

        row = await fetch_one(
            query,
            (
                submission.response_time.value,
                submission.was_helpful,
                submission.purchase_made,
                submission.note or "",
                feedback_at,
                contact_id,
            ),
        )
        return str(row["vendor_id"]) if row else None

    @classmethod
    async def list_for_vendor(cls, vendor_id: str) -> list[Contact]:
        """All contacts for a vendor, read in one statement."""

        query = f"SELECT {cls.CONTACT_SELECT_COLUMNS} FROM vendor_contacts WHERE vendor_id = %s"
        rows = await fetch_all(query, (vendor_id,))
        return [cls._row_to_contact(row) for row in rows]

    @classmethod
    async def list_unsubmitted_for_student(cls, student_id: str) -> list[dict]:
        """Contacts still awaiting feedback, joined with the vendor's display name."""

        query = """
            SELECT c.id, c.vendor_id, c.student_id, c.contacted_at,
                   c.contact_method, c.product_id, v.business_name
            FROM vendor_contacts c
            LEFT JOIN vendors v ON v.id = c.vendor_id
            WHERE c.student_id = %s
              AND c.feedback_submitted = FALSE
        """
        return await fetch_all(query, (student_id,))

    @classmethod
    async def count_for_vendor(cls, vendor_id: str) -> ContactStats:
        query = """
            SELECT COUNT(*) AS total_contacts,
                   COUNT(*) FILTER (WHERE feedback_submitted) AS feedback_count
            FROM vendor_contacts
            WHERE vendor_id = %s
        """
        row = await fetch_one(query, (vendor_id,)) or {}
        total = row.get("total_contacts") or 0
        feedback = row.get("feedback_count") or 0
        return ContactStats(
            total_contacts=total,
            feedback_count=feedback,
            feedback_rate=(feedback / total * 100) if total > 0 else 0.0,
        )

    @classmethod
    async def list_recent_feedback(cls, limit: int) -> list[Contact]:
        query = f"""
            SELECT {cls.CONTACT_SELECT_COLUMNS}
            FROM vendor_contacts
            WHERE feedback_submitted = TRUE
            ORDER BY feedback_at DESC NULLS LAST
            LIMIT %s
        """
        rows = await fetch_all(query, (limit,))
        return [cls._row_to_contact(row) for row in rows]
