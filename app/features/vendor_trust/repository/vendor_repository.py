"""
Vendor record access for the trust engine.

Table: vendors (owned by the wider marketplace; only these columns are used)
    id TEXT PRIMARY KEY, business_name TEXT, last_active TIMESTAMPTZ NULL,
    is_active_now BOOLEAN, verification_level TEXT NULL,
    is_verified BOOLEAN, claimed_response_time TEXT NULL,
    responsiveness_score INT NULL, trust_score INT NULL,
    average_response_minutes DOUBLE PRECISION NULL,
    response_rate DOUBLE PRECISION NULL, badges JSONB
"""

from datetime import datetime

from app.db.helpers import execute_query, fetch_all, fetch_one
from app.features.vendor_trust.domain import VendorProfile, VerificationLevel
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class VendorRepository:
    """Reads vendor activity/verification state and updates presence flags."""

    VENDOR_SELECT_COLUMNS = """
        id, business_name, last_active, is_active_now,
        verification_level, is_verified, claimed_response_time
    """

    @staticmethod
    def _row_to_vendor(row: dict | None) -> VendorProfile | None:
        if not row:
            return None

        level = row.get("verification_level")
        try:
            verification_level = VerificationLevel(level) if level else None
        except ValueError:
            logger.warning("Unknown verification level on vendor", vendor_id=row["id"], level=level)
            verification_level = None

        return VendorProfile(
            id=str(row["id"]),
            business_name=row.get("business_name"),
            last_active=row.get("last_active"),
            is_active_now=bool(row.get("is_active_now")),
            verification_level=verification_level,
            is_verified=bool(row.get("is_verified")),
            claimed_response_time=row.get("claimed_response_time"),
        )

    @classmethod
    async def load_vendor(cls, vendor_id: str) -> VendorProfile | None:
        query = f"SELECT {cls.VENDOR_SELECT_COLUMNS} FROM vendors WHERE id = %s"
        row = await fetch_one(query, (vendor_id,))
        return cls._row_to_vendor(row)

    @classmethod
    async def touch_activity(cls, vendor_id: str, active_at: datetime) -> bool:
        """Stamp last_active and raise the online flag. False when the vendor is unknown."""

        query = """
            UPDATE vendors
            SET last_active = %s,
                is_active_now = TRUE
            WHERE id = %s
        """
        affected = await execute_query(query, (active_at, vendor_id))
        return affected > 0

    @classmethod
    async def list_active_vendors(cls) -> list[VendorProfile]:
        query = f"SELECT {cls.VENDOR_SELECT_COLUMNS} FROM vendors WHERE is_active_now = TRUE"
        rows = await fetch_all(query)
        return [cls._row_to_vendor(row) for row in rows]

    @classmethod
    async def mark_inactive(cls, vendor_id: str, cutoff: datetime) -> bool:
        """
        Clear the online flag if the vendor is still idle past the cutoff.

        The staleness check is repeated in the WHERE clause so activity
        recorded after the sweep read its snapshot is never overwritten.
        """

        query = """
            UPDATE vendors
            SET is_active_now = FALSE
            WHERE id = %s
              AND is_active_now = TRUE
              AND (last_active IS NULL OR last_active < %s)
        """
        affected = await execute_query(query, (vendor_id, cutoff))
        return affected > 0
