"""
Vendor activity tracker.

Maintains the "online now" presence flag: vendor actions raise it, a
periodic sweep lowers it once the vendor has been idle past the threshold.
"""

from datetime import datetime, timedelta

from app.config import Settings, settings as default_settings
from app.db.helpers import DatabaseError, with_db_retry
from app.features.vendor_trust.domain import NotFoundError, ValidationError
from app.features.vendor_trust.repository import VendorRepository
from app.infrastructure.observability.logging import get_logger
from app.utils.clock import Clock, utc_now

logger = get_logger(__name__)


class ActivityService:
    def __init__(
        self,
        repository=VendorRepository,
        config: Settings = default_settings,
        clock: Clock = utc_now,
    ):
        self.repository = repository
        self.config = config
        self.clock = clock

    @with_db_retry(max_retries=2, base_delay=0.1)
    async def record_activity(self, vendor_id: str) -> datetime:
        """
        Mark the vendor as active now.

        Raises:
            ValidationError: blank vendor id
            NotFoundError: vendor does not exist
        """
        if not (vendor_id or "").strip():
            raise ValidationError("vendor_id is required", field="vendor_id")

        now = self.clock()
        if not await self.repository.touch_activity(vendor_id, now):
            raise NotFoundError("Vendor", vendor_id)

        logger.debug("Vendor activity recorded", vendor_id=vendor_id)
        return now

    async def sweep_inactive(self, threshold_minutes: int | None = None) -> int:
        """
        Clear the online flag on vendors idle for longer than the threshold.

        Each vendor is updated on its own; one failure is logged and the scan
        continues. Running it again with no new activity changes nothing.

        Returns:
            Number of vendors flipped to inactive
        """
        if threshold_minutes is None:
            threshold_minutes = self.config.INACTIVITY_THRESHOLD_MINUTES
        if threshold_minutes < 0:
            raise ValidationError("threshold_minutes must not be negative", field="threshold_minutes")

        cutoff = self.clock() - timedelta(minutes=threshold_minutes)
        active_vendors = await self.repository.list_active_vendors()

        updated = 0
        failures = 0
        for vendor in active_vendors:
            if vendor.last_active is not None and vendor.last_active >= cutoff:
                continue
            try:
                if await self.repository.mark_inactive(vendor.id, cutoff):
                    updated += 1
            except DatabaseError as e:
                failures += 1
                logger.warning(
                    "Failed to mark vendor inactive",
                    vendor_id=vendor.id,
                    error=str(e),
                )

        logger.info(
            "Inactive vendor sweep completed",
            scanned=len(active_vendors),
            updated=updated,
            failures=failures,
            threshold_minutes=threshold_minutes,
        )
        return updated

    async def get_last_active(self, vendor_id: str) -> datetime | None:
        vendor = await self.repository.load_vendor(vendor_id)
        if vendor is None:
            raise NotFoundError("Vendor", vendor_id)
        return vendor.last_active


activity_service = ActivityService()
