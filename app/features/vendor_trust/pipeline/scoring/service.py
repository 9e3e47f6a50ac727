"""
Vendor metrics calculator - turns a vendor's contact history into trust
scores and badges, and persists the snapshot.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from app.db.helpers import DatabaseError
from app.features.vendor_trust.domain import (
    Contact,
    MetricsComputationError,
    ResponseTimeBucket,
    VendorMetrics,
    VendorMetricsSummary,
    VendorProfile,
    VerificationLevel,
)
from app.features.vendor_trust.repository import ContactRepository, VendorRepository
from app.infrastructure.observability.logging import get_logger
from app.utils.clock import Clock, utc_now

from .badges import BadgeInputs, evaluate_badges
from .repository import VendorMetricsRepository

logger = get_logger(__name__)

# Representative minutes per bucket; None marks a non-responder
RESPONSE_TIME_MINUTES: dict[ResponseTimeBucket, float | None] = {
    ResponseTimeBucket.UNDER_30MIN: 15,
    ResponseTimeBucket.MIN30_TO_2HR: 60,
    ResponseTimeBucket.HR2_TO_24HR: 12 * 60,
    ResponseTimeBucket.OVER_24HR: 36 * 60,
    ResponseTimeBucket.NO_RESPONSE: None,
}

RESPONSIVENESS_WEIGHTS = {"speed": 0.4, "response_rate": 0.4, "activity": 0.2}
TRUST_WEIGHTS = {"responsiveness": 0.4, "helpful_rate": 0.3, "purchase_rate": 0.3}
CONFIDENCE_SATURATION = 10

PRO_MIN_TRUST_SCORE = 90
PRO_MIN_FEEDBACK = 10


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _percentage(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


@dataclass(slots=True)
class FeedbackStatistics:
    """
    Tallies over feedback-bearing contacts.

    Each rate has its own denominator: a contact whose stored feedback lacks
    a field contributes no signal for that field rather than a zero.
    """

    total_contacts: int = 0
    feedback_count: int = 0
    rated_response_count: int = 0
    responder_count: int = 0
    total_response_minutes: float = 0.0
    helpful_answers: int = 0
    helpful_count: int = 0
    purchase_answers: int = 0
    purchase_count: int = 0

    @classmethod
    def from_contacts(cls, contacts: Iterable[Contact]) -> FeedbackStatistics:
        stats = cls()
        for contact in contacts:
            stats.total_contacts += 1
            if not contact.feedback_submitted:
                continue
            stats.feedback_count += 1

            feedback = contact.feedback
            if feedback is None:
                continue

            if feedback.response_time is not None:
                stats.rated_response_count += 1
                minutes = RESPONSE_TIME_MINUTES[feedback.response_time]
                if minutes is not None:
                    stats.responder_count += 1
                    stats.total_response_minutes += minutes

            if feedback.was_helpful is not None:
                stats.helpful_answers += 1
                stats.helpful_count += int(feedback.was_helpful)

            if feedback.purchase_made is not None:
                stats.purchase_answers += 1
                stats.purchase_count += int(feedback.purchase_made)
        return stats

    @property
    def average_response_minutes(self) -> float | None:
        if self.responder_count == 0:
            return None
        return self.total_response_minutes / self.responder_count

    @property
    def response_rate(self) -> float:
        return _percentage(self.responder_count, self.rated_response_count)

    @property
    def helpful_rate(self) -> float:
        return _percentage(self.helpful_count, self.helpful_answers)

    @property
    def purchase_rate(self) -> float:
        return _percentage(self.purchase_count, self.purchase_answers)

    @property
    def confidence_factor(self) -> float:
        return min(self.feedback_count / CONFIDENCE_SATURATION, 1.0)


class MetricsCalculator:
    """Recomputes and serves VendorMetrics snapshots."""

    def __init__(
        self,
        contact_repository=ContactRepository,
        vendor_repository=VendorRepository,
        metrics_repository=VendorMetricsRepository,
        clock: Clock = utc_now,
    ):
        self.contacts = contact_repository
        self.vendors = vendor_repository
        self.metrics = metrics_repository
        self.clock = clock

    async def recompute_metrics(self, vendor_id: str) -> VendorMetrics | None:
        """
        Rebuild the vendor's metrics from its full contact set and persist them.

        Returns None, without writing, when the vendor has no feedback yet.

        Raises:
            MetricsComputationError: vendor missing, or loading or writing failed
        """
        try:
            contacts = await self.contacts.list_for_vendor(vendor_id)
            stats = FeedbackStatistics.from_contacts(contacts)
            if stats.feedback_count == 0:
                logger.info(
                    "No feedback yet, skipping metrics",
                    vendor_id=vendor_id,
                    total_contacts=stats.total_contacts,
                )
                return None

            vendor = await self.vendors.load_vendor(vendor_id)
            if vendor is None:
                logger.warning("Vendor record missing during metrics run", vendor_id=vendor_id)
                raise MetricsComputationError("Vendor not found", vendor_id=vendor_id)

            now = self.clock()
            metrics = self.build_metrics(vendor_id, stats, vendor, now)
            level = self.verification_level(vendor, metrics)

            await self.metrics.save_metrics(metrics, self.summarize(metrics), level)

        except DatabaseError as e:
            logger.error(
                "Vendor metrics recomputation failed",
                vendor_id=vendor_id,
                operation=e.operation,
                error=str(e),
            )
            raise MetricsComputationError(
                f"Metrics recomputation failed: {e}", vendor_id=vendor_id
            ) from e

        logger.info(
            "Vendor metrics updated",
            vendor_id=vendor_id,
            feedback_count=metrics.feedback_count,
            responsiveness_score=metrics.responsiveness_score,
            trust_score=metrics.trust_score,
            badges=[badge.type.value for badge in metrics.badges],
            verification_level=level.value,
        )
        return metrics

    async def get_vendor_metrics(self, vendor_id: str) -> VendorMetrics | None:
        return await self.metrics.load_metrics(vendor_id)

    def build_metrics(
        self,
        vendor_id: str,
        stats: FeedbackStatistics,
        vendor: VendorProfile | None,
        now: datetime,
    ) -> VendorMetrics:
        last_active = vendor.last_active if vendor else None
        activity_score = self._activity_score(last_active, now)

        average_minutes = stats.average_response_minutes
        responsiveness_score = self._responsiveness_score(
            average_minutes, stats.response_rate, activity_score
        )
        trust_score = self._trust_score(
            responsiveness_score, stats.helpful_rate, stats.purchase_rate, stats.confidence_factor
        )

        badges = evaluate_badges(
            BadgeInputs(
                average_response_minutes=average_minutes,
                response_rate=stats.response_rate,
                trust_score=trust_score,
                activity_score=activity_score,
                feedback_count=stats.feedback_count,
            ),
            earned_at=now,
        )

        return VendorMetrics(
            vendor_id=vendor_id,
            claimed_response_time=vendor.claimed_response_time if vendor else None,
            total_contacts=stats.total_contacts,
            feedback_count=stats.feedback_count,
            average_response_minutes=average_minutes,
            response_rate=stats.response_rate,
            helpful_rate=stats.helpful_rate,
            purchase_rate=stats.purchase_rate,
            last_active=last_active,
            is_active_now=vendor.is_active_now if vendor else False,
            activity_score=activity_score,
            responsiveness_score=responsiveness_score,
            trust_score=trust_score,
            badges=badges,
            last_calculated=now,
        )

    @staticmethod
    def summarize(metrics: VendorMetrics) -> VendorMetricsSummary:
        return VendorMetricsSummary(
            responsiveness_score=metrics.responsiveness_score,
            trust_score=metrics.trust_score,
            average_response_minutes=metrics.average_response_minutes,
            response_rate=metrics.response_rate,
        )

    @staticmethod
    def verification_level(
        vendor: VendorProfile | None, metrics: VendorMetrics
    ) -> VerificationLevel:
        """Auto-promote to pro; never lower a level already on the vendor."""
        current = vendor.effective_verification_level if vendor else VerificationLevel.BASIC
        if metrics.trust_score >= PRO_MIN_TRUST_SCORE and metrics.feedback_count >= PRO_MIN_FEEDBACK:
            return max(current, VerificationLevel.PRO, key=lambda level: level.rank)
        return current

    def _activity_score(self, last_active: datetime | None, now: datetime) -> int:
        if last_active is None:
            return 0
        minutes_since = (now - last_active).total_seconds() / 60
        if minutes_since < 30:
            return 100
        if minutes_since < 120:
            return 80
        if minutes_since < 1440:
            return 60
        if minutes_since < 4320:
            return 40
        return 20

    def _speed_score(self, average_minutes: float | None) -> int:
        if average_minutes is None:
            return 0
        if average_minutes < 30:
            return 100
        if average_minutes < 60:
            return 90
        if average_minutes < 120:
            return 75
        if average_minutes < 360:
            return 60
        if average_minutes < 1440:
            return 40
        return 20

    def _responsiveness_score(
        self, average_minutes: float | None, response_rate: float, activity_score: int
    ) -> int:
        weighted = (
            self._speed_score(average_minutes) * RESPONSIVENESS_WEIGHTS["speed"]
            + response_rate * RESPONSIVENESS_WEIGHTS["response_rate"]
            + activity_score * RESPONSIVENESS_WEIGHTS["activity"]
        )
        return round_half_up(weighted)

    def _trust_score(
        self,
        responsiveness_score: int,
        helpful_rate: float,
        purchase_rate: float,
        confidence_factor: float,
    ) -> int:
        weighted = (
            responsiveness_score * TRUST_WEIGHTS["responsiveness"]
            + helpful_rate * TRUST_WEIGHTS["helpful_rate"]
            + purchase_rate * TRUST_WEIGHTS["purchase_rate"]
        )
        return round_half_up(weighted * confidence_factor)


metrics_calculator = MetricsCalculator()
