"""
Repository helpers for vendor metrics persistence.

Table: vendor_metrics
    vendor_id TEXT PRIMARY KEY, claimed_response_time TEXT NULL,
    total_contacts INT, feedback_count INT,
    average_response_minutes DOUBLE PRECISION NULL,
    response_rate, helpful_rate, purchase_rate DOUBLE PRECISION,
    last_active TIMESTAMPTZ NULL, is_active_now BOOLEAN,
    activity_score, responsiveness_score, trust_score INT,
    badges JSONB, last_calculated TIMESTAMPTZ

Only the metrics calculator writes this table.
"""

from psycopg.types.json import Jsonb

from app.db.helpers import execute_transaction, fetch_one
from app.features.vendor_trust.domain import (
    Badge,
    VendorMetrics,
    VendorMetricsSummary,
    VerificationLevel,
)
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class VendorMetricsRepository:
    """Loads metrics snapshots and writes them together with the vendor summary."""

    METRICS_COLUMNS = (
        "vendor_id",
        "claimed_response_time",
        "total_contacts",
        "feedback_count",
        "average_response_minutes",
        "response_rate",
        "helpful_rate",
        "purchase_rate",
        "last_active",
        "is_active_now",
        "activity_score",
        "responsiveness_score",
        "trust_score",
        "badges",
        "last_calculated",
    )

    @staticmethod
    def _badges_payload(badges: list[Badge]) -> Jsonb:
        return Jsonb([badge.model_dump(mode="json") for badge in badges])

    @classmethod
    async def load_metrics(cls, vendor_id: str) -> VendorMetrics | None:
        query = f"SELECT {', '.join(cls.METRICS_COLUMNS)} FROM vendor_metrics WHERE vendor_id = %s"
        row = await fetch_one(query, (vendor_id,))
        if not row:
            return None

        data = dict(row)
        data["badges"] = data.get("badges") or []
        return VendorMetrics.model_validate(data)

    @classmethod
    async def save_metrics(
        cls,
        metrics: VendorMetrics,
        summary: VendorMetricsSummary,
        verification_level: VerificationLevel,
    ) -> None:
        """Replace the metrics row and refresh the vendor summary in one transaction."""

        columns = ", ".join(cls.METRICS_COLUMNS)
        placeholders = ", ".join(["%s"] * len(cls.METRICS_COLUMNS))
        updates = ",\n                ".join(
            f"{column} = EXCLUDED.{column}"
            for column in cls.METRICS_COLUMNS
            if column != "vendor_id"
        )
        upsert_query = f"""
            INSERT INTO vendor_metrics ({columns})
            VALUES ({placeholders})
            ON CONFLICT (vendor_id) DO UPDATE SET
                {updates}
        """
        upsert_params = (
            metrics.vendor_id,
            metrics.claimed_response_time,
            metrics.total_contacts,
            metrics.feedback_count,
            metrics.average_response_minutes,
            metrics.response_rate,
            metrics.helpful_rate,
            metrics.purchase_rate,
            metrics.last_active,
            metrics.is_active_now,
            metrics.activity_score,
            metrics.responsiveness_score,
            metrics.trust_score,
            cls._badges_payload(metrics.badges),
            metrics.last_calculated,
        )

        vendor_query = """
            UPDATE vendors
            SET responsiveness_score = %s,
                trust_score = %s,
                average_response_minutes = %s,
                response_rate = %s,
                badges = %s,
                verification_level = %s
            WHERE id = %s
        """
        vendor_params = (
            summary.responsiveness_score,
            summary.trust_score,
            summary.average_response_minutes,
            summary.response_rate,
            cls._badges_payload(metrics.badges),
            verification_level.value,
            metrics.vendor_id,
        )

        await execute_transaction([(upsert_query, upsert_params), (vendor_query, vendor_params)])

        logger.debug(
            "Vendor metrics persisted",
            vendor_id=metrics.vendor_id,
            trust_score=metrics.trust_score,
            verification_level=verification_level.value,
        )
