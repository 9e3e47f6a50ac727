"""
Feedback attachment service.

Writes a student's survey answers onto their contact record and then
recomputes the owning vendor's metrics in the same request. The feedback
write is the durable part; a failed recomputation is reported back as a
warning and left for the next run to repair.
"""

from typing import Any

import pydantic

from app.features.vendor_trust.domain import (
    FeedbackResult,
    FeedbackSubmission,
    MetricsComputationError,
    NotFoundError,
    ValidationError,
)
from app.features.vendor_trust.pipeline.scoring import MetricsCalculator, metrics_calculator
from app.features.vendor_trust.repository import ContactRepository
from app.infrastructure.observability.logging import get_logger
from app.utils.clock import Clock, utc_now

logger = get_logger(__name__)

METRICS_WARNING = "Feedback saved, but vendor scores could not be refreshed yet"


class FeedbackService:
    def __init__(
        self,
        repository=ContactRepository,
        calculator: MetricsCalculator = metrics_calculator,
        clock: Clock = utc_now,
    ):
        self.repository = repository
        self.calculator = calculator
        self.clock = clock

    @staticmethod
    def _coerce_submission(feedback: FeedbackSubmission | dict[str, Any]) -> FeedbackSubmission:
        if isinstance(feedback, FeedbackSubmission):
            return feedback
        try:
            return FeedbackSubmission.model_validate(feedback)
        except pydantic.ValidationError as e:
            fields = sorted({".".join(str(part) for part in err["loc"]) for err in e.errors()})
            raise ValidationError(
                f"Invalid feedback: {', '.join(fields)}", field=fields[0] if fields else None
            ) from e

    async def submit_feedback(
        self, contact_id: str, feedback: FeedbackSubmission | dict[str, Any]
    ) -> FeedbackResult:
        """
        Attach feedback to a contact and refresh the vendor's metrics.

        Args:
            contact_id: Contact the feedback is about
            feedback: Response time bucket, helpfulness, purchase outcome, optional note

        Returns:
            FeedbackResult; metrics_warning is set when recomputation failed

        Raises:
            ValidationError: blank contact id or incomplete feedback
            NotFoundError: contact does not exist
        """
        if not (contact_id or "").strip():
            raise ValidationError("contact_id is required", field="contact_id")
        submission = self._coerce_submission(feedback)

        vendor_id = await self.repository.attach_feedback(contact_id, submission, self.clock())
        if vendor_id is None:
            logger.warning("Feedback for unknown contact", contact_id=contact_id)
            raise NotFoundError("Contact", contact_id)

        logger.info(
            "Contact feedback submitted",
            contact_id=contact_id,
            vendor_id=vendor_id,
            response_time=submission.response_time.value,
            was_helpful=submission.was_helpful,
            purchase_made=submission.purchase_made,
        )

        try:
            await self.calculator.recompute_metrics(vendor_id)
        except MetricsComputationError as e:
            logger.warning(
                "Metrics refresh failed after feedback",
                contact_id=contact_id,
                vendor_id=vendor_id,
                error=str(e),
            )
            return FeedbackResult(
                contact_id=contact_id,
                vendor_id=vendor_id,
                metrics_updated=False,
                metrics_warning=METRICS_WARNING,
            )
        except Exception:
            logger.exception(
                "Unexpected error refreshing metrics after feedback",
                contact_id=contact_id,
                vendor_id=vendor_id,
            )
            return FeedbackResult(
                contact_id=contact_id,
                vendor_id=vendor_id,
                metrics_updated=False,
                metrics_warning=METRICS_WARNING,
            )

        return FeedbackResult(contact_id=contact_id, vendor_id=vendor_id, metrics_updated=True)


feedback_service = FeedbackService()
