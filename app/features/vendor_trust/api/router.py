"""
Vendor trust routes.

Exposes the contact ledger, feedback submission, metrics reads and the
activity tracker to the storefront, the feedback prompter and the admin
dashboard.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.config import settings
from app.db.helpers import DatabaseError
from app.features.vendor_trust.domain import (
    Contact,
    ContactStats,
    FeedbackResult,
    NotFoundError,
    PendingFeedback,
    ValidationError,
)
from app.features.vendor_trust.pipeline.scoring import MetricsCalculator, metrics_calculator
from app.features.vendor_trust.services import (
    ActivityService,
    ContactService,
    FeedbackService,
    activity_service,
    contact_service,
    feedback_service,
    format_last_active,
    format_response_time,
)
from app.infrastructure.observability.logging import get_logger
from app.models.api.vendor_trust_request import FeedbackRequest, LogContactRequest
from app.models.api.vendor_trust_response import (
    LogContactResponse,
    SweepResponse,
    VendorMetricsResponse,
)

router = APIRouter(prefix="/vendor-trust", tags=["vendor-trust"])
logger = get_logger(__name__)


def get_contact_service() -> ContactService:
    return contact_service


def get_feedback_service() -> FeedbackService:
    return feedback_service


def get_activity_service() -> ActivityService:
    return activity_service


def get_metrics_calculator() -> MetricsCalculator:
    return metrics_calculator


def _to_http_error(error: Exception) -> HTTPException:
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, ValidationError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(error))
    logger.error("Store unavailable", error=str(error), error_type=type(error).__name__)
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Storage temporarily unavailable",
    )


@router.post(
    "/contacts", response_model=LogContactResponse, status_code=status.HTTP_201_CREATED
)
async def log_contact(
    payload: LogContactRequest, service: ContactService = Depends(get_contact_service)
):
    """Record a student reaching out to a vendor (e.g. a WhatsApp click)."""
    try:
        contact_id = await service.log_contact(
            payload.vendor_id, payload.student_id, payload.method, payload.product_id
        )
    except (ValidationError, DatabaseError) as e:
        raise _to_http_error(e) from e
    return LogContactResponse(contact_id=contact_id)


@router.get("/vendors/{vendor_id}/contacts", response_model=list[Contact])
async def list_vendor_contacts(
    vendor_id: str, service: ContactService = Depends(get_contact_service)
):
    try:
        return await service.list_contacts_for_vendor(vendor_id)
    except (ValidationError, DatabaseError) as e:
        raise _to_http_error(e) from e


@router.get("/vendors/{vendor_id}/contacts/stats", response_model=ContactStats)
async def vendor_contact_stats(
    vendor_id: str, service: ContactService = Depends(get_contact_service)
):
    try:
        return await service.get_contact_stats(vendor_id)
    except (ValidationError, DatabaseError) as e:
        raise _to_http_error(e) from e


@router.get("/students/{student_id}/pending-feedback", response_model=list[PendingFeedback])
async def pending_feedback(
    student_id: str, service: ContactService = Depends(get_contact_service)
):
    """Contacts this student should be asked to rate."""
    try:
        return await service.get_pending_feedback_for(student_id)
    except (ValidationError, DatabaseError) as e:
        raise _to_http_error(e) from e


@router.post("/contacts/{contact_id}/feedback", response_model=FeedbackResult)
async def submit_feedback(
    contact_id: str,
    payload: FeedbackRequest,
    service: FeedbackService = Depends(get_feedback_service),
):
    """
    Attach feedback to a contact.

    Succeeds even when the vendor's scores could not be refreshed; in that
    case metrics_warning is set and the scores catch up on the next run.
    """
    try:
        return await service.submit_feedback(contact_id, payload.model_dump())
    except (NotFoundError, ValidationError, DatabaseError) as e:
        raise _to_http_error(e) from e


@router.get("/vendors/{vendor_id}/metrics", response_model=VendorMetricsResponse)
async def get_vendor_metrics(
    vendor_id: str, calculator: MetricsCalculator = Depends(get_metrics_calculator)
):
    try:
        metrics = await calculator.get_vendor_metrics(vendor_id)
    except DatabaseError as e:
        raise _to_http_error(e) from e

    if metrics is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No metrics yet for this vendor"
        )

    return VendorMetricsResponse(
        metrics=metrics,
        average_response_label=format_response_time(metrics.average_response_minutes),
        last_active_label=format_last_active(metrics.last_active, calculator.clock()),
    )


@router.post("/vendors/{vendor_id}/activity", status_code=status.HTTP_204_NO_CONTENT)
async def record_activity(
    vendor_id: str, service: ActivityService = Depends(get_activity_service)
):
    """Called on vendor login and dashboard use."""
    try:
        await service.record_activity(vendor_id)
    except (NotFoundError, ValidationError, DatabaseError) as e:
        raise _to_http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/activity/sweep", response_model=SweepResponse)
async def sweep_inactive(
    threshold_minutes: int | None = Query(default=None, ge=0),
    service: ActivityService = Depends(get_activity_service),
):
    threshold = (
        threshold_minutes
        if threshold_minutes is not None
        else settings.INACTIVITY_THRESHOLD_MINUTES
    )
    try:
        updated = await service.sweep_inactive(threshold)
    except (ValidationError, DatabaseError) as e:
        raise _to_http_error(e) from e
    return SweepResponse(updated=updated, threshold_minutes=threshold)


@router.get("/feedback/recent", response_model=list[Contact])
async def recent_feedback(
    limit: int = Query(default=settings.RECENT_FEEDBACK_LIMIT, ge=1, le=200),
    service: ContactService = Depends(get_contact_service),
):
    """Latest feedback notes for the admin dashboard."""
    try:
        return await service.get_recent_feedback_notes(limit)
    except (ValidationError, DatabaseError) as e:
        raise _to_http_error(e) from e
