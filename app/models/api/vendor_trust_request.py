# app/models/api/vendor_trust_request.py
from pydantic import BaseModel, Field

from app.features.vendor_trust.domain import ContactMethod, ResponseTimeBucket


class LogContactRequest(BaseModel):
    """Request body for recording a student contacting a vendor."""

    vendor_id: str = Field(..., min_length=1, max_length=128)
    student_id: str = Field(..., min_length=1, max_length=128)
    method: ContactMethod = ContactMethod.WHATSAPP
    product_id: str | None = Field(default=None, max_length=128)


class FeedbackRequest(BaseModel):
    """Survey answers for a past contact. All three answers are required."""

    response_time: ResponseTimeBucket = Field(..., description="How long the vendor took to reply")
    was_helpful: bool
    purchase_made: bool
    note: str | None = Field(default=None, max_length=1000)
