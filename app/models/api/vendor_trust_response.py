# app/models/api/vendor_trust_response.py
from pydantic import BaseModel, Field

from app.features.vendor_trust.domain import VendorMetrics


class LogContactResponse(BaseModel):
    """Response for POST /vendor-trust/contacts"""

    contact_id: str


class VendorMetricsResponse(BaseModel):
    """Response for GET /vendor-trust/vendors/{vendor_id}/metrics"""

    metrics: VendorMetrics
    average_response_label: str = Field(..., description="e.g. '15 min', '2 hrs'")
    last_active_label: str = Field(..., description="e.g. 'Just now', '3 hrs ago'")


class SweepResponse(BaseModel):
    """Response for POST /vendor-trust/activity/sweep"""

    updated: int
    threshold_minutes: int
