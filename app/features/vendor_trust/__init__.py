"""
Vendor trust feature package.

Everything behind vendor trust scoring lives in this slice: the contact
ledger, feedback capture, the metrics calculator and its badges, the
activity tracker, background jobs and the HTTP router.
"""

# Re-export the primary building blocks for easy access.
from .api.router import router as vendor_trust_router  # noqa: F401
from .services import (  # noqa: F401
    activity_service,
    contact_service,
    feedback_service,
)
from .pipeline.scoring import metrics_calculator  # noqa: F401
from .jobs.inactivity_sweep_job import start_inactivity_sweep_scheduler  # noqa: F401
from .domain.models import Contact, VendorMetrics, VendorProfile  # noqa: F401
