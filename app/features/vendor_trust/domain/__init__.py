"""
Domain subpackage for the vendor trust feature.
"""

from .errors import MetricsComputationError, NotFoundError, ValidationError, VendorTrustError
from .models import (
    Badge,
    BadgeColor,
    BadgeType,
    Contact,
    ContactMethod,
    ContactStats,
    Feedback,
    FeedbackResult,
    FeedbackSubmission,
    PendingFeedback,
    ResponseTimeBucket,
    VendorMetrics,
    VendorMetricsSummary,
    VendorProfile,
    VerificationLevel,
)

__all__ = [
    "Badge",
    "BadgeColor",
    "BadgeType",
    "Contact",
    "ContactMethod",
    "ContactStats",
    "Feedback",
    "FeedbackResult",
    "FeedbackSubmission",
    "MetricsComputationError",
    "NotFoundError",
    "PendingFeedback",
    "ResponseTimeBucket",
    "ValidationError",
    "VendorMetrics",
    "VendorMetricsSummary",
    "VendorProfile",
    "VendorTrustError",
    "VerificationLevel",
]
