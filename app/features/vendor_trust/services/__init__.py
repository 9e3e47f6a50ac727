"""
Services subpackage for the vendor trust feature.
"""

from .activity_service import ActivityService, activity_service
from .contact_service import ContactService, contact_service
from .feedback_service import FeedbackService, feedback_service
from .formatting import format_last_active, format_response_time

__all__ = [
    "ActivityService",
    "ContactService",
    "FeedbackService",
    "activity_service",
    "contact_service",
    "feedback_service",
    "format_last_active",
    "format_response_time",
]
