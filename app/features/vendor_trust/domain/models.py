"""
Domain models for the vendor trust feature.

Contacts are the source of truth; VendorMetrics is a derived cache that
can always be rebuilt from the contact set plus the vendor's activity
state. These models carry no persistence logic so repositories, services
and the API layer can share them.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ContactMethod(str, Enum):
    WHATSAPP = "whatsapp"
    CALL = "call"
    OTHER = "other"

    @classmethod
    def coerce(cls, value: str | None) -> "ContactMethod":
        """Map a stored value onto the enum; unknown channels become OTHER."""
        if not value:
            return cls.WHATSAPP
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class ResponseTimeBucket(str, Enum):
    """Student-reported time until the vendor replied, fastest first."""

    UNDER_30MIN = "under_30min"
    MIN30_TO_2HR = "30min_2hr"
    HR2_TO_24HR = "2hr_24hr"
    OVER_24HR = "over_24hr"
    NO_RESPONSE = "no_response"


class BadgeType(str, Enum):
    QUICK_RESPONSE = "quick_response"
    RELIABLE = "reliable"
    TOP_RATED = "top_rated"
    ACTIVE_NOW = "active_now"


class BadgeColor(str, Enum):
    YELLOW = "yellow"
    GREEN = "green"
    GOLD = "gold"
    BLUE = "blue"


class VerificationLevel(str, Enum):
    BASIC = "basic"
    VERIFIED = "verified"
    PRO = "pro"

    @property
    def rank(self) -> int:
        return _VERIFICATION_ORDER.index(self)


_VERIFICATION_ORDER = [VerificationLevel.BASIC, VerificationLevel.VERIFIED, VerificationLevel.PRO]


class Feedback(BaseModel):
    """
    Survey answers attached to a contact.

    Every field is optional here because stored rows may predate the
    current submission form; FeedbackSubmission is the strict input shape.
    """

    response_time: ResponseTimeBucket | None = None
    was_helpful: bool | None = None
    purchase_made: bool | None = None
    note: str | None = None
    feedback_at: datetime | None = None


class FeedbackSubmission(BaseModel):
    """Complete feedback as submitted by a student."""

    response_time: ResponseTimeBucket
    was_helpful: bool
    purchase_made: bool
    note: str | None = Field(default=None, max_length=1000)


class Contact(BaseModel):
    """One student reaching out to one vendor."""

    id: str
    vendor_id: str
    student_id: str
    contacted_at: datetime | None
    contact_method: ContactMethod = ContactMethod.WHATSAPP
    product_id: str | None = None
    feedback_submitted: bool = False
    feedback: Feedback | None = None


class PendingFeedback(BaseModel):
    """A contact awaiting feedback, enriched for the prompt UI."""

    contact_id: str
    vendor_id: str
    vendor_name: str
    student_id: str
    contacted_at: datetime
    contact_method: ContactMethod
    product_id: str | None = None


class ContactStats(BaseModel):
    total_contacts: int
    feedback_count: int
    feedback_rate: float


class Badge(BaseModel):
    type: BadgeType
    label: str
    icon: str
    color: BadgeColor
    criteria: str
    earned_at: datetime


class VendorProfile(BaseModel):
    """The vendor record fields read and written by the trust engine."""

    model_config = ConfigDict(extra="allow")

    id: str
    business_name: str | None = None
    last_active: datetime | None = None
    is_active_now: bool = False
    verification_level: VerificationLevel | None = None
    is_verified: bool = False
    claimed_response_time: str | None = None

    @property
    def effective_verification_level(self) -> VerificationLevel:
        if self.verification_level is not None:
            return self.verification_level
        return VerificationLevel.VERIFIED if self.is_verified else VerificationLevel.BASIC


class VendorMetrics(BaseModel):
    """Full derived metrics snapshot for one vendor."""

    vendor_id: str
    claimed_response_time: str | None = None

    total_contacts: int
    feedback_count: int
    average_response_minutes: float | None
    response_rate: float = Field(ge=0, le=100)
    helpful_rate: float = Field(ge=0, le=100)
    purchase_rate: float = Field(ge=0, le=100)

    last_active: datetime | None = None
    is_active_now: bool = False
    activity_score: int = Field(ge=0, le=100)

    responsiveness_score: int = Field(ge=0, le=100)
    trust_score: int = Field(ge=0, le=100)

    badges: list[Badge] = Field(default_factory=list)
    last_calculated: datetime


class VendorMetricsSummary(BaseModel):
    """Denormalised subset copied onto the vendor profile for list views."""

    responsiveness_score: int
    trust_score: int
    average_response_minutes: float | None
    response_rate: float


class FeedbackResult(BaseModel):
    """Outcome of a feedback submission as reported to the student."""

    contact_id: str
    vendor_id: str
    metrics_updated: bool
    metrics_warning: str | None = None
