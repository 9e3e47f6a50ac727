"""
Error taxonomy for the vendor trust feature.

NotFoundError and ValidationError are meant for the caller (the API maps
them to 404/422). MetricsComputationError is raised by the calculator and
swallowed on the feedback path, since metrics are a derived cache.
"""


class VendorTrustError(Exception):
    """Base exception for vendor trust operations."""

    def __init__(self, message: str, recoverable: bool = True):
        super().__init__(message)
        self.recoverable = recoverable


class NotFoundError(VendorTrustError):
    """Referenced contact or vendor does not exist."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found: {entity_id}", recoverable=False)
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(VendorTrustError):
    """Malformed input, e.g. a blank identifier or incomplete feedback."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, recoverable=False)
        self.field = field


class MetricsComputationError(VendorTrustError):
    """Metrics could not be loaded or written for a vendor."""

    def __init__(self, message: str, vendor_id: str):
        super().__init__(message, recoverable=True)
        self.vendor_id = vendor_id
