"""
Repository subpackage for the vendor trust feature.
"""

from .contact_repository import ContactRepository, ContactRepositoryError
from .vendor_repository import VendorRepository

__all__ = ["ContactRepository", "ContactRepositoryError", "VendorRepository"]
