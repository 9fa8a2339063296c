"""
Service layer helpers that orchestrate store adapters and domain logic.
"""

from .availability import AvailabilityService
from .booking_writer import BookingWriter
from .business_hours import BusinessHoursService
from .store import BookingStoreProtocol

__all__ = ["AvailabilityService", "BookingStoreProtocol", "BookingWriter", "BusinessHoursService"]
