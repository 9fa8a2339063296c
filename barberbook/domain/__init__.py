"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import (
    AgendaEntry,
    Booking,
    BookingRequest,
    BookingStatus,
    BusinessHours,
    PaymentMethod,
    PaymentStatus,
    StaffMember,
)
from .slot_calculator import SlotCalculator
from .slot_grid import DEFAULT_SLOT_GRID, HOURLY_SLOT_GRID, build_slot_grid

__all__ = [
    "AgendaEntry",
    "Booking",
    "BookingRequest",
    "BookingStatus",
    "BusinessHours",
    "PaymentMethod",
    "PaymentStatus",
    "StaffMember",
    "SlotCalculator",
    "DEFAULT_SLOT_GRID",
    "HOURLY_SLOT_GRID",
    "build_slot_grid",
]
