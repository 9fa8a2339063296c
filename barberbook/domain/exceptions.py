"""
Domain-specific exception hierarchy for the booking core.
"""

from typing import Iterable, List


class BarberbookError(Exception):
    """Base class for all application-level errors."""


class StoreError(BarberbookError):
    """Raised when the relational store cannot be queried or written."""


class StoreConflictError(StoreError):
    """Raised when the store rejects a write because of a uniqueness constraint."""


class InvalidDateError(BarberbookError, ValueError):
    """Raised when a calendar date is not in YYYY-MM-DD form."""


class BookingValidationError(BarberbookError):
    """Raised when a booking request is missing required fields."""

    def __init__(self, missing_fields: Iterable[str]):
        self.missing_fields: List[str] = list(missing_fields)
        super().__init__(
            f"Booking request is missing or has invalid fields: {', '.join(self.missing_fields)}"
        )


class SlotConflictError(BarberbookError):
    """Raised when the requested (staff, date, time) is already taken."""

    def __init__(self, staff_id: str, date: str, time: str):
        self.staff_id = staff_id
        self.date = date
        self.time = time
        super().__init__(f"Slot {date} {time} is already booked for staff {staff_id}")


class BookingNotFoundError(BarberbookError):
    """Raised when a booking id does not exist."""


class BookingStatusError(BarberbookError):
    """Raised on a status change the booking lifecycle does not allow."""


class BusinessHoursValidationError(BarberbookError, ValueError):
    """Raised when a weekly business hours table is malformed."""
