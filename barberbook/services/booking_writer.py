"""
Application service writing bookings without double-booking a slot.

The collision check runs immediately before the insert. Without a unique
index on (staff, date, time) for non-cancelled rows, two requests racing for
the same slot can both pass the check; stores that enforce such an index
report the loser as a conflict instead.
"""

from __future__ import annotations

import logging

from ..domain.exceptions import (
    BookingNotFoundError,
    BookingStatusError,
    BookingValidationError,
    SlotConflictError,
    StoreConflictError,
)
from ..domain.models import Booking, BookingRequest, BookingStatus
from .store import BookingStoreProtocol

logger = logging.getLogger(__name__)


class BookingWriter:
    """
    Validates, conflict-checks and persists bookings, and moves them
    through their status lifecycle.
    """

    def __init__(self, store: BookingStoreProtocol) -> None:
        self._store = store

    def create_booking(self, request: BookingRequest) -> Booking:
        """
        Create a confirmed booking for a free slot.

        Args:
            request: The submitted booking form; payment fields are kept as given

        Returns:
            The persisted booking

        Raises:
            BookingValidationError: If required fields are missing (no store access happens)
                or the staff member is inactive
            SlotConflictError: If a non-cancelled booking already holds the slot
            StoreError: If the store cannot be queried or written
        """
        candidate = request.validate()

        staff = self._store.get_staff_member(candidate.staff_id)
        if staff is not None and not staff.is_active:
            logger.info("Refusing booking for inactive staff %s", candidate.staff_id)
            raise BookingValidationError(["staff_id"])

        existing = self._store.find_active_booking(candidate.staff_id, candidate.date, candidate.time)
        if existing is not None:
            logger.info(
                "Slot %s %s for staff %s already taken by booking %s",
                candidate.date, candidate.time, candidate.staff_id, existing.id,
            )
            raise SlotConflictError(candidate.staff_id, candidate.date, candidate.time)

        try:
            booking = self._store.insert_booking(candidate, BookingStatus.CONFIRMED.value)
        except StoreConflictError as e:
            logger.info("Store rejected duplicate slot %s %s: %s", candidate.date, candidate.time, e)
            raise SlotConflictError(candidate.staff_id, candidate.date, candidate.time) from e

        logger.info(
            "Created booking %s for staff %s at %s %s (payment %s/%s)",
            booking.id, booking.staff_id, booking.date, booking.time,
            booking.payment_method, booking.payment_status,
        )
        return booking

    def update_status(self, booking_id: str, status: str) -> Booking:
        """
        Move a booking to a new status.

        Cancelled bookings are final.

        Raises:
            BookingNotFoundError: If the booking does not exist
            BookingStatusError: If the status is unknown or the booking is cancelled
        """
        try:
            new_status = BookingStatus(status)
        except ValueError as e:
            raise BookingStatusError(f"Unknown booking status: {status}") from e

        booking = self._store.get_booking(booking_id)
        if booking is None:
            raise BookingNotFoundError(f"Booking {booking_id} not found")

        if booking.status == new_status.value:
            return booking

        if booking.is_cancelled:
            raise BookingStatusError(f"Booking {booking_id} is cancelled and cannot change status")

        updated = self._store.update_booking_status(booking_id, new_status.value)
        logger.info("Booking %s: %s -> %s", booking_id, booking.status, new_status.value)
        return updated

    def confirm(self, booking_id: str) -> Booking:
        return self.update_status(booking_id, BookingStatus.CONFIRMED.value)

    def cancel(self, booking_id: str) -> Booking:
        return self.update_status(booking_id, BookingStatus.CANCELLED.value)

    def complete(self, booking_id: str) -> Booking:
        return self.update_status(booking_id, BookingStatus.COMPLETED.value)
