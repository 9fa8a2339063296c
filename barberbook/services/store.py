"""
Protocol describing the store behaviour needed by the services.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from ..domain.models import Booking, BookingRequest, BusinessHours, StaffMember


class BookingStoreProtocol(Protocol):
    """Relational store exposing staff, business hours and appointments."""

    def get_staff_member(self, staff_id: str) -> Optional[StaffMember]:
        """Return the staff member, or None if unknown."""

    def get_business_hours(self, tenant_id: str, day_of_week: int) -> Optional[BusinessHours]:
        """Return the configured hours for one weekday, or None."""

    def list_business_hours(self, tenant_id: str) -> List[BusinessHours]:
        """Return every configured weekday of a tenant, ordered by day."""

    def replace_business_hours(self, tenant_id: str, hours: List[BusinessHours]) -> None:
        """Delete every row of the tenant, then insert the given rows."""

    def list_bookings(self, staff_id: str, date: str) -> List[Booking]:
        """Return all bookings of a staff member on a date, ordered by time."""

    def list_active_bookings(self, staff_id: str, date: str) -> List[Booking]:
        """Return non-cancelled bookings of a staff member on a date, ordered by time."""

    def find_active_booking(self, staff_id: str, date: str, time: str) -> Optional[Booking]:
        """Return a non-cancelled booking holding (staff, date, time), if any."""

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        """Return a booking by id, or None."""

    def insert_booking(self, request: BookingRequest, status: str) -> Booking:
        """Persist a validated request with the given status."""

    def update_booking_status(self, booking_id: str, status: str) -> Booking:
        """Change the status of an existing booking."""
