"""
Application service computing bookable slots for a staff member.

The service resolves the tenant and loads business hours and bookings
through the store protocol, then delegates the actual filtering to the
domain-level ``SlotCalculator``. Store failures on the hours and bookings
lookups fall back to the full grid unless ``fail_open`` is disabled.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

import pendulum
from pendulum import DateTime

from ..domain.exceptions import StoreError
from ..domain.models import AgendaEntry, Booking, day_of_week, parse_date
from ..domain.slot_calculator import SlotCalculator
from .store import BookingStoreProtocol

logger = logging.getLogger(__name__)


class AvailabilityService:
    """
    Orchestrates store lookups and slot calculation.
    """

    def __init__(
        self,
        store: BookingStoreProtocol,
        slot_calculator: SlotCalculator,
        timezone: str = "America/Sao_Paulo",
        fail_open: bool = True,
        clock: Optional[Callable[[], DateTime]] = None,
    ) -> None:
        self._store = store
        self._slot_calculator = slot_calculator
        self._timezone = timezone
        self._fail_open = fail_open
        self._clock = clock or (lambda: pendulum.now(self._timezone))

    def now(self) -> DateTime:
        """Current instant in the tenant's timezone."""
        return self._clock().in_timezone(self._timezone)

    def compute_available_slots(self, staff_id: str, date: str) -> List[str]:
        """
        Return the open grid times of a staff member on a date.

        Args:
            staff_id: Staff member id, from which the tenant is derived
            date: Calendar date as YYYY-MM-DD

        Returns:
            Ordered HH:MM strings; empty for unknown or inactive staff and closed days

        Raises:
            InvalidDateError: If date is not YYYY-MM-DD
            StoreError: If the staff lookup fails, or a later lookup fails
                while fail_open is disabled
        """
        target_date = parse_date(date)

        staff = self._store.get_staff_member(staff_id)
        if staff is None or not staff.tenant_id or not staff.is_active:
            logger.info("Staff member %s not found or inactive, no slots offered", staff_id)
            return []

        weekday = day_of_week(target_date)

        try:
            hours = self._store.get_business_hours(staff.tenant_id, weekday)
            if self._slot_calculator.is_closed(target_date, hours):
                return []
            bookings = self._store.list_active_bookings(staff_id, date)
        except StoreError as e:
            if not self._fail_open:
                raise
            logger.warning(
                "Availability lookup failed for staff %s on %s, offering the full grid: %s",
                staff_id, date, e,
            )
            return list(self._slot_calculator.slot_grid)

        occupied = [booking.time for booking in bookings if not booking.is_cancelled]

        slots = self._slot_calculator.available_slots(
            target_date=target_date,
            hours=hours,
            occupied_times=occupied,
            now=self.now(),
        )

        logger.debug("Staff %s on %s: occupied=%s available=%s", staff_id, date, occupied, slots)
        return slots

    def is_bookable_date(self, staff_id: str, date: str) -> bool:
        """
        Check whether a date can be offered in the date picker.

        Past dates and closed days are rejected. A failed hours lookup
        counts as open when fail_open is enabled.
        """
        target_date = parse_date(date)
        if self._slot_calculator.is_past(target_date, self.now()):
            return False

        staff = self._store.get_staff_member(staff_id)
        if staff is None or not staff.tenant_id or not staff.is_active:
            return False

        try:
            hours = self._store.get_business_hours(staff.tenant_id, day_of_week(target_date))
        except StoreError as e:
            if not self._fail_open:
                raise
            logger.warning("Business hours lookup failed for %s, treating %s as open: %s", staff_id, date, e)
            return True

        return not self._slot_calculator.is_closed(target_date, hours)

    def day_agenda(self, staff_id: str, date: str) -> List[AgendaEntry]:
        """
        Lay out a staff member's bookings for a day over the slot grid.

        Bookings at times outside the grid get their own rows.
        """
        parse_date(date)
        bookings = self._store.list_bookings(staff_id, date)

        by_time: Dict[str, List[Booking]] = {}
        for booking in bookings:
            by_time.setdefault(booking.time, []).append(booking)

        times = sorted(set(self._slot_calculator.slot_grid) | set(by_time))
        return [AgendaEntry(time=time, bookings=by_time.get(time, [])) for time in times]
