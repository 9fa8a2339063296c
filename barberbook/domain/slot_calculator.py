"""
Core business logic for calculating bookable time slots.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

from datetime import date
from typing import Iterable, List, Optional, Sequence

from pendulum import DateTime

from .models import MONDAY, BusinessHours, day_of_week
from .slot_grid import DEFAULT_SLOT_GRID, validate_grid


class SlotCalculator:
    """
    Calculates the open slots of one staff member on one day.

    Algorithm:
    1. Decide whether the day is open (configured hours or fallback policy)
    2. Start from the static slot grid
    3. Remove times already taken by a non-cancelled booking
    4. Keep only times within the configured opening window
    5. On the current day, drop times that have already passed
    6. Return the remaining times in grid order
    """

    def __init__(
        self,
        slot_grid: Sequence[str] = DEFAULT_SLOT_GRID,
        fallback_closed_weekdays: Iterable[int] = (MONDAY,),
    ):
        self.slot_grid: List[str] = validate_grid(slot_grid)
        self.fallback_closed_weekdays = frozenset(fallback_closed_weekdays)

    def is_closed(self, target_date: date, hours: Optional[BusinessHours]) -> bool:
        """
        Check whether the shop takes no bookings on this day.

        Without configured hours the fallback policy applies: Monday is
        closed, every other day is open.
        """
        if hours is None:
            return day_of_week(target_date) in self.fallback_closed_weekdays
        return not hours.is_open

    def available_slots(
        self,
        target_date: date,
        hours: Optional[BusinessHours],
        occupied_times: Iterable[str],
        now: DateTime,
    ) -> List[str]:
        """
        Compute the bookable times for a day.

        Args:
            target_date: The calendar day being booked
            hours: Business hours for that weekday, or None if not configured
            occupied_times: HH:MM values held by non-cancelled bookings
            now: Current instant in the tenant's timezone

        Returns:
            Ordered list of HH:MM strings, a subset of the slot grid
        """
        if self.is_closed(target_date, hours):
            return []

        occupied = set(occupied_times)
        slots = [slot for slot in self.slot_grid if slot not in occupied]

        window = hours.window() if hours is not None else None
        if window:
            open_time, close_time = window
            # Zero-padded HH:MM strings compare in time order
            slots = [slot for slot in slots if open_time <= slot <= close_time]

        if target_date == now.date():
            current_time = now.format("HH:mm")
            slots = [slot for slot in slots if slot > current_time]

        return slots

    def is_past(self, target_date: date, now: DateTime) -> bool:
        """Check whether a day lies before the current day."""
        return target_date < now.date()
