"""
Application service for a tenant's weekly business hours.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from ..domain.exceptions import BusinessHoursValidationError
from ..domain.models import MONDAY, BusinessHours
from ..domain.slot_grid import is_valid_time
from .store import BookingStoreProtocol

logger = logging.getLogger(__name__)

DEFAULT_OPEN_TIME = "08:00"
DEFAULT_CLOSE_TIME = "18:00"


def default_week(tenant_id: str) -> List[BusinessHours]:
    """Editor defaults: Monday closed, every other day 08:00 to 18:00."""
    return [
        BusinessHours(
            tenant_id=tenant_id,
            day_of_week=day,
            is_open=day != MONDAY,
            open_time=DEFAULT_OPEN_TIME,
            close_time=DEFAULT_CLOSE_TIME,
        )
        for day in range(7)
    ]


class BusinessHoursService:
    """Loads and saves the weekly hours table of a tenant."""

    def __init__(self, store: BookingStoreProtocol) -> None:
        self._store = store

    def load_week(self, tenant_id: str) -> List[BusinessHours]:
        """
        Return the tenant's configured days, or the editor defaults when
        nothing has been saved yet.
        """
        hours = self._store.list_business_hours(tenant_id)
        if not hours:
            return default_week(tenant_id)
        return sorted(hours, key=lambda h: h.day_of_week)

    def save_week(self, tenant_id: str, hours: Sequence[BusinessHours]) -> List[BusinessHours]:
        """
        Replace the tenant's hours wholesale.

        Raises:
            BusinessHoursValidationError: If days repeat or times are malformed
        """
        normalized: List[BusinessHours] = []
        seen_days = set()
        problems: List[str] = []

        for entry in hours:
            if entry.day_of_week in seen_days:
                problems.append(f"day {entry.day_of_week} appears more than once")
            seen_days.add(entry.day_of_week)

            if entry.is_open:
                if not (entry.open_time and is_valid_time(entry.open_time)):
                    problems.append(f"day {entry.day_of_week}: open_time must be HH:MM")
                elif not (entry.close_time and is_valid_time(entry.close_time)):
                    problems.append(f"day {entry.day_of_week}: close_time must be HH:MM")
                elif entry.open_time >= entry.close_time:
                    problems.append(f"day {entry.day_of_week}: open_time must be before close_time")

            normalized.append(
                BusinessHours(
                    tenant_id=tenant_id,
                    day_of_week=entry.day_of_week,
                    is_open=entry.is_open,
                    open_time=entry.open_time,
                    close_time=entry.close_time,
                )
            )

        if problems:
            raise BusinessHoursValidationError("; ".join(problems))

        normalized.sort(key=lambda h: h.day_of_week)
        self._store.replace_business_hours(tenant_id, normalized)
        logger.info("Saved %d business hour rows for tenant %s", len(normalized), tenant_id)
        return normalized
