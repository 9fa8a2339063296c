"""
Domain models for business hours, staff members and bookings.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple

import pendulum

from .exceptions import BookingValidationError, BusinessHoursValidationError, InvalidDateError
from .slot_grid import is_valid_time

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MONDAY = 1


class BookingStatus(str, Enum):
    """Status values as stored in the appointments table."""
    CONFIRMED = "confirmado"
    CANCELLED = "cancelado"
    COMPLETED = "concluido"


class PaymentStatus(str, Enum):
    FREE = "free"
    PENDING = "pending"
    PAID = "paid"


class PaymentMethod(str, Enum):
    FREE = "free"
    CASH = "cash"
    CARD = "card"
    PIX = "pix"


def normalize_time(value: Optional[str]) -> Optional[str]:
    """
    Reduce a stored time to HH:MM.

    The database column is a TIME, so rows may come back as "10:30:00".
    Returns None for values that cannot be reduced to HH:MM.
    """
    if not value:
        return None
    candidate = value.strip()[:5]
    return candidate if is_valid_time(candidate) else None


def parse_date(value: str) -> date:
    """
    Parse a YYYY-MM-DD string into a calendar date.

    The date is built at local midnight without any timezone, so the
    day-of-week never drifts to the previous day.

    Raises:
        InvalidDateError: If the value is not a valid YYYY-MM-DD date
    """
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise InvalidDateError(f"Date must be YYYY-MM-DD, got {value!r}")
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as exc:
        raise InvalidDateError(f"Invalid calendar date: {value}") from exc


def day_of_week(value: date) -> int:
    """Return the weekday with 0=Sunday .. 6=Saturday."""
    return value.isoweekday() % 7


@dataclass(frozen=True)
class BusinessHours:
    """
    Opening hours of a tenant for one day of the week.

    Invariant: a closed day carries no times.
    """
    tenant_id: str
    day_of_week: int  # 0=Sunday, 6=Saturday
    is_open: bool
    open_time: Optional[str] = None
    close_time: Optional[str] = None

    def __post_init__(self):
        if not 0 <= self.day_of_week <= 6:
            raise BusinessHoursValidationError(f"day_of_week must be between 0 and 6, got {self.day_of_week}")
        if not self.is_open:
            object.__setattr__(self, "open_time", None)
            object.__setattr__(self, "close_time", None)

    def window(self) -> Optional[Tuple[str, str]]:
        """Return (open_time, close_time), or None when not fully configured."""
        if not self.is_open or not self.open_time or not self.close_time:
            return None
        return self.open_time, self.close_time


@dataclass(frozen=True)
class StaffMember:
    id: str
    tenant_id: str
    name: str = ""
    is_active: bool = True


@dataclass
class BookingRequest:
    """
    A client's request for a slot, as submitted from the booking form.
    """
    tenant_id: str
    staff_id: str
    service_id: str
    date: str
    time: str
    client_name: str
    client_phone: str
    client_email: Optional[str] = None
    notes: Optional[str] = None
    no_talk: bool = False
    payment_status: str = PaymentStatus.FREE.value
    payment_method: str = PaymentMethod.FREE.value

    REQUIRED_FIELDS = (
        "tenant_id", "staff_id", "service_id", "date", "time",
        "client_name", "client_phone",
    )

    def validate(self) -> "BookingRequest":
        """
        Return a cleaned copy of the request.

        Raises:
            BookingValidationError: Listing every missing or malformed field
        """
        cleaned = {}
        problems: List[str] = []

        for name in self.REQUIRED_FIELDS:
            value = getattr(self, name)
            value = value.strip() if isinstance(value, str) else value
            if not value:
                problems.append(name)
            cleaned[name] = value

        if "date" not in problems:
            try:
                parse_date(cleaned["date"])
            except InvalidDateError:
                problems.append("date")

        if "time" not in problems:
            cleaned["time"] = normalize_time(cleaned["time"])
            if cleaned["time"] is None:
                problems.append("time")

        if problems:
            raise BookingValidationError(problems)

        return replace(
            self,
            **cleaned,
            client_email=(self.client_email or "").strip() or None,
            notes=(self.notes or "").strip() or None,
            no_talk=bool(self.no_talk),
        )


@dataclass
class Booking:
    """
    A persisted appointment.

    ``status`` is a plain string because the stored status set is open.
    """
    id: str
    tenant_id: str
    staff_id: str
    service_id: str
    date: str
    time: str
    client_name: str
    client_phone: str
    status: str = BookingStatus.CONFIRMED.value
    client_email: Optional[str] = None
    notes: Optional[str] = None
    no_talk: bool = False
    payment_status: Optional[str] = None
    payment_method: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED.value


@dataclass
class AgendaEntry:
    """One grid row of a staff member's daily agenda."""
    time: str
    bookings: List[Booking] = field(default_factory=list)

    @property
    def booking(self) -> Optional[Booking]:
        """The active booking in this slot, falling back to the latest cancelled one."""
        for booking in self.bookings:
            if not booking.is_cancelled:
                return booking
        return self.bookings[-1] if self.bookings else None

    @property
    def is_free(self) -> bool:
        return all(booking.is_cancelled for booking in self.bookings)
