"""
Conversion between backend table rows and domain models.

Row shape follows the hosted tables:
- barbers: id, barbershop_id, name, is_active
- business_hours: barbershop_id, day_of_week, is_open, open_time, close_time
- appointments: id, barbershop_id, barber_id, service_id, appointment_date,
  appointment_time, status, client_*, notes, no_talk, payment_*, created_at
"""

from typing import Any, Dict

from ..domain.models import Booking, BookingRequest, BookingStatus, BusinessHours, StaffMember, normalize_time


def staff_from_row(row: Dict[str, Any]) -> StaffMember:
    return StaffMember(
        id=row["id"],
        tenant_id=row.get("barbershop_id") or "",
        name=row.get("name") or "",
        is_active=row.get("is_active") is not False,
    )


def business_hours_from_row(row: Dict[str, Any]) -> BusinessHours:
    return BusinessHours(
        tenant_id=row.get("barbershop_id") or "",
        day_of_week=int(row["day_of_week"]),
        is_open=bool(row.get("is_open")),
        open_time=normalize_time(row.get("open_time")),
        close_time=normalize_time(row.get("close_time")),
    )


def business_hours_to_row(hours: BusinessHours) -> Dict[str, Any]:
    return {
        "barbershop_id": hours.tenant_id,
        "day_of_week": hours.day_of_week,
        "is_open": hours.is_open,
        "open_time": hours.open_time if hours.is_open else None,
        "close_time": hours.close_time if hours.is_open else None,
    }


def booking_from_row(row: Dict[str, Any]) -> Booking:
    # Rows with a malformed time keep the raw value so they never match a grid slot
    raw_time = row.get("appointment_time") or ""
    return Booking(
        id=str(row["id"]),
        tenant_id=row.get("barbershop_id") or "",
        staff_id=row.get("barber_id") or "",
        service_id=row.get("service_id") or "",
        date=row.get("appointment_date") or "",
        time=normalize_time(raw_time) or raw_time,
        client_name=row.get("client_name") or "",
        client_phone=row.get("client_phone") or "",
        status=row.get("status") or BookingStatus.CONFIRMED.value,
        client_email=row.get("client_email"),
        notes=row.get("notes"),
        no_talk=bool(row.get("no_talk")),
        payment_status=row.get("payment_status"),
        payment_method=row.get("payment_method"),
        created_at=row.get("created_at"),
    )


def booking_request_to_row(request: BookingRequest, status: str) -> Dict[str, Any]:
    return {
        "barbershop_id": request.tenant_id,
        "barber_id": request.staff_id,
        "service_id": request.service_id,
        "appointment_date": request.date,
        "appointment_time": request.time,
        "client_name": request.client_name,
        "client_phone": request.client_phone,
        "client_email": request.client_email,
        "notes": request.notes,
        "no_talk": request.no_talk,
        "status": status,
        "payment_status": request.payment_status,
        "payment_method": request.payment_method,
    }
