"""
In-memory store for testing and demos without the hosted backend.
"""

import json
import threading
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

import pendulum

from ..domain.exceptions import StoreConflictError, StoreError
from ..domain.models import Booking, BookingRequest, BookingStatus, BusinessHours, StaffMember, normalize_time
from .rows import (
    booking_from_row,
    booking_request_to_row,
    business_hours_from_row,
    business_hours_to_row,
    staff_from_row,
)

TABLES = ("barbers", "business_hours", "appointments")


class MockStore:
    """
    Mock store that keeps the backend tables as lists of rows.

    Rows are loaded from mock_store_data.json unless data is passed in.
    With ``enforce_unique_slots`` the store rejects a second non-cancelled
    appointment for the same (barber, date, time), like a partial unique
    index would.
    """

    def __init__(
        self,
        data: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        data_file: Optional[Path] = None,
        enforce_unique_slots: bool = False,
    ):
        self.enforce_unique_slots = enforce_unique_slots
        self._lock = threading.Lock()

        if data is None:
            data = self._load_data(data_file or Path(__file__).parent / "mock_store_data.json")

        self.tables: Dict[str, List[Dict[str, Any]]] = {
            table: [dict(row) for row in data.get(table, [])] for table in TABLES
        }

    @staticmethod
    def _load_data(data_file: Path) -> Dict[str, List[Dict[str, Any]]]:
        """Load table rows from a JSON file."""
        if not data_file.exists():
            return {}
        with open(data_file, "r", encoding="utf-8") as f:
            return json.load(f)

    def _appointments(self, staff_id: str, date: str) -> List[Dict[str, Any]]:
        rows = [
            row for row in self.tables["appointments"]
            if row.get("barber_id") == staff_id and row.get("appointment_date") == date
        ]
        return sorted(rows, key=lambda r: r.get("appointment_time") or "")

    @staticmethod
    def _is_active(row: Dict[str, Any]) -> bool:
        return row.get("status") != BookingStatus.CANCELLED.value

    def get_staff_member(self, staff_id: str) -> Optional[StaffMember]:
        for row in self.tables["barbers"]:
            if row.get("id") == staff_id:
                return staff_from_row(row)
        return None

    def get_business_hours(self, tenant_id: str, day_of_week: int) -> Optional[BusinessHours]:
        for row in self.tables["business_hours"]:
            if row.get("barbershop_id") == tenant_id and int(row["day_of_week"]) == day_of_week:
                return business_hours_from_row(row)
        return None

    def list_business_hours(self, tenant_id: str) -> List[BusinessHours]:
        rows = [row for row in self.tables["business_hours"] if row.get("barbershop_id") == tenant_id]
        return [business_hours_from_row(row) for row in sorted(rows, key=lambda r: int(r["day_of_week"]))]

    def replace_business_hours(self, tenant_id: str, hours: List[BusinessHours]) -> None:
        with self._lock:
            kept = [row for row in self.tables["business_hours"] if row.get("barbershop_id") != tenant_id]
            self.tables["business_hours"] = kept + [business_hours_to_row(h) for h in hours]

    def list_bookings(self, staff_id: str, date: str) -> List[Booking]:
        return [booking_from_row(row) for row in self._appointments(staff_id, date)]

    def list_active_bookings(self, staff_id: str, date: str) -> List[Booking]:
        return [
            booking_from_row(row) for row in self._appointments(staff_id, date)
            if self._is_active(row)
        ]

    def find_active_booking(self, staff_id: str, date: str, time: str) -> Optional[Booking]:
        for row in self._appointments(staff_id, date):
            if self._is_active(row) and normalize_time(row.get("appointment_time")) == time:
                return booking_from_row(row)
        return None

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        for row in self.tables["appointments"]:
            if str(row.get("id")) == booking_id:
                return booking_from_row(row)
        return None

    def insert_booking(self, request: BookingRequest, status: str) -> Booking:
        row = booking_request_to_row(request, status)
        row["id"] = str(uuid.uuid4())
        row["created_at"] = pendulum.now("UTC").to_iso8601_string()

        with self._lock:
            if self.enforce_unique_slots and status != BookingStatus.CANCELLED.value:
                taken = any(
                    self._is_active(existing)
                    and normalize_time(existing.get("appointment_time")) == request.time
                    for existing in self._appointments(request.staff_id, request.date)
                )
                if taken:
                    raise StoreConflictError(
                        f"Duplicate appointment for {request.staff_id} at {request.date} {request.time}"
                    )
            self.tables["appointments"].append(row)

        return booking_from_row(row)

    def update_booking_status(self, booking_id: str, status: str) -> Booking:
        with self._lock:
            for row in self.tables["appointments"]:
                if str(row.get("id")) == booking_id:
                    row["status"] = status
                    return booking_from_row(row)
        raise StoreError(f"Booking {booking_id} does not exist")

    def test_connection(self) -> Dict[str, Any]:
        """Mock connection test."""
        return {"url": "mock://store", "reachable": True, "sample_rows": len(self.tables["barbers"])}
