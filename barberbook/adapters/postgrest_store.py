"""
Store adapter for the hosted backend's PostgREST interface.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..domain.exceptions import StoreConflictError, StoreError
from ..domain.models import Booking, BookingRequest, BookingStatus, BusinessHours, StaffMember
from .rows import (
    booking_from_row,
    booking_request_to_row,
    business_hours_from_row,
    business_hours_to_row,
    staff_from_row,
)

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


class PostgrestStore:
    """
    Client for the backend's REST tables.

    Every call is one stateless HTTP round trip; nothing is retried.
    """

    REST_PATH = "/rest/v1"

    def __init__(self, base_url: str, api_key: str, timeout: int = 30):
        """
        Initialize the REST client.

        Args:
            base_url: Project URL, e.g. https://xyz.supabase.co
            api_key: Anon or service key sent as apikey and bearer token
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def _url(self, table: str) -> str:
        return f"{self.base_url}{self.REST_PATH}/{table}"

    def _request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, str]] = None,
        payload: Any = None,
        prefer: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Send one request and return the decoded rows.

        Raises:
            StoreConflictError: If a unique constraint rejected the write
            StoreError: On any other transport or HTTP failure
        """
        headers = dict(self.headers)
        if prefer:
            headers["Prefer"] = prefer

        try:
            response = requests.request(
                method,
                self._url(table),
                headers=headers,
                params=params,
                json=payload,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise StoreError(f"Request to {table} failed: {e}") from e

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            code = body.get("code") if isinstance(body, dict) else None
            message = body.get("message") if isinstance(body, dict) else None
            detail = message or response.text

            if response.status_code == 409 or code == UNIQUE_VIOLATION:
                raise StoreConflictError(f"Write to {table} rejected: {detail}")
            raise StoreError(f"{method} {table} failed with {response.status_code}: {detail}")

        if not response.content:
            return []

        try:
            data = response.json()
        except ValueError as e:
            raise StoreError(f"Invalid JSON from {table}: {e}") from e

        return data if isinstance(data, list) else [data]

    def get_staff_member(self, staff_id: str) -> Optional[StaffMember]:
        rows = self._request(
            "GET",
            "barbers",
            params={"select": "id,barbershop_id,name,is_active", "id": f"eq.{staff_id}", "limit": "1"},
        )
        return staff_from_row(rows[0]) if rows else None

    def get_business_hours(self, tenant_id: str, day_of_week: int) -> Optional[BusinessHours]:
        rows = self._request(
            "GET",
            "business_hours",
            params={
                "select": "*",
                "barbershop_id": f"eq.{tenant_id}",
                "day_of_week": f"eq.{day_of_week}",
                "limit": "1",
            },
        )
        return business_hours_from_row(rows[0]) if rows else None

    def list_business_hours(self, tenant_id: str) -> List[BusinessHours]:
        rows = self._request(
            "GET",
            "business_hours",
            params={"select": "*", "barbershop_id": f"eq.{tenant_id}", "order": "day_of_week.asc"},
        )
        return [business_hours_from_row(row) for row in rows]

    def replace_business_hours(self, tenant_id: str, hours: List[BusinessHours]) -> None:
        """Delete every row of the tenant, then insert the new week."""
        self._request("DELETE", "business_hours", params={"barbershop_id": f"eq.{tenant_id}"})
        if hours:
            self._request(
                "POST",
                "business_hours",
                payload=[business_hours_to_row(h) for h in hours],
                prefer="return=minimal",
            )
        logger.info("Replaced business hours for tenant %s (%d rows)", tenant_id, len(hours))

    def list_bookings(self, staff_id: str, date: str) -> List[Booking]:
        rows = self._request(
            "GET",
            "appointments",
            params={
                "select": "*",
                "barber_id": f"eq.{staff_id}",
                "appointment_date": f"eq.{date}",
                "order": "appointment_time.asc",
            },
        )
        return [booking_from_row(row) for row in rows]

    def list_active_bookings(self, staff_id: str, date: str) -> List[Booking]:
        rows = self._request(
            "GET",
            "appointments",
            params={
                "select": "*",
                "barber_id": f"eq.{staff_id}",
                "appointment_date": f"eq.{date}",
                "status": f"not.eq.{BookingStatus.CANCELLED.value}",
                "order": "appointment_time.asc",
            },
        )
        return [booking_from_row(row) for row in rows]

    def find_active_booking(self, staff_id: str, date: str, time: str) -> Optional[Booking]:
        rows = self._request(
            "GET",
            "appointments",
            params={
                "select": "*",
                "barber_id": f"eq.{staff_id}",
                "appointment_date": f"eq.{date}",
                "appointment_time": f"eq.{time}",
                "status": f"not.eq.{BookingStatus.CANCELLED.value}",
                "limit": "1",
            },
        )
        return booking_from_row(rows[0]) if rows else None

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        rows = self._request(
            "GET",
            "appointments",
            params={"select": "*", "id": f"eq.{booking_id}", "limit": "1"},
        )
        return booking_from_row(rows[0]) if rows else None

    def insert_booking(self, request: BookingRequest, status: str) -> Booking:
        rows = self._request(
            "POST",
            "appointments",
            payload=[booking_request_to_row(request, status)],
            prefer="return=representation",
        )
        if not rows:
            raise StoreError("Insert into appointments returned no row")
        return booking_from_row(rows[0])

    def update_booking_status(self, booking_id: str, status: str) -> Booking:
        rows = self._request(
            "PATCH",
            "appointments",
            params={"id": f"eq.{booking_id}"},
            payload={"status": status},
            prefer="return=representation",
        )
        if not rows:
            raise StoreError(f"Booking {booking_id} was not updated")
        return booking_from_row(rows[0])

    def test_connection(self) -> Dict[str, Any]:
        """
        Check that the REST endpoint answers with the configured key.

        Raises:
            StoreError: If the endpoint is unreachable or rejects the key
        """
        rows = self._request("GET", "barbers", params={"select": "id", "limit": "1"})
        return {"url": self.base_url, "reachable": True, "sample_rows": len(rows)}
