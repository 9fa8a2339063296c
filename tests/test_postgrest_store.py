"""
Tests for the PostgREST store adapter, with HTTP calls stubbed out.
"""

import json
from typing import Any, Dict, List

import pytest
import requests

from barberbook.adapters import postgrest_store
from barberbook.adapters.postgrest_store import PostgrestStore
from barberbook.domain.exceptions import StoreConflictError, StoreError
from barberbook.domain.models import BookingRequest, BusinessHours


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None):
        self.status_code = status_code
        self._body = body
        self.content = json.dumps(body).encode() if body is not None else b""
        self.text = self.content.decode()

    def json(self):
        if self._body is None:
            raise ValueError("no body")
        return self._body


class RecordingRequests:
    """Replacement for requests.request that replays queued responses."""

    def __init__(self, *responses: FakeResponse):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, method, url, headers=None, params=None, json=None, timeout=None):
        self.calls.append({"method": method, "url": url, "headers": headers, "params": params, "json": json})
        return self.responses.pop(0)


@pytest.fixture
def store() -> PostgrestStore:
    return PostgrestStore(base_url="https://demo.supabase.co/", api_key="anon-key")


def _install(monkeypatch, *responses) -> RecordingRequests:
    fake = RecordingRequests(*responses)
    monkeypatch.setattr(postgrest_store.requests, "request", fake)
    return fake


class TestQueries:
    """Tests for read queries."""

    def test_active_bookings_query_shape(self, store, monkeypatch):
        """Filters by staff and date, excludes cancelled and orders by time."""
        fake = _install(monkeypatch, FakeResponse(200, [
            {"id": 1, "barber_id": "b-1", "appointment_date": "2024-11-26",
             "appointment_time": "10:30:00", "client_name": "C", "client_phone": "1", "status": "confirmado"},
        ]))

        bookings = store.list_active_bookings("b-1", "2024-11-26")

        call = fake.calls[0]
        assert call["method"] == "GET"
        assert call["url"] == "https://demo.supabase.co/rest/v1/appointments"
        assert call["params"]["barber_id"] == "eq.b-1"
        assert call["params"]["appointment_date"] == "eq.2024-11-26"
        assert call["params"]["status"] == "not.eq.cancelado"
        assert call["params"]["order"] == "appointment_time.asc"
        assert call["headers"]["apikey"] == "anon-key"
        assert call["headers"]["Authorization"] == "Bearer anon-key"
        assert bookings[0].id == "1"
        assert bookings[0].time == "10:30"

    def test_missing_staff(self, store, monkeypatch):
        _install(monkeypatch, FakeResponse(200, []))

        assert store.get_staff_member("ghost") is None

    def test_business_hours_row(self, store, monkeypatch):
        fake = _install(monkeypatch, FakeResponse(200, [
            {"barbershop_id": "s-1", "day_of_week": 2, "is_open": True, "open_time": "09:00:00", "close_time": "18:00:00"},
        ]))

        hours = store.get_business_hours("s-1", 2)

        assert fake.calls[0]["params"]["day_of_week"] == "eq.2"
        assert hours.window() == ("09:00", "18:00")


class TestWrites:
    """Tests for inserts and updates."""

    def _request(self) -> BookingRequest:
        return BookingRequest(
            tenant_id="s-1", staff_id="b-1", service_id="sv-1", date="2024-11-26",
            time="10:30", client_name="C", client_phone="1",
        )

    def test_insert_booking(self, store, monkeypatch):
        fake = _install(monkeypatch, FakeResponse(201, [
            {"id": "new", "barbershop_id": "s-1", "barber_id": "b-1", "appointment_date": "2024-11-26",
             "appointment_time": "10:30:00", "client_name": "C", "client_phone": "1", "status": "confirmado"},
        ]))

        booking = store.insert_booking(self._request(), "confirmado")

        call = fake.calls[0]
        assert call["method"] == "POST"
        assert call["headers"]["Prefer"] == "return=representation"
        assert call["json"][0]["barber_id"] == "b-1"
        assert call["json"][0]["status"] == "confirmado"
        assert booking.id == "new"

    def test_unique_violation_is_conflict(self, store, monkeypatch):
        _install(monkeypatch, FakeResponse(409, {"code": "23505", "message": "duplicate key value"}))

        with pytest.raises(StoreConflictError, match="duplicate key"):
            store.insert_booking(self._request(), "confirmado")

    def test_unique_violation_code_without_409(self, store, monkeypatch):
        _install(monkeypatch, FakeResponse(400, {"code": "23505", "message": "duplicate"}))

        with pytest.raises(StoreConflictError):
            store.insert_booking(self._request(), "confirmado")

    def test_replace_business_hours_deletes_then_inserts(self, store, monkeypatch):
        fake = _install(monkeypatch, FakeResponse(204), FakeResponse(201))
        hours = [BusinessHours(tenant_id="s-1", day_of_week=1, is_open=False, open_time="08:00", close_time="18:00")]

        store.replace_business_hours("s-1", hours)

        assert [call["method"] for call in fake.calls] == ["DELETE", "POST"]
        assert fake.calls[0]["params"] == {"barbershop_id": "eq.s-1"}
        assert fake.calls[1]["json"] == [
            {"barbershop_id": "s-1", "day_of_week": 1, "is_open": False, "open_time": None, "close_time": None},
        ]


class TestErrors:
    """Tests for error translation."""

    def test_http_error(self, store, monkeypatch):
        _install(monkeypatch, FakeResponse(500, {"message": "boom"}))

        with pytest.raises(StoreError, match="500"):
            store.list_bookings("b-1", "2024-11-26")

    def test_transport_error(self, store, monkeypatch):
        def broken(*args, **kwargs):
            raise requests.exceptions.ConnectionError("no route")

        monkeypatch.setattr(postgrest_store.requests, "request", broken)

        with pytest.raises(StoreError, match="no route"):
            store.get_booking("x")
