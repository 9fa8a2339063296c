"""
Tests for slot calculator.
"""

import pendulum

from barberbook.domain.models import BusinessHours, parse_date
from barberbook.domain.slot_calculator import SlotCalculator
from barberbook.domain.slot_grid import DEFAULT_SLOT_GRID, HOURLY_SLOT_GRID

TZ = "America/Sao_Paulo"

# A moment on a day that is never the one being booked
FAR_AWAY = pendulum.datetime(2024, 1, 10, 8, 0, tz=TZ)


def _hours(day: int, open_time: str = "09:00", close_time: str = "18:00", is_open: bool = True) -> BusinessHours:
    return BusinessHours(
        tenant_id="shop-1",
        day_of_week=day,
        is_open=is_open,
        open_time=open_time,
        close_time=close_time,
    )


class TestSlotCalculator:
    """Tests for SlotCalculator."""

    def test_configured_hours_and_existing_booking(self):
        """Open 09:00-18:00 with a booking at 10:30."""
        calculator = SlotCalculator()

        slots = calculator.available_slots(
            target_date=parse_date("2024-11-26"),  # Tuesday
            hours=_hours(2),
            occupied_times=["10:30"],
            now=FAR_AWAY,
        )

        assert slots == [
            "09:00", "09:45", "11:15", "12:00", "12:45", "13:30",
            "14:15", "15:00", "15:45", "16:30", "17:15", "18:00",
        ]

    def test_unconfigured_monday_is_closed(self):
        """Without saved hours Monday offers nothing."""
        calculator = SlotCalculator()

        slots = calculator.available_slots(
            target_date=parse_date("2024-11-25"),  # Monday
            hours=None,
            occupied_times=[],
            now=FAR_AWAY,
        )

        assert slots == []

    def test_unconfigured_other_day_uses_full_grid(self):
        """Without saved hours any other day offers the whole grid."""
        calculator = SlotCalculator()

        slots = calculator.available_slots(
            target_date=parse_date("2024-11-24"),  # Sunday
            hours=None,
            occupied_times=[],
            now=FAR_AWAY,
        )

        assert slots == list(DEFAULT_SLOT_GRID)

    def test_configured_closed_day(self):
        """A day saved as closed offers nothing, even a Tuesday."""
        calculator = SlotCalculator()

        slots = calculator.available_slots(
            target_date=parse_date("2024-11-26"),
            hours=_hours(2, is_open=False),
            occupied_times=[],
            now=FAR_AWAY,
        )

        assert slots == []

    def test_configured_monday_can_open(self):
        """Saved hours override the Monday fallback."""
        calculator = SlotCalculator()

        slots = calculator.available_slots(
            target_date=parse_date("2024-11-25"),
            hours=_hours(1, "09:00", "10:30"),
            occupied_times=[],
            now=FAR_AWAY,
        )

        assert slots == ["09:00", "09:45", "10:30"]

    def test_today_drops_passed_and_current_times(self):
        """On the current day a slot equal to now is no longer offered."""
        calculator = SlotCalculator()
        now = pendulum.datetime(2024, 11, 26, 12, 0, tz=TZ)

        slots = calculator.available_slots(
            target_date=parse_date("2024-11-26"),
            hours=_hours(2),
            occupied_times=[],
            now=now,
        )

        assert slots[0] == "12:45"
        assert all(slot > "12:00" for slot in slots)

    def test_future_day_ignores_current_time(self):
        calculator = SlotCalculator()
        now = pendulum.datetime(2024, 11, 25, 19, 30, tz=TZ)

        slots = calculator.available_slots(
            target_date=parse_date("2024-11-26"),
            hours=_hours(2),
            occupied_times=[],
            now=now,
        )

        assert slots[0] == "09:00"

    def test_exact_match_only(self):
        """Occupied times only block the identical grid value."""
        calculator = SlotCalculator()

        slots = calculator.available_slots(
            target_date=parse_date("2024-11-26"),
            hours=None,
            occupied_times=["10:00", "10:30"],
            now=FAR_AWAY,
        )

        assert "10:30" not in slots
        assert "09:45" in slots
        assert "11:15" in slots

    def test_custom_grid_and_fallback(self):
        """Grid and fallback closed days are configurable."""
        calculator = SlotCalculator(slot_grid=HOURLY_SLOT_GRID, fallback_closed_weekdays=[0])

        sunday = calculator.available_slots(
            target_date=parse_date("2024-11-24"),
            hours=None,
            occupied_times=[],
            now=FAR_AWAY,
        )
        monday = calculator.available_slots(
            target_date=parse_date("2024-11-25"),
            hours=None,
            occupied_times=["12:00"],
            now=FAR_AWAY,
        )

        assert sunday == []
        assert monday == [slot for slot in HOURLY_SLOT_GRID if slot != "12:00"]

    def test_results_stay_within_grid_and_window(self):
        """Across a whole week every slot is a grid value inside the window."""
        calculator = SlotCalculator()
        start = pendulum.date(2024, 11, 24)

        for offset in range(7):
            target = start.add(days=offset)
            hours = _hours(offset, "10:00", "16:30")
            slots = calculator.available_slots(
                target_date=target,
                hours=hours,
                occupied_times=["12:00"],
                now=FAR_AWAY,
            )

            assert slots == sorted(slots)
            assert all(slot in DEFAULT_SLOT_GRID for slot in slots)
            assert all("10:00" <= slot <= "16:30" for slot in slots)
            assert "12:00" not in slots

    def test_is_past(self):
        calculator = SlotCalculator()
        now = pendulum.datetime(2024, 11, 26, 12, 0, tz=TZ)

        assert calculator.is_past(parse_date("2024-11-25"), now)
        assert not calculator.is_past(parse_date("2024-11-26"), now)
