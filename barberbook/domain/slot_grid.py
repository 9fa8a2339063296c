"""
The fixed grid of bookable times of day.
"""

import re
from typing import Iterable, List

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

# Grid offered on the public booking page
DEFAULT_SLOT_GRID = (
    "09:00", "09:45", "10:30", "11:15", "12:00", "12:45",
    "13:30", "14:15", "15:00", "15:45", "16:30", "17:15",
    "18:00", "18:45", "19:15", "20:00",
)

# Coarser grid used by the old owner dashboard
HOURLY_SLOT_GRID = (
    "09:00", "10:00", "11:00", "12:00", "13:00",
    "14:00", "15:00", "16:00", "17:00",
)


def is_valid_time(value: str) -> bool:
    """Check that a value is a zero-padded HH:MM string."""
    return bool(TIME_PATTERN.match(value))


def _to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def _from_minutes(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


def build_slot_grid(start: str, end: str, step_minutes: int) -> List[str]:
    """
    Generate a grid from ``start`` up to and including ``end``.

    Example: build_slot_grid("09:00", "11:00", 45) -> ["09:00", "09:45", "10:30"]

    Raises:
        ValueError: If the bounds are malformed or the step is not positive
    """
    if not (is_valid_time(start) and is_valid_time(end)):
        raise ValueError(f"Grid bounds must be HH:MM, got {start!r} and {end!r}")
    if step_minutes <= 0:
        raise ValueError("step_minutes must be greater than zero")

    grid: List[str] = []
    current = _to_minutes(start)
    last = _to_minutes(end)

    while current <= last:
        grid.append(_from_minutes(current))
        current += step_minutes

    return grid


def validate_grid(values: Iterable[str]) -> List[str]:
    """
    Check HH:MM format, drop duplicates and sort ascending.

    Raises:
        ValueError: If any value is malformed or the grid is empty
    """
    grid = list(values)
    invalid = [value for value in grid if not isinstance(value, str) or not is_valid_time(value)]
    if invalid:
        raise ValueError(f"Slot grid values must be HH:MM, got {invalid}")
    if not grid:
        raise ValueError("Slot grid must contain at least one time")

    return sorted(set(grid))
