"""Time-of-day labels and the bookable slot grid."""

import re

_TIME_RE = re.compile(r"^(\d{2}):(\d{2})$")

MINUTES_PER_DAY = 24 * 60


def parse_time(label: str) -> int:
    """Parse a zero-padded ``HH:MM`` label into minutes since midnight.

    ``24:00`` is accepted as the end of the day.
    """
    m = _TIME_RE.match(label or "")
    if not m:
        raise ValueError(f"Malformed time label: {label!r}")
    hours, minutes = int(m.group(1)), int(m.group(2))
    if minutes > 59 or hours * 60 + minutes > MINUTES_PER_DAY:
        raise ValueError(f"Time out of range: {label!r}")
    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    """Format minutes since midnight as ``HH:MM``."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def add_minutes(start: str, duration: int) -> str:
    """Return the label *duration* minutes after *start*."""
    return format_minutes(parse_time(start) + duration)


def generate_slots(start_hour: int, end_hour: int, slot_minutes: int) -> list[str]:
    """Generate the ordered start labels for a day.

    A label is emitted every *slot_minutes* from ``start_hour:00`` while it is
    still before ``end_hour:00``. When the window is not an exact multiple of
    the slot length the last slot runs past *end_hour*.
    """
    if not 0 <= start_hour < end_hour <= 24:
        raise ValueError(
            f"Invalid hour range: start_hour={start_hour}, end_hour={end_hour}"
        )
    if slot_minutes <= 0:
        raise ValueError(f"slot_minutes must be positive, got {slot_minutes}")

    slots: list[str] = []
    current = start_hour * 60
    end = end_hour * 60
    while current < end:
        slots.append(format_minutes(current))
        current += slot_minutes
    return slots
