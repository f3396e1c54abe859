"""Interval overlap detection between appointments of the same day.

All intervals are half-open ``[start, end)``. Times are zero-padded ``HH:MM``
labels, so string comparison is chronological.
"""

from datetime import date
from typing import Iterable, Optional

from psipro.scheduling.models import Appointment, AppointmentStatus


def intervals_overlap(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """True when ``[start_a, end_a)`` and ``[start_b, end_b)`` intersect.

    Touching endpoints (``end_a == start_b``) do not overlap.
    """
    return start_a < end_b and end_a > start_b


def _active_on(
    day: date,
    appointments: Iterable[Appointment],
    exclude_id: Optional[str] = None,
) -> Iterable[Appointment]:
    for appt in appointments:
        if appt.date != day:
            continue
        if appt.status == AppointmentStatus.CANCELED:
            continue
        if exclude_id is not None and appt.id == exclude_id:
            continue
        yield appt


def find_conflict(
    day: date,
    start_time: str,
    end_time: str,
    existing: Iterable[Appointment],
    exclude_id: Optional[str] = None,
) -> Optional[Appointment]:
    """Return the first appointment overlapping the candidate, if any."""
    for appt in _active_on(day, existing, exclude_id):
        if intervals_overlap(start_time, end_time, appt.start_time, appt.end_time):
            return appt
    return None


def has_conflict(
    day: date,
    start_time: str,
    end_time: str,
    existing: Iterable[Appointment],
    exclude_id: Optional[str] = None,
) -> bool:
    """Check a candidate interval against the existing collection.

    Cancelled appointments, other dates and *exclude_id* (the appointment
    being edited) are ignored.
    """
    return find_conflict(day, start_time, end_time, existing, exclude_id) is not None


def appointment_starting_at(
    day: date, time: str, existing: Iterable[Appointment]
) -> Optional[Appointment]:
    """Non-cancelled appointment whose own start label is *time*."""
    for appt in _active_on(day, existing):
        if appt.start_time == time:
            return appt
    return None


def covering_appointment(
    day: date, time: str, existing: Iterable[Appointment]
) -> Optional[Appointment]:
    """Appointment that began before *time* and is still running at it."""
    for appt in _active_on(day, existing):
        if appt.start_time < time < appt.end_time:
            return appt
    return None


def is_covered_by_earlier(day: date, time: str, existing: Iterable[Appointment]) -> bool:
    return covering_appointment(day, time, existing) is not None
