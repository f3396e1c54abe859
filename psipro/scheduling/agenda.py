"""Day and month views over an in-memory appointment list."""

import calendar
from datetime import date
from typing import Iterable

from psipro.scheduling.models import (
    Appointment,
    AppointmentStatus,
    DayView,
    SlotState,
    SlotView,
)
from psipro.scheduling.overlap import appointment_starting_at, covering_appointment


def appointments_on(day: date, appointments: Iterable[Appointment]) -> list[Appointment]:
    """Non-cancelled appointments of *day*, earliest first."""
    return sorted(
        (a for a in appointments if a.date == day and a.status != AppointmentStatus.CANCELED),
        key=lambda a: a.start_time,
    )


def build_day_grid(day: date, slots: list[str], appointments: list[Appointment]) -> list[SlotView]:
    """Mark each slot label as free, an appointment start, or a continuation."""
    grid: list[SlotView] = []
    for label in slots:
        starting = appointment_starting_at(day, label, appointments)
        if starting is not None:
            grid.append(SlotView(time=label, state=SlotState.START, appointment_id=starting.id))
            continue
        running = covering_appointment(day, label, appointments)
        if running is not None:
            grid.append(
                SlotView(time=label, state=SlotState.CONTINUATION, appointment_id=running.id)
            )
        else:
            grid.append(SlotView(time=label))
    return grid


def build_day_view(day: date, slots: list[str], appointments: list[Appointment]) -> DayView:
    day_appointments = appointments_on(day, appointments)
    return DayView(
        date=day,
        slots=build_day_grid(day, slots, day_appointments),
        appointments=day_appointments,
    )


def days_with_appointments(
    appointments: Iterable[Appointment], year: int, month: int
) -> set[int]:
    """Days of the month holding at least one non-cancelled appointment."""
    _, last_day = calendar.monthrange(year, month)
    first, last = date(year, month, 1), date(year, month, last_day)
    return {
        a.date.day
        for a in appointments
        if first <= a.date <= last and a.status != AppointmentStatus.CANCELED
    }
