"""Scheduling core for PsiPro."""

from psipro.scheduling.models import (
    Appointment,
    AppointmentRequest,
    AppointmentStatus,
    AppointmentType,
    BookingResult,
    ClinicalNotes,
    DayView,
    RecurrenceExpansion,
    SlotState,
    SlotView,
)
from psipro.scheduling.overlap import has_conflict, is_covered_by_earlier
from psipro.scheduling.recurrence import expand_weekly
from psipro.scheduling.timegrid import generate_slots

__all__ = [
    "Appointment",
    "AppointmentRequest",
    "AppointmentStatus",
    "AppointmentType",
    "BookingResult",
    "ClinicalNotes",
    "DayView",
    "RecurrenceExpansion",
    "SlotState",
    "SlotView",
    "expand_weekly",
    "generate_slots",
    "has_conflict",
    "is_covered_by_earlier",
]
