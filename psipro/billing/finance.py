"""Monthly revenue summary over the appointment collection."""

from typing import Iterable

from pydantic import BaseModel

from psipro.scheduling.models import Appointment, AppointmentStatus


class MonthlySummary(BaseModel):
    """Paid revenue and attendance for one calendar month."""

    year: int
    month: int
    total_revenue: float = 0.0
    completed_count: int = 0
    paid_appointments: list[Appointment] = []


def monthly_summary(appointments: Iterable[Appointment], year: int, month: int) -> MonthlySummary:
    """Summarise *appointments* falling in ``year-month``.

    Revenue counts paid appointments whatever their status; the attendance
    figure counts completed ones whether paid or not.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")

    in_month = [a for a in appointments if a.date.year == year and a.date.month == month]
    paid = [a for a in in_month if a.is_paid]

    return MonthlySummary(
        year=year,
        month=month,
        total_revenue=sum(a.value or 0.0 for a in paid),
        completed_count=sum(1 for a in in_month if a.status == AppointmentStatus.COMPLETED),
        paid_appointments=sorted(paid, key=lambda a: (a.date, a.start_time), reverse=True),
    )
