"""Weekly recurrence expansion for series bookings."""

import logging
import uuid
from datetime import timedelta
from typing import Callable, Optional, Sequence

from psipro.scheduling.models import (
    Appointment,
    AppointmentStatus,
    RecurrenceExpansion,
)
from psipro.scheduling.overlap import has_conflict

logger = logging.getLogger(__name__)

WEEK = timedelta(days=7)


def _new_id() -> str:
    return str(uuid.uuid4())


def expand_weekly(
    base: Appointment,
    occurrence_count: int,
    existing: Sequence[Appointment],
    id_factory: Optional[Callable[[], str]] = None,
) -> RecurrenceExpansion:
    """Expand *base* into up to *occurrence_count* weekly occurrences.

    The base is returned first with its user-entered fields intact. Later
    weeks are checked against *existing* only (not against siblings built in
    this call); a conflicting week is skipped and reported in
    ``skipped_dates`` but still advances the calendar, so the series always
    spans *occurrence_count* weeks.
    """
    if occurrence_count < 1:
        raise ValueError(f"occurrence_count must be >= 1, got {occurrence_count}")

    new_id = id_factory or _new_id
    recurrence_id = new_id()

    first = base.model_copy(update={"recurrence_id": recurrence_id})
    appointments = [first]
    skipped = []

    current = base.date
    for _ in range(1, occurrence_count):
        current = current + WEEK
        if has_conflict(current, base.start_time, base.end_time, existing):
            logger.info(
                "Skipping recurrence %s on %s: slot %s-%s taken",
                recurrence_id, current, base.start_time, base.end_time,
            )
            skipped.append(current)
            continue

        appointments.append(
            base.model_copy(
                update={
                    "id": new_id(),
                    "date": current,
                    "notes": "",
                    "status": AppointmentStatus.SCHEDULED,
                    "is_paid": False,
                    "clinical_record": None,
                    "absence_justification": None,
                    "recurrence_id": recurrence_id,
                }
            )
        )

    return RecurrenceExpansion(
        recurrence_id=recurrence_id,
        appointments=appointments,
        skipped_dates=skipped,
    )
