"""Scheduling service: booking, editing and rendering appointments."""

import logging
import uuid
from datetime import date
from typing import Optional, Union

from psipro.billing.finance import MonthlySummary, monthly_summary
from psipro.config import Settings, get_settings
from psipro.core.auth import AuthProvider
from psipro.core.store import RecordStore
from psipro.errors import (
    AppointmentNotFoundError,
    AppointmentValidationError,
    ConflictError,
)
from psipro.scheduling.agenda import build_day_view, days_with_appointments
from psipro.scheduling.models import (
    Appointment,
    AppointmentRequest,
    AppointmentStatus,
    BookingResult,
    DayView,
)
from psipro.scheduling.overlap import find_conflict
from psipro.scheduling.recurrence import expand_weekly
from psipro.scheduling.timegrid import (
    MINUTES_PER_DAY,
    format_minutes,
    generate_slots,
    parse_time,
)

logger = logging.getLogger(__name__)


class SchedulingService:
    """Books and maintains appointments for the authenticated practitioner.

    Every call resolves the owner, loads the owner's full collection from the
    record store, computes in memory and writes back. Conflict checking and
    the write are not atomic; concurrent bookings of one slot are possible.
    """

    def __init__(
        self,
        store: RecordStore,
        auth: AuthProvider,
        settings: Optional[Settings] = None,
    ) -> None:
        self.store = store
        self.auth = auth
        self.settings = settings or get_settings()

    # ------------------------------------------------------------------
    # Booking
    # ------------------------------------------------------------------

    async def create_or_update(
        self,
        request: AppointmentRequest,
        *,
        appointment_id: Optional[str] = None,
        is_recurring: bool = False,
        occurrence_count: Optional[int] = None,
    ) -> BookingResult:
        """Create a booking (optionally a weekly series) or edit one in place.

        Raises:
            AppointmentValidationError: Malformed request, nothing written
            AppointmentNotFoundError: *appointment_id* is not in the collection
            ConflictError: The primary occurrence overlaps another appointment
        """
        start_time, end_time = self._resolve_times(request)
        if occurrence_count is not None and occurrence_count < 1:
            raise AppointmentValidationError(
                "occurrence_count must be at least 1", field="occurrence_count"
            )

        owner_id = self.auth.current_owner_id()
        existing = await self.store.list_appointments(owner_id)

        current: Optional[Appointment] = None
        if appointment_id is not None:
            current = next((a for a in existing if a.id == appointment_id), None)
            if current is None:
                raise AppointmentNotFoundError(f"Appointment not found: {appointment_id}")

        conflict = find_conflict(
            request.date, start_time, end_time, existing, exclude_id=appointment_id
        )
        if conflict is not None:
            logger.info(
                "Conflict booking %s %s-%s: overlaps %s (%s-%s)",
                request.date, start_time, end_time,
                conflict.id, conflict.start_time, conflict.end_time,
            )
            raise ConflictError(
                "An appointment is already scheduled in this time range",
                conflicting_id=conflict.id,
            )

        appointment = Appointment(
            id=appointment_id or str(uuid.uuid4()),
            patient_id=request.patient_id,
            date=request.date,
            start_time=start_time,
            end_time=end_time,
            status=request.status,
            type=request.type,
            notes=request.notes,
            value=request.value if request.value is not None else self.settings.default_session_value,
            is_paid=request.is_paid,
            recurrence_id=current.recurrence_id if current else None,
            clinical_record=current.clinical_record if current else None,
            absence_justification=(
                current.absence_justification
                if current and request.status == AppointmentStatus.ABSENT
                else None
            ),
        )

        if is_recurring and current is None:
            count = occurrence_count or self.settings.recurrence_occurrences
            expansion = expand_weekly(appointment, count, existing)
            await self.store.upsert_appointments(owner_id, expansion.appointments)
            logger.info(
                "Booked series %s: %d/%d occurrences from %s",
                expansion.recurrence_id, len(expansion.appointments), count, appointment.date,
            )
            return BookingResult(
                appointments=expansion.appointments,
                recurrence_id=expansion.recurrence_id,
                skipped_dates=expansion.skipped_dates,
            )

        await self.store.upsert_appointment(owner_id, appointment)
        logger.info(
            "%s appointment %s on %s %s-%s",
            "Updated" if current else "Booked",
            appointment.id, appointment.date, start_time, end_time,
        )
        return BookingResult(appointments=[appointment], recurrence_id=appointment.recurrence_id)

    async def delete(self, appointment_id: str) -> None:
        """Remove one appointment. Nothing else is cascaded."""
        owner_id = self.auth.current_owner_id()
        if not await self.store.delete_appointment(owner_id, appointment_id):
            raise AppointmentNotFoundError(f"Appointment not found: {appointment_id}")
        logger.info("Deleted appointment %s", appointment_id)

    # ------------------------------------------------------------------
    # In-place updates
    # ------------------------------------------------------------------

    async def set_status(
        self,
        appointment_id: str,
        status: Union[AppointmentStatus, str],
        justification: Optional[str] = None,
    ) -> Appointment:
        """Change the status; an absence needs a non-blank justification.

        The justification replaces any previous one and is cleared when the
        status moves away from ``absent``.
        """
        try:
            status = AppointmentStatus(status)
        except ValueError as e:
            raise AppointmentValidationError(f"Unknown status: {status}", field="status") from e
        reason = (justification or "").strip()
        if status == AppointmentStatus.ABSENT and not reason:
            raise AppointmentValidationError(
                "A justification is required to record an absence", field="justification"
            )

        owner_id = self.auth.current_owner_id()
        appointment = await self._get(owner_id, appointment_id)
        updated = appointment.model_copy(
            update={
                "status": status,
                "absence_justification": reason if status == AppointmentStatus.ABSENT else None,
            }
        )
        await self.store.upsert_appointment(owner_id, updated)
        return updated

    async def toggle_paid(self, appointment_id: str) -> Appointment:
        owner_id = self.auth.current_owner_id()
        appointment = await self._get(owner_id, appointment_id)
        updated = appointment.model_copy(update={"is_paid": not appointment.is_paid})
        await self.store.upsert_appointment(owner_id, updated)
        return updated

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    async def day_view(
        self,
        day: date,
        start_hour: Optional[int] = None,
        end_hour: Optional[int] = None,
        slot_minutes: Optional[int] = None,
    ) -> DayView:
        """Slot grid and appointments of *day*, grid defaults from settings."""
        slots = self.slots(start_hour, end_hour, slot_minutes)
        owner_id = self.auth.current_owner_id()
        appointments = await self.store.list_appointments(owner_id)
        return build_day_view(day, slots, appointments)

    def slots(
        self,
        start_hour: Optional[int] = None,
        end_hour: Optional[int] = None,
        slot_minutes: Optional[int] = None,
    ) -> list[str]:
        try:
            return generate_slots(
                self.settings.agenda_start_hour if start_hour is None else start_hour,
                self.settings.agenda_end_hour if end_hour is None else end_hour,
                self.settings.slot_minutes if slot_minutes is None else slot_minutes,
            )
        except ValueError as e:
            raise AppointmentValidationError(str(e), field="slot_grid") from e

    async def list_appointments(self, patient_id: Optional[str] = None) -> list[Appointment]:
        """Owner's appointments, newest first, optionally for one patient."""
        owner_id = self.auth.current_owner_id()
        appointments = await self.store.list_appointments(owner_id)
        if patient_id is not None:
            appointments = [a for a in appointments if a.patient_id == patient_id]
        return sorted(appointments, key=lambda a: (a.date, a.start_time), reverse=True)

    async def month_markers(self, year: int, month: int) -> list[int]:
        """Days of the month that hold at least one active appointment."""
        if not 1 <= month <= 12:
            raise AppointmentValidationError(f"Invalid month: {month}", field="month")
        owner_id = self.auth.current_owner_id()
        appointments = await self.store.list_appointments(owner_id)
        return sorted(days_with_appointments(appointments, year, month))

    async def monthly_summary(self, year: int, month: int) -> MonthlySummary:
        if not 1 <= month <= 12:
            raise AppointmentValidationError(f"Invalid month: {month}", field="month")
        owner_id = self.auth.current_owner_id()
        appointments = await self.store.list_appointments(owner_id)
        return monthly_summary(appointments, year, month)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get(self, owner_id: str, appointment_id: str) -> Appointment:
        appointment = await self.store.get_appointment(owner_id, appointment_id)
        if appointment is None:
            raise AppointmentNotFoundError(f"Appointment not found: {appointment_id}")
        return appointment

    def _resolve_times(self, request: AppointmentRequest) -> tuple[str, str]:
        """Validate the request and return normalised ``(start, end)`` labels.

        ``duration_minutes`` wins over ``end_time`` when both are given.
        """
        if not request.patient_id.strip():
            raise AppointmentValidationError("A patient must be selected", field="patient_id")

        try:
            start = parse_time(request.start_time)
        except ValueError as e:
            raise AppointmentValidationError(str(e), field="start_time") from e

        if request.duration_minutes is not None:
            lo, hi = self.settings.min_duration_minutes, self.settings.max_duration_minutes
            if not lo <= request.duration_minutes <= hi:
                raise AppointmentValidationError(
                    f"Duration must be between {lo} and {hi} minutes",
                    field="duration_minutes",
                )
            end = start + request.duration_minutes
        elif request.end_time is not None:
            try:
                end = parse_time(request.end_time)
            except ValueError as e:
                raise AppointmentValidationError(str(e), field="end_time") from e
        else:
            raise AppointmentValidationError(
                "Either end_time or duration_minutes is required", field="end_time"
            )

        if end <= start:
            raise AppointmentValidationError("End time must be after start time", field="end_time")
        if end > MINUTES_PER_DAY:
            raise AppointmentValidationError("Appointment must end by 24:00", field="end_time")
        return format_minutes(start), format_minutes(end)
