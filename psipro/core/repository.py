"""SQLAlchemy-backed record store for appointments."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from psipro.core.models import SessionRecord
from psipro.core.store import RecordStore
from psipro.errors import StorageError
from psipro.scheduling.legacy import embed_justification, split_legacy_notes
from psipro.scheduling.models import (
    Appointment,
    AppointmentStatus,
    AppointmentType,
    ClinicalNotes,
)

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(context: str) -> Iterator[None]:
    """Wrap backend failures into StorageError, keeping the cause."""
    try:
        yield
    except IntegrityError as exc:
        logger.error("Integrity error in %s: %s", context, exc)
        raise StorageError(
            "A record with these unique values already exists",
            context=context,
            code="UNIQUE_VIOLATION",
        ) from exc
    except SQLAlchemyError as exc:
        logger.error("Storage error in %s: %s", context, exc)
        raise StorageError(str(exc) or type(exc).__name__, context=context) from exc
    except ValueError as exc:
        # Includes pydantic ValidationError from row mapping.
        logger.error("Unreadable row in %s: %s", context, exc)
        raise StorageError(
            "A stored record could not be read",
            context=context,
            code="CORRUPT_ROW",
        ) from exc


def record_to_appointment(row: SessionRecord) -> Appointment:
    """Map a ``sessions`` row to the in-memory model.

    Absent rows still carrying the legacy justification marker in ``notes``
    are migrated into ``absence_justification``. Other statuses never carry a
    justification and keep their notes untouched.

    Raises:
        ValueError: Status, type or clinical record outside the model
    """
    status = AppointmentStatus(row.status or AppointmentStatus.SCHEDULED.value)
    notes = row.notes or ""
    justification = None
    if status == AppointmentStatus.ABSENT:
        legacy_justification, remainder = split_legacy_notes(notes)
        if legacy_justification is not None:
            notes = remainder
        justification = row.absence_justification or legacy_justification

    return Appointment(
        id=row.id,
        patient_id=row.patient_id,
        date=row.date,
        start_time=row.start_time,
        end_time=row.end_time,
        status=status,
        type=AppointmentType(row.type or AppointmentType.ONLINE.value),
        notes=notes,
        absence_justification=justification or None,
        clinical_record=(
            ClinicalNotes.model_validate(row.clinical_record) if row.clinical_record else None
        ),
        value=row.value or 0.0,
        is_paid=bool(row.is_paid),
        recurrence_id=row.recurrence_id,
    )


def appointment_to_values(
    appointment: Appointment, embed_legacy_justification: bool = False
) -> dict[str, Any]:
    """Column values for *appointment* (everything except ``id``/``user_id``)."""
    notes = appointment.notes
    if embed_legacy_justification and appointment.absence_justification:
        notes = embed_justification(appointment.absence_justification, notes)
    return {
        "patient_id": appointment.patient_id,
        "date": appointment.date,
        "start_time": appointment.start_time,
        "end_time": appointment.end_time,
        "status": appointment.status.value,
        "type": appointment.type.value,
        "notes": notes,
        "absence_justification": appointment.absence_justification,
        "clinical_record": (
            appointment.clinical_record.model_dump() if appointment.clinical_record else None
        ),
        "value": appointment.value,
        "is_paid": appointment.is_paid,
        "recurrence_id": appointment.recurrence_id,
    }


class AppointmentRepository(RecordStore):
    def __init__(self, session: AsyncSession, embed_legacy_justification: bool = False):
        self.session = session
        self.embed_legacy_justification = embed_legacy_justification

    async def list_appointments(self, owner_id: str) -> list[Appointment]:
        stmt = (
            select(SessionRecord)
            .where(SessionRecord.user_id == owner_id)
            .order_by(SessionRecord.date, SessionRecord.start_time)
        )
        with _storage_errors("list_appointments"):
            result = await self.session.execute(stmt)
            return [record_to_appointment(r) for r in result.scalars().all()]

    async def get_appointment(self, owner_id: str, appointment_id: str) -> Optional[Appointment]:
        stmt = select(SessionRecord).where(
            SessionRecord.id == appointment_id, SessionRecord.user_id == owner_id
        )
        with _storage_errors("get_appointment"):
            result = await self.session.execute(stmt)
            row = result.scalar_one_or_none()
            return record_to_appointment(row) if row else None

    async def upsert_appointment(self, owner_id: str, appointment: Appointment) -> None:
        with _storage_errors("upsert_appointment"):
            await self._stage(owner_id, appointment, "upsert_appointment")
            await self.session.flush()

    async def upsert_appointments(self, owner_id: str, appointments: Sequence[Appointment]) -> None:
        with _storage_errors("upsert_appointments"):
            for appointment in appointments:
                await self._stage(owner_id, appointment, "upsert_appointments")
            await self.session.flush()

    async def delete_appointment(self, owner_id: str, appointment_id: str) -> bool:
        stmt = delete(SessionRecord).where(
            SessionRecord.id == appointment_id, SessionRecord.user_id == owner_id
        )
        with _storage_errors("delete_appointment"):
            result = await self.session.execute(stmt)
            await self.session.flush()
        return bool(result.rowcount)

    async def _stage(self, owner_id: str, appointment: Appointment, context: str) -> None:
        values = appointment_to_values(appointment, self.embed_legacy_justification)
        row = await self.session.get(SessionRecord, appointment.id)
        if row is None:
            self.session.add(SessionRecord(id=appointment.id, user_id=owner_id, **values))
            return
        if row.user_id != owner_id:
            raise StorageError(
                "Permission denied for this record",
                context=context,
                code="PERMISSION_DENIED",
            )
        for k, v in values.items():
            setattr(row, k, v)
