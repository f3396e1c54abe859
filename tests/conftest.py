"""Pytest configuration and fixtures."""

import uuid
from datetime import date
from typing import Optional, Sequence

import pytest

from psipro.config import Settings
from psipro.core.auth import StaticAuthProvider
from psipro.core.store import RecordStore
from psipro.scheduling.models import (
    Appointment,
    AppointmentStatus,
    AppointmentType,
)
from psipro.scheduling.scheduler import SchedulingService

OWNER_ID = "bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb"
OTHER_OWNER_ID = "cccccccc-cccc-cccc-cccc-cccccccccccc"
PATIENT_ID = "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa"


# ---------------------------------------------------------------------------
# In-memory record store
# ---------------------------------------------------------------------------

class InMemoryRecordStore(RecordStore):
    """Owner-scoped dict store that records every write call."""

    def __init__(self):
        self.rows: dict[str, tuple[str, Appointment]] = {}
        self.calls: list[tuple[str, int]] = []

    def seed(self, owner_id: str, *appointments: Appointment) -> None:
        for a in appointments:
            self.rows[a.id] = (owner_id, a)

    async def list_appointments(self, owner_id: str) -> list[Appointment]:
        return [a for owner, a in self.rows.values() if owner == owner_id]

    async def get_appointment(self, owner_id: str, appointment_id: str) -> Optional[Appointment]:
        owner, appt = self.rows.get(appointment_id, (None, None))
        return appt if owner == owner_id else None

    async def upsert_appointment(self, owner_id: str, appointment: Appointment) -> None:
        self.calls.append(("upsert_appointment", 1))
        self.rows[appointment.id] = (owner_id, appointment)

    async def upsert_appointments(self, owner_id: str, appointments: Sequence[Appointment]) -> None:
        self.calls.append(("upsert_appointments", len(appointments)))
        for a in appointments:
            self.rows[a.id] = (owner_id, a)

    async def delete_appointment(self, owner_id: str, appointment_id: str) -> bool:
        self.calls.append(("delete_appointment", 1))
        owner, _ = self.rows.get(appointment_id, (None, None))
        if owner != owner_id:
            return False
        del self.rows[appointment_id]
        return True


def make_appt(
    day: date,
    start: str,
    end: str,
    status: AppointmentStatus = AppointmentStatus.SCHEDULED,
    patient_id: str = PATIENT_ID,
    appt_id: Optional[str] = None,
    **kwargs,
) -> Appointment:
    return Appointment(
        id=appt_id or str(uuid.uuid4()),
        patient_id=patient_id,
        date=day,
        start_time=start,
        end_time=end,
        status=status,
        type=kwargs.pop("type", AppointmentType.ONLINE),
        value=kwargs.pop("value", 150.0),
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite://",
        jwt_secret="test-secret",
    )


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def svc(store, settings):
    return SchedulingService(store, StaticAuthProvider(OWNER_ID), settings)
