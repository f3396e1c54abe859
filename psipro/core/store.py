"""Record store contract consumed by the scheduling core."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from psipro.scheduling.models import Appointment


class RecordStore(ABC):
    """Owner-scoped CRUD over appointments.

    Every method takes the owner id; records of other owners must never be
    visible or writable through it.
    """

    @abstractmethod
    async def list_appointments(self, owner_id: str) -> list[Appointment]:
        """Return the whole appointment collection of *owner_id*.

        Raises:
            StorageError: If the backend call fails
        """
        pass

    @abstractmethod
    async def get_appointment(self, owner_id: str, appointment_id: str) -> Optional[Appointment]:
        """Return one appointment or None when it is absent or not owned."""
        pass

    @abstractmethod
    async def upsert_appointment(self, owner_id: str, appointment: Appointment) -> None:
        """Insert or replace one appointment."""
        pass

    @abstractmethod
    async def upsert_appointments(self, owner_id: str, appointments: Sequence[Appointment]) -> None:
        """Insert or replace a batch as a single persistence call."""
        pass

    @abstractmethod
    async def delete_appointment(self, owner_id: str, appointment_id: str) -> bool:
        """Delete one appointment. Returns False when nothing was deleted."""
        pass
