"""Pydantic models for the scheduling core."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AppointmentStatus(str, Enum):
    """Appointment lifecycle statuses."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELED = "canceled"
    ABSENT = "absent"


class AppointmentType(str, Enum):
    """Session modality. Display only, no effect on scheduling."""

    ONLINE = "ONLINE"
    PRESENCIAL = "PRESENCIAL"


class SlotState(str, Enum):
    """How a grid slot renders in the day view."""

    FREE = "free"
    START = "start"
    CONTINUATION = "continuation"


class ClinicalNotes(BaseModel):
    """Structured clinical record attached to a session.

    Legacy rows store the same fields in camelCase; both spellings validate.
    """

    model_config = ConfigDict(
        alias_generator=AliasGenerator(validation_alias=to_camel),
        populate_by_name=True,
    )

    key_points: str = ""
    summary: str = ""
    feelings: str = ""
    behaviors: str = ""
    quotes: str = ""
    names: str = ""
    interventions: str = ""
    evolution: str = ""
    insights: str = ""
    mood: str = ""
    technical_register: str = ""


class Appointment(BaseModel):
    """A booked session."""

    id: str
    patient_id: str
    date: date
    start_time: str = Field(description="HH:MM, 24-hour, zero padded")
    end_time: str = Field(description="HH:MM, 24-hour, zero padded")
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    type: AppointmentType = AppointmentType.ONLINE
    notes: str = ""
    absence_justification: Optional[str] = None
    clinical_record: Optional[ClinicalNotes] = None
    value: float = 0.0
    is_paid: bool = False
    recurrence_id: Optional[str] = None


class AppointmentRequest(BaseModel):
    """Booking or edit request coming from the presentation layer.

    Either ``end_time`` or ``duration_minutes`` must be given; the service
    validates the combination before touching the store.
    """

    patient_id: str = ""
    date: date
    start_time: str
    end_time: Optional[str] = None
    duration_minutes: Optional[int] = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    type: AppointmentType = AppointmentType.ONLINE
    notes: str = ""
    value: Optional[float] = None
    is_paid: bool = False


class RecurrenceExpansion(BaseModel):
    """Output of a weekly expansion."""

    recurrence_id: str
    appointments: list[Appointment] = []
    skipped_dates: list[date] = []


class BookingResult(BaseModel):
    """Result of a create/update call."""

    appointments: list[Appointment] = []
    recurrence_id: Optional[str] = None
    skipped_dates: list[date] = []

    @property
    def primary(self) -> Appointment:
        return self.appointments[0]


class SlotView(BaseModel):
    """A single labelled row of the day grid."""

    time: str
    state: SlotState = SlotState.FREE
    appointment_id: Optional[str] = None


class DayView(BaseModel):
    """Everything the presentation layer needs to render one day."""

    date: date
    slots: list[SlotView] = []
    appointments: list[Appointment] = []
