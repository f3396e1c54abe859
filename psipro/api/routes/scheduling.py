"""Scheduling API endpoints: day grid, booking, attendance and payments."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field

from psipro.api.dependencies import get_scheduling_service
from psipro.billing.finance import MonthlySummary
from psipro.scheduling.models import (
    Appointment,
    AppointmentRequest,
    AppointmentStatus,
    BookingResult,
    DayView,
)
from psipro.scheduling.scheduler import SchedulingService

router = APIRouter(prefix="/scheduling")


# ---------------------------------------------------------------------------
# Request/response schemas
# ---------------------------------------------------------------------------

class BookingCreate(AppointmentRequest):
    is_recurring: bool = False
    occurrence_count: Optional[int] = Field(
        default=None,
        description="Weekly occurrences to attempt (defaults to settings)",
    )


class StatusUpdate(BaseModel):
    status: AppointmentStatus
    justification: Optional[str] = None


class MonthMarkers(BaseModel):
    year: int
    month: int
    days: list[int] = []


# ---------------------------------------------------------------------------
# Grid and views
# ---------------------------------------------------------------------------

@router.get("/slots", response_model=list[str])
async def get_slots(
    start_hour: Optional[int] = Query(None),
    end_hour: Optional[int] = Query(None),
    slot_minutes: Optional[int] = Query(None),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Bookable start labels for a day."""
    return service.slots(start_hour, end_hour, slot_minutes)


@router.get("/day/{day}", response_model=DayView)
async def get_day(
    day: date,
    start_hour: Optional[int] = Query(None),
    end_hour: Optional[int] = Query(None),
    slot_minutes: Optional[int] = Query(None),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return await service.day_view(day, start_hour, end_hour, slot_minutes)


@router.get("/calendar/{year}/{month}", response_model=MonthMarkers)
async def get_month_markers(
    year: int,
    month: int,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Days of the month with at least one active appointment."""
    days = await service.month_markers(year, month)
    return MonthMarkers(year=year, month=month, days=days)


# ---------------------------------------------------------------------------
# Appointments
# ---------------------------------------------------------------------------

@router.get("/appointments", response_model=list[Appointment])
async def list_appointments(
    patient_id: Optional[str] = Query(None),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return await service.list_appointments(patient_id=patient_id)


@router.post("/appointments", response_model=BookingResult, status_code=201)
async def create_appointment(
    body: BookingCreate,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Book one appointment or a weekly series."""
    request = AppointmentRequest(**body.model_dump(exclude={"is_recurring", "occurrence_count"}))
    return await service.create_or_update(
        request,
        is_recurring=body.is_recurring,
        occurrence_count=body.occurrence_count,
    )


@router.put("/appointments/{appointment_id}", response_model=Appointment)
async def update_appointment(
    appointment_id: str,
    body: AppointmentRequest,
    service: SchedulingService = Depends(get_scheduling_service),
):
    result = await service.create_or_update(body, appointment_id=appointment_id)
    return result.primary


@router.delete("/appointments/{appointment_id}", status_code=204)
async def delete_appointment(
    appointment_id: str,
    service: SchedulingService = Depends(get_scheduling_service),
):
    await service.delete(appointment_id)
    return Response(status_code=204)


@router.post("/appointments/{appointment_id}/status", response_model=Appointment)
async def set_status(
    appointment_id: str,
    body: StatusUpdate,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Record attendance, absence (with justification) or cancellation."""
    return await service.set_status(appointment_id, body.status, body.justification)


@router.post("/appointments/{appointment_id}/toggle-paid", response_model=Appointment)
async def toggle_paid(
    appointment_id: str,
    service: SchedulingService = Depends(get_scheduling_service),
):
    return await service.toggle_paid(appointment_id)


# ---------------------------------------------------------------------------
# Finance
# ---------------------------------------------------------------------------

@router.get("/finance/{year}/{month}", response_model=MonthlySummary)
async def get_monthly_summary(
    year: int,
    month: int,
    service: SchedulingService = Depends(get_scheduling_service),
):
    return await service.monthly_summary(year, month)
