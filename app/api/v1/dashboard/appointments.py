# ============================================================================
# FILE: app/api/v1/dashboard/appointments.py
# JWT authenticated endpoints - thin HTTP layer
# IMPORTANT: Specific routes MUST come before parameterized routes
# ============================================================================
from fastapi import APIRouter, Depends, Query, Path, Response, status
from sqlalchemy.orm import Session
from datetime import date, datetime
from math import ceil
from typing import List, Optional
from uuid import UUID

from app.config.database import get_db
from app.api.dependencies import get_current_business_id
from app.api.errors import unwrap
from app.schemas.appointment import (
    AppointmentCreate,
    AppointmentUpdate,
    AppointmentResponse,
    PagedAppointmentsResponse,
    NextAppointmentResponse
)
from app.services.appointment.appointment_ledger import AppointmentLedger

router = APIRouter(prefix="/appointments", tags=["dashboard-appointments"])


@router.get("", response_model=List[AppointmentResponse])
async def list_appointments(
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    """All appointments of your business, earliest first."""
    appointments = AppointmentLedger.list_by_business(db, business_id)
    return [AppointmentResponse.from_model(a) for a in appointments]


@router.get("/range", response_model=List[AppointmentResponse])
async def list_appointments_in_range(
        start: datetime = Query(..., description="Range start (inclusive)"),
        end: datetime = Query(..., description="Range end (exclusive)"),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    """Appointments starting in [start, end), earliest first."""
    appointments = AppointmentLedger.list_by_date_range(db, business_id, start, end)
    return [AppointmentResponse.from_model(a) for a in appointments]


@router.get("/next", response_model=Optional[NextAppointmentResponse])
async def get_next_appointment(
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    """The next upcoming appointment, or null when nothing is booked."""
    appointment = AppointmentLedger.get_next(db, business_id)
    if not appointment:
        return None

    return NextAppointmentResponse(
        customer_name=appointment.customer.name if appointment.customer else "",
        start_time=appointment.start_time,
        end_time=appointment.end_time,
        day=datetime.combine(appointment.start_time.date(), datetime.min.time()),
    )


@router.get("/trend")
async def get_appointments_trend(
        day: date = Query(..., description="Day to compare against the previous one"),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    return {
        "date": day.isoformat(),
        "trend": AppointmentLedger.get_trend(db, business_id, day)
    }


@router.get("/date/{day}", response_model=PagedAppointmentsResponse)
async def list_appointments_for_day(
        day: date = Path(..., description="Day (YYYY-MM-DD)"),
        page: int = Query(1, ge=1),
        page_size: int = Query(5, ge=1, le=100),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    result = AppointmentLedger.get_paged_by_date(db, business_id, day, page, page_size)
    return PagedAppointmentsResponse(
        items=[AppointmentResponse.from_model(a) for a in result.items],
        page=page,
        page_size=page_size,
        total_count=result.total_count,
        total_pages=ceil(result.total_count / page_size)
    )


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_appointment(
        payload: AppointmentCreate,
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    """
    Book an appointment in Pending status.
    Returns 409 if the provider is already booked in that time range.
    """
    appointment = unwrap(AppointmentLedger.create(
        db,
        business_id=business_id,
        provider_id=payload.provider_id,
        start_time=payload.start_time,
        end_time=payload.end_time,
        customer_id=payload.customer_id,
        customer_name=payload.customer_name,
        service_id=payload.service_id,
        service_name=payload.service_name,
        notes=payload.notes
    ))
    return AppointmentResponse.from_model(appointment)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    appointment = unwrap(AppointmentLedger.get_by_id(db, business_id, appointment_id))
    return AppointmentResponse.from_model(appointment)


@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
        payload: AppointmentUpdate,
        appointment_id: UUID = Path(..., description="The appointment ID"),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    """
    Overwrite an appointment. The appointment never conflicts with itself,
    so shortening or extending it in place is allowed.
    """
    appointment = unwrap(AppointmentLedger.update(
        db,
        business_id=business_id,
        appointment_id=appointment_id,
        provider_id=payload.provider_id,
        start_time=payload.start_time,
        end_time=payload.end_time,
        status=payload.status,
        customer_id=payload.customer_id,
        customer_name=payload.customer_name,
        service_id=payload.service_id,
        service_name=payload.service_name,
        notes=payload.notes
    ))
    return AppointmentResponse.from_model(appointment)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    unwrap(AppointmentLedger.soft_delete(db, business_id, appointment_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
