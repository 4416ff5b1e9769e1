"""
Pydantic schemas for appointment booking and listing
"""
from pydantic import BaseModel, Field, NaiveDatetime, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from app.models.appointment import AppointmentStatus


# ============================================================================
# Request Schemas (for incoming data)
# ============================================================================

class AppointmentCreate(BaseModel):
    """
    Booking request. A customer / service can be referenced by id or, when
    the id is omitted, created on the fly from a free-text name.
    """
    provider_id: UUID
    customer_id: Optional[UUID] = None
    customer_name: Optional[str] = Field(None, max_length=200)
    service_id: Optional[UUID] = None
    service_name: Optional[str] = Field(None, max_length=200)
    start_time: NaiveDatetime = Field(..., description="Business-local start, no timezone")
    end_time: NaiveDatetime = Field(..., description="Business-local end, no timezone")
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("end_time")
    @classmethod
    def end_after_start(cls, v: datetime, info) -> datetime:
        start_time = info.data.get("start_time")
        if start_time and v <= start_time:
            raise ValueError("End time must be after start time")
        return v


class AppointmentUpdate(AppointmentCreate):
    """Full overwrite of an appointment; status is kept when omitted"""
    status: Optional[AppointmentStatus] = None


# ============================================================================
# Response Schemas (for outgoing data)
# ============================================================================

class AppointmentResponse(BaseModel):
    id: UUID
    business_id: UUID
    provider_id: UUID
    provider_name: Optional[str] = None
    customer_id: Optional[UUID] = None
    customer_name: Optional[str] = None
    service_id: Optional[UUID] = None
    service_name: Optional[str] = None
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus
    notes: Optional[str] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_model(cls, appointment) -> "AppointmentResponse":
        return cls(
            id=appointment.id,
            business_id=appointment.business_id,
            provider_id=appointment.provider_id,
            provider_name=appointment.provider.name if appointment.provider else None,
            customer_id=appointment.customer_id,
            customer_name=appointment.customer.name if appointment.customer else None,
            service_id=appointment.service_id,
            service_name=appointment.service.name if appointment.service else None,
            start_time=appointment.start_time,
            end_time=appointment.end_time,
            status=appointment.status,
            notes=appointment.notes,
        )


class PagedAppointmentsResponse(BaseModel):
    items: List[AppointmentResponse] = Field(default_factory=list)
    page: int
    page_size: int
    total_count: int
    total_pages: int


class NextAppointmentResponse(BaseModel):
    """Upcoming appointment shown on the dashboard"""
    customer_name: str
    start_time: datetime
    end_time: datetime
    day: datetime
