# app/schemas/calendar.py
from pydantic import BaseModel, Field
from typing import List, Optional
import datetime
from uuid import UUID


class CalendarDaySummary(BaseModel):
    """Month / week view cell"""
    date: datetime.date
    appointments_count: int = 0
    total_scheduled_minutes: int = 0
    total_occupied_minutes: int = 0
    total_available_minutes: int = 0


class AppointmentDetail(BaseModel):
    id: UUID
    customer_name: str
    provider_name: str
    service_name: Optional[str] = None
    status: str
    start_time: str = Field(..., description="HH:MM")
    end_time: str = Field(..., description="HH:MM")
    duration_minutes: int
    notes: Optional[str] = None


class DayDetail(BaseModel):
    """
    Totals, minutes and trend describe the whole day; `appointments`,
    `total_count` and `total_pages` describe the filtered, paged view.
    """
    date: datetime.date
    day_of_week: str
    total_appointments: int
    appointments_trend: int
    total_scheduled_minutes: int
    total_occupied_minutes: int
    total_available_minutes: int
    appointments: List[AppointmentDetail] = Field(default_factory=list)

    current_page: int
    page_size: int
    total_pages: int
    total_count: int
