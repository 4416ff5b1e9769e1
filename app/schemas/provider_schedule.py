# app/schemas/provider_schedule.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, time
from uuid import UUID


class ScheduleItem(BaseModel):
    """One working block of a weekday (0=Sunday ... 6=Saturday)"""
    day_of_week: int = Field(..., description="0=Sunday ... 6=Saturday")
    start_time: time = Field(..., description="HH:MM or HH:MM:SS")
    end_time: time = Field(..., description="HH:MM or HH:MM:SS")


class BulkScheduleUpdate(BaseModel):
    """
    Weekdays present in `schedules` are replaced, the others are left alone.
    The new rows take effect on `effective_from` (today when omitted).
    """
    schedules: List[ScheduleItem] = Field(default_factory=list)
    effective_from: Optional[date] = None


class ProviderScheduleResponse(BaseModel):
    id: UUID
    provider_id: UUID
    day_of_week: int
    start_time: time
    end_time: time
    valid_from: date
    valid_until: Optional[date] = None

    class Config:
        from_attributes = True
