# ============================================================================
# FILE: app/api/v1/dashboard/calendar.py
# JWT authenticated endpoints - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.orm import Session
from datetime import date, time
from typing import List, Optional
from uuid import UUID

from app.config.database import get_db
from app.api.dependencies import get_current_business_id
from app.schemas.calendar import CalendarDaySummary, DayDetail
from app.services.calendar.availability_aggregator import AvailabilityAggregator

router = APIRouter(prefix="/calendar", tags=["dashboard-calendar"])


@router.get("/summary", response_model=List[CalendarDaySummary])
async def get_calendar_summary(
        start_date: date = Query(..., description="First day (inclusive)"),
        end_date: date = Query(..., description="Last day (inclusive)"),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    """
    Month / week view: for each day the number of appointments and the
    scheduled, occupied and available minutes.
    """
    return AvailabilityAggregator.calendar_summary(db, business_id, start_date, end_date)


@router.get("/day/{day}", response_model=DayDetail)
async def get_day_detail(
        day: date = Path(..., description="Day (YYYY-MM-DD)"),
        page: int = Query(1, description="1-based page, values below 1 mean the first page"),
        page_size: Optional[int] = Query(None, description="Rows per page, values below 1 use the default"),
        status: Optional[str] = Query(None, description="Status, case-insensitive (e.g. pending)"),
        start_time: Optional[time] = Query(None, description="Exact start time of day, HH:MM or HH:MM:SS"),
        search_text: Optional[str] = Query(None, description="Matches customer, provider or service name"),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    """Appointments of one day, latest first, with whole-day totals and trend."""
    return AvailabilityAggregator.day_detail(
        db,
        business_id,
        day,
        page=page,
        page_size=page_size,
        status=status,
        start_time=start_time,
        search_text=search_text
    )
