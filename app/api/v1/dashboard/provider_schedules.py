# ============================================================================
# FILE: app/api/v1/dashboard/provider_schedules.py
# JWT authenticated endpoints - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from app.config.database import get_db
from app.api.dependencies import get_current_business_id
from app.api.errors import unwrap
from app.schemas.provider_schedule import BulkScheduleUpdate, ProviderScheduleResponse
from app.services.schedule.bulk_schedule_replacer import BulkScheduleReplacer, ScheduleSlot
from app.services.schedule.schedule_registry import ScheduleRegistry

router = APIRouter(prefix="/provider-schedules", tags=["dashboard-provider-schedules"])


@router.get("/provider/{provider_id}", response_model=List[ProviderScheduleResponse])
async def get_provider_schedule(
        provider_id: UUID = Path(..., description="The provider ID"),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    """Current weekly schedule of a provider, ordered by weekday and start."""
    return unwrap(ScheduleRegistry.get_schedule_by_provider(db, business_id, provider_id))


@router.put("/provider/{provider_id}/bulk-update", response_model=List[ProviderScheduleResponse])
async def bulk_update_provider_schedule(
        payload: BulkScheduleUpdate,
        provider_id: UUID = Path(..., description="The provider ID"),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    """
    Replace the schedule of the weekdays present in the request.
    Weekdays not mentioned keep their current entries.
    Returns 400 if any entry starts at or after its end.
    """
    entries = [
        ScheduleSlot(item.day_of_week, item.start_time, item.end_time)
        for item in payload.schedules
    ]
    return unwrap(BulkScheduleReplacer.replace(
        db,
        business_id=business_id,
        provider_id=provider_id,
        entries=entries,
        effective_from=payload.effective_from
    ))


@router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_schedule_entry(
        schedule_id: UUID = Path(..., description="The schedule entry ID"),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    unwrap(ScheduleRegistry.soft_delete(db, business_id, schedule_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
