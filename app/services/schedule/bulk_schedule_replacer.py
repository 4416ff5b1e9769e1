# ============================================================================
# app/services/schedule/bulk_schedule_replacer.py
# Scoped wipe-and-replace of a provider's weekly schedule
# ============================================================================
from datetime import date, time, timedelta
from typing import Iterable, List, NamedTuple, Optional
from uuid import UUID, uuid4

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from app.core.result import Result, bad_request, not_found
from app.models.provider_schedule import ProviderSchedule
from app.services.appointment.conflict_checker import ConflictChecker
from app.services.provider.provider_service import ProviderService
from app.services.schedule.schedule_registry import ScheduleRegistry

logger = logging.getLogger(__name__)


class ScheduleSlot(NamedTuple):
    day_of_week: int
    start_time: time
    end_time: time


class BulkScheduleReplacer:

    @staticmethod
    def replace(
            db: Session,
            business_id: UUID,
            provider_id: UUID,
            entries: Iterable[ScheduleSlot],
            effective_from: Optional[date] = None
    ) -> Result[List[ProviderSchedule]]:
        """
        Replace the schedule of every weekday present in `entries`.

        Weekdays absent from the input keep their rows. For the listed
        weekdays, rows that started before `effective_from` (default today)
        are closed the day before it, so past and not-yet-replaced dates keep
        their minutes; rows starting on or after it are soft-deleted. All
        entries are validated before anything is written, and the whole
        change commits in one transaction.

        Returns the provider's full schedule after the change.
        """
        if not ProviderService.get_provider(db, business_id, provider_id):
            return not_found("Provider not found")

        entries = list(entries)
        if not entries:
            return bad_request("At least one schedule entry is required")

        for entry in entries:
            if not 0 <= entry.day_of_week <= 6:
                return bad_request(f"Invalid weekday {entry.day_of_week}, expected 0 (Sunday) to 6 (Saturday)")
            if entry.start_time >= entry.end_time:
                return bad_request(
                    f"Start time {entry.start_time.strftime('%H:%M')} must be before "
                    f"end time {entry.end_time.strftime('%H:%M')}"
                )

        weekdays = sorted({entry.day_of_week for entry in entries})
        valid_from = effective_from or date.today()

        try:
            ConflictChecker.lock_provider(db, provider_id)

            affected = db.query(ProviderSchedule).filter(
                ProviderSchedule.provider_id == provider_id,
                ProviderSchedule.is_deleted == False,
                ProviderSchedule.day_of_week.in_(weekdays),
                or_(ProviderSchedule.valid_until == None, ProviderSchedule.valid_until >= valid_from)
            )

            # Versions that started earlier keep their past and end the day before
            closed = affected.filter(ProviderSchedule.valid_from < valid_from).update(
                {ProviderSchedule.valid_until: valid_from - timedelta(days=1)}, synchronize_session=False
            )
            dropped = affected.filter(ProviderSchedule.valid_from >= valid_from).update(
                {ProviderSchedule.is_deleted: True}, synchronize_session=False
            )

            db.add_all([
                ProviderSchedule(
                    id=uuid4(),
                    provider_id=provider_id,
                    day_of_week=entry.day_of_week,
                    start_time=entry.start_time,
                    end_time=entry.end_time,
                    valid_from=valid_from,
                    valid_until=None,
                    is_deleted=False,
                )
                for entry in entries
            ])
            db.commit()

        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error replacing schedule of provider {provider_id}: {e}", exc_info=True)
            raise

        db.expire_all()
        logger.info(
            f"Replaced schedule of provider {provider_id} for weekdays {weekdays}: "
            f"{closed} rows closed on {valid_from - timedelta(days=1)}, {dropped} rows dropped, "
            f"{len(entries)} rows added"
        )

        return ScheduleRegistry.get_schedule_by_provider(db, business_id, provider_id)
