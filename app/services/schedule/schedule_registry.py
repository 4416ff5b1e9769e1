# ============================================================================
# app/services/schedule/schedule_registry.py
# Resolves which weekly schedule rows are in effect for a date
# ============================================================================
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from app.config.settings import get_settings
from app.core.result import Result, not_found
from app.models.provider import Provider
from app.models.provider_schedule import ProviderSchedule
from app.services.provider.provider_service import ProviderService
from app.utils.intervals import iter_days, minutes_between, parse_hhmm, weekday_of

logger = logging.getLogger(__name__)


class ScheduleRegistry:
    """Time-versioned weekly schedules of providers"""

    @staticmethod
    def is_active_on(entry: ProviderSchedule, day: date) -> bool:
        return (
            entry.valid_from <= day
            and (entry.valid_until is None or entry.valid_until >= day)
            and entry.day_of_week == weekday_of(day)
        )

    @staticmethod
    def get_entries_for_date_range(
            db: Session,
            provider_ids: Iterable[UUID],
            start_date: date,
            end_date: date
    ) -> List[ProviderSchedule]:
        """
        All non-deleted rows whose validity window intersects [start_date, end_date].
        Callers pick the rows for each day with is_active_on().
        """
        provider_ids = list(provider_ids)
        if not provider_ids:
            return []

        return db.query(ProviderSchedule).filter(
            ProviderSchedule.provider_id.in_(provider_ids),
            ProviderSchedule.is_deleted == False,
            ProviderSchedule.valid_from <= end_date,
            or_(ProviderSchedule.valid_until.is_(None), ProviderSchedule.valid_until >= start_date)
        ).all()

    @staticmethod
    def get_active_entries(db: Session, provider_ids: Iterable[UUID], day: date) -> List[ProviderSchedule]:
        entries = ScheduleRegistry.get_entries_for_date_range(db, provider_ids, day, day)
        return [e for e in entries if ScheduleRegistry.is_active_on(e, day)]

    @staticmethod
    def scheduled_minutes_by_date(
            db: Session,
            provider_ids: Iterable[UUID],
            start_date: date,
            end_date: date
    ) -> Dict[date, int]:
        """
        Scheduled minutes for every day of the range, summed over all providers.

        Rows for the same weekday add up (split shifts). Rows from different
        schedule versions are not deduplicated, overlapping versions are only
        reported in the log.
        """
        entries = ScheduleRegistry.get_entries_for_date_range(db, provider_ids, start_date, end_date)

        minutes_by_date = {}
        for day in iter_days(start_date, end_date):
            active = [e for e in entries if ScheduleRegistry.is_active_on(e, day)]
            ScheduleRegistry._warn_on_overlapping_entries(active, day)
            minutes_by_date[day] = sum(minutes_between(e.start_time, e.end_time) for e in active)

        return minutes_by_date

    @staticmethod
    def scheduled_minutes_for_date(db: Session, provider_ids: Iterable[UUID], day: date) -> int:
        return ScheduleRegistry.scheduled_minutes_by_date(db, provider_ids, day, day)[day]

    @staticmethod
    def get_schedule_by_provider(
            db: Session,
            business_id: UUID,
            provider_id: UUID,
            as_of: Optional[date] = None
    ) -> Result[List[ProviderSchedule]]:
        """
        Non-deleted rows of a provider still in effect on `as_of` (default
        today) or starting later, ordered by weekday and start.
        """
        if not ProviderService.get_provider(db, business_id, provider_id):
            return not_found("Provider not found")

        as_of = as_of or date.today()
        entries = db.query(ProviderSchedule).filter(
            ProviderSchedule.provider_id == provider_id,
            ProviderSchedule.is_deleted == False,
            or_(ProviderSchedule.valid_until == None, ProviderSchedule.valid_until >= as_of)
        ).order_by(
            ProviderSchedule.day_of_week.asc(),
            ProviderSchedule.start_time.asc()
        ).all()

        return Result.ok(entries)

    @staticmethod
    def create_default_schedules(
            db: Session,
            provider_id: UUID,
            valid_from: Optional[date] = None,
            commit: bool = True
    ) -> List[ProviderSchedule]:
        """Weekly template created at onboarding (Monday to Friday, 09:00-18:00 by default)"""
        settings = get_settings()
        start_time = parse_hhmm(settings.DEFAULT_SCHEDULE_START)
        end_time = parse_hhmm(settings.DEFAULT_SCHEDULE_END)

        entries = [
            ProviderSchedule(
                id=uuid4(),
                provider_id=provider_id,
                day_of_week=day_of_week,
                start_time=start_time,
                end_time=end_time,
                valid_from=valid_from or date.today(),
                valid_until=None,
                is_deleted=False,
            )
            for day_of_week in settings.DEFAULT_SCHEDULE_WEEKDAYS
        ]
        db.add_all(entries)

        if commit:
            db.commit()
        else:
            db.flush()

        logger.info(f"Created {len(entries)} default schedule entries for provider {provider_id}")
        return entries

    @staticmethod
    def soft_delete(db: Session, business_id: UUID, schedule_id: UUID) -> Result[None]:
        entry = db.query(ProviderSchedule).join(
            Provider, Provider.id == ProviderSchedule.provider_id
        ).filter(
            ProviderSchedule.id == schedule_id,
            ProviderSchedule.is_deleted == False,
            Provider.business_id == business_id
        ).first()

        if not entry:
            return not_found("Schedule entry not found")

        try:
            entry.is_deleted = True
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error deleting schedule entry {schedule_id}: {e}", exc_info=True)
            raise

        logger.info(f"Soft-deleted schedule entry {schedule_id} of provider {entry.provider_id}")
        return Result.ok()

    @staticmethod
    def _warn_on_overlapping_entries(entries: List[ProviderSchedule], day: date) -> None:
        by_provider = defaultdict(list)
        for entry in entries:
            by_provider[entry.provider_id].append(entry)

        for provider_id, provider_entries in by_provider.items():
            provider_entries.sort(key=lambda e: e.start_time)
            for previous, current in zip(provider_entries, provider_entries[1:]):
                if current.start_time < previous.end_time:
                    logger.warning(
                        f"Overlapping schedule entries {previous.id} and {current.id} "
                        f"for provider {provider_id} on {day.isoformat()}; minutes are counted twice"
                    )
