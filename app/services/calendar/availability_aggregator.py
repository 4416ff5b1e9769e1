# ============================================================================
# app/services/calendar/availability_aggregator.py
# Calendar summary and day detail: scheduled vs. booked minutes
# ============================================================================
from collections import defaultdict
from datetime import date, datetime, time
from math import ceil
from typing import List, Optional, Union
from uuid import UUID

from sqlalchemy.orm import Session
import logging

from app.config.settings import get_settings
from app.models.appointment import Appointment
from app.schemas.calendar import AppointmentDetail, CalendarDaySummary, DayDetail
from app.services.appointment.appointment_ledger import AppointmentLedger
from app.services.provider.provider_service import ProviderService
from app.services.schedule.schedule_registry import ScheduleRegistry
from app.utils.intervals import iter_days, minutes_between, parse_hhmm

logger = logging.getLogger(__name__)

NO_CUSTOMER = "No customer assigned"
NO_PROVIDER = "No provider"


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


class AvailabilityAggregator:
    """Read-only reporting over schedules and appointments"""

    @staticmethod
    def calendar_summary(
            db: Session,
            business_id: UUID,
            start_date: Union[date, datetime],
            end_date: Union[date, datetime]
    ) -> List[CalendarDaySummary]:
        """
        One row per calendar day of [start_date, end_date], inclusive.

        Occupied minutes are bucketed by the date an appointment starts on.
        A business without active providers gets all-zero rows.
        """
        start_date = _as_date(start_date)
        end_date = _as_date(end_date)

        if end_date < start_date:
            return []

        provider_ids = ProviderService.get_active_provider_ids(db, business_id)
        if not provider_ids:
            logger.info(f"Business {business_id} has no active providers, returning empty calendar")
            return [CalendarDaySummary(date=day) for day in iter_days(start_date, end_date)]

        scheduled_by_date = ScheduleRegistry.scheduled_minutes_by_date(db, provider_ids, start_date, end_date)

        counts = defaultdict(int)
        occupied = defaultdict(int)
        for appointment in AppointmentLedger.list_for_days(db, business_id, start_date, end_date):
            day = appointment.start_time.date()
            counts[day] += 1
            occupied[day] += minutes_between(appointment.start_time, appointment.end_time)

        summary = []
        for day in iter_days(start_date, end_date):
            scheduled = scheduled_by_date.get(day, 0)
            summary.append(CalendarDaySummary(
                date=day,
                appointments_count=counts[day],
                total_scheduled_minutes=scheduled,
                total_occupied_minutes=occupied[day],
                total_available_minutes=max(0, scheduled - occupied[day]),
            ))

        return summary

    @staticmethod
    def day_detail(
            db: Session,
            business_id: UUID,
            day: Union[date, datetime],
            page: int = 1,
            page_size: Optional[int] = None,
            status: Optional[str] = None,
            start_time: Optional[Union[str, time]] = None,
            search_text: Optional[str] = None
    ) -> DayDetail:
        """
        Totals, minutes and trend are computed over the whole day; filters only
        narrow the paged list. Rows are ordered by start time, latest first.
        """
        day = _as_date(day)
        page = max(page, 1)
        if page_size is None or page_size < 1:
            page_size = get_settings().DEFAULT_PAGE_SIZE

        appointments = AppointmentLedger.list_for_days(db, business_id, day, day)

        total_appointments = len(appointments)
        total_occupied = sum(minutes_between(a.start_time, a.end_time) for a in appointments)

        provider_ids = ProviderService.get_active_provider_ids(db, business_id)
        total_scheduled = ScheduleRegistry.scheduled_minutes_for_date(db, provider_ids, day)

        trend = AppointmentLedger.get_trend(db, business_id, day)

        filtered = AvailabilityAggregator._apply_filters(appointments, status, start_time, search_text)
        total_count = len(filtered)
        offset = (page - 1) * page_size

        return DayDetail(
            date=day,
            day_of_week=day.strftime("%A"),
            total_appointments=total_appointments,
            appointments_trend=trend,
            total_scheduled_minutes=total_scheduled,
            total_occupied_minutes=total_occupied,
            total_available_minutes=max(0, total_scheduled - total_occupied),
            appointments=[
                AvailabilityAggregator._to_detail(a) for a in filtered[offset:offset + page_size]
            ],
            current_page=page,
            page_size=page_size,
            total_pages=ceil(total_count / page_size),
            total_count=total_count,
        )

    @staticmethod
    def _apply_filters(
            appointments: List[Appointment],
            status: Optional[str],
            start_time: Optional[Union[str, time]],
            search_text: Optional[str]
    ) -> List[Appointment]:
        filtered = sorted(appointments, key=lambda a: a.start_time, reverse=True)

        if status and status.strip():
            wanted = status.strip().lower()
            filtered = [a for a in filtered if a.status.value.lower() == wanted]

        if isinstance(start_time, str):
            start_time = parse_hhmm(start_time) if start_time.strip() else None
        if start_time is not None:
            filtered = [
                a for a in filtered
                if a.start_time.time().replace(microsecond=0) == start_time.replace(microsecond=0)
            ]

        if search_text and search_text.strip():
            needle = search_text.strip().lower()
            filtered = [
                a for a in filtered
                if any(needle in name.lower() for name in (
                    a.customer.name if a.customer else None,
                    a.provider.name if a.provider else None,
                    a.service.name if a.service else None,
                ) if name)
            ]

        return filtered

    @staticmethod
    def _to_detail(appointment: Appointment) -> AppointmentDetail:
        return AppointmentDetail(
            id=appointment.id,
            customer_name=appointment.customer.name if appointment.customer else NO_CUSTOMER,
            provider_name=appointment.provider.name if appointment.provider else NO_PROVIDER,
            service_name=appointment.service.name if appointment.service else None,
            status=appointment.status.value,
            start_time=appointment.start_time.strftime("%H:%M"),
            end_time=appointment.end_time.strftime("%H:%M"),
            duration_minutes=minutes_between(appointment.start_time, appointment.end_time),
            notes=appointment.notes,
        )
