"""Tests for the scoped wipe-and-replace of weekly schedules."""
import uuid
from datetime import date, time, timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from app.core.result import ErrorKind
from app.models import ProviderSchedule
from app.services.calendar.availability_aggregator import AvailabilityAggregator
from app.services.schedule.bulk_schedule_replacer import BulkScheduleReplacer, ScheduleSlot
from app.services.schedule.schedule_registry import ScheduleRegistry

from factories import MONDAY, SUNDAY, add_schedule, make_provider


def live_rows(db, provider):
    return db.query(ProviderSchedule).filter(
        ProviderSchedule.provider_id == provider.id,
        ProviderSchedule.is_deleted == False
    ).all()


@pytest.fixture
def weekly(db, provider):
    """Monday to Friday 09:00-17:00, plus a Saturday morning"""
    entries = [add_schedule(db, provider, day, time(9, 0), time(17, 0)) for day in range(1, 6)]
    entries.append(add_schedule(db, provider, 6, time(9, 0), time(12, 0)))
    return entries


class TestReplace:

    def test_only_listed_weekdays_change(self, db, business, provider, weekly):
        untouched = {e.id for e in weekly if e.day_of_week != 1}

        result = BulkScheduleReplacer.replace(
            db, business.id, provider.id,
            [ScheduleSlot(1, time(10, 0), time(14, 0))],
            effective_from=MONDAY
        )

        assert result.is_ok
        rows = live_rows(db, provider)
        assert {e.id for e in rows if e.day_of_week != 1} == untouched
        assert all(e.valid_until is None for e in rows if e.day_of_week != 1)
        [new_monday] = [e for e in rows if e.day_of_week == 1 and e.valid_from == MONDAY]
        assert (new_monday.start_time, new_monday.end_time) == (time(10, 0), time(14, 0))
        assert new_monday.valid_until is None

    def test_returns_full_schedule(self, db, business, provider, weekly):
        result = BulkScheduleReplacer.replace(
            db, business.id, provider.id, [ScheduleSlot(1, time(10, 0), time(14, 0))]
        )

        assert [(e.day_of_week, e.start_time) for e in result.value] == [
            (1, time(10, 0)), (2, time(9, 0)), (3, time(9, 0)), (4, time(9, 0)), (5, time(9, 0)), (6, time(9, 0))
        ]

    def test_split_shift_for_one_day(self, db, business, provider, weekly):
        BulkScheduleReplacer.replace(
            db, business.id, provider.id,
            [ScheduleSlot(2, time(8, 0), time(12, 0)), ScheduleSlot(2, time(13, 0), time(17, 0))],
            effective_from=date(2026, 1, 1)
        )

        tuesday = date(2026, 1, 6)
        assert ScheduleRegistry.scheduled_minutes_for_date(db, [provider.id], tuesday) == 480

    def test_earlier_version_is_closed_the_day_before(self, db, business, provider, weekly):
        old_monday = weekly[0]

        BulkScheduleReplacer.replace(
            db, business.id, provider.id, [ScheduleSlot(1, time(10, 0), time(14, 0))], effective_from=MONDAY
        )

        db.refresh(old_monday)
        assert old_monday.is_deleted is False
        assert old_monday.valid_from == date(2025, 1, 1)
        assert old_monday.valid_until == SUNDAY

    def test_version_starting_on_or_after_the_new_date_is_dropped(self, db, business, provider):
        planned = add_schedule(db, provider, 1, time(8, 0), time(12, 0), valid_from=MONDAY + timedelta(days=7))

        BulkScheduleReplacer.replace(
            db, business.id, provider.id, [ScheduleSlot(1, time(10, 0), time(14, 0))], effective_from=MONDAY
        )

        db.refresh(planned)
        assert planned.is_deleted is True

    def test_expired_version_is_left_alone(self, db, business, provider):
        expired = add_schedule(db, provider, 1, time(9, 0), time(17, 0), valid_until=date(2025, 6, 30))

        BulkScheduleReplacer.replace(
            db, business.id, provider.id, [ScheduleSlot(1, time(10, 0), time(14, 0))], effective_from=MONDAY
        )

        db.refresh(expired)
        assert (expired.is_deleted, expired.valid_until) == (False, date(2025, 6, 30))

    def test_dates_before_the_new_version_keep_their_minutes(self, db, business, provider, weekly):
        effective = MONDAY + timedelta(days=14)
        before = AvailabilityAggregator.calendar_summary(db, business.id, MONDAY, MONDAY + timedelta(days=7))

        BulkScheduleReplacer.replace(
            db, business.id, provider.id, [ScheduleSlot(1, time(10, 0), time(14, 0))], effective_from=effective
        )

        after = AvailabilityAggregator.calendar_summary(db, business.id, MONDAY, MONDAY + timedelta(days=7))
        assert [d.total_scheduled_minutes for d in after] == [d.total_scheduled_minutes for d in before]
        assert after[0].total_scheduled_minutes == 480
        assert ScheduleRegistry.scheduled_minutes_for_date(db, [provider.id], effective) == 240

    def test_past_dates_keep_their_minutes(self, db, business, provider, weekly):
        BulkScheduleReplacer.replace(
            db, business.id, provider.id, [ScheduleSlot(1, time(10, 0), time(14, 0))],
            effective_from=MONDAY + timedelta(days=7)
        )

        [past] = AvailabilityAggregator.calendar_summary(db, business.id, MONDAY, MONDAY)
        assert past.total_scheduled_minutes == 480

    def test_start_not_before_end_is_rejected_without_changes(self, db, business, provider, weekly):
        before = {(e.id, e.day_of_week) for e in live_rows(db, provider)}

        result = BulkScheduleReplacer.replace(
            db, business.id, provider.id,
            [ScheduleSlot(1, time(10, 0), time(14, 0)), ScheduleSlot(2, time(14, 0), time(14, 0))]
        )

        assert result.error.kind == ErrorKind.BAD_REQUEST
        assert {(e.id, e.day_of_week) for e in live_rows(db, provider)} == before

    def test_invalid_weekday(self, db, business, provider, weekly):
        result = BulkScheduleReplacer.replace(db, business.id, provider.id, [ScheduleSlot(7, time(9, 0), time(10, 0))])

        assert result.error.kind == ErrorKind.BAD_REQUEST

    def test_empty_request(self, db, business, provider, weekly):
        result = BulkScheduleReplacer.replace(db, business.id, provider.id, [])

        assert result.error.kind == ErrorKind.BAD_REQUEST
        assert len(live_rows(db, provider)) == 6

    def test_unknown_provider(self, db, business):
        result = BulkScheduleReplacer.replace(db, business.id, uuid.uuid4(), [ScheduleSlot(1, time(9, 0), time(10, 0))])

        assert result.error.kind == ErrorKind.NOT_FOUND

    def test_provider_of_another_business(self, db, business, other_business):
        foreign = make_provider(db, other_business)
        add_schedule(db, foreign, 1, time(9, 0), time(17, 0))

        result = BulkScheduleReplacer.replace(db, business.id, foreign.id, [ScheduleSlot(1, time(9, 0), time(10, 0))])

        assert result.error.kind == ErrorKind.NOT_FOUND
        assert len(live_rows(db, foreign)) == 1

    def test_failed_commit_leaves_old_schedule(self, db, business, provider, weekly):
        with patch.object(db, "commit", side_effect=OperationalError("COMMIT", {}, Exception("server closed"))):
            with pytest.raises(OperationalError):
                BulkScheduleReplacer.replace(
                    db, business.id, provider.id, [ScheduleSlot(1, time(10, 0), time(14, 0))]
                )

        rows = live_rows(db, provider)
        assert len(rows) == 6
        assert [(e.start_time, e.end_time) for e in rows if e.day_of_week == 1] == [(time(9, 0), time(17, 0))]
