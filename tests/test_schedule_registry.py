"""Tests for resolving versioned weekly schedules."""
import logging
import uuid
from datetime import date, time
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from app.core.result import ErrorKind
from app.models import ProviderSchedule
from app.services.provider.provider_service import ProviderService
from app.services.schedule.schedule_registry import ScheduleRegistry

from factories import MONDAY, SUNDAY, TUESDAY, add_schedule, make_provider


class TestActiveEntries:

    def test_matches_weekday(self, db, provider):
        monday = add_schedule(db, provider, 1, time(9, 0), time(17, 0))
        add_schedule(db, provider, 2, time(9, 0), time(17, 0))

        entries = ScheduleRegistry.get_active_entries(db, [provider.id], MONDAY)

        assert [e.id for e in entries] == [monday.id]

    def test_validity_window_is_inclusive(self, db, provider):
        add_schedule(db, provider, 1, time(9, 0), time(17, 0), valid_from=MONDAY, valid_until=MONDAY)

        assert len(ScheduleRegistry.get_active_entries(db, [provider.id], MONDAY)) == 1

    def test_not_yet_valid_and_expired(self, db, provider):
        add_schedule(db, provider, 1, time(9, 0), time(17, 0), valid_from=date(2026, 1, 6))
        add_schedule(db, provider, 1, time(9, 0), time(17, 0),
                     valid_from=date(2025, 1, 1), valid_until=date(2026, 1, 4))

        assert ScheduleRegistry.get_active_entries(db, [provider.id], MONDAY) == []

    def test_deleted_entries_are_ignored(self, db, provider):
        entry = add_schedule(db, provider, 1, time(9, 0), time(17, 0))
        entry.is_deleted = True
        db.commit()

        assert ScheduleRegistry.get_active_entries(db, [provider.id], MONDAY) == []

    def test_empty_provider_set(self, db):
        assert ScheduleRegistry.get_entries_for_date_range(db, [], MONDAY, TUESDAY) == []


class TestScheduledMinutes:

    def test_split_shifts_add_up(self, db, provider):
        add_schedule(db, provider, 1, time(9, 0), time(13, 0))
        add_schedule(db, provider, 1, time(14, 0), time(18, 0))

        assert ScheduleRegistry.scheduled_minutes_for_date(db, [provider.id], MONDAY) == 480

    def test_summed_across_providers(self, db, business, provider):
        colleague = make_provider(db, business, name="Luis Gomez")
        add_schedule(db, provider, 1, time(9, 0), time(17, 0))
        add_schedule(db, colleague, 1, time(10, 0), time(12, 0))

        assert ScheduleRegistry.scheduled_minutes_for_date(db, [provider.id, colleague.id], MONDAY) == 600

    def test_day_without_schedule(self, db, provider):
        add_schedule(db, provider, 1, time(9, 0), time(17, 0))

        assert ScheduleRegistry.scheduled_minutes_for_date(db, [provider.id], SUNDAY) == 0

    def test_every_day_of_range_is_present(self, db, provider):
        add_schedule(db, provider, 1, time(9, 0), time(17, 0))

        minutes = ScheduleRegistry.scheduled_minutes_by_date(db, [provider.id], SUNDAY, TUESDAY)

        assert minutes == {SUNDAY: 0, MONDAY: 480, TUESDAY: 0}

    def test_version_change_inside_range(self, db, provider):
        add_schedule(db, provider, 1, time(9, 0), time(17, 0),
                     valid_from=date(2025, 1, 1), valid_until=date(2026, 1, 10))
        add_schedule(db, provider, 1, time(9, 0), time(13, 0), valid_from=date(2026, 1, 11))

        minutes = ScheduleRegistry.scheduled_minutes_by_date(db, [provider.id], MONDAY, date(2026, 1, 12))

        assert minutes[MONDAY] == 480
        assert minutes[date(2026, 1, 12)] == 240

    def test_overlapping_versions_are_counted_twice_and_logged(self, db, provider, caplog):
        add_schedule(db, provider, 1, time(9, 0), time(17, 0))
        add_schedule(db, provider, 1, time(9, 0), time(17, 0), valid_from=date(2026, 1, 1))

        with caplog.at_level(logging.WARNING, logger="app.services.schedule.schedule_registry"):
            minutes = ScheduleRegistry.scheduled_minutes_for_date(db, [provider.id], MONDAY)

        assert minutes == 960
        assert "Overlapping schedule entries" in caplog.text


class TestProviderSchedule:

    def test_ordered_by_weekday_then_start(self, db, business, provider):
        add_schedule(db, provider, 3, time(9, 0), time(12, 0))
        add_schedule(db, provider, 1, time(14, 0), time(18, 0))
        add_schedule(db, provider, 1, time(9, 0), time(13, 0))

        result = ScheduleRegistry.get_schedule_by_provider(db, business.id, provider.id)

        assert [(e.day_of_week, e.start_time) for e in result.value] == [
            (1, time(9, 0)), (1, time(14, 0)), (3, time(9, 0))
        ]

    def test_provider_of_another_business(self, db, business, other_business):
        foreign = make_provider(db, other_business)

        result = ScheduleRegistry.get_schedule_by_provider(db, business.id, foreign.id)

        assert result.error.kind == ErrorKind.NOT_FOUND

    def test_expired_versions_are_not_listed(self, db, business, provider):
        add_schedule(db, provider, 1, time(9, 0), time(17, 0), valid_until=SUNDAY)
        add_schedule(db, provider, 1, time(10, 0), time(14, 0), valid_from=MONDAY)

        result = ScheduleRegistry.get_schedule_by_provider(db, business.id, provider.id, as_of=MONDAY)
        on_sunday = ScheduleRegistry.get_schedule_by_provider(db, business.id, provider.id, as_of=SUNDAY)

        assert [e.start_time for e in result.value] == [time(10, 0)]
        assert [e.start_time for e in on_sunday.value] == [time(9, 0), time(10, 0)]

    def test_soft_delete_single_entry(self, db, business, provider):
        entry = add_schedule(db, provider, 1, time(9, 0), time(17, 0))

        assert ScheduleRegistry.soft_delete(db, business.id, entry.id).is_ok
        assert ScheduleRegistry.get_schedule_by_provider(db, business.id, provider.id).value == []

    def test_soft_delete_checks_ownership(self, db, business, other_business):
        entry = add_schedule(db, make_provider(db, other_business), 1, time(9, 0), time(17, 0))

        assert ScheduleRegistry.soft_delete(db, business.id, entry.id).error.kind == ErrorKind.NOT_FOUND
        assert ScheduleRegistry.soft_delete(db, business.id, uuid.uuid4()).error.kind == ErrorKind.NOT_FOUND

    def test_soft_delete_failed_commit_is_rolled_back(self, db, business, provider):
        entry = add_schedule(db, provider, 1, time(9, 0), time(17, 0))

        with patch.object(db, "commit", side_effect=OperationalError("COMMIT", {}, Exception("server closed"))):
            with pytest.raises(OperationalError):
                ScheduleRegistry.soft_delete(db, business.id, entry.id)

        db.refresh(entry)
        assert entry.is_deleted is False


class TestDefaultSchedule:

    def test_new_provider_gets_weekday_template(self, db, business):
        provider = ProviderService.create_provider(db, business.id, "Carla Diaz", schedule_valid_from=MONDAY)

        entries = db.query(ProviderSchedule).filter(ProviderSchedule.provider_id == provider.id).all()

        assert sorted(e.day_of_week for e in entries) == [1, 2, 3, 4, 5]
        assert all(e.start_time == time(9, 0) and e.end_time == time(18, 0) for e in entries)
        assert all(e.valid_from == MONDAY and e.valid_until is None for e in entries)
        assert ScheduleRegistry.scheduled_minutes_for_date(db, [provider.id], MONDAY) == 540
        assert ScheduleRegistry.scheduled_minutes_for_date(db, [provider.id], SUNDAY) == 0
