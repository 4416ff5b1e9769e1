"""Tests for provider-scoped overlap detection."""
from app.services.appointment.conflict_checker import ConflictChecker
from app.utils.intervals import TimeInterval

from factories import MONDAY, add_appointment, at, make_provider


class TestHasConflict:

    def test_no_appointments(self, db, provider):
        assert not ConflictChecker.has_conflict(db, provider.id, TimeInterval(at(MONDAY, 9), at(MONDAY, 10)))

    def test_overlapping_appointment(self, db, business, provider):
        add_appointment(db, business, provider, at(MONDAY, 9), at(MONDAY, 10))

        assert ConflictChecker.has_conflict(db, provider.id, TimeInterval(at(MONDAY, 9, 30), at(MONDAY, 10, 30)))

    def test_back_to_back_is_allowed(self, db, business, provider):
        add_appointment(db, business, provider, at(MONDAY, 9), at(MONDAY, 10))

        assert not ConflictChecker.has_conflict(db, provider.id, TimeInterval(at(MONDAY, 10), at(MONDAY, 11)))
        assert not ConflictChecker.has_conflict(db, provider.id, TimeInterval(at(MONDAY, 8), at(MONDAY, 9)))

    def test_deleted_appointments_are_ignored(self, db, business, provider):
        add_appointment(db, business, provider, at(MONDAY, 9), at(MONDAY, 10), is_deleted=True)

        assert not ConflictChecker.has_conflict(db, provider.id, TimeInterval(at(MONDAY, 9), at(MONDAY, 10)))

    def test_other_providers_are_ignored(self, db, business, provider):
        colleague = make_provider(db, business, name="Luis Gomez")
        add_appointment(db, business, colleague, at(MONDAY, 9), at(MONDAY, 10))

        assert not ConflictChecker.has_conflict(db, provider.id, TimeInterval(at(MONDAY, 9), at(MONDAY, 10)))

    def test_excluded_appointment_does_not_conflict_with_itself(self, db, business, provider):
        existing = add_appointment(db, business, provider, at(MONDAY, 9), at(MONDAY, 10))
        candidate = TimeInterval(at(MONDAY, 9), at(MONDAY, 10))

        assert ConflictChecker.has_conflict(db, provider.id, candidate)
        assert not ConflictChecker.has_conflict(db, provider.id, candidate, exclude_appointment_id=existing.id)

    def test_check_ignores_business(self, db, business, other_business, provider):
        # Rows booked through another business still occupy the provider
        add_appointment(db, other_business, provider, at(MONDAY, 9), at(MONDAY, 10))

        assert ConflictChecker.has_conflict(db, provider.id, TimeInterval(at(MONDAY, 9), at(MONDAY, 10)))
