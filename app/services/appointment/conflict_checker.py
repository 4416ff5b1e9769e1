# app/services/appointment/conflict_checker.py
"""Double-booking detection for a provider's calendar"""
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.appointment import Appointment
from app.models.provider import Provider
from app.utils.intervals import TimeInterval


class ConflictChecker:
    """
    Provider-scoped overlap checks.

    The check is deliberately not filtered by business: a provider's calendar
    is a single resource no matter which business the booking came through.
    """

    @staticmethod
    def lock_provider(db: Session, provider_id: UUID) -> None:
        """
        Take a row lock on the provider for the rest of the current transaction.

        Every booking write for a provider goes through this lock, so the
        check-then-write sequence of concurrent requests is serialized.
        SQLite ignores FOR UPDATE and serializes writers on its own.
        """
        db.query(Provider.id).filter(Provider.id == provider_id).with_for_update().first()

    @staticmethod
    def has_conflict(
            db: Session,
            provider_id: UUID,
            candidate: TimeInterval,
            exclude_appointment_id: Optional[UUID] = None
    ) -> bool:
        """True if a non-deleted appointment of the provider overlaps [start, end)"""
        query = db.query(Appointment.id).filter(
            Appointment.provider_id == provider_id,
            Appointment.is_deleted == False,
            Appointment.start_time < candidate.end,
            Appointment.end_time > candidate.start
        )

        if exclude_appointment_id is not None:
            query = query.filter(Appointment.id != exclude_appointment_id)

        return query.first() is not None
