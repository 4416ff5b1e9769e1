# ============================================================================
# app/services/appointment/appointment_ledger.py
# Appointment lifecycle: create / update / soft-delete / queries
# Pure business logic - no FastAPI dependencies, fully testable
# ============================================================================
from datetime import date, datetime, timedelta
from typing import List, NamedTuple, Optional
from uuid import UUID, uuid4

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
import logging

from app.core.result import ErrorKind, Result, conflict, not_found
from app.models.appointment import Appointment, AppointmentStatus
from app.models.customer import Customer
from app.models.service import Service
from app.services.appointment.conflict_checker import ConflictChecker
from app.services.provider.provider_service import ProviderService
from app.utils.intervals import TimeInterval, day_bounds, minutes_between

logger = logging.getLogger(__name__)

# Name of the PostgreSQL exclusion constraint created by the migrations
NO_OVERLAP_CONSTRAINT = "appointments_provider_no_overlap"

CONFLICT_MESSAGE = "The provider already has an appointment in that time range"


class AppointmentPage(NamedTuple):
    items: List[Appointment]
    total_count: int


class AppointmentLedger:
    """Owns every write to appointments; all writes are conflict-checked"""

    @staticmethod
    def create(
            db: Session,
            business_id: UUID,
            provider_id: UUID,
            start_time: datetime,
            end_time: datetime,
            customer_id: Optional[UUID] = None,
            customer_name: Optional[str] = None,
            service_id: Optional[UUID] = None,
            service_name: Optional[str] = None,
            notes: Optional[str] = None
    ) -> Result[Appointment]:
        """Book a new appointment in Pending status, rejecting overlaps for the provider"""
        if end_time <= start_time:
            return Result.fail(ErrorKind.VALIDATION, "End time must be after start time")

        precheck = AppointmentLedger._check_references(db, business_id, provider_id, customer_id, service_id)
        if precheck.is_failed:
            return precheck

        interval = TimeInterval(start_time, end_time)

        try:
            ConflictChecker.lock_provider(db, provider_id)
            if ConflictChecker.has_conflict(db, provider_id, interval):
                db.rollback()
                logger.info(f"Rejected booking for provider {provider_id}: {start_time} - {end_time} overlaps")
                return conflict(CONFLICT_MESSAGE)

            appointment = Appointment(
                id=uuid4(),
                business_id=business_id,
                provider_id=provider_id,
                customer_id=AppointmentLedger._resolve_customer(db, business_id, customer_id, customer_name),
                service_id=AppointmentLedger._resolve_service(db, business_id, service_id, service_name, interval),
                start_time=start_time,
                end_time=end_time,
                status=AppointmentStatus.PENDING,
                notes=notes,
                is_deleted=False,
            )
            db.add(appointment)
            db.commit()

        except IntegrityError as e:
            db.rollback()
            if NO_OVERLAP_CONSTRAINT in str(e.orig):
                logger.info(f"Booking for provider {provider_id} lost a race to a concurrent booking")
                return conflict(CONFLICT_MESSAGE)
            logger.error(f"Error creating appointment: {e}", exc_info=True)
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error creating appointment: {e}", exc_info=True)
            raise

        db.refresh(appointment)
        logger.info(f"Created appointment {appointment.id} for provider {provider_id}")
        return Result.ok(appointment)

    @staticmethod
    def update(
            db: Session,
            business_id: UUID,
            appointment_id: UUID,
            provider_id: UUID,
            start_time: datetime,
            end_time: datetime,
            status: Optional[AppointmentStatus] = None,
            customer_id: Optional[UUID] = None,
            customer_name: Optional[str] = None,
            service_id: Optional[UUID] = None,
            service_name: Optional[str] = None,
            notes: Optional[str] = None
    ) -> Result[Appointment]:
        """
        Reschedule / edit an appointment in place.

        Any status may be written (no transition rules are enforced); when
        status is None the current one is kept.
        """
        appointment = AppointmentLedger._get_owned(db, business_id, appointment_id)
        if not appointment:
            return not_found("Appointment not found")

        if end_time <= start_time:
            return Result.fail(ErrorKind.VALIDATION, "End time must be after start time")

        precheck = AppointmentLedger._check_references(db, business_id, provider_id, customer_id, service_id)
        if precheck.is_failed:
            return precheck

        interval = TimeInterval(start_time, end_time)

        try:
            ConflictChecker.lock_provider(db, provider_id)
            if ConflictChecker.has_conflict(db, provider_id, interval, exclude_appointment_id=appointment_id):
                db.rollback()
                logger.info(f"Rejected reschedule of {appointment_id}: {start_time} - {end_time} overlaps")
                return conflict(CONFLICT_MESSAGE)

            appointment.provider_id = provider_id
            appointment.customer_id = AppointmentLedger._resolve_customer(db, business_id, customer_id, customer_name)
            appointment.service_id = AppointmentLedger._resolve_service(
                db, business_id, service_id, service_name, interval
            )
            appointment.start_time = start_time
            appointment.end_time = end_time
            if status is not None:
                appointment.status = status
            appointment.notes = notes
            db.commit()

        except IntegrityError as e:
            db.rollback()
            if NO_OVERLAP_CONSTRAINT in str(e.orig):
                return conflict(CONFLICT_MESSAGE)
            logger.error(f"Error updating appointment {appointment_id}: {e}", exc_info=True)
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error updating appointment {appointment_id}: {e}", exc_info=True)
            raise

        db.refresh(appointment)
        logger.info(f"Updated appointment {appointment_id} (status={appointment.status.value})")
        return Result.ok(appointment)

    @staticmethod
    def soft_delete(db: Session, business_id: UUID, appointment_id: UUID) -> Result[None]:
        appointment = AppointmentLedger._get_owned(db, business_id, appointment_id)
        if not appointment:
            return not_found("Appointment not found")

        try:
            appointment.is_deleted = True
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error deleting appointment {appointment_id}: {e}", exc_info=True)
            raise

        logger.info(f"Soft-deleted appointment {appointment_id}")
        return Result.ok()

    @staticmethod
    def get_by_id(db: Session, business_id: UUID, appointment_id: UUID) -> Result[Appointment]:
        appointment = AppointmentLedger._get_owned(db, business_id, appointment_id)
        if not appointment:
            return not_found("Appointment not found")
        return Result.ok(appointment)

    @staticmethod
    def list_by_business(db: Session, business_id: UUID) -> List[Appointment]:
        return AppointmentLedger._base_query(db, business_id).order_by(
            Appointment.start_time.asc()
        ).all()

    @staticmethod
    def list_by_date_range(
            db: Session,
            business_id: UUID,
            range_start: datetime,
            range_end: datetime
    ) -> List[Appointment]:
        """Appointments starting in [range_start, range_end), ordered by start ascending"""
        return AppointmentLedger._base_query(db, business_id).filter(
            Appointment.start_time >= range_start,
            Appointment.start_time < range_end
        ).order_by(Appointment.start_time.asc()).all()

    @staticmethod
    def list_for_days(db: Session, business_id: UUID, start_date: date, end_date: date) -> List[Appointment]:
        """Appointments starting on any day of [start_date, end_date] (inclusive)"""
        return AppointmentLedger.list_by_date_range(
            db, business_id, day_bounds(start_date).start, day_bounds(end_date).end
        )

    @staticmethod
    def get_paged_by_date(
            db: Session,
            business_id: UUID,
            day: date,
            page: int = 1,
            page_size: int = 5
    ) -> AppointmentPage:
        bounds = day_bounds(day)
        query = AppointmentLedger._base_query(db, business_id).filter(
            Appointment.start_time >= bounds.start,
            Appointment.start_time < bounds.end
        )

        total_count = query.count()
        items = query.order_by(Appointment.start_time.asc()).offset(
            (max(page, 1) - 1) * page_size
        ).limit(page_size).all()

        return AppointmentPage(items=items, total_count=total_count)

    @staticmethod
    def count_for_day(db: Session, business_id: UUID, day: date) -> int:
        bounds = day_bounds(day)
        return db.query(Appointment).filter(
            Appointment.business_id == business_id,
            Appointment.is_deleted == False,
            Appointment.start_time >= bounds.start,
            Appointment.start_time < bounds.end
        ).count()

    @staticmethod
    def get_trend(db: Session, business_id: UUID, day: date) -> int:
        """Appointments on `day` minus appointments on the day before (+N, -N or 0)"""
        return (
            AppointmentLedger.count_for_day(db, business_id, day)
            - AppointmentLedger.count_for_day(db, business_id, day - timedelta(days=1))
        )

    @staticmethod
    def get_next(db: Session, business_id: UUID, now: Optional[datetime] = None) -> Optional[Appointment]:
        """Earliest appointment starting at or after `now`"""
        now = now or datetime.now()
        return AppointmentLedger._base_query(db, business_id).filter(
            Appointment.start_time >= now
        ).order_by(Appointment.start_time.asc()).first()

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _base_query(db: Session, business_id: UUID):
        return db.query(Appointment).options(
            joinedload(Appointment.provider),
            joinedload(Appointment.customer),
            joinedload(Appointment.service),
        ).filter(
            Appointment.business_id == business_id,
            Appointment.is_deleted == False
        )

    @staticmethod
    def _get_owned(db: Session, business_id: UUID, appointment_id: UUID) -> Optional[Appointment]:
        return AppointmentLedger._base_query(db, business_id).filter(
            Appointment.id == appointment_id
        ).first()

    @staticmethod
    def _check_references(
            db: Session,
            business_id: UUID,
            provider_id: UUID,
            customer_id: Optional[UUID],
            service_id: Optional[UUID]
    ) -> Result[None]:
        if not ProviderService.get_provider(db, business_id, provider_id):
            return not_found("Provider not found")

        if customer_id is not None and not db.query(Customer.id).filter(
                Customer.id == customer_id,
                Customer.business_id == business_id
        ).first():
            return not_found("Customer not found")

        if service_id is not None and not db.query(Service.id).filter(
                Service.id == service_id,
                Service.business_id == business_id
        ).first():
            return not_found("Service not found")

        return Result.ok()

    @staticmethod
    def _resolve_customer(
            db: Session,
            business_id: UUID,
            customer_id: Optional[UUID],
            customer_name: Optional[str]
    ) -> Optional[UUID]:
        """Use the given id, or create a customer from a free-text name"""
        if customer_id is not None:
            return customer_id

        if customer_name and customer_name.strip():
            customer = Customer(id=uuid4(), business_id=business_id, name=customer_name.strip())
            db.add(customer)
            db.flush()
            return customer.id

        return None

    @staticmethod
    def _resolve_service(
            db: Session,
            business_id: UUID,
            service_id: Optional[UUID],
            service_name: Optional[str],
            interval: TimeInterval
    ) -> Optional[UUID]:
        """Use the given id, or create a service whose default duration is the booked length"""
        if service_id is not None:
            return service_id

        if service_name and service_name.strip():
            service = Service(
                id=uuid4(),
                business_id=business_id,
                name=service_name.strip(),
                default_duration=minutes_between(interval.start, interval.end),
                price=None,
                is_active=True,
            )
            db.add(service)
            db.flush()
            return service.id

        return None
