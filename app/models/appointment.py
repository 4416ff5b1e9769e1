# app/models/appointment.py
from sqlalchemy import Column, Boolean, Text, DateTime, ForeignKey, Index, CheckConstraint, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
import uuid
from app.models.base import Base


class AppointmentStatus(str, enum.Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    COMPLETED = "Completed"
    CANCELED = "Canceled"
    ABSENT = "Absent"


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index("ix_appointments_business_start", "business_id", "start_time"),
        Index("ix_appointments_provider_interval", "provider_id", "start_time", "end_time"),
        CheckConstraint("end_time > start_time", name="appointments_end_after_start"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id"), nullable=False)
    provider_id = Column(Uuid(as_uuid=True), ForeignKey("providers.id"), nullable=False)
    customer_id = Column(Uuid(as_uuid=True), ForeignKey("customers.id"), nullable=True)
    service_id = Column(Uuid(as_uuid=True), ForeignKey("services.id"), nullable=True)

    # Business-local wall clock times, [start_time, end_time)
    start_time = Column(DateTime(timezone=False), nullable=False)
    end_time = Column(DateTime(timezone=False), nullable=False)

    status = Column(
        SQLEnum(AppointmentStatus, name="appointmentstatus"),
        default=AppointmentStatus.PENDING,
        nullable=False,
        index=True
    )
    notes = Column(Text, nullable=True)

    # Deleted rows stay for history; every read filters them out explicitly
    is_deleted = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    provider = relationship("Provider")
    customer = relationship("Customer")
    service = relationship("Service")

    def __repr__(self):
        return f"<Appointment(id={self.id}, provider_id={self.provider_id}, start={self.start_time})>"
