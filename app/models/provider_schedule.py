# app/models/provider_schedule.py
from sqlalchemy import Column, Integer, Boolean, Time, Date, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from app.models.base import Base


class ProviderSchedule(Base):
    """
    One weekly working block of a provider, valid over [valid_from, valid_until].

    Several rows may share a weekday (split shifts) or follow each other in time
    (schedule versions). valid_until = NULL means the row is still in effect.
    """
    __tablename__ = "provider_schedules"
    __table_args__ = (
        Index("ix_provider_schedules_provider_weekday", "provider_id", "day_of_week"),
        Index("ix_provider_schedules_validity", "provider_id", "valid_from", "valid_until"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    provider_id = Column(Uuid(as_uuid=True), ForeignKey("providers.id"), nullable=False)

    day_of_week = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    valid_from = Column(Date, nullable=False)
    valid_until = Column(Date, nullable=True)

    is_deleted = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    provider = relationship("Provider", back_populates="schedules")

    def __repr__(self):
        return (
            f"<ProviderSchedule(provider_id={self.provider_id}, day={self.day_of_week}, "
            f"{self.start_time}-{self.end_time})>"
        )
