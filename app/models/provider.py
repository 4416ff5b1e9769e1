# app/models/provider.py
"""
Provider Model - a person whose calendar can be booked.
Providers belong to exactly one business.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from app.models.base import Base


class Provider(Base):
    __tablename__ = "providers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False, index=True)
    is_deleted = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    business = relationship("Business", back_populates="providers")
    schedules = relationship("ProviderSchedule", back_populates="provider")

    def __repr__(self):
        return f"<Provider(id={self.id}, name={self.name}, business_id={self.business_id})>"
