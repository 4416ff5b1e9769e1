# app/services/provider/provider_service.py
"""Provider directory lookups used by the scheduling services"""
from datetime import date
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy.orm import Session
import logging

from app.models.provider import Provider

logger = logging.getLogger(__name__)


class ProviderService:
    """Read access to providers, scoped by business"""

    @staticmethod
    def get_provider(db: Session, business_id: UUID, provider_id: UUID) -> Optional[Provider]:
        """Provider owned by the business, or None (deleted providers are never returned)"""
        return db.query(Provider).filter(
            Provider.id == provider_id,
            Provider.business_id == business_id,
            Provider.is_deleted == False
        ).first()

    @staticmethod
    def get_active_provider_ids(db: Session, business_id: UUID) -> List[UUID]:
        rows = db.query(Provider.id).filter(
            Provider.business_id == business_id,
            Provider.is_active == True,
            Provider.is_deleted == False
        ).all()
        return [row.id for row in rows]

    @staticmethod
    def create_provider(
            db: Session,
            business_id: UUID,
            name: str,
            email: Optional[str] = None,
            schedule_valid_from: Optional[date] = None
    ) -> Provider:
        """Onboard a provider together with the default weekly schedule template"""
        from app.services.schedule.schedule_registry import ScheduleRegistry

        provider = Provider(
            id=uuid4(),
            business_id=business_id,
            name=name.strip(),
            email=email,
            is_active=True,
            is_deleted=False,
        )
        db.add(provider)
        db.flush()

        ScheduleRegistry.create_default_schedules(
            db, provider.id, valid_from=schedule_valid_from or date.today(), commit=False
        )

        db.commit()
        db.refresh(provider)
        logger.info(f"Onboarded provider {provider.id} for business {business_id}")
        return provider
