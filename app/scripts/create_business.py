#!/usr/bin/env python3
"""
Script to create a demo business with providers and their default schedules
Usage: python -m app.scripts.create_business
"""
import sys
import uuid
from datetime import datetime, timedelta, timezone
from jose import jwt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.database import SessionLocal
from app.config.settings import settings
from app.models.business import Business
from app.models.service import Service
from app.services.provider.provider_service import ProviderService

DAYS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def create_dev_token(business_id: uuid.UUID, expires_days: int = 30) -> str:
    """Bearer token accepted by the dashboard API for this business (development only)"""
    now = datetime.now(timezone.utc)
    return jwt.encode(
        {
            "sub": f"seed:{business_id}",
            "business_id": str(business_id),
            "type": "access",
            "iat": now,
            "exp": now + timedelta(days=expires_days),
        },
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )


def create_business_with_providers():
    """Create a demo business, its service catalog and two providers"""
    db: Session = SessionLocal()

    try:
        business = Business(
            id=uuid.uuid4(),
            name="Sunset Hair Studio",
            business_type="salon",
            timezone="America/New_York",
            is_active=True,
        )
        db.add(business)
        db.flush()  # Get the ID without committing

        print(f"\n✅ Created business: {business.name}")
        print(f"   Business ID: {business.id}")

        # Service catalog (duration in minutes)
        catalog = {
            "Haircut": (25, 30),
            "Color": (80, 90),
            "Beard Trim": (15, 20),
        }
        for name, (price, duration) in catalog.items():
            db.add(Service(
                id=uuid.uuid4(),
                business_id=business.id,
                name=name,
                price=price,
                default_duration=duration,
                is_active=True,
            ))
        db.commit()

        # Each provider gets the default weekly template
        providers = [
            ProviderService.create_provider(db, business.id, "Ana Torres", "ana@example.com"),
            ProviderService.create_provider(db, business.id, "Luis Gomez", "luis@example.com"),
        ]

        print("\n" + "=" * 60)
        print("BUSINESS CREATED SUCCESSFULLY!")
        print("=" * 60)
        print(f"\nBusiness ID: {business.id}")
        print(f"Name: {business.name}")
        print(f"\nServices:")
        for name, (price, duration) in catalog.items():
            print(f"  - {name}: ${price}, {duration} min")
        print(f"\nProviders:")
        for provider in providers:
            print(f"  - {provider.name} ({provider.id})")
            for entry in sorted(provider.schedules, key=lambda e: (e.day_of_week, e.start_time)):
                print(f"      {DAYS[entry.day_of_week]}: "
                      f"{entry.start_time.strftime('%H:%M')} - {entry.end_time.strftime('%H:%M')}")

        print("\n" + "=" * 60)
        print("DASHBOARD TOKEN (development only)")
        print("=" * 60)
        print(f"\n{create_dev_token(business.id)}\n")

        return str(business.id)

    except SQLAlchemyError as e:
        db.rollback()
        print(f"\n❌ Error creating business: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    business_id = create_business_with_providers()
