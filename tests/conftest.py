"""
Shared fixtures: an in-memory SQLite database per test and API clients
wired to it.
"""
import os

# Must be set before anything under app/ reads the settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.dependencies import get_current_business_id
from app.config.database import get_db
from app.main import app
from app.models import Base

from factories import make_business, make_provider


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def business(db):
    return make_business(db)


@pytest.fixture
def other_business(db):
    return make_business(db, name="Downtown Barbers")


@pytest.fixture
def provider(db, business):
    return make_provider(db, business)


@pytest.fixture
def api_db(db):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    yield db
    app.dependency_overrides.clear()


@pytest.fixture
def client(api_db, business):
    """Client authenticated as `business`"""
    app.dependency_overrides[get_current_business_id] = lambda: business.id
    return TestClient(app)


@pytest.fixture
def anonymous_client(api_db):
    """Client that goes through the real JWT dependency"""
    return TestClient(app)
