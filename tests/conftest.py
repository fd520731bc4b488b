import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ATLAS_APP_CODE", "SIGAP")
os.environ.setdefault("QR_SECRET_KEY", "test-qr-secret")
os.environ.setdefault("DISPLAY_API_KEY", "test-display-key")
os.environ.setdefault("ENCRYPTION_ENABLED", "false")
os.environ.setdefault("LOGGING_ENABLED", "false")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from atams.db import Base
from atams.exceptions import setup_exception_handlers

import app.models  # noqa: F401  registers tables on Base.metadata
from app.core.qr_config import QrConfig
from app.models.station import Station

TEST_SECRET = "test-qr-secret"
DISPLAY_KEY = "test-display-key"


@pytest.fixture
def qr_config():
    return QrConfig(secret_key=TEST_SECRET)


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    ).execution_options(schema_translate_map={"sigap": None})
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def station(db_session):
    """ST1 at (1.0, 1.0) with a 50 m geofence"""
    obj = Station(
        st_id="ST1",
        st_name="Main Gate",
        st_latitude=1.0,
        st_longitude=1.0,
        st_radius_m=50.0,
        st_status="active",
    )
    db_session.add(obj)
    db_session.commit()
    db_session.refresh(obj)
    return obj


@pytest.fixture
def auth_user():
    """Authenticated principal; tests mutate role_level as needed"""
    return {"user_id": 42, "username": "employee", "role_level": 1}


@pytest.fixture
def client(db_session, auth_user):
    from app.api.v1.api import api_router
    from app.api.deps import require_auth
    from app.db.session import get_db

    api = FastAPI()
    setup_exception_handlers(api)
    api.include_router(api_router, prefix="/api/v1")

    def override_get_db():
        yield db_session

    api.dependency_overrides[get_db] = override_get_db
    api.dependency_overrides[require_auth] = lambda: auth_user

    with TestClient(api) as test_client:
        yield test_client
