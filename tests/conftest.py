"""
Pytest Configuration and Shared Fixtures
========================================

This module provides shared fixtures for all MedTracker tests.
Fixtures include database sessions, test clients and sample rows.
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from typing import Generator, Dict, Any, List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Keep the app's own engine off disk
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from tests import TEST_USER_ID, OTHER_USER_ID, TEST_USER_EMAIL, TEST_TOKEN
from database import Base, get_db
from models import Medicine, MedicineLog, WeightLog
from api.deps import get_current_user
from services.auth_service import AuthenticatedUser
from app import app


# ==================== DATABASE FIXTURES ====================

@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine with in-memory SQLite"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    # Enable foreign keys for SQLite
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    # Create all tables
    Base.metadata.create_all(bind=engine)

    yield engine

    # Cleanup
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_engine) -> Generator[Session, None, None]:
    """Create a test database session"""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine
    )

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def test_user() -> AuthenticatedUser:
    """The signed-in user for API tests"""
    return AuthenticatedUser(
        id=TEST_USER_ID,
        email=TEST_USER_EMAIL,
        email_verified=True,
        user_metadata={"first_name": "Test", "last_name": "User", "full_name": "Test User"},
        token=TEST_TOKEN
    )


@pytest.fixture(scope="function")
def client(db_session: Session, test_user: AuthenticatedUser) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with database and auth overrides"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: test_user

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {TEST_TOKEN}"}


# ==================== TIME FIXTURES ====================

@pytest.fixture
def now() -> datetime:
    """Fixed reference time for engine and service tests"""
    return datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


# ==================== SAMPLE DATA FIXTURES ====================

@pytest.fixture
def interval_medicine_data() -> Dict[str, Any]:
    """Every-8-hours medicine"""
    return {
        "name": "Amoxicillin",
        "dose": "500mg",
        "schedule_type": "interval",
        "interval_minutes": 480,
        "instructions": "Finish the full course",
    }


@pytest.fixture
def meal_medicine_data() -> Dict[str, Any]:
    """Medicine taken around meals"""
    return {
        "name": "Metformin",
        "dose": "850mg",
        "schedule_type": "meal_based",
        "meal_timing": ["with_meal", "after_meal"],
    }


def _add(session: Session, row):
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


@pytest.fixture
def interval_medicine(db_session: Session, interval_medicine_data: Dict) -> Medicine:
    """Create and return an interval medicine owned by the test user"""
    return _add(db_session, Medicine(user_id=TEST_USER_ID, **interval_medicine_data))


@pytest.fixture
def meal_medicine(db_session: Session, meal_medicine_data: Dict) -> Medicine:
    """Create and return a meal-based medicine owned by the test user"""
    return _add(db_session, Medicine(user_id=TEST_USER_ID, **meal_medicine_data))


@pytest.fixture
def other_user_medicine(db_session: Session) -> Medicine:
    """A medicine belonging to somebody else"""
    return _add(db_session, Medicine(
        user_id=OTHER_USER_ID,
        name="Warfarin",
        dose="5mg",
        schedule_type="interval",
        interval_minutes=1440
    ))


@pytest.fixture
def recent_logs(db_session: Session, interval_medicine: Medicine) -> List[MedicineLog]:
    """Three intakes of the interval medicine over the last day"""
    taken = datetime.now(timezone.utc)
    logs = []
    for hours in (20, 12, 4):
        logs.append(_add(db_session, MedicineLog(
            user_id=TEST_USER_ID,
            medicine_id=interval_medicine.id,
            taken_at=taken - timedelta(hours=hours)
        )))
    return logs


@pytest.fixture
def weight_history(db_session: Session) -> List[WeightLog]:
    """A week of weights trending down by 0.3 kg a day"""
    base = datetime.now(timezone.utc) - timedelta(days=6)
    weights = []
    for day in range(7):
        weights.append(_add(db_session, WeightLog(
            user_id=TEST_USER_ID,
            weight_kg=80.0 - day * 0.3,
            unit="kg",
            logged_at=base + timedelta(days=day)
        )))
    return weights


# ==================== MARKERS ====================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "api: mark test as an API test")
    config.addinivalue_line("markers", "database: mark test as requiring database")
