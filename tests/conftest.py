"""Shared fixtures: in-memory database and API client."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.main import app
from app.models.account import Account
from app.models.meter_reading import MeterReading


@pytest.fixture
def test_db():
    """Create an in-memory test database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(test_db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded_accounts(test_db):
    """Two accounts; 2344 already has a reading at 23/05/2025 05:30."""
    tommy = Account(account_id=2344, first_name="Tommy", last_name="Test")
    tommy.readings.append(
        MeterReading(account_id=2344, reading_timestamp=datetime(2025, 5, 23, 5, 30), value=1002)
    )
    barry = Account(account_id=2233, first_name="Barry", last_name="Test")
    test_db.add_all([tommy, barry])
    test_db.commit()
    return tommy, barry
