# tests/conftest.py
import os
import tempfile
from datetime import datetime, timedelta, timezone

# must be set before app settings are first read
os.environ["SKIP_DB_INIT"] = "1"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from werkzeug.security import generate_password_hash

from app.db import get_db
from app.models import Base, Account, Booking, BookingConfig, Facility
from app.main import app

DAY = datetime(2030, 1, 7, tzinfo=timezone.utc)


def at(hour, minute=0):
    """A UTC instant on the fixed test day."""
    return DAY + timedelta(hours=hour, minutes=minute)


@pytest.fixture(scope="function")
def test_db_session():
    # temp DB
    tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    tmp.close()
    db_url = f"sqlite:///{tmp.name}"

    # test engine / Session
    engine = create_engine(db_url, connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
        os.unlink(tmp.name)

@pytest.fixture(scope="function")
def client(test_db_session):
    def override_get_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()

# Factories
@pytest.fixture
def make_facility(test_db_session):
    counter = {"n": 0}
    def _make_facility(name=None, level="1", description="Meeting room", status="open"):
        counter["n"] += 1
        f = Facility(
            name=name or f"Room {counter['n']}",
            level=level,
            description=description,
            status=status,
            transaction_dt=datetime.now(timezone.utc),
        )
        test_db_session.add(f)
        test_db_session.commit()
        return f
    return _make_facility

@pytest.fixture
def make_booking(test_db_session):
    def _make_booking(facility_id=1, start=None, end=None, user_id="u-1", email="u1@example.com", purpose="standup"):
        start = start or at(10)
        end = end or (start + timedelta(hours=2))
        b = Booking(
            user_id=user_id,
            email=email,
            purpose=purpose,
            facility_id=facility_id,
            start_dt=start,
            end_dt=end,
            transaction_dt=datetime.now(timezone.utc),
        )
        test_db_session.add(b)
        test_db_session.commit()
        return b
    return _make_booking

@pytest.fixture
def make_account(test_db_session):
    def _make_account(user_id="alice", password="s3cret", admin=False, email="alice@example.com"):
        a = Account(user_id=user_id, admin=admin, email=email, password=generate_password_hash(password))
        test_db_session.add(a)
        test_db_session.commit()
        return a
    return _make_account

@pytest.fixture
def make_config(test_db_session):
    def _make_config(key="max_hr_per_booking", value="2"):
        c = BookingConfig(key=key, value=value)
        test_db_session.add(c)
        test_db_session.commit()
        return c
    return _make_config
