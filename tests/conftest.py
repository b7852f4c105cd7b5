from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from daily_payroll.database import Base, get_db
from daily_payroll.models import User, AttendanceRecord


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
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(name="Worker", day_rate=50.0, role="worker", is_active=True):
        counter["n"] += 1
        user = User(
            id_card_number=f"ID{counter['n']:04d}",
            name=f"{name} {counter['n']}",
            role=role,
            day_rate=day_rate,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def worker(make_user):
    return make_user(name="Worker", day_rate=50.0)


@pytest.fixture
def admin(make_user):
    return make_user(name="Admin", day_rate=None, role="admin")


@pytest.fixture
def add_records(db):
    """Insert attendance rows directly, bypassing the recompute path."""

    def _add_records(user, days, status="present"):
        records = []
        for day in days:
            record = AttendanceRecord(user_id=user.id, date=day, status=status, hours_worked=0, overtime=0)
            db.add(record)
            records.append(record)
        db.commit()
        return records

    return _add_records


@pytest.fixture
def weekdays():
    """All Monday to Friday dates of a month"""

    def _weekdays(year, month):
        day = date(year, month, 1)
        days = []
        while day.month == month:
            if day.weekday() < 5:
                days.append(day)
            day += timedelta(days=1)
        return days

    return _weekdays


@pytest.fixture
def client(session_factory):
    from daily_payroll.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
