"""Pytest fixtures for timesheet backend tests."""

import os
from datetime import date, time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Settings are read at import time and the signing key has no default
os.environ.setdefault("JWT_SECRET_KEY", "test-signing-key")

from app.core import security  # noqa: E402
from app.db import models, session  # noqa: E402
from app.main import app  # noqa: E402

# One in-memory SQLite database per test, shared across threads by StaticPool
TEST_DATABASE_URL = "sqlite://"

DEFAULT_PASSWORD = "correct-horse-1"


@pytest.fixture
def engine():
    """Create test database engine with a fresh schema."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    models.Base.metadata.create_all(bind=engine)
    yield engine
    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    """Session shared by the test body and the app under test."""
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    db = factory()
    yield db
    db.close()


@pytest.fixture
def client(db):
    """TestClient with the request session bound to the test database."""

    def override_get_db():
        yield db

    app.dependency_overrides[session.get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Factory for persisted users."""

    def _make(email, role="STAFF", department="Legal", first_name="Test", last_name="User",
              password=DEFAULT_PASSWORD, is_active=True):
        user = models.User(
            email=email,
            hashed_password=security.get_password_hash(password),
            first_name=first_name,
            last_name=last_name,
            role=role,
            department=department,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def admin(make_user):
    return make_user("ada@acme.com", role="ADMIN", department="Management", first_name="Ada", last_name="Admin")


@pytest.fixture
def supervisor(make_user):
    return make_user("sam@acme.com", role="SUPERVISOR", department="Legal", first_name="Sam", last_name="Lead")


@pytest.fixture
def staff(make_user):
    return make_user("alice@acme.com", department="Legal", first_name="Alice", last_name="Archer")


@pytest.fixture
def other_staff(make_user):
    return make_user("bob@acme.com", department="Legal", first_name="Bob", last_name="Baker")


@pytest.fixture
def finance_staff(make_user):
    return make_user("carol@acme.com", department="Finance", first_name="Carol", last_name="Cole")


def auth_headers(user) -> dict:
    token = security.create_access_token(data={"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers():
    """Bearer headers for a persisted user."""
    return auth_headers


def _parse_time(value):
    if isinstance(value, time):
        return value
    hour, minute = value.split(":")
    return time(int(hour), int(minute))


@pytest.fixture
def build_entry():
    """Factory for transient entries, for the pure services."""

    def _build(user_id=1, day=date(2024, 3, 4), start="09:00", end="10:00", status="Completed",
               billable=True, priority="Medium", department="Legal", entry_id=None):
        return models.TimesheetEntry(
            id=entry_id,
            user_id=user_id,
            date=day,
            client_file_number="CF-100",
            department=department,
            task="Research",
            activity="Case review",
            priority=priority,
            start_time=_parse_time(start),
            end_time=_parse_time(end),
            status=status,
            billable=billable,
            comments="",
        )

    return _build


@pytest.fixture
def add_entry(db, build_entry):
    """Factory for persisted entries; department defaults to the owner's."""

    def _add(user, **kwargs):
        kwargs.setdefault("department", user.department)
        entry = build_entry(user_id=user.id, **kwargs)
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    return _add


@pytest.fixture
def entry_payload():
    """Factory for request bodies of POST/PUT /timesheet/entries."""

    def _payload(**overrides):
        payload = {
            "date": "2024-03-04",
            "client_file_number": "CF-100",
            "task": "Research",
            "activity": "Case review",
            "priority": "High",
            "start_time": "09:00",
            "end_time": "10:30",
            "status": "Completed",
            "billable": True,
            "comments": "",
        }
        payload.update(overrides)
        return payload

    return _payload
