"""Shared test fixtures and helpers."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from dataclasses import dataclass  # noqa: E402
from datetime import datetime, time  # noqa: E402
from typing import Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, create_engine  # noqa: E402

from venue_booking.auth import hash_password  # noqa: E402
from venue_booking.db import get_session, init_db  # noqa: E402
from venue_booking.deps import get_now  # noqa: E402
from venue_booking.main import app  # noqa: E402
from venue_booking.models import (  # noqa: E402
    AdminUser,
    AvailabilityRule,
    Service,
    StaffMember,
    StaffService,
    Venue,
)

# Monday 2025-06-02, 08:00 local time
NOW = datetime(2025, 6, 2, 8, 0)
MONDAY = 1
TUESDAY = 2
ADMIN_PASSWORD = "correct-horse-battery"


@dataclass
class Clock:
    now: datetime = NOW


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def client(engine, clock):
    """Test client bound to the in-memory database and a controllable clock."""

    def override_session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_now] = lambda: clock.now
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_venue(session: Session, **overrides) -> Venue:
    values = {
        "name": "Studio Nord",
        "type": "massage",
        "email": "studio@nord.example",
        "booking_advance_hours": 2,
        "cancellation_hours": 24,
        "booking_advance_days": 60,
    }
    values.update(overrides)
    venue = Venue(**values)
    session.add(venue)
    session.commit()
    session.refresh(venue)
    return venue


def make_service(session: Session, venue: Venue, **overrides) -> Service:
    values = {
        "venue_id": venue.id,
        "name": "Massage",
        "duration_minutes": 60,
        "price": 80.0,
        "capacity": 1,
        "requires_staff": False,
    }
    values.update(overrides)
    service = Service(**values)
    session.add(service)
    session.commit()
    session.refresh(service)
    return service


def make_staff(session: Session, venue: Venue, name: str = "Anna", services=(), **overrides) -> StaffMember:
    staff = StaffMember(venue_id=venue.id, name=name, **overrides)
    session.add(staff)
    session.commit()
    session.refresh(staff)
    for service in services:
        session.add(StaffService(staff_member_id=staff.id, service_id=service.id))
    session.commit()
    return staff


def add_rule(
    session: Session,
    venue: Venue,
    day_of_week: int,
    start: str,
    end: str,
    staff: Optional[StaffMember] = None,
    is_active: bool = True,
) -> AvailabilityRule:
    h1, m1 = start.split(":")
    h2, m2 = end.split(":")
    rule = AvailabilityRule(
        venue_id=venue.id,
        staff_member_id=staff.id if staff else None,
        day_of_week=day_of_week,
        start_time=time(int(h1), int(m1)),
        end_time=time(int(h2), int(m2)),
        is_active=is_active,
    )
    session.add(rule)
    session.commit()
    session.refresh(rule)
    return rule


def make_admin(session: Session, venue: Optional[Venue], role: str = "owner", email: str = "owner@nord.example") -> AdminUser:
    user = AdminUser(
        email=email,
        name="Olivia Owner",
        password_hash=hash_password(ADMIN_PASSWORD),
        venue_id=venue.id if venue else None,
        role=role,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def venue(session):
    """Venue open Monday to Friday 09:00-17:00."""
    v = make_venue(session)
    for day in range(1, 6):
        add_rule(session, v, day, "09:00", "17:00")
    return v


@pytest.fixture
def service(session, venue):
    return make_service(session, venue)


@pytest.fixture
def admin_headers(client, session, venue):
    make_admin(session, venue)
    resp = client.post("/auth/login", json={"email": "owner@nord.example", "password": ADMIN_PASSWORD})
    token = resp.json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


def booking_payload(venue: Venue, service: Service, **overrides) -> dict:
    payload = {
        "venue_id": venue.id,
        "service_id": service.id,
        "customer_name": "Max Mustermann",
        "customer_email": "max@example.com",
        "customer_phone": "+49 170 000000",
        "booking_date": "2025-06-03",
        "start_time": "10:00:00",
        "end_time": "11:00:00",
        "party_size": 1,
    }
    payload.update(overrides)
    return payload
