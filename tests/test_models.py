from datetime import datetime

import pytest
from conftest import make_service, make_venue
from sqlalchemy import DateTime
from sqlmodel import select

from venue_booking.models import Booking, Service, StaffMember, Venue


@pytest.mark.parametrize(
    "column",
    [
        Venue.__table__.c.created_at,
        Venue.__table__.c.updated_at,
        Service.__table__.c.created_at,
        StaffMember.__table__.c.updated_at,
        Booking.__table__.c.created_at,
        Booking.__table__.c.cancelled_at,
    ],
)
def test_timestamps_are_plain_datetime_columns(column):
    assert type(column.type) is DateTime
    assert column.type.timezone is False


def test_cancelled_at_is_nullable():
    assert Booking.__table__.c.cancelled_at.nullable is True


def test_naive_timestamp_round_trip(session):
    venue = make_venue(session)
    service = make_service(session, venue)
    stamp = datetime(2025, 6, 2, 8, 30)
    service.updated_at = stamp
    session.add(service)
    session.commit()
    session.expire_all()

    stored = session.exec(select(Service).where(Service.id == service.id)).one()

    assert stored.updated_at == stamp
    assert stored.updated_at.tzinfo is None
    assert stored.created_at.tzinfo is None
