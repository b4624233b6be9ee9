# venue_booking/seed.py

"""Demo data for local development; safe to run repeatedly."""

import logging
import os
from datetime import time

from sqlmodel import Session, select

from venue_booking.auth import hash_password
from venue_booking.config import settings
from venue_booking.models import AdminUser, AvailabilityRule, Service, StaffMember, StaffService, Venue

logger = logging.getLogger(__name__)

DEMO_VENUE = {
    "name": "Salon Lindenhof",
    "type": "hair_salon",
    "email": "hello@lindenhof.example",
    "phone": "+49 30 1234567",
    "city": "Berlin",
    "country": "DE",
}

# name -> (duration_minutes, price, capacity, requires_staff)
DEMO_SERVICES = {
    "Haircut": (30, 35.0, 1, True),
    "Cut & Colour": (90, 95.0, 1, True),
    "Beard Trim": (15, 15.0, 1, True),
    "Hair Workshop": (120, 40.0, 6, False),
}

DEMO_STAFF = ["Anna", "Jonas"]

# (day_of_week, start, end) with 0=Sun; Saturday is a split shift
DEMO_HOURS = [
    (1, "09:00", "18:00"),
    (2, "09:00", "18:00"),
    (3, "09:00", "18:00"),
    (4, "09:00", "20:00"),
    (5, "09:00", "18:00"),
    (6, "09:00", "12:00"),
    (6, "13:00", "16:00"),
]

DEMO_OWNER_EMAIL = "owner@lindenhof.example"


def _hhmm(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def seed_demo_data(session: Session) -> Venue:
    """Create the demo venue once; later calls return the existing one."""
    venue = session.exec(select(Venue).where(Venue.email == DEMO_VENUE["email"])).first()
    if venue is not None:
        return venue

    venue = Venue(
        **DEMO_VENUE,
        booking_advance_hours=settings.policy.booking_advance_hours,
        cancellation_hours=settings.policy.cancellation_hours,
        booking_advance_days=settings.policy.booking_advance_days,
    )
    session.add(venue)
    session.flush()

    staff_members = [StaffMember(venue_id=venue.id, name=name) for name in DEMO_STAFF]
    session.add_all(staff_members)
    session.flush()

    for name, (duration, price, capacity, requires_staff) in DEMO_SERVICES.items():
        service = Service(
            venue_id=venue.id,
            name=name,
            duration_minutes=duration,
            price=price,
            capacity=capacity,
            requires_staff=requires_staff,
        )
        session.add(service)
        session.flush()
        if requires_staff:
            for staff in staff_members:
                session.add(StaffService(staff_member_id=staff.id, service_id=service.id))

    for day, start, end in DEMO_HOURS:
        session.add(AvailabilityRule(venue_id=venue.id, day_of_week=day, start_time=_hhmm(start), end_time=_hhmm(end)))
        for staff in staff_members:
            session.add(
                AvailabilityRule(
                    venue_id=venue.id,
                    staff_member_id=staff.id,
                    day_of_week=day,
                    start_time=_hhmm(start),
                    end_time=_hhmm(end),
                )
            )

    session.add(
        AdminUser(
            email=DEMO_OWNER_EMAIL,
            name="Demo Owner",
            password_hash=hash_password(os.getenv("DEMO_OWNER_PASSWORD", "change-me-please")),
            venue_id=venue.id,
            role="owner",
        )
    )
    session.commit()
    session.refresh(venue)
    logger.info("Seeded demo venue %s (%s)", venue.id, venue.name)
    return venue
