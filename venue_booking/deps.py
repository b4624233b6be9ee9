# venue_booking/deps.py

from datetime import datetime

from fastapi import Depends
from sqlmodel import Session

from venue_booking.auth import AdminContext, get_current_admin
from venue_booking.db import get_session
from venue_booking.errors import ForbiddenError, NotFoundError
from venue_booking.models import Venue


def get_now() -> datetime:
    # venue-local wall clock; overridden in tests
    return datetime.now()


def require_role(admin: AdminContext, *roles: str):
    if admin.role not in roles:
        raise ForbiddenError("Forbidden")


def get_admin_venue(
    admin: AdminContext = Depends(get_current_admin),
    session: Session = Depends(get_session),
) -> Venue:
    if admin.venue_id is None:
        raise ForbiddenError("No venue assigned to this account")
    venue = session.get(Venue, admin.venue_id)
    if venue is None:
        raise NotFoundError("Venue not found")
    return venue
