# venue_booking/policy.py

"""
Per-venue booking policy.

Thresholds are read at evaluation time, so an admin update applies to the
next availability query or booking action and never to existing bookings.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlmodel import Session

from venue_booking.core import hours_until, round_hours
from venue_booking.errors import (
    AdvanceNoticeError,
    BookingHorizonError,
    CancellationWindowError,
    InputValidationError,
    NotFoundError,
)
from venue_booking.models import Venue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VenuePolicy:
    booking_advance_hours: int
    cancellation_hours: int
    booking_advance_days: int = 0  # 0 = no horizon


def policy_for(venue: Venue) -> VenuePolicy:
    return VenuePolicy(
        booking_advance_hours=venue.booking_advance_hours,
        cancellation_hours=venue.cancellation_hours,
        booking_advance_days=venue.booking_advance_days,
    )


def get_policy(session: Session, venue_id: int) -> VenuePolicy:
    venue = session.get(Venue, venue_id)
    if venue is None:
        raise NotFoundError("Venue not found")
    return policy_for(venue)


def _non_negative_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InputValidationError(f"{name} must be a non-negative integer", field=name)
    return value


def update_policy(
    session: Session,
    venue: Venue,
    booking_advance_hours: Optional[int] = None,
    cancellation_hours: Optional[int] = None,
    booking_advance_days: Optional[int] = None,
) -> VenuePolicy:
    """Apply an admin change to the venue's thresholds and persist it."""
    changes = {
        "booking_advance_hours": booking_advance_hours,
        "cancellation_hours": cancellation_hours,
        "booking_advance_days": booking_advance_days,
    }
    for name, value in changes.items():
        if value is not None:
            setattr(venue, name, _non_negative_int(name, value))

    venue.updated_at = datetime.now()
    session.add(venue)
    session.commit()
    session.refresh(venue)

    policy = policy_for(venue)
    logger.info("Venue %s policy updated: %s", venue.id, policy)
    return policy


def earliest_bookable(policy: VenuePolicy, now: datetime) -> datetime:
    """First start time a customer may still book."""
    return now + timedelta(hours=policy.booking_advance_hours)


def check_advance_notice(policy: VenuePolicy, booking_date: date, start_time: time, now: datetime) -> None:
    remaining = hours_until(booking_date, start_time, now)
    if remaining < policy.booking_advance_hours:
        raise AdvanceNoticeError(policy.booking_advance_hours, round_hours(remaining))


def check_booking_horizon(policy: VenuePolicy, booking_date: date, now: datetime) -> None:
    if policy.booking_advance_days <= 0:
        return
    if booking_date > now.date() + timedelta(days=policy.booking_advance_days):
        raise BookingHorizonError(policy.booking_advance_days)


def check_cancellation_window(policy: VenuePolicy, booking_date: date, start_time: time, now: datetime) -> None:
    remaining = hours_until(booking_date, start_time, now)
    if remaining < policy.cancellation_hours:
        raise CancellationWindowError(policy.cancellation_hours, round_hours(remaining))
