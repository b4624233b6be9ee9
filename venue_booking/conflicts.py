# venue_booking/conflicts.py

"""
Conflict resolution between candidate slots and existing bookings.

Reads (``mark_availability``) are advisory. The write path
(``claim_and_commit``) is the arbiter: every blocking booking owns one
``SlotClaim`` row per minute it covers, and the unique key on
(venue, resource, date, unit_start, seat) lets only one of two racing
transactions hold a seat for any shared minute, whatever their start times.
The loser's ``IntegrityError`` becomes a ``SlotAlreadyBookedError``.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from venue_booking.core import overlaps
from venue_booking.errors import InputValidationError, SlotAlreadyBookedError
from venue_booking.models import Booking, Service, SlotClaim
from venue_booking.slots import CandidateSlot

logger = logging.getLogger(__name__)

# cancelled and no_show bookings free their slot
BLOCKING_STATUSES = ("pending", "confirmed", "completed")

CLAIM_UNIT = timedelta(minutes=1)


@dataclass(frozen=True)
class TimeSlot:
    start_time: time
    end_time: time
    available: bool
    staff_member_id: Optional[int] = None


def resource_key(service: Service, staff_member_id: Optional[int]) -> str:
    """The dimension bookings compete on: the staff member, or else the service."""
    if service.requires_staff:
        return f"staff:{staff_member_id}"
    return f"service:{service.id}"


def blocking_bookings(
    session: Session,
    venue_id: int,
    on_date: date,
    service: Service,
    staff_member_id: Optional[int] = None,
    exclude_booking_id: Optional[int] = None,
) -> List[Booking]:
    stmt = (
        select(Booking)
        .where(Booking.venue_id == venue_id)
        .where(Booking.booking_date == on_date)
        .where(Booking.status.in_(BLOCKING_STATUSES))
    )
    if service.requires_staff:
        stmt = stmt.where(Booking.staff_member_id == staff_member_id)
    else:
        stmt = stmt.where(Booking.service_id == service.id)
    if exclude_booking_id is not None:
        stmt = stmt.where(Booking.id != exclude_booking_id)
    return list(session.exec(stmt.order_by(Booking.start_time)).all())


def count_overlapping(bookings: Iterable[Booking], start: time, end: time) -> int:
    return sum(1 for b in bookings if overlaps(start, end, b.start_time, b.end_time))


def mark_availability(
    slots: Sequence[CandidateSlot],
    bookings: Sequence[Booking],
    capacity: int,
    on_date: date,
    not_before: Optional[datetime] = None,
    staff_member_id: Optional[int] = None,
) -> List[TimeSlot]:
    """Flag each candidate slot available while fewer than ``capacity`` bookings overlap it.

    Slots starting before ``not_before`` are reported unavailable.
    """
    marked = []
    for slot in slots:
        available = count_overlapping(bookings, slot.start_time, slot.end_time) < capacity
        if available and not_before is not None:
            available = datetime.combine(on_date, slot.start_time) >= not_before
        marked.append(TimeSlot(slot.start_time, slot.end_time, available, staff_member_id))
    return marked


def claim_units(on_date: date, start: time, end: time) -> List[time]:
    """Minute marks covered by ``[start, end)``; a partial minute counts as taken."""
    current = datetime.combine(on_date, start.replace(second=0, microsecond=0))
    stop = datetime.combine(on_date, end)
    units = []
    while current < stop:
        units.append(current.time())
        current += CLAIM_UNIT
    return units


def _free_seat(session: Session, booking: Booking, key: str, capacity: int) -> int:
    """Lowest seat no claim holds anywhere inside the booking's time range."""
    units = claim_units(booking.booking_date, booking.start_time, booking.end_time)
    taken = set(
        session.exec(
            select(SlotClaim.seat)
            .where(SlotClaim.venue_id == booking.venue_id)
            .where(SlotClaim.resource_key == key)
            .where(SlotClaim.booking_date == booking.booking_date)
            .where(SlotClaim.unit_start >= units[0])
            .where(SlotClaim.unit_start <= units[-1])
            .distinct()
        ).all()
    )
    for seat in range(capacity):
        if seat not in taken:
            return seat
    raise SlotAlreadyBookedError()


def claim_and_commit(session: Session, booking: Booking, service: Service) -> Booking:
    """Insert ``booking`` together with its per-minute slot claims in one transaction."""
    if booking.start_time >= booking.end_time:
        raise InputValidationError("start_time must be before end_time", field="start_time")

    existing = blocking_bookings(
        session, booking.venue_id, booking.booking_date, service, booking.staff_member_id
    )
    if count_overlapping(existing, booking.start_time, booking.end_time) >= service.capacity:
        logger.info(
            "Slot %s %s for %s is full",
            booking.booking_date, booking.start_time, resource_key(service, booking.staff_member_id),
        )
        raise SlotAlreadyBookedError()

    key = resource_key(service, booking.staff_member_id)
    seat = _free_seat(session, booking, key, service.capacity)

    try:
        session.add(booking)
        session.flush()  # assigns booking.id for the claims
        session.add_all(
            SlotClaim(
                booking_id=booking.id,
                venue_id=booking.venue_id,
                resource_key=key,
                booking_date=booking.booking_date,
                unit_start=unit,
                seat=seat,
            )
            for unit in claim_units(booking.booking_date, booking.start_time, booking.end_time)
        )
        session.commit()
    except IntegrityError:
        session.rollback()
        logger.warning(
            "Lost race for %s %s %s-%s seat %s",
            key, booking.booking_date, booking.start_time, booking.end_time, seat,
        )
        raise SlotAlreadyBookedError()

    session.refresh(booking)
    return booking


def release_slot(session: Session, booking: Booking) -> int:
    """Drop the booking's claims; the caller commits with the status change."""
    claims = session.exec(select(SlotClaim).where(SlotClaim.booking_id == booking.id)).all()
    for claim in claims:
        session.delete(claim)
    return len(claims)
