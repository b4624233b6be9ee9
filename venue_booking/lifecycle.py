# venue_booking/lifecycle.py

"""
Booking lifecycle: creation, customer cancellation by token and staff
status changes.

    pending -> confirmed -> completed
    pending -> confirmed -> no_show
    pending | confirmed -> cancelled

completed, cancelled and no_show accept no further transitions.
"""

import logging
import secrets
from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlmodel import Session, select

from venue_booking import conflicts
from venue_booking.availability import (
    get_active_service,
    get_active_venue,
    require_linked_staff,
    slots_for_resource,
)
from venue_booking.errors import (
    AlreadyCancelledError,
    AlreadyCompletedError,
    InputValidationError,
    InvalidStateError,
    NotFoundError,
)
from venue_booking.models import Booking, Service, StaffMember, Venue
from venue_booking.policy import (
    check_advance_notice,
    check_booking_horizon,
    check_cancellation_window,
    policy_for,
)
from venue_booking.schemas import BookingCreate, BookingStatus

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    BookingStatus.pending: {BookingStatus.confirmed, BookingStatus.cancelled},
    BookingStatus.confirmed: {BookingStatus.completed, BookingStatus.no_show, BookingStatus.cancelled},
    BookingStatus.completed: set(),
    BookingStatus.cancelled: set(),
    BookingStatus.no_show: set(),
}


def new_booking_token() -> str:
    return secrets.token_urlsafe(32)


def _validate_customer(data: BookingCreate, venue: Venue, service: Service) -> None:
    if not data.customer_name or not data.customer_name.strip():
        raise InputValidationError("customer_name is required", field="customer_name")
    if venue.require_phone and not (data.customer_phone or "").strip():
        raise InputValidationError("customer_phone is required for this venue", field="customer_phone")
    if not 1 <= data.party_size <= service.capacity:
        raise InputValidationError(
            f"party_size must be between 1 and {service.capacity}", field="party_size"
        )


def _resolve_staff(session: Session, data: BookingCreate, service: Service) -> Optional[int]:
    if not service.requires_staff:
        # staff selection is informational only; it must still belong to the venue
        if data.staff_member_id is not None:
            staff = session.get(StaffMember, data.staff_member_id)
            if staff is None or staff.venue_id != service.venue_id:
                raise InputValidationError("Unknown staff member", field="staff_member_id")
        return data.staff_member_id
    if data.staff_member_id is None:
        raise InputValidationError("A staff member must be selected for this service", field="staff_member_id")
    require_linked_staff(session, service, data.staff_member_id)
    return data.staff_member_id


def _expected_end(booking_date: date, start_time: time, duration_minutes: int) -> time:
    return (datetime.combine(booking_date, start_time) + timedelta(minutes=duration_minutes)).time()


def create_booking(
    session: Session,
    data: BookingCreate,
    now: datetime,
    admin: bool = False,
) -> Booking:
    """Validate, apply policy and atomically persist a new booking.

    ``admin`` bookings skip the advance-notice and horizon checks and start
    out confirmed; everything else (working hours, capacity, conflicts)
    applies to them as well.
    """
    venue = get_active_venue(session, data.venue_id)
    service = get_active_service(session, venue, data.service_id)

    _validate_customer(data, venue, service)
    staff_member_id = _resolve_staff(session, data, service)

    end_time = _expected_end(data.booking_date, data.start_time, service.duration_minutes)
    if data.end_time is not None and data.end_time != end_time:
        raise InputValidationError(
            "end_time does not match the service duration", field="end_time"
        )

    if not admin:
        policy = policy_for(venue)
        check_advance_notice(policy, data.booking_date, data.start_time, now)
        check_booking_horizon(policy, data.booking_date, now)

    offered = slots_for_resource(session, venue, service, data.booking_date, None, staff_member_id)
    if not any(s.start_time == data.start_time for s in offered):
        raise InputValidationError(
            "Requested time is outside working hours", field="start_time", code="outside_working_hours"
        )

    booking = Booking(
        venue_id=venue.id,
        service_id=service.id,
        staff_member_id=staff_member_id,
        customer_name=data.customer_name.strip(),
        customer_email=data.customer_email,
        customer_phone=(data.customer_phone or "").strip() or None,
        booking_date=data.booking_date,
        start_time=data.start_time,
        end_time=end_time,
        party_size=data.party_size,
        special_requests=data.special_requests,
        status=(BookingStatus.confirmed if admin else BookingStatus.pending).value,
        booking_token=new_booking_token(),
        total_amount=data.total_amount if data.total_amount is not None else service.price,
        created_at=now,
        updated_at=now,
    )

    booking = conflicts.claim_and_commit(session, booking, service)
    logger.info(
        "Booking %s created (%s) for venue %s on %s at %s%s",
        booking.id, booking.status, venue.id, booking.booking_date, booking.start_time,
        " by admin" if admin else "",
    )
    return booking


def get_booking_by_token(session: Session, token: str) -> Booking:
    booking = session.exec(select(Booking).where(Booking.booking_token == token)).first()
    if booking is None:
        raise NotFoundError("Booking not found")
    return booking


def _check_transition(booking: Booking, new_status: BookingStatus) -> None:
    current = BookingStatus(booking.status)
    if new_status == BookingStatus.cancelled:
        if current == BookingStatus.cancelled:
            raise AlreadyCancelledError()
        if current == BookingStatus.completed:
            raise AlreadyCompletedError()
    if new_status not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStateError(
            f"Cannot change booking status from {current.value} to {new_status.value}"
        )


def _apply_transition(
    session: Session,
    booking: Booking,
    new_status: BookingStatus,
    now: datetime,
    reason: Optional[str] = None,
) -> Booking:
    previous = booking.status
    booking.status = new_status.value
    booking.updated_at = now
    if new_status == BookingStatus.cancelled:
        booking.cancelled_at = now
        booking.cancellation_reason = reason
    if new_status.value not in conflicts.BLOCKING_STATUSES:
        conflicts.release_slot(session, booking)

    session.add(booking)
    session.commit()
    session.refresh(booking)
    logger.info("Booking %s: %s -> %s", booking.id, previous, booking.status)
    return booking


def cancel_by_token(session: Session, token: str, now: datetime, reason: Optional[str] = None) -> Booking:
    """Customer self-service cancellation, subject to the cancellation window."""
    booking = get_booking_by_token(session, token)
    _check_transition(booking, BookingStatus.cancelled)

    venue = session.get(Venue, booking.venue_id)
    check_cancellation_window(policy_for(venue), booking.booking_date, booking.start_time, now)

    return _apply_transition(session, booking, BookingStatus.cancelled, now, reason)


def update_status(
    session: Session,
    venue_id: int,
    booking_id: int,
    new_status: BookingStatus,
    now: datetime,
    reason: Optional[str] = None,
) -> Booking:
    """Staff-driven transition; only the state machine is enforced."""
    booking = session.get(Booking, booking_id)
    if booking is None or booking.venue_id != venue_id:
        raise NotFoundError("Booking not found")
    _check_transition(booking, new_status)
    return _apply_transition(session, booking, new_status, now, reason)
