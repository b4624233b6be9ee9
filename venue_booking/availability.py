# venue_booking/availability.py

import logging
from datetime import date, datetime
from typing import List, Optional

from sqlmodel import Session, select

from venue_booking import conflicts
from venue_booking.core import day_of_week
from venue_booking.errors import InputValidationError, NotFoundError
from venue_booking.models import Service, StaffMember, StaffService, Venue
from venue_booking.policy import earliest_bookable, policy_for
from venue_booking.schedule import windows_for_date
from venue_booking.slots import generate_slots

logger = logging.getLogger(__name__)


def get_active_venue(session: Session, venue_id: int) -> Venue:
    venue = session.get(Venue, venue_id)
    if venue is None or not venue.is_active:
        raise NotFoundError("Venue not found")
    return venue


def get_active_service(session: Session, venue: Venue, service_id: int) -> Service:
    service = session.get(Service, service_id)
    if service is None or not service.is_active or service.venue_id != venue.id:
        raise NotFoundError("Service not found")
    return service


def linked_staff(session: Session, service: Service) -> List[StaffMember]:
    """Active staff members explicitly linked to ``service``."""
    return list(
        session.exec(
            select(StaffMember)
            .join(StaffService, StaffService.staff_member_id == StaffMember.id)
            .where(StaffService.service_id == service.id)
            .where(StaffMember.venue_id == service.venue_id)
            .where(StaffMember.is_active == True)  # noqa: E712
            .order_by(StaffMember.id)
        ).all()
    )


def require_linked_staff(session: Session, service: Service, staff_member_id: int) -> StaffMember:
    for staff in linked_staff(session, service):
        if staff.id == staff_member_id:
            return staff
    raise InputValidationError(
        "Selected staff member does not offer this service", field="staff_member_id"
    )


def slots_for_resource(
    session: Session,
    venue: Venue,
    service: Service,
    on_date: date,
    now: Optional[datetime],
    staff_member_id: Optional[int] = None,
) -> List[conflicts.TimeSlot]:
    """Schedule -> candidate slots -> availability for one bookable resource."""
    windows = windows_for_date(
        session, venue.id, on_date, staff_member_id if service.requires_staff else None
    )
    candidates = generate_slots(windows, service.duration_minutes)
    if not candidates:
        return []

    existing = conflicts.blocking_bookings(session, venue.id, on_date, service, staff_member_id)
    not_before = earliest_bookable(policy_for(venue), now) if now is not None else None
    return conflicts.mark_availability(
        candidates,
        existing,
        service.capacity,
        on_date,
        not_before=not_before,
        staff_member_id=staff_member_id if service.requires_staff else None,
    )


def get_day_availability(
    session: Session,
    venue_id: int,
    service_id: int,
    on_date: date,
    now: datetime,
    staff_member_id: Optional[int] = None,
) -> dict:
    venue = get_active_venue(session, venue_id)
    service = get_active_service(session, venue, service_id)
    policy = policy_for(venue)

    beyond_horizon = (
        policy.booking_advance_days > 0
        and (on_date - now.date()).days > policy.booking_advance_days
    )

    if not service.requires_staff:
        time_slots = slots_for_resource(session, venue, service, on_date, now)
    elif staff_member_id is not None:
        require_linked_staff(session, service, staff_member_id)
        time_slots = slots_for_resource(session, venue, service, on_date, now, staff_member_id)
    else:
        time_slots = []
        for staff in linked_staff(session, service):
            time_slots.extend(slots_for_resource(session, venue, service, on_date, now, staff.id))
        time_slots.sort(key=lambda s: (s.start_time, s.staff_member_id))

    if beyond_horizon:
        time_slots = [
            conflicts.TimeSlot(s.start_time, s.end_time, False, s.staff_member_id)
            for s in time_slots
        ]

    logger.debug(
        "Availability venue=%s service=%s date=%s: %d slots",
        venue_id, service_id, on_date, len(time_slots),
    )
    return {
        "date": on_date,
        "day_of_week": day_of_week(on_date),
        "time_slots": time_slots,
    }
