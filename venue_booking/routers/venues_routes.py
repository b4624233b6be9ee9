# venue_booking/routers/venues_routes.py

from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from venue_booking.availability import get_active_venue
from venue_booking.db import get_session
from venue_booking.models import AvailabilityRule, Service, StaffMember, Venue
from venue_booking.schemas import (
    ApiResponse,
    OpeningHoursSlot,
    ServicePublic,
    StaffMemberPublic,
    VenuePublic,
    VenueWithStaff,
)

router = APIRouter(
    prefix="/venues",
    tags=["venues"],
)


@router.get("", response_model=ApiResponse[List[VenuePublic]])
def list_venues(session: Session = Depends(get_session)):
    venues = session.exec(
        select(Venue).where(Venue.is_active == True).order_by(Venue.name)  # noqa: E712
    ).all()
    return {"success": True, "data": [VenuePublic.model_validate(v) for v in venues]}


@router.get("/{venue_id}", response_model=ApiResponse[VenueWithStaff])
def get_venue(venue_id: int, session: Session = Depends(get_session)):
    venue = get_active_venue(session, venue_id)

    staff = session.exec(
        select(StaffMember)
        .where(StaffMember.venue_id == venue.id)
        .where(StaffMember.is_active == True)  # noqa: E712
        .order_by(StaffMember.name)
    ).all()
    services = session.exec(
        select(Service)
        .where(Service.venue_id == venue.id)
        .where(Service.is_active == True)  # noqa: E712
        .order_by(Service.name)
    ).all()
    # venue-level hours only; staff rules are internal scheduling detail
    rules = session.exec(
        select(AvailabilityRule)
        .where(AvailabilityRule.venue_id == venue.id)
        .where(AvailabilityRule.staff_member_id == None)  # noqa: E711
        .where(AvailabilityRule.is_active == True)  # noqa: E712
        .order_by(AvailabilityRule.day_of_week, AvailabilityRule.start_time)
    ).all()

    data = VenueWithStaff(
        **VenuePublic.model_validate(venue).model_dump(),
        staff_members=[StaffMemberPublic.model_validate(s) for s in staff],
        services=[ServicePublic.model_validate(s) for s in services],
        opening_hours=[
            OpeningHoursSlot(day_of_week=r.day_of_week, start_time=r.start_time, end_time=r.end_time)
            for r in rules
        ],
    )
    return {"success": True, "data": data}
