# venue_booking/routers/bookings_routes.py

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from venue_booking import lifecycle
from venue_booking.db import get_session
from venue_booking.deps import get_now
from venue_booking.models import Booking, Service, StaffMember, Venue
from venue_booking.schemas import (
    ApiResponse,
    BookingCreate,
    BookingDetails,
    BookingPublic,
    CancelRequest,
)

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
)


def booking_details(session: Session, booking: Booking) -> BookingDetails:
    """Booking plus the names and policy the self-service page shows."""
    venue = session.get(Venue, booking.venue_id)
    service = session.get(Service, booking.service_id)
    staff = session.get(StaffMember, booking.staff_member_id) if booking.staff_member_id else None
    return BookingDetails(
        **BookingPublic.model_validate(booking).model_dump(),
        venue_name=venue.name if venue else None,
        cancellation_hours=venue.cancellation_hours if venue else None,
        service_name=service.name if service else None,
        staff_member_name=staff.name if staff else None,
    )


@router.post("", response_model=ApiResponse[BookingPublic], status_code=201)
def create_booking(
    data: BookingCreate,
    session: Session = Depends(get_session),
    now: datetime = Depends(get_now),
):
    booking = lifecycle.create_booking(session, data, now)
    return {"success": True, "data": BookingPublic.model_validate(booking)}


@router.get("/manage/{token}", response_model=ApiResponse[BookingDetails])
def get_booking(
    token: str,
    session: Session = Depends(get_session),
):
    booking = lifecycle.get_booking_by_token(session, token)
    return {"success": True, "data": booking_details(session, booking)}


@router.post("/manage/{token}/cancel", response_model=ApiResponse[BookingDetails])
def cancel_booking(
    token: str,
    body: Optional[CancelRequest] = None,
    session: Session = Depends(get_session),
    now: datetime = Depends(get_now),
):
    booking = lifecycle.cancel_by_token(session, token, now, reason=body.reason if body else None)
    return {
        "success": True,
        "data": booking_details(session, booking),
        "message": "Booking cancelled",
    }
