# venue_booking/routers/availability_routes.py

from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from venue_booking.availability import get_day_availability
from venue_booking.db import get_session
from venue_booking.deps import get_now
from venue_booking.schemas import ApiResponse, DayAvailability, TimeSlotPublic

router = APIRouter(
    prefix="/availability",
    tags=["availability"],
)


@router.get("/slots", response_model=ApiResponse[DayAvailability])
def available_slots(
    venue_id: int = Query(alias="venueId"),
    service_id: int = Query(alias="serviceId"),
    on_date: date = Query(alias="date"),
    staff_member_id: Optional[int] = Query(default=None, alias="staffMemberId"),
    session: Session = Depends(get_session),
    now: datetime = Depends(get_now),
):
    day = get_day_availability(session, venue_id, service_id, on_date, now, staff_member_id)
    return {
        "success": True,
        "data": DayAvailability(
            date=day["date"],
            day_of_week=day["day_of_week"],
            time_slots=[TimeSlotPublic.model_validate(s) for s in day["time_slots"]],
        ),
    }
