# venue_booking/models.py

from typing import Optional
from datetime import datetime, date as Date, time

from pydantic import NaiveDatetime
from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import SQLModel, Field


# venue-local wall clock, stored without tz info
def _timestamp():
    return Field(default_factory=datetime.now, sa_type=DateTime)


class Venue(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    type: str = "other"
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: str = "DE"
    description: Optional[str] = None
    website_url: Optional[str] = None

    # booking policy
    booking_advance_days: int = 90
    booking_advance_hours: int = 0
    cancellation_hours: int = 24
    require_phone: bool = False

    is_active: bool = True
    created_at: NaiveDatetime = _timestamp()
    updated_at: NaiveDatetime = _timestamp()


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    venue_id: int = Field(foreign_key="venue.id", index=True)
    name: str
    description: Optional[str] = None
    duration_minutes: int
    price: Optional[float] = None
    capacity: int = 1
    requires_staff: bool = False
    is_active: bool = True
    created_at: NaiveDatetime = _timestamp()
    updated_at: NaiveDatetime = _timestamp()


class StaffMember(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    venue_id: int = Field(foreign_key="venue.id", index=True)
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True
    created_at: NaiveDatetime = _timestamp()
    updated_at: NaiveDatetime = _timestamp()


class StaffService(SQLModel, table=True):
    # which staff member may perform which service
    staff_member_id: int = Field(foreign_key="staffmember.id", primary_key=True)
    service_id: int = Field(foreign_key="service.id", primary_key=True)


class AvailabilityRule(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    venue_id: int = Field(foreign_key="venue.id", index=True)
    staff_member_id: Optional[int] = Field(default=None, foreign_key="staffmember.id", index=True)
    day_of_week: int  # 0=Sun, 1=Mon....
    start_time: time
    end_time: time
    is_active: bool = True


class Booking(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    venue_id: int = Field(foreign_key="venue.id", index=True)
    service_id: int = Field(foreign_key="service.id", index=True)
    staff_member_id: Optional[int] = Field(default=None, foreign_key="staffmember.id", index=True)

    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None

    booking_date: Date = Field(index=True)
    start_time: time
    end_time: time
    party_size: int = 1
    special_requests: Optional[str] = None

    status: str = Field(default="pending", index=True)
    booking_token: str = Field(index=True, unique=True)
    cancelled_at: Optional[NaiveDatetime] = Field(default=None, sa_type=DateTime)
    cancellation_reason: Optional[str] = None
    total_amount: Optional[float] = None

    created_at: NaiveDatetime = _timestamp()
    updated_at: NaiveDatetime = _timestamp()


class SlotClaim(SQLModel, table=True):
    """One row per minute a blocking booking occupies.

    Two bookings that overlap anywhere share at least one ``unit_start``; the
    unique key then lets only one of them hold a given seat for that minute.
    """

    __table_args__ = (
        UniqueConstraint(
            "venue_id", "resource_key", "booking_date", "unit_start", "seat",
            name="uq_slot_claim",
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    booking_id: int = Field(foreign_key="booking.id", index=True)
    venue_id: int
    resource_key: str  # "staff:<id>" or "service:<id>"
    booking_date: Date
    unit_start: time
    seat: int = 0


class AdminUser(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    name: str
    password_hash: str
    venue_id: Optional[int] = Field(default=None, foreign_key="venue.id")
    role: str  # owner, admin or staff
    is_active: bool = True
