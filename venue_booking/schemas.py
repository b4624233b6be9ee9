# venue_booking/schemas.py

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from enum import Enum
from datetime import datetime, date, time
from typing import Generic, List, Optional, TypeVar

DataT = TypeVar("DataT")


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"
    no_show = "no_show"


class AdminRole(str, Enum):
    owner = "owner"
    admin = "admin"
    staff = "staff"


class VenueType(str, Enum):
    restaurant = "restaurant"
    hair_salon = "hair_salon"
    beauty_salon = "beauty_salon"
    massage = "massage"
    other = "other"


# --- envelope ---

class Pagination(BaseModel):
    total: int
    limit: int
    offset: int


class ApiResponse(BaseModel, Generic[DataT]):
    success: bool = True
    data: Optional[DataT] = None
    message: Optional[str] = None


class PaginatedResponse(ApiResponse[DataT], Generic[DataT]):
    pagination: Pagination


# --- venues / services / staff ---

class VenuePublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: VenueType
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: str
    description: Optional[str] = None
    website_url: Optional[str] = None
    booking_advance_days: int
    booking_advance_hours: int
    cancellation_hours: int
    require_phone: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ServicePublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    venue_id: int
    name: str
    description: Optional[str] = None
    duration_minutes: int
    price: Optional[float] = None
    capacity: int
    requires_staff: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


class StaffMemberPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    venue_id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    description: Optional[str] = None
    is_active: bool


class OpeningHoursSlot(BaseModel):
    day_of_week: int
    start_time: time
    end_time: time


class VenueWithStaff(VenuePublic):
    staff_members: List[StaffMemberPublic] = []
    services: List[ServicePublic] = []
    opening_hours: List[OpeningHoursSlot] = []


class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    duration_minutes: Optional[int] = None
    price: Optional[float] = None
    is_active: Optional[bool] = None


class VenueSettingsUpdate(BaseModel):
    booking_advance_hours: Optional[int] = None
    cancellation_hours: Optional[int] = None
    booking_advance_days: Optional[int] = None
    require_phone: Optional[bool] = None


# --- availability ---

class AvailabilityRulePublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    venue_id: Optional[int] = None
    staff_member_id: Optional[int] = None
    staff_member_name: Optional[str] = None
    day_of_week: int
    start_time: time
    end_time: time
    is_active: bool


class AvailabilityRuleCreate(BaseModel):
    staff_member_id: Optional[int] = None
    day_of_week: int = Field(ge=0, le=6)  # 0=Sun ... 6=Sat
    start_time: time
    end_time: time
    is_active: bool = True


class AvailabilityRuleUpdate(BaseModel):
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    is_active: Optional[bool] = None


class TimeSlotPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    start_time: time
    end_time: time
    available: bool
    staff_member_id: Optional[int] = None


class DayAvailability(BaseModel):
    date: date
    day_of_week: int
    time_slots: List[TimeSlotPublic]


# --- bookings ---

class BookingCreate(BaseModel):
    venue_id: int
    service_id: int
    staff_member_id: Optional[int] = None
    customer_name: str
    customer_email: EmailStr
    customer_phone: Optional[str] = None
    booking_date: date
    start_time: time
    end_time: Optional[time] = None
    party_size: int = 1
    special_requests: Optional[str] = None
    total_amount: Optional[float] = None


class ManualBookingCreate(BaseModel):
    # venue comes from the admin's credential
    service_id: int
    staff_member_id: Optional[int] = None
    customer_name: str
    customer_email: EmailStr
    customer_phone: Optional[str] = None
    booking_date: date
    start_time: time
    end_time: Optional[time] = None
    party_size: int = 1
    special_requests: Optional[str] = None
    total_amount: Optional[float] = None


class BookingPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    venue_id: int
    service_id: int
    staff_member_id: Optional[int] = None
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    booking_date: date
    start_time: time
    end_time: time
    party_size: int
    special_requests: Optional[str] = None
    total_amount: Optional[float] = None
    booking_token: str
    status: BookingStatus
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class BookingDetails(BookingPublic):
    venue_name: Optional[str] = None
    cancellation_hours: Optional[int] = None
    service_name: Optional[str] = None
    staff_member_name: Optional[str] = None


class BookingWithDetails(BookingDetails):
    service_price: Optional[float] = None
    service_duration: Optional[int] = None


class CancelRequest(BaseModel):
    reason: Optional[str] = None


class StatusUpdate(BaseModel):
    status: BookingStatus
    reason: Optional[str] = None


# --- auth ---

class LoginRequest(BaseModel):
    email: str
    password: str


class AdminUserPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    venue_id: Optional[int] = None
    role: AdminRole


class LoginResponse(BaseModel):
    token: str
    user: AdminUserPublic


class PasswordChange(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(alias="currentPassword")
    new_password: str = Field(alias="newPassword", min_length=8, max_length=72)
