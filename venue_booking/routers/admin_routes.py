# venue_booking/routers/admin_routes.py

import logging
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_
from sqlmodel import Session, col, select

from venue_booking import lifecycle
from venue_booking.auth import AdminContext, get_current_admin, hash_password, verify_password
from venue_booking.db import get_session
from venue_booking.deps import get_admin_venue, get_now, require_role
from venue_booking.errors import InputValidationError, NotFoundError
from venue_booking.models import AdminUser, AvailabilityRule, Booking, Service, StaffMember, Venue
from venue_booking.policy import update_policy
from venue_booking.schemas import (
    ApiResponse,
    AvailabilityRuleCreate,
    AvailabilityRulePublic,
    AvailabilityRuleUpdate,
    BookingCreate,
    BookingPublic,
    BookingStatus,
    BookingWithDetails,
    ManualBookingCreate,
    PaginatedResponse,
    PasswordChange,
    ServicePublic,
    ServiceUpdate,
    StatusUpdate,
    VenuePublic,
    VenueSettingsUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
)

MANAGERS = ("owner", "admin")


def _with_details(booking: Booking, service: Optional[Service], staff: Optional[StaffMember], venue: Venue) -> BookingWithDetails:
    return BookingWithDetails(
        **BookingPublic.model_validate(booking).model_dump(),
        venue_name=venue.name,
        cancellation_hours=venue.cancellation_hours,
        service_name=service.name if service else None,
        service_price=service.price if service else None,
        service_duration=service.duration_minutes if service else None,
        staff_member_name=staff.name if staff else None,
    )


# --- bookings ---

@router.get("/bookings", response_model=PaginatedResponse[List[BookingWithDetails]])
def list_bookings(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    status: Optional[BookingStatus] = None,
    service_id: Optional[int] = Query(default=None, alias="serviceId"),
    search: Optional[str] = None,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    venue: Venue = Depends(get_admin_venue),
    session: Session = Depends(get_session),
):
    conditions = [Booking.venue_id == venue.id]
    if start_date is not None:
        conditions.append(Booking.booking_date >= start_date)
    if end_date is not None:
        conditions.append(Booking.booking_date <= end_date)
    if status is not None:
        conditions.append(Booking.status == status.value)
    if service_id is not None:
        conditions.append(Booking.service_id == service_id)
    if search:
        pattern = f"%{search.strip()}%"
        conditions.append(
            or_(
                col(Booking.customer_name).ilike(pattern),
                col(Booking.customer_email).ilike(pattern),
                col(Booking.customer_phone).ilike(pattern),
                Booking.booking_token == search.strip(),
            )
        )

    total = session.exec(select(func.count()).select_from(Booking).where(*conditions)).one()

    rows = session.exec(
        select(Booking, Service, StaffMember)
        .join(Service, Service.id == Booking.service_id, isouter=True)
        .join(StaffMember, StaffMember.id == Booking.staff_member_id, isouter=True)
        .where(*conditions)
        .order_by(col(Booking.booking_date).desc(), col(Booking.start_time).desc())
        .offset(offset)
        .limit(limit)
    ).all()

    return {
        "success": True,
        "data": [_with_details(b, s, st, venue) for b, s, st in rows],
        "pagination": {"total": total, "limit": limit, "offset": offset},
    }


@router.post("/bookings", response_model=ApiResponse[BookingPublic], status_code=201)
def create_manual_booking(
    data: ManualBookingCreate,
    venue: Venue = Depends(get_admin_venue),
    session: Session = Depends(get_session),
    now: datetime = Depends(get_now),
):
    booking = lifecycle.create_booking(
        session,
        BookingCreate(venue_id=venue.id, **data.model_dump()),
        now,
        admin=True,
    )
    return {"success": True, "data": BookingPublic.model_validate(booking)}


@router.patch("/bookings/{booking_id}/status", response_model=ApiResponse[BookingWithDetails])
def update_booking_status(
    booking_id: int,
    update: StatusUpdate,
    venue: Venue = Depends(get_admin_venue),
    session: Session = Depends(get_session),
    now: datetime = Depends(get_now),
):
    booking = lifecycle.update_status(
        session, venue.id, booking_id, update.status, now, reason=update.reason
    )
    service = session.get(Service, booking.service_id)
    staff = session.get(StaffMember, booking.staff_member_id) if booking.staff_member_id else None
    return {"success": True, "data": _with_details(booking, service, staff, venue)}


# --- services ---

@router.get("/services", response_model=ApiResponse[List[ServicePublic]])
def list_services(
    venue: Venue = Depends(get_admin_venue),
    session: Session = Depends(get_session),
):
    services = session.exec(
        select(Service).where(Service.venue_id == venue.id).order_by(Service.name)
    ).all()
    return {"success": True, "data": [ServicePublic.model_validate(s) for s in services]}


@router.patch("/services/{service_id}", response_model=ApiResponse[ServicePublic])
def update_service(
    service_id: int,
    updates: ServiceUpdate,
    admin: AdminContext = Depends(get_current_admin),
    venue: Venue = Depends(get_admin_venue),
    session: Session = Depends(get_session),
):
    require_role(admin, *MANAGERS)

    service = session.get(Service, service_id)
    if service is None or service.venue_id != venue.id:
        raise NotFoundError("Service not found")

    changes = updates.model_dump(exclude_unset=True)
    if "name" in changes and not (changes["name"] or "").strip():
        raise InputValidationError("name cannot be empty", field="name")
    if "duration_minutes" in changes and (changes["duration_minutes"] is None or changes["duration_minutes"] <= 0):
        raise InputValidationError("duration_minutes must be greater than 0", field="duration_minutes")
    if changes.get("price") is not None and changes["price"] < 0:
        raise InputValidationError("price cannot be negative", field="price")

    for name, value in changes.items():
        # description and price are nullable; other fields ignore an explicit null
        if value is None and name not in ("description", "price"):
            continue
        setattr(service, name, value)
    service.updated_at = datetime.now()

    session.add(service)
    session.commit()
    session.refresh(service)
    logger.info("Service %s updated by %s: %s", service.id, admin.email, sorted(changes))
    return {"success": True, "data": ServicePublic.model_validate(service)}


# --- availability rules ---

def _rule_public(rule: AvailabilityRule, session: Session) -> AvailabilityRulePublic:
    staff = session.get(StaffMember, rule.staff_member_id) if rule.staff_member_id else None
    public = AvailabilityRulePublic.model_validate(rule)
    public.staff_member_name = staff.name if staff else None
    return public


@router.get("/availability", response_model=ApiResponse[List[AvailabilityRulePublic]])
def list_availability_rules(
    venue: Venue = Depends(get_admin_venue),
    session: Session = Depends(get_session),
):
    rules = session.exec(
        select(AvailabilityRule)
        .where(AvailabilityRule.venue_id == venue.id)
        .order_by(AvailabilityRule.day_of_week, AvailabilityRule.start_time)
    ).all()
    return {"success": True, "data": [_rule_public(r, session) for r in rules]}


@router.post("/availability", response_model=ApiResponse[AvailabilityRulePublic], status_code=201)
def create_availability_rule(
    rule: AvailabilityRuleCreate,
    admin: AdminContext = Depends(get_current_admin),
    venue: Venue = Depends(get_admin_venue),
    session: Session = Depends(get_session),
):
    require_role(admin, *MANAGERS)
    if rule.start_time >= rule.end_time:
        raise InputValidationError("start_time must be before end_time", field="start_time")
    if rule.staff_member_id is not None:
        staff = session.get(StaffMember, rule.staff_member_id)
        if staff is None or staff.venue_id != venue.id:
            raise NotFoundError("Staff member not found")

    db_rule = AvailabilityRule(venue_id=venue.id, **rule.model_dump())
    session.add(db_rule)
    session.commit()
    session.refresh(db_rule)
    logger.info("Availability rule %s created by %s", db_rule.id, admin.email)
    return {"success": True, "data": _rule_public(db_rule, session)}


@router.patch("/availability/{rule_id}", response_model=ApiResponse[AvailabilityRulePublic])
def update_availability_rule(
    rule_id: int,
    updates: AvailabilityRuleUpdate,
    admin: AdminContext = Depends(get_current_admin),
    venue: Venue = Depends(get_admin_venue),
    session: Session = Depends(get_session),
):
    require_role(admin, *MANAGERS)

    rule = session.get(AvailabilityRule, rule_id)
    if rule is None or rule.venue_id != venue.id:
        raise NotFoundError("Availability rule not found")

    changes = updates.model_dump(exclude_unset=True)
    start = changes.get("start_time") or rule.start_time
    end = changes.get("end_time") or rule.end_time
    if start >= end:
        raise InputValidationError("start_time must be before end_time", field="start_time")

    for name, value in changes.items():
        if value is not None:
            setattr(rule, name, value)

    session.add(rule)
    session.commit()
    session.refresh(rule)
    logger.info("Availability rule %s updated by %s", rule.id, admin.email)
    return {"success": True, "data": _rule_public(rule, session)}


# --- venue settings ---

@router.get("/venue/settings", response_model=ApiResponse[VenuePublic])
def get_venue_settings(venue: Venue = Depends(get_admin_venue)):
    return {"success": True, "data": VenuePublic.model_validate(venue)}


@router.patch("/venue/settings", response_model=ApiResponse[VenuePublic])
def update_venue_settings(
    updates: VenueSettingsUpdate,
    admin: AdminContext = Depends(get_current_admin),
    venue: Venue = Depends(get_admin_venue),
    session: Session = Depends(get_session),
):
    require_role(admin, *MANAGERS)

    if updates.require_phone is not None:
        venue.require_phone = updates.require_phone
    update_policy(
        session,
        venue,
        booking_advance_hours=updates.booking_advance_hours,
        cancellation_hours=updates.cancellation_hours,
        booking_advance_days=updates.booking_advance_days,
    )
    return {"success": True, "data": VenuePublic.model_validate(venue)}


# --- account ---

@router.patch("/me/password", response_model=ApiResponse[None])
def change_password(
    body: PasswordChange,
    admin: AdminContext = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    user = session.get(AdminUser, admin.id)
    if not verify_password(body.current_password, user.password_hash):
        raise InputValidationError("Current password is incorrect", field="currentPassword")

    user.password_hash = hash_password(body.new_password)
    session.add(user)
    session.commit()
    logger.info("Password changed for %s", admin.email)
    return {"success": True, "message": "Password updated"}
