# venue_booking/routers/auth_routes.py

import logging

from fastapi import APIRouter, Depends
from sqlmodel import Session

from venue_booking.auth import AdminContext, authenticate, create_access_token, get_current_admin
from venue_booking.db import get_session
from venue_booking.errors import UnauthorizedError
from venue_booking.models import AdminUser
from venue_booking.schemas import AdminUserPublic, ApiResponse, LoginRequest, LoginResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/login", response_model=ApiResponse[LoginResponse])
def login(
    credentials: LoginRequest,
    session: Session = Depends(get_session),
):
    user = authenticate(session, credentials.email, credentials.password)
    if user is None:
        logger.info("Failed login for %s", credentials.email)
        raise UnauthorizedError("Invalid credentials", code="invalid_credentials")

    token = create_access_token({"sub": user.email, "vid": user.venue_id, "role": user.role})
    return {
        "success": True,
        "data": LoginResponse(token=token, user=AdminUserPublic.model_validate(user)),
    }


@router.get("/me", response_model=ApiResponse[AdminUserPublic])
def me(
    admin: AdminContext = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    return {"success": True, "data": AdminUserPublic.model_validate(session.get(AdminUser, admin.id))}


@router.post("/logout", response_model=ApiResponse[None])
def logout(admin: AdminContext = Depends(get_current_admin)):
    # tokens are stateless; the client drops its copy
    return {"success": True, "message": "Logged out"}
