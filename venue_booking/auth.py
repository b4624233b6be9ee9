# venue_booking/auth.py

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from sqlmodel import Session, select

from venue_booking.config import settings
from venue_booking.db import get_session
from venue_booking.errors import UnauthorizedError
from venue_booking.models import AdminUser

logger = logging.getLogger(__name__)

SECRET_KEY = settings.auth.secret_key
ALGORITHM = settings.auth.algorithm
ACCESS_TOKEN_EXPIRE_MINUTES = settings.auth.access_token_expire_minutes

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.auth.bcrypt_rounds,
)
# auto_error off: missing credentials go through UnauthorizedError like every other auth failure
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


@dataclass(frozen=True)
class AdminContext:
    """The authenticated admin behind the current request."""

    id: int
    email: str
    name: str
    role: str
    venue_id: Optional[int]


def create_access_token(data: dict, expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode["exp"] = expire
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def authenticate(session: Session, email: str, password: str) -> Optional[AdminUser]:
    user = session.exec(
        select(AdminUser).where(AdminUser.email == email.strip().lower())
    ).first()
    if user is None or not user.is_active or not verify_password(password, user.password_hash):
        return None
    return user


def get_current_admin(
    token: Optional[str] = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
) -> AdminContext:
    if not token:
        raise UnauthorizedError("Not authenticated")
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedError("Token expired", code="token_expired")
    except JWTError:
        raise UnauthorizedError("Invalid token", code="invalid_token")

    email = payload.get("sub")
    if email is None:
        raise UnauthorizedError("Invalid token", code="invalid_token")

    user = session.exec(
        select(AdminUser).where(AdminUser.email == email)
    ).first()

    if user is None or not user.is_active:
        logger.warning("Rejected token for unknown or inactive admin %s", email)
        raise UnauthorizedError("User not found", code="invalid_token")

    return AdminContext(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        venue_id=user.venue_id,
    )
