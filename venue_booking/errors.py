# venue_booking/errors.py

"""
Error taxonomy for the booking core.

Every failure the core reports is a ``BookingError`` carrying an
``ErrorKind`` and, where useful, typed payload fields. ``main.py`` turns
them into the JSON envelope ``{success: false, message, error: {...}}``.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    validation = "validation"
    policy_advance_notice = "policy_advance_notice"
    policy_cancellation_window = "policy_cancellation_window"
    conflict = "conflict"
    invalid_state = "invalid_state"
    not_found = "not_found"
    unauthorized = "unauthorized"
    forbidden = "forbidden"


class BookingError(Exception):
    kind: ErrorKind = ErrorKind.validation
    status_code: int = 400
    code: str = "error"

    def __init__(self, message: str, code: Optional[str] = None, **payload: Any):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.payload = payload

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "code": self.code, **self.payload}

    def to_response(self) -> Dict[str, Any]:
        return {"success": False, "message": self.message, "error": self.to_dict()}


class InputValidationError(BookingError):
    kind = ErrorKind.validation
    status_code = 422
    code = "invalid_input"

    def __init__(self, message: str, field: Optional[str] = None, code: Optional[str] = None):
        payload = {"field": field} if field else {}
        super().__init__(message, code=code, **payload)


class AdvanceNoticeError(BookingError):
    """Booking requested too close to its start (or too far ahead)."""

    kind = ErrorKind.policy_advance_notice
    status_code = 422
    code = "advance_notice"

    def __init__(self, threshold_hours: int, remaining_hours: int, message: Optional[str] = None):
        self.threshold_hours = threshold_hours
        self.remaining_hours = remaining_hours
        super().__init__(
            message
            or (
                f"Bookings must be made at least {threshold_hours} hours in advance. "
                f"Only {remaining_hours} hours remaining."
            ),
            threshold_hours=threshold_hours,
            remaining_hours=remaining_hours,
        )


class BookingHorizonError(BookingError):
    kind = ErrorKind.policy_advance_notice
    status_code = 422
    code = "booking_horizon"

    def __init__(self, max_days: int):
        self.max_days = max_days
        super().__init__(
            f"Bookings can be made at most {max_days} days in advance.",
            max_days=max_days,
        )


class CancellationWindowError(BookingError):
    kind = ErrorKind.policy_cancellation_window
    status_code = 422
    code = "cancellation_window"

    def __init__(self, threshold_hours: int, remaining_hours: int):
        self.threshold_hours = threshold_hours
        self.remaining_hours = remaining_hours
        super().__init__(
            f"Cancellation must be made at least {threshold_hours} hours in advance. "
            f"Only {remaining_hours} hours remaining.",
            threshold_hours=threshold_hours,
            remaining_hours=remaining_hours,
        )


class SlotAlreadyBookedError(BookingError):
    """The requested slot was taken; the caller should re-fetch availability."""

    kind = ErrorKind.conflict
    status_code = 409
    code = "slot_already_booked"

    def __init__(self, message: str = "Time slot already booked"):
        super().__init__(message)


class InvalidStateError(BookingError):
    kind = ErrorKind.invalid_state
    status_code = 409
    code = "invalid_transition"


class AlreadyCancelledError(InvalidStateError):
    code = "already_cancelled"

    def __init__(self):
        super().__init__("Booking is already cancelled")


class AlreadyCompletedError(InvalidStateError):
    code = "already_completed"

    def __init__(self):
        super().__init__("Cannot cancel completed booking")


class NotFoundError(BookingError):
    kind = ErrorKind.not_found
    status_code = 404
    code = "not_found"


class UnauthorizedError(BookingError):
    kind = ErrorKind.unauthorized
    status_code = 401
    code = "unauthorized"


class ForbiddenError(BookingError):
    kind = ErrorKind.forbidden
    status_code = 403
    code = "forbidden"
