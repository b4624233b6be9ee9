# venue_booking/core.py

import math
from datetime import date, datetime, time


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    # half-open ranges: [a_start, a_end) and [b_start, b_end)
    return a_start < b_end and b_start < a_end


def day_of_week(on_date: date) -> int:
    """Weekday number as the client counts it: 0=Sunday ... 6=Saturday."""
    return (on_date.weekday() + 1) % 7


def hours_until(booking_date: date, start_time: time, now: datetime) -> float:
    starts_at = datetime.combine(booking_date, start_time)
    return (starts_at - now).total_seconds() / 3600


def round_hours(hours: float) -> int:
    """Non-negative, rounded half up."""
    return max(0, int(math.floor(hours + 0.5)))
