# venue_booking/slots.py

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, List

from venue_booking.errors import InputValidationError
from venue_booking.schedule import WorkingWindow

# slot arithmetic runs on an arbitrary fixed day; windows never cross midnight
_ANCHOR = date(2000, 1, 1)


@dataclass(frozen=True)
class CandidateSlot:
    start_time: time
    end_time: time


def generate_slots(windows: Iterable[WorkingWindow], duration_minutes: int) -> List[CandidateSlot]:
    """Cut working windows into back-to-back slots of ``duration_minutes``.

    Each window is stepped from its start by the full duration; a remainder
    shorter than the duration is dropped, so no slot runs past its window.
    """
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise InputValidationError("duration_minutes must be an integer", field="duration_minutes")
    if duration_minutes <= 0:
        raise InputValidationError("duration_minutes must be greater than 0", field="duration_minutes")

    step = timedelta(minutes=duration_minutes)
    slots = []
    for window in windows:
        current = datetime.combine(_ANCHOR, window.start)
        window_end = datetime.combine(_ANCHOR, window.end)
        while current + step <= window_end:
            slots.append(CandidateSlot(current.time(), (current + step).time()))
            current += step

    slots.sort(key=lambda s: s.start_time)
    return slots
