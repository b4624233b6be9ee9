# venue_booking/schedule.py

"""
Schedule model: which working-hour windows apply to a venue (or one of its
staff members) on a given calendar date.
"""

import logging
from dataclasses import dataclass
from datetime import date, time
from typing import Iterable, List, Optional

from sqlmodel import Session, select

from venue_booking.core import day_of_week
from venue_booking.models import AvailabilityRule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkingWindow:
    start: time
    end: time


def merge_windows(windows: Iterable[WorkingWindow]) -> List[WorkingWindow]:
    """Merge overlapping or touching windows into disjoint ascending intervals."""
    merged: List[WorkingWindow] = []
    for window in sorted(windows, key=lambda w: (w.start, w.end)):
        if merged and window.start <= merged[-1].end:
            last = merged[-1]
            if window.end > last.end:
                merged[-1] = WorkingWindow(last.start, window.end)
            continue
        merged.append(window)
    return merged


def rules_for_day(
    session: Session,
    venue_id: int,
    weekday: int,
    staff_member_id: Optional[int] = None,
) -> List[AvailabilityRule]:
    stmt = (
        select(AvailabilityRule)
        .where(AvailabilityRule.venue_id == venue_id)
        .where(AvailabilityRule.day_of_week == weekday)
        .where(AvailabilityRule.is_active == True)  # noqa: E712
    )
    if staff_member_id is None:
        stmt = stmt.where(AvailabilityRule.staff_member_id == None)  # noqa: E711
    else:
        stmt = stmt.where(AvailabilityRule.staff_member_id == staff_member_id)
    return list(session.exec(stmt).all())


def windows_for_date(
    session: Session,
    venue_id: int,
    on_date: date,
    staff_member_id: Optional[int] = None,
) -> List[WorkingWindow]:
    """Working windows in effect on ``on_date``; empty when nothing is scheduled."""
    windows = []
    for rule in rules_for_day(session, venue_id, day_of_week(on_date), staff_member_id):
        if rule.start_time >= rule.end_time:
            logger.warning(
                "Skipping availability rule %s: start %s is not before end %s",
                rule.id, rule.start_time, rule.end_time,
            )
            continue
        windows.append(WorkingWindow(rule.start_time, rule.end_time))
    return merge_windows(windows)
