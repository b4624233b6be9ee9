"""Tests for slot generation."""

from datetime import time

import pytest

from venue_booking.errors import ErrorKind, InputValidationError
from venue_booking.schedule import WorkingWindow
from venue_booking.slots import generate_slots


def _minutes(t: time) -> int:
    return t.hour * 60 + t.minute


class TestGenerateSlots:
    def test_full_day_hourly(self):
        """09:00-17:00 with 60 minutes gives 09:00..16:00 and nothing at 17:00."""
        slots = generate_slots([WorkingWindow(time(9), time(17))], 60)

        assert [s.start_time for s in slots] == [time(h) for h in range(9, 17)]
        assert slots[-1].end_time == time(17)

    @pytest.mark.parametrize(
        "start,end,duration",
        [
            (time(9), time(17), 45),
            (time(8, 30), time(12, 10), 25),
            (time(10), time(11), 60),
            (time(13), time(20), 90),
        ],
    )
    def test_count_is_floor_of_window_over_duration(self, start, end, duration):
        slots = generate_slots([WorkingWindow(start, end)], duration)

        window = _minutes(end) - _minutes(start)
        assert len(slots) == window // duration
        for prev, nxt in zip(slots, slots[1:]):
            assert prev.end_time == nxt.start_time
        assert all(s.end_time <= end for s in slots)
        assert slots[0].start_time == start

    def test_window_shorter_than_duration(self):
        assert generate_slots([WorkingWindow(time(9), time(9, 30))], 45) == []

    def test_no_windows(self):
        assert generate_slots([], 30) == []

    def test_split_shift_is_ordered(self):
        windows = [WorkingWindow(time(14), time(16)), WorkingWindow(time(9), time(11))]

        slots = generate_slots(windows, 60)

        assert [s.start_time for s in slots] == [time(9), time(10), time(14), time(15)]

    def test_window_ending_at_end_of_day(self):
        slots = generate_slots([WorkingWindow(time(22), time(23, 59))], 60)

        assert [s.start_time for s in slots] == [time(22)]

    @pytest.mark.parametrize("duration", [0, -15])
    def test_non_positive_duration_rejected(self, duration):
        with pytest.raises(InputValidationError) as exc_info:
            generate_slots([WorkingWindow(time(9), time(17))], duration)
        assert exc_info.value.kind == ErrorKind.validation

    def test_non_integer_duration_rejected(self):
        with pytest.raises(InputValidationError):
            generate_slots([WorkingWindow(time(9), time(17))], 30.5)

    def test_deterministic(self):
        windows = [WorkingWindow(time(9), time(12))]
        assert generate_slots(windows, 20) == generate_slots(windows, 20)
