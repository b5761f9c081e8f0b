"""Unit tests for booking time normalization."""

from datetime import date, datetime, time

import pytest

from salon_scheduling.core.exceptions import ValidationException
from salon_scheduling.utils.time_helpers import (
    TimeRange,
    compute_booking_time_range,
    ends_same_day,
    normalize_booking_time,
    parse_booking_date,
    parse_booking_time,
    string_to_time,
)


class TestComputeBookingTimeRange:
    def test_24_hour_time(self):
        result = compute_booking_time_range("2024-03-10", "14:30", 45)

        assert result.start == datetime(2024, 3, 10, 14, 30)
        assert result.end == datetime(2024, 3, 10, 15, 15)

    def test_12_hour_time_matches_24_hour(self):
        assert compute_booking_time_range("2024-03-10", "2:30 PM", 45) == (
            compute_booking_time_range("2024-03-10", "14:30", 45)
        )

    def test_accepts_date_instance(self):
        result = compute_booking_time_range(date(2024, 3, 10), "09:00", 30)
        assert result == TimeRange(datetime(2024, 3, 10, 9, 0), datetime(2024, 3, 10, 9, 30))

    def test_is_deterministic(self):
        first = compute_booking_time_range("2024-03-10", "11:05", 20)
        second = compute_booking_time_range("2024-03-10", "11:05", 20)
        assert first == second

    @pytest.mark.parametrize("duration", [0, -15, 1.5, "30", True, None])
    def test_rejects_bad_duration(self, duration):
        with pytest.raises(ValidationException) as exc_info:
            compute_booking_time_range("2024-03-10", "10:00", duration)
        assert exc_info.value.code == "INVALID_DURATION"

    def test_rejects_unparsable_date(self):
        with pytest.raises(ValidationException) as exc_info:
            compute_booking_time_range("10/03/2024", "10:00", 30)
        assert exc_info.value.code == "INVALID_DATE"

    def test_rejects_impossible_date(self):
        with pytest.raises(ValidationException):
            compute_booking_time_range("2024-02-30", "10:00", 30)


class TestParseBookingTime:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("12:00 AM", time(0, 0)),
            ("12:00 PM", time(12, 0)),
            ("12:45 am", time(0, 45)),
            ("1:05 PM", time(13, 5)),
            ("11:59 p.m.", time(23, 59)),
            ("9:15AM", time(9, 15)),
            ("00:00", time(0, 0)),
            ("7:30", time(7, 30)),
            ("23:59", time(23, 59)),
            ("  08:10  ", time(8, 10)),
        ],
    )
    def test_valid_formats(self, value, expected):
        assert parse_booking_time(value) == expected

    @pytest.mark.parametrize(
        "value",
        ["24:00", "12:60", "13:00 PM", "0:30 AM", "noon", "1430", "14:3", "", "14:30:00"],
    )
    def test_invalid_formats(self, value):
        with pytest.raises(ValidationException) as exc_info:
            parse_booking_time(value)
        assert exc_info.value.code == "INVALID_TIME"

    def test_non_string_rejected(self):
        with pytest.raises(ValidationException):
            parse_booking_time(930)

    def test_normalize_to_canonical_form(self):
        assert normalize_booking_time("2:30 PM") == "14:30"
        assert normalize_booking_time("9:05") == "09:05"


class TestParseBookingDate:
    def test_datetime_is_reduced_to_date(self):
        assert parse_booking_date(datetime(2024, 3, 10, 8, 0)) == date(2024, 3, 10)

    def test_rejects_datetime_string(self):
        with pytest.raises(ValidationException):
            parse_booking_date("2024-03-10T10:00:00")


class TestTimeRange:
    def test_half_open_adjacent_ranges_do_not_overlap(self):
        morning = compute_booking_time_range("2024-03-10", "09:00", 60)
        next_one = compute_booking_time_range("2024-03-10", "10:00", 60)

        assert not morning.overlaps(next_one)
        assert not next_one.overlaps(morning)

    def test_partial_overlap(self):
        first = compute_booking_time_range("2024-03-10", "09:00", 60)
        second = compute_booking_time_range("2024-03-10", "09:59", 5)
        assert first.overlaps(second)

    def test_containment(self):
        outer = compute_booking_time_range("2024-03-10", "09:00", 120)
        inner = compute_booking_time_range("2024-03-10", "09:30", 15)
        assert outer.overlaps(inner) and inner.overlaps(outer)


class TestEndsSameDay:
    def test_ending_exactly_at_midnight_is_same_day(self):
        assert ends_same_day(compute_booking_time_range("2024-03-10", "23:00", 60))

    def test_crossing_midnight(self):
        assert not ends_same_day(compute_booking_time_range("2024-03-10", "23:30", 45))


class TestStringToTime:
    def test_pattern_time(self):
        assert string_to_time("09:00") == time(9, 0)

    def test_rejects_12_hour_form(self):
        with pytest.raises(ValidationException):
            string_to_time("9:00 AM")
