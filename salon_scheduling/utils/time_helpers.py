"""
Booking time normalization.

Every booking interval in the engine is produced here: a calendar date, a
wall-clock start in either 24-hour ("14:30") or 12-hour ("2:30 PM") form, and
a duration become a half-open ``[start, end)`` pair of naive salon-local
datetimes.
"""

from datetime import date, datetime, time, timedelta
import re
from typing import NamedTuple, Union

from ..core.exceptions import ValidationException

_TIME_24H = re.compile(r"^(\d{1,2}):(\d{2})$")
_TIME_12H = re.compile(r"^(\d{1,2}):(\d{2})\s*([AaPp])\.?[Mm]\.?$")
_DATE_ISO = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class TimeRange(NamedTuple):
    """Half-open interval ``[start, end)``."""

    start: datetime
    end: datetime

    def overlaps(self, other: "TimeRange") -> bool:
        return self.start < other.end and self.end > other.start


def parse_booking_time(value: str) -> time:
    """
    Parse a 24-hour ``HH:MM`` or 12-hour ``H:MM AM/PM`` string.

    12 AM is hour 0 and 12 PM stays hour 12.
    """
    if not isinstance(value, str):
        raise ValidationException(
            f"Booking time must be a string, got {type(value).__name__}",
            code="INVALID_TIME",
        )
    text = value.strip()

    match = _TIME_24H.match(text)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if not 0 <= hour <= 23 or not 0 <= minute <= 59:
            raise ValidationException(
                f"Time out of range: {value}", code="INVALID_TIME", details={"time": value}
            )
        return time(hour, minute)

    match = _TIME_12H.match(text)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if not 1 <= hour <= 12 or not 0 <= minute <= 59:
            raise ValidationException(
                f"Time out of range: {value}", code="INVALID_TIME", details={"time": value}
            )
        is_pm = match.group(3).lower() == "p"
        if hour == 12:
            hour = 12 if is_pm else 0
        elif is_pm:
            hour += 12
        return time(hour, minute)

    raise ValidationException(
        f"Invalid time format: {value}. Expected HH:MM or H:MM AM/PM.",
        code="INVALID_TIME",
        details={"time": value},
    )


def parse_booking_date(value: Union[str, date]) -> date:
    """Parse a ``YYYY-MM-DD`` calendar date; ``date`` instances pass through."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if _DATE_ISO.match(text):
            try:
                return date.fromisoformat(text)
            except ValueError:
                pass
    raise ValidationException(
        f"Invalid booking date: {value!r}. Expected YYYY-MM-DD.",
        code="INVALID_DATE",
        details={"date": str(value)},
    )


def normalize_booking_time(value: str) -> str:
    """Canonical ``HH:MM`` form used for storage."""
    return parse_booking_time(value).strftime("%H:%M")


def compute_booking_time_range(
    booking_date: Union[str, date], booking_time: str, duration_minutes: int
) -> TimeRange:
    """
    Derive the interval a booking occupies.

    Pure and deterministic: the same inputs always give the same range.

    Raises:
        ValidationException: malformed date or time, or non-positive duration
    """
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise ValidationException(
            f"Duration must be a whole number of minutes, got {duration_minutes!r}",
            code="INVALID_DURATION",
        )
    if duration_minutes <= 0:
        raise ValidationException(
            f"Duration must be positive, got {duration_minutes}",
            code="INVALID_DURATION",
            details={"duration_minutes": duration_minutes},
        )

    day = parse_booking_date(booking_date)
    start = datetime.combine(day, parse_booking_time(booking_time))
    return TimeRange(start=start, end=start + timedelta(minutes=duration_minutes))


def ends_same_day(time_range: TimeRange) -> bool:
    """True when the range ends on its start date or exactly at the following midnight."""
    next_midnight = datetime.combine(time_range.start.date() + timedelta(days=1), time(0, 0))
    return time_range.end <= next_midnight


def time_to_string(t: time) -> str:
    """Always return HH:MM format"""
    return t.strftime("%H:%M")


def string_to_time(time_str: str) -> time:
    """Parse a pattern time string ("HH:MM"), rejecting anything else."""
    match = _TIME_24H.match(time_str.strip()) if isinstance(time_str, str) else None
    if not match:
        raise ValidationException(f"Invalid time format: {time_str}. Expected HH:MM.")
    hour, minute = int(match.group(1)), int(match.group(2))
    if not 0 <= hour <= 23 or not 0 <= minute <= 59:
        raise ValidationException(f"Time out of range: {time_str}")
    return time(hour, minute)
