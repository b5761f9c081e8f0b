# salon_scheduling/services/pattern_expander.py
"""
Availability Pattern Expander for the scheduling engine

Turns a recurring weekly rule into concrete TimeSlot rows. Expansion is
purely calendar arithmetic: it never looks at bookings, so whether a slot
can actually be taken is decided at read time by the booking flow.
"""

from datetime import date, datetime, time, timedelta
import logging
from typing import AbstractSet, Iterator, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException, ValidationException
from ..database import with_db_retry
from ..models.availability import AvailabilityPattern, TimeSlot
from ..repositories import RepositoryFactory
from ..utils.time_helpers import TimeRange, string_to_time
from .base import BaseService

logger = logging.getLogger(__name__)

# (staff_id, start, end) of a slot that must not be generated again
SlotKey = Tuple[Optional[str], datetime, datetime]


def day_of_week_index(day: date) -> int:
    """Sunday-based weekday index: Sunday is 0, Saturday is 6."""
    return day.isoweekday() % 7


def iter_days(range_start: date, range_end: date) -> Iterator[date]:
    current = range_start
    while current <= range_end:
        yield current
        current += timedelta(days=1)


def expand_pattern_windows(
    day_of_week: int,
    start_time: time,
    end_time: time,
    slot_duration_minutes: int,
    range_start: date,
    range_end: date,
    effective_from: Optional[date] = None,
    effective_until: Optional[date] = None,
) -> List[TimeRange]:
    """
    Cut a weekly window into fixed-size slots for every matching day.

    Both range bounds are inclusive. A trailing remainder shorter than
    ``slot_duration_minutes`` is dropped, never truncated: 09:00-09:50 in
    30 minute slots gives only 09:00-09:30.
    """
    if slot_duration_minutes <= 0:
        raise ValidationException(
            f"Slot duration must be positive, got {slot_duration_minutes}",
            code="INVALID_DURATION",
        )

    first_day = max(range_start, effective_from) if effective_from else range_start
    last_day = min(range_end, effective_until) if effective_until else range_end
    step = timedelta(minutes=slot_duration_minutes)

    windows: List[TimeRange] = []
    for day in iter_days(first_day, last_day):
        if day_of_week_index(day) != day_of_week:
            continue
        slot_start = datetime.combine(day, start_time)
        window_end = datetime.combine(day, end_time)
        while slot_start + step <= window_end:
            windows.append(TimeRange(start=slot_start, end=slot_start + step))
            slot_start += step
    return windows


def validate_date_range(range_start: date, range_end: date) -> None:
    if range_end < range_start:
        raise ValidationException(
            f"Range end {range_end} is before range start {range_start}",
            code="INVALID_DATE_RANGE",
        )


class PatternExpander(BaseService):
    """Service materializing availability patterns into time slots."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.availability_repository = RepositoryFactory.create_availability_repository(db)
        self.time_slot_repository = RepositoryFactory.create_time_slot_repository(db)

    @BaseService.measure_operation("generate_time_slots_from_pattern")
    def generate_time_slots_from_pattern(
        self, pattern_id: str, range_start: date, range_end: date
    ) -> List[TimeSlot]:
        """
        Expand one pattern over ``[range_start, range_end]`` and persist the slots.

        Returns:
            The created slots, unbooked and unblocked, ordered by start

        Raises:
            NotFoundException: Unknown pattern
            ValidationException: Range end before range start
        """
        validate_date_range(range_start, range_end)

        def _generate() -> List[TimeSlot]:
            with self.transaction():
                pattern = self.availability_repository.get_pattern(pattern_id)
                if pattern is None:
                    raise NotFoundException(
                        f"Availability pattern {pattern_id} not found",
                        code="PATTERN_NOT_FOUND",
                    )
                return self.materialize(pattern, range_start, range_end)

        return with_db_retry("generate_time_slots_from_pattern", _generate)

    def materialize(
        self,
        pattern: AvailabilityPattern,
        range_start: date,
        range_end: date,
        skip: AbstractSet[SlotKey] = frozenset(),
    ) -> List[TimeSlot]:
        """
        Insert the pattern's slots without committing.

        Slots whose (staff, start, end) appear in ``skip`` are left out. An
        inactive pattern produces nothing.
        """
        if not pattern.is_active:
            self.logger.debug(f"Pattern {pattern.id} is inactive, nothing to expand")
            return []

        windows = expand_pattern_windows(
            pattern.day_of_week,
            string_to_time(pattern.start_time),
            string_to_time(pattern.end_time),
            pattern.slot_duration_minutes,
            range_start,
            range_end,
            effective_from=pattern.effective_from,
            effective_until=pattern.effective_until,
        )

        rows = [
            {
                "pattern_id": pattern.id,
                "salon_id": pattern.salon_id,
                "staff_id": pattern.staff_id,
                "start_datetime": window.start,
                "end_datetime": window.end,
                "is_booked": False,
                "is_blocked": False,
            }
            for window in windows
            if (pattern.staff_id, window.start, window.end) not in skip
        ]
        slots = self.time_slot_repository.bulk_create(rows)

        self.logger.info(
            f"Generated {len(slots)} slots from pattern {pattern.id}",
            extra={
                "event": "pattern_expanded",
                "pattern_id": pattern.id,
                "salon_id": pattern.salon_id,
                "slot_count": len(slots),
            },
        )
        return slots

