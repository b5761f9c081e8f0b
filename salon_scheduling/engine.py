# salon_scheduling/engine.py
"""
In-process entry point to the scheduling engine.

``SchedulingEngine`` is constructed once at process start with a session
factory and passed to callers. Every call runs in its own session, so one
engine can be shared across threads. Returned ORM objects are detached with
their columns loaded.
"""

from datetime import date, datetime
import logging
from typing import Any, Callable, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from .core.exceptions import ValidationException
from .database import Base, create_db_engine, create_session_factory, session_scope
from .models.availability import AvailabilityPattern, TimeSlot
from .models.booking import Booking
from .schemas.availability import AvailabilityPatternCreate
from .schemas.booking import BookingCreate, BookingReschedule
from .services.availability_service import AvailabilityService
from .services.booking_scheduler import BookingScheduler
from .services.conflict_checker import ConflictChecker
from .services.pattern_expander import PatternExpander
from .services.slot_manager import SlotManager
from .services.slot_regenerator import RegenerationResult, SlotRegenerator
from .services.staff_availability import StaffAvailabilityService
from .utils.time_helpers import TimeRange, compute_booking_time_range

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)
ResultT = TypeVar("ResultT")


def _coerce(schema: Type[SchemaT], data: Union[SchemaT, Mapping[str, Any]]) -> SchemaT:
    """Accept a schema instance or a plain mapping; report bad input as ValidationException."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise ValidationException(
            f"Invalid {schema.__name__}: {e.error_count()} validation error(s)",
            code="INVALID_REQUEST",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e


class SchedulingEngine:
    """Facade over the scheduling services."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    @classmethod
    def from_url(cls, url: Optional[str] = None, create_schema: bool = False) -> "SchedulingEngine":
        engine = create_db_engine(url)
        if create_schema:
            Base.metadata.create_all(engine)
        return cls(create_session_factory(engine))

    def _run(self, build: Callable[[Session], Any], call: Callable[[Any], ResultT]) -> ResultT:
        with session_scope(self.session_factory) as db:
            return call(build(db))

    # Time ranges

    @staticmethod
    def compute_booking_time_range(
        booking_date: Union[str, date], booking_time: str, duration_minutes: int
    ) -> TimeRange:
        return compute_booking_time_range(booking_date, booking_time, duration_minutes)

    # Conflicts and availability

    def find_overlapping_bookings(
        self,
        salon_id: str,
        staff_id: Optional[str],
        start: datetime,
        end: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        return self._run(
            ConflictChecker,
            lambda s: s.find_overlapping_bookings(salon_id, staff_id, start, end, exclude_booking_id),
        )

    def is_staff_available(
        self, salon_id: str, staff_id: str, start: datetime, end: datetime
    ) -> bool:
        return self._run(
            StaffAvailabilityService,
            lambda s: s.is_staff_available(salon_id, staff_id, start, end),
        )

    # Bookings

    def create_booking(self, data: Union[BookingCreate, Mapping[str, Any]]) -> Booking:
        request = _coerce(BookingCreate, data)
        return self._run(BookingScheduler, lambda s: s.create_booking(request))

    def reschedule_booking(
        self, booking_id: str, data: Union[BookingReschedule, Mapping[str, Any]]
    ) -> Booking:
        request = _coerce(BookingReschedule, data)
        return self._run(BookingScheduler, lambda s: s.reschedule_booking(booking_id, request))

    def get_booking(self, booking_id: str) -> Booking:
        return self._run(BookingScheduler, lambda s: s.get_booking(booking_id))

    # Patterns and slots

    def create_availability_pattern(
        self, data: Union[AvailabilityPatternCreate, Mapping[str, Any]]
    ) -> AvailabilityPattern:
        request = _coerce(AvailabilityPatternCreate, data)
        return self._run(AvailabilityService, lambda s: s.create_pattern(request))

    def get_availability_pattern(self, pattern_id: str) -> AvailabilityPattern:
        return self._run(AvailabilityService, lambda s: s.get_pattern(pattern_id))

    def list_patterns_for_salon(
        self, salon_id: str, active_only: bool = False
    ) -> List[AvailabilityPattern]:
        return self._run(
            AvailabilityService, lambda s: s.list_patterns_for_salon(salon_id, active_only)
        )

    def list_patterns_for_staff(self, staff_id: str) -> List[AvailabilityPattern]:
        return self._run(AvailabilityService, lambda s: s.list_patterns_for_staff(staff_id))

    def deactivate_pattern(self, pattern_id: str) -> AvailabilityPattern:
        return self._run(AvailabilityService, lambda s: s.deactivate_pattern(pattern_id))

    def generate_time_slots_from_pattern(
        self, pattern_id: str, range_start: date, range_end: date
    ) -> List[TimeSlot]:
        return self._run(
            PatternExpander,
            lambda s: s.generate_time_slots_from_pattern(pattern_id, range_start, range_end),
        )

    def regenerate_time_slots_for_salon(
        self,
        salon_id: str,
        range_start: Optional[date] = None,
        range_end: Optional[date] = None,
    ) -> RegenerationResult:
        return self._run(
            SlotRegenerator,
            lambda s: s.regenerate_time_slots_for_salon(salon_id, range_start, range_end),
        )

    def get_time_slot(self, slot_id: str) -> TimeSlot:
        return self._run(SlotManager, lambda s: s.get_time_slot(slot_id))

    def get_available_time_slots(
        self, salon_id: str, target_date: date, staff_id: Optional[str] = None
    ) -> List[TimeSlot]:
        return self._run(
            SlotManager, lambda s: s.get_available_time_slots(salon_id, target_date, staff_id)
        )

    def block_time_slot(self, slot_id: str) -> TimeSlot:
        return self._run(SlotManager, lambda s: s.block_time_slot(slot_id))

    def unblock_time_slot(self, slot_id: str) -> TimeSlot:
        return self._run(SlotManager, lambda s: s.unblock_time_slot(slot_id))
