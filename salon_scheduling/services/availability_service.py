# salon_scheduling/services/availability_service.py
"""
Availability pattern management.

Patterns are deactivated, never deleted, so slots already booked from a
superseded rule keep pointing at it. Changing patterns does not touch the
slot table; callers run the slot regenerator afterwards.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from ..core.exceptions import InvalidStateException, NotFoundException, ValidationException
from ..database import with_db_retry
from ..models.availability import AvailabilityPattern
from ..repositories import RepositoryFactory
from ..schemas.availability import AvailabilityPatternCreate
from ..utils.time_helpers import string_to_time, time_to_string
from .base import BaseService

logger = logging.getLogger(__name__)


class AvailabilityService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_availability_repository(db)
        self.staff_repository = RepositoryFactory.create_staff_repository(db)

    @BaseService.measure_operation("create_availability_pattern")
    def create_pattern(self, data: AvailabilityPatternCreate) -> AvailabilityPattern:
        """
        Validate and store a weekly pattern.

        Raises:
            ValidationException: Times malformed or start not before end
            NotFoundException: Staff member does not exist
            InvalidStateException: Staff member belongs to another salon
        """
        start = string_to_time(data.start_time)
        end = string_to_time(data.end_time)
        if start >= end:
            raise ValidationException(
                f"Pattern start {data.start_time} must be before end {data.end_time}",
                code="INVALID_PATTERN_WINDOW",
            )

        def _create() -> AvailabilityPattern:
            with self.transaction():
                if data.staff_id is not None:
                    staff = self.staff_repository.get_by_id(data.staff_id)
                    if staff is None:
                        raise NotFoundException(
                            f"Staff {data.staff_id} not found", code="STAFF_NOT_FOUND"
                        )
                    if staff.salon_id != data.salon_id:
                        raise InvalidStateException(
                            f"Staff {data.staff_id} does not belong to salon {data.salon_id}",
                            code="STAFF_NOT_IN_SALON",
                        )

                return self.repository.create(
                    salon_id=data.salon_id,
                    staff_id=data.staff_id,
                    pattern_name=data.pattern_name,
                    day_of_week=data.day_of_week,
                    start_time=time_to_string(start),
                    end_time=time_to_string(end),
                    slot_duration_minutes=data.slot_duration_minutes,
                    is_active=True,
                    effective_from=data.effective_from,
                    effective_until=data.effective_until,
                )

        pattern = with_db_retry("create_availability_pattern", _create)
        self.log_operation("pattern_created", pattern_id=pattern.id, salon_id=pattern.salon_id)
        return pattern

    def get_pattern(self, pattern_id: str) -> AvailabilityPattern:
        pattern = self.repository.get_pattern(pattern_id)
        if pattern is None:
            raise NotFoundException(
                f"Availability pattern {pattern_id} not found", code="PATTERN_NOT_FOUND"
            )
        return pattern

    def list_patterns_for_salon(
        self, salon_id: str, active_only: bool = False
    ) -> List[AvailabilityPattern]:
        return self.repository.get_patterns_for_salon(salon_id, active_only=active_only)

    def list_patterns_for_staff(self, staff_id: str) -> List[AvailabilityPattern]:
        return self.repository.get_patterns_for_staff(staff_id)

    @BaseService.measure_operation("deactivate_availability_pattern")
    def deactivate_pattern(self, pattern_id: str) -> AvailabilityPattern:
        def _deactivate() -> AvailabilityPattern:
            with self.transaction():
                pattern = self.repository.lock_by_id(pattern_id)
                if pattern is None:
                    raise NotFoundException(
                        f"Availability pattern {pattern_id} not found", code="PATTERN_NOT_FOUND"
                    )
                pattern.is_active = False
                self.db.flush()
                return pattern

        pattern = with_db_retry("deactivate_availability_pattern", _deactivate)
        self.log_operation("pattern_deactivated", pattern_id=pattern_id)
        return pattern
