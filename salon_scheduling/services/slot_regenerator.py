# salon_scheduling/services/slot_regenerator.py
"""
Slot Regenerator for the scheduling engine

Rebuilds a salon's materialized slots after its patterns change: every
unbooked slot in the range is deleted, then every active pattern is
expanded again. Booked slots are never deleted.

Callers must not run two regenerations for the same salon and range at once.
"""

from datetime import date, timedelta
import logging
from typing import NamedTuple, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..database import with_db_retry
from ..repositories import RepositoryFactory
from .base import BaseService
from .pattern_expander import PatternExpander, SlotKey, validate_date_range

logger = logging.getLogger(__name__)


class RegenerationResult(NamedTuple):
    deleted: int
    created: int
    patterns: int


class SlotRegenerator(BaseService):
    def __init__(self, db: Session, expander: Optional[PatternExpander] = None):
        super().__init__(db)
        self.expander = expander or PatternExpander(db)
        self.availability_repository = RepositoryFactory.create_availability_repository(db)
        self.time_slot_repository = RepositoryFactory.create_time_slot_repository(db)

    @BaseService.measure_operation("regenerate_time_slots_for_salon")
    def regenerate_time_slots_for_salon(
        self,
        salon_id: str,
        range_start: Optional[date] = None,
        range_end: Optional[date] = None,
    ) -> RegenerationResult:
        """
        Replace the salon's unbooked slots in ``[range_start, range_end]``.

        The range defaults to today through the configured horizon. Running
        it twice without pattern changes yields the same slot set: windows
        already covered by a surviving booked slot are not generated again.
        """
        first_day = range_start or date.today()
        last_day = range_end or first_day + timedelta(days=settings.regeneration_horizon_days)
        validate_date_range(first_day, last_day)

        result = with_db_retry(
            "regenerate_time_slots_for_salon",
            lambda: self._regenerate_once(salon_id, first_day, last_day),
        )

        self.log_operation(
            "slots_regenerated",
            salon_id=salon_id,
            range_start=first_day.isoformat(),
            range_end=last_day.isoformat(),
            deleted_count=result.deleted,
            created_count=result.created,
        )
        return result

    def _regenerate_once(self, salon_id: str, first_day: date, last_day: date) -> RegenerationResult:
        with self.transaction():
            deleted = self.time_slot_repository.delete_unbooked_slots_in_range(
                salon_id, first_day, last_day
            )

            booked = self.time_slot_repository.get_slots_in_range(
                salon_id, first_day, last_day, booked=True
            )
            skip: set[SlotKey] = {
                (slot.staff_id, slot.start_datetime, slot.end_datetime) for slot in booked
            }

            patterns = self.availability_repository.get_patterns_for_salon(
                salon_id, active_only=True
            )
            created = 0
            for pattern in patterns:
                created += len(self.expander.materialize(pattern, first_day, last_day, skip))

            return RegenerationResult(deleted=deleted, created=created, patterns=len(patterns))
