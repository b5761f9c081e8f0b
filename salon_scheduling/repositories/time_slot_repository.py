# salon_scheduling/repositories/time_slot_repository.py
"""
TimeSlot Repository for the scheduling engine.

Key responsibilities:
- Slot retrieval and locking
- Date-based availability queries
- Range deletion of unbooked slots during regeneration
"""

from datetime import date, datetime, time, timedelta
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.availability import TimeSlot
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


def _day_bounds(first_day: date, last_day: date) -> tuple[datetime, datetime]:
    """[first_day 00:00, last_day + 1 00:00) for an inclusive day range."""
    return (
        datetime.combine(first_day, time(0, 0)),
        datetime.combine(last_day + timedelta(days=1), time(0, 0)),
    )


class TimeSlotRepository(BaseRepository[TimeSlot]):
    def __init__(self, db: Session):
        super().__init__(db, TimeSlot)
        self.logger = logging.getLogger(__name__)

    def get_slot_by_id(self, slot_id: str) -> Optional[TimeSlot]:
        return self.get_by_id(slot_id)

    def lock_slot(self, slot_id: str) -> Optional[TimeSlot]:
        return self.lock_by_id(slot_id)

    def get_available_slots(
        self, salon_id: str, target_date: date, staff_id: Optional[str] = None
    ) -> List[TimeSlot]:
        """Unbooked, unblocked slots starting on the given date, ordered by start."""
        day_start, day_end = _day_bounds(target_date, target_date)
        try:
            query = self.db.query(TimeSlot).filter(
                TimeSlot.salon_id == salon_id,
                TimeSlot.start_datetime >= day_start,
                TimeSlot.start_datetime < day_end,
                TimeSlot.is_booked.is_(False),
                TimeSlot.is_blocked.is_(False),
            )
            if staff_id is not None:
                query = query.filter(TimeSlot.staff_id == staff_id)
            return query.order_by(TimeSlot.start_datetime, TimeSlot.staff_id).all()
        except SQLAlchemyError as e:
            self._raise_storage_error(e, "list available")

    def get_slots_in_range(
        self, salon_id: str, first_day: date, last_day: date, booked: Optional[bool] = None
    ) -> List[TimeSlot]:
        range_start, range_end = _day_bounds(first_day, last_day)
        try:
            query = self.db.query(TimeSlot).filter(
                TimeSlot.salon_id == salon_id,
                TimeSlot.start_datetime >= range_start,
                TimeSlot.start_datetime < range_end,
            )
            if booked is not None:
                query = query.filter(TimeSlot.is_booked.is_(booked))
            return query.order_by(TimeSlot.start_datetime).all()
        except SQLAlchemyError as e:
            self._raise_storage_error(e, "list")

    def delete_unbooked_slots_in_range(self, salon_id: str, first_day: date, last_day: date) -> int:
        """
        Delete every unbooked slot of the salon starting within the day range.

        Booked slots are never touched.

        Returns:
            Number of rows deleted
        """
        range_start, range_end = _day_bounds(first_day, last_day)
        try:
            deleted = (
                self.db.query(TimeSlot)
                .filter(
                    TimeSlot.salon_id == salon_id,
                    TimeSlot.is_booked.is_(False),
                    TimeSlot.start_datetime >= range_start,
                    TimeSlot.start_datetime < range_end,
                )
                .delete(synchronize_session="fetch")
            )
            self.db.flush()
            return int(deleted or 0)
        except SQLAlchemyError as e:
            self._raise_storage_error(e, "delete")
