# salon_scheduling/repositories/conflict_checker_repository.py
"""
ConflictChecker Repository for the scheduling engine.

Candidate selection for overlap detection. The query narrows by salon,
calendar date and active status in SQL; the exact interval test runs in
the service because a booking's end depends on its service's duration.
"""

from datetime import date
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..models.booking import ACTIVE_BOOKING_STATUSES, Booking
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

_ACTIVE_STATUS_VALUES = sorted(status.value for status in ACTIVE_BOOKING_STATUSES)


class ConflictCheckerRepository(BaseRepository[Booking]):
    """Repository for conflict checking data access."""

    def __init__(self, db: Session):
        """Initialize with Booking model as primary."""
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def get_bookings_for_conflict_check(
        self,
        salon_id: str,
        check_date: date,
        staff_id: Optional[str] = None,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        """
        Get active bookings that could conflict with an interval on one date.

        Args:
            salon_id: The salon to scan
            check_date: The calendar date of the interval's start
            staff_id: Restrict to one staff member when given
            exclude_booking_id: Optional booking ID to exclude from results

        Returns:
            Active bookings with their service eagerly loaded
        """
        try:
            query = (
                self.db.query(Booking)
                .options(joinedload(Booking.service))
                .filter(
                    Booking.salon_id == salon_id,
                    Booking.booking_date == check_date,
                    Booking.status.in_(_ACTIVE_STATUS_VALUES),
                )
            )

            if staff_id is not None:
                query = query.filter(Booking.staff_id == staff_id)

            if exclude_booking_id:
                query = query.filter(Booking.id != exclude_booking_id)

            return query.order_by(Booking.booking_time).all()

        except SQLAlchemyError as e:
            self._raise_storage_error(e, "load conflict candidates for")
