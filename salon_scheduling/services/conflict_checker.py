# salon_scheduling/services/conflict_checker.py
"""
Conflict Checker Service for the scheduling engine

Handles booking overlap detection:
- Selecting candidate bookings for one salon and calendar date
- Deriving each candidate's interval from its service duration
- Applying the half-open overlap test

A booking's end is never stored, so every candidate's interval is rebuilt
from ``booking_date``, ``booking_time`` and the linked service's
``duration_minutes``.
"""

from datetime import datetime
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.booking import Booking
from ..repositories import RepositoryFactory
from ..repositories.conflict_checker_repository import ConflictCheckerRepository
from ..utils.time_helpers import TimeRange, compute_booking_time_range
from .base import BaseService

logger = logging.getLogger(__name__)


class ConflictChecker(BaseService):
    """
    Service for checking booking conflicts.

    Read-only: it never locks. Callers on the write path hold the staff
    lock before calling it so the answer stays valid until commit.
    """

    def __init__(self, db: Session, repository: Optional[ConflictCheckerRepository] = None):
        """
        Initialize conflict checker service.

        Args:
            db: Database session
            repository: Optional ConflictCheckerRepository instance
        """
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.repository = repository or RepositoryFactory.create_conflict_checker_repository(db)

    @staticmethod
    def booking_time_range(booking: Booking) -> TimeRange:
        """Interval occupied by a stored booking."""
        return compute_booking_time_range(
            booking.booking_date, booking.booking_time, booking.service.duration_minutes
        )

    @BaseService.measure_operation("find_overlapping_bookings")
    def find_overlapping_bookings(
        self,
        salon_id: str,
        staff_id: Optional[str],
        start: datetime,
        end: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        """
        Find active bookings whose interval overlaps ``[start, end)``.

        Candidates are narrowed to the calendar date of ``start`` before any
        interval is computed. Bookings never cross midnight, so nothing on
        another date can overlap.

        Args:
            salon_id: Salon to scan
            staff_id: Restrict to one staff member, or None for the whole salon
            start: Interval start (inclusive)
            end: Interval end (exclusive)
            exclude_booking_id: Booking to ignore, used when rescheduling itself

        Returns:
            Every overlapping booking, ordered by start time
        """
        requested = TimeRange(start=start, end=end)
        candidates = self.repository.get_bookings_for_conflict_check(
            salon_id, start.date(), staff_id=staff_id, exclude_booking_id=exclude_booking_id
        )

        overlapping = [
            booking for booking in candidates if self.booking_time_range(booking).overlaps(requested)
        ]

        if overlapping:
            self.logger.warning(
                f"Found {len(overlapping)} booking conflicts for staff {staff_id} "
                f"in salon {salon_id} between {start:%Y-%m-%d %H:%M}-{end:%H:%M}",
                extra={
                    "event": "booking_overlap_detected",
                    "salon_id": salon_id,
                    "staff_id": staff_id,
                    "conflicting_booking_ids": [b.id for b in overlapping],
                },
            )

        return overlapping

    def has_conflict(
        self,
        salon_id: str,
        staff_id: Optional[str],
        start: datetime,
        end: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        return bool(
            self.find_overlapping_bookings(salon_id, staff_id, start, end, exclude_booking_id)
        )
