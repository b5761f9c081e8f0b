# salon_scheduling/repositories/booking_repository.py
"""Booking data access: plain reads plus the locked read used by reschedule."""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..models.booking import Booking
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    def __init__(self, db: Session):
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def get_booking_with_service(self, booking_id: str) -> Optional[Booking]:
        try:
            return (
                self.db.query(Booking)
                .options(joinedload(Booking.service))
                .filter(Booking.id == booking_id)
                .first()
            )
        except SQLAlchemyError as e:
            self._raise_storage_error(e, "retrieve")

    def lock_booking(self, booking_id: str) -> Optional[Booking]:
        """First lock in the booking -> service -> staff -> slot order."""
        return self.lock_by_id(booking_id)
