# salon_scheduling/repositories/availability_repository.py
"""Availability pattern queries."""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.availability import AvailabilityPattern
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AvailabilityRepository(BaseRepository[AvailabilityPattern]):
    def __init__(self, db: Session):
        super().__init__(db, AvailabilityPattern)
        self.logger = logging.getLogger(__name__)

    def get_pattern(self, pattern_id: str) -> Optional[AvailabilityPattern]:
        return self.get_by_id(pattern_id)

    def get_patterns_for_salon(
        self, salon_id: str, active_only: bool = False
    ) -> List[AvailabilityPattern]:
        try:
            query = self.db.query(AvailabilityPattern).filter(
                AvailabilityPattern.salon_id == salon_id
            )
            if active_only:
                query = query.filter(AvailabilityPattern.is_active.is_(True))
            return query.order_by(
                AvailabilityPattern.day_of_week, AvailabilityPattern.start_time
            ).all()
        except SQLAlchemyError as e:
            self._raise_storage_error(e, "list")

    def get_patterns_for_staff(self, staff_id: str) -> List[AvailabilityPattern]:
        try:
            return (
                self.db.query(AvailabilityPattern)
                .filter(AvailabilityPattern.staff_id == staff_id)
                .order_by(AvailabilityPattern.day_of_week, AvailabilityPattern.start_time)
                .all()
            )
        except SQLAlchemyError as e:
            self._raise_storage_error(e, "list")
