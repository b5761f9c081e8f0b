# salon_scheduling/repositories/catalog_repository.py
"""
Read access to the salon catalogue: services and staff.

The engine never edits these rows. It reads service durations and staff
activity, and locks the rows for the length of a booking transaction so
neither can change underneath a conflict check.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.service import Service
from ..models.staff import Staff
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ServiceRepository(BaseRepository[Service]):
    def __init__(self, db: Session):
        super().__init__(db, Service)

    def lock_service(self, service_id: str) -> Optional[Service]:
        """Pins the duration against concurrent edits for the transaction."""
        return self.lock_by_id(service_id)


class StaffRepository(BaseRepository[Staff]):
    def __init__(self, db: Session):
        super().__init__(db, Staff)

    def get_staff_for_salon(self, staff_id: str, salon_id: str) -> Optional[Staff]:
        """Staff member by id, only if they belong to the salon."""
        try:
            return (
                self.db.query(Staff)
                .filter(Staff.id == staff_id, Staff.salon_id == salon_id)
                .first()
            )
        except SQLAlchemyError as e:
            self._raise_storage_error(e, "retrieve")

    def lock_staff(self, staff_id: str) -> Optional[Staff]:
        """
        Exclusive lock on a staff member's booking domain.

        Every writer that places a booking on this staff member takes this
        lock before checking for overlaps, so check-then-write is serialized
        per staff member.
        """
        return self.lock_by_id(staff_id)

