# salon_scheduling/services/staff_availability.py
"""Advisory staff availability checks for read paths such as slot pickers."""

from datetime import datetime
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..repositories import RepositoryFactory
from ..repositories.catalog_repository import StaffRepository
from .base import BaseService
from .conflict_checker import ConflictChecker

logger = logging.getLogger(__name__)


class StaffAvailabilityService(BaseService):
    """
    Answers "is this staff member free for this interval?" without locking.

    A True answer is not a reservation. The booking scheduler repeats the
    check under the staff lock before it writes.
    """

    def __init__(
        self,
        db: Session,
        conflict_checker: Optional[ConflictChecker] = None,
        staff_repository: Optional[StaffRepository] = None,
    ):
        super().__init__(db)
        self.conflict_checker = conflict_checker or ConflictChecker(db)
        self.staff_repository = staff_repository or RepositoryFactory.create_staff_repository(db)

    @BaseService.measure_operation("is_staff_available")
    def is_staff_available(
        self, salon_id: str, staff_id: str, start: datetime, end: datetime
    ) -> bool:
        staff = self.staff_repository.get_staff_for_salon(staff_id, salon_id)
        if staff is None:
            self.logger.debug(f"Staff {staff_id} not found in salon {salon_id}")
            return False
        if not staff.is_active:
            self.logger.debug(f"Staff {staff_id} is inactive")
            return False

        return not self.conflict_checker.has_conflict(salon_id, staff_id, start, end)
