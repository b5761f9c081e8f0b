# salon_scheduling/services/slot_manager.py
"""Time slot reads plus manual block and unblock."""

from datetime import date
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException
from ..database import with_db_retry
from ..models.availability import TimeSlot
from ..repositories import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class SlotManager(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.time_slot_repository = RepositoryFactory.create_time_slot_repository(db)

    @BaseService.measure_operation("get_time_slot")
    def get_time_slot(self, slot_id: str) -> TimeSlot:
        slot = self.time_slot_repository.get_slot_by_id(slot_id)
        if slot is None:
            raise NotFoundException(f"Time slot {slot_id} not found", code="TIME_SLOT_NOT_FOUND")
        return slot

    @BaseService.measure_operation("get_available_time_slots")
    def get_available_time_slots(
        self, salon_id: str, target_date: date, staff_id: Optional[str] = None
    ) -> List[TimeSlot]:
        """Slots on the date that are neither booked nor blocked."""
        return self.time_slot_repository.get_available_slots(salon_id, target_date, staff_id)

    @BaseService.measure_operation("block_time_slot")
    def block_time_slot(self, slot_id: str) -> TimeSlot:
        return self._set_blocked(slot_id, True)

    @BaseService.measure_operation("unblock_time_slot")
    def unblock_time_slot(self, slot_id: str) -> TimeSlot:
        return self._set_blocked(slot_id, False)

    def _set_blocked(self, slot_id: str, blocked: bool) -> TimeSlot:
        def _apply() -> TimeSlot:
            with self.transaction():
                slot = self.time_slot_repository.lock_slot(slot_id)
                if slot is None:
                    raise NotFoundException(
                        f"Time slot {slot_id} not found", code="TIME_SLOT_NOT_FOUND"
                    )
                slot.is_blocked = blocked
                self.db.flush()
                return slot

        slot = with_db_retry("block_time_slot" if blocked else "unblock_time_slot", _apply)
        self.log_operation(
            "time_slot_blocked" if blocked else "time_slot_unblocked",
            slot_id=slot_id,
            salon_id=slot.salon_id,
        )
        return slot
