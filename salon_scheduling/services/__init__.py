"""
Service layer for the scheduling engine.

Services own transaction boundaries; repositories below them never commit.
"""

from .availability_service import AvailabilityService
from .base import BaseService
from .booking_scheduler import BookingScheduler
from .conflict_checker import ConflictChecker
from .pattern_expander import PatternExpander
from .slot_manager import SlotManager
from .slot_regenerator import RegenerationResult, SlotRegenerator
from .staff_availability import StaffAvailabilityService

__all__ = [
    "AvailabilityService",
    "BaseService",
    "BookingScheduler",
    "ConflictChecker",
    "PatternExpander",
    "RegenerationResult",
    "SlotManager",
    "SlotRegenerator",
    "StaffAvailabilityService",
]
