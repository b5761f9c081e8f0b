"""
Salon booking scheduling and conflict-detection engine.

Guarantees that no staff member is double-booked, expands weekly
availability patterns into bookable time slots, and moves bookings
atomically under concurrent requests.
"""

from .core.exceptions import (
    BookingConflictException,
    ConflictException,
    DomainException,
    InvalidStateException,
    NotFoundException,
    TimeSlotUnavailableException,
    TransientStorageException,
    ValidationException,
)
from .engine import SchedulingEngine

__version__ = "0.1.0"

__all__ = [
    "BookingConflictException",
    "ConflictException",
    "DomainException",
    "InvalidStateException",
    "NotFoundException",
    "SchedulingEngine",
    "TimeSlotUnavailableException",
    "TransientStorageException",
    "ValidationException",
]
