"""
Database models for the scheduling engine.

- Service and Staff: read-only collaborators supplying duration and activity
- Booking: appointments whose intervals must never overlap per staff member
- AvailabilityPattern and TimeSlot: recurring rules and their materialized slots
"""

from .availability import AvailabilityPattern, TimeSlot
from .booking import (
    ACTIVE_BOOKING_STATUSES,
    TERMINAL_BOOKING_STATUSES,
    Booking,
    BookingStatus,
    is_active_status,
)
from .service import Service
from .staff import Staff

__all__ = [
    "ACTIVE_BOOKING_STATUSES",
    "AvailabilityPattern",
    "Booking",
    "BookingStatus",
    "Service",
    "Staff",
    "TERMINAL_BOOKING_STATUSES",
    "TimeSlot",
    "is_active_status",
]
