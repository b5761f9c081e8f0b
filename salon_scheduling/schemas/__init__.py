"""Request schemas accepted by the scheduling engine."""

from .availability import AvailabilityPatternCreate
from .booking import BookingCreate, BookingReschedule

__all__ = ["AvailabilityPatternCreate", "BookingCreate", "BookingReschedule"]
