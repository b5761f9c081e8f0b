# salon_scheduling/repositories/factory.py
"""
Repository Factory for the scheduling engine.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .availability_repository import AvailabilityRepository
    from .booking_repository import BookingRepository
    from .catalog_repository import ServiceRepository, StaffRepository
    from .conflict_checker_repository import ConflictCheckerRepository
    from .time_slot_repository import TimeSlotRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        """Create repository for booking operations."""
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_conflict_checker_repository(db: Session) -> "ConflictCheckerRepository":
        """Create repository for conflict checking queries."""
        from .conflict_checker_repository import ConflictCheckerRepository

        return ConflictCheckerRepository(db)

    @staticmethod
    def create_service_repository(db: Session) -> "ServiceRepository":
        """Create repository for service lookups."""
        from .catalog_repository import ServiceRepository

        return ServiceRepository(db)

    @staticmethod
    def create_staff_repository(db: Session) -> "StaffRepository":
        """Create repository for staff lookups."""
        from .catalog_repository import StaffRepository

        return StaffRepository(db)

    @staticmethod
    def create_availability_repository(db: Session) -> "AvailabilityRepository":
        """Create repository for availability pattern operations."""
        from .availability_repository import AvailabilityRepository

        return AvailabilityRepository(db)

    @staticmethod
    def create_time_slot_repository(db: Session) -> "TimeSlotRepository":
        """Create repository for time slot operations."""
        from .time_slot_repository import TimeSlotRepository

        return TimeSlotRepository(db)
