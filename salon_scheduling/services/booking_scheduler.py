# salon_scheduling/services/booking_scheduler.py
"""
Booking Scheduler for the scheduling engine

The transactional core. Creates and reschedules bookings so that no two
active bookings for the same staff member ever overlap, including under
concurrent requests.

Every write follows the same shape inside one transaction:
1. Lock rows in the fixed order booking -> service -> staff -> time slot
2. Derive the interval from the locked service's duration
3. Check for overlaps while the staff lock is held
4. Write, or raise and roll back with nothing changed

Transient storage failures (lock-wait timeouts, deadlocks, dropped
connections) restart the whole transaction through ``with_db_retry``.
"""

from datetime import date
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.exceptions import (
    BookingConflictException,
    InvalidStateException,
    NotFoundException,
    TimeSlotUnavailableException,
    ValidationException,
)
from ..database import with_db_retry
from ..models.availability import TimeSlot
from ..models.booking import Booking, is_active_status
from ..models.staff import Staff
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories import RepositoryFactory
from ..schemas.booking import BookingCreate, BookingReschedule
from ..utils.time_helpers import (
    TimeRange,
    compute_booking_time_range,
    ends_same_day,
    normalize_booking_time,
)
from .base import BaseService
from .conflict_checker import ConflictChecker

logger = logging.getLogger(__name__)


class BookingScheduler(BaseService):
    """
    Service for creating and rescheduling bookings.

    Holds no state beyond its session and collaborators; construct one per
    session.
    """

    def __init__(self, db: Session, conflict_checker: Optional[ConflictChecker] = None):
        """
        Initialize booking scheduler.

        Args:
            db: Database session
            conflict_checker: Optional ConflictChecker sharing the same session
        """
        super().__init__(db)
        self.conflict_checker = conflict_checker or ConflictChecker(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.service_repository = RepositoryFactory.create_service_repository(db)
        self.staff_repository = RepositoryFactory.create_staff_repository(db)
        self.time_slot_repository = RepositoryFactory.create_time_slot_repository(db)

    @BaseService.measure_operation("get_booking")
    def get_booking(self, booking_id: str) -> Booking:
        booking = self.booking_repository.get_booking_with_service(booking_id)
        if booking is None:
            raise NotFoundException(f"Booking {booking_id} not found", code="BOOKING_NOT_FOUND")
        return booking

    @BaseService.measure_operation("create_booking")
    def create_booking(self, data: BookingCreate) -> Booking:
        """
        Create a booking after checking for overlaps under the staff lock.

        Args:
            data: Validated booking request

        Returns:
            The committed booking

        Raises:
            ValidationException: Malformed time or a booking that would cross midnight
            NotFoundException: Service, staff or time slot missing
            InvalidStateException: Staff inactive or from another salon
            BookingConflictException: Interval overlaps an active booking of the staff
            TimeSlotUnavailableException: Requested slot booked, blocked, or not covering
                the booking for its staff member
        """
        booking_time = normalize_booking_time(data.booking_time)

        booking = with_db_retry(
            "create_booking", lambda: self._create_booking_once(data, booking_time)
        )

        self.log_operation(
            "booking_created",
            booking_id=booking.id,
            salon_id=booking.salon_id,
            staff_id=booking.staff_id,
        )
        return booking

    def _create_booking_once(self, data: BookingCreate, booking_time: str) -> Booking:
        with self.transaction():
            service = self.service_repository.lock_service(data.service_id)
            if service is None or service.salon_id != data.salon_id:
                raise NotFoundException(
                    f"Service {data.service_id} not found", code="SERVICE_NOT_FOUND"
                )

            time_range = self._compute_interval(
                data.booking_date, booking_time, service.duration_minutes
            )

            if data.staff_id is not None:
                self._lock_and_validate_staff(data.staff_id, data.salon_id)
                self._ensure_no_conflicts("create", data.salon_id, data.staff_id, time_range)

            slot = None
            if data.time_slot_id is not None:
                slot = self._lock_bookable_slot(
                    data.time_slot_id, data.salon_id, data.staff_id, time_range
                )

            booking = self.booking_repository.create(
                salon_id=data.salon_id,
                service_id=service.id,
                staff_id=data.staff_id,
                time_slot_id=slot.id if slot is not None else None,
                customer_name=data.customer_name,
                customer_email=data.customer_email,
                customer_phone=data.customer_phone,
                booking_date=data.booking_date,
                booking_time=booking_time,
                status=data.status.value,
                notes=data.notes,
            )

            if slot is not None:
                slot.is_booked = True
                slot.booking_id = booking.id
                self.db.flush()

            return booking

    @BaseService.measure_operation("reschedule_booking")
    def reschedule_booking(self, booking_id: str, data: BookingReschedule) -> Booking:
        """
        Move a booking to a new date, time and optionally staff member.

        Atomic: on any failure the booking is left exactly as it was.

        Args:
            booking_id: Booking to move
            data: New date, time and optional staff

        Returns:
            The updated booking

        Raises:
            NotFoundException: Booking, service or new staff missing
            InvalidStateException: Booking completed or cancelled, or new staff unusable
            ValidationException: Malformed time or a booking that would cross midnight
            BookingConflictException: New interval overlaps another active booking
        """
        booking_time = normalize_booking_time(data.booking_time)

        booking = with_db_retry(
            "reschedule_booking",
            lambda: self._reschedule_booking_once(booking_id, data, booking_time),
        )

        self.log_operation(
            "booking_rescheduled",
            booking_id=booking.id,
            booking_date=booking.booking_date.isoformat(),
            booking_time=booking.booking_time,
            staff_id=booking.staff_id,
        )
        return booking

    def _reschedule_booking_once(
        self, booking_id: str, data: BookingReschedule, booking_time: str
    ) -> Booking:
        with self.transaction():
            booking = self.booking_repository.lock_booking(booking_id)
            if booking is None:
                raise NotFoundException(
                    f"Booking {booking_id} not found", code="BOOKING_NOT_FOUND"
                )
            if not is_active_status(booking.status):
                raise InvalidStateException(
                    f"Cannot reschedule a {booking.status} booking",
                    code="BOOKING_NOT_RESCHEDULABLE",
                    details={"booking_id": booking.id, "status": booking.status},
                )

            service = self.service_repository.lock_service(booking.service_id)
            if service is None:
                raise NotFoundException(
                    f"Service {booking.service_id} not found", code="SERVICE_NOT_FOUND"
                )

            time_range = self._compute_interval(
                data.booking_date, booking_time, service.duration_minutes
            )

            staff_changed = data.staff_id is not None and data.staff_id != booking.staff_id
            target_staff_id = data.staff_id if staff_changed else booking.staff_id

            if target_staff_id is not None:
                if staff_changed:
                    self._lock_and_validate_staff(target_staff_id, booking.salon_id)
                else:
                    self.staff_repository.lock_staff(target_staff_id)
                self._ensure_no_conflicts(
                    "reschedule",
                    booking.salon_id,
                    target_staff_id,
                    time_range,
                    exclude_booking_id=booking.id,
                )

            if booking.time_slot_id is not None:
                self._release_slot(booking.time_slot_id, booking.id)
                booking.time_slot_id = None

            booking.booking_date = data.booking_date
            booking.booking_time = booking_time
            booking.staff_id = target_staff_id
            self.db.flush()
            return booking

    def _compute_interval(
        self, booking_date: date, booking_time: str, duration_minutes: int
    ) -> TimeRange:
        time_range = compute_booking_time_range(booking_date, booking_time, duration_minutes)
        if not ends_same_day(time_range):
            raise ValidationException(
                "Booking must end by midnight of the day it starts",
                code="BOOKING_CROSSES_MIDNIGHT",
                details={
                    "start": time_range.start.isoformat(),
                    "end": time_range.end.isoformat(),
                },
            )
        return time_range

    def _lock_and_validate_staff(self, staff_id: str, salon_id: str) -> Staff:
        staff = self.staff_repository.lock_staff(staff_id)
        if staff is None:
            raise NotFoundException(f"Staff {staff_id} not found", code="STAFF_NOT_FOUND")
        if staff.salon_id != salon_id:
            raise InvalidStateException(
                f"Staff {staff_id} does not belong to salon {salon_id}",
                code="STAFF_NOT_IN_SALON",
            )
        if not staff.is_active:
            raise InvalidStateException(f"Staff {staff_id} is inactive", code="STAFF_INACTIVE")
        return staff

    def _ensure_no_conflicts(
        self,
        operation: str,
        salon_id: str,
        staff_id: str,
        time_range: TimeRange,
        exclude_booking_id: Optional[str] = None,
    ) -> None:
        conflicts = self.conflict_checker.find_overlapping_bookings(
            salon_id,
            staff_id,
            time_range.start,
            time_range.end,
            exclude_booking_id=exclude_booking_id,
        )
        if conflicts:
            prometheus_metrics.record_booking_conflict(operation)
            raise BookingConflictException(
                f"Staff {staff_id} already has a booking between "
                f"{time_range.start:%H:%M} and {time_range.end:%H:%M} on {time_range.start:%Y-%m-%d}",
                conflicting_booking_ids=[b.id for b in conflicts],
                details={"staff_id": staff_id},
            )

    def _lock_bookable_slot(
        self,
        slot_id: str,
        salon_id: str,
        staff_id: Optional[str],
        time_range: TimeRange,
    ) -> TimeSlot:
        slot = self.time_slot_repository.lock_slot(slot_id)
        if slot is None or slot.salon_id != salon_id:
            raise NotFoundException(f"Time slot {slot_id} not found", code="TIME_SLOT_NOT_FOUND")
        if slot.is_blocked:
            raise TimeSlotUnavailableException(slot_id, "blocked")
        if slot.is_booked:
            raise TimeSlotUnavailableException(slot_id, "booked")
        # Staff-less slots are claimable by any booking
        if slot.staff_id not in (None, staff_id):
            raise TimeSlotUnavailableException(slot_id, "assigned to another staff member")
        if not (slot.start_datetime <= time_range.start and time_range.end <= slot.end_datetime):
            raise TimeSlotUnavailableException(slot_id, "does not cover the booking time")
        return slot

    def _release_slot(self, slot_id: str, booking_id: str) -> None:
        slot = self.time_slot_repository.lock_slot(slot_id)
        if slot is None or slot.booking_id not in (None, booking_id):
            return
        slot.is_booked = False
        slot.booking_id = None
