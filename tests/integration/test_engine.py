"""End-to-end tests through the SchedulingEngine facade."""

from datetime import datetime

import pytest

from salon_scheduling import (
    BookingConflictException,
    InvalidStateException,
    NotFoundException,
    SchedulingEngine,
    ValidationException,
)
from tests.helpers import SALON_ID, SUNDAY, add_booking, add_service, add_staff, booking_payload

pytestmark = pytest.mark.integration


@pytest.fixture
def catalogue(seed):
    return seed(lambda db: (add_service(db, duration_minutes=45), add_staff(db, "Alex")))


class TestSchedulingEngine:
    def test_booking_lifecycle(self, scheduling_engine, catalogue):
        service, staff = catalogue

        booking = scheduling_engine.create_booking(booking_payload(service, staff, "2:30 PM"))
        assert booking.booking_time == "14:30"

        with pytest.raises(BookingConflictException):
            scheduling_engine.create_booking(booking_payload(service, staff, "15:00"))

        moved = scheduling_engine.reschedule_booking(
            booking.id, {"booking_date": "2024-03-10", "booking_time": "16:00"}
        )
        assert moved.booking_time == "16:00"
        assert scheduling_engine.get_booking(booking.id).booking_time == "16:00"

        overlaps = scheduling_engine.find_overlapping_bookings(
            SALON_ID, staff.id, datetime(2024, 3, 10, 16, 30), datetime(2024, 3, 10, 17, 0)
        )
        assert [b.id for b in overlaps] == [booking.id]
        assert not scheduling_engine.is_staff_available(
            SALON_ID, staff.id, datetime(2024, 3, 10, 16, 30), datetime(2024, 3, 10, 17, 0)
        )
        assert scheduling_engine.is_staff_available(
            SALON_ID, staff.id, datetime(2024, 3, 10, 14, 30), datetime(2024, 3, 10, 16, 0)
        )

    def test_invalid_request_payload(self, scheduling_engine, catalogue):
        service, staff = catalogue

        with pytest.raises(ValidationException) as exc_info:
            scheduling_engine.create_booking(
                booking_payload(service, staff, "10:00", booking_date="10/03/2024")
            )
        assert exc_info.value.code == "INVALID_REQUEST"

        with pytest.raises(ValidationException):
            scheduling_engine.create_booking(
                booking_payload(service, staff, "10:00", status="cancelled")
            )

        with pytest.raises(ValidationException):
            scheduling_engine.reschedule_booking("anything", {"booking_time": "10:00"})

    def test_reschedule_terminal_booking(self, scheduling_engine, seed, catalogue):
        service, staff = catalogue
        booking = seed(lambda db: add_booking(db, service, staff, "10:00", status="completed"))

        with pytest.raises(InvalidStateException):
            scheduling_engine.reschedule_booking(
                booking.id, {"booking_date": "2024-03-10", "booking_time": "12:00"}
            )

    def test_patterns_and_slots(self, scheduling_engine, catalogue):
        _, staff = catalogue

        pattern = scheduling_engine.create_availability_pattern(
            {
                "salon_id": SALON_ID,
                "staff_id": staff.id,
                "day_of_week": 0,
                "start_time": "09:00",
                "end_time": "09:50",
                "slot_duration_minutes": 30,
            }
        )
        assert scheduling_engine.get_availability_pattern(pattern.id).end_time == "09:50"
        assert [p.id for p in scheduling_engine.list_patterns_for_salon(SALON_ID)] == [pattern.id]
        assert [p.id for p in scheduling_engine.list_patterns_for_staff(staff.id)] == [pattern.id]

        slots = scheduling_engine.generate_time_slots_from_pattern(pattern.id, SUNDAY, SUNDAY)
        assert [(s.start_datetime, s.end_datetime) for s in slots] == [
            (datetime(2024, 3, 10, 9, 0), datetime(2024, 3, 10, 9, 30))
        ]

        slot_id = slots[0].id
        scheduling_engine.block_time_slot(slot_id)
        assert scheduling_engine.get_time_slot(slot_id).is_blocked is True
        assert scheduling_engine.get_available_time_slots(SALON_ID, SUNDAY) == []

        scheduling_engine.unblock_time_slot(slot_id)
        assert [s.id for s in scheduling_engine.get_available_time_slots(SALON_ID, SUNDAY)] == [slot_id]

        result = scheduling_engine.regenerate_time_slots_for_salon(SALON_ID, SUNDAY, SUNDAY)
        assert (result.deleted, result.created) == (1, 1)

        scheduling_engine.deactivate_pattern(pattern.id)
        result = scheduling_engine.regenerate_time_slots_for_salon(SALON_ID, SUNDAY, SUNDAY)
        assert (result.deleted, result.created) == (1, 0)

    def test_missing_rows(self, scheduling_engine):
        with pytest.raises(NotFoundException):
            scheduling_engine.get_booking("missing")
        with pytest.raises(NotFoundException):
            scheduling_engine.block_time_slot("missing")
        with pytest.raises(NotFoundException):
            scheduling_engine.get_availability_pattern("missing")

    def test_compute_booking_time_range_is_exposed(self):
        result = SchedulingEngine.compute_booking_time_range("2024-03-10", "14:30", 45)
        assert (result.start, result.end) == (
            datetime(2024, 3, 10, 14, 30),
            datetime(2024, 3, 10, 15, 15),
        )

    def test_from_url_creates_schema(self, tmp_path):
        engine = SchedulingEngine.from_url(
            f"sqlite+pysqlite:///{tmp_path / 'fresh.db'}", create_schema=True
        )
        with pytest.raises(NotFoundException):
            engine.get_time_slot("missing")
