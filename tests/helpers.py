"""Catalogue and booking seed helpers shared by the integration tests."""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from salon_scheduling.models import AvailabilityPattern, Booking, Service, Staff, TimeSlot
from salon_scheduling.utils.time_helpers import normalize_booking_time

SALON_ID = "salon-1"
OTHER_SALON_ID = "salon-2"

# 2024-03-10 is a Sunday (day_of_week 0)
SUNDAY = date(2024, 3, 10)
MONDAY = date(2024, 3, 11)


def add_service(db: Session, duration_minutes: int = 60, salon_id: str = SALON_ID) -> Service:
    service = Service(
        salon_id=salon_id, name=f"Service {duration_minutes}m", duration_minutes=duration_minutes
    )
    db.add(service)
    db.commit()
    return service


def add_staff(
    db: Session, name: str = "Alex", salon_id: str = SALON_ID, is_active: bool = True
) -> Staff:
    staff = Staff(salon_id=salon_id, name=name, is_active=is_active)
    db.add(staff)
    db.commit()
    return staff


def add_booking(
    db: Session,
    service: Service,
    staff: Optional[Staff],
    booking_time: str,
    booking_date: date = SUNDAY,
    status: str = "confirmed",
    salon_id: str = SALON_ID,
) -> Booking:
    """Insert a booking directly, bypassing the scheduler's checks."""
    booking = Booking(
        salon_id=salon_id,
        service_id=service.id,
        staff_id=staff.id if staff is not None else None,
        customer_name="Jordan Lee",
        customer_email="jordan@example.com",
        customer_phone="555-0100",
        booking_date=booking_date,
        booking_time=normalize_booking_time(booking_time),
        status=status,
    )
    db.add(booking)
    db.commit()
    return booking


def add_pattern(
    db: Session,
    staff: Optional[Staff],
    day_of_week: int = 0,
    start_time: str = "09:00",
    end_time: str = "12:00",
    slot_duration_minutes: int = 30,
    is_active: bool = True,
    salon_id: str = SALON_ID,
) -> AvailabilityPattern:
    pattern = AvailabilityPattern(
        salon_id=salon_id,
        staff_id=staff.id if staff is not None else None,
        pattern_name="Weekly",
        day_of_week=day_of_week,
        start_time=start_time,
        end_time=end_time,
        slot_duration_minutes=slot_duration_minutes,
        is_active=is_active,
    )
    db.add(pattern)
    db.commit()
    return pattern


def add_slot(db: Session, staff: Optional[Staff], start, end, **flags) -> TimeSlot:
    slot = TimeSlot(
        salon_id=flags.pop("salon_id", SALON_ID),
        staff_id=staff.id if staff is not None else None,
        start_datetime=start,
        end_datetime=end,
        **flags,
    )
    db.add(slot)
    db.commit()
    return slot


def booking_payload(service: Service, staff: Optional[Staff], booking_time: str, **overrides) -> dict:
    payload = {
        "salon_id": SALON_ID,
        "service_id": service.id,
        "staff_id": staff.id if staff is not None else None,
        "customer_name": "Sam Rivera",
        "customer_email": "sam@example.com",
        "customer_phone": "555-0199",
        "booking_date": SUNDAY.isoformat(),
        "booking_time": booking_time,
    }
    payload.update(overrides)
    return payload
