# salon_scheduling/schemas/booking.py
"""
Booking request schemas.

``booking_time`` stays a string here: both "14:30" and "2:30 PM" are
accepted, and the scheduler normalizes it to canonical "HH:MM" before
anything is stored.
"""

from datetime import date
import re
from typing import Optional

from pydantic import Field, field_validator

from ..models.booking import BookingStatus, is_active_status
from ._strict_base import StrictRequestModel

DATE_ONLY_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _ensure_date_only(value: object, field_name: str) -> object:
    if isinstance(value, str):
        candidate = value.strip()
        if not DATE_ONLY_REGEX.fullmatch(candidate):
            raise ValueError(f"{field_name} must be a YYYY-MM-DD date-only string")
        return candidate
    return value


class BookingCreate(StrictRequestModel):
    """Create a booking for one service, optionally assigned to a staff member."""

    salon_id: str = Field(..., min_length=1)
    service_id: str = Field(..., min_length=1)
    staff_id: Optional[str] = Field(None, description="Unassigned when omitted")
    time_slot_id: Optional[str] = Field(
        None, description="Materialized slot to claim alongside the booking"
    )
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: str = Field(..., min_length=3, max_length=255)
    customer_phone: str = Field(..., min_length=1, max_length=50)
    booking_date: date
    booking_time: str = Field(..., min_length=1, description="HH:MM or H:MM AM/PM")
    status: BookingStatus = BookingStatus.PENDING
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("booking_date", mode="before")
    @classmethod
    def _enforce_date_only(cls, v: object) -> object:
        return _ensure_date_only(v, "booking_date")

    @field_validator("status")
    @classmethod
    def _initial_status_must_be_active(cls, v: BookingStatus) -> BookingStatus:
        if not is_active_status(v):
            raise ValueError(f"A new booking cannot start as {v.value}")
        return v

    @field_validator("notes")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class BookingReschedule(StrictRequestModel):
    """
    Move a booking to a new date and time.

    ``staff_id`` left as None keeps the current assignment.
    """

    booking_date: date
    booking_time: str = Field(..., min_length=1)
    staff_id: Optional[str] = None

    @field_validator("booking_date", mode="before")
    @classmethod
    def _enforce_date_only(cls, v: object) -> object:
        return _ensure_date_only(v, "booking_date")
