# salon_scheduling/models/booking.py
"""
Booking model for the scheduling engine.

A booking stores its date and start time as entered by the salon. Its end is
never stored: it is derived from the linked service's duration whenever the
interval is needed, so a service duration edit moves every future booking's
end with it.
"""

from enum import Enum
import logging
from typing import Any

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    ARRIVED = "arrived"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


ACTIVE_BOOKING_STATUSES = frozenset(
    {BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.ARRIVED}
)
TERMINAL_BOOKING_STATUSES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})


def is_active_status(status: "BookingStatus | str") -> bool:
    """Whether a booking in this status occupies its staff member's time."""
    value = BookingStatus(status)
    if value in (BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.ARRIVED):
        return True
    if value in (BookingStatus.COMPLETED, BookingStatus.CANCELLED):
        return False
    raise ValueError(f"Unhandled booking status: {value}")


class Booking(Base):
    """
    A customer's appointment for one service at one salon.

    ``staff_id`` may be null when the salon has not assigned anyone yet;
    unassigned bookings never take part in staff conflict detection.
    """

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)

    salon_id = Column(String(64), nullable=False, index=True)
    service_id = Column(String(26), ForeignKey("services.id", ondelete="RESTRICT"), nullable=False)
    staff_id = Column(String(26), ForeignKey("staff.id", ondelete="SET NULL"), nullable=True)
    time_slot_id = Column(
        String(26), ForeignKey("time_slots.id", ondelete="SET NULL"), nullable=True
    )

    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(50), nullable=False)

    booking_date = Column(Date, nullable=False)
    # Canonical 24-hour "HH:MM"
    booking_time = Column(String(5), nullable=False)

    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    service = relationship("Service", back_populates="bookings")
    staff = relationship("Staff", back_populates="bookings")
    time_slot = relationship("TimeSlot", foreign_keys=[time_slot_id])

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'arrived', 'completed', 'cancelled')",
            name="ck_bookings_status",
        ),
        Index("idx_bookings_salon_date_staff", "salon_id", "booking_date", "staff_id"),
    )

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if not self.status:
            self.status = BookingStatus.PENDING.value

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id}: salon={self.salon_id}, staff={self.staff_id}, "
            f"date={self.booking_date}, time={self.booking_time}, status={self.status}>"
        )

    @property
    def is_active(self) -> bool:
        return is_active_status(self.status)
