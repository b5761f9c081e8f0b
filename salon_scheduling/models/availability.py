# salon_scheduling/models/availability.py
"""
Availability models.

Classes:
    AvailabilityPattern: Recurring weekly rule for when a staff member works
    TimeSlot: Concrete, date-stamped interval materialized from a pattern,
        or a manually blocked interval
"""

import logging

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base

logger = logging.getLogger(__name__)


class AvailabilityPattern(Base):
    """
    Recurring weekly availability rule.

    ``day_of_week`` counts from Sunday (0) to Saturday (6). Times are
    "HH:MM" wall-clock strings. Superseded patterns are deactivated rather
    than deleted so slots already booked from them keep their provenance.
    """

    __tablename__ = "availability_patterns"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    salon_id = Column(String(64), nullable=False, index=True)
    staff_id = Column(String(26), ForeignKey("staff.id", ondelete="CASCADE"), nullable=True)
    pattern_name = Column(String(255), nullable=False, default="")
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    slot_duration_minutes = Column(Integer, nullable=False, default=30)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    effective_from = Column(Date, nullable=True)
    effective_until = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    staff = relationship("Staff", back_populates="availability_patterns")
    time_slots = relationship("TimeSlot", back_populates="pattern")

    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_patterns_day_of_week"),
        CheckConstraint("slot_duration_minutes > 0", name="ck_patterns_slot_duration_positive"),
    )

    def __repr__(self) -> str:
        return (
            f"<AvailabilityPattern {self.id}: day={self.day_of_week} "
            f"{self.start_time}-{self.end_time} every {self.slot_duration_minutes}m>"
        )


class TimeSlot(Base):
    """
    Materialized bookable interval.

    ``is_booked`` is set by the booking flow, ``is_blocked`` by the salon.
    Blocking takes precedence: a blocked slot is never offered even if free.
    """

    __tablename__ = "time_slots"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    pattern_id = Column(
        String(26), ForeignKey("availability_patterns.id", ondelete="CASCADE"), nullable=True
    )
    salon_id = Column(String(64), nullable=False)
    staff_id = Column(String(26), ForeignKey("staff.id", ondelete="CASCADE"), nullable=True)
    start_datetime = Column(DateTime, nullable=False)
    end_datetime = Column(DateTime, nullable=False)
    is_booked = Column(Boolean, nullable=False, default=False)
    is_blocked = Column(Boolean, nullable=False, default=False)
    # No FK: bookings already reference time_slots
    booking_id = Column(String(26), nullable=True)
    generated_at = Column(DateTime(timezone=True), server_default=func.now())

    pattern = relationship("AvailabilityPattern", back_populates="time_slots")

    __table_args__ = (
        CheckConstraint("start_datetime < end_datetime", name="ck_time_slots_time_order"),
        Index("idx_time_slots_salon_start", "salon_id", "start_datetime"),
    )

    def __repr__(self) -> str:
        return (
            f"<TimeSlot {self.id}: {self.start_datetime:%Y-%m-%d %H:%M}-"
            f"{self.end_datetime:%H:%M} booked={self.is_booked} blocked={self.is_blocked}>"
        )
