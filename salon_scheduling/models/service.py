# salon_scheduling/models/service.py
"""
Service model.

Owned by the salon catalogue; the scheduling engine only reads
``duration_minutes`` to derive booking end times.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class Service(Base):
    """A bookable salon service such as a haircut or manicure."""

    __tablename__ = "services"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    salon_id = Column(String(64), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    bookings = relationship("Booking", back_populates="service")

    __table_args__ = (CheckConstraint("duration_minutes > 0", name="check_duration_positive"),)

    def __repr__(self) -> str:
        return f"<Service {self.id}: {self.name} ({self.duration_minutes} min)>"
