# salon_scheduling/models/staff.py
"""Staff member model, read by the engine for availability validation."""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class Staff(Base):
    """A salon employee who can be assigned bookings."""

    __tablename__ = "staff"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    salon_id = Column(String(64), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    bookings = relationship("Booking", back_populates="staff")
    availability_patterns = relationship("AvailabilityPattern", back_populates="staff")

    def __repr__(self) -> str:
        return f"<Staff {self.id}: {self.name} salon={self.salon_id} active={self.is_active}>"
