# salon_scheduling/schemas/availability.py
"""Availability pattern schemas."""

from datetime import date
from typing import Optional

from pydantic import Field, model_validator

from ._strict_base import StrictRequestModel

HH_MM_PATTERN = r"^\d{1,2}:\d{2}$"


class AvailabilityPatternCreate(StrictRequestModel):
    """
    Recurring weekly availability rule.

    ``day_of_week`` counts from Sunday (0) to Saturday (6).
    """

    salon_id: str = Field(..., min_length=1)
    staff_id: Optional[str] = None
    pattern_name: str = Field("", max_length=255)
    day_of_week: int = Field(..., ge=0, le=6)
    start_time: str = Field(..., pattern=HH_MM_PATTERN)
    end_time: str = Field(..., pattern=HH_MM_PATTERN)
    slot_duration_minutes: int = Field(30, gt=0, le=24 * 60)
    effective_from: Optional[date] = None
    effective_until: Optional[date] = None

    @model_validator(mode="after")
    def _check_effective_window(self) -> "AvailabilityPatternCreate":
        if (
            self.effective_from is not None
            and self.effective_until is not None
            and self.effective_until < self.effective_from
        ):
            raise ValueError("effective_until must not be before effective_from")
        return self
