# salon_scheduling/core/exceptions.py
"""
Domain-specific exceptions for the scheduling engine.

These exceptions provide clear, business-focused error messages that the
calling API layer can translate into client responses. Each carries a
``status_code`` hint; the translation itself happens outside this package.
"""

from typing import Any, Dict, List, Optional


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


class ValidationException(DomainException):
    """Raised for malformed dates, times, durations or pattern definitions."""

    status_code = 400


class NotFoundException(DomainException):
    """Raised when a booking, service, staff member, pattern or slot is missing."""

    status_code = 404


class InvalidStateException(DomainException):
    """Raised when an entity is in a state that forbids the operation."""

    status_code = 422


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = 409


class TransientStorageException(DomainException):
    """
    Raised when the store failed in a way that may succeed on retry.

    Lock-wait timeouts, deadlocks, serialization failures and dropped
    connections all map here.
    """

    status_code = 503


# Specific business exceptions


class BookingConflictException(ConflictException):
    """Raised when a booking interval overlaps an existing active booking."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        conflicting_booking_ids: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        merged = dict(details or {})
        if conflicting_booking_ids is not None:
            merged["conflicting_booking_ids"] = list(conflicting_booking_ids)
        super().__init__(
            message=message or "This time slot conflicts with an existing booking",
            code="BOOKING_CONFLICT",
            details=merged,
        )


class TimeSlotUnavailableException(ConflictException):
    """Raised when a booking references a slot that is already booked or blocked."""

    def __init__(self, slot_id: str, reason: str):
        super().__init__(
            message=f"Time slot {slot_id} is not available ({reason})",
            code="TIME_SLOT_UNAVAILABLE",
            details={"slot_id": slot_id, "reason": reason},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    Used when data access operations fail for non-transient reasons,
    such as query failures or constraint violations.
    """
