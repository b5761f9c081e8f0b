"""Unit tests for settings, exceptions, statuses, ids and logging setup."""

import logging

import pytest
import ulid

from salon_scheduling.core.config import Settings
from salon_scheduling.core.exceptions import (
    BookingConflictException,
    ConflictException,
    InvalidStateException,
    NotFoundException,
    TimeSlotUnavailableException,
    TransientStorageException,
    ValidationException,
)
from salon_scheduling.core.logging_config import configure_logging
from salon_scheduling.core.ulid_helper import generate_ulid
from salon_scheduling.models.booking import (
    ACTIVE_BOOKING_STATUSES,
    TERMINAL_BOOKING_STATUSES,
    BookingStatus,
    is_active_status,
)


class TestSettings:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SCHEDULING_LOCK_TIMEOUT_MS", "1500")
        monkeypatch.setenv("SCHEDULING_LOG_LEVEL", "debug")

        s = Settings(_env_file=None)

        assert s.lock_timeout_ms == 1500
        assert s.log_level == "DEBUG"

    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.transaction_max_attempts == 3
        assert s.retry_base_delay_seconds == 0.1
        assert s.retry_max_delay_seconds == 2.0

    def test_max_delay_must_cover_base_delay(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, retry_base_delay_seconds=1.0, retry_max_delay_seconds=0.5)


class TestExceptions:
    def test_status_code_hints(self):
        assert ValidationException("x").status_code == 400
        assert NotFoundException("x").status_code == 404
        assert InvalidStateException("x").status_code == 422
        assert BookingConflictException().status_code == 409
        assert TransientStorageException("x").status_code == 503

    def test_conflict_carries_booking_ids(self):
        exc = BookingConflictException(conflicting_booking_ids=["a", "b"])
        assert exc.to_dict() == {
            "message": "This time slot conflicts with an existing booking",
            "code": "BOOKING_CONFLICT",
            "details": {"conflicting_booking_ids": ["a", "b"]},
        }

    def test_slot_unavailable_is_a_conflict(self):
        exc = TimeSlotUnavailableException("slot-1", "blocked")
        assert isinstance(exc, ConflictException)
        assert exc.details == {"slot_id": "slot-1", "reason": "blocked"}


class TestBookingStatus:
    @pytest.mark.parametrize("status", ["pending", "confirmed", "arrived"])
    def test_active(self, status):
        assert is_active_status(status) is True

    @pytest.mark.parametrize("status", ["completed", "cancelled"])
    def test_terminal(self, status):
        assert is_active_status(status) is False

    def test_partition_covers_every_status(self):
        assert ACTIVE_BOOKING_STATUSES | TERMINAL_BOOKING_STATUSES == set(BookingStatus)
        assert not ACTIVE_BOOKING_STATUSES & TERMINAL_BOOKING_STATUSES

    def test_unknown_status(self):
        with pytest.raises(ValueError):
            is_active_status("no_show")


def test_generated_ids_are_ulids():
    first, second = generate_ulid(), generate_ulid()
    assert first != second
    assert len(first) == 26
    assert str(ulid.ULID.from_str(first)) == first


def test_configure_logging_sets_package_level():
    configure_logging("warning")
    assert logging.getLogger("salon_scheduling").level == logging.WARNING
    configure_logging("INFO")
    assert logging.getLogger("salon_scheduling").level == logging.INFO
