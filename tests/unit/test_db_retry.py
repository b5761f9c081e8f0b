"""Unit tests for transient error classification and the retry wrapper."""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from salon_scheduling.core.exceptions import (
    BookingConflictException,
    NotFoundException,
    TransientStorageException,
    ValidationException,
)
from salon_scheduling.database import _retry_delay, is_transient_db_error, with_db_retry


class _PgError(Exception):
    def __init__(self, pgcode: str):
        super().__init__(f"pg error {pgcode}")
        self.pgcode = pgcode


class TestIsTransientDbError:
    def test_sqlite_database_locked(self):
        exc = OperationalError("BEGIN IMMEDIATE", {}, Exception("database is locked"))
        assert is_transient_db_error(exc) is True

    @pytest.mark.parametrize("pgcode", ["40001", "40P01", "55P03", "57014"])
    def test_postgres_sqlstates(self, pgcode):
        exc = OperationalError("SELECT 1", {}, _PgError(pgcode))
        assert is_transient_db_error(exc) is True

    def test_invalidated_connection(self):
        exc = OperationalError("SELECT 1", {}, Exception("boom"), connection_invalidated=True)
        assert is_transient_db_error(exc) is True

    def test_integrity_error_is_permanent(self):
        exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: bookings.id"))
        assert is_transient_db_error(exc) is False

    def test_non_driver_exception(self):
        assert is_transient_db_error(ValueError("database is locked")) is False


class TestWithDbRetry:
    def test_returns_first_success(self):
        func = MagicMock(return_value="ok")
        sleep = MagicMock()

        assert with_db_retry("op", func, sleep=sleep) == "ok"
        func.assert_called_once()
        sleep.assert_not_called()

    def test_retries_transient_failures_then_succeeds(self):
        func = MagicMock(
            side_effect=[TransientStorageException("locked"), TransientStorageException("locked"), 42]
        )
        sleep = MagicMock()

        with patch("salon_scheduling.database.prometheus_metrics") as metrics:
            result = with_db_retry("create_booking", func, max_attempts=3, sleep=sleep)

        assert result == 42
        assert func.call_count == 3
        assert sleep.call_count == 2
        assert metrics.record_transaction_retry.call_count == 2

    def test_gives_up_after_max_attempts(self):
        func = MagicMock(side_effect=TransientStorageException("locked"))
        sleep = MagicMock()

        with pytest.raises(TransientStorageException):
            with_db_retry("op", func, max_attempts=3, sleep=sleep)

        assert func.call_count == 3
        assert sleep.call_count == 2

    def test_explicit_attempt_count_overrides_settings(self):
        func = MagicMock(side_effect=TransientStorageException("locked"))

        with patch("salon_scheduling.database.settings") as settings:
            settings.transaction_max_attempts = 5
            settings.retry_base_delay_seconds = 0.0
            settings.retry_max_delay_seconds = 0.0
            with pytest.raises(TransientStorageException):
                with_db_retry("op", func, max_attempts=1, sleep=MagicMock())

        func.assert_called_once()

    def test_zero_attempts_is_rejected(self):
        func = MagicMock()

        with pytest.raises(ValueError):
            with_db_retry("op", func, max_attempts=0, sleep=MagicMock())

        func.assert_not_called()

    @pytest.mark.parametrize(
        "error",
        [
            BookingConflictException(conflicting_booking_ids=["b1"]),
            ValidationException("bad time"),
            NotFoundException("missing"),
        ],
    )
    def test_domain_errors_are_never_retried(self, error):
        func = MagicMock(side_effect=error)
        sleep = MagicMock()

        with pytest.raises(type(error)):
            with_db_retry("op", func, max_attempts=5, sleep=sleep)

        func.assert_called_once()
        sleep.assert_not_called()

    def test_delays_grow_and_stay_capped(self):
        delays = []
        func = MagicMock(side_effect=TransientStorageException("locked"))

        with pytest.raises(TransientStorageException):
            with_db_retry(
                "op", func, max_attempts=6, base_delay=0.1, max_delay=0.4, sleep=delays.append
            )

        assert len(delays) == 5
        assert all(0 <= d <= 0.4 for d in delays)


class TestRetryDelay:
    @pytest.mark.parametrize("attempt, cap", [(1, 0.1), (2, 0.2), (3, 0.4), (6, 1.0)])
    def test_jitter_within_half_to_full_capped_backoff(self, attempt, cap):
        for _ in range(50):
            delay = _retry_delay(attempt, base_delay=0.1, max_delay=1.0)
            assert cap / 2 <= delay <= cap
