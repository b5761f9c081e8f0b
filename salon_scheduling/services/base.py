# salon_scheduling/services/base.py
"""
Base Service Pattern for the scheduling engine

Provides common functionality for all service classes including:
- Transaction management
- Logging
- Error handling
- Performance monitoring
"""

from contextlib import contextmanager
from functools import wraps
import logging
import time
from typing import Any, Callable, Iterator, TypeVar, cast

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import RepositoryException, TransientStorageException
from ..database import SQLITE_BEGIN_IMMEDIATE, is_transient_db_error
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class BaseService:
    """
    Base class for all service layer components.

    Provides common patterns for:
    - Database session management
    - Transaction handling with lock timeouts
    - Performance monitoring
    """

    def __init__(self, db: Session):
        """
        Initialize base service.

        Args:
            db: Database session
        """
        self.db = db
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Context manager for database transactions.

        Usage:
            with self.transaction():
                # Lock, check and write
                self.db.add(entity)
                # Note: commit is handled automatically

        Driver errors roll back and surface as TransientStorageException when
        a retry may succeed, RepositoryException otherwise. Every other
        exception rolls back and propagates unchanged.
        """
        try:
            self._begin_write_transaction()
            yield self.db
            self.db.commit()
            self.logger.debug("Transaction committed successfully")
        except SQLAlchemyError as e:
            self.logger.error(f"Transaction failed: {str(e)}")
            self.db.rollback()
            if is_transient_db_error(e):
                raise TransientStorageException(
                    "Temporary storage failure, the operation can be retried",
                    details={"error": str(e)},
                ) from e
            raise RepositoryException(f"Database operation failed: {str(e)}") from e
        except Exception as e:
            self.logger.debug(f"Rolling back transaction after {type(e).__name__}: {str(e)}")
            self.db.rollback()
            raise

    def _begin_write_transaction(self) -> None:
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            self.db.execute(text(f"SET LOCAL lock_timeout = '{int(settings.lock_timeout_ms)}ms'"))
        elif dialect == "sqlite" and not self.db.in_transaction():
            # Busy timeout bounds the wait for the write lock
            self.db.connection(execution_options={SQLITE_BEGIN_IMMEDIATE: True})

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Decorator to measure operation performance.

        Usage:
            @BaseService.measure_operation("create_booking")
            def create_booking(self, data):
                # Method implementation

        Args:
            operation_name: Name of the operation for metrics

        Returns:
            Decorator function
        """

        def decorator(func: F) -> F:
            func._operation_name = operation_name  # type: ignore[attr-defined]

            @wraps(func)
            def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
                start_time = time.perf_counter()
                success = False
                error_type = None

                try:
                    result = func(self, *args, **kwargs)
                    success = True
                    return result
                except Exception as e:
                    error_type = type(e).__name__
                    raise
                finally:
                    elapsed = time.perf_counter() - start_time

                    if elapsed > settings.slow_operation_threshold_seconds and hasattr(self, "logger"):
                        self.logger.warning(
                            f"Slow operation detected: {operation_name} took {elapsed:.2f}s",
                            extra={"event": "slow_operation", "operation": operation_name},
                        )

                    prometheus_metrics.record_service_operation(
                        service=self.__class__.__name__,
                        operation=operation_name,
                        duration=elapsed,
                        status="success" if success else "error",
                        error_type=error_type,
                    )

            return cast(F, wrapper)

        return decorator

    def log_operation(self, operation: str, **context: Any) -> None:
        """
        Log an operation with context.

        Args:
            operation: Operation name
            **context: Additional context to log
        """
        self.logger.info(f"Operation: {operation}", extra={"event": operation, **context})
