"""
Database engine, session factory, and metadata shared across the engine.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
import logging
import random
import time
from typing import Any, Callable, Iterator, Optional, TypeVar

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..core.config import settings
from ..core.exceptions import TransientStorageException
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

Base = declarative_base()


def _is_sqlite_url(url: str) -> bool:
    return url.lower().startswith("sqlite")


def _is_memory_sqlite(url: str) -> bool:
    lowered = url.lower()
    return lowered in {"sqlite://", "sqlite+pysqlite://"} or ":memory:" in lowered


# Execution option that makes the SQLite "begin" hook take the write lock
SQLITE_BEGIN_IMMEDIATE = "sqlite_begin_immediate"


def _enable_sqlite_write_locking(engine: Engine) -> None:
    """
    Let write transactions take the SQLite database write lock up front.

    pysqlite defers BEGIN until the first write, which would let two
    transactions both read "no conflict" before either writes. A connection
    carrying the ``SQLITE_BEGIN_IMMEDIATE`` execution option issues BEGIN
    IMMEDIATE instead, giving SQLite the same check-then-insert serialization
    that SELECT ... FOR UPDATE provides on PostgreSQL. Every other
    transaction issues a plain deferred BEGIN and only reads under a shared
    lock.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection: Any, _connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn: Any) -> None:
        if conn.get_execution_options().get(SQLITE_BEGIN_IMMEDIATE):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def _add_pool_events(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def receive_connect(_dbapi_connection: Any, connection_record: Any) -> None:
        connection_record.info["connect_time"] = datetime.now()
        logger.debug("Database connection established")

    @event.listens_for(engine, "invalidate")
    def receive_invalidate(_dbapi_connection: Any, _connection_record: Any, exception: Any) -> None:
        logger.warning(
            "Connection invalidated",
            extra={
                "event": "db_connection_invalidated",
                "exception": str(exception) if exception else "unknown",
            },
        )


def create_db_engine(url: Optional[str] = None, **overrides: Any) -> Engine:
    """
    Build an engine for the booking store.

    PostgreSQL gets a pooled engine with a statement timeout. SQLite gets
    BEGIN IMMEDIATE for write transactions and a busy timeout matching the configured
    lock timeout.
    """
    db_url = url or settings.database_url
    kwargs: dict[str, Any]

    if _is_sqlite_url(db_url):
        connect_args: dict[str, Any] = {
            "check_same_thread": False,
            "timeout": max(settings.lock_timeout_ms, 1) / 1000.0,
        }
        kwargs = {"connect_args": connect_args, "future": True}
        if _is_memory_sqlite(db_url):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs = {
            "pool_size": settings.db_pool_size,
            "max_overflow": settings.db_max_overflow,
            "pool_timeout": settings.db_pool_timeout,
            "pool_recycle": settings.db_pool_recycle,
            "pool_pre_ping": True,
            "future": True,
        }
        if db_url.lower().startswith("postgresql"):
            kwargs["connect_args"] = {
                "options": f"-c statement_timeout={settings.db_statement_timeout_ms}",
                "application_name": "salon_scheduling",
            }

    kwargs.update(overrides)
    engine = create_engine(db_url, **kwargs)
    if _is_sqlite_url(db_url):
        _enable_sqlite_write_locking(engine)
    _add_pool_events(engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@contextmanager
def session_scope(session_factory: Callable[[], Session]) -> Iterator[Session]:
    """Open a session, roll back anything left uncommitted, and always close it."""
    db = session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


T = TypeVar("T")

# SQLSTATEs: serialization_failure, deadlock_detected, lock_not_available, query_canceled
_TRANSIENT_SQLSTATES = frozenset({"40001", "40P01", "55P03", "57014"})
_TRANSIENT_ERROR_SNIPPETS = (
    "database is locked",
    "database table is locked",
    "deadlock detected",
    "could not obtain lock",
    "lock timeout",
    "canceling statement due to lock timeout",
    "could not serialize access",
    "server closed the connection",
    "ssl connection has been closed unexpectedly",
    "connection reset",
    "terminating connection",
)


def is_transient_db_error(exc: BaseException) -> bool:
    """True when a driver error is worth retrying in a fresh transaction."""
    if not isinstance(exc, DBAPIError):
        return False
    if exc.connection_invalidated:
        return True
    orig = getattr(exc, "orig", None)
    pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if pgcode in _TRANSIENT_SQLSTATES:
        return True
    message = str(exc).lower()
    return any(snippet in message for snippet in _TRANSIENT_ERROR_SNIPPETS)


def _retry_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    capped = min(max_delay, base_delay * (2 ** (attempt - 1)))
    return capped / 2 + random.uniform(0, capped / 2)


def with_db_retry(
    op_name: str,
    func: Callable[[], T],
    *,
    max_attempts: Optional[int] = None,
    base_delay: Optional[float] = None,
    max_delay: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Execute a transactional operation, retrying transient storage failures.

    Only TransientStorageException is retried. Every other exception,
    including conflicts and validation errors, propagates on first raise.
    """
    attempts = settings.transaction_max_attempts if max_attempts is None else max_attempts
    if attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {attempts}")
    base = settings.retry_base_delay_seconds if base_delay is None else base_delay
    cap = settings.retry_max_delay_seconds if max_delay is None else max_delay

    attempt = 1
    while True:
        try:
            return func()
        except TransientStorageException as exc:
            if attempt >= attempts:
                logger.error(
                    "Transient DB failure persisted, giving up",
                    extra={"event": "db_retry_exhausted", "op": op_name, "attempts": attempt},
                )
                raise

            delay = _retry_delay(attempt, base, cap)
            prometheus_metrics.record_transaction_retry(op_name)
            logger.warning(
                "Transient DB failure detected, retrying",
                extra={
                    "event": "db_retry",
                    "op": op_name,
                    "attempt": attempt,
                    "delay": delay,
                    "error": str(exc),
                },
            )
            sleep(delay)
            attempt += 1


__all__ = [
    "Base",
    "SQLITE_BEGIN_IMMEDIATE",
    "create_db_engine",
    "create_session_factory",
    "is_transient_db_error",
    "session_scope",
    "with_db_retry",
]
