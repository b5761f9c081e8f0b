"""Shared fixtures: SQLite engines and sessions."""

from typing import Callable

import pytest
from sqlalchemy.orm import Session

from salon_scheduling.database import Base, create_db_engine, create_session_factory
from salon_scheduling.engine import SchedulingEngine


@pytest.fixture
def memory_engine():
    engine = create_db_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(memory_engine) -> Session:
    """Single session over an in-memory database."""
    session = create_session_factory(memory_engine)()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def file_engine(tmp_path):
    """File-backed database so several connections can contend for the write lock."""
    engine = create_db_engine(f"sqlite+pysqlite:///{tmp_path / 'scheduling.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(file_engine):
    return create_session_factory(file_engine)


@pytest.fixture
def scheduling_engine(session_factory) -> SchedulingEngine:
    return SchedulingEngine(session_factory)


@pytest.fixture
def seed(session_factory) -> Callable:
    """Run a seeding callable in a short-lived session that is closed afterwards."""

    def _seed(fn: Callable[[Session], object]):
        with session_factory() as session:
            return fn(session)

    return _seed
