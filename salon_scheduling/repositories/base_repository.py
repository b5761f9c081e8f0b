# salon_scheduling/repositories/base_repository.py
"""
Base Repository Pattern for the scheduling engine.

Provides the foundation for all repository classes with:
- Common CRUD operations
- Pessimistic row locking scoped to the enclosing transaction
- Translation of driver errors into transient / non-transient failures

Repositories never commit. Transaction boundaries belong to the service
layer, which is what makes lock-check-write sequences atomic.
"""

import logging
from typing import Any, Dict, Generic, List, NoReturn, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException, TransientStorageException
from ..database import is_transient_db_error

# Type variable for generic model support
T = TypeVar("T")

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Concrete base repository implementation with common data access patterns.

    Attributes:
        db: SQLAlchemy session
        model: SQLAlchemy model class
    """

    def __init__(self, db: Session, model: Type[T]):
        """
        Initialize repository with database session and model.

        Args:
            db: SQLAlchemy session (managed by service layer)
            model: SQLAlchemy model class
        """
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    def _raise_storage_error(self, exc: SQLAlchemyError, action: str) -> NoReturn:
        """Re-raise a driver error as transient or permanent."""
        if is_transient_db_error(exc):
            self.logger.warning(
                "Transient storage failure while trying to %s %s: %s",
                action,
                self.model.__name__,
                exc,
            )
            raise TransientStorageException(
                f"Temporary storage failure while trying to {action} {self.model.__name__}",
                details={"error": str(exc)},
            ) from exc
        self.logger.error(f"Error trying to {action} {self.model.__name__}: {str(exc)}")
        raise RepositoryException(f"Failed to {action} {self.model.__name__}: {str(exc)}") from exc

    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key."""
        try:
            return self._build_query().filter(self.model.id == id).first()
        except SQLAlchemyError as e:
            self._raise_storage_error(e, "retrieve")

    def lock_by_id(self, id: str) -> Optional[T]:
        """
        Retrieve an entity and hold an exclusive row lock until commit/rollback.

        Emits SELECT ... FOR UPDATE. The identity map is refreshed so the
        caller sees the committed row rather than a stale cached copy.
        """
        try:
            return (
                self._build_query()
                .filter(self.model.id == id)
                .populate_existing()
                .with_for_update()
                .first()
            )
        except SQLAlchemyError as e:
            self._raise_storage_error(e, "lock")

    def create(self, **kwargs: Any) -> T:
        """
        Create a new entity.

        Note: Does NOT commit - transaction management is handled by service layer.
        """
        try:
            entity = self.model(**kwargs)
            self.db.add(entity)
            self.db.flush()  # Get ID without committing
            return entity
        except SQLAlchemyError as e:
            self._raise_storage_error(e, "create")

    def bulk_create(self, entities: List[Dict[str, Any]]) -> List[T]:
        """
        Create multiple entities in one flush.

        Args:
            entities: List of entity data dictionaries

        Returns:
            List of created entities with primary keys assigned
        """
        if not entities:
            return []
        try:
            db_entities = [self.model(**data) for data in entities]
            self.db.add_all(db_entities)
            self.db.flush()
            return db_entities
        except SQLAlchemyError as e:
            self._raise_storage_error(e, "bulk create")

    # Protected helper methods for use by subclasses

    def _build_query(self) -> Query:
        """Get base query for the model."""
        return self.db.query(self.model)
