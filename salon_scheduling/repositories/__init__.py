"""
Repository layer for the scheduling engine.

Repositories own every query; services own every transaction.
"""

from .base_repository import BaseRepository
from .factory import RepositoryFactory

__all__ = ["BaseRepository", "RepositoryFactory"]
