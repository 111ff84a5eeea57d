"""Data layer: database engine, ORM models, document cache, and repository."""

from groomer_directory.data.database import (
    Base, create_db_engine, create_session_factory, database_reachable, init_db,
)
from groomer_directory.data.models import (
    Location, Specialization, Business, BusinessServiceOffering, ContactMessage,
)
from groomer_directory.data.cache import DocumentCache
from groomer_directory.data.repository import DirectoryRepository, DirectoryStore

__all__ = [
    "Base", "create_db_engine", "create_session_factory", "database_reachable", "init_db",
    "Location", "Specialization", "Business", "BusinessServiceOffering", "ContactMessage",
    "DocumentCache", "DirectoryRepository", "DirectoryStore",
]
