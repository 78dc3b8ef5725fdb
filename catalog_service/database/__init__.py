from catalog_service.database.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from catalog_service.database.engine import async_session, engine
from catalog_service.database.guard import storage_guard
from catalog_service.database.session import get_db

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "async_session",
    "engine",
    "get_db",
    "storage_guard",
]
