from src.database.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, utcnow
from src.database.engine import async_session, engine
from src.database.session import get_db

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "utcnow",
    "async_session",
    "engine",
    "get_db",
]
