"""
Core backend modules.
- database: SQLite with SQLAlchemy
"""
from backend.core.database import Base, get_db, get_db_session, init_db

__all__ = [
    "Base",
    "get_db",
    "get_db_session",
    "init_db",
]
