"""
Database module for GoWater Dispatch.
"""
from app.db.database import (
    Base,
    engine,
    session_maker,
    get_session,
    init_db,
    drop_db,
    migration_url,
)

__all__ = [
    "Base",
    "engine",
    "session_maker",
    "get_session",
    "init_db",
    "drop_db",
    "migration_url",
]
