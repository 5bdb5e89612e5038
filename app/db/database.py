"""
Database connection and session management for GoWater Dispatch.

Route computation and lifecycle transitions run synchronously, so the
service uses a plain SQLAlchemy engine and session factory.
"""
from typing import Generator, Optional

from sqlalchemy import MetaData, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.core.config import settings

# Naming convention for constraints (helps with migrations)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

metadata = MetaData(naming_convention=convention)


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    metadata = metadata


def _engine_options(url: str) -> dict:
    # SQLite (tests, local dev) rejects pool sizing arguments
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,  # Verify connections before use
    }


# Create engine using settings from .env
engine = create_engine(
    settings.database_url,
    echo=False,  # Set to True for SQL query logging
    **_engine_options(settings.database_url),
)

# Session factory
session_maker = sessionmaker(
    engine,
    class_=Session,
    expire_on_commit=False,
    autoflush=False,
)


def migration_url(cli_url: Optional[str] = None, ini_url: Optional[str] = None) -> str:
    """
    Database URL for Alembic runs.

    Precedence: `alembic -x db_url=...`, then `sqlalchemy.url` in alembic.ini,
    then the `DATABASE_URL` setting.
    """
    return cli_url or ini_url or settings.database_url


def get_session() -> Generator[Session, None, None]:
    """
    Dependency for FastAPI routes to get database session.

    Usage:
        @app.get("/items")
        def get_items(session: Session = Depends(get_session)):
            ...
    """
    with session_maker() as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise


def init_db() -> None:
    """Initialize database tables (for development)."""
    Base.metadata.create_all(engine)


def drop_db() -> None:
    """Drop all tables (for testing only)."""
    Base.metadata.drop_all(engine)
