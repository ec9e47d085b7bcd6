"""
Database configuration and connection management.

Builds the engine and session factory from the application settings and
exposes the request-scoped session dependency.
"""

import logging
import sqlite3
import time
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .config import settings
from .models import Base

logger = logging.getLogger(__name__)


def safe_database_url(db_url: str) -> str:
    """Strip credentials from a database URL for logging."""
    if "@" in db_url:
        scheme, _, rest = db_url.partition("://")
        return f"{scheme}://...@{rest.split('@', 1)[1]}"
    return db_url


def get_connect_args(db_url: str) -> dict:
    """
    Get database-specific connection arguments.

    Args:
        db_url: Database connection URL

    Returns:
        Connection arguments dict
    """
    if db_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


@event.listens_for(Engine, "connect")
def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores foreign keys unless enabled on each connection."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@event.listens_for(Engine, "before_cursor_execute")
def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Track query start time."""
    conn.info.setdefault("query_start_time", []).append(time.perf_counter())


@event.listens_for(Engine, "after_cursor_execute")
def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Log slow queries."""
    total_time_ms = (time.perf_counter() - conn.info["query_start_time"].pop()) * 1000

    if total_time_ms > settings.QUERY_LOG_THRESHOLD_MS:
        logger.warning(
            f"Slow query detected: {total_time_ms:.2f}ms",
            extra={
                "query_time_ms": round(total_time_ms, 2),
                "statement": statement[:200],
            },
        )


engine = create_engine(
    settings.DATABASE_URL,
    connect_args=get_connect_args(settings.DATABASE_URL),
    pool_pre_ping=True,
    echo=settings.DATABASE_ECHO,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """
    Initialize database tables.

    Creates all tables on application startup; existing tables are left untouched.
    """
    logger.info(f"Initializing database tables on {safe_database_url(settings.DATABASE_URL)}")
    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info("Database initialized successfully")


def get_db() -> Generator[Session, None, None]:
    """
    Get database session for dependency injection.

    Yields:
        SQLAlchemy database session, closed when the request ends
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
