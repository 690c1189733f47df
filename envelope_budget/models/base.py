"""
Database engine, session management, and base model.

This module is the foundation for all database operations.
Every model inherits from Base. Every request gets a session
from get_db().
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from envelope_budget.config import get_settings

settings = get_settings()


def timeout_connect_args(database_url: str, timeout_seconds: float) -> dict:
    """
    Driver arguments that bound every statement by a deadline.

    SQLite waits at most `timeout` seconds on a locked database.
    PostgreSQL cancels any statement running past statement_timeout.
    """
    backend = make_url(database_url).get_backend_name()
    if backend == "sqlite":
        return {"check_same_thread": False, "timeout": timeout_seconds}
    if backend == "postgresql":
        millis = int(timeout_seconds * 1000)
        return {"options": f"-c statement_timeout={millis}"}
    return {}


# --- Engine ---
# pool_pre_ping=True tests connections before using them,
# which handles cases where the database restarted or a
# connection went stale.
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=timeout_connect_args(
        settings.DATABASE_URL, settings.DB_TIMEOUT_SECONDS
    ),
)

# --- Session Factory ---
# autocommit=False means we explicitly control when changes
# are saved. A stash touches three rows and must be all-or-nothing.
# autoflush=False means SQLAlchemy won't send SQL to the
# database until we explicitly flush or commit.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, preventing connection leaks.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
