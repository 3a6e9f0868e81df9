"""
Database engine, session management, and base model.

This module is the foundation for all database operations.
Every model inherits from Base. Every request gets a session
from get_db().

There is no module-level engine: the application builds one
Database object at startup and keeps it on app.state, so tests
and background jobs can each work against their own store.
"""

from datetime import datetime, timezone

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session


def utcnow() -> datetime:
    """Current time as naive UTC, the form every timestamp column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# --- Base Model Class ---
# Every database model (User, ActivatedControl, Ticket, etc.)
# inherits from this class. SQLAlchemy uses it to track
# all models and generate the correct SQL for table creation.
class Base(DeclarativeBase):
    pass


class Database:
    """
    Owns the engine (connection pool) and the session factory.

    pool_pre_ping=True tests connections before using them,
    which handles cases where the database restarted or a
    connection went stale.

    autocommit=False means callers decide when changes are
    saved. Evidence submission relies on this: the evidence row
    and the new due date are committed together or not at all.
    """

    def __init__(self, url: str):
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False

        self.url = url
        self.engine = create_engine(
            url,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
        )

    def session(self) -> Session:
        return self.SessionLocal()

    def create_all(self) -> None:
        # Import models so every table is registered on Base.metadata
        import grc_backoffice.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


# --- Dependency for FastAPI ---
def get_db(request: Request):
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, preventing connection leaks.
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
