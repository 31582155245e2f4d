"""
Database engine, session factory and declarative base.

The student record store runs on SQLAlchemy. PostgreSQL is used in
production; SQLite is the local development and test fallback.
"""

import os
import secrets
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    "sqlite:///./student_hub.db"
)

engine_kwargs = {"echo": False}

if DATABASE_URL.startswith("postgresql"):
    engine_kwargs.update({
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,
    })
elif DATABASE_URL.startswith("sqlite"):
    # Route handlers run in FastAPI's threadpool
    engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_engine(DATABASE_URL, **engine_kwargs)

if DATABASE_URL.startswith("sqlite"):
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


def generate_id() -> str:
    """24 lowercase hex characters, the identifier format used for every record."""
    return secrets.token_hex(12)


def get_db():
    """
    FastAPI dependency yielding one session per request.

    The session is always closed when the request finishes, which also
    discards anything left uncommitted by a failed operation.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """Create all tables directly (SQLite development and tests)."""
    Base.metadata.create_all(bind=engine)


def dispose_engine():
    """Release pooled connections on application shutdown."""
    engine.dispose()
