"""
Database connection and session management.

SQLAlchemy engine/session setup for the grading backend. PostgreSQL is the
production store; SQLite is used for local development and tests.
Routes receive a session through the `get_db` dependency.
"""

import os
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    "sqlite:///./coursework.db"
)

engine_kwargs = {"echo": False}

if DATABASE_URL.startswith("postgresql"):
    engine_kwargs.update({
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,
    })
elif DATABASE_URL.startswith("sqlite"):
    # FastAPI runs sync routes in a threadpool
    engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_engine(DATABASE_URL, **engine_kwargs)


def enable_sqlite_pragmas(target_engine):
    """Turn on WAL journaling and foreign key enforcement for a SQLite engine."""
    @event.listens_for(target_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


if DATABASE_URL.startswith("sqlite"):
    enable_sqlite_pragmas(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


def get_db():
    """
    FastAPI dependency yielding a request-scoped session.

    Every request is its own unit of work; the session is closed
    (and any open transaction rolled back) when the request ends.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    """
    Create all tables from the ORM metadata (SQLite dev databases and tests).
    PostgreSQL deployments use the Alembic migrations instead.
    """
    Base.metadata.create_all(bind=bind or engine)
