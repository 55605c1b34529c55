"""
Database engine, session management, and base model.

This module is the foundation for all database operations.
Every model inherits from Base. Every request gets a session
from get_db().

Nothing here runs at import time: the engine and session
factory are built by main.create_app() and stored on
app.state, so tests and scripts can inject their own.
"""

from fastapi import Request
from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session

from hr_ledger.config import Settings


# --- Engine ---
def build_engine(settings: Settings) -> Engine:
    """
    Create the engine for the configured database.

    pool_pre_ping=True tests connections before using them,
    which handles cases where the database restarted or a
    connection went stale.
    """
    connect_args = {}
    if settings.DATABASE_URL.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


# --- Session Factory ---
# autocommit=False means we explicitly control when changes
# are saved. The posters decide the commit boundaries.
# autoflush=False means SQLAlchemy won't send SQL to the
# database until we explicitly flush or commit.
def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
    )


# --- Base Model Class ---
class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db(request: Request):
    """
    Provide a database session for a single request.

    The session comes from the factory the app was built with.
    The try/finally pattern ensures the session is always
    closed, preventing connection leaks.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
