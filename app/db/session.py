"""
Database session management - SQLAlchemy engine and session factory.
This module provides the database connection and session dependency for FastAPI.

The engine and session factory live on app.state (set up in app.main's
lifespan) instead of module globals, so tests can hand the app their own
engine.
"""

import logging
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.db.base import Base


logger = logging.getLogger("calendar_service.db")


def build_engine(database_url: str) -> Engine:
    """
    Create the SQLAlchemy engine.

    pool_pre_ping=True checks pooled connections before use, which avoids
    errors from stale connections after a database restart.
    """
    return create_engine(database_url, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    """
    Session factory bound to the engine.

    - autocommit=False: you must call db.commit()
    - autoflush=False: flushes happen when we decide
    """
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """
    Create the users and events tables if they do not exist yet.

    Called once at application startup.
    """
    # Register the models on Base.metadata before create_all
    from app.models import event, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a database session.

    One session per request; close() always runs, even if the route
    raises, returning the connection to the pool.

    Usage in a route:
        @router.get("/items")
        def get_items(db: Session = Depends(get_db)):
            ...
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
