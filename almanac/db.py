"""Engine and session management.

The engine is created lazily from settings so tests (and scripts) can bind
their own engine before the first request.
"""

from __future__ import annotations

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from .settings import settings

logger = logging.getLogger("almanac.db")


class Base(DeclarativeBase):
    pass


_engine = None
_SessionLocal = None


def init_engine(database_url: str | None = None):
    global _engine, _SessionLocal
    url = database_url or settings.database_url
    _engine = create_engine(url, pool_pre_ping=True)
    _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine)
    return _engine


def get_engine():
    global _engine
    if _engine is None:
        init_engine()
    return _engine


def SessionLocal():
    global _SessionLocal
    if _SessionLocal is None:
        init_engine()
    return _SessionLocal


def create_tables():
    """Create any missing tables (local dev without migrations)."""
    from . import models  # noqa: F401  registers mappers on Base

    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info("Ensured tables on %s", engine.url.render_as_string(hide_password=True))


def get_db():
    db = SessionLocal()()
    try:
        yield db
    finally:
        db.close()
