"""Database configuration and session management for GumTaperBot."""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import scoped_session, sessionmaker, DeclarativeBase

# ---------------------------------------------------------------------------
# Constants & Helpers
# ---------------------------------------------------------------------------
DB_FILENAME = os.getenv("GT_DB_FILENAME", "gum_taper_bot.db")
DB_PATH = Path(DB_FILENAME).expanduser().absolute()

SQLALCHEMY_DATABASE_URL = f"sqlite:///{DB_PATH}"

_engine_kwargs = {
    "connect_args": {"check_same_thread": False},  # scheduler jobs run on other threads
}

engine = create_engine(SQLALCHEMY_DATABASE_URL, echo=False, **_engine_kwargs)

# Configure Session class
SessionLocal = scoped_session(sessionmaker(bind=engine, autoflush=False))


class Base(DeclarativeBase):
    """Base class for declarative models."""


@contextmanager
def session_scope() -> Iterator[scoped_session]:
    """Provide a transactional scope around a series of operations."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """Create tables that don't exist yet."""
    # models must be imported so they register on Base.metadata
    from gum_taper_bot.dataproviders.repositories import _models  # noqa: F401

    Base.metadata.create_all(bind=engine)
