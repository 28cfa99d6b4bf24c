"""
Database engine and sessions for the summary history and settings.

History and settings live in SQLite by default; ``DATABASE_URL`` can point
the app at any other SQLAlchemy URL.
"""

import os
from pathlib import Path
from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from lecture_summarizer.config import config

Base = declarative_base()

DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{config.DATA_DIR}/lecture_summarizer.db")


def make_engine(url: str, **kwargs) -> Engine:
    """
    Create an engine, preparing SQLite for use from worker threads.

    Args:
        url: SQLAlchemy database URL
        **kwargs: Extra create_engine arguments

    Returns:
        SQLAlchemy engine
    """
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        if parsed.database and parsed.database != ":memory:":
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, **kwargs)


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DBSession = Session


def init_db(bind=None) -> None:
    """Create the history and settings tables if they are missing."""
    from lecture_summarizer.db.models import HistoryItem, Setting  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a session that is closed after the request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
