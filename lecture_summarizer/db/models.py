"""
SQLAlchemy models for the lecture summarizer database.
"""

import datetime
from sqlalchemy import Column, String, Text, DateTime, BigInteger

from lecture_summarizer.db.database import Base


def _utcnow():
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class HistoryItem(Base):
    """Model representing a generated summary kept in the history."""
    __tablename__ = "summary_history"

    id = Column(String(16), primary_key=True)
    filename = Column(String(512), nullable=False)
    summary = Column(Text, nullable=False)
    youtube_url = Column(String(512), nullable=True)
    timestamp = Column(BigInteger, nullable=False, index=True)  # milliseconds since epoch
    created_at = Column(DateTime, default=_utcnow)

    def __repr__(self):
        return f"<HistoryItem(id='{self.id}', filename='{self.filename}')>"


class Setting(Base):
    """Model representing a persisted dashboard setting."""
    __tablename__ = "settings"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<Setting(key='{self.key}')>"
