"""
CRUD operations for the summary history and dashboard settings.
"""

import time
from typing import List, Optional
from sqlalchemy.orm import Session

from lecture_summarizer.config import config
from lecture_summarizer.core.prompts import DEFAULT_PROMPT
from lecture_summarizer.db.models import HistoryItem, Setting
from lecture_summarizer.utils.helpers import generate_id
from lecture_summarizer.utils.logger import logging

CUSTOM_PROMPT_KEY = "custom_prompt"
DEBUG_MODE_KEY = "debug_mode"


def add_history_item(db: Session, filename: str, summary: str,
                     youtube_url: Optional[str] = None) -> HistoryItem:
    """
    Add a summary to the history, keeping only the newest entries.

    YouTube summaries are stored under a "[YouTube] <title>" filename.
    """
    if youtube_url and not filename.startswith("[YouTube] "):
        filename = f"[YouTube] {filename}"

    # Keep timestamps strictly increasing so ordering matches insertion order
    newest = db.query(HistoryItem).order_by(HistoryItem.timestamp.desc()).first()
    timestamp = int(time.time() * 1000)
    if newest and timestamp <= newest.timestamp:
        timestamp = newest.timestamp + 1

    item = HistoryItem(
        id=generate_id(),
        filename=filename,
        summary=summary,
        youtube_url=youtube_url,
        timestamp=timestamp,
    )
    db.add(item)
    db.commit()

    stale = list_history(db)[config.MAX_HISTORY_ITEMS:]
    for old in stale:
        db.delete(old)
    if stale:
        db.commit()
        logging.info(f"Pruned {len(stale)} old history items")

    db.refresh(item)
    return item


def list_history(db: Session) -> List[HistoryItem]:
    """Get history items, newest first."""
    return db.query(HistoryItem).order_by(HistoryItem.timestamp.desc()).all()


def get_history_item(db: Session, item_id: str) -> Optional[HistoryItem]:
    """Get a history item by ID."""
    return db.query(HistoryItem).filter(HistoryItem.id == item_id).first()


def delete_history_item(db: Session, item_id: str) -> bool:
    """Delete a history item. Returns False if it did not exist."""
    item = get_history_item(db, item_id)
    if not item:
        return False
    db.delete(item)
    db.commit()
    return True


def clear_history(db: Session) -> int:
    """Delete every history item and return how many were removed."""
    removed = db.query(HistoryItem).delete()
    db.commit()
    return removed


def get_setting(db: Session, key: str, default: Optional[str] = None) -> Optional[str]:
    setting = db.query(Setting).filter(Setting.key == key).first()
    return setting.value if setting else default


def set_setting(db: Session, key: str, value: str) -> Setting:
    setting = db.query(Setting).filter(Setting.key == key).first()
    if setting:
        setting.value = value
    else:
        setting = Setting(key=key, value=value)
        db.add(setting)
    db.commit()
    db.refresh(setting)
    return setting


def delete_setting(db: Session, key: str) -> bool:
    removed = db.query(Setting).filter(Setting.key == key).delete()
    db.commit()
    return bool(removed)


def get_custom_prompt(db: Session) -> str:
    """Get the saved summary prompt, or the default one."""
    return get_setting(db, CUSTOM_PROMPT_KEY) or DEFAULT_PROMPT


def save_custom_prompt(db: Session, prompt: str) -> str:
    set_setting(db, CUSTOM_PROMPT_KEY, prompt)
    return prompt


def reset_custom_prompt(db: Session) -> str:
    """Store the default prompt again and return it."""
    set_setting(db, CUSTOM_PROMPT_KEY, DEFAULT_PROMPT)
    return DEFAULT_PROMPT


def get_debug_mode(db: Session) -> bool:
    return get_setting(db, DEBUG_MODE_KEY, "false") == "true"


def set_debug_mode(db: Session, enabled: bool) -> bool:
    set_setting(db, DEBUG_MODE_KEY, "true" if enabled else "false")
    return enabled
